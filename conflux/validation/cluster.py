"""Validation of cluster size, membership and health."""

from __future__ import annotations

import logging
from typing import Iterable

from conflux.validation.config import ValidationConfig, ValidationError

logger = logging.getLogger(__name__)


class ClusterValidator:
    """Cluster-level checks: size limits, membership and quorum."""

    def __init__(self, config: ValidationConfig) -> None:
        self.config = config

    def validate_cluster_size(self, current_size: int, adding_nodes: int) -> None:
        """Raise ValidationError when adding nodes would exceed the maximum size."""
        maximum = self.config.max_cluster_size
        if current_size > maximum:
            raise ValidationError(
                f"Cluster size would exceed maximum: {current_size} + {adding_nodes} > {maximum}"
            )
        new_size = current_size + adding_nodes
        logger.debug(
            "Validating cluster size: current=%d, adding=%d, new=%d",
            current_size,
            adding_nodes,
            new_size,
        )
        if new_size > maximum:
            raise ValidationError(f"Cluster size would exceed maximum: {new_size} > {maximum}")

    def validate_minimum_cluster_size(self, current_size: int, removing_nodes: int) -> None:
        """Raise ValidationError when removal would leave no nodes."""
        if removing_nodes >= current_size:
            raise ValidationError("Cannot remove all nodes from cluster")

    def validate_cluster_parity(self, cluster_size: int) -> bool:
        """True for odd sizes, which avoid split votes."""
        is_odd = cluster_size % 2 == 1
        if not is_odd:
            logger.debug(
                "Even cluster size %d may lead to split-brain scenarios", cluster_size
            )
        return is_odd

    def validate_node_exists(self, node_id: int, existing_nodes: Iterable[tuple[int, str]]) -> None:
        """Raise ValidationError unless a node with this id is in the cluster."""
        if not any(existing_id == node_id for existing_id, _ in existing_nodes):
            raise ValidationError(f"Node ID {node_id} does not exist in cluster")

    def validate_cluster_health(self, total_nodes: int, healthy_nodes: int) -> None:
        """Raise ValidationError unless a majority of the nodes is healthy."""
        if healthy_nodes == 0:
            raise ValidationError("No healthy nodes in cluster")
        if total_nodes == 0:
            raise ValidationError("Empty cluster")
        if healthy_nodes > total_nodes:
            raise ValidationError("Healthy nodes cannot exceed total nodes")
        required_majority = total_nodes // 2 + 1
        if healthy_nodes < required_majority:
            raise ValidationError(
                f"Insufficient healthy nodes for consensus: {healthy_nodes}/{total_nodes} "
                f"(need {required_majority})"
            )

    def calculate_fault_tolerance(self, cluster_size: int) -> int:
        """Number of node failures a cluster of this size survives."""
        if cluster_size == 0:
            return 0
        return (cluster_size - 1) // 2

    def recommend_cluster_size(self, desired_fault_tolerance: int) -> int:
        """Smallest cluster size tolerating the given number of failures."""
        return 2 * desired_fault_tolerance + 1