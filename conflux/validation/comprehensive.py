"""Validation that combines node, cluster and timeout checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from conflux.validation.cluster import ClusterValidator
from conflux.validation.config import ValidationConfig, ValidationError
from conflux.validation.nodes import NodeValidator, SocketAddress, parse_socket_address
from conflux.validation.timeouts import TimeoutValidator

logger = logging.getLogger(__name__)


@dataclass
class ClusterSuggestions:
    """Advice on improving a cluster's size, timeouts and network policy."""

    size_recommendations: list[str] = field(default_factory=list)
    timeout_recommendations: list[str] = field(default_factory=list)
    network_recommendations: list[str] = field(default_factory=list)
    fault_tolerance_info: str = ""

    def has_suggestions(self) -> bool:
        """True when any recommendation was made."""
        return self.total_suggestions() > 0

    def total_suggestions(self) -> int:
        """Number of recommendations across all categories."""
        return (
            len(self.size_recommendations)
            + len(self.timeout_recommendations)
            + len(self.network_recommendations)
        )


class ComprehensiveValidator:
    """Runs the node, cluster and timeout validators together."""

    def __init__(self, config: ValidationConfig) -> None:
        self.timeout_validator = TimeoutValidator()
        self._apply_config(config)

    def _apply_config(self, config: ValidationConfig) -> None:
        self.config = config
        self.node_validator = NodeValidator(config)
        self.cluster_validator = ClusterValidator(config)

    def validate_add_node(
        self,
        node_id: int,
        address: str,
        existing_nodes: Sequence[tuple[int, str]],
    ) -> SocketAddress:
        """Check a node may join; return its parsed address."""
        logger.debug("Comprehensive validation for adding node %s at %s", node_id, address)

        self.node_validator.validate_node_id(node_id)
        socket_address = self.node_validator.validate_node_address(address)

        if any(existing_id == node_id for existing_id, _ in existing_nodes):
            raise ValidationError(f"Node ID {node_id} already exists in cluster")

        existing_addresses = set()
        for _, existing in existing_nodes:
            try:
                existing_addresses.add(parse_socket_address(existing))
            except ValueError:
                continue
        if socket_address in existing_addresses:
            raise ValidationError(f"Address {address} already exists in cluster")

        self.cluster_validator.validate_cluster_size(len(existing_nodes), 1)
        return socket_address

    def validate_remove_node(
        self, node_id: int, existing_nodes: Sequence[tuple[int, str]]
    ) -> None:
        """Check a node may leave the cluster."""
        logger.debug("Comprehensive validation for removing node %s", node_id)
        self.node_validator.validate_node_id(node_id)
        self.cluster_validator.validate_node_exists(node_id, existing_nodes)
        self.cluster_validator.validate_minimum_cluster_size(len(existing_nodes), 1)

    def validate_timeout_config(
        self,
        heartbeat_interval: Optional[int],
        election_timeout_min: Optional[int],
        election_timeout_max: Optional[int],
    ) -> None:
        """Check heartbeat and election timeout settings."""
        self.timeout_validator.validate_timeout_config(
            heartbeat_interval, election_timeout_min, election_timeout_max
        )

    def validate_cluster_health(self, total_nodes: int, healthy_nodes: int) -> None:
        """Check that a majority of nodes is healthy."""
        self.cluster_validator.validate_cluster_health(total_nodes, healthy_nodes)

    def get_cluster_suggestions(
        self,
        current_cluster_size: int,
        current_heartbeat: int,
        current_election_min: int,
        network_latency_ms: int,
    ) -> ClusterSuggestions:
        """Recommendations for the given cluster state and network latency."""
        suggestions = ClusterSuggestions()

        if not self.cluster_validator.validate_cluster_parity(current_cluster_size):
            suggestions.size_recommendations.append(
                f"Consider using odd cluster size instead of {current_cluster_size} "
                "for better split-brain prevention"
            )

        fault_tolerance = self.cluster_validator.calculate_fault_tolerance(current_cluster_size)
        suggestions.fault_tolerance_info = (
            f"Current cluster can tolerate {fault_tolerance} node failures"
        )

        recommended_heartbeat, recommended_min, _ = self.timeout_validator.recommend_timeouts(
            network_latency_ms
        )
        if current_heartbeat != recommended_heartbeat:
            suggestions.timeout_recommendations.append(
                f"Consider adjusting heartbeat interval from {current_heartbeat}ms to "
                f"{recommended_heartbeat}ms for {network_latency_ms}ms network latency"
            )
        if current_election_min != recommended_min:
            suggestions.timeout_recommendations.append(
                f"Consider adjusting election timeout min from {current_election_min}ms "
                f"to {recommended_min}ms"
            )

        if self.config.allow_localhost and self.config.allow_private_ips:
            suggestions.network_recommendations.append(
                "Consider disabling localhost and private IPs for production deployment"
            )

        logger.debug("Generated %d suggestions", suggestions.total_suggestions())
        return suggestions

    def update_config(self, new_config: ValidationConfig) -> None:
        """Replace the configuration used by this validator and its parts."""
        self._apply_config(new_config)