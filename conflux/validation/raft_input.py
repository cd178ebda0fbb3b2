"""Entry point for validating inputs to cluster operations."""

from __future__ import annotations

from typing import Optional, Sequence

from conflux.validation.comprehensive import ClusterSuggestions, ComprehensiveValidator
from conflux.validation.config import ValidationConfig
from conflux.validation.nodes import SocketAddress


class RaftInputValidator:
    """Validates membership and timeout changes requested for the cluster."""

    def __init__(self, config: Optional[ValidationConfig] = None) -> None:
        self.comprehensive_validator = ComprehensiveValidator(
            config if config is not None else ValidationConfig()
        )

    @property
    def config(self) -> ValidationConfig:
        """The validation configuration in use."""
        return self.comprehensive_validator.config

    def validate_add_node(
        self,
        node_id: int,
        address: str,
        existing_nodes: Sequence[tuple[int, str]],
    ) -> SocketAddress:
        """Check a node may join; return its parsed address."""
        return self.comprehensive_validator.validate_add_node(node_id, address, existing_nodes)

    def validate_remove_node(
        self, node_id: int, existing_nodes: Sequence[tuple[int, str]]
    ) -> None:
        """Check a node may leave the cluster."""
        self.comprehensive_validator.validate_remove_node(node_id, existing_nodes)

    def validate_timeout_config(
        self,
        heartbeat_interval: Optional[int],
        election_timeout_min: Optional[int],
        election_timeout_max: Optional[int],
    ) -> None:
        """Check heartbeat and election timeout settings."""
        self.comprehensive_validator.validate_timeout_config(
            heartbeat_interval, election_timeout_min, election_timeout_max
        )

    def validate_cluster_health(self, total_nodes: int, healthy_nodes: int) -> None:
        """Check that a majority of nodes is healthy."""
        self.comprehensive_validator.validate_cluster_health(total_nodes, healthy_nodes)

    def get_cluster_suggestions(
        self,
        current_cluster_size: int,
        current_heartbeat: int,
        current_election_min: int,
        network_latency_ms: int,
    ) -> ClusterSuggestions:
        """Recommendations for the given cluster state and network latency."""
        return self.comprehensive_validator.get_cluster_suggestions(
            current_cluster_size, current_heartbeat, current_election_min, network_latency_ms
        )