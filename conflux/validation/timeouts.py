"""Validation of heartbeat and election timeout settings."""

from __future__ import annotations

import logging
from typing import Optional

from conflux.validation.config import ValidationError

logger = logging.getLogger(__name__)


class TimeoutValidator:
    """Checks timeout values in milliseconds and how they relate to each other."""

    def validate_timeout_config(
        self,
        heartbeat_interval: Optional[int],
        election_timeout_min: Optional[int],
        election_timeout_max: Optional[int],
    ) -> None:
        """Validate each given value, then the relations between them."""
        if heartbeat_interval is not None:
            self.validate_heartbeat_interval(heartbeat_interval)
        if election_timeout_min is not None:
            self.validate_election_timeout_min(election_timeout_min)
        if election_timeout_max is not None:
            self.validate_election_timeout_max(election_timeout_max)
        self.validate_timeout_relationships(
            heartbeat_interval, election_timeout_min, election_timeout_max
        )

    def validate_heartbeat_interval(self, heartbeat_interval: int) -> None:
        if heartbeat_interval == 0:
            raise ValidationError("Heartbeat interval cannot be zero")
        if heartbeat_interval < 10:
            raise ValidationError("Heartbeat interval cannot be less than 10ms")
        if heartbeat_interval > 10000:
            raise ValidationError("Heartbeat interval cannot exceed 10000ms")

    def validate_election_timeout_min(self, election_timeout_min: int) -> None:
        if election_timeout_min == 0:
            raise ValidationError("Election timeout min cannot be zero")
        if election_timeout_min < 50:
            raise ValidationError("Election timeout min cannot be less than 50ms")
        if election_timeout_min > 30000:
            raise ValidationError("Election timeout min cannot exceed 30000ms")

    def validate_election_timeout_max(self, election_timeout_max: int) -> None:
        if election_timeout_max == 0:
            raise ValidationError("Election timeout max cannot be zero")
        if election_timeout_max < 100:
            raise ValidationError("Election timeout max cannot be less than 100ms")
        if election_timeout_max > 60000:
            raise ValidationError("Election timeout max cannot exceed 60000ms")

    def validate_timeout_relationships(
        self,
        heartbeat_interval: Optional[int],
        election_timeout_min: Optional[int],
        election_timeout_max: Optional[int],
    ) -> None:
        """Heartbeat below both election timeouts, and election min below max."""
        if heartbeat_interval is not None and election_timeout_min is not None:
            if heartbeat_interval >= election_timeout_min:
                raise ValidationError(
                    "Heartbeat interval must be less than election timeout min"
                )
            recommended_max = election_timeout_min // 5
            recommended_min = election_timeout_min // 10
            if heartbeat_interval > recommended_max:
                logger.debug(
                    "Heartbeat interval %dms is high relative to election timeout %dms "
                    "(recommended: %d-%dms)",
                    heartbeat_interval,
                    election_timeout_min,
                    recommended_min,
                    recommended_max,
                )

        if heartbeat_interval is not None and election_timeout_max is not None:
            if heartbeat_interval >= election_timeout_max:
                raise ValidationError(
                    "Heartbeat interval must be less than election timeout max"
                )

        if election_timeout_min is not None and election_timeout_max is not None:
            if election_timeout_min >= election_timeout_max:
                raise ValidationError("Election timeout min must be less than max")
            recommended_max = election_timeout_min * 3
            recommended_min = election_timeout_min * 3 // 2
            if election_timeout_max > recommended_max:
                logger.debug(
                    "Election timeout max %dms is high relative to min %dms "
                    "(recommended: %d-%dms)",
                    election_timeout_max,
                    election_timeout_min,
                    recommended_min,
                    recommended_max,
                )

    def recommend_timeouts(self, network_latency_ms: int) -> tuple[int, int, int]:
        """Heartbeat, election min and election max suited to a network latency."""
        heartbeat_interval = max(50, network_latency_ms * 3)
        election_timeout_min = heartbeat_interval * 7
        election_timeout_max = election_timeout_min * 2
        return heartbeat_interval, election_timeout_min, election_timeout_max

    def validate_for_network(
        self,
        heartbeat_interval: int,
        election_timeout_min: int,
        network_latency_ms: int,
    ) -> None:
        """Check that the timeouts leave enough room for the network latency."""
        if heartbeat_interval < network_latency_ms * 2:
            raise ValidationError(
                f"Heartbeat interval {heartbeat_interval}ms is too small for network "
                f"latency {network_latency_ms}ms (recommend at least "
                f"{network_latency_ms * 2}ms)"
            )
        if election_timeout_min < heartbeat_interval * 5:
            raise ValidationError(
                f"Election timeout min {election_timeout_min}ms is too small for heartbeat "
                f"interval {heartbeat_interval}ms (recommend at least "
                f"{heartbeat_interval * 5}ms)"
            )