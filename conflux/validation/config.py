"""Limits and policies applied when validating cluster operations."""

from __future__ import annotations

from dataclasses import dataclass

# Longest host name allowed by RFC 1035.
MAX_HOSTNAME_LENGTH = 253
_MAX_CLUSTER_SIZE_LIMIT = 10000


class ValidationError(ValueError):
    """Raised when an input or a configuration fails validation."""


@dataclass
class ValidationConfig:
    """Ranges and network policy used by the validators."""

    min_node_id: int = 1
    max_node_id: int = 65535
    allowed_port_range: tuple[int, int] = (1024, 65535)
    max_hostname_length: int = MAX_HOSTNAME_LENGTH
    allow_localhost: bool = True
    allow_private_ips: bool = True
    max_cluster_size: int = 100

    @classmethod
    def dev(cls) -> ValidationConfig:
        """Lenient settings for development, allowing larger clusters."""
        return cls(
            min_node_id=1,
            max_node_id=65535,
            allowed_port_range=(1024, 65535),
            max_hostname_length=MAX_HOSTNAME_LENGTH,
            allow_localhost=True,
            allow_private_ips=True,
            max_cluster_size=1000,
        )

    @classmethod
    def prod(cls) -> ValidationConfig:
        """Strict settings for production: no loopback or private addresses."""
        return cls(
            min_node_id=1,
            max_node_id=10000,
            allowed_port_range=(8000, 9000),
            max_hostname_length=MAX_HOSTNAME_LENGTH,
            allow_localhost=False,
            allow_private_ips=False,
            max_cluster_size=100,
        )

    def validate(self) -> None:
        """Check that the settings are consistent; raise ValidationError if not."""
        min_port, max_port = self.allowed_port_range
        if self.min_node_id == 0:
            raise ValidationError("min_node_id cannot be zero")
        if self.min_node_id >= self.max_node_id:
            raise ValidationError("min_node_id must be less than max_node_id")
        if min_port >= max_port:
            raise ValidationError("Port range minimum must be less than maximum")
        if min_port == 0:
            raise ValidationError("Port range minimum cannot be zero")
        if self.max_hostname_length == 0:
            raise ValidationError("max_hostname_length cannot be zero")
        if self.max_hostname_length > MAX_HOSTNAME_LENGTH:
            raise ValidationError(
                f"max_hostname_length cannot exceed {MAX_HOSTNAME_LENGTH} (RFC 1035 limit)"
            )
        if self.max_cluster_size == 0:
            raise ValidationError("max_cluster_size cannot be zero")
        if self.max_cluster_size > _MAX_CLUSTER_SIZE_LIMIT:
            raise ValidationError(f"max_cluster_size cannot exceed {_MAX_CLUSTER_SIZE_LIMIT}")

    def set_node_id_range(self, min_id: int, max_id: int) -> None:
        """Set the allowed node id range in one step."""
        self.min_node_id = min_id
        self.max_node_id = max_id

    def set_port_range(self, min_port: int, max_port: int) -> None:
        """Set the allowed port range in one step."""
        self.allowed_port_range = (min_port, max_port)

    def set_network_policy(self, allow_localhost: bool, allow_private_ips: bool) -> None:
        """Set whether loopback and private addresses are accepted."""
        self.allow_localhost = allow_localhost
        self.allow_private_ips = allow_private_ips