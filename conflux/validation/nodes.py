"""Validation of node identifiers and node network addresses."""

from __future__ import annotations

import ipaddress
import logging
from dataclasses import dataclass
from typing import Iterable, Union

from conflux.validation.config import ValidationConfig, ValidationError

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_DIGITS = frozenset("0123456789")
_MAX_PORT = 65535
_MAX_SCOPE_ID = (1 << 32) - 1
# Room left for ":port" on top of the host name length limit.
_PORT_ALLOWANCE = 10

_IPV4_PRIVATE_NETWORKS = (
    ipaddress.IPv4Network("10.0.0.0/8"),
    ipaddress.IPv4Network("172.16.0.0/12"),
    ipaddress.IPv4Network("192.168.0.0/16"),
)
_IPV4_LOOPBACK = ipaddress.IPv4Network("127.0.0.0/8")
_IPV4_MULTICAST = ipaddress.IPv4Network("224.0.0.0/4")
_IPV4_UNSPECIFIED = ipaddress.IPv4Address("0.0.0.0")
_IPV4_BROADCAST = ipaddress.IPv4Address("255.255.255.255")
_IPV6_LOOPBACK = ipaddress.IPv6Address("::1")
_IPV6_UNSPECIFIED = ipaddress.IPv6Address("::")
_IPV6_MULTICAST = ipaddress.IPv6Network("ff00::/8")


@dataclass(frozen=True)
class SocketAddress:
    """An IP address with a port; IPv6 addresses may carry a numeric scope id."""

    ip: IPAddress
    port: int
    scope_id: int = 0

    def __str__(self) -> str:
        if isinstance(self.ip, ipaddress.IPv6Address):
            scope = f"%{self.scope_id}" if self.scope_id else ""
            return f"[{self.ip}{scope}]:{self.port}"
        return f"{self.ip}:{self.port}"


def _parse_decimal(text: str, limit: int) -> int:
    if not text or not set(text) <= _DIGITS:
        raise ValueError("invalid socket address syntax")
    value = int(text)
    if value > limit:
        raise ValueError("invalid socket address syntax")
    return value


def parse_socket_address(address: str) -> SocketAddress:
    """Parse "a.b.c.d:port" or "[ipv6]:port"; raise ValueError on bad syntax."""
    if address.startswith("["):
        host, separator, port_text = address[1:].partition("]:")
        if not separator:
            raise ValueError("invalid socket address syntax")
        host, percent, scope_text = host.partition("%")
        scope_id = _parse_decimal(scope_text, _MAX_SCOPE_ID) if percent else 0
        try:
            ip: IPAddress = ipaddress.IPv6Address(host)
        except ValueError:
            raise ValueError("invalid socket address syntax") from None
        return SocketAddress(ip=ip, port=_parse_decimal(port_text, _MAX_PORT), scope_id=scope_id)

    host, separator, port_text = address.rpartition(":")
    if not separator:
        raise ValueError("invalid socket address syntax")
    try:
        ip = ipaddress.IPv4Address(host)
    except ValueError:
        raise ValueError("invalid socket address syntax") from None
    return SocketAddress(ip=ip, port=_parse_decimal(port_text, _MAX_PORT))


class NodeValidator:
    """Checks node ids against the configured range and addresses against the network policy."""

    def __init__(self, config: ValidationConfig) -> None:
        self.config = config

    def validate_node_id(self, node_id: int) -> None:
        """Raise ValidationError unless the id lies within the configured range."""
        logger.debug("Validating node ID: %s", node_id)
        if node_id < self.config.min_node_id:
            raise ValidationError(
                f"Node ID {node_id} is below minimum allowed value {self.config.min_node_id}"
            )
        if node_id > self.config.max_node_id:
            raise ValidationError(
                f"Node ID {node_id} exceeds maximum allowed value {self.config.max_node_id}"
            )

    def validate_node_address(self, address: str) -> SocketAddress:
        """Parse and check an address: length, syntax, port range and IP policy."""
        logger.debug("Validating node address: %s", address)
        if not address:
            raise ValidationError("Node address cannot be empty")

        max_length = self.config.max_hostname_length + _PORT_ALLOWANCE
        length = len(address.encode("utf-8"))
        if length > max_length:
            raise ValidationError(
                f"Node address is too long: {length} characters (max: {max_length})"
            )

        try:
            socket_address = parse_socket_address(address)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid socket address format '{address}': {exc}"
            ) from None

        min_port, max_port = self.config.allowed_port_range
        port = socket_address.port
        if port < min_port or port > max_port:
            raise ValidationError(f"Port {port} is outside allowed range {min_port}-{max_port}")

        self.validate_ip_address(socket_address.ip)
        return socket_address

    def validate_ip_address(self, ip: Union[IPAddress, str]) -> None:
        """Raise ValidationError when the IP address is not allowed by the policy."""
        if isinstance(ip, str):
            ip = ipaddress.ip_address(ip)
        logger.debug("Validating IP address: %s", ip)

        if isinstance(ip, ipaddress.IPv4Address):
            self._validate_ipv4(ip)
        else:
            self._validate_ipv6(ip)

    def _validate_ipv4(self, ip: ipaddress.IPv4Address) -> None:
        if ip in _IPV4_LOOPBACK and not self.config.allow_localhost:
            raise ValidationError("Localhost addresses are not allowed")
        if not self.config.allow_private_ips and any(
            ip in network for network in _IPV4_PRIVATE_NETWORKS
        ):
            raise ValidationError("Private IP addresses are not allowed")
        if ip == _IPV4_UNSPECIFIED:
            raise ValidationError("Unspecified IP address (0.0.0.0) is not allowed")
        if ip == _IPV4_BROADCAST:
            raise ValidationError("Broadcast IP address is not allowed")
        if ip in _IPV4_MULTICAST:
            raise ValidationError("Multicast IP address is not allowed")

    def _validate_ipv6(self, ip: ipaddress.IPv6Address) -> None:
        if ip == _IPV6_LOOPBACK and not self.config.allow_localhost:
            raise ValidationError("Localhost addresses are not allowed")
        if ip == _IPV6_UNSPECIFIED:
            raise ValidationError("Unspecified IP address (::) is not allowed")
        if ip in _IPV6_MULTICAST:
            raise ValidationError("Multicast IP address is not allowed")
        if not self.config.allow_private_ips:
            first, second = ip.packed[0], ip.packed[1]
            if first in (0xFC, 0xFD):
                raise ValidationError("Private IPv6 addresses are not allowed")
            if first == 0xFE and (second & 0xC0) == 0x80:
                raise ValidationError("Link-local IPv6 addresses are not allowed")

    def validate_node_id_uniqueness(self, node_id: int, existing_nodes: Iterable[int]) -> None:
        """Raise ValidationError when the id is already among the existing ids."""
        if node_id in set(existing_nodes):
            raise ValidationError(f"Node ID {node_id} already exists in cluster")

    def validate_address_uniqueness(self, address: str, existing_addresses: Iterable[str]) -> None:
        """Validate the address, then reject it if an existing address parses to the same one."""
        new_address = self.validate_node_address(address)
        for existing in existing_addresses:
            try:
                existing_address = parse_socket_address(existing)
            except ValueError:
                continue
            if existing_address == new_address:
                raise ValidationError(f"Address {address} already exists in cluster")