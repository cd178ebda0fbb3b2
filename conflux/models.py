"""Configuration data types and storage key helpers."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional

NodeId = int
ConfigKey = str

_CONFIG_ID_PREFIX = b"\x02"
_VERSION_PREFIX = b"\x03"
_NAME_INDEX_PREFIX = b"\x04"
_REVERSE_INDEX_PREFIX = b"\x05"

_U64_LIMIT = 1 << 64


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _u64_bytes(value: int) -> bytes:
    if not 0 <= value < _U64_LIMIT:
        raise ValueError(f"value {value} does not fit in an unsigned 64-bit integer")
    return value.to_bytes(8, "big")


@dataclass(frozen=True)
class ConfigNamespace:
    """Tenant, application and environment that a configuration belongs to."""

    tenant: str
    app: str
    env: str

    def __str__(self) -> str:
        return f"{self.tenant}/{self.app}/{self.env}"


class ConfigFormat(str, Enum):
    """Format of a configuration's content."""

    JSON = "Json"
    YAML = "Yaml"
    TOML = "Toml"
    PROPERTIES = "Properties"
    XML = "Xml"


@dataclass
class Release:
    """Rule that serves a version to clients whose labels match."""

    labels: dict[str, str]
    version_id: int
    priority: int

    @classmethod
    def default(cls, version_id: int) -> Release:
        """A release with no labels and priority 0."""
        return cls(labels={}, version_id=version_id, priority=0)

    def matches(self, client_labels: Mapping[str, str]) -> bool:
        """True when every label of this release is present with the same value."""
        return all(client_labels.get(key) == value for key, value in self.labels.items())

    def is_default(self) -> bool:
        """True when the release has no labels."""
        return not self.labels

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": {key: self.labels[key] for key in sorted(self.labels)},
            "version_id": self.version_id,
            "priority": self.priority,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Release:
        try:
            labels = data["labels"]
            version_id = data["version_id"]
            priority = data["priority"]
        except KeyError as exc:
            raise ValueError(f"release is missing field {exc.args[0]!r}") from None
        return cls(labels=dict(labels), version_id=int(version_id), priority=int(priority))


def make_config_key(namespace: ConfigNamespace, name: str) -> ConfigKey:
    """Key of a configuration by namespace and name."""
    return f"{namespace}/{name}"


def make_config_id_key(config_id: int) -> bytes:
    """Storage key of a configuration by id."""
    return _CONFIG_ID_PREFIX + _u64_bytes(config_id)


def make_version_key(config_id: int, version_id: int) -> bytes:
    """Storage key of one version of a configuration."""
    return _VERSION_PREFIX + _u64_bytes(config_id) + _u64_bytes(version_id)


def make_name_index_key(namespace: ConfigNamespace, name: str) -> bytes:
    """Storage key of the name index entry for a configuration."""
    return _NAME_INDEX_PREFIX + make_config_key(namespace, name).encode("utf-8")


def make_reverse_index_key(config_id: int) -> bytes:
    """Storage key of the reverse index entry for a configuration."""
    return _REVERSE_INDEX_PREFIX + _u64_bytes(config_id)


@dataclass
class Config:
    """Configuration metadata with its release rules."""

    id: int
    namespace: ConfigNamespace
    name: str
    latest_version_id: int
    releases: list[Release] = field(default_factory=list)
    schema: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def name_key(self) -> ConfigKey:
        return make_config_key(self.namespace, self.name)

    def get_default_release(self) -> Optional[Release]:
        """The release with the highest priority; the last one wins a tie."""
        best: Optional[Release] = None
        for release in self.releases:
            if best is None or release.priority >= best.priority:
                best = release
        return best

    def find_matching_release(self, client_labels: Mapping[str, str]) -> Optional[Release]:
        """The highest-priority release matching the labels; the first one wins a tie."""
        best: Optional[Release] = None
        for release in self.releases:
            if release.matches(client_labels) and (best is None or release.priority > best.priority):
                best = release
        return best


@dataclass
class ConfigVersion:
    """Immutable content of one configuration version."""

    id: int
    config_id: int
    content: bytes
    content_hash: str
    format: ConfigFormat
    creator_id: int
    created_at: datetime
    description: str

    @classmethod
    def create(
        cls,
        id: int,
        config_id: int,
        content: bytes,
        format: ConfigFormat,
        creator_id: int,
        description: str,
    ) -> ConfigVersion:
        """Build a version stamped now, with the SHA-256 of its content."""
        content = bytes(content)
        return cls(
            id=id,
            config_id=config_id,
            content=content,
            content_hash=hashlib.sha256(content).hexdigest(),
            format=format,
            creator_id=creator_id,
            created_at=_utcnow(),
            description=description,
        )

    def verify_integrity(self) -> bool:
        """True when the stored hash matches the content."""
        return hashlib.sha256(self.content).hexdigest() == self.content_hash

    def content_as_string(self) -> str:
        """Content decoded as UTF-8; raises UnicodeDecodeError otherwise."""
        return self.content.decode("utf-8")


@dataclass
class RaftMetrics:
    """Snapshot of a node's consensus state."""

    node_id: NodeId
    current_term: int
    last_log_index: int
    last_applied: int
    leader_id: Optional[NodeId]
    membership: frozenset[NodeId]
    is_leader: bool