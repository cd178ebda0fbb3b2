"""Commands replicated through the consensus log and their client wrappers."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping, Optional

from conflux.models import ConfigFormat, ConfigNamespace, Release

# In-memory size of the command value itself, before heap data.
_COMMAND_BASE_SIZE = 184
_HEAP_OVERHEAD = 24
_NAMESPACE_OVERHEAD = 48
_ABSENT_OPTION_SIZE = 8
_MAP_OVERHEAD = 48
_MAP_ENTRY_OVERHEAD = 48
_RELEASE_SCALARS_SIZE = 16
_U64_SIZE = 8


def _utf8_len(text: str) -> int:
    return len(text.encode("utf-8"))


def _content_command_size(
    namespace: ConfigNamespace,
    name: str,
    content: bytes,
    schema: Optional[str],
    description: str,
) -> int:
    namespace_size = (
        _utf8_len(namespace.tenant)
        + _utf8_len(namespace.app)
        + _utf8_len(namespace.env)
        + _NAMESPACE_OVERHEAD
    )
    schema_size = _ABSENT_OPTION_SIZE if schema is None else _utf8_len(schema) + _HEAP_OVERHEAD
    return (
        _COMMAND_BASE_SIZE
        + namespace_size
        + _utf8_len(name) + _HEAP_OVERHEAD
        + len(content) + _HEAP_OVERHEAD
        + schema_size
        + _utf8_len(description) + _HEAP_OVERHEAD
    )


def _encode(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return list(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, ConfigNamespace):
        return {"tenant": value.tenant, "app": value.app, "env": value.env}
    if isinstance(value, Release):
        return value.to_dict()
    if isinstance(value, (list, tuple)):
        return [_encode(item) for item in value]
    return value


def _decode(name: str, value: Any) -> Any:
    if name == "namespace":
        return ConfigNamespace(tenant=value["tenant"], app=value["app"], env=value["env"])
    if name == "content":
        return bytes(value)
    if name == "format":
        return None if value is None else ConfigFormat(value)
    if name == "releases":
        return [Release.from_dict(item) for item in value]
    if name == "version_ids":
        return [int(item) for item in value]
    return value


class RaftCommand:
    """A state change replicated to every node."""

    _modifies_content = False
    _modifies_releases = False
    _variants = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        RaftCommand._variants[cls.__name__] = cls

    def modifies_content(self) -> bool:
        """True when the command changes configuration content."""
        return self._modifies_content

    def modifies_releases(self) -> bool:
        """True when the command changes release rules."""
        return self._modifies_releases

    def estimate_size(self) -> int:
        """Rough memory footprint of the command in bytes."""
        return _COMMAND_BASE_SIZE

    def to_dict(self) -> dict[str, Any]:
        """Externally tagged form: the variant name mapping to its fields."""
        payload = {
            f.name: _encode(getattr(self, f.name)) for f in fields(self) if f.init
        }
        return {type(self).__name__: payload}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RaftCommand:
        if not isinstance(data, Mapping) or len(data) != 1:
            raise ValueError("a command must be a mapping with exactly one variant name")
        ((variant, payload),) = data.items()
        target = RaftCommand._variants.get(variant)
        if target is None or not issubclass(target, cls):
            raise ValueError(f"unknown command variant {variant!r}")
        if not isinstance(payload, Mapping):
            raise ValueError(f"fields of {variant} must be a mapping")
        kwargs = {}
        for f in fields(target):
            if not f.init:
                continue
            if f.name not in payload:
                raise ValueError(f"{variant} is missing field {f.name!r}")
            kwargs[f.name] = _decode(f.name, payload[f.name])
        return target(**kwargs)


@dataclass
class _WithoutCreator:
    # Commands of these kinds carry no creator; the attribute is always None.
    creator_id: None = field(default=None, init=False, repr=False, compare=False)


@dataclass
class CreateConfig(RaftCommand):
    """Create a configuration with its first version."""

    namespace: ConfigNamespace
    name: str
    content: bytes
    format: ConfigFormat
    schema: Optional[str]
    creator_id: int
    description: str
    # A new configuration has no id until the state machine assigns one.
    config_id: None = field(default=None, init=False, repr=False, compare=False)

    _modifies_content = True

    def estimate_size(self) -> int:
        return _content_command_size(
            self.namespace, self.name, self.content, self.schema, self.description
        )


@dataclass
class UpdateConfig(_WithoutCreator, RaftCommand):
    """Update an existing configuration."""

    config_id: int
    namespace: ConfigNamespace
    name: str
    content: bytes
    format: ConfigFormat
    schema: Optional[str]
    description: str

    _modifies_content = True

    def estimate_size(self) -> int:
        return _content_command_size(
            self.namespace, self.name, self.content, self.schema, self.description
        )


@dataclass
class CreateVersion(RaftCommand):
    """Add a version to an existing configuration."""

    config_id: int
    content: bytes
    format: Optional[ConfigFormat]
    creator_id: int
    description: str

    _modifies_content = True

    def estimate_size(self) -> int:
        return (
            _COMMAND_BASE_SIZE
            + len(self.content) + _HEAP_OVERHEAD
            + _utf8_len(self.description) + _HEAP_OVERHEAD
        )


@dataclass
class ReleaseVersion(_WithoutCreator, RaftCommand):
    """Release a specific version."""

    config_id: int
    version_id: int

    _modifies_releases = True


@dataclass
class DeleteConfig(_WithoutCreator, RaftCommand):
    """Delete a configuration and all its versions."""

    config_id: int


@dataclass
class DeleteVersions(_WithoutCreator, RaftCommand):
    """Delete some versions of a configuration."""

    config_id: int
    version_ids: list[int]

    def estimate_size(self) -> int:
        return _COMMAND_BASE_SIZE + len(self.version_ids) * _U64_SIZE + _HEAP_OVERHEAD


@dataclass
class UpdateReleaseRules(_WithoutCreator, RaftCommand):
    """Replace the release rules of a configuration."""

    config_id: int
    releases: list[Release]

    _modifies_releases = True

    def estimate_size(self) -> int:
        releases_size = _HEAP_OVERHEAD
        for release in self.releases:
            labels_size = _MAP_OVERHEAD + sum(
                _utf8_len(key) + _utf8_len(value) + _MAP_ENTRY_OVERHEAD
                for key, value in release.labels.items()
            )
            releases_size += labels_size + _RELEASE_SCALARS_SIZE
        return _COMMAND_BASE_SIZE + releases_size


@dataclass
class ClientRequest:
    """A command submitted by a client."""

    command: RaftCommand

    def to_json(self) -> str:
        return json.dumps({"command": self.command.to_dict()})

    @classmethod
    def from_json(cls, text: str) -> ClientRequest:
        data = json.loads(text)
        if not isinstance(data, dict) or "command" not in data:
            raise ValueError("client request is missing field 'command'")
        return cls(command=RaftCommand.from_dict(data["command"]))


@dataclass
class ClientWriteResponse:
    """Outcome of a write operation."""

    config_id: Optional[int] = None
    success: bool = False
    message: str = "No operation performed"
    data: Any = None

    def to_json(self) -> str:
        return json.dumps(
            {
                "config_id": self.config_id,
                "success": self.success,
                "message": self.message,
                "data": self.data,
            }
        )

    @classmethod
    def from_json(cls, text: str) -> ClientWriteResponse:
        data = json.loads(text)
        try:
            return cls(
                config_id=data["config_id"],
                success=data["success"],
                message=data["message"],
                data=data["data"],
            )
        except (KeyError, TypeError) as exc:
            raise ValueError(f"malformed client write response: {exc}") from None