# conflux

Building blocks for a distributed configuration center that keeps its state
in a Raft log.

- **Data model** (`conflux.models`): `ConfigNamespace`, `ConfigFormat`,
  `Config`, `Release`, `ConfigVersion` (with a SHA-256 content hash),
  `RaftMetrics`, and the helpers that build storage keys
  (`make_config_key`, `make_config_id_key`, `make_version_key`,
  `make_name_index_key`, `make_reverse_index_key`).
- **Raft commands** (`conflux.commands`): `CreateConfig`, `UpdateConfig`,
  `CreateVersion`, `ReleaseVersion`, `DeleteConfig`, `DeleteVersions` and
  `UpdateReleaseRules`. All of them are `RaftCommand`s. A command travels
  inside a `ClientRequest`, and a `ClientWriteResponse` carries the reply.
  Both have a JSON form.
- **Input validation** (`conflux.validation`): checks for node ids, node
  addresses, cluster size and health, and Raft timeouts. It can also
  suggest cluster settings.

## Installation

```
pip install .
```

The package has no runtime dependencies. To install the test tools as well:

```
pip install ".[test]"
```

## Configurations and releases

```python
from conflux.models import Config, ConfigNamespace, Release

ns = ConfigNamespace(tenant="acme", app="shop", env="prod")
config = Config(
    id=1,
    namespace=ns,
    name="app.json",
    latest_version_id=2,
    releases=[Release.default(1), Release({"region": "eu"}, 2, 10)],
)

config.name_key()                                # "acme/shop/prod/app.json"
config.find_matching_release({"region": "eu"})   # the release of version 2
config.find_matching_release({})                 # the default release
config.get_default_release()                     # the highest-priority release
```

A release matches a client when every one of its labels is present among
the client's labels with the same value. When several releases match,
`find_matching_release` picks the one with the highest priority, and the
first one wins a tie.

`ConfigVersion.create(...)` stamps a version with the current UTC time and
the SHA-256 hex digest of its content. `verify_integrity()` checks the
digest again. `content_as_string()` decodes the content as UTF-8.

The key helpers return `bytes`, each with a one-byte prefix followed by
big-endian 64-bit ids: `0x02` for a configuration id, `0x03` for a version,
and `0x05` for the reverse index. The name index key is `0x04` followed by
the UTF-8 text `tenant/app/env/name`.

## Commands

```python
from conflux.commands import ClientRequest, CreateVersion

request = ClientRequest(CreateVersion(
    config_id=123, content=b"key: value", format=None,
    creator_id=2, description="New version",
))
text = request.to_json()
same = ClientRequest.from_json(text)
same.command.config_id           # 123
same.command.creator_id          # 2
same.command.modifies_content()  # True
same.command.estimate_size()     # rough size in bytes
```

Every command has `config_id` and `creator_id`. They are `None` where the
command carries no such value: a `CreateConfig` has no id yet, and only
`CreateConfig` and `CreateVersion` record a creator.
`modifies_releases()` is true for `ReleaseVersion` and
`UpdateReleaseRules`. `RaftCommand.to_dict()` gives the variant name
mapping to its fields, and `RaftCommand.from_dict()` reads it back.

`ClientWriteResponse()` defaults to `success=False` and the message
`"No operation performed"`.

## Validation

Each failed check raises `ValidationError`, a subclass of `ValueError`,
with a message that says what is wrong.

```python
from conflux.validation.config import ValidationConfig, ValidationError
from conflux.validation.raft_input import RaftInputValidator

validator = RaftInputValidator(ValidationConfig.prod())
existing = [(1, "203.0.113.10:8080")]

addr = validator.validate_add_node(2, "203.0.113.11:8081", existing)
print(addr)  # 203.0.113.11:8081

try:
    validator.validate_add_node(3, "127.0.0.1:8082", existing)
except ValidationError as exc:
    print(exc)  # Localhost addresses are not allowed

validator.validate_timeout_config(100, 300, 600)
validator.validate_cluster_health(5, 3)

suggestions = validator.get_cluster_suggestions(4, 100, 300, 10)
suggestions.has_suggestions()   # True: an odd cluster size is recommended
```

Addresses must take the form `a.b.c.d:port` or `[ipv6]:port`. Host names
are not resolved. `parse_socket_address` in `conflux.validation.nodes`
parses an address into a `SocketAddress`.

`ValidationConfig()` holds the defaults: node ids 1 to 65535, ports 1024
to 65535, at most 100 nodes, and localhost and private addresses allowed.
`ValidationConfig.dev()` raises the cluster size limit to 1000.
`ValidationConfig.prod()` allows node ids 1 to 10000 and ports 8000 to
9000, and rejects loopback and private addresses. `validate()` checks that
a configuration is consistent in itself.

There are also validators for narrower checks:

- `NodeValidator` in `conflux.validation.nodes`
- `ClusterValidator` in `conflux.validation.cluster`
- `TimeoutValidator` in `conflux.validation.timeouts`
- `ComprehensiveValidator` in `conflux.validation.comprehensive`

## What this package does not do

This package is a library of data types, commands and checks. It has no
Raft node, log storage, state machine or network transport. It runs no
HTTP server, does not persist anything, and installs no command. The
commands and keys it defines are meant for code that provides those parts.

## Running the tests

```
pytest
```