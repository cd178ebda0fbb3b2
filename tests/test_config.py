import pytest

from conflux.validation.config import ValidationConfig, ValidationError


def test_default_config():
    config = ValidationConfig()
    assert config.min_node_id == 1
    assert config.max_node_id == 65535
    assert config.allowed_port_range == (1024, 65535)
    assert config.max_hostname_length == 253
    assert config.allow_localhost
    assert config.allow_private_ips
    assert config.max_cluster_size == 100


def test_dev_config():
    config = ValidationConfig.dev()
    assert config.allow_localhost
    assert config.allow_private_ips
    assert config.max_cluster_size == 1000


def test_prod_config():
    config = ValidationConfig.prod()
    assert not config.allow_localhost
    assert not config.allow_private_ips
    assert config.allowed_port_range == (8000, 9000)
    assert config.max_node_id == 10000


def test_default_config_is_valid():
    assert ValidationConfig().validate() is None
    assert ValidationConfig.dev().validate() is None
    assert ValidationConfig.prod().validate() is None


def test_min_greater_than_max_is_invalid():
    config = ValidationConfig(min_node_id=100, max_node_id=50)
    with pytest.raises(ValidationError, match="min_node_id must be less than max_node_id"):
        config.validate()


def test_zero_min_node_id_is_invalid():
    config = ValidationConfig(min_node_id=0)
    with pytest.raises(ValidationError, match="min_node_id cannot be zero"):
        config.validate()


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"allowed_port_range": (9000, 8000)}, "Port range minimum must be less than maximum"),
        ({"allowed_port_range": (0, 8000)}, "Port range minimum cannot be zero"),
        ({"max_hostname_length": 0}, "max_hostname_length cannot be zero"),
        ({"max_hostname_length": 254}, "max_hostname_length cannot exceed 253"),
        ({"max_cluster_size": 0}, "max_cluster_size cannot be zero"),
        ({"max_cluster_size": 10001}, "max_cluster_size cannot exceed 10000"),
    ],
)
def test_invalid_settings(kwargs, message):
    with pytest.raises(ValidationError, match=message):
        ValidationConfig(**kwargs).validate()


def test_validation_error_is_value_error():
    with pytest.raises(ValueError):
        ValidationConfig(min_node_id=0).validate()


def test_keyword_construction_keeps_other_defaults():
    config = ValidationConfig(
        min_node_id=1, max_node_id=1000, allowed_port_range=(8000, 9000), max_cluster_size=50
    )
    assert config.max_node_id == 1000
    assert config.allowed_port_range == (8000, 9000)
    assert config.max_cluster_size == 50
    assert config.max_hostname_length == 253
    assert config.allow_localhost


def test_config_setters():
    config = ValidationConfig()

    config.set_node_id_range(1, 1000)
    assert config.min_node_id == 1
    assert config.max_node_id == 1000

    config.set_port_range(8000, 9000)
    assert config.allowed_port_range == (8000, 9000)

    config.set_network_policy(False, False)
    assert not config.allow_localhost
    assert not config.allow_private_ips

    config.max_cluster_size = 50
    assert config.max_cluster_size == 50