import pytest

from conflux.validation.cluster import ClusterValidator
from conflux.validation.config import ValidationConfig, ValidationError


@pytest.fixture
def validator():
    return ClusterValidator(ValidationConfig())


def test_validate_cluster_size(validator):
    assert validator.validate_cluster_size(5, 1) is None
    assert validator.validate_cluster_size(99, 1) is None
    with pytest.raises(ValidationError):
        validator.validate_cluster_size(100, 1)
    with pytest.raises(ValidationError):
        validator.validate_cluster_size(150, 0)


def test_cluster_size_limit_errors(validator):
    with pytest.raises(ValidationError, match="exceed maximum: 101 > 100"):
        validator.validate_cluster_size(50, 51)
    with pytest.raises(ValidationError, match="exceed maximum"):
        validator.validate_cluster_size(2**64 - 1, 1)


def test_small_custom_limit():
    validator = ClusterValidator(ValidationConfig(max_cluster_size=3))
    with pytest.raises(ValidationError) as excinfo:
        validator.validate_cluster_size(3, 1)
    message = str(excinfo.value)
    assert "exceed" in message
    assert "maximum" in message


def test_over_limit_message_includes_addition():
    validator = ClusterValidator(ValidationConfig(max_cluster_size=3))
    with pytest.raises(ValidationError) as excinfo:
        validator.validate_cluster_size(4, 2)
    assert str(excinfo.value) == "Cluster size would exceed maximum: 4 + 2 > 3"


def test_cluster_size_boundary():
    validator = ClusterValidator(ValidationConfig(min_node_id=1, max_node_id=2, max_cluster_size=1))
    assert validator.validate_cluster_size(0, 1) is None
    assert validator.validate_cluster_size(1, 0) is None
    with pytest.raises(ValidationError):
        validator.validate_cluster_size(1, 1)


def test_validate_minimum_cluster_size(validator):
    assert validator.validate_minimum_cluster_size(3, 1) is None
    assert validator.validate_minimum_cluster_size(5, 2) is None
    for current, removing in [(1, 1), (3, 3), (2, 3)]:
        with pytest.raises(ValidationError, match="Cannot remove all nodes"):
            validator.validate_minimum_cluster_size(current, removing)


@pytest.mark.parametrize("size, odd", [(1, True), (3, True), (5, True), (2, False), (4, False), (6, False)])
def test_validate_cluster_parity(validator, size, odd):
    assert validator.validate_cluster_parity(size) is odd


@pytest.mark.parametrize("total, healthy", [(5, 3), (3, 2), (1, 1)])
def test_healthy_clusters(validator, total, healthy):
    assert validator.validate_cluster_health(total, healthy) is None


@pytest.mark.parametrize(
    "total, healthy, message",
    [
        (5, 2, "Insufficient healthy nodes for consensus: 2/5 \\(need 3\\)"),
        (3, 1, "Insufficient healthy nodes"),
        (5, 0, "No healthy nodes"),
        (0, 0, "No healthy nodes"),
        (0, 1, "Empty cluster"),
        (3, 4, "cannot exceed total"),
    ],
)
def test_unhealthy_clusters(validator, total, healthy, message):
    with pytest.raises(ValidationError, match=message):
        validator.validate_cluster_health(total, healthy)


@pytest.mark.parametrize("size, tolerance", [(0, 0), (1, 0), (3, 1), (5, 2), (7, 3)])
def test_fault_tolerance(validator, size, tolerance):
    assert validator.calculate_fault_tolerance(size) == tolerance


@pytest.mark.parametrize("tolerance, size", [(0, 1), (1, 3), (2, 5), (3, 7)])
def test_recommend_cluster_size(validator, tolerance, size):
    assert validator.recommend_cluster_size(tolerance) == size


def test_validate_node_exists(validator):
    existing = [(1, "127.0.0.1:8080"), (2, "127.0.0.1:8081")]
    assert validator.validate_node_exists(1, existing) is None
    assert validator.validate_node_exists(2, existing) is None
    with pytest.raises(ValidationError, match="Node ID 3 does not exist"):
        validator.validate_node_exists(3, existing)


def test_config_is_shared():
    config = ValidationConfig()
    validator = ClusterValidator(config)
    config.max_cluster_size = 2
    assert validator.config.max_cluster_size == 2
    with pytest.raises(ValidationError):
        validator.validate_cluster_size(2, 1)