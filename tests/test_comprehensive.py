import pytest

from conflux.validation.comprehensive import ClusterSuggestions, ComprehensiveValidator
from conflux.validation.config import ValidationConfig, ValidationError


@pytest.fixture
def validator():
    return ComprehensiveValidator(ValidationConfig())


def test_validate_add_node_valid(validator):
    existing = [(1, "127.0.0.1:8080")]
    address = validator.validate_add_node(2, "127.0.0.1:8081", existing)
    assert address.port == 8081
    assert str(address) == "127.0.0.1:8081"


def test_validate_add_node_duplicate_id(validator):
    existing = [(1, "127.0.0.1:8080")]
    with pytest.raises(ValidationError, match="Node ID 1 already exists"):
        validator.validate_add_node(1, "127.0.0.1:8082", existing)


def test_validate_add_node_duplicate_address(validator):
    existing = [(1, "127.0.0.1:8080")]
    with pytest.raises(ValidationError, match="Address 127.0.0.1:8080 already exists"):
        validator.validate_add_node(3, "127.0.0.1:8080", existing)


def test_validate_add_node_ignores_unparseable_existing(validator):
    existing = [(1, "not-an-address")]
    address = validator.validate_add_node(2, "127.0.0.1:8080", existing)
    assert address.port == 8080


def test_validate_add_node_cluster_full():
    validator = ComprehensiveValidator(ValidationConfig(max_cluster_size=1))
    with pytest.raises(ValidationError, match="exceed maximum"):
        validator.validate_add_node(2, "127.0.0.1:8081", [(1, "127.0.0.1:8080")])


def test_validate_remove_node(validator):
    existing = [(1, "127.0.0.1:8080"), (2, "127.0.0.1:8081")]
    assert validator.validate_remove_node(2, existing) is None
    with pytest.raises(ValidationError, match="does not exist"):
        validator.validate_remove_node(3, existing)
    with pytest.raises(ValidationError):
        validator.validate_remove_node(1, [(1, "127.0.0.1:8080")])


def test_validate_remove_node_invalid_id(validator):
    with pytest.raises(ValidationError, match="Node ID 0"):
        validator.validate_remove_node(0, [(1, "127.0.0.1:8080")])


def test_cluster_suggestions(validator):
    suggestions = validator.get_cluster_suggestions(4, 100, 300, 10)
    assert suggestions.has_suggestions()
    assert any("odd cluster size" in s for s in suggestions.size_recommendations)
    assert suggestions.fault_tolerance_info == "Current cluster can tolerate 1 node failures"
    assert suggestions.timeout_recommendations == [
        "Consider adjusting heartbeat interval from 100ms to 50ms for 10ms network latency",
        "Consider adjusting election timeout min from 300ms to 350ms",
    ]
    assert len(suggestions.network_recommendations) == 1
    assert suggestions.total_suggestions() == 4


def test_cluster_suggestions_none_for_good_prod_setup():
    validator = ComprehensiveValidator(ValidationConfig.prod())
    suggestions = validator.get_cluster_suggestions(3, 50, 350, 10)
    assert not suggestions.has_suggestions()
    assert suggestions.total_suggestions() == 0
    assert suggestions.fault_tolerance_info == "Current cluster can tolerate 1 node failures"


def test_empty_suggestions():
    suggestions = ClusterSuggestions()
    assert suggestions.has_suggestions() is False
    assert suggestions.total_suggestions() == 0


def test_update_config():
    validator = ComprehensiveValidator(ValidationConfig())
    assert validator.config.max_cluster_size == 100

    new_config = ValidationConfig()
    new_config.max_cluster_size = 200
    validator.update_config(new_config)

    assert validator.config.max_cluster_size == 200
    assert validator.cluster_validator.config.max_cluster_size == 200
    assert validator.node_validator.config.max_cluster_size == 200


def test_timeout_and_health_delegation(validator):
    assert validator.validate_timeout_config(100, 300, 600) is None
    with pytest.raises(ValidationError, match="Heartbeat interval cannot be zero"):
        validator.validate_timeout_config(0, None, None)
    assert validator.validate_cluster_health(5, 3) is None
    with pytest.raises(ValidationError, match="Insufficient healthy nodes"):
        validator.validate_cluster_health(5, 2)