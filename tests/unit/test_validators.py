"""Unit tests for the validator registry and built-in validators"""

import pytest

from wasifu.validation import ValidatorRegistry


def test_builtin_validators_are_registered():
    assert ValidatorRegistry.is_registered("non_empty")
    assert ValidatorRegistry.is_registered("letters_only")


@pytest.mark.parametrize(
    "value,expected",
    [("Amina", True), ("  x ", True), ("42", True), ("", False), ("   ", False), (None, False)],
)
def test_non_empty(value, expected):
    assert ValidatorRegistry.validate("non_empty", value) is expected


@pytest.mark.parametrize(
    "value,expected",
    [("Amina", True), ("Mary-Jane O'Neil", True), ("R2D2", False), ("", False)],
)
def test_letters_only(value, expected):
    assert ValidatorRegistry.validate("letters_only", value) is expected


def test_register_custom_validator():
    """
    GIVEN a custom validator
    WHEN it is registered
    THEN it is listed and used by name
    """
    # Arrange
    @ValidatorRegistry.register("test_short_name")
    def short_name(value):
        return len(value) <= 5

    # Act & Assert
    assert "test_short_name" in ValidatorRegistry.list_validators()
    assert ValidatorRegistry.validate("test_short_name", "Juma")
    assert not ValidatorRegistry.validate("test_short_name", "Wanjiku")


def test_list_validators_is_sorted():
    names = ValidatorRegistry.list_validators()

    assert names == sorted(names)
    assert {"letters_only", "non_empty"} <= set(names)


def test_get_unknown_validator_raises():
    with pytest.raises(ValueError, match="not registered"):
        ValidatorRegistry.get("does_not_exist")
