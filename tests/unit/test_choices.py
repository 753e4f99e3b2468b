"""Unit tests for choice matching"""

import pytest

from wasifu.core.types import Choice
from wasifu.validation.choices import find_choice, normalize, to_choices

LANGUAGES = [
    Choice(value="SW", label="Kiswahili", synonyms=("Swahili",)),
    Choice(value="EN", label="English", synonyms=("Kingereza",)),
]


def test_normalize_trims_collapses_and_casefolds():
    assert normalize("  Uasin   Gishu \n") == "uasin gishu"


def test_to_choices_uses_label_as_value():
    choices = to_choices(["Sub 1", "ub"])

    assert [c.value for c in choices] == ["Sub 1", "ub"]
    assert [c.label for c in choices] == ["Sub 1", "ub"]


@pytest.mark.parametrize(
    "reply,expected",
    [
        ("English", "EN"),
        ("  english ", "EN"),
        ("KISWAHILI", "SW"),
        ("sw", "SW"),
        ("swahili", "SW"),
        ("Kingereza", "EN"),
        ("1", "SW"),
        ("2.", "EN"),
        ("(2)", "EN"),
        ("Englsh", "EN"),
    ],
)
def test_find_choice_matches(reply, expected):
    """
    GIVEN the language choice set
    WHEN a reply matches by label, value, synonym, ordinal or close spelling
    THEN the corresponding choice is returned
    """
    # Act
    choice = find_choice(reply, LANGUAGES)

    # Assert
    assert choice is not None
    assert choice.value == expected


@pytest.mark.parametrize("reply", ["French", "3", "0", "", "   ", None])
def test_find_choice_rejects(reply):
    """
    GIVEN the language choice set
    WHEN a reply matches nothing or an out-of-range ordinal
    THEN None is returned
    """
    assert find_choice(reply, LANGUAGES) is None


def test_find_choice_with_empty_choice_set():
    assert find_choice("anything", []) is None


def test_exact_label_wins_over_ordinal():
    """
    GIVEN choices whose labels are digits
    WHEN the reply equals a label
    THEN the label match is used, not the position
    """
    # Arrange
    choices = to_choices(["2", "1"])

    # Act
    choice = find_choice("1", choices)

    # Assert
    assert choice is not None
    assert choice.label == "1"


def test_ambiguous_fuzzy_match_is_rejected():
    """
    GIVEN two labels that are both close to the reply
    WHEN fuzzy matching cannot separate them
    THEN no choice is returned
    """
    # Arrange
    choices = to_choices(["Kisumu East", "Kisumu West"])

    # Act
    choice = find_choice("Kisumu Est", choices)

    # Assert
    assert choice is None


def test_returned_choice_is_a_member_of_the_set():
    choices = to_choices(["Westlands", "Kasarani", "Embakasi East"])

    choice = find_choice("embakasi  east", choices)

    assert choice in choices


@pytest.mark.parametrize("reply", ["Sub 2", "Sub 11", "Sub", "sub one"])
def test_near_miss_ward_is_not_bound(reply):
    """
    GIVEN the ward choice set
    WHEN the reply names a ward that is not offered
    THEN no choice is returned, so the prompt is re-issued
    """
    assert find_choice(reply, to_choices(["Sub 1", "ub"])) is None


def test_fuzzy_match_keeps_matching_numbers():
    choices = to_choices(["Sub 1", "Sub 2"])

    choice = find_choice("Sub2", choices)

    assert choice is not None
    assert choice.label == "Sub 2"
