"""Built-in free-text validators"""

from wasifu.validation.registry import ValidatorRegistry


@ValidatorRegistry.register("non_empty")
def validate_non_empty(value: str | None) -> bool:
    """
    Accept any reply with at least one non-whitespace character.

    Args:
        value: Reply text

    Returns:
        True if the reply can be stored verbatim
    """
    return isinstance(value, str) and bool(value.strip())


@ValidatorRegistry.register("letters_only")
def validate_letters_only(value: str | None) -> bool:
    """Accept replies made of letters, spaces, hyphens and apostrophes."""
    if not validate_non_empty(value):
        return False
    return all(ch.isalpha() or ch in " -'" for ch in value.strip())  # type: ignore[union-attr]
