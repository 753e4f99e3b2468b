"""Reply validation for Wasifu"""

# Import validators to auto-register them
from wasifu.validation import validators  # noqa: F401
from wasifu.validation.choices import find_choice, normalize, to_choices
from wasifu.validation.registry import ValidatorRegistry

__all__ = ["ValidatorRegistry", "find_choice", "normalize", "to_choices"]
