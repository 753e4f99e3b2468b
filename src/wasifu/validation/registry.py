"""Named validators for free-text replies such as the user's name"""

import logging
from collections.abc import Callable
from threading import Lock

logger = logging.getLogger(__name__)

ReplyValidator = Callable[[str | None], bool]

_validators: dict[str, ReplyValidator] = {}
_validators_lock = Lock()


class ValidatorRegistry:
    """
    Process-wide table of reply validators, keyed by the name used in
    ``settings.flow.name_validator``.

    Registration happens at import time, lookups happen on every free-text
    turn; both go through one lock.
    """

    @classmethod
    def register(cls, name: str) -> Callable[[ReplyValidator], ReplyValidator]:
        """
        Register a reply validator under ``name``.

        Usage:
            @ValidatorRegistry.register("two_words")
            def validate_two_words(value: str | None) -> bool:
                return bool(value) and len(value.split()) >= 2

        Re-registering a name replaces the earlier validator and logs a warning.
        """

        def decorator(func: ReplyValidator) -> ReplyValidator:
            with _validators_lock:
                replaced = name in _validators
                _validators[name] = func
            if replaced:
                logger.warning(
                    f"Reply validator '{name}' replaced",
                    extra={"validator_name": name},
                )
            else:
                logger.debug(
                    f"Registered reply validator '{name}'",
                    extra={"validator_name": name},
                )
            return func

        return decorator

    @classmethod
    def get(cls, name: str) -> ReplyValidator:
        """
        Look up a validator.

        Raises:
            ValueError: If nothing is registered under ``name``
        """
        with _validators_lock:
            validator = _validators.get(name)
        if validator is None:
            raise ValueError(
                f"Reply validator '{name}' not registered. "
                f"Available: {', '.join(cls.list_validators())}"
            )
        return validator

    @classmethod
    def validate(cls, name: str, value: str | None) -> bool:
        """Run the named validator on a reply."""
        return cls.get(name)(value)

    @classmethod
    def list_validators(cls) -> list[str]:
        """Registered validator names, sorted."""
        with _validators_lock:
            return sorted(_validators)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        with _validators_lock:
            return name in _validators
