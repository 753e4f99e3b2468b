"""Core intake errors."""


class WasifuError(Exception):
    """Base class for all Wasifu errors."""

    pass


class ConfigError(WasifuError):
    """Raised when configuration is invalid."""


class ReferenceDataError(WasifuError):
    """Raised when the county reference data cannot be loaded.

    Fatal at startup: no conversation can proceed without reference data.
    """


class FlowError(WasifuError):
    """Raised when the step table is misused (unknown step, runaway turn)."""

    pass


class StepError(FlowError):
    """Raised when a step hits an internal invariant violation."""

    pass


class ReferenceInconsistencyError(StepError):
    """Raised when an accepted answer has no matching reference record."""

    pass


class StateError(WasifuError):
    """Raised when persisted conversation state is unreadable."""

    pass


class PersistenceError(WasifuError):
    """Raised when the session state store fails to read or write."""

    pass

