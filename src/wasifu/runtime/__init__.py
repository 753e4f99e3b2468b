"""Runtime module."""

from wasifu.runtime.loop import IntakeRuntime
from wasifu.runtime.store import SessionStore, open_store

__all__ = ["IntakeRuntime", "SessionStore", "open_store"]
