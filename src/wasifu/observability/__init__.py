"""Observability module for Wasifu."""

from wasifu.observability.logging import ConversationLogger, setup_logging

__all__ = ["ConversationLogger", "setup_logging"]
