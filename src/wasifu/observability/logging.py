"""Logging setup for Wasifu and a per-conversation logger adapter."""

import logging
import logging.config
from collections.abc import MutableMapping
from typing import Any

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(conversation_id)s %(message)s"

# Rotating file limits for the JSON log
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def setup_logging(level: str = "INFO", json_file: str | None = None) -> None:
    """
    Configure the ``wasifu`` logger tree.

    Console output is plain text. When ``json_file`` is given, the same
    records also go to a rotating file as JSON lines, with
    ``conversation_id`` as its own field so turns can be grepped per user.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_file: Optional path of the JSON log file
    """
    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "plain",
            "level": level,
        },
    }
    if json_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": json_file,
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": LOG_BACKUPS,
            "formatter": "json",
            "level": level,
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
                "json": {
                    "()": "pythonjsonlogger.json.JsonFormatter",
                    "format": JSON_FORMAT,
                },
            },
            "handlers": handlers,
            "loggers": {
                "wasifu": {
                    "handlers": list(handlers),
                    "level": level,
                    "propagate": False,
                },
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
        }
    )


class ConversationLogger(logging.LoggerAdapter):
    """Tags every record with the conversation it belongs to.

    The id is prefixed to the message for console readers and stored as the
    ``conversation_id`` record attribute for the JSON formatter.
    """

    def __init__(self, logger: logging.Logger, conversation_id: str):
        super().__init__(logger, {"conversation_id": conversation_id})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        conversation_id = self.extra["conversation_id"]  # type: ignore[index]
        kwargs["extra"] = {**kwargs.get("extra", {}), "conversation_id": conversation_id}
        return f"[{conversation_id}] {msg}", kwargs
