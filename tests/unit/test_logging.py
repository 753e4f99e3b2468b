"""Unit tests for logging setup and the conversation logger"""

import json
import logging

import pytest

from wasifu.observability import ConversationLogger, setup_logging


@pytest.fixture
def wasifu_logger():
    """Hand back the package logger and undo setup_logging afterwards."""
    root = logging.getLogger("wasifu")
    yield root
    for handler in list(root.handlers):
        handler.close()
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)


def test_conversation_logger_tags_records(caplog):
    log = ConversationLogger(logging.getLogger("tests.conversation"), "user-7")

    with caplog.at_level(logging.INFO, logger="tests.conversation"):
        log.info("Starting conversation")

    record = caplog.records[-1]
    assert record.getMessage() == "[user-7] Starting conversation"
    assert record.conversation_id == "user-7"


def test_conversation_logger_keeps_caller_extra(caplog):
    log = ConversationLogger(logging.getLogger("tests.conversation"), "user-7")

    with caplog.at_level(logging.INFO, logger="tests.conversation"):
        log.info("Turn done", extra={"step": "ward"})

    record = caplog.records[-1]
    assert record.step == "ward"
    assert record.conversation_id == "user-7"


def test_json_file_gets_conversation_field(tmp_path, wasifu_logger):
    """
    GIVEN logging configured with a JSON file
    WHEN a conversation logs a line
    THEN the file holds a JSON record with the conversation id as a field
    """
    # Arrange
    path = tmp_path / "wasifu.log"
    setup_logging("INFO", str(path))

    # Act
    ConversationLogger(logging.getLogger("wasifu.runtime.loop"), "user-7").info("Turn 1 done")
    for handler in wasifu_logger.handlers:
        handler.flush()

    # Assert
    record = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
    assert record["conversation_id"] == "user-7"
    assert record["message"] == "[user-7] Turn 1 done"
    assert record["levelname"] == "INFO"


def test_without_json_file_only_console(wasifu_logger):
    setup_logging("DEBUG")

    assert [type(h) for h in wasifu_logger.handlers] == [logging.StreamHandler]
    assert wasifu_logger.level == logging.DEBUG
    assert not wasifu_logger.propagate
