"""Unit tests for server error sanitization"""

import re

from wasifu.core.errors import (
    ConfigError,
    PersistenceError,
    ReferenceInconsistencyError,
    StateError,
)
from wasifu.server.errors import (
    DEFAULT_ERROR_MESSAGE,
    create_error_reference,
    create_error_response,
    get_http_status_for_exception,
    get_safe_error_message,
)


def test_error_reference_format():
    assert re.fullmatch(r"ERR-[0-9A-F]{8}", create_error_reference())


def test_error_references_are_unique():
    assert len({create_error_reference() for _ in range(50)}) == 50


def test_safe_messages_hide_details():
    error = StateError("cursor=-7 for user 0712345678")

    message = get_safe_error_message(error)

    assert "0712345678" not in message
    assert message == "Session state error. Please start a new conversation."


def test_unknown_exception_gets_default_message():
    assert get_safe_error_message(KeyError("x")) == DEFAULT_ERROR_MESSAGE


def test_status_mapping():
    assert get_http_status_for_exception(PersistenceError("down")) == 503
    assert get_http_status_for_exception(ConfigError("bad")) == 500
    assert get_http_status_for_exception(ReferenceInconsistencyError("gone")) == 500
    assert get_http_status_for_exception(RuntimeError("boom")) == 500


def test_create_error_response():
    exc = create_error_response(PersistenceError("down"), "user-1", "/chat")

    assert exc.status_code == 503
    assert exc.detail["reference"].startswith("ERR-")
    assert "down" not in exc.detail["error"]
