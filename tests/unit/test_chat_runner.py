"""Unit tests for the interactive chat runner"""

from contextlib import asynccontextmanager

import pytest
import yaml
from langgraph.store.memory import InMemoryStore
from rich.console import Console

from wasifu.cli.chat_runner import ChatConfig, ChatRunner, ConsoleMessageSink
from wasifu.core.errors import ReferenceDataError
from wasifu.core.types import OutboundTurn


@pytest.fixture
def store_events(monkeypatch):
    """Replace open_store with one that records when it opens and closes."""
    events = []

    @asynccontextmanager
    async def tracking_store(backend, path):
        events.append("open")
        try:
            yield InMemoryStore()
        finally:
            events.append("close")

    monkeypatch.setattr("wasifu.cli.chat_runner.open_store", tracking_store)
    return events


def write_config(tmp_path, settings):
    path = tmp_path / "wasifu.yaml"
    path.write_text(yaml.safe_dump({"version": "1.0", "settings": settings}), encoding="utf-8")
    return path


@pytest.mark.asyncio
async def test_setup_failure_closes_store(tmp_path, store_events):
    """
    GIVEN a config whose reference data file is missing
    WHEN the chat runner sets up
    THEN the error propagates and the store it opened is closed again
    """
    # Arrange
    config = write_config(tmp_path, {"reference_data": {"path": "missing.json"}})
    runner = ChatRunner(ChatConfig(config_path=config))

    # Act & Assert
    with pytest.raises(ReferenceDataError):
        await runner.setup()

    assert store_events == ["open", "close"]
    assert runner.runtime is None


@pytest.mark.asyncio
async def test_setup_and_cleanup(tmp_path, store_events):
    # Arrange
    log_file = tmp_path / "wasifu.log"
    config = write_config(tmp_path, {"logging": {"json_file": "wasifu.log"}})

    # Act
    async with ChatRunner(ChatConfig(config_path=config, thread_id="cli-test")) as runner:
        turn = await runner.runtime.process_message("hi", user_id=runner.thread_id)
        assert store_events == ["open"]

    # Assert
    assert turn.choices == ["Kiswahili", "English"]
    assert store_events == ["open", "close"]
    assert log_file.exists()


@pytest.mark.asyncio
async def test_console_sink_prints_turn():
    # Arrange
    console = Console(record=True, width=120)
    sink = ConsoleMessageSink(console)
    turn = OutboundTurn(messages=["Thanks Amina."], prompt="Which ward?", choices=["Sub 1", "ub"])

    # Act
    await sink.send("cli-test", turn)

    # Assert
    text = console.export_text()
    assert "Thanks Amina." in text
    assert "Which ward?" in text
    assert "1. Sub 1" in text
    assert "2. ub" in text
