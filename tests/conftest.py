"""Shared fixtures for Wasifu tests.

Everything runs against the packaged county data and prompt catalogs with
an in-memory store, so tests are deterministic and need no services.
"""

import pytest
import pytest_asyncio
from langgraph.store.memory import InMemoryStore

from wasifu.config.models import FlowSettings, WasifuConfig
from wasifu.core.constants import Language
from wasifu.flow.intake import FlowResources, build_intake_sequencer
from wasifu.localization.catalog import LocalizationTable
from wasifu.reference.counties import load_counties
from wasifu.runtime.loop import IntakeRuntime
from wasifu.runtime.store import SessionStore


@pytest.fixture(scope="session")
def counties():
    """Packaged county reference data."""
    return load_counties()


@pytest.fixture(scope="session")
def localization():
    """Packaged prompt catalogs."""
    return LocalizationTable.load()


@pytest.fixture(scope="session")
def en(localization):
    return localization.for_language(Language.EN)


@pytest.fixture(scope="session")
def sw(localization):
    return localization.for_language(Language.SW)


@pytest.fixture
def make_sequencer(counties, localization):
    """Build an intake sequencer with FlowSettings overrides."""

    def _make(**flow_overrides):
        settings = FlowSettings(**flow_overrides)
        return build_intake_sequencer(
            FlowResources(localization=localization, counties=counties, settings=settings)
        )

    return _make


@pytest.fixture
def sequencer(make_sequencer):
    """Extended-flow sequencer with default settings."""
    return make_sequencer()


@pytest.fixture
def session_store():
    return SessionStore(InMemoryStore())


@pytest_asyncio.fixture
async def runtime(session_store):
    """Initialized runtime over an in-memory store."""
    async with IntakeRuntime(WasifuConfig(), session_store) as rt:
        yield rt
