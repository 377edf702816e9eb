import itertools

import pytest

from services.journey_engine.session import JourneySession
from services.journey_engine.store import SessionStore
from src.services.storage import InMemorySessionStorage

# Fixed epoch ms base so timestamps are predictable in assertions
CLOCK_START_MS = 1_700_000_000_000


@pytest.fixture
def clock():
    """A deterministic clock that advances one second per call."""
    ticks = itertools.count()
    return lambda: CLOCK_START_MS + next(ticks) * 1000


@pytest.fixture
def session(clock) -> JourneySession:
    return JourneySession(session_id="test-session", clock=clock)


@pytest.fixture
def memory_storage() -> InMemorySessionStorage:
    return InMemorySessionStorage()


@pytest.fixture
def store(memory_storage) -> SessionStore:
    return SessionStore(storage=memory_storage, key_prefix="journey-test")
