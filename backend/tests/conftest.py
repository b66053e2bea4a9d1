"""Root conftest — shared test configuration and fixtures.

Invariants:
    - Tests never reach a real backend: fixture latency is zero and every HTTP
      exchange goes through httpx.MockTransport
    - Every test gets its own SessionHolder and FixtureBackend
"""

import os

import pytest

from bankard.infrastructure.fixtures import FixtureBackend
from bankard.services.session_holder import SessionHolder
from tests.fakes import InMemoryStore, ScriptedGateway

# Ensure tests don't accidentally pick up a developer's environment
os.environ.setdefault("BANKARD_USE_FIXTURES", "true")
os.environ.setdefault("BANKARD_FIXTURE_LATENCY_MS", "0")
os.environ.setdefault("BANKARD_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
def session_holder():
    return SessionHolder()


@pytest.fixture
def fixture_backend():
    return FixtureBackend(latency_ms=0)


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway()


@pytest.fixture
def memory_store():
    return InMemoryStore()
