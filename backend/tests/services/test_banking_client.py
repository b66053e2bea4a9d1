"""Integration Tests: BankingClient — end-to-end flows in fixture mode.

Invariants:
    - Fixture mode exercises the full stack (gateway, parsers, directory, aggregator)
      without a network
    - Persistence tests use a per-test SQLite file under tmp_path

Design Decisions:
    - Real FixtureBackend with zero latency instead of mocks: the flows below are the
      ones the presentation layer drives
"""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from bankard.config import Settings
from bankard.core.domain_types import LoadState
from bankard.core.errors import BadRequestError, NotFoundError, StorageError
from bankard.infrastructure.fixtures import (
    FIXTURE_HOLDER_DOCUMENT,
    FIXTURE_TOKEN,
    FixtureBackend,
)
from bankard.infrastructure.http_client import BankardHttpClient
from bankard.services.banking_client import BankingClient
from bankard.services.gateway import DataSourceGateway
from bankard.services.session_holder import SessionHolder

from tests.fakes import InMemoryStore


# -- Helpers -------------------------------------------------------------------

def _settings(tmp_path=None) -> Settings:
    url = (
        f"sqlite+aiosqlite:///{tmp_path / 'client.db'}"
        if tmp_path is not None
        else "sqlite+aiosqlite:///:memory:"
    )
    return Settings(use_fixtures=True, fixture_latency_ms=0, database_url=url)


@pytest.fixture
async def client():
    async with await BankingClient.from_settings(_settings(), persist=False) as c:
        yield c


# -- Flows ---------------------------------------------------------------------

async def test_login_sets_session(client):
    response = await client.login("123.456.789-09", "1234")
    assert response.token == FIXTURE_TOKEN
    assert client.session.current() == FIXTURE_TOKEN


async def test_load_balances_and_statement(client):
    await client.login(FIXTURE_HOLDER_DOCUMENT, "1234")
    state = await client.load_instruments("123.456.789-09")

    assert state.load_state is LoadState.LOADED
    assert [i.instrument_id for i in state.instruments] == [
        45500675, 45500676, 45500677, 45500678,
    ]
    assert state.selection.instrument_id == 45500675
    assert state.selected_account_id == 12619892

    summary = await client.refresh_balances()
    assert summary.account_ids == [12619892, 98765431, 45678901]
    assert summary.total == Decimal("18520.75")
    assert summary.failed_count == 0

    statement = await client.statement()
    assert statement.account_id == 12619892
    assert statement.balance == Decimal("5088.70")


async def test_statement_follows_selection(client):
    await client.load_instruments(FIXTURE_HOLDER_DOCUMENT)
    assert await client.select_instrument(45500677)
    statement = await client.statement()
    assert statement.account_id == 45678901


async def test_activate_pending_card_adds_it_to_directory(client):
    await client.load_instruments(FIXTURE_HOLDER_DOCUMENT)
    state = await client.activate_instrument(45500681, "Viagem 2", "1234")
    card = state.find(45500681)
    assert card is not None
    assert card.alias == "Viagem 2"
    assert state.selection.instrument_id == 45500675


async def test_activate_already_active_card_is_bad_request(client):
    await client.load_instruments(FIXTURE_HOLDER_DOCUMENT)
    with pytest.raises(BadRequestError):
        await client.activate_instrument(45500675, "Again", "1234")


async def test_block_selected_card_moves_selection(client):
    await client.load_instruments(FIXTURE_HOLDER_DOCUMENT)
    state = await client.block_instrument(45500675)
    assert state.find(45500675) is None
    assert state.selection.instrument_id == 45500676
    assert state.selected_account_id == 98765431

    state = await client.unblock_instrument(45500675)
    assert state.find(45500675) is not None
    assert state.selection.instrument_id == 45500676


async def test_block_unknown_card_is_not_found(client):
    with pytest.raises(NotFoundError):
        await client.block_instrument(1)


async def test_logout_clears_everything(client):
    await client.login(FIXTURE_HOLDER_DOCUMENT, "1234")
    await client.load_instruments(FIXTURE_HOLDER_DOCUMENT)
    await client.refresh_balances()

    await client.logout()

    assert client.session.current() is None
    assert client.directory.state.load_state is LoadState.IDLE
    assert client.directory.state.selection is None
    assert client.aggregator.summary.entries == {}
    assert await client.statement() is None


# -- Persistence ---------------------------------------------------------------

async def test_restore_rehydrates_session_and_selection(tmp_path):
    async with await BankingClient.from_settings(_settings(tmp_path)) as first:
        await first.login(FIXTURE_HOLDER_DOCUMENT, "1234")
        await first.load_instruments(FIXTURE_HOLDER_DOCUMENT)
        await first.select_instrument(45500677)

    async with await BankingClient.from_settings(_settings(tmp_path)) as second:
        state = await second.restore()
        assert second.session.current() == FIXTURE_TOKEN
        assert state.holder_document == FIXTURE_HOLDER_DOCUMENT
        assert state.selection.instrument_id == 45500677
        assert state.selected_account_id == 45678901


async def test_restore_after_logout_loads_nothing(tmp_path):
    async with await BankingClient.from_settings(_settings(tmp_path)) as first:
        await first.login(FIXTURE_HOLDER_DOCUMENT, "1234")
        await first.load_instruments(FIXTURE_HOLDER_DOCUMENT)
        await first.logout()

    async with await BankingClient.from_settings(_settings(tmp_path)) as second:
        state = await second.restore()
        assert not second.session.is_authenticated
        assert state.load_state is LoadState.IDLE


async def test_restore_without_store_is_noop(client):
    state = await client.restore()
    assert state.load_state is LoadState.IDLE


async def test_logout_clears_memory_even_when_store_fails():
    store = InMemoryStore()
    store.clear_token = AsyncMock(side_effect=StorageError("commit"))
    session = SessionHolder(store)
    gateway = DataSourceGateway(
        session, BankardHttpClient("https://api.test"), FixtureBackend(latency_ms=0),
        login_base_url="https://login.test", use_fixtures=True,
    )
    async with BankingClient(session, gateway, store=store) as client:
        await client.login(FIXTURE_HOLDER_DOCUMENT, "1234")
        await client.load_instruments(FIXTURE_HOLDER_DOCUMENT)
        await client.refresh_balances()

        with pytest.raises(StorageError):
            await client.logout()

        assert client.session.current() is None
        assert client.directory.state.load_state is LoadState.IDLE
        assert client.directory.state.instruments == ()
        assert client.aggregator.summary.entries == {}
        assert await store.get_selection() == (None, None)
