"""Banking Client — composition root wiring session, gateway, directory and aggregator.

Invariants:
    - One SessionHolder, one DataSourceGateway per client; every service shares them
    - logout() clears the session, the directory, the aggregator and persisted selection
    - Instrument actions (activate, block, unblock) refresh the directory afterwards,
      since the backend is the only source of instrument state
    - The last holder document and selected instrument are persisted after every
      load/select that changes them (when a store is attached)

Design Decisions:
    - from_settings() is the single place that reads Settings and builds infrastructure
    - Async context manager closes the HTTP client and disposes the DB engine
    - restore() re-selects the persisted instrument through select(), so a card that
      disappeared is silently ignored and the auto-select rule stands
"""

import logging

import httpx

from bankard.config import Settings, get_settings
from bankard.core.balance_state import BalanceSummary
from bankard.core.directory_state import DirectoryState
from bankard.core.domain_types import HolderDocument, InstrumentId, Operation
from bankard.core.tax_id import only_digits
from bankard.infrastructure.database import DatabaseSessionManager
from bankard.infrastructure.fixtures import FixtureBackend
from bankard.infrastructure.http_client import BankardHttpClient
from bankard.infrastructure.observability import setup_logging
from bankard.infrastructure.session_store import SqlSessionStore
from bankard.schemas.auth import AuthResponse
from bankard.schemas.statement import Statement
from bankard.services.balance_aggregator import BalanceAggregator
from bankard.services.gateway import DataSourceGateway
from bankard.services.instrument_directory import InstrumentDirectory
from bankard.services.session_holder import SessionHolder
from bankard.services.statement_service import StatementService

logger = logging.getLogger(__name__)


class BankingClient:
    """Facade the presentation layer talks to."""

    def __init__(
        self,
        session: SessionHolder,
        gateway: DataSourceGateway,
        store: SqlSessionStore | None = None,
        db: DatabaseSessionManager | None = None,
    ):
        self.session = session
        self.gateway = gateway
        self.directory = InstrumentDirectory(gateway)
        self.aggregator = BalanceAggregator(gateway)
        self.statements = StatementService(gateway, self.directory)
        self.store = store
        self.db = db
        self._persisted: tuple[HolderDocument | None, InstrumentId | None] = (None, None)

    @classmethod
    async def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        persist: bool = True,
        configure_logging: bool = False,
    ) -> "BankingClient":
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings.log_level, settings.log_format)

        db = store = None
        if persist:
            db = DatabaseSessionManager(settings.database_url)
            await db.create_schema()
            store = SqlSessionStore(db)

        session = SessionHolder(store)
        http = BankardHttpClient(
            settings.api_base_url,
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
            locale=settings.locale,
        )
        gateway = DataSourceGateway(
            session,
            http,
            FixtureBackend(settings.fixture_latency_ms),
            login_base_url=settings.login_base_url,
            use_fixtures=settings.use_fixtures,
            locale=settings.locale,
        )
        logger.info(
            "Banking client ready",
            extra={"mode": "fixtures" if settings.use_fixtures else "network"},
        )
        return cls(session, gateway, store=store, db=db)

    async def __aenter__(self) -> "BankingClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.gateway.http.aclose()
        if self.db is not None:
            await self.db.dispose()

    def set_use_fixtures(self, enabled: bool) -> None:
        self.gateway.set_use_fixtures(enabled)

    # --- Session --------------------------------------------------------------

    async def login(self, document: str, password: str) -> AuthResponse:
        """Authenticate and keep the token. Raises BankardError on failure."""
        response = await self.gateway.call(
            Operation.AUTHENTICATE, login=document, password=password,
        )
        await self.session.set(response.token)
        return response

    async def logout(self) -> None:
        """Drop in-memory state first; store failures surface after it is gone."""
        self.directory.clear()
        self.aggregator.reset()
        self._persisted = (None, None)
        try:
            await self.session.clear()
        finally:
            if self.store is not None:
                await self.store.clear_selection()
        logger.info("Logged out")

    async def restore(self) -> DirectoryState:
        """Rehydrate the credential and, when possible, the last holder and selection."""
        if self.store is None:
            return self.directory.state
        await self.session.restore()
        holder, instrument_id = await self.store.get_selection()
        self._persisted = (holder, instrument_id)
        if holder is None or not self.session.is_authenticated:
            return self.directory.state
        await self.directory.load_for_holder(holder)
        if instrument_id is not None:
            self.directory.select(instrument_id)
        await self._persist_selection()
        return self.directory.state

    # --- Instruments ----------------------------------------------------------

    async def load_instruments(self, document: str) -> DirectoryState:
        state = await self.directory.load_for_holder(HolderDocument(only_digits(document)))
        await self._persist_selection()
        return state

    async def select_instrument(self, instrument_id: InstrumentId) -> bool:
        selected = self.directory.select(instrument_id)
        await self._persist_selection()
        return selected

    async def activate_instrument(
        self, instrument_id: InstrumentId, alias: str, password: str,
    ) -> DirectoryState:
        await self.gateway.call(
            Operation.ACTIVATE_INSTRUMENT,
            instrument_id=instrument_id, alias=alias, password=password,
        )
        return await self._refresh_directory()

    async def block_instrument(self, instrument_id: InstrumentId) -> DirectoryState:
        await self.gateway.call(Operation.BLOCK_INSTRUMENT, instrument_id=instrument_id)
        return await self._refresh_directory()

    async def unblock_instrument(self, instrument_id: InstrumentId) -> DirectoryState:
        await self.gateway.call(Operation.UNBLOCK_INSTRUMENT, instrument_id=instrument_id)
        return await self._refresh_directory()

    # --- Balances & statement -------------------------------------------------

    async def refresh_balances(self) -> BalanceSummary:
        """Aggregate balances over the directory's current instruments."""
        return await self.aggregator.run(self.directory.state.instruments)

    async def statement(self) -> Statement | None:
        return await self.statements.for_selection()

    # --- Internals ------------------------------------------------------------

    async def _refresh_directory(self) -> DirectoryState:
        state = await self.directory.refresh()
        await self._persist_selection()
        return state

    async def _persist_selection(self) -> None:
        if self.store is None:
            return
        state = self.directory.state
        current = (
            state.holder_document,
            state.selection.instrument_id if state.selection else None,
        )
        if current == self._persisted:
            return
        await self.store.set_selection(*current)
        self._persisted = current
