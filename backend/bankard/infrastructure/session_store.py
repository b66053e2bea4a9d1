"""SQL Session Store — SQLAlchemy-backed CredentialStore and SelectionStore.

Invariants:
    - Reads on an empty table return None values, never raise
    - clear_token leaves the selection untouched and vice versa
    - Storage failures surface as StorageError

Design Decisions:
    - Single-row upsert via session.get + add: portable across SQLite and PostgreSQL
"""

from bankard.core.domain_types import HolderDocument, InstrumentId
from bankard.infrastructure.database import DatabaseSessionManager
from bankard.models.client_state import CLIENT_STATE_ID, ClientState


class SqlSessionStore:
    """Persists the credential and last selection in the client_state table."""

    def __init__(self, db: DatabaseSessionManager):
        self.db = db

    async def _read(self) -> ClientState | None:
        async with self.db.session() as session:
            return await session.get(ClientState, CLIENT_STATE_ID)

    async def _write(self, **fields: object) -> None:
        async with self.db.session() as session:
            row = await session.get(ClientState, CLIENT_STATE_ID)
            if row is None:
                row = ClientState(id=CLIENT_STATE_ID)
                session.add(row)
            for name, value in fields.items():
                setattr(row, name, value)
            await session.commit()

    # --- CredentialStore ------------------------------------------------------

    async def get_token(self) -> str | None:
        row = await self._read()
        return row.token if row else None

    async def set_token(self, token: str) -> None:
        await self._write(token=token)

    async def clear_token(self) -> None:
        await self._write(token=None)

    # --- SelectionStore -------------------------------------------------------

    async def get_selection(
        self,
    ) -> tuple[HolderDocument | None, InstrumentId | None]:
        row = await self._read()
        if row is None:
            return None, None
        holder = HolderDocument(row.holder_document) if row.holder_document else None
        instrument = (
            InstrumentId(row.instrument_id) if row.instrument_id is not None else None
        )
        return holder, instrument

    async def set_selection(
        self,
        holder_document: HolderDocument | None,
        instrument_id: InstrumentId | None,
    ) -> None:
        await self._write(holder_document=holder_document, instrument_id=instrument_id)

    async def clear_selection(self) -> None:
        await self._write(holder_document=None, instrument_id=None)
