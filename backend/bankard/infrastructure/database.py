"""Database Session Manager — async engine and sessions with automatic rollback.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to StorageError (core/errors.py)
    - create_schema() is idempotent (create_all skips existing tables)

Design Decisions:
    - One manager per BankingClient, injected into the store: no module-level singleton
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from bankard.core.errors import StorageError
from bankard.db.base import Base
import bankard.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with rollback and health checks."""

    def __init__(self, database_url: str):
        # parameters hold the bearer token; keep them out of exception text and logs
        self.engine = create_async_engine(
            database_url, pool_pre_ping=True, hide_parameters=True,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_schema(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Client state schema creation failed: {type(e).__name__}")
            raise StorageError("create_schema", cause=e)

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            stage = _failed_stage(e)
            logger.error(
                f"Client state {stage} failed: {type(e).__name__}",
                extra={"error_code": "STORAGE_ERROR"},
            )
            raise StorageError(stage, cause=e)
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when the store answers a trivial query."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except StorageError as e:
            logger.warning(f"Client state store unavailable: {e.context.detail}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# most specific first: IntegrityError and OperationalError subclass DBAPIError
_STAGES: tuple[tuple[type[SQLAlchemyError], str], ...] = (
    (IntegrityError, "commit"),
    (OperationalError, "execute"),
    (DBAPIError, "query"),
)


def _failed_stage(error: SQLAlchemyError) -> str:
    for error_type, stage in _STAGES:
        if isinstance(error, error_type):
            return stage
    return "session"
