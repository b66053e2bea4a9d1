"""Client State ORM — single-row table holding what survives a restart.

Invariants:
    - At most one row, id == CLIENT_STATE_ID
    - token is the opaque bearer credential; holder_document and instrument_id are the
      last holder queried and the last instrument selected
    - Balances, instruments and statements are never persisted
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bankard.db.base import Base

CLIENT_STATE_ID = 1


class ClientState(Base):
    __tablename__ = "client_state"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, default=CLIENT_STATE_ID,
    )
    token: Mapped[str | None] = mapped_column(Text, nullable=True)
    holder_document: Mapped[str | None] = mapped_column(String(18), nullable=True)
    instrument_id: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
