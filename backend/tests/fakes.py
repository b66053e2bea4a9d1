"""Test Fakes — scripted gateway, in-memory store and value builders.

Invariants:
    - ScriptedGateway pops one scripted outcome per call per (operation, key);
      the last outcome repeats
    - An outcome is a value, an exception instance (raised), or an async callable
      (awaited, then interpreted the same way); the latter lets tests hold a call
      open until they release it
    - Unscripted calls raise AssertionError so missing setup fails loudly

Design Decisions:
    - Flat fakes (no inheritance from production classes): structural typing against
      the Protocols in core/repository_protocols.py
"""

import asyncio
import inspect
from decimal import Decimal
from typing import Any

from bankard.core.domain_types import (
    AccountId,
    InstrumentId,
    InstrumentKind,
    InstrumentStage,
    InstrumentStatus,
    Operation,
)
from bankard.schemas.account import BalanceSnapshot
from bankard.schemas.instrument import Instrument


# -- Builders ------------------------------------------------------------------


def make_instrument(
    instrument_id: int,
    account_id: int,
    status: InstrumentStatus = InstrumentStatus.NORMAL,
    alias: str = "",
) -> Instrument:
    return Instrument(
        instrument_id=InstrumentId(instrument_id),
        account_id=AccountId(account_id),
        program_id=1,
        status=status,
        stage=(
            InstrumentStage.ACTIVE
            if status is InstrumentStatus.NORMAL
            else InstrumentStage.BLOCKED
        ),
        printed_name="TEST HOLDER",
        alias=alias or f"Card {instrument_id}",
        kind=InstrumentKind.PLASTIC,
        last4_digits=f"{instrument_id % 10000:04d}",
        contactless_enabled=True,
    )


def make_snapshot(account_id: int, available: str) -> BalanceSnapshot:
    return BalanceSnapshot(account_id=AccountId(account_id), available=Decimal(available))


async def wait_until(predicate, max_spins: int = 100) -> None:
    """Yield to the loop until predicate() holds."""
    for _ in range(max_spins):
        if predicate():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition not reached")


# -- Gateway -------------------------------------------------------------------


class ScriptedGateway:
    """Fake Gateway keyed by (operation, first param value)."""

    def __init__(self):
        self.calls: list[tuple[Operation, dict[str, Any]]] = []
        self._outcomes: dict[tuple[Operation, Any], list[Any]] = {}

    def script(self, operation: Operation, key: Any, *outcomes: Any) -> None:
        self._outcomes[(operation, key)] = list(outcomes)

    def calls_for(self, operation: Operation) -> list[dict[str, Any]]:
        return [params for op, params in self.calls if op is operation]

    async def call(self, operation: Operation, **params: Any) -> Any:
        key = next(iter(params.values()), None)
        self.calls.append((operation, params))
        queue = self._outcomes.get((operation, key))
        if not queue:
            raise AssertionError(f"unscripted call {operation.value}({params})")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if inspect.iscoroutinefunction(outcome):
            outcome = await outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


# -- Store ---------------------------------------------------------------------


class InMemoryStore:
    """CredentialStore + SelectionStore backed by attributes."""

    def __init__(self, token: str | None = None):
        self.token = token
        self.holder_document = None
        self.instrument_id = None
        self.writes = 0

    async def get_token(self):
        return self.token

    async def set_token(self, token):
        self.token = token
        self.writes += 1

    async def clear_token(self):
        self.token = None
        self.writes += 1

    async def get_selection(self):
        return self.holder_document, self.instrument_id

    async def set_selection(self, holder_document, instrument_id):
        self.holder_document = holder_document
        self.instrument_id = instrument_id
        self.writes += 1

    async def clear_selection(self):
        self.holder_document = None
        self.instrument_id = None
        self.writes += 1
