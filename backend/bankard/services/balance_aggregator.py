"""Balance Aggregator — concurrent, independently-failing balance fetches per account.

Invariants:
    - One GET_ACCOUNT_BALANCE per distinct account id in the run's instrument snapshot
    - The instrument list is copied at run start; later directory changes do not affect it
    - A failing account is marked FAILED and never aborts its siblings
    - Only the latest run applies results: each result is checked against the run's
      generation at apply-time, and stale results are dropped, not merged
    - Re-applying an identical result leaves the summary unchanged

Design Decisions:
    - asyncio.gather over per-account tasks: I/O-bound interleaving on one loop
    - Each task catches its own BankardError, so gather never short-circuits
    - Superseded runs are not cancelled; their late results are simply ignored
"""

import asyncio
import logging
from collections.abc import Callable, Iterable

from bankard.core import balance_state
from bankard.core.balance_state import BalanceEntry, BalanceSummary
from bankard.core.domain_types import AccountId, Operation
from bankard.core.errors import BankardError
from bankard.core.repository_protocols import Gateway
from bankard.schemas.account import BalanceSnapshot
from bankard.schemas.instrument import Instrument

logger = logging.getLogger(__name__)

SummaryListener = Callable[[BalanceSummary], None]


class BalanceAggregator:
    """Resolves and totals balances for a list of instruments."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self._summary = BalanceSummary()
        self._listeners: list[SummaryListener] = []

    @property
    def summary(self) -> BalanceSummary:
        return self._summary

    def subscribe(self, listener: SummaryListener) -> Callable[[], None]:
        """Register a listener; returns the unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def balance_for(self, account_id: AccountId) -> BalanceEntry | None:
        return self._summary.entry(account_id)

    async def run(self, instruments: Iterable[Instrument]) -> BalanceSummary:
        """Start a new run and wait for all of its fetches to settle.

        Returns the aggregator's summary at that point, which belongs to a newer
        run if one was started meanwhile.
        """
        snapshot = list(instruments)
        account_ids = balance_state.distinct_accounts(snapshot)
        self._commit(balance_state.start_run(self._summary, account_ids))
        generation = self._summary.generation
        logger.info(
            f"Aggregating balances for {len(account_ids)} account(s)",
            extra={"generation": generation},
        )
        await asyncio.gather(
            *(self._fetch(generation, account_id) for account_id in account_ids),
        )
        if generation == self._summary.generation:
            logger.info(
                "Balance aggregation complete",
                extra={
                    "generation": generation,
                    "resolved": self._summary.resolved_count,
                    "failed": self._summary.failed_count,
                },
            )
        return self._summary

    def reset(self) -> None:
        """Drop all statuses (logout); in-flight results become stale."""
        self._commit(balance_state.reset(self._summary))

    def apply_success(
        self, generation: int, account_id: AccountId, snapshot: BalanceSnapshot,
    ) -> bool:
        """Apply one fetched balance. Returns whether the summary changed."""
        return self._apply(
            balance_state.apply_success(self._summary, generation, account_id, snapshot),
            generation, account_id,
        )

    def apply_failure(
        self, generation: int, account_id: AccountId, error: BankardError,
    ) -> bool:
        return self._apply(
            balance_state.apply_failure(self._summary, generation, account_id, error),
            generation, account_id,
        )

    async def _fetch(self, generation: int, account_id: AccountId) -> None:
        try:
            snapshot = await self.gateway.call(
                Operation.GET_ACCOUNT_BALANCE, account_id=account_id,
            )
        except BankardError as e:
            self.apply_failure(generation, account_id, e)
            return
        self.apply_success(generation, account_id, snapshot)

    def _apply(
        self, new_summary: BalanceSummary, generation: int, account_id: AccountId,
    ) -> bool:
        if new_summary is self._summary:
            if generation != self._summary.generation:
                logger.debug(
                    "Discarding stale balance result",
                    extra={"generation": generation, "account_id": account_id},
                )
            return False
        self._commit(new_summary)
        return True

    def _commit(self, new_summary: BalanceSummary) -> None:
        self._summary = new_summary
        for listener in list(self._listeners):
            listener(new_summary)
