"""Balance State — per-account status of one aggregation run, with pure transitions.

Invariants:
    - One entry per distinct account id referenced by the run's instruments
    - total is the Decimal sum of RESOLVED snapshots only
    - pending + resolved + failed == number of entries
    - Applying the same result twice leaves the summary equal to the first application
    - Results tagged with a superseded generation, or for accounts outside the run,
      return the summary unchanged
    - A new run replaces every entry (no merging of stale and fresh results)

Design Decisions:
    - Frozen dataclasses with copy-on-write entries dict: a reader holding a
      summary never sees it change underneath
    - Distinct accounts kept in first-seen instrument order for stable rendering
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from decimal import Decimal

from bankard.core.domain_types import AccountId, BalanceStatus
from bankard.core.errors import BankardError
from bankard.schemas.account import BalanceSnapshot
from bankard.schemas.instrument import Instrument


@dataclass(frozen=True)
class BalanceEntry:
    account_id: AccountId
    status: BalanceStatus = BalanceStatus.PENDING
    snapshot: BalanceSnapshot | None = None
    error: BankardError | None = None

    @property
    def available(self) -> Decimal | None:
        return self.snapshot.available if self.snapshot else None


@dataclass(frozen=True)
class BalanceSummary:
    """Aggregate view over one run — pure dataclass, no IO."""

    generation: int = 0
    entries: dict[AccountId, BalanceEntry] = field(default_factory=dict)

    @property
    def total(self) -> Decimal:
        return sum(
            (
                e.snapshot.available
                for e in self.entries.values()
                if e.status is BalanceStatus.RESOLVED and e.snapshot is not None
            ),
            Decimal("0"),
        )

    def _count(self, status: BalanceStatus) -> int:
        return sum(1 for e in self.entries.values() if e.status is status)

    @property
    def resolved_count(self) -> int:
        return self._count(BalanceStatus.RESOLVED)

    @property
    def failed_count(self) -> int:
        return self._count(BalanceStatus.FAILED)

    @property
    def pending_count(self) -> int:
        return self._count(BalanceStatus.PENDING)

    @property
    def is_complete(self) -> bool:
        return self.pending_count == 0

    @property
    def has_error(self) -> bool:
        return self.failed_count > 0

    @property
    def account_ids(self) -> list[AccountId]:
        return list(self.entries)

    def entry(self, account_id: AccountId) -> BalanceEntry | None:
        return self.entries.get(account_id)


def distinct_accounts(instruments: Iterable[Instrument]) -> list[AccountId]:
    """Account ids referenced by the instruments, deduplicated, first-seen order."""
    seen: dict[AccountId, None] = {}
    for instrument in instruments:
        seen.setdefault(instrument.account_id, None)
    return list(seen)


def start_run(
    summary: BalanceSummary, account_ids: Iterable[AccountId],
) -> BalanceSummary:
    """New generation with every account PENDING."""
    return BalanceSummary(
        generation=summary.generation + 1,
        entries={a: BalanceEntry(a) for a in account_ids},
    )


def _apply(
    summary: BalanceSummary, generation: int, entry: BalanceEntry,
) -> BalanceSummary:
    if generation != summary.generation:
        return summary
    current = summary.entries.get(entry.account_id)
    if current is None or current == entry:
        return summary
    entries = dict(summary.entries)
    entries[entry.account_id] = entry
    return replace(summary, entries=entries)


def apply_success(
    summary: BalanceSummary,
    generation: int,
    account_id: AccountId,
    snapshot: BalanceSnapshot,
) -> BalanceSummary:
    return _apply(
        summary, generation,
        BalanceEntry(account_id, BalanceStatus.RESOLVED, snapshot=snapshot),
    )


def apply_failure(
    summary: BalanceSummary,
    generation: int,
    account_id: AccountId,
    error: BankardError,
) -> BalanceSummary:
    return _apply(
        summary, generation,
        BalanceEntry(account_id, BalanceStatus.FAILED, error=error),
    )


def reset(summary: BalanceSummary) -> BalanceSummary:
    """Empty summary under a new generation; in-flight results become stale."""
    return BalanceSummary(generation=summary.generation + 1)
