"""Balance State — tests for the pure aggregation transitions.

Tests cover:
    - Distinct accounts in first-seen order
    - Counts and totals over resolved entries only
    - Idempotent re-application of the same result
    - Stale generations and foreign accounts leave the summary unchanged
    - reset() empties the summary under a new generation
"""

from decimal import Decimal

from bankard.core.balance_state import (
    BalanceSummary,
    apply_failure,
    apply_success,
    distinct_accounts,
    reset,
    start_run,
)
from bankard.core.domain_types import BalanceStatus
from bankard.core.errors import ServerError

from tests.fakes import make_instrument, make_snapshot


def test_distinct_accounts_deduplicates_in_first_seen_order():
    instruments = [
        make_instrument(1, 30), make_instrument(2, 10),
        make_instrument(3, 30), make_instrument(4, 20),
    ]
    assert distinct_accounts(instruments) == [30, 10, 20]


def test_start_run_marks_every_account_pending():
    summary = start_run(BalanceSummary(), [1, 2, 3])
    assert summary.generation == 1
    assert summary.pending_count == 3
    assert not summary.is_complete
    assert summary.total == Decimal("0")


def test_total_sums_resolved_only():
    summary = start_run(BalanceSummary(), [1, 2, 3])
    gen = summary.generation
    summary = apply_success(summary, gen, 1, make_snapshot(1, "100.10"))
    summary = apply_success(summary, gen, 2, make_snapshot(2, "0.20"))
    summary = apply_failure(summary, gen, 3, ServerError())
    assert summary.total == Decimal("100.30")
    assert summary.resolved_count == 2
    assert summary.failed_count == 1
    assert summary.is_complete
    assert summary.has_error


def test_counts_always_add_up():
    summary = start_run(BalanceSummary(), [1, 2, 3, 4])
    summary = apply_success(summary, summary.generation, 2, make_snapshot(2, "1"))
    assert (
        summary.pending_count + summary.resolved_count + summary.failed_count
        == len(summary.entries)
    )


def test_reapplying_same_result_is_idempotent():
    summary = start_run(BalanceSummary(), [1])
    once = apply_success(summary, summary.generation, 1, make_snapshot(1, "5"))
    twice = apply_success(once, once.generation, 1, make_snapshot(1, "5"))
    assert twice is once
    assert twice.total == Decimal("5")


def test_stale_result_is_discarded():
    first = start_run(BalanceSummary(), [1])
    second = start_run(first, [1])
    after = apply_success(second, first.generation, 1, make_snapshot(1, "9"))
    assert after is second
    assert after.entry(1).status is BalanceStatus.PENDING


def test_result_for_foreign_account_is_discarded():
    summary = start_run(BalanceSummary(), [1])
    assert apply_success(summary, summary.generation, 2, make_snapshot(2, "1")) is summary


def test_apply_does_not_mutate_previous_summary():
    summary = start_run(BalanceSummary(), [1])
    apply_success(summary, summary.generation, 1, make_snapshot(1, "3"))
    assert summary.entry(1).status is BalanceStatus.PENDING


def test_entry_exposes_available_and_error():
    summary = start_run(BalanceSummary(), [1, 2])
    err = ServerError()
    summary = apply_success(summary, summary.generation, 1, make_snapshot(1, "7.5"))
    summary = apply_failure(summary, summary.generation, 2, err)
    assert summary.entry(1).available == Decimal("7.5")
    assert summary.entry(2).available is None
    assert summary.entry(2).error is err


def test_reset_empties_and_bumps_generation():
    summary = start_run(BalanceSummary(), [1])
    after = reset(summary)
    assert after.entries == {}
    assert after.generation == summary.generation + 1
    assert after.total == Decimal("0")
