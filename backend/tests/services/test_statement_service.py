"""Statement Service — tests for statement lookup by current selection.

Tests cover:
    - No selection → None and no gateway call
    - The account is read from the selection at call time
"""

from decimal import Decimal

from bankard.core.domain_types import Operation
from bankard.schemas.statement import Statement
from bankard.services.instrument_directory import InstrumentDirectory
from bankard.services.statement_service import StatementService

from tests.fakes import make_instrument

HOLDER = "12345678909"


async def test_no_selection_returns_none(scripted_gateway):
    service = StatementService(scripted_gateway, InstrumentDirectory(scripted_gateway))
    assert await service.for_selection() is None
    assert scripted_gateway.calls == []


async def test_follows_selection_changes(scripted_gateway):
    scripted_gateway.script(
        Operation.LIST_INSTRUMENTS_BY_HOLDER, HOLDER,
        [make_instrument(1, 10), make_instrument(2, 20)],
    )
    scripted_gateway.script(
        Operation.GET_STATEMENT, 10, Statement(account_id=10, balance=Decimal("1")),
    )
    scripted_gateway.script(
        Operation.GET_STATEMENT, 20, Statement(account_id=20, balance=Decimal("2")),
    )
    directory = InstrumentDirectory(scripted_gateway)
    service = StatementService(scripted_gateway, directory)
    await directory.load_for_holder(HOLDER)

    first = await service.for_selection()
    directory.select(2)
    second = await service.for_selection()

    assert first.account_id == 10
    assert second.account_id == 20
    assert scripted_gateway.calls_for(Operation.GET_STATEMENT) == [
        {"account_id": 10}, {"account_id": 20},
    ]
