"""Statement Service — statement for the account implied by the current selection.

Invariants:
    - The account is read from the directory's selection at call time, never cached
    - No selection → None, without a gateway call
    - Gateway failures propagate as BankardError (the caller renders them)
"""

import logging

from bankard.core.domain_types import AccountId, Operation
from bankard.core.repository_protocols import Gateway
from bankard.schemas.statement import Statement
from bankard.services.instrument_directory import InstrumentDirectory

logger = logging.getLogger(__name__)


class StatementService:

    def __init__(self, gateway: Gateway, directory: InstrumentDirectory):
        self.gateway = gateway
        self.directory = directory

    async def for_account(self, account_id: AccountId) -> Statement:
        return await self.gateway.call(Operation.GET_STATEMENT, account_id=account_id)

    async def for_selection(self) -> Statement | None:
        account_id = self.directory.state.selected_account_id
        if account_id is None:
            logger.debug("No selected account; skipping statement fetch")
            return None
        return await self.for_account(account_id)
