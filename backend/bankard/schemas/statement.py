"""Statement Schemas — account statement and its transactions."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from bankard.core.domain_types import AccountId, TransactionStatus, TransactionType


class Transaction(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    account_id: AccountId = Field(alias="accountId")
    type: TransactionType
    amount: Decimal  # negative for debits
    description: str
    merchant_name: str | None = Field(None, alias="merchantName")
    date: datetime
    status: TransactionStatus
    category: str | None = None


class Statement(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_id: AccountId = Field(alias="accountId")
    balance: Decimal
    transactions: list[Transaction] = Field(default_factory=list)
