"""Account Schemas — balance snapshots and the account shapes the backend returns.

Invariants:
    - Money is Decimal end to end (backend floats parsed via their string form)
    - BalanceSnapshot is ephemeral: superseded by every refetch, never merged

Design Decisions:
    - AccountDetails mirrors GET /discovery/v2/Account/{id}; the aggregator only needs
      the snapshot projection, so to_snapshot() is the single conversion point
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from bankard.core.domain_types import AccountId, AccountStatus, ProgramType


class BalanceSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_id: AccountId = Field(alias="account")
    available: Decimal
    as_of: datetime | None = Field(None, alias="updatedAt")


class AccountDetails(BaseModel):
    """Full account record, including the available balance."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document: str
    name: str
    program_id: int = Field(alias="programId")
    program_name: str = Field(alias="programName")
    program_type: ProgramType = Field(alias="programType")
    status: AccountStatus
    available: Decimal
    creation_date: datetime | None = Field(None, alias="creationDate")
    customer_id: int = Field(alias="customerId")

    @property
    def is_active(self) -> bool:
        return self.status is AccountStatus.NORMAL

    def to_snapshot(self, account_id: AccountId) -> BalanceSnapshot:
        # the details endpoint carries no timestamp of its own
        return BalanceSnapshot(account_id=account_id, available=self.available)


class AccountListItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_id: AccountId = Field(alias="account")
    program_id: int = Field(alias="programId")
    last_four_digits: str = Field(alias="lastFourDigits")


class AccountAvailablesPage(BaseModel):
    """Paginated GET /v1/account/availables response."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_available: Decimal = Field(alias="totalAvailable")
    accounts: list[BalanceSnapshot]
    total_count: int = Field(alias="totalCount")
    page: int = Field(ge=1)
    page_size: int = Field(alias="pageSize", ge=1)
