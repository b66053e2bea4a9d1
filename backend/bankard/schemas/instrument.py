"""Instrument Schemas — card value objects and request DTOs.

Invariants:
    - Instrument is immutable (frozen): the client never edits a card in place
    - status is one of InstrumentStatus; only NORMAL instruments are active
    - account_id is the owning account; a selection's account is always derived from it

Design Decisions:
    - Field aliases keep the backend's names (cardId, account, type) off the domain API
    - populate_by_name: fixtures and tests build instruments with Python names
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bankard.core.domain_types import (
    AccountId,
    InstrumentId,
    InstrumentKind,
    InstrumentStage,
    InstrumentStatus,
)


class Instrument(BaseModel):
    """A physical or virtual card owned by a holder."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    instrument_id: InstrumentId = Field(alias="cardId")
    account_id: AccountId = Field(alias="account")
    program_id: int = Field(alias="programId")
    status: InstrumentStatus
    stage: InstrumentStage
    printed_name: str = Field(alias="printedName")
    alias: str = ""
    kind: InstrumentKind = Field(alias="type")
    issuing_date: date | None = Field(None, alias="issuingDate")
    last4_digits: str = Field(alias="last4Digits", pattern=r"^\d{4}$")
    contactless_enabled: bool = Field(False, alias="contactlessEnabled")
    expiration_date: date | None = Field(None, alias="expirationDate")

    @property
    def is_active(self) -> bool:
        return self.status is InstrumentStatus.NORMAL

    @property
    def masked_number(self) -> str:
        return f"**** **** **** {self.last4_digits}"


def filter_active(instruments: list[Instrument]) -> list[Instrument]:
    """Keep NORMAL instruments, preserving backend order."""
    return [i for i in instruments if i.is_active]


# --- Request DTOs -------------------------------------------------------------

class InstrumentActivation(BaseModel):
    """Activation request: alias plus the card password chosen by the holder."""
    model_config = ConfigDict(populate_by_name=True)

    instrument_id: InstrumentId = Field(alias="cardId")
    alias: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=4, max_length=6, repr=False)

    @field_validator("alias")
    @classmethod
    def strip_alias(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("alias cannot be empty or whitespace")
        return v

    @field_validator("password")
    @classmethod
    def password_digits_only(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError("password must contain only digits")
        return v
