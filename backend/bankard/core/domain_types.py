"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - InstrumentId, AccountId wrap backend integers — never pass a bare int across layers
    - HolderDocument is the digits-only tax id used as the instrument query key
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: values match the backend wire format, so pydantic parses them directly
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

InstrumentId = NewType("InstrumentId", int)
AccountId = NewType("AccountId", int)
HolderDocument = NewType("HolderDocument", str)


# ─── Instrument Enums ────────────────────────────────────────────

class InstrumentStatus(str, Enum):
    """Instrument lifecycle status. Only NORMAL instruments are selectable."""
    NORMAL = "NORMAL"
    BLOCKED = "BLOCKED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


class InstrumentStage(str, Enum):
    """Finer-grained activation sub-state reported by the issuer."""
    UNLOCKED_NOT_CODE = "UNLOCKED_NOT_CODE"
    UNLOCKED_CODE = "UNLOCKED_CODE"
    LOCKED = "LOCKED"
    BLOCKED = "BLOCKED"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING_ACTIVATION = "PENDING_ACTIVATION"


class InstrumentKind(str, Enum):
    """Physical (plastic) or virtual card."""
    PLASTIC = "PLASTIC"
    VIRTUAL = "VIRTUAL"


# ─── Account Enums ───────────────────────────────────────────────

class AccountStatus(str, Enum):
    NORMAL = "NORMAL"
    BLOCKED = "BLOCKED"
    CANCELLED = "CANCELLED"


class ProgramType(str, Enum):
    PREPAID = "PRE-PAGO"
    POSTPAID = "POS-PAGO"


class TransactionType(str, Enum):
    PURCHASE = "PURCHASE"
    WITHDRAWAL = "WITHDRAWAL"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"
    FEE = "FEE"


class TransactionStatus(str, Enum):
    COMPLETED = "COMPLETED"
    PENDING = "PENDING"
    FAILED = "FAILED"


# ─── State Machine Enums ─────────────────────────────────────────

class LoadState(str, Enum):
    """Instrument Directory load lifecycle."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class BalanceStatus(str, Enum):
    """Per-account status within one aggregation run."""
    PENDING = "pending"
    RESOLVED = "resolved"
    FAILED = "failed"


class Operation(str, Enum):
    """Closed set of named reads/writes routed through the Data Source Gateway."""
    AUTHENTICATE = "authenticate"
    LIST_INSTRUMENTS_BY_HOLDER = "list_instruments_by_holder"
    GET_INSTRUMENT = "get_instrument"
    BLOCK_INSTRUMENT = "block_instrument"
    UNBLOCK_INSTRUMENT = "unblock_instrument"
    ACTIVATE_INSTRUMENT = "activate_instrument"
    GET_ACCOUNT_BALANCE = "get_account_balance"
    LIST_ACCOUNTS = "list_accounts"
    GET_ACCOUNT_AVAILABLES = "get_account_availables"
    GET_STATEMENT = "get_statement"


class Locale(str, Enum):
    """Locales with user-facing error texts."""
    PT_BR = "pt-BR"
    EN = "en"
