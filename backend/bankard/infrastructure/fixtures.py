"""Fixture Backend — deterministic canned responses in the backend's wire format.

Invariants:
    - Every response is shaped exactly like the real endpoint's JSON body (camelCase),
      so the gateway parses and filters both modes with the same code
    - Every response is delayed by latency_ms (loading states stay observable in tests)
    - Unknown ids raise NotFoundError, as the real backend answers 404
    - Each FixtureBackend owns a private copy of the data: block/unblock/activate on
      one instance never leak into another

Design Decisions:
    - Card list deliberately mixes NORMAL, BLOCKED and CANCELLED cards, and two cards
      share one account, so filtering and per-account dedup are exercised in fixture mode
    - Timestamps fixed (not relative to now) to keep responses deterministic
"""

import asyncio
import copy
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from bankard.core.domain_types import InstrumentStage, InstrumentStatus, Operation
from bankard.core.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

FIXTURE_TOKEN = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
    "eyJzdWIiOiIxMjM0NTY3ODkwOSIsIm5hbWUiOiJBTEFNTyBWSU5JQ0lVUyBTT1VaQSJ9."
    "fixture-signature"
)
FIXTURE_HOLDER_DOCUMENT = "12345678909"
_HOLDER_NAME = "ALAMO VINICIUS SOUZA"


def _card(
    card_id: int, account: int, program_id: int, status: str, stage: str,
    alias: str, card_type: str, last4: str, issued: str, expires: str,
    contactless: bool = True,
) -> dict[str, Any]:
    return {
        "account": account,
        "cardId": card_id,
        "programId": program_id,
        "status": status,
        "stage": stage,
        "printedName": _HOLDER_NAME,
        "alias": alias,
        "type": card_type,
        "issuingDate": issued,
        "last4Digits": last4,
        "contactlessEnabled": contactless,
        "expirationDate": expires,
    }


_CARDS: list[dict[str, Any]] = [
    _card(45500675, 12619892, 1, "NORMAL", "ACTIVE", "Cartão Principal",
          "PLASTIC", "2234", "2023-06-13", "2028-06-30"),
    _card(45500676, 98765431, 2, "NORMAL", "ACTIVE", "Compras Online",
          "VIRTUAL", "8891", "2024-01-15", "2029-01-31"),
    _card(45500677, 45678901, 1, "NORMAL", "ACTIVE", "Viagens",
          "PLASTIC", "5567", "2024-03-20", "2029-03-31"),
    _card(45500678, 12619892, 1, "NORMAL", "ACTIVE", "Virtual Principal",
          "VIRTUAL", "7710", "2024-05-02", "2029-05-31"),
    _card(45500679, 98765431, 2, "BLOCKED", "BLOCKED", "Cartão Antigo",
          "PLASTIC", "1020", "2021-02-10", "2026-02-28", contactless=False),
    _card(45500680, 33300011, 3, "CANCELLED", "INACTIVE", "Cancelado",
          "PLASTIC", "4411", "2020-08-01", "2025-08-31", contactless=False),
    _card(45500681, 45678901, 1, "BLOCKED", "PENDING_ACTIVATION", "",
          "PLASTIC", "9034", "2025-11-28", "2030-11-30", contactless=False),
]


def _account(
    program_id: int, program_name: str, program_type: str, status: str,
    available: str, created: str,
) -> dict[str, Any]:
    return {
        "document": FIXTURE_HOLDER_DOCUMENT,
        "name": _HOLDER_NAME,
        "programId": program_id,
        "programName": program_name,
        "programType": program_type,
        "status": status,
        "available": available,
        "creationDate": created,
        "customerId": 1001,
    }


_ACCOUNTS: dict[int, dict[str, Any]] = {
    12619892: _account(1, "Programa Premium", "POS-PAGO", "NORMAL",
                       "10250.50", "2023-06-13T10:00:00.000Z"),
    98765431: _account(2, "Programa Standard", "PRE-PAGO", "NORMAL",
                       "5270.25", "2024-01-15T08:30:00.000Z"),
    45678901: _account(1, "Programa Premium", "POS-PAGO", "NORMAL",
                       "3000.00", "2024-03-20T14:15:00.000Z"),
    33300011: _account(3, "Programa Básico", "PRE-PAGO", "CANCELLED",
                       "0.00", "2020-08-01T09:00:00.000Z"),
}

_BALANCE_UPDATED_AT: dict[int, str] = {
    12619892: "2025-12-07T14:47:03.090Z",
    98765431: "2025-12-07T12:30:15.123Z",
    45678901: "2025-12-07T10:15:00.000Z",
    33300011: "2025-08-31T23:59:59.000Z",
}

_STATEMENT_REFERENCE = datetime(2025, 12, 7, 15, 0, tzinfo=timezone.utc)
_STATEMENT_OPENING_BALANCE = Decimal("5000")


def _tx(
    tx_id: str, account: int, tx_type: str, amount: str, description: str,
    hours_ago: float, category: str, merchant: str | None = None,
) -> dict[str, Any]:
    return {
        "id": tx_id,
        "accountId": account,
        "type": tx_type,
        "amount": amount,
        "description": description,
        "merchantName": merchant,
        "date": (_STATEMENT_REFERENCE - timedelta(hours=hours_ago)).isoformat(),
        "status": "COMPLETED",
        "category": category,
    }


_TRANSACTIONS: dict[int, list[dict[str, Any]]] = {
    12619892: [
        _tx("tx-001", 12619892, "PURCHASE", "-125.50", "Supermercado Pão de Açúcar",
            2, "Alimentação", "Pão de Açúcar"),
        _tx("tx-002", 12619892, "TRANSFER_IN", "500.00", "Transferência recebida - PIX",
            24, "Transferência"),
        _tx("tx-003", 12619892, "PURCHASE", "-45.90", "Uber - Corrida",
            48, "Transporte", "Uber"),
        _tx("tx-004", 12619892, "PURCHASE", "-89.90", "iFood - Pedido",
            72, "Alimentação", "iFood"),
        _tx("tx-005", 12619892, "PAYMENT", "-150.00", "Pagamento de conta de luz",
            120, "Contas"),
    ],
    98765431: [
        _tx("tx-101", 98765431, "PURCHASE", "-250.00", "Magazine Luiza - Eletrônicos",
            1, "Compras", "Magazine Luiza"),
        _tx("tx-102", 98765431, "PURCHASE", "-75.50", "Farmácia São Paulo",
            12, "Saúde", "Farmácia"),
        _tx("tx-103", 98765431, "TRANSFER_OUT", "-200.00", "Transferência enviada - PIX",
            48, "Transferência"),
    ],
    45678901: [
        _tx("tx-201", 45678901, "PURCHASE", "-199.90", "Netflix - Assinatura",
            0.5, "Entretenimento", "Netflix"),
        _tx("tx-202", 45678901, "PURCHASE", "-49.90", "Spotify - Assinatura",
            2, "Entretenimento", "Spotify"),
        _tx("tx-203", 45678901, "PURCHASE", "-320.00", "Shopping Iguatemi",
            24, "Compras", "Shopping"),
        _tx("tx-204", 45678901, "REFUND", "50.00", "Estorno - Devolução de produto",
            72, "Estorno"),
    ],
}


class FixtureBackend:
    """In-memory stand-in for the REST backend, one handler per Operation."""

    def __init__(self, latency_ms: int = 800):
        self.latency_ms = latency_ms
        self._cards = copy.deepcopy(_CARDS)
        self._accounts = copy.deepcopy(_ACCOUNTS)
        self._handlers = {
            Operation.AUTHENTICATE: self._authenticate,
            Operation.LIST_INSTRUMENTS_BY_HOLDER: self._list_instruments,
            Operation.GET_INSTRUMENT: self._get_instrument,
            Operation.BLOCK_INSTRUMENT: self._block,
            Operation.UNBLOCK_INSTRUMENT: self._unblock,
            Operation.ACTIVATE_INSTRUMENT: self._activate,
            Operation.GET_ACCOUNT_BALANCE: self._get_account,
            Operation.LIST_ACCOUNTS: self._list_accounts,
            Operation.GET_ACCOUNT_AVAILABLES: self._availables,
            Operation.GET_STATEMENT: self._statement,
        }

    async def handle(self, operation: Operation, params: dict[str, Any]) -> Any:
        """Resolve an operation after the simulated latency."""
        await asyncio.sleep(self.latency_ms / 1000)
        logger.debug(
            f"Fixture response for {operation.value}",
            extra={"operation": operation.value, "mode": "fixtures"},
        )
        return self._handlers[operation](**params)

    # --- Auth -----------------------------------------------------------------

    def _authenticate(self, login: str, password: str) -> dict[str, Any]:
        if not password:
            raise BadRequestError()
        expires = datetime.now(timezone.utc) + timedelta(hours=24)
        return {"token": FIXTURE_TOKEN, "expiresAt": expires.isoformat()}

    # --- Cards ----------------------------------------------------------------

    def _list_instruments(self, document: str) -> list[dict[str, Any]]:
        # every document resolves to the fixture holder's cards
        return copy.deepcopy(self._cards)

    def _find_card(self, instrument_id: int) -> dict[str, Any]:
        for card in self._cards:
            if card["cardId"] == instrument_id:
                return card
        raise NotFoundError("Cartão")

    def _get_instrument(self, instrument_id: int) -> dict[str, Any]:
        return copy.deepcopy(self._find_card(instrument_id))

    def _block(self, instrument_id: int) -> None:
        card = self._find_card(instrument_id)
        card["status"] = InstrumentStatus.BLOCKED.value
        card["stage"] = InstrumentStage.BLOCKED.value

    def _unblock(self, instrument_id: int) -> None:
        card = self._find_card(instrument_id)
        if card["status"] == InstrumentStatus.CANCELLED.value:
            raise BadRequestError()
        card["status"] = InstrumentStatus.NORMAL.value
        card["stage"] = InstrumentStage.ACTIVE.value

    def _activate(self, instrument_id: int, alias: str, password: str) -> None:
        card = self._find_card(instrument_id)
        if card["stage"] != InstrumentStage.PENDING_ACTIVATION.value:
            raise BadRequestError()
        card["status"] = InstrumentStatus.NORMAL.value
        card["stage"] = InstrumentStage.ACTIVE.value
        card["alias"] = alias

    # --- Accounts -------------------------------------------------------------

    def _get_account(self, account_id: int) -> dict[str, Any]:
        account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError("Conta")
        return copy.deepcopy(account)

    def _list_accounts(self) -> list[dict[str, Any]]:
        items = []
        for card in self._cards:
            if card["status"] != InstrumentStatus.NORMAL.value:
                continue
            if any(i["account"] == card["account"] for i in items):
                continue
            items.append({
                "account": card["account"],
                "programId": card["programId"],
                "lastFourDigits": card["last4Digits"],
            })
        return items

    def _availables(
        self, account: int | None = None, page: int = 1, page_size: int = 10,
    ) -> dict[str, Any]:
        rows = [
            {
                "account": account_id,
                "available": data["available"],
                "updatedAt": _BALANCE_UPDATED_AT.get(account_id),
            }
            for account_id, data in self._accounts.items()
            if data["status"] == "NORMAL" and account in (None, account_id)
        ]
        start = (page - 1) * page_size
        return {
            "totalAvailable": str(sum((Decimal(r["available"]) for r in rows), Decimal("0"))),
            "accounts": rows[start:start + page_size],
            "totalCount": len(rows),
            "page": page,
            "pageSize": page_size,
        }

    def _statement(self, account_id: int) -> dict[str, Any]:
        transactions = copy.deepcopy(_TRANSACTIONS.get(account_id, []))
        balance = sum(
            (Decimal(t["amount"]) for t in transactions), _STATEMENT_OPENING_BALANCE,
        )
        return {
            "accountId": account_id,
            "balance": str(balance),
            "transactions": transactions,
        }
