"""Data Source Gateway — one seam resolving every operation to fixtures or the network.

Invariants:
    - call() returns the parsed domain object or raises a BankardError; nothing else
      escapes (pydantic, httpx and programming errors are rewrapped via ensure_taxonomy)
    - Both modes parse and filter through the same per-operation parser, so callers
      get identical result types regardless of use_fixtures
    - Instrument lists only ever contain NORMAL instruments
    - Real calls read SessionHolder.current() per call and attach it as a bearer header
    - An UnauthorizedError from a real call invalidates the session for the token that
      was sent, exactly once per failing call; the error still propagates, even
      when clearing the persisted credential fails
    - Fixture mode never touches the session

Design Decisions:
    - Explicit dict mapping Operation → route/parser (no auto-discovery)
    - Request DTOs validated before dispatch: invalid input is BadRequestError in both modes
    - The mode flag is read per call, so flipping it needs no change at call sites
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from bankard.core.domain_types import Locale, Operation
from bankard.core.errors import (
    BadRequestError,
    BankardError,
    ErrorContext,
    StorageError,
    UnauthorizedError,
    ensure_taxonomy,
)
from bankard.core.language_strings import DEFAULT_LOCALE
from bankard.infrastructure.fixtures import FixtureBackend
from bankard.infrastructure.http_client import BankardHttpClient
from bankard.schemas.account import AccountAvailablesPage, AccountDetails, AccountListItem
from bankard.schemas.auth import AuthResponse, LoginRequest
from bankard.schemas.instrument import Instrument, InstrumentActivation, filter_active
from bankard.schemas.statement import Statement
from bankard.services.session_holder import SessionHolder

logger = logging.getLogger(__name__)

_INSTRUMENTS = TypeAdapter(list[Instrument])
_ACCOUNT_ITEMS = TypeAdapter(list[AccountListItem])

_CARD_PATH = "/discovery/v2/Card"
_ACCOUNT_PATH = "/discovery/v2/Account"


@dataclass(frozen=True)
class _Route:
    """How one operation maps onto the REST backend."""
    method: str
    path: Callable[[dict[str, Any]], str]
    resource: str | None = None
    authenticated: bool = True
    body: Callable[[dict[str, Any]], Any] | None = None
    query: Callable[[dict[str, Any]], dict[str, Any]] | None = None


def _availables_query(p: dict[str, Any]) -> dict[str, Any]:
    query = {"page": p.get("page", 1), "pageSize": p.get("page_size", 10)}
    if p.get("account") is not None:
        query["account"] = p["account"]
    return query


_ROUTES: dict[Operation, _Route] = {
    Operation.AUTHENTICATE: _Route(
        "POST", lambda p: "/v1/Auth/Login", authenticated=False,
        body=lambda p: {"login": p["login"], "password": p["password"]},
    ),
    Operation.LIST_INSTRUMENTS_BY_HOLDER: _Route(
        "GET", lambda p: f"{_CARD_PATH}/Document/{p['document']}", "Cartões",
    ),
    Operation.GET_INSTRUMENT: _Route(
        "GET", lambda p: f"{_CARD_PATH}/{p['instrument_id']}", "Cartão",
    ),
    Operation.BLOCK_INSTRUMENT: _Route(
        "POST", lambda p: f"{_CARD_PATH}/{p['instrument_id']}/block", "Cartão",
    ),
    Operation.UNBLOCK_INSTRUMENT: _Route(
        "POST", lambda p: f"{_CARD_PATH}/{p['instrument_id']}/unblock", "Cartão",
    ),
    Operation.ACTIVATE_INSTRUMENT: _Route(
        "POST", lambda p: f"{_CARD_PATH}/{p['instrument_id']}/activate", "Cartão",
        body=lambda p: {"alias": p["alias"], "password": p["password"]},
    ),
    Operation.GET_ACCOUNT_BALANCE: _Route(
        "GET", lambda p: f"{_ACCOUNT_PATH}/{p['account_id']}", "Conta",
    ),
    Operation.LIST_ACCOUNTS: _Route("GET", lambda p: "/v1/account", "Contas"),
    Operation.GET_ACCOUNT_AVAILABLES: _Route(
        "GET", lambda p: "/v1/account/availables", "Saldos",
        query=_availables_query,
    ),
    Operation.GET_STATEMENT: _Route(
        "GET", lambda p: f"/v1/account/{p['account_id']}/statement", "Extrato",
    ),
}


# --- Parsers (shared by both modes) ------------------------------------------

def _parse_none(raw: Any, params: dict[str, Any]) -> None:
    return None


_PARSERS: dict[Operation, Callable[[Any, dict[str, Any]], Any]] = {
    Operation.AUTHENTICATE: lambda raw, p: AuthResponse.model_validate(raw),
    Operation.LIST_INSTRUMENTS_BY_HOLDER: (
        lambda raw, p: filter_active(_INSTRUMENTS.validate_python(raw))
    ),
    Operation.GET_INSTRUMENT: lambda raw, p: Instrument.model_validate(raw),
    Operation.BLOCK_INSTRUMENT: _parse_none,
    Operation.UNBLOCK_INSTRUMENT: _parse_none,
    Operation.ACTIVATE_INSTRUMENT: _parse_none,
    Operation.GET_ACCOUNT_BALANCE: (
        lambda raw, p: AccountDetails.model_validate(raw).to_snapshot(p["account_id"])
    ),
    Operation.LIST_ACCOUNTS: lambda raw, p: _ACCOUNT_ITEMS.validate_python(raw),
    Operation.GET_ACCOUNT_AVAILABLES: (
        lambda raw, p: AccountAvailablesPage.model_validate(raw)
    ),
    Operation.GET_STATEMENT: lambda raw, p: Statement.model_validate(raw),
}


class DataSourceGateway:
    """Routes each Operation to the fixture backend or the REST backend."""

    def __init__(
        self,
        session: SessionHolder,
        http: BankardHttpClient,
        fixtures: FixtureBackend,
        *,
        login_base_url: str,
        use_fixtures: bool = False,
        locale: Locale = DEFAULT_LOCALE,
    ):
        self.session = session
        self.http = http
        self.fixtures = fixtures
        self.login_base_url = login_base_url.rstrip("/")
        self.locale = locale
        self._use_fixtures = use_fixtures

    @property
    def use_fixtures(self) -> bool:
        return self._use_fixtures

    def set_use_fixtures(self, enabled: bool) -> None:
        if enabled != self._use_fixtures:
            logger.info(
                "Gateway mode switched",
                extra={"mode": "fixtures" if enabled else "network"},
            )
        self._use_fixtures = enabled

    async def call(self, operation: Operation, **params: Any) -> Any:
        """Resolve one operation. Raises only BankardError members."""
        try:
            params = self._validate_params(operation, params)
            if self._use_fixtures:
                raw = await self.fixtures.handle(operation, params)
            else:
                raw = await self._call_remote(operation, params)
            return _PARSERS[operation](raw, params)
        except BankardError as e:
            logger.info(
                f"{operation.value} failed: {e.code}",
                extra={
                    "operation": operation.value,
                    "error_code": e.code,
                    "status_code": e.status_code,
                },
            )
            raise
        except Exception as e:
            logger.error(
                f"Unexpected failure in {operation.value}: {e}", exc_info=True,
                extra={"operation": operation.value},
            )
            raise ensure_taxonomy(e, operation=operation, locale=self.locale) from e

    async def _call_remote(self, operation: Operation, params: dict[str, Any]) -> Any:
        route = _ROUTES[operation]
        path = route.path(params)
        url = f"{self.login_base_url}{path}" if not route.authenticated else path
        token = self.session.current() if route.authenticated else None
        try:
            return await self.http.request(
                route.method,
                url,
                operation=operation,
                token=token,
                json=route.body(params) if route.body else None,
                params=route.query(params) if route.query else None,
                resource=route.resource,
                headers=None if route.authenticated else {"accept": "text/plain"},
            )
        except UnauthorizedError:
            if route.authenticated:
                await self._invalidate_session(token)
            raise

    async def _invalidate_session(self, token: str | None) -> None:
        """Drop the rejected token. A failing store never masks the 401."""
        try:
            await self.session.invalidate(token)
        except StorageError as e:
            logger.error(
                f"Could not clear persisted credential: {e.context.detail}",
                extra={"error_code": e.code},
            )

    def _validate_params(
        self, operation: Operation, params: dict[str, Any],
    ) -> dict[str, Any]:
        """Validate request DTOs up front so both modes reject the same input."""
        try:
            if operation is Operation.AUTHENTICATE:
                request = LoginRequest(**params)
                return {"login": request.login, "password": request.password}
            if operation is Operation.ACTIVATE_INSTRUMENT:
                activation = InstrumentActivation(**params)
                return {
                    "instrument_id": activation.instrument_id,
                    "alias": activation.alias,
                    "password": activation.password,
                }
        except ValidationError as e:
            raise BadRequestError(
                context=ErrorContext(
                    operation=operation,
                    # msg only: the raw input would carry the password
                    detail="; ".join(err["msg"] for err in e.errors()),
                ),
                locale=self.locale,
            ) from None
        return params
