"""Bankard HTTP Client — wraps httpx.AsyncClient with bearer auth and error mapping.

Invariants:
    - Every failure leaves this module as a core/errors.py taxonomy member
    - Timeouts → RequestTimeoutError; no response (connect, DNS, TLS, read) → NetworkError
    - Non-2xx → error_from_status (401 → UnauthorizedError, 5xx → ServerError, ...)
    - The bearer token is passed per request; this client holds no credential state
    - Log lines name the operation, never the URL (paths carry documents and card ids)
    - No retries: callers decide whether to re-invoke

Design Decisions:
    - Wrapper over raw client: isolates transport mapping from the gateway
    - Transport injectable: tests drive the real mapping with httpx.MockTransport
    - Server-provided error text kept as technical detail, never as the user message
"""

import logging
import time
from typing import Any

import httpx

from bankard.core.domain_types import Locale, Operation
from bankard.core.errors import (
    NetworkError,
    RequestTimeoutError,
    ErrorContext,
    UnexpectedError,
    error_from_status,
)
from bankard.core.language_strings import DEFAULT_LOCALE

logger = logging.getLogger(__name__)


class BankardHttpClient:
    """Async REST client for the card/account backend."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        locale: Locale = DEFAULT_LOCALE,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self.locale = locale

    async def __aenter__(self) -> "BankardHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        operation: Operation,
        token: str | None = None,
        json: Any = None,
        params: dict[str, Any] | None = None,
        resource: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (None when empty).

        url may be absolute (login host) or relative to base_url.
        """
        request_headers = dict(headers or {})
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        start = time.monotonic()
        try:
            response = await self.client.request(
                method, url, json=json, params=params, headers=request_headers,
            )
        except httpx.TimeoutException as e:
            logger.warning(
                f"Request timed out: {operation.value}",
                extra={"operation": operation.value},
            )
            raise RequestTimeoutError(
                ErrorContext(operation=operation, cause=e), self.locale,
            )
        except httpx.TransportError as e:
            logger.warning(
                f"Transport failure in {operation.value}: {type(e).__name__}",
                extra={"operation": operation.value},
            )
            raise NetworkError(
                ErrorContext(operation=operation, cause=e), self.locale,
            )

        latency_ms = round((time.monotonic() - start) * 1000, 1)
        if not response.is_success:
            logger.warning(
                f"Backend returned {response.status_code} for {operation.value}",
                extra={
                    "operation": operation.value,
                    "status_code": response.status_code,
                    "latency_ms": latency_ms,
                },
            )
            raise error_from_status(
                response.status_code,
                resource=resource,
                detail=_extract_detail(response),
                operation=operation,
                locale=self.locale,
            )

        logger.debug(
            f"{operation.value} -> {response.status_code}",
            extra={"operation": operation.value, "latency_ms": latency_ms},
        )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            # some endpoints answer text/plain; only JSON bodies carry data
            raise UnexpectedError(
                cause=e,
                status_code=response.status_code,
                context=ErrorContext(operation=operation, detail="invalid JSON body"),
                locale=self.locale,
            )


def _extract_detail(response: httpx.Response) -> str | None:
    """Best-effort server message for diagnostics."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] or None
    if isinstance(body, dict):
        for key in ("message", "detail", "title", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None
