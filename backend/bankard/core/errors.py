"""Error Taxonomy — closed, tagged set of classified failures for every Bankard call.

Invariants:
    - Every error has a kind (ErrorKind), code (str), category, severity and status_code
    - message is always a pre-composed, user-facing text (never a stack trace or payload)
    - Technical payload (cause, detail, debug_info) lives in ErrorContext, exposed only
      through to_diagnostics()
    - error_from_status maps a transport status to exactly one taxonomy member
    - ensure_taxonomy never double-wraps: members pass through unchanged

Design Decisions:
    - Single hierarchy rooted at BankardError: callers catch one type at the gateway seam
    - ErrorKind tag on every member: exhaustive matching without isinstance chains
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from bankard.core.domain_types import Locale, Operation
from bankard.core.language_strings import (
    DEFAULT_LOCALE,
    format_not_found,
    get_error_message,
    get_operation_fallback,
)


class ErrorKind(str, Enum):
    """The closed set of taxonomy members."""
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    BAD_REQUEST = "bad_request"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    TIMEOUT = "timeout"
    UNEXPECTED = "unexpected"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    EXTERNAL_API = "external_api"
    CONNECTIVITY = "connectivity"
    TIMEOUT = "timeout"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Technical payload for diagnostics. Never rendered to the end user."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: Operation | None = None
    detail: str | None = None
    cause: BaseException | None = None
    debug_info: dict[str, Any] | None = None


class BankardError(Exception):
    """Base exception for all taxonomy members."""

    def __init__(
        self,
        message: str,
        code: str,
        kind: ErrorKind,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.status_code = status_code

    @property
    def cause(self) -> BaseException | None:
        return self.context.cause

    def to_response(self) -> dict:
        """User-safe envelope: message and codes only."""
        return {
            "error": {
                "kind": self.kind.value,
                "code": self.code,
                "message": self.message,
                "status_code": self.status_code,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }

    def to_diagnostics(self) -> dict:
        """Envelope plus technical payload, for disclosure panels and logs."""
        payload = self.to_response()
        payload["error"]["technical"] = {
            "operation": (
                self.context.operation.value if self.context.operation else None
            ),
            "detail": self.context.detail,
            "cause": repr(self.context.cause) if self.context.cause else None,
            "debug_info": self.context.debug_info,
        }
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, status_code={self.status_code})"


# ─── Client Errors (4xx) ────────────────────────────────────────

class NotFoundError(BankardError):
    """Requested resource does not exist."""
    def __init__(
        self,
        resource: str | None = None,
        context: ErrorContext | None = None,
        locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            format_not_found(resource, locale),
            "NOT_FOUND", ErrorKind.NOT_FOUND, ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource = resource


class UnauthorizedError(BankardError):
    """Credential missing, expired or rejected."""
    def __init__(
        self, context: ErrorContext | None = None, locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            get_error_message("unauthorized", locale),
            "UNAUTHORIZED", ErrorKind.UNAUTHORIZED, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(BankardError):
    def __init__(
        self, context: ErrorContext | None = None, locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            get_error_message("forbidden", locale),
            "FORBIDDEN", ErrorKind.FORBIDDEN, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.ERROR, context, 403,
        )


class BadRequestError(BankardError):
    """Request rejected as invalid. detail, when given, is the user-facing text."""
    def __init__(
        self,
        detail: str | None = None,
        context: ErrorContext | None = None,
        status_code: int = 400,
        locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            detail or get_error_message("bad_request", locale),
            "BAD_REQUEST", ErrorKind.BAD_REQUEST, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, status_code,
        )
        self.detail = detail


class RequestTimeoutError(BankardError):
    def __init__(
        self, context: ErrorContext | None = None, locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            get_error_message("timeout", locale),
            "TIMEOUT", ErrorKind.TIMEOUT, ErrorCategory.TIMEOUT,
            ErrorSeverity.WARNING, context, 408,
        )


# ─── Infrastructure Errors (5xx / no response) ──────────────────

class ServerError(BankardError):
    def __init__(
        self,
        context: ErrorContext | None = None,
        status_code: int = 500,
        locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            get_error_message("server_error", locale),
            "SERVER_ERROR", ErrorKind.SERVER_ERROR, ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, status_code,
        )


class NetworkError(BankardError):
    """No response received (DNS, refused connection, TLS, dropped socket)."""
    def __init__(
        self, context: ErrorContext | None = None, locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            get_error_message("network_error", locale),
            "NETWORK_ERROR", ErrorKind.NETWORK_ERROR, ErrorCategory.CONNECTIVITY,
            ErrorSeverity.WARNING, context, 0,
        )


class UnexpectedError(BankardError):
    """Generic wrapper: keeps the underlying cause and raw status for diagnostics."""
    def __init__(
        self,
        message: str | None = None,
        cause: BaseException | None = None,
        status_code: int = 500,
        context: ErrorContext | None = None,
        locale: Locale = DEFAULT_LOCALE,
        code: str = "UNEXPECTED_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
    ):
        ctx = context or ErrorContext()
        if cause is not None:
            ctx.cause = cause
        super().__init__(
            message or get_error_message("unexpected", locale),
            code, ErrorKind.UNEXPECTED, category,
            ErrorSeverity.CRITICAL, ctx, status_code,
        )


class StorageError(UnexpectedError):
    """Persistence of session state failed."""
    def __init__(
        self,
        operation: str,
        cause: BaseException | None = None,
        locale: Locale = DEFAULT_LOCALE,
    ):
        super().__init__(
            get_error_message("storage", locale), cause=cause,
            context=ErrorContext(detail=f"storage {operation} failed"),
            locale=locale, code="STORAGE_ERROR", category=ErrorCategory.STORAGE,
        )
        self.operation = operation


# ─── Construction ───────────────────────────────────────────────

_SERVER_STATUSES = frozenset({500, 502, 503, 504})


def error_from_status(
    status_code: int,
    *,
    resource: str | None = None,
    detail: str | None = None,
    cause: BaseException | None = None,
    operation: Operation | None = None,
    locale: Locale = DEFAULT_LOCALE,
) -> BankardError:
    """Map a transport status to exactly one taxonomy member.

    detail is the server-provided text and is kept as technical payload only.
    """
    ctx = ErrorContext(operation=operation, detail=detail, cause=cause)
    if status_code in (400, 422):
        return BadRequestError(context=ctx, status_code=status_code, locale=locale)
    if status_code == 401:
        return UnauthorizedError(ctx, locale)
    if status_code == 403:
        return ForbiddenError(ctx, locale)
    if status_code == 404:
        return NotFoundError(resource, ctx, locale)
    if status_code == 408:
        return RequestTimeoutError(ctx, locale)
    if status_code in _SERVER_STATUSES:
        return ServerError(ctx, status_code, locale)
    return UnexpectedError(status_code=status_code, context=ctx, locale=locale)


def ensure_taxonomy(
    exc: BaseException,
    *,
    operation: Operation | None = None,
    locale: Locale = DEFAULT_LOCALE,
) -> BankardError:
    """Pass taxonomy members through; wrap anything else with the operation's fallback text."""
    if isinstance(exc, BankardError):
        return exc
    return UnexpectedError(
        get_operation_fallback(operation, locale),
        cause=exc,
        context=ErrorContext(operation=operation),
        locale=locale,
    )
