"""Structured Logging — JSON formatter and setup for client-core observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (operation, account_id, generation, error_code...) surfaced when present
    - Tokens and passwords are never passed as extra fields
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging called once by the composition root (BankingClient.from_settings)
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "operation", "account_id", "instrument_id", "holder", "generation",
    "error_code", "status_code", "mode", "resolved", "failed", "latency_ms",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


# httpx logs full request URLs at INFO; card and document paths stay out of logs
_QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite", "sqlalchemy.engine")


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install one root handler for the client. Safe to call more than once."""
    handler = logging.StreamHandler()
    handler.set_name("bankard")
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == "bankard":
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
