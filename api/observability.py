"""Structured logging for the PracTrac API.

Each request gets a log context holding its request id. Routes bind the
session, practice or player they act on, so service log lines and the access
line for the request carry the same ids.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

# Keys a route may attach to the current request's log lines.
CONTEXT_FIELDS = ("session_id", "practice_id", "player_id", "team_id", "drill_id")

_log_context: contextvars.ContextVar[Optional[dict[str, Any]]] = contextvars.ContextVar("log_context", default=None)
_logging_configured = False
_STANDARD_LOG_RECORD_FIELDS = set(logging.makeLogRecord({}).__dict__.keys())


def new_request_id() -> str:
    return uuid4().hex


def begin_request(request_id: str) -> contextvars.Token:
    """Open a fresh log context for one request."""
    return _log_context.set({"request_id": request_id})


def end_request(token: contextvars.Token) -> None:
    _log_context.reset(token)


def bind_log_context(**fields: Any) -> None:
    """Attach entity ids to the current request.

    The context dict is updated in place: sync endpoints run in a worker
    thread with a copied context, and the access log must still see the ids.
    """
    ctx = _log_context.get()
    if ctx is None:
        ctx = {}
        _log_context.set(ctx)
    for key, value in fields.items():
        if key not in CONTEXT_FIELDS:
            raise ValueError(f"Unknown log context field: {key}")
        if value is not None:
            ctx[key] = value


def current_log_context() -> dict[str, Any]:
    return dict(_log_context.get() or {})


class JsonFormatter(logging.Formatter):
    """One JSON object per line: request context first, then ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        payload.update(current_log_context())
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key in _STANDARD_LOG_RECORD_FIELDS or key.startswith("_"):
                continue
            payload[key] = value
        return json.dumps(payload, default=str, separators=(",", ":"))


def configure_logging(level: str = "INFO", *, force: bool = False) -> None:
    global _logging_configured
    if _logging_configured and not force:
        return

    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error"):
        logger = logging.getLogger(logger_name)
        logger.handlers.clear()
        logger.propagate = True
    # The middleware writes its own access line.
    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    _logging_configured = True


def access_log_level(status_code: int) -> int:
    """Server errors are errors; conflicts and throttled writes are worth a warning."""
    if status_code >= 500:
        return logging.ERROR
    if status_code in (409, 429):
        return logging.WARNING
    return logging.INFO


def access_log_fields(*, method: str, path: str, status_code: int, started_ms: float, client_ip: Optional[str]) -> dict[str, object]:
    """Access line fields, including any ids the route bound."""
    return {
        **current_log_context(),
        "method": method,
        "path": path,
        "status_code": int(status_code),
        "duration_ms": round(monotonic_ms() - started_ms, 2),
        "client_ip": client_ip or "",
    }


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0
