"""
Structured JSON logging for the payroll packages.

Every module logs through ``get_logger(<dotted name>)``, which places it under
the ``nomina_kernel`` logger.  ``configure_logging`` attaches one handler to
that logger; each record becomes a single JSON line carrying:

    ts, level, logger, message      always
    run_id, employee_id, ...        when bound in ``LogContext``
    extra={...} keys                as given by the caller
    exc_type, exc_code, exc_<attr>  when logged with ``exc_info``

Payroll values are serialized losslessly: ``Decimal`` as its string,
dates as ISO strings, enums by wire value, ``PayrollMonth`` as ``YYYY-MM``.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID

ROOT_LOGGER_NAME = "nomina_kernel"

CONTEXT_FIELDS = (
    "correlation_id",
    "run_id",
    "employee_id",
    "actor_id",
    "trace_id",
)


# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------


class LogContext:
    """
    Request-scoped log fields held in context variables.

    Safe across threads and asyncio tasks: each thread or task sees its own
    values.  Unknown field names passed to ``bind`` are ignored.
    """

    _vars: ClassVar[dict[str, ContextVar[str | None]]] = {
        name: ContextVar(f"nomina_log_{name}", default=None)
        for name in CONTEXT_FIELDS
    }

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set context fields; ``None`` leaves a field unchanged."""
        for name, value in fields.items():
            if name not in cls._vars:
                raise TypeError(f"unknown log context field: {name}")
            if value is not None:
                cls._vars[name].set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return {
            name: value
            for name, var in cls._vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens: list[tuple[ContextVar[str | None], Token]] = [
            (cls._vars[name], cls._vars[name].set(value))
            for name, value in fields.items()
            if name in cls._vars and value is not None
        ]
        try:
            yield cls
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON rendering
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, UUID):
        return str(value)
    # PayrollMonth and other value objects render through __str__
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """Type, message, ``code`` and public attributes of a logged exception."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_") and name != "code":
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``nomina_kernel.<name>``."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


_state_lock = threading.Lock()
_configured = False


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the ``nomina_kernel`` logger.

    Only the first call has an effect until ``reset_logging`` is called.
    Records do not propagate to the Python root logger.
    """
    global _configured
    with _state_lock:
        if _configured:
            return
        _configured = True

    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(StructuredFormatter())

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    root.addHandler(handler)


def reset_logging() -> None:
    """Drop handlers and allow ``configure_logging`` to run again (tests)."""
    global _configured
    with _state_lock:
        _configured = False
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.WARNING)
