"""
Structured JSON logging for the money kernel.

Every record under the ``money_kernel`` logger renders as one JSON object
per line.  Fields bound through LogContext (the operation in progress, an
optional caller correlation id) are merged into each record, then the
``extra`` data passed at the call site.

The library only emits records; wiring a handler is left to the
application through configure_logging().
"""

__all__ = [
    "LOGGER_NAMESPACE",
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
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

LOGGER_NAMESPACE = "money_kernel"

_NO_FIELDS: Mapping[str, str] = MappingProxyType({})

_bound_fields: ContextVar[Mapping[str, str]] = ContextVar(
    "money_log_fields", default=_NO_FIELDS
)


class LogContext:
    """
    Fields attached to every record logged from the current context.

    All fields live in one ContextVar, so they follow threads and asyncio
    tasks without leaking between them.

    Usage:
        with LogContext.bind(operation="currency_conversion"):
            logger.debug("currency_converted", extra={...})
    """

    FIELDS = frozenset({"correlation_id", "operation"})

    @classmethod
    def _with(cls, fields: Mapping[str, str | None]) -> dict[str, str]:
        unknown = set(fields) - cls.FIELDS
        if unknown:
            raise TypeError(f"Unknown log context field(s): {', '.join(sorted(unknown))}")
        merged = dict(_bound_fields.get())
        merged.update((name, value) for name, value in fields.items() if value is not None)
        return merged

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Bind fields until clear(); a None value leaves the field as it was."""
        _bound_fields.set(cls._with(fields))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_bound_fields.get())

    @classmethod
    def clear(cls) -> None:
        _bound_fields.set(_NO_FIELDS)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[type["LogContext"]]:
        """Bind fields for the body of a ``with`` block, then restore."""
        token = _bound_fields.set(cls._with(fields))
        try:
            yield cls
        finally:
            _bound_fields.reset(token)


# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    # Decimal, Fraction, Currency and friends
    return str(value)


class StructuredFormatter(logging.Formatter):
    """One JSON line per record: envelope, context fields, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload = self._envelope(record)
        payload.update(LogContext.get_all())

        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(self._exception_fields(record))

        return json.dumps(payload, default=_json_default)

    @staticmethod
    def _envelope(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # MoneyError subclasses expose their details as public attributes
        fields.update(
            (f"exc_{name}", value)
            for name, value in vars(exc).items()
            if not name.startswith("_") and name != "code"
        )
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


def get_logger(name: str) -> logging.Logger:
    """Logger named ``money_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_state_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``money_kernel`` logger.

    Only the first call takes effect until reset_logging().  ``handler``
    wins over ``stream``; with neither, records go to stderr.
    """
    global _installed_handler
    with _state_lock:
        if _installed_handler is not None:
            return
        if handler is None:
            handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())

        namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
        namespace_logger.setLevel(level)
        namespace_logger.propagate = False
        namespace_logger.addHandler(handler)
        _installed_handler = handler


def reset_logging() -> None:
    """Undo configure_logging(); used by the test suite."""
    global _installed_handler
    with _state_lock:
        _installed_handler = None
        namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
        namespace_logger.handlers.clear()
        namespace_logger.setLevel(logging.WARNING)
        namespace_logger.propagate = True
