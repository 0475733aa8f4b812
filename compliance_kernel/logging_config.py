"""
Structured JSON logging for the compliance runner.

Every record under the ``compliance_kernel`` logger is written as one JSON
line.  Fields bound with ``LogContext.bind`` (run id, mode, reviewed date,
actor) are merged into each line emitted inside the ``with`` block, so a
run's per-contractor messages can be filtered by ``run_id`` without every
call site repeating it.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "set_log_level",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime
from typing import Any

ROOT_LOGGER = "compliance_kernel"

CONTEXT_FIELDS = (
    "correlation_id",
    "run_id",
    "mode_id",
    "reviewed_date",
    "actor",
)

_context_vars: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"compliance_log_{name}", default=None)
    for name in CONTEXT_FIELDS
}


class LogContext:
    """Context-local fields merged into every log line (thread and task safe)."""

    @staticmethod
    def current() -> dict[str, str]:
        """Bound fields that currently have a value."""
        values = {name: var.get() for name, var in _context_vars.items()}
        return {name: value for name, value in values.items() if value is not None}

    @staticmethod
    def clear() -> None:
        for var in _context_vars.values():
            var.set(None)

    @staticmethod
    def bind(**fields: Any) -> "_BoundContext":
        """
        Bind fields for the duration of a ``with`` block.

        Values are stored as strings and ``None`` values are skipped; an
        unknown name raises ValueError.  Previous values come back on exit,
        so binds nest.
        """
        unknown = set(fields) - set(CONTEXT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown log context field(s): {sorted(unknown)}")
        return _BoundContext(
            {name: str(value) for name, value in fields.items() if value is not None}
        )


class _BoundContext:
    def __init__(self, fields: dict[str, str]):
        self._fields = fields
        self._tokens: list[tuple[ContextVar[str | None], Token]] = []

    def __enter__(self) -> type[LogContext]:
        for name, value in self._fields.items():
            var = _context_vars[name]
            self._tokens.append((var, var.set(value)))
        return LogContext

    def __exit__(self, *exc: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)


# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    # ComplianceKernelError subclasses keep their structured arguments as attributes
    for name, value in vars(exc).items():
        if name != "code" and not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: envelope, bound context, extras, exception."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.current(),
        }

        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


def get_logger(name: str) -> logging.Logger:
    """Logger for ``name`` under the runner's root logger."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


_state_lock = threading.Lock()
_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach the JSON handler to the runner's root logger.

    Only the first call installs a handler; later calls are no-ops until
    ``reset_logging()``.  The root logger does not propagate, so records
    are not duplicated by an application-level handler.
    """
    global _handler
    with _state_lock:
        if _handler is not None:
            return
        _handler = handler or logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(StructuredFormatter())

        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(level)
        root.propagate = False
        root.addHandler(_handler)


def set_log_level(level: int | str) -> None:
    """Change the level of the runner's loggers without touching handlers."""
    logging.getLogger(ROOT_LOGGER).setLevel(level)


def reset_logging() -> None:
    """Remove the installed handler so ``configure_logging`` applies again."""
    global _handler
    with _state_lock:
        root = logging.getLogger(ROOT_LOGGER)
        root.handlers.clear()
        root.setLevel(logging.WARNING)
        _handler = None
