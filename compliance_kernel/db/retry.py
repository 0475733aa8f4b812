"""
Module: compliance_kernel.db.retry
Responsibility: Retry a database read when the connection drops underneath it.
Architecture position: Kernel > DB.  Called by selectors around their
    ``session.execute`` calls.  Reads inside the run transaction make a
    single attempt (``max_retries=1``): a dropped connection mid-run rolls
    the whole run back instead of replaying it.

Invariants enforced:
    - Only transient connection failures are retried; every other exception
      propagates on the first attempt.
    - Backoff is linear: ``retry_delay * attempt`` seconds.
"""

from __future__ import annotations

import time
from typing import Callable, TypeVar

from sqlalchemy.exc import DisconnectionError, OperationalError

from compliance_kernel.logging_config import get_logger

logger = get_logger("db.retry")

T = TypeVar("T")

_TRANSIENT_MARKERS = (
    "connection is closed",
    "connection was closed",
    "server closed the connection",
    "connection reset",
    "connection refused",
    "could not connect",
    "timeout",
    "timed out",
)


def is_transient_error(exc: BaseException) -> bool:
    """True if ``exc`` looks like a dropped or unreachable connection."""
    if isinstance(exc, (OperationalError, DisconnectionError)):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def execute_with_retry(
    operation: Callable[[], T],
    max_retries: int = 3,
    retry_delay: float = 0.1,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run ``operation``, retrying transient connection errors.

    Args:
        operation: Zero-argument callable performing the query.
        max_retries: Total attempts before the last error is re-raised.
        retry_delay: Base delay in seconds; attempt N waits N * retry_delay.
        sleep: Injected for tests.

    Raises:
        Whatever ``operation`` raised, once retries are exhausted or the
        error is not transient.
    """
    attempt = 1
    while True:
        try:
            return operation()
        except Exception as exc:
            if attempt >= max_retries or not is_transient_error(exc):
                raise
            logger.warning(
                "retry_attempt",
                extra={
                    "attempt": attempt,
                    "max_retries": max_retries,
                    "error": str(exc),
                },
            )
            sleep(retry_delay * attempt)
            attempt += 1
