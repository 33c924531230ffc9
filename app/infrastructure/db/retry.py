"""
Retry of booking writes that lose a lock race in the database.

Room and reservation rows are locked with SELECT ... FOR UPDATE. Two requests
that touch the same rows in different order can deadlock on MySQL; on SQLite
the loser of the writer lock gets "database is locked". Both are transient:
the whole use case is re-run from scratch, which re-reads the calendar.
"""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# MySQL error codes
MYSQL_DEADLOCK_ERROR = "1213"
MYSQL_LOCK_WAIT_TIMEOUT = "1205"

RETRYABLE_MARKERS = {
    "deadlock": MYSQL_DEADLOCK_ERROR,
    "lock_wait_timeout": MYSQL_LOCK_WAIT_TIMEOUT,
    "sqlite_locked": "database is locked",
}


def retryable_reason(error: BaseException) -> str | None:
    """Nombre del motivo reintentable, o None si el error no es transitorio."""
    if not isinstance(error, DBAPIError):
        return None
    message = str(error)
    for reason, marker in RETRYABLE_MARKERS.items():
        if marker in message:
            return reason
    return None


def is_deadlock_error(error: BaseException) -> bool:
    return retryable_reason(error) is not None


async def retry_on_deadlock(
    func: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.1,
    operation: str = "booking_write",
) -> T:
    """
    Ejecuta `func` y la repite si falla por un conflicto de locks.

    Backoff exponencial: base_delay, 2*base_delay, 4*base_delay...
    Cualquier otro error (incluidos los de dominio) se propaga sin reintentar.
    """
    attempt = 1
    while True:
        try:
            return await func()
        except DBAPIError as exc:
            reason = retryable_reason(exc)
            if reason is None:
                raise
            if attempt >= max_attempts:
                logger.error(
                    "Database deadlock persists after max retries",
                    extra={"operation": operation, "reason": reason, "attempts": attempt},
                )
                raise

            delay = base_delay * (2 ** (attempt - 1))
            logger.warning(
                "Database deadlock detected, retrying",
                extra={
                    "operation": operation,
                    "reason": reason,
                    "attempt": attempt,
                    "max_attempts": max_attempts,
                    "retry_delay": delay,
                },
            )
            await asyncio.sleep(delay)
            attempt += 1
