"""
Reintento de escrituras de reservaciones ante conflictos de locks.

- Detecta MySQL 1213 (Deadlock), 1205 (Lock wait timeout) y SQLite "database is locked"
- Reintenta con backoff exponencial y se rinde tras max_attempts
- Los errores de dominio nunca se reintentan
"""

import time
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.domain.errors import RoomUnavailableError
from app.infrastructure.db.retry import is_deadlock_error, retry_on_deadlock, retryable_reason


def _db_error(message: str) -> OperationalError:
    return OperationalError("statement", "params", message, connection_invalidated=False)


DEADLOCK = "(pymysql.err.OperationalError) (1213, 'Deadlock found when trying to get lock')"


class TestDeadlockDetection:
    @pytest.mark.parametrize(
        "message, reason",
        [
            (DEADLOCK, "deadlock"),
            ("(pymysql.err.OperationalError) (1205, 'Lock wait timeout exceeded')", "lock_wait_timeout"),
            ("(sqlite3.OperationalError) database is locked", "sqlite_locked"),
        ],
    )
    def test_retryable_errors(self, message, reason):
        assert retryable_reason(_db_error(message)) == reason
        assert is_deadlock_error(_db_error(message))

    def test_other_errors_are_not_retryable(self):
        assert not is_deadlock_error(Exception("1213"))
        assert not is_deadlock_error(
            _db_error("(pymysql.err.OperationalError) (2013, 'Lost connection to MySQL server')")
        )


class TestRetryLogic:
    async def test_success_on_first_attempt(self):
        calls = 0

        async def ok():
            nonlocal calls
            calls += 1
            return "booked"

        assert await retry_on_deadlock(ok, max_attempts=3) == "booked"
        assert calls == 1

    async def test_retries_until_success(self):
        calls = 0

        async def fails_twice():
            nonlocal calls
            calls += 1
            if calls <= 2:
                raise _db_error(DEADLOCK)
            return "booked"

        assert await retry_on_deadlock(fails_twice, max_attempts=3, base_delay=0.01) == "booked"
        assert calls == 3

    async def test_gives_up_after_max_attempts(self):
        calls = 0

        async def always_fails():
            nonlocal calls
            calls += 1
            raise _db_error(DEADLOCK)

        with pytest.raises(OperationalError):
            await retry_on_deadlock(always_fails, max_attempts=3, base_delay=0.01)
        assert calls == 3

    async def test_domain_errors_are_not_retried(self):
        calls = 0

        async def conflict():
            nonlocal calls
            calls += 1
            raise RoomUnavailableError(1, "2024-01-01", "2024-01-03")

        with pytest.raises(RoomUnavailableError):
            await retry_on_deadlock(conflict, max_attempts=3)
        assert calls == 1

    async def test_exponential_backoff(self):
        call_times = []

        async def always_fails():
            call_times.append(time.monotonic())
            raise _db_error(DEADLOCK)

        with pytest.raises(OperationalError):
            await retry_on_deadlock(always_fails, max_attempts=3, base_delay=0.1)

        assert len(call_times) == 3
        first_delay = call_times[1] - call_times[0]
        second_delay = call_times[2] - call_times[1]
        assert 0.08 < first_delay < 0.2
        assert 0.18 < second_delay < 0.35

    async def test_each_retry_is_logged(self):
        calls = 0

        async def fails_once():
            nonlocal calls
            calls += 1
            if calls == 1:
                raise _db_error(DEADLOCK)
            return "booked"

        with patch("app.infrastructure.db.retry.logger") as mock_logger:
            await retry_on_deadlock(fails_once, base_delay=0.01, operation="approve_booking")

        message = mock_logger.warning.call_args[0][0]
        extra = mock_logger.warning.call_args[1]["extra"]
        assert "deadlock" in message.lower()
        assert extra["operation"] == "approve_booking"
        assert extra["reason"] == "deadlock"
