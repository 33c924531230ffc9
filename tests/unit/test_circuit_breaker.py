import pytest
from pybreaker import STATE_CLOSED, STATE_OPEN, CircuitBreakerError

from app.infrastructure.circuit_breaker import build_breaker, call_with_breaker


class Boom(Exception):
    pass


async def _fail():
    raise Boom("gateway down")


async def _ok():
    return "ok"


class TestCallWithBreaker:
    async def test_success_passes_through(self):
        breaker = build_breaker("test_ok", fail_max=2)
        assert await call_with_breaker(breaker, _ok) == "ok"
        assert breaker.current_state == STATE_CLOSED

    async def test_async_failures_are_counted_and_trip_the_circuit(self):
        breaker = build_breaker("test_trip", fail_max=2, reset_timeout=60)

        with pytest.raises(Boom):
            await call_with_breaker(breaker, _fail)
        assert breaker.fail_counter == 1

        with pytest.raises(CircuitBreakerError):
            await call_with_breaker(breaker, _fail)
        assert breaker.current_state == STATE_OPEN

    async def test_open_circuit_fails_fast_without_calling(self):
        breaker = build_breaker("test_open", fail_max=1, reset_timeout=60)
        with pytest.raises(CircuitBreakerError):
            await call_with_breaker(breaker, _fail)

        calls = []

        async def _tracked():
            calls.append(1)
            return "ok"

        with pytest.raises(CircuitBreakerError):
            await call_with_breaker(breaker, _tracked)
        assert calls == []

    async def test_success_resets_the_failure_count(self):
        breaker = build_breaker("test_reset", fail_max=3)
        with pytest.raises(Boom):
            await call_with_breaker(breaker, _fail)
        await call_with_breaker(breaker, _ok)
        assert breaker.fail_counter == 0
