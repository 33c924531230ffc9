"""
Circuit Breaker configuration for external service calls.

This module provides a pre-configured Circuit Breaker for the payment gateway
to prevent cascading failures and resource exhaustion.

Circuit Breaker Pattern:
- CLOSED: Normal operation, requests pass through
- OPEN: Too many failures, requests fail immediately
- HALF_OPEN: Testing if service recovered, limited requests allowed

Configuration:
- fail_max: Number of consecutive failures before opening circuit
- reset_timeout: Seconds to wait before attempting recovery (HALF_OPEN)
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from pybreaker import STATE_OPEN, CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)

T = TypeVar("T")


def log_circuit_state_change(breaker_name: str, old_state: str, new_state: str):
    """
    Log circuit breaker state changes for monitoring and alerting.

    In production, this should trigger alerts when circuits open.
    """
    logger.warning(
        "Circuit breaker state changed",
        extra={
            "breaker_name": breaker_name,
            "old_state": old_state,
            "new_state": new_state,
        }
    )


class StateChangeLogger(CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        """Called when circuit breaker state changes."""
        log_circuit_state_change(
            self.name,
            old_state.name if old_state else "none",
            new_state.name,
        )


def build_breaker(name: str, fail_max: int = 5, reset_timeout: int = 60) -> CircuitBreaker:
    return CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        name=f"{name}_circuit_breaker",
        listeners=[StateChangeLogger(name)],
    )


# Payment gateway Circuit Breaker Configuration
payment_gateway_breaker = build_breaker("payment_gateway")


def _noop() -> None:
    return None


def _reraise(exc: BaseException) -> None:
    raise exc


async def call_with_breaker(
    breaker: CircuitBreaker,
    func: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Run an async call under a pybreaker CircuitBreaker.

    pybreaker only wraps synchronous callables, so the outcome of the awaited
    call is reported back through `breaker.call`. While the circuit is open the
    probe raises CircuitBreakerError before any I/O happens.
    """
    if breaker.current_state == STATE_OPEN:
        breaker.call(_noop)
    try:
        result = await func(*args, **kwargs)
    except Exception as exc:
        # Counts the failure; raises exc or CircuitBreakerError once the threshold trips.
        breaker.call(_reraise, exc)
        raise
    breaker.call(_noop)
    return result


__all__ = [
    "payment_gateway_breaker",
    "build_breaker",
    "call_with_breaker",
    "CircuitBreakerError",
]
