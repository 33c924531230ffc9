"""
Health check endpoints for monitoring and orchestration (K8s, Docker, etc.)

Provides multiple health check endpoints:
- /health: Basic liveness check (always returns 200)
- /health/db: Database connectivity check
- /health/ready: Readiness check (database plus payment gateway circuit)
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_session
from app.config import Settings, get_settings
from app.infrastructure.circuit_breaker import payment_gateway_breaker

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "room-booking-api"


@router.get("/health")
async def health_check():
    """
    Basic liveness probe.

    Returns 200 OK if the application is running.
    """
    return {"status": "ok", "service": SERVICE_NAME}


@router.get("/health/db")
async def health_check_db(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """
    Database connectivity health check.

    In in-memory mode there is no database to probe and the check reports so.
    Returns 503 Service Unavailable if the database is down.
    """
    if settings.use_in_memory:
        return {"status": "healthy", "component": "database", "mode": "in-memory"}

    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()

        return {"status": "healthy", "component": "database", "mode": "sql"}
    except Exception as e:
        logger.error("Database health check failed", exc_info=e)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "component": "database",
                "error": "Database connection failed"
            }
        )


@router.get("/health/ready")
async def health_check_ready(
    session: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
):
    """
    Readiness probe.

    - Database connectivity (skipped in in-memory mode)
    - Payment gateway circuit state (informative: an open circuit only
      degrades online payments, bookings keep working)
    """
    health_status = {
        "status": "ready",
        "checks": {
            "payment_gateway": {
                "mode": settings.payment_gateway_mode,
                "circuit": payment_gateway_breaker.current_state,
            }
        },
    }

    if settings.use_in_memory:
        health_status["checks"]["database"] = "in-memory"
        return health_status

    try:
        result = await session.execute(text("SELECT 1"))
        result.scalar()
        health_status["checks"]["database"] = "healthy"
    except Exception as e:
        logger.error("Readiness check: Database unhealthy", exc_info=e)
        health_status["status"] = "not_ready"
        health_status["checks"]["database"] = "unhealthy"

        return JSONResponse(
            status_code=503,
            content=health_status
        )

    return health_status


@router.get("/health/live")
async def health_check_live():
    """Alias for /health for orchestrators that prefer /health/live."""
    return {"status": "ok", "service": SERVICE_NAME}
