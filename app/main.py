import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.deps import engine
from app.api.routers.billing import router as billing_router
from app.api.routers.bookings import router as bookings_router
from app.api.routers.gateway import router as gateway_router
from app.api.routers.health import router as health_router
from app.api.routers.rooms import router as rooms_router
from app.config import get_settings
from app.domain.errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    ExternalDependencyError,
    NotFoundError,
    ValidationError,
)
from app.infrastructure.db.tables import metadata

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Categoría de error de dominio -> status HTTP (el primer match gana)
DOMAIN_ERROR_STATUS: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 422),
    (NotFoundError, 404),
    (ConflictError, 409),
    (AuthorizationError, 403),
    (ExternalDependencyError, 502),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize DB tables (for dev/demo purposes)
    if not get_settings().use_in_memory:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    yield
    # Cleanup
    await engine.dispose()

app = FastAPI(
    title="Room Booking API",
    version="0.1.0",
    lifespan=lifespan
)


def status_for(exc: DomainError) -> int:
    for error_type, status_code in DOMAIN_ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 400


@app.exception_handler(DomainError)
async def domain_exception_handler(request: Request, exc: DomainError):
    status_code = status_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log(
        "Domain error",
        extra={
            "code": exc.code,
            "status_code": status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
    )


# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler to prevent stack trace exposure to clients.
    All unhandled exceptions are logged internally and return a generic error message.
    """
    error_id = str(uuid.uuid4())

    # Log the full error with context for internal debugging
    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        }
    )

    # Return a generic error to the client without exposing internal details
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists."
        }
    )


app.include_router(health_router, tags=["Health"])
app.include_router(bookings_router, prefix="/api/v1", tags=["Bookings"])
app.include_router(rooms_router, prefix="/api/v1", tags=["Rooms"])
app.include_router(billing_router, prefix="/api/v1", tags=["Billing"])
app.include_router(gateway_router, prefix="/api/v1", tags=["Payment Gateway"])
