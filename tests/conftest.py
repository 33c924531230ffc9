"""
Pytest configuration and shared fixtures.

Este módulo provee fixtures reutilizables para:
- Reloj y generador de ids deterministas (FakeClock, FakeIdGenerator)
- Contenedor in-memory con un catálogo de prueba
- Cliente HTTP de prueba (FastAPI TestClient) con el contenedor inyectado
- Engine aiosqlite in-memory para los tests de repositorios SQL
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.api.dependencies import build_in_memory_bundle, build_use_cases, get_use_cases
from app.application.interfaces.clock import FakeClock
from app.application.interfaces.id_generator import FakeIdGenerator
from app.config import Settings, get_settings
from app.infrastructure.circuit_breaker import payment_gateway_breaker
from app.infrastructure.db.tables import metadata
from app.main import app
from tests.factories import LAUNDRY, ROOM_BROKEN, ROOM_X, ROOM_Y, SPA

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# FIXTURES DE DOMINIO / APLICACIÓN
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    fake = FakeClock(datetime(2023, 12, 1, 12, tzinfo=timezone.utc))
    return fake


@pytest.fixture
def id_generator() -> FakeIdGenerator:
    return FakeIdGenerator()


@pytest.fixture
def settings() -> Settings:
    """Settings explícitos: no leen .env ni variables del entorno de quien corre los tests."""
    return Settings(
        _env_file=None,
        use_in_memory=True,
        currency_code="BDT",
        payment_gateway_mode="demo",
        gateway_timeout_seconds=0.5,
        public_base_url="http://testserver",
    )


@pytest.fixture
def bundle(settings, clock, id_generator):
    return build_in_memory_bundle(
        settings,
        clock=clock,
        id_generator=id_generator,
        rooms=(ROOM_X, ROOM_Y, ROOM_BROKEN),
        services=(LAUNDRY, SPA),
    )


@pytest.fixture
def use_cases(bundle, settings):
    return build_use_cases(bundle, settings)


# ============================================================================
# FIXTURES DE CLIENTE HTTP
# ============================================================================

@pytest.fixture
def client(bundle, settings) -> Generator[TestClient, None, None]:
    """
    FastAPI TestClient con el contenedor in-memory del test.
    Cada test arranca con repositorios vacíos.
    """
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_use_cases] = lambda: build_use_cases(bundle, settings)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# FIXTURES DE BASE DE DATOS
# ============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Engine aiosqlite in-memory; StaticPool comparte la misma conexión."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(test_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


# ============================================================================
# HOOKS DE PYTEST
# ============================================================================

@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """
    Reset circuit breakers antes de cada test.
    Evita que tests fallen por breakers abiertos de tests anteriores.
    """
    payment_gateway_breaker.close()
    yield
    payment_gateway_breaker.close()
