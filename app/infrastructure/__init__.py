"""
Capa de Infraestructura - Sistema de Reservaciones de Habitaciones.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).

Estructura:
- db/: Tablas SQLAlchemy Core, repositorios SQL, locks FOR UPDATE y reintentos
- gateways/: Adaptadores de pasarela de pago (SSLCommerz, demo)
- in_memory/: Implementaciones in-memory para modo demo y testing
- circuit_breaker.py: Breaker (pybreaker) para la pasarela de pago
"""

# Database
from app.infrastructure.db.repositories.catalog_sql import RoomCatalogSQL, ServiceCatalogSQL
from app.infrastructure.db.repositories.idempotency_repo_sql import IdempotencyRepoSQL
from app.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from app.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from app.infrastructure.db.repositories.service_usage_repo_sql import ServiceUsageRepoSQL
from app.infrastructure.db.resource_lock import SQLResourceLock
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# Gateways
from app.infrastructure.gateways.demo_gateway import DemoPaymentGateway
from app.infrastructure.gateways.sslcommerz_gateway import SSLCommerzGateway

# In-Memory (for testing)
from app.infrastructure.in_memory import (
    InMemoryIdempotencyRepo,
    InMemoryNotifier,
    InMemoryPaymentRepo,
    InMemoryReservationRepo,
    InMemoryResourceLock,
    InMemoryRoomCatalog,
    InMemoryServiceCatalog,
    InMemoryServiceUsageRepo,
    InMemoryTransactionManager,
)
from app.infrastructure.notifier import LoggingNotifier

__all__ = [
    # Database - Repositories SQL
    "IdempotencyRepoSQL",
    "ReservationRepoSQL",
    "ServiceUsageRepoSQL",
    "PaymentRepoSQL",
    "RoomCatalogSQL",
    "ServiceCatalogSQL",
    "SQLResourceLock",
    "SQLAlchemyTransactionManager",
    # Gateways
    "SSLCommerzGateway",
    "DemoPaymentGateway",
    "LoggingNotifier",
    # In-Memory Implementations
    "InMemoryIdempotencyRepo",
    "InMemoryReservationRepo",
    "InMemoryServiceUsageRepo",
    "InMemoryPaymentRepo",
    "InMemoryRoomCatalog",
    "InMemoryServiceCatalog",
    "InMemoryResourceLock",
    "InMemoryNotifier",
    "InMemoryTransactionManager",
]
