"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.id_generator import FakeIdGenerator, IdGenerator, RealIdGenerator
from app.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from app.application.interfaces.notifier import Notifier
from app.application.interfaces.payment_gateway import (
    GatewaySession,
    GatewaySessionRequest,
    PaymentGateway,
)
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.service_catalog import ServiceCatalog
from app.application.interfaces.service_usage_repo import ServiceUsageRepo
from app.application.interfaces.transaction_manager import TransactionManager

__all__ = [
    # Repositories
    "IdempotencyRepo",
    "IdempotencyRecord",
    "ReservationRepo",
    "ServiceUsageRepo",
    "PaymentRepo",
    # Catalogs
    "RoomCatalog",
    "ServiceCatalog",
    # Gateways
    "PaymentGateway",
    "GatewaySession",
    "GatewaySessionRequest",
    "Notifier",
    # Infrastructure
    "TransactionManager",
    "ResourceLock",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
