"""Implementaciones in-memory (modo demo y testing)."""

from app.infrastructure.in_memory.idempotency_repo import InMemoryIdempotencyRepo
from app.infrastructure.in_memory.notifier import InMemoryNotifier
from app.infrastructure.in_memory.payment_repo import InMemoryPaymentRepo
from app.infrastructure.in_memory.reservation_repo import InMemoryReservationRepo
from app.infrastructure.in_memory.resource_lock import InMemoryResourceLock
from app.infrastructure.in_memory.room_catalog import InMemoryRoomCatalog
from app.infrastructure.in_memory.service_catalog import InMemoryServiceCatalog
from app.infrastructure.in_memory.service_usage_repo import InMemoryServiceUsageRepo
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager as InMemoryTransactionManager

__all__ = [
    # Repositories
    "InMemoryIdempotencyRepo",
    "InMemoryReservationRepo",
    "InMemoryServiceUsageRepo",
    "InMemoryPaymentRepo",
    # Catalogs
    "InMemoryRoomCatalog",
    "InMemoryServiceCatalog",
    # Infrastructure
    "InMemoryTransactionManager",
    "InMemoryResourceLock",
    "InMemoryNotifier",
]
