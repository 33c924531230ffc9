"""
Capa de Aplicación - Sistema de Reservaciones de Habitaciones.

Esta capa contiene los casos de uso, servicios de aplicación, DTOs e
interfaces (puertos). Orquesta la lógica de negocio y define los contratos
con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema (reservas, servicios, pagos)
- services/: Disponibilidad, facturación y libro de pagos
- dtos/: Data Transfer Objects (factura)
- interfaces/: Puertos (contratos para adaptadores)
"""

from app.application.dtos import InvoiceDTO
from app.application.interfaces import (
    Clock,
    FakeClock,
    FakeIdGenerator,
    IdempotencyRepo,
    IdGenerator,
    Notifier,
    PaymentGateway,
    PaymentRepo,
    RealIdGenerator,
    ReservationRepo,
    ResourceLock,
    RoomCatalog,
    ServiceCatalog,
    ServiceUsageRepo,
    SystemClock,
    TransactionManager,
)
from app.application.services import AvailabilityChecker, BillingCalculator, PaymentLedger

__all__ = [
    # DTOs
    "InvoiceDTO",
    # Services
    "AvailabilityChecker",
    "BillingCalculator",
    "PaymentLedger",
    # Interfaces - Repositories
    "IdempotencyRepo",
    "ReservationRepo",
    "ServiceUsageRepo",
    "PaymentRepo",
    "RoomCatalog",
    "ServiceCatalog",
    # Interfaces - Gateways
    "PaymentGateway",
    "Notifier",
    # Interfaces - Infrastructure
    "TransactionManager",
    "ResourceLock",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
