"""
Capa de Dominio - Sistema de Reservaciones de Habitaciones.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects, servicios de dominio y excepciones.

Estructura:
- entities/: Entidades del dominio (Reservation, Payment, Room, etc.)
- value_objects/: Objetos de valor inmutables (Money, StayPeriod, InvoiceNumber)
- services/: Reglas puras (superposición de intervalos, facturación)
- errors.py: Excepciones específicas del dominio
"""

from app.domain.entities import (
    Actor,
    ActorRole,
    GatewayOutcome,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Reservation,
    ReservationStatus,
    Room,
    RoomStatus,
    Service,
    ServiceUsage,
)
from app.domain.errors import (
    AuthorizationError,
    ConflictError,
    DomainError,
    ExternalDependencyError,
    NotFoundError,
    ValidationError,
)
from app.domain.value_objects import InvoiceNumber, Money, StayPeriod

__all__ = [
    # Entities
    "Actor",
    "ActorRole",
    "Room",
    "RoomStatus",
    "Reservation",
    "ReservationStatus",
    "Service",
    "ServiceUsage",
    "Payment",
    "PaymentStatus",
    "PaymentMethod",
    "GatewayOutcome",
    # Value Objects
    "Money",
    "StayPeriod",
    "InvoiceNumber",
    # Errors
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "AuthorizationError",
    "ExternalDependencyError",
]
