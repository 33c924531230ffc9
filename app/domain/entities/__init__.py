"""Entidades del dominio de reservaciones."""

from app.domain.entities.actor import Actor, ActorRole
from app.domain.entities.payment import GatewayOutcome, Payment, PaymentMethod, PaymentStatus
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.entities.room import Room, RoomStatus
from app.domain.entities.service_usage import Service, ServiceUsage

__all__ = [
    # Actor
    "Actor",
    "ActorRole",
    # Room
    "Room",
    "RoomStatus",
    # Reservation
    "Reservation",
    "ReservationStatus",
    # Service
    "Service",
    "ServiceUsage",
    # Payment
    "Payment",
    "PaymentStatus",
    "PaymentMethod",
    "GatewayOutcome",
]
