"""Entidad Room - habitación reservable (leída del catálogo)."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class RoomStatus(str, Enum):
    """Marcador operativo de una habitación."""

    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


@dataclass
class Room:
    """
    Recurso físico reservable.

    El catálogo es dueño de la tarifa, la capacidad y el estado; el core solo
    alterna el marcador AVAILABLE/RESERVED durante check-in y check-out.
    """

    id: int
    code: str
    rate_per_night: Decimal
    capacity: int = 1
    status: RoomStatus = RoomStatus.AVAILABLE
    room_type: str | None = None

    @property
    def is_out_of_service(self) -> bool:
        return self.status == RoomStatus.OUT_OF_SERVICE

    def fits(self, guests: int | None) -> bool:
        """Verifica si la ocupación solicitada cabe en la habitación."""
        return guests is None or guests <= self.capacity
