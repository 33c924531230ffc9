"""Catálogo y actores de prueba compartidos por los tests."""

from datetime import date
from decimal import Decimal

from app.domain.entities.actor import Actor, ActorRole
from app.domain.entities.room import Room, RoomStatus
from app.domain.entities.service_usage import Service

# "Hoy" para los tests: las estadías de enero 2024 quedan en el futuro.
TODAY = date(2023, 12, 1)

ROOM_X = Room(id=1, code="X", rate_per_night=Decimal("100.00"), capacity=2, room_type="double")
ROOM_Y = Room(id=2, code="Y", rate_per_night=Decimal("150.00"), capacity=4, room_type="family")
ROOM_BROKEN = Room(
    id=3,
    code="Z",
    rate_per_night=Decimal("80.00"),
    capacity=2,
    status=RoomStatus.OUT_OF_SERVICE,
)

LAUNDRY = Service(id=1, name="Laundry", unit_price=Decimal("50.00"))
SPA = Service(id=2, name="Spa", unit_price=Decimal("80.00"), is_active=False)

CUSTOMER = Actor(user_id=1, role=ActorRole.CUSTOMER)
OTHER_CUSTOMER = Actor(user_id=2, role=ActorRole.CUSTOMER)
STAFF = Actor(user_id=100, role=ActorRole.STAFF)


def headers_for(actor: Actor) -> dict[str, str]:
    return {"X-User-Id": str(actor.user_id), "X-User-Role": actor.role.value}
