"""Catálogo de ejemplo para el modo in-memory y el script de seed."""

from decimal import Decimal
from typing import Iterable

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

from app.domain.entities.room import Room, RoomStatus
from app.domain.entities.service_usage import Service
from app.infrastructure.db.tables import rooms, services

DEMO_ROOMS = (
    Room(id=101, code="101", rate_per_night=Decimal("2500.00"), capacity=1, room_type="single"),
    Room(id=102, code="102", rate_per_night=Decimal("3500.00"), capacity=2, room_type="double"),
    Room(id=201, code="201", rate_per_night=Decimal("5000.00"), capacity=4, room_type="family"),
    Room(
        id=202,
        code="202",
        rate_per_night=Decimal("8000.00"),
        capacity=2,
        room_type="suite",
        status=RoomStatus.OUT_OF_SERVICE,
    ),
)

DEMO_SERVICES = (
    Service(id=1, name="Breakfast", unit_price=Decimal("450.00")),
    Service(id=2, name="Laundry", unit_price=Decimal("300.00")),
    Service(id=3, name="Airport transfer", unit_price=Decimal("1500.00")),
    Service(id=4, name="Spa", unit_price=Decimal("2000.00"), is_active=False),
)


async def seed_catalog(
    conn: AsyncConnection | AsyncSession,
    room_list: Iterable[Room] = DEMO_ROOMS,
    service_list: Iterable[Service] = DEMO_SERVICES,
) -> None:
    """Inserta habitaciones y servicios conservando sus ids."""
    room_rows = [
        {
            "id": room.id,
            "code": room.code,
            "room_type": room.room_type,
            "rate_per_night": room.rate_per_night,
            "capacity": room.capacity,
            "status": room.status.value,
        }
        for room in room_list
    ]
    service_rows = [
        {
            "id": service.id,
            "name": service.name,
            "unit_price": service.unit_price,
            "is_active": service.is_active,
        }
        for service in service_list
    ]
    if room_rows:
        await conn.execute(insert(rooms), room_rows)
    if service_rows:
        await conn.execute(insert(services), service_rows)
