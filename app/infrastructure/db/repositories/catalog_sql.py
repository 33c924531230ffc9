from decimal import Decimal
from typing import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.service_catalog import ServiceCatalog
from app.domain.entities.room import Room, RoomStatus
from app.domain.entities.service_usage import Service
from app.infrastructure.db.tables import rooms, services


class RoomCatalogSQL(RoomCatalog):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _to_entity(row) -> Room:
        return Room(
            id=row["id"],
            code=row["code"],
            rate_per_night=Decimal(row["rate_per_night"]),
            capacity=row["capacity"],
            status=RoomStatus(row["status"]),
            room_type=row["room_type"],
        )

    async def get(self, room_id: int) -> Room | None:
        result = await self._session.execute(select(rooms).where(rooms.c.id == room_id).limit(1))
        row = result.mappings().first()
        return self._to_entity(row) if row else None

    async def list_rooms(self) -> Sequence[Room]:
        result = await self._session.execute(select(rooms).order_by(rooms.c.id))
        return [self._to_entity(row) for row in result.mappings().all()]

    async def set_status(self, room_id: int, status: RoomStatus) -> None:
        await self._session.execute(
            update(rooms).where(rooms.c.id == room_id).values(status=status.value)
        )


class ServiceCatalogSQL(ServiceCatalog):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, service_id: int) -> Service | None:
        result = await self._session.execute(
            select(services).where(services.c.id == service_id).limit(1)
        )
        row = result.mappings().first()
        if not row:
            return None
        return Service(
            id=row["id"],
            name=row["name"],
            unit_price=Decimal(row["unit_price"]),
            is_active=bool(row["is_active"]),
        )
