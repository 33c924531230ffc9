from typing import Sequence

from app.domain.entities.room import Room, RoomStatus


class RoomCatalog:
    """Catálogo de habitaciones (mantenido por otro módulo; aquí solo lectura y marcador operativo)."""

    async def get(self, room_id: int) -> Room | None:
        raise NotImplementedError

    async def list_rooms(self) -> Sequence[Room]:
        raise NotImplementedError

    async def set_status(self, room_id: int, status: RoomStatus) -> None:
        raise NotImplementedError
