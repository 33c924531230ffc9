from dataclasses import replace
from typing import Sequence

from app.application.interfaces.room_catalog import RoomCatalog
from app.domain.entities.room import Room, RoomStatus


class InMemoryRoomCatalog(RoomCatalog):
    def __init__(self, rooms: Sequence[Room] = ()) -> None:
        self._rooms: dict[int, Room] = {room.id: replace(room) for room in rooms}

    def put(self, room: Room) -> None:
        self._rooms[room.id] = replace(room)

    async def get(self, room_id: int) -> Room | None:
        room = self._rooms.get(room_id)
        return replace(room) if room else None

    async def list_rooms(self) -> Sequence[Room]:
        return [replace(room) for room in sorted(self._rooms.values(), key=lambda r: r.id)]

    async def set_status(self, room_id: int, status: RoomStatus) -> None:
        if room_id in self._rooms:
            self._rooms[room_id].status = status
