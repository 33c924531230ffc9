from datetime import date

from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.room_catalog import RoomCatalog
from app.domain.entities.room import Room
from app.domain.errors import RoomUnavailableError
from app.domain.services.availability import find_conflicts, is_valid_interval


class AvailabilityChecker:
    """
    Responde si una habitación está libre para un intervalo.

    No cachea nada: cada consulta vuelve a leer el calendario. Para que el
    resultado siga siendo cierto al escribir, el llamador debe sostener el
    lock de la habitación.
    """

    def __init__(self, reservation_repo: ReservationRepo, room_catalog: RoomCatalog) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog

    async def is_available(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: int | None = None,
    ) -> bool:
        if not is_valid_interval(check_in, check_out):
            return False
        existing = await self._reservation_repo.list_overlapping(check_in, check_out, room_id=room_id)
        return not find_conflicts(existing, check_in, check_out, exclude_reservation_id)

    async def ensure_available(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: int | None = None,
    ) -> None:
        if not await self.is_available(room_id, check_in, check_out, exclude_reservation_id):
            raise RoomUnavailableError(room_id=room_id, check_in=check_in, check_out=check_out)

    async def booked_room_ids(self, check_in: date, check_out: date) -> set[int]:
        if not is_valid_interval(check_in, check_out):
            return set()
        existing = await self._reservation_repo.list_overlapping(check_in, check_out)
        return {reservation.room_id for reservation in find_conflicts(existing, check_in, check_out)}

    async def available_rooms(
        self,
        check_in: date,
        check_out: date,
        guests: int | None = None,
    ) -> list[Room]:
        if not is_valid_interval(check_in, check_out):
            return []
        booked = await self.booked_room_ids(check_in, check_out)
        rooms = await self._room_catalog.list_rooms()
        return [
            room
            for room in rooms
            if room.id not in booked and not room.is_out_of_service and room.fits(guests)
        ]
