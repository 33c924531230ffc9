from dataclasses import dataclass
from datetime import date

from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.availability_checker import AvailabilityChecker
from app.domain.entities.room import Room


@dataclass
class AvailabilitySearch:
    check_in: date
    check_out: date
    booked_room_ids: set[int]
    available_rooms: list[Room]


class CheckAvailabilityUseCase:
    """Consultas de disponibilidad de solo lectura; no toman locks."""

    def __init__(self, availability: AvailabilityChecker, transaction_manager: TransactionManager) -> None:
        self._availability = availability
        self._transaction_manager = transaction_manager

    async def execute(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        exclude_reservation_id: int | None = None,
    ) -> bool:
        async with self._transaction_manager.start():
            return await self._availability.is_available(
                room_id, check_in, check_out, exclude_reservation_id
            )

    async def search(
        self,
        check_in: date,
        check_out: date,
        guests: int | None = None,
    ) -> AvailabilitySearch:
        async with self._transaction_manager.start():
            booked = await self._availability.booked_room_ids(check_in, check_out)
            rooms = await self._availability.available_rooms(check_in, check_out, guests)
        return AvailabilitySearch(
            check_in=check_in,
            check_out=check_out,
            booked_room_ids=booked,
            available_rooms=rooms,
        )
