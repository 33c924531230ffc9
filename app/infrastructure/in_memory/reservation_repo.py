from dataclasses import replace
from datetime import date
from typing import Sequence

from app.application.interfaces.reservation_repo import ReservationRepo
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.errors import OptimisticLockError, ReservationNotFoundError
from app.domain.services.availability import find_conflicts


class InMemoryReservationRepo(ReservationRepo):
    """Guarda copias: los cambios solo se ven tras `update`, igual que en SQL."""

    def __init__(self) -> None:
        self._by_id: dict[int, Reservation] = {}
        self._next_id = 1

    async def get(self, reservation_id: int) -> Reservation | None:
        reservation = self._by_id.get(reservation_id)
        return replace(reservation) if reservation else None

    async def add(self, reservation: Reservation) -> Reservation:
        stored = replace(reservation, id=self._next_id, lock_version=0)
        self._next_id += 1
        self._by_id[stored.id] = stored
        return replace(stored)

    async def update(self, reservation: Reservation, expected_lock_version: int) -> Reservation:
        current = self._by_id.get(reservation.id)
        if current is None:
            raise ReservationNotFoundError(reservation.id)
        if current.lock_version != expected_lock_version:
            raise OptimisticLockError(
                reservation_id=reservation.id,
                expected_version=expected_lock_version,
                actual_version=current.lock_version,
            )
        stored = replace(reservation, lock_version=expected_lock_version + 1)
        self._by_id[stored.id] = stored
        return replace(stored)

    async def list_overlapping(
        self,
        check_in: date,
        check_out: date,
        room_id: int | None = None,
    ) -> Sequence[Reservation]:
        candidates = [
            r for r in self._by_id.values() if room_id is None or r.room_id == room_id
        ]
        return [replace(r) for r in find_conflicts(candidates, check_in, check_out)]

    async def list_for_room(self, room_id: int) -> Sequence[Reservation]:
        return [replace(r) for r in self._by_id.values() if r.room_id == room_id]

    async def list_reservations(
        self,
        holder_id: int | None = None,
        status: ReservationStatus | None = None,
    ) -> Sequence[Reservation]:
        matches = [
            replace(r)
            for r in self._by_id.values()
            if (holder_id is None or r.holder_id == holder_id)
            and (status is None or r.status == status)
        ]
        return sorted(matches, key=lambda r: r.id, reverse=True)
