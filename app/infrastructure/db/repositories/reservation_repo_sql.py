from datetime import date
from typing import Any, Mapping, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.reservation_repo import ReservationRepo
from app.domain.entities.reservation import RELEASED_STATUSES, Reservation, ReservationStatus
from app.domain.errors import OptimisticLockError, ReservationNotFoundError
from app.infrastructure.db.tables import reservations

_ACTIVE_STATUSES = [status.value for status in ReservationStatus if status not in RELEASED_STATUSES]


def _to_entity(row: Mapping[str, Any]) -> Reservation:
    return Reservation(
        id=row["id"],
        room_id=row["room_id"],
        holder_id=row["holder_id"],
        created_by=row["created_by"],
        check_in=row["check_in"],
        check_out=row["check_out"],
        guests=row["guests"],
        nights=row["nights"],
        room_charge=row["room_charge"],
        status=ReservationStatus(row["status"]),
        lock_version=row.get("lock_version", 0),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class ReservationRepoSQL(ReservationRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, reservation_id: int) -> Reservation | None:
        stmt = select(reservations).where(reservations.c.id == reservation_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def add(self, reservation: Reservation) -> Reservation:
        stmt = insert(reservations).values(
            room_id=reservation.room_id,
            holder_id=reservation.holder_id,
            created_by=reservation.created_by,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            guests=reservation.guests,
            nights=reservation.nights,
            room_charge=reservation.room_charge,
            status=reservation.status.value,
            lock_version=0,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )
        result = await self._session.execute(stmt)
        reservation.id = result.inserted_primary_key[0]
        reservation.lock_version = 0
        return reservation

    async def update(self, reservation: Reservation, expected_lock_version: int) -> Reservation:
        stmt = (
            update(reservations)
            .where(
                reservations.c.id == reservation.id,
                reservations.c.lock_version == expected_lock_version,
            )
            .values(
                room_id=reservation.room_id,
                check_in=reservation.check_in,
                check_out=reservation.check_out,
                guests=reservation.guests,
                nights=reservation.nights,
                room_charge=reservation.room_charge,
                status=reservation.status.value,
                updated_at=reservation.updated_at,
                lock_version=reservations.c.lock_version + 1,
            )
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            current = await self.get(reservation.id)
            if current is None:
                raise ReservationNotFoundError(reservation.id)
            raise OptimisticLockError(
                reservation_id=reservation.id,
                expected_version=expected_lock_version,
                actual_version=current.lock_version,
            )
        reservation.lock_version = expected_lock_version + 1
        return reservation

    async def list_overlapping(
        self,
        check_in: date,
        check_out: date,
        room_id: int | None = None,
    ) -> Sequence[Reservation]:
        where_clause = [
            reservations.c.status.in_(_ACTIVE_STATUSES),
            reservations.c.check_in < check_out,
            reservations.c.check_out > check_in,
        ]
        if room_id is not None:
            where_clause.append(reservations.c.room_id == room_id)
        stmt = select(reservations).where(*where_clause).order_by(reservations.c.check_in)
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def list_for_room(self, room_id: int) -> Sequence[Reservation]:
        stmt = (
            select(reservations)
            .where(reservations.c.room_id == room_id)
            .order_by(reservations.c.check_in)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def list_reservations(
        self,
        holder_id: int | None = None,
        status: ReservationStatus | None = None,
    ) -> Sequence[Reservation]:
        stmt = select(reservations).order_by(reservations.c.id.desc())
        if holder_id is not None:
            stmt = stmt.where(reservations.c.holder_id == holder_id)
        if status is not None:
            stmt = stmt.where(reservations.c.status == status.value)
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]
