from datetime import date
from typing import Sequence

from app.domain.entities.reservation import Reservation, ReservationStatus


class ReservationRepo:
    """
    Calendario de reservaciones.

    Las reservaciones nunca se eliminan; las canceladas quedan como historial.
    """

    async def get(self, reservation_id: int) -> Reservation | None:
        raise NotImplementedError

    async def add(self, reservation: Reservation) -> Reservation:
        raise NotImplementedError

    async def update(self, reservation: Reservation, expected_lock_version: int) -> Reservation:
        """
        Persiste los cambios solo si `lock_version` sigue siendo el esperado.

        Raises:
            OptimisticLockError: si otra escritura ganó la carrera.
        """
        raise NotImplementedError

    async def list_overlapping(
        self,
        check_in: date,
        check_out: date,
        room_id: int | None = None,
    ) -> Sequence[Reservation]:
        """Reservaciones activas cuyo intervalo se superpone con [check_in, check_out)."""
        raise NotImplementedError

    async def list_for_room(self, room_id: int) -> Sequence[Reservation]:
        raise NotImplementedError

    async def list_reservations(
        self,
        holder_id: int | None = None,
        status: ReservationStatus | None = None,
    ) -> Sequence[Reservation]:
        raise NotImplementedError
