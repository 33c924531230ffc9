from typing import Sequence

from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.common import load_reservation
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation, ReservationStatus


class GetBookingUseCase:
    def __init__(self, reservation_repo: ReservationRepo, transaction_manager: TransactionManager) -> None:
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager

    async def execute(self, actor: Actor, reservation_id: int) -> Reservation:
        async with self._transaction_manager.start():
            return await load_reservation(self._reservation_repo, reservation_id, actor)


class ListBookingsUseCase:
    """Los clientes solo ven sus reservaciones; staff/admin ven todas o filtran por titular."""

    def __init__(self, reservation_repo: ReservationRepo, transaction_manager: TransactionManager) -> None:
        self._reservation_repo = reservation_repo
        self._transaction_manager = transaction_manager

    async def execute(
        self,
        actor: Actor,
        status: ReservationStatus | None = None,
        holder_id: int | None = None,
    ) -> Sequence[Reservation]:
        if not actor.is_privileged:
            holder_id = actor.user_id
        async with self._transaction_manager.start():
            return await self._reservation_repo.list_reservations(holder_id=holder_id, status=status)
