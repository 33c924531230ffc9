import logging

from app.application.interfaces.clock import Clock
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.common import (
    load_reservation,
    release_room_if_idle,
    require_privileged,
)
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation


class CheckOutBookingUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        room_catalog: RoomCatalog,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, actor: Actor, reservation_id: int) -> Reservation:
        require_privileged(actor, "hacer check-out")

        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                expected_version = reservation.lock_version
                reservation.check_out_guest(self._clock.now())
                reservation = await self._reservation_repo.update(reservation, expected_version)

                async with self._lock.lock_room(reservation.room_id):
                    released = await release_room_if_idle(
                        self._room_catalog,
                        self._reservation_repo,
                        reservation.room_id,
                        reservation.check_out,
                    )

        self._logger.info(
            "Guest checked out",
            extra={
                "reservation_id": reservation.id,
                "room_id": reservation.room_id,
                "room_released": released,
            },
        )
        return reservation
