import logging

from app.application.interfaces.clock import Clock
from app.application.interfaces.notifier import Notifier
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.availability_checker import AvailabilityChecker
from app.application.use_cases.common import (
    load_reservation,
    notify_quietly,
    require_privileged,
    reservation_event_payload,
)
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation, ReservationStatus


class ApproveBookingUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        availability: AvailabilityChecker,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        notifier: Notifier,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._availability = availability
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._notifier = notifier
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(self, actor: Actor, reservation_id: int) -> Reservation:
        require_privileged(actor, "aprobar reservaciones")

        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                reservation.ensure_transition(ReservationStatus.APPROVED, "aprobar")

                # Revalida contra el calendario actual, excluyendo la propia reservación.
                async with self._lock.lock_room(reservation.room_id):
                    await self._availability.ensure_available(
                        reservation.room_id,
                        reservation.check_in,
                        reservation.check_out,
                        exclude_reservation_id=reservation.id,
                    )
                    expected_version = reservation.lock_version
                    reservation.approve(self._clock.now())
                    reservation = await self._reservation_repo.update(reservation, expected_version)

        self._logger.info(
            "Reservation approved",
            extra={"reservation_id": reservation.id, "approved_by": actor.user_id},
        )
        await notify_quietly(self._notifier, "booking.approved", reservation_event_payload(reservation))
        return reservation
