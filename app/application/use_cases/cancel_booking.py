import logging

from app.application.interfaces.clock import Clock
from app.application.interfaces.notifier import Notifier
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.use_cases.common import (
    load_reservation,
    notify_quietly,
    release_room_if_idle,
    reservation_event_payload,
)
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.errors import AuthorizationError, InvalidReservationStatusError


class CancelBookingUseCase:
    """
    Cancela una reservación.

    Desde PENDING/APPROVED la puede cancelar el titular o el staff. Cancelar
    una estadía ya iniciada (CHECKED_IN) depende de `allow_cancel_checked_in`
    y queda reservado a staff/admin.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        room_catalog: RoomCatalog,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        notifier: Notifier,
        clock: Clock,
        allow_cancel_checked_in: bool = False,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._notifier = notifier
        self._clock = clock
        self._allow_cancel_checked_in = allow_cancel_checked_in
        self._logger = logging.getLogger(__name__)

    async def execute(self, actor: Actor, reservation_id: int) -> Reservation:
        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                was_checked_in = reservation.status == ReservationStatus.CHECKED_IN
                if was_checked_in:
                    if not self._allow_cancel_checked_in:
                        raise InvalidReservationStatusError(
                            current_status=reservation.status.value,
                            expected_status=[
                                ReservationStatus.PENDING.value,
                                ReservationStatus.APPROVED.value,
                            ],
                            operation="cancelar",
                        )
                    if not actor.is_privileged:
                        raise AuthorizationError(
                            "Solo staff o admin pueden cancelar una estadía en curso"
                        )

                expected_version = reservation.lock_version
                reservation.cancel(self._clock.now())
                reservation = await self._reservation_repo.update(reservation, expected_version)

                if was_checked_in:
                    async with self._lock.lock_room(reservation.room_id):
                        await release_room_if_idle(
                            self._room_catalog,
                            self._reservation_repo,
                            reservation.room_id,
                            reservation.check_out,
                        )

        self._logger.info(
            "Reservation cancelled",
            extra={
                "reservation_id": reservation.id,
                "room_id": reservation.room_id,
                "cancelled_by": actor.user_id,
            },
        )
        await notify_quietly(self._notifier, "booking.cancelled", reservation_event_payload(reservation))
        return reservation
