import logging

from app.application.interfaces.clock import Clock
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.availability_checker import AvailabilityChecker
from app.application.use_cases.common import load_reservation, require_privileged
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.entities.room import RoomStatus
from app.domain.errors import CheckInWindowError


class CheckInBookingUseCase:
    """
    Registra la llegada del huésped.

    Solo se permite desde `early_check_in_days` antes del check_in y hasta el
    día anterior al check_out (granularidad de día).
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        room_catalog: RoomCatalog,
        availability: AvailabilityChecker,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        clock: Clock,
        early_check_in_days: int = 1,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog
        self._availability = availability
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._early_check_in_days = early_check_in_days
        self._logger = logging.getLogger(__name__)

    async def execute(self, actor: Actor, reservation_id: int) -> Reservation:
        require_privileged(actor, "hacer check-in")
        today = self._clock.today()

        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                reservation.ensure_transition(ReservationStatus.CHECKED_IN, "hacer check-in")

                window_start, window_end = reservation.period.check_in_window(self._early_check_in_days)
                if not window_start <= today < window_end:
                    raise CheckInWindowError(
                        f"El check-in solo es posible entre {window_start} y el día anterior a "
                        f"{window_end} (hoy {today})"
                    )

                async with self._lock.lock_room(reservation.room_id):
                    await self._availability.ensure_available(
                        reservation.room_id,
                        reservation.check_in,
                        reservation.check_out,
                        exclude_reservation_id=reservation.id,
                    )
                    expected_version = reservation.lock_version
                    reservation.check_in_guest(self._clock.now())
                    reservation = await self._reservation_repo.update(reservation, expected_version)

                    room = await self._room_catalog.get(reservation.room_id)
                    if room is not None and not room.is_out_of_service:
                        await self._room_catalog.set_status(reservation.room_id, RoomStatus.RESERVED)

        self._logger.info(
            "Guest checked in",
            extra={"reservation_id": reservation.id, "room_id": reservation.room_id},
        )
        return reservation
