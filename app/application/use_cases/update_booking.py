import logging
from dataclasses import replace
from datetime import date

from app.application.interfaces.clock import Clock
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.availability_checker import AvailabilityChecker
from app.application.services.payment_ledger import PaymentLedger
from app.application.use_cases.common import load_reservation
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import EDITABLE_STATUSES, Reservation
from app.domain.errors import (
    CapacityExceededError,
    InvalidDateRangeError,
    InvalidReservationStatusError,
    RoomNotFoundError,
    RoomOutOfServiceError,
    ValidationError,
)
from app.domain.services.availability import is_valid_interval
from app.domain.value_objects.stay_period import StayPeriod


class UpdateBookingUseCase:
    """Cambia habitación, fechas u ocupación de una reservación PENDING/APPROVED."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        room_catalog: RoomCatalog,
        availability: AvailabilityChecker,
        ledger: PaymentLedger,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog
        self._availability = availability
        self._ledger = ledger
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        actor: Actor,
        reservation_id: int,
        room_id: int | None = None,
        check_in: date | None = None,
        check_out: date | None = None,
        guests: int | None = None,
    ) -> Reservation:
        if guests is not None and guests < 1:
            raise ValidationError("guests", "debe ser >= 1")

        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                if not reservation.is_editable:
                    raise InvalidReservationStatusError(
                        current_status=reservation.status.value,
                        expected_status=sorted(status.value for status in EDITABLE_STATUSES),
                        operation="modificar la reservación",
                    )

                target_room_id = room_id if room_id is not None else reservation.room_id
                new_check_in = check_in or reservation.check_in
                new_check_out = check_out or reservation.check_out
                new_guests = guests if guests is not None else reservation.guests

                if not is_valid_interval(new_check_in, new_check_out):
                    raise InvalidDateRangeError("check_out debe ser posterior a check_in")
                if new_check_in != reservation.check_in and new_check_in < self._clock.today():
                    raise InvalidDateRangeError("check_in no puede estar en el pasado")

                room = await self._room_catalog.get(target_room_id)
                if room is None:
                    raise RoomNotFoundError(target_room_id)
                if room.is_out_of_service:
                    raise RoomOutOfServiceError(target_room_id)
                if not room.fits(new_guests):
                    raise CapacityExceededError(target_room_id, room.capacity, new_guests)

                async with self._lock.lock_room(target_room_id):
                    await self._availability.ensure_available(
                        target_room_id,
                        new_check_in,
                        new_check_out,
                        exclude_reservation_id=reservation.id,
                    )
                    period = StayPeriod(check_in=new_check_in, check_out=new_check_out)
                    # Estadía más corta o habitación más barata: el total no baja de lo pagado.
                    await self._ledger.ensure_total_covers_payments(
                        replace(
                            reservation,
                            room_id=target_room_id,
                            check_in=period.check_in,
                            check_out=period.check_out,
                            nights=period.nights,
                        )
                    )
                    expected_version = reservation.lock_version
                    reservation.guests = new_guests
                    reservation.reschedule(
                        room_id=target_room_id,
                        period=period,
                        rate_per_night=room.rate_per_night,
                        now=self._clock.now(),
                    )
                    reservation = await self._reservation_repo.update(reservation, expected_version)

        self._logger.info(
            "Reservation updated",
            extra={
                "reservation_id": reservation.id,
                "room_id": reservation.room_id,
                "check_in": reservation.check_in.isoformat(),
                "check_out": reservation.check_out.isoformat(),
            },
        )
        return reservation
