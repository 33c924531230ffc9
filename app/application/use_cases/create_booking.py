import logging
from datetime import date

from app.application.interfaces.clock import Clock
from app.application.interfaces.notifier import Notifier
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.availability_checker import AvailabilityChecker
from app.application.use_cases.common import notify_quietly, reservation_event_payload
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.errors import (
    AuthorizationError,
    CapacityExceededError,
    InvalidDateRangeError,
    RoomNotFoundError,
    RoomOutOfServiceError,
    ValidationError,
)
from app.domain.services.availability import is_valid_interval
from app.domain.value_objects.stay_period import StayPeriod


class CreateBookingUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        room_catalog: RoomCatalog,
        availability: AvailabilityChecker,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        notifier: Notifier,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog
        self._availability = availability
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._notifier = notifier
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        actor: Actor,
        room_id: int,
        check_in: date,
        check_out: date,
        guests: int = 1,
        holder_id: int | None = None,
    ) -> Reservation:
        if not is_valid_interval(check_in, check_out):
            raise InvalidDateRangeError("check_out debe ser posterior a check_in")
        if check_in < self._clock.today():
            raise InvalidDateRangeError("check_in no puede estar en el pasado")
        if guests < 1:
            raise ValidationError("guests", "debe ser >= 1")

        if holder_id is not None and holder_id != actor.user_id and not actor.is_privileged:
            raise AuthorizationError("Un cliente solo puede reservar a su nombre")
        holder = holder_id if holder_id is not None else actor.user_id
        period = StayPeriod(check_in=check_in, check_out=check_out)

        async with self._transaction_manager.start():
            room = await self._room_catalog.get(room_id)
            if room is None:
                raise RoomNotFoundError(room_id)
            if room.is_out_of_service:
                raise RoomOutOfServiceError(room_id)
            if not room.fits(guests):
                raise CapacityExceededError(room_id, room.capacity, guests)

            async with self._lock.lock_room(room_id):
                await self._availability.ensure_available(room_id, check_in, check_out)
                reservation = await self._reservation_repo.add(
                    Reservation.book(
                        room_id=room_id,
                        holder_id=holder,
                        created_by=actor.user_id,
                        period=period,
                        rate_per_night=room.rate_per_night,
                        guests=guests,
                        approved=actor.is_privileged,
                        now=self._clock.now(),
                    )
                )

        self._logger.info(
            "Reservation created",
            extra={
                "reservation_id": reservation.id,
                "room_id": room_id,
                "holder_id": holder,
                "status": reservation.status.value,
                "nights": reservation.nights,
            },
        )
        if reservation.status == ReservationStatus.APPROVED:
            await notify_quietly(
                self._notifier, "booking.confirmed", reservation_event_payload(reservation)
            )
        return reservation
