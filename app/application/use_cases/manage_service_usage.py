import logging
from typing import Sequence

from app.application.interfaces.clock import Clock
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.service_catalog import ServiceCatalog
from app.application.interfaces.service_usage_repo import ServiceUsageRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.payment_ledger import PaymentLedger
from app.application.use_cases.common import load_reservation
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.entities.service_usage import ServiceUsage
from app.domain.errors import (
    InactiveServiceError,
    InvalidReservationStatusError,
    ServiceNotFoundError,
    ServiceUsageNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _ensure_accepts_charges(reservation: Reservation, operation: str) -> None:
    if not reservation.accepts_charges:
        raise InvalidReservationStatusError(
            current_status=reservation.status.value,
            expected_status=[
                ReservationStatus.PENDING.value,
                ReservationStatus.APPROVED.value,
                ReservationStatus.CHECKED_IN.value,
            ],
            operation=operation,
        )


class AddServiceUsageUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        service_catalog: ServiceCatalog,
        service_usage_repo: ServiceUsageRepo,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._service_catalog = service_catalog
        self._service_usage_repo = service_usage_repo
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._clock = clock

    async def execute(
        self,
        actor: Actor,
        reservation_id: int,
        service_id: int,
        quantity: int = 1,
    ) -> ServiceUsage:
        if quantity < 1:
            raise ValidationError("quantity", "debe ser >= 1")

        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                _ensure_accepts_charges(reservation, "agregar servicios")

                service = await self._service_catalog.get(service_id)
                if service is None:
                    raise ServiceNotFoundError(service_id)
                if not service.is_active:
                    raise InactiveServiceError(service_id)

                usage = await self._service_usage_repo.add(
                    ServiceUsage.capture(
                        reservation_id=reservation_id,
                        service=service,
                        quantity=quantity,
                        created_at=self._clock.now(),
                    )
                )

        logger.info(
            "Service usage added",
            extra={
                "reservation_id": reservation_id,
                "usage_id": usage.id,
                "service_id": service_id,
                "amount": str(usage.amount),
            },
        )
        return usage


class RemoveServiceUsageUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        service_usage_repo: ServiceUsageRepo,
        ledger: PaymentLedger,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._service_usage_repo = service_usage_repo
        self._ledger = ledger
        self._lock = resource_lock
        self._transaction_manager = transaction_manager

    async def execute(self, actor: Actor, reservation_id: int, usage_id: int) -> None:
        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
                _ensure_accepts_charges(reservation, "quitar servicios")

                usage = await self._service_usage_repo.get(usage_id)
                if usage is None or usage.reservation_id != reservation_id:
                    raise ServiceUsageNotFoundError(usage_id, reservation_id)
                await self._ledger.ensure_total_covers_payments(reservation, removed_amount=usage.amount)
                await self._service_usage_repo.remove(usage_id)

        logger.info(
            "Service usage removed",
            extra={"reservation_id": reservation_id, "usage_id": usage_id},
        )


class ListServiceUsagesUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        service_usage_repo: ServiceUsageRepo,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._service_usage_repo = service_usage_repo
        self._transaction_manager = transaction_manager

    async def execute(self, actor: Actor, reservation_id: int) -> Sequence[ServiceUsage]:
        async with self._transaction_manager.start():
            await load_reservation(self._reservation_repo, reservation_id, actor)
            return await self._service_usage_repo.list_by_reservation(reservation_id)
