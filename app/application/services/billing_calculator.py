import logging
from datetime import date

from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.service_usage_repo import ServiceUsageRepo
from app.domain.entities.reservation import Reservation
from app.domain.errors import RoomNotFoundError
from app.domain.services.billing import BillingBreakdown, compute_breakdown

logger = logging.getLogger(__name__)

INVOICE_NUMBER_ATTEMPTS = 5


class BillingCalculator:
    def __init__(
        self,
        room_catalog: RoomCatalog,
        service_usage_repo: ServiceUsageRepo,
        payment_repo: PaymentRepo,
        id_generator: IdGenerator,
        currency_code: str,
    ) -> None:
        self._room_catalog = room_catalog
        self._service_usage_repo = service_usage_repo
        self._payment_repo = payment_repo
        self._id_generator = id_generator
        self._currency_code = currency_code

    @property
    def currency_code(self) -> str:
        return self._currency_code

    async def total(self, reservation: Reservation) -> BillingBreakdown:
        """Costo de habitación (tarifa vigente × noches) más consumos registrados."""
        room = await self._room_catalog.get(reservation.room_id)
        if room is None:
            raise RoomNotFoundError(reservation.room_id)
        usages = await self._service_usage_repo.list_by_reservation(reservation.id)
        return compute_breakdown(reservation, room, list(usages), self._currency_code)

    async def invoice_number_for(self, reservation_id: int, today: date) -> str:
        """
        Reutiliza el número ya emitido para la reservación; si no hay, genera uno
        que no pertenezca a otra reservación.
        """
        existing = await self._payment_repo.find_invoice_number(reservation_id)
        if existing:
            return existing

        candidate = self._id_generator.generate_invoice_number(today)
        for _ in range(INVOICE_NUMBER_ATTEMPTS - 1):
            if not await self._payment_repo.invoice_number_taken(candidate, reservation_id):
                return candidate
            logger.warning(
                "Invoice number collision, regenerating",
                extra={"reservation_id": reservation_id, "invoice_number": candidate},
            )
            candidate = self._id_generator.generate_invoice_number(today)
        return candidate
