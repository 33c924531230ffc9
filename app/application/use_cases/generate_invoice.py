from decimal import Decimal

from app.application.dtos.invoice_dto import (
    InvoiceDTO,
    InvoicePaymentSummaryDTO,
    InvoiceRoomDTO,
    InvoiceStayDTO,
    InvoiceTotalsDTO,
)
from app.application.interfaces.clock import Clock
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.room_catalog import RoomCatalog
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.billing_calculator import BillingCalculator
from app.application.services.payment_ledger import PaymentLedger, PaymentSummary
from app.application.use_cases.common import load_reservation
from app.domain.entities.actor import Actor
from app.domain.errors import RoomNotFoundError

TAX_AMOUNT = Decimal("0.00")


class GenerateInvoiceUseCase:
    """Arma la factura de una reservación con sus líneas, totales e historial de pagos."""

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        room_catalog: RoomCatalog,
        billing: BillingCalculator,
        ledger: PaymentLedger,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._room_catalog = room_catalog
        self._billing = billing
        self._ledger = ledger
        self._transaction_manager = transaction_manager
        self._clock = clock

    async def execute(self, actor: Actor, reservation_id: int) -> InvoiceDTO:
        today = self._clock.today()
        async with self._transaction_manager.start():
            reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
            room = await self._room_catalog.get(reservation.room_id)
            if room is None:
                raise RoomNotFoundError(reservation.room_id)
            breakdown = await self._billing.total(reservation)
            payments = await self._ledger.history(reservation_id)
            total_paid = await self._ledger.get_total_paid(reservation_id)
            invoice_number = await self._billing.invoice_number_for(reservation_id, today)

        summary = PaymentSummary.of(breakdown.total_cost.amount, total_paid)
        return InvoiceDTO(
            invoice_number=invoice_number,
            reservation_id=reservation.id,
            issue_date=today,
            holder_id=reservation.holder_id,
            currency_code=self._billing.currency_code,
            room=InvoiceRoomDTO(
                room_id=room.id,
                code=room.code,
                room_type=room.room_type,
                rate_per_night=room.rate_per_night,
            ),
            stay=InvoiceStayDTO(
                check_in=reservation.check_in,
                check_out=reservation.check_out,
                nights=reservation.nights,
                guests=reservation.guests,
            ),
            totals=InvoiceTotalsDTO(
                subtotal=breakdown.total_cost.amount,
                tax=TAX_AMOUNT,
                total=breakdown.total_cost.amount + TAX_AMOUNT,
            ),
            payment_summary=InvoicePaymentSummaryDTO(
                total_paid=summary.total_paid,
                balance_due=summary.balance_due,
                is_fully_paid=summary.is_fully_paid,
            ),
            line_items=list(breakdown.line_items),
            payments=list(payments),
        )
