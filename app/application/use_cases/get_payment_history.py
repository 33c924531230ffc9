from dataclasses import dataclass

from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.payment_ledger import PaymentLedger, PaymentSummary
from app.application.use_cases.common import load_reservation
from app.domain.entities.actor import Actor
from app.domain.entities.payment import Payment


@dataclass
class PaymentHistory:
    reservation_id: int
    payments: list[Payment]
    summary: PaymentSummary


class GetPaymentHistoryUseCase:
    def __init__(
        self,
        reservation_repo: ReservationRepo,
        ledger: PaymentLedger,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._ledger = ledger
        self._transaction_manager = transaction_manager

    async def execute(self, actor: Actor, reservation_id: int) -> PaymentHistory:
        async with self._transaction_manager.start():
            reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
            payments = await self._ledger.history(reservation_id)
            summary = await self._ledger.summarize(reservation)
        return PaymentHistory(reservation_id=reservation_id, payments=list(payments), summary=summary)
