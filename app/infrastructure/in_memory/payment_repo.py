from collections import defaultdict
from dataclasses import replace
from datetime import datetime
from typing import Sequence

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment, PaymentStatus
from app.domain.errors import DuplicateTransactionError


class InMemoryPaymentRepo(PaymentRepo):
    def __init__(self) -> None:
        self._by_id: dict[int, Payment] = {}
        self._by_reservation: dict[int, list[int]] = defaultdict(list)
        self._by_txn: dict[str, int] = {}
        self._next_id = 1

    async def add(self, payment: Payment) -> Payment:
        if payment.external_txn_id and payment.external_txn_id in self._by_txn:
            raise DuplicateTransactionError(payment.external_txn_id)
        stored = replace(payment, id=self._next_id)
        self._next_id += 1
        self._by_id[stored.id] = stored
        self._by_reservation[stored.reservation_id].append(stored.id)
        if stored.external_txn_id:
            self._by_txn[stored.external_txn_id] = stored.id
        return replace(stored)

    async def get(self, payment_id: int) -> Payment | None:
        payment = self._by_id.get(payment_id)
        return replace(payment) if payment else None

    async def find_by_external_txn_id(self, external_txn_id: str) -> Payment | None:
        payment_id = self._by_txn.get(external_txn_id)
        return replace(self._by_id[payment_id]) if payment_id else None

    async def list_by_reservation(self, reservation_id: int) -> Sequence[Payment]:
        payments = [self._by_id[pid] for pid in self._by_reservation.get(reservation_id, [])]
        return [replace(p) for p in sorted(payments, key=lambda p: (p.created_at, p.id), reverse=True)]

    async def find_invoice_number(self, reservation_id: int) -> str | None:
        for payment_id in self._by_reservation.get(reservation_id, []):
            if self._by_id[payment_id].invoice_number:
                return self._by_id[payment_id].invoice_number
        return None

    async def invoice_number_taken(self, invoice_number: str, reservation_id: int) -> bool:
        return any(
            p.invoice_number == invoice_number and p.reservation_id != reservation_id
            for p in self._by_id.values()
        )

    async def attach_gateway_session(
        self,
        payment_id: int,
        session_key: str | None,
        redirect_url: str | None,
        now: datetime,
    ) -> None:
        payment = self._by_id[payment_id]
        payment.gateway_session_key = session_key
        payment.redirect_url = redirect_url
        payment.updated_at = now

    async def transition_from_pending(
        self,
        payment_id: int,
        status: PaymentStatus,
        now: datetime,
        failure_reason: str | None = None,
    ) -> bool:
        payment = self._by_id[payment_id]
        if payment.status != PaymentStatus.PENDING:
            return False
        if status == PaymentStatus.PAID:
            payment.mark_paid(now)
        elif status == PaymentStatus.FAILED:
            payment.fail(now, failure_reason)
        else:
            payment.cancel(now)
        return True
