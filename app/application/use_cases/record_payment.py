import hashlib
import json
import logging
from decimal import Decimal
from typing import Any

from app.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.payment_ledger import PaymentLedger, PaymentOutcome
from app.application.use_cases.common import load_reservation
from app.domain.entities.actor import Actor
from app.domain.entities.payment import PaymentMethod, PaymentStatus
from app.domain.errors import IdempotencyConflictError, PaymentNotFoundError

SCOPE = "BOOKING_PAYMENT"


def _hash_request(reservation_id: int, payload: dict[str, Any]) -> str:
    normalized = json.dumps(
        {"reservation_id": reservation_id, **payload},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return hashlib.sha256(normalized.encode()).hexdigest()


class RecordPaymentUseCase:
    """
    Registra un pago para una reservación.

    Con `Idempotency-Key`, repetir la misma solicitud devuelve el pago ya
    registrado; la misma key con otro payload es un conflicto.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        idempotency_repo: IdempotencyRepo,
        ledger: PaymentLedger,
        transaction_manager: TransactionManager,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._idempotency_repo = idempotency_repo
        self._ledger = ledger
        self._transaction_manager = transaction_manager
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        actor: Actor,
        reservation_id: int,
        amount: Decimal,
        method: PaymentMethod | str,
        external_txn_id: str | None = None,
        idem_key: str | None = None,
    ) -> PaymentOutcome:
        req_hash = _hash_request(
            reservation_id,
            {
                "amount": amount,
                "method": getattr(method, "value", method),
                "external_txn_id": external_txn_id,
                "user_id": actor.user_id,
            },
        )

        replay = None
        async with self._transaction_manager.start():
            reservation = await load_reservation(self._reservation_repo, reservation_id, actor)
            existing = await self._idempotency_repo.find(SCOPE, idem_key) if idem_key else None
            if existing:
                if existing.request_hash != req_hash:
                    raise IdempotencyConflictError(idem_key=idem_key, scope=SCOPE)
                replay = await self._replay(existing)

        if replay is not None:
            self._logger.info(
                "Idempotent payment replay",
                extra={"reservation_id": reservation_id, "payment_id": replay.payment.id},
            )
            return replay

        # El ledger abre sus propias transacciones: la pasarela se llama fuera de ellas.
        outcome = await self._ledger.record_payment(
            reservation_id=reservation.id,
            amount=amount,
            method=method,
            external_txn_id=external_txn_id,
        )

        if idem_key:
            async with self._transaction_manager.start():
                await self._idempotency_repo.remember(
                    IdempotencyRecord(
                        scope=SCOPE,
                        idem_key=idem_key,
                        request_hash=req_hash,
                        reservation_id=reservation_id,
                        payment_id=outcome.payment.id,
                    )
                )
        return outcome

    async def _replay(self, record: IdempotencyRecord) -> PaymentOutcome:
        payment = await self._payment_repo.get(record.payment_id)
        if payment is None:
            raise PaymentNotFoundError(payment_id=record.payment_id)
        reservation = await self._reservation_repo.get(payment.reservation_id)
        summary = await self._ledger.summarize(reservation)
        redirect_url = payment.redirect_url if payment.status == PaymentStatus.PENDING else None
        return PaymentOutcome(payment=payment, summary=summary, redirect_url=redirect_url)
