from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.payment_repo import PaymentRepo
from app.domain.entities.payment import Payment, PaymentMethod, PaymentStatus
from app.domain.errors import DuplicateTransactionError
from app.infrastructure.db.tables import payments


def _to_entity(row: Mapping[str, Any]) -> Payment:
    return Payment(
        id=row["id"],
        reservation_id=row["reservation_id"],
        invoice_number=row["invoice_number"],
        method=PaymentMethod(row["method"]),
        external_txn_id=row["external_txn_id"],
        gateway_session_key=row["gateway_session_key"],
        redirect_url=row["redirect_url"],
        failure_reason=row["failure_reason"],
        amount=Decimal(row["amount"]),
        currency_code=row["currency_code"],
        status=PaymentStatus(row["status"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        paid_at=row["paid_at"],
    )


class PaymentRepoSQL(PaymentRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, payment: Payment) -> Payment:
        stmt = insert(payments).values(
            reservation_id=payment.reservation_id,
            invoice_number=payment.invoice_number,
            method=payment.method.value,
            status=payment.status.value,
            amount=payment.amount,
            currency_code=payment.currency_code,
            external_txn_id=payment.external_txn_id,
            gateway_session_key=payment.gateway_session_key,
            redirect_url=payment.redirect_url,
            failure_reason=payment.failure_reason,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
            paid_at=payment.paid_at,
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as exc:
            raise DuplicateTransactionError(payment.external_txn_id or "") from exc
        payment.id = result.inserted_primary_key[0]
        return payment

    async def get(self, payment_id: int) -> Payment | None:
        stmt = select(payments).where(payments.c.id == payment_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def find_by_external_txn_id(self, external_txn_id: str) -> Payment | None:
        stmt = select(payments).where(payments.c.external_txn_id == external_txn_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def list_by_reservation(self, reservation_id: int) -> Sequence[Payment]:
        stmt = (
            select(payments)
            .where(payments.c.reservation_id == reservation_id)
            .order_by(payments.c.created_at.desc(), payments.c.id.desc())
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def find_invoice_number(self, reservation_id: int) -> str | None:
        stmt = (
            select(payments.c.invoice_number)
            .where(
                payments.c.reservation_id == reservation_id,
                payments.c.invoice_number.is_not(None),
            )
            .order_by(payments.c.id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar()

    async def invoice_number_taken(self, invoice_number: str, reservation_id: int) -> bool:
        stmt = (
            select(payments.c.id)
            .where(
                payments.c.invoice_number == invoice_number,
                payments.c.reservation_id != reservation_id,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar() is not None

    async def attach_gateway_session(
        self,
        payment_id: int,
        session_key: str | None,
        redirect_url: str | None,
        now: datetime,
    ) -> None:
        stmt = (
            update(payments)
            .where(payments.c.id == payment_id)
            .values(gateway_session_key=session_key, redirect_url=redirect_url, updated_at=now)
        )
        await self._session.execute(stmt)

    async def transition_from_pending(
        self,
        payment_id: int,
        status: PaymentStatus,
        now: datetime,
        failure_reason: str | None = None,
    ) -> bool:
        values: dict[str, Any] = {"status": status.value, "updated_at": now}
        if status == PaymentStatus.PAID:
            values["paid_at"] = now
        if failure_reason is not None:
            values["failure_reason"] = failure_reason[:255]
        stmt = (
            update(payments)
            .where(
                payments.c.id == payment_id,
                payments.c.status == PaymentStatus.PENDING.value,
            )
            .values(**values)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1
