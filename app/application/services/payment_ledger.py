import asyncio
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from app.application.interfaces.clock import Clock
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.payment_gateway import GatewaySessionRequest, PaymentGateway
from app.application.interfaces.payment_repo import PaymentRepo
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.resource_lock import ResourceLock
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.services.billing_calculator import BillingCalculator
from app.domain.entities.payment import (
    OUTCOME_STATUS,
    GatewayOutcome,
    Payment,
    PaymentMethod,
    PaymentStatus,
)
from app.domain.entities.reservation import Reservation, ReservationStatus
from app.domain.errors import (
    DuplicateTransactionError,
    ExternalDependencyError,
    GatewayTimeoutError,
    InvalidMoneyError,
    InvalidPaymentMethodError,
    PaymentExceedsBalanceError,
    PaymentNotFoundError,
    ReservationNotFoundError,
    ReservationNotPayableError,
    TotalBelowPaymentsError,
)
from app.domain.value_objects.money import Money


@dataclass(frozen=True)
class GatewayUrls:
    success_url: str
    fail_url: str
    cancel_url: str
    ipn_url: str

    @classmethod
    def under(cls, base_url: str) -> "GatewayUrls":
        base = base_url.rstrip("/")
        return cls(
            success_url=f"{base}/success",
            fail_url=f"{base}/fail",
            cancel_url=f"{base}/cancel",
            ipn_url=f"{base}/ipn",
        )


@dataclass(frozen=True)
class PaymentSummary:
    total_cost: Decimal
    total_paid: Decimal
    balance_due: Decimal
    is_fully_paid: bool

    @classmethod
    def of(cls, total_cost: Decimal, total_paid: Decimal) -> "PaymentSummary":
        return cls(
            total_cost=total_cost,
            total_paid=total_paid,
            balance_due=total_cost - total_paid,
            is_fully_paid=total_paid >= total_cost,
        )


@dataclass(frozen=True)
class PaymentOutcome:
    payment: Payment
    summary: PaymentSummary
    redirect_url: str | None = None


class PaymentLedger:
    """
    Libro de pagos de las reservaciones.

    La aceptación (lectura de saldo + inserción) ocurre bajo el lock de la
    reservación. La sesión con la pasarela se abre fuera del lock y con timeout
    propio; cualquier falla deja el pago en FAILED y se devuelve, no se lanza.
    """

    def __init__(
        self,
        reservation_repo: ReservationRepo,
        payment_repo: PaymentRepo,
        billing: BillingCalculator,
        gateway: PaymentGateway,
        resource_lock: ResourceLock,
        transaction_manager: TransactionManager,
        clock: Clock,
        id_generator: IdGenerator,
        gateway_urls: GatewayUrls,
        gateway_timeout_seconds: float = 10.0,
    ) -> None:
        self._reservation_repo = reservation_repo
        self._payment_repo = payment_repo
        self._billing = billing
        self._gateway = gateway
        self._lock = resource_lock
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._id_generator = id_generator
        self._gateway_urls = gateway_urls
        self._gateway_timeout = gateway_timeout_seconds
        self._logger = logging.getLogger(__name__)

    # === Consultas ===

    async def get_total_paid(self, reservation_id: int) -> Decimal:
        payments = await self._payment_repo.list_by_reservation(reservation_id)
        return sum((p.amount for p in payments if p.status == PaymentStatus.PAID), Decimal("0"))

    async def _committed_amount(self, reservation_id: int) -> Decimal:
        payments = await self._payment_repo.list_by_reservation(reservation_id)
        return sum(
            (p.amount for p in payments if p.status in (PaymentStatus.PAID, PaymentStatus.PENDING)),
            Decimal("0"),
        )

    async def ensure_total_covers_payments(
        self, reservation: Reservation, removed_amount: Decimal = Decimal("0")
    ) -> None:
        """
        Verifica que el total recalculado de `reservation`, menos `removed_amount`,
        no quede debajo de lo PAID + PENDING. Quien llama ya tiene el lock de la
        reservación.
        """
        breakdown = await self._billing.total(reservation)
        new_total = breakdown.total_cost.amount - removed_amount
        committed = await self._committed_amount(reservation.id)
        if new_total < committed:
            raise TotalBelowPaymentsError(reservation.id, new_total, committed)

    async def summarize(self, reservation: Reservation) -> PaymentSummary:
        async with self._transaction_manager.start():
            breakdown = await self._billing.total(reservation)
            total_paid = await self.get_total_paid(reservation.id)
        return PaymentSummary.of(breakdown.total_cost.amount, total_paid)

    async def history(self, reservation_id: int) -> Sequence[Payment]:
        async with self._transaction_manager.start():
            return await self._payment_repo.list_by_reservation(reservation_id)

    # === Registro ===

    async def record_payment(
        self,
        reservation_id: int,
        amount: Decimal,
        method: PaymentMethod | str,
        external_txn_id: str | None = None,
    ) -> PaymentOutcome:
        if amount is None or amount <= 0:
            raise InvalidMoneyError("el monto debe ser mayor que cero")
        method = self._parse_method(method)
        amount = Money(amount=amount, currency_code=self._billing.currency_code).amount

        now = self._clock.now()
        async with self._transaction_manager.start():
            async with self._lock.lock_reservation(reservation_id):
                reservation = await self._reservation_repo.get(reservation_id)
                if reservation is None:
                    raise ReservationNotFoundError(reservation_id)
                if reservation.status == ReservationStatus.CANCELLED:
                    raise ReservationNotPayableError(reservation_id, reservation.status.value)

                breakdown = await self._billing.total(reservation)
                # Los pagos PENDING comprometen saldo hasta que la pasarela los resuelve.
                committed = await self._committed_amount(reservation_id)
                available = breakdown.total_cost.amount - committed
                if amount > available:
                    raise PaymentExceedsBalanceError(amount=amount, balance_due=available)

                if external_txn_id:
                    if await self._payment_repo.find_by_external_txn_id(external_txn_id):
                        raise DuplicateTransactionError(external_txn_id)
                txn_id = external_txn_id or self._id_generator.generate_transaction_id(now)
                invoice_number = await self._billing.invoice_number_for(
                    reservation_id, self._clock.today()
                )

                factory = Payment.create_pending if method.uses_gateway else Payment.create_settled
                payment = await self._payment_repo.add(
                    factory(
                        reservation_id=reservation_id,
                        amount=amount,
                        currency_code=self._billing.currency_code,
                        method=method,
                        external_txn_id=txn_id,
                        invoice_number=invoice_number,
                        now=now,
                    )
                )

        self._logger.info(
            "Payment recorded",
            extra={
                "reservation_id": reservation_id,
                "payment_id": payment.id,
                "external_txn_id": payment.external_txn_id,
                "method": method.value,
                "status": payment.status.value,
            },
        )

        if not method.uses_gateway:
            return PaymentOutcome(payment=payment, summary=await self.summarize(reservation))
        return await self._open_gateway_session(payment, reservation)

    async def _open_gateway_session(self, payment: Payment, reservation: Reservation) -> PaymentOutcome:
        request = GatewaySessionRequest(
            external_txn_id=payment.external_txn_id,
            reservation_id=reservation.id,
            amount=payment.amount,
            currency_code=payment.currency_code,
            customer_id=reservation.holder_id,
            product_name=f"Reservation {reservation.id}",
            success_url=self._gateway_urls.success_url,
            fail_url=self._gateway_urls.fail_url,
            cancel_url=self._gateway_urls.cancel_url,
            ipn_url=self._gateway_urls.ipn_url,
        )
        failure_reason: str | None = None
        session = None
        try:
            session = await asyncio.wait_for(
                self._gateway.open_session(request), timeout=self._gateway_timeout
            )
        except asyncio.TimeoutError:
            failure_reason = GatewayTimeoutError(self._gateway_timeout, self._gateway.provider).message
        except ExternalDependencyError as exc:
            failure_reason = exc.message

        now = self._clock.now()
        async with self._transaction_manager.start():
            if session is None:
                await self._payment_repo.transition_from_pending(
                    payment.id, PaymentStatus.FAILED, now, failure_reason=failure_reason
                )
            else:
                await self._payment_repo.attach_gateway_session(
                    payment.id, session.session_key, session.redirect_url, now
                )
                if self._gateway.settles_immediately:
                    await self._payment_repo.transition_from_pending(payment.id, PaymentStatus.PAID, now)
            current = await self._payment_repo.get(payment.id)

        if session is None:
            self._logger.warning(
                "Gateway session failed, payment marked FAILED",
                extra={
                    "reservation_id": reservation.id,
                    "payment_id": payment.id,
                    "external_txn_id": payment.external_txn_id,
                    "reason": failure_reason,
                },
            )
        else:
            self._logger.info(
                "Gateway session opened",
                extra={
                    "reservation_id": reservation.id,
                    "payment_id": payment.id,
                    "external_txn_id": payment.external_txn_id,
                    "provider": self._gateway.provider,
                    "status": current.status.value,
                },
            )

        return PaymentOutcome(
            payment=current,
            summary=await self.summarize(reservation),
            redirect_url=current.redirect_url if current.status == PaymentStatus.PENDING else None,
        )

    # === Callbacks de la pasarela ===

    async def apply_gateway_callback(
        self,
        external_txn_id: str,
        outcome: GatewayOutcome,
        payload: dict[str, Any] | None = None,
    ) -> Payment:
        """
        Reconcilia un callback. Solo un pago PENDING cambia de estado; los
        reintentos sobre un pago final devuelven el pago sin tocarlo.
        """
        async with self._transaction_manager.start():
            payment = await self._payment_repo.find_by_external_txn_id(external_txn_id)
        if payment is None:
            raise PaymentNotFoundError(external_txn_id=external_txn_id)

        if payment.is_final:
            self._logger.info(
                "Gateway callback replayed on settled payment",
                extra={
                    "payment_id": payment.id,
                    "external_txn_id": external_txn_id,
                    "status": payment.status.value,
                    "outcome": outcome.value,
                },
            )
            return payment

        target = OUTCOME_STATUS[outcome]
        failure_reason = None
        if outcome == GatewayOutcome.SUCCESS:
            try:
                verified = await asyncio.wait_for(
                    self._gateway.verify(external_txn_id, payment.amount, payload or {}),
                    timeout=self._gateway_timeout,
                )
            except asyncio.TimeoutError:
                verified = False
                failure_reason = GatewayTimeoutError(self._gateway_timeout, self._gateway.provider).message
            except ExternalDependencyError as exc:
                verified = False
                failure_reason = exc.message
            if not verified:
                target = PaymentStatus.FAILED
                failure_reason = failure_reason or "gateway validation rejected the transaction"
        elif outcome == GatewayOutcome.FAIL:
            failure_reason = (payload or {}).get("error") or "gateway reported failure"

        async with self._transaction_manager.start():
            applied = await self._payment_repo.transition_from_pending(
                payment.id, target, self._clock.now(), failure_reason=failure_reason
            )
            current = await self._payment_repo.get(payment.id)

        log = self._logger.info if target == PaymentStatus.PAID else self._logger.warning
        log(
            "Gateway callback processed" if applied else "Gateway callback lost race, payment already final",
            extra={
                "reservation_id": current.reservation_id,
                "payment_id": current.id,
                "external_txn_id": external_txn_id,
                "outcome": outcome.value,
                "status": current.status.value,
            },
        )
        return current

    @staticmethod
    def _parse_method(method: PaymentMethod | str) -> PaymentMethod:
        if isinstance(method, PaymentMethod):
            return method
        try:
            return PaymentMethod(str(method).lower())
        except ValueError as exc:
            raise InvalidPaymentMethodError(str(method)) from exc
