"""Entidad Payment - representa un pago de reservación."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.value_objects.money import Money


class PaymentStatus(str, Enum):
    """Estados posibles de un pago."""

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    """Métodos de pago soportados."""

    CASH = "cash"
    CARD = "card"
    BKASH = "bkash"
    ROCKET = "rocket"
    NAGAD = "nagad"
    BANK = "bank"
    ONLINE = "online"
    SSLCOMMERZ = "sslcommerz"

    @property
    def uses_gateway(self) -> bool:
        """Los métodos en línea se confirman vía callback de la pasarela."""
        return self in GATEWAY_METHODS


GATEWAY_METHODS = frozenset({PaymentMethod.ONLINE, PaymentMethod.SSLCOMMERZ})


class GatewayOutcome(str, Enum):
    """Resultado reportado por la pasarela en el callback."""

    SUCCESS = "success"
    FAIL = "fail"
    CANCEL = "cancel"


# Solo PENDING puede cambiar; el resto son estados finales.
ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset(
        {PaymentStatus.PAID, PaymentStatus.FAILED, PaymentStatus.CANCELLED}
    ),
    PaymentStatus.PAID: frozenset(),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}

OUTCOME_STATUS: dict[GatewayOutcome, PaymentStatus] = {
    GatewayOutcome.SUCCESS: PaymentStatus.PAID,
    GatewayOutcome.FAIL: PaymentStatus.FAILED,
    GatewayOutcome.CANCEL: PaymentStatus.CANCELLED,
}


@dataclass
class Payment:
    """
    Entidad que representa un intento de pago asociado a una reservación.

    Los pagos nunca se eliminan: un intento fallido o cancelado queda en el
    historial con su estado final.
    """

    # Identificadores
    id: int | None = None
    reservation_id: int = 0
    invoice_number: str | None = None

    # Método y pasarela
    method: PaymentMethod = PaymentMethod.CASH
    external_txn_id: str | None = None
    gateway_session_key: str | None = None
    redirect_url: str | None = None
    failure_reason: str | None = None

    # Monto
    amount: Decimal = Decimal("0")
    currency_code: str = "BDT"

    # Estado
    status: PaymentStatus = PaymentStatus.PENDING

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None
    paid_at: datetime | None = None

    # === Propiedades ===

    @property
    def money(self) -> Money:
        """Retorna el monto como Value Object Money."""
        return Money(amount=self.amount, currency_code=self.currency_code)

    @property
    def is_paid(self) -> bool:
        return self.status == PaymentStatus.PAID

    @property
    def is_final(self) -> bool:
        """Verifica si el pago está en un estado final (no puede cambiar)."""
        return not ALLOWED_TRANSITIONS[self.status]

    # === Métodos de negocio ===

    def can_become(self, target: PaymentStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def mark_paid(self, paid_at: datetime) -> None:
        """Marca el pago como liquidado."""
        if not self.can_become(PaymentStatus.PAID):
            raise ValueError(f"No se puede liquidar un pago en estado {self.status}")
        self.status = PaymentStatus.PAID
        self.paid_at = paid_at
        self.updated_at = paid_at

    def fail(self, now: datetime, reason: str | None = None) -> None:
        """Marca el pago como fallido."""
        if not self.can_become(PaymentStatus.FAILED):
            raise ValueError(f"No se puede marcar como fallido un pago en estado {self.status}")
        self.status = PaymentStatus.FAILED
        self.failure_reason = reason
        self.updated_at = now

    def cancel(self, now: datetime) -> None:
        """Cancela el pago."""
        if not self.can_become(PaymentStatus.CANCELLED):
            raise ValueError(f"No se puede cancelar un pago en estado {self.status}")
        self.status = PaymentStatus.CANCELLED
        self.updated_at = now

    @classmethod
    def create_settled(
        cls,
        reservation_id: int,
        amount: Decimal,
        currency_code: str,
        method: PaymentMethod,
        external_txn_id: str,
        invoice_number: str,
        now: datetime,
    ) -> "Payment":
        """Factory para un pago síncrono (efectivo, tarjeta, billeteras locales)."""
        return cls(
            reservation_id=reservation_id,
            amount=amount,
            currency_code=currency_code,
            method=method,
            external_txn_id=external_txn_id,
            invoice_number=invoice_number,
            status=PaymentStatus.PAID,
            created_at=now,
            updated_at=now,
            paid_at=now,
        )

    @classmethod
    def create_pending(
        cls,
        reservation_id: int,
        amount: Decimal,
        currency_code: str,
        method: PaymentMethod,
        external_txn_id: str,
        invoice_number: str,
        now: datetime,
    ) -> "Payment":
        """Factory para un pago que espera confirmación de la pasarela."""
        return cls(
            reservation_id=reservation_id,
            amount=amount,
            currency_code=currency_code,
            method=method,
            external_txn_id=external_txn_id,
            invoice_number=invoice_number,
            status=PaymentStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
