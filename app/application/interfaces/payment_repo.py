from datetime import datetime
from typing import Sequence

from app.domain.entities.payment import Payment, PaymentStatus


class PaymentRepo:
    async def add(self, payment: Payment) -> Payment:
        raise NotImplementedError

    async def get(self, payment_id: int) -> Payment | None:
        raise NotImplementedError

    async def find_by_external_txn_id(self, external_txn_id: str) -> Payment | None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: int) -> Sequence[Payment]:
        """Historial de pagos, del más reciente al más antiguo."""
        raise NotImplementedError

    async def find_invoice_number(self, reservation_id: int) -> str | None:
        """Número de factura ya emitido para la reservación, si existe."""
        raise NotImplementedError

    async def invoice_number_taken(self, invoice_number: str, reservation_id: int) -> bool:
        """True si el número ya pertenece a otra reservación."""
        raise NotImplementedError

    async def attach_gateway_session(
        self,
        payment_id: int,
        session_key: str | None,
        redirect_url: str | None,
        now: datetime,
    ) -> None:
        raise NotImplementedError

    async def transition_from_pending(
        self,
        payment_id: int,
        status: PaymentStatus,
        now: datetime,
        failure_reason: str | None = None,
    ) -> bool:
        """
        Cambia el estado solo si el pago sigue PENDING (compare-and-set).

        Returns:
            True si esta llamada aplicó el cambio, False si el pago ya era final.
        """
        raise NotImplementedError
