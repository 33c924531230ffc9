import logging
from typing import Any

from app.application.services.payment_ledger import PaymentLedger
from app.domain.entities.payment import GatewayOutcome, Payment
from app.domain.errors import ValidationError

# Valores del campo `status` en las notificaciones IPN.
IPN_SUCCESS_STATUSES = frozenset({"VALID", "VALIDATED"})
IPN_CANCEL_STATUSES = frozenset({"CANCELLED"})


def outcome_from_ipn_status(status: str | None) -> GatewayOutcome:
    normalized = (status or "").strip().upper()
    if normalized in IPN_SUCCESS_STATUSES:
        return GatewayOutcome.SUCCESS
    if normalized in IPN_CANCEL_STATUSES:
        return GatewayOutcome.CANCEL
    return GatewayOutcome.FAIL


class HandleGatewayCallbackUseCase:
    """
    Aplica los callbacks (redirect del navegador e IPN) de la pasarela.

    Idempotente por `tran_id`: solo el primer callback sobre un pago PENDING
    cambia su estado.
    """

    def __init__(self, ledger: PaymentLedger, allow_demo_checkout: bool = False) -> None:
        self._ledger = ledger
        self._allow_demo_checkout = allow_demo_checkout
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        outcome: GatewayOutcome,
        payload: dict[str, Any],
    ) -> Payment:
        external_txn_id = self._transaction_id(payload)
        return await self._ledger.apply_gateway_callback(external_txn_id, outcome, payload)

    async def handle_ipn(self, payload: dict[str, Any]) -> Payment:
        outcome = outcome_from_ipn_status(payload.get("status"))
        self._logger.info(
            "IPN received",
            extra={"external_txn_id": payload.get("tran_id"), "outcome": outcome.value},
        )
        return await self.execute(outcome, payload)

    async def demo_checkout(self, external_txn_id: str, outcome: GatewayOutcome) -> Payment | None:
        """Simula la página de pago en modo demo/mock; devuelve None si no está habilitado."""
        if not self._allow_demo_checkout:
            return None
        return await self.execute(outcome, {"tran_id": external_txn_id, "status": "VALID"})

    @staticmethod
    def _transaction_id(payload: dict[str, Any]) -> str:
        external_txn_id = payload.get("tran_id")
        if not external_txn_id:
            raise ValidationError("tran_id", "es requerido")
        return str(external_txn_id)
