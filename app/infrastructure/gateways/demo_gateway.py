from decimal import Decimal
from typing import Any
from urllib.parse import urlencode

from app.application.interfaces.payment_gateway import (
    GatewaySession,
    GatewaySessionRequest,
    PaymentGateway,
)


class DemoPaymentGateway(PaymentGateway):
    """
    Pasarela simulada para demos y desarrollo local.

    Con `settles_immediately=True` (modo demo) el pago queda PAID al abrir la
    sesión. Con False (modo mock) el pago espera en PENDING hasta que se visita
    la página de checkout simulada.
    """

    provider = "demo"

    def __init__(self, checkout_url: str, settles_immediately: bool = True) -> None:
        self._checkout_url = checkout_url
        self.settles_immediately = settles_immediately

    async def open_session(self, request: GatewaySessionRequest) -> GatewaySession:
        query = urlencode({"tran_id": request.external_txn_id})
        return GatewaySession(
            session_key=f"DEMO-{request.external_txn_id}",
            redirect_url=f"{self._checkout_url}?{query}",
        )

    async def verify(self, external_txn_id: str, amount: Decimal, payload: dict[str, Any]) -> bool:
        return True
