from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass
class GatewaySessionRequest:
    external_txn_id: str
    reservation_id: int
    amount: Decimal
    currency_code: str
    customer_id: int
    product_name: str
    success_url: str
    fail_url: str
    cancel_url: str
    ipn_url: str


@dataclass
class GatewaySession:
    session_key: str | None
    redirect_url: str
    raw: dict[str, Any] = field(default_factory=dict)


class PaymentGateway:
    """Pasarela de pago externa (sesión de checkout + validación de callbacks)."""

    provider: str = "gateway"

    # La sesión se liquida en el acto, sin esperar callback.
    settles_immediately: bool = False

    async def open_session(self, request: GatewaySessionRequest) -> GatewaySession:
        raise NotImplementedError

    async def verify(
        self,
        external_txn_id: str,
        amount: Decimal,
        payload: dict[str, Any],
    ) -> bool:
        """Confirma con la pasarela que un callback de éxito es auténtico y por el monto esperado."""
        raise NotImplementedError
