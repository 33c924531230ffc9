import json
import logging
from decimal import Decimal, InvalidOperation
from typing import Any

import httpx

from app.application.interfaces.payment_gateway import (
    GatewaySession,
    GatewaySessionRequest,
    PaymentGateway,
)
from app.domain.errors import GatewayTimeoutError, PaymentGatewayError
from app.infrastructure.circuit_breaker import (
    CircuitBreakerError,
    call_with_breaker,
    payment_gateway_breaker,
)

logger = logging.getLogger(__name__)

SANDBOX_BASE_URL = "https://sandbox.sslcommerz.com"
LIVE_BASE_URL = "https://securepay.sslcommerz.com"
SESSION_PATH = "/gwprocess/v4/api.php"
VALIDATION_PATH = "/validator/api/validationserverAPI.php"

VALID_STATUSES = frozenset({"VALID", "VALIDATED"})


class SSLCommerzGateway(PaymentGateway):
    """
    Cliente de SSLCommerz (API v4) sobre httpx.

    - open_session: crea la sesión de checkout y devuelve GatewayPageURL.
    - verify: consulta la Validation API con el `val_id` recibido en el callback.

    Todas las llamadas pasan por el circuit breaker de la pasarela y tienen
    timeout propio; los errores se traducen a PaymentGatewayError/GatewayTimeoutError.
    """

    provider = "sslcommerz"

    def __init__(
        self,
        store_id: str,
        store_password: str,
        sandbox: bool = True,
        timeout_seconds: float = 10.0,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not store_id or not store_password:
            raise ValueError("SSLCOMMERZ_STORE_ID and SSLCOMMERZ_STORE_PASSWORD are required")
        self._store_id = store_id
        self._store_password = store_password
        self._base_url = (base_url or (SANDBOX_BASE_URL if sandbox else LIVE_BASE_URL)).rstrip("/")
        self._timeout = timeout_seconds
        self._transport = transport

    async def open_session(self, request: GatewaySessionRequest) -> GatewaySession:
        form = {
            "store_id": self._store_id,
            "store_passwd": self._store_password,
            "total_amount": f"{request.amount:.2f}",
            "currency": request.currency_code,
            "tran_id": request.external_txn_id,
            "success_url": request.success_url,
            "fail_url": request.fail_url,
            "cancel_url": request.cancel_url,
            "ipn_url": request.ipn_url,
            "value_a": str(request.reservation_id),
            "cus_name": f"Guest {request.customer_id}",
            "cus_email": f"guest{request.customer_id}@example.com",
            "cus_add1": "N/A",
            "cus_city": "Dhaka",
            "cus_country": "Bangladesh",
            "cus_phone": "N/A",
            "shipping_method": "NO",
            "product_name": request.product_name,
            "product_category": "Hotel Booking",
            "product_profile": "non-physical-goods",
        }
        body = await self._send("POST", SESSION_PATH, request.external_txn_id, data=form)

        if body.get("status") != "SUCCESS" or not body.get("GatewayPageURL"):
            reason = body.get("failedreason") or "session rejected"
            logger.warning(
                "SSLCommerz session rejected",
                extra={"external_txn_id": request.external_txn_id, "reason": reason},
            )
            raise PaymentGatewayError(reason, provider=self.provider)

        return GatewaySession(
            session_key=body.get("sessionkey"),
            redirect_url=body["GatewayPageURL"],
            raw=body,
        )

    async def verify(
        self,
        external_txn_id: str,
        amount: Decimal,
        payload: dict[str, Any],
    ) -> bool:
        val_id = payload.get("val_id")
        if not val_id:
            logger.warning(
                "SSLCommerz callback without val_id",
                extra={"external_txn_id": external_txn_id},
            )
            return False

        params = {
            "val_id": val_id,
            "store_id": self._store_id,
            "store_passwd": self._store_password,
            "format": "json",
            "v": "1",
        }
        body = await self._send("GET", VALIDATION_PATH, external_txn_id, params=params)

        if body.get("status") not in VALID_STATUSES or body.get("tran_id") != external_txn_id:
            return False
        try:
            return Decimal(str(body.get("amount"))).quantize(Decimal("0.01")) == amount.quantize(
                Decimal("0.01")
            )
        except InvalidOperation:
            return False

    async def _send(self, method: str, path: str, external_txn_id: str, **kwargs: Any) -> dict[str, Any]:
        async def _make_request() -> httpx.Response:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response

        try:
            response = await call_with_breaker(payment_gateway_breaker, _make_request)
        except CircuitBreakerError as exc:
            logger.error(
                "Payment gateway circuit breaker is open - service unavailable",
                extra={"external_txn_id": external_txn_id, "circuit_state": str(exc)},
            )
            raise PaymentGatewayError(
                "service temporarily unavailable (circuit breaker open)", provider=self.provider
            ) from exc
        except httpx.TimeoutException as exc:
            logger.warning(
                "Payment gateway request timeout",
                extra={"external_txn_id": external_txn_id, "timeout": self._timeout},
            )
            raise GatewayTimeoutError(self._timeout, provider=self.provider) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "Payment gateway HTTP error",
                exc_info=exc,
                extra={"external_txn_id": external_txn_id},
            )
            raise PaymentGatewayError(str(exc), provider=self.provider) from exc

        try:
            body = response.json()
        except json.JSONDecodeError as exc:
            raise PaymentGatewayError("invalid JSON response", provider=self.provider) from exc
        if not isinstance(body, dict):
            raise PaymentGatewayError("unexpected response shape", provider=self.provider)
        return body
