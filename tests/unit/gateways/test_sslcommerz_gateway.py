import unittest
from decimal import Decimal
from urllib.parse import parse_qs

import httpx

from app.application.interfaces.payment_gateway import GatewaySessionRequest
from app.domain.errors import GatewayTimeoutError, PaymentGatewayError
from app.infrastructure.circuit_breaker import payment_gateway_breaker
from app.infrastructure.gateways.sslcommerz_gateway import (
    SANDBOX_BASE_URL,
    SESSION_PATH,
    VALIDATION_PATH,
    SSLCommerzGateway,
)


def _gateway(handler) -> SSLCommerzGateway:
    return SSLCommerzGateway(
        store_id="store",
        store_password="secret",
        sandbox=True,
        timeout_seconds=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestSSLCommerzGateway(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        payment_gateway_breaker.close()
        self.request = GatewaySessionRequest(
            external_txn_id="TXN-1700000000000-ABCDEFGHI",
            reservation_id=42,
            amount=Decimal("350.00"),
            currency_code="BDT",
            customer_id=7,
            product_name="Reservation 42",
            success_url="http://testserver/api/v1/payments/gateway/success",
            fail_url="http://testserver/api/v1/payments/gateway/fail",
            cancel_url="http://testserver/api/v1/payments/gateway/cancel",
            ipn_url="http://testserver/api/v1/payments/gateway/ipn",
        )

    def tearDown(self):
        payment_gateway_breaker.close()

    async def test_open_session_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(
                200,
                json={
                    "status": "SUCCESS",
                    "sessionkey": "SK-1",
                    "GatewayPageURL": "https://sandbox.sslcommerz.com/EasyCheckOut/SK-1",
                },
            )

        session = await _gateway(handler).open_session(self.request)

        self.assertEqual(session.session_key, "SK-1")
        self.assertEqual(session.redirect_url, "https://sandbox.sslcommerz.com/EasyCheckOut/SK-1")
        self.assertEqual(seen["url"], f"{SANDBOX_BASE_URL}{SESSION_PATH}")
        self.assertEqual(seen["form"]["total_amount"], ["350.00"])
        self.assertEqual(seen["form"]["tran_id"], [self.request.external_txn_id])
        self.assertEqual(seen["form"]["value_a"], ["42"])
        self.assertEqual(seen["form"]["ipn_url"], [self.request.ipn_url])

    async def test_open_session_rejected(self):
        def handler(request):
            return httpx.Response(200, json={"status": "FAILED", "failedreason": "Store Credential Error"})

        with self.assertRaises(PaymentGatewayError) as ctx:
            await _gateway(handler).open_session(self.request)
        self.assertIn("Store Credential Error", ctx.exception.message)

    async def test_open_session_http_error(self):
        def handler(request):
            return httpx.Response(503, text="maintenance")

        with self.assertRaises(PaymentGatewayError):
            await _gateway(handler).open_session(self.request)

    async def test_open_session_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with self.assertRaises(GatewayTimeoutError):
            await _gateway(handler).open_session(self.request)

    async def test_non_json_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>oops</html>")

        with self.assertRaises(PaymentGatewayError):
            await _gateway(handler).open_session(self.request)

    async def test_verify_valid_transaction(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["val_id"] = request.url.params["val_id"]
            return httpx.Response(
                200,
                json={"status": "VALID", "tran_id": self.request.external_txn_id, "amount": "350.00"},
            )

        verified = await _gateway(handler).verify(
            self.request.external_txn_id, Decimal("350.00"), {"val_id": "VAL-9"}
        )
        self.assertTrue(verified)
        self.assertEqual(seen["path"], VALIDATION_PATH)
        self.assertEqual(seen["val_id"], "VAL-9")

    async def test_verify_rejects_amount_mismatch(self):
        def handler(request):
            return httpx.Response(
                200,
                json={"status": "VALIDATED", "tran_id": self.request.external_txn_id, "amount": "10.00"},
            )

        verified = await _gateway(handler).verify(
            self.request.external_txn_id, Decimal("350.00"), {"val_id": "VAL-9"}
        )
        self.assertFalse(verified)

    async def test_verify_rejects_invalid_status(self):
        def handler(request):
            return httpx.Response(200, json={"status": "INVALID_TRANSACTION"})

        verified = await _gateway(handler).verify(
            self.request.external_txn_id, Decimal("350.00"), {"val_id": "VAL-9"}
        )
        self.assertFalse(verified)

    async def test_verify_without_val_id_skips_the_call(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={})

        verified = await _gateway(handler).verify(self.request.external_txn_id, Decimal("1"), {})
        self.assertFalse(verified)
        self.assertEqual(calls, [])

    def test_credentials_are_required(self):
        with self.assertRaises(ValueError):
            SSLCommerzGateway(store_id="", store_password="secret")
