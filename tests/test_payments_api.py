"""Pagos en línea vía HTTP: sesión de pasarela, callbacks e idempotencia."""

from decimal import Decimal

import pytest

from app.api.dependencies import build_in_memory_bundle
from app.infrastructure.gateways.demo_gateway import DemoPaymentGateway
from tests.factories import CUSTOMER, LAUNDRY, ROOM_X, ROOM_Y, SPA, headers_for

GATEWAY = "/api/v1/payments/gateway"


@pytest.fixture
def bundle(settings, clock, id_generator):
    """Pasarela en modo mock: el pago queda PENDING hasta el callback."""
    gateway = DemoPaymentGateway(
        checkout_url=f"{settings.gateway_callback_base}/demo-checkout", settles_immediately=False
    )
    return build_in_memory_bundle(
        settings,
        clock=clock,
        id_generator=id_generator,
        gateway=gateway,
        rooms=(ROOM_X, ROOM_Y),
        services=(LAUNDRY, SPA),
    )


@pytest.fixture
def booking(client):
    response = client.post(
        "/api/v1/bookings",
        json={"room_id": ROOM_X.id, "check_in": "2024-01-01", "check_out": "2024-01-03"},
        headers=headers_for(CUSTOMER),
    )
    return response.json()


def _pay_online(client, booking, amount="200.00", **headers):
    return client.post(
        f"/api/v1/bookings/{booking['id']}/payments",
        json={"amount": amount, "method": "sslcommerz"},
        headers={**headers_for(CUSTOMER), **headers},
    )


def _history(client, booking):
    return client.get(f"/api/v1/bookings/{booking['id']}/payments", headers=headers_for(CUSTOMER)).json()


class TestOnlinePayment:
    def test_pending_payment_returns_redirect(self, client, booking):
        response = _pay_online(client, booking)

        assert response.status_code == 201
        body = response.json()
        assert body["payment"]["status"] == "PENDING"
        assert body["redirect_url"].startswith(f"http://testserver{GATEWAY}/demo-checkout?tran_id=")
        assert Decimal(str(body["summary"]["total_paid"])) == Decimal("0.00")

    def test_success_redirect_as_form_post(self, client, booking):
        txn = _pay_online(client, booking).json()["payment"]["external_txn_id"]

        response = client.post(f"{GATEWAY}/success", data={"tran_id": txn, "val_id": "V-1"})
        assert response.status_code == 200
        assert response.json()["status"] == "PAID"
        assert _history(client, booking)["summary"]["is_fully_paid"] is True

    def test_fail_redirect_as_query_string(self, client, booking):
        txn = _pay_online(client, booking).json()["payment"]["external_txn_id"]

        response = client.get(f"{GATEWAY}/fail", params={"tran_id": txn, "error": "declined"})
        assert response.json()["status"] == "FAILED"
        payments = _history(client, booking)["payments"]
        assert payments[0]["failure_reason"] == "declined"

    def test_late_callback_does_not_override_final_state(self, client, booking):
        txn = _pay_online(client, booking).json()["payment"]["external_txn_id"]

        client.post(f"{GATEWAY}/cancel", data={"tran_id": txn})
        late = client.post(f"{GATEWAY}/success", data={"tran_id": txn})
        assert late.status_code == 200
        assert late.json()["status"] == "CANCELLED"

    def test_ipn(self, client, booking):
        txn = _pay_online(client, booking).json()["payment"]["external_txn_id"]
        response = client.post(f"{GATEWAY}/ipn", data={"tran_id": txn, "status": "VALID", "val_id": "V-2"})
        assert response.json()["status"] == "PAID"

    def test_unknown_transaction_is_404(self, client):
        response = client.post(f"{GATEWAY}/success", data={"tran_id": "TXN-unknown"})
        assert response.status_code == 404
        assert response.json()["code"] == "PAYMENT_NOT_FOUND"

    def test_missing_tran_id_is_422(self, client):
        response = client.post(f"{GATEWAY}/success", data={})
        assert response.status_code == 422

    def test_demo_checkout_completes_payment(self, client, booking):
        redirect = _pay_online(client, booking).json()["redirect_url"]
        response = client.get(redirect)
        assert response.status_code == 200
        assert response.json()["status"] == "PAID"

    def test_demo_checkout_disabled_in_live_modes(self, client, settings, booking):
        txn = _pay_online(client, booking).json()["payment"]["external_txn_id"]
        settings.payment_gateway_mode = "sandbox"
        response = client.get(f"{GATEWAY}/demo-checkout", params={"tran_id": txn})
        assert response.status_code == 404


class TestPaymentIdempotency:
    def test_same_key_replays_the_payment(self, client, booking):
        first = _pay_online(client, booking, **{"Idempotency-Key": "pay-1"})
        again = _pay_online(client, booking, **{"Idempotency-Key": "pay-1"})

        assert again.status_code == 201
        assert again.json()["payment"]["id"] == first.json()["payment"]["id"]
        assert len(_history(client, booking)["payments"]) == 1

    def test_same_key_other_amount_is_409(self, client, booking):
        _pay_online(client, booking, **{"Idempotency-Key": "pay-1"})
        response = _pay_online(client, booking, amount="100.00", **{"Idempotency-Key": "pay-1"})
        assert response.status_code == 409
        assert response.json()["code"] == "IDEMPOTENCY_CONFLICT"

    def test_invalid_method_is_422(self, client, booking):
        response = client.post(
            f"/api/v1/bookings/{booking['id']}/payments",
            json={"amount": "10.00", "method": "cheque"},
            headers=headers_for(CUSTOMER),
        )
        assert response.status_code == 422
        assert response.json()["code"] == "INVALID_PAYMENT_METHOD"
