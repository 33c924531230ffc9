"""Reconciliación de callbacks e IPN de la pasarela."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from app.api.dependencies import build_in_memory_bundle, build_use_cases
from app.application.interfaces.payment_gateway import GatewaySession, PaymentGateway
from app.application.use_cases.handle_gateway_callback import (
    HandleGatewayCallbackUseCase,
    outcome_from_ipn_status,
)
from app.domain.entities.payment import GatewayOutcome, PaymentMethod, PaymentStatus
from app.domain.errors import PaymentGatewayError, PaymentNotFoundError, ValidationError
from tests.factories import CUSTOMER, LAUNDRY, ROOM_X, ROOM_Y, SPA


class ScriptedGateway(PaymentGateway):
    """Pasarela que deja el pago PENDING y responde `verify` según se configure."""

    provider = "scripted"

    def __init__(self, verified: bool = True, verify_delay: float = 0.0) -> None:
        self.verified = verified
        self.verify_delay = verify_delay
        self.verify_error = None
        self.verify_calls = 0

    async def open_session(self, request):
        return GatewaySession(
            session_key=f"SESSION-{request.external_txn_id}",
            redirect_url=f"https://pay.example/checkout/{request.external_txn_id}",
        )

    async def verify(self, external_txn_id, amount, payload):
        self.verify_calls += 1
        if self.verify_delay:
            await asyncio.sleep(self.verify_delay)
        if self.verify_error is not None:
            raise self.verify_error
        return self.verified


@pytest.fixture
def gateway():
    return ScriptedGateway()


@pytest.fixture
def use_cases(settings, clock, id_generator, gateway):
    bundle = build_in_memory_bundle(
        settings,
        clock=clock,
        id_generator=id_generator,
        gateway=gateway,
        rooms=(ROOM_X, ROOM_Y),
        services=(LAUNDRY, SPA),
    )
    return build_use_cases(bundle, settings)


@pytest.fixture
async def pending_payment(use_cases):
    reservation = await use_cases["create_booking"].execute(
        actor=CUSTOMER, room_id=ROOM_X.id, check_in=date(2024, 1, 1), check_out=date(2024, 1, 3)
    )
    outcome = await use_cases["record_payment"].execute(
        actor=CUSTOMER,
        reservation_id=reservation.id,
        amount=Decimal("200.00"),
        method=PaymentMethod.SSLCOMMERZ,
    )
    assert outcome.payment.status == PaymentStatus.PENDING
    return outcome.payment


async def _summary(use_cases, payment):
    history = await use_cases["payment_history"].execute(
        actor=CUSTOMER, reservation_id=payment.reservation_id
    )
    return history.summary


class TestBrowserCallbacks:
    async def test_success_marks_paid(self, use_cases, pending_payment):
        payment = await use_cases["gateway_callback"].execute(
            GatewayOutcome.SUCCESS, {"tran_id": pending_payment.external_txn_id, "val_id": "V1"}
        )
        assert payment.status == PaymentStatus.PAID
        assert payment.paid_at is not None
        assert (await _summary(use_cases, payment)).is_fully_paid

    async def test_fail_records_reason(self, use_cases, pending_payment):
        payment = await use_cases["gateway_callback"].execute(
            GatewayOutcome.FAIL, {"tran_id": pending_payment.external_txn_id, "error": "card declined"}
        )
        assert payment.status == PaymentStatus.FAILED
        assert payment.failure_reason == "card declined"

    async def test_cancel_keeps_the_balance(self, use_cases, pending_payment):
        payment = await use_cases["gateway_callback"].execute(
            GatewayOutcome.CANCEL, {"tran_id": pending_payment.external_txn_id}
        )
        assert payment.status == PaymentStatus.CANCELLED
        assert (await _summary(use_cases, payment)).balance_due == Decimal("200.00")

    async def test_replayed_callback_never_changes_a_final_payment(self, use_cases, gateway, pending_payment):
        txn = pending_payment.external_txn_id
        await use_cases["gateway_callback"].execute(GatewayOutcome.SUCCESS, {"tran_id": txn})
        replay = await use_cases["gateway_callback"].execute(GatewayOutcome.FAIL, {"tran_id": txn})
        again = await use_cases["gateway_callback"].execute(GatewayOutcome.SUCCESS, {"tran_id": txn})

        assert replay.status == PaymentStatus.PAID
        assert again.status == PaymentStatus.PAID
        assert gateway.verify_calls == 1
        assert (await _summary(use_cases, again)).total_paid == Decimal("200.00")

    async def test_unknown_transaction(self, use_cases):
        with pytest.raises(PaymentNotFoundError):
            await use_cases["gateway_callback"].execute(GatewayOutcome.SUCCESS, {"tran_id": "TXN-nope"})

    async def test_missing_tran_id(self, use_cases):
        with pytest.raises(ValidationError):
            await use_cases["gateway_callback"].execute(GatewayOutcome.SUCCESS, {})

    async def test_rejected_verification_resolves_to_failed(self, use_cases, gateway, pending_payment):
        gateway.verified = False
        payment = await use_cases["gateway_callback"].execute(
            GatewayOutcome.SUCCESS, {"tran_id": pending_payment.external_txn_id}
        )
        assert payment.status == PaymentStatus.FAILED
        assert payment.failure_reason == "gateway validation rejected the transaction"

    async def test_verification_timeout_resolves_to_failed(
        self, settings, clock, id_generator, gateway
    ):
        gateway.verify_delay = 1
        fast_settings = settings.model_copy(update={"gateway_timeout_seconds": 0.05})
        bundle = build_in_memory_bundle(
            fast_settings,
            clock=clock,
            id_generator=id_generator,
            gateway=gateway,
            rooms=(ROOM_X,),
            services=(LAUNDRY,),
        )
        use_cases = build_use_cases(bundle, fast_settings)
        reservation = await use_cases["create_booking"].execute(
            actor=CUSTOMER, room_id=ROOM_X.id, check_in=date(2024, 1, 1), check_out=date(2024, 1, 3)
        )
        outcome = await use_cases["record_payment"].execute(
            actor=CUSTOMER, reservation_id=reservation.id, amount=Decimal("50"), method="online"
        )

        payment = await use_cases["gateway_callback"].execute(
            GatewayOutcome.SUCCESS, {"tran_id": outcome.payment.external_txn_id}
        )
        assert payment.status == PaymentStatus.FAILED
        assert "Timeout" in payment.failure_reason
        stored = await bundle["payment_repo"].get(outcome.payment.id)
        assert stored.status == PaymentStatus.FAILED

    async def test_verification_provider_error_resolves_to_failed(self, use_cases, gateway, pending_payment):
        gateway.verify_error = PaymentGatewayError("validation API unreachable", provider=gateway.provider)
        payment = await use_cases["gateway_callback"].execute(
            GatewayOutcome.SUCCESS, {"tran_id": pending_payment.external_txn_id, "val_id": "V1"}
        )
        assert payment.status == PaymentStatus.FAILED
        assert "validation API unreachable" in payment.failure_reason
        assert payment.paid_at is None


class TestIpn:
    @pytest.mark.parametrize(
        "status, expected",
        [
            ("VALID", GatewayOutcome.SUCCESS),
            ("validated", GatewayOutcome.SUCCESS),
            ("CANCELLED", GatewayOutcome.CANCEL),
            ("FAILED", GatewayOutcome.FAIL),
            (None, GatewayOutcome.FAIL),
        ],
    )
    def test_status_mapping(self, status, expected):
        assert outcome_from_ipn_status(status) is expected

    async def test_ipn_settles_pending_payment(self, use_cases, pending_payment):
        payment = await use_cases["gateway_callback"].handle_ipn(
            {"tran_id": pending_payment.external_txn_id, "status": "VALID", "val_id": "V1"}
        )
        assert payment.status == PaymentStatus.PAID


class TestDemoCheckout:
    async def test_disabled_outside_demo_modes(self, use_cases):
        handler = HandleGatewayCallbackUseCase(
            ledger=use_cases["gateway_callback"]._ledger, allow_demo_checkout=False
        )
        assert await handler.demo_checkout("TXN-1", GatewayOutcome.SUCCESS) is None

    async def test_completes_pending_payment(self, use_cases, pending_payment):
        payment = await use_cases["gateway_callback"].demo_checkout(
            pending_payment.external_txn_id, GatewayOutcome.SUCCESS
        )
        assert payment.status == PaymentStatus.PAID
