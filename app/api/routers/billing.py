from fastapi import APIRouter, Depends, Header, status

from app.api.dependencies import get_actor, get_use_cases
from app.api.schemas.billing import (
    InvoiceResponse,
    PaymentHistoryResponse,
    RecordPaymentRequest,
    RecordPaymentResponse,
)
from app.domain.entities.actor import Actor

router = APIRouter()


@router.get("/bookings/{reservation_id}/invoice", response_model=InvoiceResponse)
async def get_invoice(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> InvoiceResponse:
    invoice = await use_cases["generate_invoice"].execute(actor=actor, reservation_id=reservation_id)
    return InvoiceResponse.from_dto(invoice)


@router.post(
    "/bookings/{reservation_id}/payments",
    response_model=RecordPaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    reservation_id: int,
    payload: RecordPaymentRequest,
    idem_key: str | None = Header(default=None, convert_underscores=False, alias="Idempotency-Key"),
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> RecordPaymentResponse:
    outcome = await use_cases["record_payment"].execute(
        actor=actor,
        reservation_id=reservation_id,
        amount=payload.amount,
        method=payload.method,
        external_txn_id=payload.external_txn_id,
        idem_key=idem_key,
    )
    return RecordPaymentResponse.from_outcome(outcome)


@router.get("/bookings/{reservation_id}/payments", response_model=PaymentHistoryResponse)
async def payment_history(
    reservation_id: int,
    actor: Actor = Depends(get_actor),
    use_cases=Depends(get_use_cases),
) -> PaymentHistoryResponse:
    history = await use_cases["payment_history"].execute(actor=actor, reservation_id=reservation_id)
    return PaymentHistoryResponse.from_history(history)
