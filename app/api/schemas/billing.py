from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, condecimal, constr

from app.application.dtos.invoice_dto import InvoiceDTO
from app.application.services.payment_ledger import PaymentOutcome, PaymentSummary
from app.application.use_cases.get_payment_history import PaymentHistory
from app.domain.entities.payment import Payment

Money = condecimal(max_digits=12, decimal_places=2)
DECIMAL_ENCODERS = {Decimal: lambda v: format(v, ".2f")}


class RecordPaymentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    amount: condecimal(max_digits=12, decimal_places=2)
    method: constr(strip_whitespace=True, min_length=1, max_length=20)
    external_txn_id: constr(strip_whitespace=True, min_length=1, max_length=64) | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(json_encoders=DECIMAL_ENCODERS)

    id: int
    reservation_id: int
    invoice_number: str | None = None
    method: str
    external_txn_id: str | None = None
    amount: Money
    currency_code: constr(min_length=3, max_length=3)
    status: str
    failure_reason: str | None = None
    created_at: datetime | None = None
    paid_at: datetime | None = None

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentResponse":
        return cls(
            id=payment.id,
            reservation_id=payment.reservation_id,
            invoice_number=payment.invoice_number,
            method=payment.method.value,
            external_txn_id=payment.external_txn_id,
            amount=payment.amount,
            currency_code=payment.currency_code,
            status=payment.status.value,
            failure_reason=payment.failure_reason,
            created_at=payment.created_at,
            paid_at=payment.paid_at,
        )


class PaymentSummaryResponse(BaseModel):
    model_config = ConfigDict(json_encoders=DECIMAL_ENCODERS)

    total_cost: Money
    total_paid: Money
    balance_due: Money
    is_fully_paid: bool

    @classmethod
    def from_summary(cls, summary: PaymentSummary) -> "PaymentSummaryResponse":
        return cls(
            total_cost=summary.total_cost,
            total_paid=summary.total_paid,
            balance_due=summary.balance_due,
            is_fully_paid=summary.is_fully_paid,
        )


class RecordPaymentResponse(BaseModel):
    payment: PaymentResponse
    summary: PaymentSummaryResponse
    redirect_url: str | None = None

    @classmethod
    def from_outcome(cls, outcome: PaymentOutcome) -> "RecordPaymentResponse":
        return cls(
            payment=PaymentResponse.from_entity(outcome.payment),
            summary=PaymentSummaryResponse.from_summary(outcome.summary),
            redirect_url=outcome.redirect_url,
        )


class PaymentHistoryResponse(BaseModel):
    reservation_id: int
    payments: list[PaymentResponse]
    summary: PaymentSummaryResponse

    @classmethod
    def from_history(cls, history: PaymentHistory) -> "PaymentHistoryResponse":
        return cls(
            reservation_id=history.reservation_id,
            payments=[PaymentResponse.from_entity(p) for p in history.payments],
            summary=PaymentSummaryResponse.from_summary(history.summary),
        )


class InvoiceLineItem(BaseModel):
    model_config = ConfigDict(json_encoders=DECIMAL_ENCODERS)

    description: str
    quantity: int
    unit_price: Money
    total: Money
    service_id: int | None = None
    usage_id: int | None = None


class InvoiceRoom(BaseModel):
    model_config = ConfigDict(json_encoders=DECIMAL_ENCODERS)

    room_id: int
    code: str
    room_type: str | None = None
    rate_per_night: Money


class InvoiceStay(BaseModel):
    check_in: date
    check_out: date
    nights: int
    guests: int


class InvoiceTotals(BaseModel):
    model_config = ConfigDict(json_encoders=DECIMAL_ENCODERS)

    subtotal: Money
    tax: Money
    total: Money


class InvoicePaymentSummary(BaseModel):
    model_config = ConfigDict(json_encoders=DECIMAL_ENCODERS)

    total_paid: Money
    balance_due: Money
    is_fully_paid: bool


class InvoiceResponse(BaseModel):
    invoice_number: str
    reservation_id: int
    issue_date: date
    holder_id: int
    currency_code: str
    room: InvoiceRoom
    stay: InvoiceStay
    totals: InvoiceTotals
    payment_summary: InvoicePaymentSummary
    line_items: list[InvoiceLineItem]
    payments: list[PaymentResponse]

    @classmethod
    def from_dto(cls, invoice: InvoiceDTO) -> "InvoiceResponse":
        return cls(
            invoice_number=invoice.invoice_number,
            reservation_id=invoice.reservation_id,
            issue_date=invoice.issue_date,
            holder_id=invoice.holder_id,
            currency_code=invoice.currency_code,
            room=InvoiceRoom(
                room_id=invoice.room.room_id,
                code=invoice.room.code,
                room_type=invoice.room.room_type,
                rate_per_night=invoice.room.rate_per_night,
            ),
            stay=InvoiceStay(
                check_in=invoice.stay.check_in,
                check_out=invoice.stay.check_out,
                nights=invoice.stay.nights,
                guests=invoice.stay.guests,
            ),
            totals=InvoiceTotals(
                subtotal=invoice.totals.subtotal,
                tax=invoice.totals.tax,
                total=invoice.totals.total,
            ),
            payment_summary=InvoicePaymentSummary(
                total_paid=invoice.payment_summary.total_paid,
                balance_due=invoice.payment_summary.balance_due,
                is_fully_paid=invoice.payment_summary.is_fully_paid,
            ),
            line_items=[
                InvoiceLineItem(
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total=item.total,
                    service_id=item.service_id,
                    usage_id=item.usage_id,
                )
                for item in invoice.line_items
            ],
            payments=[PaymentResponse.from_entity(p) for p in invoice.payments],
        )


class GatewayCallbackResponse(BaseModel):
    external_txn_id: str
    payment_id: int
    reservation_id: int
    status: str

    @classmethod
    def from_entity(cls, payment: Payment) -> "GatewayCallbackResponse":
        return cls(
            external_txn_id=payment.external_txn_id,
            payment_id=payment.id,
            reservation_id=payment.reservation_id,
            status=payment.status.value,
        )
