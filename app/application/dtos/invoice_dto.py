"""DTOs para la factura (proyección; no se persiste)."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from app.domain.entities.payment import Payment
from app.domain.services.billing import LineItem


@dataclass
class InvoiceRoomDTO:
    room_id: int
    code: str
    room_type: str | None
    rate_per_night: Decimal


@dataclass
class InvoiceStayDTO:
    check_in: date
    check_out: date
    nights: int
    guests: int


@dataclass
class InvoiceTotalsDTO:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass
class InvoicePaymentSummaryDTO:
    total_paid: Decimal
    balance_due: Decimal
    is_fully_paid: bool


@dataclass
class InvoiceDTO:
    """Factura de una reservación: líneas, totales y estado de pagos."""

    invoice_number: str
    reservation_id: int
    issue_date: date
    holder_id: int
    currency_code: str
    room: InvoiceRoomDTO
    stay: InvoiceStayDTO
    totals: InvoiceTotalsDTO
    payment_summary: InvoicePaymentSummaryDTO
    line_items: list[LineItem] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)
