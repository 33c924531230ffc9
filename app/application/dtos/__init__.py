"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from app.application.dtos.invoice_dto import (
    InvoiceDTO,
    InvoicePaymentSummaryDTO,
    InvoiceRoomDTO,
    InvoiceStayDTO,
    InvoiceTotalsDTO,
)

__all__ = [
    "InvoiceDTO",
    "InvoiceRoomDTO",
    "InvoiceStayDTO",
    "InvoiceTotalsDTO",
    "InvoicePaymentSummaryDTO",
]
