"""Value Objects del dominio de reservaciones."""

from app.domain.value_objects.invoice_number import InvoiceNumber
from app.domain.value_objects.money import Money
from app.domain.value_objects.stay_period import StayPeriod

__all__ = [
    "InvoiceNumber",
    "Money",
    "StayPeriod",
]
