"""Servicios de aplicación compartidos por los casos de uso."""

from app.application.services.availability_checker import AvailabilityChecker
from app.application.services.billing_calculator import BillingCalculator
from app.application.services.payment_ledger import PaymentLedger, PaymentOutcome, PaymentSummary

__all__ = [
    "AvailabilityChecker",
    "BillingCalculator",
    "PaymentLedger",
    "PaymentOutcome",
    "PaymentSummary",
]
