"""Value Object InvoiceNumber - número de factura de una reservación."""

import re
import secrets
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class InvoiceNumber:
    """
    Value Object inmutable que representa el número de factura.

    Formato: INV-YYYYMMDD-NNNNN (fecha de emisión + 5 dígitos aleatorios).
    Se genera con el primer pago de la reservación y se reutiliza después.
    """

    value: str

    PREFIX = "INV"
    RANDOM_DIGITS = 5
    PATTERN = re.compile(r"^INV-\d{8}-\d{5}$")

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("invoice_number no puede estar vacío")

        if not self.PATTERN.match(self.value):
            raise ValueError(f"invoice_number con formato inválido: {self.value}")

    def __str__(self) -> str:
        return self.value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, InvoiceNumber):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return False

    def __hash__(self) -> int:
        return hash(self.value)

    @property
    def issue_date(self) -> date:
        """Fecha codificada en el número."""
        stamp = self.value.split("-")[1]
        return date(int(stamp[:4]), int(stamp[4:6]), int(stamp[6:]))

    @classmethod
    def generate(cls, today: date) -> "InvoiceNumber":
        """Genera un número nuevo con la fecha dada y un sufijo aleatorio."""
        suffix = secrets.randbelow(10**cls.RANDOM_DIGITS)
        return cls(value=f"{cls.PREFIX}-{today:%Y%m%d}-{suffix:0{cls.RANDOM_DIGITS}d}")
