"""Interface IdGenerator - Puerto para generación de identificadores únicos."""

import secrets
import string
from abc import ABC, abstractmethod
from datetime import date, datetime

from app.domain.value_objects.invoice_number import InvoiceNumber


class IdGenerator(ABC):
    """
    Puerto para generación de identificadores únicos.

    Permite inyectar implementaciones fake para testing determinista.
    """

    @abstractmethod
    def generate_transaction_id(self, now: datetime) -> str:
        """
        Genera el identificador de transacción de un pago.

        Returns:
            String con formato TXN-<epoch ms>-<9 alfanuméricos en mayúsculas>.
        """
        raise NotImplementedError

    @abstractmethod
    def generate_invoice_number(self, today: date) -> str:
        """
        Genera un número de factura.

        Returns:
            String con formato INV-YYYYMMDD-NNNNN.
        """
        raise NotImplementedError


class RealIdGenerator(IdGenerator):
    """Implementación real basada en `secrets`."""

    TXN_SUFFIX_LENGTH = 9
    ALLOWED_CHARS = string.ascii_uppercase + string.digits

    def generate_transaction_id(self, now: datetime) -> str:
        epoch_ms = int(now.timestamp() * 1000)
        suffix = "".join(secrets.choice(self.ALLOWED_CHARS) for _ in range(self.TXN_SUFFIX_LENGTH))
        return f"TXN-{epoch_ms}-{suffix}"

    def generate_invoice_number(self, today: date) -> str:
        return InvoiceNumber.generate(today).value


class FakeIdGenerator(IdGenerator):
    """
    Implementación fake para testing.

    Genera valores predecibles para pruebas deterministas.
    """

    def __init__(self, prefix: str = "TEST"):
        self._prefix = prefix.upper()
        self._txn_counter = 0
        self._invoice_counter = 0
        self._queued_invoice_numbers: list[str] = []

    def generate_transaction_id(self, now: datetime) -> str:
        self._txn_counter += 1
        epoch_ms = int(now.timestamp() * 1000)
        return f"TXN-{epoch_ms}-{self._prefix[:4]}{self._txn_counter:05d}"

    def generate_invoice_number(self, today: date) -> str:
        if self._queued_invoice_numbers:
            return self._queued_invoice_numbers.pop(0)
        self._invoice_counter += 1
        return f"INV-{today:%Y%m%d}-{self._invoice_counter:05d}"

    def queue_invoice_numbers(self, *numbers: str) -> None:
        """Fuerza los próximos números de factura (p.ej. para simular colisiones)."""
        self._queued_invoice_numbers.extend(numbers)

