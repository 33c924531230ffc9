"""Value Object Money - representa un valor monetario con su moneda."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """
    Value Object inmutable que representa un monto monetario.

    Attributes:
        amount: Monto decimal (hasta 2 decimales).
        currency_code: Código ISO 4217 de la moneda (ej: BDT, USD).
    """

    amount: Decimal
    currency_code: str

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        object.__setattr__(self, "amount", self.amount.quantize(CENT, rounding=ROUND_HALF_UP))

        if len(self.currency_code) != 3:
            raise ValueError(f"currency_code debe ser de 3 caracteres: {self.currency_code}")

        if self.amount < 0:
            raise ValueError(f"amount no puede ser negativo: {self.amount}")

    def _check_currency(self, other: "Money", operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"No se puede {operation} Money con {type(other)}")
        if self.currency_code != other.currency_code:
            raise ValueError(
                f"No se pueden {operation} montos de diferentes monedas: "
                f"{self.currency_code} vs {other.currency_code}"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other, "sumar")
        return Money(amount=self.amount + other.amount, currency_code=self.currency_code)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other, "restar")
        return Money(amount=self.amount - other.amount, currency_code=self.currency_code)

    def __mul__(self, factor: int) -> "Money":
        if not isinstance(factor, int):
            raise TypeError(f"Money solo se multiplica por enteros, no {type(factor)}")
        return Money(amount=self.amount * factor, currency_code=self.currency_code)

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other, "comparar")
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other, "comparar")
        return self.amount <= other.amount

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency_code}"

    @classmethod
    def zero(cls, currency_code: str = "BDT") -> "Money":
        """Crea un Money con valor cero."""
        return cls(amount=Decimal("0"), currency_code=currency_code)

    @classmethod
    def sum(cls, amounts: "list[Money]", currency_code: str) -> "Money":
        """Suma una lista de montos de la misma moneda."""
        total = cls.zero(currency_code)
        for amount in amounts:
            total = total + amount
        return total

