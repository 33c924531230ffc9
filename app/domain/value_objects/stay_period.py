"""Value Object StayPeriod - intervalo semiabierto [check_in, check_out) de una estadía."""

import math
from dataclasses import dataclass
from datetime import date, timedelta

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StayPeriod:
    """
    Value Object inmutable que representa el intervalo de una reservación.

    El intervalo es semiabierto: la noche del check_out no pertenece a la estadía,
    por lo que una reservación que termina el día X no choca con otra que inicia el día X.

    Attributes:
        check_in: Fecha de entrada (incluida).
        check_out: Fecha de salida (excluida).
    """

    check_in: date
    check_out: date

    def __post_init__(self) -> None:
        if self.check_in >= self.check_out:
            raise ValueError(
                f"check_in debe ser anterior a check_out: {self.check_in} >= {self.check_out}"
            )

    @property
    def duration(self) -> timedelta:
        """Retorna la duración del intervalo."""
        return self.check_out - self.check_in

    @property
    def nights(self) -> int:
        """
        Calcula las noches de la estadía.

        Regla de negocio: cualquier fracción de día cuenta como noche completa,
        con un mínimo de una noche.
        """
        nights = math.ceil(self.duration / ONE_DAY)
        return max(1, nights)

    def overlaps(self, check_in: date, check_out: date) -> bool:
        """Verifica si [check_in, check_out) se superpone con este intervalo."""
        return self.check_in < check_out and check_in < self.check_out

    def spans_day(self, day: date) -> bool:
        """Verifica si la noche que inicia en `day` pertenece a la estadía."""
        return self.check_in <= day < self.check_out

    def check_in_window(self, early_days: int = 1) -> tuple[date, date]:
        """
        Ventana de check-in [inicio, fin): desde `early_days` antes del check_in
        hasta el día anterior al check_out.
        """
        return self.check_in - timedelta(days=early_days), self.check_out

    def __str__(self) -> str:
        return f"{self.check_in.isoformat()} -> {self.check_out.isoformat()}"
