"""Interface Clock - Puerto para abstracción de tiempo."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone


class Clock(ABC):
    """
    Puerto para abstracción del tiempo del sistema.

    `now()` sella pagos y transiciones; `today()` alimenta las reglas de
    estadía (fechas pasadas, ventana de check-in), que se evalúan por día.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Fecha/hora actual, timezone-aware en UTC."""
        raise NotImplementedError

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FakeClock(Clock):
    """Reloj fijo para tests; solo se mueve cuando el test lo indica."""

    def __init__(self, fixed_time: datetime | None = None):
        self._fixed_time = fixed_time or datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._fixed_time

    def set_today(self, day: date) -> None:
        """Fija el reloj al mediodía UTC del día indicado."""
        self._fixed_time = datetime(day.year, day.month, day.day, 12, tzinfo=timezone.utc)
