"""Entidad Reservation - Agregado raíz del dominio."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import InvalidReservationStatusError, ValidationError
from app.domain.value_objects.stay_period import StayPeriod


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"


# Únicas transiciones legales; cualquier otra es rechazada.
ALLOWED_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset({ReservationStatus.APPROVED, ReservationStatus.CANCELLED}),
    ReservationStatus.APPROVED: frozenset({ReservationStatus.CHECKED_IN, ReservationStatus.CANCELLED}),
    ReservationStatus.CHECKED_IN: frozenset(
        {ReservationStatus.CHECKED_OUT, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CHECKED_OUT: frozenset(),
    ReservationStatus.CANCELLED: frozenset(),
}

# Estados que ya no ocupan la habitación.
RELEASED_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.CHECKED_OUT})

EDITABLE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.APPROVED})


def can_transition(current: ReservationStatus, target: ReservationStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@dataclass
class Reservation:
    """
    Entidad principal del dominio - Agregado Raíz.

    Representa el derecho de un huésped sobre una habitación para el
    intervalo semiabierto [check_in, check_out).
    """

    # Identificadores
    id: int | None = None
    room_id: int = 0
    holder_id: int = 0
    created_by: int = 0

    # Estadía
    check_in: date | None = None
    check_out: date | None = None
    guests: int = 1
    nights: int = 0

    # Financieros
    room_charge: Decimal = Decimal("0")

    # Estado
    status: ReservationStatus = ReservationStatus.PENDING

    # Control de concurrencia
    lock_version: int = 0

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # === Propiedades calculadas ===

    @property
    def period(self) -> StayPeriod:
        """Retorna el intervalo como Value Object."""
        return StayPeriod(check_in=self.check_in, check_out=self.check_out)

    @property
    def occupies_room(self) -> bool:
        """Una reservación bloquea la habitación mientras no esté cancelada ni cerrada."""
        return self.status not in RELEASED_STATUSES

    @property
    def is_editable(self) -> bool:
        return self.status in EDITABLE_STATUSES

    @property
    def accepts_charges(self) -> bool:
        """Se pueden agregar/quitar consumos mientras la reservación siga activa."""
        return self.status not in RELEASED_STATUSES

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    # === Métodos de negocio ===

    def ensure_transition(self, target: ReservationStatus, operation: str) -> None:
        """Lanza InvalidReservationStatusError si la transición no es legal."""
        if not can_transition(self.status, target):
            expected = [
                source.value
                for source, targets in ALLOWED_TRANSITIONS.items()
                if target in targets
            ]
            raise InvalidReservationStatusError(
                current_status=self.status.value,
                expected_status=expected,
                operation=operation,
            )

    def _transition(self, target: ReservationStatus, operation: str, now: datetime) -> None:
        self.ensure_transition(target, operation)
        self.status = target
        self.updated_at = now

    def schedule(self, period: StayPeriod, rate_per_night: Decimal) -> None:
        """Asigna fechas y recalcula noches y cargo de habitación."""
        self.check_in = period.check_in
        self.check_out = period.check_out
        self.nights = period.nights
        self.room_charge = rate_per_night * self.nights

    def reschedule(
        self,
        room_id: int,
        period: StayPeriod,
        rate_per_night: Decimal,
        now: datetime,
    ) -> None:
        """Cambia habitación y/o fechas; solo mientras esté PENDING o APPROVED."""
        if not self.is_editable:
            raise InvalidReservationStatusError(
                current_status=self.status.value,
                expected_status=[status.value for status in EDITABLE_STATUSES],
                operation="modificar la reservación",
            )
        self.room_id = room_id
        self.schedule(period, rate_per_night)
        self.updated_at = now

    def approve(self, now: datetime) -> None:
        self._transition(ReservationStatus.APPROVED, "aprobar", now)

    def check_in_guest(self, now: datetime) -> None:
        self._transition(ReservationStatus.CHECKED_IN, "hacer check-in", now)

    def check_out_guest(self, now: datetime) -> None:
        self._transition(ReservationStatus.CHECKED_OUT, "hacer check-out", now)

    def cancel(self, now: datetime) -> None:
        self._transition(ReservationStatus.CANCELLED, "cancelar", now)

    @classmethod
    def book(
        cls,
        room_id: int,
        holder_id: int,
        created_by: int,
        period: StayPeriod,
        rate_per_night: Decimal,
        guests: int,
        approved: bool,
        now: datetime,
    ) -> "Reservation":
        """Factory para una reservación nueva (APPROVED si la crea personal autorizado)."""
        if guests < 1:
            raise ValidationError("guests", "debe ser >= 1")
        reservation = cls(
            room_id=room_id,
            holder_id=holder_id,
            created_by=created_by,
            guests=guests,
            status=ReservationStatus.APPROVED if approved else ReservationStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        reservation.schedule(period, rate_per_night)
        return reservation
