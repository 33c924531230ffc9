"""Reglas de superposición de intervalos sobre el calendario de habitaciones."""

from collections.abc import Iterable
from datetime import date

from app.domain.entities.reservation import Reservation


def is_valid_interval(check_in: date | None, check_out: date | None) -> bool:
    return check_in is not None and check_out is not None and check_out > check_in


def conflicts_with(
    reservation: Reservation,
    check_in: date,
    check_out: date,
    exclude_reservation_id: int | None = None,
) -> bool:
    """
    Una reservación existente choca con [check_in, check_out) si sigue ocupando
    la habitación y los intervalos semiabiertos se superponen.
    """
    if exclude_reservation_id is not None and reservation.id == exclude_reservation_id:
        return False
    if not reservation.occupies_room:
        return False
    return reservation.period.overlaps(check_in, check_out)


def find_conflicts(
    reservations: Iterable[Reservation],
    check_in: date,
    check_out: date,
    exclude_reservation_id: int | None = None,
) -> list[Reservation]:
    return [
        reservation
        for reservation in reservations
        if conflicts_with(reservation, check_in, check_out, exclude_reservation_id)
    ]


def occupies_day(reservation: Reservation, day: date) -> bool:
    """La noche que inicia en `day` está tomada por una reservación activa."""
    return reservation.occupies_room and reservation.period.spans_day(day)
