"""Utilidades compartidas por los casos de uso de reservaciones."""

import logging
from datetime import date
from typing import Any

from app.application.interfaces.notifier import Notifier
from app.application.interfaces.reservation_repo import ReservationRepo
from app.application.interfaces.room_catalog import RoomCatalog
from app.domain.entities.actor import Actor
from app.domain.entities.reservation import Reservation
from app.domain.entities.room import RoomStatus
from app.domain.errors import AuthorizationError, ReservationNotFoundError
from app.domain.services.availability import occupies_day

logger = logging.getLogger(__name__)


async def load_reservation(
    reservation_repo: ReservationRepo,
    reservation_id: int,
    actor: Actor,
) -> Reservation:
    """Obtiene la reservación validando que el actor pueda verla."""
    reservation = await reservation_repo.get(reservation_id)
    if reservation is None:
        raise ReservationNotFoundError(reservation_id)
    if not actor.can_access(reservation.holder_id):
        raise AuthorizationError("La reservación pertenece a otro huésped")
    return reservation


def require_privileged(actor: Actor, operation: str) -> None:
    if not actor.is_privileged:
        raise AuthorizationError(f"Solo staff o admin pueden {operation}")


async def release_room_if_idle(
    room_catalog: RoomCatalog,
    reservation_repo: ReservationRepo,
    room_id: int,
    day: date,
) -> bool:
    """
    Libera el marcador de la habitación si está RESERVED y ninguna otra
    reservación activa ocupa la noche `day`. Quien llama pasa la fecha de salida
    programada de la estadía que termina, no la del reloj.
    """
    room = await room_catalog.get(room_id)
    if room is None or room.status != RoomStatus.RESERVED:
        return False
    reservations = await reservation_repo.list_for_room(room_id)
    if any(occupies_day(reservation, day) for reservation in reservations):
        return False
    await room_catalog.set_status(room_id, RoomStatus.AVAILABLE)
    return True


async def notify_quietly(notifier: Notifier, event: str, payload: dict[str, Any]) -> None:
    """Las notificaciones nunca abortan la operación que las dispara."""
    try:
        await notifier.notify(event, payload)
    except Exception:
        logger.warning(
            "Notification dispatch failed",
            exc_info=True,
            extra={"event": event, **payload},
        )


def reservation_event_payload(reservation: Reservation) -> dict[str, Any]:
    return {
        "reservation_id": reservation.id,
        "room_id": reservation.room_id,
        "holder_id": reservation.holder_id,
        "status": reservation.status.value,
        "check_in": reservation.check_in.isoformat(),
        "check_out": reservation.check_out.isoformat(),
    }
