"""Cálculo del total adeudado por una reservación."""

from dataclasses import dataclass, field
from decimal import Decimal

from app.domain.entities.reservation import Reservation
from app.domain.entities.room import Room
from app.domain.entities.service_usage import ServiceUsage
from app.domain.value_objects.money import Money


@dataclass(frozen=True)
class LineItem:
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal
    service_id: int | None = None
    usage_id: int | None = None


@dataclass(frozen=True)
class BillingBreakdown:
    room_cost: Money
    services_cost: Money
    total_cost: Money
    line_items: list[LineItem] = field(default_factory=list)


def compute_breakdown(
    reservation: Reservation,
    room: Room,
    usages: list[ServiceUsage],
    currency_code: str,
) -> BillingBreakdown:
    """
    Total = tarifa vigente de la habitación × noches + Σ consumos.

    La tarifa se lee del catálogo en cada cálculo; los consumos conservan el
    monto congelado al momento de agregarse.
    """
    rate = Money(amount=room.rate_per_night, currency_code=currency_code)
    room_cost = rate * reservation.nights
    services_cost = Money.sum(
        [Money(amount=usage.amount, currency_code=currency_code) for usage in usages],
        currency_code,
    )

    line_items = [
        LineItem(
            description=f"Room {room.code} - {reservation.nights} night(s)",
            quantity=reservation.nights,
            unit_price=rate.amount,
            total=room_cost.amount,
        )
    ]
    line_items.extend(
        LineItem(
            description=usage.service_name,
            quantity=usage.quantity,
            unit_price=usage.unit_price,
            total=usage.amount,
            service_id=usage.service_id,
            usage_id=usage.id,
        )
        for usage in usages
    )
    return BillingBreakdown(
        room_cost=room_cost,
        services_cost=services_cost,
        total_cost=room_cost + services_cost,
        line_items=line_items,
    )
