"""Entidades Service (catálogo) y ServiceUsage (consumo cargado a una reservación)."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Service:
    """Servicio adicional del catálogo (lavandería, desayuno, traslado...)."""

    id: int
    name: str
    unit_price: Decimal
    is_active: bool = True


@dataclass
class ServiceUsage:
    """
    Línea de consumo de un servicio.

    El precio unitario se captura al momento de agregar la línea; cambios
    posteriores en el catálogo no alteran `amount`.
    """

    reservation_id: int
    service_id: int
    service_name: str
    quantity: int
    unit_price: Decimal
    amount: Decimal = Decimal("0")
    id: int | None = None
    created_at: datetime | None = None

    @classmethod
    def capture(
        cls,
        reservation_id: int,
        service: Service,
        quantity: int,
        created_at: datetime | None = None,
    ) -> "ServiceUsage":
        """Factory que congela el precio vigente del servicio."""
        if quantity < 1:
            raise ValueError("quantity debe ser >= 1")
        return cls(
            reservation_id=reservation_id,
            service_id=service.id,
            service_name=service.name,
            quantity=quantity,
            unit_price=service.unit_price,
            amount=service.unit_price * quantity,
            created_at=created_at,
        )
