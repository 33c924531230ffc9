from decimal import Decimal
from typing import Any, Mapping, Sequence

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.service_usage_repo import ServiceUsageRepo
from app.domain.entities.service_usage import ServiceUsage
from app.infrastructure.db.tables import service_usages


def _to_entity(row: Mapping[str, Any]) -> ServiceUsage:
    return ServiceUsage(
        id=row["id"],
        reservation_id=row["reservation_id"],
        service_id=row["service_id"],
        service_name=row["service_name"],
        quantity=row["quantity"],
        unit_price=Decimal(row["unit_price"]),
        amount=Decimal(row["amount"]),
        created_at=row["created_at"],
    )


class ServiceUsageRepoSQL(ServiceUsageRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, usage: ServiceUsage) -> ServiceUsage:
        stmt = insert(service_usages).values(
            reservation_id=usage.reservation_id,
            service_id=usage.service_id,
            service_name=usage.service_name,
            quantity=usage.quantity,
            unit_price=usage.unit_price,
            amount=usage.amount,
            created_at=usage.created_at,
        )
        result = await self._session.execute(stmt)
        usage.id = result.inserted_primary_key[0]
        return usage

    async def get(self, usage_id: int) -> ServiceUsage | None:
        stmt = select(service_usages).where(service_usages.c.id == usage_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def remove(self, usage_id: int) -> None:
        await self._session.execute(delete(service_usages).where(service_usages.c.id == usage_id))

    async def list_by_reservation(self, reservation_id: int) -> Sequence[ServiceUsage]:
        stmt = (
            select(service_usages)
            .where(service_usages.c.reservation_id == reservation_id)
            .order_by(service_usages.c.id)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]
