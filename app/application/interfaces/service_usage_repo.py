from typing import Sequence

from app.domain.entities.service_usage import ServiceUsage


class ServiceUsageRepo:
    async def add(self, usage: ServiceUsage) -> ServiceUsage:
        raise NotImplementedError

    async def get(self, usage_id: int) -> ServiceUsage | None:
        raise NotImplementedError

    async def remove(self, usage_id: int) -> None:
        raise NotImplementedError

    async def list_by_reservation(self, reservation_id: int) -> Sequence[ServiceUsage]:
        raise NotImplementedError
