from dataclasses import replace
from typing import Sequence

from app.application.interfaces.service_usage_repo import ServiceUsageRepo
from app.domain.entities.service_usage import ServiceUsage


class InMemoryServiceUsageRepo(ServiceUsageRepo):
    def __init__(self) -> None:
        self._by_id: dict[int, ServiceUsage] = {}
        self._next_id = 1

    async def add(self, usage: ServiceUsage) -> ServiceUsage:
        stored = replace(usage, id=self._next_id)
        self._next_id += 1
        self._by_id[stored.id] = stored
        return replace(stored)

    async def get(self, usage_id: int) -> ServiceUsage | None:
        usage = self._by_id.get(usage_id)
        return replace(usage) if usage else None

    async def remove(self, usage_id: int) -> None:
        self._by_id.pop(usage_id, None)

    async def list_by_reservation(self, reservation_id: int) -> Sequence[ServiceUsage]:
        return [replace(u) for u in self._by_id.values() if u.reservation_id == reservation_id]
