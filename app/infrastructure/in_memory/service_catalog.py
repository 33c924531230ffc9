from dataclasses import replace
from typing import Sequence

from app.application.interfaces.service_catalog import ServiceCatalog
from app.domain.entities.service_usage import Service


class InMemoryServiceCatalog(ServiceCatalog):
    def __init__(self, services: Sequence[Service] = ()) -> None:
        self._services: dict[int, Service] = {service.id: replace(service) for service in services}

    def put(self, service: Service) -> None:
        self._services[service.id] = replace(service)

    async def get(self, service_id: int) -> Service | None:
        service = self._services.get(service_id)
        return replace(service) if service else None
