from app.domain.entities.service_usage import Service


class ServiceCatalog:
    async def get(self, service_id: int) -> Service | None:
        raise NotImplementedError
