from typing import Any


class Notifier:
    """Canal de notificaciones (correo/SMS) fuera del alcance de este servicio."""

    async def notify(self, event: str, payload: dict[str, Any]) -> None:
        raise NotImplementedError
