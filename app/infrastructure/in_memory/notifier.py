import logging
from typing import Any

from app.application.interfaces.notifier import Notifier

logger = logging.getLogger(__name__)


class InMemoryNotifier(Notifier):
    """Registra los eventos en memoria y en el log; el envío real vive en otro servicio."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def notify(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))
        logger.info("Notification queued", extra={"event": event, **payload})
