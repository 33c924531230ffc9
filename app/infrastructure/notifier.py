import logging
from typing import Any

from app.application.interfaces.notifier import Notifier

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    """Deja constancia de la notificación en el log; el envío lo hace otro servicio."""

    async def notify(self, event: str, payload: dict[str, Any]) -> None:
        logger.info("Notification emitted", extra={"event": event, **payload})
