import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.transaction_manager import TransactionManager
from app.domain.errors import DomainError

logger = logging.getLogger(__name__)


class SQLAlchemyTransactionManager(TransactionManager):
    """
    Una transacción por caso de uso sobre la sesión del request.

    Si la sesión ya tiene una transacción abierta (tests, llamadas anidadas
    desde el ledger) se une a ella y deja el commit a quien la abrió.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        if self._session.in_transaction():
            yield
            return

        try:
            async with self._session.begin():
                yield
        except DomainError as exc:
            # Rechazo de negocio: rollback esperado.
            logger.debug("Transaction rolled back", extra={"code": exc.code})
            raise
        except Exception:
            logger.warning("Transaction rolled back on unexpected error", exc_info=True)
            raise
