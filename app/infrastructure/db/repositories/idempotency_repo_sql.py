import logging

from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo
from app.infrastructure.db.tables import idempotency_keys

logger = logging.getLogger(__name__)


class IdempotencyRepoSQL(IdempotencyRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find(self, scope: str, idem_key: str) -> IdempotencyRecord | None:
        stmt = select(
            idempotency_keys.c.scope,
            idempotency_keys.c.idem_key,
            idempotency_keys.c.request_hash,
            idempotency_keys.c.reservation_id,
            idempotency_keys.c.payment_id,
        ).where(
            idempotency_keys.c.scope == scope,
            idempotency_keys.c.idem_key == idem_key,
        )
        row = (await self._session.execute(stmt)).mappings().first()
        return IdempotencyRecord(**row) if row else None

    async def remember(self, record: IdempotencyRecord) -> None:
        stmt = insert(idempotency_keys).values(
            scope=record.scope,
            idem_key=record.idem_key,
            request_hash=record.request_hash,
            reservation_id=record.reservation_id,
            payment_id=record.payment_id,
        )
        # Savepoint: una key duplicada por carrera no invalida la transacción externa.
        try:
            async with self._session.begin_nested():
                await self._session.execute(stmt)
        except IntegrityError:
            logger.warning(
                "Idempotency key already stored by a concurrent request",
                extra={"scope": record.scope, "payment_id": record.payment_id},
            )
