from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.resource_lock import ResourceLock
from app.infrastructure.db.tables import reservations, rooms


class SQLResourceLock(ResourceLock):
    """
    Bloqueo de fila con SELECT ... FOR UPDATE.

    Debe usarse dentro de `TransactionManager.start()`; el lock se libera con
    el commit o rollback. SQLite ignora FOR UPDATE (serializa las escrituras).
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def lock_room(self, room_id: int) -> AsyncIterator[None]:
        await self._session.execute(select(rooms.c.id).where(rooms.c.id == room_id).with_for_update())
        yield

    @asynccontextmanager
    async def lock_reservation(self, reservation_id: int) -> AsyncIterator[None]:
        await self._session.execute(
            select(reservations.c.id).where(reservations.c.id == reservation_id).with_for_update()
        )
        yield
