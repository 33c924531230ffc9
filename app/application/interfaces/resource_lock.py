from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class ResourceLock(Protocol):
    """
    Exclusión mutua por recurso.

    Se toma dentro de la transacción y cubre lectura de disponibilidad/saldo
    más la escritura que depende de ella.
    """

    @asynccontextmanager
    async def lock_room(self, room_id: int) -> AsyncIterator[None]:
        yield

    @asynccontextmanager
    async def lock_reservation(self, reservation_id: int) -> AsyncIterator[None]:
        yield
