import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from app.application.interfaces.resource_lock import ResourceLock


class InMemoryResourceLock(ResourceLock):
    """
    Un asyncio.Lock por recurso; válido dentro de un solo proceso.

    El lock de un recurso vive mientras alguien lo tiene o lo espera y se
    descarta al soltarlo el último.
    """

    def __init__(self) -> None:
        self._locks: dict[tuple[str, int], asyncio.Lock] = {}
        self._users: dict[tuple[str, int], int] = {}

    @asynccontextmanager
    async def _hold(self, kind: str, resource_id: int) -> AsyncIterator[None]:
        key = (kind, resource_id)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    def lock_room(self, room_id: int):
        return self._hold("room", room_id)

    def lock_reservation(self, reservation_id: int):
        return self._hold("reservation", reservation_id)
