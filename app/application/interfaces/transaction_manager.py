from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """Delimita la unidad de trabajo; al salir con excepción hace rollback."""

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
