from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class IdempotencyRecord:
    """Un `Idempotency-Key` ya consumido y el pago que produjo."""

    scope: str
    idem_key: str
    request_hash: str
    reservation_id: int
    payment_id: int


class IdempotencyRepo(Protocol):
    async def find(self, scope: str, idem_key: str) -> IdempotencyRecord | None:
        ...

    async def remember(self, record: IdempotencyRecord) -> None:
        ...
