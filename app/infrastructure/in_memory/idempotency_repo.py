from app.application.interfaces.idempotency_repo import IdempotencyRecord, IdempotencyRepo


class InMemoryIdempotencyRepo(IdempotencyRepo):
    def __init__(self) -> None:
        self._records: dict[tuple[str, str], IdempotencyRecord] = {}

    async def find(self, scope: str, idem_key: str) -> IdempotencyRecord | None:
        return self._records.get((scope, idem_key))

    async def remember(self, record: IdempotencyRecord) -> None:
        # La primera key registrada gana.
        self._records.setdefault((record.scope, record.idem_key), record)
