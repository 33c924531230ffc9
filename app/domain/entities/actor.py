"""Actor - identidad y nivel de privilegio de quien ejecuta una operación."""

from dataclasses import dataclass
from enum import Enum


class ActorRole(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: ActorRole = ActorRole.CUSTOMER

    @property
    def is_privileged(self) -> bool:
        return self.role in (ActorRole.STAFF, ActorRole.ADMIN)

    def owns(self, holder_id: int) -> bool:
        return self.user_id == holder_id

    def can_access(self, holder_id: int) -> bool:
        """Staff/admin acceden a cualquier reservación; clientes solo a las propias."""
        return self.is_privileged or self.owns(holder_id)
