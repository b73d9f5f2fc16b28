"""Edit permissions for buyer leads."""

from uuid import UUID

from leadbook.observability.logging import get_logger
from leadbook.users.directory import UserDirectory

logger = get_logger(__name__)


class ForbiddenError(Exception):
    """Raised when the acting user may not modify a buyer."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AccessPolicy:
    """Owner-or-admin edit rule.

    A user may edit or delete a buyer they own; admins may edit any buyer.
    """

    def __init__(self, directory: UserDirectory) -> None:
        self._directory = directory

    async def can_edit(self, actor_id: UUID, owner_id: UUID) -> bool:
        if actor_id == owner_id:
            return True
        is_admin = await self._directory.is_admin(actor_id)
        if is_admin:
            logger.debug("admin_edit_allowed", actor_id=str(actor_id), owner_id=str(owner_id))
        return is_admin
