"""UserDirectory abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from leadbook.users.models import User


class UserDirectory(ABC):
    """Role lookup and first-sign-in provisioning for users."""

    @abstractmethod
    async def get_user(self, user_id: UUID) -> User | None:
        """Get a user by ID."""
        pass

    @abstractmethod
    async def ensure_user(
        self,
        user_id: UUID,
        email: str,
        full_name: str | None = None,
    ) -> User:
        """Return the user, creating a plain (non-admin) entry if missing."""
        pass

    async def is_admin(self, user_id: UUID) -> bool:
        """Check whether the user holds the admin role.

        Unknown users are not admins.
        """
        user = await self.get_user(user_id)
        return user is not None and user.is_admin
