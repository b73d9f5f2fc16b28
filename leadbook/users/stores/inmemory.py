"""In-memory implementation of UserDirectory."""

from uuid import UUID

from leadbook.users.directory import UserDirectory
from leadbook.users.models import User, UserRole


class InMemoryUserDirectory(UserDirectory):
    """In-memory implementation of UserDirectory for testing and development.

    Not suitable for production use.
    """

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    async def get_user(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    async def ensure_user(
        self,
        user_id: UUID,
        email: str,
        full_name: str | None = None,
    ) -> User:
        existing = self._users.get(user_id)
        if existing is not None:
            return existing
        user = User(
            id=user_id,
            email=email,
            full_name=full_name or email.split("@")[0],
        )
        self._users[user_id] = user
        return user

    def add_user(self, user: User) -> None:
        """Seed a user directly, e.g. an admin in tests."""
        self._users[user.id] = user

    def set_role(self, user_id: UUID, role: UserRole) -> None:
        """Change a seeded user's role."""
        self._users[user_id] = self._users[user_id].model_copy(update={"role": role})
