"""PostgreSQL implementation of UserDirectory.

Uses asyncpg for async database access.
"""

from uuid import UUID

import asyncpg

from leadbook.db.errors import ConnectionError
from leadbook.db.pool import PostgresPool
from leadbook.observability.logging import get_logger
from leadbook.users.directory import UserDirectory
from leadbook.users.models import User, UserRole

logger = get_logger(__name__)


class PostgresUserDirectory(UserDirectory):
    """PostgreSQL implementation of UserDirectory."""

    def __init__(self, pool: PostgresPool) -> None:
        self._pool = pool

    async def get_user(self, user_id: UUID) -> User | None:
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    SELECT id, email, full_name, role, created_at, updated_at
                    FROM users
                    WHERE id = $1
                    """,
                    user_id,
                )
        except Exception as e:
            logger.error("postgres_get_user_error", user_id=str(user_id), error=str(e))
            raise ConnectionError(f"Failed to get user: {e}", cause=e) from e
        return self._row_to_user(row) if row else None

    async def ensure_user(
        self,
        user_id: UUID,
        email: str,
        full_name: str | None = None,
    ) -> User:
        existing = await self.get_user(user_id)
        if existing is not None:
            return existing

        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(
                    """
                    INSERT INTO users (id, email, full_name, role)
                    VALUES ($1, $2, $3, $4)
                    ON CONFLICT (id) DO NOTHING
                    RETURNING id, email, full_name, role, created_at, updated_at
                    """,
                    user_id,
                    email,
                    full_name or email.split("@")[0],
                    UserRole.USER.value,
                )
        except Exception as e:
            logger.error("postgres_ensure_user_error", user_id=str(user_id), error=str(e))
            raise ConnectionError(f"Failed to provision user: {e}", cause=e) from e

        if row is None:
            # Provisioned by a concurrent request
            user = await self.get_user(user_id)
            if user is None:
                raise ConnectionError(f"User {user_id} vanished during provisioning")
            return user

        logger.info("user_provisioned", user_id=str(user_id))
        return self._row_to_user(row)

    def _row_to_user(self, row: asyncpg.Record) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            role=UserRole(row["role"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
