"""Shared asyncpg pool for the buyer store and the user directory."""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import asyncpg

from leadbook.config.models.storage import StorageConfig
from leadbook.db.errors import ConnectionError
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)

DSN_ENV_VARS = ("LEADBOOK_DATABASE_URL", "DATABASE_URL")


def resolve_dsn(explicit: str | None = None) -> str:
    """Pick the connection string.

    Order: explicit value, LEADBOOK_DATABASE_URL, DATABASE_URL, then a DSN
    assembled from the POSTGRES_* variables with local defaults.
    """
    if explicit:
        return explicit
    for name in DSN_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value

    env = os.environ.get
    return (
        f"postgresql://{env('POSTGRES_USER', 'leadbook')}:{env('POSTGRES_PASSWORD', 'leadbook')}"
        f"@{env('POSTGRES_HOST', 'localhost')}:{env('POSTGRES_PORT', '5432')}"
        f"/{env('POSTGRES_DB', 'leadbook')}"
    )


class PostgresPool:
    """Lazily created asyncpg pool.

    Usage:
        pool = PostgresPool.from_config(settings.storage)
        async with pool.acquire() as conn:
            await conn.fetchrow("SELECT ...")
        await pool.close()
    """

    def __init__(
        self,
        dsn: str | None = None,
        min_size: int = 5,
        max_size: int = 20,
        max_inactive_connection_lifetime: float = 300.0,
        command_timeout: float = 60.0,
    ) -> None:
        self._dsn = resolve_dsn(dsn)
        self._pool_kwargs = {
            "min_size": min_size,
            "max_size": max_size,
            "max_inactive_connection_lifetime": max_inactive_connection_lifetime,
            "command_timeout": command_timeout,
        }
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_config(cls, config: StorageConfig) -> "PostgresPool":
        return cls(
            dsn=config.connection_url,
            min_size=config.min_pool_size,
            max_size=config.max_pool_size,
            max_inactive_connection_lifetime=config.max_inactive_connection_lifetime,
            command_timeout=config.command_timeout,
        )

    async def connect(self) -> None:
        """Create the pool; no-op when already connected.

        Raises:
            ConnectionError: The database could not be reached
        """
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(dsn=self._dsn, **self._pool_kwargs)
        except Exception as e:
            logger.error("postgres_pool_connection_failed", error=str(e))
            raise ConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e
        logger.info(
            "postgres_pool_connected",
            min_size=self._pool_kwargs["min_size"],
            max_size=self._pool_kwargs["max_size"],
        )

    async def close(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("postgres_pool_closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[asyncpg.Connection]:
        """Borrow a connection, connecting the pool on first use."""
        await self.connect()
        assert self._pool is not None
        async with self._pool.acquire() as connection:
            yield connection

    async def health_check(self) -> bool:
        """True when a trivial query round-trips."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except Exception as e:
            logger.warning("postgres_health_check_failed", error=str(e))
            return False
        return True
