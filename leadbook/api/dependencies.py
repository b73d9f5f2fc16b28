"""Dependency injection for API routes.

Provides FastAPI dependencies for the stores and services used by API
endpoints. The storage backend is chosen from settings; every dependency
can be overridden for testing via `app.dependency_overrides`.
"""

from typing import Annotated

from fastapi import Depends

from leadbook.buyers.access import AccessPolicy
from leadbook.buyers.store import BuyerStore
from leadbook.buyers.stores.inmemory import InMemoryBuyerStore
from leadbook.buyers.stores.postgres import PostgresBuyerStore
from leadbook.buyers.updater import BuyerUpdater
from leadbook.config import get_settings as load_settings
from leadbook.config.settings import Settings
from leadbook.db.pool import PostgresPool
from leadbook.observability.logging import get_logger
from leadbook.users.directory import UserDirectory
from leadbook.users.stores.inmemory import InMemoryUserDirectory
from leadbook.users.stores.postgres import PostgresUserDirectory

logger = get_logger(__name__)

# Connection pool - shared across stores
_postgres_pool: PostgresPool | None = None

# Store instances - created once and reused
_buyer_store: BuyerStore | None = None
_user_directory: UserDirectory | None = None


def get_settings() -> Settings:
    """Get application settings (cached by the config package)."""
    return load_settings()


async def get_postgres_pool() -> PostgresPool:
    """Get the shared PostgreSQL connection pool.

    Creates and connects the pool on first access.

    Returns:
        Connected PostgresPool instance
    """
    global _postgres_pool
    if _postgres_pool is None:
        pool = PostgresPool.from_config(get_settings().storage)
        await pool.connect()
        _postgres_pool = pool
    return _postgres_pool


async def get_buyer_store() -> BuyerStore:
    """Get the BuyerStore for the configured storage backend."""
    global _buyer_store
    if _buyer_store is None:
        backend = get_settings().storage.backend
        if backend == "postgres":
            _buyer_store = PostgresBuyerStore(await get_postgres_pool())
        else:
            _buyer_store = InMemoryBuyerStore()
        logger.info("buyer_store_initialized", store_type=backend)
    return _buyer_store


async def get_user_directory() -> UserDirectory:
    """Get the UserDirectory for the configured storage backend."""
    global _user_directory
    if _user_directory is None:
        backend = get_settings().storage.backend
        if backend == "postgres":
            _user_directory = PostgresUserDirectory(await get_postgres_pool())
        else:
            _user_directory = InMemoryUserDirectory()
        logger.info("user_directory_initialized", store_type=backend)
    return _user_directory


async def get_access_policy(
    directory: Annotated[UserDirectory, Depends(get_user_directory)],
) -> AccessPolicy:
    return AccessPolicy(directory)


async def get_buyer_updater(
    store: Annotated[BuyerStore, Depends(get_buyer_store)],
    access: Annotated[AccessPolicy, Depends(get_access_policy)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> BuyerUpdater:
    """Build the updater with the configured history mode."""
    return BuyerUpdater(store, access, history_mode=settings.buyers.history_mode)


async def close_dependencies() -> None:
    """Close the shared pool on shutdown."""
    global _postgres_pool
    if _postgres_pool is not None:
        await _postgres_pool.close()
        _postgres_pool = None


def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure clean state between tests.
    """
    global _postgres_pool, _buyer_store, _user_directory
    _postgres_pool = None
    _buyer_store = None
    _user_directory = None


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
BuyerStoreDep = Annotated[BuyerStore, Depends(get_buyer_store)]
UserDirectoryDep = Annotated[UserDirectory, Depends(get_user_directory)]
BuyerUpdaterDep = Annotated[BuyerUpdater, Depends(get_buyer_updater)]
