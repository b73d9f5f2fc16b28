"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Response

from leadbook import __version__
from leadbook.api.dependencies import SettingsDep, get_postgres_pool
from leadbook.api.models.health import HealthResponse
from leadbook.db.errors import StoreError
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _database_reachable() -> bool:
    try:
        pool = await get_postgres_pool()
    except StoreError:
        return False
    return await pool.health_check()


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: SettingsDep, response: Response) -> HealthResponse:
    """Report liveness; with the postgres backend, also database reachability.

    Returns 503 when the database cannot be reached.
    """
    backend = settings.storage.backend
    healthy = backend != "postgres" or await _database_reachable()
    if not healthy:
        response.status_code = 503

    logger.debug("health_check_completed", storage=backend, healthy=healthy)
    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        storage=backend,
        timestamp=datetime.now(UTC),
    )
