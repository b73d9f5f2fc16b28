"""Health check response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from leadbook.config.models.storage import BackendType


class HealthResponse(BaseModel):
    """Service status and the reachability of its storage backend."""

    status: Literal["healthy", "unhealthy"]
    version: str
    storage: BackendType
    timestamp: datetime
