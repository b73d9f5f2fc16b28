"""Configuration models for all Leadbook settings sections."""

from leadbook.config.models.api import APIConfig
from leadbook.config.models.auth import AuthConfig
from leadbook.config.models.buyers import BuyersConfig, HistoryMode
from leadbook.config.models.observability import LoggingConfig, ObservabilityConfig
from leadbook.config.models.storage import StorageConfig

__all__ = [
    "APIConfig",
    "AuthConfig",
    "BuyersConfig",
    "HistoryMode",
    "LoggingConfig",
    "ObservabilityConfig",
    "StorageConfig",
]
