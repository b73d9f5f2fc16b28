"""Configuration loading for Leadbook.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from leadbook.config import get_settings

    settings = get_settings()
    mode = settings.buyers.history_mode
"""

from functools import lru_cache

from leadbook.config.loader import load_config
from leadbook.config.settings import Settings, set_toml_config
from leadbook.observability.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.
    Missing config files fall back to model defaults plus environment.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError as e:
        logger.warning("config_file_not_found", error=str(e))
        set_toml_config({})

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
