"""Layered TOML configuration files.

`config/default.toml` is always read; `config/{LEADBOOK_ENV}.toml` is
merged over it when present. Environment variables are applied later by
the Settings model itself.
"""

import os
import tomllib
from functools import reduce
from pathlib import Path
from typing import Any

DEFAULT_ENVIRONMENT = "development"
CONFIG_DIR_NAME = "config"

# How many parent directories to climb looking for config/
_SEARCH_DEPTH = 5


def get_config_dir() -> Path:
    """Locate the config directory.

    LEADBOOK_CONFIG_DIR wins and must exist. Otherwise the nearest
    `config/` in the working directory or its parents is used.
    """
    explicit = os.environ.get("LEADBOOK_CONFIG_DIR")
    if explicit:
        path = Path(explicit)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {explicit}")
        return path

    here = Path.cwd()
    for candidate in [here, *here.parents][:_SEARCH_DEPTH]:
        if (candidate / CONFIG_DIR_NAME).is_dir():
            return candidate / CONFIG_DIR_NAME
    return Path(CONFIG_DIR_NAME)


def get_environment() -> str:
    return os.environ.get("LEADBOOK_ENV", DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Parse one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {file_path}") from None


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into a copy of base; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_layers(config_dir: Path, environment: str) -> list[Path]:
    """Files to merge, lowest precedence first. default.toml is mandatory."""
    default = config_dir / "default.toml"
    if not default.exists():
        raise FileNotFoundError(
            f"Default configuration file not found: {default}. "
            "Create config/default.toml or set LEADBOOK_CONFIG_DIR."
        )
    layers = [default]
    overlay = config_dir / f"{environment}.toml"
    if overlay.exists():
        layers.append(overlay)
    return layers


def load_config() -> dict[str, Any]:
    """Read and merge the TOML layers for the current environment."""
    layers = config_layers(get_config_dir(), get_environment())
    return reduce(deep_merge, (load_toml(path) for path in layers), {})
