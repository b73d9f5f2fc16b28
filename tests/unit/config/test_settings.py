"""Unit tests for Settings and get_settings."""

from collections.abc import Callable
from pathlib import Path

import pytest
from pydantic import ValidationError

from leadbook.config import get_settings
from leadbook.config.models.api import APIConfig
from leadbook.config.models.buyers import BuyersConfig


@pytest.fixture
def config_env(
    test_config_dir: Path,
    mock_toml_files: Callable[[dict[str, str]], None],
) -> dict[str, str]:
    mock_toml_files({
        "default.toml": (
            '[storage]\nbackend = "postgres"\n\n'
            '[buyers]\nhistory_mode = "atomic"\nhistory_page_size = 5\n'
        ),
        "test.toml": '[storage]\nbackend = "inmemory"\n',
    })
    return {"LEADBOOK_CONFIG_DIR": str(test_config_dir), "LEADBOOK_ENV": "test"}


class TestGetSettings:
    """Tests for layered settings."""

    def test_toml_layers(self, config_env: dict[str, str], env_override: Callable) -> None:
        with env_override(config_env):
            settings = get_settings()

        assert settings.storage.backend == "inmemory"
        assert settings.buyers.history_mode == "atomic"

    def test_env_var_overrides_toml(
        self, config_env: dict[str, str], env_override: Callable
    ) -> None:
        env = {**config_env, "LEADBOOK_BUYERS__HISTORY_MODE": "best_effort"}
        with env_override(env):
            settings = get_settings()

        assert settings.buyers.history_mode == "best_effort"
        assert settings.buyers.history_page_size == 5

    def test_cached(self, config_env: dict[str, str], env_override: Callable) -> None:
        with env_override(config_env):
            assert get_settings() is get_settings()

    def test_missing_config_uses_defaults(self, tmp_path: Path, env_override: Callable) -> None:
        with env_override({"LEADBOOK_CONFIG_DIR": str(tmp_path / "missing")}):
            settings = get_settings()

        assert settings.buyers.history_mode == "atomic"
        assert settings.buyers.default_page_size == 10


class TestConfigModels:
    """Tests for section models."""

    def test_unknown_history_mode_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BuyersConfig(history_mode="eventually")

    def test_history_page_size_bounds(self) -> None:
        with pytest.raises(ValidationError):
            BuyersConfig(history_page_size=101)

    def test_cors_origins_from_string(self) -> None:
        config = APIConfig(cors_origins="http://a.test, http://b.test")
        assert config.cors_origins == ["http://a.test", "http://b.test"]
