"""Tests for configuration functionality."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from pmmatch.core.config import Settings, get_settings, reload_settings
from pmmatch.core.matching import (
    DEFAULT_CONFIG,
    MatchingConfig,
    get_matching_config,
    reload_matching_config,
)


def test_settings_defaults() -> None:
    """Test that settings have correct defaults."""
    settings = Settings()

    assert settings.env == "production"
    assert settings.log_level == "INFO"
    assert settings.logs_dir is None
    assert settings.default_k == 5
    assert settings.one_based_indices is False
    assert settings.empty_pool_policy == "error"
    assert settings.seed is None
    assert settings.is_debug is False


def test_settings_from_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that settings can be loaded from environment variables."""
    monkeypatch.setenv("PMMATCH_DEFAULT_K", "10")
    monkeypatch.setenv("PMMATCH_ONE_BASED_INDICES", "true")
    monkeypatch.setenv("PMMATCH_EMPTY_POOL_POLICY", "full_pool")
    monkeypatch.setenv("PMMATCH_SEED", "7")

    settings = reload_settings()

    assert settings.default_k == 10
    assert settings.one_based_indices is True
    assert settings.empty_pool_policy == "full_pool"
    assert settings.seed == 7


def test_settings_from_env_file(tmp_path: Path) -> None:
    """Test that settings can be loaded from .env file."""
    env_file = tmp_path / ".env"
    env_file.write_text("PMMATCH_ENV=testing\nPMMATCH_LOG_LEVEL=DEBUG\nPMMATCH_DEFAULT_K=3\n")

    settings = Settings(_env_file=str(env_file))

    assert settings.env == "testing"
    assert settings.log_level == "DEBUG"
    assert settings.default_k == 3


def test_settings_from_json_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the JSON file source, including the nested matching section."""
    config_file = tmp_path / "pmmatch.json"
    config_file.write_text(
        json.dumps({"log_level": "WARNING", "matching": {"default_k": 8, "seed": 3}})
    )
    monkeypatch.setenv("PMMATCH_CONFIG_FILE", str(config_file))

    settings = reload_settings()

    assert settings.log_level == "WARNING"
    assert settings.default_k == 8
    assert settings.seed == 3


def test_env_vars_override_json_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that environment variables take priority over the JSON file."""
    config_file = tmp_path / "pmmatch.json"
    config_file.write_text(json.dumps({"default_k": 8}))
    monkeypatch.setenv("PMMATCH_CONFIG_FILE", str(config_file))
    monkeypatch.setenv("PMMATCH_DEFAULT_K", "2")

    assert reload_settings().default_k == 2


def test_init_kwargs_override_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that values passed to Settings() take priority over environment variables."""
    monkeypatch.setenv("PMMATCH_DEFAULT_K", "7")

    assert Settings(default_k=3).default_k == 3
    assert Settings().default_k == 7


def test_env_file_overrides_json_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the .env file takes priority over the JSON file."""
    config_file = tmp_path / "pmmatch.json"
    config_file.write_text(json.dumps({"default_k": 8, "seed": 4}))
    monkeypatch.setenv("PMMATCH_CONFIG_FILE", str(config_file))
    env_file = tmp_path / ".env"
    env_file.write_text("PMMATCH_DEFAULT_K=6\n")

    settings = Settings(_env_file=str(env_file))

    assert settings.default_k == 6
    assert settings.seed == 4


def test_unreadable_json_file_ignored(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that a broken or missing JSON file falls back to defaults."""
    config_file = tmp_path / "broken.json"
    config_file.write_text("{not json")
    monkeypatch.setenv("PMMATCH_CONFIG_FILE", str(config_file))
    assert reload_settings().default_k == 5

    monkeypatch.setenv("PMMATCH_CONFIG_FILE", str(tmp_path / "missing.json"))
    assert reload_settings().default_k == 5


def test_settings_validation() -> None:
    """Test that invalid values are rejected."""
    with pytest.raises(ValidationError):
        Settings(default_k=0)

    with pytest.raises(ValidationError):
        Settings(empty_pool_policy="ignore")

    with pytest.raises(ValidationError):
        Settings(env="staging")


def test_get_settings_singleton() -> None:
    """Test that get_settings() returns a singleton."""
    assert get_settings() is get_settings()


def test_matching_config_defaults() -> None:
    """Test the default matching configuration."""
    assert DEFAULT_CONFIG.default_k == 5
    assert DEFAULT_CONFIG.one_based_indices is False
    assert DEFAULT_CONFIG.empty_pool_policy == "error"
    assert get_matching_config() == DEFAULT_CONFIG


def test_matching_config_validation() -> None:
    """Test that MatchingConfig rejects invalid values."""
    with pytest.raises(ValueError):
        MatchingConfig(default_k=0)

    with pytest.raises(ValueError):
        MatchingConfig(empty_pool_policy="ignore")  # type: ignore[arg-type]


def test_matching_config_cached_until_reload(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the matching config follows settings after a reload."""
    first = get_matching_config()
    monkeypatch.setenv("PMMATCH_DEFAULT_K", "9")
    monkeypatch.setenv("PMMATCH_ONE_BASED_INDICES", "1")

    assert get_matching_config() is first

    reloaded = reload_matching_config()

    assert reloaded.default_k == 9
    assert reloaded.one_based_indices is True
    assert get_matching_config() is reloaded
