"""Library configuration using Pydantic Settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

CONFIG_FILE_ENV = "PMMATCH_CONFIG_FILE"


def json_config_settings_source(
    settings: BaseSettings | None = None,
) -> dict[str, Any]:  # noqa: ANN001
    """Load settings from the JSON file named by ``PMMATCH_CONFIG_FILE``.

    This source has lowest priority - env vars will override JSON values.

    Accepts either a flat object (``{"default_k": 5}``) or one with the
    matching knobs nested under ``"matching"``.

    Returns:
        Dictionary with setting keys (lowercase) and values from the JSON file,
        or an empty dict if no file is configured or it cannot be read.
    """
    config_file = os.environ.get(CONFIG_FILE_ENV)
    if not config_file:
        return {}

    settings_file = Path(config_file)
    if not settings_file.exists():
        return {}

    try:
        with settings_file.open("r") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}

    if not isinstance(data, dict):
        return {}

    flattened: dict[str, Any] = {}
    matching = data.get("matching")
    if isinstance(matching, dict):
        flattened.update(matching)

    for key, value in data.items():
        if key != "matching":
            flattened[key] = value

    return {k.lower(): v for k, v in flattened.items()}


class Settings(BaseSettings):
    """Library settings.

    Settings are loaded from:
    1. JSON file (path in PMMATCH_CONFIG_FILE) - lowest priority
    2. .env file
    3. Environment variables - override JSON/.env
    4. Values passed to Settings() - highest priority

    All settings use the PMMATCH_ prefix (e.g., PMMATCH_DEFAULT_K=10).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PMMATCH_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources.

        Earlier sources win: init kwargs, then env vars, then .env, then JSON.
        """
        return (  # type: ignore[return-value]
            init_settings,
            env_settings,
            dotenv_settings,
            json_config_settings_source,
        )

    env: Literal["development", "production", "testing"] = Field(
        default="production",
        description="Runtime environment (development enables debug logging)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    logs_dir: Path | None = Field(
        default=None,
        description="Optional directory for JSON log files",
    )

    # Matching
    default_k: int = Field(
        default=5,
        ge=1,
        description="Neighbourhood size used when a call does not pass k",
    )

    one_based_indices: bool = Field(
        default=False,
        description="Return 1-based donor indices instead of 0-based",
    )

    empty_pool_policy: Literal["error", "full_pool"] = Field(
        default="error",
        description="What to do when every donor is excluded for a target",
    )

    seed: int | None = Field(
        default=None,
        description="Seed for the default sampler (None draws from system entropy)",
    )

    @property
    def is_debug(self) -> bool:
        """Check if running in debug/development mode."""
        return self.env == "development"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    The cache is cleared when reload_settings() is called.
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from all sources (JSON, .env, env vars).

    Clears the cache and creates a new Settings instance.
    Useful for testing or when settings change.

    Returns:
        New Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
