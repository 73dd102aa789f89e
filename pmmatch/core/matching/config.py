"""Matching configuration - neighbourhood size, index convention and pool policy."""

from dataclasses import dataclass
from typing import Literal

EmptyPoolPolicy = Literal["error", "full_pool"]


@dataclass(frozen=True)
class MatchingConfig:
    """Configuration for donor matching.

    This class centralizes the matcher's knobs so callers can pass one
    object instead of several keyword arguments.
    """

    # Neighbourhood size used when a call passes k=None
    default_k: int = 5

    # Return 1-based indices (the convention of 1-based host arrays)
    one_based_indices: bool = False

    # "error" raises NoEligibleDonorError, "full_pool" ignores the exclusion
    empty_pool_policy: EmptyPoolPolicy = "error"

    # Seed for the sampler built when none is passed in
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.default_k < 1:
            raise ValueError(f"default_k must be at least 1, got {self.default_k}")
        if self.empty_pool_policy not in ("error", "full_pool"):
            raise ValueError(f"Unknown empty_pool_policy: {self.empty_pool_policy!r}")


# Default config instance
DEFAULT_CONFIG = MatchingConfig()

# Cached config instance (built from library settings)
_cached_config: MatchingConfig | None = None


def get_matching_config() -> MatchingConfig:
    """Get the current matching configuration.

    Built from the library Settings (PMMATCH_* env vars, .env, JSON file)
    on first use and cached afterwards.

    Returns:
        MatchingConfig instance with current settings
    """
    global _cached_config

    if _cached_config is None:
        from pmmatch.core.config import get_settings

        settings = get_settings()
        _cached_config = MatchingConfig(
            default_k=settings.default_k,
            one_based_indices=settings.one_based_indices,
            empty_pool_policy=settings.empty_pool_policy,
            seed=settings.seed,
        )

    return _cached_config


def reload_matching_config() -> MatchingConfig:
    """Reload matching configuration from the library settings.

    Call this after changing settings to ensure new values are used.
    """
    global _cached_config

    from pmmatch.core.config import reload_settings

    reload_settings()
    _cached_config = None
    return get_matching_config()
