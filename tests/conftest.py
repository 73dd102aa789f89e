"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from pmmatch.core.config import reload_settings
from pmmatch.core.matching import config as matching_config


class ScriptedSampler:
    """Sampler returning fixed draws and recording every call."""

    def __init__(self, permutation: list[int] | None = None, ranks: list[int] | None = None):
        self._permutation = permutation
        self._ranks = ranks
        self.calls: list[tuple[str, int, int]] = []

    def permutation(self, n: int) -> list[int]:
        self.calls.append(("permutation", n, n))
        if self._permutation is None:
            return list(range(n))
        return list(self._permutation)

    def sample_with_replacement(self, k: int, count: int) -> list[int]:
        self.calls.append(("sample_with_replacement", k, count))
        if self._ranks is None:
            return [k] * count
        return [min(rank, k) for rank in self._ranks]


@pytest.fixture
def scripted_sampler():
    """Factory for samplers with fixed permutation and ranks."""
    return ScriptedSampler


@pytest.fixture(autouse=True)
def reset_config_cache(monkeypatch):
    """Isolate tests from PMMATCH_* variables and cached settings."""
    import os

    for name in list(os.environ):
        if name.upper().startswith("PMMATCH_"):
            monkeypatch.delenv(name)

    matching_config._cached_config = None
    reload_settings()

    yield

    matching_config._cached_config = None
    reload_settings()
