"""Random sampling used by the matcher.

The matcher only needs two draws per call: a permutation of the donors
(to break ties) and one neighbour rank per target. Anything providing
those two methods can be passed in, which keeps tests deterministic.
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSampler(Protocol):
    """Source of the random draws the matcher consumes."""

    def permutation(self, n: int) -> list[int]:
        """Return a uniformly random permutation of ``range(n)``."""
        ...

    def sample_with_replacement(self, k: int, count: int) -> list[int]:
        """Return ``count`` independent uniform draws from ``1..k``."""
        ...


class SeededSampler:
    """RandomSampler backed by its own ``random.Random`` stream.

    Two samplers built with the same seed produce the same draws, so
    matches are reproducible. Pass ``seed=None`` to seed from system entropy.
    """

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def permutation(self, n: int) -> list[int]:
        if n < 0:
            raise ValueError(f"n must be non-negative, got {n}")
        return self._rng.sample(range(n), n)

    def sample_with_replacement(self, k: int, count: int) -> list[int]:
        if k < 1:
            raise ValueError(f"k must be at least 1, got {k}")
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return self._rng.choices(range(1, k + 1), k=count)

    def __repr__(self) -> str:
        return f"SeededSampler(seed={self.seed!r})"
