"""Predictive mean matching - pick one of the k nearest donors per target.

For every target the matcher walks outward from the target's position in
the sorted donor predictions and stops on the h-th nearest eligible donor,
where h is drawn uniformly from 1..k. This is equivalent to drawing one of
the k nearest donors at random.

Steps per call:

1. Shuffle the donors so that ties in prediction are ordered at random
2. Stable-sort the shuffled donors by prediction
3. Draw one rank h in 1..k per target
4. For each target, drop donors whose true value equals its exclusion
   value, locate the target by lower-bound search and take the h-th
   nearest neighbour

All randomness is drawn in steps 1 and 3, so the per-target search is
deterministic once the sampler's output is fixed.
"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable

import structlog

from pmmatch.core.tracing import get_trace_id, trace_context

from .config import MatchingConfig, get_matching_config
from .errors import NoEligibleDonorError
from .models import MatchRequest
from .sampling import RandomSampler, SeededSampler

logger = structlog.get_logger("pmmatch.matching")

# Sorted donor predictions and the original donor index at each position
DonorPool = tuple[list[float], list[int]]


def clamp_k(k: int, n_donor: int) -> int:
    """Restrict k to 1..n_donor."""
    return max(1, min(k, n_donor))


def find_hth_nearest(values: list[float], donors: list[int], target: float, h: int) -> int:
    """Return the donor that is the h-th nearest to target.

    Args:
        values: Donor predictions sorted ascending (must not be empty)
        donors: Original donor index for each entry of values
        target: Predicted value of the target
        h: Rank of the neighbour to return (1 = nearest)

    Returns:
        Donor index of the h-th nearest neighbour, or of the last neighbour
        reached if fewer than h donors are available
    """
    n = len(values)
    r = bisect_left(values, target)
    left = r - 1
    chosen = donors[r] if r < n else donors[left]

    for _ in range(h):
        if left >= 0 and r < n:
            # Equal distances go to the right-hand donor
            if target - values[left] < values[r] - target:
                chosen = donors[left]
                left -= 1
            else:
                chosen = donors[r]
                r += 1
        elif left >= 0:
            chosen = donors[left]
            left -= 1
        elif r < n:
            chosen = donors[r]
            r += 1
        else:
            break

    return chosen


class Matcher:
    """Finds a randomly drawn near donor for each target.

    Example:
        matcher = Matcher(SeededSampler(seed=1))
        idx = matcher.match(donor_pred, target_pred, k=5)
        imputed = [donor_y[i] for i in idx]
    """

    def __init__(
        self,
        sampler: RandomSampler | None = None,
        config: MatchingConfig | None = None,
    ):
        """Create a matcher.

        Args:
            sampler: Source of random draws (defaults to a SeededSampler
                seeded from config.seed)
            config: Matching configuration (if None, loads from settings)
        """
        if config is None:
            config = get_matching_config()
        self.config = config
        self.sampler = sampler if sampler is not None else SeededSampler(config.seed)

    def match(
        self,
        donor_pred: Iterable[float],
        target_pred: Iterable[float],
        k: int | None = None,
        exclude: Iterable[float] | None = None,
        donor_true: Iterable[float] | None = None,
    ) -> list[int]:
        """Match every target to one of its k nearest eligible donors.

        Args:
            donor_pred: Predicted values of the donors
            target_pred: Predicted values of the targets
            k: Neighbourhood size, clamped to 1..len(donor_pred)
                (None uses config.default_k)
            exclude: Per-target value; donors whose true value equals it are
                not eligible for that target (None excludes nothing)
            donor_true: Observed donor values compared against exclude
                (None reuses donor_pred)

        Returns:
            One donor index per target, in target order. Indices are 0-based
            unless config.one_based_indices is set.

        Raises:
            EmptyDonorPoolError: If there are no donors
            InvalidLengthError: If paired inputs differ in length
            NoEligibleDonorError: If every donor is excluded for a target and
                config.empty_pool_policy is "error"
        """
        request = MatchRequest.from_inputs(
            donor_pred,
            target_pred,
            self.config.default_k if k is None else k,
            exclude,
            donor_true,
        )

        with trace_context(get_trace_id()):
            indices = self._match(request)

        if self.config.one_based_indices:
            return [i + 1 for i in indices]
        return indices

    def _match(self, request: MatchRequest) -> list[int]:
        n_donor = request.n_donor
        n_target = request.n_target
        k = clamp_k(request.k, n_donor)
        if k != request.k:
            logger.debug("Clamped neighbourhood size", requested_k=request.k, k=k, n_donor=n_donor)

        permutation = self.sampler.permutation(n_donor)
        if sorted(permutation) != list(range(n_donor)):
            raise ValueError(f"Sampler did not return a permutation of {n_donor} donors")

        # sorted() is stable, so equal predictions keep their shuffled order
        order = sorted(permutation, key=request.donor_pred.__getitem__)
        full_pool: DonorPool = ([request.donor_pred[j] for j in order], order)

        ranks = self.sampler.sample_with_replacement(k, n_target)
        if len(ranks) != n_target:
            raise ValueError(f"Sampler returned {len(ranks)} ranks for {n_target} targets")
        if any(not 1 <= h <= k for h in ranks):
            raise ValueError(f"Sampler returned ranks outside 1..{k}")

        logger.debug("Matching targets", n_donor=n_donor, n_target=n_target, k=k)

        true_values = set(request.donor_true)
        # Only the most recent filtered pool is kept, so memory stays linear
        last_excluded: float | None = None
        last_pool: DonorPool = full_pool
        result: list[int] = []

        for i, (target, excluded, h) in enumerate(
            zip(request.target_pred, request.exclude, ranks)
        ):
            if excluded not in true_values:
                pool = full_pool
            elif excluded == last_excluded:
                pool = last_pool
            else:
                pool = self._filter_pool(full_pool, request.donor_true, excluded)
                last_excluded, last_pool = excluded, pool

            values, donors = pool
            if not values:
                if self.config.empty_pool_policy == "error":
                    raise NoEligibleDonorError(i, excluded)
                logger.warning(
                    "All donors excluded, matching against full pool",
                    target_index=i,
                    excluded_value=excluded,
                )
                values, donors = full_pool

            result.append(find_hth_nearest(values, donors, target, h))

        return result

    @staticmethod
    def _filter_pool(pool: DonorPool, donor_true: list[float], excluded: float) -> DonorPool:
        """Drop donors whose true value equals excluded, keeping sort order."""
        values: list[float] = []
        donors: list[int] = []
        for value, donor in zip(*pool):
            if donor_true[donor] != excluded:
                values.append(value)
                donors.append(donor)
        return values, donors


def match_index(
    donor_pred: Iterable[float],
    target_pred: Iterable[float],
    k: int | None = None,
    exclude: Iterable[float] | None = None,
    donor_true: Iterable[float] | None = None,
    *,
    sampler: RandomSampler | None = None,
    config: MatchingConfig | None = None,
) -> list[int]:
    """Find the index of a matched donor for each target.

    Convenience wrapper around Matcher.match(); see there for arguments.

    Example:
        >>> d = [-5, 5, 0, 10, 12]
        >>> t = [-6, -4, 0, 2, 4, -2, 6]
        >>> match_index(d, t, k=1, sampler=SeededSampler(1))
        [0, 0, 2, 2, 1, 2, 1]
    """
    return Matcher(sampler=sampler, config=config).match(
        donor_pred, target_pred, k, exclude, donor_true
    )
