"""Helpers that turn match indices into imputed values.

The usual pattern is ``y[matchindex(d, t)]``: match on predictions, then
borrow the observed value of each matched donor.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TypeVar

import structlog

from .config import MatchingConfig
from .errors import InvalidLengthError
from .matcher import Matcher
from .sampling import RandomSampler

logger = structlog.get_logger("pmmatch.matching")

T = TypeVar("T")


def borrow_donor_values(
    donor_values: Sequence[T],
    indices: Iterable[int],
    *,
    one_based: bool = False,
) -> list[T]:
    """Look up the observed donor value for each matched index.

    Args:
        donor_values: Observed values, in the same order as the donors
        indices: Donor indices returned by the matcher
        one_based: Whether indices are 1-based

    Returns:
        One donor value per index

    Raises:
        IndexError: If an index does not refer to a donor
    """
    offset = 1 if one_based else 0
    n_donor = len(donor_values)
    values: list[T] = []
    for index in indices:
        position = index - offset
        if not 0 <= position < n_donor:
            raise IndexError(f"Donor index {index} out of range for {n_donor} donors")
        values.append(donor_values[position])
    return values


def impute_values(
    donor_pred: Sequence[float],
    target_pred: Iterable[float],
    donor_values: Sequence[T],
    k: int | None = None,
    *,
    exclude: Iterable[float] | None = None,
    sampler: RandomSampler | None = None,
    config: MatchingConfig | None = None,
) -> list[T]:
    """Match targets to donors and return the borrowed donor values.

    Exclusion compares against donor_values, so they must be numeric when
    exclude is given.
    """
    if len(donor_values) != len(donor_pred):
        raise InvalidLengthError("donor_pred", len(donor_pred), "donor_values", len(donor_values))

    matcher = Matcher(sampler=sampler, config=config)
    donor_true = donor_values if exclude is not None else None
    indices = matcher.match(donor_pred, target_pred, k, exclude, donor_true)
    return borrow_donor_values(
        donor_values, indices, one_based=matcher.config.one_based_indices
    )


def draw_plausible_values(
    donor_pred: Sequence[float],
    target_pred: Sequence[float],
    donor_values: Sequence[T],
    m: int,
    k: int | None = None,
    *,
    exclude: Sequence[float] | None = None,
    sampler: RandomSampler | None = None,
    config: MatchingConfig | None = None,
) -> list[list[T]]:
    """Draw m independent sets of imputed values.

    Every draw reshuffles the donors and redraws the neighbour ranks from
    the same sampler, so the m sets together show the spread of plausible
    values for each target.

    Returns:
        A list of m lists, each with one value per target
    """
    if m < 1:
        raise ValueError(f"m must be at least 1, got {m}")
    if len(donor_values) != len(donor_pred):
        raise InvalidLengthError("donor_pred", len(donor_pred), "donor_values", len(donor_values))

    matcher = Matcher(sampler=sampler, config=config)
    donor_true = donor_values if exclude is not None else None
    one_based = matcher.config.one_based_indices

    draws: list[list[T]] = []
    for _ in range(m):
        indices = matcher.match(donor_pred, target_pred, k, exclude, donor_true)
        draws.append(borrow_donor_values(donor_values, indices, one_based=one_based))

    logger.debug("Drew plausible values", m=m, n_target=len(target_pred))
    return draws
