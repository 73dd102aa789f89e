"""pmmatch - predictive mean matching donor selection."""

from pmmatch.core.matching import (
    EmptyDonorPoolError,
    InvalidLengthError,
    Matcher,
    MatchingConfig,
    MatchingError,
    NoEligibleDonorError,
    RandomSampler,
    SeededSampler,
    borrow_donor_values,
    draw_plausible_values,
    impute_values,
    match_index,
)

__version__ = "0.1.0"

__all__ = [
    "Matcher",
    "MatchingConfig",
    "match_index",
    "impute_values",
    "draw_plausible_values",
    "borrow_donor_values",
    "RandomSampler",
    "SeededSampler",
    "MatchingError",
    "InvalidLengthError",
    "EmptyDonorPoolError",
    "NoEligibleDonorError",
]
