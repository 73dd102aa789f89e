"""Predictive mean matching donor selection.

This module finds, for each target, a random one of its k nearest donors
by predicted value, optionally excluding donors with a given true value.
"""

from .config import DEFAULT_CONFIG, MatchingConfig, get_matching_config, reload_matching_config
from .errors import (
    EmptyDonorPoolError,
    InvalidLengthError,
    MatchingError,
    NoEligibleDonorError,
)
from .matcher import Matcher, clamp_k, find_hth_nearest, match_index
from .models import MatchRequest
from .results import borrow_donor_values, draw_plausible_values, impute_values
from .sampling import RandomSampler, SeededSampler

__all__ = [
    "MatchingConfig",
    "DEFAULT_CONFIG",
    "get_matching_config",
    "reload_matching_config",
    "MatchingError",
    "InvalidLengthError",
    "EmptyDonorPoolError",
    "NoEligibleDonorError",
    "Matcher",
    "MatchRequest",
    "match_index",
    "clamp_k",
    "find_hth_nearest",
    "borrow_donor_values",
    "impute_values",
    "draw_plausible_values",
    "RandomSampler",
    "SeededSampler",
]
