"""Exceptions raised by the matcher.

All of them subclass ValueError, so they can be handled like any other
bad-argument error.
"""


class MatchingError(ValueError):
    """Base class for matching errors."""


class InvalidLengthError(MatchingError):
    """Paired input sequences have different lengths."""

    def __init__(self, first: str, first_len: int, second: str, second_len: int):
        self.first = first
        self.second = second
        super().__init__(
            f"{first} and {second} must have the same length ({first_len} != {second_len})"
        )


class EmptyDonorPoolError(MatchingError):
    """No donors were supplied."""

    def __init__(self) -> None:
        super().__init__("At least one donor is required")


class NoEligibleDonorError(MatchingError):
    """Every donor is excluded for one target.

    Attributes:
        target_index: Position of the target in the input (0-based)
        excluded_value: The exclusion value that removed all donors
    """

    def __init__(self, target_index: int, excluded_value: float):
        self.target_index = target_index
        self.excluded_value = excluded_value
        super().__init__(
            f"No eligible donor for target {target_index}: "
            f"all donors have true value {excluded_value}"
        )
