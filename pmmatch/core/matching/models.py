"""Pydantic models for matcher input."""

from __future__ import annotations

import math
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat

from .errors import EmptyDonorPoolError, InvalidLengthError


class MatchRequest(BaseModel):
    """Validated input for one matching call.

    Build it with from_inputs(), which checks lengths and fills in the
    optional sequences before pydantic coerces every value to float.
    """

    model_config = ConfigDict(frozen=True)

    donor_pred: list[FiniteFloat] = Field(description="Predicted value for each donor")
    target_pred: list[FiniteFloat] = Field(description="Predicted value for each target")
    k: int = Field(description="Requested neighbourhood size, before clamping")
    exclude: list[float] = Field(description="Per-target value to drop from the donor pool")
    donor_true: list[float] = Field(description="Observed value for each donor")

    @property
    def n_donor(self) -> int:
        return len(self.donor_pred)

    @property
    def n_target(self) -> int:
        return len(self.target_pred)

    @classmethod
    def from_inputs(
        cls,
        donor_pred: Iterable[float],
        target_pred: Iterable[float],
        k: int,
        exclude: Iterable[float] | None = None,
        donor_true: Iterable[float] | None = None,
    ) -> MatchRequest:
        """Check and normalize raw matcher arguments.

        Args:
            donor_pred: Predicted values of the donors
            target_pred: Predicted values of the targets
            k: Requested neighbourhood size (any integer)
            exclude: Per-target exclusion values; None excludes nothing
            donor_true: Observed donor values; None reuses donor_pred

        Raises:
            EmptyDonorPoolError: If donor_pred is empty
            InvalidLengthError: If paired sequences differ in length
            pydantic.ValidationError: If a value is not numeric, or a
                prediction is NaN or infinite
        """
        donor_pred = list(donor_pred)
        target_pred = list(target_pred)

        if not donor_pred:
            raise EmptyDonorPoolError()

        # NaN never compares equal, so it leaves the pool intact
        exclude = [math.nan] * len(target_pred) if exclude is None else list(exclude)
        donor_true = list(donor_pred) if donor_true is None else list(donor_true)

        if len(exclude) != len(target_pred):
            raise InvalidLengthError("target_pred", len(target_pred), "exclude", len(exclude))
        if len(donor_true) != len(donor_pred):
            raise InvalidLengthError("donor_pred", len(donor_pred), "donor_true", len(donor_true))

        return cls(
            donor_pred=donor_pred,
            target_pred=target_pred,
            k=k,
            exclude=exclude,
            donor_true=donor_true,
        )
