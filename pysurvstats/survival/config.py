"""
Life-table interval configuration.

Interval boundaries are explicit caller configuration: there is no
built-in default bin count or width. equal_width() is a convenience for
callers who ask for evenly spaced bins over the observed range.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from pysurvstats.core.exceptions import DegenerateIntervalError, ValidationError
from pysurvstats.core.validation import check_boundaries, check_not_empty
from pysurvstats.survival.design import SubjectDataset


@dataclass(frozen=True)
class LifeTableConfig:
    """Ordered interval boundaries b0 < b1 < ... < bk.

    Interval i is [b_i, b_{i+1}), except the last, which is closed
    [b_{k-1}, b_k].
    """

    interval_boundaries: tuple[float, ...]

    def __post_init__(self) -> None:
        arr = check_boundaries(self.interval_boundaries, "interval_boundaries")
        object.__setattr__(self, "interval_boundaries", tuple(arr.tolist()))

    @classmethod
    def equal_width(cls, dataset: SubjectDataset, n_intervals: int) -> LifeTableConfig:
        """n_intervals equal-width bins spanning [min(time), max(time)]."""
        check_not_empty(dataset.n, "dataset")
        if not isinstance(n_intervals, numbers.Integral) or n_intervals < 1:
            raise ValidationError(
                f"n_intervals: must be a positive integer, got {n_intervals!r}"
            )
        lo = float(dataset.time.min())
        hi = float(dataset.time.max())
        if hi == lo:
            raise DegenerateIntervalError(
                f"interval_boundaries: all observed times equal {lo}; "
                f"cannot split a zero-width range",
                boundaries=(lo, hi),
            )
        return cls(tuple(np.linspace(lo, hi, n_intervals + 1).tolist()))

    @property
    def n_intervals(self) -> int:
        return len(self.interval_boundaries) - 1

    def check_covers(self, dataset: SubjectDataset) -> None:
        """Verify the boundaries span the dataset's observed time range.

        Raises
        ------
        DegenerateIntervalError
            If some time falls below b0 or above bk.
        """
        if dataset.n == 0:
            return
        lo = float(dataset.time.min())
        hi = float(dataset.time.max())
        first = self.interval_boundaries[0]
        last = self.interval_boundaries[-1]
        if first > lo or last < hi:
            raise DegenerateIntervalError(
                f"interval_boundaries: [{first}, {last}] must cover the "
                f"observed time range [{lo}, {hi}]",
                boundaries=self.interval_boundaries,
            )


def as_config(boundaries: LifeTableConfig | ArrayLike) -> LifeTableConfig:
    """Accept either a LifeTableConfig or a raw boundary sequence."""
    if isinstance(boundaries, LifeTableConfig):
        return boundaries
    return LifeTableConfig(boundaries)
