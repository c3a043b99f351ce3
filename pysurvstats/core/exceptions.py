"""
Exception hierarchy for pysurvstats.

All exceptions inherit from PySurvStatsError to allow catching any
library-specific error. Every error raised by a survival computation is a
ValidationError subclass: the estimators are deterministic, so the only way
to fail is a malformed input or configuration.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PySurvStatsError(Exception):
    """Base exception for all pysurvstats errors."""
    pass


class ValidationError(PySurvStatsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks, e.g. a
    negative or non-finite survival time.
    """
    pass


class DimensionError(ValidationError):
    """
    Array lengths are inconsistent.

    Raised when parallel inputs (time, event, group labels) do not have
    matching lengths.
    """
    pass


class EmptyInputError(ValidationError):
    """
    An estimator was asked to run on zero subjects.
    """
    pass


class InsufficientGroupsError(ValidationError):
    """
    A group comparison has fewer than two non-empty groups.

    Attributes:
        n_groups: Number of non-empty groups actually found
    """

    def __init__(self, message: str, n_groups: int | None = None):
        super().__init__(message)
        self.n_groups = n_groups


class DegenerateIntervalError(ValidationError):
    """
    Life-table interval boundaries are malformed.

    Raised for unsorted, duplicated or non-finite boundaries, or for
    boundaries that do not cover the observed time range. An interval
    with nobody at risk is NOT an error; it is reported as an undefined
    row of the life table.

    Attributes:
        boundaries: The offending boundaries, as given
    """

    def __init__(self, message: str, boundaries: tuple[float, ...] | None = None):
        super().__init__(message)
        self.boundaries = boundaries
