"""
Core infrastructure for pysurvstats.

This module provides shared abstractions and utilities used by the
survival estimators.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing utilities
"""

from pysurvstats.core.result import Result
from pysurvstats.core.exceptions import (
    PySurvStatsError,
    ValidationError,
    DimensionError,
    EmptyInputError,
    InsufficientGroupsError,
    DegenerateIntervalError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PySurvStatsError",
    "ValidationError",
    "DimensionError",
    "EmptyInputError",
    "InsufficientGroupsError",
    "DegenerateIntervalError",
]
