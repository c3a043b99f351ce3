"""
Input validation utilities for pysurvstats.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion beyond float()/np.asarray on numeric input
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import math
from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pysurvstats.core.exceptions import (
    DegenerateIntervalError,
    DimensionError,
    EmptyInputError,
    ValidationError,
)


def check_time(value: Any, name: str) -> float:
    """
    Validate a single survival time.

    Args:
        value: Candidate time (any real number type)
        name: Parameter name for error messages

    Returns:
        The time as a Python float

    Raises:
        ValidationError: If the value is not a finite, non-negative real
    """
    if isinstance(value, (bool, np.bool_)):
        raise ValidationError(f"{name}: expected a real number, got bool {value!r}")
    try:
        t = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: cannot convert {value!r} to float: {e}") from e

    if not math.isfinite(t):
        raise ValidationError(f"{name}: must be finite, got {t}")
    if t < 0:
        raise ValidationError(f"{name}: must be non-negative, got {t}")
    return t


def check_event(value: Any, name: str) -> bool:
    """
    Validate a single event indicator.

    Accepts True/False and the numbers 1/0 (including NumPy scalars).

    Args:
        value: Candidate event flag
        name: Parameter name for error messages

    Returns:
        The flag as a Python bool

    Raises:
        ValidationError: If the value is not a recognizable 0/1 flag
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        if value == 1:
            return True
        if value == 0:
            return False
    raise ValidationError(
        f"{name}: event must be True/False or 1/0, got {value!r}"
    )


def check_covariate(value: Any, name: str) -> float | None:
    """
    Normalize a single covariate value.

    None and NaN both mean "missing" and come back as None.

    Args:
        value: Candidate covariate value
        name: Parameter name for error messages

    Returns:
        The value as a float, or None when missing

    Raises:
        ValidationError: If the value is present but not numeric
    """
    if value is None:
        return None
    try:
        x = float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: cannot convert {value!r} to float: {e}") from e
    if math.isnan(x):
        return None
    return x


def check_consistent_length(
    *sequences: Sequence[Any] | NDArray,
    names: tuple[str, ...]
) -> None:
    """
    Verify all sequences have the same length.

    Args:
        *sequences: Sequences to check
        names: Parameter names for error messages (must match number of sequences)

    Raises:
        ValueError: If number of names doesn't match number of sequences
        DimensionError: If sequences have inconsistent lengths
    """
    if len(sequences) != len(names):
        raise ValueError(
            f"Number of sequences ({len(sequences)}) must match number of names ({len(names)})"
        )

    if len(sequences) < 2:
        return

    lengths = [len(seq) for seq in sequences]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_not_empty(n: int, name: str) -> None:
    """
    Verify a collection has at least one subject.

    Args:
        n: Number of subjects
        name: Parameter name for error messages

    Raises:
        EmptyInputError: If n == 0
    """
    if n == 0:
        raise EmptyInputError(f"{name}: requires at least one subject, got 0")


def check_conf_level(conf_level: float, name: str = "conf_level") -> float:
    """
    Verify a confidence level lies strictly between 0 and 1.

    Raises:
        ValidationError: If conf_level is not a real number in (0, 1)
    """
    if isinstance(conf_level, (bool, np.bool_, str, bytes)):
        raise ValidationError(
            f"{name}: expected a real number, got {type(conf_level).__name__} {conf_level!r}"
        )
    try:
        level = float(conf_level)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: cannot convert {conf_level!r} to float: {e}") from e

    if not 0 < level < 1:
        raise ValidationError(f"{name}: must be in (0, 1), got {conf_level}")
    return level


def check_boundaries(boundaries: ArrayLike, name: str) -> NDArray[np.float64]:
    """
    Validate an ordered sequence of interval boundaries.

    Args:
        boundaries: Candidate boundaries b0 < b1 < ... < bk
        name: Parameter name for error messages

    Returns:
        Boundaries as a 1D float64 array

    Raises:
        DegenerateIntervalError: If there are fewer than two boundaries,
            any boundary is non-finite, or they are not strictly increasing
    """
    try:
        arr = np.asarray(boundaries, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise DegenerateIntervalError(
            f"{name}: cannot convert to float array: {e}"
        ) from e

    given = tuple(arr.ravel().tolist())

    if arr.ndim != 1:
        raise DegenerateIntervalError(
            f"{name}: expected 1D sequence, got shape {arr.shape}",
            boundaries=given,
        )
    if len(arr) < 2:
        raise DegenerateIntervalError(
            f"{name}: need at least 2 boundaries to form an interval, got {len(arr)}",
            boundaries=given,
        )
    if not np.all(np.isfinite(arr)):
        raise DegenerateIntervalError(
            f"{name}: contains non-finite values {given}",
            boundaries=given,
        )
    steps = np.diff(arr)
    if np.any(steps <= 0):
        bad = int(np.argmax(steps <= 0))
        raise DegenerateIntervalError(
            f"{name}: must be strictly increasing, "
            f"got {arr[bad]} followed by {arr[bad + 1]} at position {bad + 1}",
            boundaries=given,
        )
    return arr
