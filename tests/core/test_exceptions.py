"""
Tests for the pysurvstats exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PySurvStatsError)
    - Diagnostic attributes on InsufficientGroupsError, DegenerateIntervalError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pysurvstats.core.exceptions import (
    DegenerateIntervalError,
    DimensionError,
    EmptyInputError,
    InsufficientGroupsError,
    PySurvStatsError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PySurvStatsError."""

    def test_validation_error_is_base_error(self):
        with pytest.raises(PySurvStatsError):
            raise ValidationError("bad input")

    @pytest.mark.parametrize("exc_type", [
        DimensionError,
        EmptyInputError,
        InsufficientGroupsError,
        DegenerateIntervalError,
    ])
    def test_subclasses_are_validation_errors(self, exc_type):
        with pytest.raises(ValidationError):
            raise exc_type("bad input")

    def test_base_is_plain_exception(self):
        assert issubclass(PySurvStatsError, Exception)
        assert not issubclass(PySurvStatsError, ValueError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestInsufficientGroupsError:

    def test_n_groups_attribute(self):
        err = InsufficientGroupsError("need 2 groups", n_groups=1)
        assert str(err) == "need 2 groups"
        assert err.n_groups == 1

    def test_default_is_none(self):
        assert InsufficientGroupsError("x").n_groups is None


class TestDegenerateIntervalError:

    def test_boundaries_attribute(self):
        err = DegenerateIntervalError("unsorted", boundaries=(0.0, 5.0, 2.0))
        assert "unsorted" in str(err)
        assert err.boundaries == (0.0, 5.0, 2.0)

    def test_catchable_with_attributes(self):
        with pytest.raises(DegenerateIntervalError) as exc_info:
            raise DegenerateIntervalError("overlap", boundaries=(1.0, 1.0))
        assert exc_info.value.boundaries == (1.0, 1.0)

    def test_default_is_none(self):
        assert DegenerateIntervalError("x").boundaries is None
