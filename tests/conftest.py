"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pysurvstats.survival import SubjectDataset


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def three_subjects():
    """Times 5, 10, 15 with the middle subject censored."""
    return SubjectDataset.from_arrays([5, 10, 15], [True, False, True])


@pytest.fixture
def random_cohort(rng):
    """Exponential event times with independent uniform censoring."""
    n = 200
    event_time = rng.exponential(300.0, n).round()
    censor_time = rng.uniform(0.0, 600.0, n).round()
    time = np.minimum(event_time, censor_time)
    event = event_time <= censor_time
    group = np.where(rng.random(n) < 0.5, "male", "female")
    return SubjectDataset.from_arrays(time, event, group=group)
