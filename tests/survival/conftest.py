"""
Shared survival fixtures: a small lung-cancer-like cohort.
"""

import numpy as np
import pytest

from pysurvstats.survival import SubjectDataset


# Lung-like cohort (days, 1 = death), with sex and age covariates
LUNG_TIME = np.array([6, 7, 10, 15, 16, 22, 23, 6, 9, 10, 11, 17, 19, 20, 25, 32, 35],
                     dtype=np.float64)
LUNG_EVENT = np.array([1, 1, 1, 1, 0, 1, 1, 0, 1, 0, 1, 1, 1, 1, 0, 1, 0])
LUNG_SEX = ["m"] * 7 + ["f"] * 10
LUNG_AGE = [74, 68, 56, 57, 60, 74, 68, 71, 53, 61, None, 57, 68, 68, 60, 57, 67]


@pytest.fixture
def lung():
    return SubjectDataset.from_arrays(
        LUNG_TIME, LUNG_EVENT,
        group=LUNG_SEX,
        covariates={"age": LUNG_AGE},
    )
