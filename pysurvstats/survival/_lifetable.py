"""
Actuarial (Cutler-Ederer) life table over fixed intervals.

For interval t = [b_t, b_{t+1}):
    N_t  = subjects entering the interval
    D_t  = deaths in the interval, C_t = censorings in the interval
    N_t* = N_t - C_t / 2     (censoring spread uniformly over the interval)
    q_t  = D_t / N_t*,  p_t = 1 - q_t,  S_t = ∏_{i<=t} p_i

The last interval is closed, so a time equal to the final boundary is
counted in it.

References:
    Cutler, S. J., & Ederer, F. (1958). Maximum utilization of the life
        table method in analyzing survival. J Chronic Dis, 8(6), 699-712.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pysurvstats.survival._common import LifeTableParams


def life_table_fit(
    time: NDArray,
    event: NDArray,
    boundaries: NDArray,
) -> LifeTableParams:
    """Compute the life table.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring, all within the boundary range.
    event : NDArray
        (n,) bool event indicator.
    boundaries : NDArray
        (k+1,) strictly increasing interval boundaries.

    Returns
    -------
    LifeTableParams
    """
    n = len(time)
    k = len(boundaries) - 1

    # Interval index of each subject; the final boundary folds into the
    # last interval.
    idx = np.searchsorted(boundaries, time, side="right") - 1
    idx = np.minimum(idx, k - 1)

    deaths = np.bincount(idx[event], minlength=k).astype(np.int64)
    censored = np.bincount(idx[~event], minlength=k).astype(np.int64)

    # N_t = n - (everyone who left in earlier intervals)
    left = np.cumsum(deaths + censored)
    at_risk_start = n - np.concatenate(([0], left[:-1]))

    effective = at_risk_start - censored / 2.0
    undefined = effective == 0

    safe = np.where(undefined, 1.0, effective)
    hazard = np.where(undefined, 0.0, deaths / safe)
    survival_fraction = 1.0 - hazard
    cumulative = np.cumprod(survival_fraction)

    return LifeTableParams(
        lower=boundaries[:-1].copy(),
        upper=boundaries[1:].copy(),
        at_risk_start=at_risk_start,
        deaths=deaths,
        censored=censored,
        effective_at_risk=effective,
        hazard_fraction=hazard,
        survival_fraction=survival_fraction,
        cumulative_survival=cumulative,
        undefined=undefined,
        n_observations=n,
        n_events_total=int(np.sum(event)),
    )
