"""
Log-rank test for comparing survival curves across groups.

Algorithm:
    1. Sort all observations by time
    2. At each distinct event time t_j:
       - N_jg = number at risk in group g at t_j
       - D_jg = observed deaths in group g at t_j
       - N_j = total at risk, D_j = total deaths
       - Expected deaths in group g: E_jg = D_j * N_jg / N_j
    3. Mantel-Haenszel covariance of (O - E):
       V_gh = Σ_j D_j (N_j - D_j) / (N_j^2 (N_j - 1)) * N_jg (δ_gh N_j - N_jh)
       (times with N_j <= 1 carry no variance)
    4. Two groups: chi2 = (O_1 - E_1)^2 / V_11.
       k groups: chi2 = (O - E)' V^- (O - E) over the first k - 1 groups,
       since Σ_g (O_g - E_g) = 0 makes the full matrix singular.

References:
    Mantel, N. (1966). Evaluation of survival data and two new rank order
        statistics arising in its consideration. Cancer Chemother Rep,
        50(3), 163-170.
    Peto, R., & Peto, J. (1972). Asymptotically efficient rank invariant
        test procedures. JRSS A, 135(2), 185-207.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pysurvstats.survival._common import LogRankParams


def logrank_test(
    time: NDArray,
    event: NDArray,
    group_idx: NDArray,
    group_labels: tuple,
    n_excluded: int = 0,
) -> tuple[LogRankParams, list[str]]:
    """Compute the log-rank test.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) bool event indicator.
    group_idx : NDArray
        (n,) integer group index in 0..k-1, aligned with group_labels.
    group_labels : tuple
        Sorted group labels, k >= 2.
    n_excluded : int
        Subjects dropped upstream for a missing group label (reported only).

    Returns
    -------
    (LogRankParams, warnings)
    """
    n_groups = len(group_labels)
    df = n_groups - 1
    warnings_list: list[str] = []

    n_per_group = np.bincount(group_idx, minlength=n_groups).astype(np.int64)

    event_times, inverse = np.unique(time, return_inverse=True)
    inverse = inverse.ravel()
    m_all = len(event_times)

    # Per distinct time x group: deaths and subjects leaving the risk set
    d_all = np.zeros((m_all, n_groups), dtype=np.int64)
    out_all = np.zeros((m_all, n_groups), dtype=np.int64)
    np.add.at(d_all, (inverse[event], group_idx[event]), 1)
    np.add.at(out_all, (inverse, group_idx), 1)

    # At risk just before t_j = group size - everyone who left earlier
    left = np.cumsum(out_all, axis=0)
    n_all = n_per_group[np.newaxis, :] - np.vstack(
        (np.zeros((1, n_groups), dtype=np.int64), left[:-1])
    )

    # Keep only times with at least one death
    has_death = d_all.sum(axis=1) > 0
    event_times = event_times[has_death]
    d_kg = d_all[has_death]
    n_kg = n_all[has_death]

    D_j = d_kg.sum(axis=1).astype(np.float64)
    N_j = n_kg.sum(axis=1).astype(np.float64)

    observed = d_kg.sum(axis=0).astype(np.float64)
    expected_by_time = n_kg * (D_j / N_j)[:, np.newaxis]
    expected = expected_by_time.sum(axis=0)

    V = np.zeros((n_groups, n_groups), dtype=np.float64)
    informative = N_j > 1
    if np.any(informative):
        Nj = N_j[informative]
        Dj = D_j[informative]
        nk = n_kg[informative].astype(np.float64)
        factor = Dj * (Nj - Dj) / (Nj ** 2 * (Nj - 1))
        # Σ_j factor_j * (N_j diag(n_j) - n_j n_j')
        V = (
            np.diag((factor[:, np.newaxis] * Nj[:, np.newaxis] * nk).sum(axis=0))
            - np.einsum("j,jg,jh->gh", factor, nk, nk)
        )

    oe_diff = observed - expected

    if df == 1:
        statistic = float(oe_diff[0] ** 2 / V[0, 0]) if V[0, 0] > 0 else 0.0
    else:
        V_sub = V[:df, :df]
        rank = np.linalg.matrix_rank(V_sub)
        if rank < df:
            warnings_list.append(
                f"log-rank covariance matrix is rank-deficient "
                f"(rank={rank}, expected={df}); using a generalized inverse"
            )
        statistic = float(oe_diff[:df] @ np.linalg.pinv(V_sub) @ oe_diff[:df])

    if len(event_times) == 0:
        warnings_list.append("no deaths observed; log-rank test is uninformative")

    p_value = float(stats.chi2.sf(statistic, df))

    params = LogRankParams(
        statistic=statistic,
        df=df,
        p_value=p_value,
        n_groups=n_groups,
        observed=observed,
        expected=expected,
        n_per_group=n_per_group,
        group_labels=tuple(group_labels),
        event_times=event_times,
        n_risk=n_kg,
        n_events=d_kg,
        expected_by_time=expected_by_time,
        variance=V,
        n_excluded=n_excluded,
    )
    return params, warnings_list
