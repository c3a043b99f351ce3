"""
Kaplan-Meier product-limit estimator.

- Product-limit survival estimate: S(t) = ∏(1 - d_j / n_j)
- Greenwood variance: Var(S(t)) = S(t)^2 * Σ(d_j / (n_j * (n_j - d_j)))
- Confidence intervals: plain (S ± z·se, unclamped), log, or log-log

The curve has one step per distinct observed time. Censoring-only times
get a row too: S(t) is unchanged there, and the censored subjects leave
the risk set for the following times.

References:
    Kaplan, E. L., & Meier, P. (1958). Nonparametric estimation from
        incomplete observations. JASA, 53(282), 457-481.
    Greenwood, M. (1926). The natural duration of cancer. Reports on
        Public Health and Medical Subjects, 33, 1-26.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pysurvstats.survival._common import KMParams


def kaplan_meier_fit(
    time: NDArray,
    event: NDArray,
    conf_level: float,
    conf_type: str,
) -> KMParams:
    """Compute Kaplan-Meier survival curve.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring, n >= 1.
    event : NDArray
        (n,) bool event indicator.
    conf_level : float
        Confidence level for CI (e.g. 0.95).
    conf_type : str
        CI type: "plain" (default), "log", "log-log".

    Returns
    -------
    KMParams
    """
    n_total = len(time)

    # Group by distinct time (np.unique sorts ascending)
    unique_times, inverse = np.unique(time, return_inverse=True)
    inverse = inverse.ravel()
    m = len(unique_times)

    n_events = np.bincount(inverse[event], minlength=m).astype(np.int64)
    n_censored = np.bincount(inverse[~event], minlength=m).astype(np.int64)

    # n_j = n - (everyone who died or was censored at earlier times)
    left = np.cumsum(n_events + n_censored)
    n_risk = n_total - np.concatenate(([0], left[:-1]))

    # Every distinct time has at least one subject at risk, so n_risk > 0
    survival = np.cumprod((n_risk - n_events) / n_risk)

    # Greenwood: skip terms with n_j == d_j (everyone at risk dies)
    denom = n_risk * (n_risk - n_events)
    terms = np.where(denom > 0, n_events / np.where(denom > 0, denom, 1), 0.0)
    greenwood_sum = np.cumsum(terms)
    se = survival * np.sqrt(greenwood_sum)

    z = stats.norm.ppf((1.0 + conf_level) / 2.0)
    ci_lower, ci_upper = _compute_ci(survival, se, z, conf_type)

    return KMParams(
        time=unique_times,
        n_risk=n_risk,
        n_events=n_events,
        n_censored=n_censored,
        survival=survival,
        se=se,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        conf_level=conf_level,
        conf_type=conf_type,
        n_observations=n_total,
        n_events_total=int(np.sum(event)),
    )


def _compute_ci(
    survival: NDArray,
    se: NDArray,
    z: float,
    conf_type: str,
) -> tuple[NDArray, NDArray]:
    """Compute CI for survival function.

    Parameters
    ----------
    survival : S(t) values
    se : Greenwood standard errors
    z : normal quantile (e.g. 1.96 for 95%)
    conf_type : "plain", "log", or "log-log"

    Returns
    -------
    (ci_lower, ci_upper). Plain bounds are returned as-is and may leave
    [0, 1]; transformed bounds are clipped to [0, 1].
    """
    if conf_type == "plain":
        return survival - z * se, survival + z * se

    if conf_type == "log":
        # exp(log(S) ± z * se / S)
        with np.errstate(divide='ignore', invalid='ignore'):
            log_s = np.log(survival)
            se_log = se / survival
            ci_lower = np.exp(log_s - z * se_log)
            ci_upper = np.exp(log_s + z * se_log)

    elif conf_type == "log-log":
        # exp(-exp(log(-log(S)) ± z * se / (S * |log(S)|)))
        with np.errstate(divide='ignore', invalid='ignore'):
            log_s = np.log(survival)
            log_neg_log_s = np.log(-log_s)
            se_loglog = se / (survival * np.abs(log_s))
            ci_lower = np.exp(-np.exp(log_neg_log_s + z * se_loglog))
            ci_upper = np.exp(-np.exp(log_neg_log_s - z * se_loglog))
    else:
        raise ValueError(
            f"Unknown conf_type '{conf_type}'. "
            f"Choose from 'plain', 'log', 'log-log'."
        )

    ci_lower = np.clip(ci_lower, 0.0, 1.0)
    ci_upper = np.clip(ci_upper, 0.0, 1.0)

    # Zero variance (no deaths yet, or S dropped to 0): degenerate interval
    ci_lower = np.where(se == 0, survival, ci_lower)
    ci_upper = np.where(se == 0, survival, ci_upper)

    return ci_lower, ci_upper
