"""
Parameter payloads and row records for survival analysis results.

Each *Params dataclass is a frozen, column-oriented payload carried inside
a Result[P] envelope. RiskSetInterval and KaplanMeierPoint are the
row-oriented views handed to reporting and plotting code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from numpy.typing import NDArray


@dataclass(frozen=True)
class LifeTableParams:
    """Actuarial life table over caller-supplied intervals."""

    lower: NDArray               # (k,) — interval lower bounds (inclusive)
    upper: NDArray               # (k,) — interval upper bounds (last one inclusive)
    at_risk_start: NDArray       # (k,) — N_t, subjects entering the interval
    deaths: NDArray              # (k,) — D_t
    censored: NDArray            # (k,) — C_t
    effective_at_risk: NDArray   # (k,) — N_t* = N_t - C_t / 2
    hazard_fraction: NDArray     # (k,) — q_t = D_t / N_t* (0 when undefined)
    survival_fraction: NDArray   # (k,) — p_t = 1 - q_t
    cumulative_survival: NDArray # (k,) — S_t = ∏ p_i, i <= t
    undefined: NDArray           # (k,) bool — N_t* == 0
    n_observations: int
    n_events_total: int


@dataclass(frozen=True)
class KMParams:
    """Kaplan-Meier survival curve parameters.

    One entry per distinct observed time, event or censoring.
    """

    time: NDArray                # (m,) — distinct observed times
    n_risk: NDArray              # (m,) — number at risk just before each time
    n_events: NDArray            # (m,) — deaths at each time
    n_censored: NDArray          # (m,) — censorings at each time
    survival: NDArray            # (m,) — S(t) at each time
    se: NDArray                  # (m,) — Greenwood standard error
    ci_lower: NDArray            # (m,) — lower CI for S(t)
    ci_upper: NDArray            # (m,) — upper CI for S(t)
    conf_level: float            # confidence level (e.g. 0.95)
    conf_type: str               # CI type: "plain" (default), "log", "log-log"
    n_observations: int          # total n
    n_events_total: int          # total events


@dataclass(frozen=True)
class LogRankParams:
    """Log-rank test parameters."""

    statistic: float             # chi-squared statistic
    df: int                      # degrees of freedom (n_groups - 1)
    p_value: float
    n_groups: int
    observed: NDArray            # (k,) — observed deaths per group
    expected: NDArray            # (k,) — expected deaths per group
    n_per_group: NDArray         # (k,) — subjects per group
    group_labels: tuple[Hashable, ...]  # sorted group labels
    event_times: NDArray         # (m,) — distinct times with at least one death
    n_risk: NDArray              # (m, k) — at risk per group at each event time
    n_events: NDArray            # (m, k) — deaths per group at each event time
    expected_by_time: NDArray    # (m, k) — D_j * N_jg / N_j
    variance: NDArray            # (k, k) — Mantel-Haenszel covariance of O - E
    n_excluded: int              # subjects dropped for a missing group label


@dataclass(frozen=True)
class RiskSetInterval:
    """One life-table row."""

    lower: float
    upper: float
    at_risk_start: int
    deaths: int
    censored: int
    effective_at_risk: float
    hazard_fraction: float
    survival_fraction: float
    cumulative_survival: float
    undefined: bool


@dataclass(frozen=True)
class KaplanMeierPoint:
    """One step of the Kaplan-Meier curve."""

    time: float
    deaths_at_time: int
    censored_at_time: int
    at_risk_at_time: int
    survival_probability: float
    standard_error: float
    lower_ci: float
    upper_ci: float
