"""
Solution wrappers for survival analysis results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods, plus row-record views for reporting.
"""

from __future__ import annotations

import numpy as np

from pysurvstats.core.result import Result
from pysurvstats.survival._common import (
    KaplanMeierPoint,
    KMParams,
    LifeTableParams,
    LogRankParams,
    RiskSetInterval,
)


class LifeTableSolution:
    """Actuarial life table solution."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LifeTableParams]) -> None:
        self._result = _result

    # -- Properties delegating to LifeTableParams --

    @property
    def lower(self):
        return self._result.params.lower

    @property
    def upper(self):
        return self._result.params.upper

    @property
    def at_risk_start(self):
        """N_t: subjects entering each interval."""
        return self._result.params.at_risk_start

    @property
    def deaths(self):
        return self._result.params.deaths

    @property
    def censored(self):
        return self._result.params.censored

    @property
    def effective_at_risk(self):
        """N_t* = N_t - C_t / 2."""
        return self._result.params.effective_at_risk

    @property
    def hazard_fraction(self):
        return self._result.params.hazard_fraction

    @property
    def survival_fraction(self):
        return self._result.params.survival_fraction

    @property
    def cumulative_survival(self):
        return self._result.params.cumulative_survival

    @property
    def undefined(self):
        """True for intervals nobody was at risk in."""
        return self._result.params.undefined

    @property
    def n_intervals(self) -> int:
        return len(self.lower)

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def intervals(self) -> tuple[RiskSetInterval, ...]:
        """Life table as immutable row records, in boundary order."""
        p = self._result.params
        return tuple(
            RiskSetInterval(
                lower=float(p.lower[i]),
                upper=float(p.upper[i]),
                at_risk_start=int(p.at_risk_start[i]),
                deaths=int(p.deaths[i]),
                censored=int(p.censored[i]),
                effective_at_risk=float(p.effective_at_risk[i]),
                hazard_fraction=float(p.hazard_fraction[i]),
                survival_fraction=float(p.survival_fraction[i]),
                cumulative_survival=float(p.cumulative_survival[i]),
                undefined=bool(p.undefined[i]),
            )
            for i in range(len(p.lower))
        )

    def summary(self) -> str:
        """R-style life table printout."""
        lines = []
        lines.append("Call: life_table()")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"events={self.n_events_total}, "
            f"intervals={self.n_intervals}"
        )
        lines.append("")
        lines.append(
            f"  {'interval':>19s}  {'n.risk':>7s}  {'n.event':>7s}  "
            f"{'n.cens':>7s}  {'n.eff':>8s}  {'hazard':>8s}  "
            f"{'p':>8s}  {'survival':>8s}"
        )
        last = self.n_intervals - 1
        for i, row in enumerate(self.intervals()):
            close = "]" if i == last else ")"
            label = f"[{row.lower:.4g}, {row.upper:.4g}{close}"
            flag = "  (undefined)" if row.undefined else ""
            lines.append(
                f"  {label:>19s}  {row.at_risk_start:7d}  {row.deaths:7d}  "
                f"{row.censored:7d}  {row.effective_at_risk:8.1f}  "
                f"{row.hazard_fraction:8.4f}  {row.survival_fraction:8.4f}  "
                f"{row.cumulative_survival:8.4f}{flag}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LifeTableSolution(n={self.n_observations}, "
            f"events={self.n_events_total}, "
            f"intervals={self.n_intervals})"
        )


class KMSolution:
    """Kaplan-Meier survival curve solution."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[KMParams]) -> None:
        self._result = _result

    # -- Properties delegating to KMParams --

    @property
    def time(self):
        """Distinct observed times."""
        return self._result.params.time

    @property
    def survival(self):
        """S(t) at each time."""
        return self._result.params.survival

    @property
    def n_risk(self):
        """Number at risk just before each time."""
        return self._result.params.n_risk

    @property
    def n_events(self):
        """Number of deaths at each time."""
        return self._result.params.n_events

    @property
    def n_censored(self):
        """Number censored at each time."""
        return self._result.params.n_censored

    @property
    def se(self):
        """Greenwood standard error of S(t)."""
        return self._result.params.se

    @property
    def ci_lower(self):
        """Lower confidence bound for S(t)."""
        return self._result.params.ci_lower

    @property
    def ci_upper(self):
        """Upper confidence bound for S(t)."""
        return self._result.params.ci_upper

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def conf_type(self) -> str:
        return self._result.params.conf_type

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    # -- Derived views --

    @property
    def cumulative_incidence(self):
        """1 - S(t)."""
        return 1.0 - self.survival

    @property
    def cumulative_hazard(self):
        """-log S(t); inf once S(t) reaches 0."""
        with np.errstate(divide='ignore'):
            return -np.log(self.survival)

    @property
    def median_survival(self) -> float | None:
        """Median survival time (smallest t where S(t) <= 0.5)."""
        idx = self.survival <= 0.5
        if not idx.any():
            return None
        return float(self.time[idx][0])

    def survival_at(self, t):
        """Evaluate the right-continuous step function S at time(s) t.

        NaN times map to NaN.
        """
        t = np.asarray(t, dtype=np.float64)
        pos = np.searchsorted(self.time, t, side="right") - 1
        padded = np.concatenate(([1.0], self.survival))
        out = np.where(np.isnan(t), np.nan, padded[pos + 1])
        return float(out) if out.ndim == 0 else out

    def points(self) -> tuple[KaplanMeierPoint, ...]:
        """Curve as immutable row records, ascending by time."""
        p = self._result.params
        return tuple(
            KaplanMeierPoint(
                time=float(p.time[j]),
                deaths_at_time=int(p.n_events[j]),
                censored_at_time=int(p.n_censored[j]),
                at_risk_at_time=int(p.n_risk[j]),
                survival_probability=float(p.survival[j]),
                standard_error=float(p.se[j]),
                lower_ci=float(p.ci_lower[j]),
                upper_ci=float(p.ci_upper[j]),
            )
            for j in range(len(p.time))
        )

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of Kaplan-Meier fit."""
        lines = []
        lines.append("Call: kaplan_meier()")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"events={self.n_events_total}"
        )
        lines.append("")

        median = self.median_survival
        median_str = f"{median:.4g}" if median is not None else "NA"
        lines.append(f"  median survival = {median_str}")
        lines.append("")

        ci_pct = f"{self.conf_level * 100:g}%"
        lines.append(
            f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
            f"{'n.cens':>8s}  {'survival':>10s}  {'se':>10s}  "
            f"{'lower ' + ci_pct:>10s}  {'upper ' + ci_pct:>10s}"
        )

        # Show up to 20 rows
        m = len(self.time)
        show = min(m, 20)
        for i in range(show):
            lines.append(
                f"  {self.time[i]:8.4g}  {self.n_risk[i]:8d}  "
                f"{self.n_events[i]:8d}  {self.n_censored[i]:8d}  "
                f"{self.survival[i]:10.6f}  {self.se[i]:10.6f}  "
                f"{self.ci_lower[i]:10.6f}  {self.ci_upper[i]:10.6f}"
            )
        if m > 20:
            lines.append(f"  ... ({m - 20} more rows)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"KMSolution(n={self.n_observations}, "
            f"events={self.n_events_total}, "
            f"median={self.median_survival})"
        )


class LogRankSolution:
    """Log-rank test solution."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LogRankParams]) -> None:
        self._result = _result

    @property
    def statistic(self) -> float:
        """Chi-square statistic."""
        return self._result.params.statistic

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def n_groups(self) -> int:
        return self._result.params.n_groups

    @property
    def observed(self):
        return self._result.params.observed

    @property
    def expected(self):
        return self._result.params.expected

    @property
    def n_per_group(self):
        return self._result.params.n_per_group

    @property
    def group_labels(self) -> tuple:
        return self._result.params.group_labels

    @property
    def event_times(self):
        return self._result.params.event_times

    @property
    def n_risk(self):
        """(m, k) at-risk counts per event time and group."""
        return self._result.params.n_risk

    @property
    def n_events(self):
        """(m, k) deaths per event time and group."""
        return self._result.params.n_events

    @property
    def expected_by_time(self):
        """(m, k) expected deaths per event time and group."""
        return self._result.params.expected_by_time

    @property
    def variance(self):
        return self._result.params.variance

    @property
    def n_excluded(self) -> int:
        return self._result.params.n_excluded

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def group(self, label) -> dict:
        """Per-group n, observed and expected deaths."""
        try:
            i = self.group_labels.index(label)
        except ValueError:
            raise KeyError(f"unknown group label {label!r}") from None
        return {
            "n": int(self.n_per_group[i]),
            "observed_deaths": float(self.observed[i]),
            "expected_deaths": float(self.expected[i]),
        }

    def summary(self) -> str:
        """R-style summary of log-rank test."""
        lines = []
        lines.append("Call: logrank()")
        lines.append("")

        # Group table
        lines.append(f"  {'':>12s}  {'N':>6s}  {'Observed':>10s}  {'Expected':>10s}  {'(O-E)^2/E':>10s}")
        for i in range(self.n_groups):
            oe = ((self.observed[i] - self.expected[i]) ** 2
                  / self.expected[i]) if self.expected[i] > 0 else 0
            label = str(self.group_labels[i])
            lines.append(
                f"  {label:>12s}  {self.n_per_group[i]:6d}  "
                f"{self.observed[i]:10.1f}  {self.expected[i]:10.1f}  "
                f"{oe:10.3f}"
            )

        lines.append("")
        lines.append(
            f"  Chisq= {self.statistic:.4f} on {self.df} degrees of freedom, "
            f"p= {self.p_value:.4g}"
        )
        if self.n_excluded:
            lines.append(f"  ({self.n_excluded} observations deleted due to missing group)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LogRankSolution(chisq={self.statistic:.4f}, "
            f"df={self.df}, p={self.p_value:.4g})"
        )
