"""
Public API for survival analysis.

    life_table(dataset, boundaries) → LifeTableSolution
    kaplan_meier(dataset) → KMSolution
    kaplan_meier_by_group(dataset) → dict[label, KMSolution]
    logrank(dataset, groups=None) → LogRankSolution

Each function validates inputs, dispatches to a pure kernel, and wraps
the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Hashable, Literal

import numpy as np
from numpy.typing import ArrayLike

from pysurvstats.core.compute.timing import Timer
from pysurvstats.core.exceptions import InsufficientGroupsError, ValidationError
from pysurvstats.core.result import Result
from pysurvstats.core.validation import (
    check_conf_level,
    check_consistent_length,
    check_not_empty,
)
from pysurvstats.survival._km import kaplan_meier_fit
from pysurvstats.survival._lifetable import life_table_fit
from pysurvstats.survival._logrank import logrank_test
from pysurvstats.survival.config import LifeTableConfig, as_config
from pysurvstats.survival.design import SubjectDataset, is_missing_label, sort_labels
from pysurvstats.survival.solution import KMSolution, LifeTableSolution, LogRankSolution

_CONF_TYPES = ("plain", "log", "log-log")


def life_table(
    dataset: SubjectDataset,
    boundaries: LifeTableConfig | ArrayLike,
) -> LifeTableSolution:
    """Actuarial life table over caller-supplied intervals.

    Parameters
    ----------
    dataset : SubjectDataset
        Subjects to tabulate.
    boundaries : LifeTableConfig or array-like
        Strictly increasing boundaries b0 < ... < bk covering
        [min(time), max(time)]. Intervals are [b_i, b_{i+1}) except the
        last, which is closed.

    Returns
    -------
    LifeTableSolution

    Raises
    ------
    EmptyInputError
        If the dataset has no subjects.
    DegenerateIntervalError
        If the boundaries are malformed or do not cover the data.
    """
    check_not_empty(dataset.n, "dataset")

    timer = Timer()
    timer.start()

    with timer.section('setup'):
        config = as_config(boundaries)
        config.check_covers(dataset)

    with timer.section('tabulation'):
        params = life_table_fit(
            dataset.time, dataset.event,
            np.asarray(config.interval_boundaries, dtype=np.float64),
        )

    timer.stop()

    warnings_list = []
    n_undefined = int(np.sum(params.undefined))
    if n_undefined:
        warnings_list.append(
            f"{n_undefined} interval(s) with no subjects at risk; "
            f"hazard set to 0"
        )

    result = Result(
        params=params,
        info={
            "method": "Life table",
            "interval_boundaries": config.interval_boundaries,
        },
        timing=timer.result(),
        backend_name="cpu_lifetable",
        warnings=tuple(warnings_list),
    )

    return LifeTableSolution(_result=result)


def kaplan_meier(
    dataset: SubjectDataset,
    *,
    conf_level: float = 0.95,
    conf_type: Literal["plain", "log", "log-log"] = "plain",
) -> KMSolution:
    """Kaplan-Meier survival curve estimation.

    Parameters
    ----------
    dataset : SubjectDataset
        Subjects to estimate from. Covariates and groups are ignored.
    conf_level : float
        Confidence level for CI (default 0.95).
    conf_type : str
        CI form: "plain" (default, S ± z·se without clamping), "log",
        or "log-log".

    Returns
    -------
    KMSolution

    Raises
    ------
    EmptyInputError
        If the dataset has no subjects.
    ValidationError
        If conf_level or conf_type is invalid.
    """
    check_not_empty(dataset.n, "dataset")
    conf_level = check_conf_level(conf_level)

    if conf_type not in _CONF_TYPES:
        raise ValidationError(
            f"conf_type: must be 'plain', 'log', or 'log-log', "
            f"got '{conf_type}'"
        )

    timer = Timer()
    timer.start()

    with timer.section('product_limit'):
        params = kaplan_meier_fit(
            dataset.time, dataset.event,
            conf_level=conf_level,
            conf_type=conf_type,
        )

    timer.stop()

    warnings_list = []
    if params.n_events_total == 0:
        warnings_list.append("no deaths observed; survival stays at 1")

    result = Result(
        params=params,
        info={
            "method": "Kaplan-Meier",
            "conf_level": conf_level,
            "conf_type": conf_type,
        },
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=tuple(warnings_list),
    )

    return KMSolution(_result=result)


def kaplan_meier_by_group(
    dataset: SubjectDataset,
    *,
    conf_level: float = 0.95,
    conf_type: Literal["plain", "log", "log-log"] = "plain",
) -> dict[Hashable, KMSolution]:
    """One Kaplan-Meier curve per group label.

    Subjects without a group label are left out. Keys follow sorted
    label order.

    Raises
    ------
    EmptyInputError
        If no subject carries a group label.
    """
    labels = dataset.group_labels
    check_not_empty(len(labels), "dataset groups")
    return {
        label: kaplan_meier(
            dataset.filter_group(label),
            conf_level=conf_level,
            conf_type=conf_type,
        )
        for label in labels
    }


def logrank(
    dataset: SubjectDataset,
    groups=None,
) -> LogRankSolution:
    """Log-rank test comparing survival across groups.

    Parameters
    ----------
    dataset : SubjectDataset
        Subjects to compare.
    groups : array-like or None
        Group label per subject, aligned with the dataset's input order
        (e.g. from an age threshold rule). None uses each subject's own
        group label. Subjects with a missing label (None/NaN) are left
        out with a warning.

    Returns
    -------
    LogRankSolution

    Raises
    ------
    EmptyInputError
        If the dataset has no subjects.
    DimensionError
        If groups does not match the dataset length.
    InsufficientGroupsError
        If fewer than two groups have at least one member.
    """
    check_not_empty(dataset.n, "dataset")

    timer = Timer()
    timer.start()

    with timer.section('grouping'):
        if groups is None:
            labels = list(dataset.groups)
        else:
            labels = groups.ravel().tolist() if isinstance(groups, np.ndarray) else list(groups)
            check_consistent_length(dataset.subjects, labels, names=("dataset", "groups"))

        keep = np.array([not is_missing_label(g) for g in labels], dtype=bool)
        n_excluded = int(np.sum(~keep))
        kept_labels = [g for g, k in zip(labels, keep) if k]

        group_labels = tuple(sort_labels(kept_labels))
        if len(group_labels) < 2:
            raise InsufficientGroupsError(
                f"Need at least 2 non-empty groups for log-rank test, "
                f"got {len(group_labels)}",
                n_groups=len(group_labels),
            )

        position = {label: k for k, label in enumerate(group_labels)}
        group_idx = np.array([position[g] for g in kept_labels], dtype=np.intp)

    warnings_list = []
    if n_excluded:
        msg = f"{n_excluded} subject(s) with a missing group label excluded"
        warnings.warn(msg, UserWarning, stacklevel=2)
        warnings_list.append(msg)

    with timer.section('risk_sets'):
        params, kernel_warnings = logrank_test(
            dataset.time[keep], dataset.event[keep], group_idx,
            group_labels,
            n_excluded=n_excluded,
        )

    timer.stop()

    result = Result(
        params=params,
        info={"method": "Log-rank test", "n_groups": params.n_groups},
        timing=timer.result(),
        backend_name="cpu_logrank",
        warnings=tuple(warnings_list + kernel_warnings),
    )

    return LogRankSolution(_result=result)
