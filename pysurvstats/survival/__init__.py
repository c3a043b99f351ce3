"""
Survival analysis.

Public API:
    SubjectDataset.from_rows(...) / from_arrays(...) -> SubjectDataset
    life_table(dataset, boundaries) -> LifeTableSolution
    kaplan_meier(dataset) -> KMSolution
    kaplan_meier_by_group(dataset) -> dict[label, KMSolution]
    logrank(dataset, groups=None) -> LogRankSolution
"""

from pysurvstats.survival._common import KaplanMeierPoint, RiskSetInterval
from pysurvstats.survival.config import LifeTableConfig
from pysurvstats.survival.design import Subject, SubjectDataset
from pysurvstats.survival.solution import KMSolution, LifeTableSolution, LogRankSolution
from pysurvstats.survival.solvers import (
    kaplan_meier,
    kaplan_meier_by_group,
    life_table,
    logrank,
)

__all__ = [
    "Subject",
    "SubjectDataset",
    "LifeTableConfig",
    "life_table",
    "kaplan_meier",
    "kaplan_meier_by_group",
    "logrank",
    "LifeTableSolution",
    "KMSolution",
    "LogRankSolution",
    "RiskSetInterval",
    "KaplanMeierPoint",
]
