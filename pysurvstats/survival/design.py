"""
SubjectDataset: immutable container for censored time-to-event records.

Wraps per-subject time, event indicator, optional covariates and an
optional group label. Validates inputs at construction time; all
downstream code trusts clean data.

Missing covariates and missing group labels are kept. Each estimator
decides which fields it needs: the life table, Kaplan-Meier and log-rank
never look at covariates, while the Cox hand-off (covariate_matrix) drops
incomplete rows.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Hashable, Iterable, Iterator, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray

from pysurvstats.core.exceptions import ValidationError
from pysurvstats.core.validation import (
    check_consistent_length,
    check_covariate,
    check_event,
    check_time,
)


def is_missing_label(label: Any) -> bool:
    """True for None and float NaN group labels."""
    if label is None:
        return True
    return isinstance(label, float) and math.isnan(label)


def sort_labels(labels: Iterable[Hashable]) -> list[Hashable]:
    """Sort distinct group labels, failing loudly on unorderable mixes."""
    try:
        return sorted(set(labels))
    except TypeError as e:
        raise ValidationError(
            f"group labels must be mutually orderable: {e}"
        ) from e


@dataclass(frozen=True)
class Subject:
    """One censored time-to-event record.

    Parameters
    ----------
    time : float
        Time to event or censoring. Must be finite and non-negative.
    event : bool
        True if the event (death) was observed, False if censored.
    covariates : mapping
        Covariate name -> value. None or NaN marks a missing value.
    group : hashable or None
        Optional categorical label for stratified comparisons.
    """

    time: float
    event: bool
    covariates: Mapping[str, float | None] = field(default_factory=dict, hash=False)
    group: Hashable | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "time", check_time(self.time, "time"))
        object.__setattr__(self, "event", check_event(self.event, "event"))
        normalized = {
            str(name): check_covariate(value, f"covariates[{name!r}]")
            for name, value in self.covariates.items()
        }
        object.__setattr__(self, "covariates", MappingProxyType(normalized))
        if is_missing_label(self.group):
            object.__setattr__(self, "group", None)

    def has_covariates(self, names: Iterable[str]) -> bool:
        """True if every named covariate is present and non-missing."""
        return all(self.covariates.get(name) is not None for name in names)


def _as_list(values) -> list:
    if isinstance(values, np.ndarray):
        return values.ravel().tolist()
    return list(values)


@dataclass(frozen=True, eq=False)
class SubjectDataset:
    """Immutable, validated collection of subjects.

    Build instances with from_subjects(), from_rows() or from_arrays();
    the time/event arrays are derived from the subjects and read-only.

    An empty dataset is valid (filters can produce one); estimators
    reject it with EmptyInputError.
    """

    subjects: tuple[Subject, ...]
    time: NDArray
    event: NDArray

    # -- Construction --

    @classmethod
    def from_subjects(cls, subjects: Iterable[Subject]) -> SubjectDataset:
        """Create a dataset from already-built Subject records."""
        subjects = tuple(subjects)
        for i, s in enumerate(subjects):
            if not isinstance(s, Subject):
                raise ValidationError(
                    f"subjects[{i}]: expected Subject, got {type(s).__name__}"
                )

        time = np.array([s.time for s in subjects], dtype=np.float64)
        event = np.array([s.event for s in subjects], dtype=bool)
        time.setflags(write=False)
        event.setflags(write=False)

        return cls(subjects=subjects, time=time, event=event)

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Mapping[str, Any] | Subject],
        *,
        time_key: str = "time",
        event_key: str = "event",
        group_key: str = "group",
        covariate_keys: Sequence[str] | None = None,
    ) -> SubjectDataset:
        """Create and validate a dataset from raw rows.

        Parameters
        ----------
        rows : iterable of mappings or Subject
            One entry per subject. Mappings must hold time_key and
            event_key; group_key is optional.
        time_key, event_key, group_key : str
            Field names inside each mapping.
        covariate_keys : sequence of str or None
            Covariates to keep. None keeps every other field of the row.
            A key absent from a row is recorded as missing.

        Returns
        -------
        SubjectDataset

        Raises
        ------
        ValidationError
            If any row has a missing, negative or non-finite time, or an
            event flag other than True/False/1/0. The message names the
            offending row.
        """
        reserved = {time_key, event_key, group_key}
        subjects = []

        for i, row in enumerate(rows):
            if isinstance(row, Subject):
                subjects.append(row)
                continue
            if not isinstance(row, Mapping):
                raise ValidationError(
                    f"rows[{i}]: expected a mapping or Subject, "
                    f"got {type(row).__name__}"
                )
            for key in (time_key, event_key):
                if key not in row:
                    raise ValidationError(f"rows[{i}]: missing field {key!r}")

            if covariate_keys is None:
                names = [k for k in row if k not in reserved]
            else:
                names = list(covariate_keys)

            subjects.append(Subject(
                time=check_time(row[time_key], f"rows[{i}].{time_key}"),
                event=check_event(row[event_key], f"rows[{i}].{event_key}"),
                covariates={
                    name: check_covariate(row.get(name), f"rows[{i}].{name}")
                    for name in names
                },
                group=row.get(group_key),
            ))

        return cls.from_subjects(subjects)

    @classmethod
    def from_arrays(
        cls,
        time,
        event,
        *,
        group=None,
        covariates: Mapping[str, Any] | None = None,
    ) -> SubjectDataset:
        """Create and validate a dataset from parallel arrays.

        Parameters
        ----------
        time : array-like
            Time to event or censoring.
        event : array-like
            Event indicator (1/True = event, 0/False = censored).
        group : array-like or None
            Optional group labels.
        covariates : mapping of name -> array-like, or None
            Optional covariate columns. None/NaN entries are missing.

        Returns
        -------
        SubjectDataset

        Raises
        ------
        DimensionError
            If the arrays have different lengths.
        ValidationError
            If any time or event value is invalid.
        """
        time_list = _as_list(time)
        event_list = _as_list(event)
        n = len(time_list)

        columns = [time_list, event_list]
        names = ["time", "event"]

        group_list = None
        if group is not None:
            group_list = _as_list(group)
            columns.append(group_list)
            names.append("group")

        cov_lists: dict[str, list] = {}
        if covariates is not None:
            for name, values in covariates.items():
                cov_lists[name] = _as_list(values)
                columns.append(cov_lists[name])
                names.append(f"covariates[{name!r}]")

        check_consistent_length(*columns, names=tuple(names))

        subjects = [
            Subject(
                time=check_time(time_list[i], f"time[{i}]"),
                event=check_event(event_list[i], f"event[{i}]"),
                covariates={name: values[i] for name, values in cov_lists.items()},
                group=None if group_list is None else group_list[i],
            )
            for i in range(n)
        ]

        return cls.from_subjects(subjects)

    # -- Summary properties --

    def __len__(self) -> int:
        return len(self.subjects)

    def __iter__(self) -> Iterator[Subject]:
        """Iterate in input order."""
        return iter(self.subjects)

    @property
    def n(self) -> int:
        """Number of subjects."""
        return len(self.subjects)

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(np.sum(self.event))

    @property
    def groups(self) -> tuple[Hashable | None, ...]:
        """Group label per subject, in input order (None = missing)."""
        return tuple(s.group for s in self.subjects)

    @property
    def group_labels(self) -> list[Hashable]:
        """Sorted distinct non-missing group labels."""
        return sort_labels(g for g in self.groups if g is not None)

    @property
    def covariate_names(self) -> list[str]:
        """Sorted union of covariate names across subjects."""
        names: set[str] = set()
        for s in self.subjects:
            names.update(s.covariates)
        return sorted(names)

    # -- Ordering and filtering --

    def iter_by_time(self) -> Iterator[Subject]:
        """Iterate subjects by ascending time (stable for ties)."""
        order = np.argsort(self.time, kind="stable")
        for i in order:
            yield self.subjects[i]

    def filter(self, predicate: Callable[[Subject], bool]) -> SubjectDataset:
        """New dataset with the subjects for which predicate is true."""
        return SubjectDataset.from_subjects(s for s in self.subjects if predicate(s))

    def filter_group(self, label: Hashable) -> SubjectDataset:
        """Subjects carrying the given group label."""
        return self.filter(lambda s: s.group == label)

    def filter_time(
        self,
        lower: float,
        upper: float | None = None,
        *,
        event: bool | None = None,
        include_upper: bool = False,
    ) -> SubjectDataset:
        """Subjects with time in [lower, upper), optionally by event flag.

        Parameters
        ----------
        lower : float
            Inclusive lower bound.
        upper : float or None
            Upper bound; None means unbounded.
        event : bool or None
            Keep only events (True), only censored (False), or both (None).
        include_upper : bool
            Treat the interval as closed [lower, upper].
        """
        def keep(s: Subject) -> bool:
            if s.time < lower:
                return False
            if upper is not None:
                if include_upper and s.time > upper:
                    return False
                if not include_upper and s.time >= upper:
                    return False
            return event is None or s.event == event

        return self.filter(keep)

    # -- External group assignment --

    def with_groups(self, labels) -> SubjectDataset:
        """New dataset with group labels replaced by the given sequence."""
        labels = _as_list(labels)
        check_consistent_length(self.subjects, labels, names=("subjects", "labels"))
        return SubjectDataset.from_subjects(
            Subject(time=s.time, event=s.event, covariates=s.covariates, group=g)
            for s, g in zip(self.subjects, labels)
        )

    def assign_groups(self, rule: Callable[[Subject], Hashable | None]) -> SubjectDataset:
        """New dataset labelled by rule(subject), e.g. an age threshold."""
        return self.with_groups([rule(s) for s in self.subjects])

    # -- Covariate hand-off --

    def complete_cases(self, names: Sequence[str]) -> SubjectDataset:
        """Drop subjects missing any of the named covariates."""
        names = list(names)
        return self.filter(lambda s: s.has_covariates(names))

    def covariate_matrix(self, names: Sequence[str]) -> NDArray:
        """(n, p) covariate matrix over complete cases, columns in names order.

        Rows missing any named covariate are excluded; use
        complete_cases(names) to get the matching time/event arrays.
        """
        names = list(names)
        if len(names) == 0:
            raise ValidationError("names: at least one covariate is required")
        unknown = sorted(set(names) - set(self.covariate_names))
        if unknown:
            raise ValidationError(
                f"names: unknown covariates {unknown}, "
                f"available: {self.covariate_names}"
            )
        complete = self.complete_cases(names)
        return np.array(
            [[s.covariates[name] for name in names] for s in complete.subjects],
            dtype=np.float64,
        ).reshape(complete.n, len(names))
