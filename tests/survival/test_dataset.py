"""
Tests for Subject and SubjectDataset construction, validation and filtering.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from pysurvstats.core.exceptions import DimensionError, ValidationError
from pysurvstats.survival import Subject, SubjectDataset


class TestSubject:

    def test_normalizes_fields(self):
        s = Subject(time=np.int64(5), event=1, covariates={"age": np.nan, "wt": 60}, group=float("nan"))
        assert s.time == 5.0 and isinstance(s.time, float)
        assert s.event is True
        assert s.covariates == {"age": None, "wt": 60.0}
        assert s.group is None

    def test_negative_time_raises(self):
        with pytest.raises(ValidationError, match="non-negative"):
            Subject(time=-0.5, event=True)

    def test_covariates_are_read_only(self):
        s = Subject(time=1.0, event=False, covariates={"age": 60})
        with pytest.raises(TypeError):
            s.covariates["age"] = 70

    def test_subject_is_hashable(self):
        a = Subject(time=1.0, event=True)
        b = Subject(time=1.0, event=1, covariates={"age": 60}, group="m")
        assert hash(a) == hash(Subject(time=1, event=True))
        assert {a: "first", b: "second"}[b] == "second"

    def test_equal_subjects_collapse_in_a_set(self):
        a = Subject(time=2.0, event=False, covariates={"age": 60}, group="f")
        b = Subject(time=2, event=0, covariates={"age": 60.0}, group="f")
        c = Subject(time=2.0, event=False, covariates={"age": 61}, group="f")
        assert a == b and a != c
        assert len({a, b, c}) == 2

    def test_dataset_subjects_fill_a_set(self, lung):
        assert len(set(lung)) <= lung.n
        assert set(lung.filter_group("m")) <= set(lung)

    def test_has_covariates(self):
        s = Subject(time=1.0, event=False, covariates={"age": 60, "wt": None})
        assert s.has_covariates(["age"])
        assert not s.has_covariates(["age", "wt"])
        assert not s.has_covariates(["ph.ecog"])


class TestFromRows:

    def test_basic(self):
        rows = [
            {"time": 306, "status": 1, "sex": "m", "age": 74},
            {"time": 455, "status": 1, "sex": "m", "age": 68},
            {"time": 1010, "status": 0, "sex": "f", "age": None},
        ]
        ds = SubjectDataset.from_rows(rows, event_key="status", group_key="sex")

        assert ds.n == 3
        assert len(ds) == 3
        assert ds.n_events == 2
        assert_array_equal(ds.time, [306.0, 455.0, 1010.0])
        assert_array_equal(ds.event, [True, True, False])
        assert ds.groups == ("m", "m", "f")
        assert ds.group_labels == ["f", "m"]
        assert ds.covariate_names == ["age"]
        # Missing covariates are kept, not dropped
        assert ds.subjects[2].covariates["age"] is None

    def test_covariate_keys_selects_and_fills_missing(self):
        rows = [{"time": 1, "event": 1, "age": 50, "wt": 70}, {"time": 2, "event": 0}]
        ds = SubjectDataset.from_rows(rows, covariate_keys=["age"])
        assert ds.covariate_names == ["age"]
        assert ds.subjects[1].covariates == {"age": None}

    def test_negative_time_names_row(self):
        rows = [{"time": 1, "event": 1}, {"time": -3, "event": 0}]
        with pytest.raises(ValidationError, match="rows\\[1\\].time: must be non-negative"):
            SubjectDataset.from_rows(rows)

    def test_missing_time_field(self):
        with pytest.raises(ValidationError, match="missing field 'time'"):
            SubjectDataset.from_rows([{"event": 1}])

    def test_bad_event(self):
        with pytest.raises(ValidationError, match="rows\\[0\\].event"):
            SubjectDataset.from_rows([{"time": 1, "event": 2}])

    def test_accepts_subject_instances(self):
        ds = SubjectDataset.from_rows([Subject(3.0, True), {"time": 4, "event": 0}])
        assert_array_equal(ds.time, [3.0, 4.0])

    def test_rejects_non_mapping(self):
        with pytest.raises(ValidationError, match="expected a mapping"):
            SubjectDataset.from_rows([(1, 1)])

    def test_empty_is_allowed(self):
        ds = SubjectDataset.from_rows([])
        assert ds.n == 0
        assert ds.time.shape == (0,)


class TestFromArrays:

    def test_numpy_inputs(self):
        ds = SubjectDataset.from_arrays(
            np.array([5.0, 10.0]), np.array([1.0, 0.0]),
            group=np.array([1, 2]),
            covariates={"age": np.array([60.0, np.nan])},
        )
        assert ds.groups == (1, 2)
        assert ds.subjects[1].covariates["age"] is None

    def test_length_mismatch(self):
        with pytest.raises(DimensionError, match="time=3, event=2"):
            SubjectDataset.from_arrays([1, 2, 3], [1, 0])

    def test_group_length_mismatch(self):
        with pytest.raises(DimensionError, match="group=1"):
            SubjectDataset.from_arrays([1, 2], [1, 0], group=["a"])

    def test_nan_time_raises(self):
        with pytest.raises(ValidationError, match="time\\[1\\]: must be finite"):
            SubjectDataset.from_arrays([1.0, np.nan], [1, 0])

    def test_arrays_are_read_only(self, three_subjects):
        with pytest.raises(ValueError):
            three_subjects.time[0] = 99.0


class TestFiltering:

    def test_filter_group(self, lung):
        males = lung.filter_group("m")
        assert males.n == 7
        assert set(males.groups) == {"m"}

    def test_filter_time_half_open(self, three_subjects):
        assert_array_equal(three_subjects.filter_time(5, 15).time, [5.0, 10.0])
        assert_array_equal(
            three_subjects.filter_time(5, 15, include_upper=True).time, [5.0, 10.0, 15.0]
        )
        assert_array_equal(three_subjects.filter_time(10).time, [10.0, 15.0])

    def test_filter_time_by_event(self, three_subjects):
        deaths = three_subjects.filter_time(0, 15, event=True, include_upper=True)
        assert_array_equal(deaths.time, [5.0, 15.0])
        censored = three_subjects.filter_time(0, 15, event=False, include_upper=True)
        assert_array_equal(censored.time, [10.0])

    def test_iter_by_time_is_sorted_and_stable(self):
        ds = SubjectDataset.from_arrays([9, 3, 3, 1], [1, 1, 0, 0], group=["a", "b", "c", "d"])
        assert [s.group for s in ds.iter_by_time()] == ["d", "b", "c", "a"]
        # Plain iteration keeps input order
        assert [s.group for s in ds] == ["a", "b", "c", "d"]

    def test_filters_do_not_mutate(self, lung):
        lung.filter_group("f")
        lung.filter_time(0, 10)
        assert lung.n == 17


class TestGroupAssignment:

    def test_with_groups(self, three_subjects):
        ds = three_subjects.with_groups(["a", "b", "a"])
        assert ds.groups == ("a", "b", "a")
        assert three_subjects.groups == (None, None, None)

    def test_with_groups_length_mismatch(self, three_subjects):
        with pytest.raises(DimensionError):
            three_subjects.with_groups(["a"])

    def test_assign_groups_by_age_threshold(self, lung):
        ds = lung.assign_groups(
            lambda s: None if s.covariates["age"] is None
            else ("old" if s.covariates["age"] >= 65 else "young")
        )
        assert ds.groups.count(None) == 1
        assert ds.group_labels == ["old", "young"]

    def test_unorderable_labels(self):
        ds = SubjectDataset.from_arrays([1, 2], [1, 1], group=["a", 1])
        with pytest.raises(ValidationError, match="orderable"):
            ds.group_labels


class TestCovariateHandOff:

    def test_complete_cases_drops_missing(self, lung):
        complete = lung.complete_cases(["age"])
        assert complete.n == 16
        assert 11.0 not in complete.time

    def test_covariate_matrix(self, lung):
        X = lung.covariate_matrix(["age"])
        assert X.shape == (16, 1)
        assert X[0, 0] == 74.0
        assert not np.isnan(X).any()

    def test_unknown_covariate(self, lung):
        with pytest.raises(ValidationError, match="unknown covariates \\['ph.ecog'\\]"):
            lung.covariate_matrix(["age", "ph.ecog"])

    def test_no_names(self, lung):
        with pytest.raises(ValidationError):
            lung.covariate_matrix([])
