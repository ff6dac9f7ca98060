"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d / check_2d: dimensionality checks
    - check_consistent_length: multi-array length matching
    - check_min_samples: minimum sample count
    - check_column_name / check_has_columns / check_numeric_column
    - warn_negative / warn_non_binary / warn_outside_unit_interval
"""

import warnings

import numpy as np
import pandas as pd
import pytest

from pycensimpute.core.exceptions import (
    DataQualityWarning,
    DimensionError,
    ValidationError,
)
from pycensimpute.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_column_name,
    check_consistent_length,
    check_finite,
    check_has_columns,
    check_min_samples,
    check_ndim,
    check_numeric_column,
    warn_negative,
    warn_non_binary,
    warn_outside_unit_interval,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "X")
        assert isinstance(result, np.ndarray)
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_bool_promoted_to_float(self):
        result = check_array([True, False], "event")
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 0.0])

    def test_float32_preserved(self):
        arr = np.array([1.0, 2.0], dtype=np.float32)
        assert check_array(arr, "X").dtype == np.float32

    def test_nested_list_to_2d(self):
        result = check_array([[1, 2], [3, 4]], "X")
        assert result.shape == (2, 2)

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "X")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b", "c"], "X")

    def test_error_message_includes_name(self):
        with pytest.raises(ValidationError, match="my_var"):
            check_array(["a", "b"], "my_var")


# ═══════════════════════════════════════════════════════════════════════
# check_finite
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0, 3.0]), "X")

    def test_nan_and_inf_counted(self):
        with pytest.raises(ValidationError, match=r"1 NaN, 2 Inf"):
            check_finite(np.array([np.nan, np.inf, -np.inf, 1.0]), "X")


# ═══════════════════════════════════════════════════════════════════════
# Shape checks
# ═══════════════════════════════════════════════════════════════════════


class TestShapeChecks:

    def test_check_ndim(self):
        check_ndim(np.zeros((2, 3)), 2, "X")
        with pytest.raises(DimensionError, match=r"expected 1D array, got 2D"):
            check_ndim(np.zeros((2, 3)), 1, "X")

    def test_check_1d_and_2d(self):
        check_1d(np.zeros(3), "y")
        check_2d(np.zeros((3, 1)), "X")
        with pytest.raises(DimensionError):
            check_1d(np.zeros((3, 1)), "y")
        with pytest.raises(DimensionError):
            check_2d(np.zeros(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.zeros((4, 2)), np.zeros(4), names=("X", "y"))

    def test_inconsistent_length_reports_each(self):
        with pytest.raises(DimensionError, match="X=4, y=3"):
            check_consistent_length(np.zeros((4, 2)), np.zeros(3), names=("X", "y"))

    def test_wrong_number_of_names(self):
        with pytest.raises(ValueError, match="must match number of names"):
            check_consistent_length(np.zeros(3), np.zeros(3), names=("a",))

    def test_min_samples(self):
        check_min_samples(np.zeros(3), 3, "X")
        with pytest.raises(ValidationError, match="at least 3 samples, got 2"):
            check_min_samples(np.zeros(2), 3, "X")


# ═══════════════════════════════════════════════════════════════════════
# DataFrame column checks
# ═══════════════════════════════════════════════════════════════════════


class TestColumnChecks:

    def test_column_name_must_be_str(self):
        assert check_column_name("w", "obs") == "w"
        with pytest.raises(ValidationError, match="argument obs"):
            check_column_name(1, "obs")

    def test_data_must_be_dataframe(self):
        with pytest.raises(ValidationError, match="DataFrame"):
            check_has_columns({"w": [1.0]}, ["w"])

    def test_missing_column_named(self):
        df = pd.DataFrame({"w": [1.0]})
        with pytest.raises(ValidationError, match=r"\['delta'\]"):
            check_has_columns(df, ["w", "delta"])

    def test_numeric_column(self):
        df = pd.DataFrame({"w": [1, 2], "label": ["a", "b"], "gap": [1.0, np.nan]})
        np.testing.assert_array_equal(check_numeric_column(df, "w"), [1.0, 2.0])
        with pytest.raises(ValidationError, match="label"):
            check_numeric_column(df, "label")
        with pytest.raises(ValidationError, match="1 missing"):
            check_numeric_column(df, "gap")


# ═══════════════════════════════════════════════════════════════════════
# Data-quality warnings
# ═══════════════════════════════════════════════════════════════════════


class TestDataQualityWarnings:
    """Data-quality checks warn and return the message, never raise."""

    def test_negative(self):
        with pytest.warns(DataQualityWarning, match="non-negative"):
            msg = warn_negative(np.array([-1.0, 2.0]), "w")
        assert "w" in msg

    def test_non_binary(self):
        with pytest.warns(DataQualityWarning, match="either 0 or 1"):
            msg = warn_non_binary(np.array([0.0, 1.0, 2.0]), "delta")
        assert "[2.0]" in msg

    def test_outside_unit_interval_ignores_nan(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert warn_outside_unit_interval(np.array([0.0, np.nan, 1.0]), "surv") is None
        with pytest.warns(DataQualityWarning, match="between 0 and 1"):
            warn_outside_unit_interval(np.array([1.2, np.nan]), "surv")

    def test_clean_values_return_none(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert warn_negative(np.array([0.0, 1.0]), "w") is None
            assert warn_non_binary(np.array([0.0, 1.0]), "delta") is None
