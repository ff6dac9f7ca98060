"""
Input validation utilities for pycensimpute.

Two kinds of checks live here:

* Contract checks ("fail fast, fail loud"): raise immediately with a
  clear message naming the offending parameter or column.
* Data-quality checks: never raise. They emit a DataQualityWarning and
  return the message so callers can record it on their Result.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
"""

from __future__ import annotations

import warnings
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pycensimpute.core.exceptions import (
    DataQualityWarning,
    DimensionError,
    ValidationError,
)

if TYPE_CHECKING:
    import pandas as pd


# ── Contract checks ──────────────────────────────────────────────────

def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a floating-point numpy array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == bool:
        result = result.astype(np.float64)

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_column_name(name: Any, param: str) -> str:
    """
    Verify a column reference is a string.

    Raises:
        ValidationError: If name is not a str
    """
    if not isinstance(name, str):
        raise ValidationError(
            f"argument {param} must be a column name (str), got {type(name).__name__}"
        )
    return name


def check_has_columns(data: 'pd.DataFrame', columns: list[str]) -> None:
    """
    Verify a DataFrame carries every named column.

    Raises:
        ValidationError: If data is not a DataFrame or a column is absent
    """
    import pandas as pd

    if not isinstance(data, pd.DataFrame):
        raise ValidationError(
            f"argument data must be a pandas DataFrame, got {type(data).__name__}"
        )

    missing = [c for c in columns if c not in data.columns]
    if missing:
        raise ValidationError(
            f"data does not have column(s) with name {missing}. "
            f"Available: {list(data.columns)}"
        )


def check_numeric_column(data: 'pd.DataFrame', column: str) -> NDArray[np.floating[Any]]:
    """
    Extract a named column as a float array, rejecting non-numeric content.

    Raises:
        ValidationError: If the column is not numeric or holds missing values
    """
    values = check_array(data[column].to_numpy(), f"column '{column}'")
    if np.any(np.isnan(values)):
        raise ValidationError(
            f"column '{column}': contains {int(np.sum(np.isnan(values)))} missing values"
        )
    return values


# ── Data-quality checks (warn, never raise) ─────────────────────────

def _warn(message: str) -> str:
    warnings.warn(message, DataQualityWarning, stacklevel=3)
    return message


def warn_negative(values: NDArray[np.floating[Any]], name: str) -> str | None:
    """Warn if any value is negative. Returns the message, or None."""
    if np.any(values < 0):
        n_bad = int(np.sum(values < 0))
        return _warn(f"elements of column {name} must be non-negative ({n_bad} negative)")
    return None


def warn_non_binary(values: NDArray[np.floating[Any]], name: str) -> str | None:
    """Warn if any value is not 0 or 1. Returns the message, or None."""
    if not np.all(np.isin(values, [0.0, 1.0])):
        bad = np.unique(values[~np.isin(values, [0.0, 1.0])])
        return _warn(
            f"elements of column {name} must be either 0 or 1, got {bad[:5].tolist()}"
        )
    return None


def warn_outside_unit_interval(values: NDArray[np.floating[Any]], name: str) -> str | None:
    """Warn if any non-missing value lies outside [0, 1]. Returns the message, or None."""
    defined = values[~np.isnan(values)]
    if np.any((defined < 0) | (defined > 1)):
        n_bad = int(np.sum((defined < 0) | (defined > 1)))
        return _warn(
            f"elements of column {name} must be inclusively between 0 and 1 "
            f"({n_bad} outside)"
        )
    return None
