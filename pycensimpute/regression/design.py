"""
Regression Design.

RegressionDesign holds the response, the design matrix and the column
names of a linear model. It is built either from arrays or from an
R-style formula evaluated against a DataFrame with patsy, in which case
the intercept and term names come from the formula.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd
import patsy
from numpy.typing import NDArray

from pycensimpute.core.exceptions import ValidationError
from pycensimpute.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
)


@dataclass(frozen=True)
class RegressionDesign:
    """
    Linear model design matrix specification.

    Construction:
        RegressionDesign.from_arrays(X, y)                 # names x0, x1, ...
        RegressionDesign.from_arrays(X, y, names=[...])
        RegressionDesign.from_formula("y ~ imp + z", df)  # patsy terms
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _names: tuple[str, ...]
    _formula: str | None = None

    @classmethod
    def from_arrays(
        cls,
        X: Any,
        y: Any,
        names: Sequence[str] | None = None,
    ) -> RegressionDesign:
        """Build design directly from arrays. No intercept is added."""
        X = check_array(X, 'X')
        y = check_array(y, 'y')
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        if names is None:
            names = tuple(f"x{j}" for j in range(X.shape[-1]))
        return cls._build(X, y, tuple(names), formula=None)

    @classmethod
    def from_formula(cls, formula: str, data: pd.DataFrame) -> RegressionDesign:
        """
        Build design from an R-style formula.

        Rows with missing values in any referenced column are an error
        rather than silently dropped.

        Raises:
            ValidationError: If the formula cannot be evaluated on ``data``.
        """
        if not isinstance(formula, str) or "~" not in formula:
            raise ValidationError(
                f"formula must be a string of the form 'y ~ x1 + x2', got {formula!r}"
            )
        if not isinstance(data, pd.DataFrame):
            raise ValidationError(
                f"data must be a pandas DataFrame, got {type(data).__name__}"
            )

        try:
            y_df, X_df = patsy.dmatrices(
                formula, data, return_type='dataframe', NA_action='raise',
            )
        except patsy.PatsyError as e:
            raise ValidationError(f"cannot build design from {formula!r}: {e}") from e

        if y_df.shape[1] != 1:
            raise ValidationError(
                f"formula must have a single numeric response, got {list(y_df.columns)}"
            )

        return cls._build(
            X_df.to_numpy(dtype=np.float64),
            y_df.iloc[:, 0].to_numpy(dtype=np.float64),
            tuple(X_df.columns),
            formula=formula,
        )

    @classmethod
    def _build(cls, X, y, names, formula) -> RegressionDesign:
        """Internal builder with validation."""
        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        check_min_samples(X, p, 'X')

        if len(names) != p:
            raise ValidationError(
                f"names has {len(names)} entries but X has {p} columns"
            )

        return cls(_X=X, _y=y, _n=n, _p=p, _names=names, _formula=formula)

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        return self._n

    @property
    def p(self) -> int:
        return self._p

    @property
    def names(self) -> tuple[str, ...]:
        """Coefficient names, in column order."""
        return self._names

    @property
    def formula(self) -> str | None:
        return self._formula
