"""
Public API for linear regression.

    fit(X, y) → LinearSolution
    fit_formula(formula, data) → LinearSolution
"""

from typing import Sequence

import pandas as pd
from numpy.typing import ArrayLike

from pycensimpute.regression.design import RegressionDesign
from pycensimpute.regression.solution import LinearSolution
from pycensimpute.regression.backends.cpu import CPUQRBackend


def fit(
    X: ArrayLike,
    y: ArrayLike,
    *,
    names: Sequence[str] | None = None,
) -> LinearSolution:
    """
    Fit a linear regression model.

    Solves the ordinary least squares problem:
        min_β ||y - Xβ||²

    X is used as given; include a column of ones for an intercept.

    Args:
        X: Design matrix (n x p). Can be any array-like.
        y: Response vector (n,). Can be any array-like.
        names: Optional coefficient names, one per column of X.

    Returns:
        LinearSolution with coefficients, variances and summary()

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If X and y have inconsistent dimensions
        SingularMatrixError: If X is rank-deficient

    Example:
        >>> X = np.column_stack([np.ones(100), rng.standard_normal(100)])
        >>> result = fit(X, X @ [1.0, 2.0] + rng.standard_normal(100))
        >>> result.coefficients
    """
    design = RegressionDesign.from_arrays(X, y, names=names)
    result = CPUQRBackend().solve(design)
    return LinearSolution(_result=result, _design=design)


def fit_formula(formula: str, data: pd.DataFrame) -> LinearSolution:
    """
    Fit a linear model given by an R-style formula.

    The design matrices are built with patsy, so the formula follows R's
    conventions: an intercept unless ``- 1`` or ``+ 0`` is given,
    ``C(z)`` for categorical terms, and ``a:b`` for interactions.

    Args:
        formula: E.g. ``"y ~ imp + z"``.
        data: DataFrame holding every referenced column.

    Returns:
        LinearSolution whose ``names`` are the patsy term names, e.g.
        ``("Intercept", "imp", "z")``.

    Raises:
        ValidationError: If the formula cannot be evaluated on ``data``
            or a referenced column has missing values.
        SingularMatrixError: If the design matrix is rank-deficient.
    """
    design = RegressionDesign.from_formula(formula, data)
    result = CPUQRBackend().solve(design)
    return LinearSolution(_result=result, _design=design)
