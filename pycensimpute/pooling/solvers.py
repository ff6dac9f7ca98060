"""
Public API for pooling multiply-imputed analyses.

    pool(datasets, formula) → PooledSolution
    pool_estimates(estimates, variances, names) → PooledSolution
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from pycensimpute.core.exceptions import CensImputeError, PoolingError
from pycensimpute.core.result import Result
from pycensimpute.core.compute.timing import Timer
from pycensimpute.core.validation import check_array, check_finite
from pycensimpute.pooling._common import PooledParams
from pycensimpute.pooling._rubin import rubin_combine
from pycensimpute.pooling.solution import PooledSolution
from pycensimpute.regression.solvers import fit_formula


def pool(datasets: Sequence[pd.DataFrame], formula: str) -> PooledSolution:
    """
    Fit a linear model to each completed dataset and pool with Rubin's rules.

    Args:
        datasets: The M completed datasets, e.g.
            ``multiple_impute(...).datasets``.
        formula: R-style formula for the analysis model, e.g.
            ``"y ~ imp + z"``.

    Returns:
        PooledSolution with pooled coefficients and variances keyed by
        coefficient name.

    Raises:
        PoolingError: If ``datasets`` is empty, a fit fails (the error is
            chained and ``dataset_index`` names the dataset), or the fits
            do not share one set of coefficient names.

    Example:
        >>> mi = multiple_impute(df, "w", "delta", "z", M=20, seed=1)
        >>> pooled = pool(mi.datasets, "y ~ imp + z")
        >>> pooled.coefficients["imp"]
    """
    if isinstance(datasets, pd.DataFrame):
        raise PoolingError("datasets must be a sequence of DataFrames, got a single DataFrame")
    datasets = list(datasets)
    if len(datasets) == 0:
        raise PoolingError("datasets must contain at least one completed dataset")

    timer = Timer()
    timer.start()

    names = None
    estimates = []
    variances = []
    with timer.section('analysis_fits'):
        for i, data in enumerate(datasets):
            try:
                fitted = fit_formula(formula, data)
            except CensImputeError as e:
                raise PoolingError(
                    f"analysis model failed on dataset {i}: {e}",
                    dataset_index=i,
                ) from e

            if names is None:
                names = fitted.names
            elif fitted.names != names:
                raise PoolingError(
                    f"dataset {i} yields coefficients {list(fitted.names)}, "
                    f"expected {list(names)}",
                    dataset_index=i,
                )
            estimates.append(fitted.coefficients)
            variances.append(fitted.variances)

    with timer.section('rubin'):
        solution = _combine(np.vstack(estimates), np.vstack(variances), names)

    timer.stop()

    result = Result(
        params=solution._result.params,
        info={**solution._result.info, 'formula': formula},
        timing=timer.result(),
        backend_name='cpu_rubin',
        warnings=solution._result.warnings,
    )
    return PooledSolution(_result=result)


def pool_estimates(
    estimates: ArrayLike,
    variances: ArrayLike,
    names: Sequence[str] | None = None,
) -> PooledSolution:
    """
    Pool precomputed estimates with Rubin's rules.

    Args:
        estimates: (M, k) point estimates, one row per completed dataset.
            A 1D array is read as M estimates of a single coefficient.
        variances: (M, k) sampling variances, same shape.
        names: Optional coefficient names (default b0, b1, ...).

    Raises:
        PoolingError: If shapes disagree or values are not finite.
    """
    Q = check_array(estimates, 'estimates')
    U = check_array(variances, 'variances')
    if Q.ndim == 1:
        Q = Q.reshape(-1, 1)
    if U.ndim == 1:
        U = U.reshape(-1, 1)

    if Q.ndim != 2 or Q.shape != U.shape or Q.shape[0] == 0:
        raise PoolingError(
            f"estimates and variances must be non-empty (M, k) arrays of equal "
            f"shape, got {Q.shape} and {U.shape}"
        )
    try:
        check_finite(Q, 'estimates')
        check_finite(U, 'variances')
    except CensImputeError as e:
        raise PoolingError(str(e)) from e

    if names is None:
        names = tuple(f"b{j}" for j in range(Q.shape[1]))
    names = tuple(names)
    if len(names) != Q.shape[1]:
        raise PoolingError(
            f"names has {len(names)} entries but there are {Q.shape[1]} coefficients"
        )

    return _combine(Q, U, names)


def _combine(Q: np.ndarray, U: np.ndarray, names: tuple[str, ...]) -> PooledSolution:
    pooled = rubin_combine(Q, U)

    warnings = ()
    if np.any(U < 0):
        warnings = ("negative within-dataset variance in the input",)

    params = PooledParams(
        names=names,
        estimates=Q,
        within_variances=U,
        M=Q.shape[0],
        **pooled,
    )
    result = Result(
        params=params,
        info={'method': 'rubin', 'M': Q.shape[0]},
        timing=None,
        backend_name='cpu_rubin',
        warnings=warnings,
    )
    return PooledSolution(_result=result)
