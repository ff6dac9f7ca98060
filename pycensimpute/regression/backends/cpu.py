"""
CPU backend for linear regression.

Solves OLS through a rank-checked QR decomposition and takes the
coefficient covariance from the same factorization,
(X'X)⁻¹ = R⁻¹R⁻ᵀ, so no normal equations are formed.
"""

from typing import Any

import numpy as np
from scipy.linalg import solve_triangular

from pycensimpute.core.result import Result
from pycensimpute.core.compute.timing import Timer
from pycensimpute.core.compute.linalg.qr import qr_solve_cpu
from pycensimpute.regression.design import RegressionDesign
from pycensimpute.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Matches R's lm() for full-rank designs.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. X = QR, β = R⁻¹ Q'y
            2. Residuals and fitted values
            3. Cov(β) = σ² R⁻¹R⁻ᵀ with σ² = RSS / (n - p)

        Raises:
            SingularMatrixError: If X is rank-deficient
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p

        with timer.section('solve'):
            coefficients, qr_result = qr_solve_cpu(X, y, check_rank=True)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            tss = float(np.sum((y - np.mean(y)) ** 2))
            df_residual = n - qr_result.rank

            R_inv = solve_triangular(qr_result.R[:p, :p], np.eye(p), lower=False)
            unscaled = R_inv @ R_inv.T
            if df_residual > 0:
                vcov = (rss / df_residual) * unscaled
            else:
                vcov = np.full((p, p), np.nan, dtype=np.float64)

        timer.stop()

        params = LinearParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            vcov=vcov,
            rss=rss,
            tss=tss,
            rank=qr_result.rank,
            df_residual=df_residual,
        )

        warnings = ()
        if df_residual <= 0:
            warnings = (
                f"no residual degrees of freedom (n={n}, p={p}); "
                f"standard errors are undefined",
            )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'formula': design.formula,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=warnings,
        )
