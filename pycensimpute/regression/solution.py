"""
Regression solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pycensimpute.core.result import Result

if TYPE_CHECKING:
    from pycensimpute.regression.design import RegressionDesign


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear regression.

    This is the immutable data computed by backends.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    vcov: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int


@dataclass
class LinearSolution:
    """
    User-facing regression results.

    Wraps the backend Result and provides accessors for coefficients by
    name, their sampling variances and t-tests.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def names(self) -> tuple[str, ...]:
        return self._design.names

    @property
    def params(self) -> dict[str, float]:
        """Coefficients keyed by name."""
        return dict(zip(self.names, self.coefficients.tolist()))

    @property
    def vcov(self) -> NDArray[np.floating[Any]]:
        """Coefficient covariance σ² (X'X)⁻¹."""
        return self._result.params.vcov

    @property
    def variances(self) -> NDArray[np.floating[Any]]:
        """Sampling variance of each coefficient."""
        return np.diag(self.vcov).copy()

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return np.sqrt(self.variances)

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values on df_residual degrees of freedom."""
        if self.df_residual <= 0:
            return np.full(len(self.coefficients), np.nan)
        return 2 * stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def residual_std_error(self) -> float:
        df = self._result.params.df_residual
        if df <= 0:
            return 0.0
        return float(np.sqrt(self.rss / df))

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def n_observations(self) -> int:
        return self._design.n

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary output."""
        formula = self._design.formula
        lines = [
            f"Call: lm({formula!r})" if formula else "Call: fit()",
            "",
            "Coefficients:",
            f"  {'':>12s}  {'Estimate':>12s}  {'Std.Error':>10s}  "
            f"{'t value':>8s}  {'Pr(>|t|)':>10s}",
        ]
        for name, coef, se, t, pv in zip(
            self.names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            lines.append(
                f"  {name:>12s}  {coef:12.6f}  {se:10.6f}  {t:8.3f}  {pv:10.4g}"
            )
        lines.append("")
        lines.append(
            f"Residual standard error: {self.residual_std_error:.4f} "
            f"on {self.df_residual} degrees of freedom"
        )
        lines.append(f"Multiple R-squared: {self.r_squared:.4f}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"r_squared={self.r_squared:.4f})"
        )
