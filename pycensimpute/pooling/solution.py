"""
Solution wrapper for pooled multiple-imputation estimates.
"""

from __future__ import annotations

from typing import Any

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pycensimpute.core.result import Result
from pycensimpute.pooling._common import PooledParams


class PooledSolution:
    """Rubin-pooled coefficients.

    ``coefficients`` and ``variances`` are the two named mappings of the
    pooled analysis; the array properties follow ``names`` order.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[PooledParams]) -> None:
        self._result = _result

    @property
    def names(self) -> tuple[str, ...]:
        return self._result.params.names

    @property
    def coefficients(self) -> dict[str, float]:
        """Pooled point estimate per coefficient."""
        return dict(zip(self.names, self._result.params.qbar.tolist()))

    @property
    def variances(self) -> dict[str, float]:
        """Pooled (total) variance per coefficient."""
        return dict(zip(self.names, self._result.params.t.tolist()))

    @property
    def estimate(self) -> NDArray[np.floating[Any]]:
        return self._result.params.qbar

    @property
    def within(self) -> NDArray[np.floating[Any]]:
        """W: mean within-dataset variance."""
        return self._result.params.ubar

    @property
    def between(self) -> NDArray[np.floating[Any]]:
        """B: between-dataset variance of the estimates."""
        return self._result.params.b

    @property
    def total(self) -> NDArray[np.floating[Any]]:
        """T = W + (1 + 1/M) B."""
        return self._result.params.t

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return np.sqrt(self.total)

    @property
    def df(self) -> NDArray[np.floating[Any]]:
        return self._result.params.df

    @property
    def riv(self) -> NDArray[np.floating[Any]]:
        return self._result.params.riv

    @property
    def fmi(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fmi

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values of t = Q̄ / sqrt(T) on df degrees of freedom."""
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.estimate / self.standard_errors
        return 2 * stats.t.sf(np.abs(t), self.df)

    @property
    def estimates(self) -> NDArray[np.floating[Any]]:
        """Per-dataset estimates, shape (M, k)."""
        return self._result.params.estimates

    @property
    def M(self) -> int:
        return self._result.params.M

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self):
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def confint(self, level: float = 0.95) -> NDArray[np.floating[Any]]:
        """(k, 2) confidence limits from the t distribution on df."""
        q = stats.t.ppf(0.5 + level / 2, self.df)
        half = q * self.standard_errors
        return np.column_stack([self.estimate - half, self.estimate + half])

    def summary(self) -> str:
        formula = self._result.info.get('formula')
        lines = [
            f"Call: pool({formula!r}, M={self.M})" if formula else f"Call: pool_estimates(M={self.M})",
            "",
            f"  {'':>12s}  {'estimate':>12s}  {'std.error':>10s}  "
            f"{'df':>8s}  {'p.value':>10s}  {'fmi':>6s}",
        ]
        for name, est, se, df, pv, fmi in zip(
            self.names, self.estimate, self.standard_errors,
            self.df, self.p_values, self.fmi,
        ):
            lines.append(
                f"  {name:>12s}  {est:12.6f}  {se:10.6f}  "
                f"{df:8.1f}  {pv:10.4g}  {fmi:6.3f}"
            )
        if self.warnings:
            lines.append("")
            for w in self.warnings:
                lines.append(f"  Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        coefs = {k: round(v, 4) for k, v in self.coefficients.items()}
        return f"PooledSolution(M={self.M}, coefficients={coefs})"
