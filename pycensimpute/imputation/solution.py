"""
Solution wrappers for imputation results.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from pycensimpute.core.result import Result
from pycensimpute.imputation._common import ImputationParams, MultipleImputationParams

if TYPE_CHECKING:
    from pycensimpute.pooling.solution import PooledSolution


class ImputationSolution:
    """Single conditional-mean imputation.

    ``data`` is the augmented dataset: a sorted copy of the input with the
    survival and imputed-value columns added. Every access returns a fresh
    copy, so callers may modify what they get.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[ImputationParams]) -> None:
        self._result = _result

    @property
    def data(self) -> pd.DataFrame:
        return self._result.params.data.copy()

    @property
    def imputed(self) -> pd.Series:
        """Imputed covariate values, in the row order of ``data``."""
        return self._result.params.data[self.imp_col].copy()

    @property
    def survival(self) -> pd.Series:
        """Survival estimate used for each row."""
        return self._result.params.data[self.surv_col].copy()

    @property
    def curve(self) -> pd.DataFrame:
        """Distinct (time, event, covariates, survival) rows of the integral."""
        return self._result.params.curve.copy()

    @property
    def obs(self) -> str:
        return self._result.info['obs']

    @property
    def delta(self) -> str:
        return self._result.info['delta']

    @property
    def surv_col(self) -> str:
        return self._result.info['surv_col']

    @property
    def imp_col(self) -> str:
        return self._result.info['imp_col']

    @property
    def covariates(self) -> tuple[str, ...]:
        return self._result.info['covariates']

    @property
    def approx_beyond(self) -> str:
        return self._result.info['approx_beyond']

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_censored(self) -> int:
        return self._result.params.n_censored

    @property
    def n_interpolated(self) -> int:
        """Rows whose survival was interpolated between event times."""
        return self._result.params.n_interpolated

    @property
    def n_extrapolated(self) -> int:
        """Rows past the last event, filled by the tail approximation."""
        return self._result.params.n_extrapolated

    @property
    def n_zero_denominator(self) -> int:
        return self._result.params.n_zero_denominator

    @property
    def t_last_event(self) -> float:
        return self._result.params.t_last_event

    @property
    def s_last_event(self) -> float:
        return self._result.params.s_last_event

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        info = self._result.info
        model = "coxph" if info['adjusted'] else "survival curve"
        lines = []
        lines.append(
            f"Call: condl_mean_impute(obs='{self.obs}', delta='{self.delta}', "
            f"approx_beyond='{self.approx_beyond}')"
        )
        lines.append("")
        lines.append(f"  imputation model: {model}")
        if self.covariates:
            lines.append(f"  additional covariates: {', '.join(self.covariates)}")
        lines.append(
            f"  n={self.n_observations}, censored={self.n_censored}, "
            f"interpolated={self.n_interpolated}, beyond last event={self.n_extrapolated}"
        )
        lines.append(
            f"  last event: t={self.t_last_event:.4g}, S={self.s_last_event:.6f} "
            f"(tail: {info['approx_reference']})"
        )

        frame = self._result.params.data
        cens = frame[self.delta].to_numpy() != 1
        if cens.any():
            obs = frame[self.obs].to_numpy(dtype=np.float64)[cens]
            imp = frame[self.imp_col].to_numpy(dtype=np.float64)[cens]
            lines.append("")
            lines.append(
                f"  censored rows: mean observed={np.mean(obs):.4g}, "
                f"mean imputed={np.mean(imp):.4g}"
            )

        if self.warnings:
            lines.append("")
            for w in self.warnings:
                lines.append(f"  Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"ImputationSolution(n={self.n_observations}, "
            f"censored={self.n_censored}, "
            f"approx_beyond='{self.approx_beyond}')"
        )


class MultipleImputationSolution:
    """M bootstrap conditional-mean imputations."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[MultipleImputationParams]) -> None:
        self._result = _result

    @property
    def imputations(self) -> tuple[ImputationSolution, ...]:
        return self._result.params.imputations

    @property
    def datasets(self) -> list[pd.DataFrame]:
        """The M completed datasets, each a fresh copy."""
        return [sol.data for sol in self.imputations]

    @property
    def indices(self) -> tuple[np.ndarray, ...]:
        """Row positions of the input drawn for each resample."""
        return self._result.params.indices

    @property
    def M(self) -> int:
        return self._result.params.M

    @property
    def seed(self):
        return self._result.params.seed

    @property
    def imp_col(self) -> str:
        return self._result.info['imp_col']

    @property
    def info(self) -> dict:
        return self._result.info

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def __len__(self) -> int:
        return self.M

    def __getitem__(self, i: int) -> pd.DataFrame:
        return self.imputations[i].data

    def pool(self, formula: str) -> 'PooledSolution':
        """Fit ``formula`` by OLS to every dataset and pool with Rubin's rules."""
        from pycensimpute.pooling.solvers import pool

        return pool(self.datasets, formula)

    def summary(self) -> str:
        info = self._result.info
        lines = []
        lines.append(
            f"Call: multiple_impute(M={self.M}, model={info['model']}, "
            f"approx_beyond='{info['approx_beyond']}', seed={self.seed})"
        )
        lines.append("")
        lines.append(f"  n={info['n']} rows per resample")
        means = np.array([sol.imputed.mean() for sol in self.imputations])
        spread = means.std(ddof=1) if self.M > 1 else 0.0
        lines.append(
            f"  mean of '{self.imp_col}' across imputations: "
            f"{means.mean():.4g} (sd {spread:.4g})"
        )
        if self.warnings:
            lines.append("")
            for w in self.warnings:
                lines.append(f"  Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MultipleImputationSolution(M={self.M}, "
            f"n={self._result.info['n']}, seed={self.seed})"
        )
