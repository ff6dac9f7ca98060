"""
Shared structures for conditional-mean imputation.

Adjustment variants
-------------------
Whether the imputation model has covariates is decided once per call and
carried as one of two variants:

    Unadjusted(model)                    marginal curve, e.g. Kaplan-Meier
    CovariateAdjusted(coefficients, ...) Cox model, S(t|z) = S0(t) ** exp(β·z)

Each variant knows how to derive the working survival table from the data
and how to turn a baseline survival value into a subject-specific one, so
the conditional-mean integral itself never branches on covariates.

Payloads
--------
ImputationParams and MultipleImputationParams are the frozen payloads
wrapped by Result[P].
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pycensimpute.core.protocols import SurvivalCurveModel
from pycensimpute.survival.solvers import breslow_estimator

if TYPE_CHECKING:
    import pandas as pd
    from pycensimpute.imputation.solution import ImputationSolution


@dataclass(frozen=True)
class Unadjusted:
    """No additional covariates: the fitted curve is used as-is."""

    model: SurvivalCurveModel

    @property
    def columns(self) -> tuple[str, ...]:
        return ()

    def hazard_ratios(self, frame: 'pd.DataFrame') -> NDArray:
        return np.ones(len(frame), dtype=np.float64)

    def survival_table(self, frame: 'pd.DataFrame', obs: str, delta: str):
        """(time, survival) pairs straight from the fitted curve."""
        return (
            np.asarray(self.model.time, dtype=np.float64),
            np.asarray(self.model.survival, dtype=np.float64),
        )

    def scale(self, surv, hr):
        return surv


@dataclass(frozen=True)
class CovariateAdjusted:
    """Cox-model adjustment for the named covariate columns."""

    coefficients: NDArray
    columns: tuple[str, ...]

    def linear_predictor(self, frame: 'pd.DataFrame') -> NDArray:
        Z = frame[list(self.columns)].to_numpy(dtype=np.float64)
        return Z @ self.coefficients

    def hazard_ratios(self, frame: 'pd.DataFrame') -> NDArray:
        return np.exp(self.linear_predictor(frame))

    def survival_table(self, frame: 'pd.DataFrame', obs: str, delta: str):
        """Breslow baseline survival at the distinct event times."""
        baseline = breslow_estimator(
            frame[obs].to_numpy(),
            frame[delta].to_numpy(),
            self.hazard_ratios(frame),
        )
        return baseline.time, baseline.baseline_survival

    def scale(self, surv, hr):
        return surv ** hr


Adjustment = Unadjusted | CovariateAdjusted


@dataclass(frozen=True)
class ImputationParams:
    """
    Parameter payload for a single conditional-mean imputation.

    - data: augmented copy of the input, sorted by observed time, with the
      survival and imputed-value columns added
    - curve: distinct (time, event, covariates, survival) rows used in
      the integral, in time order
    """
    data: 'pd.DataFrame'
    curve: 'pd.DataFrame'
    n_observations: int
    n_censored: int
    n_interpolated: int
    n_extrapolated: int
    n_zero_denominator: int
    t_last_event: float
    s_last_event: float


@dataclass(frozen=True)
class MultipleImputationParams:
    """
    Parameter payload for bootstrap multiple imputation.

    - imputations: one ImputationSolution per bootstrap resample
    - indices: row positions of the original data drawn for resample i
    """
    imputations: tuple['ImputationSolution', ...]
    indices: tuple[NDArray, ...]
    M: int
    seed: Any
