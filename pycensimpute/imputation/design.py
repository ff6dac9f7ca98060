"""
Design classes for conditional-mean imputation.

ImputationDesign and MultipleImputationDesign hold everything the engine
needs, validated at construction. Contract violations raise; data-quality
problems are warned about, recorded, and left in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd

from pycensimpute.core.exceptions import ValidationError
from pycensimpute.core.protocols import ProportionalHazardsModel, SurvivalCurveModel
from pycensimpute.core.validation import (
    check_column_name,
    check_has_columns,
    check_numeric_column,
    warn_negative,
    warn_non_binary,
)
from pycensimpute.imputation._common import Adjustment, CovariateAdjusted, Unadjusted
from pycensimpute.imputation._extrapolate import TailApproximation, get_tail_policy
from pycensimpute.imputation._interpolate import BEFORE_FIRST_EVENT


def _normalize_covariates(addl_covar) -> tuple[str, ...]:
    if addl_covar is None:
        return ()
    if isinstance(addl_covar, str):
        return (addl_covar,)
    names = tuple(addl_covar)
    for nm in names:
        check_column_name(nm, "addl_covar")
    if len(names) == 0:
        raise ValidationError("addl_covar must name at least one column, or be None")
    return names


def _check_output_columns(data: pd.DataFrame, surv_col: str, imp_col: str) -> None:
    check_column_name(surv_col, "surv_col")
    check_column_name(imp_col, "imp_col")
    if surv_col == imp_col:
        raise ValidationError(
            f"surv_col and imp_col must differ, both are {surv_col!r}"
        )
    clashing = [c for c in (surv_col, imp_col) if c in data.columns]
    if clashing:
        raise ValidationError(
            f"data already has column(s) {clashing}; pick other surv_col / imp_col names"
        )


def _check_before_first_event(value: str) -> str:
    if value not in BEFORE_FIRST_EVENT:
        raise ValidationError(
            f"before_first_event must be one of {list(BEFORE_FIRST_EVENT)}, got {value!r}"
        )
    return value


def _data_quality(data: pd.DataFrame, obs: str, delta: str) -> tuple[str, ...]:
    messages = []
    for msg in (
        warn_negative(data[obs].to_numpy(dtype=np.float64), obs),
        warn_non_binary(data[delta].to_numpy(dtype=np.float64), delta),
    ):
        if msg:
            messages.append(msg)
    return tuple(messages)


def _validated_columns(data, obs, delta, addl_covar) -> tuple[str, ...]:
    check_column_name(obs, "obs")
    check_column_name(delta, "delta")
    covariates = _normalize_covariates(addl_covar)
    check_has_columns(data, [obs, delta, *covariates])
    for col in (obs, delta, *covariates):
        check_numeric_column(data, col)
    return covariates


def _adjustment_for(fit: Any, covariates: tuple[str, ...]) -> Adjustment:
    if not covariates:
        if not isinstance(fit, SurvivalCurveModel):
            raise ValidationError(
                f"without addl_covar, fit must expose a survival curve "
                f"(time, survival), e.g. kaplan_meier(); got {type(fit).__name__}"
            )
        time = np.asarray(fit.time, dtype=np.float64)
        surv = np.asarray(fit.survival, dtype=np.float64)
        if time.ndim != 1 or time.shape != surv.shape:
            raise ValidationError(
                f"fit.time and fit.survival must be 1D of equal length, "
                f"got shapes {time.shape} and {surv.shape}"
            )
        return Unadjusted(model=fit)

    if not isinstance(fit, ProportionalHazardsModel):
        raise ValidationError(
            f"with addl_covar, fit must be a proportional-hazards model exposing "
            f"coefficients, e.g. coxph(); got {type(fit).__name__}"
        )
    coefficients = np.atleast_1d(np.asarray(fit.coefficients, dtype=np.float64))
    if coefficients.shape != (len(covariates),):
        raise ValidationError(
            f"fit has {coefficients.size} coefficient(s) but addl_covar names "
            f"{len(covariates)} column(s): {list(covariates)}"
        )
    if not np.all(np.isfinite(coefficients)):
        raise ValidationError(f"fit.coefficients must be finite, got {coefficients}")
    return CovariateAdjusted(coefficients=coefficients, columns=covariates)


@dataclass(frozen=True)
class ImputationDesign:
    """
    Frozen design for one conditional-mean imputation pass.

    Attributes:
        data: Private copy of the input frame.
        obs: Column holding min(X, C).
        delta: Column holding the event indicator (1 = uncensored).
        adjustment: Unadjusted or CovariateAdjusted.
        tail: Tail approximation strategy.
        before_first_event: "error" or "origin".
        surv_col, imp_col: Names of the added columns.
        warnings: Data-quality messages found at construction.
    """
    data: pd.DataFrame
    obs: str
    delta: str
    adjustment: Adjustment
    tail: TailApproximation
    before_first_event: str
    surv_col: str
    imp_col: str
    warnings: tuple[str, ...]

    @classmethod
    def for_imputation(
        cls,
        fit: Any,
        obs: str,
        delta: str,
        addl_covar: str | Sequence[str] | None,
        data: pd.DataFrame,
        *,
        approx_beyond: str = "expo",
        before_first_event: str = "error",
        surv_col: str = "surv",
        imp_col: str = "imp",
    ) -> ImputationDesign:
        """
        Create an imputation design with validation.

        Raises:
            ValidationError: If a column is missing or non-numeric, the
                model object does not match the covariate setting, or a
                configuration value is unknown.
        """
        covariates = _validated_columns(data, obs, delta, addl_covar)
        _check_output_columns(data, surv_col, imp_col)
        tail = get_tail_policy(approx_beyond)
        before_first_event = _check_before_first_event(before_first_event)
        adjustment = _adjustment_for(fit, covariates)

        if len(data) == 0:
            raise ValidationError("data must have at least one row")

        return cls(
            data=data.copy(),
            obs=obs,
            delta=delta,
            adjustment=adjustment,
            tail=tail,
            before_first_event=before_first_event,
            surv_col=surv_col,
            imp_col=imp_col,
            warnings=_data_quality(data, obs, delta),
        )

    @property
    def covariates(self) -> tuple[str, ...]:
        return self.adjustment.columns

    @property
    def n(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class MultipleImputationDesign:
    """
    Frozen design for bootstrap multiple imputation.

    Attributes:
        data: Private copy of the input frame.
        obs, delta: Column names.
        covariates: Additional covariate columns (empty → Kaplan-Meier).
        M: Number of bootstrap imputations.
        approx_beyond: Tail approximation name.
        before_first_event: "error" or "origin".
        ties: Tie method for the Cox refits.
        seed: Root seed; one child seed is spawned per iteration.
        surv_col, imp_col: Names of the added columns.
        warnings: Data-quality messages found at construction.
    """
    data: pd.DataFrame
    obs: str
    delta: str
    covariates: tuple[str, ...]
    M: int
    approx_beyond: str
    before_first_event: str
    ties: str
    seed: int | None
    surv_col: str
    imp_col: str
    warnings: tuple[str, ...]

    @classmethod
    def for_multiple_imputation(
        cls,
        data: pd.DataFrame,
        obs: str,
        delta: str,
        addl_covar: str | Sequence[str] | None = None,
        *,
        M: int = 20,
        approx_beyond: str = "expo",
        before_first_event: str = "error",
        ties: str = "efron",
        seed: int | None = None,
        surv_col: str = "surv",
        imp_col: str = "imp",
    ) -> MultipleImputationDesign:
        """
        Create a multiple-imputation design with validation.

        Raises:
            ValidationError: If inputs are invalid.
        """
        covariates = _validated_columns(data, obs, delta, addl_covar)
        _check_output_columns(data, surv_col, imp_col)
        get_tail_policy(approx_beyond)
        before_first_event = _check_before_first_event(before_first_event)

        if isinstance(M, bool) or not isinstance(M, (int, np.integer)) or M < 1:
            raise ValidationError(f"M must be a positive integer, got {M!r}")

        if ties not in ("efron", "breslow"):
            raise ValidationError(
                f"ties must be 'efron' or 'breslow', got '{ties}'"
            )

        if len(data) == 0:
            raise ValidationError("data must have at least one row")

        return cls(
            data=data.copy(),
            obs=obs,
            delta=delta,
            covariates=covariates,
            M=int(M),
            approx_beyond=approx_beyond,
            before_first_event=before_first_event,
            ties=ties,
            seed=seed,
            surv_col=surv_col,
            imp_col=imp_col,
            warnings=_data_quality(data, obs, delta),
        )

    @property
    def n(self) -> int:
        return len(self.data)
