"""
Public API for conditional-mean imputation.

    condl_mean_impute(fit, obs, delta, addl_covar, data=...) → ImputationSolution
    multiple_impute(data, obs, delta, addl_covar, M=...) → MultipleImputationSolution
    impute_censored_surv(at_time, time, event, surv, data) → float
    extrapolate_survival(data, time, event, surv) → DataFrame

Each entry point validates its inputs into a design, runs the engine and
wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Any, Literal, Sequence

import numpy as np
import pandas as pd

from pycensimpute.core.exceptions import (
    CensImputeError,
    DataQualityWarning,
    ImputationError,
    ValidationError,
)
from pycensimpute.core.result import Result
from pycensimpute.core.compute.timing import Timer
from pycensimpute.core.validation import (
    check_column_name,
    check_has_columns,
    check_numeric_column,
    warn_negative,
    warn_non_binary,
    warn_outside_unit_interval,
)
from pycensimpute.imputation._common import (
    CovariateAdjusted,
    ImputationParams,
    MultipleImputationParams,
)
from pycensimpute.imputation._condmean import (
    conditional_means,
    distinct_curve,
    join_curve,
    sort_by_time,
    survival_table,
)
from pycensimpute.imputation._extrapolate import extrapolate_tail, get_tail_policy
from pycensimpute.imputation._interpolate import BEFORE_FIRST_EVENT, fill_gaps, interpolate_at
from pycensimpute.imputation.design import ImputationDesign, MultipleImputationDesign
from pycensimpute.imputation.solution import ImputationSolution, MultipleImputationSolution
from pycensimpute.survival.solvers import coxph, kaplan_meier


TailChoice = Literal["zero", "carryforward", "expo"]
BeforeFirstEvent = Literal["error", "origin"]


def condl_mean_impute(
    fit: Any,
    obs: str,
    delta: str,
    addl_covar: str | Sequence[str] | None = None,
    *,
    data: pd.DataFrame,
    approx_beyond: TailChoice = "expo",
    before_first_event: BeforeFirstEvent = "error",
    surv_col: str = "surv",
    imp_col: str = "imp",
) -> ImputationSolution:
    """
    Conditional-mean single imputation of a censored covariate.

    Each censored value is replaced by its conditional mean given that it
    exceeds the observed value (and given ``addl_covar`` where supplied),
    computed from the fitted survival model. Uncensored values are kept.

    Args:
        fit: Fitted imputation model. A Kaplan-Meier curve (anything with
            ``time`` and ``survival``) when ``addl_covar`` is None; a Cox
            model (anything with ``coefficients``) otherwise.
        obs: Column holding the censored covariate, min(X, C).
        delta: Column holding the censoring indicator (1 = uncensored).
        addl_covar: Optional fully-observed covariate column(s).
        data: DataFrame with columns ``obs``, ``delta`` and ``addl_covar``.
            It is not modified.
        approx_beyond: Survival past the last event: "expo" (default),
            "zero" or "carryforward".
        before_first_event: What to do with a censored time that precedes
            every event on the covariate-adjusted path: "error" (default)
            or "origin" to anchor the curve at S(0) = 1. With "error" the
            call fails whenever the smallest observed value is censored,
            which is common in simulated or heavily censored data; pass
            "origin" there.
        surv_col: Name of the added survival column.
        imp_col: Name of the added imputed-value column.

    Returns:
        ImputationSolution whose ``data`` is a copy of ``data`` sorted by
        ``obs`` with columns ``surv_col`` and ``imp_col`` added.

    Raises:
        ValidationError: If columns are missing or non-numeric, ``fit``
            does not match the covariate setting, or a setting is unknown.
        DegenerateCurveError: If there is no uncensored row, or survival
            is undefined at some censored time.

    Example:
        >>> km = kaplan_meier(df["w"], df["delta"])
        >>> result = condl_mean_impute(km, "w", "delta", data=df)
        >>> result.data["imp"]
    """
    design = ImputationDesign.for_imputation(
        fit, obs, delta, addl_covar, data,
        approx_beyond=approx_beyond,
        before_first_event=before_first_event,
        surv_col=surv_col,
        imp_col=imp_col,
    )
    return _impute(design)


def _impute(design: ImputationDesign) -> ImputationSolution:
    obs, delta = design.obs, design.delta
    surv_col, imp_col = design.surv_col, design.imp_col
    adjustment = design.adjustment
    warnings_list = list(design.warnings)

    timer = Timer()
    timer.start()

    with timer.section('survival_curve'):
        table = survival_table(design.data, obs, delta, adjustment, surv_col)
        msg = warn_outside_unit_interval(table[surv_col].to_numpy(), surv_col)
        if msg:
            warnings_list.append(msg)

    with timer.section('merge'):
        frame = sort_by_time(join_curve(design.data, table, obs, surv_col), obs)

    time = frame[obs].to_numpy(dtype=np.float64)
    event = frame[delta].to_numpy(dtype=np.float64)
    surv = frame[surv_col].to_numpy(dtype=np.float64)

    with timer.section('interpolation'):
        surv, filled = fill_gaps(time, event, surv, design.before_first_event)

    with timer.section('extrapolation'):
        surv, beyond = extrapolate_tail(time, event, surv, design.tail)

    uncens = event == 1
    first_event = np.min(time[uncens])
    n_anchored = int(np.sum(filled & (time < first_event)))
    if n_anchored:
        warnings_list.append(
            f"{n_anchored} censored row(s) precede the first event at {first_event:g}; "
            f"interpolated against S(0) = 1"
        )

    frame = frame.assign(**{surv_col: surv})

    with timer.section('conditional_mean'):
        curve = distinct_curve(frame, obs, delta, design.covariates, surv_col)
        hr = adjustment.hazard_ratios(frame)

        imp = time.copy()
        cens = ~uncens
        imp[cens], n_zero = conditional_means(
            time[cens], surv[cens], hr[cens],
            curve[obs].to_numpy(dtype=np.float64),
            curve[surv_col].to_numpy(dtype=np.float64),
            adjustment,
        )

    if n_zero:
        warnings_list.append(
            f"{n_zero} censored row(s) have zero survival at their censored time "
            f"(approx_beyond='{design.tail.name}'); imputed as the censored value"
        )

    frame = frame.assign(**{imp_col: imp})

    timer.stop()

    last = np.flatnonzero(uncens)[-1]
    params = ImputationParams(
        data=frame,
        curve=curve,
        n_observations=design.n,
        n_censored=int(np.sum(cens)),
        n_interpolated=int(np.sum(filled)),
        n_extrapolated=int(np.sum(beyond)),
        n_zero_denominator=n_zero,
        t_last_event=float(time[last]),
        s_last_event=float(surv[last]),
    )

    result = Result(
        params=params,
        info={
            'method': 'conditional mean',
            'adjusted': isinstance(adjustment, CovariateAdjusted),
            'covariates': design.covariates,
            'approx_beyond': design.tail.name,
            'approx_reference': design.tail.reference,
            'before_first_event': design.before_first_event,
            'obs': obs,
            'delta': delta,
            'surv_col': surv_col,
            'imp_col': imp_col,
        },
        timing=timer.result(),
        backend_name='cpu_condmean',
        warnings=tuple(warnings_list),
    )

    return ImputationSolution(_result=result)


def multiple_impute(
    data: pd.DataFrame,
    obs: str,
    delta: str,
    addl_covar: str | Sequence[str] | None = None,
    *,
    M: int = 20,
    approx_beyond: TailChoice = "expo",
    before_first_event: BeforeFirstEvent = "error",
    ties: Literal["efron", "breslow"] = "efron",
    seed: int | None = None,
    surv_col: str = "surv",
    imp_col: str = "imp",
) -> MultipleImputationSolution:
    """
    Bootstrap multiple imputation.

    For each of ``M`` iterations: draw n rows with replacement, refit the
    imputation model on the resample (Kaplan-Meier without ``addl_covar``,
    Cox with it), and run conditional-mean imputation on the resample.

    Every iteration draws from its own child of ``SeedSequence(seed)``, so
    iteration i depends only on ``seed`` and i, and a fixed seed
    reproduces all M datasets exactly.

    Args:
        data: DataFrame with columns ``obs``, ``delta`` and ``addl_covar``.
        obs, delta, addl_covar: As for condl_mean_impute().
        M: Number of imputations (>= 1).
        approx_beyond, before_first_event: As for condl_mean_impute().
            A resample whose smallest value is censored fails the batch
            under the default before_first_event="error" on the Cox path;
            pass "origin" to anchor such rows at S(0) = 1 instead.
        ties: Tie handling for the Cox refits.
        seed: Root random seed.
        surv_col, imp_col: Names of the added columns.

    Returns:
        MultipleImputationSolution holding M completed datasets.

    Raises:
        ValidationError: If inputs are invalid.
        ImputationError: If any iteration fails; ``iteration`` names it and
            the original error is chained. No partial batch is returned.
    """
    design = MultipleImputationDesign.for_multiple_imputation(
        data, obs, delta, addl_covar,
        M=M,
        approx_beyond=approx_beyond,
        before_first_event=before_first_event,
        ties=ties,
        seed=seed,
        surv_col=surv_col,
        imp_col=imp_col,
    )

    timer = Timer()
    timer.start()

    n = design.n
    children = np.random.SeedSequence(design.seed).spawn(design.M)
    imputations = []
    indices = []

    with timer.section('bootstrap_imputations'):
        for i, child in enumerate(children):
            rng = np.random.default_rng(child)
            idx = rng.choice(n, size=n, replace=True)
            resample = design.data.iloc[idx].reset_index(drop=True)
            try:
                imputations.append(_impute_resample(resample, design))
            except CensImputeError as e:
                raise ImputationError(
                    f"bootstrap imputation {i + 1} of {design.M} failed: {e}",
                    iteration=i,
                ) from e
            indices.append(idx)

    timer.stop()

    warnings_list = list(design.warnings)
    for i, sol in enumerate(imputations):
        warnings_list.extend(
            f"imputation {i + 1}: {w}" for w in sol.warnings
            if w not in design.warnings
        )

    params = MultipleImputationParams(
        imputations=tuple(imputations),
        indices=tuple(indices),
        M=design.M,
        seed=design.seed,
    )

    result = Result(
        params=params,
        info={
            'method': 'bootstrap conditional mean',
            'model': 'coxph' if design.covariates else 'kaplan_meier',
            'covariates': design.covariates,
            'approx_beyond': design.approx_beyond,
            'before_first_event': design.before_first_event,
            'n': n,
            'M': design.M,
            'obs': obs,
            'delta': delta,
            'surv_col': surv_col,
            'imp_col': imp_col,
        },
        timing=timer.result(),
        backend_name='cpu_bootstrap_condmean',
        warnings=tuple(warnings_list),
    )

    return MultipleImputationSolution(_result=result)


def _impute_resample(resample: pd.DataFrame, design: MultipleImputationDesign) -> ImputationSolution:
    """Refit the imputation model on one resample and impute it."""
    obs, delta = design.obs, design.delta
    # Data-quality warnings were already raised once for the full data
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", DataQualityWarning)
        if design.covariates:
            fit = coxph(
                resample[obs].to_numpy(),
                resample[delta].to_numpy(),
                resample[list(design.covariates)].to_numpy(dtype=np.float64),
                names=design.covariates,
                ties=design.ties,
            )
        else:
            fit = kaplan_meier(resample[obs].to_numpy(), resample[delta].to_numpy())

        solution = condl_mean_impute(
            fit, obs, delta, design.covariates or None,
            data=resample,
            approx_beyond=design.approx_beyond,
            before_first_event=design.before_first_event,
            surv_col=design.surv_col,
            imp_col=design.imp_col,
        )
    return solution


def impute_censored_surv(
    at_time: float,
    time: str,
    event: str,
    surv: str,
    data: pd.DataFrame,
    *,
    before_first_event: BeforeFirstEvent = "error",
) -> float:
    """
    Survival at a censored time the curve does not report.

    Returns the survival of the last event row at ``at_time`` (to 8
    decimals) if there is one, otherwise the mean of the survival at the
    nearest event time on either side.

    Args:
        at_time: Scalar time.
        time: Column name of the censored covariate.
        event: Column name of the event indicator.
        surv: Column name of the survival estimate (NaN where unknown).
        data: DataFrame with those columns. Rows are considered in
            ascending ``time`` order (stable).
        before_first_event: "error" (default) or "origin".

    Raises:
        ValidationError: If a column name is not a string or is absent, or
            before_first_event is unknown.
        DegenerateCurveError: If no event lies on one side of ``at_time``.
    """
    for name, param in ((time, "time"), (event, "event"), (surv, "surv")):
        check_column_name(name, param)
    check_has_columns(data, [time, event, surv])
    if before_first_event not in BEFORE_FIRST_EVENT:
        raise ValidationError(
            f"before_first_event must be one of {list(BEFORE_FIRST_EVENT)}, "
            f"got {before_first_event!r}"
        )

    t = check_numeric_column(data, time)
    e = check_numeric_column(data, event)
    s = data[surv].to_numpy(dtype=np.float64)

    warn_negative(t, time)
    warn_non_binary(e, event)
    warn_outside_unit_interval(s, surv)

    order = np.argsort(t, kind="mergesort")
    return interpolate_at(
        float(at_time), t[order], e[order], s[order],
        before_first_event=before_first_event,
    )


def extrapolate_survival(
    data: pd.DataFrame,
    time: str,
    event: str,
    surv: str,
    *,
    approx_beyond: TailChoice = "expo",
) -> pd.DataFrame:
    """
    Fill survival for every row past the last uncensored time.

    Args:
        data: DataFrame with the three named columns. Not modified.
        time, event, surv: Column names.
        approx_beyond: "expo" (default), "zero" or "carryforward".

    Returns:
        A copy of ``data`` sorted by ``time`` with ``surv`` filled past the
        last event.

    Raises:
        ValidationError: On missing columns or an unknown policy.
        DegenerateCurveError: If no row is uncensored.
    """
    policy = get_tail_policy(approx_beyond)
    for name, param in ((time, "time"), (event, "event"), (surv, "surv")):
        check_column_name(name, param)
    check_has_columns(data, [time, event, surv])
    check_numeric_column(data, time)
    check_numeric_column(data, event)

    frame = sort_by_time(data, time)
    filled, _ = extrapolate_tail(
        frame[time].to_numpy(dtype=np.float64),
        frame[event].to_numpy(dtype=np.float64),
        frame[surv].to_numpy(dtype=np.float64),
        policy,
    )
    return frame.assign(**{surv: filled})
