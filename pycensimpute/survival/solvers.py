"""
Public API for the survival-model collaborators.

    kaplan_meier(time, event) → KMSolution
    coxph(time, event, X) → CoxSolution
    breslow_estimator(time, event, hr) → BreslowSolution

Each function validates inputs, creates a SurvivalDesign, runs the
estimator, and wraps the Result in a Solution.
"""

from __future__ import annotations

import warnings
from typing import Literal

from pycensimpute.core.exceptions import ValidationError
from pycensimpute.core.result import Result
from pycensimpute.core.compute.timing import Timer
from pycensimpute.survival.design import SurvivalDesign
from pycensimpute.survival._km import kaplan_meier_fit
from pycensimpute.survival._cox import cox_fit
from pycensimpute.survival._breslow import breslow_fit
from pycensimpute.survival.solution import BreslowSolution, CoxSolution, KMSolution


def kaplan_meier(time, event) -> KMSolution:
    """Kaplan-Meier survival curve estimation.

    Follows R's survival::survfit(Surv(time, event) ~ 1), reporting the
    curve at every distinct observed time.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).

    Returns
    -------
    KMSolution
    """
    design = SurvivalDesign.for_survival(time, event)

    timer = Timer()
    timer.start()

    params = kaplan_meier_fit(design.time, design.event)

    timer.stop()

    result = Result(
        params=params,
        info={"method": "Kaplan-Meier"},
        timing=timer.result(),
        backend_name="cpu_km",
        warnings=design.warnings,
    )

    return KMSolution(_result=result)


def coxph(
    time,
    event,
    X,
    *,
    names=None,
    ties: Literal["efron", "breslow"] = "efron",
    tol: float = 1e-9,
    max_iter: int = 20,
) -> CoxSolution:
    """Cox proportional hazards model.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    X : array-like
        Covariate matrix (n, p). No intercept column; the Cox model has none.
    names : sequence of str or None
        Covariate labels (default x1..xp).
    ties : str
        Method for handling tied event times: "efron" (default) or "breslow".
    tol : float
        Convergence tolerance for Newton-Raphson.
    max_iter : int
        Maximum Newton-Raphson iterations.

    Returns
    -------
    CoxSolution
    """
    design = SurvivalDesign.for_survival(time, event, X)

    if design.X is None:
        raise ValidationError("X (covariates) is required for coxph()")

    if ties not in ("efron", "breslow"):
        raise ValidationError(
            f"ties must be 'efron' or 'breslow', got '{ties}'"
        )

    if names is not None:
        names = tuple(str(nm) for nm in names)
        if len(names) != design.p:
            raise ValidationError(
                f"names must have {design.p} entries to match X, got {len(names)}"
            )

    timer = Timer()
    timer.start()

    params = cox_fit(
        design.time, design.event, design.X,
        ties=ties,
        tol=tol,
        max_iter=max_iter,
        names=names or (),
    )

    timer.stop()

    warnings_list = list(design.warnings)
    if not params.converged:
        msg = f"Newton-Raphson did not converge in {max_iter} iterations"
        warnings.warn(msg, RuntimeWarning, stacklevel=2)
        warnings_list.append(msg)

    result = Result(
        params=params,
        info={
            "method": "Cox PH",
            "ties": ties,
            "n_iter": params.n_iter,
        },
        timing=timer.result(),
        backend_name="cpu_cox",
        warnings=tuple(warnings_list),
    )

    return CoxSolution(_result=result)


def breslow_estimator(time, event, hr) -> BreslowSolution:
    """Breslow baseline survival from per-subject hazard ratios.

    Parameters
    ----------
    time : array-like
        Time to event or censoring.
    event : array-like
        Event indicator (1=event, 0=censored).
    hr : array-like
        Hazard ratio exp(x_i @ β) of each subject.

    Returns
    -------
    BreslowSolution
        Baseline cumulative hazard and survival at distinct event times.
    """
    design = SurvivalDesign.for_survival(time, event, hr=hr)

    timer = Timer()
    timer.start()

    params = breslow_fit(design.time, design.event, design.hr)

    timer.stop()

    result = Result(
        params=params,
        info={"method": "Breslow"},
        timing=timer.result(),
        backend_name="cpu_breslow",
        warnings=design.warnings,
    )

    return BreslowSolution(_result=result)
