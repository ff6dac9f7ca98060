"""
Conditional-mean imputation of a right-censored covariate.

Public API:
    condl_mean_impute(fit, obs, delta, addl_covar, data=...) -> ImputationSolution
    multiple_impute(data, obs, delta, addl_covar, M=...) -> MultipleImputationSolution
    impute_censored_surv(at_time, time, event, surv, data) -> float
    extrapolate_survival(data, time, event, surv) -> DataFrame
"""

from pycensimpute.imputation.solvers import (
    condl_mean_impute,
    extrapolate_survival,
    impute_censored_surv,
    multiple_impute,
)
from pycensimpute.imputation.solution import ImputationSolution, MultipleImputationSolution
from pycensimpute.imputation.design import ImputationDesign, MultipleImputationDesign
from pycensimpute.imputation._extrapolate import (
    TailApproximation,
    ZeroTail,
    CarryForwardTail,
    ExponentialTail,
    get_tail_policy,
)

__all__ = [
    "condl_mean_impute",
    "multiple_impute",
    "impute_censored_surv",
    "extrapolate_survival",
    "ImputationSolution",
    "MultipleImputationSolution",
    "ImputationDesign",
    "MultipleImputationDesign",
    "TailApproximation",
    "ZeroTail",
    "CarryForwardTail",
    "ExponentialTail",
    "get_tail_policy",
]
