"""
Survival-model collaborators.

Public API:
    kaplan_meier(time, event) -> KMSolution
    coxph(time, event, X) -> CoxSolution
    breslow_estimator(time, event, hr) -> BreslowSolution
"""

from pycensimpute.survival.solvers import breslow_estimator, coxph, kaplan_meier
from pycensimpute.survival.solution import BreslowSolution, CoxSolution, KMSolution
from pycensimpute.survival.design import SurvivalDesign

__all__ = [
    "kaplan_meier",
    "coxph",
    "breslow_estimator",
    "KMSolution",
    "CoxSolution",
    "BreslowSolution",
    "SurvivalDesign",
]
