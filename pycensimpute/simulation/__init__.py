"""
Simulated datasets with a right-censored covariate.

Public API:
    simulate_censored_covariate(n, dist=..., ...) -> DataFrame
"""

from pycensimpute.simulation.solvers import simulate_censored_covariate
from pycensimpute.simulation._baseline import (
    BaselineHazard,
    ExponentialBaseline,
    WeibullBaseline,
    GompertzBaseline,
    get_baseline,
)

__all__ = [
    "simulate_censored_covariate",
    "BaselineHazard",
    "ExponentialBaseline",
    "WeibullBaseline",
    "GompertzBaseline",
    "get_baseline",
]
