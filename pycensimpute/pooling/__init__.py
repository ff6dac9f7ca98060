"""
Rubin's rules for multiply-imputed analyses.

Public API:
    pool(datasets, formula) -> PooledSolution
    pool_estimates(estimates, variances, names) -> PooledSolution
"""

from pycensimpute.pooling.solvers import pool, pool_estimates
from pycensimpute.pooling.solution import PooledSolution
from pycensimpute.pooling._common import PooledParams

__all__ = [
    "pool",
    "pool_estimates",
    "PooledSolution",
    "PooledParams",
]
