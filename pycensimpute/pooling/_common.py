"""
Common data structures for pooling.

PooledParams is the parameter payload wrapped by Result[P] and exposed
through PooledSolution.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PooledParams:
    """
    Parameter payload for Rubin's rules.

    Matches the layout of R's mice::pool():
    - estimates: per-dataset point estimates, shape (M, k)
    - within_variances: per-dataset sampling variances, shape (M, k)
    - qbar: pooled point estimate, mean over datasets
    - ubar: within-imputation variance W, mean of the variances
    - b: between-imputation variance B (sample variance, 0 when M = 1)
    - t: total variance T = W + (1 + 1/M) B
    - df: Rubin (1987) degrees of freedom (inf when B = 0)
    - riv: relative increase in variance (1 + 1/M) B / W
    - fmi: fraction of missing information (1 + 1/M) B / T
    """
    names: tuple[str, ...]
    estimates: NDArray[np.floating[Any]]
    within_variances: NDArray[np.floating[Any]]
    qbar: NDArray[np.floating[Any]]
    ubar: NDArray[np.floating[Any]]
    b: NDArray[np.floating[Any]]
    t: NDArray[np.floating[Any]]
    df: NDArray[np.floating[Any]]
    riv: NDArray[np.floating[Any]]
    fmi: NDArray[np.floating[Any]]
    M: int
