"""
Rubin's (1987) rules for combining M completed-data analyses.

For each coefficient k, with estimates Q_m and variances U_m:

    Q̄ = (1/M) Σ Q_m
    W  = (1/M) Σ U_m
    B  = 1/(M-1) Σ (Q_m - Q̄)²          (0 when M = 1)
    T  = W + (1 + 1/M) B

    r  = (1 + 1/M) B / W
    ν  = (M - 1) (1 + 1/r)²            (inf when B = 0)
    λ  = (1 + 1/M) B / T
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


def rubin_combine(estimates: NDArray, variances: NDArray) -> dict[str, NDArray]:
    """
    Combine per-dataset estimates and variances column by column.

    Args:
        estimates: (M, k) point estimates.
        variances: (M, k) within-dataset sampling variances.

    Returns:
        dict with keys qbar, ubar, b, t, df, riv, fmi, each of shape (k,).
    """
    M = estimates.shape[0]

    qbar = np.mean(estimates, axis=0)
    ubar = np.mean(variances, axis=0)
    if M > 1:
        b = np.var(estimates, axis=0, ddof=1)
    else:
        b = np.zeros_like(qbar)

    inflation = 1.0 + 1.0 / M
    t = ubar + inflation * b

    with np.errstate(divide='ignore', invalid='ignore'):
        riv = inflation * b / ubar
        fmi = np.where(t > 0, inflation * b / t, np.nan)
        df = np.where(
            b > 0,
            (M - 1) * (1.0 + 1.0 / riv) ** 2,
            np.inf,
        )

    return {
        'qbar': qbar,
        'ubar': ubar,
        'b': b,
        't': t,
        'df': df,
        'riv': riv,
        'fmi': fmi,
    }
