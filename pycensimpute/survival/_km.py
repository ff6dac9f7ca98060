"""
Kaplan-Meier product-limit estimator.

Follows R's survival::survfit(Surv(time, event) ~ 1):
- Product-limit survival estimate: S(t) = ∏(1 - d_j / n_j)
- Greenwood variance: Var(S(t)) = S(t)^2 * Σ(d_j / (n_j * (n_j - d_j)))
- Reported at every distinct observed time; censored-only times carry the
  survival of the preceding event time forward.

References:
    Kaplan, E. L., & Meier, P. (1958). Nonparametric estimation from
        incomplete observations. JASA, 53(282), 457-481.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pycensimpute.survival._common import KMParams


def kaplan_meier_fit(time: NDArray, event: NDArray) -> KMParams:
    """Compute the Kaplan-Meier curve.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).

    Returns
    -------
    KMParams
    """
    n_total = len(time)

    # Group rows by distinct time
    out_time, inverse, counts = np.unique(
        time, return_inverse=True, return_counts=True,
    )
    m = len(out_time)

    out_n_events = np.bincount(inverse, weights=event, minlength=m)
    out_n_censored = counts - out_n_events

    # At risk just before t_j: everyone whose time is >= t_j
    out_n_risk = n_total - np.concatenate(([0], np.cumsum(counts)[:-1]))
    out_n_risk = out_n_risk.astype(np.float64)

    survival = np.cumprod(1.0 - out_n_events / out_n_risk)

    # Avoid division by zero when n_j == d_j (all at risk die)
    denom = out_n_risk * (out_n_risk - out_n_events)
    denom = np.where(denom > 0, denom, np.inf)
    greenwood_sum = np.cumsum(out_n_events / denom)
    se = np.sqrt(survival ** 2 * greenwood_sum)

    return KMParams(
        time=out_time,
        survival=survival,
        n_risk=out_n_risk,
        n_events=out_n_events,
        n_censored=out_n_censored.astype(np.float64),
        se=se,
        n_observations=n_total,
        n_events_total=int(np.sum(event)),
    )
