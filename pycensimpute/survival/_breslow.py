"""
Breslow estimator of the baseline cumulative hazard.

Given per-subject hazard ratios hr_i = exp(x_i @ β) from a fitted Cox
model, the baseline cumulative hazard at distinct event times u_k is

    H0(u_k) = Σ_{j ≤ k} d_j / Σ_{i: t_i ≥ u_j} hr_i

and the baseline survival is S0(t) = exp(-H0(t)). A subject with hazard
ratio hr then has S(t | x) = S0(t) ** hr.

References:
    Breslow, N. E. (1972). Discussion of "Regression models and
        life-tables" by D. R. Cox. JRSS-B, 34(2), 216-217.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pycensimpute.survival._common import BreslowParams


def breslow_fit(time: NDArray, event: NDArray, hr: NDArray) -> BreslowParams:
    """Compute the Breslow baseline at distinct event times.

    Parameters
    ----------
    time : NDArray
        (n,) time to event or censoring.
    event : NDArray
        (n,) event indicator (1=event, 0=censored).
    hr : NDArray
        (n,) hazard ratio of each subject.

    Returns
    -------
    BreslowParams
    """
    order = np.argsort(time, kind="mergesort")
    t_sorted = time[order]
    hr_sorted = hr[order]

    uniq, first, group = np.unique(
        t_sorted, return_index=True, return_inverse=True,
    )
    d = np.bincount(group, weights=event[order], minlength=len(uniq))

    # Σ hr over subjects still at risk at each distinct time
    risk_weight = np.cumsum(hr_sorted[::-1])[::-1][first]

    has_event = d > 0
    increments = d[has_event] / risk_weight[has_event]
    cumulative_hazard = np.cumsum(increments)

    return BreslowParams(
        time=uniq[has_event],
        n_events=d[has_event],
        risk_weight=risk_weight[has_event],
        cumulative_hazard=cumulative_hazard,
        baseline_survival=np.exp(-cumulative_hazard),
        n_observations=len(time),
    )
