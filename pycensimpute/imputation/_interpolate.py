"""
Survival at censored times that the fitted curve does not report.

A Breslow baseline is only reported at event times, so a censored time
strictly between two events has no curve value. It gets the mean of the
survival at the nearest event on each side:

    S(c) = (S(t_before) + S(t_after)) / 2

where t_before is the largest event time <= c and t_after the smallest
event time > c. If c coincides with an event time (to 8 decimals), the
survival of the last such event row in time order is used instead.

A censored time that precedes every event has no t_before. That case is
an error unless the caller opts into anchoring at the origin, S(0) = 1.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from pycensimpute.core.exceptions import DegenerateCurveError

BEFORE_FIRST_EVENT = ("error", "origin")


def interpolate_at(
    at_time: float,
    time: NDArray,
    event: NDArray,
    surv: NDArray,
    before_first_event: str = "error",
) -> float:
    """
    Survival estimate at a single time.

    Parameters
    ----------
    at_time : float
        Time whose survival is undefined.
    time, event, surv : NDArray
        Columns of the data in ascending time order. ``surv`` may hold NaN
        at non-event rows.
    before_first_event : str
        "error" (default) or "origin".

    Returns
    -------
    float

    Raises
    ------
    DegenerateCurveError
        If there is no event on one side of ``at_time``.
    """
    is_event = event == 1

    same_time = np.flatnonzero(
        (np.round(time - at_time, 8) == 0) & is_event & ~np.isnan(surv)
    )
    if same_time.size > 0:
        return float(surv[same_time[-1]])

    before = np.flatnonzero((time <= at_time) & is_event)
    after = np.flatnonzero((time > at_time) & is_event)

    if after.size == 0:
        raise DegenerateCurveError(
            f"no event time after {at_time}; survival there needs a tail approximation",
            at_time=at_time,
        )

    if before.size > 0:
        surv_before = surv[before[-1]]
    elif before_first_event == "origin":
        surv_before = 1.0
    else:
        raise DegenerateCurveError(
            f"censored time {at_time} precedes every event time "
            f"(first event at {time[after[0]]}); survival is undefined there. "
            f"Pass before_first_event='origin' to anchor the curve at S(0) = 1.",
            at_time=at_time,
        )

    value = (surv_before + surv[after[0]]) / 2
    if np.isnan(value):
        raise DegenerateCurveError(
            f"an event neighbouring time {at_time} has no survival value",
            at_time=at_time,
        )
    return float(value)


def fill_gaps(
    time: NDArray,
    event: NDArray,
    surv: NDArray,
    before_first_event: str = "error",
) -> tuple[NDArray, NDArray]:
    """
    Fill undefined survival at rows within the observed event range.

    Rows past the last event are left for the tail approximation. Each
    distinct gap time is interpolated once, so tied rows share one value.

    Returns
    -------
    (surv, filled)
        A new survival array and the boolean mask of rows that were filled.
    """
    uncens = event == 1
    if not np.any(uncens):
        raise DegenerateCurveError(
            "no uncensored observations: the survival curve has no baseline"
        )

    gaps = np.isnan(surv) & (time <= np.max(time[uncens]))
    out = surv.copy()
    for t in np.unique(time[gaps]):
        out[gaps & (time == t)] = interpolate_at(
            t, time, event, surv, before_first_event,
        )
    return out, gaps
