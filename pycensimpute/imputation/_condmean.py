"""
Conditional-mean imputation of a right-censored covariate.

For a censored subject with observed value C and covariates z,

    E[X | X > C, z] = C + ∫_C^∞ S(u | z) du / S(C | z)

The integral is discretized over the distinct rows of the time-sorted
data, t_1 <= t_2 <= ... <= t_m, with the trapezoid rule:

    num = Σ_{i: t_i > C} (S(t_{i+1} | z) + S(t_i | z)) (t_{i+1} - t_i)
    imp = num / (2 S(C | z)) + C

Under a Cox model S(t | z) = S0(t) ** exp(β·z). Only intervals whose left
endpoint lies strictly beyond C enter the sum.

The engine is a chain of pure steps, each returning a new frame:

    survival_table → join_curve → sort_by_time → fill (interpolate, tail)
    → distinct_curve → conditional_means
"""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from pycensimpute.core.exceptions import DegenerateCurveError
from pycensimpute.imputation._common import Adjustment


def survival_table(
    frame: pd.DataFrame,
    obs: str,
    delta: str,
    adjustment: Adjustment,
    surv_col: str,
) -> pd.DataFrame:
    """Working curve as a two-column table keyed by distinct time."""
    time, surv = adjustment.survival_table(frame, obs, delta)
    table = pd.DataFrame({obs: time, surv_col: surv})
    # One row per time; keep the last duplicate as the curve's value
    return table.drop_duplicates(subset=obs, keep="last")


def join_curve(
    frame: pd.DataFrame,
    table: pd.DataFrame,
    obs: str,
    surv_col: str,
) -> pd.DataFrame:
    """Left join by exact time; rows without a curve time get NaN.

    The lookup goes through a float-keyed Series so that the caller's
    index and column dtypes survive unchanged.
    """
    lookup = pd.Series(table[surv_col].to_numpy(), index=table[obs].to_numpy())
    surv = frame[obs].astype(np.float64).map(lookup)
    return frame.assign(**{surv_col: surv.to_numpy(dtype=np.float64)})


def sort_by_time(frame: pd.DataFrame, obs: str) -> pd.DataFrame:
    """Stable ascending sort; tied rows keep their input order."""
    return frame.sort_values(obs, kind="mergesort")


def distinct_curve(
    frame: pd.DataFrame,
    obs: str,
    delta: str,
    covariates: tuple[str, ...],
    surv_col: str,
) -> pd.DataFrame:
    """Distinct (time, event, covariates, survival) rows in time order."""
    columns = [obs, delta, *covariates, surv_col]
    return frame[columns].drop_duplicates().reset_index(drop=True)


def conditional_means(
    censored_time: NDArray,
    censored_surv: NDArray,
    censored_hr: NDArray,
    curve_time: NDArray,
    curve_surv: NDArray,
    adjustment: Adjustment,
) -> tuple[NDArray, int]:
    """
    Conditional mean for each censored subject.

    Subjects sharing a hazard ratio share one pass over the curve: the
    trapezoid areas are accumulated from the right once, and each subject
    reads the suffix sum starting at the first interval whose left
    endpoint exceeds its censored time.

    Returns
    -------
    (imp, n_zero_denominator)
        Imputed values, and the number of subjects whose S(C | z) is 0
        with nothing left to integrate; those are imputed as C.

    Raises
    ------
    DegenerateCurveError
        If S(C | z) is 0 while survival mass remains beyond C.
    """
    imp = np.empty(len(censored_time), dtype=np.float64)
    n_zero = 0

    gaps = np.diff(curve_time)
    left = curve_time[:-1]

    hr_values, group = np.unique(censored_hr, return_inverse=True)
    for k, hr in enumerate(hr_values):
        rows = np.flatnonzero(group == k)

        s = adjustment.scale(curve_surv, hr)
        area = (s[1:] + s[:-1]) * gaps
        tail_sum = np.concatenate((np.cumsum(area[::-1])[::-1], [0.0]))

        c = censored_time[rows]
        start = np.searchsorted(left, c, side="right")
        num = tail_sum[start]
        denom = adjustment.scale(censored_surv[rows], hr)

        zero = denom == 0
        if np.any(zero & (num != 0)):
            bad = c[zero & (num != 0)][0]
            raise DegenerateCurveError(
                f"survival at censored time {bad} is 0 but survival mass "
                f"remains beyond it; the curve is not non-increasing",
                at_time=float(bad),
            )

        with np.errstate(divide="ignore", invalid="ignore"):
            value = 0.5 * (num / denom) + c
        imp[rows] = np.where(zero, c, value)
        n_zero += int(np.sum(zero))

    return imp, n_zero
