"""
Survival beyond the last observed event.

The empirical curve says nothing about S(t) for t past the largest
uncensored time. Three approximations are available, selected by name:

    "zero"          Efron (1967): S drops to 0 right after the last event.
    "carryforward"  Gill (1980): S stays at its value at the last event.
    "expo"          Brown, Hollander & Korwar (1974): log-linear decay
                    through the origin, S(t) = S(t_max) ** (t / t_max),
                    i.e. exp(t * log S(t_max) / t_max).

The exponential form is evaluated as a power so that t = t_max
reproduces S(t_max) exactly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from pycensimpute.core.exceptions import DegenerateCurveError, ValidationError


class TailApproximation(ABC):
    """
    Base class for extrapolating survival past the last event.

    Subclasses map the times beyond the last event, together with the
    last event's time and survival, to survival values.
    """

    name: str = ""
    reference: str = ""

    @abstractmethod
    def survival_beyond(
        self,
        t_beyond: NDArray,
        t_last: float,
        s_last: float,
    ) -> NDArray:
        """Survival at each time in ``t_beyond`` (all > ``t_last``)."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ZeroTail(TailApproximation):
    """Survival is zero past the last event."""

    name = "zero"
    reference = "Efron (1967)"

    def survival_beyond(
        self,
        t_beyond: NDArray,
        t_last: float,
        s_last: float,
    ) -> NDArray:
        return np.zeros(len(t_beyond), dtype=np.float64)


class CarryForwardTail(TailApproximation):
    """Survival stays at the last event's value."""

    name = "carryforward"
    reference = "Gill (1980)"

    def survival_beyond(
        self,
        t_beyond: NDArray,
        t_last: float,
        s_last: float,
    ) -> NDArray:
        return np.full(len(t_beyond), s_last, dtype=np.float64)


class ExponentialTail(TailApproximation):
    """Exponential decay anchored at the origin and the last event."""

    name = "expo"
    reference = "Brown, Hollander & Korwar (1974)"

    def survival_beyond(
        self,
        t_beyond: NDArray,
        t_last: float,
        s_last: float,
    ) -> NDArray:
        if t_last == 0:
            raise DegenerateCurveError(
                "exponential tail needs the last event time to be non-zero",
                at_time=0.0,
            )
        return np.power(s_last, np.asarray(t_beyond, dtype=np.float64) / t_last)


TAIL_POLICIES: dict[str, type[TailApproximation]] = {
    "zero": ZeroTail,
    "carryforward": CarryForwardTail,
    "expo": ExponentialTail,
}


def get_tail_policy(name: str) -> TailApproximation:
    """
    Factory for tail approximations.

    Parameters
    ----------
    name : str
        One of "zero", "carryforward", "expo".

    Raises
    ------
    ValidationError
        For any other name; there is no fallback policy.
    """
    try:
        return TAIL_POLICIES[name]()
    except (KeyError, TypeError):
        raise ValidationError(
            f"approx_beyond must be one of {sorted(TAIL_POLICIES)}, got {name!r}"
        ) from None


def extrapolate_tail(
    time: NDArray,
    event: NDArray,
    surv: NDArray,
    policy: TailApproximation,
) -> tuple[NDArray, NDArray]:
    """
    Assign survival to every row past the last uncensored time.

    Parameters
    ----------
    time, event, surv : NDArray
        Columns of the time-sorted data. ``surv`` may hold NaN.
    policy : TailApproximation

    Returns
    -------
    (surv, beyond)
        A new survival array with the tail rows filled, and the boolean
        mask of those rows.

    Raises
    ------
    DegenerateCurveError
        If there is no uncensored row to anchor the tail.
    """
    uncens = np.flatnonzero(event == 1)
    if uncens.size == 0:
        raise DegenerateCurveError(
            "no uncensored observations: the survival curve has no baseline"
        )

    last = uncens[-1]
    t_last = float(time[last])
    s_last = float(surv[last])

    beyond = time > np.max(time[uncens])
    out = surv.copy()
    if np.any(beyond):
        out[beyond] = policy.survival_beyond(time[beyond], t_last, s_last)
    return out, beyond
