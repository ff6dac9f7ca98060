"""
SurvivalDesign: immutable container for time-to-event data.

Wraps time, event indicator, optional covariates and optional hazard
ratios. Validates inputs at construction time; all downstream code
trusts clean data.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from pycensimpute.core.exceptions import DimensionError, ValidationError
from pycensimpute.core.validation import (
    check_array,
    check_finite,
    warn_negative,
)


@dataclass(frozen=True)
class SurvivalDesign:
    """Immutable survival data container.

    Parameters
    ----------
    time : NDArray
        Time to event or censoring.
    event : NDArray
        Event indicator: 1 = event observed, 0 = censored.
    X : NDArray or None
        Covariate matrix (n, p). None for Kaplan-Meier.
    hr : NDArray or None
        Per-subject hazard ratios. Only for the Breslow estimator.
    warnings : tuple of str
        Data-quality messages raised while building the design.
    """

    time: NDArray
    event: NDArray
    X: NDArray | None
    hr: NDArray | None
    warnings: tuple[str, ...] = ()

    @classmethod
    def for_survival(
        cls,
        time,
        event,
        X=None,
        *,
        hr=None,
    ) -> SurvivalDesign:
        """Create and validate survival data.

        Negative times are reported as a DataQualityWarning and kept.
        A non-binary event indicator is an error: the estimators have no
        meaning for it.

        Raises
        ------
        ValidationError
            If inputs are invalid.
        """
        time = check_array(time, "time").ravel()
        event = check_array(event, "event").ravel()
        check_finite(time, "time")
        check_finite(event, "event")

        n = len(time)

        if n == 0:
            raise ValidationError("time must have at least one observation")

        if len(event) != n:
            raise DimensionError(
                f"time and event must have the same length: "
                f"got {n} and {len(event)}"
            )

        unique_events = np.unique(event)
        if not np.all(np.isin(unique_events, [0.0, 1.0])):
            raise ValidationError(
                f"event must contain only 0 and 1, "
                f"got unique values: {unique_events}"
            )

        messages = []
        msg = warn_negative(time, "time")
        if msg:
            messages.append(msg)

        X_arr = None
        if X is not None:
            X_arr = check_array(X, "X")
            if X_arr.ndim == 1:
                X_arr = X_arr.reshape(-1, 1)
            if X_arr.ndim != 2:
                raise DimensionError(
                    f"X must be 1D or 2D, got {X_arr.ndim}D"
                )
            if X_arr.shape[0] != n:
                raise DimensionError(
                    f"X must have {n} rows to match time, "
                    f"got {X_arr.shape[0]}"
                )
            check_finite(X_arr, "X")

        hr_arr = None
        if hr is not None:
            hr_arr = check_array(hr, "hr").ravel()
            if len(hr_arr) != n:
                raise DimensionError(
                    f"hr must have {n} elements to match time, "
                    f"got {len(hr_arr)}"
                )
            check_finite(hr_arr, "hr")
            if np.any(hr_arr <= 0):
                raise ValidationError("hr must be strictly positive")

        return cls(
            time=time,
            event=event,
            X=X_arr,
            hr=hr_arr,
            warnings=tuple(messages),
        )

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def p(self) -> int | None:
        """Number of covariates (None if no covariates)."""
        return self.X.shape[1] if self.X is not None else None

    @property
    def n_events(self) -> int:
        """Number of observed events."""
        return int(np.sum(self.event))
