"""
Core protocols for pycensimpute.

These define structural interfaces for the fitted survival models the
imputation engine consumes. We use Protocol (structural typing) rather than
ABC (nominal typing) so that models fitted elsewhere can be passed in
through a thin adapter, while the library's own solutions satisfy the
protocols without inheriting from anything.

Design Principles:
    - Minimal contracts: prescribe only what the imputation engine reads
    - runtime_checkable so the engine can dispatch with isinstance()
"""

from typing import Protocol, runtime_checkable

from numpy.typing import NDArray


@runtime_checkable
class SurvivalCurveModel(Protocol):
    """
    A fitted marginal survival curve (e.g. Kaplan-Meier).

    Consumed by the unadjusted imputation path, which joins the
    (time, survival) pairs onto the data by exact time match.
    """

    @property
    def time(self) -> NDArray:
        """Ordered distinct times at which the curve is reported."""
        ...

    @property
    def survival(self) -> NDArray:
        """S(t) at each reported time, non-increasing."""
        ...


@runtime_checkable
class ProportionalHazardsModel(Protocol):
    """
    A fitted proportional-hazards model (e.g. Cox).

    Consumed by the covariate-adjusted imputation path, which only needs
    the coefficient vector of the linear predictor; the baseline curve is
    re-estimated from the data with the Breslow estimator.
    """

    @property
    def coefficients(self) -> NDArray:
        """(p,) log hazard ratios, one per additional covariate."""
        ...
