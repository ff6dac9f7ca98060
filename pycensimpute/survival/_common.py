"""
Parameter payloads for survival-model results.

Each dataclass is a frozen payload carried inside a Result[P] envelope.
"""

from __future__ import annotations

from dataclasses import dataclass

from numpy.typing import NDArray


@dataclass(frozen=True)
class KMParams:
    """Kaplan-Meier survival curve parameters.

    Reported at every distinct observed time, event or censored, the way
    R's survival::survfit() reports them.
    """

    time: NDArray                # (m,) distinct observed times
    survival: NDArray            # (m,) S(t) at each time
    n_risk: NDArray              # (m,) number at risk just before each time
    n_events: NDArray            # (m,) events at each time
    n_censored: NDArray          # (m,) censored at each time
    se: NDArray                  # (m,) Greenwood standard error
    n_observations: int
    n_events_total: int


@dataclass(frozen=True)
class CoxParams:
    """Cox proportional hazards model parameters."""

    coefficients: NDArray        # (p,) log hazard ratios
    hazard_ratios: NDArray       # (p,) exp(coef)
    standard_errors: NDArray     # (p,) from observed information matrix
    z_statistics: NDArray        # (p,) coef / se
    p_values: NDArray            # (p,) two-sided Wald test
    loglik: tuple[float, float]  # (null log-lik, model log-lik)
    concordance: float           # Harrell's C-statistic
    n_events: int
    n_observations: int
    n_iter: int
    converged: bool
    ties: str                    # "efron" or "breslow"
    names: tuple[str, ...]       # covariate labels


@dataclass(frozen=True)
class BreslowParams:
    """Breslow baseline estimate at distinct event times."""

    time: NDArray                # (k,) distinct event times
    n_events: NDArray            # (k,) events at each time
    risk_weight: NDArray         # (k,) Σ hr over the risk set
    cumulative_hazard: NDArray   # (k,) H0(t)
    baseline_survival: NDArray   # (k,) exp(-H0(t))
    n_observations: int
