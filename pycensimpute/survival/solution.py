"""
Solution wrappers for survival-model results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods. KMSolution satisfies the
SurvivalCurveModel protocol and CoxSolution the ProportionalHazardsModel
protocol, so both can be handed straight to the imputation engine.
"""

from __future__ import annotations

import numpy as np

from pycensimpute.core.result import Result
from pycensimpute.survival._common import BreslowParams, CoxParams, KMParams


class KMSolution:
    """Kaplan-Meier survival curve solution.

    Properties mirror R's survfit() output.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[KMParams]) -> None:
        self._result = _result

    @property
    def time(self):
        """Distinct observed times (event or censored)."""
        return self._result.params.time

    @property
    def survival(self):
        """S(t) at each time."""
        return self._result.params.survival

    @property
    def n_risk(self):
        """Number at risk just before each time."""
        return self._result.params.n_risk

    @property
    def n_events(self):
        """Number of events at each time."""
        return self._result.params.n_events

    @property
    def n_censored(self):
        """Number censored at each time."""
        return self._result.params.n_censored

    @property
    def se(self):
        """Greenwood standard error of S(t)."""
        return self._result.params.se

    @property
    def event_times(self):
        """Times at which at least one event occurred."""
        return self.time[self.n_events > 0]

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    @property
    def median_survival(self) -> float | None:
        """Median survival time (smallest t where S(t) <= 0.5)."""
        idx = self.survival <= 0.5
        if not idx.any():
            return None
        return float(self.time[idx][0])

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """R-style summary of Kaplan-Meier fit."""
        lines = []
        lines.append("Call: kaplan_meier()")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"events={self.n_events_total}"
        )
        median = self.median_survival
        median_str = f"{median:.4g}" if median is not None else "NA"
        lines.append(f"  median survival = {median_str}")
        lines.append("")
        lines.append(
            f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
            f"{'n.censor':>8s}  {'survival':>10s}  {'std.err':>10s}"
        )

        m = len(self.time)
        show = min(m, 20)
        for i in range(show):
            lines.append(
                f"  {self.time[i]:8.4g}  {self.n_risk[i]:8.0f}  "
                f"{self.n_events[i]:8.0f}  {self.n_censored[i]:8.0f}  "
                f"{self.survival[i]:10.6f}  {self.se[i]:10.6f}"
            )
        if m > 20:
            lines.append(f"  ... ({m - 20} more rows)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"KMSolution(n={self.n_observations}, "
            f"events={self.n_events_total}, "
            f"median={self.median_survival})"
        )


class CoxSolution:
    """Cox proportional hazards model solution.

    Properties mirror R's coxph() output.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[CoxParams]) -> None:
        self._result = _result

    @property
    def coefficients(self):
        """Log hazard ratios (β)."""
        return self._result.params.coefficients

    @property
    def hazard_ratios(self):
        """exp(β)."""
        return self._result.params.hazard_ratios

    @property
    def standard_errors(self):
        return self._result.params.standard_errors

    @property
    def z_statistics(self):
        return self._result.params.z_statistics

    @property
    def p_values(self):
        return self._result.params.p_values

    @property
    def loglik(self) -> tuple[float, float]:
        """(null log-likelihood, model log-likelihood)."""
        return self._result.params.loglik

    @property
    def concordance(self) -> float:
        return self._result.params.concordance

    @property
    def n_events(self) -> int:
        return self._result.params.n_events

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_iter(self) -> int:
        return self._result.params.n_iter

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def ties(self) -> str:
        return self._result.params.ties

    @property
    def names(self) -> tuple[str, ...]:
        return self._result.params.names

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def linear_predictor(self, X) -> np.ndarray:
        """η = X @ β for new covariate rows."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        return X @ self.coefficients

    def summary(self) -> str:
        """R-style summary of Cox PH fit."""
        lines = []
        lines.append(f"Call: coxph(ties='{self.ties}')")
        lines.append("")
        lines.append(
            f"  n={self.n_observations}, "
            f"number of events={self.n_events}"
        )
        lines.append("")
        lines.append(
            f"  {'':>10s}  {'coef':>10s}  {'exp(coef)':>10s}  "
            f"{'se(coef)':>10s}  {'z':>8s}  {'Pr(>|z|)':>10s}"
        )
        for name, b, hr, se, z, pv in zip(
            self.names, self.coefficients, self.hazard_ratios,
            self.standard_errors, self.z_statistics, self.p_values,
        ):
            lines.append(
                f"  {name:>10s}  {b:10.6f}  {hr:10.6f}  "
                f"{se:10.6f}  {z:8.3f}  {pv:10.4g}"
            )
        lines.append("")
        null_ll, model_ll = self.loglik
        lines.append(
            f"  Concordance= {self.concordance:.3f}  "
            f"Likelihood ratio test= {2 * (model_ll - null_ll):.2f}"
        )
        if not self.converged:
            lines.append(f"  WARNING: did not converge in {self.n_iter} iterations")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CoxSolution(n={self.n_observations}, "
            f"events={self.n_events}, "
            f"coef={np.round(self.coefficients, 4).tolist()})"
        )


class BreslowSolution:
    """Breslow baseline hazard / survival at distinct event times."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[BreslowParams]) -> None:
        self._result = _result

    @property
    def time(self):
        """Distinct event times."""
        return self._result.params.time

    @property
    def n_events(self):
        return self._result.params.n_events

    @property
    def cumulative_hazard(self):
        """Baseline cumulative hazard H0(t)."""
        return self._result.params.cumulative_hazard

    @property
    def baseline_survival(self):
        """Baseline survival S0(t) = exp(-H0(t))."""
        return self._result.params.baseline_survival

    @property
    def survival(self):
        """Alias of baseline_survival, so the baseline reads as a curve."""
        return self.baseline_survival

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def survival_for(self, hr: float):
        """Covariate-specific curve S0(t) ** hr."""
        return self.baseline_survival ** hr

    def summary(self) -> str:
        lines = ["Call: breslow_estimator()", ""]
        lines.append(f"  n={self.n_observations}, event times={len(self.time)}")
        lines.append("")
        lines.append(f"  {'time':>8s}  {'basehaz':>10s}  {'basesurv':>10s}")
        show = min(len(self.time), 20)
        for i in range(show):
            lines.append(
                f"  {self.time[i]:8.4g}  {self.cumulative_hazard[i]:10.6f}  "
                f"{self.baseline_survival[i]:10.6f}"
            )
        if len(self.time) > 20:
            lines.append(f"  ... ({len(self.time) - 20} more rows)")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"BreslowSolution(n={self.n_observations}, "
            f"event_times={len(self.time)})"
        )
