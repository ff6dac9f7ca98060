"""
Parametric baseline hazards for simulating a censored covariate.

Under proportional hazards, X given z has cumulative hazard
H(x | z) = H0(x) exp(η), η = β z. With U ~ Uniform(0, 1),

    X = H0⁻¹(-log(U) / exp(η))

has that distribution (inverse-transform sampling). Each baseline
provides H0⁻¹:

    exponential   H0(x) = λ x                 H0⁻¹(h) = h / λ
    weibull       H0(x) = λ x^k               H0⁻¹(h) = (h / λ)^(1/k)
    gompertz      H0(x) = λ/γ (exp(γ x) - 1)  H0⁻¹(h) = log(1 + γ h / λ) / γ
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray

from pycensimpute.core.exceptions import ValidationError


class BaselineHazard(ABC):
    """Baseline hazard with a closed-form inverse cumulative hazard."""

    name: str = ""

    def __init__(self, rate: float, shape: float = 1.0):
        if not np.isfinite(rate) or rate <= 0:
            raise ValidationError(f"rate must be positive, got {rate}")
        if not np.isfinite(shape) or shape <= 0:
            raise ValidationError(f"shape must be positive, got {shape}")
        self.rate = float(rate)
        self.shape = float(shape)

    @abstractmethod
    def inverse_cumulative_hazard(self, h: NDArray) -> NDArray:
        """H0⁻¹ evaluated elementwise at h >= 0."""
        pass

    def sample(self, linear_predictor: NDArray, rng: np.random.Generator) -> NDArray:
        """One draw of X per entry of the linear predictor."""
        # (0, 1], so -log(u) is finite
        u = 1.0 - rng.uniform(size=len(linear_predictor))
        return self.inverse_cumulative_hazard(-np.log(u) / np.exp(linear_predictor))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rate={self.rate}, shape={self.shape})"


class ExponentialBaseline(BaselineHazard):
    name = "exponential"

    def inverse_cumulative_hazard(self, h):
        return h / self.rate


class WeibullBaseline(BaselineHazard):
    name = "weibull"

    def inverse_cumulative_hazard(self, h):
        return (h / self.rate) ** (1.0 / self.shape)


class GompertzBaseline(BaselineHazard):
    name = "gompertz"

    def inverse_cumulative_hazard(self, h):
        return np.log1p(self.shape * h / self.rate) / self.shape


BASELINES: dict[str, type[BaselineHazard]] = {
    "exponential": ExponentialBaseline,
    "weibull": WeibullBaseline,
    "gompertz": GompertzBaseline,
}


def get_baseline(dist: str, rate: float, shape: float = 1.0) -> BaselineHazard:
    """
    Factory for baseline hazards.

    Raises:
        ValidationError: For an unknown ``dist`` or non-positive parameters.
    """
    try:
        cls = BASELINES[dist]
    except (KeyError, TypeError):
        raise ValidationError(
            f"dist must be one of {sorted(BASELINES)}, got {dist!r}"
        ) from None
    return cls(rate, shape)
