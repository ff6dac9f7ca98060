"""
Synthetic data with a right-censored covariate.
"""

from __future__ import annotations

from typing import Literal, Sequence

import numpy as np
import pandas as pd

from pycensimpute.core.exceptions import ValidationError
from pycensimpute.simulation._baseline import get_baseline


def simulate_censored_covariate(
    n: int,
    *,
    dist: Literal["exponential", "weibull", "gompertz"] = "exponential",
    rate: float = 5.0,
    shape: float = 1.0,
    log_hr: float = -2.0,
    z_prob: float = 0.5,
    censoring_rate: float = 4.0,
    beta: Sequence[float] = (1.0, 1.0, 0.25),
    noise_sd: float = 1.0,
    seed: int | None = None,
) -> pd.DataFrame:
    """
    Simulate a covariate X subject to random right censoring.

    Z ~ Bernoulli(z_prob); X | Z follows a proportional-hazards model with
    the chosen baseline and log hazard ratio ``log_hr`` for Z; C is
    independent Exponential(censoring_rate); Y = β0 + β1 X + β2 Z + ε with
    ε ~ N(0, noise_sd²).

    Args:
        n: Number of subjects.
        dist: Baseline hazard of X.
        rate: Baseline rate λ.
        shape: Weibull shape k, or Gompertz γ. Ignored for "exponential".
        log_hr: Log hazard ratio of Z on X.
        z_prob: P(Z = 1).
        censoring_rate: Rate of the exponential censoring time.
        beta: (β0, β1, β2) of the outcome model.
        noise_sd: Standard deviation of ε.
        seed: Seed for numpy.random.default_rng.

    Returns:
        DataFrame with columns x, z, c, w = min(x, c), delta = 1[x <= c]
        and y.

    Example:
        >>> df = simulate_censored_covariate(1000, seed=1)
        >>> df["delta"].mean()   # share uncensored
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
        raise ValidationError(f"n must be a positive integer, got {n!r}")
    if not 0 <= z_prob <= 1:
        raise ValidationError(f"z_prob must be in [0, 1], got {z_prob}")
    if not np.isfinite(censoring_rate) or censoring_rate <= 0:
        raise ValidationError(f"censoring_rate must be positive, got {censoring_rate}")
    if not np.isfinite(noise_sd) or noise_sd < 0:
        raise ValidationError(f"noise_sd must be non-negative, got {noise_sd}")
    beta = np.asarray(beta, dtype=np.float64)
    if beta.shape != (3,):
        raise ValidationError(f"beta must hold (β0, β1, β2), got {beta.tolist()}")

    baseline = get_baseline(dist, rate, shape)
    rng = np.random.default_rng(seed)

    z = rng.binomial(1, z_prob, size=n)
    x = baseline.sample(log_hr * z, rng)
    c = rng.exponential(1.0 / censoring_rate, size=n)
    y = beta[0] + beta[1] * x + beta[2] * z + rng.normal(0.0, noise_sd, size=n)

    return pd.DataFrame({
        'x': x,
        'z': z,
        'c': c,
        'w': np.minimum(x, c),
        'delta': (x <= c).astype(np.int64),
        'y': y,
    })
