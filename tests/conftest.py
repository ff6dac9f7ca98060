"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np
import pandas as pd


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def small_censored_frame():
    """Six subjects, covariate W censored at rows 2 and 4.

    Kaplan-Meier of (w, delta) at every distinct time:
        w      1     2     3     4     5      6
        S    5/6   5/6   5/8   5/8   5/16   0
    """
    return pd.DataFrame({
        'w': [1.0, 2.0, 3.0, 4.0, 5.0, 6.0],
        'delta': [1, 0, 1, 0, 1, 1],
    })


@pytest.fixture
def censored_beyond_frame():
    """Censored rows past the last event (w = 5), so the tail matters.

    Kaplan-Meier at every distinct time:
        w      1     2     3     4     5     6     7
        S    6/7   6/7  24/35 24/35 16/35 16/35 16/35
    """
    return pd.DataFrame({
        'w': [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0],
        'delta': [1, 0, 1, 0, 1, 0, 0],
    })


@pytest.fixture
def simple_regression_data(rng):
    """Simple regression dataset for basic tests."""
    n, p = 100, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset with perfect collinearity (should fail)."""
    n = 100
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    x3 = x1 + x2
    X = np.column_stack([x1, x2, x3])
    y = rng.standard_normal(n)
    return X, y
