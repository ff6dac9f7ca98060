"""
Tests for simulate_censored_covariate() and the baseline hazards.
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose

from pycensimpute.core.exceptions import ValidationError
from pycensimpute.simulation import simulate_censored_covariate
from pycensimpute.simulation._baseline import (
    ExponentialBaseline,
    GompertzBaseline,
    WeibullBaseline,
    get_baseline,
)


class TestBaselines:

    def test_factory(self):
        assert isinstance(get_baseline('exponential', 2.0), ExponentialBaseline)
        assert isinstance(get_baseline('weibull', 2.0, 1.5), WeibullBaseline)
        assert isinstance(get_baseline('gompertz', 2.0, 0.5), GompertzBaseline)

    @pytest.mark.parametrize('dist', ['lognormal', '', None])
    def test_unknown_dist(self, dist):
        with pytest.raises(ValidationError, match='dist must be one of'):
            get_baseline(dist, 1.0)

    @pytest.mark.parametrize('rate, shape', [(0.0, 1.0), (-1.0, 1.0), (1.0, 0.0), (np.inf, 1.0)])
    def test_parameters_positive(self, rate, shape):
        with pytest.raises(ValidationError):
            get_baseline('weibull', rate, shape)

    def test_inverse_cumulative_hazards(self):
        """H0 applied to H0⁻¹(h) gives h back."""
        h = np.array([0.0, 0.1, 1.0, 3.0])

        x = ExponentialBaseline(2.0).inverse_cumulative_hazard(h)
        assert_allclose(2.0 * x, h)

        x = WeibullBaseline(2.0, 1.5).inverse_cumulative_hazard(h)
        assert_allclose(2.0 * x ** 1.5, h)

        x = GompertzBaseline(2.0, 0.5).inverse_cumulative_hazard(h)
        assert_allclose(2.0 / 0.5 * np.expm1(0.5 * x), h, atol=1e-14)


class TestSimulate:

    def test_columns_and_types(self):
        df = simulate_censored_covariate(50, seed=1)
        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ['x', 'z', 'c', 'w', 'delta', 'y']
        assert len(df) == 50
        assert df['delta'].dtype == np.int64
        assert set(df['z'].unique()) <= {0, 1}

    def test_observed_is_min_of_x_and_c(self):
        df = simulate_censored_covariate(200, seed=2)
        assert_allclose(df['w'], np.minimum(df['x'], df['c']))
        assert np.array_equal(df['delta'], (df['x'] <= df['c']).astype(int))
        assert np.all(df['x'] > 0)

    def test_reproducible(self):
        a = simulate_censored_covariate(100, seed=7)
        b = simulate_censored_covariate(100, seed=7)
        pd.testing.assert_frame_equal(a, b)
        assert not a.equals(simulate_censored_covariate(100, seed=8))

    def test_exponential_mean_and_censoring_share(self):
        """log_hr = 0: E[X] = 1/5 and P(X <= C) = 5 / (5 + 4)."""
        df = simulate_censored_covariate(20000, rate=5.0, log_hr=0.0,
                                         censoring_rate=4.0, seed=3)
        assert df['x'].mean() == pytest.approx(0.2, abs=0.01)
        assert df['delta'].mean() == pytest.approx(5 / 9, abs=0.02)

    def test_hazard_ratio_shifts_x(self):
        """A negative log hazard ratio makes X longer for z = 1."""
        df = simulate_censored_covariate(5000, log_hr=-1.0, seed=4)
        assert df.loc[df['z'] == 1, 'x'].mean() > df.loc[df['z'] == 0, 'x'].mean()

    def test_noise_free_outcome(self):
        df = simulate_censored_covariate(30, beta=(1.0, 2.0, 3.0), noise_sd=0.0, seed=5)
        assert_allclose(df['y'], 1.0 + 2.0 * df['x'] + 3.0 * df['z'])

    @pytest.mark.parametrize('dist, shape', [('weibull', 1.5), ('gompertz', 0.5)])
    def test_other_baselines(self, dist, shape):
        df = simulate_censored_covariate(100, dist=dist, shape=shape, seed=6)
        assert np.all(np.isfinite(df['x']))
        assert np.all(df['x'] >= 0)


class TestSimulateValidation:

    @pytest.mark.parametrize('n', [0, -5, 2.5, True])
    def test_n(self, n):
        with pytest.raises(ValidationError, match='n must be'):
            simulate_censored_covariate(n)

    @pytest.mark.parametrize('kwargs, match', [
        ({'z_prob': 1.5}, 'z_prob'),
        ({'censoring_rate': 0.0}, 'censoring_rate'),
        ({'noise_sd': -1.0}, 'noise_sd'),
        ({'beta': (1.0, 2.0)}, 'beta'),
        ({'rate': -1.0}, 'rate'),
        ({'dist': 'lognormal'}, 'dist'),
    ])
    def test_parameters(self, kwargs, match):
        with pytest.raises(ValidationError, match=match):
            simulate_censored_covariate(10, **kwargs)
