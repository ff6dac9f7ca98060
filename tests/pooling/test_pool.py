"""
Tests for Rubin's rules: pool_estimates() and pool().
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose
from scipy import stats

from pycensimpute.core.exceptions import PoolingError, ValidationError
from pycensimpute.pooling import PooledSolution, pool, pool_estimates
from pycensimpute.regression import fit_formula


# Column b0: Q = 1, 2, 3 with U = 0.5
#   Q̄ = 2, W = 0.5, B = 1, T = 0.5 + (4/3) * 1 = 11/6
#   r = (4/3) / 0.5 = 8/3, ν = 2 * (1 + 3/8)² = 121/32, λ = (4/3) / (11/6) = 8/11
# Column b1: constant Q = 10 with U = 1, so B = 0
ESTIMATES = np.array([[1.0, 10.0], [2.0, 10.0], [3.0, 10.0]])
VARIANCES = np.array([[0.5, 1.0], [0.5, 1.0], [0.5, 1.0]])


class TestRubinRules:

    def test_hand_computed(self):
        result = pool_estimates(ESTIMATES, VARIANCES)

        assert isinstance(result, PooledSolution)
        assert result.M == 3
        assert result.names == ('b0', 'b1')
        assert_allclose(result.estimate, [2.0, 10.0])
        assert_allclose(result.within, [0.5, 1.0])
        assert_allclose(result.between, [1.0, 0.0], atol=1e-15)
        assert_allclose(result.total, [11 / 6, 1.0], rtol=1e-12)
        assert result.riv[0] == pytest.approx(8 / 3, rel=1e-12)
        assert result.df[0] == pytest.approx(121 / 32, rel=1e-12)
        assert result.fmi[0] == pytest.approx(8 / 11, rel=1e-12)

    def test_zero_between_variance(self):
        result = pool_estimates(ESTIMATES, VARIANCES)
        assert result.df[1] == np.inf
        assert result.riv[1] == 0.0
        assert result.fmi[1] == 0.0

    def test_single_imputation_reduces_to_complete_data(self):
        result = pool_estimates([[1.5, -0.3]], [[0.04, 0.09]], names=['a', 'b'])
        assert result.coefficients == {'a': 1.5, 'b': -0.3}
        assert result.variances == pytest.approx({'a': 0.04, 'b': 0.09})
        assert_allclose(result.between, [0.0, 0.0])
        assert np.all(np.isinf(result.df))

    def test_one_dimensional_input_is_one_coefficient(self):
        result = pool_estimates([1.0, 2.0, 3.0], [0.5, 0.5, 0.5])
        assert result.names == ('b0',)
        assert result.variances['b0'] == pytest.approx(11 / 6)

    def test_p_values_and_confint(self):
        result = pool_estimates(ESTIMATES, VARIANCES)
        se = np.sqrt(11 / 6)
        df = 121 / 32

        assert result.p_values[0] == pytest.approx(2 * stats.t.sf(2 / se, df), rel=1e-10)
        half = stats.t.ppf(0.975, df) * se
        assert_allclose(result.confint()[0], [2 - half, 2 + half], rtol=1e-10)

    def test_negative_variance_warned(self):
        result = pool_estimates([1.0, 2.0], [0.5, -0.1])
        assert any('negative' in w for w in result.warnings)

    def test_summary_and_repr(self):
        result = pool_estimates(ESTIMATES, VARIANCES, names=['x', 'z'])
        assert 'pool_estimates(M=3)' in result.summary()
        assert 'fmi' in result.summary()
        assert "PooledSolution(M=3" in repr(result)


class TestPoolEstimatesValidation:

    def test_shape_mismatch(self):
        with pytest.raises(PoolingError, match='equal shape'):
            pool_estimates(ESTIMATES, VARIANCES[:, :1])

    def test_empty(self):
        with pytest.raises(PoolingError):
            pool_estimates(np.empty((0, 2)), np.empty((0, 2)))

    def test_non_finite(self):
        with pytest.raises(PoolingError, match='non-finite'):
            pool_estimates([1.0, np.nan], [0.1, 0.1])

    def test_names_length(self):
        with pytest.raises(PoolingError, match='names'):
            pool_estimates(ESTIMATES, VARIANCES, names=['only'])


def _completed(seed, n=40):
    rng = np.random.default_rng(seed)
    imp = rng.exponential(1.0, n)
    z = rng.binomial(1, 0.5, n)
    y = 1.0 + 0.5 * imp + 0.25 * z + rng.standard_normal(n)
    return pd.DataFrame({'imp': imp, 'z': z, 'y': y})


class TestPool:

    def test_matches_per_dataset_fits(self):
        datasets = [_completed(s) for s in range(4)]
        result = pool(datasets, 'y ~ imp + z')

        fits = [fit_formula('y ~ imp + z', d) for d in datasets]
        Q = np.vstack([f.coefficients for f in fits])
        U = np.vstack([f.variances for f in fits])

        assert result.names == ('Intercept', 'imp', 'z')
        assert_allclose(result.estimate, Q.mean(axis=0), rtol=1e-12)
        expected_t = U.mean(axis=0) + (1 + 1 / 4) * Q.var(axis=0, ddof=1)
        assert_allclose(result.total, expected_t, rtol=1e-12)
        assert result.info['formula'] == 'y ~ imp + z'
        assert "pool('y ~ imp + z', M=4)" in result.summary()

    def test_single_dataset_equals_its_fit(self):
        data = _completed(0)
        result = pool([data], 'y ~ imp')
        single = fit_formula('y ~ imp', data)
        assert_allclose(result.estimate, single.coefficients, rtol=1e-12)
        assert_allclose(result.total, single.variances, rtol=1e-12)

    def test_empty(self):
        with pytest.raises(PoolingError, match='at least one'):
            pool([], 'y ~ imp')

    def test_single_dataframe_rejected(self):
        with pytest.raises(PoolingError, match='single DataFrame'):
            pool(_completed(0), 'y ~ imp')

    def test_failing_fit_is_chained(self):
        datasets = [_completed(0), _completed(1).drop(columns='z')]
        with pytest.raises(PoolingError) as exc:
            pool(datasets, 'y ~ imp + z')
        assert exc.value.dataset_index == 1
        assert isinstance(exc.value.__cause__, ValidationError)

    def test_mismatched_coefficients(self):
        """A dataset without z = 1 rows loses the C(z)[T.1] term."""
        second = _completed(1).assign(z=0)
        with pytest.raises(PoolingError) as exc:
            pool([_completed(0), second], 'y ~ imp + C(z)')
        assert exc.value.dataset_index == 1
