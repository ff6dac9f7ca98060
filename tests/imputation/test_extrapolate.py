"""
Tests for the tail approximations past the last event.
"""

import numpy as np
import pandas as pd
import pytest
from numpy.testing import assert_allclose

from pycensimpute.core.exceptions import DegenerateCurveError, ValidationError
from pycensimpute.imputation import (
    CarryForwardTail,
    ExponentialTail,
    TailApproximation,
    ZeroTail,
    extrapolate_survival,
    get_tail_policy,
)


# Last event at t = 4 with S = 0.5; rows at 6 and 8 are past it.
CURVE = pd.DataFrame({
    't': [8.0, 1.0, 4.0, 6.0, 2.0],
    'e': [0, 1, 1, 0, 0],
    's': [np.nan, 0.8, 0.5, np.nan, np.nan],
})


class TestTailPolicies:

    def test_factory(self):
        assert isinstance(get_tail_policy('zero'), ZeroTail)
        assert isinstance(get_tail_policy('carryforward'), CarryForwardTail)
        assert isinstance(get_tail_policy('expo'), ExponentialTail)

    @pytest.mark.parametrize('name', ['Expo', 'linear', '', None])
    def test_unknown_policy(self, name):
        with pytest.raises(ValidationError, match='approx_beyond'):
            get_tail_policy(name)

    @pytest.mark.parametrize('policy', [ZeroTail, CarryForwardTail, ExponentialTail])
    def test_override_annotations_match_base(self, policy):
        expected = TailApproximation.survival_beyond.__annotations__
        assert policy.survival_beyond.__annotations__ == expected
        assert set(expected) == {'t_beyond', 't_last', 's_last', 'return'}

    def test_zero(self):
        assert_allclose(ZeroTail().survival_beyond(np.array([6.0, 8.0]), 4.0, 0.5), [0, 0])

    def test_carryforward(self):
        assert_allclose(
            CarryForwardTail().survival_beyond(np.array([6.0, 8.0]), 4.0, 0.5),
            [0.5, 0.5],
        )

    def test_expo(self):
        """S(t) = 0.5 ** (t / 4): S(6) = 0.5 ** 1.5, S(8) = 0.25."""
        out = ExponentialTail().survival_beyond(np.array([6.0, 8.0]), 4.0, 0.5)
        assert_allclose(out, [0.5 ** 1.5, 0.25], rtol=1e-14)

    def test_expo_reproduces_last_value_exactly(self):
        out = ExponentialTail().survival_beyond(np.array([3.7]), 3.7, 0.3141)
        assert out[0] == 0.3141

    def test_expo_is_exp_of_log_linear_decay(self):
        t = np.array([5.0, 9.0, 20.0])
        out = ExponentialTail().survival_beyond(t, 4.0, 0.6)
        assert_allclose(out, np.exp(t * np.log(0.6) / 4.0), rtol=1e-12)

    def test_expo_last_event_at_zero(self):
        with pytest.raises(DegenerateCurveError):
            ExponentialTail().survival_beyond(np.array([1.0]), 0.0, 0.5)


class TestExtrapolateSurvival:

    def test_sorted_copy_with_tail_filled(self):
        before = CURVE.copy()
        out = extrapolate_survival(CURVE, 't', 'e', 's', approx_beyond='expo')

        pd.testing.assert_frame_equal(CURVE, before)
        assert list(out['t']) == [1.0, 2.0, 4.0, 6.0, 8.0]
        assert_allclose(out['s'].iloc[3:], [0.5 ** 1.5, 0.25], rtol=1e-14)
        # rows at or before the last event are untouched
        assert np.isnan(out['s'].iloc[1])
        assert out['s'].iloc[2] == 0.5

    @pytest.mark.parametrize('policy, expected', [
        ('zero', [0.0, 0.0]),
        ('carryforward', [0.5, 0.5]),
    ])
    def test_policies(self, policy, expected):
        out = extrapolate_survival(CURVE, 't', 'e', 's', approx_beyond=policy)
        assert_allclose(out['s'].iloc[3:], expected)

    def test_no_rows_beyond(self):
        df = CURVE[CURVE['t'] <= 4.0]
        out = extrapolate_survival(df, 't', 'e', 's')
        assert len(out) == 3

    def test_no_events(self):
        df = CURVE.assign(e=0)
        with pytest.raises(DegenerateCurveError, match='no uncensored'):
            extrapolate_survival(df, 't', 'e', 's')

    def test_unknown_policy(self):
        with pytest.raises(ValidationError):
            extrapolate_survival(CURVE, 't', 'e', 's', approx_beyond='none')
