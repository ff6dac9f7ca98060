"""
Tests for impute_censored_surv(): survival at times the curve does not report.
"""

import numpy as np
import pandas as pd
import pytest

from pycensimpute.core.exceptions import (
    DataQualityWarning,
    DegenerateCurveError,
    ValidationError,
)
from pycensimpute.imputation import impute_censored_surv


# Events at 1, 2, 2, 4; censored at 3. Tied events at t = 2 report 0.7
# then 0.6, so the last row in time order wins.
CURVE = pd.DataFrame({
    't': [1.0, 2.0, 2.0, 3.0, 4.0],
    'e': [1, 1, 1, 0, 1],
    's': [0.9, 0.7, 0.6, np.nan, 0.2],
})


class TestInterpolation:

    def test_between_events_is_neighbour_mean(self):
        """t = 3: (S(2) + S(4)) / 2 = (0.6 + 0.2) / 2."""
        assert impute_censored_surv(3.0, 't', 'e', 's', CURVE) == pytest.approx(0.4)

    def test_same_time_uses_last_event_row(self):
        assert impute_censored_surv(2.0, 't', 'e', 's', CURVE) == pytest.approx(0.6)

    def test_same_time_within_eight_decimals(self):
        value = impute_censored_surv(2.0 + 1e-10, 't', 'e', 's', CURVE)
        assert value == pytest.approx(0.6)

    def test_just_past_eight_decimals_interpolates(self):
        value = impute_censored_surv(2.0 + 1e-6, 't', 'e', 's', CURVE)
        assert value == pytest.approx(0.4)

    def test_row_order_does_not_matter(self):
        shuffled = CURVE.iloc[[3, 0, 4, 1, 2]]
        assert impute_censored_surv(3.0, 't', 'e', 's', shuffled) == pytest.approx(0.4)
        assert impute_censored_surv(2.0, 't', 'e', 's', shuffled) == pytest.approx(0.6)

    def test_censored_rows_ignored_as_neighbours(self):
        df = pd.DataFrame({
            't': [1.0, 2.0, 3.0],
            'e': [1, 0, 1],
            's': [0.8, 0.5, 0.4],
        })
        # the censored row at 2 carries 0.5 but only events count
        assert impute_censored_surv(2.5, 't', 'e', 's', df) == pytest.approx(0.6)


class TestDegenerate:

    def test_before_first_event_raises(self):
        with pytest.raises(DegenerateCurveError, match='precedes every event') as exc:
            impute_censored_surv(0.5, 't', 'e', 's', CURVE)
        assert exc.value.at_time == 0.5

    def test_before_first_event_origin(self):
        """(S(0) + S(1)) / 2 = (1 + 0.9) / 2."""
        value = impute_censored_surv(0.5, 't', 'e', 's', CURVE,
                                     before_first_event='origin')
        assert value == pytest.approx(0.95)

    def test_after_last_event_raises(self):
        with pytest.raises(DegenerateCurveError, match='no event time after'):
            impute_censored_surv(5.0, 't', 'e', 's', CURVE)


class TestValidation:

    def test_column_name_must_be_string(self):
        with pytest.raises(ValidationError, match='argument time'):
            impute_censored_surv(3.0, 1, 'e', 's', CURVE)

    def test_missing_column(self):
        with pytest.raises(ValidationError, match='does not have column'):
            impute_censored_surv(3.0, 't', 'e', 'surv', CURVE)

    def test_data_must_be_dataframe(self):
        with pytest.raises(ValidationError, match='DataFrame'):
            impute_censored_surv(3.0, 't', 'e', 's', CURVE.to_dict())

    def test_data_quality_warnings(self):
        df = CURVE.assign(s=[1.1, 0.7, 0.6, np.nan, 0.2])
        with pytest.warns(DataQualityWarning, match='between 0 and 1'):
            impute_censored_surv(3.0, 't', 'e', 's', df)

    def test_unknown_before_first_event(self):
        with pytest.raises(ValidationError, match='before_first_event'):
            impute_censored_surv(3.0, 't', 'e', 's', CURVE, before_first_event='zero')
