"""
Tests for the Result[P] envelope and the Timer that fills its timing.

Validates:
    - Generic type parameter works with arbitrary payload types
    - Frozen immutability
    - Default warnings tuple
    - has_warning() method
    - Timer sections accumulate and report
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pycensimpute.core.compute.timing import Timer
from pycensimpute.core.result import Result


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


def _result(**kwargs):
    defaults = dict(params=FakeParams(value=1.0), info={}, timing=None,
                    backend_name="cpu")
    defaults.update(kwargs)
    return Result(**defaults)


# ═══════════════════════════════════════════════════════════════════════
# Construction and field access
# ═══════════════════════════════════════════════════════════════════════


class TestResultConstruction:

    def test_basic_creation(self):
        result = _result(
            params=FakeParams(value=42.0),
            info={"method": "conditional_mean"},
            timing={"total_seconds": 0.01},
            backend_name="cpu_condmean",
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "conditional_mean"
        assert result.timing["total_seconds"] == 0.01
        assert result.backend_name == "cpu_condmean"

    def test_warnings_default_empty(self):
        result = _result()
        assert result.warnings == ()
        assert isinstance(result.warnings, tuple)

    def test_timing_none(self):
        assert _result().timing is None


# ═══════════════════════════════════════════════════════════════════════
# Immutability
# ═══════════════════════════════════════════════════════════════════════


class TestImmutability:
    """Result is frozen: no attribute mutation allowed."""

    @pytest.mark.parametrize("field, value", [
        ("params", FakeParams(value=2.0)),
        ("backend_name", "other"),
        ("warnings", ("new warning",)),
        ("timing", {}),
    ])
    def test_cannot_set(self, field, value):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            setattr(result, field, value)


# ═══════════════════════════════════════════════════════════════════════
# has_warning()
# ═══════════════════════════════════════════════════════════════════════


class TestHasWarning:

    def test_no_warnings_returns_false(self):
        assert _result().has_warning("anything") is False

    def test_substring_match(self):
        result = _result(warnings=(
            "imputation 2: elements of column w must be non-negative (1 negative)",
            "2 censored value(s) have zero survival beyond them",
        ))
        assert result.has_warning("non-negative") is True
        assert result.has_warning("zero survival") is True
        assert result.has_warning("denominator") is False


# ═══════════════════════════════════════════════════════════════════════
# Timer
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_reported_with_total(self):
        timer = Timer()
        timer.start()
        with timer.section("merge"):
            pass
        with timer.section("interpolation"):
            pass
        timer.stop()

        timing = timer.result()
        assert set(timing) == {"total_seconds", "merge", "interpolation"}
        assert all(v >= 0.0 for v in timing.values())

    def test_repeated_section_accumulates(self):
        timer = Timer()
        timer.start()
        for _ in range(3):
            with timer.section("bootstrap"):
                pass
        timer.stop()
        assert list(timer.result()) == ["total_seconds", "bootstrap"]

    def test_section_recorded_when_body_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(ValueError):
            with timer.section("fit"):
                raise ValueError("boom")
        timer.stop()
        assert "fit" in timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

