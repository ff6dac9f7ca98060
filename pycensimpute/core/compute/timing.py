"""
Wall-clock timing for solver pipelines.

Every solver fills the ``timing`` field of its Result from a Timer: one
overall duration plus the accumulated duration of each named stage.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Overall timer with accumulating named stages.

    Usage:
        timer = Timer()
        timer.start()
        with timer.section('merge'):
            frame = join_curve(frame, table, obs, surv_col)
        timer.stop()
        timer.result()   # {'total_seconds': ..., 'merge': ...}
    """

    def __init__(self):
        self._stages: dict[str, float] = {}
        self._started: float | None = None
        self._elapsed: float | None = None

    def start(self) -> None:
        self._started = time.perf_counter()

    def stop(self) -> None:
        if self._started is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._elapsed = time.perf_counter() - self._started

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the duration of the block to stage ``name``, even if it raises."""
        began = time.perf_counter()
        try:
            yield
        finally:
            self._stages[name] = self._stages.get(name, 0.0) + (time.perf_counter() - began)

    def result(self) -> dict[str, float]:
        """'total_seconds' followed by each stage in first-use order."""
        if self._elapsed is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._elapsed, **self._stages}
