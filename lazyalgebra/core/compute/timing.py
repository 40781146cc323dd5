"""
Wall-clock timing for evaluate().

Engine kernels on a CUDA device return before the device has finished,
so when an expression tree routes work to a GPU engine the clock is read
only after torch.cuda.synchronize().
"""

import time
from contextlib import contextmanager
from typing import Iterable, Iterator


def _cuda_synchronize() -> None:
    try:
        import torch
    except ImportError:
        return
    if torch.cuda.is_available():
        torch.cuda.synchronize()


class Timer:
    """
    Total wall time plus named, accumulating sections.

        timer = Timer.for_engines(['cpu_numpy'])
        timer.start()
        with timer.section('materialize'):
            expr.materialize()
        timer.stop()
        timer.result()    # {'total_seconds': ..., 'materialize': ...}
    """

    def __init__(self, sync_cuda: bool = False):
        self._sync_cuda = sync_cuda
        self._sections: dict[str, float] = {}
        self._started: float | None = None
        self._total: float | None = None

    @classmethod
    def for_engines(cls, engine_names: Iterable[str]) -> 'Timer':
        """Timer that synchronizes CUDA when any of the engines is a GPU engine."""
        return cls(sync_cuda=any(name.startswith('gpu') for name in engine_names))

    def _now(self) -> float:
        if self._sync_cuda:
            _cuda_synchronize()
        return time.perf_counter()

    def start(self) -> None:
        self._started = self._now()

    def stop(self) -> None:
        if self._started is None:
            raise RuntimeError("Timer.stop() called before start()")
        self._total = self._now() - self._started

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time a block. Re-entering a section name adds to its total."""
        began = self._now()
        try:
            yield
        finally:
            self._sections[name] = self._sections.get(name, 0.0) + self._now() - began

    def result(self) -> dict[str, float]:
        """
        Returns:
            'total_seconds' plus one entry per section

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._total is None:
            raise RuntimeError("Timer.result() called before stop()")
        return {'total_seconds': self._total, **self._sections}

