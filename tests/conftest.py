"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from lazyalgebra.engine import NumPyEngine


class CountingEngine(NumPyEngine):
    """NumPy engine that records how often each kernel runs."""

    def __init__(self):
        self.calls: dict[str, int] = {}

    @property
    def name(self) -> str:
        return 'cpu_counting'

    def _count(self, kernel: str) -> None:
        self.calls[kernel] = self.calls.get(kernel, 0) + 1

    def ax(self, A, x, out):
        self._count('ax')
        return super().ax(A, x, out)

    def atx(self, A, x, out):
        self._count('atx')
        return super().atx(A, x, out)

    def abmm(self, A, B):
        self._count('abmm')
        return super().abmm(A, B)

    def atbmm(self, A, B):
        self._count('atbmm')
        return super().atbmm(A, B)

    def abtmm(self, A, B):
        self._count('abtmm')
        return super().abtmm(A, B)

    def transpose(self, A):
        self._count('transpose')
        return super().transpose(A)


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def counting_engine():
    """Engine that counts kernel calls."""
    return CountingEngine()


@pytest.fixture
def square_pair():
    """A = [[1,2],[3,4]], B = [[5,6],[7,8]]."""
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    B = np.array([[5.0, 6.0], [7.0, 8.0]])
    return A, B


@pytest.fixture
def rectangular(rng):
    """Non-square operands: A is 3x2, B is 3x4, C is 2x4."""
    A = rng.standard_normal((3, 2))
    B = rng.standard_normal((3, 4))
    C = rng.standard_normal((2, 4))
    return A, B, C
