"""
CPU reference engine.

NumPy float64 kernels (BLAS under the hood).
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from lazyalgebra.engine._common import check_matvec, check_matmul, check_transpose


class NumPyEngine:
    """CPU reference engine backed by NumPy."""

    @property
    def name(self) -> str:
        return 'cpu_numpy'

    def zeros(self, *shape: int) -> NDArray[np.floating[Any]]:
        return np.zeros(shape, dtype=np.float64)

    def ax(
        self,
        A: NDArray[np.floating[Any]],
        x: NDArray[np.floating[Any]],
        out: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matvec(A, x, out, transposed=False)
        np.matmul(A, x, out=out)
        return out

    def atx(
        self,
        A: NDArray[np.floating[Any]],
        x: NDArray[np.floating[Any]],
        out: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matvec(A, x, out, transposed=True)
        np.matmul(A.T, x, out=out)
        return out

    def abmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matmul(A, B, 'abmm')
        return np.matmul(A, B)

    def atbmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matmul(A, B, 'atbmm')
        return np.matmul(A.T, B)

    def abtmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_matmul(A, B, 'abtmm')
        return np.matmul(A, B.T)

    def transpose(
        self,
        A: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        check_transpose(A)
        # .copy() always allocates, even when A.T is already C-contiguous
        return A.T.copy()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
