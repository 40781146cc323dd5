"""
Core protocols for lazyalgebra.

We use Protocol (structural typing) rather than ABC (nominal typing) so
that any object providing the kernels can serve as an engine, including
test doubles that count kernel calls.
"""

from typing import Protocol, Any, runtime_checkable

import numpy as np
from numpy.typing import NDArray


@runtime_checkable
class DenseMatrixEngine(Protocol):
    """
    Protocol for the dense-matrix kernels expression nodes delegate to.

    Storage is always numpy: vectors are 1-D float64 arrays, matrices are
    2-D float64 arrays. Element get/set is plain ndarray indexing. An
    engine only supplies allocation and the optimized kernels.

    Every kernel checks that its operands conform and raises
    DimensionError otherwise. Engines are stateless apart from their
    device configuration.
    """

    @property
    def name(self) -> str:
        """
        Engine identifier.

        Convention: '{device}_{library}[_{precision}]'
        Examples: 'cpu_numpy', 'gpu_torch_fp64', 'gpu_torch_fp32'
        """
        ...

    def zeros(self, *shape: int) -> NDArray[np.floating[Any]]:
        """Allocate a zero-initialized float64 array of the given shape."""
        ...

    def ax(
        self,
        A: NDArray[np.floating[Any]],
        x: NDArray[np.floating[Any]],
        out: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """Compute A @ x into out (length A.nrows) and return out."""
        ...

    def atx(
        self,
        A: NDArray[np.floating[Any]],
        x: NDArray[np.floating[Any]],
        out: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """Compute A' @ x into out (length A.ncols) and return out."""
        ...

    def abmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """Return the new matrix A @ B."""
        ...

    def atbmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """Return the new matrix A' @ B."""
        ...

    def abtmm(
        self,
        A: NDArray[np.floating[Any]],
        B: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """Return the new matrix A @ B'."""
        ...

    def transpose(
        self,
        A: NDArray[np.floating[Any]],
    ) -> NDArray[np.floating[Any]]:
        """Return A' as newly allocated storage (never a view)."""
        ...
