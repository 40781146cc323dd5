"""
Conformability checks shared by all engines.

The expression layer never checks shapes when nodes are built; these
checks are what turns a mismatch into a DimensionError once a kernel
actually runs.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray

from lazyalgebra.core.exceptions import DimensionError


def _require_ndim(array: NDArray, ndim: int, operation: str, name: str) -> None:
    if array.ndim != ndim:
        raise DimensionError(
            f"{operation}: {name} must be {ndim}D, got shape {array.shape}",
            operation=operation,
            shapes=(array.shape,),
        )


def _mismatch(operation: str, detail: str, *arrays: NDArray) -> DimensionError:
    shapes = tuple(a.shape for a in arrays)
    return DimensionError(
        f"{operation}: {detail} (shapes {', '.join(str(s) for s in shapes)})",
        operation=operation,
        shapes=shapes,
    )


def check_matvec(
    A: NDArray[np.floating[Any]],
    x: NDArray[np.floating[Any]],
    out: NDArray[np.floating[Any]],
    transposed: bool,
) -> None:
    """Check A @ x (or A' @ x when transposed) can be written into out."""
    operation = 'atx' if transposed else 'ax'
    _require_ndim(A, 2, operation, 'A')
    _require_ndim(x, 1, operation, 'x')
    _require_ndim(out, 1, operation, 'out')

    m, n = A.shape
    inner, outer = (m, n) if transposed else (n, m)
    if x.shape[0] != inner:
        raise _mismatch(
            operation, f"x has length {x.shape[0]}, expected {inner}", A, x
        )
    if out.shape[0] != outer:
        raise _mismatch(
            operation, f"out has length {out.shape[0]}, expected {outer}", A, out
        )


def check_matmul(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
    operation: str,
) -> None:
    """
    Check the inner dimensions of a matrix product agree.

    operation is the kernel name: 'abmm' (A B), 'atbmm' (A' B) or
    'abtmm' (A B').
    """
    _require_ndim(A, 2, operation, 'A')
    _require_ndim(B, 2, operation, 'B')

    if operation == 'abmm':
        left, right = A.shape[1], B.shape[0]
        detail = "A.ncols != B.nrows"
    elif operation == 'atbmm':
        left, right = A.shape[0], B.shape[0]
        detail = "A.nrows != B.nrows"
    elif operation == 'abtmm':
        left, right = A.shape[1], B.shape[1]
        detail = "A.ncols != B.ncols"
    else:
        raise ValueError(f"Unknown product kernel: {operation!r}")

    if left != right:
        raise _mismatch(operation, f"{detail} ({left} vs {right})", A, B)


def check_transpose(A: NDArray[np.floating[Any]]) -> None:
    _require_ndim(A, 2, 'transpose', 'A')
