"""
Matrix products and the matrix-vector bridge.

These nodes never compute entry by entry. materialize() hands the
materialized operands to an engine kernel, and value_at() reads from the
materialized (cached) result, since a product has no cheaper per-entry
path.

    MatrixMultiplication   A B     shape (A.nrows, B.ncols)   kernel abmm
    MatrixCrossProduct     A' B    shape (A.ncols, B.ncols)   kernel atbmm
    MatrixOuterProduct     A B'    shape (A.nrows, B.nrows)   kernel abtmm
    Ax                     A x     length A.nrows             kernel ax
    Atx                    A' x    length A.ncols             kernel atx

Inner dimensions are checked by the engine when the kernel runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from lazyalgebra.core.exceptions import ValidationError
from lazyalgebra.core.protocols import DenseMatrixEngine
from lazyalgebra.core.validation import check_index
from lazyalgebra.engine import get_engine
from lazyalgebra.expression.matrix import MatrixExpression, _check_matrix_operand
from lazyalgebra.expression.vector import VectorExpression


@dataclass(frozen=True, eq=False, repr=False)
class _MatrixProduct(MatrixExpression):
    """Shared plumbing for the three true products."""
    A: MatrixExpression
    B: MatrixExpression
    engine: DenseMatrixEngine | str | None = None

    def __post_init__(self):
        _check_matrix_operand(self.A, 'A')
        _check_matrix_operand(self.B, 'B')
        object.__setattr__(self, 'engine', get_engine(self.engine))

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.A, self.B)

    def value_at(self, i: int, j: int) -> float:
        i = check_index(i, self.nrows, 'matrix row')
        j = check_index(j, self.ncols, 'matrix column')
        return self.materialize()[i, j]


@dataclass(frozen=True, eq=False, repr=False)
class MatrixMultiplication(_MatrixProduct):
    """Matrix product A B."""

    @property
    def nrows(self) -> int:
        return self.A.nrows

    @property
    def ncols(self) -> int:
        return self.B.ncols

    def _compute(self) -> NDArray[np.floating[Any]]:
        return self.engine.abmm(self.A.materialize(), self.B.materialize())

    def __repr__(self) -> str:
        return f"({self.A!r} @ {self.B!r})"


@dataclass(frozen=True, eq=False, repr=False)
class MatrixCrossProduct(_MatrixProduct):
    """Cross product A' B, without materializing A'."""

    @property
    def nrows(self) -> int:
        return self.A.ncols

    @property
    def ncols(self) -> int:
        return self.B.ncols

    def _compute(self) -> NDArray[np.floating[Any]]:
        return self.engine.atbmm(self.A.materialize(), self.B.materialize())

    def __repr__(self) -> str:
        return f"({self.A!r}.T @ {self.B!r})"


@dataclass(frozen=True, eq=False, repr=False)
class MatrixOuterProduct(_MatrixProduct):
    """Outer product A B', without materializing B'."""

    @property
    def nrows(self) -> int:
        return self.A.nrows

    @property
    def ncols(self) -> int:
        return self.B.nrows

    def _compute(self) -> NDArray[np.floating[Any]]:
        return self.engine.abtmm(self.A.materialize(), self.B.materialize())

    def __repr__(self) -> str:
        return f"({self.A!r} @ {self.B!r}.T)"


def _check_vector_operand(value: Any, name: str) -> None:
    if not isinstance(value, VectorExpression):
        raise ValidationError(
            f"{name}: expected a VectorExpression, got {type(value).__name__}"
        )


@dataclass(frozen=True, eq=False, repr=False)
class _MatrixVectorProduct(VectorExpression):
    A: MatrixExpression
    x: VectorExpression
    engine: DenseMatrixEngine | str | None = None

    def __post_init__(self):
        _check_matrix_operand(self.A, 'A')
        _check_vector_operand(self.x, 'x')
        object.__setattr__(self, 'engine', get_engine(self.engine))

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.A, self.x)

    def value_at(self, i: int) -> float:
        i = check_index(i, self.length, 'vector')
        return self.materialize()[i]


@dataclass(frozen=True, eq=False, repr=False)
class Ax(_MatrixVectorProduct):
    """Matrix-vector product A x."""

    @property
    def length(self) -> int:
        return self.A.nrows

    def _compute(self) -> NDArray[np.floating[Any]]:
        out = self.engine.zeros(self.length)
        return self.engine.ax(self.A.materialize(), self.x.materialize(), out)

    def __repr__(self) -> str:
        return f"({self.A!r} @ {self.x!r})"


@dataclass(frozen=True, eq=False, repr=False)
class Atx(_MatrixVectorProduct):
    """Transposed matrix-vector product A' x."""

    @property
    def length(self) -> int:
        return self.A.ncols

    def _compute(self) -> NDArray[np.floating[Any]]:
        out = self.engine.zeros(self.length)
        return self.engine.atx(self.A.materialize(), self.x.materialize(), out)

    def __repr__(self) -> str:
        return f"({self.A!r}.T @ {self.x!r})"
