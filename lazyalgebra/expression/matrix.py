"""
Matrix expression tree.

Same two-tier contract as the vector tree, in two dimensions:
value_at(i, j) recomputes one entry through the tree, materialize()
computes the full matrix once and caches it.

Node variants defined here:
    MatrixLift        wraps a raw 2-D array
    MatrixScalarOp    A op y        (y a scalar)
    ScalarMatrixOp    y op A        (y a scalar, scalar on the left)
    MatrixMatrixOp    A op B        (elementwise, op in '+', '-', '*', '/')
    MatrixTranspose   A'

True matrix products and matrix-vector products live in
lazyalgebra.expression.products. Elementwise '*' and the true product '@'
are different nodes with different shape rules and must not be mixed up.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator
import numpy as np
from numpy.typing import NDArray

from lazyalgebra.core.exceptions import ValidationError
from lazyalgebra.core.protocols import DenseMatrixEngine
from lazyalgebra.core.validation import (
    check_2d, check_array, check_index, check_same_shape, check_scalar,
)
from lazyalgebra.engine import get_engine
from lazyalgebra.expression._common import (
    OPERATOR_NAMES,
    ResultCache,
    apply_operator,
    as_array,
    check_operator,
    format_scalar,
    is_scalar,
    render,
)
from lazyalgebra.expression.vector import VectorExpression


@dataclass(frozen=True, eq=False, repr=False)
class MatrixExpression(ABC):
    """
    Base class for all matrix expression nodes.

    Operators build new nodes:
        A + B, A - B, A * B, A / B    elementwise with another matrix
        A + 2, 2 - A, ...             broadcast a scalar (either side)
        -A                            A * -1
        A.T                           transpose
        A @ B                         matrix product
        A @ x                         matrix-vector product
    """
    _cache: ResultCache = field(
        default_factory=ResultCache, init=False, repr=False, compare=False,
    )

    __array_ufunc__ = None

    @property
    @abstractmethod
    def nrows(self) -> int:
        """Number of rows of the result."""

    @property
    @abstractmethod
    def ncols(self) -> int:
        """Number of columns of the result."""

    @abstractmethod
    def value_at(self, i: int, j: int) -> float:
        """Compute the entry at (row i, column j)."""

    @abstractmethod
    def _compute(self) -> NDArray[np.floating[Any]]:
        """Compute the full result. Called at most once per successful materialize."""

    @property
    def shape(self) -> tuple[int, int]:
        return (self.nrows, self.ncols)

    @property
    def operands(self) -> tuple[Any, ...]:
        """Child expressions of this node."""
        return ()

    def materialize(self) -> NDArray[np.floating[Any]]:
        """
        Return the full matrix, computing and caching it on first call.

        The returned array is read-only and is the same object on every
        call.
        """
        return self._cache.get_or_compute(self._compute)

    @property
    def is_materialized(self) -> bool:
        return self._cache.populated

    @property
    def T(self) -> MatrixTranspose:
        return MatrixTranspose(self)

    def __getitem__(self, index: tuple[int, int]) -> float:
        if not isinstance(index, tuple) or len(index) != 2:
            raise TypeError(
                f"matrix: index must be a (row, column) pair, got {index!r}"
            )
        return self.value_at(*index)

    def __iter__(self) -> Iterator[NDArray[np.floating[Any]]]:
        """Iterate over the rows of the materialized matrix."""
        return iter(self.materialize())

    def __array__(self, dtype=None, copy=None):
        return as_array(self.materialize(), dtype, copy)

    def __str__(self) -> str:
        return render(self)

    # --- Operator surface ---

    def _binary(self, op: str, other: Any):
        if isinstance(other, MatrixExpression):
            return MatrixMatrixOp(op, self, other)
        if is_scalar(other):
            return MatrixScalarOp(op, self, other)
        return NotImplemented

    def _reflected(self, op: str, other: Any):
        if is_scalar(other):
            return ScalarMatrixOp(op, other, self)
        return NotImplemented

    def __add__(self, other):
        return self._binary('+', other)

    def __sub__(self, other):
        return self._binary('-', other)

    def __mul__(self, other):
        """Elementwise product. Use @ for the matrix product."""
        return self._binary('*', other)

    def __truediv__(self, other):
        return self._binary('/', other)

    def __radd__(self, other):
        return self._reflected('+', other)

    def __rsub__(self, other):
        return self._reflected('-', other)

    def __rmul__(self, other):
        return self._reflected('*', other)

    def __rtruediv__(self, other):
        return self._reflected('/', other)

    def __neg__(self):
        return MatrixScalarOp('*', self, -1.0)

    def __matmul__(self, other):
        from lazyalgebra.expression.products import Ax, MatrixMultiplication

        if isinstance(other, MatrixExpression):
            return MatrixMultiplication(self, other)
        if isinstance(other, VectorExpression):
            return Ax(self, other)
        return NotImplemented


def _check_matrix_operand(value: Any, name: str) -> None:
    if not isinstance(value, MatrixExpression):
        raise ValidationError(
            f"{name}: expected a MatrixExpression, got {type(value).__name__}"
        )


@dataclass(frozen=True, eq=False, repr=False)
class MatrixLift(MatrixExpression):
    """
    Leaf wrapping a raw 2-D array.

    Referenced, not copied, when the array already has a floating dtype;
    materialize() returns it as-is.
    """
    A: NDArray[np.floating[Any]]

    def __post_init__(self):
        A = check_array(self.A, 'A')
        check_2d(A, 'A')
        object.__setattr__(self, 'A', A)

    @property
    def nrows(self) -> int:
        return self.A.shape[0]

    @property
    def ncols(self) -> int:
        return self.A.shape[1]

    def value_at(self, i: int, j: int) -> float:
        i = check_index(i, self.nrows, 'matrix row')
        j = check_index(j, self.ncols, 'matrix column')
        return self.A[i, j]

    def _compute(self) -> NDArray[np.floating[Any]]:
        return self.A

    def materialize(self) -> NDArray[np.floating[Any]]:
        return self.A

    @property
    def is_materialized(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Matrix({self.nrows}x{self.ncols})"


@dataclass(frozen=True, eq=False, repr=False)
class MatrixScalarOp(MatrixExpression):
    """A op y, broadcasting the scalar y over every entry of A."""
    op: str
    A: MatrixExpression
    y: float

    def __post_init__(self):
        check_operator(self.op)
        _check_matrix_operand(self.A, 'A')
        object.__setattr__(self, 'y', check_scalar(self.y, 'y'))

    @property
    def nrows(self) -> int:
        return self.A.nrows

    @property
    def ncols(self) -> int:
        return self.A.ncols

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.A,)

    def value_at(self, i: int, j: int) -> float:
        return apply_operator(self.op, self.A.value_at(i, j), self.y)

    def _compute(self) -> NDArray[np.floating[Any]]:
        return apply_operator(self.op, self.A.materialize(), self.y)

    def __repr__(self) -> str:
        return f"({self.A!r} {self.op} {format_scalar(self.y)})"


@dataclass(frozen=True, eq=False, repr=False)
class ScalarMatrixOp(MatrixExpression):
    """y op A with the scalar y on the left."""
    op: str
    y: float
    A: MatrixExpression

    def __post_init__(self):
        check_operator(self.op)
        _check_matrix_operand(self.A, 'A')
        object.__setattr__(self, 'y', check_scalar(self.y, 'y'))

    @property
    def nrows(self) -> int:
        return self.A.nrows

    @property
    def ncols(self) -> int:
        return self.A.ncols

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.A,)

    def value_at(self, i: int, j: int) -> float:
        return apply_operator(self.op, self.y, self.A.value_at(i, j))

    def _compute(self) -> NDArray[np.floating[Any]]:
        return apply_operator(self.op, self.y, self.A.materialize())

    def __repr__(self) -> str:
        return f"({format_scalar(self.y)} {self.op} {self.A!r})"


@dataclass(frozen=True, eq=False, repr=False)
class MatrixMatrixOp(MatrixExpression):
    """
    Elementwise A op B.

    Shapes are compared only by materialize(), which raises DimensionError
    on mismatch. The result has A's declared shape.
    """
    op: str
    A: MatrixExpression
    B: MatrixExpression

    def __post_init__(self):
        check_operator(self.op)
        _check_matrix_operand(self.A, 'A')
        _check_matrix_operand(self.B, 'B')

    @property
    def nrows(self) -> int:
        return self.A.nrows

    @property
    def ncols(self) -> int:
        return self.A.ncols

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.A, self.B)

    def value_at(self, i: int, j: int) -> float:
        return apply_operator(
            self.op, self.A.value_at(i, j), self.B.value_at(i, j)
        )

    def _compute(self) -> NDArray[np.floating[Any]]:
        A = self.A.materialize()
        B = self.B.materialize()
        check_same_shape(A.shape, B.shape, f"matrix {OPERATOR_NAMES[self.op]}")
        return apply_operator(self.op, A, B)

    def __repr__(self) -> str:
        return f"({self.A!r} {self.op} {self.B!r})"


@dataclass(frozen=True, eq=False, repr=False)
class MatrixTranspose(MatrixExpression):
    """
    A' with rows and columns swapped.

    value_at(i, j) reads A at (j, i) with no kernel call. materialize()
    runs the engine's transpose kernel, which always allocates new storage;
    the result is never a view of A.
    """
    A: MatrixExpression
    engine: DenseMatrixEngine | str | None = None

    def __post_init__(self):
        _check_matrix_operand(self.A, 'A')
        object.__setattr__(self, 'engine', get_engine(self.engine))

    @property
    def nrows(self) -> int:
        return self.A.ncols

    @property
    def ncols(self) -> int:
        return self.A.nrows

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.A,)

    def value_at(self, i: int, j: int) -> float:
        return self.A.value_at(j, i)

    def _compute(self) -> NDArray[np.floating[Any]]:
        return self.engine.transpose(self.A.materialize())

    def __repr__(self) -> str:
        return f"{self.A!r}.T"
