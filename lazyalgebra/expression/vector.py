"""
Vector expression tree.

A VectorExpression is an immutable node describing a deferred computation
that yields a 1-D float array. Building an expression only allocates a
node that references its operands; nothing is computed until a value is
requested.

Two ways to read a node:
    value_at(i)    - recompute index i through the tree, touching only
                     that index of each operand and caching nothing
    materialize()  - compute the whole result once, cache it on the node,
                     and return the same read-only array on every call

Node variants:
    VectorLift       wraps a raw 1-D array
    VectorScalarOp   x op y        (y a scalar)
    ScalarVectorOp   y op x        (y a scalar, scalar on the left)
    VectorVectorOp   x op y        (elementwise)

with op in {'+', '-', '*', '/'}. The matrix-vector products Ax and Atx
live in lazyalgebra.expression.products.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator
import numpy as np
from numpy.typing import NDArray

from lazyalgebra.core.exceptions import ValidationError
from lazyalgebra.core.validation import (
    check_1d, check_array, check_index, check_same_shape, check_scalar,
)
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


@dataclass(frozen=True, eq=False, repr=False)
class VectorExpression(ABC):
    """
    Base class for all vector expression nodes.

    Operators build new nodes:
        x + y, x - y, x * y, x / y    elementwise with another vector
        x + 2, x - 2, x * 2, x / 2    broadcast a scalar
        2 + x, 2 - x, 2 * x, 2 / x    scalar on the left
        -x                            x * -1
        x @ A                         A' x (see MatrixExpression)

    Raw arrays are not accepted by the operators; wrap them first, or use
    the builder functions, which wrap automatically.
    """
    _cache: ResultCache = field(
        default_factory=ResultCache, init=False, repr=False, compare=False,
    )

    # numpy defers to our reflected operators instead of broadcasting
    __array_ufunc__ = None

    @property
    @abstractmethod
    def length(self) -> int:
        """Logical length of the result."""

    @abstractmethod
    def value_at(self, i: int) -> float:
        """Compute the value at index i without materializing operands."""

    @abstractmethod
    def _compute(self) -> NDArray[np.floating[Any]]:
        """Compute the full result. Called at most once per successful materialize."""

    @property
    def operands(self) -> tuple[Any, ...]:
        """Child expressions of this node."""
        return ()

    def materialize(self) -> NDArray[np.floating[Any]]:
        """
        Return the full result, computing and caching it on first call.

        The returned array is read-only and is the same object on every
        call.
        """
        return self._cache.get_or_compute(self._compute)

    @property
    def is_materialized(self) -> bool:
        """True once materialize() has populated the cache."""
        return self._cache.populated

    def __len__(self) -> int:
        return self.length

    def __getitem__(self, i: int) -> float:
        return self.value_at(i)

    def __iter__(self) -> Iterator[float]:
        return iter(self.materialize())

    def __array__(self, dtype=None, copy=None):
        return as_array(self.materialize(), dtype, copy)

    def __str__(self) -> str:
        return render(self)

    # --- Operator surface ---

    def _binary(self, op: str, other: Any):
        if isinstance(other, VectorExpression):
            return VectorVectorOp(op, self, other)
        if is_scalar(other):
            return VectorScalarOp(op, self, other)
        return NotImplemented

    def _reflected(self, op: str, other: Any):
        if is_scalar(other):
            return ScalarVectorOp(op, other, self)
        return NotImplemented

    def __add__(self, other):
        return self._binary('+', other)

    def __sub__(self, other):
        return self._binary('-', other)

    def __mul__(self, other):
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
        return VectorScalarOp('*', self, -1.0)

    def __matmul__(self, other):
        from lazyalgebra.expression.matrix import MatrixExpression
        from lazyalgebra.expression.products import Atx

        if isinstance(other, MatrixExpression):
            return Atx(other, self)
        return NotImplemented


def _check_vector_operand(value: Any, name: str) -> None:
    if not isinstance(value, VectorExpression):
        raise ValidationError(
            f"{name}: expected a VectorExpression, got {type(value).__name__}"
        )


@dataclass(frozen=True, eq=False, repr=False)
class VectorLift(VectorExpression):
    """
    Leaf wrapping a raw 1-D array.

    The array is referenced, not copied, when it already has a floating
    dtype; materialize() returns it as-is. Changes the caller makes to
    that array afterwards are visible through the leaf, but not through
    parent nodes that have already been materialized.
    """
    x: NDArray[np.floating[Any]]

    def __post_init__(self):
        x = check_array(self.x, 'x')
        check_1d(x, 'x')
        object.__setattr__(self, 'x', x)

    @property
    def length(self) -> int:
        return self.x.shape[0]

    def value_at(self, i: int) -> float:
        return self.x[check_index(i, self.length, 'vector')]

    def _compute(self) -> NDArray[np.floating[Any]]:
        return self.x

    def materialize(self) -> NDArray[np.floating[Any]]:
        return self.x

    @property
    def is_materialized(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Vector(length={self.length})"


@dataclass(frozen=True, eq=False, repr=False)
class VectorScalarOp(VectorExpression):
    """x op y, broadcasting the scalar y over every element of x."""
    op: str
    x: VectorExpression
    y: float

    def __post_init__(self):
        check_operator(self.op)
        _check_vector_operand(self.x, 'x')
        object.__setattr__(self, 'y', check_scalar(self.y, 'y'))

    @property
    def length(self) -> int:
        return self.x.length

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.x,)

    def value_at(self, i: int) -> float:
        return apply_operator(self.op, self.x.value_at(i), self.y)

    def _compute(self) -> NDArray[np.floating[Any]]:
        return apply_operator(self.op, self.x.materialize(), self.y)

    def __repr__(self) -> str:
        return f"({self.x!r} {self.op} {format_scalar(self.y)})"


@dataclass(frozen=True, eq=False, repr=False)
class ScalarVectorOp(VectorExpression):
    """y op x with the scalar y on the left; matters for '-' and '/'."""
    op: str
    y: float
    x: VectorExpression

    def __post_init__(self):
        check_operator(self.op)
        _check_vector_operand(self.x, 'x')
        object.__setattr__(self, 'y', check_scalar(self.y, 'y'))

    @property
    def length(self) -> int:
        return self.x.length

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.x,)

    def value_at(self, i: int) -> float:
        return apply_operator(self.op, self.y, self.x.value_at(i))

    def _compute(self) -> NDArray[np.floating[Any]]:
        return apply_operator(self.op, self.y, self.x.materialize())

    def __repr__(self) -> str:
        return f"({format_scalar(self.y)} {self.op} {self.x!r})"


@dataclass(frozen=True, eq=False, repr=False)
class VectorVectorOp(VectorExpression):
    """
    Elementwise x op y.

    Lengths are not compared when the node is built. value_at(i) only
    fails if i is out of range for either operand; materialize() raises
    DimensionError when the lengths differ.
    """
    op: str
    x: VectorExpression
    y: VectorExpression

    def __post_init__(self):
        check_operator(self.op)
        _check_vector_operand(self.x, 'x')
        _check_vector_operand(self.y, 'y')

    @property
    def length(self) -> int:
        return self.x.length

    @property
    def operands(self) -> tuple[Any, ...]:
        return (self.x, self.y)

    def value_at(self, i: int) -> float:
        return apply_operator(self.op, self.x.value_at(i), self.y.value_at(i))

    def _compute(self) -> NDArray[np.floating[Any]]:
        x = self.x.materialize()
        y = self.y.materialize()
        check_same_shape(x.shape, y.shape, f"vector {OPERATOR_NAMES[self.op]}")
        return apply_operator(self.op, x, y)

    def __repr__(self) -> str:
        return f"({self.x!r} {self.op} {self.y!r})"
