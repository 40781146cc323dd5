"""
Builder functions for expression trees.

Named entry points for every node kind. Unlike the operators, builders
accept raw array-likes anywhere an expression is expected and wrap them
into leaves first.

    wrap, wrap_vector, wrap_matrix          leaves
    add, sub, mul, div                      elementwise / scalar broadcast
    matmul, cross_product, outer_product    true matrix products
    transpose                               A'
    mat_vec, mat_vec_transpose              A x, A' x
    render                                  text rendering
"""

from __future__ import annotations

from typing import Any, Union
import numpy as np
from numpy.typing import ArrayLike

from lazyalgebra.core.exceptions import DimensionError, ValidationError
from lazyalgebra.core.validation import check_array, check_scalar
from lazyalgebra.engine import EngineLike
from lazyalgebra.expression._common import is_scalar, render
from lazyalgebra.expression.matrix import (
    MatrixExpression,
    MatrixLift,
    MatrixMatrixOp,
    MatrixScalarOp,
    MatrixTranspose,
    ScalarMatrixOp,
)
from lazyalgebra.expression.products import (
    Atx,
    Ax,
    MatrixCrossProduct,
    MatrixMultiplication,
    MatrixOuterProduct,
)
from lazyalgebra.expression.vector import (
    ScalarVectorOp,
    VectorExpression,
    VectorLift,
    VectorScalarOp,
    VectorVectorOp,
)


Expression = Union[VectorExpression, MatrixExpression]


def wrap(raw: ArrayLike | Expression) -> Expression:
    """
    Lift raw data into a leaf expression.

    Parameters
    ----------
    raw : array-like or expression
        1-D data becomes a VectorLift, 2-D data a MatrixLift. Expressions
        are returned unchanged.

    Raises
    ------
    ValidationError
        If raw is not numeric.
    DimensionError
        If raw is neither 1-D nor 2-D.
    """
    if isinstance(raw, (VectorExpression, MatrixExpression)):
        return raw
    array = check_array(raw, 'raw')
    if array.ndim == 1:
        return VectorLift(array)
    if array.ndim == 2:
        return MatrixLift(array)
    raise DimensionError(
        f"raw: expected 1D or 2D array, got {array.ndim}D with shape {array.shape}",
        shapes=(array.shape,),
    )


def wrap_vector(raw: ArrayLike | VectorExpression) -> VectorExpression:
    """Lift a raw 1-D sequence, or pass a vector expression through."""
    if isinstance(raw, VectorExpression):
        return raw
    if isinstance(raw, MatrixExpression):
        raise ValidationError("x: expected a vector, got a MatrixExpression")
    return VectorLift(raw)


def wrap_matrix(raw: ArrayLike | MatrixExpression) -> MatrixExpression:
    """Lift a raw 2-D matrix, or pass a matrix expression through."""
    if isinstance(raw, MatrixExpression):
        return raw
    if isinstance(raw, VectorExpression):
        raise ValidationError("A: expected a matrix, got a VectorExpression")
    return MatrixLift(raw)


def _operand(value: Any, name: str) -> Expression | np.float64:
    if isinstance(value, (VectorExpression, MatrixExpression)):
        return value
    if is_scalar(value):
        return check_scalar(value, name)
    return wrap(value)


def _elementwise(op: str, a: Any, b: Any) -> Expression:
    a = _operand(a, 'a')
    b = _operand(b, 'b')

    if isinstance(a, VectorExpression):
        if isinstance(b, VectorExpression):
            return VectorVectorOp(op, a, b)
        if isinstance(b, MatrixExpression):
            raise ValidationError(
                f"cannot combine a vector and a matrix elementwise with {op!r}"
            )
        return VectorScalarOp(op, a, b)

    if isinstance(a, MatrixExpression):
        if isinstance(b, MatrixExpression):
            return MatrixMatrixOp(op, a, b)
        if isinstance(b, VectorExpression):
            raise ValidationError(
                f"cannot combine a matrix and a vector elementwise with {op!r}"
            )
        return MatrixScalarOp(op, a, b)

    # a is a scalar from here on
    if isinstance(b, VectorExpression):
        return ScalarVectorOp(op, a, b)
    if isinstance(b, MatrixExpression):
        return ScalarMatrixOp(op, a, b)
    raise ValidationError(
        f"at least one operand of {op!r} must be a vector or matrix"
    )


def add(a: Any, b: Any) -> Expression:
    """Elementwise a + b. Either side may be a scalar."""
    return _elementwise('+', a, b)


def sub(a: Any, b: Any) -> Expression:
    """Elementwise a - b. Either side may be a scalar."""
    return _elementwise('-', a, b)


def mul(a: Any, b: Any) -> Expression:
    """
    Elementwise a * b. Either side may be a scalar.

    This is never the matrix product; use matmul() for that.
    """
    return _elementwise('*', a, b)


def div(a: Any, b: Any) -> Expression:
    """Elementwise a / b with IEEE semantics for division by zero."""
    return _elementwise('/', a, b)


def matmul(A: Any, B: Any, *, engine: EngineLike = 'cpu') -> MatrixMultiplication:
    """Matrix product A B, shape (A.nrows, B.ncols)."""
    return MatrixMultiplication(wrap_matrix(A), wrap_matrix(B), engine=engine)


def cross_product(A: Any, B: Any, *, engine: EngineLike = 'cpu') -> MatrixCrossProduct:
    """Cross product A' B, shape (A.ncols, B.ncols)."""
    return MatrixCrossProduct(wrap_matrix(A), wrap_matrix(B), engine=engine)


def outer_product(A: Any, B: Any, *, engine: EngineLike = 'cpu') -> MatrixOuterProduct:
    """Outer product A B', shape (A.nrows, B.nrows)."""
    return MatrixOuterProduct(wrap_matrix(A), wrap_matrix(B), engine=engine)


def transpose(A: Any, *, engine: EngineLike = 'cpu') -> MatrixTranspose:
    """Transpose A', shape (A.ncols, A.nrows)."""
    return MatrixTranspose(wrap_matrix(A), engine=engine)


def mat_vec(A: Any, x: Any, *, engine: EngineLike = 'cpu') -> Ax:
    """Matrix-vector product A x, length A.nrows."""
    return Ax(wrap_matrix(A), wrap_vector(x), engine=engine)


def mat_vec_transpose(A: Any, x: Any, *, engine: EngineLike = 'cpu') -> Atx:
    """Transposed matrix-vector product A' x, length A.ncols."""
    return Atx(wrap_matrix(A), wrap_vector(x), engine=engine)


__all__ = [
    "Expression",
    "wrap",
    "wrap_vector",
    "wrap_matrix",
    "add",
    "sub",
    "mul",
    "div",
    "matmul",
    "cross_product",
    "outer_product",
    "transpose",
    "mat_vec",
    "mat_vec_transpose",
    "render",
]
