"""
Lazy vector and matrix expressions.

Public API:
    wrap(raw)            - lift a raw 1-D/2-D array into an expression
    add/sub/mul/div      - elementwise and scalar-broadcast arithmetic
    matmul               - matrix product A B
    cross_product        - A' B
    outer_product        - A B'
    transpose            - A'
    mat_vec              - A x
    mat_vec_transpose    - A' x
    render(expr)         - text rendering of the materialized value
    evaluate(expr)       - materialize and report in a Result envelope
"""

from lazyalgebra.expression.vector import (
    VectorExpression,
    VectorLift,
    VectorScalarOp,
    ScalarVectorOp,
    VectorVectorOp,
)
from lazyalgebra.expression.matrix import (
    MatrixExpression,
    MatrixLift,
    MatrixScalarOp,
    ScalarMatrixOp,
    MatrixMatrixOp,
    MatrixTranspose,
)
from lazyalgebra.expression.products import (
    MatrixMultiplication,
    MatrixCrossProduct,
    MatrixOuterProduct,
    Ax,
    Atx,
)
from lazyalgebra.expression.builders import (
    Expression,
    wrap,
    wrap_vector,
    wrap_matrix,
    add,
    sub,
    mul,
    div,
    matmul,
    cross_product,
    outer_product,
    transpose,
    mat_vec,
    mat_vec_transpose,
    render,
)
from lazyalgebra.expression.evaluation import EvaluationParams, evaluate, iter_nodes

__all__ = [
    # Builders
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
    "evaluate",
    "iter_nodes",
    # Node types
    "Expression",
    "VectorExpression",
    "VectorLift",
    "VectorScalarOp",
    "ScalarVectorOp",
    "VectorVectorOp",
    "MatrixExpression",
    "MatrixLift",
    "MatrixScalarOp",
    "ScalarMatrixOp",
    "MatrixMatrixOp",
    "MatrixTranspose",
    "MatrixMultiplication",
    "MatrixCrossProduct",
    "MatrixOuterProduct",
    "Ax",
    "Atx",
    "EvaluationParams",
]
