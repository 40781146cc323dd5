"""
lazyalgebra: lazy expressions over dense vectors and matrices.

Compose elementwise arithmetic, matrix products, transposes and
matrix-vector products into a tree of deferred operations. Nothing is
computed until a single entry (value_at) or the whole result
(materialize, cached on the node) is requested. Products are delegated
to a dense-matrix engine: NumPy on the CPU, or PyTorch on a GPU.

Submodules:
    expression: Expression nodes and builders
    engine: Dense matrix engines
    core: Exceptions, validation, Result envelope, device/timing utilities
"""

__version__ = "0.1.0"

from lazyalgebra.core.exceptions import (
    LazyAlgebraError,
    ValidationError,
    DimensionError,
)
from lazyalgebra.engine import get_engine
from lazyalgebra.expression import (
    VectorExpression,
    MatrixExpression,
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
    evaluate,
)

__all__ = [
    "__version__",
    "LazyAlgebraError",
    "ValidationError",
    "DimensionError",
    "get_engine",
    "VectorExpression",
    "MatrixExpression",
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
]
