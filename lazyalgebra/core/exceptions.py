"""
Exception hierarchy for lazyalgebra.

All exceptions inherit from LazyAlgebraError to allow catching any
library-specific error.

Design principles:
    - Construction errors (bad raw data, unknown operators, mixing a
      vector with a matrix) are ValidationError
    - Shape mismatches between operands are only discovered when an
      expression is evaluated, and surface as DimensionError
    - Out-of-range indices raise the builtin IndexError
    - Error messages are actionable with actual vs expected values
"""


class LazyAlgebraError(Exception):
    """Base exception for all lazyalgebra errors."""
    pass


class ValidationError(LazyAlgebraError):
    """
    Input validation failed.

    Raised when raw data handed to wrap() is not numeric or has the wrong
    number of dimensions, or when a builder receives operands of the wrong
    kind.
    """
    pass


class DimensionError(ValidationError):
    """
    Operand shapes are inconsistent.

    Raised at evaluation time (materialize() or a kernel call), never when
    an expression node is built.

    Attributes:
        operation: Name of the operation or kernel that failed
        shapes: Shapes of the operands involved
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        shapes: tuple[tuple[int, ...], ...] | None = None,
    ):
        super().__init__(message)
        self.operation = operation
        self.shapes = shapes
