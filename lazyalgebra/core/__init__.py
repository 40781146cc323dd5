"""
Core infrastructure for lazyalgebra.

Shared abstractions used by the engine and expression layers.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input and evaluation-time validators
    compute: Hardware detection, timing, tolerance tiers
"""

from lazyalgebra.core.result import Result
from lazyalgebra.core.exceptions import (
    LazyAlgebraError,
    ValidationError,
    DimensionError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "LazyAlgebraError",
    "ValidationError",
    "DimensionError",
]
