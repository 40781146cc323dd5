"""
Input validation utilities for lazyalgebra.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about caller intent.

Two kinds of checks live here:
    - construction checks (check_array, check_1d, check_2d, check_scalar),
      run once when raw data or scalars enter an expression
    - evaluation checks (check_index, check_same_shape), run when values
      are actually read or computed
"""

import numbers

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from lazyalgebra.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a floating numpy array.

    Floating ndarrays are returned as-is (no copy), so the expression
    references the caller's storage. Anything else is converted once to a
    new float64 array.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected real numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}",
            shapes=(array.shape,),
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_scalar(value: Any, name: str) -> np.float64:
    """
    Validate a real scalar operand.

    Scalars are stored as numpy float64 so that arithmetic on them follows
    IEEE semantics (division by zero gives inf/nan instead of raising).

    Raises:
        ValidationError: If value is not a real number
    """
    if isinstance(value, np.ndarray) and value.ndim == 0:
        value = value.item()
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(
            f"{name}: expected a real scalar, got {type(value).__name__}"
        )
    return np.float64(value)


def check_index(index: Any, size: int, name: str) -> int:
    """
    Verify index lies in [0, size).

    Negative indices are rejected rather than counted from the end.

    Returns:
        The index as a plain int

    Raises:
        IndexError: If index is not an integer or is out of range
    """
    if isinstance(index, bool) or not isinstance(index, numbers.Integral):
        raise IndexError(
            f"{name}: index must be an integer, got {type(index).__name__}"
        )
    index = int(index)
    if not 0 <= index < size:
        raise IndexError(
            f"{name}: index {index} out of range [0, {size})"
        )
    return index


def check_same_shape(
    left: tuple[int, ...],
    right: tuple[int, ...],
    operation: str,
) -> None:
    """
    Verify two operand shapes are identical.

    No broadcasting is applied: a length-1 vector does not stretch to
    match a longer one.

    Raises:
        DimensionError: If the shapes differ
    """
    if tuple(left) != tuple(right):
        raise DimensionError(
            f"{operation}: operand shapes differ, {tuple(left)} vs {tuple(right)}",
            operation=operation,
            shapes=(tuple(left), tuple(right)),
        )
