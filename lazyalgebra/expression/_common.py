"""
Shared machinery for vector and matrix expression nodes.

- The closed table of elementwise operators and the single function that
  applies them, used by both the indexed path (value_at) and the
  materialized path, so the two always agree.
- The write-once result cache every non-leaf node carries.
- Scalar detection and text rendering.
"""

from __future__ import annotations

import numbers
import threading
from typing import Any, Callable, Literal

import numpy as np

from lazyalgebra.core.exceptions import ValidationError


Operator = Literal['+', '-', '*', '/']

_UFUNCS: dict[str, np.ufunc] = {
    '+': np.add,
    '-': np.subtract,
    '*': np.multiply,
    '/': np.true_divide,
}

OPERATOR_NAMES: dict[str, str] = {
    '+': 'add',
    '-': 'sub',
    '*': 'mul',
    '/': 'div',
}


def check_operator(op: Any) -> str:
    """
    Verify op is one of the four elementwise operators.

    Raises:
        ValidationError: If op is not '+', '-', '*' or '/'
    """
    if op not in _UFUNCS:
        raise ValidationError(
            f"op: unknown elementwise operator {op!r}, expected one of "
            f"{sorted(_UFUNCS)}"
        )
    return op


def apply_operator(op: str, left: Any, right: Any) -> Any:
    """
    Apply an elementwise operator to scalars or arrays.

    Follows IEEE semantics: division by zero gives +-inf or nan and
    overflow gives inf, without floating point warnings.
    """
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        return _UFUNCS[op](left, right)


def is_scalar(value: Any) -> bool:
    """True for real numbers (bools excluded) and 0-d numeric arrays."""
    if isinstance(value, np.ndarray):
        return value.ndim == 0 and np.issubdtype(value.dtype, np.number)
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def format_scalar(value: Any) -> str:
    return repr(float(value))


class ResultCache:
    """
    Write-once slot for a node's materialized result.

    The slot moves from empty to populated exactly once. Population is
    guarded by a lock with a double check, so when several threads
    materialize the same node for the first time the compute function
    runs once and every caller gets the same array. If compute raises,
    the slot stays empty and a later call may try again.

    Cached arrays are marked read-only.
    """

    __slots__ = ('_value', '_lock')

    def __init__(self):
        self._value = None
        self._lock = threading.Lock()

    @property
    def populated(self) -> bool:
        return self._value is not None

    def get_or_compute(self, compute: Callable[[], np.ndarray]) -> np.ndarray:
        value = self._value
        if value is not None:
            return value
        with self._lock:
            if self._value is None:
                result = compute()
                result.flags.writeable = False
                self._value = result
            return self._value

    def __repr__(self) -> str:
        return f"ResultCache(populated={self.populated})"


def as_array(value: np.ndarray, dtype: Any = None, copy: bool | None = None) -> np.ndarray:
    """
    The numpy __array__ protocol over a materialized value.

    copy=False refuses any conversion that would need a new array.
    """
    if dtype is not None and np.dtype(dtype) != value.dtype:
        if copy is False:
            raise ValueError(
                f"cannot convert {value.dtype} to {np.dtype(dtype)} without a copy"
            )
        return value.astype(dtype)
    if copy:
        return value.copy()
    return value


def render(expr: Any, **kwargs: Any) -> str:
    """
    Format the materialized value of an expression for display.

    Keyword arguments are passed to numpy.array2string (precision,
    separator, max_line_width, ...).
    """
    return np.array2string(np.asarray(expr.materialize()), **kwargs)
