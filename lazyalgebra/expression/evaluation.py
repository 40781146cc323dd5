"""
Evaluation with a Result envelope.

evaluate() materializes an expression and reports what happened: the
value, the shape, how many distinct nodes the expression DAG holds,
whether the result was already cached, the elapsed time, and which
engines the tree delegates to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
import numpy as np
from numpy.typing import NDArray

from lazyalgebra.core.compute.timing import Timer
from lazyalgebra.core.exceptions import ValidationError
from lazyalgebra.core.result import Result
from lazyalgebra.expression.matrix import MatrixExpression
from lazyalgebra.expression.vector import VectorExpression


@dataclass(frozen=True)
class EvaluationParams:
    """Payload of evaluate(): the materialized value."""
    value: NDArray[np.floating[Any]]


def iter_nodes(expr: VectorExpression | MatrixExpression) -> Iterator[Any]:
    """
    Yield every distinct node of an expression DAG, parents first.

    A subexpression shared by several parents is yielded once.
    """
    seen: set[int] = set()
    stack = [expr]
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield node
        stack.extend(reversed(node.operands))


def evaluate(expr: VectorExpression | MatrixExpression) -> Result[EvaluationParams]:
    """
    Materialize an expression and wrap the value in a Result.

    Parameters
    ----------
    expr : VectorExpression or MatrixExpression

    Returns
    -------
    Result[EvaluationParams]
        info keys: 'kind' ('vector' or 'matrix'), 'shape', 'n_nodes',
        'was_cached'. backend_name lists the engines referenced by the
        tree, comma separated, or 'none' for trees without kernel nodes.
        warnings carries the precision notes of those engines (float32 on
        MPS).
    """
    if isinstance(expr, VectorExpression):
        kind = 'vector'
        shape: tuple[int, ...] = (expr.length,)
    elif isinstance(expr, MatrixExpression):
        kind = 'matrix'
        shape = expr.shape
    else:
        raise ValidationError(
            f"expr: expected a vector or matrix expression, got {type(expr).__name__}"
        )

    nodes = list(iter_nodes(expr))
    used = {
        id(node.engine): node.engine
        for node in nodes if getattr(node, 'engine', None) is not None
    }
    engines = sorted({engine.name for engine in used.values()})
    notes = tuple(dict.fromkeys(
        note for engine in used.values() for note in getattr(engine, 'warnings', ())
    ))
    was_cached = expr.is_materialized

    timer = Timer.for_engines(engines)
    timer.start()
    with timer.section('materialize'):
        value = expr.materialize()
    timer.stop()

    return Result(
        params=EvaluationParams(value=value),
        info={
            'kind': kind,
            'shape': shape,
            'n_nodes': len(nodes),
            'was_cached': was_cached,
        },
        timing=timer.result(),
        backend_name=','.join(engines) if engines else 'none',
        warnings=notes,
    )
