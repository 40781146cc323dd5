"""
Generic result container for lazyalgebra evaluations.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (shape, node count, cache state)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope.

    Type Parameters:
        P: The payload type

    Attributes:
        params: Payload (the materialized value, for evaluate())
        info: Structured metadata
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the engine(s) that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=EvaluationParams(value=z),
        ...     info={'kind': 'matrix', 'shape': (2, 2), 'n_nodes': 3},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_numpy'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
