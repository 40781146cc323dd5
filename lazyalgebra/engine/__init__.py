"""
Dense matrix engines.

Expression nodes that need a real kernel (matrix products, matrix-vector
products, transpose materialization) delegate to an engine. Engines are
selected the same way everywhere: a string choice or an engine instance.

Public API:
    get_engine(choice)  - 'cpu', 'gpu', 'auto', or an engine instance
    NumPyEngine         - CPU float64 reference
    TorchEngine         - PyTorch on CUDA/MPS (import requires torch)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Union

from lazyalgebra.core.compute.device import DeviceInfo, select_device
from lazyalgebra.core.exceptions import ValidationError
from lazyalgebra.core.protocols import DenseMatrixEngine
from lazyalgebra.engine.cpu import NumPyEngine


EngineChoice = Literal['auto', 'cpu', 'gpu']
EngineLike = Union[EngineChoice, DenseMatrixEngine, None]

_CPU_ENGINE = NumPyEngine()


@lru_cache(maxsize=None)
def _torch_engine(device: DeviceInfo) -> DenseMatrixEngine:
    from lazyalgebra.engine.gpu import TorchEngine
    return TorchEngine(device=device)


def get_engine(engine: EngineLike = 'cpu') -> DenseMatrixEngine:
    """
    Resolve an engine choice to an engine instance.

    Parameters
    ----------
    engine : str, engine instance, or None
        'cpu' (or None) returns the shared NumPy engine. 'gpu' requires a
        GPU and PyTorch. 'auto' uses the GPU when both are available and
        falls back to the CPU otherwise. Any object satisfying
        DenseMatrixEngine is returned unchanged.

    Raises
    ------
    RuntimeError
        If 'gpu' is requested and no GPU is available.
    ValidationError
        If the choice is not recognized.
    """
    if engine is None or engine == 'cpu':
        return _CPU_ENGINE

    if isinstance(engine, str):
        if engine == 'auto':
            device = select_device('auto')
            if device.is_gpu:
                return _torch_engine(device)
            return _CPU_ENGINE

        if engine == 'gpu':
            return _torch_engine(select_device('gpu'))

        raise ValidationError(f"Unknown engine: {engine!r}")

    if isinstance(engine, DenseMatrixEngine):
        return engine

    raise ValidationError(
        f"engine: expected 'cpu', 'gpu', 'auto' or a DenseMatrixEngine, "
        f"got {type(engine).__name__}"
    )


__all__ = [
    "DenseMatrixEngine",
    "EngineChoice",
    "EngineLike",
    "NumPyEngine",
    "get_engine",
]
