"""
Shared compute infrastructure for lazyalgebra.

Hardware detection, timing, and the tolerance tiers used to compare
engines. The kernels themselves live in lazyalgebra.engine.

Submodules:
    device: Hardware detection and device selection
    timing: Execution timing utilities
    tolerances: Precision expectations per engine
"""

from lazyalgebra.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from lazyalgebra.core.compute.timing import Timer
from lazyalgebra.core.compute.tolerances import (
    ToleranceTier,
    CPU_FP64,
    GPU_FP64,
    GPU_FP32,
    select_tolerance,
)

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
    # Tolerances
    "ToleranceTier",
    "CPU_FP64",
    "GPU_FP64",
    "GPU_FP32",
    "select_tolerance",
]
