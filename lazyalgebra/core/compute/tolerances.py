"""
Tolerance tiers for comparing engines.

The NumPy engine is the float64 reference. The torch engine matches it
to machine precision on CUDA (float64) and only approximately on MPS,
which computes in float32.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """rtol/atol pair for comparing engine results."""
    rtol: float
    atol: float
    name: str
    description: str


CPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-14,
    name='cpu_fp64',
    description='NumPy float64 reference',
)

GPU_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='gpu_fp64',
    description='torch float64 on CUDA, matches the reference',
)

GPU_FP32 = ToleranceTier(
    rtol=1e-4,
    atol=1e-5,
    name='gpu_fp32',
    description='torch float32 (MPS), approximately equal',
)


def select_tolerance(engine_name: str) -> ToleranceTier:
    """Select the tolerance tier for results produced by the named engine."""
    if 'gpu' in engine_name:
        if 'fp64' in engine_name:
            return GPU_FP64
        return GPU_FP32
    return CPU_FP64
