"""
GPU engine tests.

Validates TorchEngine kernels and GPU-backed expressions against the
NumPy reference engine. Skipped if no GPU is available.
"""

from __future__ import annotations

import numpy as np
import pytest

try:
    import torch
    HAS_GPU = torch.cuda.is_available() or (
        hasattr(torch.backends, 'mps') and torch.backends.mps.is_available()
    )
except ImportError:
    HAS_GPU = False

pytestmark = pytest.mark.skipif(not HAS_GPU, reason="No GPU available")

from lazyalgebra import matmul, mat_vec, mat_vec_transpose, transpose, wrap
from lazyalgebra.core.compute import select_tolerance
from lazyalgebra.core.exceptions import DimensionError
from lazyalgebra.engine import get_engine


@pytest.fixture
def gpu():
    return get_engine('gpu')


@pytest.fixture
def data(rng):
    return rng.standard_normal((20, 10)), rng.standard_normal((10, 15))


class TestGPUvsCPU:

    def test_name(self, gpu):
        assert gpu.name in ('gpu_torch_fp64', 'gpu_torch_fp32')

    def test_engine_is_cached(self, gpu):
        assert get_engine('gpu') is gpu

    def test_abmm(self, gpu, data):
        A, B = data
        tol = select_tolerance(gpu.name)
        np.testing.assert_allclose(gpu.abmm(A, B), A @ B, rtol=tol.rtol, atol=tol.atol)

    def test_atbmm(self, gpu, data):
        A, _ = data
        tol = select_tolerance(gpu.name)
        np.testing.assert_allclose(gpu.atbmm(A, A), A.T @ A, rtol=tol.rtol, atol=tol.atol)

    def test_abtmm(self, gpu, data):
        A, _ = data
        tol = select_tolerance(gpu.name)
        np.testing.assert_allclose(gpu.abtmm(A, A), A @ A.T, rtol=tol.rtol, atol=tol.atol)

    def test_results_are_float64_numpy(self, gpu, data):
        A, B = data
        result = gpu.abmm(A, B)
        assert isinstance(result, np.ndarray)
        assert result.dtype == np.float64

    def test_matmul_expression(self, gpu, data):
        A, B = data
        tol = select_tolerance(gpu.name)
        cpu = matmul(A, B, engine='cpu').materialize()
        on_gpu = matmul(A, B, engine=gpu).materialize()
        np.testing.assert_allclose(on_gpu, cpu, rtol=tol.rtol, atol=tol.atol)

    def test_mat_vec_expressions(self, gpu, data):
        A, _ = data
        x = np.arange(10.0)
        y = np.arange(20.0)
        tol = select_tolerance(gpu.name)
        np.testing.assert_allclose(
            mat_vec(A, x, engine=gpu).materialize(), A @ x, rtol=tol.rtol, atol=tol.atol
        )
        np.testing.assert_allclose(
            mat_vec_transpose(A, y, engine=gpu).materialize(), A.T @ y,
            rtol=tol.rtol, atol=tol.atol,
        )

    def test_transpose_materialize_reads_cached_operand(self, gpu, data):
        A, B = data
        product = matmul(A, B)
        product.materialize()  # read-only cached array goes to the GPU
        np.testing.assert_allclose(
            transpose(product, engine=gpu).materialize(),
            (A @ B).T,
            rtol=select_tolerance(gpu.name).rtol,
            atol=select_tolerance(gpu.name).atol,
        )

    def test_mismatch_raises_before_transfer(self, gpu):
        with pytest.raises(DimensionError):
            gpu.abmm(np.ones((2, 3)), np.ones((2, 3)))

    def test_evaluate_reports_gpu_engine(self, gpu, data):
        from lazyalgebra import evaluate

        A, B = data
        result = evaluate(matmul(wrap(A), wrap(B), engine=gpu))
        assert result.backend_name == gpu.name
