"""
Tests for the NumPy engine and engine selection.

Kernels are checked against plain numpy, and every kernel must reject
non-conforming operands with DimensionError.
"""

import numpy as np
import pytest

import lazyalgebra.engine
from lazyalgebra.core.compute import DeviceInfo, get_cpu_info
from lazyalgebra.core.exceptions import DimensionError, ValidationError
from lazyalgebra.core.protocols import DenseMatrixEngine
from lazyalgebra.engine import NumPyEngine, get_engine


@pytest.fixture
def engine():
    return NumPyEngine()


class TestKernels:

    def test_name(self, engine):
        assert engine.name == 'cpu_numpy'

    def test_satisfies_protocol(self, engine):
        assert isinstance(engine, DenseMatrixEngine)

    def test_zeros(self, engine):
        z = engine.zeros(2, 3)
        assert z.shape == (2, 3)
        assert z.dtype == np.float64
        assert not z.any()

    def test_ax_writes_into_out(self, engine, rectangular):
        A, _, _ = rectangular
        x = np.array([1.0, -1.0])
        out = engine.zeros(3)
        result = engine.ax(A, x, out)
        assert result is out
        np.testing.assert_allclose(out, A @ x)

    def test_atx(self, engine, rectangular):
        A, _, _ = rectangular
        x = np.array([1.0, 2.0, 3.0])
        out = engine.zeros(2)
        np.testing.assert_allclose(engine.atx(A, x, out), A.T @ x)

    def test_abmm(self, engine, square_pair):
        A, B = square_pair
        np.testing.assert_array_equal(engine.abmm(A, B), [[19.0, 22.0], [43.0, 50.0]])

    def test_atbmm(self, engine, rectangular):
        A, B, _ = rectangular
        np.testing.assert_allclose(engine.atbmm(A, B), A.T @ B)

    def test_abtmm(self, engine, rectangular):
        A, _, C = rectangular
        np.testing.assert_allclose(engine.abtmm(A, C.T), A @ C)

    def test_transpose_allocates(self, engine, rectangular):
        A, _, _ = rectangular
        At = engine.transpose(A)
        np.testing.assert_array_equal(At, A.T)
        assert not np.shares_memory(At, A)

    def test_transpose_of_column_allocates(self, engine):
        col = np.arange(3.0).reshape(3, 1)
        assert not np.shares_memory(engine.transpose(col), col)


class TestConformability:

    def test_ax_wrong_vector_length(self, engine):
        with pytest.raises(DimensionError, match="ax") as exc_info:
            engine.ax(np.ones((2, 3)), np.ones(2), engine.zeros(2))
        assert exc_info.value.operation == 'ax'

    def test_ax_wrong_out_length(self, engine):
        with pytest.raises(DimensionError, match="out has length"):
            engine.ax(np.ones((2, 3)), np.ones(3), engine.zeros(3))

    def test_atx_wrong_vector_length(self, engine):
        with pytest.raises(DimensionError, match="atx"):
            engine.atx(np.ones((2, 3)), np.ones(3), engine.zeros(3))

    def test_abmm_inner_mismatch(self, engine):
        with pytest.raises(DimensionError, match="A.ncols != B.nrows"):
            engine.abmm(np.ones((2, 3)), np.ones((2, 3)))

    def test_atbmm_inner_mismatch(self, engine):
        with pytest.raises(DimensionError, match="A.nrows != B.nrows"):
            engine.atbmm(np.ones((2, 3)), np.ones((3, 3)))

    def test_abtmm_inner_mismatch(self, engine):
        with pytest.raises(DimensionError, match="A.ncols != B.ncols"):
            engine.abtmm(np.ones((2, 3)), np.ones((2, 2)))

    def test_product_requires_2d(self, engine):
        with pytest.raises(DimensionError, match="must be 2D"):
            engine.abmm(np.ones(3), np.ones((3, 3)))


class TestGetEngine:

    def test_cpu_is_shared(self):
        assert get_engine('cpu') is get_engine('cpu')

    def test_none_means_cpu(self):
        assert get_engine(None) is get_engine('cpu')

    def test_instance_passthrough(self, counting_engine):
        assert get_engine(counting_engine) is counting_engine

    def test_auto_returns_engine(self):
        assert isinstance(get_engine('auto'), DenseMatrixEngine)

    def test_auto_without_gpu_is_cpu(self, monkeypatch):
        monkeypatch.setattr(lazyalgebra.engine, 'select_device', lambda prefer: get_cpu_info())
        assert get_engine('auto') is get_engine('cpu')

    def test_auto_with_gpu_uses_torch_engine(self, monkeypatch, counting_engine):
        gpu = DeviceInfo(device_type='cuda', device_index=0, name='Test GPU')
        monkeypatch.setattr(lazyalgebra.engine, 'select_device', lambda prefer: gpu)
        monkeypatch.setattr(lazyalgebra.engine, '_torch_engine', lambda device: counting_engine)
        assert get_engine('auto') is counting_engine

    def test_unknown_string(self):
        with pytest.raises(ValidationError, match="Unknown engine"):
            get_engine('tpu')

    def test_non_engine_object(self):
        with pytest.raises(ValidationError, match="DenseMatrixEngine"):
            get_engine(42)
