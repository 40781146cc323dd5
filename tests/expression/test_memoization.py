"""
Tests for the one-time materialization cache.

Validates:
    - materialize() returns the same read-only array on every call
    - kernels run once per node, even when the node is shared by several
      parents or materialized from several threads at once
    - a failed materialization leaves the cache empty
"""

import threading

import numpy as np
import pytest

from lazyalgebra.core.exceptions import DimensionError
from lazyalgebra.engine import NumPyEngine
from lazyalgebra.expression import matmul, mat_vec, transpose, wrap


class TestIdempotence:

    def test_same_instance_vector(self):
        expr = wrap([1.0, 2.0]) * 3.0
        first = expr.materialize()
        assert expr.materialize() is first
        np.testing.assert_array_equal(first, [3.0, 6.0])

    def test_same_instance_matrix(self, square_pair):
        A, B = square_pair
        expr = wrap(A) - wrap(B)
        assert expr.materialize() is expr.materialize()

    def test_cached_result_read_only(self):
        expr = wrap([1.0, 2.0]) + 1.0
        result = expr.materialize()
        with pytest.raises(ValueError):
            result[0] = 99.0

    def test_leaf_storage_stays_writable(self):
        x = np.array([1.0, 2.0])
        (wrap(x) + 1.0).materialize()
        x[0] = 5.0

    def test_kernel_runs_once(self, square_pair, counting_engine):
        A, B = square_pair
        expr = matmul(A, B, engine=counting_engine)
        for _ in range(3):
            expr.materialize()
        assert counting_engine.calls == {'abmm': 1}

    def test_cache_isolated_from_later_leaf_mutation(self):
        x = np.array([1.0, 2.0])
        expr = wrap(x) * 2.0
        expr.materialize()
        x[0] = 100.0
        assert expr.materialize()[0] == 2.0
        # the indexed path always reads through to the leaf
        assert expr.value_at(0) == 200.0


class TestSharedOperands:

    def test_shared_product_computed_once(self, square_pair, counting_engine):
        A, B = square_pair
        shared = matmul(A, B, engine=counting_engine)
        left = shared + 1.0
        right = shared * 2.0
        total = left + right
        np.testing.assert_allclose(
            total.materialize(), (A @ B + 1.0) + (A @ B) * 2.0
        )
        assert counting_engine.calls == {'abmm': 1}

    def test_shared_transpose(self, square_pair, counting_engine):
        A, _ = square_pair
        At = transpose(A, engine=counting_engine)
        expr = mat_vec(At, [1.0, 1.0], engine=counting_engine) + mat_vec(At, [2.0, 0.0])
        np.testing.assert_allclose(expr.materialize(), A.T @ [1.0, 1.0] + A.T @ [2.0, 0.0])
        assert counting_engine.calls == {'transpose': 1, 'ax': 1}


class TestFailures:

    def test_failure_leaves_cache_empty(self):
        expr = wrap(np.ones((2, 3))) @ wrap(np.ones((2, 3)))
        with pytest.raises(DimensionError):
            expr.materialize()
        assert not expr.is_materialized
        with pytest.raises(DimensionError):
            expr.materialize()

    def test_retry_after_transient_failure(self, square_pair):
        A, B = square_pair

        class FlakyEngine(NumPyEngine):
            def __init__(self):
                self.failures = 1

            def abmm(self, A, B):
                if self.failures:
                    self.failures -= 1
                    raise RuntimeError("device busy")
                return super().abmm(A, B)

        expr = matmul(A, B, engine=FlakyEngine())
        with pytest.raises(RuntimeError, match="device busy"):
            expr.materialize()
        np.testing.assert_array_equal(expr.materialize(), A @ B)


class TestConcurrentMaterialization:

    def test_single_computation_across_threads(self, rng, counting_engine):
        A = rng.standard_normal((50, 50))
        expr = matmul(A, A, engine=counting_engine)
        n_threads = 8
        barrier = threading.Barrier(n_threads)
        results = [None] * n_threads

        def worker(k):
            barrier.wait()
            results[k] = expr.materialize()

        threads = [threading.Thread(target=worker, args=(k,)) for k in range(n_threads)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert counting_engine.calls == {'abmm': 1}
        assert all(r is results[0] for r in results)
