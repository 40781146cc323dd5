"""
Tests for evaluate() and iter_nodes().
"""

import numpy as np
import pytest

from lazyalgebra import evaluate, matmul, transpose, wrap
from lazyalgebra.core.exceptions import ValidationError
from lazyalgebra.core.result import Result
from lazyalgebra.engine import NumPyEngine
from lazyalgebra.expression import iter_nodes


class TestIterNodes:

    def test_leaf(self):
        leaf = wrap([1.0])
        assert list(iter_nodes(leaf)) == [leaf]

    def test_shared_operand_visited_once(self):
        x = wrap([1.0, 2.0])
        expr = (x + x) * x
        nodes = list(iter_nodes(expr))
        assert len(nodes) == 3
        assert nodes[0] is expr
        assert sum(1 for n in nodes if n is x) == 1

    def test_product_operands(self, square_pair):
        A, B = square_pair
        expr = matmul(A, B)
        nodes = list(iter_nodes(expr))
        assert len(nodes) == 3


class TestEvaluate:

    def test_vector(self):
        result = evaluate(wrap([1.0, 2.0]) * 2.0)
        assert isinstance(result, Result)
        np.testing.assert_array_equal(result.params.value, [2.0, 4.0])
        assert result.info['kind'] == 'vector'
        assert result.info['shape'] == (2,)
        assert result.info['n_nodes'] == 2
        assert result.info['was_cached'] is False
        assert result.backend_name == 'none'

    def test_matrix_product(self, square_pair):
        A, B = square_pair
        result = evaluate(matmul(A, B))
        np.testing.assert_array_equal(result.params.value, [[19.0, 22.0], [43.0, 50.0]])
        assert result.info['kind'] == 'matrix'
        assert result.info['shape'] == (2, 2)
        assert result.backend_name == 'cpu_numpy'

    def test_timing(self):
        result = evaluate(wrap([1.0]) + 1.0)
        assert set(result.timing) == {'total_seconds', 'materialize'}

    def test_second_evaluation_cached(self):
        expr = wrap([1.0]) + 1.0
        first = evaluate(expr)
        second = evaluate(expr)
        assert second.info['was_cached'] is True
        assert second.params.value is first.params.value

    def test_multiple_engines_listed(self, square_pair, counting_engine):
        A, B = square_pair
        expr = matmul(A, B, engine=counting_engine) + matmul(A, B)
        assert evaluate(expr).backend_name == 'cpu_counting,cpu_numpy'

    def test_rejects_non_expression(self):
        with pytest.raises(ValidationError, match="expected a vector or matrix"):
            evaluate(np.ones(3))

    def test_no_engine_warnings_on_cpu(self, square_pair):
        A, B = square_pair
        result = evaluate(matmul(A, B))
        assert result.warnings == ()

    def test_engine_precision_notes_reported(self, square_pair):
        A, B = square_pair

        class SinglePrecisionEngine(NumPyEngine):
            warnings = ("computes in float32",)

            @property
            def name(self) -> str:
                return 'cpu_single'

        engine = SinglePrecisionEngine()
        expr = matmul(A, B, engine=engine) + transpose(A, engine=engine)
        result = evaluate(expr)
        assert result.warnings == ("computes in float32",)
        assert result.has_warning("float32")
