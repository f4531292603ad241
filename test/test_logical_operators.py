import unittest

import numpy as np
import pytest

from clifford_automaton import pauli_string_to_f2
from gf2_tableau import cyclic_stabilizer_tableau, symplectic_product
from logical_operators import (
    LogicalOperatorResult,
    compute_entanglement,
    find_logical_operators,
    logical_search_distance,
    operator_weight,
)
from qca_properties import state_to_laurent


def tableau_for(paulis):
    X, Z = state_to_laurent(pauli_string_to_f2(paulis))
    return cyclic_stabilizer_tableau(X, Z, len(paulis))


def assert_symplectic_pairs(tableau, operators):
    n = len(operators)
    for i in range(n):
        for row in tableau:
            assert symplectic_product(operators[i], row) == 0
        for j in range(n):
            conjugate = i // 2 == j // 2 and i != j
            assert symplectic_product(operators[i], operators[j]) == int(conjugate)


class TestFindLogicalOperators(unittest.TestCase):
    def test_all_y_generator(self):
        tableau = tableau_for("YYYY")
        result = find_logical_operators(tableau, 3)
        self.assertIsInstance(result, LogicalOperatorResult)
        self.assertTrue(result.complete)
        self.assertEqual(result.missing, 0)
        expected = np.array(
            [
                [1, 1, 0, 0, 0, 0, 0, 0],  # X0 X1
                [1, 0, 0, 0, 1, 0, 0, 0],  # Y0
                [0, 1, 1, 0, 0, 0, 0, 0],  # X1 X2
                [1, 1, 0, 0, 1, 1, 0, 0],  # Y0 Y1
                [0, 0, 1, 1, 0, 0, 0, 0],  # X2 X3
                [1, 1, 1, 0, 1, 1, 1, 0],  # Y0 Y1 Y2
            ],
            dtype=np.uint8,
        )
        np.testing.assert_array_equal(result.operators, expected)
        np.testing.assert_array_equal(result.x_operators, expected[0::2])
        np.testing.assert_array_equal(result.z_operators, expected[1::2])
        assert_symplectic_pairs(tableau, result.operators)

    def test_five_qubit_code(self):
        tableau = tableau_for("XZZXI")
        result = find_logical_operators(tableau, 1)
        self.assertTrue(result.complete)
        self.assertEqual(result.operators.shape, (2, 10))
        assert_symplectic_pairs(tableau, result.operators)

    def test_no_logical_qubits(self):
        result = find_logical_operators(tableau_for("XZZXI"), 0)
        self.assertEqual(result.operators.shape, (0, 10))
        self.assertTrue(result.complete)
        self.assertEqual(len(result), 0)

    def test_shortfall_is_reported(self):
        # a single X on one site leaves nothing beyond the stabilizer
        tableau = np.array([[1, 0]], dtype=np.uint8)
        with self.assertLogs(level="WARNING"):
            result = find_logical_operators(tableau, 1)
        self.assertFalse(result.complete)
        self.assertEqual(result.pairs_found, 0)
        self.assertEqual(result.missing, 1)
        self.assertEqual(result.operators.shape, (0, 2))

    def test_partial_result_when_k_too_large(self):
        tableau = np.zeros((0, 2), dtype=np.uint8)
        result = find_logical_operators(tableau, 2)
        self.assertEqual(result.pairs_found, 1)
        self.assertEqual(result.missing, 1)
        np.testing.assert_array_equal(result.operators, [[1, 0], [0, 1]])


@pytest.mark.parametrize("paulis, k", [("XXII", 1), ("IZIZ", 2), ("ZXXZ", 1), ("YYYYYY", 5)])
def test_logical_operators_are_symplectic_pairs(paulis, k):
    tableau = tableau_for(paulis)
    result = find_logical_operators(tableau, k)
    assert len(result) == 2 * result.pairs_found
    assert_symplectic_pairs(tableau, result.operators)


def test_operator_weight():
    assert operator_weight(np.array([1, 0, 0, 1], dtype=np.uint8)) == 2
    assert operator_weight(np.array([1, 0, 1, 0], dtype=np.uint8)) == 1
    assert operator_weight(np.zeros(6, dtype=np.uint8)) == 0


def test_logical_search_distance():
    result = find_logical_operators(tableau_for("YYYY"), 3)
    assert logical_search_distance(result.operators) == 1
    assert logical_search_distance(np.zeros((0, 8), dtype=np.uint8)) == 0


def test_logical_search_distance_respects_cap():
    ops = np.eye(6, dtype=np.uint8)
    assert logical_search_distance(ops, max_operators=4) is None
    assert logical_search_distance(ops, max_operators=6) == 1


def test_logical_search_distance_ignores_cancelling_combinations():
    # both operators are X0 X1; their product is the identity
    ops = np.array([[1, 1, 0, 0], [1, 1, 0, 0]], dtype=np.uint8)
    assert logical_search_distance(ops) == 2


def test_product_state_has_no_entanglement():
    tableau = tableau_for("XIII")
    assert compute_entanglement(tableau) == 0
    assert compute_entanglement(tableau, np.zeros((0, 8), dtype=np.uint8)) == 0


def test_entanglement_counts_crossing_rows_and_z_logicals():
    tableau = tableau_for("YYYY")
    assert compute_entanglement(tableau) == 2
    result = find_logical_operators(tableau, 3)
    # four crossing stabilizer rows plus Y0 Y1 Y2
    assert compute_entanglement(tableau, result.operators) == 2
    # XX on neighbours: rows 1 and 3 cross the cut at site 2
    assert compute_entanglement(tableau_for("XXII")) == 1
