import unittest

import numpy as np
import pytest

from clifford_automaton import (
    DEFAULT_RULE_MATRIX,
    PAULI,
    PRESETS,
    f2_to_pauli_string,
    pauli_string_to_f2,
    random_state,
    run,
    single_x_state,
    step,
)
from laurent_matrix import validate_rule_matrix


class TestPauliEncoding(unittest.TestCase):
    def test_parse(self):
        state = pauli_string_to_f2("XZY I")
        np.testing.assert_array_equal(state, [[1, 0], [0, 1], [1, 1], [0, 0]])
        np.testing.assert_array_equal(pauli_string_to_f2("xz"), pauli_string_to_f2("XZ"))
        self.assertEqual(pauli_string_to_f2("").shape, (0, 2))

    def test_unknown_symbol(self):
        with self.assertRaises(ValueError):
            pauli_string_to_f2("XQ")

    def test_render(self):
        self.assertEqual(f2_to_pauli_string(pauli_string_to_f2("IXZY")), "IXZY")
        self.assertEqual(f2_to_pauli_string([PAULI["Y"], PAULI["I"]]), "YI")


class TestInitialStates(unittest.TestCase):
    def test_single_x(self):
        self.assertEqual(f2_to_pauli_string(single_x_state(5, 2)), "IIXII")
        with self.assertRaises(ValueError):
            single_x_state(5, 5)
        with self.assertRaises(ValueError):
            single_x_state(0, 0)

    def test_random_state_is_seeded(self):
        a = random_state(12, seed=3)
        b = random_state(12, seed=3)
        self.assertEqual(a.shape, (12, 2))
        np.testing.assert_array_equal(a, b)
        self.assertTrue(set(np.unique(a)) <= {0, 1})


class TestStep(unittest.TestCase):
    def test_presets_are_valid(self):
        for rule in PRESETS.values():
            validate_rule_matrix(rule)
        np.testing.assert_array_equal(PRESETS["default"], DEFAULT_RULE_MATRIX)

    def test_identity_rule_is_stationary(self):
        state = pauli_string_to_f2("XZYIX")
        np.testing.assert_array_equal(step(state, PRESETS["identity"]), state)

    def test_glider_single_x(self):
        glider = PRESETS["glider"]
        s1 = step(single_x_state(5, 2), glider)
        self.assertEqual(f2_to_pauli_string(s1), "IIZII")
        s2 = step(s1, glider)
        self.assertEqual(f2_to_pauli_string(s2), "IZXZI")

    def test_periodic_boundary(self):
        s = step(pauli_string_to_f2("ZII"), PRESETS["glider"])
        self.assertEqual(f2_to_pauli_string(s), "XZZ")

    def test_step_does_not_modify_input(self):
        state = single_x_state(4, 1)
        step(state, DEFAULT_RULE_MATRIX)
        self.assertEqual(f2_to_pauli_string(state), "IXII")

    def test_invalid_rule(self):
        with self.assertRaises(ValueError):
            step(single_x_state(4, 1), [[1, 0, 1], [0, 1, 0]])


def test_run_history():
    history = run(single_x_state(5, 2), PRESETS["glider"], 3)
    assert history.shape == (4, 5, 2)
    assert [f2_to_pauli_string(s) for s in history[:3]] == ["IIXII", "IIZII", "IZXZI"]


@pytest.mark.parametrize("steps", [0, 1, 6])
def test_run_is_repeated_step(steps):
    rule = DEFAULT_RULE_MATRIX
    state = random_state(7, seed=steps)
    history = run(state, rule, steps)
    current = state
    for t in range(steps + 1):
        np.testing.assert_array_equal(history[t], current)
        current = step(current, rule)


def test_run_rejects_negative_steps():
    with pytest.raises(ValueError):
        run(single_x_state(3, 0), DEFAULT_RULE_MATRIX, -1)
