"""1D Clifford quantum cellular automaton on a ring of N sites.

Each site holds a Pauli operator in F2 representation ``(x, z)``:
I = (0, 0), X = (1, 0), Z = (0, 1), Y = (1, 1). A state is an ``(N, 2)``
uint8 array. One time step applies the 2x6 rule matrix
[A_left | A_center | A_right] with periodic boundary conditions:

    new[j] = A_left s[j-1] + A_center s[j] + A_right s[j+1]   (mod 2)
"""

from __future__ import annotations

from typing import Dict, Optional, Tuple

import numpy as np

from laurent_matrix import RuleMatrixLike, validate_rule_matrix
from qca_properties import StateLike, validate_state

PAULI: Dict[str, Tuple[int, int]] = {
    "I": (0, 0),
    "X": (1, 0),
    "Z": (0, 1),
    "Y": (1, 1),
}

PAULI_LABELS: Dict[Tuple[int, int], str] = {v: k for k, v in PAULI.items()}

DEFAULT_RULE_MATRIX = np.array(
    [
        [1, 0, 1, 1, 0, 1],
        [0, 1, 0, 1, 1, 0],
    ],
    dtype=np.uint8,
)

PRESETS: Dict[str, np.ndarray] = {
    "default": DEFAULT_RULE_MATRIX,
    "glider": np.array([[0, 0, 0, 1, 0, 0], [0, 1, 1, 0, 0, 1]], dtype=np.uint8),
    "identity": np.array([[0, 0, 1, 0, 0, 0], [0, 0, 0, 1, 0, 0]], dtype=np.uint8),
}


def pauli_string_to_f2(paulis: str) -> np.ndarray:
    """``"XZZXI"`` -> ``(5, 2)`` uint8 array. Case-insensitive, ignores whitespace."""
    cleaned = "".join(paulis.split()).upper()
    bad = sorted(set(cleaned) - set(PAULI))
    if bad:
        raise ValueError(f"Unknown Pauli symbol(s) {bad} in {paulis!r}; expected I, X, Y, Z")
    return np.array([PAULI[c] for c in cleaned], dtype=np.uint8).reshape(len(cleaned), 2)


def f2_to_pauli_string(state: StateLike) -> str:
    arr = validate_state(state)
    return "".join(PAULI_LABELS[(int(x), int(z))] for x, z in arr)


def single_x_state(N: int, position: int) -> np.ndarray:
    """Identity everywhere except an X at ``position``."""
    if N <= 0:
        raise ValueError(f"Lattice size must be a positive integer, got {N}")
    if not 0 <= position < N:
        raise ValueError(f"Position must be between 0 and {N - 1}, got {position}")
    state = np.zeros((N, 2), dtype=np.uint8)
    state[position] = PAULI["X"]
    return state


def random_state(N: int, seed: Optional[int] = None) -> np.ndarray:
    if N <= 0:
        raise ValueError(f"Lattice size must be a positive integer, got {N}")
    rng = np.random.default_rng(seed)
    return rng.integers(0, 2, size=(N, 2), dtype=np.uint8)


def _blocks(rule_matrix: RuleMatrixLike) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    arr = validate_rule_matrix(rule_matrix).astype(np.int64)
    return arr[:, 0:2], arr[:, 2:4], arr[:, 4:6]


def step(state: StateLike, rule_matrix: RuleMatrixLike) -> np.ndarray:
    """Advance ``state`` by one time step; the input is not modified."""
    s = validate_state(state).astype(np.int64)
    if s.shape[0] == 0:
        raise ValueError("Cannot step an empty lattice")
    A_left, A_center, A_right = _blocks(rule_matrix)
    left = np.roll(s, 1, axis=0)    # left[j] = s[j-1]
    right = np.roll(s, -1, axis=0)  # right[j] = s[j+1]
    new = left @ A_left.T + s @ A_center.T + right @ A_right.T
    return (new % 2).astype(np.uint8)


def run(state: StateLike, rule_matrix: RuleMatrixLike, steps: int) -> np.ndarray:
    """Return the ``(steps + 1, N, 2)`` history, initial state first."""
    if steps < 0:
        raise ValueError(f"Number of steps must be non-negative, got {steps}")
    current = validate_state(state)
    history = np.zeros((steps + 1,) + current.shape, dtype=np.uint8)
    history[0] = current
    for t in range(1, steps + 1):
        current = step(current, rule_matrix)
        history[t] = current
    return history


__all__ = [
    "PAULI",
    "PAULI_LABELS",
    "DEFAULT_RULE_MATRIX",
    "PRESETS",
    "pauli_string_to_f2",
    "f2_to_pauli_string",
    "single_x_state",
    "random_state",
    "step",
    "run",
]
