"""Binary stabilizer tableaux and GF(2) linear algebra.

A tableau is an M x 2N uint8 array; row i is the concatenation of the N-bit
X-support and the N-bit Z-support of generator i. Row order is insertion order.

Row reduction picks the first eligible row (top to bottom) as pivot, so the
reduced form, the pivot list and the null-space basis are reproducible.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from laurent_polynomial import LaurentPolynomial
from periodic_gcd import laurent_to_polynomial

Generator = Tuple[LaurentPolynomial, LaurentPolynomial]


def poly_to_binary_tableau(generators: Sequence[Generator], N: int) -> np.ndarray:
    """Stack ``[X-bits | Z-bits]`` rows, one per ``(X, Z)`` generator."""
    tableau = np.zeros((len(generators), 2 * N), dtype=np.uint8)
    for i, (X, Z) in enumerate(generators):
        tableau[i, :N] = laurent_to_polynomial(X, N)
        tableau[i, N:] = laurent_to_polynomial(Z, N)
    return tableau


def cyclic_generators(X: LaurentPolynomial, Z: LaurentPolynomial, N: int) -> List[Generator]:
    """All N translates ``(x^s X, x^s Z)``, s = 0..N-1."""
    return [(X.shift(s), Z.shift(s)) for s in range(N)]


def cyclic_stabilizer_tableau(X: LaurentPolynomial, Z: LaurentPolynomial, N: int) -> np.ndarray:
    return poly_to_binary_tableau(cyclic_generators(X, Z, N), N)


def _as_binary_matrix(matrix) -> np.ndarray:
    arr = np.array(matrix, dtype=np.uint8, copy=True)
    if arr.ndim != 2:
        raise ValueError(f"Expected a 2-D binary matrix, got shape {arr.shape}")
    return arr & 1


def rref_mod2_inplace(tableau: np.ndarray) -> List[int]:
    """Row-reduce ``tableau`` in place over GF(2); return the pivot columns.

    The caller gives up the original row contents: rows are swapped and XOR-ed.
    Use :func:`rref_mod2` to keep the input intact.
    """
    if not isinstance(tableau, np.ndarray) or tableau.ndim != 2:
        raise ValueError("rref_mod2_inplace needs a 2-D numpy array")
    rows, cols = tableau.shape
    pivots: List[int] = []
    row = 0
    for col in range(cols):
        if row >= rows:
            break
        candidates = np.flatnonzero(tableau[row:, col] & 1)
        if candidates.size == 0:
            continue
        pivot = row + int(candidates[0])
        if pivot != row:
            tableau[[row, pivot]] = tableau[[pivot, row]]
        pivots.append(col)
        others = np.flatnonzero(tableau[:, col] & 1)
        others = others[others != row]
        if others.size:
            tableau[others] ^= tableau[row]
        row += 1
    return pivots


def rref_mod2(tableau) -> Tuple[np.ndarray, List[int]]:
    """Return ``(reduced_copy, pivot_columns)``; the input is not modified."""
    reduced = _as_binary_matrix(tableau)
    pivots = rref_mod2_inplace(reduced)
    return reduced, pivots


def nullspace_mod2(tableau) -> np.ndarray:
    """Basis of ``{v : tableau @ v = 0 (mod 2)}``, one row per free column.

    For each free column f the basis vector has v[f] = 1, the other free
    entries 0, and each pivot entry back-substituted from the reduced row.
    """
    reduced, pivots = rref_mod2(tableau)
    cols = reduced.shape[1]
    pivot_set = set(pivots)
    free_cols = [c for c in range(cols) if c not in pivot_set]

    basis = np.zeros((len(free_cols), cols), dtype=np.uint8)
    for i, free in enumerate(free_cols):
        v = basis[i]
        v[free] = 1
        for r in range(len(pivots) - 1, -1, -1):
            p = pivots[r]
            v[p] = int(np.count_nonzero(reduced[r, p + 1:] & v[p + 1:])) & 1
    return basis


def rank_mod2(matrix) -> int:
    _, pivots = rref_mod2(matrix)
    return len(pivots)


def symplectic_product(a: np.ndarray, b: np.ndarray) -> int:
    """``<a, b> = a_X . b_Z + a_Z . b_X (mod 2)``; 0 iff the Paulis commute."""
    a = np.asarray(a, dtype=np.uint8)
    b = np.asarray(b, dtype=np.uint8)
    N = a.shape[-1] // 2
    return (int(np.count_nonzero(a[:N] & b[N:])) + int(np.count_nonzero(a[N:] & b[:N]))) & 1


def omega_binary(N: int) -> np.ndarray:
    """2N x 2N binary symplectic form ``[[0, I], [I, 0]]``."""
    omega = np.zeros((2 * N, 2 * N), dtype=np.uint8)
    omega[:N, N:] = np.identity(N, dtype=np.uint8)
    omega[N:, :N] = np.identity(N, dtype=np.uint8)
    return omega


def symplectic_dual(tableau: np.ndarray) -> np.ndarray:
    """``tableau @ omega_binary(N)`` computed by swapping the X and Z halves."""
    tableau = np.asarray(tableau, dtype=np.uint8)
    N = tableau.shape[1] // 2
    return np.concatenate((tableau[:, N:], tableau[:, :N]), axis=1)


__all__ = [
    "poly_to_binary_tableau",
    "cyclic_generators",
    "cyclic_stabilizer_tableau",
    "rref_mod2",
    "rref_mod2_inplace",
    "nullspace_mod2",
    "rank_mod2",
    "symplectic_product",
    "omega_binary",
    "symplectic_dual",
]
