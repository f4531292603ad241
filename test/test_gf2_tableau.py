"""GF(2) row reduction, null spaces and tableau construction."""

from __future__ import annotations

import numpy as np
import pytest

from ldpc import mod2

from gf2_tableau import (
    cyclic_generators,
    cyclic_stabilizer_tableau,
    nullspace_mod2,
    omega_binary,
    poly_to_binary_tableau,
    rank_mod2,
    rref_mod2,
    rref_mod2_inplace,
    symplectic_dual,
    symplectic_product,
)
from laurent_polynomial import LaurentPolynomial


def gf2(*exponents):
    return LaurentPolynomial.from_exponents(exponents, 2)


def random_matrices(seed=11, count=25):
    rng = np.random.default_rng(seed)
    for _ in range(count):
        rows = int(rng.integers(1, 9))
        cols = int(rng.integers(1, 12))
        yield rng.integers(0, 2, size=(rows, cols), dtype=np.uint8)


def test_poly_to_binary_tableau_layout():
    tableau = poly_to_binary_tableau([(gf2(0, 1), gf2(1))], 3)
    np.testing.assert_array_equal(tableau, [[1, 1, 0, 0, 1, 0]])


def test_cyclic_tableau_wraps_around():
    tableau = cyclic_stabilizer_tableau(gf2(0, 1), LaurentPolynomial.zero(2), 3)
    np.testing.assert_array_equal(
        tableau,
        [
            [1, 1, 0, 0, 0, 0],
            [0, 1, 1, 0, 0, 0],
            [1, 0, 1, 0, 0, 0],
        ],
    )
    assert len(cyclic_generators(gf2(0), gf2(0), 5)) == 5


def test_rref_known_matrix():
    M = np.array([[1, 1, 0], [0, 1, 1], [1, 0, 1]], dtype=np.uint8)
    reduced, pivots = rref_mod2(M)
    np.testing.assert_array_equal(reduced, [[1, 0, 1], [0, 1, 1], [0, 0, 0]])
    assert pivots == [0, 1]
    # input untouched
    np.testing.assert_array_equal(M, [[1, 1, 0], [0, 1, 1], [1, 0, 1]])
    np.testing.assert_array_equal(nullspace_mod2(M), [[1, 1, 1]])


def test_rref_inplace_modifies_argument():
    M = np.array([[0, 1], [1, 1]], dtype=np.uint8)
    pivots = rref_mod2_inplace(M)
    assert pivots == [0, 1]
    np.testing.assert_array_equal(M, np.identity(2, dtype=np.uint8))


def test_rref_inplace_rejects_non_arrays():
    with pytest.raises(ValueError):
        rref_mod2_inplace([[1, 0], [0, 1]])
    with pytest.raises(ValueError):
        rref_mod2(np.array([1, 0, 1]))


@pytest.mark.parametrize("M", list(random_matrices()))
def test_rref_is_idempotent(M):
    reduced, pivots = rref_mod2(M)
    again, pivots_again = rref_mod2(reduced)
    np.testing.assert_array_equal(again, reduced)
    assert pivots_again == pivots


@pytest.mark.parametrize("M", list(random_matrices(seed=5)))
def test_nullspace_is_annihilated(M):
    basis = nullspace_mod2(M)
    assert basis.shape == (M.shape[1] - rank_mod2(M), M.shape[1])
    for v in basis:
        assert not ((M.astype(int) @ v.astype(int)) % 2).any()
    if len(basis):
        assert rank_mod2(basis) == len(basis)


@pytest.mark.parametrize("M", list(random_matrices(seed=19)))
def test_rank_matches_ldpc(M):
    assert rank_mod2(M) == mod2.rank(M)


def test_symplectic_product():
    X0 = np.array([1, 0], dtype=np.uint8)
    Z0 = np.array([0, 1], dtype=np.uint8)
    Y0 = np.array([1, 1], dtype=np.uint8)
    assert symplectic_product(X0, Z0) == 1
    assert symplectic_product(X0, X0) == 0
    assert symplectic_product(Y0, Y0) == 0
    assert symplectic_product(Y0, Z0) == 1
    # XX and ZZ on two sites commute
    assert symplectic_product(np.array([1, 1, 0, 0]), np.array([0, 0, 1, 1])) == 0


@pytest.mark.parametrize("N", [1, 3, 6])
def test_symplectic_dual_matches_omega(N):
    rng = np.random.default_rng(N)
    tableau = rng.integers(0, 2, size=(4, 2 * N), dtype=np.uint8)
    expected = (tableau.astype(int) @ omega_binary(N).astype(int)) % 2
    np.testing.assert_array_equal(symplectic_dual(tableau), expected)
    for a in tableau:
        for b in tableau:
            assert symplectic_product(a, b) == int(a.astype(int) @ omega_binary(N).astype(int) @ b.astype(int)) % 2
