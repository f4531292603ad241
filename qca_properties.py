"""Algebraic property checks for Clifford QCA rules and stabilizer generators.

- Invertibility: det M(x) is a unit ``x^k`` of GF(2)[x, x^-1].
- Symplecticity: ``M(x^-1)^T Omega M(x) = Omega``.
- Orthogonal stabilizer: ``S(z) = X(z) Z(z^-1) + Z(z) X(z^-1)`` vanishes, either
  identically (infinite chain) or after folding exponents mod N (ring of N sites).
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, Union

import numpy as np

from laurent_matrix import (
    RuleMatrixLike,
    as_integer_array,
    determinant,
    is_symplectic,
    rule_matrix_to_laurent,
)
from laurent_polynomial import LaurentPolynomial
from periodic_gcd import laurent_to_polynomial

StateLike = Union[Sequence[Sequence[int]], np.ndarray]


def is_invertible(rule_matrix: RuleMatrixLike) -> bool:
    """True iff the rule is invertible on the infinite chain."""
    return determinant(rule_matrix_to_laurent(rule_matrix, 2)).is_monomial()


def is_symplectic_rule_matrix(rule_matrix: RuleMatrixLike) -> bool:
    return is_symplectic(rule_matrix_to_laurent(rule_matrix, 2))


def validate_state(state: StateLike, N: Optional[int] = None) -> np.ndarray:
    """Return the state as an ``(n, 2)`` uint8 array of ``(x, z)`` bits.

    Raises ``ValueError`` on a malformed state or, when ``N`` is given, on a
    length mismatch.
    """
    if N is not None and N <= 0:
        raise ValueError(f"Lattice size must be a positive integer, got {N}")
    arr = as_integer_array(state, "State")
    if arr.size == 0:
        arr = arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"State must have shape (N, 2), got {arr.shape}")
    if not np.all((arr == 0) | (arr == 1)):
        raise ValueError("State symbols must be bit pairs with entries 0 or 1")
    if N is not None and arr.shape[0] != N:
        raise ValueError(f"State length {arr.shape[0]} does not match lattice size {N}")
    return arr.astype(np.uint8)


def state_to_laurent(state: StateLike) -> Tuple[LaurentPolynomial, LaurentPolynomial]:
    """Return ``(X(z), Z(z))``: a term ``z^i`` wherever site i has that component."""
    arr = validate_state(state)
    X = LaurentPolynomial.from_exponents(np.flatnonzero(arr[:, 0]).tolist(), 2)
    Z = LaurentPolynomial.from_exponents(np.flatnonzero(arr[:, 1]).tolist(), 2)
    return X, Z


def symplectic_self_product(X: LaurentPolynomial, Z: LaurentPolynomial) -> LaurentPolynomial:
    """``S(z) = X(z) Z(z^-1) + Z(z) X(z^-1)`` over GF(2)."""
    return X * Z.substitute_inverse() + Z * X.substitute_inverse()


def has_orthogonal_stabilizer(state: StateLike) -> bool:
    X, Z = state_to_laurent(state)
    return symplectic_self_product(X, Z).is_zero()


def has_orthogonal_stabilizer_periodic(state: StateLike, N: int) -> bool:
    """Self-orthogonality in GF(2)[x]/(x^N - 1).

    Weaker than :func:`has_orthogonal_stabilizer`: terms of S(z) may cancel
    once exponents are folded mod N.
    """
    validate_state(state, N)
    X, Z = state_to_laurent(state)
    return not laurent_to_polynomial(symplectic_self_product(X, Z), N).any()


__all__ = [
    "is_invertible",
    "is_symplectic_rule_matrix",
    "validate_state",
    "state_to_laurent",
    "symplectic_self_product",
    "has_orthogonal_stabilizer",
    "has_orthogonal_stabilizer_periodic",
]
