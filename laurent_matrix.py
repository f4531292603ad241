"""2x2 matrices over the Laurent polynomial ring.

A Clifford QCA rule on a 1D chain of two-bit sites is a 2x6 binary matrix
[A_left | A_center | A_right]. Its transfer matrix is

    M(x) = A_left x^-1 + A_center + A_right x

with each entry a Laurent polynomial. This module builds M(x) and provides the
matrix operations needed for the invertibility and symplecticity checks.
"""

from __future__ import annotations

from typing import Sequence, Tuple, Union

import numpy as np

from laurent_polynomial import LaurentPolynomial

LaurentMatrix = Tuple[
    Tuple[LaurentPolynomial, LaurentPolynomial],
    Tuple[LaurentPolynomial, LaurentPolynomial],
]

RuleMatrixLike = Union[Sequence[Sequence[int]], np.ndarray]

# Exponent attached to each 2x2 block of the rule matrix.
_BLOCK_EXPONENTS = (-1, 0, 1)


def create_laurent_matrix(entries: Sequence[LaurentPolynomial]) -> LaurentMatrix:
    """Return ``[[a, b], [c, d]]`` from the flat sequence ``[a, b, c, d]``."""
    if len(entries) != 4:
        raise ValueError(f"A 2x2 Laurent matrix needs 4 entries, got {len(entries)}")
    a, b, c, d = entries
    return ((a, b), (c, d))


def multiply_matrices(A: LaurentMatrix, B: LaurentMatrix) -> LaurentMatrix:
    return (
        (
            A[0][0] * B[0][0] + A[0][1] * B[1][0],
            A[0][0] * B[0][1] + A[0][1] * B[1][1],
        ),
        (
            A[1][0] * B[0][0] + A[1][1] * B[1][0],
            A[1][0] * B[0][1] + A[1][1] * B[1][1],
        ),
    )


def transpose(M: LaurentMatrix) -> LaurentMatrix:
    return ((M[0][0], M[1][0]), (M[0][1], M[1][1]))


def substitute_inverse_matrix(M: LaurentMatrix) -> LaurentMatrix:
    """Entrywise ``x -> x^-1``."""
    return tuple(tuple(p.substitute_inverse() for p in row) for row in M)  # type: ignore[return-value]


def determinant(M: LaurentMatrix) -> LaurentPolynomial:
    """``ad - bc``."""
    return M[0][0] * M[1][1] - M[0][1] * M[1][0]


def symplectic_matrix(modulus: int = 0) -> LaurentMatrix:
    """Return Omega = [[0, 1], [-1, 0]] with -1 taken modulo ``modulus``."""
    minus_one = modulus - 1 if modulus else -1
    zero = LaurentPolynomial.zero(modulus)
    return (
        (zero, LaurentPolynomial.monomial(0, 1, modulus)),
        (LaurentPolynomial.monomial(0, minus_one, modulus), zero),
    )


def is_symplectic(M: LaurentMatrix) -> bool:
    """Check ``M(x^-1)^T Omega M(x) == Omega`` entrywise."""
    modulus = M[0][0].modulus
    omega = symplectic_matrix(modulus)
    product = multiply_matrices(
        multiply_matrices(transpose(substitute_inverse_matrix(M)), omega), M
    )
    for i in range(2):
        for j in range(2):
            if not (product[i][j] - omega[i][j]).is_zero():
                return False
    return True


def as_integer_array(value, what: str) -> np.ndarray:
    """Convert to an int64 array; non-integral or non-numeric entries raise ``ValueError``."""
    try:
        arr = np.asarray(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{what} is not a rectangular integer array: {e}") from e
    if arr.dtype.kind not in "biuf":
        raise ValueError(f"{what} entries must be integers, got dtype {arr.dtype}")
    if arr.dtype.kind == "f" and not np.all(arr == np.floor(arr)):
        raise ValueError(f"{what} entries must be integers, got non-integral values")
    return arr.astype(np.int64)


def validate_rule_matrix(rule_matrix: RuleMatrixLike) -> np.ndarray:
    """Return the rule matrix as a 2x6 uint8 array or raise ``ValueError``.

    Shape and entries are checked strictly; nothing is padded or truncated.
    """
    arr = as_integer_array(rule_matrix, "Rule matrix")
    if arr.shape != (2, 6):
        raise ValueError(f"Rule matrix must be 2x6, got shape {arr.shape}")
    if not np.all((arr == 0) | (arr == 1)):
        raise ValueError("Rule matrix entries must be 0 or 1")
    return arr.astype(np.uint8)


def rule_matrix_to_laurent(rule_matrix: RuleMatrixLike, modulus: int = 2) -> LaurentMatrix:
    """Build M(x) from the blocks [A_left | A_center | A_right]."""
    arr = validate_rule_matrix(rule_matrix)
    entries = []
    for i in range(2):
        for j in range(2):
            coeffs = {}
            for block, exp in enumerate(_BLOCK_EXPONENTS):
                value = int(arr[i, 2 * block + j])
                if value:
                    coeffs[exp] = value
            entries.append(LaurentPolynomial(coeffs, modulus))
    return create_laurent_matrix(entries)


def format_laurent_matrix(M: LaurentMatrix) -> str:
    return "[[{}, {}], [{}, {}]]".format(M[0][0], M[0][1], M[1][0], M[1][1])


__all__ = [
    "LaurentMatrix",
    "create_laurent_matrix",
    "multiply_matrices",
    "transpose",
    "substitute_inverse_matrix",
    "determinant",
    "symplectic_matrix",
    "is_symplectic",
    "as_integer_array",
    "validate_rule_matrix",
    "rule_matrix_to_laurent",
    "format_laurent_matrix",
]
