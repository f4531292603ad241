"""Logical-qubit count and code distance for single-generator cyclic stabilizer codes.

A single generator (X(x), Z(x)) and its N cyclic translates define a stabilizer
code on a ring of N sites. With

    d1(x)  = gcd(Z(x), X(x))
    d1N(x) = gcd(d1(x), x^N - 1)

the number of logical qubits is k = deg d1N. The distance estimate is the
minimum nonzero weight over the cyclic rotations of the residual
R(x) = (x^N - 1) / d1N(x).
"""

from __future__ import annotations

import logging

import numpy as np

from laurent_polynomial import LaurentPolynomial
from periodic_gcd import (
    gcd,
    gcd_with_periodicity,
    hamming_weight,
    laurent_divide,
    laurent_to_polynomial,
    periodicity_polynomial,
)
from qca_properties import StateLike, state_to_laurent, validate_state


def finite_gcd_factor(X: LaurentPolynomial, Z: LaurentPolynomial, N: int) -> LaurentPolynomial:
    """Return ``d1N(x) = gcd(gcd(Z, X), x^N - 1)``."""
    d1 = gcd(Z, X)
    logging.debug("[GCD] d1(x) = gcd(Z, X) = %s", d1)
    return gcd_with_periodicity(d1, N)


def calculate_logical_qubits(state: StateLike, N: int) -> int:
    """k = highest exponent of d1N(x); 0 for the zero polynomial."""
    validate_state(state, N)
    X, Z = state_to_laurent(state)
    d1N = finite_gcd_factor(X, Z, N)
    if d1N.is_zero():
        return 0
    return int(d1N.degree())


def cyclic_residual(d1N: LaurentPolynomial, N: int) -> np.ndarray:
    """Bits of ``R(x) = (x^N - 1) / d1N(x)`` folded into GF(2)[x]/(x^N - 1)."""
    R = laurent_divide(periodicity_polynomial(N, 2), d1N)
    logging.debug("[DIST] residual R(x) = %s", R)
    return laurent_to_polynomial(R, N)


def residual_distance(residual: np.ndarray) -> int:
    """Minimum nonzero Hamming weight over all cyclic rotations of ``residual``."""
    N = len(residual)
    min_weight = 0
    for shift in range(N):
        w = hamming_weight(np.roll(residual, -shift))
        if w > 0 and (min_weight == 0 or w < min_weight):
            min_weight = w
            logging.debug("[DIST] new minimum weight %d at shift %d", w, shift)
            if min_weight == 1:
                break
    return min_weight


def calculate_code_distance(state: StateLike, N: int) -> int:
    """Code distance from the cyclic residual; 0 when there are no logical qubits.

    A generator with only an X or only a Z component is reported as distance 2,
    the weight of a two-term cyclic codeword ``x^a + x^b``.
    """
    k = calculate_logical_qubits(state, N)
    if k == 0:
        logging.debug("[DIST] no logical qubits, code distance 0")
        return 0

    X, Z = state_to_laurent(state)
    logging.debug("[DIST] generator X = %s, Z = %s", X, Z)
    if X.is_zero() != Z.is_zero():
        return 2

    d1N = finite_gcd_factor(X, Z, N)
    return residual_distance(cyclic_residual(d1N, N))


__all__ = [
    "finite_gcd_factor",
    "calculate_logical_qubits",
    "cyclic_residual",
    "residual_distance",
    "calculate_code_distance",
]
