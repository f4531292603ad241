"""Euclidean GCD and periodic reduction in GF(2)[x, x^-1].

Periodic boundary conditions on a ring of N sites are modelled by the quotient
ring GF(2)[x]/(x^N - 1); over GF(2) the relation is x^N + 1.

The GCD works on highest exponents only: the lower operand is shifted up to
align leading terms and XOR-ed in. Shifts are never negative, so the lowest
exponent of every intermediate polynomial is bounded below by the lowest
exponent of the inputs and the loop terminates.
"""

from __future__ import annotations

import logging
from typing import Dict

import numpy as np
import sympy as sp

from laurent_polynomial import LaurentPolynomial


def _as_gf2(poly: LaurentPolynomial) -> LaurentPolynomial:
    if poly.modulus == 2:
        return poly
    return LaurentPolynomial(poly.coeffs, 2)


def _check_lattice_size(N: int) -> None:
    if int(N) != N or N <= 0:
        raise ValueError(f"Lattice size must be a positive integer, got {N}")


def gcd(poly1: LaurentPolynomial, poly2: LaurentPolynomial) -> LaurentPolynomial:
    """GCD of two polynomials over GF(2); ``gcd(p, 0) == gcd(0, p) == p``.

    Inputs with another modulus are reduced mod 2 first.
    """
    a = _as_gf2(poly1)
    b = _as_gf2(poly2)
    if a.is_zero():
        return b
    if b.is_zero():
        return a

    while not b.is_zero():
        if b.degree() > a.degree():
            a, b = b, a
            continue
        a = a + b.shift(a.degree() - b.degree())
        if a.is_zero():
            return b
        if a.degree() < b.degree():
            a, b = b, a
    return a


def periodicity_polynomial(N: int, modulus: int = 2) -> LaurentPolynomial:
    """``x^N - 1`` (``x^N + 1`` over GF(2))."""
    _check_lattice_size(N)
    constant = 1 if modulus == 2 else -1
    return LaurentPolynomial({N: 1, 0: constant}, modulus)


def gcd_with_periodicity(poly: LaurentPolynomial, N: int) -> LaurentPolynomial:
    """``gcd(poly, x^N - 1)``: the finite-chain part of ``poly``."""
    result = gcd(poly, periodicity_polynomial(N, 2))
    logging.debug("[GCD] gcd(%s, x^%d + 1) = %s", poly, N, result)
    return result


def laurent_divide(dividend: LaurentPolynomial, divisor: LaurentPolynomial) -> LaurentPolynomial:
    """Exact quotient ``dividend / divisor``.

    Both operands are first written as ``x^a P(x)`` with ``P(0) != 0``; the
    polynomial parts are divided by long division and the monomial factors are
    recombined, so the division is exact in the Laurent ring.

    Raises
    - ZeroDivisionError: ``divisor`` is zero.
    - ValueError: the divisor's leading coefficient is not 1, or the division
      leaves a remainder.
    """
    if divisor.is_zero():
        raise ZeroDivisionError("Division by the zero Laurent polynomial")
    if dividend.is_zero():
        return LaurentPolynomial.zero(dividend.modulus or divisor.modulus)
    if divisor.leading_coefficient() != 1:
        raise ValueError(f"Divisor must be monic, got leading coefficient {divisor.leading_coefficient()}")

    offset = dividend.min_exponent() - divisor.min_exponent()
    remainder = dividend.shift(-dividend.min_exponent())
    div = divisor.shift(-divisor.min_exponent())
    div_degree = div.degree()

    quotient: Dict[int, int] = {}
    while not remainder.is_zero() and remainder.degree() >= div_degree:
        shift = remainder.degree() - div_degree
        c = remainder.leading_coefficient()
        quotient[shift] = quotient.get(shift, 0) + c
        remainder = remainder - div.shift(shift) * LaurentPolynomial.monomial(0, c, remainder.modulus)

    if not remainder.is_zero():
        raise ValueError(f"{divisor} does not divide {dividend} (remainder {remainder})")
    return LaurentPolynomial(quotient, dividend.modulus or divisor.modulus).shift(offset)


def laurent_to_polynomial(poly: LaurentPolynomial, N: int) -> np.ndarray:
    """Fold exponents mod N into a length-N bit array (XOR accumulation)."""
    _check_lattice_size(N)
    bits = np.zeros(N, dtype=np.uint8)
    for exp, c in poly.terms:
        bits[exp % N] ^= int(c) & 1
    return bits


def hamming_weight(bits: np.ndarray) -> int:
    return int(np.count_nonzero(bits))


def factor_over_gf2(poly: LaurentPolynomial) -> str:
    """Factorization over GF(2) for diagnostics, e.g. ``(x + 1)^2*(x^2 + x + 1)``."""
    poly = _as_gf2(poly)
    if poly.is_zero():
        return "0"
    x = sp.symbols("x")
    shift = poly.min_exponent()
    core = poly.shift(-shift)
    _, factors = sp.Poly(core.as_expr(x), x, modulus=2).factor_list()

    parts = []
    if shift:
        parts.append("x" if shift == 1 else f"x^{shift}")
    for factor, mult in factors:
        text = f"({factor.as_expr()})".replace("**", "^")
        parts.append(text if mult == 1 else f"{text}^{mult}")
    return "*".join(parts) if parts else "1"


__all__ = [
    "gcd",
    "periodicity_polynomial",
    "gcd_with_periodicity",
    "laurent_divide",
    "laurent_to_polynomial",
    "hamming_weight",
    "factor_over_gf2",
]
