"""Laurent polynomials with integer exponents and optional coefficient modulus.

A polynomial is stored as a sparse map exponent -> coefficient. Terms are kept
sorted by exponent and zero coefficients are never stored, so two polynomials
are equal exactly when their term maps are equal. With ``modulus=2`` this is
the ring GF(2)[x, x^-1] used for translation-invariant Pauli operators.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import sympy as sp


class LaurentPolynomial:
    """Immutable Laurent polynomial ``sum_e c_e x^e``.

    Parameters
    - coeffs: mapping exponent -> coefficient. Copied, never aliased.
    - modulus: coefficient modulus ``m >= 0``; ``0`` means plain integers.
    """

    __slots__ = ("_terms", "_modulus")

    def __init__(self, coeffs: Optional[Mapping[int, int]] = None, modulus: int = 0):
        if modulus < 0:
            raise ValueError(f"modulus must be non-negative, got {modulus}")
        self._modulus = int(modulus)
        self._terms = self._normalize(coeffs or {}, self._modulus)

    @staticmethod
    def _normalize(coeffs: Mapping[int, int], modulus: int) -> Dict[int, int]:
        terms: Dict[int, int] = {}
        for exp in sorted(coeffs):
            c = int(coeffs[exp])
            if modulus > 0:
                c %= modulus
            if c != 0:
                terms[int(exp)] = c
        return terms

    # ---------------- constructors ----------------

    @classmethod
    def monomial(cls, exponent: int, coefficient: int = 1, modulus: int = 0) -> "LaurentPolynomial":
        """Return ``coefficient * x^exponent``."""
        return cls({exponent: coefficient}, modulus)

    @classmethod
    def zero(cls, modulus: int = 0) -> "LaurentPolynomial":
        return cls({}, modulus)

    @classmethod
    def from_exponents(cls, exponents: Iterable[int], modulus: int = 2) -> "LaurentPolynomial":
        """Sum of ``x^e`` over ``exponents``; repeated exponents accumulate."""
        coeffs: Dict[int, int] = {}
        for e in exponents:
            coeffs[int(e)] = coeffs.get(int(e), 0) + 1
        return cls(coeffs, modulus)

    # ---------------- accessors ----------------

    @property
    def modulus(self) -> int:
        return self._modulus

    @property
    def coeffs(self) -> Dict[int, int]:
        """Copy of the normalized exponent -> coefficient map."""
        return dict(self._terms)

    @property
    def terms(self) -> Tuple[Tuple[int, int], ...]:
        """Nonzero terms as ``(exponent, coefficient)`` pairs, ascending exponent."""
        return tuple(self._terms.items())

    def exponents(self) -> List[int]:
        return list(self._terms)

    def is_zero(self) -> bool:
        return not self._terms

    def degree(self) -> Optional[int]:
        """Highest exponent present, ``None`` for the zero polynomial."""
        if not self._terms:
            return None
        return next(reversed(self._terms))

    def min_exponent(self) -> Optional[int]:
        if not self._terms:
            return None
        return next(iter(self._terms))

    def leading_coefficient(self) -> int:
        if not self._terms:
            return 0
        return self._terms[next(reversed(self._terms))]

    def is_monomial(self) -> bool:
        """True iff exactly one term whose coefficient is a unit ``±1``.

        Under modulus 2 the only unit is 1; under another modulus ``m`` the
        stored residue of ``-1`` is ``m - 1``.
        """
        if len(self._terms) != 1:
            return False
        (c,) = self._terms.values()
        if self._modulus == 2:
            return c == 1
        if self._modulus > 0:
            return c == 1 or c == self._modulus - 1
        return c in (1, -1)

    def monomial_degree(self) -> Optional[int]:
        """Exponent of a monomial, ``None`` if the polynomial is not one."""
        if not self.is_monomial():
            return None
        return next(iter(self._terms))

    # ---------------- arithmetic ----------------

    def _result_modulus(self, other: "LaurentPolynomial") -> int:
        return self._modulus or other._modulus

    def add(self, other: "LaurentPolynomial") -> "LaurentPolynomial":
        coeffs = dict(self._terms)
        for exp, c in other._terms.items():
            coeffs[exp] = coeffs.get(exp, 0) + c
        return LaurentPolynomial(coeffs, self._result_modulus(other))

    def negate(self) -> "LaurentPolynomial":
        return LaurentPolynomial({e: -c for e, c in self._terms.items()}, self._modulus)

    def subtract(self, other: "LaurentPolynomial") -> "LaurentPolynomial":
        return self.add(other.negate())

    def multiply(self, other: "LaurentPolynomial") -> "LaurentPolynomial":
        """Convolution of the exponent maps, O(T1 * T2)."""
        coeffs: Dict[int, int] = {}
        for e1, c1 in self._terms.items():
            for e2, c2 in other._terms.items():
                coeffs[e1 + e2] = coeffs.get(e1 + e2, 0) + c1 * c2
        return LaurentPolynomial(coeffs, self._result_modulus(other))

    def shift(self, k: int) -> "LaurentPolynomial":
        """Multiply by ``x^k``."""
        return LaurentPolynomial({e + k: c for e, c in self._terms.items()}, self._modulus)

    def substitute_inverse(self) -> "LaurentPolynomial":
        """Substitute ``x -> x^-1`` (negate every exponent)."""
        return LaurentPolynomial({-e: c for e, c in self._terms.items()}, self._modulus)

    __add__ = add
    __sub__ = subtract
    __mul__ = multiply

    def __neg__(self) -> "LaurentPolynomial":
        return self.negate()

    # ---------------- comparison / display ----------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LaurentPolynomial):
            return NotImplemented
        return self._modulus == other._modulus and self._terms == other._terms

    def __hash__(self) -> int:
        return hash((self._modulus, self.terms))

    def __bool__(self) -> bool:
        return bool(self._terms)

    def __repr__(self) -> str:
        return f"LaurentPolynomial({self._terms!r}, modulus={self._modulus})"

    def to_string(self, variable: str = "x") -> str:
        """Render with descending exponents, e.g. ``x^2 + x + 1 + x^-1``."""
        if not self._terms:
            return "0"
        parts = []
        for exp in sorted(self._terms, reverse=True):
            c = self._terms[exp]
            if exp == 0:
                parts.append(str(c))
                continue
            x_term = variable if exp == 1 else f"{variable}^{exp}"
            if c == 1:
                parts.append(x_term)
            elif c == -1:
                parts.append(f"-{x_term}")
            else:
                parts.append(f"{c}{x_term}")
        return " + ".join(parts).replace("+ -", "- ")

    def __str__(self) -> str:
        return self.to_string()

    def as_expr(self, symbol: Optional[sp.Symbol] = None) -> sp.Expr:
        """Return the polynomial as a SymPy expression in ``symbol`` (default ``x``)."""
        x = symbol if symbol is not None else sp.symbols("x")
        return sp.Add(*[c * x**e for e, c in self._terms.items()])


__all__ = ["LaurentPolynomial"]
