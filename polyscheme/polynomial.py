#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
#
#
"""Vector-valued polynomials

A Polynomial of a given degree holds one coefficient vector per power of X,
so that a single object represents n polynomials sharing the same monomial
basis (one channel per unknown of a scheme). The coefficient of X^d in
channel i is coeffs[d][i].
"""

from typing import Any, Sequence, Tuple

import numpy as np
import sympy

from polyscheme.rational import ONE, ZERO, Rational, exact_divide


def _as_point(x):
    """Interpret (p, q) pairs as Rational(p, q); leave other values untouched."""
    if isinstance(x, tuple):
        return Rational.from_value(x)
    return x


def _format_vector(values) -> str:
    return "[" + ",".join(str(v) for v in values) + "]"


class Polynomial:
    """Polynomial of maximal degree `degree` with vector coefficients of size `n`

    Example:
        >>> P = Polynomial.identity(2)
        >>> P(3)
        (Rational(1, 1), Rational(3, 1), Rational(9, 1))
        >>> print(P.derivate())
        [0,1,0] + [0,0,2] X + [0,0,0] X^2

    Args:
        coeffs (list of lists):
            Coefficient table of shape (degree + 1) x n. coeffs[d][i] is the
            coefficient of X^d for channel i.
    """

    __slots__ = ('_coeffs',)

    def __init__(self, coeffs: Sequence[Sequence[Any]]):
        table = tuple(tuple(row) for row in coeffs)
        if not table:
            raise ValueError("A polynomial needs at least one coefficient row")
        n = len(table[0])
        if any(len(row) != n for row in table):
            raise ValueError("All coefficient rows must have the same length")
        object.__setattr__(self, '_coeffs', table)

    @classmethod
    def zeros(cls, degree: int, n: int, value=ZERO) -> 'Polynomial':
        """Polynomial with every coefficient equal to value (zero by default)"""
        if degree < 0 or n < 0:
            raise ValueError(f"Degree and channel count must be non-negative, got {degree} and {n}")
        return cls([[value] * n for _ in range(degree + 1)])

    @classmethod
    def identity(cls, degree: int, one=ONE, zero=ZERO) -> 'Polynomial':
        """Polynomial of n = degree + 1 channels where channel i is X^i"""
        if degree < 0:
            raise ValueError(f"Degree must be non-negative, got {degree}")
        return cls([[one if i == d else zero for i in range(degree + 1)] for d in range(degree + 1)])

    def __setattr__(self, name, value):
        raise AttributeError("Polynomial is immutable")

    @property
    def coeffs(self) -> Tuple[Tuple[Any, ...], ...]:
        return self._coeffs

    @property
    def degree(self) -> int:
        return len(self._coeffs) - 1

    @property
    def n(self) -> int:
        return len(self._coeffs[0])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.degree + 1, self.n)

    def _zero(self):
        sample = self._coeffs[0][0] if self.n else ZERO
        return sample - sample

    def evaluate(self, x) -> tuple:
        """Evaluate every channel at x using Horner's scheme

        Args:
            x: Abscissa. Any number compatible with the coefficient type; a
                (p, q) pair is read as Rational(p, q).

        Returns:
            (tuple): n values, one per channel
        """
        x = _as_point(x)
        result = list(self._coeffs[-1])
        for row in reversed(self._coeffs[:-1]):
            result = [r * x + c for r, c in zip(result, row)]
        return tuple(result)

    def __call__(self, x) -> tuple:
        return self.evaluate(x)

    def _derivate_once(self) -> 'Polynomial':
        zero = self._zero()
        rows = [[d * c for c in self._coeffs[d]] for d in range(1, self.degree + 1)]
        rows.append([zero] * self.n)
        return Polynomial(rows)

    def derivate(self, order: int = 1) -> 'Polynomial':
        """Derivative of the given order, keeping the same shape

        Higher coefficients that vanish are set to zero instead of lowering the
        degree. order == 0 and degree-0 polynomials return self.
        """
        if order < 0:
            raise ValueError(f"Derivative order must be non-negative, got {order}")
        if order == 0 or self.degree == 0:
            return self
        P = self
        for _ in range(min(order, self.degree + 1)):
            P = P._derivate_once()
        return P

    def primitive(self) -> 'Polynomial':
        """Antiderivative vanishing at 0, of degree + 1"""
        zero = self._zero()
        rows = [[zero] * self.n]
        for d in range(1, self.degree + 2):
            rows.append([exact_divide(c, d) for c in self._coeffs[d - 1]])
        return Polynomial(rows)

    def integrate(self, a, b) -> tuple:
        """Definite integral of every channel over [a, b]

        Args:
            a, b: Interval bounds. Integers, Rationals or (p, q) pairs.

        Returns:
            (tuple): n values, one per channel
        """
        P = self.primitive()
        Pa = P(a)
        Pb = P(b)
        return tuple(vb - va for va, vb in zip(Pa, Pb))

    def channel(self, i: int) -> 'Polynomial':
        """Single-channel polynomial of channel i"""
        return Polynomial([[row[i]] for row in self._coeffs])

    def to_sympy(self, symbol='x') -> tuple:
        """Return one sympy expression per channel"""
        if isinstance(symbol, str):
            symbol = sympy.Symbol(symbol)
        exprs = []
        for i in range(self.n):
            expr = sympy.Integer(0)
            for d, row in enumerate(self._coeffs):
                expr += _to_sympy_number(row[i]) * symbol**d
            exprs.append(sympy.expand(expr))
        return tuple(exprs)

    def to_numpy(self) -> np.ndarray:
        """Coefficient table as a float array of shape (degree + 1, n)"""
        return np.array([[float(c) for c in row] for row in self._coeffs], dtype=float)

    def __eq__(self, other):
        if not isinstance(other, Polynomial):
            return NotImplemented
        if self.n != other.n:
            return False
        # compare as if the lower degree table was padded with zeros
        for d in range(max(len(self._coeffs), len(other._coeffs))):
            lhs = self._coeffs[d] if d < len(self._coeffs) else (0,) * self.n
            rhs = other._coeffs[d] if d < len(other._coeffs) else (0,) * other.n
            if any(l != r for l, r in zip(lhs, rhs)):
                return False
        return True

    __hash__ = None

    def __str__(self):
        terms = []
        for d, row in enumerate(self._coeffs):
            term = _format_vector(row)
            if d == 1:
                term += " X"
            elif d > 1:
                term += f" X^{d}"
            terms.append(term)
        return " + ".join(terms)

    def __repr__(self):
        return f"Polynomial({[list(row) for row in self._coeffs]!r})"


def _to_sympy_number(value):
    if isinstance(value, Rational):
        return value.to_sympy()
    return sympy.sympify(value)


__all__ = [
    'Polynomial',
]
