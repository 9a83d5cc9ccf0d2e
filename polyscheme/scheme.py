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
"""Polynomial schemes built from linear constraints

A PolynomialScheme of order k looks for polynomials of degree <= k. Each
constraint is a linear form on the k + 1 coefficients, usually obtained by
evaluating, differentiating or integrating the monomial basis returned by
get_polynomial(). Once k + 1 constraints are given, solve() returns the
polynomial whose channel i satisfies constraint i with value 1 and all the
others with value 0: applying the channels to sample values gives the
scheme weights.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

from polyscheme.gauss import Gauss, get_gauss
from polyscheme.polynomial import Polynomial
from polyscheme.rational import Rational

logger = logging.getLogger(__name__)


class SchemeStateError(RuntimeError):
    """Raised when a scheme is used in a state that does not allow the operation."""


class PolynomialScheme:
    """Accumulator of linear constraints on a polynomial of given order

    The scheme is immutable: add_eqn returns a new scheme, so partially built
    schemes can be reused and branched freely.

    Example:
        >>> PS = PolynomialScheme(2)
        >>> P = PS.get_polynomial()
        >>> S = PS.add_eqn(P(-1)).add_eqn(P(0)).add_eqn(P(1)).solve()
        >>> S.derivate()(0)
        (Rational(-1, 2), Rational(0, 1), Rational(1, 2))

    Args:
        order (int):
            Maximal degree of the polynomial. The scheme needs exactly order + 1
            constraints.

        field (callable): (Default: Rational)
            Numeric type of the coefficients. field(0) and field(1) must give the
            additive and multiplicative identities (e.g. Rational, Fraction, float).
    """

    __slots__ = ('_order', '_field', '_rows')

    def __init__(self, order: int, field: Callable[[int], Any] = Rational, rows: Sequence[Sequence[Any]] = ()):
        if isinstance(order, bool) or not isinstance(order, int) or order < 0:
            raise ValueError(f"Scheme order must be a non-negative integer, got {order!r}")
        rows = tuple(tuple(row) for row in rows)
        if len(rows) > order + 1:
            raise SchemeStateError(f"A scheme of order {order} accepts at most {order + 1} equations, got {len(rows)}")
        for row in rows:
            self._check_row(row, order)
        object.__setattr__(self, '_order', order)
        object.__setattr__(self, '_field', field)
        object.__setattr__(self, '_rows', rows)

    @staticmethod
    def _check_row(row: Tuple[Any, ...], order: int):
        if len(row) != order + 1:
            raise ValueError(f"Equation has {len(row)} coefficients, expected {order + 1}")

    def __setattr__(self, name, value):
        raise AttributeError("PolynomialScheme is immutable")

    @property
    def order(self) -> int:
        return self._order

    @property
    def field(self) -> Callable[[int], Any]:
        return self._field

    @property
    def index(self) -> int:
        """Number of equations added so far"""
        return len(self._rows)

    @property
    def matrix(self) -> Tuple[Tuple[Any, ...], ...]:
        """Rows of the equations added so far"""
        return self._rows

    @property
    def is_complete(self) -> bool:
        return len(self._rows) == self._order + 1

    def get_polynomial(self) -> Polynomial:
        """Monomial basis of the scheme: channel i is X^i"""
        return Polynomial.identity(self._order, self._field(1), self._field(0))

    get_basis = get_polynomial

    def add_eqn(self, coeffs: Sequence[Any]) -> 'PolynomialScheme':
        """Return a new scheme with one more equation

        Args:
            coeffs (sequence):
                order + 1 coefficients of the linear form, typically the result of
                evaluating, differentiating or integrating get_polynomial().

        Returns:
            (PolynomialScheme): A new scheme; self is unchanged

        Raises:
            ValueError: If coeffs has the wrong length
            SchemeStateError: If the scheme already holds order + 1 equations
        """
        row = tuple(coeffs)
        self._check_row(row, self._order)
        if self.is_complete:
            raise SchemeStateError(f"Scheme of order {self._order} is already complete with {self.index} equations")
        logger.debug(f"Adding equation {self.index} of {self._order + 1}: {[str(c) for c in row]}")
        return PolynomialScheme(self._order, self._field, self._rows + (row,))

    def solve(self, gauss: Optional[Gauss] = None) -> Polynomial:
        """Solve the constraints for the dual polynomial basis

        Args:
            gauss (Gauss): (Default: None)
                Solver used to invert the constraint matrix. The shared default
                instance is used if None.

        Returns:
            (Polynomial): Polynomial of degree order with order + 1 channels; channel
            i is 1 on equation i and 0 on every other equation

        Raises:
            SchemeStateError: If fewer than order + 1 equations were added
            SingularMatrixError: If the equations are not linearly independent
        """
        if not self.is_complete:
            raise SchemeStateError(f"Scheme of order {self._order} needs {self._order + 1} equations, got {self.index}")
        inverse = get_gauss(gauss=gauss).invert(self._rows)
        logger.debug(f"Solved scheme of order {self._order}")
        return Polynomial(inverse)

    def __repr__(self):
        return f"PolynomialScheme(order={self._order}, index={self.index})"


__all__ = [
    'PolynomialScheme',
    'SchemeStateError',
]
