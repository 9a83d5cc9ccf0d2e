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
"""Exact rational numbers (fraction of two integers)

Every operation on a Rational returns a new, reduced instance: the
denominator is strictly positive and gcd(|p|, q) == 1. Integers (and
fractions.Fraction values) are promoted to Rational through a single
coercion path, as_rational, so that mixed arithmetic never duplicates code.
Mixing a Rational with a float gives a float, as fractions.Fraction does.
"""

import math
import operator
from fractions import Fraction
from numbers import Integral

import sympy


def _as_int(value) -> int:
    if isinstance(value, bool):
        raise TypeError("Rational components must be integers, not bool")
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"Rational components must be integers, got {type(value).__name__}") from None


def as_rational(value):
    """Promote value to a Rational for a binary operation.

    This is the only coercion path used by the Rational operators:
    Rational stays Rational, integers and Fractions become Rational and
    anything else yields NotImplemented.
    """
    if isinstance(value, Rational):
        return value
    if isinstance(value, bool):
        return NotImplemented
    if isinstance(value, Integral):
        return Rational(int(value))
    if isinstance(value, Fraction):
        return Rational(value.numerator, value.denominator)
    return NotImplemented


def _operator_fallbacks(exact_op, float_op):
    """Build the forward and reflected methods of one binary operator."""

    def forward(a, b):
        if isinstance(b, float):
            return float_op(float(a), b)
        b = as_rational(b)
        if b is NotImplemented:
            return NotImplemented
        return exact_op(a, b)

    def reverse(b, a):
        if isinstance(a, float):
            return float_op(a, float(b))
        a = as_rational(a)
        if a is NotImplemented:
            return NotImplemented
        return exact_op(a, b)

    forward.__name__ = '__' + float_op.__name__ + '__'
    reverse.__name__ = '__r' + float_op.__name__ + '__'
    return forward, reverse


class Rational:
    """Immutable exact fraction p/q kept in lowest terms with q > 0.

    Example:
        >>> a = Rational(3, 2)
        >>> a * 3
        Rational(9, 2)
        >>> str(Rational(2, -20))
        '-1/10'

    Args:
        p (int): Numerator.
        q (int): Denominator, must not be zero (default 1).

    Raises:
        ZeroDivisionError: if q is zero.
        TypeError: if p or q is not an integer.
    """

    __slots__ = ('_p', '_q')

    def __init__(self, p=0, q=1):
        p = _as_int(p)
        q = _as_int(q)
        if q == 0:
            raise ZeroDivisionError(f"Rational with zero denominator: {p}/0")
        g = math.gcd(p, q)
        p //= g
        q //= g
        if q < 0:
            p, q = -p, -q
        object.__setattr__(self, '_p', p)
        object.__setattr__(self, '_q', q)

    @classmethod
    def make(cls, p=0, q=1) -> 'Rational':
        """Build the canonical (reduced) rational p/q."""
        return cls(p, q)

    @classmethod
    def from_value(cls, value) -> 'Rational':
        """Convert an int, (p, q) tuple, Fraction, sympy Rational or "p/q" string."""
        if isinstance(value, Rational):
            return value
        if isinstance(value, tuple):
            if len(value) != 2:
                raise ValueError(f"Expected a (p, q) pair, got {value!r}")
            return cls(value[0], value[1])
        if isinstance(value, Fraction):
            return cls(value.numerator, value.denominator)
        if isinstance(value, sympy.Rational):
            return cls(int(value.p), int(value.q))
        if isinstance(value, str):
            if '/' in value:
                parts = value.split('/')
                if len(parts) != 2:
                    raise ValueError(f"Invalid fraction format: {value}")
                return cls(int(parts[0]), int(parts[1]))
            return cls(int(value))
        return cls(value)

    def __setattr__(self, name, value):
        raise AttributeError("Rational is immutable")

    @property
    def p(self) -> int:
        return self._p

    @property
    def q(self) -> int:
        return self._q

    # numbers.Rational-style aliases
    @property
    def numerator(self) -> int:
        return self._p

    @property
    def denominator(self) -> int:
        return self._q

    def is_valid(self) -> bool:
        return self._q != 0

    def is_zero(self) -> bool:
        return self._p == 0

    def signbit(self) -> bool:
        """True if the value is strictly negative."""
        return (self._p < 0) != (self._q < 0)

    def to_fraction(self) -> Fraction:
        return Fraction(self._p, self._q)

    def to_sympy(self) -> sympy.Rational:
        return sympy.Rational(self._p, self._q)

    # Arithmetic

    def _add(a, b):
        lcm = math.lcm(a._q, b._q)
        return Rational(a._p * (lcm // a._q) + b._p * (lcm // b._q), lcm)

    def _sub(a, b):
        lcm = math.lcm(a._q, b._q)
        return Rational(a._p * (lcm // a._q) - b._p * (lcm // b._q), lcm)

    def _mul(a, b):
        return Rational(a._p * b._p, a._q * b._q)

    def _div(a, b):
        if b._p == 0:
            raise ZeroDivisionError(f"Rational division by zero: {a} / 0")
        return Rational(a._p * b._q, a._q * b._p)

    __add__, __radd__ = _operator_fallbacks(_add, operator.add)
    __sub__, __rsub__ = _operator_fallbacks(_sub, operator.sub)
    __mul__, __rmul__ = _operator_fallbacks(_mul, operator.mul)
    __truediv__, __rtruediv__ = _operator_fallbacks(_div, operator.truediv)

    def __pow__(self, exponent):
        if isinstance(exponent, bool) or not isinstance(exponent, Integral):
            return NotImplemented
        exponent = int(exponent)
        if exponent >= 0:
            return Rational(self._p**exponent, self._q**exponent)
        if self._p == 0:
            raise ZeroDivisionError("Zero raised to a negative power")
        return Rational(self._q**-exponent, self._p**-exponent)

    def __neg__(self):
        return Rational(-self._p, self._q)

    def __pos__(self):
        return self

    def __abs__(self):
        return Rational(abs(self._p), abs(self._q))

    # Comparison

    def __eq__(self, other):
        if isinstance(other, float):
            return float(self) == other
        other = as_rational(other)
        if other is NotImplemented:
            return NotImplemented
        return self._p * other._q == self._q * other._p

    def _compare(self, other, op):
        # denominators are positive, cross-multiplying keeps the order
        if isinstance(other, float):
            return op(float(self), other)
        other = as_rational(other)
        if other is NotImplemented:
            return NotImplemented
        return op(self._p * other._q, other._p * self._q)

    def __lt__(self, other):
        return self._compare(other, operator.lt)

    def __le__(self, other):
        return self._compare(other, operator.le)

    def __gt__(self, other):
        return self._compare(other, operator.gt)

    def __ge__(self, other):
        return self._compare(other, operator.ge)

    def __hash__(self):
        return hash(Fraction(self._p, self._q))

    # Conversion

    def __bool__(self):
        return self._p != 0

    def __float__(self):
        return self._p / self._q

    def __int__(self):
        return int(Fraction(self._p, self._q))

    def __str__(self):
        if self._q == 1:
            return str(self._p)
        return f"{self._p}/{self._q}"

    def __repr__(self):
        return f"Rational({self._p}, {self._q})"

    def __reduce__(self):
        return (Rational, (self._p, self._q))

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self


ZERO = Rational(0)
ONE = Rational(1)


def is_rational(value) -> bool:
    return isinstance(value, Rational)


def signbit(value) -> bool:
    """Return True if value is negative (works on Rational, int and float)."""
    if isinstance(value, Rational):
        return value.signbit()
    if isinstance(value, float):
        return math.copysign(1.0, value) < 0
    return value < 0


def exact_divide(a, b):
    """Divide a by b, promoting integers to Rational so the quotient stays exact."""
    if isinstance(a, Integral) and not isinstance(a, bool) and isinstance(b, Integral):
        return Rational(int(a)) / int(b)
    return a / b


__all__ = [
    'Rational',
    'ZERO',
    'ONE',
    'as_rational',
    'is_rational',
    'signbit',
    'exact_divide',
]
