"""Test vector-valued polynomials."""
from fractions import Fraction

import numpy as np
import pytest
import sympy

from polyscheme import Polynomial, Rational

R = Rational


@pytest.fixture
def P():
    return Polynomial.identity(2)


def test_identity(P):
    assert P.degree == 2
    assert P.n == 3
    assert P.shape == (3, 3)
    assert P.coeffs == ((1, 0, 0), (0, 1, 0), (0, 0, 1))
    assert str(P) == "[1,0,0] + [0,1,0] X + [0,0,1] X^2"


def test_evaluate(P):
    assert P(3) == (1, 3, 9)
    assert P.evaluate(-2) == (1, -2, 4)
    assert P((1, 2)) == (1, R(1, 2), R(1, 4))
    assert all(isinstance(v, Rational) for v in P(3))


def test_derivatives(P):
    assert str(P.derivate()) == "[0,1,0] + [0,0,2] X + [0,0,0] X^2"
    assert str(P.derivate(2)) == "[0,0,2] + [0,0,0] X + [0,0,0] X^2"
    assert str(P.derivate(3)) == "[0,0,0] + [0,0,0] X + [0,0,0] X^2"
    assert P.derivate(4) == P.derivate(3)
    assert P.derivate(4).shape == P.shape
    assert P.derivate(2) == P.derivate().derivate()


def test_derivative_of_order_zero(P):
    assert P.derivate(0) is P
    constant = Polynomial([[R(3), R(4)]])
    assert constant.derivate() is constant
    with pytest.raises(ValueError):
        P.derivate(-1)


def test_integrate(P):
    assert P.derivate().integrate((1, 2), (3, 2)) == (0, 1, 2)
    assert P.integrate(0, 1) == (1, R(1, 2), R(1, 3))
    assert P.integrate(R(-1, 2), R(1, 2)) == (1, 0, R(1, 12))
    assert P.integrate(1, 1) == (0, 0, 0)
    assert P.integrate(3, (1, 2)) == tuple(-v for v in P.integrate((1, 2), 3))


def test_primitive(P):
    Q = P.primitive()
    assert Q.degree == 3
    assert str(Q) == "[0,0,0] + [1,0,0] X + [0,1/2,0] X^2 + [0,0,1/3] X^3"
    assert Q.derivate() == P
    assert Q(0) == (0, 0, 0)


def test_equality_pads_with_zeros():
    low = Polynomial([[R(1), R(2)]])
    high = Polynomial([[R(1), R(2)], [R(0), R(0)]])
    assert low == high
    assert high == low
    assert low != Polynomial([[R(1), R(2)], [R(0), R(1)]])
    assert low != Polynomial([[R(1)]])


def test_channel(P):
    assert P.channel(2) == Polynomial([[0], [0], [1]])
    assert P.channel(1)(5) == (5,)


def test_zeros():
    Z = Polynomial.zeros(2, 4)
    assert Z.shape == (3, 4)
    assert Z(7) == (0, 0, 0, 0)
    with pytest.raises(ValueError):
        Polynomial.zeros(-1, 2)


def test_invalid_tables():
    with pytest.raises(ValueError):
        Polynomial([])
    with pytest.raises(ValueError):
        Polynomial([[1, 2], [3]])
    with pytest.raises(ValueError):
        Polynomial.identity(-1)


def test_immutable(P):
    with pytest.raises(AttributeError):
        P.coeffs = ()
    with pytest.raises(TypeError):
        hash(P)


def test_float_coefficients():
    Q = Polynomial([[1.], [2.]])
    assert Q(0.5) == (2.,)
    assert Q.primitive().coeffs == ((0.,), (1.,), (1.,))
    assert Q.integrate(0., 1.) == pytest.approx((2.,))


def test_fraction_coefficients():
    Q = Polynomial.identity(1, Fraction(1), Fraction(0))
    assert Q(Fraction(1, 3)) == (1, Fraction(1, 3))
    assert Q.integrate(0, 1) == (1, Fraction(1, 2))
    assert all(isinstance(v, Fraction) for v in Q.integrate(0, 1))


def test_to_sympy(P):
    x = sympy.Symbol('x')
    assert P.to_sympy() == (1, x, x**2)
    y = sympy.Symbol('y')
    assert P.primitive().to_sympy(y)[1] == y**2 / 2


def test_to_numpy(P):
    table = P.derivate().to_numpy()
    assert table.dtype == float
    assert np.array_equal(table, [[0, 1, 0], [0, 0, 2], [0, 0, 0]])
