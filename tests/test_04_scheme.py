"""Test the polynomial scheme builder."""
from fractions import Fraction

import pytest

from polyscheme import (Gauss, Polynomial, PolynomialScheme, Rational, SchemeStateError, SingularMatrixError)
from polyscheme.names import *

R = Rational


def test_finite_differences_order_2(fd2_scheme, gauss):
    S = fd2_scheme.solve(gauss)
    assert isinstance(S, Polynomial)
    assert S.shape == (3, 3)
    assert S.derivate(1)(0) == (R(-1, 2), 0, R(1, 2))
    assert S.derivate(2)(0) == (1, -2, 1)
    assert S.derivate(1)(-1) == (R(-3, 2), 2, R(-1, 2))
    assert S(-2) == (3, -3, 1)


def test_dual_basis(fd2_scheme):
    # channel i is 1 on equation i and 0 on the others
    S = fd2_scheme.solve()
    assert S(-1) == (1, 0, 0)
    assert S(0) == (0, 1, 0)
    assert S(1) == (0, 0, 1)


def test_neumann_boundary(gauss):
    PS = PolynomialScheme(2)
    P = PS.get_polynomial()
    S = PS.add_eqn(P.derivate()(0)).add_eqn(P(0)).add_eqn(P(1)).solve(gauss)
    assert S.derivate(1)(0) == (1, 0, 0)
    assert S.derivate(2)(0) == (-2, -2, 2)
    assert S(-1) == (-2, 0, 1)


def test_cubic_hermite(gauss):
    PS = PolynomialScheme(3)
    P = PS.get_polynomial()
    S = (PS.add_eqn(P(0))
         .add_eqn(P(1))
         .add_eqn(P.derivate()(0))
         .add_eqn(P.derivate()(1))
         .solve(gauss))
    assert S.coeffs == ((1, 0, 0, 0), (0, 0, 1, 0), (-3, 3, -2, -1), (2, -2, 1, 1))


def test_finite_volumes_order_2(fv2_scheme, gauss):
    S = fv2_scheme.solve(gauss)
    assert S.integrate((-1, 2), 0) == (R(1, 16), R(1, 2), R(-1, 16))
    assert S.integrate(0, (1, 2)) == (R(-1, 16), R(1, 2), R(1, 16))
    assert S.derivate()(R(-1, 2)) == (-1, 1, 0)
    assert S.derivate()(0) == (R(-1, 2), 0, R(1, 2))


def test_finite_volumes_neumann(gauss):
    PS = PolynomialScheme(2)
    P = PS.get_polynomial()
    S = (PS.add_eqn(P.derivate()(R(-1, 2)))
         .add_eqn(P.integrate((-1, 2), (1, 2)))
         .add_eqn(P.integrate((1, 2), (3, 2)))
         .solve(gauss))
    assert S.derivate()(R(-1, 2)) == (1, 0, 0)
    assert S.integrate((-1, 2), (1, 2)) == (0, 1, 0)
    assert S.integrate((1, 2), (3, 2)) == (0, 0, 1)


def test_builder_is_immutable():
    PS = PolynomialScheme(2)
    P = PS.get_polynomial()
    PS1 = PS.add_eqn(P(0))
    assert PS.index == 0
    assert PS1.index == 1
    # branching from a partial scheme leaves the branches independent
    left = PS1.add_eqn(P(-1)).add_eqn(P(-2))
    right = PS1.add_eqn(P(1)).add_eqn(P(2))
    assert left.matrix[1] == (1, -1, 1)
    assert right.matrix[1] == (1, 1, 1)
    assert PS1.index == 1
    with pytest.raises(AttributeError):
        PS.order = 3


def test_basis_polynomial():
    PS = PolynomialScheme(3)
    assert PS.get_polynomial() == Polynomial.identity(3)
    assert PS.get_basis() == PS.get_polynomial()
    assert PS.order == 3 and not PS.is_complete


def test_add_eqn_on_complete_scheme(fd2_scheme):
    assert fd2_scheme.is_complete
    with pytest.raises(SchemeStateError):
        fd2_scheme.add_eqn((1, 2, 4))


def test_solve_incomplete_scheme():
    PS = PolynomialScheme(2)
    P = PS.get_polynomial()
    with pytest.raises(SchemeStateError):
        PS.add_eqn(P(0)).add_eqn(P(1)).solve()


def test_equation_length():
    with pytest.raises(ValueError):
        PolynomialScheme(2).add_eqn((1, 2))


def test_invalid_order():
    with pytest.raises(ValueError):
        PolynomialScheme(-1)
    with pytest.raises(ValueError):
        PolynomialScheme(1.5)


def test_dependent_equations(gauss):
    PS = PolynomialScheme(1)
    P = PS.get_polynomial()
    with pytest.raises(SingularMatrixError):
        PS.add_eqn(P(1)).add_eqn(P(1)).solve(gauss)


def test_order_zero():
    PS = PolynomialScheme(0)
    P = PS.get_polynomial()
    S = PS.add_eqn(P(5)).solve()
    assert S.coeffs == ((1,),)


def test_fraction_field():
    PS = PolynomialScheme(2, Fraction)
    P = PS.get_polynomial()
    S = PS.add_eqn(P(-1)).add_eqn(P(0)).add_eqn(P(1)).solve(Gauss.get_instance(MAX_ABS, PYTHON))
    assert S.derivate()(0) == (Fraction(-1, 2), 0, Fraction(1, 2))
    assert all(isinstance(c, Fraction) for row in S.coeffs for c in row)


def test_float_field():
    PS = PolynomialScheme(2, float)
    P = PS.get_polynomial()
    S = PS.add_eqn(P(-1)).add_eqn(P(0)).add_eqn(P(1)).solve(Gauss.get_instance(MAX_ABS, PYTHON))
    assert S.derivate()(0) == pytest.approx((-0.5, 0., 0.5))
    assert S.derivate(2)(0) == pytest.approx((1., -2., 1.))


def test_adding_equations_is_logged(caplog):
    PS = PolynomialScheme(1)
    P = PS.get_polynomial()
    with caplog.at_level('DEBUG', logger='polyscheme.scheme'):
        PS.add_eqn(P(0)).add_eqn(P(1)).solve()
    assert "Adding equation 1 of 2" in caplog.text
    assert "Solved scheme of order 1" in caplog.text
