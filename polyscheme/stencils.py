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
"""Ready-made finite difference, finite volume and Hermite schemes"""

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

from polyscheme.gauss import Gauss
from polyscheme.names import *
from polyscheme.polynomial import Polynomial
from polyscheme.rational import Rational
from polyscheme.scheme import PolynomialScheme

logger = logging.getLogger(__name__)


def _point(x):
    if isinstance(x, tuple):
        return Rational.from_value(x)
    return x


def _centered(order: int, what: str) -> range:
    if order % 2:
        raise ValueError(f"Centered {what} need an even order, got {order}; pass them explicitly")
    return range(-(order // 2), order // 2 + 1)


def constraint_row(basis: Polynomial, kind: str, at, derivative: int = 1) -> tuple:
    """Linear form of one constraint applied to the basis polynomial

    Args:
        basis (Polynomial):
            Basis polynomial of a scheme (see PolynomialScheme.get_polynomial).

        kind (str):
            'value' for the value at point `at`, 'derivative' for the derivative of
            order `derivative` at point `at`, 'average' for the mean value over the
            interval `at` = (a, b).

        at:
            Point or (a, b) interval. Points given as (p, q) pairs are read as
            Rational(p, q).

        derivative (int): (Default: 1)
            Derivative order, used with kind 'derivative'.

    Returns:
        (tuple): One coefficient per basis channel
    """
    if kind == VALUE:
        return basis(_point(at))
    if kind == DERIVATIVE:
        return basis.derivate(derivative)(_point(at))
    if kind == AVERAGE:
        a, b = (_point(x) for x in at)
        width = b - a
        if width == 0:
            raise ValueError(f"Empty averaging interval {at}")
        return tuple(v / width for v in basis.integrate(a, b))
    raise ValueError(f"Unknown constraint kind '{kind}', expected '{VALUE}', '{DERIVATIVE}' or '{AVERAGE}'")


def build_scheme(order: int, constraints: Sequence[Tuple], field: Callable[[int], Any] = Rational) -> PolynomialScheme:
    """Build a complete (unsolved) scheme from (kind, at[, derivative]) constraints"""
    if len(constraints) != order + 1:
        raise ValueError(f"A scheme of order {order} needs {order + 1} constraints, got {len(constraints)}")
    scheme = PolynomialScheme(order, field)
    basis = scheme.get_polynomial()
    for constraint in constraints:
        scheme = scheme.add_eqn(constraint_row(basis, *constraint))
    return scheme


def finite_difference(order: int,
                      points: Optional[Sequence] = None,
                      field: Callable[[int], Any] = Rational,
                      gauss: Optional[Gauss] = None) -> Polynomial:
    """Finite difference scheme interpolating point values

    Channel i of the result weights the value at points[i]. The default points
    are -order/2, ..., order/2.
    """
    if points is None:
        points = list(_centered(order, "finite differences"))
    logger.debug(f"Finite difference scheme of order {order} on points {[str(p) for p in points]}")
    return build_scheme(order, [(VALUE, p) for p in points], field).solve(gauss)


def finite_volume(order: int,
                  cells: Optional[Sequence[int]] = None,
                  field: Callable[[int], Any] = Rational,
                  gauss: Optional[Gauss] = None) -> Polynomial:
    """Finite volume reconstruction from unit cell averages

    Cell c spans [c - 1/2, c + 1/2]. Channel i of the result weights the average
    over cells[i]. The default cells are -order/2, ..., order/2.
    """
    if cells is None:
        cells = list(_centered(order, "finite volumes"))
    logger.debug(f"Finite volume scheme of order {order} on cells {list(cells)}")
    half = field(1) / field(2)
    constraints = [(AVERAGE, (c - half, c + half)) for c in cells]
    return build_scheme(order, constraints, field).solve(gauss)


def hermite(nodes: Sequence = (0, 1),
            derivatives: int = 1,
            field: Callable[[int], Any] = Rational,
            gauss: Optional[Gauss] = None) -> Polynomial:
    """Hermite interpolation basis

    Constraints are ordered by derivative order first, then by node: with the
    defaults the channels are the cubic Hermite basis h00, h01, h10, h11.
    """
    if derivatives < 0:
        raise ValueError(f"Number of derivatives must be non-negative, got {derivatives}")
    order = len(nodes) * (derivatives + 1) - 1
    constraints = []
    for k in range(derivatives + 1):
        for node in nodes:
            constraints.append((VALUE, node) if k == 0 else (DERIVATIVE, node, k))
    logger.debug(f"Hermite scheme of order {order} on nodes {[str(n) for n in nodes]}")
    return build_scheme(order, constraints, field).solve(gauss)


def half_cell_averages(scheme: Polynomial) -> Tuple[tuple, tuple]:
    """Averages of a solved finite volume scheme over [-1/2, 0] and [0, 1/2]

    These are the multi-resolution prediction weights of the central cell. The
    weights keep the coefficient type of the scheme.
    """
    sample = scheme.coeffs[0][0]
    zero = sample - sample
    half = (zero + 1) / 2
    left = tuple(2 * v for v in scheme.integrate(-half, zero))
    right = tuple(2 * v for v in scheme.integrate(zero, half))
    return left, right


__all__ = [
    'constraint_row',
    'build_scheme',
    'finite_difference',
    'finite_volume',
    'hermite',
    'half_cell_averages',
]
