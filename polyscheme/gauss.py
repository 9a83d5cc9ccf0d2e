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
"""Gauss-Jordan elimination over exact (or floating point) fields

This module provides reduced row-echelon form, linear solve and matrix
inversion for matrices given as sequences of rows. Entries may be any
field-like numbers (Rational, fractions.Fraction, float). Plain integers
are promoted to Rational so that the elimination stays exact.

A pivot is treated as zero only if it is exactly zero. Singular systems
are reported with SingularMatrixError instead of being skipped.

When the FLINT backend is selected, the computation is delegated to
python-flint's fmpq_mat, which is much faster for large exact systems.
"""

import logging
from numbers import Integral
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from polyscheme.names import *
from polyscheme.rational import ONE, ZERO, Rational

logger = logging.getLogger(__name__)

Matrix = List[List[Any]]


class SingularMatrixError(ArithmeticError):
    """Raised when a square matrix has no inverse.

    Attributes:
        rank (int): Rank attained during the elimination.
        size (int): Dimension of the square matrix.
    """

    def __init__(self, rank: int, size: int):
        self.rank = rank
        self.size = size
        super().__init__(f"Matrix is singular (rank {rank} < {size})")


def _is_zero(value) -> bool:
    return value == 0


def _to_rows(matrix) -> Matrix:
    """Copy a sequence of rows (or 2D numpy array) into a list of lists.

    Integer entries are promoted to Rational. The input is never modified.
    """
    if isinstance(matrix, np.ndarray):
        if matrix.ndim != 2:
            raise ValueError(f"Expected a 2D matrix, got an array with {matrix.ndim} dimensions")
        matrix = matrix.tolist()
    rows = []
    for row in matrix:
        rows.append([Rational(int(v)) if isinstance(v, Integral) and not isinstance(v, bool) else v for v in row])
    if rows and any(len(row) != len(rows[0]) for row in rows):
        raise ValueError("Matrix rows must all have the same length")
    return rows


def _to_square(matrix) -> Matrix:
    rows = _to_rows(matrix)
    n = len(rows)
    if any(len(row) != n for row in rows):
        cols = len(rows[0]) if rows else 0
        raise ValueError(f"Matrix must be square: {n}x{cols}")
    return rows


def _units(rows: Matrix) -> Tuple[Any, Any]:
    """Return the additive and multiplicative identity of the entry type."""
    if not rows or not rows[0]:
        return ZERO, ONE
    sample = rows[0][0]
    zero = sample - sample
    return zero, zero + 1


def _bit_length_score(value) -> int:
    numerator = getattr(value, 'numerator', None)
    denominator = getattr(value, 'denominator', None)
    if numerator is None or denominator is None:
        return 0
    return max(abs(numerator).bit_length(), 1) * max(denominator.bit_length(), 1)


def identity(n: int, one=ONE, zero=ZERO) -> Matrix:
    """Return the n x n identity matrix."""
    return [[one if i == j else zero for j in range(n)] for i in range(n)]


def matmul(a, b) -> Matrix:
    """Return the matrix product a * b."""
    a = _to_rows(a)
    b = _to_rows(b)
    inner = len(b)
    if a and len(a[0]) != inner:
        raise ValueError(f"Matrix dimensions don't match: {len(a)}x{len(a[0])} * {inner}x{len(b[0]) if b else 0}")
    cols = len(b[0]) if b else 0
    result = []
    for row in a:
        out = []
        for j in range(cols):
            acc = row[0] * b[0][j] if inner else ZERO
            for k in range(1, inner):
                acc = acc + row[k] * b[k][j]
            out.append(acc)
        result.append(out)
    return result


class Gauss:
    """Gauss-Jordan elimination for matrices of field-like numbers

    Example:
        >>> gauss = Gauss.get_instance()
        >>> gauss.invert([[1, -1, 1], [1, 0, 0], [1, 1, 1]])
        [[Rational(0, 1), Rational(1, 1), Rational(0, 1)], [Rational(-1, 2), Rational(0, 1), Rational(1, 2)], [Rational(1, 2), Rational(-1, 1), Rational(1, 2)]]

    Args:
        pivoting (str): (Default: 'max_abs')
            Pivot selection strategy. 'max_abs' selects the entry of largest
            absolute value, 'bit_length' selects the non-zero rational entry
            with the smallest numerator and denominator bit lengths, which keeps
            intermediate fractions small.

        backend (str): (Default: 'python')
            'python' uses the generic elimination below. 'flint' delegates to
            python-flint (exact entries only).
    """

    _instances: Dict[Tuple[str, str], 'Gauss'] = {}

    def __init__(self, pivoting: str = MAX_ABS, backend: str = PYTHON):
        if pivoting not in PIVOTING_STRATEGIES:
            raise ValueError(f"Unknown pivoting strategy '{pivoting}', expected one of {PIVOTING_STRATEGIES}")
        if backend not in BACKENDS:
            raise ValueError(f"Unknown backend '{backend}', expected one of {BACKENDS}")
        self.pivoting = pivoting
        self.backend = backend

    @classmethod
    def get_instance(cls, pivoting: str = MAX_ABS, backend: str = PYTHON) -> 'Gauss':
        """Get a shared instance for the given configuration"""
        key = (pivoting, backend)
        if key not in cls._instances:
            cls._instances[key] = cls(pivoting, backend)
        return cls._instances[key]

    def __repr__(self):
        return f"Gauss(pivoting='{self.pivoting}', backend='{self.backend}')"

    # Core operations
    def eliminate(self, matrix) -> Matrix:
        """Compute the reduced row-echelon form of an M x N matrix

        Args:
            matrix: Sequence of rows (or 2D numpy array)

        Returns:
            (list of lists): A new matrix in reduced row-echelon form
        """
        return self.eliminate_with_pivots(matrix)[0]

    def eliminate_with_pivots(self, matrix) -> Tuple[Matrix, List[int]]:
        """Compute the reduced row-echelon form and the list of pivot columns"""
        rows = _to_rows(matrix)
        if self.backend == FLINT:
            return self._flint_eliminate(rows)
        cols = len(rows[0]) if rows else 0
        pivots = self._row_reduce(rows, cols)
        return rows, pivots

    def rank(self, matrix) -> int:
        """Compute the rank of the given matrix"""
        return len(self.eliminate_with_pivots(matrix)[1])

    def solve(self, matrix, rhs: Sequence) -> List[Any]:
        """Solve the square linear system A x = b

        The augmented matrix [A | b] is reduced, pivoting only on the columns
        of A, and each right-hand entry is divided by its diagonal entry.

        Args:
            matrix: Square N x N matrix A
            rhs: Right-hand side b of length N

        Returns:
            (list): The solution x

        Raises:
            ValueError: If A is not square or b has the wrong length
            SingularMatrixError: If A is singular
        """
        rows = _to_square(matrix)
        n = len(rows)
        rhs = _to_rows([list(rhs)])[0]
        if len(rhs) != n:
            raise ValueError(f"Right-hand side has length {len(rhs)}, expected {n}")
        if self.backend == FLINT:
            return self._flint_solve(rows, rhs)
        augmented = [row + [value] for row, value in zip(rows, rhs)]
        pivots = self._row_reduce(augmented, n)
        if len(pivots) < n:
            raise SingularMatrixError(len(pivots), n)
        return [augmented[i][n] / augmented[i][i] for i in range(n)]

    def invert(self, matrix) -> Matrix:
        """Compute the inverse of a square matrix

        The method computes the reduced row-echelon form of [A | I] to get [I | A^-1].

        Args:
            matrix: Square matrix to invert

        Returns:
            (list of lists): The inverse matrix

        Raises:
            ValueError: If matrix is not square
            SingularMatrixError: If matrix is singular (not invertible)
        """
        rows = _to_square(matrix)
        n = len(rows)
        if self.backend == FLINT:
            return self._flint_invert(rows)
        zero, one = _units(rows)
        augmented = [row + unit for row, unit in zip(rows, identity(n, one, zero))]
        pivots = self._row_reduce(augmented, n)
        if len(pivots) < n:
            raise SingularMatrixError(len(pivots), n)
        return [row[n:] for row in augmented]

    # Python backend
    def _select_pivot(self, rows: Matrix, start_row: int, col: int) -> int:
        candidates = range(start_row, len(rows))
        if self.pivoting == BIT_LENGTH:
            nonzero = [i for i in candidates if not _is_zero(rows[i][col])]
            if nonzero:
                return min(nonzero, key=lambda i: _bit_length_score(rows[i][col]))
            return start_row
        # max() keeps the first of equal candidates
        return max(candidates, key=lambda i: abs(rows[i][col]))

    def _row_reduce(self, rows: Matrix, pivot_cols: int) -> List[int]:
        """Reduce rows in place, choosing pivots among the first pivot_cols columns.

        Returns the pivot column of each reduced row; its length is the rank.
        """
        m = len(rows)
        pivots = []
        r = 0
        for j in range(pivot_cols):
            if r >= m:
                break
            k = self._select_pivot(rows, r, j)
            pivot = rows[k][j]
            if _is_zero(pivot):
                logger.debug(f"Column {j} has no non-zero pivot at or below row {r}")
                continue
            rows[k] = [value / pivot for value in rows[k]]
            if k != r:
                rows[k], rows[r] = rows[r], rows[k]
            for i in range(m):
                if i != r:
                    factor = rows[i][j]
                    if not _is_zero(factor):
                        rows[i] = [a - b * factor for a, b in zip(rows[i], rows[r])]
            pivots.append(j)
            r += 1
        logger.debug(f"Gauss-Jordan elimination of a {m}x{len(rows[0]) if rows else 0} matrix: rank {r}")
        return pivots

    # FLINT backend
    @staticmethod
    def _to_flint(rows: Matrix):
        from flint import fmpq, fmpq_mat
        m = len(rows)
        n = len(rows[0]) if rows else 0
        result = fmpq_mat(m, n)
        for i, row in enumerate(rows):
            for j, value in enumerate(row):
                if isinstance(value, float):
                    raise TypeError("The flint backend requires exact entries, got a float")
                value = Rational.from_value(value)
                if not value.is_zero():
                    result[i, j] = fmpq(value.p, value.q)
        return result

    @staticmethod
    def _from_flint(mat) -> Matrix:
        return [[Rational(int(mat[i, j].p), int(mat[i, j].q)) for j in range(mat.ncols())] for i in range(mat.nrows())]

    def _flint_eliminate(self, rows: Matrix) -> Tuple[Matrix, List[int]]:
        if not rows:
            return [], []
        rref, rank = self._to_flint(rows).rref()
        result = self._from_flint(rref)
        pivots = []
        for row in result[:rank]:
            pivots.append(next(j for j, value in enumerate(row) if not value.is_zero()))
        logger.debug(f"FLINT elimination of a {len(rows)}x{len(rows[0])} matrix: rank {rank}")
        return result, pivots

    def _flint_invert(self, rows: Matrix) -> Matrix:
        if not rows:
            return []
        mat = self._to_flint(rows)
        try:
            inv = mat.inv()
        except ZeroDivisionError:
            # FLINT raises ZeroDivisionError for singular matrices
            raise SingularMatrixError(mat.rank(), len(rows)) from None
        return self._from_flint(inv)

    def _flint_solve(self, rows: Matrix, rhs: List[Any]) -> List[Any]:
        if not rows:
            return []
        mat = self._to_flint(rows)
        b = self._to_flint([[value] for value in rhs])
        try:
            x = mat.solve(b)
        except ZeroDivisionError:
            raise SingularMatrixError(mat.rank(), len(rows)) from None
        return [row[0] for row in self._from_flint(x)]


def get_gauss(pivoting: str = MAX_ABS, backend: str = PYTHON, gauss: Optional[Gauss] = None) -> Gauss:
    """Return gauss if given, else the shared instance for pivoting and backend."""
    if gauss is not None:
        return gauss
    return Gauss.get_instance(pivoting, backend)


def eliminate(matrix) -> Matrix:
    """Reduced row-echelon form using the default solver"""
    return Gauss.get_instance().eliminate(matrix)


def rank(matrix) -> int:
    """Rank using the default solver"""
    return Gauss.get_instance().rank(matrix)


def solve(matrix, rhs: Sequence) -> List[Any]:
    """Solve A x = b using the default solver"""
    return Gauss.get_instance().solve(matrix, rhs)


def invert(matrix) -> Matrix:
    """Matrix inverse using the default solver"""
    return Gauss.get_instance().invert(matrix)


__all__ = [
    'Gauss',
    'SingularMatrixError',
    'get_gauss',
    'eliminate',
    'rank',
    'solve',
    'invert',
    'identity',
    'matmul',
]
