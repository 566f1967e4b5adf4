"""Stoichiometric solver.

Balancing an equation is finding the positive integer null vector of its
composition matrix. The matrix has one row per element found among the
reactants plus a charge row, and one column per molecule, with product columns
negated so that a balanced equation zeroes every row::

              C5H12  O2  CO2  H2O
        C   [   5     0   -1    0 ]
        H   [  12     0    0   -2 ]
        O   [   0     2   -2   -1 ]
    charge  [   0     0    0    0 ]

The matrix is diagonalized with exact integer arithmetic: rows are combined by
cross-multiplying with the lcm of their pivot-column entries and then reduced
by their gcd, so nothing is ever divided inexactly. Entries are Python ints
held in a numpy ``object`` array, so there is no fixed-width overflow.
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np

from stoichio.arith import gcd_vec, lcm, lcm_vec
from stoichio.errors import SolveError
from stoichio.models import BalancedEquation, Molecule, RawEquation

logger = logging.getLogger(__name__)


class Matrix:
    """Row-major matrix of exact integers."""

    def __init__(self, rows: Sequence[Sequence[int]]):
        if not rows:
            raise ValueError("A matrix needs at least one row")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All matrix rows must have the same length")
        self._coefs = np.empty((len(rows), width), dtype=object)
        for r, row in enumerate(rows):
            for c, value in enumerate(row):
                self._coefs[r, c] = int(value)

    @property
    def n_rows(self) -> int:
        return self._coefs.shape[0]

    @property
    def n_cols(self) -> int:
        return self._coefs.shape[1]

    def at(self, row: int, col: int) -> int:
        return self._coefs[row, col]

    def to_list(self) -> List[List[int]]:
        return [list(row) for row in self._coefs]

    def nonzero_rows(self) -> List[List[int]]:
        return [row for row in self.to_list() if any(row)]

    def diagonalized(self) -> Matrix:
        """Return a diagonalized copy (see :func:`diagonalize`)."""
        result = Matrix(self.to_list())
        diagonalize(result._coefs)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.to_list() == other.to_list()

    def __repr__(self) -> str:
        return f"Matrix({self.to_list()!r})"

    def __str__(self) -> str:
        return "\n".join(" ".join(f"{value:4}" for value in row) for row in self.to_list())


def _simplify_row(coefs: np.ndarray, row: int) -> None:
    divisor = gcd_vec(coefs[row])
    if divisor > 1:
        coefs[row] = coefs[row] // divisor


def _is_zero(rows: np.ndarray) -> bool:
    return all(value == 0 for value in rows.flat)


def _place_pivot(coefs: np.ndarray, pivot: int) -> bool:
    """Swap the first row at/below ``pivot`` with a non-zero pivot entry into place."""
    for r in range(pivot, coefs.shape[0]):
        if coefs[r, pivot] != 0:
            if r != pivot:
                coefs[[pivot, r]] = coefs[[r, pivot]]
            return True
    return False


def _eliminate(coefs: np.ndarray, row: int, pivot: int) -> None:
    value = coefs[row, pivot]
    if value == 0:
        return
    pivot_value = coefs[pivot, pivot]
    multiple = lcm(value, pivot_value)
    coefs[row] = (multiple // value) * coefs[row] - (multiple // pivot_value) * coefs[pivot]
    _simplify_row(coefs, row)


def diagonalize(coefs: np.ndarray) -> None:
    """Diagonalize ``coefs`` in place.

    After the call, every pivot column ``i < min(rows, cols)`` has at most one
    non-zero entry, on the diagonal, and every pivot is non-negative. Rows that
    turn out to be redundant end up all-zero at the bottom.

    Raises:
        SolveError: if a pivot column is zero while non-zero rows remain.
    """
    n_rows, n_cols = coefs.shape
    diag_len = min(n_rows, n_cols)

    for r in range(n_rows):
        _simplify_row(coefs, r)

    for pivot in range(diag_len):
        if not _place_pivot(coefs, pivot):
            if _is_zero(coefs[pivot:]):
                continue
            raise SolveError(
                f"Cannot balance equation: molecule {pivot + 1} is not independent of the ones before it"
            )
        for r in range(pivot + 1, n_rows):
            _eliminate(coefs, r, pivot)

    for pivot in reversed(range(diag_len)):
        if coefs[pivot, pivot] == 0:
            continue
        for r in range(pivot):
            _eliminate(coefs, r, pivot)

    for r in range(diag_len):
        if coefs[r, r] < 0:
            coefs[r] = -coefs[r]


def _columns(equation: RawEquation) -> List[Tuple[Molecule, int]]:
    return [(m, 1) for m in equation.reactants] + [(m, -1) for m in equation.products]


def build_matrix(equation: RawEquation) -> Matrix:
    """Composition matrix of ``equation``: reactant elements plus a charge row."""
    symbols = sorted({symbol for molecule in equation.reactants for symbol in molecule.symbols})
    columns = _columns(equation)
    rows = [[sign * molecule.count(symbol) for molecule, sign in columns] for symbol in symbols]
    rows.append([sign * molecule.charge for molecule, sign in columns])
    return Matrix(rows)


def _check_conservation(equation: RawEquation, coefficients: Sequence[int]) -> None:
    totals: dict[str, int] = {}
    charge = 0
    for (molecule, sign), coefficient in zip(_columns(equation), coefficients):
        for atom, count in molecule.atoms.items():
            totals[atom.code] = totals.get(atom.code, 0) + sign * coefficient * count
        charge += sign * coefficient * molecule.charge

    unbalanced = sorted(symbol for symbol, total in totals.items() if total != 0)
    if unbalanced:
        raise SolveError(f"Cannot balance equation: {', '.join(unbalanced)} not conserved")
    if charge != 0:
        raise SolveError("Cannot balance equation: charge not conserved")


def balance(equation: RawEquation) -> BalancedEquation:
    """Find the minimal positive integer coefficients balancing ``equation``.

    Raises:
        SolveError: if the equation is underconstrained (more than one
            independent way to balance it) or cannot be balanced at all.
    """
    matrix = build_matrix(equation)
    logger.debug(f"Composition matrix for {equation}:\n{matrix}")
    reduced = matrix.diagonalized()
    logger.debug(f"Diagonalized:\n{reduced}")

    rows = reduced.nonzero_rows()
    rank = len(rows)
    n_cols = matrix.n_cols
    if rank + 1 < n_cols:
        raise SolveError(
            f"Equation is underconstrained: {n_cols - rank - 1} coefficient(s) can vary freely"
        )
    if rank + 1 > n_cols:
        raise SolveError("Cannot balance equation: the conservation constraints are inconsistent")

    diagonal = [rows[i][i] for i in range(rank)]
    last = [rows[i][n_cols - 1] for i in range(rank)]
    scale = lcm_vec(diagonal)
    coefficients = [-b * scale // d for d, b in zip(diagonal, last)] + [scale]

    if any(c <= 0 for c in coefficients):
        raise SolveError("Cannot balance equation with positive coefficients")
    divisor = gcd_vec(coefficients)
    coefficients = [c // divisor for c in coefficients]
    _check_conservation(equation, coefficients)

    n_reactants = len(equation.reactants)
    return BalancedEquation(
        reactants=tuple(zip(equation.reactants, coefficients[:n_reactants])),
        products=tuple(zip(equation.products, coefficients[n_reactants:])),
        arrow=equation.arrow,
    )
