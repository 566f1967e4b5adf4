"""Unit conversion and limiting-reagent calculations."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

import numpy as np

from stoichio.constants import MG_PER_GRAM
from stoichio.errors import SemanticError
from stoichio.models import Molecule, QuantifiedEquation, Quantity, QuantityMode, Unit
from stoichio.solver import balance

logger = logging.getLogger(__name__)


def grams_of(molecule: Molecule, quantity: Quantity) -> float:
    if quantity.unit is Unit.GRAM:
        return quantity.value
    if quantity.unit is Unit.MILLIGRAM:
        return quantity.value / MG_PER_GRAM
    return quantity.value * molecule.molar_mass


def moles_of(molecule: Molecule, quantity: Quantity) -> float:
    if quantity.unit is Unit.MOLE:
        return quantity.value
    return grams_of(molecule, quantity) / molecule.molar_mass


def _convert(
    equation: QuantifiedEquation, convert: Callable[[Molecule, Quantity], Quantity]
) -> QuantifiedEquation:
    mode = equation.mode  # raises on a mixed quantity layout
    logger.debug(f"Converting quantities of {equation} ({mode.value})")

    def term(molecule: Molecule, quantity: Optional[Quantity]):
        return molecule, None if quantity is None else convert(molecule, quantity)

    return QuantifiedEquation(
        reactants=tuple(term(m, q) for m, q in equation.reactants),
        products=tuple(term(m, q) for m, q in equation.products),
        arrow=equation.arrow,
    )


def to_moles(equation: QuantifiedEquation) -> QuantifiedEquation:
    """Express every given quantity in moles."""
    return _convert(equation, lambda m, q: Quantity(moles_of(m, q), Unit.MOLE))


def to_grams(equation: QuantifiedEquation) -> QuantifiedEquation:
    """Express every given quantity in grams."""
    return _convert(equation, lambda m, q: Quantity(grams_of(m, q), Unit.GRAM))


def compute_limiting_reagent_and_product_quantities(
    equation: QuantifiedEquation,
) -> Tuple[QuantifiedEquation, Molecule]:
    """Find the limiting reagent and the amount of every product formed.

    The equation must give a quantity for every reactant and none for the
    products. The reaction extent is the smallest ``moles / coefficient`` over
    the reactants; each product amount is its coefficient times that extent.

    Returns:
        The equation with reactant quantities in moles and product quantities
        filled in (moles), and the limiting reactant.

    Raises:
        SemanticError: if the quantities are not laid out as described.
        SolveError: if the equation cannot be balanced.
    """
    if equation.mode is not QuantityMode.LIMITING:
        raise SemanticError(
            "Limiting reagent needs a quantity for every reactant and none for the products"
        )

    balanced = balance(equation.raw())
    reactant_moles = [moles_of(m, q) for m, q in equation.reactants]
    coefficients = np.array([c for _, c in balanced.reactants], dtype=float)
    extents = np.array(reactant_moles) / coefficients

    limiting_index = int(np.argmin(extents))
    extent = float(extents[limiting_index])
    limiting = equation.reactants[limiting_index][0]
    logger.debug(f"Limiting reagent {limiting} with reaction extent {extent} mol")

    reactants = tuple(
        (m, Quantity(n, Unit.MOLE)) for (m, _), n in zip(equation.reactants, reactant_moles)
    )
    products = tuple((m, Quantity(c * extent, Unit.MOLE)) for m, c in balanced.products)
    return QuantifiedEquation(reactants=reactants, products=products, arrow=equation.arrow), limiting
