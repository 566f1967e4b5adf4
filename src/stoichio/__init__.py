"""Stoichio core package."""

from stoichio.elements import PeriodicTable, load_periodic_table
from stoichio.equation import (
    parse_equation_text,
    parse_quantified_equation,
    parse_raw_equation,
    parse_raw_equation_text,
)
from stoichio.errors import LexicalError, SemanticError, SolveError, StoichioError, StructuralError
from stoichio.formula import parse_formula, parse_molecule
from stoichio.models import (
    Atom,
    BalancedEquation,
    Molecule,
    QuantifiedEquation,
    Quantity,
    QuantityMode,
    RawEquation,
    Unit,
)
from stoichio.quantities import compute_limiting_reagent_and_product_quantities, to_grams, to_moles
from stoichio.solver import balance
from stoichio.tokenizer import tokenize

__all__ = [
    "Atom",
    "BalancedEquation",
    "LexicalError",
    "Molecule",
    "PeriodicTable",
    "QuantifiedEquation",
    "Quantity",
    "QuantityMode",
    "RawEquation",
    "SemanticError",
    "SolveError",
    "StoichioError",
    "StructuralError",
    "Unit",
    "balance",
    "compute_limiting_reagent_and_product_quantities",
    "load_periodic_table",
    "parse_equation_text",
    "parse_formula",
    "parse_molecule",
    "parse_quantified_equation",
    "parse_raw_equation",
    "parse_raw_equation_text",
    "to_grams",
    "to_moles",
    "tokenize",
]
