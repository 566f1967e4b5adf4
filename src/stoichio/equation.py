"""Equation parser.

An equation is two members separated by a single arrow. Each member is a
``+``-separated list of formulas, each optionally prefixed by a quantity such
as ``2.5 g`` or ``3 mol``::

    2.5 g CH4 + 3 mol O2 => CO2 + H2O

Any run of ``=``, ``<`` and ``>`` (plus the dash forms ``->``/``<-``) is an
arrow; the spelling is kept for display.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from stoichio.elements.base import ElementLookup
from stoichio.errors import LexicalError, SemanticError
from stoichio.formula import parse_molecule
from stoichio.models import (
    UNITS_BY_SYMBOL,
    Molecule,
    QuantifiedEquation,
    Quantity,
    RawEquation,
)
from stoichio.tokenizer import Category, Token, tokenize, without_whitespace

UNIT_FORMS = ", ".join(UNITS_BY_SYMBOL)


def parse_quantified_equation(table: ElementLookup, tokens: Sequence[Token]) -> QuantifiedEquation:
    return _parse_equation(table, tokens, allow_quantities=True)


def parse_raw_equation(table: ElementLookup, tokens: Sequence[Token]) -> RawEquation:
    """Parse an equation without quantities or coefficients."""
    return _parse_equation(table, tokens, allow_quantities=False).raw()


def parse_equation_text(table: ElementLookup, text: str) -> QuantifiedEquation:
    return parse_quantified_equation(table, tokenize(text))


def parse_raw_equation_text(table: ElementLookup, text: str) -> RawEquation:
    return parse_raw_equation(table, tokenize(text))


def _parse_equation(
    table: ElementLookup, tokens: Sequence[Token], allow_quantities: bool
) -> QuantifiedEquation:
    for token in tokens:
        if token.category is Category.UNRECOGNIZED:
            raise LexicalError(f"Unrecognized character '{token.text}'", token.offset)

    arrows = [i for i, token in enumerate(tokens) if token.category is Category.ARROW]
    if not arrows:
        raise SemanticError("Expected an arrow ('=>', '->', '<=>', ...) between reactants and products")
    if len(arrows) > 1:
        raise SemanticError(
            f"Expected exactly one arrow, found {len(arrows)}", tokens[arrows[1]].offset
        )

    split = arrows[0]
    arrow = tokens[split]
    reactants = _parse_member(table, tokens[:split], arrow, allow_quantities)
    products = _parse_member(table, tokens[split + 1 :], arrow, allow_quantities)
    return QuantifiedEquation(reactants=reactants, products=products, arrow=arrow.text)


def _split_member(tokens: Sequence[Token], anchor: Token) -> List[Tuple[Token, List[Token]]]:
    """Split a member on ``+`` separators.

    Returns ``(token before the segment, segment tokens)`` pairs; the leading
    token is only used to position "empty segment" errors. A sign right after
    ``^`` (or after ``^`` and its digits) belongs to the charge.
    """
    segments: List[Tuple[Token, List[Token]]] = [(anchor, [])]
    expecting_charge_sign = False
    for token in tokens:
        if token.category is Category.PLUS and not expecting_charge_sign:
            segments.append((token, []))
            continue
        segments[-1][1].append(token)
        if token.category is Category.CHARGE:
            expecting_charge_sign = True
        elif token.category is not Category.DIGITS:
            expecting_charge_sign = False
    return segments


def _parse_member(
    table: ElementLookup, tokens: Sequence[Token], anchor: Token, allow_quantities: bool
) -> Tuple[Tuple[Molecule, Optional[Quantity]], ...]:
    terms = []
    for before, segment in _split_member(tokens, anchor):
        if not without_whitespace(segment):
            raise SemanticError("Expected a formula", before.offset)
        terms.append(_parse_term(table, segment, allow_quantities))
    return tuple(terms)


def _parse_term(
    table: ElementLookup, segment: Sequence[Token], allow_quantities: bool
) -> Tuple[Molecule, Optional[Quantity]]:
    significant = without_whitespace(segment)
    if not allow_quantities and significant[0].category is Category.DIGITS:
        raise SemanticError("Coefficients and quantities are not allowed here", significant[0].offset)

    quantity, consumed = _parse_quantity(significant)
    if quantity is None:
        return parse_molecule(table, segment), None

    cut = significant[consumed - 1].end
    rest = [token for token in segment if token.offset >= cut]
    if not without_whitespace(rest):
        raise SemanticError("Expected a formula after the quantity", significant[consumed - 1].offset)
    return parse_molecule(table, rest), quantity


def _parse_quantity(tokens: Sequence[Token]) -> Tuple[Optional[Quantity], int]:
    """Read ``<digits>[.<digits>] <unit>`` from the front of ``tokens``.

    Returns the quantity (or ``None`` if the term does not start with a number)
    and the number of tokens consumed.
    """
    if tokens[0].category is not Category.DIGITS:
        return None, 0

    number = tokens[0].text
    index = 1
    if index < len(tokens) and tokens[index].category is Category.DOT:
        if index + 1 < len(tokens) and tokens[index + 1].category is Category.DIGITS:
            number = f"{number}.{tokens[index + 1].text}"
            index += 2
        else:
            raise SemanticError("Expected digits after the decimal point", tokens[index].offset)

    if index < len(tokens) and tokens[index].category is Category.LETTERS:
        unit = UNITS_BY_SYMBOL.get(tokens[index].text)
        if unit is not None:
            return Quantity(value=float(number), unit=unit), index + 1

    offset = tokens[index].offset if index < len(tokens) else tokens[index - 1].end
    raise SemanticError(f"Expected a unit ({UNIT_FORMS}) after the quantity", offset)
