"""Recursive-descent parser for chemical formulas.

Parsing runs in two phases. A structural pass checks that every ``(`` is
closed by ``)`` and every ``[`` by ``]`` and that no unrecognized characters
are present, so bracket problems are reported at the offending bracket rather
than somewhere deep inside the recursion. The second phase walks the tokens:

    formula := term* charge?
    term    := Element digits? | ( "(" formula ")" | "[" formula "]" ) digits?
    charge  := "^" digits? ("+" | "-") | "^" ("+" | "-") digits?

A group multiplier scales both the nested atom counts and the nested charge,
so ``C(CH3^-)4`` has a charge of -4.
"""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from stoichio.constants import MAX_GROUP_DEPTH
from stoichio.elements.base import ElementLookup
from stoichio.errors import LexicalError, SemanticError, StructuralError
from stoichio.models import Atom, Molecule
from stoichio.tokenizer import (
    CLOSING,
    OPENING,
    Category,
    Token,
    source_text,
    tokenize,
    without_whitespace,
)

_SIGNS = {Category.PLUS: 1, Category.MINUS: -1}

CHARGE_FORMS = "^n+, ^n-, ^+n, ^-n, ^+ or ^-"


def parse_molecule(table: ElementLookup, tokens: Sequence[Token]) -> Molecule:
    """Parse the tokens of a single formula into a :class:`Molecule`.

    The molecule keeps the source text of ``tokens`` as its display form.

    Raises:
        LexicalError: on unrecognized characters.
        StructuralError: on unmatched or mismatched brackets.
        SemanticError: on unknown elements, bad charges or stray tokens.
    """
    significant = without_whitespace(tokens)
    if not significant:
        offset = tokens[0].offset if tokens else None
        raise SemanticError("Expected a formula", offset)

    check_structure(significant)
    counts, charge = _parse_span(table, significant, depth=0)
    if not counts:
        raise SemanticError("Formula contains no elements", significant[0].offset)
    return Molecule(atoms=counts, charge=charge, text=source_text(tokens))


def parse_formula(table: ElementLookup, text: str) -> Molecule:
    return parse_molecule(table, tokenize(text))


def check_structure(tokens: Sequence[Token]) -> None:
    """Reject unrecognized characters and unbalanced brackets."""
    stack: list[Token] = []
    for token in tokens:
        if token.category is Category.UNRECOGNIZED:
            raise LexicalError(f"Unrecognized character '{token.text}'", token.offset)
        if token.category in OPENING:
            stack.append(token)
        elif token.category in CLOSING:
            if not stack:
                raise StructuralError(
                    f"'{token.text}' has no matching opening bracket", token.offset
                )
            opened = stack.pop()
            if OPENING[opened.category] is not token.category:
                raise StructuralError(
                    f"'{opened.text}' at column {opened.offset} is closed by '{token.text}'",
                    token.offset,
                )
    if stack:
        opened = stack[-1]
        raise StructuralError(f"'{opened.text}' is never closed", opened.offset)


def _parse_span(
    table: ElementLookup, tokens: Sequence[Token], depth: int
) -> Tuple[Dict[Atom, int], int]:
    counts: Dict[Atom, int] = {}
    charge = 0
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if token.category is Category.LETTERS:
            atom = table.lookup(token.text)
            if atom is None:
                raise SemanticError(f"Unknown element '{token.text}'", token.offset)
            multiplicity, index = _multiplicity(tokens, index + 1)
            counts[atom] = counts.get(atom, 0) + multiplicity
        elif token.category in OPENING:
            close = _matching_close(tokens, index)
            if close == index + 1:
                raise SemanticError("Empty group", token.offset)
            if depth + 1 > MAX_GROUP_DEPTH:
                raise StructuralError(
                    f"Groups nested deeper than {MAX_GROUP_DEPTH} levels", token.offset
                )
            inner_counts, inner_charge = _parse_span(table, tokens[index + 1 : close], depth + 1)
            multiplier, index = _multiplicity(tokens, close + 1)
            for atom, count in inner_counts.items():
                counts[atom] = counts.get(atom, 0) + count * multiplier
            charge += inner_charge * multiplier
        elif token.category is Category.CHARGE:
            delta, index = _parse_charge(tokens, index)
            charge += delta
        else:
            raise SemanticError(f"Unexpected token '{token.text}'", token.offset)
    return counts, charge


def _multiplicity(tokens: Sequence[Token], index: int) -> Tuple[int, int]:
    """Read an optional count at ``index``; returns (count, next index)."""
    if index < len(tokens) and tokens[index].category is Category.DIGITS:
        value = int(tokens[index].text)
        if value == 0:
            raise SemanticError("Multiplicity must be positive", tokens[index].offset)
        return value, index + 1
    return 1, index


def _matching_close(tokens: Sequence[Token], open_index: int) -> int:
    depth = 0
    for index in range(open_index, len(tokens)):
        category = tokens[index].category
        if category in OPENING:
            depth += 1
        elif category in CLOSING:
            depth -= 1
            if depth == 0:
                return index
    opened = tokens[open_index]
    raise StructuralError(f"'{opened.text}' is never closed", opened.offset)


def _parse_charge(tokens: Sequence[Token], index: int) -> Tuple[int, int]:
    marker = tokens[index]
    rest = tokens[index + 1 : index + 3]

    if rest and rest[0].category in _SIGNS:
        sign = _SIGNS[rest[0].category]
        if len(rest) == 2 and rest[1].category is Category.DIGITS:
            return sign * int(rest[1].text), index + 3
        return sign, index + 2

    if (
        len(rest) == 2
        and rest[0].category is Category.DIGITS
        and rest[1].category in _SIGNS
    ):
        return _SIGNS[rest[1].category] * int(rest[0].text), index + 3

    raise SemanticError(f"Malformed charge, expected one of {CHARGE_FORMS}", marker.offset)
