"""Tokenizer for formulas and equations.

The tokenizer never fails: characters it does not know become
``UNRECOGNIZED`` tokens and whitespace is kept, so that every token keeps its
exact offset in the source text for later diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from stoichio.constants import ARROW_CHARS


class Category(Enum):
    LETTERS = "letters"
    DIGITS = "digits"
    DOT = "dot"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    PLUS = "+"
    MINUS = "-"
    CHARGE = "^"
    ARROW = "arrow"
    WHITESPACE = "whitespace"
    UNRECOGNIZED = "unrecognized"


OPENING = {Category.OPEN_PAREN: Category.CLOSE_PAREN, Category.OPEN_BRACKET: Category.CLOSE_BRACKET}
CLOSING = {close: open_ for open_, close in OPENING.items()}

_SINGLE_CHAR = {
    ".": Category.DOT,
    "(": Category.OPEN_PAREN,
    ")": Category.CLOSE_PAREN,
    "[": Category.OPEN_BRACKET,
    "]": Category.CLOSE_BRACKET,
    "+": Category.PLUS,
    "-": Category.MINUS,
    "^": Category.CHARGE,
}


@dataclass(frozen=True)
class Token:
    text: str
    category: Category
    offset: int

    @property
    def end(self) -> int:
        return self.offset + len(self.text)


def classify(char: str) -> tuple[Category, bool]:
    """Return the category of ``char`` and whether it must start a new token.

    An uppercase letter always starts a new token because element symbols
    follow each other without separators ("NaCl" is "Na", "Cl").
    """
    if char.isalpha():
        return Category.LETTERS, char.isupper()
    if "0" <= char <= "9":
        return Category.DIGITS, False
    if char in _SINGLE_CHAR:
        return _SINGLE_CHAR[char], True
    if char in ARROW_CHARS:
        return Category.ARROW, False
    if char.isspace():
        return Category.WHITESPACE, False
    return Category.UNRECOGNIZED, False


def tokenize(text: str) -> list[Token]:
    """Split ``text`` into positioned tokens.

    Joining the token texts gives back ``text``. A ``-`` that touches an arrow
    run ("->", "<-", "<->") is part of the arrow rather than a minus sign.
    """
    tokens: list[Token] = []
    start = 0
    current: Category | None = None
    for index, char in enumerate(text):
        category, force_new = classify(char)
        if char == "-" and (current is Category.ARROW or text.startswith(">", index + 1)):
            category, force_new = Category.ARROW, False
        if category is current and not force_new:
            continue
        if current is not None:
            tokens.append(Token(text[start:index], current, start))
        start, current = index, category
    tokens.append(Token(text[start:], current or Category.WHITESPACE, start))
    return tokens


def without_whitespace(tokens: Iterable[Token]) -> list[Token]:
    return [token for token in tokens if token.category is not Category.WHITESPACE]


def source_text(tokens: Iterable[Token]) -> str:
    """Rebuild the (stripped) source text covered by ``tokens``."""
    return "".join(token.text for token in tokens).strip()
