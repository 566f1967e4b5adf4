"""Errors raised while parsing and balancing equations.

Every error carries a human readable ``message`` and, when the failure can be
traced back to a token, the ``offset`` of that token in the source text.
"""

from __future__ import annotations


class StoichioError(ValueError):
    """Base class for all parse and solve failures."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, offset={self.offset!r})"


class LexicalError(StoichioError):
    """An unrecognized character."""


class StructuralError(StoichioError):
    """Unmatched or mismatched grouping symbols, or groups nested too deeply."""


class SemanticError(StoichioError):
    """Well-formed input that does not make sense.

    Unknown element symbols, malformed charges, a wrong number of arrows, bad
    quantities and quantity-mode violations all end up here.
    """


class SolveError(StoichioError):
    """The stoichiometric system has no unique positive solution."""
