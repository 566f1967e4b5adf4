"""Base interface for element lookups."""

from __future__ import annotations

from abc import ABC, abstractmethod

from stoichio.models import Atom


class ElementLookup(ABC):
    """Read-only mapping from element symbol to :class:`Atom`.

    Parsers only depend on this contract, so tests can pass small fixture
    tables instead of the full periodic table.
    """

    @abstractmethod
    def lookup(self, symbol: str) -> Atom | None:
        """Return the atom for ``symbol`` or ``None`` if there is no such element."""
        pass
