"""Periodic table backed by a CSV file."""

from __future__ import annotations

import csv
import logging
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from pathlib import Path
from typing import Iterable, Iterator

from stoichio.config import periodic_table_path
from stoichio.constants import MILLI_PER_UNIT
from stoichio.elements.base import ElementLookup
from stoichio.models import Atom

logger = logging.getLogger(__name__)


def mass_to_milli(mass: str | float | Decimal) -> int:
    """Convert an atomic mass in u to integer milli-mass-units."""
    milli = Decimal(str(mass)) * MILLI_PER_UNIT
    return int(milli.to_integral_value(rounding=ROUND_HALF_EVEN))


class PeriodicTable(ElementLookup):
    """Element table keyed by symbol. Iterates in insertion order."""

    def __init__(self, atoms: Iterable[Atom]):
        self._atoms: dict[str, Atom] = {}
        for atom in atoms:
            if atom.code in self._atoms:
                raise ValueError(f"Duplicate element symbol: {atom.code}")
            self._atoms[atom.code] = atom

    @classmethod
    def from_records(cls, records: Iterable[tuple[str, str, str | float]]) -> PeriodicTable:
        """Build a table from ``(name, symbol, atomic mass)`` records."""
        return cls(
            Atom(code=symbol, name=name, atomic_mass_milli=mass_to_milli(mass))
            for name, symbol, mass in records
        )

    def lookup(self, symbol: str) -> Atom | None:
        return self._atoms.get(symbol)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._atoms

    def __len__(self) -> int:
        return len(self._atoms)

    def __iter__(self) -> Iterator[Atom]:
        return iter(self._atoms.values())


def load_periodic_table_records(path: str | Path) -> list[tuple[str, str, str]]:
    """Read ``atomic_number,name,symbol,atomic_mass`` rows (with a header line)."""
    records = []
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        next(reader, None)
        for row in reader:
            if not row:
                continue
            if len(row) < 4:
                raise ValueError(f"{path}:{reader.line_num}: expected 4 columns, got {len(row)}")
            _number, name, symbol, mass = (col.strip() for col in row[:4])
            try:
                Decimal(mass)
            except InvalidOperation:
                raise ValueError(f"{path}:{reader.line_num}: invalid atomic mass {mass!r}") from None
            records.append((name, symbol, mass))
    return records


def load_periodic_table(path: str | Path | None = None) -> PeriodicTable:
    """Load the periodic table from ``path`` (see :func:`periodic_table_path`)."""
    resolved = periodic_table_path(path)
    table = PeriodicTable.from_records(load_periodic_table_records(resolved))
    logger.info(f"Loaded {len(table)} elements from {resolved}")
    return table
