"""Data structures for atoms, molecules and equations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from stoichio.constants import MILLI_PER_UNIT
from stoichio.errors import SemanticError


@dataclass(frozen=True, order=True)
class Atom:
    code: str
    name: str
    atomic_mass_milli: int  # milli-mass-units

    @property
    def atomic_mass(self) -> float:
        return self.atomic_mass_milli / MILLI_PER_UNIT


def format_charge(charge: int) -> str:
    """Render a net charge the way it is written in formulas ("^2+", "^-")."""
    if charge == 0:
        return ""
    sign = "+" if charge > 0 else "-"
    magnitude = abs(charge)
    return f"^{sign}" if magnitude == 1 else f"^{magnitude}{sign}"


@dataclass(frozen=True, eq=False)
class Molecule:
    """A chemical species: atom counts plus a net charge.

    Atoms are kept sorted by symbol and zero counts are dropped. ``text`` is the
    formula as the user wrote it; it is only used for display, so two molecules
    with the same counts and charge compare equal whatever their spelling.
    """

    atoms: Mapping[Atom, int]
    charge: int = 0
    text: Optional[str] = None

    def __post_init__(self) -> None:
        normalized = {}
        for atom, count in sorted(self.atoms.items()):
            if count < 0:
                raise ValueError(f"Negative count {count} for {atom.code}")
            if count:
                normalized[atom] = count
        object.__setattr__(self, "atoms", MappingProxyType(normalized))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Molecule):
            return NotImplemented
        return dict(self.atoms) == dict(other.atoms) and self.charge == other.charge

    def __hash__(self) -> int:
        return hash((tuple(self.atoms.items()), self.charge))

    def __str__(self) -> str:
        return self.text if self.text else self.formula()

    def formula(self) -> str:
        """Canonical rendering, e.g. ``C2H3O2^-``."""
        body = "".join(
            atom.code if count == 1 else f"{atom.code}{count}"
            for atom, count in self.atoms.items()
        )
        return body + format_charge(self.charge)

    def count(self, symbol: str) -> int:
        for atom, count in self.atoms.items():
            if atom.code == symbol:
                return count
        return 0

    @property
    def symbols(self) -> Tuple[str, ...]:
        return tuple(atom.code for atom in self.atoms)

    @property
    def molar_mass_milli(self) -> int:
        return sum(atom.atomic_mass_milli * count for atom, count in self.atoms.items())

    @property
    def molar_mass(self) -> float:
        """Molar mass in g/mol."""
        return self.molar_mass_milli / MILLI_PER_UNIT


def _join_terms(terms: Sequence[str]) -> str:
    return " + ".join(terms)


@dataclass(frozen=True)
class RawEquation:
    reactants: Tuple[Molecule, ...]
    products: Tuple[Molecule, ...]
    arrow: str = "=>"

    def __post_init__(self) -> None:
        object.__setattr__(self, "reactants", tuple(self.reactants))
        object.__setattr__(self, "products", tuple(self.products))

    @property
    def molecules(self) -> Tuple[Molecule, ...]:
        return self.reactants + self.products

    def __str__(self) -> str:
        lhs = _join_terms([str(m) for m in self.reactants])
        rhs = _join_terms([str(m) for m in self.products])
        return f"{lhs} {self.arrow} {rhs}"


@dataclass(frozen=True)
class BalancedEquation:
    """An equation with positive integer coefficients whose overall gcd is 1."""

    reactants: Tuple[Tuple[Molecule, int], ...]
    products: Tuple[Tuple[Molecule, int], ...]
    arrow: str = "=>"

    def __post_init__(self) -> None:
        object.__setattr__(self, "reactants", tuple(self.reactants))
        object.__setattr__(self, "products", tuple(self.products))

    @property
    def coefficients(self) -> Tuple[int, ...]:
        return tuple(c for _, c in self.reactants) + tuple(c for _, c in self.products)

    def coefficient_of(self, molecule: Molecule) -> int:
        for candidate, coefficient in self.reactants + self.products:
            if candidate == molecule:
                return coefficient
        raise KeyError(str(molecule))

    def __str__(self) -> str:
        def term(molecule: Molecule, coefficient: int) -> str:
            return str(molecule) if coefficient == 1 else f"{coefficient} {molecule}"

        lhs = _join_terms([term(m, c) for m, c in self.reactants])
        rhs = _join_terms([term(m, c) for m, c in self.products])
        return f"{lhs} {self.arrow} {rhs}"


class Unit(Enum):
    GRAM = "g"
    MILLIGRAM = "mg"
    MOLE = "mol"


UNITS_BY_SYMBOL = {unit.value: unit for unit in Unit}


@dataclass(frozen=True)
class Quantity:
    value: float
    unit: Unit

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit.value}"


class QuantityMode(Enum):
    NONE = "none"  # pure balancing
    ALL = "all"  # unit conversion
    LIMITING = "limiting"  # reactants known, products to compute


Term = Tuple[Molecule, Optional[Quantity]]


@dataclass(frozen=True)
class QuantifiedEquation:
    reactants: Tuple[Term, ...]
    products: Tuple[Term, ...]
    arrow: str = "=>"

    def __post_init__(self) -> None:
        object.__setattr__(self, "reactants", tuple(self.reactants))
        object.__setattr__(self, "products", tuple(self.products))

    @property
    def mode(self) -> QuantityMode:
        """Which of the three valid quantity layouts this equation uses.

        Raises:
            SemanticError: if quantities are given for some molecules only.
        """
        reactants_known = [q is not None for _, q in self.reactants]
        products_known = [q is not None for _, q in self.products]
        if not any(reactants_known) and not any(products_known):
            return QuantityMode.NONE
        if all(reactants_known) and all(products_known):
            return QuantityMode.ALL
        if all(reactants_known) and not any(products_known):
            return QuantityMode.LIMITING
        raise SemanticError(
            "Quantities must be given for every molecule, for none of them, "
            "or for every reactant and no product"
        )

    def raw(self) -> RawEquation:
        return RawEquation(
            reactants=tuple(m for m, _ in self.reactants),
            products=tuple(m for m, _ in self.products),
            arrow=self.arrow,
        )

    def __str__(self) -> str:
        def term(molecule: Molecule, quantity: Optional[Quantity]) -> str:
            return str(molecule) if quantity is None else f"{quantity} {molecule}"

        lhs = _join_terms([term(m, q) for m, q in self.reactants])
        rhs = _join_terms([term(m, q) for m, q in self.products])
        return f"{lhs} {self.arrow} {rhs}"
