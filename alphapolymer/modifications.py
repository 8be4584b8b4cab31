"""Mass-bearing modifications and the named modification registry.

A modification is one closed variant with a capability set: it always has a
mass, and optionally a chemical formula and a display name. Formula-bearing
modifications let a polymer report its full elemental composition; mass-only
ones (e.g. ``[25.132]``) do not.

Key Features
------------
- ``Modification`` value type (formula, registry entry, or bare mass)
- ``ModificationRegistry`` lookup-by-name with registration of new entries
- Heavy isotope promotion of a residue (``[#]`` annotation)
- Parse modification site strings from data files (MaxQuant/AlphaDIA style)

Examples
--------
>>> carbamidomethyl = get_modification("Carbamidomethyl")
>>> round(carbamidomethyl.mass, 6)
57.021464

>>> # Parse modifications from a data file row
>>> mods = parse_modifications("Carbamidomethyl@C;Oxidation@M", "3;7")
>>> [(str(mod), site) for mod, site in mods]
[('Carbamidomethyl', 3), ('Oxidation', 7)]
"""

from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .chemistry import ChemicalFormula
from .constants import HEAVY_ISOTOPES, HEAVY_LABEL
from .exceptions import ParseError
from .residues import AminoAcid

logger = logging.getLogger(__name__)


# =============================================================================
# Modification Value
# =============================================================================

class Modification:
    """A mass shift attached to a residue or terminus.

    Parameters
    ----------
    mass : float
        Monoisotopic mass shift in Da
    formula : ChemicalFormula, optional
        Elemental composition of the shift; when given, ``mass`` must match it
    name : str, optional
        Display label (registry name)

    Notes
    -----
    Equality is chemical: two formula-bearing modifications are equal when
    their formulas are, two mass-only modifications when their masses are.
    Names only affect how the modification is rendered.
    """

    __slots__ = ("mass", "formula", "name")

    def __init__(self, mass: float, formula: Optional[ChemicalFormula] = None,
                 name: Optional[str] = None):
        self.mass = float(mass)
        self.formula = formula
        self.name = name

    @classmethod
    def from_formula(cls, formula: Union[str, ChemicalFormula],
                     name: Optional[str] = None) -> "Modification":
        if not isinstance(formula, ChemicalFormula):
            formula = ChemicalFormula(formula)
        return cls(formula.mass, formula, name)

    @classmethod
    def from_mass(cls, mass: float) -> "Modification":
        return cls(mass)

    @property
    def has_formula(self) -> bool:
        return self.formula is not None

    def __eq__(self, other):
        if not isinstance(other, Modification):
            return NotImplemented
        if self.formula is not None or other.formula is not None:
            return self.formula == other.formula
        return self.mass == other.mass

    def __hash__(self):
        if self.formula is not None:
            return hash(self.formula)
        return hash(self.mass)

    def __str__(self):
        if self.name:
            return self.name
        if self.formula is not None:
            return self.formula.formula
        return repr(self.mass)

    def __repr__(self):
        if self.formula is not None:
            return f"Modification({self.formula.formula!r}, name={self.name!r}, mass={self.mass:.6f})"
        return f"Modification(mass={self.mass!r})"


def as_modification(value) -> Optional[Modification]:
    """Normalize a modification-like value.

    Accepts a ``Modification``, a ``ChemicalFormula``, a formula literal, or a
    real number (bare mass). ``None`` passes through.
    """
    if value is None or isinstance(value, Modification):
        return value
    if isinstance(value, ChemicalFormula):
        return Modification.from_formula(value)
    if isinstance(value, str):
        return Modification.from_formula(value)
    if isinstance(value, Real) and not isinstance(value, bool):
        if not math.isfinite(value):
            raise ValueError(f"Modification mass must be finite, got {value}")
        return Modification.from_mass(value)
    raise TypeError(f"Cannot use {type(value).__name__} as a modification")


# =============================================================================
# Named Modification Registry
# =============================================================================

class ModificationRegistry:
    """Lookup-by-name service for named modifications.

    Examples
    --------
    >>> registry = ModificationRegistry()
    >>> registry.register("C2H3NO", "Test")
    >>> registry.get("Test").formula
    ChemicalFormula('C2H3NO')
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self._modifications: Dict[str, Modification] = {}
        for name, formula in (entries or {}).items():
            self.register(formula, name)

    def register(self, formula: str, name: str) -> None:
        """Register (or replace) ``name`` with the composition ``formula``.

        Raises
        ------
        ParseError
            If ``formula`` is not a valid formula literal
        """
        if not ChemicalFormula.is_valid(formula):
            raise ParseError(f"Unable to register modification {name}: invalid formula {formula}",
                             token=formula)
        self._modifications[name] = Modification.from_formula(formula, name)
        logger.debug(f"Registered modification {name} ({formula})")

    def get(self, name: str) -> Modification:
        return self._modifications[name]

    def try_get(self, name: str) -> Optional[Modification]:
        return self._modifications.get(name)

    def names(self) -> List[str]:
        return list(self._modifications)

    def __contains__(self, name):
        return name in self._modifications

    def __len__(self):
        return len(self._modifications)

    def __iter__(self) -> Iterator[Modification]:
        return iter(self._modifications.values())


def make_heavy(residue: AminoAcid) -> Modification:
    """Modification promoting every C and N of ``residue`` to 13C and 15N.

    Parameters
    ----------
    residue : AminoAcid
        Residue to label

    Returns
    -------
    Modification
        Named ``#``; e.g. for lysine C-6C{13}6N-2N{15}2 (+8.014199 Da)
    """
    shift = {}
    for element, heavy_isotope in HEAVY_ISOTOPES.items():
        count = residue.formula.element_count(element)
        if count:
            shift[element] = -count
            shift[f"{element}[{heavy_isotope}]"] = count
    return Modification.from_formula(ChemicalFormula.from_composition(shift), HEAVY_LABEL)


# Unimod compositions
DEFAULT_MODIFICATIONS = {
    "Carbamidomethyl": "C2H3NO",     # Unimod:4
    "Oxidation": "O",                # Unimod:35
    "Acetyl": "C2H2O",               # Unimod:1
    "Phospho": "HPO3",               # Unimod:21
    "Deamidation": "H-1N-1O",        # Unimod:7
    "Methyl": "CH2",                 # Unimod:34
    "TMT 6-plex": "C8C{13}4H20NN{15}O2",   # Unimod:737
    "iTRAQ 4-plex": "C4C{13}3H12NN{15}O",  # Unimod:214
}

modification_registry = ModificationRegistry(DEFAULT_MODIFICATIONS)


def get_modification(name: str) -> Modification:
    return modification_registry.get(name)


def try_get_modification(name: str) -> Optional[Modification]:
    return modification_registry.try_get(name)


def register_modification(formula: str, name: str) -> None:
    modification_registry.register(formula, name)


# =============================================================================
# Modification Site Strings
# =============================================================================

def parse_modifications(
    mods: str,
    mod_sites: str,
    registry: Optional[ModificationRegistry] = None,
) -> List[Tuple[Modification, int]]:
    """Parse a modification string into (modification, residue number) pairs.

    Parses modification strings from proteomics data files (e.g., MaxQuant,
    AlphaDIA) and resolves each name through the registry.

    Parameters
    ----------
    mods : str
        Modification string, e.g., "Carbamidomethyl@C;Oxidation@M"
        Multiple modifications separated by semicolons
    mod_sites : str
        Modification sites (1-based positions), e.g., "3;6"
    registry : ModificationRegistry, optional
        Registry used to resolve names (default: the module registry)

    Returns
    -------
    List[Tuple[Modification, int]]
        Resolved modifications with their 1-based residue numbers

    Examples
    --------
    >>> [(str(m), n) for m, n in parse_modifications("Oxidation@M", "5")]
    [('Oxidation', 5)]

    >>> parse_modifications("", "")
    []

    Notes
    -----
    - Positions stay 1-based, matching ``AminoAcidPolymer.set_position_modification``
    - Handles byte strings (from pandas/numpy)
    - Skips malformed entries and unknown names
    """
    if not mods:
        return []

    registry = registry or modification_registry
    mod_list = mods.split(";")
    site_list = mod_sites.split(";") if ";" in mod_sites else [mod_sites]

    result = []
    for mod, site in zip(mod_list, site_list):
        mod = mod.strip()
        site = str(site).strip()

        # Handle byte strings from pandas/numpy
        if site.startswith("b'") and site.endswith("'"):
            site = site[2:-1]

        if "@" not in mod or not site.isdigit():
            logger.debug(f"Skipping malformed modification entry {mod!r} at site {site!r}")
            continue

        name = mod.split("@")[0]
        modification = registry.try_get(name)
        if modification is None:
            logger.debug(f"Skipping unknown modification {name!r}")
            continue
        result.append((modification, int(site)))

    return result


def apply_modifications(polymer, modifications: List[Tuple[Modification, int]]) -> int:
    """Set each parsed (modification, residue number) pair on ``polymer``.

    Returns the number of slots changed. Residue numbers outside the polymer
    raise ``RangeError``.
    """
    changed = 0
    for modification, residue_number in modifications:
        changed += polymer.set_position_modification(modification, residue_number)
    return changed
