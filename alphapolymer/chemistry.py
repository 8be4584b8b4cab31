"""Chemical formula value type.

A thin immutable value over ``pyteomics.mass.Composition`` that understands the
formula literals used inside annotated sequences, e.g. ``C2H3NO``, ``H-1N-1O``
or the isotope-labelled ``C8C{13}4H20NN{15}O2``. Isotopes are written with
braces so that literals can live inside ``[...]`` annotations; internally they
are stored with pyteomics' ``C[13]`` keys.

Examples
--------
>>> water = ChemicalFormula("H2O")
>>> round(water.mass, 6)
18.010565
>>> str(ChemicalFormula("OH") + ChemicalFormula("H"))
'H2O'
"""

import re
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from pyteomics.mass import Composition, calculate_mass, nist_mass

from .exceptions import ParseError

# Element symbol, optional {isotope}, optional signed count
_ELEMENT_PATTERN = re.compile(r"([A-Z][a-z]?)(?:\{(\d+)\})?([+-]?\d+)?")
_FORMULA_PATTERN = re.compile(r"^(?:[A-Z][a-z]?(?:\{\d+\})?(?:[+-]?\d+)?)+$")


def _isotope_key(element: str, isotope: Optional[int]) -> str:
    return f"{element}[{isotope}]" if isotope else element


def _split_key(key: str) -> Tuple[str, int]:
    if "[" in key:
        element, isotope = key[:-1].split("[")
        return element, int(isotope)
    return key, 0


def _hill_order(item: Tuple[str, int], has_carbon: bool) -> Tuple[int, str, int]:
    element, isotope = _split_key(item[0])
    if has_carbon and element == "C":
        rank = 0
    elif has_carbon and element == "H":
        rank = 1
    else:
        rank = 2
    return rank, element, isotope


class ChemicalFormula:
    """Immutable elemental composition with a cached monoisotopic mass.

    Parameters
    ----------
    formula : str
        Formula literal; the empty string is the empty formula

    Raises
    ------
    ParseError
        If ``formula`` is not a valid literal
    """

    __slots__ = ("_counts", "_mass", "_text")

    def __init__(self, formula: str = ""):
        if formula and not self.is_valid(formula):
            raise ParseError(f"Invalid chemical formula: {formula}", token=formula)

        counts: Dict[str, int] = {}
        for element, isotope, count in _ELEMENT_PATTERN.findall(formula):
            key = _isotope_key(element, int(isotope) if isotope else None)
            counts[key] = counts.get(key, 0) + (int(count) if count else 1)
        self._initialize(counts)

    @classmethod
    def from_composition(cls, composition: Mapping[str, int]) -> "ChemicalFormula":
        """Build a formula from a pyteomics-style mapping such as ``{"C": 2, "C[13]": 4}``."""
        formula = cls.__new__(cls)
        formula._initialize(dict(composition))
        return formula

    @classmethod
    def combine(cls, formulas: Iterable["ChemicalFormula"]) -> "ChemicalFormula":
        """Sum many formulas at once, computing the mass a single time."""
        counts: Dict[str, int] = {}
        for formula in formulas:
            for key, count in formula._counts:
                counts[key] = counts.get(key, 0) + count
        return cls.from_composition(counts)

    @staticmethod
    def is_valid(text: str) -> bool:
        """Check whether ``text`` is a formula literal made of known elements and isotopes."""
        if not text or not _FORMULA_PATTERN.match(text):
            return False
        for element, isotope, _ in _ELEMENT_PATTERN.findall(text):
            if element not in nist_mass:
                return False
            if isotope and int(isotope) not in nist_mass[element]:
                return False
        return True

    def _initialize(self, counts: Dict[str, int]) -> None:
        # Sorted, zero-free counts make equality, hashing and mass summation
        # independent of the order the formula was written or built in.
        self._counts = tuple(sorted((k, v) for k, v in counts.items() if v))
        self._mass = calculate_mass(composition=dict(self._counts)) if self._counts else 0.0
        self._text = None

    @property
    def mass(self) -> float:
        """Monoisotopic mass in Da."""
        return self._mass

    @property
    def composition(self) -> Composition:
        """A fresh pyteomics ``Composition`` with the same counts."""
        return Composition(dict(self._counts))

    @property
    def formula(self) -> str:
        """Canonical Hill-ordered literal."""
        if self._text is None:
            has_carbon = any(_split_key(key)[0] == "C" for key, _ in self._counts)
            parts = []
            for key, count in sorted(self._counts, key=lambda item: _hill_order(item, has_carbon)):
                element, isotope = _split_key(key)
                parts.append(element)
                if isotope:
                    parts.append(f"{{{isotope}}}")
                if count != 1:
                    parts.append(str(count))
            self._text = "".join(parts)
        return self._text

    def element_count(self, element: str, isotope: Optional[int] = None) -> int:
        """Number of atoms of ``element`` (of the given isotope, or unlabelled)."""
        return dict(self._counts).get(_isotope_key(element, isotope), 0)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._counts)

    def _combine(self, other: "ChemicalFormula", sign: int) -> "ChemicalFormula":
        counts = dict(self._counts)
        for key, count in other._counts:
            counts[key] = counts.get(key, 0) + sign * count
        return ChemicalFormula.from_composition(counts)

    def __add__(self, other):
        if not isinstance(other, ChemicalFormula):
            return NotImplemented
        return self._combine(other, 1)

    def __sub__(self, other):
        if not isinstance(other, ChemicalFormula):
            return NotImplemented
        return self._combine(other, -1)

    def __eq__(self, other):
        if not isinstance(other, ChemicalFormula):
            return NotImplemented
        return self._counts == other._counts

    def __hash__(self):
        return hash(self._counts)

    def __bool__(self):
        return bool(self._counts)

    def __str__(self):
        return self.formula

    def __repr__(self):
        return f"ChemicalFormula({self.formula!r})"
