"""Fragment ion generation for amino acid polymers.

A fragment is a prefix (a/b/c series) or suffix (x/y/z series) of a polymer
together with its terminal group and every modification it covers. Masses are
accumulated residue by residue, so a whole series costs O(length).

Also provides the Numba kernels used for plain-string mass and m/z
calculation.

Key optimizations:
1. Numba JIT compilation for string-level masses (ord() encoding, no string ops)
2. Incremental accumulation along a series instead of per-fragment rescans
3. Lazy generators: fragments are produced one at a time
"""

from enum import IntFlag
from typing import Iterator, Optional, Sequence

import numba
import numpy as np

from ..chemistry import ChemicalFormula
from ..constants import PROTON_MASS


# =============================================================================
# Helper Functions
# =============================================================================

def encode_peptide_to_ord(peptide: str) -> np.ndarray:
    """Encode peptide string to ord() array for Numba processing.

    Characters outside the 8-bit range are dropped; they carry no residue
    mass anyway.

    Examples
    --------
    >>> encode_peptide_to_ord("PEPTIDE")
    array([80, 69, 80, 84, 73, 68, 69], dtype=uint8)
    """
    return np.array([ord(c) for c in peptide if ord(c) < 256], dtype=np.uint8)


# =============================================================================
# Numba Kernels
# =============================================================================

@numba.jit(nopython=True, cache=True)
def calculate_neutral_mass(
    peptide_ord: np.ndarray,
    residue_masses: np.ndarray,
    terminal_mass: float,
) -> float:
    """Calculate neutral mass from an ord() array (Numba-compiled).

    Parameters
    ----------
    peptide_ord : np.ndarray (uint8)
        Peptide sequence as ord() values
    residue_masses : np.ndarray (float64)
        ord()-indexed residue masses; unknown letters are 0
    terminal_mass : float
        Mass of both terminal groups (water for a free peptide)

    Returns
    -------
    mass : float
        Sum of residue masses plus ``terminal_mass``
    """
    total = 0.0
    for i in range(len(peptide_ord)):
        total += residue_masses[peptide_ord[i]]
    return total + terminal_mass


@numba.jit(nopython=True, cache=True)
def calculate_precursor_mz(neutral_mass: float, charge: int) -> float:
    """Calculate m/z from neutral mass for a protonated ion.

    Examples
    --------
    >>> mz = calculate_precursor_mz(1000.5, 2)
    >>> # Returns ~501.26
    """
    return (neutral_mass + charge * PROTON_MASS) / charge


# =============================================================================
# Fragment Types
# =============================================================================

class FragmentTypes(IntFlag):
    """Ion series flags; every series at or beyond ``X`` is C-terminal."""

    NONE = 0
    A = 1 << 0
    B = 1 << 1
    C = 1 << 2
    X = 1 << 3
    Y = 1 << 4
    Z = 1 << 5
    INTERNAL = 1 << 6
    ALL = A | B | C | X | Y | Z

    @property
    def is_c_terminal(self) -> bool:
        return FragmentTypes.X <= self <= FragmentTypes.Z


# Single series in enumeration order
SERIES_TYPES = (
    FragmentTypes.A,
    FragmentTypes.B,
    FragmentTypes.C,
    FragmentTypes.X,
    FragmentTypes.Y,
    FragmentTypes.Z,
)

# Composition difference between a terminus-plus-residues fragment and the
# neutral ion of each series
FRAGMENT_OFFSETS = {
    FragmentTypes.A: ChemicalFormula("C-1H-1O-1"),
    FragmentTypes.B: ChemicalFormula("H-1"),
    FragmentTypes.C: ChemicalFormula("NH2"),
    FragmentTypes.X: ChemicalFormula("COH-1"),
    FragmentTypes.Y: ChemicalFormula("H"),
    FragmentTypes.Z: ChemicalFormula("N-1H-2"),
}


class Fragment:
    """One prefix or suffix of a polymer.

    Attributes
    ----------
    fragment_type : FragmentTypes
        Single ion series
    number : int
        Residues covered, counted from the series' terminus
    mass : float
        Terminus + terminal modification + covered residues and modifications
    formula : ChemicalFormula or None
        Same sum as a composition, ``None`` if any piece is mass-only
    parent : AminoAcidPolymer or None
        Polymer the fragment was cut from
    """

    __slots__ = ("fragment_type", "number", "mass", "formula", "parent")

    def __init__(self, fragment_type: FragmentTypes, number: int, mass: float,
                 formula: Optional[ChemicalFormula] = None, parent=None):
        self.fragment_type = fragment_type
        self.number = number
        self.mass = mass
        self.formula = formula
        self.parent = parent

    @property
    def neutral_mass(self) -> float:
        """Mass of the neutral ion of this series."""
        return self.mass + FRAGMENT_OFFSETS[self.fragment_type].mass

    def to_mz(self, charge: int = 1) -> float:
        if charge < 1:
            raise ValueError(f"Charge must be positive, got {charge}")
        return calculate_precursor_mz(self.neutral_mass, charge)

    def try_get_chemical_formula(self) -> Optional[ChemicalFormula]:
        """Neutral ion composition, or ``None`` when a piece is mass-only."""
        if self.formula is None:
            return None
        return self.formula + FRAGMENT_OFFSETS[self.fragment_type]

    def __str__(self):
        return f"{self.fragment_type.name.lower()}{self.number}"

    def __repr__(self):
        return f"Fragment({self}, mass={self.mass:.6f})"


# =============================================================================
# Series Accumulation
# =============================================================================

def _add(formula: Optional[ChemicalFormula], piece) -> Optional[ChemicalFormula]:
    if formula is None or piece is None:
        return None
    return formula + piece


def generate_series(
    fragment_type: FragmentTypes,
    terminus: ChemicalFormula,
    residues: Sequence,
    modifications: Sequence,
    min_number: int,
    max_number: int,
    parent=None,
) -> Iterator[Fragment]:
    """Yield fragments ``min_number..max_number`` of one series.

    Parameters
    ----------
    fragment_type : FragmentTypes
        Single series the fragments are tagged with
    terminus : ChemicalFormula
        Terminal group the series grows from
    residues : sequence of AminoAcid
        Residues ordered outward from that terminus
    modifications : sequence
        Slots ordered the same way; ``modifications[0]`` is the terminal
        modification, ``modifications[k]`` belongs to ``residues[k - 1]``
    min_number, max_number : int
        Inclusive fragment number range (bounds are the caller's to check)
    parent : AminoAcidPolymer, optional
        Attached to each fragment

    Notes
    -----
    Residues below ``min_number`` are accumulated without being yielded, so
    every fragment covers the full prefix/suffix.
    """
    mass = terminus.mass
    formula = terminus
    terminal_mod = modifications[0]
    if terminal_mod is not None:
        mass += terminal_mod.mass
        formula = _add(formula, terminal_mod.formula)

    for number in range(1, max_number + 1):
        residue = residues[number - 1]
        mass += residue.mass
        formula = _add(formula, residue.formula)
        modification = modifications[number]
        if modification is not None:
            mass += modification.mass
            formula = _add(formula, modification.formula)
        if number >= min_number:
            yield Fragment(fragment_type, number, mass, formula, parent)
