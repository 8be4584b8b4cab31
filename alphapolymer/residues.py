"""Amino acid residue table.

Residues are shared, read-only values: a polymer only ever holds references
into this table. Each residue knows its elemental formula (as the residue,
i.e. without the water lost on peptide bond formation), its monoisotopic mass,
and the ``ModificationSites`` bit used for site-directed modification.

The ord()-indexed ``RESIDUE_MASSES`` array mirrors the table for the Numba
kernels, so that string-level mass calculations agree with polymer masses.
"""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Dict, Optional

import numpy as np

from .chemistry import ChemicalFormula


class ModificationSites(IntFlag):
    """Bitmask of residue and terminal sites a modification may target."""

    NONE = 0
    A = 1 << 0
    C = 1 << 1
    D = 1 << 2
    E = 1 << 3
    F = 1 << 4
    G = 1 << 5
    H = 1 << 6
    I = 1 << 7
    K = 1 << 8
    L = 1 << 9
    M = 1 << 10
    N = 1 << 11
    O = 1 << 12
    P = 1 << 13
    Q = 1 << 14
    R = 1 << 15
    S = 1 << 16
    T = 1 << 17
    U = 1 << 18
    V = 1 << 19
    W = 1 << 20
    Y = 1 << 21
    NPEP = 1 << 22
    PEPC = 1 << 23
    ANY = (1 << 22) - 1

    @classmethod
    def from_letters(cls, letters: str) -> "ModificationSites":
        """Combine the site bits of every one-letter code in ``letters``.

        >>> ModificationSites.from_letters("ST") == ModificationSites.S | ModificationSites.T
        True
        """
        sites = cls.NONE
        for letter in letters:
            sites |= cls[letter]
        return sites


@dataclass(frozen=True)
class AminoAcid:
    """A single amino acid residue."""

    letter: str
    symbol: str
    name: str
    formula: ChemicalFormula
    site: ModificationSites
    mass: float = field(init=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "mass", self.formula.mass)

    def __str__(self):
        return self.letter


# =============================================================================
# Residue Table
# =============================================================================

# (letter, three-letter symbol, name, residue formula)
_RESIDUE_DEFINITIONS = [
    ("A", "Ala", "Alanine", "C3H5NO"),
    ("R", "Arg", "Arginine", "C6H12N4O"),
    ("N", "Asn", "Asparagine", "C4H6N2O2"),
    ("D", "Asp", "Aspartic Acid", "C4H5NO3"),
    ("C", "Cys", "Cysteine", "C3H5NOS"),
    ("E", "Glu", "Glutamic Acid", "C5H7NO3"),
    ("Q", "Gln", "Glutamine", "C5H8N2O2"),
    ("G", "Gly", "Glycine", "C2H3NO"),
    ("H", "His", "Histidine", "C6H7N3O"),
    ("I", "Ile", "Isoleucine", "C6H11NO"),
    ("L", "Leu", "Leucine", "C6H11NO"),
    ("K", "Lys", "Lysine", "C6H12N2O"),
    ("M", "Met", "Methionine", "C5H9NOS"),
    ("F", "Phe", "Phenylalanine", "C9H9NO"),
    ("P", "Pro", "Proline", "C5H7NO"),
    ("S", "Ser", "Serine", "C3H5NO2"),
    ("T", "Thr", "Threonine", "C4H7NO2"),
    ("W", "Trp", "Tryptophan", "C11H10N2O"),
    ("Y", "Tyr", "Tyrosine", "C9H9NO2"),
    ("V", "Val", "Valine", "C5H9NO"),
    # Non-standard but genetically encoded
    ("U", "Sec", "Selenocysteine", "C3H5NOSe"),
    ("O", "Pyl", "Pyrrolysine", "C12H19N3O2"),
]

RESIDUES: Dict[str, AminoAcid] = {
    letter: AminoAcid(letter, symbol, name, ChemicalFormula(formula), ModificationSites[letter])
    for letter, symbol, name, formula in _RESIDUE_DEFINITIONS
}

# Access via: RESIDUE_MASSES[ord('A')] -> 71.037114
RESIDUE_MASSES = np.zeros(256, dtype=np.float64)
for _letter, _residue in RESIDUES.items():
    RESIDUE_MASSES[ord(_letter)] = _residue.mass


def get_residue(letter: str) -> AminoAcid:
    """Look up a residue by one-letter code; raises ``KeyError`` when unknown."""
    return RESIDUES[letter]


def try_get_residue(letter: str) -> Optional[AminoAcid]:
    """Look up a residue by one-letter code; ``None`` when unknown."""
    return RESIDUES.get(letter)
