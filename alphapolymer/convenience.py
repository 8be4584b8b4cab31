"""Convenience wrapper functions for easy-to-use API.

String in, numbers out: these helpers parse annotated sequences into an
``AminoAcidPolymer`` behind the scenes so callers never touch the object model.

Use these functions when you want a simple API without worrying about:
- Ambiguous residue codes (X, Z, B, J)
- Building polymers and applying modifications
- Iterating fragment objects

For bare sequences in tight loops, ``AminoAcidPolymer.get_mass`` runs on the
Numba kernel directly.

Examples
--------
>>> mass = calculate_peptide_mass("PEPTIDE")
>>> mass = calculate_peptide_mass("PEPC[Carbamidomethyl]TIDE")
>>> table = generate_fragments("PEPTIDE", fragment_charges=(1,))
"""

from typing import Dict, List, Optional, Tuple

import numpy as np

from .constants import NON_STANDARD_AA_MAP
from .fragments.generator import SERIES_TYPES, FragmentTypes
from .modifications import ModificationRegistry, apply_modifications
from .polymer import AminoAcidPolymer


# =============================================================================
# Sequence Cleaning
# =============================================================================

def clean_sequence(sequence: str) -> str:
    """Replace IUPAC ambiguity codes with a standard residue.

    Annotations inside ``[...]`` are left untouched.

    Examples
    --------
    >>> clean_sequence("PEPTXIDE")
    'PEPTLIDE'

    >>> clean_sequence("PEZPTBIDE[Acetyl]")
    'PEQPTNIDE[Acetyl]'
    """
    cleaned = []
    depth = 0
    for aa in sequence:
        if aa == '[':
            depth += 1
        elif aa == ']':
            depth = max(depth - 1, 0)
        if depth == 0 and aa in NON_STANDARD_AA_MAP:
            cleaned.append(NON_STANDARD_AA_MAP[aa])
        else:
            cleaned.append(aa)
    return ''.join(cleaned)


def _build_polymer(
    sequence: str,
    modifications: Optional[List[Tuple[object, int]]],
    clean: bool,
    registry: Optional[ModificationRegistry],
) -> AminoAcidPolymer:
    if clean:
        sequence = clean_sequence(sequence)
    polymer = AminoAcidPolymer(sequence, registry=registry)
    if modifications:
        apply_modifications(polymer, modifications)
    return polymer


# =============================================================================
# Mass Calculation Wrappers
# =============================================================================

def calculate_peptide_mass(
    sequence: str,
    modifications: Optional[List[Tuple[object, int]]] = None,
    clean: bool = True,
    registry: Optional[ModificationRegistry] = None,
) -> float:
    """Calculate neutral peptide mass (convenience wrapper).

    Parameters
    ----------
    sequence : str
        Annotated sequence, e.g. "[Acetyl]-PEPTIDEK"
    modifications : List[Tuple[Modification, int]], optional
        Extra (modification, 1-based residue number) pairs, e.g. from
        ``parse_modifications()``
    clean : bool, default=True
        Whether to replace ambiguity codes (X -> L, etc.)
    registry : ModificationRegistry, optional
        Registry for named annotations

    Returns
    -------
    float
        Neutral monoisotopic mass in Daltons (includes terminal H2O)

    Examples
    --------
    >>> round(calculate_peptide_mass("PEPTIDE"), 4)
    799.36
    """
    return _build_polymer(sequence, modifications, clean, registry).monoisotopic_mass


def calculate_precursor(
    sequence: str,
    charge: int,
    modifications: Optional[List[Tuple[object, int]]] = None,
    clean: bool = True,
    registry: Optional[ModificationRegistry] = None,
) -> float:
    """Calculate precursor m/z of the [M+zH]z+ ion (convenience wrapper).

    Examples
    --------
    >>> round(calculate_precursor("PEPTIDE", charge=2), 4)
    400.6873
    """
    return _build_polymer(sequence, modifications, clean, registry).to_mz(charge)


# =============================================================================
# Fragment Generation Wrappers
# =============================================================================

def generate_fragments(
    sequence: str,
    modifications: Optional[List[Tuple[object, int]]] = None,
    fragment_types: FragmentTypes = FragmentTypes.B | FragmentTypes.Y,
    fragment_charges: Tuple[int, ...] = (1, 2),
    clean: bool = True,
    registry: Optional[ModificationRegistry] = None,
) -> Dict[str, np.ndarray]:
    """Generate a theoretical fragment table (convenience wrapper).

    Parameters
    ----------
    sequence : str
        Annotated sequence
    modifications : List[Tuple[Modification, int]], optional
        Extra (modification, residue number) pairs
    fragment_types : FragmentTypes, default=B | Y
        Ion series to generate
    fragment_charges : tuple of int, default=(1, 2)
        Fragment charge states
    clean : bool, default=True
        Whether to replace ambiguity codes
    registry : ModificationRegistry, optional
        Registry for named annotations

    Returns
    -------
    dict of np.ndarray
        ``mz`` (float64), ``type`` (uint8, FragmentTypes value), ``number``
        (uint16) and ``charge`` (uint8), one row per fragment and charge,
        grouped by series then charge

    Examples
    --------
    >>> table = generate_fragments("PEPTIDE", fragment_types=FragmentTypes.B,
    ...                            fragment_charges=(1,))
    >>> len(table["mz"])  # 6 b-ions for a 7-residue peptide
    6
    """
    polymer = _build_polymer(sequence, modifications, clean, registry)
    if polymer.length < 2:
        fragments = []
    else:
        fragments = list(polymer.calculate_fragments(fragment_types))

    mz, types, numbers, charges = [], [], [], []
    for fragment_type in SERIES_TYPES:
        series = [f for f in fragments if f.fragment_type == fragment_type]
        if not series:
            continue
        for charge in fragment_charges:
            for fragment in series:
                mz.append(fragment.to_mz(charge))
                types.append(int(fragment.fragment_type))
                numbers.append(fragment.number)
                charges.append(charge)

    return {
        "mz": np.array(mz, dtype=np.float64),
        "type": np.array(types, dtype=np.uint8),
        "number": np.array(numbers, dtype=np.uint16),
        "charge": np.array(charges, dtype=np.uint8),
    }


def generate_b_ions(sequence: str, fragment_charges: Tuple[int, ...] = (1,), **kwargs) -> np.ndarray:
    """b-ion m/z values in ascending ion number, per charge."""
    return generate_fragments(sequence, fragment_types=FragmentTypes.B,
                              fragment_charges=fragment_charges, **kwargs)["mz"]


def generate_y_ions(sequence: str, fragment_charges: Tuple[int, ...] = (1,), **kwargs) -> np.ndarray:
    """y-ion m/z values in ascending ion number, per charge."""
    return generate_fragments(sequence, fragment_types=FragmentTypes.Y,
                              fragment_charges=fragment_charges, **kwargs)["mz"]
