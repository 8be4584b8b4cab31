"""Fragment generation for amino acid polymers.

Prefix (a/b/c) and suffix (x/y/z) ion series with incrementally accumulated
masses, plus Numba kernels for string-level mass and m/z calculation.
"""

from .generator import (
    FragmentTypes,
    Fragment,
    FRAGMENT_OFFSETS,
    SERIES_TYPES,
    generate_series,
    encode_peptide_to_ord,
    calculate_neutral_mass,
    calculate_precursor_mz,
)

__all__ = [
    'FragmentTypes',
    'Fragment',
    'FRAGMENT_OFFSETS',
    'SERIES_TYPES',
    'generate_series',
    'encode_peptide_to_ord',
    'calculate_neutral_mass',
    'calculate_precursor_mz',
]
