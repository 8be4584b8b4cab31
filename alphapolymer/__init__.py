"""AlphaPolymer - amino acid polymers with modifications for proteomics.

Parse annotated peptide sequences, maintain their monoisotopic mass under
modification, generate a/b/c/x/y/z fragment ions and digest proteins in
silico. String-level mass and digestion kernels are Numba-compiled; elemental
compositions are backed by pyteomics.
"""

__version__ = "0.1.0"

from alphapolymer.exceptions import PolymerError, ParseError, RangeError
from alphapolymer.chemistry import ChemicalFormula
from alphapolymer.residues import AminoAcid, ModificationSites, get_residue, try_get_residue
from alphapolymer.modifications import (
    Modification,
    ModificationRegistry,
    get_modification,
    try_get_modification,
    register_modification,
    make_heavy,
)
from alphapolymer.polymer import AminoAcidPolymer, Terminus
from alphapolymer.peptide import Peptide
from alphapolymer.fragments import Fragment, FragmentTypes
from alphapolymer.database import Protease, get_protease, digest

# Import main submodules for convenient access
from alphapolymer import fragments
from alphapolymer import database
from alphapolymer import convenience

__all__ = [
    "PolymerError",
    "ParseError",
    "RangeError",
    "ChemicalFormula",
    "AminoAcid",
    "ModificationSites",
    "get_residue",
    "try_get_residue",
    "Modification",
    "ModificationRegistry",
    "get_modification",
    "try_get_modification",
    "register_modification",
    "make_heavy",
    "AminoAcidPolymer",
    "Terminus",
    "Peptide",
    "Fragment",
    "FragmentTypes",
    "Protease",
    "get_protease",
    "digest",
    "fragments",
    "database",
    "convenience",
]
