"""Pytest configuration for AlphaPolymer tests.

This module provides common fixtures and configuration for all tests.
"""

import pytest


@pytest.fixture
def simple_peptide():
    """Simple peptide for basic tests."""
    return "PEPTIDE"


@pytest.fixture
def all_residues():
    """Every standard residue once."""
    return "ACDEFGHIKLMNPQRSTVWY"


@pytest.fixture
def tryptic_peptides():
    """Collection of typical tryptic peptides."""
    return [
        "PEPTIDE",
        "ACDEK",
        "TESTPEPTIDER",
        "YGGFMTSEK",
        "LGEHNIDVLEGNEQFINAAK",
    ]


@pytest.fixture
def known_peptide_masses():
    """Known neutral peptide masses (with H2O) for validation."""
    return {
        "PEPTIDE": 799.359964,
        "ACDEFGHIKLMNPQRSTVWY": 2394.12490682513,
        "TESTPEPTIDER": 1373.631055,
        "YGGFMTSEK": 1018.442984,
    }


@pytest.fixture
def polymer_factory():
    """Build a fresh polymer per call so tests never share mutable state."""
    from alphapolymer.polymer import AminoAcidPolymer

    def factory(sequence="ACDEFGHIKLMNPQRSTVWY", **kwargs):
        return AminoAcidPolymer(sequence, **kwargs)

    return factory


@pytest.fixture
def iron():
    """A formula modification that appears in no default registry entry."""
    from alphapolymer.modifications import Modification
    return Modification.from_formula("Fe")


@pytest.fixture
def registry():
    """Private registry so registrations do not leak between tests."""
    from alphapolymer.modifications import DEFAULT_MODIFICATIONS, ModificationRegistry
    return ModificationRegistry(DEFAULT_MODIFICATIONS)


@pytest.fixture
def proton_mass():
    """Proton mass constant."""
    from alphapolymer.constants import PROTON_MASS
    return PROTON_MASS


@pytest.fixture
def h2o_mass():
    """Water mass constant."""
    from alphapolymer.constants import H2O_MASS
    return H2O_MASS
