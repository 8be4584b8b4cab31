"""Unit tests for physical constants and string-level mass calculations."""

import pytest

from alphapolymer.chemistry import ChemicalFormula
from alphapolymer.constants import (
    DEFAULT_C_TERMINUS_FORMULA,
    DEFAULT_N_TERMINUS_FORMULA,
    ELECTRON_MASS,
    H2O_MASS,
    PROTON_MASS,
)
from alphapolymer.polymer import AminoAcidPolymer


class TestConstants:
    """Test physical constants are correct."""

    def test_proton_mass_correct(self):
        """Test that PROTON_MASS is correct (not hydrogen atom mass)."""
        # PROTON_MASS should be ~1.007276, NOT 1.007825 (H atom)
        assert 1.0072 < PROTON_MASS < 1.0073, \
            f"PROTON_MASS is wrong: {PROTON_MASS}"
        assert abs(PROTON_MASS - 1.007276466622) < 1e-10

    def test_hydrogen_atom_mass(self):
        """Test that proton + electron = hydrogen atom."""
        hydrogen = ChemicalFormula("H").mass
        assert abs(PROTON_MASS + ELECTRON_MASS - hydrogen) < 1e-6

    def test_h2o_mass(self):
        """The water constant agrees with the formula mass."""
        assert H2O_MASS == pytest.approx(ChemicalFormula("H2O").mass, abs=1e-9)

    def test_default_termini_make_water(self):
        """Default terminal groups add up to one water."""
        termini = ChemicalFormula(DEFAULT_N_TERMINUS_FORMULA) + ChemicalFormula(DEFAULT_C_TERMINUS_FORMULA)
        assert termini == ChemicalFormula("H2O")


class TestStringMass:
    """Test the static Numba-backed mass of bare sequences."""

    def test_known_masses(self, known_peptide_masses):
        """Reference peptides."""
        for sequence, mass in known_peptide_masses.items():
            assert AminoAcidPolymer.get_mass(sequence) == pytest.approx(mass, abs=1e-5)

    def test_empty(self, h2o_mass):
        """An empty sequence is water."""
        assert AminoAcidPolymer.get_mass("") == pytest.approx(h2o_mass, abs=1e-9)

    def test_isobaric(self):
        """Leucine and isoleucine weigh the same."""
        assert AminoAcidPolymer.get_mass("PEPTIDE") == AminoAcidPolymer.get_mass("PEPTLDE")

    def test_mass_increases_with_length(self, tryptic_peptides):
        """Adding a residue always adds mass."""
        for sequence in tryptic_peptides:
            assert AminoAcidPolymer.get_mass(sequence + "G") > AminoAcidPolymer.get_mass(sequence)
