"""Tests for convenience wrapper functions.

Tests the user-friendly API that handles sequence cleaning and polymer
construction automatically.
"""

import numpy as np
import pytest

from alphapolymer.convenience import (
    calculate_peptide_mass,
    calculate_precursor,
    clean_sequence,
    generate_b_ions,
    generate_fragments,
    generate_y_ions,
)
from alphapolymer.fragments.generator import FragmentTypes
from alphapolymer.modifications import get_modification, parse_modifications
from alphapolymer.residues import get_residue


class TestCleanSequence:
    """Test sequence cleaning functionality."""

    def test_clean_standard_sequence(self):
        """Test that standard sequences pass through unchanged."""
        assert clean_sequence("PEPTIDE") == "PEPTIDE"

    def test_clean_single_nonstandard(self):
        """Test cleaning single non-standard AA."""
        assert clean_sequence("PEPTXIDE") == "PEPTLIDE"  # X → L

    def test_clean_multiple_nonstandard(self):
        """Ambiguity codes map to one residue; U and O are real residues."""
        assert clean_sequence("XZBJUO") == "LQNLUO"

    def test_annotations_untouched(self):
        """Letters inside annotations are not residues."""
        assert clean_sequence("PEPB[TMT 6-plex]") == "PEPN[TMT 6-plex]"
        assert clean_sequence("[Xx]-PEPX") == "[Xx]-PEPL"

    def test_clean_empty_sequence(self):
        """Test cleaning empty sequence."""
        assert clean_sequence("") == ""


class TestCalculatePeptideMass:
    """Test peptide mass calculation wrapper."""

    def test_calculate_mass_simple(self, known_peptide_masses):
        """Test simple mass calculation."""
        assert calculate_peptide_mass("PEPTIDE") == pytest.approx(known_peptide_masses["PEPTIDE"], abs=1e-5)

    def test_calculate_mass_with_cleaning(self):
        """X is cleaned to L."""
        assert calculate_peptide_mass("PEPTXIDE") == pytest.approx(calculate_peptide_mass("PEPTLIDE"))

    def test_without_cleaning_unknown_letter_fails(self):
        """Uncleaned ambiguity codes are not residues."""
        from alphapolymer.exceptions import ParseError
        with pytest.raises(ParseError):
            calculate_peptide_mass("PEPTXIDE", clean=False)

    def test_inline_and_parsed_modifications_agree(self):
        """Annotated text and site strings give the same mass."""
        inline = calculate_peptide_mass("PEPC[Carbamidomethyl]TIDE")
        mods = parse_modifications("Carbamidomethyl@C", "4")
        assert calculate_peptide_mass("PEPCTIDE", modifications=mods) == pytest.approx(inline)

    def test_modification_mass_added(self):
        """Modifications add their mass."""
        delta = calculate_peptide_mass("PEPTM[Oxidation]IDE") - calculate_peptide_mass("PEPTMIDE")
        assert delta == pytest.approx(get_modification("Oxidation").mass)

    def test_precursor(self, proton_mass):
        """Precursor m/z from neutral mass."""
        mass = calculate_peptide_mass("PEPTIDE")
        assert calculate_precursor("PEPTIDE", charge=2) == pytest.approx((mass + 2 * proton_mass) / 2)


class TestGenerateFragments:
    """Test fragment table generation."""

    def test_default_table(self):
        """b and y ions at charges 1 and 2."""
        table = generate_fragments("PEPTIDE")
        assert len(table["mz"]) == 6 * 2 * 2
        assert set(table["charge"].tolist()) == {1, 2}
        assert set(table["type"].tolist()) == {int(FragmentTypes.B), int(FragmentTypes.Y)}
        assert table["mz"].dtype == np.float64

    def test_b_ions_ascending(self, proton_mass):
        """b ions grow with ion number."""
        b_ions = generate_b_ions("PEPTIDE")
        assert len(b_ions) == 6
        assert np.all(np.diff(b_ions) > 0)
        assert b_ions[0] == pytest.approx(get_residue("P").mass + proton_mass)

    def test_y_ions(self, proton_mass, h2o_mass):
        """y1 is the last residue plus water and a proton."""
        y_ions = generate_y_ions("PEPTIDE")
        assert len(y_ions) == 6
        assert y_ions[0] == pytest.approx(get_residue("E").mass + h2o_mass + proton_mass)

    def test_charges_grouped(self):
        """Rows are grouped by series, then charge."""
        table = generate_fragments("PEPTIDE", fragment_types=FragmentTypes.B, fragment_charges=(1, 2))
        assert table["charge"].tolist() == [1] * 6 + [2] * 6
        assert table["number"].tolist() == list(range(1, 7)) * 2

    def test_single_residue(self):
        """A single residue has no fragments."""
        table = generate_fragments("K")
        assert len(table["mz"]) == 0
