"""Tests for proteases and in silico digestion."""

import numpy as np
import pytest

from alphapolymer.database import (
    PROTEASES,
    Protease,
    cleavage_windows,
    collect_cleavage_sites,
    digest,
    digest_protein_list,
    get_protease,
)
from alphapolymer.exceptions import RangeError
from alphapolymer.peptide import Peptide
from alphapolymer.polymer import AminoAcidPolymer


class FixedSites:
    """Protease stand-in returning a fixed set of sites."""

    def __init__(self, sites):
        self.sites = set(sites)

    def get_digestion_sites(self, sequence):
        return set(self.sites)

    def __str__(self):
        return "fixed"


# =============================================================================
# Proteases
# =============================================================================

class TestProteases:
    """Test cleavage site detection."""

    def test_trypsin_sites(self):
        """Trypsin cuts after K or R."""
        assert get_protease("Trypsin").get_digestion_sites("PEPTIDEKRPROTEINK") == {7}

    def test_trypsin_proline_rule(self):
        """Trypsin does not cut before proline, Trypsin/P does."""
        assert get_protease("Trypsin").get_digestion_sites("AKPAKA") == {4}
        assert get_protease("Trypsin/P").get_digestion_sites("AKPAKA") == {1, 4}

    def test_terminal_cut_not_a_site(self):
        """A cut at the very end is not reported."""
        assert get_protease("Trypsin").get_digestion_sites("PEPTIDEK") == set()

    def test_n_terminal_specificity(self):
        """AspN and LysN cut before their residue."""
        assert get_protease("AspN").get_digestion_sites("PEPDTIDE") == {2, 4}
        assert get_protease("LysN").get_digestion_sites("KAAKAA") == {2}

    def test_builtin_table(self):
        """Common enzymes are available."""
        for name in ["Trypsin", "LysC", "ArgC", "GluC", "AspN", "Chymotrypsin"]:
            assert name in PROTEASES
        with pytest.raises(KeyError):
            get_protease("Pepsin")

    def test_equality_by_specificity(self):
        """Proteases with the same rule are equal."""
        assert Protease("MyTrypsin", r"(?<=[KR])(?!P)") == get_protease("Trypsin")
        assert str(get_protease("LysC")) == "LysC"


# =============================================================================
# Window Kernel
# =============================================================================

class TestCleavageWindows:
    """Test the Numba span enumeration."""

    def test_no_missed_cleavages(self):
        """Consecutive sites bound each peptide."""
        indices = np.array([-1, 7, 16], dtype=np.int64)
        starts, lengths = cleavage_windows(indices, 0, 0, 1, 100)
        assert starts.tolist() == [0, 8]
        assert lengths.tolist() == [8, 9]

    def test_missed_cleavages(self):
        """Spans with one missed cleavage follow."""
        indices = np.array([-1, 7, 16], dtype=np.int64)
        starts, lengths = cleavage_windows(indices, 0, 1, 1, 100)
        assert starts.tolist() == [0, 8, 0]
        assert lengths.tolist() == [8, 9, 17]

    def test_length_filter(self):
        """Lengths outside the window are dropped."""
        indices = np.array([-1, 1, 7, 16], dtype=np.int64)
        starts, lengths = cleavage_windows(indices, 0, 0, 3, 8)
        assert starts.tolist() == [2]
        assert lengths.tolist() == [6]

    def test_more_missed_than_sites(self):
        """Asking for more missed cleavages than available is harmless."""
        indices = np.array([-1, 4], dtype=np.int64)
        starts, lengths = cleavage_windows(indices, 0, 5, 1, 100)
        assert starts.tolist() == [0]
        assert lengths.tolist() == [5]


# =============================================================================
# Digestion
# =============================================================================

class TestDigest:
    """Test string digestion."""

    def test_single_tryptic_peptide(self):
        """A peptide without internal sites digests to itself."""
        assert list(digest("TTGSSSSSSSK", "Trypsin")) == ["TTGSSSSSSSK"]

    def test_missed_cleavages(self):
        """Peptides ordered by missed cleavages, then by position."""
        result = list(digest("PEPTIDEKRPROTEINK", "Trypsin", max_missed_cleavages=1))
        assert result == ["PEPTIDEK", "RPROTEINK", "PEPTIDEKRPROTEINK"]

    def test_min_missed_cleavages(self):
        """A minimum drops fully specific peptides."""
        result = list(digest("PEPTIDEKRPROTEINK", "Trypsin", max_missed_cleavages=1,
                             min_missed_cleavages=1))
        assert result == ["PEPTIDEKRPROTEINK"]

    def test_length_bounds(self):
        """Length window is inclusive."""
        result = list(digest("PEPTIDEKRPROTEINK", "Trypsin", max_missed_cleavages=1,
                             min_length=9, max_length=9))
        assert result == ["RPROTEINK"]

    def test_multiple_proteases_union(self):
        """Sites of all proteases are combined."""
        result = list(digest("AAKAAEAA", ["LysC", "GluC"]))
        assert result == ["AAK", "AAE", "AA"]

    def test_duplicate_sites_across_proteases(self):
        """Overlapping proteases do not duplicate peptides."""
        single = list(digest("PEPTIDEKRPROTEINK", "Trypsin", max_missed_cleavages=2))
        doubled = list(digest("PEPTIDEKRPROTEINK", ["Trypsin", "LysC", "Trypsin/P"],
                              max_missed_cleavages=2))
        assert len(doubled) == len(set(doubled))
        assert set(single) <= set(doubled)

    def test_no_sites(self):
        """A sequence without sites is a single peptide."""
        assert list(digest("AAAA", "Trypsin", max_missed_cleavages=3)) == ["AAAA"]

    def test_empty_sequence(self):
        """Nothing to digest."""
        assert list(digest("", "Trypsin")) == []

    def test_initiator_methionine(self):
        """The clipped form follows each N-terminal peptide when methionine is retained."""
        result = list(digest("MPEPKAAK", "Trypsin", assume_initiator_methionine_cleaved=False))
        assert result == ["MPEPK", "PEPK", "AAK"]
        assert list(digest("MPEPKAAK", "Trypsin")) == ["MPEPK", "AAK"]

    def test_negative_missed_cleavages(self):
        """Negative bounds fail before any iteration."""
        with pytest.raises(RangeError):
            digest("PEPTIDEK", "Trypsin", max_missed_cleavages=-1)
        with pytest.raises(RangeError):
            digest("PEPTIDEK", "Trypsin", max_missed_cleavages=1, min_missed_cleavages=2)

    def test_out_of_range_site(self):
        """A protease reporting a site outside the sequence is an error."""
        with pytest.raises(RangeError):
            digest("PEPTIDEK", FixedSites({3, 20}))

    def test_custom_protease_object(self):
        """Any object with get_digestion_sites works."""
        assert list(digest("AAAAAA", FixedSites({1}))) == ["AA", "AAAA"]

    def test_collect_sites_sorted_with_sentinels(self):
        """Sites are unioned, sorted and bracketed by sentinels."""
        sites = collect_cleavage_sites("AAKAAEAA", [FixedSites({5, 2}), FixedSites({2})])
        assert sites.tolist() == [-1, 2, 5, 7]


class TestPolymerDigest:
    """Test digestion of polymers into peptides."""

    def test_returns_peptides(self):
        """Polymer digestion produces Peptide copies."""
        protein = AminoAcidPolymer("PEPTIDEKRPROTEINK")
        peptides = protein.digest("Trypsin", max_missed_cleavages=1)
        assert [p.sequence for p in peptides] == ["PEPTIDEK", "RPROTEINK", "PEPTIDEKRPROTEINK"]
        assert all(isinstance(p, Peptide) for p in peptides)
        assert peptides[1].parent is protein
        assert peptides[1].start_residue == 8

    def test_modifications_carried(self):
        """Residue and terminal modifications follow their residues."""
        protein = AminoAcidPolymer("[Acetyl]-PEPC[Carbamidomethyl]KAAK-[O]")
        peptides = protein.digest(get_protease("Trypsin"))
        assert [str(p) for p in peptides] == ["[Acetyl]-PEPC[Carbamidomethyl]K", "AAK-[O]"]

    def test_modifications_dropped(self):
        """Copies can be bare."""
        protein = AminoAcidPolymer("PEPC[Carbamidomethyl]KAAK")
        peptides = protein.digest("Trypsin", include_modifications=False)
        assert [str(p) for p in peptides] == ["PEPCK", "AAK"]

    def test_peptides_independent(self, iron):
        """Modifying a digested peptide leaves the protein untouched."""
        protein = AminoAcidPolymer("PEPKAAK")
        peptide = protein.digest("Trypsin")[0]
        peptide.set_modification(iron, 1)
        assert str(protein) == "PEPKAAK"


class TestDigestProteinList:
    """Test multi-protein digestion."""

    def test_shared_peptides(self):
        """Peptides shared between proteins map to both."""
        proteins = [
            ("P1", "PEPTIDEKSHAREDRAAAAAAK"),
            ("P2", "SHAREDRGGGGGGGK"),
        ]
        peptides, mapping = digest_protein_list(proteins, min_length=5, max_missed_cleavages=0)
        shared = peptides.index("SHAREDR")
        assert mapping[shared] == ["P1", "P2"]
        assert mapping[peptides.index("PEPTIDEK")] == ["P1"]

    def test_mapping_input(self):
        """A protein_id -> sequence mapping is accepted."""
        peptides, mapping = digest_protein_list({"P1": "PEPTIDEKRPROTEINK"}, min_length=5)
        assert peptides == ["PEPTIDEK", "RPROTEINK", "PEPTIDEKRPROTEINK"]
        assert all(proteins == ["P1"] for proteins in mapping.values())

    def test_peptides_unique(self):
        """A peptide occurring twice in one protein is listed once."""
        proteins = [("P1", "AAAAAKAAAAAK")]
        peptides, mapping = digest_protein_list(proteins, min_length=5, max_missed_cleavages=0)
        assert peptides == ["AAAAAK"]
        assert mapping[0] == ["P1"]

    def test_options_passed_through(self):
        """Protease and cleavage options reach every protein."""
        proteins = {"P1": "MPEPKAAAAK", "P2": "MKAAAAKAAAAK"}
        peptides, _ = digest_protein_list(proteins, "LysC", min_length=4, max_missed_cleavages=1,
                                          min_missed_cleavages=1,
                                          assume_initiator_methionine_cleaved=False)
        assert peptides == ["MPEPKAAAAK", "PEPKAAAAK", "MKAAAAK", "KAAAAK", "AAAAKAAAAK"]

    def test_short_proteins_skipped(self):
        """Proteins shorter than the minimum length are ignored."""
        peptides, mapping = digest_protein_list([("P1", "AAK")])
        assert peptides == []
        assert mapping == {}
