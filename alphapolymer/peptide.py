"""Peptide: a polymer that remembers where it was cut from."""

import weakref
from typing import Optional

from .polymer import AminoAcidPolymer
from .residues import AminoAcid


class Peptide(AminoAcidPolymer):
    """Amino acid polymer with a weak link back to its source.

    Provenance is informational only. The peptide never shares state with its
    parent and the link takes no part in equality.

    Examples
    --------
    >>> protein = AminoAcidPolymer("PEPTIDEKRPROTEINK")
    >>> peptide = Peptide.from_polymer(protein, 8, 9)
    >>> peptide.sequence, peptide.start_residue, peptide.previous_residue.letter
    ('RPROTEINK', 8, 'K')
    """

    def _initialize(self, *args, **kwargs) -> None:
        super()._initialize(*args, **kwargs)
        self._parent = None
        self._start_residue = 0

    @classmethod
    def from_polymer(cls, polymer, first_residue=0, length=None, include_modifications=True):
        peptide = super().from_polymer(polymer, first_residue, length, include_modifications)
        peptide._parent = weakref.ref(polymer)
        peptide._start_residue = first_residue
        return peptide

    @property
    def parent(self) -> Optional[AminoAcidPolymer]:
        """Source polymer, or ``None`` if parsed from text or already collected."""
        return self._parent() if self._parent is not None else None

    @property
    def start_residue(self) -> int:
        """0-based offset of the first residue in the parent."""
        return self._start_residue

    @property
    def end_residue(self) -> int:
        """0-based offset of the last residue in the parent."""
        return self._start_residue + self.length - 1

    @property
    def previous_residue(self) -> Optional[AminoAcid]:
        parent = self.parent
        if parent is None or self._start_residue == 0:
            return None
        return parent.residues[self._start_residue - 1]

    @property
    def next_residue(self) -> Optional[AminoAcid]:
        parent = self.parent
        if parent is None or self.end_residue + 1 >= parent.length:
            return None
        return parent.residues[self.end_residue + 1]
