"""Proteases for in silico digestion.

A protease reports the cleavage sites of a sequence as 0-based residue indices
meaning "cleave after this residue". Specificity is a zero-width regular
expression matched between residues; e.g. trypsin, which cuts after K or R
unless followed by P, is ``(?<=[KR])(?!P)``.

Any object with a ``get_digestion_sites(sequence)`` method returning a set of
ints can be used wherever a ``Protease`` is expected.
"""

import re
from typing import Dict, Set


class Protease:
    """Sequence-specific endopeptidase.

    Parameters
    ----------
    name : str
        Enzyme name
    regex : str
        Zero-width pattern matching each cut between two residues

    Examples
    --------
    >>> trypsin = Protease("Trypsin", r"(?<=[KR])(?!P)")
    >>> sorted(trypsin.get_digestion_sites("PEPTIDEKRPROTEINK"))
    [7]
    """

    def __init__(self, name: str, regex: str):
        self.name = name
        self.regex = regex
        self._pattern = re.compile(regex)

    def get_digestion_sites(self, sequence: str) -> Set[int]:
        """Return cleavage sites as "cleave after index" positions.

        Cuts at either end of the sequence are not sites.
        """
        sites = set()
        for match in self._pattern.finditer(sequence):
            cut = match.start()
            if 0 < cut < len(sequence):
                sites.add(cut - 1)
        return sites

    def __eq__(self, other):
        if not isinstance(other, Protease):
            return NotImplemented
        return self.regex == other.regex

    def __hash__(self):
        return hash(self.regex)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"Protease({self.name!r}, {self.regex!r})"


# Cleavage rules (ExPASy PeptideCutter conventions)
PROTEASES: Dict[str, Protease] = {
    protease.name: protease
    for protease in (
        Protease("Trypsin", r"(?<=[KR])(?!P)"),
        Protease("Trypsin/P", r"(?<=[KR])"),
        Protease("LysC", r"(?<=K)"),
        Protease("LysN", r"(?=K)"),
        Protease("ArgC", r"(?<=R)(?!P)"),
        Protease("GluC", r"(?<=E)(?!P)"),
        Protease("AspN", r"(?=D)"),
        Protease("Chymotrypsin", r"(?<=[FWYL])(?!P)"),
    )
}


def get_protease(name: str) -> Protease:
    """Look up a built-in protease by name; raises ``KeyError`` when unknown."""
    return PROTEASES[name]
