"""Protein digestion for peptide generation.

In silico digestion of sequences with support for:
- Any combination of proteases (cleavage sites are unioned)
- Missed cleavages (minimum and maximum)
- Peptide length filtering
- Optional retention of the initiator methionine
- Multi-protein digestion with peptide-to-protein mapping

Design principles:
1. Cleavage sites collected once into a sorted, duplicate-free index array
2. Numba sliding-window enumeration of (start, length) spans
3. Strings or polymers are only materialized for spans that pass the filters

Algorithm
---------
Sites are "cleave after index" positions. With sentinels -1 (before the first
residue) and length-1 (the last residue) added, a peptide with exactly m missed
cleavages spans ``indices[i] + 1`` for ``indices[i + m + 1] - indices[i]``
residues.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import numba
import numpy as np

from ..constants import (
    DEFAULT_MAX_PEPTIDE_LENGTH,
    DEFAULT_MIN_PEPTIDE_LENGTH,
    DEFAULT_MISSED_CLEAVAGES,
)
from ..exceptions import RangeError
from .proteases import get_protease

logger = logging.getLogger(__name__)


# =============================================================================
# Numba-Accelerated Window Enumeration
# =============================================================================

@numba.jit(nopython=True, cache=True)
def cleavage_windows(
    indices: np.ndarray,
    min_missed_cleavages: int,
    max_missed_cleavages: int,
    min_length: int,
    max_length: int,
) -> Tuple[np.ndarray, np.ndarray]:
    """Enumerate peptide spans between cleavage sites (Numba-compiled).

    Parameters
    ----------
    indices : np.ndarray (int64)
        Sorted, unique cleavage sites including the -1 and length-1 sentinels
    min_missed_cleavages, max_missed_cleavages : int
        Inclusive range of missed cleavages
    min_length, max_length : int
        Inclusive peptide length window

    Returns
    -------
    starts : np.ndarray (int64)
        0-based first residue of each peptide
    lengths : np.ndarray (int64)
        Residue count of each peptide

    Notes
    -----
    Spans are ordered by missed cleavages, then by position.
    """
    n = len(indices)

    # Pre-allocate for the worst case (no length filtering)
    capacity = 0
    for mc in range(min_missed_cleavages, max_missed_cleavages + 1):
        if n - mc - 1 > 0:
            capacity += n - mc - 1

    starts = np.empty(capacity, dtype=np.int64)
    lengths = np.empty(capacity, dtype=np.int64)

    idx = 0
    for mc in range(min_missed_cleavages, max_missed_cleavages + 1):
        for i in range(n - mc - 1):
            length = indices[i + mc + 1] - indices[i]
            if length >= min_length and length <= max_length:
                starts[idx] = indices[i] + 1
                lengths[idx] = length
                idx += 1

    return starts[:idx], lengths[:idx]


# =============================================================================
# Cleavage Sites
# =============================================================================

def as_protease_list(proteases) -> List:
    """Normalize a protease, a protease name, or an iterable of either."""
    if isinstance(proteases, str):
        return [get_protease(proteases)]
    if hasattr(proteases, "get_digestion_sites"):
        return [proteases]
    return [get_protease(p) if isinstance(p, str) else p for p in proteases]


def collect_cleavage_sites(sequence: str, proteases) -> np.ndarray:
    """Union the sites of all proteases into a sorted array with sentinels.

    Raises
    ------
    RangeError
        If a protease reports a site outside the sequence
    """
    length = len(sequence)
    locations = {-1, length - 1}
    for protease in as_protease_list(proteases):
        for site in protease.get_digestion_sites(sequence):
            if site < -1 or site > length - 1:
                raise RangeError(
                    f"Protease {protease} returned cleavage site {site} outside the valid range "
                    f"[0-{length - 1}]", value=site, lower=0, upper=length - 1)
            locations.add(site)
    return np.array(sorted(locations), dtype=np.int64)


def _validate_bounds(min_missed_cleavages: int, max_missed_cleavages: int) -> None:
    if max_missed_cleavages < 0:
        raise RangeError(
            f"Maximum missed cleavages must be non-negative, you specified: {max_missed_cleavages}",
            value=max_missed_cleavages, lower=0)
    if min_missed_cleavages < 0 or min_missed_cleavages > max_missed_cleavages:
        raise RangeError(
            f"Minimum missed cleavages not in the correct range: [0-{max_missed_cleavages}] "
            f"you specified: {min_missed_cleavages}",
            value=min_missed_cleavages, lower=0, upper=max_missed_cleavages)


def digest_spans(
    sequence: str,
    proteases,
    max_missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
    min_length: int = DEFAULT_MIN_PEPTIDE_LENGTH,
    max_length: Optional[int] = None,
    min_missed_cleavages: int = 0,
    assume_initiator_methionine_cleaved: bool = True,
) -> Iterator[Tuple[int, int]]:
    """Yield (start, length) spans of every peptide, see ``digest``.

    Bounds are validated and sites collected before the first span is
    requested.
    """
    _validate_bounds(min_missed_cleavages, max_missed_cleavages)
    if max_length is None:
        max_length = DEFAULT_MAX_PEPTIDE_LENGTH

    indices = collect_cleavage_sites(sequence, proteases)
    starts, lengths = cleavage_windows(
        indices, min_missed_cleavages, max_missed_cleavages, min_length, max_length)
    starts_with_m = sequence[:1] == "M" and not assume_initiator_methionine_cleaved

    def spans():
        for start, length in zip(starts.tolist(), lengths.tolist()):
            yield start, length
            if starts_with_m and start == 0 and length - 1 >= min_length:
                yield 1, length - 1

    return spans()


def digest(
    sequence: str,
    proteases,
    max_missed_cleavages: int = DEFAULT_MISSED_CLEAVAGES,
    min_length: int = DEFAULT_MIN_PEPTIDE_LENGTH,
    max_length: Optional[int] = None,
    min_missed_cleavages: int = 0,
    assume_initiator_methionine_cleaved: bool = True,
) -> Iterator[str]:
    """Digest a plain sequence into peptide strings.

    Parameters
    ----------
    sequence : str
        Protein sequence (bare one-letter codes)
    proteases : Protease, str, or iterable of either
        Enzyme(s); sites of all enzymes are combined
    max_missed_cleavages : int
        Maximum missed cleavages, must be >= 0 (default: 0)
    min_length, max_length : int
        Inclusive peptide length window (default: unbounded)
    min_missed_cleavages : int
        Minimum missed cleavages (default: 0)
    assume_initiator_methionine_cleaved : bool
        When False and the sequence starts with M, every N-terminal peptide is
        followed by its methionine-clipped form

    Returns
    -------
    peptides : Iterator[str]
        Peptides ordered by missed cleavages, then by position

    Raises
    ------
    RangeError
        Negative or inverted missed-cleavage bounds, or an out-of-range site

    Examples
    --------
    >>> list(digest("PEPTIDEKRPROTEINK", "Trypsin", max_missed_cleavages=1))
    ['PEPTIDEK', 'RPROTEINK', 'PEPTIDEKRPROTEINK']
    """
    spans = digest_spans(sequence, proteases, max_missed_cleavages, min_length, max_length,
                         min_missed_cleavages, assume_initiator_methionine_cleaved)
    return (sequence[start:start + length] for start, length in spans)


def digest_protein_list(
    proteins: Union[Mapping[str, str], Iterable[Tuple[str, str]]],
    proteases="Trypsin",
    min_length: int = 7,
    max_length: int = 35,
    max_missed_cleavages: int = 2,
    min_missed_cleavages: int = 0,
    assume_initiator_methionine_cleaved: bool = True,
) -> Tuple[List[str], Dict[int, List[str]]]:
    """Digest many proteins and map every unique peptide to its proteins.

    Parameters
    ----------
    proteins : Mapping[str, str] or Iterable[Tuple[str, str]]
        protein_id -> sequence, or (protein_id, sequence) pairs
    proteases : Protease, str, or iterable of either
        Enzyme(s) (default: Trypsin)
    min_length, max_length : int
        Peptide length window (default: 7-35, typical for DDA/DIA libraries)
    max_missed_cleavages, min_missed_cleavages : int
        Missed-cleavage bounds (default: 0-2)
    assume_initiator_methionine_cleaved : bool
        Passed on to ``digest`` for every protein

    Returns
    -------
    unique_peptides : List[str]
        Unique peptide sequences in first-seen order
    peptide_to_proteins : Dict[int, List[str]]
        Index-based mapping: peptide_idx -> protein IDs in input order

    Examples
    --------
    >>> peptides, mapping = digest_protein_list({"P1": "PEPTIDEKRPROTEINK"}, min_length=5)
    >>> peptides
    ['PEPTIDEK', 'RPROTEINK', 'PEPTIDEKRPROTEINK']
    """
    proteases = as_protease_list(proteases)
    if isinstance(proteins, Mapping):
        proteins = proteins.items()
    proteins = list(proteins)
    logger.info(f"Digesting {len(proteins):,} proteins with {', '.join(map(str, proteases))}...")

    seq_to_proteins: Dict[str, List[str]] = defaultdict(list)
    total_peptides_generated = 0
    digested = 0

    for idx, (protein_id, sequence) in enumerate(proteins):
        if len(sequence) < min_length:
            logger.debug(f"Skipping {protein_id}: shorter than {min_length} residues")
            continue
        digested += 1

        for peptide in digest(sequence, proteases, max_missed_cleavages, min_length, max_length,
                              min_missed_cleavages, assume_initiator_methionine_cleaved):
            # A peptide occurring twice in one protein maps to it once
            if protein_id not in seq_to_proteins[peptide]:
                seq_to_proteins[peptide].append(protein_id)
            total_peptides_generated += 1

        if (idx + 1) % 5000 == 0:
            logger.info(
                f"  Processed {idx + 1:,} proteins: "
                f"{len(seq_to_proteins):,} unique peptides"
            )

    unique_peptides = list(seq_to_proteins.keys())
    peptide_to_proteins = {
        i: seq_to_proteins[peptide]
        for i, peptide in enumerate(unique_peptides)
    }

    logger.info(
        f"Digested {digested:,} proteins into {total_peptides_generated:,} peptides "
        f"({len(unique_peptides):,} unique)"
    )
    if unique_peptides:
        shared_peptides = sum(1 for prots in peptide_to_proteins.values() if len(prots) > 1)
        logger.info(
            f"  Shared peptides: {shared_peptides} "
            f"({shared_peptides / len(unique_peptides) * 100:.1f}%)"
        )

    return unique_peptides, peptide_to_proteins
