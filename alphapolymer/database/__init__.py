"""Proteases and in silico digestion.

- Protease definitions (regex specificity) and a built-in enzyme table
- Multi-protease digestion with missed cleavages and length filtering
- Numba sliding-window enumeration of peptide spans
- Multi-protein digestion with peptide-to-protein mapping
"""

from .proteases import (
    Protease,
    PROTEASES,
    get_protease,
)

from .digestion import (
    cleavage_windows,
    as_protease_list,
    collect_cleavage_sites,
    digest_spans,
    digest,
    digest_protein_list,
)

__all__ = [
    # Proteases
    'Protease',
    'PROTEASES',
    'get_protease',

    # Digestion
    'cleavage_windows',
    'as_protease_list',
    'collect_cleavage_sites',
    'digest_spans',
    'digest',
    'digest_protein_list',
]
