"""Physical constants and defaults for amino acid polymer calculations.

This module provides the physical constants, default terminal groups, and
default digestion settings used throughout AlphaPolymer. Physical values are
sourced from NIST; everything else is a plain module-level default that
callers may override through keyword arguments.

Key Features
------------
- Correct PROTON_MASS (1.007276466622 Da, not hydrogen atom mass!)
- Default N-terminal (H) and C-terminal (OH) groups as formula literals
- Default digestion bounds (length window, missed cleavages)
- The ``#`` label used for isotope-heavy residue promotion

Sources
-------
- NIST physical constants: https://physics.nist.gov/cgi-bin/cuu/Value
- Unimod modification compositions: https://www.unimod.org/modifications_list.php
"""

import sys

# =============================================================================
# Fundamental Physical Constants (NIST values)
# =============================================================================

# Proton mass (NOT hydrogen atom mass!)
# Source: NIST 2018 CODATA
PROTON_MASS = 1.007276466622  # Da

# Electron mass
# Source: NIST 2018 CODATA
ELECTRON_MASS = 0.000548579909  # Da

# Water mass (H2O)
# Calculated: 2*1.00782503207 + 15.99491461956
H2O_MASS = 18.0105646837  # Da

# =============================================================================
# Terminal Groups
# =============================================================================

# A free peptide carries H on the amine and OH on the carboxyl end,
# so an empty polymer weighs exactly one water.
DEFAULT_N_TERMINUS_FORMULA = "H"
DEFAULT_C_TERMINUS_FORMULA = "OH"

# =============================================================================
# Sequence Annotation
# =============================================================================

# Annotation text that promotes the preceding residue to its fully
# 13C/15N-labelled form, e.g. "PEPTIDEK[#]"
HEAVY_LABEL = "#"

# Isotopes used for heavy promotion: element -> heavy mass number
HEAVY_ISOTOPES = {
    "C": 13,
    "N": 15,
}

# =============================================================================
# Digestion Defaults
# =============================================================================

# No length filtering unless asked for
DEFAULT_MIN_PEPTIDE_LENGTH = 1
DEFAULT_MAX_PEPTIDE_LENGTH = sys.maxsize

# Fully specific digestion by default
DEFAULT_MISSED_CLEAVAGES = 0

# =============================================================================
# Ambiguous Residue Codes
# =============================================================================

# IUPAC ambiguity codes mapped to a representative standard residue
NON_STANDARD_AA_MAP = {
    'X': 'L',  # Unknown -> Leucine (most common)
    'Z': 'Q',  # Glu/Gln -> Glutamine
    'B': 'N',  # Asp/Asn -> Asparagine
    'J': 'L',  # Leu/Ile -> Leucine
}
