"""Parser for annotated amino acid sequences.

The annotation language is the one a polymer renders itself back to::

    [Acetyl]-PEPC[Carbamidomethyl]TIDEK[#]-[H2O]

- Uppercase letters are residues from the residue table.
- ``[text]`` attaches a modification to the residue before it; at the very
  start of the string it targets the N-terminus.
- ``-`` after at least one residue sends the next annotation one slot further,
  so a trailing ``-[text]`` targets the C-terminus. A leading ``-`` is inert.
- Spaces are ignored.

Annotation text resolves in order: ``#`` (heavy label of the preceding
residue), a registry name, a formula literal, a bare mass in Da.

The scan is a single left-to-right pass without backtracking.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .chemistry import ChemicalFormula
from .constants import HEAVY_LABEL
from .exceptions import ParseError
from .modifications import (
    Modification,
    ModificationRegistry,
    make_heavy,
    modification_registry,
)
from .residues import AminoAcid, try_get_residue

_NUMBER_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass
class ParsedSequence:
    """Result of parsing an annotated sequence.

    Attributes
    ----------
    residues : tuple of AminoAcid
        Residues in order
    modifications : list
        ``len(residues) + 2`` slots: N-terminus, one per residue, C-terminus
    mass : float
        Termini + residues + modifications, summed during the scan
    """

    residues: Tuple[AminoAcid, ...]
    modifications: List[Optional[Modification]]
    mass: float

    @property
    def sequence(self) -> str:
        return "".join(residue.letter for residue in self.residues)


def resolve_modification(
    text: str,
    previous_residue: Optional[AminoAcid] = None,
    registry: Optional[ModificationRegistry] = None,
    position: Optional[int] = None,
) -> Modification:
    """Resolve the text of one ``[...]`` annotation to a modification."""
    if text == HEAVY_LABEL:
        if previous_residue is None:
            raise ParseError(f"The heavy label [{HEAVY_LABEL}] must follow a residue",
                             token=text, position=position)
        return make_heavy(previous_residue)

    modification = (registry or modification_registry).try_get(text)
    if modification is not None:
        return modification

    if ChemicalFormula.is_valid(text):
        return Modification.from_formula(text)

    if _NUMBER_PATTERN.match(text):
        return Modification.from_mass(float(text))

    raise ParseError(f"Unable to correctly parse the following modification: {text}",
                     token=text, position=position)


def parse_sequence(
    sequence: str,
    n_terminus: ChemicalFormula,
    c_terminus: ChemicalFormula,
    registry: Optional[ModificationRegistry] = None,
) -> ParsedSequence:
    """Parse an annotated sequence into residues, modification slots and mass.

    Parameters
    ----------
    sequence : str
        Annotated sequence, e.g. "[C2H3NO]-TTGSSSSSSSK"
    n_terminus, c_terminus : ChemicalFormula
        Terminal groups whose masses seed the running total
    registry : ModificationRegistry, optional
        Registry for named modifications (default: the module registry)

    Returns
    -------
    ParsedSequence

    Raises
    ------
    ParseError
        Unknown residue letter, unterminated ``[``, or unresolvable annotation
    """
    residues: List[AminoAcid] = []
    placed: Dict[int, Modification] = {}
    mass = n_terminus.mass + c_terminus.mass

    in_mod = False
    c_terminal_mod = False
    mod_start = 0
    mod_chars: List[str] = []

    for offset, letter in enumerate(sequence):
        if in_mod:
            if letter != "]":
                mod_chars.append(letter)
                continue
            in_mod = False
            text = "".join(mod_chars)
            mod_chars = []
            modification = resolve_modification(
                text, residues[-1] if residues else None, registry, mod_start)

            slot = len(residues) + 1 if c_terminal_mod else len(residues)
            previous = placed.get(slot)
            if previous is not None:
                mass -= previous.mass
            placed[slot] = modification
            mass += modification.mass
            c_terminal_mod = False
            continue

        residue = try_get_residue(letter)
        if residue is not None:
            residues.append(residue)
            mass += residue.mass
            c_terminal_mod = False
        elif letter == "[":
            in_mod = True
            mod_start = offset
        elif letter == "-":
            c_terminal_mod = len(residues) > 0
        elif letter == " ":
            continue
        else:
            raise ParseError(f"Amino acid letter {letter} does not exist in the residue dictionary",
                             token=letter, position=offset)

    if in_mod:
        raise ParseError(f"Couldn't find the closing ] for a modification in this sequence: {sequence}",
                         token="".join(mod_chars), position=mod_start)

    modifications: List[Optional[Modification]] = [None] * (len(residues) + 2)
    for slot, modification in placed.items():
        modifications[slot] = modification

    return ParsedSequence(tuple(residues), modifications, mass)
