"""Linear amino acid polymer with modifications.

The polymer owns a fixed residue array and ``length + 2`` modification slots:
slot 0 is the N-terminus, slots 1..length the residues, slot length+1 the
C-terminus. Every mutation goes through a single slot-replace primitive that
keeps the monoisotopic mass current, so reading the mass never rescans the
sequence. The annotated string is only rebuilt on demand.

Examples
--------
>>> peptide = AminoAcidPolymer("PEPC[Carbamidomethyl]TIDEK")
>>> peptide.set_modification(get_modification("Acetyl"), Terminus.N)
1
>>> str(peptide)
'[Acetyl]-PEPC[Carbamidomethyl]TIDEK'
>>> peptide.sequence
'PEPCTIDEK'

Notes
-----
Instances are not thread-safe for writers. Concurrent readers are safe: the
only lazily built state is the annotated string, whose rebuild is pure.
"""

from __future__ import annotations

import itertools
from enum import IntFlag
from numbers import Integral
from typing import Iterable, Iterator, List, Optional, Sequence, Union

from .caching import RenderCache
from .chemistry import ChemicalFormula
from .constants import DEFAULT_C_TERMINUS_FORMULA, DEFAULT_N_TERMINUS_FORMULA, HEAVY_LABEL
from .database.digestion import digest_spans
from .exceptions import RangeError
from .fragments.generator import (
    SERIES_TYPES,
    Fragment,
    FragmentTypes,
    calculate_neutral_mass,
    calculate_precursor_mz,
    encode_peptide_to_ord,
    generate_series,
)
from .modifications import Modification, ModificationRegistry, as_modification, make_heavy
from .parser import parse_sequence
from .residues import RESIDUE_MASSES, AminoAcid, ModificationSites

DEFAULT_N_TERMINUS = ChemicalFormula(DEFAULT_N_TERMINUS_FORMULA)
DEFAULT_C_TERMINUS = ChemicalFormula(DEFAULT_C_TERMINUS_FORMULA)


class Terminus(IntFlag):
    """Polymer ends; combine with ``|`` to target both."""

    N = 1
    C = 2


def _as_terminus(value, default: ChemicalFormula) -> ChemicalFormula:
    if value is None:
        return default
    if isinstance(value, ChemicalFormula):
        return value
    if isinstance(value, str):
        return ChemicalFormula(value)
    raise TypeError(f"Terminal group must be a ChemicalFormula or formula string, "
                    f"got {type(value).__name__}")


class AminoAcidPolymer:
    """Mutable amino acid sequence with per-position modifications.

    Parameters
    ----------
    sequence : str
        Annotated sequence, e.g. "[Acetyl]-PEPTIDEK[#]" (default: empty)
    n_terminus, c_terminus : ChemicalFormula or str, optional
        Terminal groups (default: H and OH)
    registry : ModificationRegistry, optional
        Registry for named annotations (default: the module registry)

    Raises
    ------
    ParseError
        If ``sequence`` cannot be parsed
    """

    def __init__(
        self,
        sequence: str = "",
        n_terminus: Union[ChemicalFormula, str, None] = None,
        c_terminus: Union[ChemicalFormula, str, None] = None,
        registry: Optional[ModificationRegistry] = None,
    ):
        n_terminus = _as_terminus(n_terminus, DEFAULT_N_TERMINUS)
        c_terminus = _as_terminus(c_terminus, DEFAULT_C_TERMINUS)
        parsed = parse_sequence(sequence, n_terminus, c_terminus, registry)
        self._initialize(parsed.residues, parsed.modifications, n_terminus, c_terminus, parsed.mass)

    def _initialize(
        self,
        residues: Sequence[AminoAcid],
        modifications: Sequence[Optional[Modification]],
        n_terminus: ChemicalFormula,
        c_terminus: ChemicalFormula,
        mass: Optional[float] = None,
    ) -> None:
        self._residues = tuple(residues)
        self._modifications: List[Optional[Modification]] = list(modifications)
        self._n_terminus = n_terminus
        self._c_terminus = c_terminus
        self._mass = self._sum_mass() if mass is None else mass
        self._rendering: RenderCache[str] = RenderCache()

    @classmethod
    def from_polymer(
        cls,
        polymer: "AminoAcidPolymer",
        first_residue: int = 0,
        length: Optional[int] = None,
        include_modifications: bool = True,
    ):
        """Copy all or part of ``polymer``.

        Parameters
        ----------
        polymer : AminoAcidPolymer
            Source; never shares mutable state with the copy
        first_residue : int
            0-based index of the first residue to copy
        length : int, optional
            Residues to copy, clipped to what is available (default: all)
        include_modifications : bool
            Copy residue modifications, and each terminus with its
            modification when the copy reaches that end

        Raises
        ------
        RangeError
            If ``first_residue`` is outside ``[0, polymer.length]``
        """
        if first_residue < 0 or first_residue > polymer.length:
            raise RangeError(
                f"The first residue index is outside the valid range [0-{polymer.length}] "
                f"you specified: {first_residue}",
                value=first_residue, lower=0, upper=polymer.length)

        available = polymer.length - first_residue
        if length is None or length > available:
            length = available
        if length < 0:
            raise RangeError(f"Length must be non-negative, you specified: {length}", value=length)

        end = first_residue + length
        residues = polymer._residues[first_residue:end]
        modifications: List[Optional[Modification]] = [None] * (length + 2)
        n_terminus, c_terminus = DEFAULT_N_TERMINUS, DEFAULT_C_TERMINUS

        if include_modifications:
            modifications[1:length + 1] = polymer._modifications[first_residue + 1:end + 1]
            if first_residue == 0:
                n_terminus = polymer._n_terminus
                modifications[0] = polymer._modifications[0]
            if end == polymer.length:
                c_terminus = polymer._c_terminus
                modifications[length + 1] = polymer._modifications[polymer.length + 1]

        copy = cls.__new__(cls)
        copy._initialize(residues, modifications, n_terminus, c_terminus)
        return copy

    def copy(self, include_modifications: bool = True):
        return type(self).from_polymer(self, include_modifications=include_modifications)

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def length(self) -> int:
        return len(self._residues)

    @property
    def monoisotopic_mass(self) -> float:
        """Termini + residues + every modification, kept current on mutation."""
        return self._mass

    @property
    def sequence(self) -> str:
        """Bare one-letter sequence."""
        return "".join(residue.letter for residue in self._residues)

    @property
    def leucine_sequence(self) -> str:
        """Sequence with isoleucine written as leucine (isobaric)."""
        return self.sequence.replace("I", "L")

    @property
    def sequence_with_modifications(self) -> str:
        return self._rendering.get(self._render)

    @property
    def residues(self) -> tuple:
        return self._residues

    @property
    def modifications(self) -> tuple:
        """Snapshot of all ``length + 2`` slots."""
        return tuple(self._modifications)

    @property
    def n_terminus(self) -> ChemicalFormula:
        return self._n_terminus

    @n_terminus.setter
    def n_terminus(self, value):
        value = _as_terminus(value, DEFAULT_N_TERMINUS)
        self._mass += value.mass - self._n_terminus.mass
        self._n_terminus = value

    @property
    def c_terminus(self) -> ChemicalFormula:
        return self._c_terminus

    @c_terminus.setter
    def c_terminus(self, value):
        value = _as_terminus(value, DEFAULT_C_TERMINUS)
        self._mass += value.mass - self._c_terminus.mass
        self._c_terminus = value

    @property
    def n_terminus_modification(self) -> Optional[Modification]:
        return self._modifications[0]

    @n_terminus_modification.setter
    def n_terminus_modification(self, value):
        self._replace_slot(0, as_modification(value))

    @property
    def c_terminus_modification(self) -> Optional[Modification]:
        return self._modifications[-1]

    @c_terminus_modification.setter
    def c_terminus_modification(self, value):
        self._replace_slot(self.length + 1, as_modification(value))

    # =========================================================================
    # Residue Access
    # =========================================================================

    def _check_residue_number(self, residue_number: int) -> None:
        if residue_number < 1 or residue_number > self.length:
            raise RangeError(
                f"Residue number not in the correct range: [1-{self.length}] "
                f"you specified: {residue_number}",
                value=residue_number, lower=1, upper=self.length)

    def residue_at(self, residue_number: int) -> AminoAcid:
        """Residue at a 1-based position."""
        self._check_residue_number(residue_number)
        return self._residues[residue_number - 1]

    def residue_count(self, residue: Union[AminoAcid, str, None] = None) -> int:
        """Count residues matching a letter or residue (all residues when omitted)."""
        if residue is None:
            return self.length
        if isinstance(residue, str):
            return sum(1 for aa in self._residues if aa.letter == residue)
        return sum(1 for aa in self._residues if aa == residue)

    def get_modification(self, position: int) -> Optional[Modification]:
        """Modification in slot ``position`` (0 = N-terminus, length+1 = C-terminus)."""
        if position < 0 or position > self.length + 1:
            raise RangeError(
                f"Modification slot not in the correct range: [0-{self.length + 1}] "
                f"you specified: {position}",
                value=position, lower=0, upper=self.length + 1)
        return self._modifications[position]

    def contains_modification(self, modification) -> bool:
        modification = as_modification(modification)
        return any(mod == modification for mod in self._modifications if mod is not None)

    # =========================================================================
    # Modification Mutation
    # =========================================================================

    def _replace_slot(self, index: int, modification: Optional[Modification]) -> bool:
        """Store ``modification`` in slot ``index``, keeping the mass current.

        Returns False (and does nothing) if the slot already holds an equal value.
        """
        old = self._modifications[index]
        if old is modification or (old is not None and old == modification):
            return False
        if old is not None:
            self._mass -= old.mass
        self._modifications[index] = modification
        if modification is not None:
            self._mass += modification.mass
        self._rendering.invalidate()
        return True

    def set_terminus_modification(self, modification, terminus: Terminus) -> int:
        """Set the modification of the N and/or C terminus.

        Returns
        -------
        int
            Number of slots changed
        """
        modification = as_modification(modification)
        changed = 0
        if terminus & Terminus.N:
            changed += self._replace_slot(0, modification)
        if terminus & Terminus.C:
            changed += self._replace_slot(self.length + 1, modification)
        return changed

    def set_site_modification(self, modification, sites: ModificationSites) -> int:
        """Set the modification on every residue (and pseudo-site) in ``sites``."""
        modification = as_modification(modification)
        changed = 0
        if sites & ModificationSites.NPEP:
            changed += self._replace_slot(0, modification)
        for index, residue in enumerate(self._residues, 1):
            if sites & residue.site:
                changed += self._replace_slot(index, modification)
        if sites & ModificationSites.PEPC:
            changed += self._replace_slot(self.length + 1, modification)
        return changed

    def set_letter_modification(self, modification, letter: str) -> int:
        """Set the modification on every residue with one-letter code ``letter``."""
        modification = as_modification(modification)
        changed = 0
        for index, residue in enumerate(self._residues, 1):
            if residue.letter == letter:
                changed += self._replace_slot(index, modification)
        return changed

    def set_residue_modification(self, modification, residue: AminoAcid) -> int:
        """Set the modification on every occurrence of the table residue ``residue``."""
        modification = as_modification(modification)
        changed = 0
        for index, aa in enumerate(self._residues, 1):
            if aa is residue:
                changed += self._replace_slot(index, modification)
        return changed

    def set_position_modification(self, modification, residue_numbers: Union[int, Iterable[int]]) -> int:
        """Set the modification at one or more 1-based residue numbers.

        Raises
        ------
        RangeError
            If any number is outside ``[1, length]``; nothing is changed then
        """
        modification = as_modification(modification)
        if isinstance(residue_numbers, Integral):
            residue_numbers = [residue_numbers]
        else:
            residue_numbers = list(residue_numbers)
        for residue_number in residue_numbers:
            self._check_residue_number(residue_number)
        return sum(self._replace_slot(number, modification) for number in residue_numbers)

    def set_modification(self, modification, target) -> int:
        """Set ``modification`` on ``target``, dispatching on its type.

        ``target`` may be a ``Terminus``, ``ModificationSites``, one-letter
        code, ``AminoAcid``, 1-based residue number, or iterable of numbers.
        """
        if isinstance(target, Terminus):
            return self.set_terminus_modification(modification, target)
        if isinstance(target, ModificationSites):
            return self.set_site_modification(modification, target)
        if isinstance(target, AminoAcid):
            return self.set_residue_modification(modification, target)
        if isinstance(target, str):
            return self.set_letter_modification(modification, target)
        if isinstance(target, Integral) and not isinstance(target, bool):
            return self.set_position_modification(modification, target)
        if isinstance(target, Iterable):
            return self.set_position_modification(modification, target)
        raise TypeError(f"Cannot set a modification on a target of type {type(target).__name__}")

    def clear_terminus_modification(self, terminus: Terminus) -> int:
        return self.set_terminus_modification(None, terminus)

    def remove_modification(self, modification) -> int:
        """Clear every slot holding a modification equal to ``modification``."""
        modification = as_modification(modification)
        changed = 0
        for index, mod in enumerate(self._modifications):
            if mod is not None and mod == modification:
                changed += self._replace_slot(index, None)
        return changed

    def clear_modifications(self, target=None) -> int:
        """Clear all slots, the given termini, or every slot equal to a modification."""
        if target is None:
            return sum(self._replace_slot(index, None) for index in range(self.length + 2))
        if isinstance(target, Terminus):
            return self.clear_terminus_modification(target)
        return self.remove_modification(target)

    # =========================================================================
    # Composition
    # =========================================================================

    def _sum_mass(self) -> float:
        mass = self._n_terminus.mass + self._c_terminus.mass
        for residue in self._residues:
            mass += residue.mass
        for modification in self._modifications:
            if modification is not None:
                mass += modification.mass
        return mass

    def try_get_chemical_formula(self) -> Optional[ChemicalFormula]:
        """Full elemental composition, or ``None`` if any modification is mass-only."""
        modifications = [mod for mod in self._modifications if mod is not None]
        if any(mod.formula is None for mod in modifications):
            return None
        return ChemicalFormula.combine(itertools.chain(
            (self._n_terminus, self._c_terminus),
            (residue.formula for residue in self._residues),
            (mod.formula for mod in modifications),
        ))

    def to_mz(self, charge: int) -> float:
        """m/z of the [M+zH]z+ ion."""
        if charge < 1:
            raise ValueError(f"Charge must be positive, got {charge}")
        return calculate_precursor_mz(self._mass, charge)

    @staticmethod
    def get_mass(sequence: str) -> float:
        """Mass of a bare sequence with default termini; unknown letters weigh nothing.

        >>> round(AminoAcidPolymer.get_mass(""), 4)
        18.0106
        """
        return float(calculate_neutral_mass(
            encode_peptide_to_ord(sequence), RESIDUE_MASSES,
            DEFAULT_N_TERMINUS.mass + DEFAULT_C_TERMINUS.mass))

    # =========================================================================
    # Fragmentation
    # =========================================================================

    def _series(self, fragment_type: FragmentTypes, min_number: int, max_number: int) -> Iterator[Fragment]:
        if fragment_type.is_c_terminal:
            return generate_series(fragment_type, self._c_terminus, self._residues[::-1],
                                   self._modifications[::-1], min_number, max_number, self)
        return generate_series(fragment_type, self._n_terminus, self._residues,
                               list(self._modifications), min_number, max_number, self)

    def calculate_fragment(self, fragment_type: FragmentTypes, number: int) -> Optional[Fragment]:
        """Single fragment of one series covering ``number`` residues.

        Returns ``None`` for ``FragmentTypes.NONE``.

        Raises
        ------
        RangeError
            If ``number`` is outside ``[1, length]``
        """
        if number < 1 or number > self.length:
            raise RangeError(
                f"Fragment number not in the correct range: [1-{self.length}] you specified: {number}",
                value=number, lower=1, upper=self.length)
        fragment_type = FragmentTypes(fragment_type)
        if fragment_type == FragmentTypes.NONE:
            return None
        if fragment_type not in SERIES_TYPES:
            raise ValueError(f"Expected a single ion series, got {fragment_type!r}")
        return next(self._series(fragment_type, number, number))

    def calculate_fragments(
        self,
        fragment_types: FragmentTypes,
        min_number: int = 1,
        max_number: Optional[int] = None,
    ) -> Iterator[Fragment]:
        """Lazily yield fragments ``min_number..max_number`` of every requested series.

        Parameters
        ----------
        fragment_types : FragmentTypes
            Bitmask of series; ``NONE`` and ``INTERNAL`` bits are ignored
        min_number, max_number : int
            Inclusive fragment numbers, counted from each series' terminus
            (default: 1 to length - 1)

        Returns
        -------
        Iterator[Fragment]
            Series in a, b, c, x, y, z order, each in ascending number order

        Raises
        ------
        RangeError
            Immediately, if the range is outside ``[1, length - 1]``
        """
        fragment_types = FragmentTypes(fragment_types)
        if fragment_types == FragmentTypes.NONE:
            return iter(())
        if max_number is None:
            max_number = self.length - 1
        if min_number < 1 or max_number > self.length - 1:
            raise RangeError(
                f"Fragment range [{min_number}-{max_number}] not within the valid range "
                f"[1-{self.length - 1}]",
                value=min_number if min_number < 1 else max_number, lower=1, upper=self.length - 1)

        series = [self._series(fragment_type, min_number, max_number)
                  for fragment_type in SERIES_TYPES if fragment_types & fragment_type]
        return itertools.chain(*series)

    # =========================================================================
    # Digestion
    # =========================================================================

    def digest(
        self,
        proteases,
        max_missed_cleavages: int = 0,
        min_length: int = 1,
        max_length: Optional[int] = None,
        min_missed_cleavages: int = 0,
        assume_initiator_methionine_cleaved: bool = True,
        include_modifications: bool = True,
    ) -> list:
        """Digest into independent ``Peptide`` copies.

        See ``alphapolymer.database.digestion.digest`` for the parameters.
        """
        from .peptide import Peptide

        spans = digest_spans(self.sequence, proteases, max_missed_cleavages, min_length, max_length,
                             min_missed_cleavages, assume_initiator_methionine_cleaved)
        return [Peptide.from_polymer(self, start, length, include_modifications)
                for start, length in spans]

    # =========================================================================
    # Rendering, Equality
    # =========================================================================

    @staticmethod
    def _label(modification: Modification, residue: Optional[AminoAcid] = None) -> str:
        # [#] re-parses against the preceding residue, so it is only written there
        if modification.name == HEAVY_LABEL and (
                residue is None or modification != make_heavy(residue)):
            return modification.formula.formula
        return str(modification)

    def _render(self) -> str:
        parts = []
        n_mod = self._modifications[0]
        if n_mod is not None:
            parts.append(f"[{self._label(n_mod)}]-")
        for index, residue in enumerate(self._residues, 1):
            parts.append(residue.letter)
            modification = self._modifications[index]
            if modification is not None:
                parts.append(f"[{self._label(modification, residue)}]")
        c_mod = self._modifications[-1]
        if c_mod is not None:
            parts.append(f"-[{self._label(c_mod)}]")
        return "".join(parts)

    def __len__(self):
        return len(self._residues)

    def __iter__(self) -> Iterator[AminoAcid]:
        return iter(self._residues)

    def __str__(self):
        return self.sequence_with_modifications

    def __repr__(self):
        return f"{type(self).__name__}({self.sequence_with_modifications!r})"

    def __eq__(self, other):
        if not isinstance(other, AminoAcidPolymer):
            return NotImplemented
        if self is other:
            return True
        return (
            len(self._residues) == len(other._residues)
            and self._n_terminus == other._n_terminus
            and self._c_terminus == other._c_terminus
            and self._modifications == other._modifications
            and self._residues == other._residues
        )

    def __hash__(self):
        # The float mass depends on mutation order, so only exact state is hashed
        return hash((self.sequence, self._n_terminus, self._c_terminus))
