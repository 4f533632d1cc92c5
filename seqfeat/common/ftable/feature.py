# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" The feature class, an annotation of a sequence made up of one or more ranges
    and any number of qualifiers.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import weakref

from .errors import FeatureAttachmentError
from .location_parser import format_location
from .qualifiers import Qualifiers
from .range import Range
from .residues import splice_ranges


class Feature:
    """ A single feature of a sequence, e.g. a CDS or a gene.

        Ranges are kept sorted by position. A feature becomes attached to a
        sequence when added to it, after which the ranges are checked against the
        length of that sequence whenever more are added.
    """
    __slots__ = ["_key", "_ranges", "_qualifiers", "_sequence"]

    def __init__(self, key: str, ranges: Iterable[Range] = None, *, start: int = None,
                 end: int = None, strand: int = 1,
                 qualifiers: Union[Qualifiers, Mapping[str, Any]] = None) -> None:
        if not isinstance(key, str):
            raise TypeError(f"feature key must be a string, not {type(key)}")
        if not 1 <= len(key) < 16:  # at 16 the key merges with the location in feature tables
            raise ValueError(f"feature key has invalid length: {key!r}")
        if ranges is not None and (start is not None or end is not None):
            raise ValueError("ranges cannot be combined with start and end")
        if ranges is None:
            if start is None or end is None:
                raise ValueError("either ranges or both of start and end are required")
            ranges = [Range(start, end, strand=strand)]

        self._key = key
        self._ranges: List[Range] = []
        self._sequence: Optional[weakref.ReferenceType] = None
        if isinstance(qualifiers, Qualifiers):
            self._qualifiers = qualifiers
        else:
            self._qualifiers = Qualifiers(qualifiers)
        self.add_ranges(ranges)

    @property
    def key(self) -> str:
        """ The type of the feature, e.g. 'CDS' """
        return self._key

    @property
    def ranges(self) -> Tuple[Range, ...]:
        """ The ranges of the feature, sorted by position """
        return tuple(self._ranges)

    def add_ranges(self, ranges: Iterable[Range]) -> None:
        """ Adds the given ranges to the feature. If the feature is attached to
            a sequence, the ranges must fit within that sequence and none will be
            added if any does not.
        """
        ranges = list(ranges)
        for part in ranges:
            if not isinstance(part, Range):
                raise TypeError(f"feature ranges must be Range instances, not {type(part)}")
        sequence = self.sequence
        if sequence is not None:
            check_ranges_fit(self._key, ranges, sequence.length)
        self._ranges.extend(ranges)
        self._ranges.sort()

    @property
    def start(self) -> int:
        """ The outermost start coordinate of the first range """
        if not self._ranges:
            raise ValueError(f"{self._key} feature has no ranges")
        return self._ranges[0].outer_start

    @property
    def end(self) -> int:
        """ The outermost end coordinate of the last range """
        if not self._ranges:
            raise ValueError(f"{self._key} feature has no ranges")
        return self._ranges[-1].outer_end

    @property
    def strand(self) -> int:
        """ The strand shared by all ranges, or 0 if the ranges are on different
            strands or the feature has no ranges.
        """
        strands = {part.strand for part in self._ranges}
        if len(strands) == 1:
            return strands.pop()
        if strands:
            logging.warning("%s feature has ranges on multiple strands: %s", self._key, self.location)
        return 0

    @strand.setter
    def strand(self, strand: int) -> None:
        for part in self._ranges:
            part.strand = strand

    @property
    def location(self) -> str:
        """ The location of the feature, in feature table format """
        return format_location(self._ranges)

    @property
    def qualifiers(self) -> Qualifiers:
        """ The qualifiers of the feature """
        return self._qualifiers

    def qualifier_values(self, name: str) -> List[str]:
        """ Returns the values of the given qualifier, in the order added. An
            empty list is returned for flag qualifiers and missing qualifiers.
        """
        return self._qualifiers.values(name)

    def qualifier_exists(self, name: str) -> bool:
        """ Returns True if the qualifier is present, even if it has no value """
        return self._qualifiers.exists(name)

    def qualifier_add(self, name: str, *values: Union[str, int]) -> None:
        """ Adds values to a qualifier, or adds it as a flag if no values given """
        self._qualifiers.add(name, *values)

    def qualifier_remove(self, name: str) -> List[str]:
        """ Removes a qualifier, returning the values it had """
        return self._qualifiers.remove(name)

    def qualifier_names(self) -> List[str]:
        """ Returns the names of all qualifiers present, sorted """
        return self._qualifiers.names()

    @property
    def sequence(self) -> Any:  # should be Sequence, but would cause circular imports
        """ The sequence the feature is attached to, if any """
        if self._sequence is None:
            return None
        return self._sequence()

    @property
    def is_attached(self) -> bool:
        """ Whether the feature is attached to a sequence """
        return self.sequence is not None

    def _set_sequence(self, sequence: Any) -> None:
        """ Sets or, with None, clears the parent sequence. Only for use by
            the sequence itself.
        """
        self._sequence = None if sequence is None else weakref.ref(sequence)

    @property
    def residues(self) -> Optional[str]:
        """ The full residues of the parent sequence, if attached and available """
        sequence = self.sequence
        if sequence is None:
            return None
        return sequence.residues

    @property
    def sequence_type(self) -> Optional[str]:
        """ The type of the parent sequence, if attached """
        sequence = self.sequence
        if sequence is None:
            return None
        return sequence.seq_type

    def get_residues(self) -> str:
        """ Returns the residues covered by the feature, spliced together in
            transcription order.
        """
        residues = self.residues
        if residues is None:
            raise ValueError(f"{self} is not attached to a sequence with residues")
        seq_type = self.sequence_type
        if seq_type == "protein":
            return "".join(residues[part.inner_start - 1:part.inner_end] for part in self._ranges)
        return splice_ranges(self._ranges, residues, seq_type)

    def overlaps(self, other: Union["Feature", Range]) -> bool:
        """ Returns True if any range of the given feature or range overlaps with
            any range of this feature.
        """
        for part in _ranges_of(other):
            if any(own.overlaps(part) for own in self._ranges):
                return True
        return False

    def contains(self, other: Union["Feature", Range]) -> bool:
        """ Returns True if every range of the given feature or range is wholly
            contained by a single range of this feature.
        """
        parts = _ranges_of(other)
        if not parts:
            return False
        return all(any(own.contains(part) for own in self._ranges) for part in parts)

    def spans(self, other: Union["Feature", Range]) -> bool:
        """ Returns True if any range of the given feature or range lies within
            the outer start and end of this feature, regardless of any gaps
            between this feature's ranges.
        """
        if not self._ranges:
            return False
        start, end = self.start, self.end
        return any(start <= part.outer_start and part.outer_end <= end for part in _ranges_of(other))

    def clone(self, ranges: Iterable[Range] = None) -> "Feature":
        """ Creates a copy of the feature with independent ranges and qualifiers.
            The copy refers to the same sequence, without being added to it.

            Arguments:
                ranges: the ranges to use instead of copies of this feature's own

            Returns:
                a new Feature instance
        """
        if ranges is None:
            ranges = [part.clone() for part in self._ranges]
        new = Feature(self._key, ranges, qualifiers=self._qualifiers.copy())
        new._sequence = self._sequence  # pylint: disable=protected-access
        return new

    def __lt__(self, other: "Feature") -> bool:
        """ Allows sorting Features by location """
        if not isinstance(other, Feature):
            return NotImplemented
        return self._ranges < other._ranges

    def __str__(self) -> str:
        return repr(self)

    def __repr__(self) -> str:
        if not self._ranges:
            return f"{self._key}(no ranges)"
        return f"{self._key}({self.location})"


def _ranges_of(other: Union[Feature, Range]) -> Sequence[Range]:
    if isinstance(other, Feature):
        return other.ranges
    if isinstance(other, Range):
        return [other]
    raise TypeError(f"can only compare with a Feature or Range, not {type(other)}")


def check_ranges_fit(key: str, ranges: Iterable[Range], length: Optional[int]) -> None:
    """ Checks that the given ranges lie within a sequence of the given length,
        raising a FeatureAttachmentError if not. A length of None, as for a
        virtual sequence, always fits.
    """
    if length is None:
        return
    for part in ranges:
        if part.outer_end > length:
            raise FeatureAttachmentError(f"{key} range {part} extends beyond sequence length {length}")
