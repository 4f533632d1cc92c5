# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" A minimal sequence container, holding residues and the features attached
    to them.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .errors import FeatureAttachmentError
from .feature import Feature, check_ranges_fit
from .residues import reverse_complement_residues
from .transforms import reverse_complement_feature, trim_feature

SEQUENCE_TYPES = ("dna", "rna", "protein", "virtual")
_NUCLEOTIDES = set("ACGTUNRYKMSWBDHVX-.")


def guess_sequence_type(residues: Optional[str]) -> str:
    """ Guesses the type of the given residues.

        Arguments:
            residues: the residues to check, or None if there are none

        Returns:
            one of 'dna', 'rna', 'protein' or, if there are no residues, 'virtual'
    """
    if residues is None:
        return "virtual"
    letters = set(residues.upper())
    if not letters.issubset(_NUCLEOTIDES):
        return "protein"
    if "U" in letters and "T" not in letters:
        return "rna"
    return "dna"


class Sequence:
    """ A sequence of residues, or a virtual sequence with no residues at all,
        with any number of features.

        Features are owned by a single sequence at a time and may only be
        attached if all of their ranges fit within the sequence.
    """
    def __init__(self, residues: str = None, *, seq_type: str = None, seq_id: str = "",
                 accession: str = "", description: str = "", organism: str = "",
                 features: Iterable[Feature] = None) -> None:
        if residues is not None and not isinstance(residues, str):
            raise TypeError(f"residues must be a string, not {type(residues)}")
        if seq_type is None:
            seq_type = guess_sequence_type(residues)
        if seq_type not in SEQUENCE_TYPES:
            raise ValueError(f"unknown sequence type {seq_type!r}, must be one of {SEQUENCE_TYPES}")
        if (seq_type == "virtual") != (residues is None):
            raise ValueError("virtual sequences, and only virtual sequences, have no residues")
        self._residues = residues
        self._seq_type = seq_type
        self.seq_id = seq_id
        self.accession = accession
        self.description = description
        self.organism = organism
        self._features: List[Feature] = []
        for feature in features or []:
            self.add_feature(feature)

    @property
    def residues(self) -> Optional[str]:
        """ The residues of the sequence, None for virtual sequences """
        return self._residues

    @property
    def seq_type(self) -> str:
        """ The type of the sequence: dna, rna, protein or virtual """
        return self._seq_type

    @property
    def length(self) -> Optional[int]:
        """ The number of residues, None for virtual sequences """
        if self._residues is None:
            return None
        return len(self._residues)

    @property
    def features(self) -> Tuple[Feature, ...]:
        """ The features attached to the sequence, in the order attached """
        return tuple(self._features)

    def get_features(self, key: str = None) -> List[Feature]:
        """ Returns all features with the given key, or all features if no key given """
        if key is None:
            return list(self._features)
        return [feature for feature in self._features if feature.key == key]

    def add_feature(self, feature: Feature) -> None:
        """ Attaches a feature to the sequence. The feature must have at least
            one range and all ranges must fit within the sequence.
        """
        if not isinstance(feature, Feature):
            raise TypeError(f"can only add Feature instances, not {type(feature)}")
        if any(existing is feature for existing in self._features):
            raise FeatureAttachmentError(f"{feature} is already attached to this sequence")
        # clones share a sequence reference without being part of that sequence
        other = feature.sequence
        if other is not None and other is not self and any(existing is feature for existing in other.features):
            raise FeatureAttachmentError(f"{feature} is already attached to another sequence")
        if not feature.ranges:
            raise FeatureAttachmentError(f"{feature.key} feature has no ranges")
        check_ranges_fit(feature.key, feature.ranges, self.length)
        feature._set_sequence(self)  # pylint: disable=protected-access
        self._features.append(feature)

    def detach(self, feature: Feature) -> None:
        """ Removes a feature from the sequence """
        for i, existing in enumerate(self._features):
            if existing is feature:
                self._features.pop(i)
                feature._set_sequence(None)  # pylint: disable=protected-access
                return
        raise ValueError(f"{feature} is not attached to this sequence")

    def subsequence(self, start: int, end: int, add_features: bool = True) -> "Sequence":
        """ Creates a new sequence from a window of this sequence, with features
            trimmed to fit the window.

            Arguments:
                start: the first position of the window, 1-based and inclusive
                end: the last position of the window, inclusive
                add_features: whether to copy features into the new sequence

            Returns:
                a new Sequence
        """
        if self._residues is None:
            raise ValueError("cannot take a subsequence of a virtual sequence")
        if not 1 <= start <= end <= len(self._residues):
            raise ValueError(f"invalid subsequence {start}..{end} of sequence with length {self.length}")
        new = Sequence(self._residues[start - 1:end], seq_type=self._seq_type, seq_id=self.seq_id,
                       accession=self.accession, organism=self.organism,
                       description=f"{self.description} ({start}..{end})".lstrip())
        if not add_features:
            return new
        for feature in self._features:
            try:
                trimmed = trim_feature(feature, start, end)
            except ValueError as err:  # includes FeatureTableError
                logging.warning("not including %s in subsequence %d..%d: %s", feature, start, end, err)
                continue
            if trimmed is None:
                logging.debug("%s lies outside subsequence %d..%d", feature, start, end)
                continue
            new.add_feature(trimmed)
        return new

    def reverse_complement(self) -> "Sequence":
        """ Creates the reverse complement of the sequence, with all features
            mirrored to match. Features with an ambiguous strand are not included.
        """
        if self._seq_type not in ("dna", "rna"):
            raise ValueError(f"cannot reverse complement a {self._seq_type} sequence")
        assert self._residues is not None
        length = len(self._residues)
        new = Sequence(reverse_complement_residues(self._residues, self._seq_type),
                       seq_type=self._seq_type, seq_id=self.seq_id, accession=self.accession,
                       description=self.description, organism=self.organism)
        for feature in self._features:
            if feature.strand == 0:
                logging.warning("not reverse complementing %s, strand is ambiguous", feature)
                continue
            new.add_feature(reverse_complement_feature(feature, length))
        return new

    def __repr__(self) -> str:
        length = "virtual" if self.length is None else self.length
        return f"Sequence({self.seq_id or self.accession!r}, {self._seq_type}, {length}, {len(self._features)} features)"
