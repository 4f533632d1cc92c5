# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Coordinate transforms of ranges and features: reverse complementing,
    trimming to a window of the parent sequence, and splicing and translating
    coding features.

    None of the transforms modify the ranges or features given, new instances
    are always created.
"""

import logging
from typing import Dict, List, Optional

from .errors import AmbiguousStrandError, FeatureTableError
from .feature import Feature
from .range import Range
from .residues import splice_ranges, translate_residues

VALID_FRAMES = (1, 2, 3)


def _ensure_fuzzy_ordering(coords: Dict[str, int]) -> None:
    """ Swaps fixed and fuzzy coordinates which ended up in the wrong order
        after mirroring, so that fuzzy_start < start and end < fuzzy_end.
    """
    if coords["fuzzy_start"] and coords["start"] and coords["fuzzy_start"] > coords["start"]:
        coords["fuzzy_start"], coords["start"] = coords["start"], coords["fuzzy_start"]
    if coords["fuzzy_end"] and coords["end"] and coords["fuzzy_end"] < coords["end"]:
        coords["fuzzy_end"], coords["end"] = coords["end"], coords["fuzzy_end"]


def reverse_complement_range(part: Range, length: int) -> Range:
    """ Mirrors a range onto the reverse complement of a sequence.

        Arguments:
            part: the range to mirror
            length: the length of the sequence the range is within

        Returns:
            a new Range on the opposite strand
    """
    if part.strand == 0:
        raise AmbiguousStrandError(f"cannot reverse complement a range with ambiguous strand: {part}")
    if part.outer_end > length:
        raise ValueError(f"range {part} extends beyond sequence length {length}")

    def mirror(coordinate: int) -> int:
        return length - coordinate + 1 if coordinate else 0

    coords = {
        "start": mirror(part.end),
        "end": mirror(part.start),
        "fuzzy_start": mirror(part.fuzzy_end),
        "fuzzy_end": mirror(part.fuzzy_start),
    }
    _ensure_fuzzy_ordering(coords)
    return Range(strand=-part.strand, no_5prime=part.no_5prime, no_3prime=part.no_3prime,
                 no_width=part.no_width, allow_reversed=False, **coords)


def reverse_complement_feature(feature: Feature, length: int) -> Feature:
    """ Creates a copy of the feature, mirrored onto the reverse complement of
        a sequence of the given length.
    """
    if feature.strand == 0:
        raise AmbiguousStrandError(f"cannot reverse complement feature with ambiguous strand: {feature}")
    return feature.clone([reverse_complement_range(part, length) for part in feature.ranges])


def _mark_clipped(coords: Dict[str, int], strand: int, left: bool) -> None:
    """ Sets the truncation flag for the physical end of the range that was
        clipped, taking strand into account.
    """
    if (strand == -1) == left:
        coords["no_3prime"] = True
    else:
        coords["no_5prime"] = True


def trim_range(part: Range, new_start: int, new_end: int) -> Optional[Range]:
    """ Clips a range to a window of its sequence and moves it into the
        coordinates of that window, as if the window were a new sequence.

        Any boundary which is clipped is marked as truncated.

        Arguments:
            part: the range to trim
            new_start: the first position of the window, inclusive
            new_end: the last position of the window, inclusive

        Returns:
            a new Range, or None if the range lies entirely outside the window
    """
    if new_start < 1 or new_end < new_start:
        raise ValueError(f"invalid window: {new_start}..{new_end}")
    if part.outer_end < new_start or part.outer_start > new_end:
        return None

    coords = part.to_kwargs()
    start, end = coords["start"], coords["end"]

    # the start side
    if start and start < new_start:
        coords["start"] = new_start
        coords["fuzzy_start"] = 0
        _mark_clipped(coords, part.strand, left=True)
    elif start and coords["fuzzy_start"] and coords["fuzzy_start"] < new_start:
        coords["fuzzy_start"] = new_start if new_start < start else 0
    elif not start and coords["fuzzy_start"] < new_start:
        coords["fuzzy_start"] = new_start
        _mark_clipped(coords, part.strand, left=True)

    # the end side
    if end and end > new_end:
        coords["end"] = new_end
        coords["fuzzy_end"] = 0
        _mark_clipped(coords, part.strand, left=False)
    elif end and coords["fuzzy_end"] and coords["fuzzy_end"] > new_end:
        coords["fuzzy_end"] = new_end if new_end > end else 0
    elif not end and coords["fuzzy_end"] > new_end:
        coords["fuzzy_end"] = new_end
        _mark_clipped(coords, part.strand, left=False)

    # only the fuzzy extension lies within the window, so no fixed bound remains
    if (end and end < new_start) or (start and start > new_end):
        coords["fuzzy_start"] = coords["fuzzy_start"] or coords["start"]
        coords["fuzzy_end"] = coords["fuzzy_end"] or coords["end"]
        coords["start"] = coords["end"] = 0

    # collapse boundaries which now refer to the same base
    if not coords["start"] and coords["fuzzy_start"] in (coords["end"], coords["fuzzy_end"]):
        coords["start"], coords["fuzzy_start"] = coords["fuzzy_start"], 0
    if not coords["end"] and coords["fuzzy_end"] == coords["start"]:
        coords["end"], coords["fuzzy_end"] = coords["fuzzy_end"], 0
    if coords["fuzzy_end"] and coords["fuzzy_end"] == coords["end"]:
        coords["fuzzy_end"] = 0

    offset = new_start - 1
    for name in ["start", "end", "fuzzy_start", "fuzzy_end"]:
        if coords[name]:
            coords[name] -= offset
    return Range(allow_reversed=False, **coords)


def _count_clipped_5prime(feature: Feature, strand: int, new_start: int, new_end: int) -> int:
    """ Counts the bases of the feature lying beyond the window on the 5' side """
    clipped = 0
    for part in feature.ranges:
        if part.no_width:
            continue
        if strand == -1:
            clipped += max(0, part.inner_end - max(part.inner_start, new_end + 1) + 1)
        else:
            clipped += max(0, min(part.inner_end, new_start - 1) - part.inner_start + 1)
    return clipped


def trim_feature(feature: Feature, new_start: int, new_end: int) -> Optional[Feature]:
    """ Creates a copy of the feature with every range trimmed to a window of the
        sequence, in the coordinates of that window.

        For coding features with bases removed from the 5' end, the codon_start
        qualifier is updated to keep the reading frame.

        Arguments:
            feature: the feature to trim
            new_start: the first position of the window, inclusive
            new_end: the last position of the window, inclusive

        Returns:
            a new Feature, or None if no range of the feature remains
    """
    if not feature.ranges or feature.end < new_start or feature.start > new_end:
        return None
    ranges: List[Range] = []
    for part in feature.ranges:
        trimmed = trim_range(part, new_start, new_end)
        if trimmed is not None:
            ranges.append(trimmed)
    if not ranges:
        return None
    new = feature.clone(ranges)

    strand = feature.strand
    if strand and (feature.key == "CDS" or feature.qualifier_exists("codon_start")):
        clipped = _count_clipped_5prime(feature, strand, new_start, new_end)
        if clipped:
            frame = get_frame(feature)
            new.qualifier_remove("codon_start")
            new.qualifier_add("codon_start", (frame - 1 - clipped) % 3 + 1)
            logging.debug("%s trimmed by %d bases at the 5' end, codon_start now %s",
                          feature, clipped, new.qualifier_values("codon_start")[0])
    return new


def get_frame(feature: Feature, default: int = 1) -> int:
    """ Returns the reading frame of the feature, from the codon_start qualifier
        if present, or the given default if not.
    """
    value = feature.qualifiers.first("codon_start")
    if value is None:
        frame = default
    else:
        try:
            frame = int(value)
        except ValueError:
            raise FeatureTableError(f"{feature} has invalid codon_start: {value!r}")
    if frame not in VALID_FRAMES:
        raise ValueError(f"reading frame must be one of {VALID_FRAMES}, not {frame}")
    return frame


def splice_feature(feature: Feature, residues: str = None) -> str:
    """ Joins the residues covered by each range of the feature, in transcription
        order, reverse complementing those on the reverse strand.

        Arguments:
            feature: the feature to splice
            residues: the residues of the parent sequence, if the feature
                      is not attached to a sequence with residues

        Returns:
            the spliced residues
    """
    if residues is None:
        return feature.get_residues()
    return splice_ranges(feature.ranges, residues, feature.sequence_type or "dna")


def translate_feature(feature: Feature, table: int = None, frame: int = 1, nterm: bool = True,
                      residues: str = None) -> str:
    """ Translates the spliced residues of a coding feature.

        Arguments:
            feature: the feature to translate
            table: the NCBI translation table to use, if not given the feature's
                   transl_table qualifier is used, falling back to the standard table
            frame: the reading frame to use, overridden by a codon_start qualifier
            nterm: whether the feature includes the N-terminus of the protein
            residues: the residues of the parent sequence, if the feature
                      is not attached to a sequence with residues

        Returns:
            the translation of the feature
    """
    if feature.sequence_type == "protein":
        raise ValueError(f"cannot translate {feature}, it is part of a protein sequence")
    frame = get_frame(feature, default=frame)
    if table is None:
        table = int(feature.qualifiers.first("transl_table", "1"))
    coding = splice_feature(feature, residues)[frame - 1:]
    return translate_residues(coding, table=table, nterm=nterm)
