# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Reading and writing of EMBL entries and their feature tables.

    Feature table lines are expected to follow the fixed columns of the format,
    with a key on a line starting with the prefix and three spaces, and all
    continuation lines starting with the prefix and 19 spaces, e.g.
        FT   CDS             join(100..200,
        FT                   300..400)
        FT                   /gene="abc"

    GenBank feature tables share the same columns with a prefix of two spaces.
"""

import logging
import re
from typing import IO, Iterable, Iterator, List, Optional, Tuple

from .errors import FeatureAttachmentError
from .feature import Feature
from .location_parser import LocationParser
from .qualifier_parser import QualifierParser, UNQUOTED_QUALIFIERS
from .sequence import Sequence

EMBL_PREFIX = "FT"
GENBANK_PREFIX = "  "
LINE_WIDTH = 80
_CONTENT_COLUMN = 21  # the zero-based column at which locations and qualifiers start
_WRAP_WIDTH = LINE_WIDTH - _CONTENT_COLUMN - 1

# qualifiers which can't contain spaces, so any introduced by wrapping are removed
_SPACELESS_QUALIFIERS = {"translation"}
# spaces around the punctuation of a location, as found in some tables
_LOCATION_SPACING = re.compile(r"\s*([,()])\s*")


class LineBuffer:
    """ Provides lines from a file or other iterable, one at a time, with the
        ability to return lines that were read too early.

        Line endings are removed from the lines provided.
    """
    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)
        self._pushed: List[str] = []
        self.line_number = 0

    def next_line(self) -> Optional[str]:
        """ Returns the next line, or None if there are no more lines """
        if self._pushed:
            line = self._pushed.pop()
        else:
            line = next(self._lines, None)
            if line is None:
                return None
        self.line_number += 1
        return line.rstrip("\r\n")

    def push_back(self, line: str) -> None:
        """ Returns a line to the buffer, to be provided again by the next call
            to next_line()
        """
        self._pushed.append(line)
        self.line_number -= 1

    def __iter__(self) -> Iterator[str]:
        line = self.next_line()
        while line is not None:
            yield line
            line = self.next_line()


def iterate_feature_blocks(buffer: LineBuffer, prefix: str = EMBL_PREFIX) -> Iterator[Tuple[str, str, str]]:
    """ Finds each feature in a feature table, joining any continuation lines.

        Location continuation lines are joined without any separator, while
        qualifier lines are joined with a single space.
        Reading stops at the first line which is not part of the feature table,
        which is returned to the buffer.

        Arguments:
            buffer: the LineBuffer to read lines from
            prefix: the line prefix of the feature table

        Returns:
            an iterator of tuples of key, location and qualifier text for each feature
    """
    key_pattern = re.compile(rf"^{re.escape(prefix)}   (\S+)\s+(\S.*)")
    continuation = re.compile(rf"^{re.escape(prefix)} {{19}}\s*(\S.*)")
    blank = prefix.rstrip()

    line = buffer.next_line()
    while line is not None:
        match = key_pattern.match(line)
        if not match:
            if blank and line.rstrip() == blank:
                line = buffer.next_line()
                continue
            buffer.push_back(line)
            return
        key, location = match.groups()
        location = location.rstrip()
        qualifiers: List[str] = []
        line = buffer.next_line()
        while line is not None:
            extra = continuation.match(line)
            if not extra:
                break
            content = extra.group(1).rstrip()
            if not qualifiers and not content.startswith("/"):
                location += content
            else:
                qualifiers.append(content)
            line = buffer.next_line()
        yield key, _LOCATION_SPACING.sub(r"\1", location), " ".join(qualifiers)


def parse_feature_table(lines: Iterable[str], prefix: str = EMBL_PREFIX,
                        allow_reversed: bool = True) -> List[Feature]:
    """ Builds features from the lines of a feature table. Features which
        cannot be parsed are skipped, with a warning.

        Arguments:
            lines: the lines of the feature table, or a LineBuffer
            prefix: the line prefix of the feature table
            allow_reversed: whether ranges with a start after their end are
                            swapped instead of rejected

        Returns:
            a list of Features, in the order found
    """
    buffer = lines if isinstance(lines, LineBuffer) else LineBuffer(lines)
    location_parser = LocationParser(allow_reversed=allow_reversed)
    qualifier_parser = QualifierParser()
    features = []
    for key, location, qualifier_text in iterate_feature_blocks(buffer, prefix):
        try:
            ranges = location_parser.parse(location)
            qualifiers = qualifier_parser.parse(qualifier_text)
            for name in _SPACELESS_QUALIFIERS.intersection(qualifiers.names()):
                values = [value.replace(" ", "") for value in qualifiers.remove(name)]
                qualifiers.add(name, *values)
            features.append(Feature(key, ranges, qualifiers=qualifiers))
        except ValueError as err:
            logging.warning("skipping %s feature with location %s: %s", key, location, err)
    logging.debug("parsed %d features from feature table", len(features))
    return features


def _attach_features(sequence: Sequence, features: Iterable[Feature]) -> None:
    for feature in features:
        try:
            sequence.add_feature(feature)
        except FeatureAttachmentError as err:
            logging.warning("skipping feature %s: %s", feature, err)


def _read_entry(buffer: LineBuffer, allow_reversed: bool) -> Optional[Sequence]:
    """ Reads a single EMBL entry, up to and including the terminating '//' """
    seq_id = accession = organism = ""
    description: List[str] = []
    features: List[Feature] = []
    residues: List[str] = []
    in_sequence = False
    seen = False

    for line in buffer:
        if line.startswith("//"):
            seen = True
            break
        if not line.strip():
            continue
        seen = True
        if in_sequence:
            residues.append(re.sub(r"[\d\s]", "", line))
            continue
        code = line[:2]
        content = line[5:].strip()
        if code == "ID":
            seq_id = content.split(";")[0].split()[0] if content else ""
        elif code == "AC":
            if not accession:
                accession = content.split(";")[0].strip()
        elif code == "DE":
            description.append(content)
        elif code == "OS":
            organism = content
        elif code == EMBL_PREFIX:
            buffer.push_back(line)
            features.extend(parse_feature_table(buffer, EMBL_PREFIX, allow_reversed=allow_reversed))
        elif code == "SQ":
            in_sequence = True

    if not seen:
        return None
    sequence = Sequence("".join(residues) if in_sequence else None, seq_id=seq_id,
                        accession=accession, description=" ".join(description),
                        organism=organism)
    _attach_features(sequence, features)
    return sequence


def read_embl(handle: Iterable[str], allow_reversed: bool = True) -> Iterator[Sequence]:
    """ Reads each entry from an EMBL file.

        Entries without a sequence block are provided as virtual sequences.
        Features which cannot be parsed or do not fit within the sequence are
        skipped with a warning.

        Arguments:
            handle: the open file, or any iterable of lines
            allow_reversed: whether ranges with a start after their end are
                            swapped instead of rejected

        Returns:
            an iterator of Sequence instances
    """
    buffer = LineBuffer(handle)
    entry = _read_entry(buffer, allow_reversed)
    while entry is not None:
        yield entry
        entry = _read_entry(buffer, allow_reversed)


def _wrap(text: str, separator: str, width: int = _WRAP_WIDTH) -> List[str]:
    """ Splits text into lines no longer than the given width. Lines are split
        after a separator of ',' or at a separator of ' ', and words too long for
        a line are split wherever required.
    """
    lines = []
    while len(text) > width:
        if separator == ",":
            cut = text.rfind(",", 0, width)
            chunk, text = (text[:cut + 1], text[cut + 1:]) if cut >= 0 else (text[:width], text[width:])
        else:
            cut = text.rfind(" ", 1, width + 1)
            chunk, text = (text[:cut], text[cut + 1:]) if cut > 0 else (text[:width], text[width:])
        lines.append(chunk.rstrip())
    lines.append(text)
    return lines


def format_qualifier(name: str, value: Optional[str]) -> str:
    """ Builds the text of a single qualifier, quoting the value if required """
    if value is None:
        return f"/{name}"
    if name in UNQUOTED_QUALIFIERS:
        return f"/{name}={value}"
    escaped = value.replace('"', '""')
    return f'/{name}="{escaped}"'


def make_feature_block(feature: Feature, prefix: str = EMBL_PREFIX) -> str:
    """ Builds the feature table lines of a single feature, wrapped to fit the
        width of the format.

        Arguments:
            feature: the feature to build the lines of
            prefix: the line prefix of the feature table

        Returns:
            the lines of the feature, each ending with a newline
    """
    if {part.strand for part in feature.ranges} == {0}:
        logging.warning("%s is on strand 0, which is not supported by the format: using forward strand", feature)
    leader = prefix.ljust(_CONTENT_COLUMN)
    first = f"{prefix}   {feature.key}".ljust(_CONTENT_COLUMN)

    lines = _wrap(feature.location, ",")
    qualifiers = dict(feature.qualifiers.items())
    for name in sorted(qualifiers):
        for value in qualifiers[name]:
            lines.extend(_wrap(format_qualifier(name, value), " "))

    block = [first + lines[0]]
    block.extend(leader + line for line in lines[1:])
    return "".join(line + "\n" for line in block)


def write_feature_table(features: Iterable[Feature], handle: IO, prefix: str = EMBL_PREFIX) -> None:
    """ Writes the given features as a feature table """
    for feature in features:
        handle.write(make_feature_block(feature, prefix))


def make_sequence_block(residues: str) -> str:
    """ Builds an EMBL sequence block, from the SQ line to the end of the residues """
    residues = residues.lower()
    counts = {base: residues.count(base) for base in "acgt"}
    other = len(residues) - sum(counts.values())
    lines = [f"SQ   Sequence {len(residues)} BP; {counts['a']} A; {counts['c']} C; "
             f"{counts['g']} G; {counts['t']} T; {other} other;"]
    for position in range(0, len(residues), 60):
        chunk = residues[position:position + 60]
        blocks = " ".join(chunk[i:i + 10] for i in range(0, len(chunk), 10))
        lines.append(f"     {blocks.ljust(66)}{min(position + 60, len(residues)):9d}")
    return "".join(line + "\n" for line in lines)


def write_embl(sequence: Sequence, handle: IO) -> None:
    """ Writes a sequence and its features as an EMBL entry.

        Arguments:
            sequence: the sequence to write
            handle: the file to write to
    """
    length = sequence.length or 0
    molecule = {"rna": "RNA", "protein": "PRT"}.get(sequence.seq_type, "DNA")
    handle.write(f"ID   {sequence.seq_id or 'unknown'}; SV 1; linear; {molecule}; STD; UNC; {length} BP.\n")
    handle.write("XX\n")
    if sequence.accession:
        handle.write(f"AC   {sequence.accession};\nXX\n")
    if sequence.description:
        for line in _wrap(sequence.description, " ", LINE_WIDTH - 5):
            handle.write(f"DE   {line}\n")
        handle.write("XX\n")
    if sequence.organism:
        handle.write(f"OS   {sequence.organism}\nXX\n")
    if sequence.features:
        handle.write("FH   Key             Location/Qualifiers\nFH\n")
        write_feature_table(sequence.features, handle, EMBL_PREFIX)
        handle.write("XX\n")
    if sequence.residues is not None:
        handle.write(make_sequence_block(sequence.residues))
    handle.write("//\n")
