# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Reading and writing of GenBank records. Only the header fields kept by
    sequences are used, along with the feature table and the sequence itself.
"""

import re
from typing import IO, Iterable, Iterator, List, Optional

from .embl import (
    GENBANK_PREFIX,
    LINE_WIDTH,
    LineBuffer,
    _attach_features,
    _wrap,
    parse_feature_table,
    write_feature_table,
)
from .feature import Feature
from .sequence import Sequence

_HEADER_WIDTH = 12


def _read_record(buffer: LineBuffer, allow_reversed: bool) -> Optional[Sequence]:
    """ Reads a single GenBank record, up to and including the terminating '//' """
    seq_id = accession = organism = ""
    description: List[str] = []
    features: List[Feature] = []
    residues: List[str] = []
    in_sequence = False
    seen = False
    keyword = ""

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
        if line[:_HEADER_WIDTH].strip():
            keyword = line[:_HEADER_WIDTH].strip()
        content = line[_HEADER_WIDTH:].strip()
        if keyword == "LOCUS":
            seq_id = content.split()[0] if content else ""
        elif keyword == "DEFINITION":
            description.append(content)
        elif keyword == "ACCESSION":
            if not accession and content:
                accession = content.split()[0]
        elif keyword == "ORGANISM" and not organism:
            organism = content
        elif keyword == "FEATURES":
            features.extend(parse_feature_table(buffer, GENBANK_PREFIX, allow_reversed=allow_reversed))
            keyword = ""
        elif keyword == "ORIGIN":
            in_sequence = True

    if not seen:
        return None
    description_text = " ".join(description)
    if description_text.endswith("."):
        description_text = description_text[:-1]
    sequence = Sequence("".join(residues) if in_sequence else None, seq_id=seq_id,
                        accession=accession, description=description_text,
                        organism=organism)
    _attach_features(sequence, features)
    return sequence


def read_genbank(handle: Iterable[str], allow_reversed: bool = True) -> Iterator[Sequence]:
    """ Reads each record from a GenBank file, in the same way as read_embl().
    """
    buffer = LineBuffer(handle)
    record = _read_record(buffer, allow_reversed)
    while record is not None:
        yield record
        record = _read_record(buffer, allow_reversed)


def _write_field(handle: IO, keyword: str, text: str) -> None:
    lines = _wrap(text, " ", LINE_WIDTH - _HEADER_WIDTH)
    handle.write(f"{keyword.ljust(_HEADER_WIDTH)}{lines[0]}\n")
    for line in lines[1:]:
        handle.write(f"{' ' * _HEADER_WIDTH}{line}\n")


def write_genbank(sequence: Sequence, handle: IO) -> None:
    """ Writes a sequence and its features as a GenBank record.

        Arguments:
            sequence: the sequence to write
            handle: the file to write to
    """
    length = sequence.length or 0
    unit = "aa" if sequence.seq_type == "protein" else "bp"
    molecule = {"rna": "RNA", "protein": ""}.get(sequence.seq_type, "DNA")
    name = sequence.seq_id or sequence.accession or "unknown"
    handle.write(f"LOCUS       {name:<16} {length:>11} {unit}    {molecule:<6}  linear   UNK\n")
    _write_field(handle, "DEFINITION", f"{sequence.description or ''}.")
    _write_field(handle, "ACCESSION", sequence.accession or name)
    if sequence.organism:
        _write_field(handle, "SOURCE", sequence.organism)
        _write_field(handle, "  ORGANISM", sequence.organism)
    handle.write("FEATURES             Location/Qualifiers\n")
    write_feature_table(sequence.features, handle, GENBANK_PREFIX)
    if sequence.residues is not None:
        handle.write("ORIGIN\n")
        residues = sequence.residues.lower()
        for position in range(0, len(residues), 60):
            chunk = residues[position:position + 60]
            blocks = " ".join(chunk[i:i + 10] for i in range(0, len(chunk), 10))
            handle.write(f"{position + 1:>9} {blocks}\n")
    handle.write("//\n")
