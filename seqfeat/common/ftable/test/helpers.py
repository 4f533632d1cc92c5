# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Shared test data: a 2100 base sequence and a feature table of ten features
    covering each kind of location.
"""

from typing import List

SEQUENCE_LENGTH = 2100
RESIDUES = "acgt" * (SEQUENCE_LENGTH // 4)

FEATURE_TABLE = """\
FT   CDS             1..38
FT                   /gene="first"
FT                   /codon_start=1
FT   misc_feature    20^39
FT   CDS             join(100..200,
FT                   300..400)
FT                   /locus_tag="joined"
FT   gene            complement(500..600)
FT                   /pseudo
FT   CDS             complement(join(700..750,800..850))
FT   repeat_region   (1260.1349)
FT   misc_feature    <1600..1650
FT   CDS             (1760.1765)..1780
FT   CDS             1800..(1815.1820)
FT   CDS             1910..>2100
FT                   /note="a note long enough to need wrapping across more
FT                   than one line of the table"
"""

# outer start and end of each feature in the table above
EXPECTED_COORDINATES = [
    (1, 38),
    (20, 39),
    (100, 400),
    (500, 600),
    (700, 850),
    (1260, 1349),
    (1600, 1650),
    (1760, 1780),
    (1800, 1820),
    (1910, 2100),
]

EXPECTED_KEYS = ["CDS", "misc_feature", "CDS", "gene", "CDS", "repeat_region",
                 "misc_feature", "CDS", "CDS", "CDS"]


def build_embl_entry(residues: str = RESIDUES, table: str = FEATURE_TABLE, seq_id: str = "TEST1") -> str:
    """ Builds the text of a complete EMBL entry """
    lines: List[str] = [
        f"ID   {seq_id}; SV 1; linear; genomic DNA; STD; PRO; {len(residues)} BP.",
        "XX",
        "AC   AB000001; AB000002;",
        "XX",
        "DE   A test sequence",
        "DE   with a long description",
        "XX",
        "OS   Imaginary organism",
        "XX",
        "FH   Key             Location/Qualifiers",
        "FH",
    ]
    lines.extend(table.splitlines())
    lines.append("XX")
    lines.append(f"SQ   Sequence {len(residues)} BP;")
    for i in range(0, len(residues), 60):
        chunk = residues[i:i + 60]
        blocks = " ".join(chunk[j:j + 10] for j in range(0, len(chunk), 10))
        lines.append(f"     {blocks} {min(i + 60, len(residues))}")
    lines.append("//")
    return "\n".join(lines) + "\n"
