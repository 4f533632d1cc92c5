# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Residue level helpers: reverse complementing, splicing ranges together and
    translating coding sequences.
"""

from typing import Iterable, List

from Bio.Data import CodonTable
from Bio.Seq import Seq

from .errors import AmbiguousStrandError
from .range import Range

NUCLEOTIDE_TYPES = ("dna", "rna")


def reverse_complement_residues(residues: str, seq_type: str = "dna") -> str:
    """ Reverse complements a nucleotide string, keeping case and IUPAC
        ambiguity codes.

        Arguments:
            residues: the residues to reverse complement
            seq_type: either 'dna' or 'rna', with RNA keeping U instead of T

        Returns:
            the reverse complement as a string
    """
    if seq_type not in NUCLEOTIDE_TYPES:
        raise ValueError(f"cannot reverse complement residues of type {seq_type!r}")
    if seq_type == "rna":
        return str(Seq(residues).reverse_complement_rna())
    return str(Seq(residues).reverse_complement())


def traversal_order(ranges: Iterable[Range]) -> List[Range]:
    """ Returns the ranges in the order they are transcribed: left to right for
        the forward strand and right to left for the reverse strand.

        Ranges must already be sorted by position.
    """
    ranges = list(ranges)
    for part in ranges:
        if part.strand == 0:
            raise AmbiguousStrandError(f"range has ambiguous strand: {part}")
    if ranges and all(part.strand == -1 for part in ranges):
        return ranges[::-1]
    return ranges


def splice_ranges(ranges: Iterable[Range], residues: str, seq_type: str = "dna") -> str:
    """ Joins the residues covered by each range in transcription order, reverse
        complementing those from reverse strand ranges.

        Zero-width ranges contribute no residues.

        Arguments:
            ranges: the ranges to splice, sorted by position
            residues: the full residues of the parent sequence
            seq_type: the type of the residues

        Returns:
            the spliced residues
    """
    spliced = []
    for part in traversal_order(ranges):
        if part.no_width:
            continue
        chunk = residues[part.inner_start - 1:part.inner_end]
        if part.strand == -1:
            chunk = reverse_complement_residues(chunk, seq_type)
        spliced.append(chunk)
    return "".join(spliced)


def get_codon_table(table: int) -> CodonTable.CodonTable:
    """ Finds the NCBI codon table with the given id """
    try:
        return CodonTable.unambiguous_dna_by_id[table]
    except KeyError:
        raise ValueError(f"unknown translation table: {table}")


def translate_residues(residues: str, table: int = 1, nterm: bool = True) -> str:
    """ Translates a coding sequence to protein, discarding any incomplete
        trailing codon and a trailing stop.

        Arguments:
            residues: the nucleotides to translate, already in frame
            table: the NCBI translation table id
            nterm: whether the sequence is the N-terminus of the protein, in which
                   case any start codon is translated as methionine

        Returns:
            the translated protein as a string
    """
    codon_table = get_codon_table(table)
    residues = residues[:len(residues) - len(residues) % 3]
    if not residues:
        return ""
    translation = str(Seq(residues).translate(table=table))
    if translation.endswith("*"):
        translation = translation[:-1]
    first = residues[:3].upper().replace("U", "T")
    if nterm and translation and first in codon_table.start_codons:
        translation = "M" + translation[1:]
    return translation
