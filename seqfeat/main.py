# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" The command line pipeline: reading sequences, transforming them and their
    features, then writing the results.
"""

import contextlib
import logging
import sys
from typing import IO, Iterator, List, Optional, Tuple

from Bio import SeqIO
from Bio.Seq import Seq
from Bio.SeqRecord import SeqRecord

from seqfeat.common import logs
from seqfeat.common.errors import SeqfeatInputError
from seqfeat.common.ftable import (
    Feature,
    Sequence,
    read_embl,
    read_genbank,
    translate_feature,
    write_embl,
    write_genbank,
)
from seqfeat.config import ConfigType
from seqfeat.config import args as config_args

__version__ = "0.3.0"

config_args.SEQFEAT_VERSION = __version__

_NAME_QUALIFIERS = ["locus_tag", "gene", "protein_id"]


def get_version() -> str:
    """ Returns the version of seqfeat """
    return __version__


def read_sequences(path: str, genbank: bool = False, allow_reversed: bool = True) -> List[Sequence]:
    """ Reads all sequences from the given file.

        Arguments:
            path: the path of the file to read
            genbank: whether the file is in GenBank format instead of EMBL
            allow_reversed: whether ranges ending before they start are swapped
                            instead of the feature being skipped

        Returns:
            a list of Sequence instances
    """
    reader = read_genbank if genbank else read_embl
    try:
        with open(path, "r", encoding="utf-8") as handle:
            sequences = list(reader(handle, allow_reversed=allow_reversed))
    except OSError as err:
        raise SeqfeatInputError(f"could not read {path}: {err}") from err
    if not sequences:
        raise SeqfeatInputError(f"no sequences found in {path}")
    logging.info("read %d sequences from %s", len(sequences), path)
    return sequences


def transform_sequence(sequence: Sequence, subsequence: Optional[Tuple[int, int]] = None,
                       reverse_complement: bool = False) -> Sequence:
    """ Applies the requested transforms to a sequence, a window first and
        then reverse complementing.

        Arguments:
            sequence: the sequence to transform
            subsequence: a tuple of start and end of a window to keep, if any
            reverse_complement: whether to reverse complement the sequence

        Returns:
            the transformed sequence, or the original if no transforms requested
    """
    try:
        if subsequence:
            start, end = subsequence
            logging.debug("taking subsequence %d..%d of %s", start, end, sequence.seq_id)
            sequence = sequence.subsequence(start, end)
        if reverse_complement:
            logging.debug("reverse complementing %s", sequence.seq_id)
            sequence = sequence.reverse_complement()
    except ValueError as err:
        raise SeqfeatInputError(f"cannot transform {sequence.seq_id or 'sequence'}: {err}") from err
    return sequence


def get_feature_name(feature: Feature, default: str) -> str:
    """ Finds the most specific name of a feature from its qualifiers """
    for name in _NAME_QUALIFIERS:
        value = feature.qualifiers.first(name)
        if value:
            return value
    return default


def get_translations(sequence: Sequence, table: int = None) -> List[Tuple[str, str]]:
    """ Translates each CDS feature of a sequence, skipping with a warning any
        which can't be translated.

        Arguments:
            sequence: the sequence containing the features
            table: the translation table to use, if not using each feature's own

        Returns:
            a list of tuples of feature name and translation
    """
    translations = []
    for i, feature in enumerate(sequence.get_features("CDS")):
        name = get_feature_name(feature, f"{sequence.seq_id or 'cds'}_{i + 1}")
        try:
            translations.append((name, translate_feature(feature, table=table)))
        except ValueError as err:
            logging.warning("could not translate %s: %s", name, err)
    return translations


@contextlib.contextmanager
def _open_output(path: str) -> Iterator[IO]:
    if path == config_args.STDOUT:
        yield sys.stdout
        return
    with open(path, "w", encoding="utf-8") as handle:
        yield handle


def write_results(sequences: List[Sequence], options: ConfigType) -> None:
    """ Writes the sequences, or their translations, to the requested output """
    with _open_output(options.output) as handle:
        for sequence in sequences:
            if options.translate:
                records = [SeqRecord(Seq(translation), id=name, description="")
                           for name, translation in get_translations(sequence, options.translation_table)]
                SeqIO.write(records, handle, "fasta")
            elif options.genbank:
                write_genbank(sequence, handle)
            else:
                write_embl(sequence, handle)


def run_seqfeat(options: ConfigType) -> int:
    """ The complete seqfeat pipeline. Reads in sequences, transforms them
        as requested, then writes them out.

        Arguments:
            options: command line options

        Returns:
            0 if requested operations completed successfully, otherwise 1
    """
    with logs.changed_logging(logfile=options.logfile, verbose=options.verbose,
                              debug=options.debug):
        result = _run_seqfeat(options)
    return result


def _run_seqfeat(options: ConfigType) -> int:
    """ The real run_seqfeat, assumes logging is set up around it """
    if options.version:
        print(f"seqfeat {get_version()}")
        return 0
    logging.info("seqfeat version: %s", get_version())

    if not options.input:
        logging.error("no input file given")
        return 1

    try:
        sequences = read_sequences(options.input, genbank=options.genbank,
                                   allow_reversed=not options.strict_ranges)
        sequences = [transform_sequence(sequence, options.subsequence, options.reverse_complement)
                     for sequence in sequences]
    except SeqfeatInputError as err:
        logging.error(str(err))
        return 1

    write_results(sequences, options)
    return 0
