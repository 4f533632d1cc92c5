# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Construction of the command line options, grouped by purpose.
"""

import argparse
import os
from typing import Any, List

SEQFEAT_VERSION = ""  # needs to be set on module import, avoids cyclic imports

STDOUT = "-"


class FullPathAction(argparse.Action):
    """ An argparse.Action to ensure provided paths are absolute. """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: str = None) -> None:
        setattr(namespace, self.dest, os.path.abspath(str(values)))


class ReadableFullPathAction(FullPathAction):
    """ An argparse.Action to ensure provided paths are absolute and readable files. """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: str = None) -> None:
        path = os.path.abspath(str(values))
        if os.path.isdir(path):
            raise argparse.ArgumentError(self, f"{values!r} is a directory")
        if not os.path.exists(path):
            raise argparse.ArgumentError(self, f"{values!r} does not exist")
        setattr(namespace, self.dest, path)


class OutputPathAction(FullPathAction):
    """ An argparse.Action for output paths, where '-' means standard output """
    def __call__(self, parser: argparse.ArgumentParser, namespace: argparse.Namespace,
                 values: Any, option_string: str = None) -> None:
        if values == STDOUT:
            setattr(namespace, self.dest, STDOUT)
            return
        super().__call__(parser, namespace, values, option_string)


class SeqfeatParser(argparse.ArgumentParser):
    """ Custom argument parser for seqfeat, to include the version in help output """
    def format_help(self) -> str:
        """Custom help formatter"""
        return f"\n########### seqfeat {SEQFEAT_VERSION} #############\n\n{super().format_help()}"


class _SimpleArgs:
    """ Groups command line arguments under a common title in help output.

    To add arguments, use the following:
            _SimpleArgs.add_option('--max-size', ...)

    Arguments:
        title: The label shown on the help screen
    """
    def __init__(self, title: str) -> None:
        if not title:
            raise ValueError("Argument group must have a title")
        self.title = str(title)
        self.parser = argparse.ArgumentParser(add_help=False)
        self.options = self.parser.add_argument_group(title=title)

    def add_option(self, name: str, *args: Any, **kwargs: Any) -> None:
        """ Add a commandline option """
        if not name:
            raise ValueError("Options must have a name")
        option_type = kwargs.get("type")
        default = kwargs.get("default")
        # if it has a type and a single default value, ensure the default is that type
        if option_type is not None and default is not None and "nargs" not in kwargs:
            assert isinstance(default, option_type), f"default for {name} is not {option_type}"
        self.options.add_argument(name, *args, **kwargs)


def input_options() -> _SimpleArgs:
    """ Constructs options for reading input. """
    group = _SimpleArgs("Input options")
    group.add_option('--genbank',
                     dest='genbank',
                     action='store_true',
                     default=False,
                     help="Read and write GenBank records instead of EMBL entries.")
    group.add_option('--strict-ranges',
                     dest='strict_ranges',
                     action='store_true',
                     default=False,
                     help="Skip features with ranges ending before they start, "
                          "instead of swapping the coordinates.")
    return group


def transform_options() -> _SimpleArgs:
    """ Constructs options for transforming sequences and their features. """
    group = _SimpleArgs("Transformation options")
    group.add_option('--subsequence',
                     dest='subsequence',
                     nargs=2,
                     type=int,
                     metavar=("START", "END"),
                     default=None,
                     help="Keep only the given region of each sequence, 1-based and inclusive.")
    group.add_option('--reverse-complement',
                     dest='reverse_complement',
                     action='store_true',
                     default=False,
                     help="Reverse complement each sequence and its features.")
    group.add_option('--translate',
                     dest='translate',
                     action='store_true',
                     default=False,
                     help="Write the translations of CDS features as FASTA instead of sequences.")
    group.add_option('--translation-table',
                     dest='translation_table',
                     type=int,
                     default=None,
                     metavar="TABLE",
                     help="The NCBI translation table to use "
                          "(default: each feature's transl_table, or the standard table).")
    return group


def output_options() -> _SimpleArgs:
    """ Constructs output options. """
    group = _SimpleArgs("Output options")
    group.add_option('-o', '--output',
                     dest='output',
                     action=OutputPathAction,
                     default=STDOUT,
                     metavar="PATH",
                     help="The file to write results to, '-' for standard output (default: %(default)s).")
    return group


def debug_options() -> _SimpleArgs:
    """ Constructs logging and debugging options. """
    group = _SimpleArgs("Debugging & Logging options")
    group.add_option('-v', '--verbose',
                     dest='verbose',
                     action='store_true',
                     default=False,
                     help="Print verbose status information to stderr.")
    group.add_option('-d', '--debug',
                     dest='debug',
                     action='store_true',
                     default=False,
                     help="Print debugging information to stderr.")
    group.add_option('--logfile',
                     dest='logfile',
                     default=None,
                     metavar="PATH",
                     action=FullPathAction,
                     help="Also write logging output to a file.")
    group.add_option('-V', '--version',
                     dest='version',
                     action='store_true',
                     default=False,
                     help="Display the version number and exit.")
    return group


def build_parser(from_config_file: bool = False) -> SeqfeatParser:
    """ Constructs a SeqfeatParser with all options.

        Arguments:
            from_config_file: whether to allow loading from file with args like
                                @file

        Returns:
            a SeqfeatParser instance
    """
    groups: List[_SimpleArgs] = [input_options(), transform_options(), output_options(),
                                 debug_options()]
    parents = [group.parser for group in groups]
    if from_config_file:
        parser = SeqfeatParser(parents=parents, fromfile_prefix_chars="@")
    else:
        parser = SeqfeatParser(parents=parents)

    # positional arguments
    parser.add_argument('input',
                        metavar='SEQUENCE',
                        nargs="?",
                        default=None,
                        action=ReadableFullPathAction,
                        help="EMBL (or GenBank, with --genbank) file to read.")
    return parser
