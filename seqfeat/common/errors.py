# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Contains various error classes for use throughout seqfeat """


class SeqfeatError(Exception):
    """ A general catch-all for errors within seqfeat """
    pass


class SeqfeatInputError(SeqfeatError):
    """ An error for when input to seqfeat as a whole is invalid or contains
        unsupported content.

        Not intended to replace TypeError/ValueError in functions not directly
        parsing or converting input files.
    """
    pass
