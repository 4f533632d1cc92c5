# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" seqfeat: parsing, representing and transforming the features of annotated
    sequences, as found in EMBL and GenBank feature tables.

    The expected entry point as a library is seqfeat.common.ftable, or
    run_seqfeat() for the complete command line pipeline.
"""

from seqfeat.main import run_seqfeat, __version__
