# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Feature table handling: parsing EMBL style locations and qualifiers into
    ranges and features, and transforming their coordinates to match changes to
    the sequence they annotate.
"""

from .embl import (
    LineBuffer,
    make_feature_block,
    parse_feature_table,
    read_embl,
    write_embl,
)
from .errors import (
    AmbiguousStrandError,
    FeatureAttachmentError,
    FeatureTableError,
    InvalidRangeError,
    LocationSyntaxError,
    QualifierSyntaxError,
)
from .feature import Feature
from .genbank import read_genbank, write_genbank
from .location_parser import LocationParser, format_location, parse_location
from .qualifier_parser import QualifierParser, parse_qualifiers
from .qualifiers import Qualifiers
from .range import Range
from .sequence import Sequence
from .tokeniser import Token, Tokeniser, TokenTypes
from .transforms import (
    reverse_complement_feature,
    reverse_complement_range,
    splice_feature,
    translate_feature,
    trim_feature,
    trim_range,
)
