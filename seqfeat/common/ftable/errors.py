# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Contains Exception subclasses for more specific communication of issues
    with feature table content.
"""


class FeatureTableError(ValueError):
    """ An error for when feature table input is invalid or contains unsupported
        content. Each is recoverable at the level of a single feature.
    """
    pass


class LocationSyntaxError(FeatureTableError):
    """ A location string could not be parsed, e.g. unbalanced parentheses or
        unrecognised symbols.
    """
    pass


class InvalidRangeError(FeatureTableError):
    """ A range was constructed with coordinates that break its invariants """
    pass


class AmbiguousStrandError(FeatureTableError):
    """ An operation requiring a defined strand was given something on strand 0 """
    pass


class FeatureAttachmentError(FeatureTableError):
    """ A feature could not be attached to a sequence """
    pass


class QualifierSyntaxError(FeatureTableError):
    """ A qualifier block could not be parsed """
    pass
