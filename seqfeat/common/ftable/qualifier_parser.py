# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Parses the qualifier block of a single feature, e.g.
        /gene="dnaA" /note="a ""quoted"" word" /pseudo /codon_start=2

    Continuation lines must already have been joined with a single space.
"""

from typing import List, Optional, Tuple

from .errors import QualifierSyntaxError
from .qualifiers import Qualifiers
from .tokeniser import Tokeniser, TokenTypes

# qualifiers whose values are written without quotes, and so have any quotes
# kept as part of the value when read
UNQUOTED_QUALIFIERS = frozenset([
    "anticodon",
    "citation",
    "codon",
    "codon_start",
    "compare",
    "cons_splice",
    "direction",
    "estimated_length",
    "evidence",
    "label",
    "mod_base",
    "number",
    "organelle",
    "rearranged",
    "rpt_type",
    "rpt_unit",
    "transl_except",
    "transl_table",
    "usedin",
])


class QualifierParser:
    """ Builds a Qualifiers instance from a block of qualifier text """
    def __init__(self, tokeniser: Tokeniser = None) -> None:
        self.tokeniser = tokeniser or Tokeniser()
        self._name: Optional[str] = None
        self._value: List[Tuple[str, bool]] = []
        self._has_value = False

    def parse(self, text: str) -> Qualifiers:
        """ Parses the given qualifier block.

            Arguments:
                text: the qualifier block, with each qualifier starting with '/'

            Returns:
                a Qualifiers instance, empty if the block was empty
        """
        qualifiers = Qualifiers()
        self._reset(None)
        for token in self.tokeniser.tokenise(text):
            if token.type == TokenTypes.SLASH:
                self._flush(qualifiers)
                self._reset("")
            elif self._name is None:
                if token.text.strip():
                    raise QualifierSyntaxError(f"qualifier block does not start with '/': {text!r}")
            elif token.type == TokenTypes.EQUALS and not self._has_value:
                self._has_value = True
            elif not self._has_value:
                self._name += token.text
            elif token.type == TokenTypes.DQUOTE and self._name.strip() not in UNQUOTED_QUALIFIERS:
                self._value.append((token.text[1:-1].replace('""', '"'), True))
            else:
                self._value.append((token.text, False))
        self._flush(qualifiers)
        return qualifiers

    def _reset(self, name: Optional[str]) -> None:
        self._name = name
        self._value = []
        self._has_value = False

    def _flush(self, qualifiers: Qualifiers) -> None:
        """ Adds the current qualifier, if any, to the given Qualifiers """
        if self._name is None:
            return
        name = self._name.strip()
        if not name:
            raise QualifierSyntaxError("qualifier with no name")
        if not self._has_value:
            qualifiers.add(name)
            return
        # trailing whitespace outside of quotes is the gap before the next qualifier
        while self._value and not self._value[-1][1] and not self._value[-1][0].strip():
            self._value.pop()
        if self._value and not self._value[-1][1]:
            self._value[-1] = (self._value[-1][0].rstrip(), False)
        qualifiers.add(name, "".join(part for part, _ in self._value))


def parse_qualifiers(text: str) -> Qualifiers:
    """ Parses a qualifier block into a Qualifiers instance """
    return QualifierParser().parse(text)
