# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Splits feature table text into tokens for the location and qualifier parsers.

    A Tokeniser is built from an ordered list of (TokenTypes, regex) rules. At each
    position in the text, the rules are tried in the order given and the first
    to match wins, so specific rules must come before general ones, e.g.:
        FUZZY '(\\d+.\\d+)' must be tried before POSITION '\\d+'
        SEPARATOR '..' must be tried before the single '.' form

    The final rule of FEATURE_TABLE_RULES matches any single character, so that
    unrecognised input is always returned as an OTHER token instead of being
    skipped or stalling the tokeniser.
"""

from enum import IntEnum
import re
from typing import Iterator, List, Optional, Pattern, Sequence, Tuple


class TokenTypes(IntEnum):
    """ Distinct values for each category of token found in feature tables """
    DQUOTE = 1
    COLON = 2
    FUZZY = 3
    JOIN = 4
    COMPLEMENT = 5
    POSITION = 6
    SEPARATOR = 7
    LEFTP = 8
    RIGHTP = 9
    COMMA = 10
    SLASH = 11
    EQUALS = 12
    TEXT = 13
    NEWLINE = 14
    OTHER = 15

    def __repr__(self) -> str:
        return self.__str__()

    def __str__(self) -> str:
        return str(self.name).lower()  # the str() is for pylint's sake

    def is_position_part(self) -> bool:
        """ Returns True if the token type can be part of a single range """
        return self in (TokenTypes.POSITION, TokenTypes.FUZZY, TokenTypes.SEPARATOR)


FEATURE_TABLE_RULES: List[Tuple[TokenTypes, str]] = [
    (TokenTypes.DQUOTE, r'"(?:[^"]|"")*"'),
    (TokenTypes.COLON, r':'),
    (TokenTypes.FUZZY, r'[<>]*\(\d+\.\d+\)|\d+\.\d+'),
    (TokenTypes.JOIN, r'join\(|order\('),
    (TokenTypes.COMPLEMENT, r'complement\('),
    (TokenTypes.POSITION, r'[<>]*\d+>?'),
    (TokenTypes.SEPARATOR, r'\.\s?\.|\^|\.'),
    (TokenTypes.LEFTP, r'\('),
    (TokenTypes.RIGHTP, r'\)'),
    (TokenTypes.COMMA, r','),
    (TokenTypes.SLASH, r'/'),
    (TokenTypes.EQUALS, r'='),
    (TokenTypes.TEXT, r"[A-Za-z_\-+.*:;'\"\[\] ]+"),
    (TokenTypes.NEWLINE, r'\n'),
    (TokenTypes.OTHER, r'.'),
]


class Token:
    """ An immutable pairing of a token category and the text it matched """
    __slots__ = ["_type", "_text"]

    def __init__(self, token_type: TokenTypes, text: str) -> None:
        if not isinstance(token_type, TokenTypes):
            raise TypeError(f"token type must be a TokenTypes member, not {type(token_type)}")
        self._type = token_type
        self._text = str(text)

    @property
    def type(self) -> TokenTypes:
        """ The category of the token """
        return self._type

    @property
    def text(self) -> str:
        """ The exact text matched """
        return self._text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self._type == other.type and self._text == other.text

    def __hash__(self) -> int:
        return hash((self._type, self._text))

    def __repr__(self) -> str:
        return f"Token({self._type}, {self._text!r})"


class Tokeniser:
    """ Produces Tokens from a block of text, on demand, using an ordered set of
        rules.
    """
    def __init__(self, rules: Sequence[Tuple[TokenTypes, str]] = None) -> None:
        if rules is None:
            rules = FEATURE_TABLE_RULES
        if not rules:
            raise ValueError("at least one tokenising rule is required")
        self._rules: List[Tuple[TokenTypes, Pattern]] = [
            (token_type, re.compile(regex, re.DOTALL)) for token_type, regex in rules
        ]
        self._text = ""
        self._position = 0

    @property
    def position(self) -> int:
        """ The index in the current text that the next token will begin at """
        return self._position

    def tokenise(self, text: str) -> "Tokeniser":
        """ Sets the text to be tokenised and resets the scanning position.

            Arguments:
                text: the text to tokenise

            Returns:
                the tokeniser itself, for chaining with iteration
        """
        if not isinstance(text, str):
            raise TypeError(f"text to tokenise must be a string, not {type(text)}")
        self._text = text
        self._position = 0
        return self

    def next_token(self) -> Optional[Token]:
        """ Finds the next token in the text, advancing the scan position.

            Returns:
                the next Token, or None if the end of the text has been reached
        """
        if self._position >= len(self._text):
            return None
        for token_type, pattern in self._rules:
            match = pattern.match(self._text, self._position)
            # a zero-length match would never advance
            if not match or match.end() == self._position:
                continue
            self._position = match.end()
            return Token(token_type, match.group(0))
        # only reachable if the rules lack a catch-all
        raise ValueError(f"no tokenising rule matches text at position {self._position}: "
                         f"{self._text[self._position:]!r}")

    def __iter__(self) -> Iterator[Token]:
        token = self.next_token()
        while token is not None:
            yield token
            token = self.next_token()


def tokenise(text: str, rules: Sequence[Tuple[TokenTypes, str]] = None) -> List[Token]:
    """ A convenience function returning all tokens in the given text at once """
    return list(Tokeniser(rules).tokenise(text))
