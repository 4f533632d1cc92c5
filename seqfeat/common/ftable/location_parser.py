# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Converts EMBL/GenBank feature table location strings to and from Ranges.

    The grammar handled:
        LOCATION = COMPONENT {',' COMPONENT}*
                   | 'join(' LOCATION ')'
                   | 'order(' LOCATION ')'
                   | 'complement(' LOCATION ')'
        COMPONENT = POS | POS '..' POS | POS '^' POS | POS '.' POS
        POS = MARKERS INT | INT '>' | MARKERS '(' INT '.' INT ')'
        MARKERS = {'<' | '>'}*

    Examples:
        123..456
        complement(<1..80)
        join(1..38,complement(1200..1349))
        (1260.1265)..1349
        1800..(1815.1820)
        <(1.50)
        20^21

    Remote locations (e.g. 'J00194.1:100..202') and other free text are not
    supported and are reported as a LocationSyntaxError.
"""

import logging
import re
from typing import Iterable, List, Sequence, Tuple

from .errors import InvalidRangeError, LocationSyntaxError
from .range import Range
from .tokeniser import Token, Tokeniser, TokenTypes

_COMPOUND_PATTERN = re.compile(r"^(\d+)\.(\d+)$")


class LocationParser:
    """ Builds Ranges from a single location string at a time.

        Each 'join(', 'order(' or 'complement(' opens a frame, remembering how
        many ranges had been built at that point. When a complement frame closes,
        every range built since it opened is set to the reverse strand, so
        'complement(join(1..5,8..10))' marks both ranges.
    """
    def __init__(self, tokeniser: Tokeniser = None, allow_reversed: bool = True) -> None:
        self.tokeniser = tokeniser or Tokeniser()
        self.allow_reversed = allow_reversed

    def parse(self, location: str) -> List[Range]:
        """ Parses a location string into a list of Ranges, in the order they
            appear in the location.

            Arguments:
                location: the location string, already joined if it spanned
                          multiple lines

            Returns:
                a list of Range instances, never empty
        """
        ranges: List[Range] = []
        parts: List[Token] = []
        frames: List[Tuple[TokenTypes, int]] = []

        def flush() -> None:
            if parts:
                ranges.append(self._build(location, parts))
                parts.clear()

        for token in self.tokeniser.tokenise(location.strip()):
            if token.type in (TokenTypes.JOIN, TokenTypes.COMPLEMENT):
                if parts:
                    raise LocationSyntaxError(f"unexpected {token.text!r} in location: {location}")
                frames.append((token.type, len(ranges)))
            elif token.type.is_position_part():
                parts.append(token)
            elif token.type == TokenTypes.COMMA:
                flush()
            elif token.type == TokenTypes.RIGHTP:
                if not frames:
                    raise LocationSyntaxError(f"unbalanced parentheses in location: {location}")
                instruction, opened_at = frames.pop()
                flush()
                if instruction == TokenTypes.COMPLEMENT:
                    for part in ranges[opened_at:]:
                        _complement(part)
            elif token.type == TokenTypes.NEWLINE:
                continue
            elif token.type in (TokenTypes.TEXT, TokenTypes.COLON):
                raise LocationSyntaxError(f"location type not supported: {location}")
            else:
                raise LocationSyntaxError(f"error parsing location {location!r} at: {token.text!r}")

        if frames:
            raise LocationSyntaxError(f"unbalanced parentheses in location: {location}")
        flush()
        if not ranges:
            raise LocationSyntaxError(f"no ranges found in location: {location!r}")
        return ranges

    def _build(self, location: str, parts: Sequence[Token]) -> Range:
        """ Builds a single range from its position and separator tokens """
        types = [part.type for part in parts]
        valid = (
            len(parts) == 1 and types[0] != TokenTypes.SEPARATOR
            or len(parts) == 3 and types[1] == TokenTypes.SEPARATOR
            and TokenTypes.SEPARATOR not in (types[0], types[2])
        )
        if not valid:
            text = "".join(part.text for part in parts)
            raise LocationSyntaxError(f"malformed range {text!r} in location: {location}")
        start = parts[0].text
        separator = parts[1].text if len(parts) == 3 else ""
        end = parts[2].text if len(parts) == 3 else None
        try:
            return build_range(start, separator, end, allow_reversed=self.allow_reversed)
        except InvalidRangeError as err:
            raise LocationSyntaxError(f"invalid range in location {location!r}: {err}") from err


def _complement(part: Range) -> None:
    """ Moves a range to the reverse strand. Since the truncation markers were
        read assuming the forward strand, they are exchanged as well.
    """
    if part.strand == -1:
        return
    part.strand = -1
    part.no_5prime, part.no_3prime = part.no_3prime, part.no_5prime


def _split_compound(text: str) -> Tuple[int, int]:
    match = _COMPOUND_PATTERN.match(text)
    assert match, text
    return int(match.group(1)), int(match.group(2))


def build_range(start: str, separator: str = "", end: str = None, *,
                allow_reversed: bool = True) -> Range:
    """ Builds a Range from the text of its components.

        Arguments:
            start: the text of the first position, e.g. '<1' or '(1.5)'
            separator: the separator text, one of '..', '^', '.', or empty
                       for a single base
            end: the text of the second position, if any
            allow_reversed: whether to swap start and end if reversed

        Returns:
            a new Range on the forward strand
    """
    single = end is None
    if end is None:
        end = start
    start = start.replace("(", "").replace(")", "")
    end = end.replace("(", "").replace(")", "")

    no_5prime = "<" in start
    no_3prime = ">" in end
    # a single base copies markers into both positions, so strip both kinds
    start = start.replace("<", "").replace(">", "")
    end = end.replace("<", "").replace(">", "")

    separator = separator.replace(" ", "")
    no_width = separator == "^"

    coords = {"start": 0, "end": 0, "fuzzy_start": 0, "fuzzy_end": 0}
    try:
        if separator == ".":
            coords["fuzzy_start"], coords["fuzzy_end"] = int(start), int(end)
        elif single and _COMPOUND_PATTERN.match(start):
            # a single base somewhere within the two positions
            coords["fuzzy_start"], coords["fuzzy_end"] = _split_compound(start)
        else:
            if _COMPOUND_PATTERN.match(start):
                coords["fuzzy_start"], coords["start"] = _split_compound(start)
            else:
                coords["start"] = int(start)
            if _COMPOUND_PATTERN.match(end):
                coords["end"], coords["fuzzy_end"] = _split_compound(end)
            else:
                coords["end"] = int(end)
    except ValueError as err:
        raise LocationSyntaxError(f"invalid position in range: {start}{separator}{end}") from err

    new = Range(strand=1, allow_reversed=allow_reversed, **coords)
    new.no_5prime = no_5prime
    new.no_3prime = no_3prime
    new.no_width = no_width
    return new


def parse_location(location: str, allow_reversed: bool = True) -> List[Range]:
    """ Parses a location string into a list of Ranges. A convenience wrapper
        around LocationParser.

        Arguments:
            location: the location string to parse
            allow_reversed: whether ranges with start > end are swapped rather
                            than rejected

        Returns:
            a list of Ranges, in the order found in the location
    """
    return LocationParser(allow_reversed=allow_reversed).parse(location)


def _format_start(part: Range) -> str:
    if part.fuzzy_start and part.start:
        return f"({part.fuzzy_start}.{part.start})"
    return str(part.inner_start)


def _format_end(part: Range) -> str:
    if part.fuzzy_end and part.end:
        return f"({part.end}.{part.fuzzy_end})"
    return str(part.inner_end)


def format_range(part: Range) -> str:
    """ Converts a single range to its location string, without any strand
        information.
    """
    start_marker = ""
    end_marker = ""
    if part.no_5prime:
        if part.strand == -1:
            end_marker = ">"
        else:
            start_marker = "<"
    if part.no_3prime:
        if part.strand == -1:
            start_marker = "<"
        else:
            end_marker = ">"

    if not (part.start or part.end):
        return f"{start_marker}{end_marker}({part.fuzzy_start}.{part.fuzzy_end})"
    if not (part.start and part.end):
        logging.warning("location syntax has no form for a range with only one fixed bound,"
                        " writing the fuzzy bound of %r as fixed", part)

    start = _format_start(part)
    end = _format_end(part)
    if start == end and not part.no_width:
        return f"{start_marker}{end_marker}{start}"
    separator = "^" if part.no_width else ".."
    return f"{start_marker}{start}{separator}{end_marker}{end}"


def format_location(ranges: Iterable[Range]) -> str:
    """ Converts one or more ranges into a location string.

        Locations entirely on the reverse strand are wrapped in a single
        'complement(...)', while mixed strand locations mark each reverse strand
        range individually.
    """
    ranges = list(ranges)
    if not ranges:
        raise ValueError("cannot format a location without ranges")
    strands = set(part.strand for part in ranges)
    if strands == {-1}:
        components = [format_range(part) for part in ranges]
    else:
        components = [f"complement({format_range(part)})" if part.strand == -1 else format_range(part)
                      for part in ranges]

    location = ",".join(components)
    if len(components) > 1:
        location = f"join({location})"
    if strands == {-1}:
        location = f"complement({location})"
    return location
