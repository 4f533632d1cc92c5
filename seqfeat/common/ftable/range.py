# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" A single contiguous region of a sequence, with optional fuzzy boundaries,
    truncation markers and a strand.

    Coordinates are 1-based and inclusive. A coordinate of 0 means that the
    coordinate is not fixed, in which case the fuzzy counterpart must be present.
    Fuzzy coordinates are the outermost possible position of a boundary, so a
    valid range always satisfies:
        fuzzy_start < start <= end < fuzzy_end
    for whichever of those coordinates are present.
"""

import logging
from typing import Any, Dict, Iterable

from .errors import InvalidRangeError

VALID_STRANDS = (-1, 0, 1)


def _coordinate(name: str, value: Any) -> int:
    """ Converts a coordinate argument to an int, with None meaning absent """
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, not {type(value)}")
    return value


def _flag(name: str, value: Any) -> bool:
    if value not in (0, 1):  # covers True and False
        raise ValueError(f"invalid value for {name}: {value!r} (use True or False)")
    return bool(value)


class Range:
    """ A contiguous region of a sequence. Coordinates can't be modified after
        creation, use clone() with the changes required to create a modified copy.
    """
    __slots__ = ["_start", "_end", "_fuzzy_start", "_fuzzy_end", "_strand",
                 "_no_5prime", "_no_3prime", "_no_width"]

    def __init__(self, start: int = 0, end: int = 0, *, fuzzy_start: int = 0,
                 fuzzy_end: int = 0, strand: int = 1, no_5prime: bool = False,
                 no_3prime: bool = False, no_width: bool = False,
                 allow_reversed: bool = True) -> None:
        self._start = _coordinate("start", start)
        self._end = _coordinate("end", end)
        self._fuzzy_start = _coordinate("fuzzy_start", fuzzy_start)
        self._fuzzy_end = _coordinate("fuzzy_end", fuzzy_end)
        self._strand = 0
        self.strand = strand
        self._no_5prime = _flag("no_5prime", no_5prime)
        self._no_3prime = _flag("no_3prime", no_3prime)
        self._no_width = _flag("no_width", no_width)
        self._validate(allow_reversed)

    def _validate(self, allow_reversed: bool) -> None:
        """ Checks the coordinates are consistent, raising an InvalidRangeError
            if not.

            A range with start > end and no fuzzy coordinates has the two swapped
            instead if allow_reversed is set, since a number of tools produce
            such ranges.
        """
        for name in ["start", "end", "fuzzy_start", "fuzzy_end"]:
            if getattr(self, name) < 0:
                raise InvalidRangeError(f"{name} cannot be negative: {getattr(self, name)}")
        if not (self._start or self._fuzzy_start):
            raise InvalidRangeError("range has neither start nor fuzzy start")
        if not (self._end or self._fuzzy_end):
            raise InvalidRangeError("range has neither end nor fuzzy end")

        if self._fuzzy_start and self._start and not self._fuzzy_start < self._start:
            raise InvalidRangeError(f"fuzzy start {self._fuzzy_start} not less than start {self._start}")
        if self._fuzzy_start and self._fuzzy_end and not self._fuzzy_start < self._fuzzy_end:
            raise InvalidRangeError(f"fuzzy start {self._fuzzy_start} not less than fuzzy end {self._fuzzy_end}")
        if self._start and self._end and self._start > self._end:
            if not allow_reversed or self._fuzzy_start or self._fuzzy_end:
                raise InvalidRangeError(f"start {self._start} greater than end {self._end}")
            logging.warning("range has start %d greater than end %d, swapping", self._start, self._end)
            self._start, self._end = self._end, self._start
        if self._end and self._fuzzy_end and not self._end < self._fuzzy_end:
            raise InvalidRangeError(f"end {self._end} not less than fuzzy end {self._fuzzy_end}")
        if self.outer_start > self.outer_end:
            raise InvalidRangeError(f"range start {self.outer_start} beyond range end {self.outer_end}")

    @property
    def start(self) -> int:
        """ The fixed start coordinate, 0 if only a fuzzy start is known """
        return self._start

    @property
    def end(self) -> int:
        """ The fixed end coordinate, 0 if only a fuzzy end is known """
        return self._end

    @property
    def fuzzy_start(self) -> int:
        """ The outermost possible start coordinate, 0 if not fuzzy """
        return self._fuzzy_start

    @property
    def fuzzy_end(self) -> int:
        """ The outermost possible end coordinate, 0 if not fuzzy """
        return self._fuzzy_end

    @property
    def outer_start(self) -> int:
        """ The fuzzy start if present, otherwise the fixed start """
        return self._fuzzy_start or self._start

    @property
    def outer_end(self) -> int:
        """ The fuzzy end if present, otherwise the fixed end """
        return self._fuzzy_end or self._end

    @property
    def inner_start(self) -> int:
        """ The fixed start if present, otherwise the fuzzy start """
        return self._start or self._fuzzy_start

    @property
    def inner_end(self) -> int:
        """ The fixed end if present, otherwise the fuzzy end """
        return self._end or self._fuzzy_end

    @property
    def is_fuzzy(self) -> bool:
        """ Whether either boundary is fuzzy """
        return bool(self._fuzzy_start or self._fuzzy_end)

    @property
    def strand(self) -> int:
        """ The strand of the range, 1, -1 or 0 if ambiguous """
        return self._strand

    @strand.setter
    def strand(self, strand: int) -> None:
        if strand not in VALID_STRANDS or isinstance(strand, bool):
            raise ValueError(f"invalid strand: {strand!r} (use -1, 0 or 1)")
        self._strand = int(strand)

    @property
    def no_5prime(self) -> bool:
        """ Whether the feature continues beyond the 5' end of the range """
        return self._no_5prime

    @no_5prime.setter
    def no_5prime(self, value: bool) -> None:
        self._no_5prime = _flag("no_5prime", value)

    @property
    def no_3prime(self) -> bool:
        """ Whether the feature continues beyond the 3' end of the range """
        return self._no_3prime

    @no_3prime.setter
    def no_3prime(self, value: bool) -> None:
        self._no_3prime = _flag("no_3prime", value)

    @property
    def no_width(self) -> bool:
        """ Whether the range is a site between two bases """
        return self._no_width

    @no_width.setter
    def no_width(self, value: bool) -> None:
        self._no_width = _flag("no_width", value)

    def overlaps(self, other: "Range") -> bool:
        """ Returns True if the given range shares any position with this range.
            Fuzzy coordinates are used where present.

            This operation is commutative, a.overlaps(b) is equivalent to
            b.overlaps(a).
        """
        if not isinstance(other, Range):
            raise TypeError(f"can only compare with another Range, not {type(other)}")
        s_start, s_end = self.outer_start, self.outer_end
        r_start, r_end = other.outer_start, other.outer_end
        # other spans this range's start or end
        if r_start <= s_start <= r_end or r_start <= s_end <= r_end:
            return True
        # other lies entirely within this range
        if r_start >= s_start and r_end <= s_end:
            return True
        # other entirely contains this range
        return r_start <= s_start and r_end >= s_end

    def contains(self, other: "Range") -> bool:
        """ Returns True if the given range lies entirely within this range.
            Fuzzy coordinates are used where present.
        """
        if not isinstance(other, Range):
            raise TypeError(f"can only compare with another Range, not {type(other)}")
        return self.outer_start <= other.outer_start and other.outer_end <= self.outer_end

    def to_kwargs(self) -> Dict[str, Any]:
        """ Returns the constructor arguments required to recreate the range """
        return {
            "start": self._start,
            "end": self._end,
            "fuzzy_start": self._fuzzy_start,
            "fuzzy_end": self._fuzzy_end,
            "strand": self._strand,
            "no_5prime": self._no_5prime,
            "no_3prime": self._no_3prime,
            "no_width": self._no_width,
        }

    def clone(self, **changes: Any) -> "Range":
        """ Creates a new, independent, range with the same values as this one,
            except for any provided as keyword arguments. The new range is
            validated as any other.
        """
        kwargs = self.to_kwargs()
        unknown = set(changes).difference(kwargs).difference({"allow_reversed"})
        if unknown:
            raise TypeError(f"unknown range attributes: {sorted(unknown)}")
        kwargs.update(changes)
        return Range(**kwargs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Range):
            return NotImplemented
        return self.to_kwargs() == other.to_kwargs()

    __hash__ = None  # type: ignore  # mutable strand and flags

    def __lt__(self, other: "Range") -> bool:
        """ Allows sorting Ranges by position """
        if not isinstance(other, Range):
            return NotImplemented
        return (self.outer_start, self.outer_end) < (other.outer_start, other.outer_end)

    def __repr__(self) -> str:
        parts = [f"start={self._start}", f"end={self._end}"]
        for name in ["fuzzy_start", "fuzzy_end"]:
            if getattr(self, name):
                parts.append(f"{name}={getattr(self, name)}")
        parts.append(f"strand={self._strand}")
        for name in ["no_5prime", "no_3prime", "no_width"]:
            if getattr(self, name):
                parts.append(f"{name}=True")
        return f"Range({', '.join(parts)})"


def count_overlapping(target: Range, ranges: Iterable[Range]) -> int:
    """ Counts how many of the given ranges overlap with the target range """
    return sum(1 for other in ranges if target.overlaps(other))


def count_contained(target: Range, ranges: Iterable[Range]) -> int:
    """ Counts how many of the given ranges are contained by the target range """
    return sum(1 for other in ranges if target.contains(other))
