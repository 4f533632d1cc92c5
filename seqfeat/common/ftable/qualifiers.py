# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" An ordered multimap of qualifier name to values, as used by features.

    Some qualifiers, e.g. /pseudo, have no value at all. These are stored with
    a None marker so that their presence is kept, but the marker is never
    returned as a value.
"""

from collections import OrderedDict
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

QualifierValue = Union[str, int, None]


def _check_name(name: str) -> str:
    if not isinstance(name, str):
        raise TypeError(f"qualifier name must be a string, not {type(name)}")
    name = name.strip()
    if not name:
        raise ValueError("qualifier name cannot be empty")
    return name


class Qualifiers:
    """ Keeps the qualifiers of a single feature, in the order first added """
    __slots__ = ["_qualifiers"]

    def __init__(self, initial: Mapping[str, Optional[Sequence[QualifierValue]]] = None) -> None:
        self._qualifiers: Dict[str, List[Optional[str]]] = OrderedDict()
        if initial:
            for name, values in initial.items():
                if values is None:
                    self.add(name, None)
                else:
                    self.add(name, *values)

    def add(self, name: str, *values: QualifierValue) -> None:
        """ Adds the given values to the qualifier with the given name, creating
            it if required. If no values are given, the qualifier is added as
            a flag.

            Arguments:
                name: the name of the qualifier, e.g. "note"
                values: the values to add, ints will be converted to strings

            Returns:
                None
        """
        name = _check_name(name)
        existing = self._qualifiers.setdefault(name, [])
        if not values:
            values = (None,)
        for value in values:
            if value is not None:
                if isinstance(value, bool) or not isinstance(value, (str, int)):
                    raise TypeError(f"qualifier values must be strings, not {type(value)}")
                value = str(value)
            existing.append(value)

    def values(self, name: str) -> List[str]:
        """ Returns a list of all values of the given qualifier, in order added.
            Flag qualifiers and those not present both result in an empty list.
        """
        return [value for value in self._qualifiers.get(name, []) if value is not None]

    def first(self, name: str, default: str = None) -> Optional[str]:
        """ Returns the first value of the given qualifier, or the default if
            there are no values
        """
        values = self.values(name)
        if not values:
            return default
        return values[0]

    def exists(self, name: str) -> bool:
        """ Returns True if the qualifier is present, with or without values """
        return name in self._qualifiers

    def remove(self, name: str) -> List[str]:
        """ Removes a qualifier entirely, returning any values it had """
        values = self.values(name)
        self._qualifiers.pop(name, None)
        return values

    def names(self) -> List[str]:
        """ Returns the names of all qualifiers present, sorted """
        return sorted(self._qualifiers)

    def items(self) -> Iterator[Tuple[str, List[Optional[str]]]]:
        """ Iterates over names and raw values, including None markers for flags,
            in the order added
        """
        for name, values in self._qualifiers.items():
            yield name, list(values)

    def copy(self) -> "Qualifiers":
        """ Creates a new, independent, copy """
        new = Qualifiers()
        for name, values in self._qualifiers.items():
            new._qualifiers[name] = list(values)
        return new

    def __contains__(self, name: object) -> bool:
        return name in self._qualifiers

    def __len__(self) -> int:
        return len(self._qualifiers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Qualifiers):
            return NotImplemented
        return dict(self._qualifiers) == dict(other._qualifiers)

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return f"Qualifiers({dict(self._qualifiers)})"
