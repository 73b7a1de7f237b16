"""
Address Codec
=============
Converts between textual cell addresses (``A0``, ``AB12``) and numeric
``(col, row)`` coordinates.

Columns use bijective base-26 numbering: ``A=0 ... Z=25, AA=26, AB=27``.
Rows are plain base-10 numbers starting at zero.
"""

import re
from typing import NamedTuple

from .errors import MalformedAddress

_ADDRESS_REGEX = re.compile(r'^([A-Za-z]+)([0-9]+)$')


class Coordinate(NamedTuple):
    col: int
    row: int


def is_address(token: str) -> bool:
    """Return True if *token* matches the ``letters+digits`` grammar."""
    return bool(_ADDRESS_REGEX.match(token))


def column_letters(index: int) -> str:
    """Convert a 0-based column index to letter(s). 0=A, 25=Z, 26=AA."""
    if index < 0:
        raise ValueError(f"Column index must be non-negative, got {index}")
    result = ""
    while index >= 0:
        result = chr(65 + index % 26) + result
        index = index // 26 - 1
    return result


def column_index(letters: str) -> int:
    """Convert column letter(s) to a 0-based index. A=0, Z=25, AA=26."""
    result = 0
    for char in letters.upper():
        result = result * 26 + (ord(char) - ord('A') + 1)
    return result - 1


def decode(address: str) -> Coordinate:
    """Parse *address* into a :class:`Coordinate`.

    Lowercase column letters are accepted and folded to uppercase.

    Raises:
        MalformedAddress: if *address* is not ``letters`` followed by ``digits``.
    """
    match = _ADDRESS_REGEX.match(address)
    if not match:
        raise MalformedAddress(f"Not a cell address: {address!r}")
    letters, digits = match.groups()
    return Coordinate(column_index(letters), int(digits))


def encode(coord) -> str:
    """Format a ``(col, row)`` pair as an address string."""
    col, row = coord
    if row < 0:
        raise ValueError(f"Row index must be non-negative, got {row}")
    return f"{column_letters(col)}{row}"
