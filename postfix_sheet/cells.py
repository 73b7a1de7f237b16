"""
Cell Grid
=========
Sparse storage for resolved cell values.

Every coordinate that takes part in an evaluation is interned once into a
dense integer id by :class:`AddressTable`. The grid and the dependency graph
both index by that id, so a reference is parsed a single time and every
later lookup is a dict hit.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from .addressing import Coordinate, encode
from .errors import ErrorKind

logger = logging.getLogger(__name__)

DEFAULT_ERROR_TOKEN = "#ERR"


class CellState(Enum):
    INTEGER = "integer"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class CellValue:
    """A resolved cell: ``Integer(v)``, ``Empty`` or ``Error``.

    ``error_kind`` is diagnostic only and does not take part in equality:
    two error cells are equal whatever made them fail.
    """
    state: CellState
    value: Optional[int] = None
    error_kind: Optional[ErrorKind] = field(default=None, compare=False)

    @classmethod
    def integer(cls, value: int) -> "CellValue":
        return cls(CellState.INTEGER, value)

    @classmethod
    def empty(cls) -> "CellValue":
        return cls(CellState.EMPTY)

    @classmethod
    def error(cls, kind: Optional[ErrorKind] = None) -> "CellValue":
        return cls(CellState.ERROR, error_kind=kind)

    @property
    def is_integer(self) -> bool:
        return self.state is CellState.INTEGER

    @property
    def is_empty(self) -> bool:
        return self.state is CellState.EMPTY

    @property
    def is_error(self) -> bool:
        return self.state is CellState.ERROR

    def render(self, error_token: str = DEFAULT_ERROR_TOKEN) -> str:
        if self.is_integer:
            return str(self.value)
        if self.is_error:
            return error_token
        return ""


class AddressTable:
    """Interns coordinates into dense ids (0, 1, 2, ...)."""

    def __init__(self):
        self._ids: Dict[Coordinate, int] = {}
        self._coords: List[Coordinate] = []

    def intern(self, coord) -> int:
        coord = Coordinate(*coord)
        node_id = self._ids.get(coord)
        if node_id is None:
            node_id = len(self._coords)
            self._ids[coord] = node_id
            self._coords.append(coord)
        return node_id

    def lookup(self, coord) -> Optional[int]:
        return self._ids.get(Coordinate(*coord))

    def coordinate(self, node_id: int) -> Coordinate:
        return self._coords[node_id]

    def address(self, node_id: int) -> str:
        return encode(self._coords[node_id])

    def __len__(self):
        return len(self._coords)

    def clear(self):
        self._ids.clear()
        self._coords.clear()


class CellGrid:
    """Sparse 2-D store of :class:`CellValue` plus the observed bounds.

    A coordinate that was never written is *unset* and :meth:`get` returns
    ``None`` for it; that is distinct from an explicit ``Empty`` value.
    """

    def __init__(self, addresses: Optional[AddressTable] = None):
        self.addresses = addresses if addresses is not None else AddressTable()
        self._values: Dict[int, CellValue] = {}
        self.max_col = 0
        self.max_row = 0

    def extend_bounds(self, coord):
        col, row = coord
        self.max_col = max(self.max_col, col)
        self.max_row = max(self.max_row, row)

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.max_col, self.max_row

    def set(self, coord, value: CellValue):
        self.set_id(self.addresses.intern(coord), value)

    def set_id(self, node_id: int, value: CellValue):
        self._values[node_id] = value

    def get(self, coord) -> Optional[CellValue]:
        node_id = self.addresses.lookup(coord)
        if node_id is None:
            return None
        return self._values.get(node_id)

    def get_id(self, node_id: int) -> Optional[CellValue]:
        return self._values.get(node_id)

    def discard(self, coord):
        node_id = self.addresses.lookup(coord)
        if node_id is not None:
            self._values.pop(node_id, None)

    def __len__(self):
        return len(self._values)

    def items(self) -> Iterator[Tuple[Coordinate, CellValue]]:
        """Yield ``(coordinate, value)`` pairs in row-major order."""
        pairs = [(self.addresses.coordinate(i), v) for i, v in self._values.items()]
        for coord, value in sorted(pairs, key=lambda p: (p[0].row, p[0].col)):
            yield coord, value

    def snapshot(self) -> Dict[str, CellValue]:
        """Return ``{address: value}`` for every set cell."""
        return {encode(coord): value for coord, value in self.items()}

    def clear(self):
        self._values.clear()
        self.addresses.clear()
        self.max_col = 0
        self.max_row = 0
