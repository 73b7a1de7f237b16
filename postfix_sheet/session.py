"""
Spreadsheet Session
===================
Owns one cell grid and one dependency graph and drives a full batch
evaluation: submit every cell, then resolve once.

Sessions hold no module-level state, so any number of them can be used side
by side.
"""

import logging
from typing import Iterable, Optional, Sequence, Tuple, Union

from .addressing import Coordinate, decode
from .cells import AddressTable, CellGrid, CellValue
from .dependency_graph import DependencyGraph, contains_letter
from .postfix import evaluate_cell
from .resolver import ResolutionReport, resolve

logger = logging.getLogger(__name__)


class Spreadsheet:
    def __init__(self):
        self.addresses = AddressTable()
        self.grid = CellGrid(self.addresses)
        self.graph = DependencyGraph(self.addresses)

    @property
    def bounds(self) -> Tuple[int, int]:
        """``(max_col, max_row)`` over every submitted cell."""
        return self.grid.bounds

    def submit_cell(self, coord, text: str):
        """Classify one raw cell.

        Text containing a letter is registered as a formula for
        :meth:`resolve_all`; anything else is a postfix expression and is
        evaluated right away, so blank text is an error cell.
        """
        coord = Coordinate(*coord)
        self.grid.extend_bounds(coord)
        if contains_letter(text):
            self.grid.discard(coord)
            self.graph.add_formula(coord, text)
            return
        self.graph.discard_formula(coord)
        self.grid.set(coord, evaluate_cell(text))

    def resolve_all(self) -> ResolutionReport:
        """Resolve every registered formula in dependency order."""
        if logger.isEnabledFor(logging.DEBUG):
            for line in self.graph.describe():
                logger.debug(line)
        report = resolve(self.graph, self.grid)
        logger.info(f"Resolved {report.resolved} formula cells, "
                    f"{report.errors} errors, {report.cyclic} cyclic")
        return report

    def load_rows(self, rows: Iterable[Sequence[str]]) -> ResolutionReport:
        """Submit a row-major block of raw cells and resolve it.

        Row ``r`` column ``c`` of *rows* is cell ``(c, r)``. Empty rows still
        count toward the row bound.
        """
        count = 0
        for row_index, row in enumerate(rows):
            self.grid.extend_bounds((0, row_index))
            for col_index, text in enumerate(row):
                self.submit_cell((col_index, row_index), text)
                count += 1
        logger.info(f"Submitted {count} cells, {len(self.graph)} in dependency graph")
        return self.resolve_all()

    def get(self, where: Union[str, Coordinate, Tuple[int, int]]) -> Optional[CellValue]:
        """Return the value at an address or coordinate, ``None`` if unset."""
        coord = decode(where) if isinstance(where, str) else where
        return self.grid.get(coord)

    def clear(self):
        """Drop all cells, formulas and bounds."""
        self.graph.clear()
        self.grid.clear()
