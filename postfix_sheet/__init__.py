"""postfix-sheet: batch evaluator for grids of postfix cell formulas.

Cells hold an integer, a postfix expression (``"3 4 +"``) or a postfix
formula referencing other cells (``"A0 B1 *"``). A :class:`Spreadsheet`
session orders the formulas by their dependencies, marks every cell on or
behind a reference cycle as an error, and resolves the rest in one pass.
"""

from .addressing import Coordinate, decode, encode, is_address
from .cells import CellGrid, CellState, CellValue
from .dependency_graph import DependencyGraph, contains_letter
from .errors import (
    BadExpression,
    CyclicReference,
    DivisionByZero,
    ErrorKind,
    MalformedAddress,
    SheetError,
    UndefinedReference,
)
from .postfix import evaluate, tokenize
from .resolver import ResolutionReport, resolve
from .session import Spreadsheet

__all__ = [
    "Coordinate",
    "decode",
    "encode",
    "is_address",
    "CellGrid",
    "CellState",
    "CellValue",
    "DependencyGraph",
    "contains_letter",
    "ErrorKind",
    "SheetError",
    "MalformedAddress",
    "CyclicReference",
    "UndefinedReference",
    "BadExpression",
    "DivisionByZero",
    "evaluate",
    "tokenize",
    "ResolutionReport",
    "resolve",
    "Spreadsheet",
]
