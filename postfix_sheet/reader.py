"""
Grid Reader Module
==================
Loads raw cell text from a delimited text file or an ``.xlsx`` worksheet.
Each returned row is a list of strings; the session decides what each
string means.
"""

import csv
import logging
import os
from typing import List, Optional

from openpyxl import load_workbook

logger = logging.getLogger(__name__)

WORKBOOK_EXTENSIONS = (".xlsx", ".xlsm")


def read_delimited(path: str, delimiter: str = ",") -> List[List[str]]:
    """Read *path* as delimited text, one list of cell strings per line.

    A single trailing delimiter ends the line without adding a cell, so
    ``1,2,`` is two cells.
    """
    with open(path, "r", newline="") as f:
        rows = list(csv.reader(f, delimiter=delimiter))
    for row in rows:
        if row and row[-1] == "":
            row.pop()
    logger.info(f"Read {len(rows)} rows from {path}")
    return rows


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def read_workbook(path: str, sheet: Optional[str] = None) -> List[List[str]]:
    """Read the cells of one worksheet as strings.

    Worksheet row 1 / column A becomes cell ``A0``. Trailing blank cells of
    each row are dropped.
    """
    wb = load_workbook(path, data_only=False)
    try:
        ws = wb[sheet] if sheet else wb.active
        rows = []
        for values in ws.iter_rows(values_only=True):
            texts = [_cell_text(v) for v in values]
            while texts and texts[-1] == "":
                texts.pop()
            rows.append(texts)
    finally:
        wb.close()
    logger.info(f"Read {len(rows)} rows from {path} (sheet {sheet or 'active'})")
    return rows


def read_grid(path: str, delimiter: str = ",", sheet: Optional[str] = None) -> List[List[str]]:
    """Dispatch on file extension: workbooks via openpyxl, everything else as text."""
    ext = os.path.splitext(path)[1].lower()
    if ext in WORKBOOK_EXTENSIONS:
        return read_workbook(path, sheet)
    return read_delimited(path, delimiter)
