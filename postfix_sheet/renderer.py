"""
Output Rendering Module
=======================
Turns a resolved :class:`~postfix_sheet.session.Spreadsheet` into a
tab-separated text table, a ``pandas.DataFrame``, a CSV file or an
``.xlsx`` workbook.

Unset and empty cells render blank; error cells render as the error token.
"""

import logging
import os

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from .addressing import column_letters
from .cells import DEFAULT_ERROR_TOKEN

logger = logging.getLogger(__name__)

# Styling constants
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF", size=11)
ERROR_FILL = PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid")
ERROR_FONT = Font(color="9C0006", size=10, bold=True)
VALUE_FONT = Font(color="000000", size=10)


def _cell_output(session, col, row, error_token):
    value = session.get((col, row))
    if value is None:
        return None
    if value.is_integer:
        return value.value
    if value.is_error:
        return error_token
    return None


def render_text(session, error_token: str = DEFAULT_ERROR_TOKEN) -> str:
    """Tab-separated table with a column-letter header and row numbers."""
    max_col, max_row = session.bounds
    lines = ["\t".join([""] + [column_letters(c) for c in range(max_col + 1)])]
    for row in range(max_row + 1):
        cells = []
        for col in range(max_col + 1):
            value = session.get((col, row))
            cells.append(value.render(error_token) if value is not None else "")
        lines.append("\t".join([str(row)] + cells))
    return "\n".join(lines) + "\n"


def to_dataframe(session, error_token: str = DEFAULT_ERROR_TOKEN) -> pd.DataFrame:
    """Grid as a DataFrame: index is the row number, columns are letters."""
    max_col, max_row = session.bounds
    columns = [column_letters(c) for c in range(max_col + 1)]
    data = [[_cell_output(session, c, r, error_token) for c in range(max_col + 1)]
            for r in range(max_row + 1)]
    return pd.DataFrame(data, index=range(max_row + 1), columns=columns, dtype=object)


def write_csv(session, output_path: str, delimiter: str = ",",
              error_token: str = DEFAULT_ERROR_TOKEN) -> str:
    """Write resolved values back in the same shape as the input grid."""
    df = to_dataframe(session, error_token)
    df.to_csv(output_path, sep=delimiter, header=False, index=False)
    logger.info(f"Wrote {len(df)} rows to {output_path}")
    return output_path


def write_workbook(session, output_path: str,
                   error_token: str = DEFAULT_ERROR_TOKEN) -> str:
    """Write resolved values to an ``.xlsx`` file with a styled header."""
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)

    max_col, max_row = session.bounds
    wb = Workbook()
    ws = wb.active
    ws.title = "Results"

    ws.cell(row=1, column=1, value="")
    for col in range(max_col + 1):
        cell = ws.cell(row=1, column=col + 2, value=column_letters(col))
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal="center")

    error_count = 0
    for row in range(max_row + 1):
        index_cell = ws.cell(row=row + 2, column=1, value=row)
        index_cell.fill = HEADER_FILL
        index_cell.font = HEADER_FONT
        for col in range(max_col + 1):
            value = session.get((col, row))
            if value is None or value.is_empty:
                continue
            out_cell = ws.cell(row=row + 2, column=col + 2)
            if value.is_error:
                out_cell.value = error_token
                out_cell.fill = ERROR_FILL
                out_cell.font = ERROR_FONT
                error_count += 1
            else:
                out_cell.value = value.value
                out_cell.font = VALUE_FONT

    ws.freeze_panes = "B2"
    wb.save(output_path)
    logger.info(f"Wrote results workbook: {output_path} ({error_count} error cells)")
    return output_path
