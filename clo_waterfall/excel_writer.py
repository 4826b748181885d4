from __future__ import annotations

from decimal import Decimal
from typing import Dict, Optional

import pandas as pd
from openpyxl import load_workbook, Workbook
from openpyxl.styles import Font, Alignment
from openpyxl.utils import get_column_letter


REPORT_SHEETS = [
    "Period Summary",
    "Tranche Cashflows",
    "Tranche Totals",
    "Equity Cash Flows",
    "Scenario Losses",
    "Expected Loss",
]

_PLAIN_COLUMNS = ("Period", "Tranche", "Rating", "Scenario")
_PCT_COLUMNS = ("Probability", "Loss %", "Attachment", "Detachment")


def _cell_value(val):
    # openpyxl cannot write numpy scalars
    if hasattr(val, "item") and not isinstance(val, Decimal):
        return val.item()
    return val


def _number_format(col_name: str) -> Optional[str]:
    if col_name in _PLAIN_COLUMNS:
        return None
    return "0.00%" if col_name in _PCT_COLUMNS else "#,##0.00"


def _write_table(ws, df: pd.DataFrame) -> None:
    """Header row in bold, one row per record, columns sized to their longest value (capped at 60)."""
    columns = [str(c) for c in df.columns]
    formats = [_number_format(c) for c in columns]
    widths = [max(10, len(c)) for c in columns]
    top = Alignment(vertical="top")

    for col, name in enumerate(columns):
        cell = ws.cell(row=1, column=col + 1, value=name)
        cell.font = Font(bold=True)
        cell.alignment = top

    for row, record in enumerate(df.itertuples(index=False, name=None), start=2):
        for col, raw in enumerate(record):
            val = _cell_value(raw)
            cell = ws.cell(row=row, column=col + 1, value=val)
            cell.alignment = top
            if formats[col] and isinstance(val, (int, float, Decimal)):
                cell.number_format = formats[col]
            widths[col] = max(widths[col], min(len(str(val)), 60))

    for col, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col)].width = width + 2


def ensure_template(path: str) -> None:
    """Creates a clean report workbook with one empty sheet per report table."""
    wb = Workbook()
    wb.remove(wb.active)
    for name in REPORT_SHEETS:
        wb.create_sheet(name[:31])
    wb.save(path)


def write_report_pack(
    template_path: str,
    output_path: str,
    dfs: Dict[str, pd.DataFrame],
) -> None:
    wb = load_workbook(template_path)

    for sheet_name, df in dfs.items():
        safe = sheet_name[:31]  # Excel sheet-name limit
        if safe not in wb.sheetnames:
            wb.create_sheet(safe)
        ws = wb[safe]
        ws.delete_rows(1, ws.max_row)
        _write_table(ws, df)

    wb.save(output_path)
