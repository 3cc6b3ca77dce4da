from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Union

import pandas as pd

from ..errors import WorkbookReadError

"""Workbook reader.

Only the first worksheet is read. Row 1 is the header row (cells trimmed),
rows 2+ are data. Cells keep their native type: text stays text, numbers
stay numbers and date cells arrive as ``pandas.Timestamp``. Empty cells
become ``None`` and rows with no value at all are dropped.
"""

__all__ = [
    "WorkbookSource",
    "SheetData",
    "read_workbook",
    "sheet_from_frame",
]

WorkbookSource = Union[str, Path, bytes, IO[bytes]]


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[dict[str, Any]]


def _na_options(keep_na_strings: list[str] | tuple[str, ...] | None) -> dict[str, Any]:
    # pandas' default NA strings minus the ones the partner uses literally
    import pandas._libs.parsers as parsers

    if not keep_na_strings:
        return {"keep_default_na": True, "na_values": None}
    custom_na = parsers.STR_NA_VALUES - set(keep_na_strings)
    return {"keep_default_na": False, "na_values": list(custom_na)}


def _header_text(value: Any) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    return str(value).strip()


def sheet_from_frame(df: pd.DataFrame, sheet_name: str = "") -> SheetData:
    """Split a header-less frame into header (row 1) and data rows."""
    if df.shape[0] < 1:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])

    columns = [_header_text(c) for c in df.iloc[0].tolist()]
    rows: list[dict[str, Any]] = []
    for _, raw in df.iloc[1:].iterrows():
        if raw.isna().all():
            continue
        row: dict[str, Any] = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            # duplicate headers: first column wins, as in header lookup
            if col in row:
                continue
            row[col] = None if pd.isna(val) else val
        rows.append(row)
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def read_workbook(
    source: WorkbookSource, keep_na_strings: list[str] | tuple[str, ...] | None = None
) -> SheetData:
    """Read the first worksheet of an ``.xlsx`` workbook.

    Parameters
    ----------
    source: path, raw bytes or binary file object
    keep_na_strings: strings pandas would turn into NaN that must stay text
        (e.g. ``["NA"]``)

    Raises
    ------
    WorkbookReadError: unreadable / corrupt workbook, or no worksheet
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)

    try:
        with pd.ExcelFile(source, engine="openpyxl") as xls:
            if not xls.sheet_names:
                raise WorkbookReadError("No worksheet found in the Excel file.")
            name = xls.sheet_names[0]
            df = xls.parse(name, header=None, **_na_options(keep_na_strings))
    except WorkbookReadError:
        raise
    except FileNotFoundError as e:
        raise WorkbookReadError(f"Excel file not found: {e.filename}") from e
    except Exception as e:
        # openpyxl / zipfile raise a wide range of types for corrupt input
        raise WorkbookReadError(f"Failed to read the Excel file: {e}") from e

    return sheet_from_frame(df, str(name))
