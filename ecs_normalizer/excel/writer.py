from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import pandas as pd

from ..models.canonical import CanonicalRecord
from ..services.assembler import to_frame

"""Workbook writer for normalized output.

The back office imports a workbook with one sheet named ``Dados Processados``
whose header row is the canonical field list (the spacer column has an empty
header). Files are named ``WORKBANK<BANK><ddmmyyyy>.xlsx``.
"""

__all__ = [
    "OUTPUT_SHEET_NAME",
    "write_workbook",
    "output_filename",
]

OUTPUT_SHEET_NAME = "Dados Processados"
FALLBACK_BANK_NAME = "BANCO"

_UNSAFE_FILENAME_CHARS_RE = re.compile(r'[\\/:*?"<>|]')


def output_filename(bank_name: str | None, now: datetime) -> str:
    """``WORKBANK{BANK_NAME_UPPER}{ddmmyyyy}.xlsx``; ``BANCO`` when unnamed."""
    name = str(bank_name).strip() if bank_name else ""
    name = _UNSAFE_FILENAME_CHARS_RE.sub("", name.upper()) or FALLBACK_BANK_NAME
    return f"WORKBANK{name}{now.strftime('%d%m%Y')}.xlsx"


def write_workbook(records: Sequence[CanonicalRecord], path: Path) -> Path:
    """Write ``records`` to ``path`` (parent directories are created)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    df = to_frame(records)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=OUTPUT_SHEET_NAME, index=False)
    return path
