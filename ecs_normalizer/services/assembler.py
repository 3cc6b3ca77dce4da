from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

import pandas as pd

from ..models.canonical import CANONICAL_FIELDS, DATA_FIELDS, SPACER_FIELD, CanonicalRecord, freeze_record

"""Output assembler: canonical order and totality.

Rule sets already emit every data field; assembling again guarantees the
order of the returned records and the shape of the rendered sheet no matter
which rule set produced them.
"""

__all__ = [
    "assemble",
    "output_header",
    "to_frame",
]


def _ordered(record: Mapping[str, Any]) -> CanonicalRecord:
    return freeze_record({name: record.get(name, "") for name in DATA_FIELDS})


def assemble(records: Iterable[Mapping[str, Any]]) -> tuple[CanonicalRecord, ...]:
    """Re-key records in canonical order; absent fields become ``""``.

    Keys outside the canonical schema (including the spacer) are dropped.
    """
    return tuple(_ordered(r) for r in records)


def output_header() -> list[str]:
    """Rendered header row: canonical names with ``""`` at the spacer slot."""
    return ["" if name == SPACER_FIELD else name for name in CANONICAL_FIELDS]


def to_frame(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    """Tabular rendering including the blank spacer column."""
    rows = [
        ["" if name == SPACER_FIELD else record.get(name, "") for name in CANONICAL_FIELDS]
        for record in records
    ]
    return pd.DataFrame(rows, columns=output_header())
