from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from ..config.loader import NormalizerSettings
from ..errors import MissingColumnsError
from ..models.canonical import FORM_TYPE_DIGITAL, CanonicalRecord, empty_record, freeze_record
from ..models.system import SystemId
from ..normalize.headers import MISSING, HeaderLookup
from ..normalize.values import (
    DATE_FMT,
    clean_text,
    fold_text,
    format_currency,
    format_date,
    is_empty,
    is_placeholder_date,
)

"""Rule set contract shared by every partner.

A rule set declares the partner's input vocabulary and the columns without
which the sheet is unprocessable, then supplies two hooks:

- ``filter(row, ctx)``: keep or drop a raw row (default: keep)
- ``fill(record, row, ctx)``: write partner fields into a record that already
  holds every canonical field as ``""`` plus the bank constants

``map`` wraps ``fill`` and returns a read-only record; ``process`` runs the
required-column check, the filter and the map over a whole sheet.
"""

__all__ = [
    "RawRow",
    "RuleContext",
    "Classifier",
    "RuleSet",
]

logger = logging.getLogger(__name__)

RawRow = Mapping[str, Any]


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule set may read besides the row itself.

    ``now`` is captured once per invocation so every row of a sheet sees the
    same inclusion date and filter window.
    """
    lookup: HeaderLookup
    now: datetime
    settings: NormalizerSettings = field(default_factory=NormalizerSettings)

    @property
    def local_now(self) -> datetime:
        """``now`` as naive wall-clock time in the configured timezone."""
        if self.now.tzinfo is None:
            return self.now
        return self.now.astimezone(ZoneInfo(self.settings.timezone)).replace(tzinfo=None)

    @property
    def today(self) -> str:
        return self.local_now.strftime(DATE_FMT)

    def raw(self, row: RawRow, key: str) -> Any:
        """Cell for ``key`` or ``MISSING``."""
        return self.lookup.get(row, key)

    def value(self, row: RawRow, key: str) -> Any:
        """Cell for ``key`` with absent/empty cells as ``""``."""
        cell = self.lookup.get(row, key)
        if cell is MISSING:
            return ""
        return clean_text(cell)

    def text(self, row: RawRow, key: str) -> str:
        return str(self.value(row, key)).strip()

    def currency(self, row: RawRow, key: str) -> str:
        cell = self.lookup.get(row, key)
        return "" if cell is MISSING else format_currency(cell)

    def date(self, row: RawRow, key: str) -> str:
        cell = self.lookup.get(row, key)
        return "" if cell is MISSING else format_date(cell, self.settings.timezone)


@dataclass(frozen=True)
class Classifier:
    """Translate partner free text into the canonical vocabulary.

    Exact matches are tried before substring containment; substrings are
    tried in declaration order. Comparison ignores case, accents and
    surrounding whitespace.
    """
    exact: Mapping[str, str] = field(default_factory=dict)
    contains: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "exact", {fold_text(k): v for k, v in self.exact.items()})
        object.__setattr__(self, "contains", tuple((fold_text(f), t) for f, t in self.contains))

    def classify(self, value: Any) -> str | None:
        """Canonical token for ``value`` or None when nothing matches."""
        key = fold_text(value)
        if not key:
            return None
        if key in self.exact:
            return self.exact[key]
        for fragment, token in self.contains:
            if fragment in key:
                return token
        return None


class RuleSet:
    """Base class for partner rule sets."""

    system: SystemId
    bank_code: int | str = ""
    bank_name: str = ""
    form_type: str = FORM_TYPE_DIGITAL
    # Header names as the partner exports them (documentation + inspect output)
    input_fields: tuple[str, ...] = ()
    # Columns that must exist in row 1 for the sheet to be processable
    required_fields: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(system={self.system.value!r})"

    def missing_columns(self, lookup: HeaderLookup) -> list[str]:
        return [f for f in self.required_fields if f not in lookup]

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        return True

    def base_record(self, ctx: RuleContext) -> dict[str, Any]:
        record = empty_record()
        record["NUM_BANCO"] = self.bank_code
        record["NOM_BANCO"] = self.bank_name
        record["DAT_CTR_INCLUSAO"] = ctx.today
        record["DSC_TIPO_FORMULARIO_EMPRESTIMO"] = self.form_type
        return record

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        raise NotImplementedError

    def map(self, row: RawRow, ctx: RuleContext) -> CanonicalRecord:
        record = self.base_record(ctx)
        self.fill(record, row, ctx)
        return freeze_record(record)

    def process(self, rows: Iterable[RawRow], ctx: RuleContext) -> list[CanonicalRecord]:
        """Check required columns, filter and map every row of a sheet.

        Raises:
            MissingColumnsError: if a required column is absent from the header
        """
        missing = self.missing_columns(ctx.lookup)
        if missing:
            raise MissingColumnsError(self.system.value, missing)

        records: list[CanonicalRecord] = []
        dropped = 0
        for row in rows:
            if not self.filter(row, ctx):
                dropped += 1
                continue
            records.append(self.map(row, ctx))
        logger.debug("system=%s kept=%d dropped=%d", self.system.value, len(records), dropped)
        return records

    # helpers shared by partner rule sets

    def has_value(self, row: RawRow, ctx: RuleContext, key: str) -> bool:
        cell = ctx.raw(row, key)
        return cell is not MISSING and not is_empty(cell) and str(cell).strip() != ""

    def birth_date(self, row: RawRow, ctx: RuleContext, key: str, *, placeholder_is_missing: bool = True) -> str:
        """Formatted birth date, replaced by the configured placeholder when
        absent (and, unless disabled, when it lands in 1899)."""
        formatted = ctx.date(row, key)
        if not formatted or (placeholder_is_missing and is_placeholder_date(formatted)):
            return ctx.settings.placeholder_birth_date
        return formatted
