from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from ..config.loader import NormalizerSettings
from ..errors import NoDataError, NoMatchingRowsError, NormalizationError
from ..excel.reader import WorkbookSource, read_workbook
from ..models.processing_result import Failure, ProcessingResult, Success
from ..models.system import SystemId
from ..normalize.headers import HeaderLookup
from ..normalize.values import is_empty
from ..rules.base import RawRow, RuleContext
from ..rules.registry import get_rule_set
from .assembler import assemble

"""Core processing entry points.

``process_spreadsheet`` turns one in-memory sheet into canonical records:

1. resolve the partner rule set
2. drop fully blank rows (fatal when nothing is left)
3. build the header lookup and the per-invocation context
4. check required columns, filter and map rows
5. assemble the records in canonical order

Fatal errors are raised as ``NormalizationError`` subclasses inside the
pipeline and converted here, once, into ``Failure``. Callers never see an
exception for bad input.
"""

__all__ = [
    "process_spreadsheet",
    "process_workbook",
    "is_blank_row",
]

logger = logging.getLogger(__name__)


def is_blank_row(row: Mapping[str, Any]) -> bool:
    """True when every cell is empty or whitespace-only text."""
    for value in row.values():
        if is_empty(value):
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return False
    return True


def _run(
    rows: Iterable[RawRow],
    headers: Sequence[Any],
    system: SystemId | str,
    now: datetime,
    settings: NormalizerSettings,
) -> Success:
    rule_set = get_rule_set(system)

    data_rows = [row for row in rows if not is_blank_row(row)]
    if not data_rows:
        raise NoDataError()

    ctx = RuleContext(lookup=HeaderLookup.from_headers(headers), now=now, settings=settings)
    records = rule_set.process(data_rows, ctx)
    if not records:
        raise NoMatchingRowsError()

    logger.debug("system=%s rows=%d records=%d", rule_set.system.value, len(data_rows), len(records))
    return Success(records=assemble(records))


def process_spreadsheet(
    rows: Iterable[RawRow],
    headers: Sequence[Any],
    system: SystemId | str,
    now: datetime | None = None,
    settings: NormalizerSettings | None = None,
) -> ProcessingResult:
    """Normalize one sheet for ``system``.

    Args:
        rows: data rows keyed by the literal row-1 header text
        headers: row-1 header cells, in sheet order
        system: partner identifier (``SystemId`` or its exact text)
        now: invocation clock; read from the system clock when omitted
        settings: timezone / placeholder settings; defaults when omitted

    Returns:
        ``Success`` with every record, or ``Failure`` with one message
    """
    if now is None:
        now = datetime.now(UTC)
    if settings is None:
        settings = NormalizerSettings()

    try:
        return _run(rows, headers, system, now, settings)
    except NormalizationError as e:
        logger.debug("system=%s failed: %s", system, e)
        return Failure(error_message=str(e))


def process_workbook(
    source: WorkbookSource,
    system: SystemId | str,
    now: datetime | None = None,
    settings: NormalizerSettings | None = None,
    keep_na_strings: list[str] | tuple[str, ...] | None = None,
) -> ProcessingResult:
    """Decode the first worksheet of ``source`` and normalize it."""
    try:
        sheet = read_workbook(source, keep_na_strings=keep_na_strings)
    except NormalizationError as e:
        return Failure(error_message=str(e))
    return process_spreadsheet(sheet.rows, sheet.columns, system, now=now, settings=settings)
