from __future__ import annotations

import math
import re
import unicodedata
import warnings
from datetime import date, datetime, time, timedelta
from numbers import Real
from typing import Any
from zoneinfo import ZoneInfo

import pandas as pd

"""Cell value normalizers.

Pure functions turning a raw cell value (text, number, date or empty) into the
canonical textual form expected by the back-office import:

- currency: Brazilian convention, two decimals (``1.234,56``)
- dates: ``dd/mm/yyyy``
- interest rates: first ``d,dd`` fragment of a free-text table name

None of these raise on bad input. Unparseable values are returned as the
original text so the operator can still see what the partner sent.
"""

__all__ = [
    "EXCEL_EPOCH",
    "PLACEHOLDER_DATE",
    "DATE_FMT",
    "is_empty",
    "strip_diacritics",
    "fold_text",
    "clean_text",
    "format_currency",
    "parse_date",
    "format_date",
    "is_placeholder_date",
    "extract_interest_rate",
    "strip_prefix_marker",
    "strip_token_prefix",
    "join_fields",
]

# Spreadsheet serial day 0 (includes the 1900 leap-year offset)
EXCEL_EPOCH = datetime(1899, 12, 30)

PLACEHOLDER_DATE = "00/00/0000"
DATE_FMT = "%d/%m/%Y"

_LEADING_FLOAT_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_DAY_FIRST_RE = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")
_YEAR_FIRST_RE = re.compile(r"^(\d{4})[/-](\d{1,2})[/-](\d{1,2})$")
_INTEREST_RATE_RE = re.compile(r"\d{1,2},\d{1,2}")


def is_empty(value: Any) -> bool:
    """True for None, empty string and pandas missing markers (NaN/NaT)."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # array-likes are never a single empty cell
        return False


def clean_text(value: Any) -> Any:
    """Return ``""`` for empty cells, otherwise the value unchanged."""
    return "" if is_empty(value) else value


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold_text(value: Any) -> str:
    """Trimmed, upper-cased, accent-free text used for comparisons."""
    return strip_diacritics(str(clean_text(value)).strip()).upper()


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def format_currency(value: Any) -> str:
    """Format a monetary cell using the Brazilian convention.

    Both ``"5.500,00"`` (pt-BR) and ``"5,500.00"`` (US) inputs are accepted:
    when both separators occur, whichever comes last is the decimal one.
    Date/time cells and values overflowing a float come back as text.

    Examples:
        >>> format_currency("5,500.00")
        '5.500,00'
        >>> format_currency(1234.5)
        '1.234,50'
        >>> format_currency("abc")
        'abc'
    """
    if is_empty(value):
        return ""
    if isinstance(value, (date, time)):
        return str(value)

    text = str(value).strip()
    has_comma = "," in text
    has_dot = "." in text

    if has_comma and has_dot:
        if text.rfind(",") < text.rfind("."):
            text = text.replace(",", "")
        else:
            text = text.replace(".", "").replace(",", ".", 1)
    elif has_comma:
        text = text.replace(",", ".", 1)

    match = _LEADING_FLOAT_RE.match(text)
    if match is None:
        return str(value)
    number = float(match.group(0))
    if not math.isfinite(number):
        return str(value)

    rendered = f"{number:,.2f}"
    return rendered.replace(",", "\0").replace(".", ",").replace("\0", ".")


def _to_local(value: datetime, tz: str | None) -> datetime:
    if value.tzinfo is not None and tz:
        return value.astimezone(ZoneInfo(tz))
    return value


def _parse_text_date(text: str, tz: str | None) -> date | None:
    date_part = text.split(" ")[0]

    match = _DAY_FIRST_RE.match(date_part)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    match = _YEAR_FIRST_RE.match(date_part)
    if match:
        year, month, day = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    # Last resort: lenient parse of the full text
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is None or pd.isna(parsed):
        return None
    return _to_local(parsed.to_pydatetime(), tz).date()


def parse_date(value: Any, tz: str | None = None) -> date | None:
    """Parse a raw cell into a calendar date, or None when impossible.

    Accepted inputs, in order: datetime/Timestamp (timezone-aware values are
    converted to ``tz`` first), date, positive spreadsheet serial numbers, and
    text in ``dd/mm/yyyy``, ``dd-mm-yyyy``, ``yyyy-mm-dd`` or ``yyyy/mm/dd``
    form (a trailing time part is ignored), with a lenient pandas parse as
    fallback.
    """
    if is_empty(value):
        return None

    if isinstance(value, datetime):
        return _to_local(value, tz).date()

    if isinstance(value, date):
        return value

    if _is_number(value):
        if value <= 0:
            return None
        try:
            return (EXCEL_EPOCH + timedelta(days=float(value))).date()
        except OverflowError:
            return None

    if isinstance(value, str):
        return _parse_text_date(value.strip(), tz)

    return None


def format_date(value: Any, tz: str | None = None) -> str:
    """Render a raw cell as ``dd/mm/yyyy``.

    Empty cells and non-positive serial numbers give ``""``. Anything that
    cannot be parsed is returned as its original text.

    Examples:
        >>> format_date("2023-12-25 10:30:00")
        '25/12/2023'
        >>> format_date(45000)
        '15/03/2023'
    """
    if is_empty(value):
        return ""
    if _is_number(value) and value <= 0:
        return ""

    parsed = parse_date(value, tz)
    if parsed is None:
        return str(value)
    return parsed.strftime(DATE_FMT)


def is_placeholder_date(formatted: str) -> bool:
    """True when a formatted date means "no real date was present".

    Spreadsheets often carry serial 0 or 1 (year 1899) in date columns that
    were never filled in.
    """
    return not formatted or formatted == PLACEHOLDER_DATE or formatted.endswith("1899")


def extract_interest_rate(text: Any) -> str:
    """Return the first ``d,dd``-style rate found in ``text`` or ``""``.

    >>> extract_interest_rate("INSS 1,85% 84x")
    '1,85'
    """
    if is_empty(text):
        return ""
    match = _INTEREST_RATE_RE.search(str(text))
    return match.group(0) if match else ""


def strip_prefix_marker(value: Any, marker: str = "'") -> str:
    """Trim and drop one leading ``marker`` (the apostrophe spreadsheet tools
    insert to force text formatting)."""
    text = str(clean_text(value)).strip()
    if text.startswith(marker):
        return text[len(marker):]
    return text


def strip_token_prefix(value: Any, token: str) -> str:
    """Drop a case-insensitive leading ``token`` such as ``"SUB "``."""
    text = str(clean_text(value))
    if text.upper().startswith(token.upper()):
        return text[len(token):]
    return text


def join_fields(first: Any, second: Any, sep: str = "-") -> str:
    return f"{clean_text(first)}{sep}{clean_text(second)}"
