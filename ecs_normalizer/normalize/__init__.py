"""Header resolution and cell value normalization."""

from .headers import MISSING, HeaderLookup, normalize_header
from .values import (
    extract_interest_rate,
    format_currency,
    format_date,
    is_placeholder_date,
    parse_date,
)

__all__ = [
    "MISSING",
    "HeaderLookup",
    "normalize_header",
    "extract_interest_rate",
    "format_currency",
    "format_date",
    "is_placeholder_date",
    "parse_date",
]
