from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .values import strip_diacritics

"""Header resolution for partner spreadsheets.

Partners spell the same column in many ways (``Data de Nascimento``,
``DATA DE NASCIMENTO ``, ``data de nascimento``). Every header of row 1 is
reduced to a normalized key and rule sets look columns up by that key:

    normalize_header("Data de Nascimento") == "DATA_DE_NASCIMENTO"

When two headers normalize to the same key, the first one (sheet order) wins.
"""

__all__ = [
    "MISSING",
    "normalize_header",
    "HeaderLookup",
]

_NON_KEY_CHARS_RE = re.compile(r"[^A-Z0-9_\s]")
_WHITESPACE_RE = re.compile(r"\s+")


class _Missing:
    """Marker for a column that is not present in the sheet."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def normalize_header(header: Any) -> str:
    """Return the normalized lookup key for a header cell.

    trim -> strip diacritics -> uppercase -> drop characters other than
    A-Z, 0-9, ``_`` and whitespace -> whitespace runs become ``_``.
    """
    text = "" if header is None else str(header)
    text = strip_diacritics(text.strip()).upper()
    text = _NON_KEY_CHARS_RE.sub("", text)
    return _WHITESPACE_RE.sub("_", text.strip())


@dataclass(frozen=True)
class HeaderLookup:
    """Normalized key -> literal header text, built once per sheet."""
    headers: tuple[str, ...]
    _by_key: Mapping[str, str] = field(repr=False)

    @classmethod
    def from_headers(cls, headers: Iterable[Any]) -> HeaderLookup:
        literal = tuple("" if h is None else str(h) for h in headers)
        by_key: dict[str, str] = {}
        for header in literal:
            key = normalize_header(header)
            if key and key not in by_key:
                by_key[key] = header
        return cls(headers=literal, _by_key=by_key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_header(key) in self._by_key

    def keys(self) -> list[str]:
        return list(self._by_key)

    def resolve(self, key: str) -> str:
        """Return the literal header for ``key`` or ``MISSING``."""
        return self._by_key.get(normalize_header(key), MISSING)

    def get(self, row: Mapping[str, Any], key: str) -> Any:
        """Read the cell for ``key`` from ``row``; ``MISSING`` when absent."""
        header = self.resolve(key)
        if header is MISSING or header not in row:
            return MISSING
        return row[header]

    def find_partial(self, fragment: str) -> str:
        """First header (sheet order) containing ``fragment``, case-insensitive.

        Opt-in fallback for partners whose headers carry extra text around the
        expected name. Blind substring matching is ambiguous once similar
        columns exist, so rule sets try ``resolve`` first.
        """
        needle = fragment.lower()
        for header in self.headers:
            if needle in header.lower().strip():
                return header
        return MISSING
