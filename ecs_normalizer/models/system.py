from __future__ import annotations

from enum import Enum

from ..errors import UnknownSystemError

"""System identifier enumeration.

The values are the exact identifiers used by the upload front-end, including
spaces and hyphens, so they can be parsed straight from user input.
"""

__all__ = [
    "SystemId",
]


class SystemId(str, Enum):
    """Closed set of partner systems whose exports can be normalized."""

    V8DIGITAL = "V8DIGITAL"
    UNNO = "UNNO"
    GLM_CREFISACP = "GLM-CREFISACP"
    QUEROMAIS = "QUEROMAIS"
    LEV = "LEV"
    FACTA = "FACTA"
    PRESENCABANK = "PRESENCABANK"
    QUALIBANKING = "QUALIBANKING"
    PAN = "PAN"
    BRB_INCONTA = "BRB-INCONTA"
    NEOCREDITO = "NEOCREDITO"
    PRATA_DIGITAL = "PRATA DIGITAL"
    PHTECH = "PHTECH"
    TOTALCASH = "TOTALCASH"
    AMIGOZ = "AMIGOZ"
    BRB_ESTEIRA = "BRB ESTEIRA"
    BMG = "BMG"
    INTER = "INTER"
    DIGIO = "DIGIO"
    TECH2 = "2TECH"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str | SystemId) -> SystemId:
        """Return the member whose value equals ``value`` exactly.

        Raises:
            UnknownSystemError: if ``value`` is not one of the identifiers
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownSystemError(value) from None
