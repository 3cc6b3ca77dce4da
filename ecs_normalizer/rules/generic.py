from __future__ import annotations

from typing import Any

from ..models.canonical import empty_record
from ..models.system import SystemId
from .base import RawRow, RuleContext, RuleSet

__all__ = [
    "GENERIC_SYSTEMS",
    "GenericRuleSet",
]

# Partners listed in the back office without a dedicated layout yet
GENERIC_SYSTEMS: tuple[SystemId, ...] = (
    SystemId.PRESENCABANK,
    SystemId.PRATA_DIGITAL,
    SystemId.PHTECH,
    SystemId.TOTALCASH,
    SystemId.AMIGOZ,
    SystemId.BRB_ESTEIRA,
    SystemId.BMG,
    SystemId.INTER,
    SystemId.DIGIO,
)


class GenericRuleSet(RuleSet):
    """One blank record per source row, tagged with the partner name."""

    def __init__(self, system: SystemId) -> None:
        self.system = system
        self.bank_name = system.value

    def base_record(self, ctx: RuleContext) -> dict[str, Any]:
        record = empty_record()
        record["NOM_BANCO"] = self.bank_name
        return record

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        pass
