from __future__ import annotations

from typing import Any

from ..models.system import SystemId
from ..normalize.values import fold_text
from .base import RawRow, RuleContext, RuleSet

"""PAN and LEV rule sets.

Both partners export the same canonical-style layout. LEV is a broker
spreadsheet mixing several banks; only an allow-list of banks is imported and
each row gets the code of the bank it belongs to.
"""

__all__ = [
    "PanRuleSet",
    "LevRuleSet",
]

PAN_INPUT_FIELDS = (
    "NUM_BAN",
    "NOM_BANCO",
    "NUM_PROPOSTA",
    "NUM_CONTRATO",
    "DSC_TIPO_PROPOSTA_EMPRESTIMO",
    "DSC_PRODUTO",
    "DSC_SITUACAO_EMPRESTIMO",
    "DAT_EMPRESTIMO",
    "NIC_CTR_USUARIO",
    "COD_CPF_CLIENTE",
    "NOM_CLIENTE",
    "DAT_NASCIMENTO",
    "QTD_PARCELA",
    "VAL_PRESTACAO",
    "VAL_BRUTO",
    "VAL_LIQUIDO",
    "DAT_CREDITO",
)

# (substring of NOM_BANCO, canonical name, bank code); first match wins
LEV_BANKS: tuple[tuple[str, str, int], ...] = (
    ("OLE", "OLÉ", 169),
    ("DAYCOVAL", "DAYCOVAL", 707),
    ("CREFAZ", "CREFAZ", 1123),
    ("MASTER", "MASTER", 243),
)


class PanRuleSet(RuleSet):
    system = SystemId.PAN
    bank_code = 623
    bank_name = "PAN"
    input_fields = PAN_INPUT_FIELDS
    required_fields = ("NUM_PROPOSTA",)

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        return self.has_value(row, ctx, "NUM_PROPOSTA")

    def contract_key(self) -> str:
        return "NUM_CONTRATO"

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        record["NOM_BANCO"] = ctx.value(row, "NOM_BANCO") or self.bank_name
        record["NUM_PROPOSTA"] = ctx.value(row, "NUM_PROPOSTA")
        record["NUM_CONTRATO"] = ctx.value(row, self.contract_key())
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = ctx.value(row, "DSC_TIPO_PROPOSTA_EMPRESTIMO")
        record["DSC_PRODUTO"] = ctx.value(row, "DSC_PRODUTO")
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "DSC_SITUACAO_EMPRESTIMO")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "DAT_EMPRESTIMO")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "NIC_CTR_USUARIO")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "COD_CPF_CLIENTE")
        record["NOM_CLIENTE"] = ctx.value(row, "NOM_CLIENTE")
        record["DAT_NASCIMENTO"] = self.birth_date(row, ctx, "DAT_NASCIMENTO", placeholder_is_missing=False)
        record["QTD_PARCELA"] = ctx.value(row, "QTD_PARCELA")
        record["VAL_PRESTACAO"] = ctx.currency(row, "VAL_PRESTACAO")
        record["VAL_BRUTO"] = ctx.currency(row, "VAL_BRUTO")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VAL_LIQUIDO")
        record["DAT_CREDITO"] = ctx.date(row, "DAT_CREDITO")


def _match_lev_bank(name: Any) -> tuple[str, int] | None:
    folded = fold_text(name)
    for fragment, canonical, code in LEV_BANKS:
        if fragment in folded:
            return canonical, code
    return None


class LevRuleSet(PanRuleSet):
    system = SystemId.LEV
    bank_code = ""
    bank_name = ""
    required_fields = ("NOM_BANCO",)

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        return _match_lev_bank(ctx.value(row, "NOM_BANCO")) is not None

    def contract_key(self) -> str:
        # LEV leaves NUM_CONTRATO empty; the proposal number is the contract
        return "NUM_PROPOSTA"

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        super().fill(record, row, ctx)
        bank = _match_lev_bank(ctx.value(row, "NOM_BANCO"))
        if bank is not None:
            record["NOM_BANCO"], record["NUM_BANCO"] = bank
