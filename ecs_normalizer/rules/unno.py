from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from .base import RawRow, RuleContext, RuleSet

__all__ = [
    "UnnoRuleSet",
]


class UnnoRuleSet(RuleSet):
    """UNNO: every proposal is a new contract keyed by its CCB number."""

    system = SystemId.UNNO
    bank_code = 9209
    bank_name = "UNNO"
    input_fields = (
        "CCB",
        "Data de Digitação",
        "Data do Desembolso",
        "CPF/CNPJ",
        "Nome",
        "Tabela",
        "Parcelas",
        "Valor Bruto",
        "Valor Líquido",
        "E-mail",
        "Status",
        "Data Nascimento",
    )
    required_fields = ("CCB",)
    interest_rate = "1,79"

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        return self.has_value(row, ctx, "CCB")

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        ccb = ctx.value(row, "CCB")

        record["NUM_PROPOSTA"] = ccb
        record["NUM_CONTRATO"] = ccb
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = ProposalType.NEW
        record["DSC_PRODUTO"] = ctx.value(row, "Tabela")
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "Status")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "Data de Digitação")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "E-mail")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "CPF/CNPJ")
        record["NOM_CLIENTE"] = ctx.value(row, "Nome")
        record["DAT_NASCIMENTO"] = self.birth_date(row, ctx, "Data Nascimento")
        record["QTD_PARCELA"] = ctx.value(row, "Parcelas")
        # VAL_PRESTACAO stays blank
        record["VAL_BRUTO"] = ctx.currency(row, "Valor Bruto")
        record["VAL_LIQUIDO"] = ctx.currency(row, "Valor Líquido")
        record["DAT_CREDITO"] = ctx.date(row, "Data do Desembolso")
        record["PCL_TAXA_EMPRESTIMO"] = self.interest_rate
