from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from .base import Classifier, RawRow, RuleContext, RuleSet

__all__ = [
    "V8DigitalRuleSet",
]

_PROPOSAL_TYPES = Classifier(exact={"Margem Livre (Novo)": ProposalType.NEW})


class V8DigitalRuleSet(RuleSet):
    """V8DIGITAL exports already use canonical column names."""

    system = SystemId.V8DIGITAL
    bank_code = 17
    bank_name = "V8DIGITAL"
    input_fields = (
        "NUM_PROPOSTA",
        "NUM_CONTRATO",
        "DSC_TIPO_PROPOSTA_EMPRESTIMO",
        "DSC_PRODUTO",
        "DAT_CTR_INCLUSAO",
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
        "DSC_TIPO_FORMULARIO_EMPRESTIMO",
    )
    required_fields = ("NUM_PROPOSTA",)
    interest_rate = "1,80"

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        return self.has_value(row, ctx, "NUM_PROPOSTA")

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        proposal_type = ctx.value(row, "DSC_TIPO_PROPOSTA_EMPRESTIMO")

        record["NUM_PROPOSTA"] = ctx.value(row, "NUM_PROPOSTA")
        record["NUM_CONTRATO"] = ctx.value(row, "NUM_CONTRATO")
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _PROPOSAL_TYPES.classify(proposal_type) or proposal_type
        record["DSC_PRODUTO"] = ctx.value(row, "DSC_PRODUTO")
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "DSC_SITUACAO_EMPRESTIMO")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "DAT_EMPRESTIMO")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "NIC_CTR_USUARIO")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "COD_CPF_CLIENTE")
        record["NOM_CLIENTE"] = ctx.value(row, "NOM_CLIENTE")
        record["DAT_NASCIMENTO"] = self.birth_date(row, ctx, "DAT_NASCIMENTO")
        record["QTD_PARCELA"] = ctx.value(row, "QTD_PARCELA")
        record["VAL_PRESTACAO"] = ctx.currency(row, "VAL_PRESTACAO")
        record["VAL_BRUTO"] = ctx.currency(row, "VAL_BRUTO")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VAL_LIQUIDO")
        record["DAT_CREDITO"] = ctx.date(row, "DAT_CREDITO")
        record["PCL_TAXA_EMPRESTIMO"] = self.interest_rate
        record["DSC_TIPO_FORMULARIO_EMPRESTIMO"] = ctx.value(row, "DSC_TIPO_FORMULARIO_EMPRESTIMO")
