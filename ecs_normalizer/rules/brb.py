from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from ..normalize.values import fold_text
from .base import Classifier, RawRow, RuleContext, RuleSet

__all__ = [
    "BrbIncontaRuleSet",
]

# Rows typed by this agent belong to another office and are not imported
EXCLUDED_AGENT = "LV"
PAID_STATUS = "PAGO"

_PROPOSAL_TYPES = Classifier(exact={"CONTRATO NOVO": ProposalType.NEW})


class BrbIncontaRuleSet(RuleSet):
    system = SystemId.BRB_INCONTA
    bank_code = 7056
    bank_name = "BRB - INCONTA"
    input_fields = (
        "ID",
        "TABELA",
        "PRODUTO",
        "STATUS",
        "CRIACAO AF",
        "AGENTE",
        "CPF",
        "NOME",
        "DATA DE NASCIMENTO",
        "PRAZO",
        "VALOR DE PARCELA",
        "VALOR PRINCIPAL",
        "VALOR LIQUIDO",
        "STATUS DATA",
        "TAXA MENSAL",
    )
    required_fields = ("ID",)

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        return fold_text(ctx.value(row, "AGENTE")) != EXCLUDED_AGENT

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        proposal_id = ctx.value(row, "ID")
        product = ctx.value(row, "PRODUTO")

        record["NUM_PROPOSTA"] = proposal_id
        record["NUM_CONTRATO"] = proposal_id
        record["DSC_PRODUTO"] = ctx.value(row, "TABELA")
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _PROPOSAL_TYPES.classify(product) or product
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "STATUS")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "CRIACAO AF")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "AGENTE")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "CPF")
        record["NOM_CLIENTE"] = ctx.value(row, "NOME")
        record["DAT_NASCIMENTO"] = self.birth_date(row, ctx, "DATA DE NASCIMENTO", placeholder_is_missing=False)
        record["QTD_PARCELA"] = ctx.value(row, "PRAZO")
        record["VAL_PRESTACAO"] = ctx.currency(row, "VALOR DE PARCELA")
        record["VAL_BRUTO"] = ctx.currency(row, "VALOR PRINCIPAL")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VALOR LIQUIDO")
        # STATUS DATA is the payment date only once the proposal is paid
        if fold_text(ctx.value(row, "STATUS")) == PAID_STATUS:
            record["DAT_CREDITO"] = ctx.date(row, "STATUS DATA")
        record["PCL_TAXA_EMPRESTIMO"] = ctx.currency(row, "TAXA MENSAL")
