from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from ..normalize.values import is_placeholder_date
from .base import Classifier, RawRow, RuleContext, RuleSet

__all__ = [
    "QueroMaisRuleSet",
]

_PROPOSAL_TYPES = Classifier(exact={"CARTÃO C/ SAQUE": ProposalType.CARD})


class QueroMaisRuleSet(RuleSet):
    system = SystemId.QUEROMAIS
    bank_code = 465
    bank_name = "QUERO+"
    input_fields = (
        "NUM_PROPOSTA",
        "DSC_TIPO_PROPOSTA_EMPRESTIMO",
        "DSC_PRODUTO",
        "DSC_SITUACAO_EMPRESTIMO",
        "DAT_EMPRESTIMO",
        "NIC_CTR_USUARIO",
        "COD_CPF_CLIENTE",
        "NOM_CLIENTE",
        "QTD_PARCELA",
        "VAL_BRUTO",
        "VAL_LIQUIDO",
        "DAT_CREDITO",
    )
    required_fields = ("NUM_PROPOSTA",)

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        proposal = ctx.value(row, "NUM_PROPOSTA")
        proposal_type = ctx.value(row, "DSC_TIPO_PROPOSTA_EMPRESTIMO")

        record["NUM_PROPOSTA"] = proposal
        record["NUM_CONTRATO"] = proposal
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _PROPOSAL_TYPES.classify(proposal_type) or proposal_type
        record["DSC_PRODUTO"] = ctx.value(row, "DSC_PRODUTO")
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "DSC_SITUACAO_EMPRESTIMO")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "DAT_EMPRESTIMO")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "NIC_CTR_USUARIO")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "COD_CPF_CLIENTE")
        record["NOM_CLIENTE"] = ctx.value(row, "NOM_CLIENTE")
        record["DAT_NASCIMENTO"] = ctx.settings.placeholder_birth_date
        record["QTD_PARCELA"] = ctx.value(row, "QTD_PARCELA")
        record["VAL_BRUTO"] = ctx.currency(row, "VAL_BRUTO")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VAL_LIQUIDO")
        # unpaid proposals carry serial 0 in DAT_CREDITO
        credit_date = ctx.date(row, "DAT_CREDITO")
        if not is_placeholder_date(credit_date):
            record["DAT_CREDITO"] = credit_date
