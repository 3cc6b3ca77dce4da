from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from ..normalize.values import fold_text, join_fields
from .base import Classifier, RawRow, RuleContext, RuleSet

__all__ = [
    "NeocreditoRuleSet",
    "USER_NAME_FIXES",
]

# NEOCREDITO truncates user names at 17 characters
USER_NAME_FIXES = {
    "TAINA LUCIO DA LU": "TAINA LUCIO DA LUZ",
}

_PROPOSAL_TYPES = Classifier(
    contains=(
        ("COMPRA", ProposalType.REPURCHASE),
        ("NOVO", ProposalType.CARD),
        ("MARGEM LIVRE", ProposalType.NEW),
    ),
)


def _fix_user_name(name: Any) -> Any:
    return USER_NAME_FIXES.get(fold_text(name), name)


class NeocreditoRuleSet(RuleSet):
    system = SystemId.NEOCREDITO
    bank_code = 410
    bank_name = "NEOCREDITO"
    input_fields = (
        "PROPOSTA",
        "TIPO OPERACAO",
        "CONVENIO",
        "TABELA",
        "STATUS",
        "DATA CADASTRO",
        "USUARIO",
        "CPF",
        "NOME",
        "PRAZO",
        "PMT",
        "VALOR OPERACAO",
        "VALOR TROCO",
        "DATA INTEGRADO",
    )
    required_fields = ("PROPOSTA",)

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        proposal = ctx.value(row, "PROPOSTA")
        operation = ctx.value(row, "TIPO OPERACAO")

        record["NUM_PROPOSTA"] = proposal
        record["NUM_CONTRATO"] = proposal
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _PROPOSAL_TYPES.classify(operation) or operation
        record["DSC_PRODUTO"] = join_fields(ctx.value(row, "CONVENIO"), ctx.value(row, "TABELA"))
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "STATUS")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "DATA CADASTRO")
        record["NIC_CTR_USUARIO"] = _fix_user_name(ctx.value(row, "USUARIO"))
        record["COD_CPF_CLIENTE"] = ctx.value(row, "CPF")
        record["NOM_CLIENTE"] = ctx.value(row, "NOME")
        record["DAT_NASCIMENTO"] = ctx.settings.placeholder_birth_date
        record["QTD_PARCELA"] = ctx.value(row, "PRAZO")
        record["VAL_PRESTACAO"] = ctx.currency(row, "PMT")
        record["VAL_BRUTO"] = ctx.currency(row, "VALOR OPERACAO")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VALOR TROCO")
        record["DAT_CREDITO"] = ctx.date(row, "DATA INTEGRADO")
