from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from ..normalize.values import fold_text, join_fields, strip_prefix_marker
from .base import Classifier, RawRow, RuleContext, RuleSet

"""Rule sets for the two platforms that originate CREFISACP contracts.

GLM and 2TECH both sell for bank 789 (CREFISACP) but export different
layouts. 2TECH writes identifiers as text with a leading apostrophe.
"""

__all__ = [
    "GlmCrefisacpRuleSet",
    "Tech2RuleSet",
]

CREFISACP_CODE = 789
CREFISACP_NAME = "CREFISACP"

PAID_TO_CLIENT = "PAGO AO CLIENTE"

_GLM_PROPOSAL_TYPES = Classifier(
    contains=(
        ("NOVO", ProposalType.NEW),
        ("REFIN", ProposalType.REFIN),
    ),
)

_TECH2_PROPOSAL_TYPES = Classifier(
    exact={
        "001 - Novo Contrato": ProposalType.NEW,
        "027 - Refinanciamento": ProposalType.REFINANCING,
    },
)


class GlmCrefisacpRuleSet(RuleSet):
    system = SystemId.GLM_CREFISACP
    bank_code = CREFISACP_CODE
    bank_name = CREFISACP_NAME
    input_fields = (
        "PROPOSTA",
        "TABELA",
        "STATUS_CONTRATO",
        "DATA_CADASTRO",
        "USUARIO_BANCO",
        "CNPJ_CPF",
        "CLIENTE",
        "DATA DE NASCIMENTO",
        "PRAZO",
        "VALOR_PARCELA",
        "VALOR_BRUTO",
        "VALOR_LIQUIDO",
        "DATA_INTEGRACAO",
        "TAXA MENSAL",
    )
    required_fields = ("PROPOSTA",)

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        proposal = ctx.value(row, "PROPOSTA")
        table = ctx.value(row, "TABELA")

        record["NUM_PROPOSTA"] = proposal
        record["NUM_CONTRATO"] = proposal
        # the table name carries the operation type
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _GLM_PROPOSAL_TYPES.classify(table) or table
        record["DSC_PRODUTO"] = table
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "STATUS_CONTRATO")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "DATA_CADASTRO")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "USUARIO_BANCO")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "CNPJ_CPF")
        record["NOM_CLIENTE"] = ctx.value(row, "CLIENTE")
        record["DAT_NASCIMENTO"] = ctx.settings.placeholder_birth_date
        record["QTD_PARCELA"] = ctx.value(row, "PRAZO")
        record["VAL_PRESTACAO"] = ctx.currency(row, "VALOR_PARCELA")
        record["VAL_BRUTO"] = ctx.currency(row, "VALOR_BRUTO")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VALOR_LIQUIDO")
        record["DAT_CREDITO"] = ctx.date(row, "DATA_INTEGRACAO")
        record["PCL_TAXA_EMPRESTIMO"] = ctx.currency(row, "TAXA MENSAL")


class Tech2RuleSet(RuleSet):
    system = SystemId.TECH2
    bank_code = CREFISACP_CODE
    bank_name = CREFISACP_NAME
    input_fields = (
        "NUMERO_ADE",
        "TIPO CONTRATO",
        "SIT_BANCO",
        "SIT_PAGAMENTO_CLIENTE",
        "DATA_DIGIT_BANCO",
        "LOGIN_SUB_USUARIO",
        "CPF",
        "CLIENTE",
        "PRAZO",
        "VLR_PARC",
        "VALOR_BRUTO",
        "VALOR_LIQUIDO",
        "DATA_PAGAMENTO_CLIENTE",
        "CONVENIO",
        "TABELA",
    )
    required_fields = ("NUMERO_ADE",)

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        ade = strip_prefix_marker(ctx.value(row, "NUMERO_ADE"))
        contract_type = ctx.text(row, "TIPO CONTRATO")

        record["NUM_PROPOSTA"] = ade
        record["NUM_CONTRATO"] = ade
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _TECH2_PROPOSAL_TYPES.classify(contract_type) or contract_type
        record["DSC_PRODUTO"] = join_fields(ctx.value(row, "CONVENIO"), ctx.value(row, "TABELA"))
        if fold_text(ctx.value(row, "SIT_PAGAMENTO_CLIENTE")) == PAID_TO_CLIENT:
            record["DSC_SITUACAO_EMPRESTIMO"] = PAID_TO_CLIENT
        else:
            record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "SIT_BANCO")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "DATA_DIGIT_BANCO")
        record["NIC_CTR_USUARIO"] = strip_prefix_marker(ctx.value(row, "LOGIN_SUB_USUARIO"))
        record["COD_CPF_CLIENTE"] = ctx.value(row, "CPF")
        record["NOM_CLIENTE"] = ctx.value(row, "CLIENTE")
        record["DAT_NASCIMENTO"] = ctx.settings.placeholder_birth_date
        record["QTD_PARCELA"] = ctx.value(row, "PRAZO")
        record["VAL_PRESTACAO"] = ctx.currency(row, "VLR_PARC")
        record["VAL_BRUTO"] = ctx.currency(row, "VALOR_BRUTO")
        record["VAL_LIQUIDO"] = ctx.currency(row, "VALOR_LIQUIDO")
        record["DAT_CREDITO"] = ctx.date(row, "DATA_PAGAMENTO_CLIENTE")
