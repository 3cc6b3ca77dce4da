from __future__ import annotations

from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

import pandas as pd

from ..models.canonical import ProposalType
from ..models.system import SystemId
from ..normalize.values import extract_interest_rate, format_currency, parse_date
from .base import Classifier, RawRow, RuleContext, RuleSet

"""QUALIBANKING rule set.

The partner export contains the whole proposal history. Only proposals
created within the last two calendar months (relative to the invocation's
``now``) are imported.
"""

__all__ = [
    "QualibankingRuleSet",
    "WINDOW_MONTHS",
]

WINDOW_MONTHS = 2

# Exact phrases win over the substring rule: "REFIN DA PORTABILIDADE" would
# otherwise never reach PORTAB/REFIN.
_PROPOSAL_TYPES = Classifier(
    exact={
        "REFIN DA PORTABILIDADE": ProposalType.PORTABILITY_REFIN,
        "REFINANCIAMENTO DA PORTABILIDADE": ProposalType.PORTABILITY_REFIN,
    },
    contains=(("PORTABILIDADE + REFIN", ProposalType.PORTABILITY),),
)


class QualibankingRuleSet(RuleSet):
    system = SystemId.QUALIBANKING
    bank_code = 22
    bank_name = "QUALIBANKING"
    input_fields = (
        "Número do Contrato",
        "Nome do Produto",
        "Tipo de Operação",
        "Status",
        "Data da Proposta",
        "Login",
        "CPF",
        "Nome",
        "Prazo",
        "Valor da Parcela",
        "Valor do Empréstimo",
        "Valor Líquido ao Cliente",
        "Data do Crédito ao Cliente",
        "Nome da Tabela",
    )
    required_fields = ("Número do Contrato", "Data da Proposta")

    def window_start(self, ctx: RuleContext) -> datetime:
        return (pd.Timestamp(ctx.local_now) - pd.DateOffset(months=WINDOW_MONTHS)).to_pydatetime()

    def proposal_moment(self, row: RawRow, ctx: RuleContext) -> datetime | None:
        """Proposal timestamp as naive local time; date-only cells start at midnight."""
        raw = ctx.value(row, "Data da Proposta")
        if isinstance(raw, datetime):
            if raw.tzinfo is not None:
                raw = raw.astimezone(ZoneInfo(ctx.settings.timezone)).replace(tzinfo=None)
            return pd.Timestamp(raw).to_pydatetime()
        proposal_date = parse_date(raw, ctx.settings.timezone)
        if proposal_date is None:
            return None
        return datetime.combine(proposal_date, datetime.min.time())

    def filter(self, row: RawRow, ctx: RuleContext) -> bool:
        moment = self.proposal_moment(row, ctx)
        return moment is not None and moment > self.window_start(ctx)

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        contract = ctx.value(row, "Número do Contrato")
        table = ctx.value(row, "Nome da Tabela")
        operation = ctx.text(row, "Tipo de Operação")
        proposal_type = _PROPOSAL_TYPES.classify(operation) or operation

        record["NUM_PROPOSTA"] = contract
        record["NUM_CONTRATO"] = contract
        record["DSC_PRODUTO"] = table
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = proposal_type
        record["DSC_SITUACAO_EMPRESTIMO"] = ctx.value(row, "Status")
        record["DAT_EMPRESTIMO"] = ctx.date(row, "Data da Proposta")
        record["NIC_CTR_USUARIO"] = ctx.value(row, "Login")
        record["COD_CPF_CLIENTE"] = ctx.value(row, "CPF")
        record["NOM_CLIENTE"] = ctx.value(row, "Nome")
        record["DAT_NASCIMENTO"] = ctx.settings.placeholder_birth_date
        record["QTD_PARCELA"] = ctx.value(row, "Prazo")
        record["VAL_PRESTACAO"] = ctx.currency(row, "Valor da Parcela")
        if proposal_type == ProposalType.PORTABILITY:
            # portability moves an existing balance; no new principal
            record["VAL_BRUTO"] = format_currency("0")
        else:
            record["VAL_BRUTO"] = ctx.currency(row, "Valor do Empréstimo")
        record["VAL_LIQUIDO"] = ctx.currency(row, "Valor Líquido ao Cliente")
        record["DAT_CREDITO"] = ctx.date(row, "Data do Crédito ao Cliente")
        record["PCL_TAXA_EMPRESTIMO"] = extract_interest_rate(table)
