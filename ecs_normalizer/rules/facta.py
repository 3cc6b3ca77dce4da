from __future__ import annotations

from typing import Any

from ..models.canonical import ProposalType
from ..models.system import SystemId
from ..normalize.headers import MISSING, HeaderLookup
from ..normalize.values import clean_text, format_currency, format_date, is_placeholder_date, strip_token_prefix
from .base import Classifier, RawRow, RuleContext, RuleSet

"""FACTA rule set.

FACTA headers drift between exports ("COD." / "COD PROPOSTA", trailing
notes). Columns are resolved by exact normalized key first and, only when
that misses, by the first header containing the expected name.
"""

__all__ = [
    "FactaRuleSet",
    "resolve_flexible",
]

USER_PREFIX = "SUB "

_PROPOSAL_TYPES = Classifier(
    exact={
        "REFIN / PORT": ProposalType.PORTABILITY_REFIN,
        "CARTÃO BENEFÍCIO": ProposalType.CARD,
    },
)


def resolve_flexible(lookup: HeaderLookup, key: str) -> str:
    """Literal header for ``key``: exact match, else first partial match."""
    header = lookup.resolve(key)
    if header is MISSING:
        header = lookup.find_partial(key)
    return header


class FactaRuleSet(RuleSet):
    system = SystemId.FACTA
    bank_code = 897
    bank_name = "FACTA"
    input_fields = (
        "COD",
        "TIPO PRODUTO",
        "PRODUTO",
        "STATUS",
        "DATA",
        "COD DIGITADOR NO BANCO",
        "CPF",
        "CLIENTE",
        "QTDE PARCELAS",
        "VALOR PARCELA",
        "VALOR BRUTO",
        "VALOR LIQUIDO",
        "DATA AVERBACAO",
    )
    required_fields = ("COD",)

    def missing_columns(self, lookup: HeaderLookup) -> list[str]:
        return [f for f in self.required_fields if resolve_flexible(lookup, f) is MISSING]

    def _get(self, row: RawRow, ctx: RuleContext, key: str) -> Any:
        header = resolve_flexible(ctx.lookup, key)
        if header is MISSING or header not in row:
            return ""
        return clean_text(row[header])

    def fill(self, record: dict[str, Any], row: RawRow, ctx: RuleContext) -> None:
        proposal = self._get(row, ctx, "COD")
        product_type = str(self._get(row, ctx, "TIPO PRODUTO")).strip().upper()

        record["NUM_PROPOSTA"] = proposal
        record["NUM_CONTRATO"] = proposal
        record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] = _PROPOSAL_TYPES.classify(product_type) or product_type
        record["DSC_PRODUTO"] = self._get(row, ctx, "PRODUTO")
        record["DSC_SITUACAO_EMPRESTIMO"] = self._get(row, ctx, "STATUS")
        record["DAT_EMPRESTIMO"] = format_date(self._get(row, ctx, "DATA"), ctx.settings.timezone)
        record["NIC_CTR_USUARIO"] = strip_token_prefix(self._get(row, ctx, "COD DIGITADOR NO BANCO"), USER_PREFIX)
        record["COD_CPF_CLIENTE"] = self._get(row, ctx, "CPF")
        record["NOM_CLIENTE"] = self._get(row, ctx, "CLIENTE")
        record["DAT_NASCIMENTO"] = ctx.settings.placeholder_birth_date
        record["QTD_PARCELA"] = self._get(row, ctx, "QTDE PARCELAS")
        record["VAL_PRESTACAO"] = format_currency(self._get(row, ctx, "VALOR PARCELA"))
        record["VAL_BRUTO"] = format_currency(self._get(row, ctx, "VALOR BRUTO"))
        record["VAL_LIQUIDO"] = format_currency(self._get(row, ctx, "VALOR LIQUIDO"))
        credit_date = format_date(self._get(row, ctx, "DATA AVERBACAO"), ctx.settings.timezone)
        if not is_placeholder_date(credit_date):
            record["DAT_CREDITO"] = credit_date
