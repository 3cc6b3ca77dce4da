from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

"""Canonical output schema shared by every partner rule set.

The field order is part of the contract with the back-office import and is
defined exactly once here. ``SPACER_FIELD`` is a reserved slot that renders as
a column with an empty header; it never appears as a key in a record.
"""

__all__ = [
    "CANONICAL_FIELDS",
    "DATA_FIELDS",
    "SPACER_FIELD",
    "CanonicalRecord",
    "ProposalType",
    "FORM_TYPE_DIGITAL",
    "empty_record",
    "freeze_record",
]

SPACER_FIELD = "COLUNA_VAZIA_PLACEHOLDER"

CANONICAL_FIELDS: tuple[str, ...] = (
    "NUM_BANCO",
    "NOM_BANCO",
    "NUM_PROPOSTA",
    "NUM_CONTRATO",
    "DSC_TIPO_PROPOSTA_EMPRESTIMO",
    "COD_PRODUTO",
    "DSC_PRODUTO",
    "DAT_CTR_INCLUSAO",
    "DSC_SITUACAO_EMPRESTIMO",
    "DAT_EMPRESTIMO",
    "COD_EMPREGADOR",
    "DSC_CONVENIO",
    "COD_ORGAO",
    "NOM_ORGAO",
    "COD_PRODUTOR_VENDA",
    "NOM_PRODUTOR_VENDA",
    "NIC_CTR_USUARIO",
    "COD_CPF_CLIENTE",
    "NOM_CLIENTE",
    "DAT_NASCIMENTO",
    "NUM_IDENTIDADE",
    "NOM_LOGRADOURO",
    "NUM_PREDIO",
    "DSC_CMPLMNT_ENDRC",
    "NOM_BAIRRO",
    "NOM_LOCALIDADE",
    "SIG_UNIDADE_FEDERACAO",
    "COD_ENDRCMNT_PSTL",
    "NUM_TELEFONE",
    "NUM_TELEFONE_CELULAR",
    "NOM_MAE",
    "NOM_PAI",
    "NUM_BENEFICIO",
    "QTD_PARCELA",
    "VAL_PRESTACAO",
    "VAL_BRUTO",
    "VAL_SALDO_RECOMPRA",
    "VAL_SALDO_REFINANCIAMENTO",
    "VAL_LIQUIDO",
    SPACER_FIELD,
    "DAT_CREDITO",
    "DAT_CONFIRMACAO",
    "VAL_REPASSE",
    "PCL_COMISSAO",
    "VAL_COMISSAO",
    "COD_UNIDADE_EMPRESA",
    "COD_SITUACAO_EMPRESTIMO",
    "DAT_ESTORNO",
    "DSC_OBSERVACAO",
    "NUM_CPF_AGENTE",
    "NUM_OBJETO_ECT",
    "PCL_TAXA_EMPRESTIMO",
    "DSC_TIPO_FORMULARIO_EMPRESTIMO",
    "DSC_TIPO_CREDITO_EMPRESTIMO",
    "NOM_GRUPO_UNIDADE_EMPRESA",
    "COD_PROPOSTA_EMPRESTIMO",
    "COD_GRUPO_UNIDADE_EMPRESA",
    "COD_TIPO_FUNCAO",
    "COD_TIPO_PROPOSTA_EMPRESTIMO",
    "COD_LOJA_DIGITACAO",
    "VAL_SEGURO",
)

# Fields that carry data (everything except the spacer), in output order
DATA_FIELDS: tuple[str, ...] = tuple(f for f in CANONICAL_FIELDS if f != SPACER_FIELD)

_DATA_FIELD_SET = frozenset(DATA_FIELDS)

CanonicalRecord = Mapping[str, Any]

FORM_TYPE_DIGITAL = "DIGITAL"


class ProposalType:
    """Canonical vocabulary for DSC_TIPO_PROPOSTA_EMPRESTIMO."""

    NEW = "NOVO"
    REFIN = "REFIN"
    REFINANCING = "REFINANCIAMENTO"
    PORTABILITY = "PORTABILIDADE"
    PORTABILITY_REFIN = "PORTAB/REFIN"
    CARD = "CARTÃO"
    REPURCHASE = "RECOMPRA"


def empty_record() -> dict[str, Any]:
    """Return a fresh mutable dict with every data field set to ``""``."""
    return dict.fromkeys(DATA_FIELDS, "")


def freeze_record(values: dict[str, Any]) -> CanonicalRecord:
    """Validate keys and return a read-only view of ``values``.

    Raises:
        KeyError: if a key is not a canonical data field (programming error
            inside a rule set, never caused by input data)
    """
    unknown = set(values) - _DATA_FIELD_SET
    if unknown:
        raise KeyError(f"not canonical fields: {sorted(unknown)}")
    return MappingProxyType(values)
