from __future__ import annotations

from datetime import datetime

import pandas as pd
import pytest

from ecs_normalizer.errors import MissingColumnsError
from ecs_normalizer.rules.brb import BrbIncontaRuleSet
from ecs_normalizer.rules.crefisa import GlmCrefisacpRuleSet, Tech2RuleSet
from ecs_normalizer.rules.facta import FactaRuleSet, resolve_flexible
from ecs_normalizer.rules.neocredito import NeocreditoRuleSet
from ecs_normalizer.rules.qualibanking import QualibankingRuleSet

BRB_HEADERS = ["ID", "TABELA", "PRODUTO", "STATUS", "AGENTE", "STATUS DATA", "TAXA MENSAL", "DATA DE NASCIMENTO"]


def test_brb_drops_lv_agent_rows(make_ctx):
    ctx = make_ctx(BRB_HEADERS)
    rows = [
        {"ID": "1", "AGENTE": " lv "},
        {"ID": "2", "AGENTE": "LV"},
        {"ID": "3", "AGENTE": "LVX"},
        {"ID": "4", "AGENTE": None},
    ]
    records = BrbIncontaRuleSet().process(rows, ctx)
    assert [r["NUM_PROPOSTA"] for r in records] == ["3", "4"]


def test_brb_maps_row(make_ctx):
    ctx = make_ctx(BRB_HEADERS)
    rule_set = BrbIncontaRuleSet()
    paid = rule_set.map(
        {"ID": "88", "TABELA": "INSS", "PRODUTO": "CONTRATO NOVO", "STATUS": "PAGO",
         "AGENTE": "JOANA", "STATUS DATA": "03/06/2024", "TAXA MENSAL": "1.85",
         "DATA DE NASCIMENTO": "02/02/1970"},
        ctx,
    )
    assert paid["NUM_BANCO"] == 7056
    assert paid["NOM_BANCO"] == "BRB - INCONTA"
    assert paid["NUM_CONTRATO"] == "88"
    assert paid["DSC_PRODUTO"] == "INSS"
    assert paid["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == "NOVO"
    assert paid["DAT_CREDITO"] == "03/06/2024"
    assert paid["PCL_TAXA_EMPRESTIMO"] == "1,85"
    assert paid["DAT_NASCIMENTO"] == "02/02/1970"

    pending = rule_set.map(
        {"ID": "89", "PRODUTO": "REFIN", "STATUS": "EM ANALISE", "STATUS DATA": "03/06/2024"}, ctx
    )
    assert pending["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == "REFIN"
    assert pending["DAT_CREDITO"] == ""
    assert pending["DAT_NASCIMENTO"] == "01/01/1990"


@pytest.mark.parametrize(
    "table,expected",
    [
        ("INSS NOVO 1,80", "NOVO"),
        ("REFIN INSS", "REFIN"),
        ("PORTABILIDADE", "PORTABILIDADE"),
    ],
)
def test_glm_classifies_by_table(make_ctx, table, expected):
    ctx = make_ctx(["PROPOSTA", "TABELA", "TAXA MENSAL"])
    record = GlmCrefisacpRuleSet().map({"PROPOSTA": "7", "TABELA": table, "TAXA MENSAL": 2.1}, ctx)
    assert record["NUM_BANCO"] == 789
    assert record["NOM_BANCO"] == "CREFISACP"
    assert record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == expected
    assert record["DSC_PRODUTO"] == table
    assert record["PCL_TAXA_EMPRESTIMO"] == "2,10"
    assert record["DAT_NASCIMENTO"] == "01/01/1990"


def test_2tech_maps_row(make_ctx):
    headers = [
        "NUMERO_ADE", "TIPO CONTRATO", "SIT_BANCO", "SIT_PAGAMENTO_CLIENTE",
        "LOGIN_SUB_USUARIO", "CONVENIO", "TABELA",
    ]
    ctx = make_ctx(headers)
    rule_set = Tech2RuleSet()
    record = rule_set.map(
        {"NUMERO_ADE": "'000123", "TIPO CONTRATO": "027 - Refinanciamento", "SIT_BANCO": "APROVADO",
         "SIT_PAGAMENTO_CLIENTE": "pago ao cliente", "LOGIN_SUB_USUARIO": "'joao.s",
         "CONVENIO": "INSS", "TABELA": "T1"},
        ctx,
    )
    assert record["NUM_BANCO"] == 789
    assert record["NUM_PROPOSTA"] == record["NUM_CONTRATO"] == "000123"
    assert record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == "REFINANCIAMENTO"
    assert record["DSC_SITUACAO_EMPRESTIMO"] == "PAGO AO CLIENTE"
    assert record["NIC_CTR_USUARIO"] == "joao.s"
    assert record["DSC_PRODUTO"] == "INSS-T1"

    other = rule_set.map(
        {"NUMERO_ADE": "5", "TIPO CONTRATO": " 099 - Outro ", "SIT_BANCO": "APROVADO"}, ctx
    )
    assert other["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == "099 - Outro"
    assert other["DSC_SITUACAO_EMPRESTIMO"] == "APROVADO"
    assert other["DSC_PRODUTO"] == "-"


QUALI_HEADERS = ["Número do Contrato", "Tipo de Operação", "Data da Proposta", "Valor do Empréstimo", "Nome da Tabela"]


def test_qualibanking_two_month_window(make_ctx):
    # fixed now is 15/06/2024: the window starts after 15/04/2024
    ctx = make_ctx(QUALI_HEADERS)
    rows = [
        {"Número do Contrato": "in", "Data da Proposta": "16/04/2024"},
        {"Número do Contrato": "edge", "Data da Proposta": "15/04/2024"},
        {"Número do Contrato": "old", "Data da Proposta": "01/01/2024"},
        {"Número do Contrato": "dt", "Data da Proposta": datetime(2024, 6, 1, 9, 30)},
        {"Número do Contrato": "serial", "Data da Proposta": 45444},
        {"Número do Contrato": "none", "Data da Proposta": None},
    ]
    records = QualibankingRuleSet().process(rows, ctx)
    assert [r["NUM_PROPOSTA"] for r in records] == ["in", "dt", "serial"]


def test_qualibanking_window_compares_time_of_day(make_ctx):
    # fixed now is 15/06/2024 12:00: the window starts at 15/04/2024 12:00
    ctx = make_ctx(QUALI_HEADERS)
    rows = [
        {"Número do Contrato": "after", "Data da Proposta": datetime(2024, 4, 15, 13, 0)},
        {"Número do Contrato": "before", "Data da Proposta": datetime(2024, 4, 15, 11, 0)},
        {"Número do Contrato": "stamp", "Data da Proposta": pd.Timestamp("2024-04-15 12:00:01")},
    ]
    records = QualibankingRuleSet().process(rows, ctx)
    assert [r["NUM_PROPOSTA"] for r in records] == ["after", "stamp"]


@pytest.mark.parametrize(
    "operation,expected,gross",
    [
        ("Refin da Portabilidade", "PORTAB/REFIN", "10.000,00"),
        ("REFINANCIAMENTO DA PORTABILIDADE", "PORTAB/REFIN", "10.000,00"),
        ("PORTABILIDADE + REFIN", "PORTABILIDADE", "0,00"),
        (" Novo ", "Novo", "10.000,00"),
    ],
)
def test_qualibanking_operation_types(make_ctx, operation, expected, gross):
    ctx = make_ctx(QUALI_HEADERS)
    record = QualibankingRuleSet().map(
        {"Número do Contrato": "1", "Tipo de Operação": operation, "Data da Proposta": "01/06/2024",
         "Valor do Empréstimo": "10000", "Nome da Tabela": "INSS 1,66% 84X"},
        ctx,
    )
    assert record["NUM_BANCO"] == 22
    assert record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == expected
    assert record["VAL_BRUTO"] == gross
    assert record["PCL_TAXA_EMPRESTIMO"] == "1,66"
    assert record["DSC_PRODUTO"] == "INSS 1,66% 84X"


def test_qualibanking_requires_proposal_date_column(make_ctx):
    ctx = make_ctx(["Número do Contrato"])
    with pytest.raises(MissingColumnsError):
        QualibankingRuleSet().process([{"Número do Contrato": "1"}], ctx)


@pytest.mark.parametrize(
    "operation,expected",
    [
        ("RECOMPRA DE DIVIDA", "RECOMPRA"),
        ("CARTAO NOVO", "CARTÃO"),
        ("MARGEM LIVRE", "NOVO"),
        ("Saque", "Saque"),
    ],
)
def test_neocredito_operation_types(make_ctx, operation, expected):
    ctx = make_ctx(["PROPOSTA", "TIPO OPERACAO", "CONVENIO", "TABELA", "USUARIO", "PMT"])
    record = NeocreditoRuleSet().map(
        {"PROPOSTA": "3", "TIPO OPERACAO": operation, "CONVENIO": "GOV SP", "TABELA": "T9",
         "USUARIO": "taina lucio da lu", "PMT": "250,5"},
        ctx,
    )
    assert record["NUM_BANCO"] == 410
    assert record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == expected
    assert record["DSC_PRODUTO"] == "GOV SP-T9"
    assert record["NIC_CTR_USUARIO"] == "TAINA LUCIO DA LUZ"
    assert record["VAL_PRESTACAO"] == "250,50"


FACTA_HEADERS = ["COD", "TIPO PRODUTO", "PRODUTO", "COD DIGITADOR NO BANCO", "DATA AVERBACAO", "VALOR BRUTO"]


def test_facta_exact_match_beats_partial(make_ctx):
    ctx = make_ctx(FACTA_HEADERS)
    assert resolve_flexible(ctx.lookup, "PRODUTO") == "PRODUTO"
    record = FactaRuleSet().map(
        {"COD": "10", "TIPO PRODUTO": "refin / port", "PRODUTO": "INSS FLEX",
         "COD DIGITADOR NO BANCO": "SUB maria", "DATA AVERBACAO": 1, "VALOR BRUTO": 3000},
        ctx,
    )
    assert record["NUM_BANCO"] == 897
    assert record["NUM_PROPOSTA"] == record["NUM_CONTRATO"] == "10"
    assert record["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == "PORTAB/REFIN"
    assert record["DSC_PRODUTO"] == "INSS FLEX"
    assert record["NIC_CTR_USUARIO"] == "maria"
    assert record["DAT_CREDITO"] == ""
    assert record["VAL_BRUTO"] == "3.000,00"


def test_facta_partial_fallback_for_drifting_headers(make_ctx):
    ctx = make_ctx(["COD. PROPOSTA", "TIPO PRODUTO", "DATA AVERBACAO (PAGTO)"])
    rule_set = FactaRuleSet()
    records = rule_set.process(
        [{"COD. PROPOSTA": "55", "TIPO PRODUTO": "Cartão Benefício", "DATA AVERBACAO (PAGTO)": "05/06/2024"}],
        ctx,
    )
    assert records[0]["NUM_PROPOSTA"] == "55"
    assert records[0]["DSC_TIPO_PROPOSTA_EMPRESTIMO"] == "CARTÃO"
    assert records[0]["DAT_CREDITO"] == "05/06/2024"


def test_facta_missing_code_column(make_ctx):
    ctx = make_ctx(["CPF", "CLIENTE"])
    with pytest.raises(MissingColumnsError):
        FactaRuleSet().process([{"CPF": "1", "CLIENTE": "X"}], ctx)
