from __future__ import annotations

from datetime import datetime
from pathlib import Path

from ecs_normalizer import Failure, Success, SystemId, process_workbook
from ecs_normalizer.config.loader import NormalizerSettings


def test_brb_workbook_end_to_end(temp_workdir: Path, write_workbook_file, fixed_now):
    path = write_workbook_file(
        temp_workdir / "data" / "brb.xlsx",
        ["ID", "TABELA", "PRODUTO", "STATUS", "CRIACAO AF", "AGENTE", "CPF", "NOME",
         "DATA DE NASCIMENTO", "PRAZO", "VALOR DE PARCELA", "VALOR PRINCIPAL", "VALOR LIQUIDO",
         "STATUS DATA", "TAXA MENSAL"],
        [
            ["A1", "INSS", "CONTRATO NOVO", "PAGO", datetime(2024, 6, 3), "MARIA", "111", "CLIENTE 1",
             datetime(1980, 5, 17), 84, 250.75, 10000, "9.500,00", datetime(2024, 6, 10), 1.85],
            ["A2", "INSS", "CONTRATO NOVO", "PAGO", datetime(2024, 6, 3), "LV", "222", "CLIENTE 2",
             None, 84, 100, 100, 100, None, 1.85],
        ],
    )
    result = process_workbook(path, SystemId.BRB_INCONTA, now=fixed_now)
    assert isinstance(result, Success)
    (record,) = result.records
    assert record["NUM_PROPOSTA"] == "A1"
    assert record["DAT_EMPRESTIMO"] == "03/06/2024"
    assert record["DAT_NASCIMENTO"] == "17/05/1980"
    assert record["VAL_PRESTACAO"] == "250,75"
    assert record["VAL_BRUTO"] == "10.000,00"
    assert record["VAL_LIQUIDO"] == "9.500,00"
    assert record["DAT_CREDITO"] == "10/06/2024"
    assert record["QTD_PARCELA"] == 84


def test_header_spelling_variants_resolve(temp_workdir: Path, write_workbook_file, fixed_now):
    path = write_workbook_file(
        temp_workdir / "data" / "unno.xlsx",
        ["ccb", "DATA NASCIMENTO", "valor liquido"],
        [["X1", "10/10/1990", "1,5"]],
    )
    result = process_workbook(path, "UNNO", now=fixed_now)
    assert isinstance(result, Success)
    record = result.records[0]
    assert record["NUM_PROPOSTA"] == "X1"
    assert record["DAT_NASCIMENTO"] == "10/10/1990"
    assert record["VAL_LIQUIDO"] == "1,50"


def test_corrupt_workbook_is_a_failure(temp_workdir: Path):
    bad = temp_workdir / "bad.xlsx"
    bad.write_bytes(b"garbage")
    result = process_workbook(bad, "PAN")
    assert isinstance(result, Failure)
    assert "Failed to read the Excel file" in result.error_message


def test_empty_sheet_is_a_failure(temp_workdir: Path, write_workbook_file):
    path = write_workbook_file(temp_workdir / "empty.xlsx", ["NUM_PROPOSTA"], [])
    result = process_workbook(path, "PAN")
    assert isinstance(result, Failure)
    assert "No data found" in result.error_message


def test_keep_na_strings_reaches_records(temp_workdir: Path, write_workbook_file, fixed_now):
    path = write_workbook_file(temp_workdir / "na.xlsx", ["NUM_PROPOSTA", "NOM_CLIENTE"], [["1", "NA"]])
    result = process_workbook(path, "PAN", now=fixed_now, keep_na_strings=["NA"])
    assert result.records[0]["NOM_CLIENTE"] == "NA"


def test_settings_timezone_applies_to_workbook(temp_workdir: Path, write_workbook_file):
    path = write_workbook_file(temp_workdir / "p.xlsx", ["NUM_PROPOSTA"], [["1"]])
    now = datetime.fromisoformat("2024-03-01T01:00:00+00:00")
    result = process_workbook(path, "PAN", now=now, settings=NormalizerSettings(timezone="America/Sao_Paulo"))
    assert result.records[0]["DAT_CTR_INCLUSAO"] == "29/02/2024"
