from __future__ import annotations

import dataclasses

import pytest

from ecs_normalizer.errors import UnknownSystemError
from ecs_normalizer.models.canonical import CANONICAL_FIELDS, DATA_FIELDS, SPACER_FIELD, empty_record, freeze_record
from ecs_normalizer.models.processing_result import Failure, FileStat, Success
from ecs_normalizer.models.system import SystemId


def test_canonical_field_list():
    assert len(CANONICAL_FIELDS) == 61
    assert len(set(CANONICAL_FIELDS)) == 61
    assert CANONICAL_FIELDS[0] == "NUM_BANCO"
    assert CANONICAL_FIELDS[-1] == "VAL_SEGURO"
    assert SPACER_FIELD not in DATA_FIELDS
    assert len(DATA_FIELDS) == 60


def test_empty_record_is_fresh_each_time():
    a = empty_record()
    a["NUM_BANCO"] = 1
    assert empty_record()["NUM_BANCO"] == ""


def test_freeze_record_rejects_unknown_keys():
    with pytest.raises(KeyError):
        freeze_record({"NOT_A_FIELD": 1})


def test_results_are_immutable():
    success = Success(records=())
    failure = Failure(error_message="boom")
    assert success.ok and not failure.ok
    with pytest.raises(dataclasses.FrozenInstanceError):
        failure.error_message = "other"  # type: ignore[misc]


def test_file_stat_defaults():
    stat = FileStat(file_name="a.xlsx", status="success", written_rows=3, elapsed_seconds=0.5)
    assert stat.output_path is None
    assert stat.error is None


def test_system_id_parse_and_text():
    assert SystemId.parse("2TECH") is SystemId.TECH2
    assert SystemId.parse(SystemId.PAN) is SystemId.PAN
    assert str(SystemId.PRATA_DIGITAL) == "PRATA DIGITAL"
    assert len(SystemId) == 20
    with pytest.raises(UnknownSystemError):
        SystemId.parse("ITAU")
