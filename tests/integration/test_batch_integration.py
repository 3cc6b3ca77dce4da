from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from ecs_normalizer.config.loader import NormalizerConfig
from ecs_normalizer.logging.error_log import ErrorLogBuffer
from ecs_normalizer.models.system import SystemId
from ecs_normalizer.services.batch import BatchError, collect_inputs, process_files, unique_output_path


def test_collect_inputs_scans_directories(temp_workdir: Path):
    data = temp_workdir / "data"
    (data / "b.xlsx").write_bytes(b"")
    (data / "a.XLSX").write_bytes(b"")
    (data / "~$a.xlsx").write_bytes(b"")
    (data / "notes.txt").write_text("x")
    (data / "sub").mkdir()
    (data / "sub" / "c.xlsx").write_bytes(b"")
    assert [p.name for p in collect_inputs([data])] == ["a.XLSX", "b.xlsx"]


def test_collect_inputs_missing_path(temp_workdir: Path):
    with pytest.raises(BatchError):
        collect_inputs([temp_workdir / "missing"])


def test_unique_output_path(temp_workdir: Path):
    taken: set[Path] = set()
    first = unique_output_path(temp_workdir, "WORKBANKPAN01012024.xlsx", taken)
    second = unique_output_path(temp_workdir, "WORKBANKPAN01012024.xlsx", taken)
    assert first.name == "WORKBANKPAN01012024.xlsx"
    assert second.name == "WORKBANKPAN01012024 (2).xlsx"


def test_batch_partial_failure(temp_workdir: Path, write_workbook_file):
    data = temp_workdir / "data"
    write_workbook_file(data / "ok.xlsx", ["NUM_PROPOSTA", "NOM_BANCO"], [["1", "PAN"], ["2", "PAN"]])
    write_workbook_file(data / "no_key.xlsx", ["CPF"], [["1"]])
    logs = temp_workdir / "logs"

    result = process_files(
        collect_inputs([data]),
        SystemId.PAN,
        temp_workdir / "output",
        NormalizerConfig(),
        now=datetime(2024, 6, 5, 12),
        error_log=ErrorLogBuffer(logs_dir=logs),
    )

    assert result.success_files == 1
    assert result.failed_files == 1
    assert result.total_written_rows == 2
    assert (temp_workdir / "output" / "WORKBANKPAN05062024.xlsx").exists()

    stats = {s.file_name: s for s in result.file_stats}
    assert stats["ok.xlsx"].status == "success"
    assert stats["no_key.xlsx"].status == "failed"
    assert "NUM_PROPOSTA" in stats["no_key.xlsx"].error

    (log_file,) = logs.glob("errors-*.log")
    entries = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert entries[0]["file"] == "no_key.xlsx"
    assert entries[0]["system"] == "PAN"
    assert entries[0]["error_type"] == "PROCESSING_ERROR"


def test_batch_without_failures_writes_no_error_log(temp_workdir: Path, write_workbook_file):
    data = temp_workdir / "data"
    write_workbook_file(data / "one.xlsx", ["NUM_PROPOSTA"], [["1"]])
    write_workbook_file(data / "two.xlsx", ["NUM_PROPOSTA"], [["2"]])
    logs = temp_workdir / "run-logs"

    result = process_files(
        collect_inputs([data]),
        SystemId.V8DIGITAL,
        temp_workdir / "output",
        NormalizerConfig(),
        now=datetime(2024, 6, 5, 12),
        error_log=ErrorLogBuffer(logs_dir=logs),
    )

    assert result.success_files == 2
    assert result.failed_files == 0
    assert sorted(p.name for p in (temp_workdir / "output").iterdir()) == [
        "WORKBANKV8DIGITAL05062024 (2).xlsx",
        "WORKBANKV8DIGITAL05062024.xlsx",
    ]
    assert not logs.exists()


def test_batch_advances_progress_for_every_file(temp_workdir: Path, write_workbook_file):
    data = temp_workdir / "data"
    write_workbook_file(data / "ok.xlsx", ["NUM_PROPOSTA"], [["1"]])
    write_workbook_file(data / "no_key.xlsx", ["CPF"], [["1"]])
    mock_pbar = Mock()

    with patch("ecs_normalizer.services.progress.is_tty_enabled", return_value=True), \
         patch("ecs_normalizer.services.progress.tqdm", return_value=mock_pbar):
        result = process_files(
            collect_inputs([data]),
            SystemId.PAN,
            temp_workdir / "output",
            NormalizerConfig(),
            now=datetime(2024, 6, 5, 12),
            error_log=ErrorLogBuffer(logs_dir=temp_workdir / "logs"),
        )

    assert result.failed_files == 1
    assert mock_pbar.update.call_count == 2
    assert mock_pbar.set_postfix.call_args.kwargs == {"success": 1, "failed": 1, "rows": 1}
