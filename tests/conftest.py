# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from ecs_normalizer.logging.init import reset_logging
from ecs_normalizer.normalize.headers import HeaderLookup
from ecs_normalizer.rules.base import RuleContext

# Fixed clock used across tests: 15/06/2024 12:00 UTC
FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("ECS_NORMALIZER_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./output
timezone: America/Sao_Paulo
placeholder_birth_date: 01/01/1990
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "normalizer.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def make_ctx() -> Callable[..., RuleContext]:
    """Build a RuleContext for a header list with the fixed clock."""
    def _make(headers: Sequence[str], **kwargs: Any) -> RuleContext:
        kwargs.setdefault("now", FIXED_NOW)
        return RuleContext(lookup=HeaderLookup.from_headers(headers), **kwargs)
    return _make


@pytest.fixture()
def write_workbook_file() -> Callable[..., Path]:
    """Write ``rows`` under ``headers`` to an .xlsx file (row 1 = header)."""
    def _write(path: Path, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        df = pd.DataFrame([list(headers), *[list(r) for r in rows]])
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Planilha1", index=False, header=False)
        return path
    return _write
