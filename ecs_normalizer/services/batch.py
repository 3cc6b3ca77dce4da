from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from ..config.loader import NormalizerConfig
from ..excel.writer import output_filename, write_workbook
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.processing_result import BatchResult, Failure, FileStat, RowTimingAccumulator
from ..models.system import SystemId
from .processor import process_workbook
from .progress import ProgressTracker

"""Batch orchestration for the command-line shell.

Each workbook is normalized independently: a failing file is logged, recorded
in the error log and skipped, and the run continues with the next one. The
error log is flushed once at the end of the run.
"""

__all__ = [
    "BatchError",
    "FileStatus",
    "collect_inputs",
    "unique_output_path",
    "process_files",
]

logger = logging.getLogger(__name__)


class BatchError(Exception):
    """Fatal error that prevents a batch run from starting."""


class FileStatus:
    SUCCESS = "success"
    FAILED = "failed"


def collect_inputs(paths: Iterable[Path]) -> list[Path]:
    """Expand ``paths`` into ``.xlsx`` files (directories non-recursive).

    Raises:
        BatchError: if a path does not exist or a directory can't be read
    """
    files: list[Path] = []
    for path in paths:
        if not path.exists():
            raise BatchError(f"path not found: {path}")
        if path.is_dir():
            try:
                found = sorted(p for p in path.iterdir() if p.is_file() and p.suffix.lower() == ".xlsx")
            except OSError as e:
                raise BatchError(f"error reading directory {path}: {e}") from e
            # skip lock files left by spreadsheet editors
            files.extend(p for p in found if not p.name.startswith("~$"))
        else:
            files.append(path)
    return files


def unique_output_path(directory: Path, file_name: str, taken: set[Path]) -> Path:
    """``directory/file_name``, suffixed `` (2)``, `` (3)``... when already used."""
    candidate = directory / file_name
    stem, suffix = candidate.stem, candidate.suffix
    n = 2
    while candidate in taken or candidate.exists():
        candidate = directory / f"{stem} ({n}){suffix}"
        n += 1
    taken.add(candidate)
    return candidate


def process_files(
    files: list[Path],
    system: SystemId,
    output_dir: Path,
    config: NormalizerConfig,
    now: datetime | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> BatchResult:
    """Normalize every workbook in ``files`` and write one output per file."""
    start_time = datetime.now(UTC)
    if now is None:
        now = start_time
    if error_log is None:
        error_log = ErrorLogBuffer()

    file_stats: list[FileStat] = []
    timings = RowTimingAccumulator()
    taken: set[Path] = set()
    local_now = now.astimezone(ZoneInfo(config.settings.timezone)) if now.tzinfo else now
    success_count = 0
    failed_count = 0
    total_rows = 0

    with ProgressTracker(len(files)) as progress:
        for file_path in files:
            progress.start_file(file_path)
            file_start = datetime.now(UTC)

            result = process_workbook(
                file_path,
                system,
                now=now,
                settings=config.settings,
                keep_na_strings=config.keep_na_strings,
            )

            output_path: Path | None = None
            error: str | None = None
            error_type = ""
            written = 0
            if isinstance(result, Failure):
                error = result.error_message
                error_type = "PROCESSING_ERROR"
            else:
                first_bank = result.records[0].get("NOM_BANCO") if result.records else None
                name = output_filename(first_bank, local_now)
                try:
                    output_path = write_workbook(result.records, unique_output_path(output_dir, name, taken))
                    written = len(result.records)
                except OSError as e:
                    error = f"failed to write output: {e}"
                    error_type = "WRITE_ERROR"

            elapsed = (datetime.now(UTC) - file_start).total_seconds()
            timings.add_file_time(elapsed)

            if error is None:
                success_count += 1
                total_rows += written
                logger.info("file=%s rows=%d output=%s", file_path.name, written, output_path)
            else:
                failed_count += 1
                logger.error("file=%s %s", file_path.name, error)
                error_log.append(
                    ErrorRecord.create(
                        file=file_path.name,
                        system=system.value,
                        error_type=error_type,
                        message=error,
                    )
                )

            progress.set_postfix(success=success_count, failed=failed_count, rows=total_rows)
            progress.finish_file()

            file_stats.append(
                FileStat(
                    file_name=file_path.name,
                    status=FileStatus.SUCCESS if error is None else FileStatus.FAILED,
                    written_rows=written,
                    elapsed_seconds=elapsed,
                    output_path=str(output_path) if output_path is not None else None,
                    error=error,
                )
            )

    log_path = error_log.flush()
    if log_path is not None:
        logger.info("error log written: %s", log_path)

    end_time = datetime.now(UTC)
    elapsed_seconds = (end_time - start_time).total_seconds()
    throughput_rps = total_rows / elapsed_seconds if elapsed_seconds > 0 else 0.0
    _, avg_seconds, p95_seconds = timings.get_stats()

    return BatchResult(
        system=system.value,
        success_files=success_count,
        failed_files=failed_count,
        total_written_rows=total_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=elapsed_seconds,
        throughput_rows_per_sec=throughput_rps,
        file_stats=file_stats,
        avg_file_seconds=avg_seconds,
        p95_file_seconds=p95_seconds,
    )
