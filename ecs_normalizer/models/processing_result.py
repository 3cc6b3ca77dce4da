from __future__ import annotations

import statistics
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from .canonical import CanonicalRecord

"""Result models for spreadsheet normalization.

``Success`` / ``Failure`` form the per-sheet result returned by the core.
``FileStat`` / ``BatchResult`` aggregate a CLI run over several workbooks and
feed the SUMMARY line.
"""

__all__ = [
    "Success",
    "Failure",
    "ProcessingResult",
    "FileStat",
    "BatchResult",
    "RowTimingAccumulator",
]


@dataclass(frozen=True)
class Success:
    """Complete, ordered result set for one sheet."""
    records: tuple[CanonicalRecord, ...]

    ok = True


@dataclass(frozen=True)
class Failure:
    """Single user-facing error message; no partial output."""
    error_message: str

    ok = False


ProcessingResult = Union[Success, Failure]


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics for a batch run."""
    file_name: str
    status: str  # success/failed
    written_rows: int
    elapsed_seconds: float
    output_path: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class BatchResult:
    """Aggregated results of a CLI batch run over one or more workbooks."""
    system: str
    success_files: int
    failed_files: int
    total_written_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    throughput_rows_per_sec: float
    file_stats: list[FileStat] | None = None
    avg_file_seconds: float = 0.0
    p95_file_seconds: float = 0.0


class RowTimingAccumulator:
    """Collects per-file elapsed times and summarises them."""

    def __init__(self) -> None:
        self.file_times: list[float] = []

    def add_file_time(self, elapsed_seconds: float) -> None:
        self.file_times.append(elapsed_seconds)

    def get_stats(self) -> tuple[int, float, float]:
        """Return ``(count, mean_seconds, p95_seconds)``."""
        if not self.file_times:
            return (0, 0.0, 0.0)

        count = len(self.file_times)
        mean = statistics.mean(self.file_times)
        if count == 1:
            p95 = self.file_times[0]
        else:
            p95 = statistics.quantiles(self.file_times, n=20, method="inclusive")[18]
        return (count, mean, p95)
