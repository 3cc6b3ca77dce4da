from __future__ import annotations

from ..models.processing_result import BatchResult

"""SUMMARY line rendering.

Format (single line, stable key order)::

    SUMMARY system=<id> files=<done>/<total> success=<n> failed=<n> rows=<n>
    elapsed_sec=<s> throughput_rps=<r>

The ``SUMMARY`` label itself is added by the logging formatter when the line
is emitted through ``log_summary``; ``render_summary_line`` returns the text
without it.
"""

__all__ = [
    "format_number",
    "render_summary_line",
]


def format_number(value: float) -> str:
    """Integers without a fraction, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if abs(value) < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(total_files: int, result: BatchResult) -> str:
    """Render the summary text for a batch run.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = BatchResult(
        ...     system="PAN", success_files=1, failed_files=0, total_written_rows=10,
        ...     start_time=start, end_time=end, elapsed_seconds=2.0,
        ...     throughput_rows_per_sec=5.0,
        ... )
        >>> render_summary_line(1, result)
        'system=PAN files=1/1 success=1 failed=0 rows=10 elapsed_sec=2 throughput_rps=5'
    """
    done = result.success_files + result.failed_files
    return (
        f"system={result.system} "
        f"files={done}/{total_files} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"rows={result.total_written_rows} "
        f"elapsed_sec={format_number(result.elapsed_seconds)} "
        f"throughput_rps={format_number(result.throughput_rows_per_sec)}"
    )
