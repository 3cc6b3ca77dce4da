from __future__ import annotations

"""Fatal error taxonomy for spreadsheet normalization.

Every exception here aborts the whole sheet. They are raised inside the core
and converted exactly once into a ``Failure`` by ``services.processor``;
field-level problems never raise.
"""

__all__ = [
    "NormalizationError",
    "WorkbookReadError",
    "NoDataError",
    "NoMatchingRowsError",
    "UnknownSystemError",
    "MissingColumnsError",
]


class NormalizationError(Exception):
    """Base exception for fatal normalization errors."""


class WorkbookReadError(NormalizationError):
    """Raised when the uploaded file cannot be decoded as a workbook."""


class NoDataError(NormalizationError):
    """Raised when the sheet has no non-blank data rows."""

    def __init__(self, message: str = "No data found in the Excel sheet. Please ensure it is not empty.") -> None:
        super().__init__(message)


class NoMatchingRowsError(NormalizationError):
    """Raised when a rule set keeps zero rows after its own filter."""

    def __init__(
        self,
        message: str = (
            "No data was extracted. Please check if the data rows are empty, "
            "if the column headers are correct, or if they match the specified "
            "filters (e.g., date range)."
        ),
    ) -> None:
        super().__init__(message)


class UnknownSystemError(NormalizationError):
    """Raised when the system identifier is outside the closed set."""

    def __init__(self, system: object) -> None:
        self.system = system
        super().__init__(f"Unknown system: {system}")


class MissingColumnsError(NormalizationError):
    """Raised when a structurally required column is absent from the header row."""

    def __init__(self, system: str, missing: list[str]) -> None:
        self.system = system
        self.missing = missing
        super().__init__(
            f"The spreadsheet is missing required columns for {system}: {', '.join(missing)}. "
            "Please check the column headers."
        )
