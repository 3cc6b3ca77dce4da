"""Domain models for the partner spreadsheet normalizer."""

from .canonical import CANONICAL_FIELDS, DATA_FIELDS, SPACER_FIELD, CanonicalRecord, ProposalType
from .error_record import ErrorRecord
from .processing_result import BatchResult, Failure, FileStat, ProcessingResult, Success
from .system import SystemId

__all__ = [
    # Canonical schema
    "CANONICAL_FIELDS",
    "DATA_FIELDS",
    "SPACER_FIELD",
    "CanonicalRecord",
    "ProposalType",
    "SystemId",
    # Results
    "Success",
    "Failure",
    "ProcessingResult",
    "BatchResult",
    "FileStat",
    "ErrorRecord",
]
