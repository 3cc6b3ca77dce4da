"""Partner spreadsheet normalizer for the ECS back-office import.

Public entry points are re-exported here; see ``services.processor``.
"""

from .models.processing_result import Failure, ProcessingResult, Success
from .models.system import SystemId
from .services.processor import process_spreadsheet, process_workbook

__all__ = [
    "Failure",
    "ProcessingResult",
    "Success",
    "SystemId",
    "process_spreadsheet",
    "process_workbook",
]

__version__ = "0.3.0"
