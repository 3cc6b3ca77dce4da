from .reader import SheetData, WorkbookSource, read_workbook
from .writer import OUTPUT_SHEET_NAME, output_filename, write_workbook

__all__ = [
    "OUTPUT_SHEET_NAME",
    "SheetData",
    "WorkbookSource",
    "output_filename",
    "read_workbook",
    "write_workbook",
]
