"""
Ingest module - CSV bulk import and validation.
"""
from app.services.ingest.csv_import import (
    CSV_TEMPLATE,
    CSV_TEMPLATE_FILENAME,
    REQUIRED_COLUMNS,
    BulkUploadResult,
    CsvFormatError,
    CsvImportPreview,
    CsvWorkoutRow,
    parse_csv,
    upload_rows,
    validate_row,
)

__all__ = [
    "CSV_TEMPLATE",
    "CSV_TEMPLATE_FILENAME",
    "REQUIRED_COLUMNS",
    "BulkUploadResult",
    "CsvFormatError",
    "CsvImportPreview",
    "CsvWorkoutRow",
    "parse_csv",
    "upload_rows",
    "validate_row",
]
