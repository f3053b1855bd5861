"""Statement export package."""

from finwise.exports.reports import (
    EXPORT_COLUMNS,
    PDF_FILENAME,
    SHEET_NAME,
    SPREADSHEET_FILENAME,
    build_export_rows,
    export_total,
    format_money,
    format_signed,
    report_lines,
    to_dataframe,
    to_pdf_bytes,
    to_spreadsheet_bytes,
)

__all__ = [
    "EXPORT_COLUMNS",
    "PDF_FILENAME",
    "SHEET_NAME",
    "SPREADSHEET_FILENAME",
    "build_export_rows",
    "export_total",
    "format_money",
    "format_signed",
    "report_lines",
    "to_dataframe",
    "to_pdf_bytes",
    "to_spreadsheet_bytes",
]
