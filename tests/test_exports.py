"""
Tests for PDF and spreadsheet statement exports.
"""

import pytest
from datetime import date, datetime, timedelta
from io import BytesIO

import pandas as pd

from finwise.exports import (
    EXPORT_COLUMNS,
    SHEET_NAME,
    build_export_rows,
    export_total,
    format_money,
    report_lines,
    to_pdf_bytes,
    to_spreadsheet_bytes,
)
from finwise.models.records import Transaction, TransactionKind


def tx(amount, kind="expense", description="Groceries", category="Groceries", on=date(2024, 3, 2)):
    return Transaction(
        amount=amount,
        kind=TransactionKind(kind),
        category=category,
        description=description,
        date=on,
    )


@pytest.fixture
def transactions():
    return [
        tx(1000, "income", "Salary", "Other", date(2024, 3, 1)),
        tx(200, description="Lunch (work)"),
    ]


class TestExportRows:
    """Tests for the shared export rows."""

    def test_rows_in_list_order_with_running_total(self, transactions):
        """Test formatting and the running signed total."""
        rows = build_export_rows(transactions)
        assert rows[0] == {
            "Date": "03/01/2024",
            "Description": "Salary",
            "Category": "Other",
            "Amount": "+$1000.00",
            "Running Total": "$1000.00",
        }
        assert rows[1]["Amount"] == "-$200.00"
        assert rows[1]["Running Total"] == "$800.00"

    def test_negative_running_total(self):
        """Test that a balance below zero is shown with a minus sign."""
        rows = build_export_rows([tx(12.5)])
        assert rows[0]["Running Total"] == "-$12.50"

    def test_export_total(self, transactions):
        """Test the signed total of an export."""
        assert export_total(transactions) == 800
        assert export_total([]) == 0

    def test_format_money(self):
        """Test money formatting."""
        assert format_money(3) == "$3.00"
        assert format_money(-0.5, "€") == "-€0.50"


class TestSpreadsheet:
    """Tests for the XLSX export."""

    def test_workbook_has_expected_sheet_and_columns(self, transactions):
        """Test that the workbook reads back with the export columns."""
        data = to_spreadsheet_bytes(transactions)
        df = pd.read_excel(BytesIO(data), sheet_name=SHEET_NAME, dtype=str)
        assert list(df.columns) == EXPORT_COLUMNS
        assert df["Description"].tolist() == ["Salary", "Lunch (work)"]
        assert df["Running Total"].tolist() == ["$1000.00", "$800.00"]

    def test_empty_workbook_keeps_header(self):
        """Test exporting no transactions."""
        df = pd.read_excel(BytesIO(to_spreadsheet_bytes([])), sheet_name=SHEET_NAME)
        assert list(df.columns) == EXPORT_COLUMNS
        assert len(df) == 0


class TestPdf:
    """Tests for the PDF export."""

    def test_report_lines(self, transactions):
        """Test the text layout of the document."""
        lines = report_lines(transactions, datetime(2024, 3, 5, 14, 30))
        assert lines[0] == "FinWise AI - Expense Report"
        assert lines[1] == "Generated: Mar 05, 2024 14:30"
        assert lines[3].startswith("Date")
        assert "Running Total" in lines[3]
        assert lines[-1] == "Total: $800.00"

    def test_long_descriptions_are_truncated_in_table(self):
        """Test that table columns stay aligned."""
        long_text = "A very long description that will not fit in the column"
        lines = report_lines([tx(5, description=long_text)], datetime(2024, 3, 5))
        assert long_text not in lines[4]
        assert "A very long description" in lines[4]

    def test_pdf_bytes(self, transactions):
        """Test that a well-formed PDF is produced."""
        data = to_pdf_bytes(transactions, datetime(2024, 3, 5, 14, 30))
        assert data.startswith(b"%PDF-1.4")
        assert data.rstrip().endswith(b"%%EOF")
        assert b"FinWise AI - Expense Report" in data
        assert b"Total: $800.00" in data
        assert b"Lunch \\(work\\)" in data
        assert b"/Count 1" in data

    def test_pdf_paginates(self):
        """Test that long reports span several pages."""
        many = [tx(1, on=date(2024, 1, 1) + timedelta(days=i)) for i in range(100)]
        data = to_pdf_bytes(many, datetime(2024, 5, 1))
        assert b"/Count 3" in data

    def test_empty_pdf(self):
        """Test exporting no transactions."""
        data = to_pdf_bytes([], datetime(2024, 3, 5))
        assert b"Total: $0.00" in data
