"""
Statement Exports

Both export forms are built from the same rows, so column order and
formatting always agree:

    Date (MM/DD/YYYY) | Description | Category | Amount (+$x.xx / -$x.xx) | Running Total

- Spreadsheet: XLSX via pandas + openpyxl, one sheet named 'Expenses'
- Document: a text-only PDF (Courier, so the columns line up) with a title,
  the generation time, the table and the final total
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from io import BytesIO
from typing import Optional

import pandas as pd

from finwise.analytics.aggregation import running_totals
from finwise.models.records import Transaction

EXPORT_COLUMNS = ["Date", "Description", "Category", "Amount", "Running Total"]

SPREADSHEET_FILENAME = "finwise-expenses.xlsx"
PDF_FILENAME = "finwise-expenses.pdf"
SHEET_NAME = "Expenses"
REPORT_TITLE = "FinWise AI - Expense Report"

# Column widths of the PDF table, in characters
_PDF_WIDTHS = (12, 26, 20, 14, 14)
_PDF_LINES_PER_PAGE = 48


def format_money(value: float, currency: str = "$") -> str:
    """Two-decimal amount; negatives as -$12.50."""
    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{abs(value):.2f}"


def format_signed(transaction: Transaction, currency: str = "$") -> str:
    """+$x.xx for income, -$x.xx for expenses."""
    sign = "+" if transaction.is_income else "-"
    return f"{sign}{currency}{transaction.amount:.2f}"


def build_export_rows(
    transactions: Sequence[Transaction],
    currency: str = "$",
) -> list[dict[str, str]]:
    """One row per transaction, in the given order, with a running signed total."""
    balances = running_totals(transactions)
    return [
        {
            "Date": t.date.strftime("%m/%d/%Y"),
            "Description": t.description,
            "Category": t.category,
            "Amount": format_signed(t, currency),
            "Running Total": format_money(balance, currency),
        }
        for t, balance in zip(transactions, balances)
    ]


def export_total(transactions: Iterable[Transaction]) -> float:
    """Signed total of an export: income minus expenses."""
    return sum((t.signed_amount for t in transactions), 0.0)


def to_dataframe(rows: list[dict[str, str]]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def to_spreadsheet_bytes(
    transactions: Sequence[Transaction],
    currency: str = "$",
) -> bytes:
    """XLSX workbook with one 'Expenses' sheet."""
    df = to_dataframe(build_export_rows(transactions, currency))
    out = BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return out.getvalue()


# =============================================================================
# PDF
# =============================================================================

def _pdf_escape(text: str) -> str:
    return str(text).replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _fit(text: str, width: int) -> str:
    text = str(text)
    if len(text) >= width:
        text = text[: width - 1]
    return text.ljust(width)


def _table_line(values: Sequence[str]) -> str:
    return "".join(_fit(value, width) for value, width in zip(values, _PDF_WIDTHS)).rstrip()


def report_lines(
    transactions: Sequence[Transaction],
    generated_at: datetime,
    currency: str = "$",
) -> list[str]:
    """The document report as plain text lines."""
    rows = build_export_rows(transactions, currency)
    lines = [
        REPORT_TITLE,
        f"Generated: {generated_at.strftime('%b %d, %Y %H:%M')}",
        "",
        _table_line(EXPORT_COLUMNS),
    ]
    lines.extend(_table_line([row[c] for c in EXPORT_COLUMNS]) for row in rows)
    lines.append("")
    lines.append(f"Total: {format_money(export_total(transactions), currency)}")
    return lines


def _pdf_from_lines(lines: list[str]) -> bytes:
    """Minimal multi-page text PDF, one Courier line per entry."""
    pages = [
        lines[i: i + _PDF_LINES_PER_PAGE]
        for i in range(0, len(lines), _PDF_LINES_PER_PAGE)
    ] or [[]]

    objects: list[Optional[str]] = [None, None]  # 1: Catalog, 2: Pages

    def add(payload: str) -> int:
        objects.append(payload)
        return len(objects)

    font_id = add("<< /Type /Font /Subtype /Type1 /BaseFont /Courier >>")
    page_ids = []

    for chunk in pages:
        ops = ["BT", "/F1 9 Tf", "40 800 Td"]
        for idx, line in enumerate(chunk):
            if idx > 0:
                ops.append("0 -16 Td")
            ops.append(f"({_pdf_escape(line)}) Tj")
        ops.append("ET")
        stream = "\n".join(ops)
        length = len(stream.encode("latin-1", errors="replace"))
        content_id = add(f"<< /Length {length} >>\nstream\n{stream}\nendstream")
        page_ids.append(add(
            "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 595 842] "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> "
            f"/Contents {content_id} 0 R >>"
        ))

    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
    objects[0] = "<< /Type /Catalog /Pages 2 0 R >>"
    objects[1] = f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>"

    payload = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
    offsets = []
    for number, obj in enumerate(objects, start=1):
        offsets.append(len(payload))
        payload.extend(f"{number} 0 obj\n".encode("ascii"))
        payload.extend(obj.encode("latin-1", errors="replace"))
        payload.extend(b"\nendobj\n")

    xref_offset = len(payload)
    payload.extend(f"xref\n0 {len(objects) + 1}\n".encode("ascii"))
    payload.extend(b"0000000000 65535 f \n")
    for offset in offsets:
        payload.extend(f"{offset:010d} 00000 n \n".encode("ascii"))
    payload.extend(
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF".encode("ascii")
    )
    return bytes(payload)


def to_pdf_bytes(
    transactions: Sequence[Transaction],
    generated_at: Optional[datetime] = None,
    currency: str = "$",
) -> bytes:
    """The document report as PDF bytes."""
    return _pdf_from_lines(report_lines(transactions, generated_at or datetime.now(), currency))
