"""Receipt extraction services package."""

from finwise.services.receipts.extractor import (
    ReceiptExtraction,
    ReceiptExtractionError,
    ReceiptExtractor,
    SimulatedReceiptExtractor,
    to_data_url,
)

__all__ = [
    "ReceiptExtraction",
    "ReceiptExtractionError",
    "ReceiptExtractor",
    "SimulatedReceiptExtractor",
    "to_data_url",
]
