"""Services package."""

from finwise.services.receipts import (
    ReceiptExtraction,
    ReceiptExtractionError,
    ReceiptExtractor,
    SimulatedReceiptExtractor,
)
from finwise.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Receipt services
    "ReceiptExtraction",
    "ReceiptExtractionError",
    "ReceiptExtractor",
    "SimulatedReceiptExtractor",
    # Storage services
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
