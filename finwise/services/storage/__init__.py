"""
Storage Services Package

Provides the abstract key-value interface and the local implementations.
"""

from finwise.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from finwise.services.storage.local import (
    InMemoryStorage,
    JsonFileStorage,
)

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
