"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a plain key-value store of serialized
strings, one key per collection. This allows us to:
1. Keep JSON files on disk for the app
2. Use in-memory storage for testing
3. Swap in another backend later without touching the record store

Values are opaque strings. Serialization belongs to the record store.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for durable key-value storage.

    Writes replace the whole value for a key atomically.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None when the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageWriteError: If the value could not be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys in sorted order."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored value could not be read."""
    pass


class StorageWriteError(StorageError):
    """Value could not be written to storage."""
    pass
