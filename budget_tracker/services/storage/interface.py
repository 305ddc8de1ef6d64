"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for storage.
This allows us to:
1. Keep data in a local JSON file for the desktop/Streamlit app
2. Use in-memory storage for testing
3. Swap in another backend later without touching the store

The interface is intentionally tiny - string keys, string values.
Serialization is the persistence adapter's job, not the backend's.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for a local key-value store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the raw value stored under a key.

        Args:
            key: The key to read

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a raw value under a key, replacing any previous value.

        Args:
            key: The key to write
            value: Serialized value

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key if present."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
