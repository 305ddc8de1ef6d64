"""
Storage Services Package

Provides the key-value interface, its implementations, and the
persistence adapter that serializes application state into it.
"""

from budget_tracker.services.storage.interface import (
    KeyValueStoreInterface,
    StorageError,
)
from budget_tracker.services.storage.json_file import JsonFileKeyValueStore
from budget_tracker.services.storage.memory import InMemoryKeyValueStore
from budget_tracker.services.storage.persistence import (
    DEFAULT_DARK_MODE_KEY,
    DEFAULT_TRANSACTIONS_KEY,
    PersistenceAdapter,
)

__all__ = [
    # Interfaces
    "KeyValueStoreInterface",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    # Adapter
    "DEFAULT_DARK_MODE_KEY",
    "DEFAULT_TRANSACTIONS_KEY",
    "PersistenceAdapter",
]
