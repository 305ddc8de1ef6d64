"""
External Services Package

- storage: local key-value persistence
- inference: hosted agent-chat endpoint used by the AI features
"""

from budget_tracker.services.inference import (
    InferenceClient,
    InferenceError,
    InferenceResponseError,
    InferenceTransportError,
)
from budget_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    PersistenceAdapter,
    StorageError,
)

__all__ = [
    "InferenceClient",
    "InferenceError",
    "InferenceResponseError",
    "InferenceTransportError",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "PersistenceAdapter",
    "StorageError",
]
