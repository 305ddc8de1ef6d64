"""Remote inference service."""

from budget_tracker.services.inference.client import (
    InferenceClient,
    InferenceError,
    InferenceResponseError,
    InferenceTransportError,
    generate_request_identity,
)

__all__ = [
    "InferenceClient",
    "InferenceError",
    "InferenceResponseError",
    "InferenceTransportError",
    "generate_request_identity",
]
