"""
Shared fixtures.

No test talks to the real inference endpoint: HTTP goes through
httpx.MockTransport, storage through InMemoryKeyValueStore.
"""

import json
from datetime import date

import httpx
import pytest

from budget_tracker.audit import AuditLogger
from budget_tracker.config import InferenceSettings
from budget_tracker.models.transaction import TransactionDraft, TransactionType
from budget_tracker.services.inference import InferenceClient
from budget_tracker.services.storage import InMemoryKeyValueStore, PersistenceAdapter
from budget_tracker.store import TransactionStore


def make_draft(
    amount="12.50",
    category="Food & Dining",
    description="Lunch",
    type=TransactionType.EXPENSE,
    on=date(2024, 1, 15),
    notes="",
) -> TransactionDraft:
    return TransactionDraft(
        amount=amount,
        category=category,
        description=description,
        type=type,
        date=on,
        notes=notes,
    )


def agent_reply(text: str, status_code: int = 200) -> httpx.MockTransport:
    """Transport whose every reply carries `text` in the response field."""
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"response": text})
    return httpx.MockTransport(handler)


def failing_transport() -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)
    return httpx.MockTransport(handler)


@pytest.fixture
def inference_settings() -> InferenceSettings:
    return InferenceSettings(
        api_key="test-key",
        base_url="https://inference.test/v3/inference/chat/",
        insights_agent_id="insights-agent",
        category_agent_id="category-agent",
        max_attempts=1,
        retry_wait_seconds=0,
    )


@pytest.fixture
def make_client(inference_settings):
    def factory(transport: httpx.MockTransport) -> InferenceClient:
        return InferenceClient(inference_settings, transport=transport)
    return factory


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def persistence(kv_store, audit_logger) -> PersistenceAdapter:
    return PersistenceAdapter(kv_store, audit_logger=audit_logger)


@pytest.fixture
def store(persistence, audit_logger) -> TransactionStore:
    return TransactionStore(persistence, audit_logger=audit_logger)


def stored_transactions(kv_store: InMemoryKeyValueStore) -> list:
    raw = kv_store.get("budgetTrackerTransactions")
    return json.loads(raw) if raw is not None else []
