"""
Persistence Adapter

Loads and saves the transaction list and the dark-mode flag through a
key-value store. Pure get/set: no merging, no migrations, no versioning.

IMPORTANT: Reads never fail. An absent, malformed or schema-invalid
value is treated as "no prior data" and the default is returned.
"""

import json
from typing import Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from budget_tracker.audit import AuditLogger
from budget_tracker.models.transaction import Transaction
from budget_tracker.services.storage.interface import KeyValueStoreInterface


DEFAULT_TRANSACTIONS_KEY = "budgetTrackerTransactions"
DEFAULT_DARK_MODE_KEY = "budgetTrackerDarkMode"

_transaction_list = TypeAdapter(list[Transaction])


class PersistenceAdapter:
    """
    Maps application values to raw key-value entries.

    The transaction list is stored as one JSON array and always
    overwritten as a whole.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        transactions_key: str = DEFAULT_TRANSACTIONS_KEY,
        dark_mode_key: str = DEFAULT_DARK_MODE_KEY,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._transactions_key = transactions_key
        self._dark_mode_key = dark_mode_key
        self._audit_logger = audit_logger or AuditLogger()

    def _read_json(self, key: str):
        raw = self._store.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            self._audit_logger.log_storage_read_failed(key, str(e))
            return None

    def load_transactions(self) -> list[Transaction]:
        data = self._read_json(self._transactions_key)
        if data is None:
            return []
        try:
            return _transaction_list.validate_python(data)
        except ValidationError as e:
            self._audit_logger.log_storage_read_failed(
                self._transactions_key, f"{e.error_count()} invalid fields"
            )
            return []

    def save_transactions(self, transactions: Sequence[Transaction]) -> None:
        payload = _transaction_list.dump_python(list(transactions), mode="json")
        self._store.set(self._transactions_key, json.dumps(payload, ensure_ascii=False))

    def load_dark_mode(self) -> bool:
        data = self._read_json(self._dark_mode_key)
        if data is None:
            return False
        if not isinstance(data, bool):
            self._audit_logger.log_storage_read_failed(
                self._dark_mode_key, f"expected a boolean, got {type(data).__name__}"
            )
            return False
        return data

    def save_dark_mode(self, enabled: bool) -> None:
        self._store.set(self._dark_mode_key, json.dumps(bool(enabled)))
