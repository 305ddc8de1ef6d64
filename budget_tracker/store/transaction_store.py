"""
Transaction Store

In-memory ordered collection of transactions, written through to the
persistence adapter after every successful mutation.

Order is insertion order and has nothing to do with transaction dates.
Sorting is the aggregation engine's job.

DESIGN DECISION: Invalid drafts are silently rejected (create/update
return None). Callers that want to explain WHY a draft was rejected
should run DraftValidator themselves before calling the store.
"""

import threading
import time
from typing import Optional

import structlog

from budget_tracker.audit import AuditLogger
from budget_tracker.models.transaction import Transaction, TransactionDraft
from budget_tracker.services.storage import PersistenceAdapter, StorageError
from budget_tracker.validation import DraftValidator


logger = structlog.get_logger(__name__)


class TransactionIdGenerator:
    """
    Time-based ids: milliseconds since the epoch, as a string.

    Two ids requested within the same millisecond (or after the clock
    went backwards) get the next free number, so ids are unique for
    the lifetime of the generator.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def seed(self, existing_ids) -> None:
        """Never hand out an id at or below one already in use."""
        for value in existing_ids:
            if value.isdigit():
                self._last = max(self._last, int(value))

    def next_id(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


class TransactionStore:
    """
    Owns the transaction list.

    Mutations: create, update, delete. Reads: list, get.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter,
        validator: Optional[DraftValidator] = None,
        id_generator: Optional[TransactionIdGenerator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._persistence = persistence
        self._validator = validator or DraftValidator()
        self._ids = id_generator or TransactionIdGenerator()
        self._audit_logger = audit_logger or AuditLogger()

        self._transactions: list[Transaction] = persistence.load_transactions()
        self._ids.seed(t.id for t in self._transactions)
        logger.info("transaction_store_loaded", count=len(self._transactions))

    def __len__(self) -> int:
        return len(self._transactions)

    def _commit(self, transactions: list[Transaction], operation: str) -> None:
        """
        Save the new list, then make it current.

        On a failed write the in-memory list is left untouched, so memory
        and storage never disagree.
        """
        try:
            self._persistence.save_transactions(transactions)
        except StorageError as e:
            logger.error("transaction_save_failed", operation=operation, error=str(e))
            self._audit_logger.log_storage_write_failed(operation, str(e))
            raise
        self._transactions = transactions

    def _index_of(self, transaction_id: str) -> Optional[int]:
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                return index
        return None

    def _build(self, transaction_id: str, draft: TransactionDraft, operation: str) -> Optional[Transaction]:
        result = self._validator.validate(draft)
        if not result.is_valid:
            self._audit_logger.log_transaction_rejected(
                operation, result.messages(), transaction_id if operation == "update" else None
            )
            return None

        return Transaction(
            id=transaction_id,
            amount=result.amount,
            category=draft.category,
            date=result.date,
            type=draft.type,
            description=draft.description,
            notes=draft.notes or None,
        )

    def create(self, draft: TransactionDraft) -> Optional[Transaction]:
        """
        Append a new transaction built from the draft.

        Returns the new transaction, or None if the draft was rejected.

        Raises:
            StorageError: The write failed; the store is unchanged
        """
        transaction = self._build(self._ids.next_id(), draft, "create")
        if transaction is None:
            return None

        self._commit([*self._transactions, transaction], "create")
        self._audit_logger.log_transaction_created(
            transaction.id, transaction.type.value, str(transaction.amount)
        )
        return transaction

    def update(self, transaction_id: str, draft: TransactionDraft) -> Optional[Transaction]:
        """
        Replace every field of an existing transaction, keeping its id
        and its position in the list.

        Returns the updated transaction, or None if the id is unknown or
        the draft was rejected.
        """
        index = self._index_of(transaction_id)
        if index is None:
            return None

        transaction = self._build(transaction_id, draft, "update")
        if transaction is None:
            return None

        updated = list(self._transactions)
        updated[index] = transaction
        self._commit(updated, "update")
        self._audit_logger.log_transaction_updated(transaction_id)
        return transaction

    def delete(self, transaction_id: str) -> bool:
        """Remove a transaction. Unknown ids are a no-op (returns False)."""
        index = self._index_of(transaction_id)
        if index is None:
            return False

        remaining = list(self._transactions)
        del remaining[index]
        self._commit(remaining, "delete")
        self._audit_logger.log_transaction_deleted(transaction_id)
        return True

    def get(self, transaction_id: str) -> Optional[Transaction]:
        index = self._index_of(transaction_id)
        return None if index is None else self._transactions[index]

    def list(self) -> list[Transaction]:
        """All transactions in insertion order (a copy)."""
        return list(self._transactions)
