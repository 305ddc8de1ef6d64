"""Transaction store package."""

from budget_tracker.store.transaction_store import TransactionIdGenerator, TransactionStore

__all__ = ["TransactionIdGenerator", "TransactionStore"]
