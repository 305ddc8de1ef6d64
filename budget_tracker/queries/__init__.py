"""Aggregation queries over the transaction list."""

from budget_tracker.queries.aggregation import (
    balance,
    category_totals,
    expense_category_totals,
    filtered_transactions,
    summarize,
    total_expenses,
    total_income,
)

__all__ = [
    "balance",
    "category_totals",
    "expense_category_totals",
    "filtered_transactions",
    "summarize",
    "total_expenses",
    "total_income",
]
