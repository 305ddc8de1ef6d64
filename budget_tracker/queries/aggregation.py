"""
Aggregation Engine

DESIGN DECISION: Every figure the UI shows is computed here, from the
transaction list alone, by pure functions. Nothing is cached and
nothing is stored: the list is small and recomputing on each render
keeps totals correct by construction.

The AI insights never feed back into these numbers.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from budget_tracker.models.transaction import (
    TYPE_FILTER_ALL,
    BudgetSummary,
    CategoryTotal,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")


def _sum_of_type(transactions: Iterable[Transaction], transaction_type: TransactionType) -> Decimal:
    return sum(
        (t.amount for t in transactions if t.type == transaction_type),
        ZERO,
    )


def total_income(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of all income amounts."""
    return _sum_of_type(transactions, TransactionType.INCOME)


def total_expenses(transactions: Iterable[Transaction]) -> Decimal:
    """Sum of all expense amounts."""
    return _sum_of_type(transactions, TransactionType.EXPENSE)


def balance(transactions: Sequence[Transaction]) -> Decimal:
    """Income minus expenses. May be negative."""
    return total_income(transactions) - total_expenses(transactions)


def category_totals(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """
    Per-category totals, split by type.

    Categories appear in the order they are first seen. Within a
    category the income entry comes before the expense entry. Entries
    whose total is zero are omitted.
    """
    grouped: dict[str, dict[TransactionType, Decimal]] = {}
    for transaction in transactions:
        totals = grouped.setdefault(
            transaction.category,
            {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO},
        )
        totals[transaction.type] += transaction.amount

    result = []
    for category, totals in grouped.items():
        for transaction_type in (TransactionType.INCOME, TransactionType.EXPENSE):
            if totals[transaction_type] > 0:
                result.append(CategoryTotal(
                    category=category,
                    total=totals[transaction_type],
                    type=transaction_type,
                ))
    return result


def expense_category_totals(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """The expense entries of category_totals (what the chart shows)."""
    return [
        entry for entry in category_totals(transactions)
        if entry.type == TransactionType.EXPENSE
    ]


def filtered_transactions(
    transactions: Iterable[Transaction],
    category_filter: str = "",
    type_filter: str = TYPE_FILTER_ALL,
) -> list[Transaction]:
    """
    Transactions matching both filters, most recent date first.

    Args:
        category_filter: "" for all categories, otherwise an exact match
        type_filter: "all", "income" or "expense"

    Transactions on the same date keep their insertion order.
    """
    type_value = getattr(type_filter, "value", type_filter)

    matching = [
        t for t in transactions
        if (not category_filter or t.category == category_filter)
        and (type_value == TYPE_FILTER_ALL or t.type.value == type_value)
    ]
    # sorted() is stable, also with reverse=True
    return sorted(matching, key=lambda t: t.date, reverse=True)


def summarize(transactions: Sequence[Transaction]) -> BudgetSummary:
    """Figures for the summary cards."""
    income = total_income(transactions)
    expenses = total_expenses(transactions)
    return BudgetSummary(
        total_income=income,
        total_expenses=expenses,
        balance=income - expenses,
        transaction_count=len(transactions),
    )
