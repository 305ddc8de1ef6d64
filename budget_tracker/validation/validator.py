"""
Draft Validation

DESIGN DECISION: A draft is checked field by field and every problem
is reported, rather than stopping at the first one. The store only
needs a yes/no answer (it silently rejects invalid drafts), but the
form can show all messages at once.

Checks:
- amount: present, parses as a finite number, not negative
- category: non-empty (freeform; unknown categories are allowed)
- description: non-empty
- date: a real calendar date (ISO-8601 when given as text)

IMPORTANT: Validation NEVER silently fixes issues beyond trimming
whitespace. It reports them.
"""

import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

from budget_tracker.models.transaction import (
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)


def parse_amount(value) -> Optional[Decimal]:
    """
    Parse a form amount into a Decimal.

    Returns None when the value is missing or not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        if isinstance(value, float):
            amount = Decimal(str(value))
        else:
            text = str(value).strip()
            if not text:
                return None
            amount = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def parse_date(value) -> Optional[datetime.date]:
    """Parse a form date (date object or ISO-8601 text)."""
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            return None
    return None


class DraftValidator:
    """Validates TransactionDrafts before they reach the store."""

    def validate(self, draft: TransactionDraft) -> ValidationResult:
        issues: list[ValidationIssue] = []

        amount = parse_amount(draft.amount)
        if draft.amount is None or (isinstance(draft.amount, str) and not draft.amount.strip()):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
            ))
        elif amount is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"Amount '{draft.amount}' is not a number",
            ))
        elif amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative",
                message="Amount cannot be negative",
            ))

        if not draft.category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
            ))

        if not draft.description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
            ))

        parsed_date = parse_date(draft.date)
        if parsed_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date '{draft.date}' is not a valid YYYY-MM-DD date",
            ))

        if issues:
            return ValidationResult(issues=issues)

        return ValidationResult(amount=amount, date=parsed_date)
