"""
Tests for Budget Tracker

Test strategy:
1. Unit tests for individual components (models, validator, aggregation)
2. Flow tests for the store and controller (in-memory storage)
3. No real API calls in tests (httpx.MockTransport)
"""

import pytest
from datetime import date
from decimal import Decimal

from budget_tracker.models.transaction import (
    KNOWN_CATEGORIES,
    Insight,
    InsightSeverity,
    InsightType,
    ReportingWindow,
    Transaction,
    TransactionDraft,
    TransactionType,
    is_known_category,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            id="1700000000000",
            amount=Decimal("42.10"),
            category="Shopping",
            date=date(2024, 3, 1),
            type=TransactionType.EXPENSE,
            description="Shoes",
        )
        assert transaction.amount == Decimal("42.10")
        assert transaction.is_expense is True
        assert transaction.notes is None

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        transaction = Transaction(
            id="1",
            amount=Decimal("1"),
            category="  Travel  ",
            date=date(2024, 3, 1),
            type=TransactionType.EXPENSE,
            description=" Train ",
        )
        assert transaction.category == "Travel"
        assert transaction.description == "Train"

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(
                id="1",
                amount=Decimal("-5"),
                category="Other",
                date=date(2024, 3, 1),
                type=TransactionType.EXPENSE,
                description="Refund",
            )

    def test_transaction_rejects_empty_description(self):
        with pytest.raises(ValueError):
            Transaction(
                id="1",
                amount=Decimal("5"),
                category="Other",
                date=date(2024, 3, 1),
                type=TransactionType.INCOME,
                description="   ",
            )

    def test_transaction_json_round_trip(self):
        """Test that the JSON form reloads into an equal transaction."""
        transaction = Transaction(
            id="1",
            amount=Decimal("19.99"),
            category="Entertainment",
            date=date(2024, 2, 29),
            type=TransactionType.EXPENSE,
            description="Cinema",
            notes="with friends",
        )
        data = transaction.model_dump(mode="json")
        assert data["date"] == "2024-02-29"
        assert data["type"] == "expense"
        assert Transaction.model_validate(data) == transaction

    def test_transaction_accepts_numeric_amounts(self):
        """Amounts stored as JSON numbers by other clients still load."""
        transaction = Transaction.model_validate({
            "id": "1",
            "amount": 12.5,
            "category": "Salary",
            "date": "2024-01-31",
            "type": "income",
            "description": "Pay",
        })
        assert transaction.amount == Decimal("12.5")
        assert transaction.is_income is True

    def test_draft_defaults(self):
        """Test TransactionDraft defaults match an empty form."""
        draft = TransactionDraft()
        assert draft.amount is None
        assert draft.category == ""
        assert draft.type == TransactionType.EXPENSE
        assert draft.date == date.today()

    def test_draft_from_transaction(self):
        transaction = Transaction(
            id="9",
            amount=Decimal("3.00"),
            category="Other",
            date=date(2024, 5, 5),
            type=TransactionType.INCOME,
            description="Found money",
        )
        draft = TransactionDraft.from_transaction(transaction)
        assert draft.amount == "3.00"
        assert draft.type == TransactionType.INCOME
        assert draft.notes == ""


class TestInsightModels:

    def test_insight_default_severity(self):
        insight = Insight(
            type=InsightType.RECOMMENDATION,
            title="Save more",
            description="Put 10% aside",
        )
        assert insight.severity == InsightSeverity.MEDIUM

    def test_reporting_window_toggle(self):
        assert ReportingWindow.WEEKLY.toggled() == ReportingWindow.MONTHLY
        assert ReportingWindow.MONTHLY.toggled() == ReportingWindow.WEEKLY


class TestCategories:
    """Tests for the built-in category list."""

    def test_all_categories_exist(self):
        expected = [
            "Food & Dining", "Transportation", "Shopping", "Entertainment",
            "Bills & Utilities", "Healthcare", "Education", "Travel",
            "Salary", "Freelance", "Investment", "Other",
        ]
        assert [category.name for category in KNOWN_CATEGORIES] == expected

    def test_unknown_category_is_allowed_but_flagged(self):
        assert is_known_category("Travel") is True
        assert is_known_category("Pet Supplies") is False


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_CREATED,
            description="Test transaction created",
        )
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        event = AuditEventBuilder.transaction_created("123", "expense", "9.99")
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_created"
        assert log_dict["entity_id"] == "123"
        assert log_dict["details"]["amount"] == "9.99"
        assert log_dict["is_user_action"] is True

    def test_audit_event_builder_rejected_is_warning(self):
        event = AuditEventBuilder.transaction_rejected("create", ["Amount is required"])
        assert event.severity == AuditSeverity.WARNING
        assert event.details["issues"] == ["Amount is required"]

    def test_audit_event_builder_fallback(self):
        event = AuditEventBuilder.insights_fallback_used("weekly", "timeout")
        assert event.event_type == AuditEventType.INSIGHTS_FALLBACK_USED
        assert event.error_message == "timeout"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
