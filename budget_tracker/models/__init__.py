"""
Data Models Package

This package contains all Pydantic models used in Budget Tracker.
All data flowing through the system must conform to these schemas.
"""

from budget_tracker.models.transaction import (
    KNOWN_CATEGORIES,
    TYPE_FILTER_ALL,
    BudgetSummary,
    CategoryOption,
    CategoryTotal,
    Insight,
    InsightSeverity,
    InsightType,
    ReportingWindow,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
    is_known_category,
    known_category_names,
)
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "KNOWN_CATEGORIES",
    "TYPE_FILTER_ALL",
    "BudgetSummary",
    "CategoryOption",
    "CategoryTotal",
    "Insight",
    "InsightSeverity",
    "InsightType",
    "ReportingWindow",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    "is_known_category",
    "known_category_names",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
