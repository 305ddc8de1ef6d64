"""
Core Data Models for Budget Tracker

These models define the schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Be serializable for local storage and for the inference prompts
3. Keep derived values (totals, insights) separate from recorded data

DESIGN DECISION: Recorded transactions use strict models (Transaction),
while form input arrives as a lenient TransactionDraft. A draft only
becomes a Transaction after passing the validator.
"""

import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class InsightType(str, Enum):
    """Kind of advisory item shown in the insights panel."""
    INSIGHT = "insight"
    RECOMMENDATION = "recommendation"


class InsightSeverity(str, Enum):
    """How prominently an insight should be shown."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReportingWindow(str, Enum):
    """
    Scope used to phrase insight requests.

    This is NOT a date-range filter. It only changes the wording of
    the request and of the local fallback insight.
    """
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    def toggled(self) -> "ReportingWindow":
        if self is ReportingWindow.WEEKLY:
            return ReportingWindow.MONTHLY
        return ReportingWindow.WEEKLY


# Type filter accepted by the list view: a TransactionType value or "all".
TYPE_FILTER_ALL = "all"


# =============================================================================
# KNOWN CATEGORIES
# =============================================================================

class CategoryOption(BaseModel):
    """A category offered in the UI selectors."""
    model_config = ConfigDict(frozen=True)

    name: str
    icon: str

    @property
    def label(self) -> str:
        return f"{self.icon} {self.name}"


KNOWN_CATEGORIES: tuple[CategoryOption, ...] = (
    CategoryOption(name="Food & Dining", icon="🍽️"),
    CategoryOption(name="Transportation", icon="🚗"),
    CategoryOption(name="Shopping", icon="🛍️"),
    CategoryOption(name="Entertainment", icon="🎬"),
    CategoryOption(name="Bills & Utilities", icon="💡"),
    CategoryOption(name="Healthcare", icon="⚕️"),
    CategoryOption(name="Education", icon="📚"),
    CategoryOption(name="Travel", icon="✈️"),
    CategoryOption(name="Salary", icon="💰"),
    CategoryOption(name="Freelance", icon="💻"),
    CategoryOption(name="Investment", icon="📈"),
    CategoryOption(name="Other", icon="📋"),
)


def known_category_names() -> list[str]:
    return [category.name for category in KNOWN_CATEGORIES]


def is_known_category(name: str) -> bool:
    """
    Check whether a category is one of the built-in ones.

    Categories are freeform: unknown names (for example AI suggestions)
    are stored and aggregated as-is. This helper is for display only.
    """
    return name in known_category_names()


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A recorded income or expense event.

    CRITICAL: Only the TransactionStore creates these from drafts.
    The id is assigned at creation time and never changes.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier (time-based)"
    )
    amount: Annotated[
        Decimal,
        Field(ge=0, allow_inf_nan=False, description="Amount, currency-less")
    ]
    category: str = Field(
        ...,
        min_length=1,
        description="Category label (freeform)"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the transaction"
    )
    type: TransactionType = Field(
        ...,
        description="Income or expense"
    )
    description: str = Field(
        ...,
        min_length=1,
        description="What the transaction was for"
    )
    notes: Optional[str] = Field(
        default=None,
        description="Optional free-text notes"
    )

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class TransactionDraft(BaseModel):
    """
    Form input for creating or editing a transaction.

    All fields are lenient: this is what the user typed, not what we
    accept. Use DraftValidator to check it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Optional[Union[str, Decimal, float, int]] = None
    category: str = ""
    date: Union[datetime.date, str] = Field(default_factory=datetime.date.today)
    type: TransactionType = TransactionType.EXPENSE
    description: str = ""
    notes: str = ""

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionDraft":
        """Pre-fill a draft for editing an existing transaction."""
        return cls(
            amount=str(transaction.amount),
            category=transaction.category,
            date=transaction.date,
            type=transaction.type,
            description=transaction.description,
            notes=transaction.notes or "",
        )


# =============================================================================
# DERIVED MODELS (never persisted)
# =============================================================================

class CategoryTotal(BaseModel):
    """Sum of one category for one transaction type."""

    category: str
    total: Decimal = Field(gt=0)
    type: TransactionType


class BudgetSummary(BaseModel):
    """Figures shown in the summary cards."""

    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    transaction_count: int = Field(ge=0)


class Insight(BaseModel):
    """
    A short advisory item.

    Insights are transient: the whole list is replaced every time
    new insights are generated, and nothing is persisted.
    """

    type: InsightType
    title: str
    description: str
    severity: InsightSeverity = InsightSeverity.MEDIUM


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in a draft."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Outcome of validating a TransactionDraft."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    # Normalized field values, only set when the draft is valid
    amount: Optional[Decimal] = None
    date: Optional[datetime.date] = None

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def error_count(self) -> int:
        return len(self.issues)

    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]
