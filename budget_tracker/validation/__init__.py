"""Validation package."""

from budget_tracker.validation.validator import DraftValidator, parse_amount, parse_date

__all__ = ["DraftValidator", "parse_amount", "parse_date"]
