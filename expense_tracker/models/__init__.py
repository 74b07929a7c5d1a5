"""
Data Models Package

This package contains the Pydantic models used in the Expense Tracker.
"""

from expense_tracker.models.expense import Expense, utc_now
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Expense models
    "Expense",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
