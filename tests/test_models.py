"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, codec, validators)
2. Integration tests for flows (with in-memory or tmp_path storage)
3. No UI in tests
"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4

from pydantic import ValidationError

from expense_tracker.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Expense,
    ValidationIssue,
    ValidationResult,
)


class TestExpenseModel:
    """Tests for the Expense model."""

    def test_expense_creation(self):
        """Test Expense model creation."""
        when = datetime(2025, 6, 14, 12, 30, tzinfo=timezone.utc)
        expense = Expense(amount=Decimal("12.50"), tags=["Groceries"], date=when)
        assert expense.amount == Decimal("12.50")
        assert expense.tags == ["Groceries"]
        assert expense.date == when
        assert isinstance(expense.id, UUID)

    def test_ids_are_unique(self):
        """Test that each expense gets its own id."""
        ids = {Expense(amount=Decimal("1")).id for _ in range(50)}
        assert len(ids) == 50

    def test_explicit_id_is_kept(self):
        """Test that a known id (e.g. from disk) is used as given."""
        expense_id = uuid4()
        expense = Expense(id=expense_id, amount=Decimal("3"))
        assert expense.id == expense_id

    def test_expense_is_frozen(self):
        """Test that fields cannot be reassigned."""
        expense = Expense(amount=Decimal("5"))
        with pytest.raises(ValidationError):
            expense.id = uuid4()
        with pytest.raises(ValidationError):
            expense.amount = Decimal("6")

    def test_tags_default_to_empty(self):
        """Test that tags are optional."""
        assert Expense(amount=Decimal("5")).tags == []

    def test_tags_are_stripped(self):
        """Test that whitespace around tags is removed and blank tags dropped."""
        expense = Expense(amount=Decimal("5"), tags=["  Food ", "", "   ", "Dinner"])
        assert expense.tags == ["Food", "Dinner"]

    def test_tag_order_is_kept(self):
        """Test that tags stay in entry order."""
        expense = Expense(amount=Decimal("5"), tags=["b", "a", "c"])
        assert expense.tags == ["b", "a", "c"]

    def test_amount_not_revalidated(self):
        """Test that the model accepts non-positive amounts (loaded data)."""
        assert Expense(amount=Decimal("-4")).amount == Decimal("-4")
        assert Expense(amount=Decimal("0")).amount == Decimal("0")

    def test_amount_rejects_nan(self):
        """Test that non-finite amounts are rejected."""
        with pytest.raises(ValidationError):
            Expense(amount=Decimal("NaN"))

    def test_naive_date_becomes_aware(self):
        """Test that naive datetimes are given the local timezone."""
        naive = datetime(2025, 1, 2, 3, 4, 5)
        expense = Expense(amount=Decimal("1"), date=naive)
        assert expense.date.tzinfo is not None
        assert expense.date.replace(tzinfo=None) == naive

    def test_default_date_is_now(self):
        """Test that the date defaults to the current time."""
        before = datetime.now(timezone.utc)
        expense = Expense(amount=Decimal("1"))
        after = datetime.now(timezone.utc)
        assert before <= expense.date <= after

    def test_equality_across_timezones(self):
        """Test that the same instant in two timezones compares equal."""
        expense_id = uuid4()
        utc = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
        plus_two = utc.astimezone(timezone(timedelta(hours=2)))
        a = Expense(id=expense_id, amount=Decimal("1"), date=utc)
        b = Expense(id=expense_id, amount=Decimal("1"), date=plus_two)
        assert a == b


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Test expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSES_SAVED,
            description="Saved",
            details={"count": 3},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expenses_saved"
        assert log_dict["details"]["count"] == 3

    def test_builder_expense_added(self):
        """Test AuditEventBuilder.expense_added."""
        expense_id = uuid4()
        event = AuditEventBuilder.expense_added(
            expense_id=expense_id,
            amount="12.50",
            tags=["Food"],
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_id == expense_id
        assert event.details["tags"] == ["Food"]
        assert event.is_user_action is True

    def test_builder_save_failed_is_error(self):
        """Test that a failed save is logged at error severity."""
        event = AuditEventBuilder.save_failed(count=2, location="/tmp/x.csv")
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.severity == AuditSeverity.ERROR
        assert event.is_user_action is False

    def test_builder_input_rejected_is_warning(self):
        """Test AuditEventBuilder.input_rejected."""
        event = AuditEventBuilder.input_rejected(field="amount", message="bad")
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"field": "amount", "message": "bad"}


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_has_errors(self):
        """Test has_errors and first_error."""
        issue = ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="Please enter a valid positive amount.",
        )
        result = ValidationResult(is_valid=False, issues=[issue])
        assert result.has_errors is True
        assert result.first_error == issue

    def test_no_issues(self):
        """Test an empty, valid result."""
        result = ValidationResult(is_valid=True)
        assert result.has_errors is False
        assert result.first_error is None

    def test_severity_pattern(self):
        """Test that only known severities are accepted."""
        with pytest.raises(ValidationError):
            ValidationIssue(field="x", issue_type="y", message="z", severity="fatal")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
