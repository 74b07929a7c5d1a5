"""
Input Validation for New Expenses

DESIGN DECISION: Rules apply to what the user types, not to stored data.
Records loaded from disk are never re-validated.

Rules:
- Amount must parse as a number and be greater than zero
- A tag must not be blank, must not repeat one already entered, and
  must not contain the ";;" sequence the file format uses between tags
- Tags are optional unless `require_tags` is switched on

A failed rule blocks the operation and carries one message meant for the
user. Validation NEVER silently fixes input beyond trimming whitespace.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from expense_tracker.codec import TAG_DELIMITER
from expense_tracker.config import AppSettings, get_settings
from expense_tracker.models.validation import ValidationIssue, ValidationResult


class InputValidationError(Exception):
    """User input was rejected. `message` is safe to show as-is."""

    def __init__(self, issue: ValidationIssue):
        super().__init__(issue.message)
        self.issue = issue

    @property
    def message(self) -> str:
        return self.issue.message

    @property
    def field(self) -> str:
        return self.issue.field


class ExpenseValidator:
    """Validates the fields of a new expense before it is created."""

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def validate_amount(
        self,
        raw: object,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        """
        Parse an amount typed by the user.

        Accepts strings and numbers. Returns (amount, issues); amount is
        None when there is an issue.
        """
        issue = ValidationIssue(
            field="amount",
            issue_type="invalid_value",
            message="Please enter a valid positive amount.",
        )

        if isinstance(raw, bool) or raw is None:
            return None, [issue]

        try:
            amount = Decimal(str(raw).strip())
        except InvalidOperation:
            return None, [issue]

        if not amount.is_finite() or amount <= 0:
            return None, [issue]

        return amount, []

    def validate_new_tag(
        self,
        raw: str,
        current_tags: Sequence[str],
    ) -> tuple[Optional[str], list[ValidationIssue]]:
        """
        Check one tag the user wants to add to the tags entered so far.

        Returns (trimmed_tag, issues).
        """
        tag = (raw or "").strip()

        if not tag:
            return None, [ValidationIssue(
                field="tags",
                issue_type="missing",
                message="Please enter a tag.",
            )]

        if tag in current_tags:
            return None, [ValidationIssue(
                field="tags",
                issue_type="duplicate",
                message="This tag already exists.",
            )]

        if TAG_DELIMITER in tag:
            return None, [ValidationIssue(
                field="tags",
                issue_type="invalid_format",
                message=f"Tags cannot contain '{TAG_DELIMITER}'.",
            )]

        return tag, []

    def add_tag(self, current_tags: Sequence[str], raw: str) -> list[str]:
        """
        Return a new tag list with `raw` appended.

        Raises:
            InputValidationError: If the tag is rejected
        """
        tag, issues = self.validate_new_tag(raw, current_tags)
        if issues:
            raise InputValidationError(issues[0])
        return [*current_tags, tag]

    def validate(
        self,
        amount: object,
        tags: Sequence[str],
    ) -> ValidationResult:
        """Validate everything needed to create an expense."""
        issues = []

        _, amount_issues = self.validate_amount(amount)
        issues.extend(amount_issues)

        seen: list[str] = []
        for tag in tags:
            _, tag_issues = self.validate_new_tag(tag, seen)
            if tag_issues:
                issues.extend(tag_issues)
                break
            seen.append(tag.strip())

        if self._settings.require_tags and not tags:
            issues.append(ValidationIssue(
                field="tags",
                issue_type="missing",
                message="Please add at least one tag for the purchase.",
            ))

        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
        )

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """One line per problem, ready for an alert box."""
        if result.is_valid:
            return ""
        return "\n".join(issue.message for issue in result.issues)
