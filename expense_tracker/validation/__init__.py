"""Input validation package."""

from expense_tracker.validation.validator import ExpenseValidator, InputValidationError

__all__ = ["ExpenseValidator", "InputValidationError"]
