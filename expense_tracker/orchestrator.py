"""
Main Orchestrator for Expense Tracker

Ties the model, validator, storage and audit log together and defines the
operations the screen can trigger:
1. Add (input -> validate -> create -> insert at top -> save)
2. Delete (remove -> save)
3. Save / Load (whole list)

DESIGN DECISION: The orchestrator owns the in-memory list. The UI holds
only widget state and calls these methods; it never touches storage.

Everything runs synchronously on the calling thread.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence
from uuid import UUID

from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import get_settings
from expense_tracker.models.expense import Expense, utc_now
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    LocalFileExpenseStorage,
)
from expense_tracker.validation import ExpenseValidator, InputValidationError


class ExpenseTracker:
    """
    Holds the expense list for the lifetime of the process.

    Newest additions go to the front. Every successful add or delete is
    followed by a save of the whole list. A failed save is logged and the
    in-memory list is kept as it is.
    """

    def __init__(
        self,
        storage: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger or AuditLogger()
        self._expenses: list[Expense] = []

    @property
    def storage(self) -> ExpenseStorageInterface:
        return self._storage

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """The current list, in collection order (newest addition first)."""
        return tuple(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> list[Expense]:
        """Replace the in-memory list with what storage holds."""
        self._expenses = self._storage.load_expenses()
        self._audit_logger.log_expenses_loaded(
            count=len(self._expenses),
            location=self._storage.location,
        )
        return list(self._expenses)

    def save(self) -> bool:
        """Write the whole list. Returns False if the write failed."""
        saved = self._storage.save_expenses(self._expenses)
        self._audit_logger.log_save_result(
            saved=saved,
            count=len(self._expenses),
            location=self._storage.location,
        )
        return saved

    # -------------------------------------------------------------------------
    # Tag entry
    # -------------------------------------------------------------------------

    def add_tag(self, current_tags: Sequence[str], new_tag: str) -> list[str]:
        """
        Add a tag to the tags of the expense being entered.

        Raises:
            InputValidationError: If the tag is blank, repeated, or
                contains the tag delimiter
        """
        try:
            return self._validator.add_tag(current_tags, new_tag)
        except InputValidationError as e:
            self._audit_logger.log_input_rejected(field=e.field, message=e.message)
            raise

    @staticmethod
    def remove_tag(current_tags: Sequence[str], tag: str) -> list[str]:
        """Drop every occurrence of `tag`."""
        return [t for t in current_tags if t != tag]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_expense(
        self,
        amount: object,
        tags: Sequence[str] = (),
        date: Optional[datetime] = None,
    ) -> Expense:
        """
        Validate input, create the expense, insert it at the top and save.

        Args:
            amount: Amount as typed (string) or a number
            tags: Tags in entry order
            date: Purchase date; defaults to now

        Returns:
            The new Expense

        Raises:
            InputValidationError: Input rejected; nothing was changed
        """
        result = self._validator.validate(amount, tags)
        if not result.is_valid:
            issue = result.first_error
            self._audit_logger.log_input_rejected(field=issue.field, message=issue.message)
            raise InputValidationError(issue)

        parsed_amount, _ = self._validator.validate_amount(amount)
        expense = Expense(
            amount=parsed_amount,
            tags=list(tags),
            date=date or utc_now(),
        )

        self._expenses.insert(0, expense)
        self._audit_logger.log_expense_added(
            expense_id=expense.id,
            amount=str(expense.amount),
            tags=expense.tags,
        )
        self.save()
        return expense

    def delete_expense(self, expense_id: UUID) -> bool:
        """
        Delete one expense by id and save.

        Returns False (and saves nothing) if no expense has that id.
        """
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                del self._expenses[index]
                self._audit_logger.log_expense_deleted(
                    expense_id=expense.id,
                    amount=str(expense.amount),
                )
                self.save()
                return True
        return False

    def delete_at(self, offsets: Iterable[int]) -> list[Expense]:
        """
        Delete expenses by position in `expenses` and save once.

        Out-of-range offsets are ignored.

        Returns:
            The removed expenses
        """
        wanted = {i for i in offsets if 0 <= i < len(self._expenses)}
        if not wanted:
            return []

        removed = [e for i, e in enumerate(self._expenses) if i in wanted]
        self._expenses = [e for i, e in enumerate(self._expenses) if i not in wanted]

        for expense in removed:
            self._audit_logger.log_expense_deleted(
                expense_id=expense.id,
                amount=str(expense.amount),
            )
        self.save()
        return removed

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def sorted_by_date(self) -> list[Expense]:
        """Expenses newest purchase date first, for display."""
        return sorted(self._expenses, key=lambda e: e.date, reverse=True)

    def total_amount(self) -> Decimal:
        return sum((e.amount for e in self._expenses), Decimal("0"))


def create_app_components(
    use_local_file: bool = True,
) -> ExpenseTracker:
    """
    Factory function to create a ready-to-use tracker.

    Args:
        use_local_file: Store data in the local CSV file. Set to False
            to keep everything in memory.

    Returns:
        An ExpenseTracker with its data already loaded

    Raises:
        StorageLocationError: If the local storage directory cannot be
            resolved. The app cannot start without it.
    """
    settings = get_settings()
    configure_logging(settings.logging)

    if use_local_file:
        storage = LocalFileExpenseStorage(settings=settings.storage)
    else:
        storage = InMemoryExpenseStorage()

    tracker = ExpenseTracker(
        storage=storage,
        validator=ExpenseValidator(settings.app),
        audit_logger=AuditLogger(),
    )
    tracker.load()
    return tracker
