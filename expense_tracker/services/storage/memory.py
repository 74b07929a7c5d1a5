"""
In-Memory Storage Implementation

Keeps the encoded CSV text in a string instead of a file. Data goes
through the same codec as the local file backend, so what comes back
from load_expenses is exactly what a file round-trip would produce.
"""

from typing import Optional, Sequence

from expense_tracker.codec import decode_expenses, encode_expenses
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import ExpenseStorageInterface


class InMemoryExpenseStorage(ExpenseStorageInterface):
    """Expense storage backed by a string. Nothing survives the process."""

    def __init__(self, initial_text: Optional[str] = None):
        self._text = initial_text
        self.save_count = 0

    @property
    def location(self) -> str:
        return "memory"

    @property
    def text(self) -> Optional[str]:
        """The last saved CSV text, or None if nothing was saved."""
        return self._text

    def save_expenses(self, expenses: Sequence[Expense]) -> bool:
        self._text = encode_expenses(expenses)
        self.save_count += 1
        return True

    def load_expenses(self) -> list[Expense]:
        if self._text is None:
            return []
        return decode_expenses(self._text)
