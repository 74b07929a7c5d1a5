"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the local CSV file for a synced backend later
2. Use in-memory storage for testing
3. Keep the codec and the orchestrator unaware of where bytes go

The interface is intentionally tiny - the whole list is written on every
change and read back whole on start-up.

Both operations are synchronous and absorb their own I/O errors: a failed
save is logged and reported through the return value, a failed load looks
like an empty list.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from expense_tracker.models.expense import Expense


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense storage operations.

    Any storage implementation must implement these methods.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where the data lives."""
        pass

    @abstractmethod
    def save_expenses(self, expenses: Sequence[Expense]) -> bool:
        """
        Replace the stored list with `expenses`.

        Args:
            expenses: The full, ordered expense list

        Returns:
            True if written, False if the write failed (already logged).
            On failure the previously stored data is left as it was.
        """
        pass

    @abstractmethod
    def load_expenses(self) -> list[Expense]:
        """
        Read the stored list.

        Returns:
            The decoded expenses in stored order; an empty list when
            nothing has been stored yet or the data cannot be read
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageLocationError(StorageError):
    """The local storage directory could not be resolved or created."""
    pass
