"""Services package."""

from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    LocalFileExpenseStorage,
    StorageError,
    StorageLocationError,
)

__all__ = [
    # Storage services
    "ExpenseStorageInterface",
    "InMemoryExpenseStorage",
    "LocalFileExpenseStorage",
    "StorageError",
    "StorageLocationError",
]
