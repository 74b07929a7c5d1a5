"""
Storage Services Package

Provides the abstract storage interface and its implementations.
The local CSV file is the real backend; the in-memory one is for tests.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageError,
    StorageLocationError,
)
from expense_tracker.services.storage.local_file import (
    LocalFileExpenseStorage,
    resolve_data_dir,
)
from expense_tracker.services.storage.memory import InMemoryExpenseStorage

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    # Exceptions
    "StorageError",
    "StorageLocationError",
    # Implementations
    "InMemoryExpenseStorage",
    "LocalFileExpenseStorage",
    "resolve_data_dir",
]
