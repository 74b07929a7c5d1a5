"""Tests for the storage backends."""

import os
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

from structlog.testing import capture_logs

from expense_tracker.config import StorageSettings
from expense_tracker.models import Expense
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    InMemoryExpenseStorage,
    LocalFileExpenseStorage,
    StorageError,
    StorageLocationError,
    resolve_data_dir,
)
from expense_tracker.services.storage import local_file


@pytest.fixture
def expenses() -> list[Expense]:
    when = datetime(2025, 6, 14, 9, 30, tzinfo=timezone.utc)
    return [
        Expense(amount=Decimal("12.50"), tags=["Groceries"], date=when),
        Expense(amount=Decimal("7"), tags=["Coffee", "rent, utilities"], date=when),
    ]


@pytest.fixture
def storage(tmp_path) -> LocalFileExpenseStorage:
    return LocalFileExpenseStorage(
        file_path=tmp_path / "expenses.csv",
        settings=StorageSettings(write_attempts=2),
    )


class TestResolveDataDir:
    """Tests for locating the storage directory."""

    def test_creates_configured_dir(self, tmp_path):
        """Test that a configured directory is created if missing."""
        target = tmp_path / "nested" / "dir"
        assert resolve_data_dir(StorageSettings(data_dir=target)) == target
        assert target.is_dir()

    def test_defaults_to_home(self, tmp_path, monkeypatch):
        """Test the default location under the home directory."""
        monkeypatch.delenv("EXPENSE_STORAGE_DATA_DIR", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        resolved = resolve_data_dir(StorageSettings())
        assert resolved == tmp_path / ".expense_tracker"
        assert resolved.is_dir()

    def test_file_in_the_way_is_fatal(self, tmp_path):
        """Test that an unusable location raises StorageLocationError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(StorageLocationError):
            resolve_data_dir(StorageSettings(data_dir=blocker / "sub"))

    def test_location_error_is_storage_error(self):
        """Test the exception hierarchy."""
        assert issubclass(StorageLocationError, StorageError)

    def test_storage_uses_settings_location(self, tmp_path):
        """Test that the default file sits in the configured directory."""
        settings = StorageSettings(data_dir=tmp_path / "d", filename="mine.csv")
        storage = LocalFileExpenseStorage(settings=settings)
        assert storage.path == tmp_path / "d" / "mine.csv"


class TestLocalFileStorage:
    """Tests for LocalFileExpenseStorage."""

    def test_implements_interface(self, storage):
        assert isinstance(storage, ExpenseStorageInterface)

    def test_missing_file_loads_empty(self, storage):
        """Test that no file means no data yet."""
        assert not storage.path.exists()
        assert storage.load_expenses() == []

    def test_save_then_load(self, storage, expenses):
        """Test a full round-trip through the file."""
        assert storage.save_expenses(expenses) is True
        assert storage.load_expenses() == expenses

    def test_file_contents(self, storage, expenses):
        """Test the bytes written to disk."""
        storage.save_expenses(expenses[:1])
        content = storage.path.read_text(encoding="utf-8")
        assert content == (
            "ID,Amount,Tags,Date\n"
            f"{expenses[0].id},12.50,Groceries,2025-06-14T09:30:00Z"
        )

    def test_save_overwrites(self, storage, expenses):
        """Test that each save replaces the whole file."""
        storage.save_expenses(expenses)
        storage.save_expenses(expenses[:1])
        assert storage.load_expenses() == expenses[:1]

    def test_save_empty_list(self, storage, expenses):
        """Test that saving nothing leaves a header-only file."""
        storage.save_expenses(expenses)
        storage.save_expenses([])
        assert storage.path.read_text() == "ID,Amount,Tags,Date\n"
        assert storage.load_expenses() == []

    def test_no_temp_files_left(self, storage, expenses):
        """Test that the temporary file is moved into place."""
        storage.save_expenses(expenses)
        assert [p.name for p in storage.path.parent.iterdir()] == ["expenses.csv"]

    def test_write_failure_is_logged_not_raised(self, storage, expenses, monkeypatch):
        """Test that a failed write returns False and keeps the old file."""
        storage.save_expenses(expenses[:1])
        before = storage.path.read_text()

        calls = []

        def failing_replace(src, dst):
            calls.append(src)
            raise PermissionError("read-only file system")

        monkeypatch.setattr(local_file.os, "replace", failing_replace)

        with capture_logs() as logs:
            assert storage.save_expenses(expenses) is False

        assert len(calls) == 2  # write_attempts
        assert storage.path.read_text() == before
        assert [p.name for p in storage.path.parent.iterdir()] == ["expenses.csv"]
        assert any(e["event"] == "expenses_save_failed" for e in logs)

    def test_transient_write_failure_is_retried(self, storage, expenses, monkeypatch):
        """Test that a write that fails once succeeds on retry."""
        real_replace = os.replace
        attempts = []

        def flaky_replace(src, dst):
            attempts.append(src)
            if len(attempts) == 1:
                raise OSError("busy")
            real_replace(src, dst)

        monkeypatch.setattr(local_file.os, "replace", flaky_replace)

        assert storage.save_expenses(expenses) is True
        assert len(attempts) == 2
        assert storage.load_expenses() == expenses

    def test_unreadable_file_loads_empty(self, tmp_path):
        """Test that a read error yields an empty list."""
        path = tmp_path / "expenses.csv"
        path.mkdir()
        storage = LocalFileExpenseStorage(file_path=path, settings=StorageSettings())
        with capture_logs() as logs:
            assert storage.load_expenses() == []
        assert any(e["event"] == "expenses_load_failed" for e in logs)

    def test_undecodable_bytes_load_empty(self, storage):
        """Test that invalid UTF-8 yields an empty list."""
        storage.path.write_bytes(b"ID,Amount,Tags,Date\n\xff\xfe\xfa")
        assert storage.load_expenses() == []

    def test_partially_corrupt_file(self, storage, expenses):
        """Test that damaged lines cost only themselves."""
        storage.save_expenses(expenses)
        with storage.path.open("a", encoding="utf-8") as handle:
            handle.write("\ngarbage line\n,,,\n")
        assert storage.load_expenses() == expenses

    def test_unclosed_quote_mid_file(self, storage, expenses):
        """Test that a broken quoted line in the middle loses only that line."""
        storage.save_expenses(expenses)
        header, *rows = storage.path.read_text(encoding="utf-8").split("\n")
        broken = f'{uuid4()},9,"never closed,2025-06-14T09:30:15Z'
        storage.path.write_text(
            "\n".join([header, rows[0], broken, *rows[1:]]),
            encoding="utf-8",
        )
        assert storage.load_expenses() == expenses


class TestInMemoryStorage:
    """Tests for InMemoryExpenseStorage."""

    def test_empty_until_saved(self):
        storage = InMemoryExpenseStorage()
        assert storage.load_expenses() == []
        assert storage.text is None

    def test_round_trip(self, expenses):
        """Test that data goes through the CSV codec."""
        storage = InMemoryExpenseStorage()
        assert storage.save_expenses(expenses) is True
        assert storage.text.startswith("ID,Amount,Tags,Date\n")
        assert storage.load_expenses() == expenses
        assert storage.save_count == 1

    def test_initial_text(self):
        """Test seeding with existing CSV text."""
        storage = InMemoryExpenseStorage(
            "ID,Amount,Tags,Date\n"
            "6f9619ff-8b86-d011-b42d-00c04fc964ff,3,Tea,2025-01-01T00:00:00Z"
        )
        loaded = storage.load_expenses()
        assert len(loaded) == 1
        assert loaded[0].tags == ["Tea"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
