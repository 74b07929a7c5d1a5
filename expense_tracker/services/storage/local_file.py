"""
Local File Storage Implementation

Keeps the expense list as a single CSV file in the application's private
data directory (`~/.expense_tracker/expenses.csv` unless configured).

TRADEOFFS:
- The whole file is rewritten on every save (fine for a personal list)
- No file locking; a second process writing the same file is not handled

Writes go to a temporary file next to the target and are moved into
place with os.replace, so a failed write leaves the old file intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Sequence

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from expense_tracker.codec import decode_expenses, encode_expenses
from expense_tracker.config import StorageSettings, get_settings
from expense_tracker.config.settings import DEFAULT_DATA_DIRNAME
from expense_tracker.models.expense import Expense
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageLocationError,
)


logger = structlog.get_logger(__name__)


def resolve_data_dir(settings: StorageSettings) -> Path:
    """
    Find (and create) the directory that holds the data file.

    Raises:
        StorageLocationError: If the directory cannot be determined or
            created. The app cannot run without it.
    """
    try:
        data_dir = settings.data_dir or Path.home() / DEFAULT_DATA_DIRNAME
        data_dir = Path(data_dir).expanduser()
        data_dir.mkdir(parents=True, exist_ok=True)
    except (OSError, RuntimeError) as e:
        raise StorageLocationError(f"Unable to find local storage directory: {e}") from e

    if not data_dir.is_dir():
        raise StorageLocationError(f"Storage location is not a directory: {data_dir}")

    return data_dir


class LocalFileExpenseStorage(ExpenseStorageInterface):
    """
    CSV file implementation of expense storage.

    One expense per line; see codec.csv_codec for the format.
    """

    def __init__(
        self,
        file_path: Optional[Path] = None,
        settings: Optional[StorageSettings] = None,
    ):
        """
        Args:
            file_path: Explicit data file. If None, the file is placed in
                the configured data directory.
            settings: Storage settings. If None, loaded from the environment.
        """
        self._settings = settings or get_settings().storage
        if file_path is None:
            file_path = resolve_data_dir(self._settings) / self._settings.filename
        self._path = Path(file_path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def _write_atomic(self, text: str) -> None:
        """Write `text` to a sibling temp file, then move it over the target."""
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding=self._settings.encoding, newline="") as handle:
                handle.write(text)
            os.replace(tmp_name, self._path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    def _write_with_retry(self, text: str) -> None:
        writer = retry(
            stop=stop_after_attempt(self._settings.write_attempts),
            wait=wait_exponential(multiplier=0.05, max=0.5),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(self._write_atomic)
        writer(text)

    def save_expenses(self, expenses: Sequence[Expense]) -> bool:
        """Serialize and overwrite the data file."""
        text = encode_expenses(expenses)
        try:
            self._write_with_retry(text)
        except (OSError, UnicodeError) as e:
            logger.error(
                "expenses_save_failed",
                path=self.location,
                count=len(expenses),
                error=str(e),
            )
            return False

        logger.info("expenses_saved", path=self._path.name, count=len(expenses))
        return True

    def load_expenses(self) -> list[Expense]:
        """Read and decode the data file; empty list if missing or unreadable."""
        if not self._path.exists():
            logger.info("expenses_file_missing", path=self.location)
            return []

        try:
            text = self._path.read_text(encoding=self._settings.encoding)
        except (OSError, UnicodeError) as e:
            logger.error("expenses_load_failed", path=self.location, error=str(e))
            return []

        return decode_expenses(text)
