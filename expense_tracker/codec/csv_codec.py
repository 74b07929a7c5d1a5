"""
CSV Codec for Expense Lists

File layout:

    ID,Amount,Tags,Date
    <uuid>,<decimal>,<escaped-tags-blob>,<ISO-8601 timestamp>

The Tags column carries a list inside one field. Each tag is escaped on
its own, the escaped tags are joined with ";;", and the joined text is
escaped again as the column value. Decoding undoes the two levels in
reverse order.

KNOWN LIMITATION: ";;" is not escaped. A tag containing it comes back
as two tags ("a;;b" -> "a", "b").

Decoding is tolerant: a line that cannot be read is logged and skipped,
and the rest of the file still loads.
"""

import csv
import io
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Iterator, Optional
from uuid import UUID

import structlog

from expense_tracker.models.expense import Expense


HEADER = ["ID", "Amount", "Tags", "Date"]
TAG_DELIMITER = ";;"

_QUOTE = '"'
_NEEDS_QUOTING = (",", '"', "\n")

logger = structlog.get_logger(__name__)


class RowDecodeError(ValueError):
    """A CSV row could not be turned into an Expense."""
    pass


# =============================================================================
# FIELD ESCAPING
# =============================================================================

def escape_csv_field(value: str) -> str:
    """
    Quote a value for use as a CSV field.

    Internal quotes are doubled; the value is wrapped in quotes if it
    contains a comma, a quote or a newline.
    """
    if any(ch in value for ch in _NEEDS_QUOTING):
        return _QUOTE + value.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return value


def unescape_csv_field(value: str) -> str:
    """
    Inverse of escape_csv_field.

    Text that is not a well-formed quoted field (legacy data, hand edits)
    is returned with stray quote characters removed.
    """
    if len(value) >= 2 and value.startswith(_QUOTE) and value.endswith(_QUOTE):
        inner = value[1:-1]
        if _QUOTE not in inner.replace(_QUOTE * 2, ""):
            return inner.replace(_QUOTE * 2, _QUOTE)
    return value.replace(_QUOTE, "")


def _escape_tag(tag: str) -> str:
    """Escape one tag; a leading or trailing ';' also forces quoting."""
    if tag.startswith(";") or tag.endswith(";"):
        return _QUOTE + tag.replace(_QUOTE, _QUOTE * 2) + _QUOTE
    return escape_csv_field(tag)


def encode_tags(tags: Iterable[str]) -> str:
    """
    Escape each tag and join them into one (still unescaped) column value.

    Quoting a tag that starts or ends with ';' keeps it from merging into
    the delimiter ("a;" + "b" would otherwise give "a;;;b").
    """
    return TAG_DELIMITER.join(_escape_tag(tag) for tag in tags)


def decode_tags(value: str) -> list[str]:
    """Split a Tags column value back into tags, dropping empty segments."""
    return [
        unescape_csv_field(segment)
        for segment in value.split(TAG_DELIMITER)
        if segment
    ]


# =============================================================================
# TIMESTAMPS
# =============================================================================

def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a 'Z' suffix. Microseconds are kept when present."""
    if value.tzinfo is None:
        value = value.astimezone()
    text = value.astimezone(timezone.utc).isoformat()
    return text.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp. Naive values are read as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# ROWS
# =============================================================================

def expense_to_row(expense: Expense) -> list[str]:
    """Convert an Expense to its four column values (before CSV quoting)."""
    return [
        str(expense.id),
        str(expense.amount),
        encode_tags(expense.tags),
        format_timestamp(expense.date),
    ]


def row_to_expense(row: list[str]) -> Expense:
    """
    Convert parsed CSV columns to an Expense.

    Columns past the fourth are ignored.

    Raises:
        RowDecodeError: If the row is short or a column does not parse
    """
    if len(row) < len(HEADER):
        raise RowDecodeError(
            f"expected at least {len(HEADER)} fields, got {len(row)}"
        )

    raw_id, raw_amount, raw_tags, raw_date = row[:4]

    try:
        expense_id = UUID(raw_id.strip())
    except ValueError:
        raise RowDecodeError(f"invalid id: {raw_id!r}")

    try:
        amount = Decimal(raw_amount.strip())
    except InvalidOperation:
        raise RowDecodeError(f"invalid amount: {raw_amount!r}")
    if not amount.is_finite():
        raise RowDecodeError(f"amount is not finite: {raw_amount!r}")

    try:
        date = parse_timestamp(raw_date)
    except ValueError:
        raise RowDecodeError(f"invalid date: {raw_date!r}")

    return Expense(
        id=expense_id,
        amount=amount,
        tags=decode_tags(raw_tags),
        date=date,
    )


# =============================================================================
# WHOLE FILE
# =============================================================================

def encode_expenses(expenses: Iterable[Expense]) -> str:
    """
    Serialize expenses to CSV text, header first.

    An empty input produces the header line only. Rows are separated by
    newlines with no newline after the last one.
    """
    rows = [
        ",".join(escape_csv_field(value) for value in expense_to_row(expense))
        for expense in expenses
    ]
    return ",".join(HEADER) + "\n" + "\n".join(rows)


def _logical_records(lines: list[str], start: int) -> Iterator[tuple[int, str]]:
    """
    Yield (first line index, text) for each record from ``start`` onward.

    A record runs on to the next physical line while it holds an odd number
    of quote characters, i.e. while a quoted field is still open.
    """
    index = start
    while index < len(lines):
        first = index
        record = lines[index]
        index += 1
        while record.count(_QUOTE) % 2 and index < len(lines):
            record += "\n" + lines[index]
            index += 1
        yield first, record


def _try_decode(record: str) -> tuple[Optional[Expense], Optional[str]]:
    """
    Decode one record.

    Returns (expense, None) on success, (None, reason) on failure and
    (None, None) for a blank record.
    """
    if not record.strip():
        return None, None
    if "\n" in record and record.count(_QUOTE) % 2:
        return None, "unterminated quoted field"
    try:
        row = next(csv.reader(io.StringIO(record)), [])
    except csv.Error as e:
        return None, str(e)
    if not row or all(not field.strip() for field in row):
        return None, None
    try:
        return row_to_expense(row), None
    except RowDecodeError as e:
        return None, str(e)


def decode_expenses(text: str) -> list[Expense]:
    """
    Parse CSV text back into expenses, in file order.

    The first line is treated as the header and skipped. Blank lines are
    ignored. Any other line that cannot be decoded is logged and skipped.

    A quoted field that never closes would otherwise swallow the rest of
    the file. When a record spanning several lines fails, its first line is
    tried on its own and reading restarts on the line after it.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.split("\n")
    expenses = []

    start = 1  # line 0 is the header
    while start < len(lines):
        restart = None
        for first, record in _logical_records(lines, start):
            expense, error = _try_decode(record)
            if error and "\n" in record:
                expense, error = _try_decode(lines[first])
                restart = first + 1

            if error:
                logger.warning(
                    "csv_line_skipped",
                    line=first + 1,
                    reason=error,
                    content=lines[first],
                )
            elif expense is not None:
                expenses.append(expense)

            if restart is not None:
                break
        if restart is None:
            break
        start = restart

    return expenses
