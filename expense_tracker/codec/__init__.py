"""CSV encoding and decoding of expense lists."""

from expense_tracker.codec.csv_codec import (
    HEADER,
    TAG_DELIMITER,
    RowDecodeError,
    decode_expenses,
    decode_tags,
    encode_expenses,
    encode_tags,
    escape_csv_field,
    expense_to_row,
    format_timestamp,
    parse_timestamp,
    row_to_expense,
    unescape_csv_field,
)

__all__ = [
    "HEADER",
    "TAG_DELIMITER",
    "RowDecodeError",
    "decode_expenses",
    "decode_tags",
    "encode_expenses",
    "encode_tags",
    "escape_csv_field",
    "expense_to_row",
    "format_timestamp",
    "parse_timestamp",
    "row_to_expense",
    "unescape_csv_field",
]
