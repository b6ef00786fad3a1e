"""Exceptions raised by the loader and the track store."""

from typing import NamedTuple


class SongDBError(Exception):
    """Base exception for songdb operations."""

    pass


class FormatError(SongDBError, ValueError):
    """Raised when CSV content is malformed."""

    def __init__(self, message: str, line_number: int | None = None):
        self.detail = message
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class FieldCountError(FormatError):
    """Raised when a row does not have the expected number of fields."""

    def __init__(self, expected: int, actual: int, line_number: int | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} fields, got {actual}", line_number=line_number
        )


class NumericFormatError(FormatError):
    """Raised when a numeric field cannot be parsed."""

    def __init__(self, field_name: str, value: str, line_number: int | None = None):
        self.field_name = field_name
        self.value = value
        super().__init__(
            f"{field_name} must be a valid number, got {value!r}",
            line_number=line_number,
        )


class SchemaMismatchError(FormatError):
    """Raised when the header row does not match the track schema."""

    pass


class RowError(NamedTuple):
    """A single row-level failure collected during a load."""

    line_number: int
    message: str


class LoadError(FormatError):
    """Raised after a load when one or more rows failed to convert."""

    def __init__(self, errors: list[RowError]):
        self.errors = errors
        super().__init__(f"{len(errors)} row(s) failed to load")


class StorageError(SongDBError):
    """Raised on backend-level failures (I/O, permissions, corruption)."""

    pass


class DuplicateKeyError(StorageError):
    """Raised when a track id already exists in the store."""

    def __init__(self, track_id: str, message: str | None = None):
        self.track_id = track_id
        super().__init__(message or f"Track id already stored: {track_id}")
