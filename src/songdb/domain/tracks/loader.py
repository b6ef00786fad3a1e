"""
CSV loading for track metadata.

Reads a comma-separated file, separates the header from the data rows and
converts each row into a Track by position (see schema.TRACK_SCHEMA).
"""

import csv
from pathlib import Path
from typing import Sequence

from loguru import logger

from songdb.errors import (
    FieldCountError,
    FormatError,
    LoadError,
    NumericFormatError,
    RowError,
    SchemaMismatchError,
)

from .models import Track
from .schema import FIELD_COUNT, FIELD_NAMES, TRACK_SCHEMA

# csv rejects fields over 128 KiB by default
MAX_FIELD_SIZE = 2**31 - 1


def _read_records(path: str | Path) -> tuple[list[str], list[tuple[int, list[str]]]]:
    """Read every CSV record, keeping the line number each record starts on.

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        OSError: If the file cannot be opened
        FormatError: If the file is empty, not UTF-8, or breaks CSV quoting rules
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    records: list[tuple[int, list[str]]] = []
    line_number = 1

    try:
        # utf-8-sig drops a leading BOM written by spreadsheet exports
        with open(path, "r", encoding="utf-8-sig", newline="") as csvfile:
            csv.field_size_limit(MAX_FIELD_SIZE)
            reader = csv.reader(csvfile, strict=True)
            for record in reader:
                if record:  # Blank lines yield empty records
                    records.append((line_number, record))
                line_number = reader.line_num + 1
    except UnicodeDecodeError as e:
        raise FormatError(f"CSV file must be UTF-8 encoded: {path} ({e.reason})") from e
    except csv.Error as e:
        raise FormatError(f"CSV parsing error: {e}", line_number=line_number) from e

    if not records:
        raise FormatError(f"CSV file is empty, expected a header row: {path}")

    (_, header), data = records[0], records[1:]
    logger.debug(f"Read {len(data)} data rows from {path}")
    return header, data


def parse_csv(path: str | Path) -> tuple[list[str], list[list[str]]]:
    """
    Parse a CSV file into its header and data rows.

    The whole file is read before returning. The first record is always the
    header and is not included in the returned rows.

    Args:
        path: Path to the CSV file

    Returns:
        Tuple of (header, rows)

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        FormatError: If the file is empty or the CSV grammar is violated
    """
    header, data = _read_records(path)
    return header, [row for _, row in data]


def validate_header(header: Sequence[str]) -> None:
    """
    Check a header row against the expected track columns.

    Names are compared case-insensitively, ignoring surrounding whitespace.

    Raises:
        SchemaMismatchError: If column names or order differ from the schema
    """
    normalized = [column.strip().lower() for column in header]
    if len(normalized) != FIELD_COUNT:
        raise SchemaMismatchError(
            f"Header has {len(normalized)} columns, expected {FIELD_COUNT}: "
            f"{', '.join(FIELD_NAMES)}",
            line_number=1,
        )

    for position, (actual, expected) in enumerate(zip(normalized, FIELD_NAMES)):
        if actual != expected:
            raise SchemaMismatchError(
                f"Header column {position + 1} is {actual!r}, expected {expected!r}",
                line_number=1,
            )


def row_to_track(row: Sequence[str], line_number: int | None = None) -> Track:
    """
    Convert one CSV data row into a Track.

    Args:
        row: Exactly 16 fields in schema order
        line_number: Source line, used in error messages

    Raises:
        FieldCountError: If the row does not have exactly 16 fields
        NumericFormatError: If a float or integer field does not parse
        FormatError: If the id is empty
    """
    if len(row) != FIELD_COUNT:
        raise FieldCountError(FIELD_COUNT, len(row), line_number=line_number)

    values = []
    for spec, raw in zip(TRACK_SCHEMA, row):
        try:
            values.append(spec.parser(raw))
        except ValueError as e:
            if spec.is_numeric:
                raise NumericFormatError(spec.name, raw, line_number=line_number) from e
            raise FormatError(str(e), line_number=line_number) from e

    return Track(*values)


def load_tracks(path: str | Path, strict_header: bool = False) -> list[Track]:
    """
    Load every track from a CSV file.

    All rows are converted before anything is returned. Row failures are
    collected with their line numbers and raised together, so a single run
    reports every problem in the file.

    Args:
        path: Path to the CSV file
        strict_header: Reject files whose header differs from the schema

    Returns:
        Tracks in file order

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        FormatError: If the file cannot be parsed as CSV
        SchemaMismatchError: If strict_header is set and the header differs
        LoadError: If one or more rows failed to convert
    """
    header, data = _read_records(path)
    if strict_header:
        validate_header(header)

    tracks: list[Track] = []
    errors: list[RowError] = []

    for line_number, row in data:
        try:
            tracks.append(row_to_track(row, line_number=line_number))
        except FormatError as e:
            errors.append(RowError(line_number, e.detail))

    if errors:
        logger.warning(f"{len(errors)} of {len(data)} rows failed to load from {path}")
        for error in errors:
            logger.debug(f"Line {error.line_number}: {error.message}")
        raise LoadError(errors)

    logger.info(f"Loaded {len(tracks)} tracks from {path}")
    return tracks
