"""
SQLite-backed track store.

Holds every Track in a single ``songs`` table keyed by track id.

Artist search uses SQLite's built-in LIKE, which is case-insensitive for
ASCII letters only: "drake" matches "Drake", but "é" does not match "É".
"""

import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Literal

from loguru import logger

from songdb.core.database import connect
from songdb.errors import DuplicateKeyError, StorageError

from .models import Track
from .schema import FIELD_NAMES, TRACK_SCHEMA

TABLE_NAME = "songs"

DuplicatePolicy = Literal["abort", "skip"]

_COLUMNS = ", ".join(FIELD_NAMES)
_PLACEHOLDERS = ", ".join("?" for _ in FIELD_NAMES)

CREATE_TABLE_SQL = "CREATE TABLE IF NOT EXISTS {table} (\n{columns}\n)".format(
    table=TABLE_NAME,
    columns=",\n".join(f"    {spec.name} {spec.sql_type}" for spec in TRACK_SCHEMA),
)
INSERT_SQL = f"INSERT INTO {TABLE_NAME} ({_COLUMNS}) VALUES ({_PLACEHOLDERS})"
SELECT_SQL = f"SELECT {_COLUMNS} FROM {TABLE_NAME}"


def escape_like(text: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so text matches literally."""
    return (
        text.replace(escape, escape * 2)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


def db_row_to_track(row: sqlite3.Row) -> Track:
    """Convert a database row to a Track."""
    return Track(**{name: row[name] for name in FIELD_NAMES})


@dataclass
class InsertReport:
    """Outcome of a bulk insert."""

    inserted: int = 0
    duplicates: list[str] = field(default_factory=list)


class TrackStore:
    """A single connection to the songs database.

    Use ``open_store`` (or ``TrackStore.open`` as a context manager) so the
    connection is always closed.
    """

    def __init__(self, conn: sqlite3.Connection, path: Path):
        self._conn = conn
        self.path = path

    @classmethod
    def open(cls, path: str | Path) -> "TrackStore":
        """
        Open the store at path.

        A missing database file is created and the songs table initialized.
        An existing file is opened as-is, without checking its schema.

        Raises:
            StorageError: On I/O or permission failure
        """
        path = Path(path).expanduser()
        is_new = not path.exists()

        conn = connect(path)
        store = cls(conn, path)

        if is_new:
            try:
                store._create_schema()
            except StorageError:
                conn.close()
                path.unlink(missing_ok=True)
                raise
            logger.info(f"Created track store: {path}")

        return store

    def _create_schema(self) -> None:
        try:
            with self._conn:
                self._conn.execute(CREATE_TABLE_SQL)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot initialize schema in {self.path}: {e}") from e

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "TrackStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def insert_all(
        self, tracks: Iterable[Track], on_duplicate: DuplicatePolicy = "abort"
    ) -> InsertReport:
        """
        Insert tracks one statement at a time inside a single transaction.

        Args:
            tracks: Tracks to insert
            on_duplicate: 'abort' rolls back the whole batch on the first id
                collision; 'skip' leaves conflicting rows out and commits the rest

        Returns:
            InsertReport with the insert count and any skipped ids

        Raises:
            DuplicateKeyError: On an id collision with on_duplicate='abort'
            StorageError: On any other backend failure (batch rolled back)
        """
        if on_duplicate not in ("abort", "skip"):
            raise ValueError(f"Unknown duplicate policy: {on_duplicate!r}")

        report = InsertReport()

        try:
            with self._conn:  # Commits on success, rolls back on exception
                for track in tracks:
                    try:
                        self._conn.execute(INSERT_SQL, tuple(track))
                    except sqlite3.IntegrityError as e:
                        if "UNIQUE" not in str(e).upper():
                            raise StorageError(
                                f"Cannot insert track {track.id!r}: {e}"
                            ) from e
                        if on_duplicate == "abort":
                            raise DuplicateKeyError(track.id) from e
                        logger.warning(f"Skipping duplicate track id: {track.id}")
                        report.duplicates.append(track.id)
                        continue
                    report.inserted += 1
        except DuplicateKeyError:
            logger.error("Duplicate track id, insert batch rolled back")
            raise
        except (sqlite3.Error, OverflowError) as e:
            raise StorageError(f"Insert into {self.path} failed: {e}") from e

        logger.info(
            f"Inserted {report.inserted} tracks ({len(report.duplicates)} duplicates skipped)"
        )
        return report

    def _query(self, sql: str, params: tuple = ()) -> list[Track]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Query on {self.path} failed: {e}") from e
        return [db_row_to_track(row) for row in rows]

    def get_all(self) -> list[Track]:
        """Return every stored track, in storage-engine order."""
        return self._query(SELECT_SQL)

    def find_by_artist_substring(self, needle: str) -> list[Track]:
        """
        Return tracks whose artists field contains needle.

        Matching is case-insensitive for ASCII letters (SQLite LIKE).
        This is a plain substring search, not a LIKE pattern: "%", "_" and
        "\\" in needle are escaped and match themselves. An empty needle
        matches every track.
        """
        pattern = f"%{escape_like(needle)}%"
        return self._query(f"{SELECT_SQL} WHERE artists LIKE ? ESCAPE '\\'", (pattern,))

    def count(self) -> int:
        """Return the number of stored tracks."""
        try:
            (total,) = self._conn.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Query on {self.path} failed: {e}") from e
        return total


@contextmanager
def open_store(path: str | Path) -> Iterator[TrackStore]:
    """Open the track store and close it on every exit path."""
    store = TrackStore.open(path)
    try:
        yield store
    finally:
        store.close()
