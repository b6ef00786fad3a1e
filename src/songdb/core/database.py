"""
SQLite connection handling for songdb
"""

import sqlite3
from pathlib import Path
from typing import Optional

from loguru import logger

from songdb.errors import StorageError

from .config import Config, get_data_dir


def get_database_path(config: Optional[Config] = None) -> Path:
    """Get the path to the SQLite database file."""
    if config is not None:
        return Path(config.database.path).expanduser()
    return get_data_dir() / "songs.db"


def connect(db_path: Path) -> sqlite3.Connection:
    """Open a SQLite connection, creating parent directories as needed.

    Raises:
        StorageError: If the directory or database file cannot be opened
    """
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(db_path)
    except (OSError, sqlite3.Error) as e:
        raise StorageError(f"Cannot open database {db_path}: {e}") from e

    conn.row_factory = sqlite3.Row  # Enable dict-like access
    logger.debug(f"Opened database connection: {db_path}")
    return conn
