"""Shared fixtures for songdb tests."""

import csv
import sys
from pathlib import Path

import pytest
from loguru import logger

from songdb.domain.tracks import FIELD_NAMES, Track

DEFAULT_VALUES = {
    "id": "4uLU6hMCjMI75M1A2tKUQC",
    "name": "Test Track",
    "artists": "['Test Artist']",
    "danceability": "0.512",
    "energy": "0.734",
    "key": "5.0",
    "loudness": "-6.321",
    "mode": "1.0",
    "speechiness": "0.0457",
    "acousticness": "0.123",
    "instrumentalness": "0.0",
    "liveness": "0.118",
    "valence": "0.402",
    "tempo": "121.987",
    "duration_ms": "215000.0",
    "time_signature": "4.0",
}


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep config, data and log files inside the test's temp directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("SONGDB_DATABASE", raising=False)
    monkeypatch.delenv("SONGDB_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # setup_loguru() replaces the default handler; restore it
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def make_row():
    """Build a 16-field CSV row, overriding any field by name."""

    def _make_row(**overrides: str) -> list[str]:
        values = {**DEFAULT_VALUES, **overrides}
        return [values[name] for name in FIELD_NAMES]

    return _make_row


@pytest.fixture
def make_track():
    """Build a Track matching DEFAULT_VALUES, overriding any field by name."""

    def _make_track(**overrides) -> Track:
        values = dict(
            id=DEFAULT_VALUES["id"],
            name="Test Track",
            artists="['Test Artist']",
            danceability=0.512,
            energy=0.734,
            key=5,
            loudness=-6.321,
            mode=1,
            speechiness=0.0457,
            acousticness=0.123,
            instrumentalness=0.0,
            liveness=0.118,
            valence=0.402,
            tempo=121.987,
            duration_ms=215000,
            time_signature=4,
        )
        values.update(overrides)
        return Track(**values)

    return _make_track


@pytest.fixture
def write_csv(tmp_path):
    """Write rows (header first) to a CSV file and return its path."""

    def _write_csv(rows: list[list[str]], name: str = "tracks.csv") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline="") as f:
            csv.writer(f).writerows(rows)
        return path

    return _write_csv


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "songs.db"
