"""Tracks domain - CSV loading and SQLite storage of track metadata.

This domain handles:
- The Track record and its positional schema
- Parsing CSV files into tracks
- Storing tracks and searching them by artist
"""

# Models
from .models import Track, format_track

# Schema
from .schema import TRACK_SCHEMA, FIELD_NAMES, FIELD_COUNT, FieldSpec

# CSV loading
from .loader import parse_csv, row_to_track, validate_header, load_tracks

# Storage
from .store import TrackStore, InsertReport, open_store

__all__ = [
    # Models
    "Track",
    "format_track",
    # Schema
    "TRACK_SCHEMA",
    "FIELD_NAMES",
    "FIELD_COUNT",
    "FieldSpec",
    # CSV loading
    "parse_csv",
    "row_to_track",
    "validate_header",
    "load_tracks",
    # Storage
    "TrackStore",
    "InsertReport",
    "open_store",
]
