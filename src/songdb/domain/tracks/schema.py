"""
Positional track schema.

A single ordered table of (field name, semantic type, parser) drives CSV
parsing, arity checks, error messages and the SQLite column layout.
"""

import math
import re
from typing import Any, Callable, NamedTuple

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_INFINITY_LITERALS = ("inf", "infinity")

# SQLite INTEGER is a signed 64-bit value
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def parse_text(value: str) -> str:
    return value


def parse_id(value: str) -> str:
    """Track ids are required; an empty id is rejected."""
    if not value.strip():
        raise ValueError("id must not be empty")
    return value


def parse_float(value: str) -> float:
    """Parse a floating-point field.

    Python's float() also accepts digit separators and padding whitespace;
    both are rejected so "1_0" or " 0.5" count as malformed. NaN is rejected
    because SQLite stores it as NULL. Infinity is only accepted when spelled
    out; a finite literal that overflows ("1e400") is out of range.
    """
    if not value or "_" in value or value != value.strip():
        raise ValueError(f"invalid float: {value!r}")
    result = float(value)
    if math.isnan(result):
        raise ValueError(f"invalid float: {value!r}")
    if math.isinf(result) and value.lstrip("+-").lower() not in _INFINITY_LITERALS:
        raise ValueError(f"float out of range: {value!r}")
    return result


def parse_int(value: str) -> int:
    """Parse an integer field, tolerating exactly one trailing ".0".

    Sources often write integer columns as floats ("5.0"). "5.5" and
    "5.00" are rejected rather than truncated.
    """
    if value.endswith(".0"):
        value = value[:-2]
    if not _INTEGER_RE.fullmatch(value):
        raise ValueError(f"invalid integer: {value!r}")
    result = int(value)
    if not INT_MIN <= result <= INT_MAX:
        raise ValueError(f"integer out of range: {value!r}")
    return result


class FieldSpec(NamedTuple):
    """One column of the track schema."""

    name: str
    kind: str  # 'text', 'real' or 'integer'
    parser: Callable[[str], Any]
    sql_type: str

    @property
    def is_numeric(self) -> bool:
        return self.kind in ("real", "integer")


def _text(name: str) -> FieldSpec:
    return FieldSpec(name, "text", parse_text, "TEXT")


def _real(name: str) -> FieldSpec:
    return FieldSpec(name, "real", parse_float, "REAL")


def _integer(name: str) -> FieldSpec:
    return FieldSpec(name, "integer", parse_int, "INTEGER")


TRACK_SCHEMA: tuple[FieldSpec, ...] = (
    FieldSpec("id", "text", parse_id, "TEXT NOT NULL PRIMARY KEY"),
    _text("name"),
    _text("artists"),
    _real("danceability"),
    _real("energy"),
    _integer("key"),
    _real("loudness"),
    _integer("mode"),
    _real("speechiness"),
    _real("acousticness"),
    _real("instrumentalness"),
    _real("liveness"),
    _real("valence"),
    _real("tempo"),
    _integer("duration_ms"),
    _integer("time_signature"),
)

FIELD_NAMES: tuple[str, ...] = tuple(spec.name for spec in TRACK_SCHEMA)
FIELD_COUNT = len(TRACK_SCHEMA)
