"""songdb - load music-track CSV metadata into SQLite and search it by artist."""

__version__ = "0.1.0"
