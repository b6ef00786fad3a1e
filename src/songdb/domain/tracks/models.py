"""
Track domain models.

Contains the record type for one row of music-track metadata.
"""

from typing import NamedTuple


class Track(NamedTuple):
    """One row of music-track metadata, uniquely identified by ``id``.

    ``artists`` is kept as the raw source string (e.g. "['Drake', 'Future']");
    artist search operates on that string, not on parsed names.
    """
    id: str
    name: str = ""
    artists: str = ""
    danceability: float = 0.0
    energy: float = 0.0
    key: int = 0  # Pitch class (0 = C, 1 = C#, ...), -1 if unknown
    loudness: float = 0.0  # dB
    mode: int = 0  # 1 = major, 0 = minor
    speechiness: float = 0.0
    acousticness: float = 0.0
    instrumentalness: float = 0.0
    liveness: float = 0.0
    valence: float = 0.0
    tempo: float = 0.0  # BPM
    duration_ms: int = 0
    time_signature: int = 0


def format_duration(duration_ms: int) -> str:
    """Format milliseconds as M:SS."""
    minutes, seconds = divmod(max(duration_ms, 0) // 1000, 60)
    return f"{minutes}:{seconds:02d}"


def format_track(track: Track) -> str:
    """Render a track as a single human-readable line."""
    return (
        f"{track.id} | {track.name} - {track.artists} | "
        f"{format_duration(track.duration_ms)} | {track.tempo:.1f} BPM | "
        f"key={track.key} mode={track.mode} time={track.time_signature} | "
        f"dance={track.danceability:g} energy={track.energy:g} "
        f"valence={track.valence:g} loudness={track.loudness:g}dB"
    )
