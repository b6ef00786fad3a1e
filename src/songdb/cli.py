"""
songdb CLI - Entry point

Loads track CSV files into the SQLite store and searches it by artist.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from songdb.core import config
from songdb.core.console import safe_print
from songdb.core.database import get_database_path
from songdb.core.output import log, setup_loguru
from songdb.domain.tracks import format_track, load_tracks, open_store
from songdb.errors import FormatError, LoadError, StorageError

MAX_ERRORS_SHOWN = 10


def run_load(
    csv_path: str,
    db_path: Path,
    strict_header: bool = False,
    on_duplicate: str = "abort",
) -> int:
    """Load a CSV file into the store.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    log(f"Loading tracks from: {csv_path}")

    try:
        tracks = load_tracks(csv_path, strict_header=strict_header)
    except LoadError as e:
        log(f"❌ {e}", "error")
        for error in e.errors[:MAX_ERRORS_SHOWN]:
            log(f"   • Line {error.line_number}: {error.message}", "error")
        if len(e.errors) > MAX_ERRORS_SHOWN:
            log(f"   ... and {len(e.errors) - MAX_ERRORS_SHOWN} more errors", "error")
        return 1
    except (OSError, FormatError) as e:
        log(f"❌ {e}", "error")
        return 1

    try:
        with open_store(db_path) as store:
            report = store.insert_all(tracks, on_duplicate=on_duplicate)
            total = store.count()
    except StorageError as e:
        log(f"❌ {e}", "error")
        return 1

    log(f"✅ Inserted {report.inserted} tracks into {db_path}", "success")
    if report.duplicates:
        log(f"⚠️  Skipped {len(report.duplicates)} duplicate ids", "warning")
    log(f"   Store now holds {total} tracks")
    return 0


def _print_tracks(tracks) -> None:
    for track in tracks:
        safe_print(format_track(track))


def run_search(needle: str, db_path: Path) -> int:
    """Print every track whose artists contain needle.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        with open_store(db_path) as store:
            tracks = store.find_by_artist_substring(needle)
    except StorageError as e:
        log(f"❌ {e}", "error")
        return 1

    logger.info(f"Artist search {needle!r} matched {len(tracks)} tracks")
    _print_tracks(tracks)
    safe_print(f"{len(tracks)} tracks matching {needle!r}", style="dim")
    return 0


def run_list(db_path: Path) -> int:
    """Print every stored track.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    try:
        with open_store(db_path) as store:
            tracks = store.get_all()
    except StorageError as e:
        log(f"❌ {e}", "error")
        return 1

    _print_tracks(tracks)
    safe_print(f"{len(tracks)} tracks", style="dim")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the songdb command."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--db',
        help='SQLite database file (default: from config, ~/.local/share/songdb/songs.db)'
    )
    common.add_argument(
        '--config',
        help='Path to config.toml (default: ./config.toml or ~/.config/songdb/config.toml)'
    )

    parser = argparse.ArgumentParser(
        prog='songdb',
        description='songdb - Load track metadata CSV files and search by artist',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest='subcommand', help='Available commands')

    load_parser = subparsers.add_parser(
        'load', parents=[common], help='Load a track CSV file into the store'
    )
    load_parser.add_argument('csv', help='CSV file with a header row and 16 columns')
    load_parser.add_argument(
        '--strict-header',
        action='store_true',
        default=None,
        help='Reject files whose header does not match the expected columns'
    )
    load_parser.add_argument(
        '--skip-duplicates',
        action='store_true',
        default=None,
        help='Skip ids already in the store instead of aborting the load'
    )

    search_parser = subparsers.add_parser(
        'search', parents=[common], help='Find tracks by artist substring'
    )
    search_parser.add_argument(
        'artist',
        nargs='?',
        help='Artist substring (default: [search] default_artist from config)'
    )

    subparsers.add_parser('list', parents=[common], help='Print every stored track')
    subparsers.add_parser('config', help='Print a default config.toml')

    return parser


def _load_config(config_path: Optional[str]) -> config.Config:
    current_config = config.load_config(Path(config_path) if config_path else None)

    log_file = (
        Path(current_config.logging.log_file)
        if current_config.logging.log_file
        else None
    )
    setup_loguru(
        log_file,
        level=current_config.logging.level,
        console_output=current_config.logging.console_output,
    )
    return current_config


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the songdb command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.subcommand is None:
        parser.print_help()
        return 1

    if args.subcommand == 'config':
        print(config.create_default_config())
        return 0

    current_config = _load_config(args.config)
    db_path = Path(args.db).expanduser() if args.db else get_database_path(current_config)

    if args.subcommand == 'load':
        strict_header = (
            args.strict_header
            if args.strict_header is not None
            else current_config.loader.strict_header
        )
        on_duplicate = (
            'skip' if args.skip_duplicates else current_config.loader.on_duplicate
        )
        return run_load(args.csv, db_path, strict_header, on_duplicate)

    if args.subcommand == 'search':
        needle = args.artist if args.artist is not None else current_config.search.default_artist
        return run_search(needle, db_path)

    return run_list(db_path)


if __name__ == "__main__":
    sys.exit(main())
