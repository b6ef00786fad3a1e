"""
Configuration management for songdb
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
VALID_DUPLICATE_POLICIES = {"abort", "skip"}


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "songdb"
    return Path.home() / ".config" / "songdb"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "songdb"
    return Path.home() / ".local" / "share" / "songdb"


@dataclass
class DatabaseConfig:
    """Configuration for the SQLite track store."""

    path: str = field(default_factory=lambda: str(get_data_dir() / "songs.db"))


@dataclass
class LoaderConfig:
    """Configuration for CSV loading."""

    strict_header: bool = False
    on_duplicate: str = "abort"  # 'abort' (all-or-nothing) or 'skip'

    def validate(self) -> None:
        """Validate loader configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.on_duplicate not in VALID_DUPLICATE_POLICIES:
            raise ValueError(
                f"Invalid on_duplicate policy: {self.on_duplicate!r}. "
                f"Valid policies are: {sorted(VALID_DUPLICATE_POLICIES)}"
            )


@dataclass
class SearchConfig:
    """Configuration for artist search."""

    default_artist: str = "Drake"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    log_file: Optional[str] = None  # default: ~/.local/share/songdb/songdb.log
    console_output: bool = False


@dataclass
class Config:
    """Main configuration object."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/songdb (or ~/.config/songdb)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def _apply_env_overrides(config: Config) -> Config:
    database_path = os.environ.get("SONGDB_DATABASE")
    if database_path:
        config.database.path = str(Path(database_path).expanduser())

    log_level = os.environ.get("SONGDB_LOG_LEVEL")
    if log_level:
        if log_level.upper() in VALID_LOG_LEVELS:
            config.logging.level = log_level.upper()
        else:
            logger.warning(f"Ignoring invalid SONGDB_LOG_LEVEL: {log_level}")

    return config


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, keeping defaults for missing keys."""
    config = Config()

    if "database" in toml_data:
        database_data = toml_data["database"]
        path = database_data.get("path")
        if path:
            config.database = DatabaseConfig(path=str(Path(path).expanduser()))

    if "loader" in toml_data:
        loader_data = toml_data["loader"]
        config.loader = LoaderConfig(
            strict_header=loader_data.get(
                "strict_header", config.loader.strict_header
            ),
            on_duplicate=loader_data.get("on_duplicate", config.loader.on_duplicate),
        )
        try:
            config.loader.validate()
        except ValueError as e:
            logger.warning(f"Invalid loader configuration: {e}. Using defaults.")
            config.loader = LoaderConfig()

    if "search" in toml_data:
        search_data = toml_data["search"]
        config.search = SearchConfig(
            default_artist=search_data.get(
                "default_artist", config.search.default_artist
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        level = str(logging_data.get("level", config.logging.level)).upper()
        if level not in VALID_LOG_LEVELS:
            logger.warning(f"Invalid log level {level!r}, using INFO")
            level = "INFO"
        config.logging = LoggingConfig(
            level=level,
            log_file=log_file,
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - SONGDB_DATABASE
    - SONGDB_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        return _apply_env_overrides(Config())

    return _apply_env_overrides(parse_config(toml_data))


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# songdb configuration

[database]
# SQLite file holding the songs table
# path = "~/.local/share/songdb/songs.db"

[loader]
# Reject CSV files whose header does not match the expected columns
strict_header = false

# What to do when a track id is already stored: "abort" or "skip"
on_duplicate = "abort"

[search]
# Artist substring used when `songdb search` is called without one
default_artist = "Drake"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/songdb/songdb.log)
# log_file = "/path/to/songdb.log"

# Also output logs to stderr
console_output = false
""".strip()
