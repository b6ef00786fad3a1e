"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Database connections (SQLite)
- Console and log output (Rich, Loguru)
"""

# Configuration
from .config import (
    Config,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
)

# Database
from .database import get_database_path, connect

# Console and output
from .console import get_console, safe_print
from .output import setup_loguru, log

__all__ = [
    # Config
    "Config",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    # Database
    "get_database_path",
    "connect",
    # Console and output
    "get_console",
    "safe_print",
    "setup_loguru",
    "log",
]
