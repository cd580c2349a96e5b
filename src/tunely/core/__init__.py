"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML + .env)
- Database connections (SQLite)
- Logging setup (Loguru)

The core layer has no dependencies on the domain layer.
"""

from .config import (
    Config,
    load_config,
    parse_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
    ensure_directories,
)

from .database import (
    SCHEMA_VERSION,
    connect,
    get_database_path,
    get_db_connection,
    init_database,
)

from .output import setup_loguru, setup_from_config

__all__ = [
    "Config",
    "load_config",
    "parse_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    "ensure_directories",
    "SCHEMA_VERSION",
    "connect",
    "get_database_path",
    "get_db_connection",
    "init_database",
    "setup_loguru",
    "setup_from_config",
]
