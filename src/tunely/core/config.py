"""
Configuration management for Tunely
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class ServerConfig:
    """Configuration for the FastAPI backend."""

    host: str = "127.0.0.1"
    port: int = 8642
    allowed_origins: List[str] = field(
        default_factory=lambda: ["http://localhost:5173"]
    )


@dataclass
class CatalogConfig:
    """Configuration for the track catalog store."""

    database_path: Optional[str] = None  # default: <data dir>/tunely.db
    accepted_formats: List[str] = field(
        default_factory=lambda: ["mp3", "flac", "wav", "m4a", "ogg"]
    )


@dataclass
class AIConfig:
    """Configuration for the query normalization model."""

    openai_api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    enabled: bool = True


@dataclass
class SearchConfig:
    """Configuration for search behaviour."""

    debounce_ms: int = 300

    def validate(self) -> None:
        """Validate search configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if self.debounce_ms < 0:
            raise ValueError(f"debounce_ms must be >= 0, got {self.debounce_ms}")


@dataclass
class PlayerConfig:
    """Configuration for the playback session."""

    volume: float = 1.0

    def validate(self) -> None:
        """Validate player configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"volume must be within [0, 1], got {self.volume}")


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # default: <data dir>/tunely.log
    rotation: str = "10 MB"
    retention: int = 5
    console_output: bool = False


@dataclass
class Config:
    """Main configuration object."""

    server: ServerConfig = field(default_factory=ServerConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "tunely"
    return Path.home() / ".config" / "tunely"


def get_data_dir() -> Path:
    """Get the data directory path (database, logs)."""
    override = os.environ.get("TUNELY_DATA_DIR")
    if override:
        return Path(override).expanduser()
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "tunely"
    return Path.home() / ".local" / "share" / "tunely"


def _find_project_config() -> Optional[Path]:
    """Find config.toml in the project root, marked by pyproject.toml."""
    current = Path(__file__).resolve().parent
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            config_path = parent / "config.toml"
            if config_path.exists():
                return config_path
            return None
    return None


def get_config_path() -> Path:
    """Get the configuration file path.

    Checks for config.toml in the following order:
    1. Project root (detected via pyproject.toml) - for development
    2. Current working directory
    3. ~/.config/tunely/config.toml
    """
    project_config = _find_project_config()
    if project_config:
        return project_config

    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create default configuration file content."""
    return """# Tunely Configuration

[server]
host = "127.0.0.1"
port = 8642
# Origins allowed by CORS (override with TUNELY_ALLOWED_ORIGINS, comma-separated)
allowed_origins = ["http://localhost:5173"]

[catalog]
# database_path = "~/.local/share/tunely/tunely.db"
accepted_formats = ["mp3", "flac", "wav", "m4a", "ogg"]

[ai]
# API key can also be provided through OPENAI_API_KEY or a .env file
# openai_api_key = "sk-..."
model = "gpt-4o-mini"
enabled = true

[search]
# Quiet period before a typed query is sent to the normalizer
debounce_ms = 300

[player]
# Initial volume, 0.0 - 1.0
volume = 1.0

[logging]
level = "INFO"
# log_file = "~/.local/share/tunely/tunely.log"
rotation = "10 MB"
retention = 5
console_output = false
"""


def _apply_env_overrides(config: Config) -> None:
    """Environment variables win over values from config.toml."""
    api_key = os.environ.get("OPENAI_API_KEY")
    if api_key:
        config.ai.openai_api_key = api_key

    origins = os.environ.get("TUNELY_ALLOWED_ORIGINS")
    if origins:
        config.server.allowed_origins = [
            origin.strip() for origin in origins.split(",") if origin.strip()
        ]


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - OPENAI_API_KEY
    - TUNELY_ALLOWED_ORIGINS
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
        config = Config()
        _apply_env_overrides(config)
        return config

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Error loading configuration from {config_path}: {e}")
        logger.warning("Using default configuration.")
        config = Config()
        _apply_env_overrides(config)
        return config

    config = parse_config(toml_data)
    _apply_env_overrides(config)
    return config


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, falling back to defaults per section."""
    config = Config()

    if "server" in toml_data:
        server_data = toml_data["server"]
        config.server = ServerConfig(
            host=server_data.get("host", config.server.host),
            port=int(server_data.get("port", config.server.port)),
            allowed_origins=server_data.get(
                "allowed_origins", config.server.allowed_origins
            ),
        )

    if "catalog" in toml_data:
        catalog_data = toml_data["catalog"]
        database_path = catalog_data.get("database_path")
        if database_path:
            database_path = str(Path(database_path).expanduser())
        config.catalog = CatalogConfig(
            database_path=database_path,
            accepted_formats=[
                fmt.lower().lstrip(".")
                for fmt in catalog_data.get(
                    "accepted_formats", config.catalog.accepted_formats
                )
            ],
        )

    if "ai" in toml_data:
        ai_data = toml_data["ai"]
        config.ai = AIConfig(
            openai_api_key=ai_data.get("openai_api_key"),
            model=ai_data.get("model", config.ai.model),
            enabled=ai_data.get("enabled", config.ai.enabled),
        )

    if "search" in toml_data:
        search_data = toml_data["search"]
        config.search = SearchConfig(
            debounce_ms=int(search_data.get("debounce_ms", config.search.debounce_ms)),
        )
        try:
            config.search.validate()
        except ValueError as e:
            logger.warning(f"Invalid search configuration: {e}")
            config.search = SearchConfig()

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            volume=float(player_data.get("volume", config.player.volume)),
        )
        try:
            config.player.validate()
        except ValueError as e:
            logger.warning(f"Invalid player configuration: {e}")
            config.player = PlayerConfig()

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            rotation=logging_data.get("rotation", config.logging.rotation),
            retention=logging_data.get("retention", config.logging.retention),
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def ensure_directories() -> None:
    """Ensure config and data directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
