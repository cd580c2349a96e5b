"""
Command line entry point for Tunely.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from tunely.core.config import Config, ensure_directories, load_config
from tunely.core.database import get_database_path, init_database
from tunely.core.output import setup_from_config

# Project root (where pyproject.toml and web/ live in a source checkout)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


def prepare(config: Config) -> Path:
    """Create directories, start logging and bring the database schema up to date."""
    ensure_directories()
    setup_from_config(config.logging)
    db_path = get_database_path(config.catalog)
    init_database(db_path)
    return db_path


def run_init() -> int:
    """Write default config (if missing) and create the database."""
    config = load_config()
    db_path = prepare(config)
    print(f"Database ready at: {db_path}")
    return 0


def run_server(host: Optional[str], port: Optional[int], reload: bool) -> int:
    """Serve the FastAPI backend with uvicorn."""
    import uvicorn

    config = load_config()
    prepare(config)

    host = host or config.server.host
    port = port or config.server.port
    logger.info(f"Starting Tunely API on http://{host}:{port}")

    uvicorn.run(
        "web.backend.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        app_dir=str(PROJECT_ROOT),
    )
    return 0


def main() -> None:
    """Main entry point for the tunely command."""
    parser = argparse.ArgumentParser(
        description="Tunely - shared music library and player",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")

    subparsers.add_parser("init", help="Create default config and database")

    serve_parser = subparsers.add_parser("serve", help="Run the web API")
    serve_parser.add_argument("--host", help="Bind address (default from config)")
    serve_parser.add_argument("--port", type=int, help="Port (default from config)")
    serve_parser.add_argument(
        "--reload",
        action="store_true",
        help="Reload on code changes (development)",
    )

    args = parser.parse_args()

    if args.subcommand == "init":
        sys.exit(run_init())
    elif args.subcommand == "serve":
        sys.exit(run_server(args.host, args.port, args.reload))

    parser.print_help()
    sys.exit(1)


if __name__ == "__main__":
    main()
