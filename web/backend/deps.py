from typing import AsyncGenerator, Optional

from fastapi import Request

from tunely.core.config import Config
from tunely.core.database import get_db_connection
from tunely.domain.library import CatalogSnapshot
from tunely.domain.playback import PlaybackController
from tunely.domain.search import QueryNormalizer

from .sync_manager import SyncManager


async def get_db(request: Request) -> AsyncGenerator:
    """FastAPI dependency for database connections."""
    with get_db_connection(request.app.state.db_path) as conn:
        yield conn


def get_config(request: Request) -> Config:
    """FastAPI dependency for configuration."""
    return request.app.state.config


def get_player(request: Request) -> PlaybackController:
    """The application's single playback controller."""
    return request.app.state.player


def get_catalog(request: Request) -> CatalogSnapshot:
    return request.app.state.catalog


def get_normalizer(request: Request) -> Optional[QueryNormalizer]:
    """Query normalizer, None when AI search is unavailable."""
    return request.app.state.normalizer


def get_sync_manager(request: Request) -> SyncManager:
    return request.app.state.sync_manager
