import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from tunely.core.config import Config, load_config
from tunely.core.database import get_database_path, get_db_connection, init_database
from tunely.domain.library import CatalogSnapshot
from tunely.domain.playback import EventChannel, PlaybackController
from tunely.domain.search import create_normalizer

from .sync_manager import SyncManager


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the API application.

    The playback controller, catalog snapshot and sync manager are created
    once in the lifespan handler and reached through ``app.state``.
    """
    config = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db_path = get_database_path(config.catalog)
        init_database(db_path)

        catalog = CatalogSnapshot()
        with get_db_connection(db_path) as conn:
            catalog.refresh(conn)

        player = PlaybackController(volume=config.player.volume)
        channel = EventChannel()
        player.subscribe(channel)
        sync_manager = SyncManager(player=player)

        app.state.config = config
        app.state.db_path = db_path
        app.state.catalog = catalog
        app.state.player = player
        app.state.normalizer = create_normalizer(config.ai)
        app.state.sync_manager = sync_manager

        pump = asyncio.create_task(sync_manager.pump(channel))
        logger.info("Tunely API started")
        try:
            yield
        finally:
            pump.cancel()
            sync_manager.shutdown()
            logger.info("Tunely API stopped")

    app = FastAPI(title="Tunely Web API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from web.backend.routers import live, player, search, tracks

    app.include_router(tracks.router, prefix="/api", tags=["tracks"])
    app.include_router(player.router, prefix="/api", tags=["player"])
    app.include_router(search.router, prefix="/api", tags=["search"])
    app.include_router(live.router)

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
