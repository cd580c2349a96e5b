"""Tests for FastAPI application."""

from fastapi.testclient import TestClient

from tunely.domain.library import CatalogSnapshot
from tunely.domain.playback import PlaybackController
from web.backend.main import create_app
from web.backend.sync_manager import SyncManager


def test_health_endpoint(client):
    """Test health check endpoint returns 200."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_cors_headers(client):
    """Test CORS headers are present."""
    response = client.options(
        "/health",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert "access-control-allow-origin" in response.headers
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_lifespan_builds_shared_state(app, client):
    """One controller, catalog snapshot and sync manager per app."""
    state = app.state

    assert isinstance(state.player, PlaybackController)
    assert isinstance(state.catalog, CatalogSnapshot)
    assert isinstance(state.sync_manager, SyncManager)
    assert state.sync_manager.player is state.player
    assert state.normalizer is None
    assert state.db_path.exists()


def test_initial_volume_from_config(config):
    """[player] volume seeds the session."""
    config.player.volume = 0.4
    with TestClient(create_app(config)) as client:
        assert client.get("/api/player/state").json()["volume"] == 0.4


def test_catalog_loaded_on_startup(config, make_payload):
    """Tracks registered earlier are visible to a fresh app."""
    with TestClient(create_app(config)) as first:
        assert first.post("/api/tracks", json=make_payload()).status_code == 201

    app = create_app(config)
    with TestClient(app):
        assert [t.title for t in app.state.catalog.tracks] == ["Pink Pony Club"]
