"""Pytest configuration for backend tests.

Every test app gets its own SQLite file and data directory, and AI search is
disabled unless a test installs a normalizer on ``app.state``.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add repository root to path so ``web.backend`` imports resolve
repo_root = Path(__file__).parent.parent.parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from tunely.core.config import AIConfig, CatalogConfig, Config, SearchConfig  # noqa: E402
from web.backend.main import create_app  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def config(tmp_path, monkeypatch) -> Config:
    monkeypatch.setenv("TUNELY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return Config(
        catalog=CatalogConfig(database_path=str(tmp_path / "data" / "tunely.db")),
        ai=AIConfig(enabled=False),
        search=SearchConfig(debounce_ms=10),
    )


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    """Test client with the lifespan handler running."""
    with TestClient(app) as test_client:
        yield test_client


def track_payload(title: str = "Pink Pony Club", **overrides) -> dict:
    payload = {
        "title": title,
        "artists": ["Chappell Roan"],
        "album": "The Rise and Fall of a Midwest Princess",
        "coverUrl": "https://cdn.example.com/covers/ppc.jpg",
        "musicUrl": f"https://cdn.example.com/music/{title.replace(' ', '_')}.mp3",
        "userId": "user-1",
        "userName": "Uploader",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    """Factory for valid POST /api/tracks bodies (camelCase)."""
    return track_payload


@pytest.fixture
def add_track(client):
    """Register a track through the API and return its JSON."""

    def _add(title: str = "Pink Pony Club", **overrides) -> dict:
        response = client.post("/api/tracks", json=track_payload(title, **overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _add
