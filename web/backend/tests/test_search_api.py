"""Tests for the search endpoint."""

from unittest.mock import Mock

import pytest

from tunely.domain.search import AIError, NormalizedQuery


@pytest.fixture
def catalog(add_track):
    add_track("Pink Pony Club")
    add_track("Tik Tok", artists=["Kesha"], album="Animal")
    add_track("Femininomenon")


def titles(response) -> list[str]:
    return [track["title"] for track in response.json()["tracks"]]


def test_empty_query_returns_catalog(client, catalog):
    response = client.post("/api/search", json={"query": ""})

    assert response.status_code == 200
    assert titles(response) == ["Femininomenon", "Tik Tok", "Pink Pony Club"]
    assert response.json()["usedFallback"] is False


def test_basic_search_without_normalizer(client, catalog):
    response = client.post("/api/search", json={"query": "KESHA"})

    assert titles(response) == ["Tik Tok"]
    assert response.json()["usedFallback"] is True
    assert response.json()["correctedQuery"] is None


def test_normalized_search(app, client, catalog):
    normalizer = Mock()
    normalizer.normalize.return_value = NormalizedQuery(
        corrected_query="Chappell Roan", search_intent="artist"
    )
    app.state.normalizer = normalizer

    response = client.post("/api/search", json={"query": "Chapell roan"})

    data = response.json()
    assert titles(response) == ["Femininomenon", "Pink Pony Club"]
    assert data["correctedQuery"] == "Chappell Roan"
    assert data["searchIntent"] == "artist"
    assert data["usedFallback"] is False
    assert data["query"] == "Chapell roan"


def test_normalizer_failure_falls_back(app, client, catalog):
    normalizer = Mock()
    normalizer.normalize.side_effect = AIError("rate limited")
    app.state.normalizer = normalizer

    response = client.post("/api/search", json={"query": "tik"})

    assert response.status_code == 200
    assert titles(response) == ["Tik Tok"]
    assert response.json()["usedFallback"] is True


def test_new_tracks_are_searchable(client, add_track):
    assert titles(client.post("/api/search", json={"query": "espresso"})) == []

    add_track("Espresso", artists=["Sabrina Carpenter"])

    assert titles(client.post("/api/search", json={"query": "espresso"})) == ["Espresso"]
