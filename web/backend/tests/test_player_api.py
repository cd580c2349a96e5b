"""Tests for player API endpoints."""

import pytest


@pytest.fixture
def abc(add_track):
    """Three registered tracks, returned as JSON in registration order."""
    return [add_track("A"), add_track("B"), add_track("C")]


def ids(tracks: list[dict]) -> list[str]:
    return [track["id"] for track in tracks]


def play(client, track: dict, playlist: list[dict]) -> dict:
    response = client.post(
        "/api/player/play",
        json={"trackId": track["id"], "playlist": ids(playlist)},
    )
    assert response.status_code == 200, response.text
    return response.json()


class TestState:
    def test_initial_state(self, client):
        state = client.get("/api/player/state").json()

        assert state["currentTrack"] is None
        assert state["isPlaying"] is False
        assert state["queue"] == []
        assert state["queueIndex"] == -1
        assert state["repeatMode"] == "off"
        assert state["shuffling"] is False
        assert state["volume"] == 1.0
        assert state["muted"] is False


class TestPlay:
    def test_play_sets_queue(self, client, abc):
        state = play(client, abc[1], abc)

        assert state["currentTrack"]["id"] == abc[1]["id"]
        assert state["isPlaying"] is True
        assert ids(state["queue"]) == ids(abc)
        assert state["queueIndex"] == 1

    def test_unknown_track(self, client, abc):
        response = client.post("/api/player/play", json={"trackId": "nope", "playlist": []})
        assert response.status_code == 404

    def test_unknown_playlist_ids_are_dropped(self, client, abc):
        response = client.post(
            "/api/player/play",
            json={"trackId": abc[0]["id"], "playlist": [abc[0]["id"], "ghost", abc[2]["id"]]},
        )

        assert ids(response.json()["queue"]) == [abc[0]["id"], abc[2]["id"]]

    def test_same_player_across_requests(self, app, client, abc):
        play(client, abc[0], abc)
        assert app.state.player.session.current_track.id == abc[0]["id"]


class TestTransport:
    def test_toggle(self, client, abc):
        play(client, abc[0], abc)

        assert client.post("/api/player/toggle").json()["isPlaying"] is False
        assert client.post("/api/player/toggle").json()["isPlaying"] is True

    def test_toggle_without_track(self, client):
        assert client.post("/api/player/toggle").json()["isPlaying"] is False

    def test_next_and_previous(self, client, abc):
        play(client, abc[0], abc)

        assert client.post("/api/player/next").json()["currentTrack"]["id"] == abc[1]["id"]
        assert client.post("/api/player/previous").json()["currentTrack"]["id"] == abc[0]["id"]
        assert client.post("/api/player/previous").json()["currentTrack"]["id"] == abc[2]["id"]

    def test_repeat_all_wraps(self, client, abc):
        play(client, abc[1], abc)
        assert client.post("/api/player/repeat").json()["repeatMode"] == "all"

        client.post("/api/player/next")
        state = client.post("/api/player/next").json()

        assert state["currentTrack"]["id"] == abc[0]["id"]

    def test_end_of_queue_stops(self, client, abc):
        play(client, abc[2], abc)
        state = client.post("/api/player/next").json()

        assert state["isPlaying"] is False
        assert state["currentTrack"]["id"] == abc[2]["id"]

    def test_repeat_cycle(self, client):
        modes = [client.post("/api/player/repeat").json()["repeatMode"] for _ in range(3)]
        assert modes == ["all", "one", "off"]

    def test_shuffle_round_trip(self, client, add_track):
        tracks = [add_track(f"T{i}") for i in range(8)]
        play(client, tracks[4], tracks)

        shuffled = client.post("/api/player/shuffle").json()
        assert shuffled["shuffling"] is True
        assert shuffled["queue"][0]["id"] == tracks[4]["id"]
        assert sorted(ids(shuffled["queue"])) == sorted(ids(tracks))

        restored = client.post("/api/player/shuffle").json()
        assert restored["shuffling"] is False
        assert ids(restored["queue"]) == ids(tracks)


class TestVolume:
    def test_volume_and_mute(self, client):
        state = client.post("/api/player/volume", json={"volume": 0.7}).json()
        assert state["volume"] == 0.7

        muted = client.post("/api/player/mute").json()
        assert muted["muted"] is True
        assert muted["effectiveGain"] == 0.0
        assert muted["volume"] == 0.7

        unmuted = client.post("/api/player/volume", json={"volume": 0.5}).json()
        assert unmuted["muted"] is False
        assert unmuted["effectiveGain"] == 0.5

    def test_volume_is_clamped(self, client):
        assert client.post("/api/player/volume", json={"volume": 2}).json()["volume"] == 1.0

    def test_volume_requires_number(self, client):
        response = client.post("/api/player/volume", json={"volume": "loud"})
        assert response.status_code == 422


class TestDeviceReports:
    def test_ended_advances(self, client, abc):
        play(client, abc[0], abc)

        state = client.post(
            "/api/player/transport", json={"type": "ended", "trackId": abc[0]["id"]}
        ).json()

        assert state["currentTrack"]["id"] == abc[1]["id"]

    def test_ended_reported_by_two_devices_advances_once(self, client, abc):
        play(client, abc[0], abc)
        report = {"type": "ended", "trackId": abc[0]["id"]}

        client.post("/api/player/transport", json=report)
        state = client.post("/api/player/transport", json=report).json()

        assert state["currentTrack"]["id"] == abc[1]["id"]

    def test_stale_time_update_is_ignored(self, client, abc):
        play(client, abc[0], abc)
        client.post("/api/player/next")

        state = client.post(
            "/api/player/transport",
            json={
                "type": "time_update",
                "trackId": abc[0]["id"],
                "positionSec": 212,
                "durationSec": 215,
            },
        ).json()

        assert state["currentTrack"]["id"] == abc[1]["id"]
        assert state["positionSec"] == 0.0
        assert state["durationSec"] is None

    def test_report_requires_track_id(self, client, abc):
        play(client, abc[0], abc)
        response = client.post("/api/player/transport", json={"type": "ended"})
        assert response.status_code == 422

    def test_time_update_then_seek(self, client, abc):
        play(client, abc[0], abc)
        client.post(
            "/api/player/transport",
            json={"type": "loaded_metadata", "trackId": abc[0]["id"], "durationSec": 120.0},
        )

        state = client.post("/api/player/seek", json={"positionSec": 500}).json()

        assert state["durationSec"] == 120.0
        assert state["positionSec"] == 120.0

    def test_unknown_report_type(self, client):
        response = client.post("/api/player/transport", json={"type": "exploded", "trackId": "x"})
        assert response.status_code == 422
