"""Shared test fixtures."""

import json
import time

import pytest


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / ".config" / "spotify-mcp"
    config_dir.mkdir(parents=True)
    return config_dir


@pytest.fixture
def mock_config_dir(temp_config_dir, monkeypatch):
    """Patch the config dir to use temp directory and clear credential env vars."""
    from spotify_mcp import auth
    monkeypatch.setattr(auth, "DEFAULT_CONFIG_DIR", temp_config_dir)
    monkeypatch.delenv("SPOTIFY_CLIENT_ID", raising=False)
    monkeypatch.delenv("SPOTIFY_CLIENT_SECRET", raising=False)
    return temp_config_dir


@pytest.fixture
def sample_config():
    """Sample configuration data."""
    return {
        "client_id": "TEST_CLIENT_ID",
        "client_secret": "TEST_CLIENT_SECRET",
    }


@pytest.fixture
def configured_config_dir(mock_config_dir, sample_config):
    """Config directory with config.json written."""
    with open(mock_config_dir / "config.json", "w") as f:
        json.dump(sample_config, f)
    return mock_config_dir


@pytest.fixture
def mock_access_token():
    """A mock access token."""
    return "BQDtest1234567890abcdefghijklmnopqrstuvwxyz"


@pytest.fixture
def cached_token_dir(configured_config_dir, mock_access_token):
    """Config directory with a valid cached access token."""
    with open(configured_config_dir / "access_token.json", "w") as f:
        json.dump({"token": mock_access_token, "created": time.time(), "expires": time.time() + 3600}, f)
    return configured_config_dir


def make_track(track_id, name="Test Song", duration_ms=225000, popularity=50, **overrides):
    """Build a Web API track object."""
    track = {
        "id": track_id,
        "name": name,
        "type": "track",
        "artists": [{"id": "artist1", "name": "Test Artist"}],
        "album": {"id": "album1", "name": "Test Album", "artists": []},
        "duration_ms": duration_ms,
        "explicit": False,
        "popularity": popularity,
        "preview_url": None,
        "external_ids": {"isrc": "USABC1234567"},
        "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
    }
    track.update(overrides)
    return track


class FakeSpotifyClient:
    """In-memory stand-in for SpotifyClient that records calls.

    Known IDs resolve to track objects; every other ID resolves to None.
    """

    def __init__(self, catalog=None, error=None):
        self.catalog = catalog or {}
        self.error = error
        self.calls = []

    def get_track(self, track_id):
        self.calls.append(("get_track", track_id))
        if self.error:
            raise self.error
        return self.catalog.get(track_id)

    def get_tracks(self, track_ids):
        self.calls.append(("get_tracks", list(track_ids)))
        if self.error:
            raise self.error
        return [self.catalog.get(track_id) for track_id in track_ids]


KNOWN_TRACKS = {
    "11dFghVXANMlKmJXsNCbNl": make_track(
        "11dFghVXANMlKmJXsNCbNl",
        name="Cut To The Feeling",
        duration_ms=225000,
        popularity=63,
        artists=[{"id": "6sFIWsNpZYqfjUpaCgueju", "name": "Carly Rae Jepsen"}],
        album={"id": "a1", "name": "Cut To The Feeling", "artists": []},
    ),
    "3n3Ppam7vgaVa1iaRUc9Lp": make_track(
        "3n3Ppam7vgaVa1iaRUc9Lp",
        name="Mr. Brightside",
        duration_ms=222973,
        popularity=88,
        artists=[{"id": "0C0XlULifJtAgn6ZNCW2eu", "name": "The Killers"}],
        album={"id": "a2", "name": "Hot Fuss", "artists": []},
    ),
    "0VjIjW4GlUZAMYd2vXMi3b": make_track(
        "0VjIjW4GlUZAMYd2vXMi3b",
        name="Blinding Lights",
        duration_ms=200040,
        popularity=92,
        artists=[{"id": "1Xyo4u8uXC1ZmMpatF05PJ", "name": "The Weeknd"}],
        album={"id": "a3", "name": "After Hours", "artists": []},
    ),
    "7qEHsqek33rTcFNT9PFqLf": make_track(
        "7qEHsqek33rTcFNT9PFqLf",
        name="Someone Like You",
        duration_ms=285240,
        popularity=0,
        explicit=True,
        preview_url="https://p.scdn.co/mp3-preview/abc",
        artists=[
            {"id": "4dpARuHxo51G3z768sgnrY", "name": "Adele"},
            {"id": "x", "name": "Guest"},
        ],
        album={"id": "a4", "name": "21", "artists": []},
    ),
}


@pytest.fixture
def fake_client():
    """Fake client that knows KNOWN_TRACKS."""
    return FakeSpotifyClient(dict(KNOWN_TRACKS))
