"""Authentication and token management for the Spotify Web API."""

import json
import os
import time
from pathlib import Path

import requests
from loguru import logger

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "spotify-mcp"

TOKEN_URL = "https://accounts.spotify.com/api/token"
TOKEN_REQUEST_TIMEOUT = 30  # seconds
TOKEN_EXPIRY_BUFFER = 60  # seconds before expiry a cached token is considered stale


def get_config_dir() -> Path:
    """Get or create the config directory."""
    config_dir = DEFAULT_CONFIG_DIR
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def load_config() -> dict:
    """Load configuration from config.json, with credentials overridable by env.

    SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET take precedence over the file,
    so the file is optional when both are set.
    """
    config_file = get_config_dir() / "config.json"
    config = {}
    if config_file.exists():
        with open(config_file) as f:
            config = json.load(f)

    client_id = os.environ.get("SPOTIFY_CLIENT_ID")
    client_secret = os.environ.get("SPOTIFY_CLIENT_SECRET")
    if client_id:
        config["client_id"] = client_id
    if client_secret:
        config["client_secret"] = client_secret

    if not config.get("client_id") or not config.get("client_secret"):
        raise FileNotFoundError(
            f"Spotify credentials not found in {config_file}\n"
            "Add client_id and client_secret from your Spotify developer app, "
            "or set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET."
        )
    return config


def get_user_preferences() -> dict:
    """Get user preferences with defaults.

    Returns:
        dict with keys:
        - market: ISO 3166-1 country code or None (default None)
    """
    try:
        config = load_config()
        prefs = config.get("preferences", {})
    except (FileNotFoundError, json.JSONDecodeError):
        prefs = {}

    return {
        "market": prefs.get("market") or None,
    }


def request_access_token() -> str:
    """Request a new access token via the client-credentials flow and cache it."""
    config = load_config()
    response = requests.post(
        TOKEN_URL,
        data={"grant_type": "client_credentials"},
        auth=(config["client_id"], config["client_secret"]),
        timeout=TOKEN_REQUEST_TIMEOUT,
    )
    if response.status_code != 200:
        try:
            detail = response.json().get("error_description") or response.text
        except ValueError:
            detail = response.text
        raise ValueError(f"Token request failed ({response.status_code}): {detail}")

    data = response.json()
    now = int(time.time())
    token = data["access_token"]
    token_data = {
        "token": token,
        "created": now,
        "expires": now + int(data.get("expires_in", 3600)),
    }
    with open(get_config_dir() / "access_token.json", "w") as f:
        json.dump(token_data, f, indent=2)

    logger.info("Obtained new Spotify access token (expires in {}s)", token_data["expires"] - now)
    return token


def get_access_token() -> str:
    """Get the cached access token, requesting a new one if missing or expiring."""
    token_file = get_config_dir() / "access_token.json"
    if token_file.exists():
        try:
            with open(token_file) as f:
                data = json.load(f)
            if data["expires"] > time.time() + TOKEN_EXPIRY_BUFFER:
                return data["token"]
        except (json.JSONDecodeError, KeyError):
            logger.debug("Ignoring unreadable token cache {}", token_file)

    return request_access_token()


def clear_access_token() -> None:
    """Drop the cached access token so the next call requests a fresh one."""
    token_file = get_config_dir() / "access_token.json"
    token_file.unlink(missing_ok=True)
