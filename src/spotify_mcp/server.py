"""MCP server exposing Spotify track metadata lookups."""

import json
import os
import sys
import time
from typing import Annotated, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .auth import (
    clear_access_token,
    get_access_token,
    get_config_dir,
    get_user_preferences,
    load_config,
)
from .client import SpotifyAPIError, SpotifyClient
from . import render
from . import tracks

LOG_LEVEL_ENV = "SPOTIFY_MCP_LOG_LEVEL"

mcp = FastMCP("Spotify")

_client: Optional[SpotifyClient] = None


def configure_logging(level: str | None = None) -> None:
    """Send logs to stderr; stdout carries the MCP stdio transport."""
    logger.remove()
    logger.add(sys.stderr, level=(level or os.environ.get(LOG_LEVEL_ENV, "INFO")).upper())


def get_client() -> SpotifyClient:
    """Get the process-wide Spotify client, creating it on first use."""
    global _client
    if _client is None:
        load_config()  # fail fast with a setup hint if credentials are missing
        _client = SpotifyClient(
            get_access_token,
            clear_access_token,
            market=get_user_preferences()["market"],
        )
    return _client


# ============ TRACK METADATA ============


@mcp.tool()
def get_track(
    track_id: Annotated[str, Field(description="The Spotify ID of the track")],
) -> str:
    """Get detailed metadata for a single Spotify track by its ID.

    Returns: Title, artists, album, duration, popularity, explicit flag,
    ISRC, preview URL, Spotify URL and ID
    """
    try:
        client = get_client()
    except (FileNotFoundError, ValueError) as e:
        return render.render_error(e)
    return tracks.get_track(client, track_id)


@mcp.tool()
def get_tracks(
    track_ids: Annotated[
        list[str],
        Field(
            max_length=tracks.MAX_BATCH_SIZE,
            description=f"Array of Spotify track IDs (maximum {tracks.MAX_BATCH_SIZE})",
        ),
    ],
) -> str:
    """Get detailed metadata for multiple Spotify tracks by their IDs (max 50).

    Results are listed in the same order as the IDs. IDs that do not resolve
    are listed as "[Invalid ID]: <id> - Track not found".

    Returns: One metadata block per ID with a found/total count header
    """
    # Direct calls skip the host schema check
    track_ids = tracks.validate_track_ids(track_ids)
    if not track_ids:
        return tracks.NO_IDS_MESSAGE
    try:
        client = get_client()
    except (FileNotFoundError, ValueError) as e:
        return render.render_error(e)
    return tracks.get_tracks(client, track_ids)


# ============ DIAGNOSTICS ============


@mcp.tool()
def check_auth_status() -> str:
    """Check if Spotify credentials are configured and the API is reachable."""
    status = []

    try:
        load_config()
        status.append("Credentials: OK")
    except FileNotFoundError:
        status.append(
            f"Credentials: MISSING - Add client_id/client_secret to {get_config_dir() / 'config.json'}"
        )
        return "\n".join(status)
    except json.JSONDecodeError:
        status.append("Credentials: ERROR reading config.json")
        return "\n".join(status)

    token_file = get_config_dir() / "access_token.json"
    if token_file.exists():
        try:
            with open(token_file) as f:
                data = json.load(f)
            seconds_left = int(data.get("expires", 0) - time.time())
            if seconds_left > 0:
                status.append(f"Access Token: OK ({seconds_left // 60} minutes remaining)")
            else:
                status.append("Access Token: EXPIRED - a new one is requested on next call")
        except (OSError, json.JSONDecodeError):
            status.append("Access Token: ERROR reading file")
    else:
        status.append("Access Token: NOT CACHED - a new one is requested on next call")

    try:
        get_client().request("GET", "/markets")
        status.append("API Connection: OK")
    except (SpotifyAPIError, ValueError) as e:
        status.append(f"API Connection: FAILED - {e}")

    return "\n".join(status)


def main():
    """Run the MCP server."""
    configure_logging()
    logger.info("Starting Spotify MCP server")
    mcp.run()


if __name__ == "__main__":
    main()
