"""Thin Spotify Web API client used by the MCP tools.

Failures of any kind (transport, auth, rate limit, 5xx) surface as
SpotifyAPIError so callers have one exception type to handle.
"""

from typing import Callable, Optional
from urllib.parse import quote

import requests
from loguru import logger

BASE_URL = "https://api.spotify.com/v1"
REQUEST_TIMEOUT = 30  # seconds
MAX_IDS_PER_REQUEST = 50


class SpotifyAPIError(Exception):
    """A Web API request failed."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


def _error_message(response: requests.Response) -> str:
    """Extract the Web API error message, falling back to the status line."""
    try:
        error = response.json().get("error")
    except ValueError:
        error = None
    if isinstance(error, dict) and error.get("message"):
        message = error["message"]
    elif isinstance(error, str):
        message = error
    else:
        message = response.reason or "Request failed"

    if response.status_code == 429:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            message = f"{message} (retry after {retry_after}s)"
    return f"{message} (HTTP {response.status_code})"


class SpotifyClient:
    """Authenticated access to the Spotify Web API.

    Args:
        get_token: Returns a valid bearer token.
        clear_token: Invalidates the cached token; called once on HTTP 401
            before retrying with a fresh one.
        session: requests.Session to use (a new one by default).
        market: Optional ISO country code sent with track lookups.
    """

    def __init__(
        self,
        get_token: Callable[[], str],
        clear_token: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
        market: Optional[str] = None,
    ):
        self._get_token = get_token
        self._clear_token = clear_token
        self.session = session or requests.Session()
        self.market = market

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self._get_token()}"}

    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Send a request, refreshing the token once on 401.

        Returns the response for any 2xx status, and for the statuses listed in
        ``allow_status``. Everything else raises SpotifyAPIError.
        """
        allow_status = kwargs.pop("allow_status", ())
        url = f"{BASE_URL}{path}"

        try:
            response = self.session.request(
                method, url, headers=self._headers(), timeout=REQUEST_TIMEOUT, **kwargs
            )
            if response.status_code == 401 and self._clear_token is not None:
                logger.info("Spotify returned 401, refreshing access token")
                self._clear_token()
                response = self.session.request(
                    method, url, headers=self._headers(), timeout=REQUEST_TIMEOUT, **kwargs
                )
        except requests.exceptions.RequestException as e:
            logger.debug("{} {} failed: {}", method, path, e)
            raise SpotifyAPIError(str(e)) from e

        if response.ok or response.status_code in allow_status:
            return response

        message = _error_message(response)
        logger.debug("{} {} -> {}", method, path, message)
        raise SpotifyAPIError(message, status=response.status_code)

    def _params(self, **params) -> dict:
        if self.market:
            params["market"] = self.market
        return params

    def get_track(self, track_id: str) -> Optional[dict]:
        """Get one track object, or None if Spotify does not know the ID.

        Malformed IDs (HTTP 400) are treated the same as unknown ones (HTTP 404).
        """
        response = self.request(
            "GET",
            f"/tracks/{quote(track_id, safe='')}",
            params=self._params(),
            allow_status=(400, 404),
        )
        if response.status_code in (400, 404):
            return None
        return response.json()

    def get_tracks(self, track_ids: list[str]) -> Optional[list[Optional[dict]]]:
        """Get several tracks in one request.

        Returns:
            The Web API "tracks" array: one entry per requested ID in request
            order, None where the ID did not resolve.
        """
        if len(track_ids) > MAX_IDS_PER_REQUEST:
            raise ValueError(f"At most {MAX_IDS_PER_REQUEST} track IDs per request")

        response = self.request(
            "GET",
            "/tracks",
            params=self._params(ids=",".join(track_ids)),
        )
        return response.json().get("tracks")
