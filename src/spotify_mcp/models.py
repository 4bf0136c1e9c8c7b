"""Track metadata types for Spotify MCP.

Raw Web API JSON is converted into these types once, at the fetcher boundary.
Everything downstream (the renderer) works with the typed values only.
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Artist:
    id: str
    name: str


@dataclass(frozen=True)
class TrackRecord:
    """Resolved metadata for one Spotify track."""

    id: str
    title: str
    artists: tuple[Artist, ...]
    album_title: str
    duration_ms: int
    popularity: int
    explicit: bool
    preview_url: Optional[str]
    isrc: Optional[str]
    canonical_url: str

    @classmethod
    def from_api(cls, track: dict, track_id: Optional[str] = None) -> "TrackRecord":
        """Build a record from a Web API track object.

        Args:
            track: Track object as returned by GET /tracks/{id} or GET /tracks.
            track_id: The ID that was requested. Spotify may relink a track to
                another ID for the configured market; the record keeps the
                requested one.

        Returns:
            TrackRecord. Missing popularity becomes 0, missing preview/ISRC
            become None.
        """
        album = track.get("album") or {}
        linked_from = track.get("linked_from") or {}
        external_ids = track.get("external_ids") or {}
        external_urls = track.get("external_urls") or {}
        artists = tuple(
            Artist(id=a.get("id", ""), name=a.get("name", ""))
            for a in track.get("artists") or []
        )
        return cls(
            id=track_id or linked_from.get("id") or track.get("id", ""),
            title=track.get("name", ""),
            artists=artists,
            album_title=album.get("name", ""),
            duration_ms=track.get("duration_ms") or 0,
            popularity=track.get("popularity") or 0,
            explicit=bool(track.get("explicit")),
            preview_url=track.get("preview_url") or None,
            isrc=external_ids.get("isrc") or None,
            canonical_url=external_urls.get("spotify", ""),
        )

    @property
    def artist_names(self) -> str:
        return ", ".join(a.name for a in self.artists)


@dataclass(frozen=True)
class Found:
    record: TrackRecord


@dataclass(frozen=True)
class Absent:
    track_id: str


# One slot per requested ID, in request order
Outcome = Union[Found, Absent]
BatchOutcome = list[Outcome]
