"""Single and batch track metadata lookups.

The lookups take the Spotify client as an argument and always return text.
Remote failures become an error block; only batch-size validation raises.
"""

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .models import Absent, BatchOutcome, Found, TrackRecord
from .render import render_error, render_not_found, render_track, render_track_list

MAX_BATCH_SIZE = 50

NO_IDS_MESSAGE = "No track IDs provided"
NO_TRACKS_MESSAGE = "No tracks found for the provided IDs"


class TrackValidationError(ValueError):
    """Tool input rejected before any request was made."""

    def __init__(self, kind: str, message: str):
        super().__init__(f"{kind}: {message}")
        self.kind = kind
        self.message = message


class GetTrackParams(BaseModel):
    track_id: str = Field(description="The Spotify ID of the track")


class GetTracksParams(BaseModel):
    track_ids: list[str] = Field(
        max_length=MAX_BATCH_SIZE,
        description=f"Array of Spotify track IDs (maximum {MAX_BATCH_SIZE})",
    )


def validate_track_id(track_id: str) -> str:
    """Validate a single track ID.

    Any string is accepted, including "". Spotify decides whether it exists.
    """
    try:
        return GetTrackParams(track_id=track_id).track_id
    except ValidationError as e:
        raise TrackValidationError("invalid_type", "track_id must be a string") from e


def validate_track_ids(track_ids: list[str]) -> list[str]:
    """Validate a batch of track IDs.

    Raises:
        TrackValidationError: kind "batch_too_large" for more than 50 IDs,
            kind "invalid_type" if the input is not a list of strings.
    """
    try:
        return GetTracksParams(track_ids=track_ids).track_ids
    except ValidationError as e:
        too_long = [err for err in e.errors() if err["type"] == "too_long"]
        if too_long:
            given = too_long[0].get("ctx", {}).get("actual_length") or f"More than {MAX_BATCH_SIZE}"
            raise TrackValidationError(
                "batch_too_large",
                f"{given} track IDs given, at most {MAX_BATCH_SIZE} allowed",
            ) from e
        raise TrackValidationError("invalid_type", "track_ids must be a list of strings") from e


def classify_batch(track_ids: list[str], tracks: list) -> BatchOutcome:
    """Pair each requested ID with the slot Spotify returned at the same index.

    Only track objects (dicts) count as found. A missing trailing slot is
    treated as absent so the result always has one entry per requested ID.
    """
    outcomes = []
    for i, track_id in enumerate(track_ids):
        track = tracks[i] if i < len(tracks) else None
        if isinstance(track, dict) and track:
            outcomes.append(Found(TrackRecord.from_api(track, track_id)))
        else:
            outcomes.append(Absent(track_id))
    return outcomes


def get_track(client, track_id: str) -> str:
    """Look up one track and render its full metadata.

    Args:
        client: Object with get_track(track_id) -> dict | None.
        track_id: Spotify track ID. Empty or malformed IDs render as not found.

    Returns:
        Metadata block, not-found message, or error message. Never raises.
    """
    track_id = validate_track_id(track_id)
    logger.debug("Fetching track {!r}", track_id)
    try:
        track = client.get_track(track_id)
        if not track:
            return render_not_found(track_id)
        return render_track(TrackRecord.from_api(track, track_id))
    except Exception as e:
        logger.warning("Track lookup for {!r} failed: {}", track_id, e)
        return render_error(e)


def get_tracks(client, track_ids: list[str]) -> str:
    """Look up up to 50 tracks in a single request.

    Args:
        client: Object with get_tracks(track_ids) -> list[dict | None] | None.
        track_ids: Spotify track IDs, in the order results should be listed.

    Returns:
        Header plus one block per ID, in input order. IDs that did not resolve
        are listed as "[Invalid ID]: <id> - Track not found".

    Raises:
        TrackValidationError: more than 50 IDs, raised before any request.
    """
    track_ids = validate_track_ids(track_ids)
    if not track_ids:
        return NO_IDS_MESSAGE

    logger.debug("Fetching {} tracks", len(track_ids))
    try:
        tracks = client.get_tracks(track_ids)
        if not tracks:
            return NO_TRACKS_MESSAGE
        outcomes = classify_batch(track_ids, tracks)
    except Exception as e:
        logger.warning("Batch lookup of {} tracks failed: {}", len(track_ids), e)
        return render_error(e)

    return render_track_list(outcomes)
