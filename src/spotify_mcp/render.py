"""Text rendering for track metadata responses.

Output is the only channel back to the host, so labels and markers here are
stable: a caller parses them to recover which input ID produced which record.
"""

from .models import Absent, BatchOutcome, Found, TrackRecord


def format_duration(ms: int | None) -> str:
    """Format milliseconds as m:ss (e.g., 225000 -> "3:45").

    Args:
        ms: Duration in milliseconds. None or negative values render as "0:00".

    Returns:
        Minutes unpadded, seconds zero-padded to two digits.
    """
    if not ms or ms < 0:
        ms = 0
    total_seconds = ms // 1000
    minutes = total_seconds // 60
    seconds = total_seconds % 60
    return f"{minutes}:{seconds:02d}"


def render_track(track: TrackRecord) -> str:
    """Render the full metadata block for a single track."""
    lines = [
        "# Track Metadata",
        "",
        f'**Track**: "{track.title}"',
        f"**Artists**: {track.artist_names}",
        f"**Album**: {track.album_title}",
        f"**Duration**: {format_duration(track.duration_ms)}",
        f"**Popularity**: {track.popularity}/100",
        f"**Explicit**: {'Yes' if track.explicit else 'No'}",
        f"**ISRC**: {track.isrc or 'N/A'}",
        f"**Preview**: {track.preview_url or 'Not available'}",
        f"**Spotify URL**: {track.canonical_url}",
        f"**ID**: {track.id}",
    ]
    return "\n".join(lines)


def render_not_found(track_id: str) -> str:
    return f'Track with ID "{track_id}" not found'


def render_error(error: Exception | str) -> str:
    return f"Error retrieving track metadata: {error}"


def _render_list_entry(position: int, outcome: Found | Absent) -> str:
    # Absent slots carry no "## n." marker; that is how a reader tells them apart
    if isinstance(outcome, Absent):
        return f"[Invalid ID]: {outcome.track_id} - Track not found"

    track = outcome.record
    return "\n".join([
        f'## {position}. "{track.title}"',
        f"**Artists**: {track.artist_names}",
        f"**Album**: {track.album_title}",
        f"**Duration**: {format_duration(track.duration_ms)}",
        f"**Popularity**: {track.popularity}/100",
        f"**ID**: {track.id}",
    ])


def render_track_list(outcomes: BatchOutcome) -> str:
    """Render a batch lookup, one block per requested ID in request order.

    Args:
        outcomes: One Found/Absent per requested ID, same order as the request.

    Returns:
        Header with "<found> of <total>" followed by the blocks, each separated
        by a blank line. Found blocks are numbered by their 1-based position.
    """
    valid_count = sum(1 for o in outcomes if isinstance(o, Found))
    header = f"# Track Metadata ({valid_count} of {len(outcomes)} tracks)"
    blocks = [_render_list_entry(i, o) for i, o in enumerate(outcomes, start=1)]
    return "\n\n".join([header] + blocks)
