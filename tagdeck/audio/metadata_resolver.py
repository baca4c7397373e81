"""
Turns parsed tag data plus a filename into the final track record.
"""

import os
import uuid

from tagdeck.core.track import UNKNOWN_ALBUM, UNKNOWN_ARTIST, TrackMeta


FILENAME_SEPARATOR = " - "
META_SEPARATOR = " • "


def infer_from_filename(name):
    """
    Guess title and artist from a file name like "Artist - Title.mp3".

    Args:
        name: File name (a path is reduced to its basename)

    Returns:
        Tuple of (title, artist); artist is None when the name has no separator
    """
    stem, _ext = os.path.splitext(os.path.basename(name))
    parts = stem.split(FILENAME_SEPARATOR)
    if len(parts) >= 2:
        return FILENAME_SEPARATOR.join(parts[1:]), parts[0]
    return stem, None


def _clean(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def new_track_id(name):
    """Random id, unique for all practical purposes within one session"""
    return f"{os.path.basename(name)}-{uuid.uuid4().hex}"


def resolve_track(name, source, tag, track_id=None):
    """
    Merge tag fields with the filename fallback.

    Args:
        name: Original file name
        source: Handle the audio output will load
        tag: ParsedTag from the tag parser
        track_id: Explicit id, generated when omitted

    Returns:
        TrackMeta with title, artist and album always filled in
    """
    fallback_title, fallback_artist = infer_from_filename(name)
    return TrackMeta(
        id=track_id or new_track_id(name),
        source=source,
        title=_clean(tag.title) or fallback_title,
        artist=_clean(tag.artist) or fallback_artist or UNKNOWN_ARTIST,
        album=_clean(tag.album) or UNKNOWN_ALBUM,
        artwork=tag.artwork,
    )


def is_known(value, placeholder):
    """A field is known when present and not just its placeholder text"""
    return bool(value) and value.strip().lower() != placeholder.lower()


def build_meta_line(track):
    """
    Build the artist/album line for a track.

    Known fields are shown as "Label: value", unknown ones as the bare
    placeholder. The second string always labels both fields and is meant
    for detailed display such as a tooltip.

    Returns:
        Tuple of (text, detail); both empty when there is no track
    """
    if track is None:
        return "", ""

    artist_text = f"Artist: {track.artist}" if is_known(track.artist, UNKNOWN_ARTIST) else UNKNOWN_ARTIST
    album_text = f"Album: {track.album}" if is_known(track.album, UNKNOWN_ALBUM) else UNKNOWN_ALBUM

    detail = (
        f"Artist: {track.artist or UNKNOWN_ARTIST}"
        f"{META_SEPARATOR}"
        f"Album: {track.album or UNKNOWN_ALBUM}"
    )
    return f"{artist_text}{META_SEPARATOR}{album_text}", detail
