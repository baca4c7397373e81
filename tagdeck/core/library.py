"""
Loading audio files into track records.
Reads a capped prefix of each file, parses its tag and resolves the final metadata.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Callable

from tagdeck.audio.audio_metadata import DEFAULT_READ_LIMIT, parse_tag
from tagdeck.audio.metadata_resolver import resolve_track
from tagdeck.core.track import ParsedTag


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioSource:
    """A file offered for the playlist: its name, its handle and a bounded reader"""

    name: str
    handle: Any
    read_prefix: Callable[[int], bytes]

    @classmethod
    def from_path(cls, path):
        """Build a source backed by a file on disk"""

        def read_prefix(limit):
            with open(path, "rb") as f:
                return f.read(limit)

        return cls(name=os.path.basename(path), handle=os.fspath(path), read_prefix=read_prefix)


def read_tag(source, limit=DEFAULT_READ_LIMIT):
    """
    Parse the tag at the start of a source.

    Args:
        source: AudioSource to read
        limit: Maximum number of bytes to read

    Returns:
        ParsedTag, empty if the source could not be read
    """
    try:
        prefix = source.read_prefix(limit)
    except OSError as exc:
        logger.warning("Could not read %s: %s", source.name, exc)
        return ParsedTag()
    tag = parse_tag(prefix[:limit])
    if tag.is_empty():
        logger.debug("No usable tag in %s; using the file name", source.name)
    return tag


def load_tracks(sources, limit=DEFAULT_READ_LIMIT):
    """
    Resolve a batch of sources into TrackMeta records.

    Sources are handled one at a time in arrival order, so the result
    lines up with the input.

    Args:
        sources: Iterable of AudioSource
        limit: Maximum prefix size read from each source

    Returns:
        List of TrackMeta
    """
    tracks = []
    for source in sources:
        tag = read_tag(source, limit)
        track = resolve_track(source.name, source.handle, tag)
        logger.debug("Loaded %s as %r by %r", source.name, track.title, track.artist)
        tracks.append(track)
    return tracks
