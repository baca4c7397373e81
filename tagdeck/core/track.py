"""
Track records shared by the tag parser, the playlist and the playback controller.
"""

from dataclasses import dataclass
from typing import Any, Optional


UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


@dataclass(frozen=True)
class Artwork:
    """Raw cover-art bytes tagged with the MIME type found in the tag"""

    data: bytes
    mime_type: str = "image/jpeg"


@dataclass
class ParsedTag:
    """Fields recovered from an embedded tag. Anything not found stays None."""

    title: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    artwork: Optional[Artwork] = None

    def is_empty(self):
        return (
            self.title is None
            and self.artist is None
            and self.album is None
            and self.artwork is None
        )


@dataclass(frozen=True)
class TrackMeta:
    """
    A playlist entry.

    `source` is whatever handle the audio output knows how to load
    (a file path for the Qt output). The track only references it.
    """

    id: str
    source: Any
    title: str
    artist: Optional[str] = None
    album: Optional[str] = None
    artwork: Optional[Artwork] = None
