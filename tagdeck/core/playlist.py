"""
Playlist storage for the music player.
Holds tracks in arrival order; removal renumbers everything after the removed slot.
"""


class PlaylistStore:
    """Ordered collection of TrackMeta entries"""

    def __init__(self):
        self.tracks = []
        self.track_durations = {}

    def append(self, tracks):
        """Add tracks to the end, keeping the given order"""
        self.tracks.extend(tracks)

    def remove(self, index):
        """
        Remove the track at index.

        Every track after index moves down by one. Pair this with
        Sequencer.on_track_removed so the two never disagree.

        Args:
            index: Position to remove

        Returns:
            The removed TrackMeta

        Raises:
            IndexError: If index is not a valid position
        """
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"playlist index {index} out of range (size {len(self.tracks)})")
        removed = self.tracks.pop(index)
        self.track_durations.pop(removed.id, None)
        return removed

    def get(self, index):
        """Get the track at index, raising IndexError if out of range"""
        if not 0 <= index < len(self.tracks):
            raise IndexError(f"playlist index {index} out of range (size {len(self.tracks)})")
        return self.tracks[index]

    def size(self):
        """Get total number of tracks in playlist"""
        return len(self.tracks)

    def __len__(self):
        return len(self.tracks)

    def __iter__(self):
        return iter(self.tracks)

    def get_track_duration(self, track_id):
        """
        Get the last duration reported for a track.

        Returns:
            Duration in seconds, or 0 if unknown
        """
        return self.track_durations.get(track_id, 0)

    def set_track_duration(self, track_id, seconds):
        """Remember the duration for a track"""
        self.track_durations[track_id] = seconds
