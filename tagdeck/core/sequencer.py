"""
Track sequencing under shuffle and repeat.
Computes the next/previous playlist index and owns the shuffle order.
"""

import logging
import random
from enum import Enum


logger = logging.getLogger(__name__)


class RepeatMode(Enum):
    OFF = "off"
    ONE = "one"
    ALL = "all"

    def cycled(self):
        """Next mode in the off -> one -> all -> off cycle"""
        return _REPEAT_CYCLE[self]


_REPEAT_CYCLE = {
    RepeatMode.OFF: RepeatMode.ONE,
    RepeatMode.ONE: RepeatMode.ALL,
    RepeatMode.ALL: RepeatMode.OFF,
}


class Sequencer:
    """
    Playback order state machine.

    `order` is only meaningful while shuffle is on. When non-empty it is a
    permutation of range(len(playlist)), and `position` points into it.
    """

    def __init__(self, playlist, rng=None):
        """
        Args:
            playlist: PlaylistStore whose size bounds every index
            rng: random.Random used for shuffling; inject a seeded one in tests
        """
        self.playlist = playlist
        self.rng = rng or random.Random()
        self.current_index = None
        self.shuffle = False
        self.repeat = RepeatMode.OFF
        self.order = []
        self.position = 0

    def build_order(self, anchor):
        """
        Build a fresh shuffle order starting at anchor.

        The anchor goes first and every other index follows in Fisher-Yates order.
        """
        size = self.playlist.size()
        if size == 0:
            self.order = []
            self.position = 0
            return
        rest = [i for i in range(size) if i != anchor]
        self.rng.shuffle(rest)
        self.order = [anchor] + rest
        self.position = 0
        logger.debug("Built shuffle order anchored at %d over %d tracks", anchor, size)

    def set_shuffle(self, enabled):
        """Switch shuffle on (building an order) or off (dropping it)"""
        self.shuffle = bool(enabled)
        if self.shuffle:
            self.build_order(self.current_index if self.current_index is not None else 0)
        else:
            self.order = []
            self.position = 0

    def toggle_shuffle(self):
        self.set_shuffle(not self.shuffle)
        return self.shuffle

    def set_repeat(self, mode):
        self.repeat = RepeatMode(mode)

    def cycle_repeat(self):
        self.repeat = self.repeat.cycled()
        return self.repeat

    def select(self, index):
        """Make index current, moving the shuffle cursor onto it if it is in the order"""
        self.current_index = index
        if self.shuffle and index in self.order:
            self.position = self.order.index(index)

    def _order_is_stale(self):
        return not self.order or self.current_index not in self.order

    def get_next(self):
        """
        Index to play after the current one.

        Returns:
            Playlist index, or None when playback should stop
        """
        size = self.playlist.size()
        if size == 0:
            return None
        idx = self.current_index

        if self.repeat is RepeatMode.ONE and idx is not None:
            return idx

        if self.shuffle:
            if idx is None:
                return 0
            if self._order_is_stale():
                self.build_order(idx)
                return idx
            if self.position + 1 < len(self.order):
                self.position += 1
                return self.order[self.position]
            if self.repeat is RepeatMode.ALL:
                self.position = 0
                return self.order[0]
            return None

        if idx is None:
            return 0
        if idx + 1 < size:
            return idx + 1
        if self.repeat is RepeatMode.ALL:
            return 0
        return None

    def get_prev(self):
        """
        Index to play before the current one.

        Repeat-one is deliberately ignored here so that a manual "previous"
        always moves.

        Returns:
            Playlist index, or None when there is nothing before
        """
        size = self.playlist.size()
        if size == 0:
            return None
        idx = self.current_index

        if self.shuffle:
            if idx is None:
                return 0
            if self._order_is_stale():
                self.build_order(idx)
                return idx
            if self.position - 1 >= 0:
                self.position -= 1
                return self.order[self.position]
            if self.repeat is RepeatMode.ALL:
                self.position = len(self.order) - 1
                return self.order[self.position]
            return None

        if idx is None:
            return 0
        if idx > 0:
            return idx - 1
        if self.repeat is RepeatMode.ALL:
            return size - 1
        return None

    def on_tracks_appended(self):
        """
        Re-randomize after the playlist grew.

        While shuffling, the whole order is rebuilt around the current track
        (or index 0 when nothing is current); new tracks are not simply added
        to the tail.
        """
        if self.shuffle:
            self.build_order(self.current_index if self.current_index is not None else 0)

    def on_track_removed(self, removed_index):
        """
        Repair state after PlaylistStore.remove(removed_index).

        Must run after the playlist has already shrunk.

        Returns:
            The new current index (None when nothing is current)
        """
        size = self.playlist.size()
        self.order = [i - 1 if i > removed_index else i for i in self.order if i != removed_index]

        idx = self.current_index
        if size == 0:
            self.current_index = None
        elif idx == removed_index:
            self.current_index = min(removed_index, size - 1)
        elif idx is not None and idx > removed_index:
            self.current_index = idx - 1

        if self.shuffle:
            if self.current_index in self.order:
                self.position = self.order.index(self.current_index)
            else:
                self.position = 0
        return self.current_index
