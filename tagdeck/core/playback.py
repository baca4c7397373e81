"""Playback control for the tagdeck player"""

import logging
from typing import Any, Protocol

from tagdeck.audio.audio_metadata import DEFAULT_READ_LIMIT
from tagdeck.audio.metadata_resolver import build_meta_line
from tagdeck.core.equalizer import EqualizerSettings
from tagdeck.core.formatting import format_time
from tagdeck.core.library import load_tracks
from tagdeck.core.playlist import PlaylistStore
from tagdeck.core.sequencer import RepeatMode, Sequencer


logger = logging.getLogger(__name__)

VOLUME_RANGE = (0, 100)


class AudioOutputError(Exception):
    """Raised by an output when it cannot load or start a track"""


class AudioOutput(Protocol):
    """What the controller needs from the thing that actually makes sound"""

    current_time: float
    duration: float
    volume: int

    def load(self, handle: Any) -> None: ...

    def play(self) -> bool:
        """Start or resume; False when the host refused to start playback"""

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...


class PlaybackController:
    """
    Drives an AudioOutput from the playlist and the sequencer.

    All state lives on this object and is only touched from event handlers
    (user controls, output time updates and end-of-track), one at a time.
    """

    def __init__(self, output, playlist=None, sequencer=None, equalizer=None,
                 volume=80, seek_step=5, volume_step=5,
                 tag_read_limit=DEFAULT_READ_LIMIT, rng=None):
        self.output = output
        self.playlist = playlist if playlist is not None else PlaylistStore()
        self.sequencer = sequencer if sequencer is not None else Sequencer(self.playlist, rng=rng)
        self.equalizer = equalizer if equalizer is not None else EqualizerSettings()
        self.seek_step = seek_step
        self.volume_step = volume_step
        self.tag_read_limit = tag_read_limit

        self.is_playing = False
        self.current_time = 0.0
        self.set_volume(volume)

        self.track_changed_callbacks = []
        self.stopped_callbacks = []

    @classmethod
    def from_settings(cls, output, settings, rng=None, graph=None):
        """Build a controller configured from a SettingsManager"""
        eq = settings.get_equalizer()
        controller = cls(
            output,
            equalizer=EqualizerSettings(eq['gain'], eq['bass'], eq['mid'], eq['treble']),
            volume=settings.get_volume(),
            seek_step=settings.get_seek_step(),
            volume_step=settings.get_volume_step(),
            tag_read_limit=settings.get_tag_read_limit(),
            rng=rng,
        )
        controller.sequencer.set_repeat(settings.get_repeat_mode())
        if settings.get_shuffle_mode():
            controller.sequencer.set_shuffle(True)
        if graph is not None:
            controller.equalizer.attach(graph)
        return controller

    # Queries

    @property
    def current_index(self):
        return self.sequencer.current_index

    @property
    def current_track(self):
        """Track at the current index, or None"""
        idx = self.sequencer.current_index
        if idx is None or not 0 <= idx < self.playlist.size():
            return None
        return self.playlist.get(idx)

    def meta_line(self):
        """(text, detail) artist/album line for the current track"""
        return build_meta_line(self.current_track)

    def time_text(self):
        duration = self.output.duration or 0
        return f"{format_time(self.current_time)} / {format_time(duration)}"

    # Playlist changes

    def add_sources(self, sources):
        """Parse and append a batch of AudioSource objects in arrival order"""
        tracks = load_tracks(sources, self.tag_read_limit)
        self.add_tracks(tracks)
        return tracks

    def add_tracks(self, tracks):
        self.playlist.append(tracks)
        self.sequencer.on_tracks_appended()
        logger.info("Added %d track(s); playlist now has %d", len(tracks), self.playlist.size())

    def remove_track(self, index):
        """
        Remove a track and keep the sequencer in step.

        Removing the playing track moves playback to whatever took its slot
        (or the new last track). Removing the only track stops playback.

        Returns:
            True if a track was removed, False for an out-of-range index
        """
        if not 0 <= index < self.playlist.size():
            return False
        was_current = self.sequencer.current_index == index
        self.playlist.remove(index)
        new_index = self.sequencer.on_track_removed(index)

        if self.playlist.size() == 0:
            self._stop()
        elif was_current:
            self.play_index(new_index)
        return True

    # Transport

    def play_index(self, index):
        """Load and start the track at index; out-of-range indices are ignored"""
        if not 0 <= index < self.playlist.size():
            return False
        track = self.playlist.get(index)
        self.sequencer.select(index)
        self.current_time = 0.0
        try:
            self.output.load(track.source)
        except AudioOutputError as exc:
            logger.warning("Could not load %s: %s", track.title, exc)
            self.is_playing = False
            return False
        self._start_output()
        for callback in self.track_changed_callbacks:
            callback(track)
        return True

    def toggle_play(self):
        """Toggle between play and pause states"""
        if self.playlist.size() == 0:
            return
        if self.sequencer.current_index is None:
            self.play_index(0)
            return
        if self.is_playing:
            self.output.pause()
            self.is_playing = False
        else:
            self._start_output()

    def next_track(self):
        """Skip to the next track, or stop if there is none"""
        next_index = self.sequencer.get_next()
        if next_index is None:
            self._stop()
            return
        self.play_index(next_index)

    def previous_track(self):
        """Go to the previous track; does nothing at the start without repeat-all"""
        prev_index = self.sequencer.get_prev()
        if prev_index is None:
            return
        self.play_index(prev_index)

    def seek_by(self, delta=None):
        """Seek relative to the current position, clamped to the track"""
        if delta is None:
            delta = self.seek_step
        self.seek_to(self.output.current_time + delta)

    def seek_to(self, seconds):
        duration = self.output.duration or 0
        target = max(0, min(duration, seconds))
        self.output.seek(target)
        self.current_time = target

    # Modes

    def toggle_shuffle(self):
        enabled = self.sequencer.toggle_shuffle()
        logger.info("Shuffle %s", "on" if enabled else "off")
        return enabled

    def cycle_repeat(self):
        """Cycle through repeat modes (off -> one -> all -> off)"""
        mode = self.sequencer.cycle_repeat()
        logger.info("Repeat %s", mode.value)
        return mode

    def set_volume(self, value):
        """Set output volume (0-100)"""
        low, high = VOLUME_RANGE
        self.volume = max(low, min(high, int(value)))
        self.output.volume = self.volume

    def step_volume(self, steps=1):
        """Raise (positive) or lower (negative) volume by whole steps"""
        self.set_volume(self.volume + steps * self.volume_step)

    # Output events

    def on_time_update(self, seconds):
        self.current_time = seconds
        track = self.current_track
        duration = self.output.duration or 0
        if track is not None and duration > 0:
            self.playlist.set_track_duration(track.id, duration)

    def on_ended(self):
        """Handle the output reaching the end of the current track"""
        if self.sequencer.repeat is RepeatMode.ONE and self.sequencer.current_index is not None:
            self.output.seek(0)
            self.current_time = 0.0
            self._start_output()
            return
        self.next_track()

    # Internals

    def _start_output(self):
        try:
            started = self.output.play()
        except AudioOutputError as exc:
            logger.warning("Playback did not start: %s", exc)
            started = False
        self.is_playing = bool(started)

    def _stop(self):
        self.output.pause()
        self.is_playing = False
        self._notify_stopped()

    def _notify_stopped(self):
        for callback in self.stopped_callbacks:
            callback()
