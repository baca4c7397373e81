"""Tests for PlaybackController against a fake audio output."""

from __future__ import annotations

import logging

import pytest

from tagdeck.config.settings import SettingsManager
from tagdeck.core.playback import AudioOutputError, PlaybackController
from tagdeck.core.sequencer import RepeatMode
from tests.fakes import FakeOutput, make_tracks


class TestPlayIndex:
    """Selecting and starting tracks."""

    def test_loads_and_plays(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)

        assert controller.play_index(1) is True

        assert controller.current_index == 1
        assert output.loaded == ["/music/1.mp3"]
        assert controller.is_playing is True
        assert controller.current_track.id == "t1"

    @pytest.mark.parametrize("index", [-1, 3])
    def test_out_of_range_is_noop(self, make_controller, output: FakeOutput, index: int) -> None:
        controller = make_controller(3)

        assert controller.play_index(index) is False

        assert controller.current_index is None
        assert output.loaded == []
        assert controller.is_playing is False

    def test_blocked_play_leaves_flag_false(self, make_controller, output: FakeOutput) -> None:
        output.allow_play = False
        controller = make_controller(2)

        controller.play_index(0)

        assert controller.current_index == 0
        assert controller.is_playing is False

    def test_output_error_is_swallowed(self, make_controller, output: FakeOutput, mocker, caplog) -> None:
        controller = make_controller(2)
        mocker.patch.object(output, "play", side_effect=AudioOutputError("autoplay blocked"))

        with caplog.at_level(logging.WARNING):
            controller.play_index(0)

        assert controller.is_playing is False
        assert "autoplay blocked" in caplog.text

    def test_load_error_is_swallowed(self, make_controller, output: FakeOutput, mocker) -> None:
        controller = make_controller(2)
        mocker.patch.object(output, "load", side_effect=AudioOutputError("bad file"))

        assert controller.play_index(1) is False
        assert controller.is_playing is False

    def test_track_changed_callback(self, make_controller) -> None:
        controller = make_controller(2)
        seen = []
        controller.track_changed_callbacks.append(seen.append)

        controller.play_index(1)

        assert [t.id for t in seen] == ["t1"]

    def test_manual_pick_syncs_shuffle_position(self, make_controller) -> None:
        controller = make_controller(5)
        controller.play_index(0)
        controller.toggle_shuffle()
        target = controller.sequencer.order[2]

        controller.play_index(target)

        assert controller.sequencer.position == 2


class TestTogglePlay:
    """Play/pause toggling."""

    def test_without_current_plays_first(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)

        controller.toggle_play()

        assert controller.current_index == 0
        assert output.playing is True

    def test_pause_and_resume(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)
        controller.play_index(2)

        controller.toggle_play()
        assert controller.is_playing is False
        assert output.playing is False

        controller.toggle_play()
        assert controller.is_playing is True
        assert output.loaded == ["/music/2.mp3"]

    def test_empty_playlist_does_nothing(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(0)

        controller.toggle_play()

        assert output.play_calls == 0
        assert controller.current_index is None


class TestSeek:
    """Seeking is clamped to [0, duration]."""

    def test_seek_forward(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(1)
        output.current_time = 10.0

        controller.seek_by(5)

        assert output.seeks == [15.0]

    def test_default_step(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(1, seek_step=10)
        output.current_time = 1.0

        controller.seek_by()

        assert output.seeks == [11.0]

    def test_clamped_at_zero(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(1)
        output.current_time = 3.0

        controller.seek_by(-5)

        assert output.seeks == [0]

    def test_clamped_at_duration(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(1)
        output.current_time = 198.0

        controller.seek_by(5)

        assert output.seeks == [200.0]

    def test_unknown_duration_pins_to_zero(self, make_controller, output: FakeOutput) -> None:
        output.duration = 0
        controller = make_controller(1)
        output.current_time = 0.0

        controller.seek_to(30)

        assert output.seeks == [0]


class TestEnded:
    """End-of-track handling."""

    def test_advances_to_next(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)
        controller.play_index(0)

        controller.on_ended()

        assert controller.current_index == 1
        assert output.loaded[-1] == "/music/1.mp3"

    def test_repeat_one_restarts_without_reloading(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)
        controller.play_index(1)
        controller.cycle_repeat()
        assert controller.sequencer.repeat is RepeatMode.ONE
        output.current_time = 200.0

        controller.on_ended()

        assert output.seeks == [0]
        assert output.loaded == ["/music/1.mp3"]
        assert controller.current_index == 1
        assert controller.is_playing is True

    def test_end_of_playlist_stops(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(2)
        stopped = []
        controller.stopped_callbacks.append(lambda: stopped.append(True))
        controller.play_index(1)

        controller.on_ended()

        assert controller.is_playing is False
        assert output.playing is False
        assert controller.current_index == 1
        assert stopped == [True]

    def test_repeat_all_wraps(self, make_controller) -> None:
        controller = make_controller(2)
        controller.sequencer.set_repeat(RepeatMode.ALL)
        controller.play_index(1)

        controller.on_ended()

        assert controller.current_index == 0
        assert controller.is_playing is True


class TestNextPrevious:
    """Transport buttons."""

    def test_next_at_end_pauses(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(2)
        controller.play_index(1)

        controller.next_track()

        assert controller.is_playing is False
        assert output.loaded == ["/music/1.mp3"]

    def test_previous_at_start_does_nothing(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(2)
        controller.play_index(0)

        controller.previous_track()

        assert controller.is_playing is True
        assert output.loaded == ["/music/0.mp3"]

    def test_previous_moves_back(self, make_controller) -> None:
        controller = make_controller(3)
        controller.play_index(2)

        controller.previous_track()

        assert controller.current_index == 1


class TestRemoveTrack:
    """Removal through the controller."""

    def test_removing_current_plays_replacement(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)
        controller.play_index(1)

        assert controller.remove_track(1) is True

        assert controller.current_index == 1
        assert controller.playlist.size() == 2
        assert output.loaded[-1] == "/music/2.mp3"

    def test_removing_other_track_keeps_playing(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(3)
        controller.play_index(2)

        controller.remove_track(0)

        assert controller.current_index == 1
        assert controller.current_track.id == "t2"
        assert output.loaded == ["/music/2.mp3"]

    def test_removing_last_remaining_track(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(1)
        controller.play_index(0)

        controller.remove_track(0)

        assert controller.current_index is None
        assert controller.is_playing is False
        assert output.playing is False
        assert controller.current_track is None

    def test_out_of_range(self, make_controller) -> None:
        controller = make_controller(2)

        assert controller.remove_track(5) is False
        assert controller.playlist.size() == 2

    def test_shuffle_order_repaired(self, make_controller) -> None:
        controller = make_controller(3)
        controller.play_index(1)
        controller.toggle_shuffle()
        original = list(controller.sequencer.order)

        controller.remove_track(1)

        assert controller.sequencer.order == [i - 1 if i > 1 else i for i in original if i != 1]
        assert controller.sequencer.position == controller.sequencer.order.index(1)


class TestAddTracks:
    """Appending tracks while shuffled."""

    def test_append_while_shuffled_reanchors(self, make_controller) -> None:
        controller = make_controller(3)
        controller.play_index(2)
        controller.toggle_shuffle()

        controller.add_tracks(make_tracks(2, start=3))

        assert controller.sequencer.order[0] == 2
        assert sorted(controller.sequencer.order) == [0, 1, 2, 3, 4]


class TestVolumeAndModes:
    """Volume, shuffle and repeat controls."""

    def test_initial_volume_forwarded(self, make_controller, output: FakeOutput) -> None:
        make_controller(0, volume=65)

        assert output.volume == 65

    @pytest.mark.parametrize(("value", "expected"), [(-10, 0), (50, 50), (150, 100)])
    def test_volume_clamped(self, make_controller, output: FakeOutput, value: int, expected: int) -> None:
        controller = make_controller(0)

        controller.set_volume(value)

        assert controller.volume == expected
        assert output.volume == expected

    def test_step_volume(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(0, volume=98)

        controller.step_volume()
        assert output.volume == 100

        controller.step_volume(-3)
        assert output.volume == 85

    def test_cycle_repeat(self, make_controller) -> None:
        controller = make_controller(1)

        modes = [controller.cycle_repeat() for _ in range(3)]

        assert modes == [RepeatMode.ONE, RepeatMode.ALL, RepeatMode.OFF]

    def test_toggle_shuffle_without_current_anchors_zero(self, make_controller) -> None:
        controller = make_controller(4)

        assert controller.toggle_shuffle() is True
        assert controller.sequencer.order[0] == 0


class TestTimeUpdates:
    """Output time updates."""

    def test_records_position_and_duration(self, make_controller, output: FakeOutput) -> None:
        controller = make_controller(2)
        controller.play_index(0)

        controller.on_time_update(65.2)

        assert controller.current_time == 65.2
        assert controller.playlist.get_track_duration("t0") == 200.0
        assert controller.time_text() == "1:05 / 3:20"

    def test_meta_line_for_current(self, make_controller) -> None:
        controller = make_controller(1)
        assert controller.meta_line() == ("", "")

        controller.play_index(0)

        assert controller.meta_line()[0] == "Unknown Artist • Unknown Album"


class TestFromSettings:
    """Building a controller from settings."""

    def test_settings_applied(self, tmp_path) -> None:
        config = tmp_path / "settings.json"
        config.write_text(
            '{"volume": 40, "shuffle_mode": true, "repeat_mode": "all", "seek_step": 10,'
            ' "equalizer": {"bass": 6}}'
        )
        out = FakeOutput()

        controller = PlaybackController.from_settings(out, SettingsManager(str(config)))

        assert out.volume == 40
        assert controller.sequencer.shuffle is True
        assert controller.sequencer.repeat is RepeatMode.ALL
        assert controller.seek_step == 10
        assert controller.equalizer.as_dict() == {"gain": 100, "bass": 6, "mid": 0, "treble": 0}

    def test_graph_receives_configured_equalizer(self, tmp_path, mocker) -> None:
        config = tmp_path / "settings.json"
        config.write_text('{"equalizer": {"gain": 140, "treble": -3}}')
        graph = mocker.Mock()

        PlaybackController.from_settings(FakeOutput(), SettingsManager(str(config)), graph=graph)

        graph.apply.assert_called_once_with(140, 0, 0, -3)
