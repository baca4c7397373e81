#!/usr/bin/env python3
"""
tagdeck - tag-aware command line music player
Main entry point for the application.
"""

import argparse
import logging
import sys

from tagdeck.audio.metadata_resolver import build_meta_line
from tagdeck.config.settings import SettingsManager
from tagdeck.core.library import AudioSource, load_tracks
from tagdeck.core.playback import PlaybackController


logger = logging.getLogger("tagdeck")


def build_parser():
    parser = argparse.ArgumentParser(prog="tagdeck", description="Play audio files in order, shuffled or on repeat.")
    parser.add_argument("files", nargs="+", help="Audio files to queue, in order")
    parser.add_argument("--shuffle", action="store_true", help="Start with shuffle on")
    parser.add_argument("--repeat", choices=("off", "one", "all"), help="Repeat mode")
    parser.add_argument("--volume", type=int, help="Volume 0-100")
    parser.add_argument("--config", help="Settings JSON file (default ~/.tagdeck.json)")
    parser.add_argument("--dump-tags", action="store_true", help="Print resolved metadata and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def dump_tags(sources, limit):
    """Print one line per track: title, labeled artist/album, artwork info"""
    for track in load_tracks(sources, limit):
        _text, detail = build_meta_line(track)
        art = f" [{track.artwork.mime_type}, {len(track.artwork.data)} bytes]" if track.artwork else ""
        print(f"{track.title} | {detail}{art}")


def main(argv=None):
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    settings = SettingsManager(args.config)
    if args.shuffle:
        settings.set('shuffle_mode', True)
    if args.repeat:
        settings.set('repeat_mode', args.repeat)
    if args.volume is not None:
        settings.set('volume', args.volume)

    sources = [AudioSource.from_path(path) for path in args.files]
    if args.dump_tags:
        dump_tags(sources, settings.get_tag_read_limit())
        return 0

    # Qt is only needed for actual playback
    from PyQt5.QtCore import QCoreApplication
    from tagdeck.audio.qt_output import QtAudioOutput

    app = QCoreApplication(sys.argv[:1])
    output = QtAudioOutput()
    controller = PlaybackController.from_settings(output, settings)

    output.timeUpdate.connect(controller.on_time_update)
    output.ended.connect(controller.on_ended)

    def announce(track):
        text, _detail = build_meta_line(track)
        print(f"Now playing: {track.title} ({text})")

    controller.track_changed_callbacks.append(announce)
    controller.stopped_callbacks.append(app.quit)

    controller.add_sources(sources)
    controller.toggle_play()
    if not controller.is_playing:
        logger.warning("Playback did not start")
        return 1

    exit_code = app.exec_()
    logger.info("Stopped at %s", controller.time_text())
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
