"""
Audio output backed by Qt Multimedia.
Adapts QMediaPlayer (milliseconds, Qt enums) to the controller's seconds-based interface.
"""

import logging

from PyQt5.QtCore import QObject, QUrl, pyqtSignal
from PyQt5.QtMultimedia import QMediaContent, QMediaPlayer

from tagdeck.core.playback import AudioOutputError


logger = logging.getLogger(__name__)


class QtAudioOutput(QObject):
    """QMediaPlayer wrapper emitting timeUpdate(seconds) and ended()"""

    timeUpdate = pyqtSignal(float)
    ended = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.player = QMediaPlayer(self)
        self.player.positionChanged.connect(self._on_position_changed)
        self.player.mediaStatusChanged.connect(self._on_media_status_changed)

    def load(self, handle):
        """Point the player at a local file path"""
        self.player.setMedia(QMediaContent(QUrl.fromLocalFile(str(handle))))

    def play(self):
        """
        Start playback.

        Returns:
            True if the player is now playing

        Raises:
            AudioOutputError: If Qt reports an error for the current media
        """
        self.player.play()
        if self.player.error() != QMediaPlayer.NoError:
            raise AudioOutputError(self.player.errorString())
        return self.player.state() == QMediaPlayer.PlayingState

    def pause(self):
        self.player.pause()

    def seek(self, seconds):
        self.player.setPosition(int(seconds * 1000))

    @property
    def current_time(self):
        return self.player.position() / 1000.0

    @property
    def duration(self):
        return max(0, self.player.duration()) / 1000.0

    @property
    def volume(self):
        return self.player.volume()

    @volume.setter
    def volume(self, value):
        self.player.setVolume(int(value))

    def _on_position_changed(self, position_ms):
        self.timeUpdate.emit(position_ms / 1000.0)

    def _on_media_status_changed(self, status):
        if status == QMediaPlayer.EndOfMedia:
            self.ended.emit()
        elif status == QMediaPlayer.InvalidMedia:
            logger.warning("Invalid media: %s", self.player.errorString())
