"""
QtVideoSurface - VideoSurface implementation over QMediaPlayer.

Decoded frames arrive through a QVideoSink and are kept as the latest
QImage for the canvas to draw. Audio is muted.
"""

import logging
import math
import os
from typing import Optional

from PySide6.QtCore import QObject, QUrl, Signal
from PySide6.QtGui import QImage
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer, QVideoFrame, QVideoSink

logger = logging.getLogger(__name__)

_READY_STATUSES = (
    QMediaPlayer.MediaStatus.LoadedMedia,
    QMediaPlayer.MediaStatus.BufferingMedia,
    QMediaPlayer.MediaStatus.BufferedMedia,
    QMediaPlayer.MediaStatus.EndOfMedia,
)


class QtVideoSurface(QObject):
    """PlaybackClock이 제어하는 비디오 (시간 단위: 초)"""

    frame_ready = Signal(QImage)
    ready_changed = Signal(bool)
    error_occurred = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.path: Optional[str] = None
        self.latest_image: Optional[QImage] = None
        self._ready = False

        self.player = QMediaPlayer(self)
        self.audio = QAudioOutput(self)
        self.audio.setMuted(True)
        self.player.setAudioOutput(self.audio)

        self.sink = QVideoSink(self)
        self.player.setVideoSink(self.sink)

        self.sink.videoFrameChanged.connect(self._on_frame)
        self.player.mediaStatusChanged.connect(self._on_status_changed)
        self.player.errorOccurred.connect(self._on_error)

    def load(self, path: str):
        self.path = path
        self._ready = False
        self.player.setSource(QUrl.fromLocalFile(os.path.abspath(path)))
        logger.info("Loading video %s", path)

    def release(self):
        self.player.stop()
        self.player.setSource(QUrl())
        self.latest_image = None

    # ----- VideoSurface -----
    def play(self):
        self.player.play()

    def pause(self):
        self.player.pause()

    def seek(self, seconds: float):
        self.player.setPosition(int(seconds * 1000))

    def set_speed(self, rate: float):
        self.player.setPlaybackRate(rate)

    def current_time(self) -> float:
        return self.player.position() / 1000.0

    def duration(self) -> float:
        ms = self.player.duration()
        return ms / 1000.0 if ms > 0 else math.inf

    def is_ready(self) -> bool:
        return self._ready

    # ----- Qt 콜백 -----
    def _on_frame(self, frame: QVideoFrame):
        if not frame.isValid():
            return
        image = frame.toImage()
        if image.isNull():
            return
        self.latest_image = image
        self.frame_ready.emit(image)

    def _on_status_changed(self, status):
        ready = (status in _READY_STATUSES
                 and self.player.error() == QMediaPlayer.Error.NoError)
        if ready != self._ready:
            self._ready = ready
            logger.debug("Video ready=%s (%s)", ready, status)
            self.ready_changed.emit(ready)

    def _on_error(self, error, message: str):
        self._ready = False
        logger.error("Video error for %s: %s", self.path, message)
        self.error_occurred.emit(message)
