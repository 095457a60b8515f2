"""
PlaybackClock - elapsed playback time, speed and end-of-sequence detection.

The clock is authoritative: a companion video surface is re-seeked to the
clock when it drifts, never the other way around.
"""

import logging
import math
from enum import Enum
from typing import Optional, Protocol

from .config import parse_speed
from .constants import DRIFT_TOLERANCE, SAMPLING_RATE

logger = logging.getLogger(__name__)


class VideoSurface(Protocol):
    """clock이 제어하는 외부 비디오 (시간 단위: 초)"""

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def seek(self, seconds: float) -> None: ...

    def set_speed(self, rate: float) -> None: ...

    def current_time(self) -> float: ...

    def duration(self) -> float: ...

    def is_ready(self) -> bool: ...


class StopReason(Enum):
    USER = "user"
    VIDEO_END = "video_end"
    POSE_END = "pose_end"


class PlaybackClock:
    """재생 시간 관리 (time += delta * rate)"""

    def __init__(self, sampling_rate: float = SAMPLING_RATE,
                 last_frame: Optional[int] = None,
                 video: Optional[VideoSurface] = None):
        self.sampling_rate = sampling_rate
        self.last_frame = last_frame
        self.video = video
        self.time: float = 0.0
        self.rate: float = 1.0
        self.playing: bool = False
        self.last_stop_reason: Optional[StopReason] = None

    def _video_ready(self) -> bool:
        return self.video is not None and self.video.is_ready()

    def set_rate(self, value) -> bool:
        """숫자가 아닌 입력은 무시하고 기존 값 유지"""
        rate = parse_speed(value)
        if rate is None:
            logger.warning("Rejected playback speed %r (keeping %.2f)", value, self.rate)
            return False
        self.rate = rate
        if self.video is not None:
            self.video.set_speed(rate)
        return True

    def play(self):
        self.playing = True
        if self._video_ready():
            self.video.play()
            self.video.set_speed(self.rate)

    def pause(self):
        self.playing = False
        if self.video is not None:
            self.video.pause()

    def toggle(self):
        if self.playing:
            self.pause()
        else:
            self.play()

    def stop(self, reason: StopReason = StopReason.USER):
        self.playing = False
        self.time = 0.0
        self.last_stop_reason = reason
        if self.video is not None:
            self.video.pause()
            self.video.seek(0.0)
        logger.debug("Playback stopped (%s)", reason.value)

    def seek(self, seconds: float):
        self.time = max(0.0, float(seconds))
        if self.video is not None:
            self.video.seek(self.time)

    @property
    def last_frame_time(self) -> Optional[float]:
        if self.last_frame is None:
            return None
        return self.last_frame / self.sampling_rate

    def advance(self, delta: float):
        if not self.playing:
            return

        self.time += delta * self.rate

        if self._video_ready():
            duration = self.video.duration()
            if not math.isinf(duration) and self.time >= duration:
                self.time = duration
                self.stop(StopReason.VIDEO_END)
                return
            if abs(self.video.current_time() - self.time) > DRIFT_TOLERANCE:
                self.video.seek(self.time)

        last_time = self.last_frame_time
        if last_time is not None and self.time >= last_time:
            self.stop(StopReason.POSE_END)

    def current_frame(self) -> int:
        return int(math.floor(self.time * self.sampling_rate))
