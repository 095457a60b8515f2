"""
OverlayEngine - thin per-frame driver around the clock, pose index,
trails, contact detection and previous-frame cache.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .clock import PlaybackClock, VideoSurface
from .config import OverlayConfig
from .constants import POINT_SIZE_CYCLE, SAMPLING_RATE, SCALE_CYCLE
from .contact import ContactAnnotation, ContactDetector, PrevFrameCache
from .models import PersonFrame
from .pose_index import PoseFrameIndex
from .trails import TrailStore

logger = logging.getLogger(__name__)


@dataclass
class FrameAnnotations:
    """한 사이클의 계산 결과 (캔버스가 그대로 그림)"""
    ready: bool
    frame: int = 0
    time: float = 0.0
    persons: List[PersonFrame] = field(default_factory=list)
    contacts: List[ContactAnnotation] = field(default_factory=list)


class OverlayEngine:
    def __init__(self, index: Optional[PoseFrameIndex] = None,
                 video: Optional[VideoSurface] = None,
                 config: Optional[OverlayConfig] = None,
                 sampling_rate: float = SAMPLING_RATE):
        self.config = config or OverlayConfig()
        self.index = index if index is not None else PoseFrameIndex()
        self.clock = PlaybackClock(sampling_rate, self.index.max_frame, video)
        self.trails = TrailStore(self.config.trails.max_len)
        self.prev_cache = PrevFrameCache()
        self.detector = ContactDetector()
        self._was_ready = False

    # ----- 로드 -----
    def set_index(self, index: PoseFrameIndex):
        self.index = index
        self.clock.last_frame = index.max_frame
        self.clock.stop()
        self.trails.clear()
        self.prev_cache.clear()
        self._was_ready = False

    def set_video(self, video: Optional[VideoSurface]):
        self.clock.video = video
        self._was_ready = False

    @property
    def ready(self) -> bool:
        if len(self.index) == 0:
            return False
        video = self.clock.video
        return video is None or video.is_ready()

    def check_ready(self) -> bool:
        """준비 완료로 바뀌는 순간 한 번만 True, 그때 자동 재생"""
        ready = self.ready
        if ready and not self._was_ready:
            self._was_ready = True
            logger.info("Pose data and video ready, starting playback")
            self.clock.play()
            return True
        if not ready:
            self._was_ready = False
        return False

    # ----- 사이클 -----
    def step(self, delta: float) -> FrameAnnotations:
        """
        시간 진행 -> 프레임 조회 -> 궤적 추가 -> 접촉 판정 -> 이전 프레임 갱신

        접촉 판정은 이전 스냅샷을 인자로 받아 계산하고, 캐시 교체는 그 뒤에 한다.
        """
        if not self.ready:
            return FrameAnnotations(ready=False)

        was_playing = self.clock.playing
        self.clock.advance(delta)
        frame = self.clock.current_frame()
        persons = self.index.lookup(frame)

        if was_playing:
            self.trails.update(persons)

        contacts = self.detector.detect(persons, self.prev_cache.snapshot_view(),
                                        self.config.ground)
        self.prev_cache.snapshot(persons)

        return FrameAnnotations(ready=True, frame=frame, time=self.clock.time,
                                persons=persons, contacts=contacts)

    # ----- 설정 -----
    def apply_change(self, key: str, value):
        self.config = self.config.with_change(key, value)
        if key == "trails.max_len":
            self.trails.set_max_len(self.config.trails.max_len)

    def toggle(self, key: str):
        section, _, name = key.partition(".")
        current = getattr(getattr(self.config, section), name)
        self.apply_change(key, not current)

    def toggle_pose(self):
        self.toggle("view.show_pose")

    def cycle_scale(self):
        view = self.config.view
        self.apply_change("view.scale_index", (view.scale_index + 1) % len(SCALE_CYCLE))
        self.apply_change("view.point_size_index",
                          (view.point_size_index + 1) % len(POINT_SIZE_CYCLE))

    def clear_trails(self):
        self.trails.clear()

    # ----- 재생 제어 -----
    def play(self):
        self.clock.play()

    def pause(self):
        self.clock.pause()

    def stop(self):
        # 궤적과 이전 프레임은 확인용으로 유지
        self.clock.stop()

    def toggle_playback(self):
        self.clock.toggle()

    def seek(self, seconds: float):
        self.clock.seek(seconds)

    def set_speed(self, value) -> bool:
        return self.clock.set_rate(value)

    def handle_key(self, key: str) -> bool:
        key = key.upper()
        if key == "T":
            self.toggle_pose()
        elif key == "P":
            self.toggle_playback()
        else:
            return False
        return True
