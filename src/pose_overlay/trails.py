"""
TrailStore - bounded per (person slot, joint) position history,
plus the fading Catmull-Rom geometry the canvas draws from it.
"""

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterator, List, Sequence, Tuple

import numpy as np

from .constants import TRAIL_COLORS, TRAIL_CURVE_SAMPLES, TRAIL_MIN_ALPHA
from .models import Keypoint, PersonFrame

TrailKey = Tuple[int, int]


class TrailStore:
    """관절별 최근 위치 기록 (오래된 것부터, 최대 max_len개)"""

    def __init__(self, max_len: int = 240):
        self.max_len = max_len
        self._trails: Dict[TrailKey, Deque[Keypoint]] = {}

    def update(self, persons: Sequence[PersonFrame]):
        # 미검출 관절은 건너뜀 (빈칸 표시 없음)
        for person in persons:
            for joint, kp in person.present():
                key = (person.slot, joint)
                trail = self._trails.get(key)
                if trail is None:
                    trail = self._trails[key] = deque(maxlen=self.max_len)
                trail.append(kp)

    def set_max_len(self, max_len: int):
        """길이 제한 변경. 기존 기록은 최신 max_len개만 남김"""
        self.max_len = max_len
        for key, trail in self._trails.items():
            self._trails[key] = deque(trail, maxlen=max_len)

    def clear(self):
        self._trails = {}

    def history(self, slot: int, joint: int) -> List[Keypoint]:
        return list(self._trails.get((slot, joint), ()))

    def keys(self) -> List[TrailKey]:
        return list(self._trails.keys())

    def items(self) -> Iterator[Tuple[TrailKey, List[Keypoint]]]:
        for key, trail in self._trails.items():
            yield key, list(trail)

    def __len__(self) -> int:
        return len(self._trails)


@dataclass
class TrailSegment:
    """궤적 한 구간 (points: (N, 2) 비디오 좌표)"""
    points: np.ndarray
    alpha: float


def trail_color(slot: int) -> Tuple[int, int, int]:
    return TRAIL_COLORS[slot % len(TRAIL_COLORS)]


def catmull_rom(p0, p1, p2, p3, samples: int = TRAIL_CURVE_SAMPLES) -> np.ndarray:
    """p1 -> p2 구간의 Catmull-Rom 곡선 샘플 (양 끝 포함)"""
    p0, p1, p2, p3 = (np.asarray(p, dtype=float) for p in (p0, p1, p2, p3))
    t = np.linspace(0.0, 1.0, samples)[:, None]
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        2 * p1
        + (p2 - p0) * t
        + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t2
        + (3 * p1 - p0 - 3 * p2 + p3) * t3
    )


def trail_segments(points: Sequence[Keypoint], max_alpha: float,
                   samples: int = TRAIL_CURVE_SAMPLES) -> List[TrailSegment]:
    """
    오래된 쪽은 흐리게, 최근 쪽은 max_alpha로 그려지는 구간 리스트
    양 끝 구간은 제어점을 경계에 고정한다.
    """
    n = len(points)
    if n < 2:
        return []

    pts = np.array([(p.x, p.y) for p in points], dtype=float)
    segments = []
    for s in range(1, n):
        t = s / n
        alpha = TRAIL_MIN_ALPHA + (max_alpha - TRAIL_MIN_ALPHA) * t
        curve = catmull_rom(
            pts[max(0, s - 2)], pts[s - 1], pts[s], pts[min(n - 1, s + 1)],
            samples,
        )
        segments.append(TrailSegment(points=curve, alpha=alpha))
    return segments
