"""
Data models for pose overlay.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Keypoint:
    """비디오 좌표계(640x480)의 단일 키포인트"""
    x: float
    y: float


@dataclass(frozen=True)
class PersonFrame:
    """한 프레임 안의 한 사람 (slot은 프레임 내 순서일 뿐, 동일 인물 보장 없음)"""
    slot: int
    keypoints: Tuple[Optional[Keypoint], ...]

    def get(self, joint: int) -> Optional[Keypoint]:
        if 0 <= joint < len(self.keypoints):
            return self.keypoints[joint]
        return None

    def present(self):
        """(joint, keypoint) 쌍 중 검출된 것만"""
        for joint, kp in enumerate(self.keypoints):
            if kp is not None:
                yield joint, kp
