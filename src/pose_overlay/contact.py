"""
Ground contact detection for ankle joints.

Contact is recomputed from scratch every cycle from the current frame and
the previous frame snapshot; there is no hysteresis.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .config import GroundConfig
from .constants import ANKLE_JOINTS, REACTION_EPSILON
from .models import Keypoint, PersonFrame

FrameSnapshot = Mapping[Tuple[int, int], Keypoint]


class PrevFrameCache:
    """직전 프레임의 (slot, joint) -> Keypoint. 사이클마다 통째로 교체"""

    def __init__(self):
        self._points: Dict[Tuple[int, int], Keypoint] = {}

    def snapshot(self, persons: Sequence[PersonFrame]):
        points = {}
        for person in persons:
            for joint, kp in person.present():
                points[(person.slot, joint)] = kp
        self._points = points

    def get(self, slot: int, joint: int) -> Optional[Keypoint]:
        return self._points.get((slot, joint))

    def snapshot_view(self) -> FrameSnapshot:
        return MappingProxyType(dict(self._points))

    def clear(self):
        self._points = {}

    def __len__(self) -> int:
        return len(self._points)


@dataclass(frozen=True)
class ContactAnnotation:
    slot: int
    joint: int
    point: Keypoint
    velocity: float
    in_contact: bool
    reaction_length: float


def reaction_length(distance: float, ground: GroundConfig) -> float:
    """지면에 가까울수록 길어짐: distance 0 -> 약 2배, contact_tol -> react_scale"""
    return ground.react_scale * (
        1 + (ground.contact_tol - distance) / (ground.contact_tol + REACTION_EPSILON)
    )


class ContactDetector:
    """발목 관절의 지면 접촉 판정"""

    def __init__(self, joints: Sequence[int] = ANKLE_JOINTS):
        self.joints = tuple(joints)

    def evaluate(self, slot: int, joint: int, point: Keypoint,
                 last: Optional[Keypoint], ground: GroundConfig) -> ContactAnnotation:
        # 이전 프레임이 없으면 속도 0 (+는 아래 방향, px/frame)
        velocity = point.y - last.y if last is not None else 0.0
        distance = abs(point.y - ground.y)
        near_ground = distance <= ground.contact_tol
        slow_vertical = abs(velocity) <= ground.vel_thresh
        in_contact = near_ground and slow_vertical
        length = reaction_length(distance, ground) if in_contact else 0.0
        return ContactAnnotation(slot, joint, point, velocity, in_contact, length)

    def detect(self, persons: Sequence[PersonFrame], previous: FrameSnapshot,
               ground: GroundConfig) -> List[ContactAnnotation]:
        annotations = []
        for person in persons:
            for joint in self.joints:
                point = person.get(joint)
                if point is None:
                    continue
                last = previous.get((person.slot, joint))
                annotations.append(self.evaluate(person.slot, joint, point, last, ground))
        return annotations


def compute_annotations(persons: Sequence[PersonFrame], previous: FrameSnapshot,
                        ground: GroundConfig,
                        joints: Sequence[int] = ANKLE_JOINTS) -> List[ContactAnnotation]:
    """현재 프레임과 직전 스냅샷만으로 계산 (상태 변경 없음)"""
    return ContactDetector(joints).detect(persons, previous, ground)
