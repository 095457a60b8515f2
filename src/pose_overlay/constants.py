"""
Constants for pose overlay: video space, skeleton and control ranges.
"""

from typing import Dict, List, Tuple


# 포즈 데이터 좌표계
POSE_WIDTH = 640
POSE_HEIGHT = 480
SAMPLING_RATE = 30

# COCO 17 기준 스켈레톤 연결 (팔, 다리, 몸통)
SKELETON_EDGES: List[Tuple[int, int]] = [
    (5, 7), (7, 9), (6, 8), (8, 10),
    (11, 13), (13, 15), (12, 14), (14, 16),
    (5, 6), (11, 12), (5, 11), (6, 12),
]

HEAD_JOINT = 0
ANKLE_JOINTS: Tuple[int, ...] = (15, 16)

# 사람 slot별 궤적 색상 (slot % len)
TRAIL_COLORS: List[Tuple[int, int, int]] = [
    (0, 200, 255),
    (255, 80, 0),
    (0, 255, 120),
    (255, 200, 0),
    (180, 120, 255),
    (255, 0, 180),
]
TRAIL_MIN_ALPHA = 40
TRAIL_CURVE_SAMPLES = 8

# Scale 버튼으로 같이 순환
SCALE_CYCLE: List[float] = [1.0, 0.75, 0.5, 0.25]
POINT_SIZE_CYCLE: List[int] = [6, 12, 18, 24, 36]

HEAD_SIZE = 150
REACTION_EPSILON = 0.001

# 비디오 위치와 재생 시간 차이 허용치 (초)
DRIFT_TOLERANCE = 0.1

# 컨트롤 범위: key -> (min, max, step)
CONTROL_RANGES: Dict[str, Tuple[float, float, float]] = {
    "view.alpha": (0, 255, 1),
    "trails.max_len": (10, 1200, 1),
    "trails.weight": (1, 10, 0.5),
    "ground.y": (0, POSE_HEIGHT, 1),
    "ground.contact_tol": (1, 30, 1),
    "ground.vel_thresh": (0, 5, 0.1),
    "ground.react_scale": (10, 120, 1),
}
