"""
Overlay configuration.

위젯은 설정 값을 직접 바꾸지 않고 ("section.field", value) 변경만 보낸다.
엔진이 with_change로 새 설정을 만들어 다음 사이클부터 적용한다.
"""

import math
from dataclasses import dataclass, field, fields, replace
from typing import Optional, Tuple

from .constants import (
    CONTROL_RANGES, POSE_HEIGHT, SCALE_CYCLE, POINT_SIZE_CYCLE,
)


@dataclass(frozen=True)
class GroundConfig:
    """지면 라인과 접촉 판정 파라미터 (비디오 좌표, px/frame)"""
    y: float = POSE_HEIGHT * 0.92
    contact_tol: float = 8.0
    vel_thresh: float = 0.8
    react_scale: float = 40.0


@dataclass(frozen=True)
class TrailConfig:
    visible: bool = True
    max_len: int = 240  # 30fps 기준 약 8초
    weight: float = 3.0
    alpha: int = 160


@dataclass(frozen=True)
class ViewConfig:
    show_pose: bool = True
    alpha: int = 120
    show_ground: bool = True
    show_normals: bool = True
    scale_index: int = 0
    point_size_index: int = 1
    offset: Tuple[float, float] = (0.0, 0.0)

    @property
    def scale_factor(self) -> float:
        return SCALE_CYCLE[self.scale_index % len(SCALE_CYCLE)]

    @property
    def point_size(self) -> int:
        return POINT_SIZE_CYCLE[self.point_size_index % len(POINT_SIZE_CYCLE)]


@dataclass(frozen=True)
class OverlayConfig:
    ground: GroundConfig = field(default_factory=GroundConfig)
    trails: TrailConfig = field(default_factory=TrailConfig)
    view: ViewConfig = field(default_factory=ViewConfig)

    def with_change(self, key: str, value) -> "OverlayConfig":
        """
        "ground.y" 형태의 키로 값 하나를 바꾼 새 설정 반환
        숫자 값은 CONTROL_RANGES 범위로 잘라낸다.
        """
        section_name, _, field_name = key.partition(".")
        section = getattr(self, section_name, None) if field_name else None
        if section is None or field_name not in {f.name for f in fields(section)}:
            raise KeyError(key)

        current = getattr(section, field_name)
        if key in CONTROL_RANGES:
            low, high, _ = CONTROL_RANGES[key]
            value = min(max(float(value), low), high)
            if isinstance(current, int) and not isinstance(current, bool):
                value = int(round(value))
        elif isinstance(current, bool):
            value = bool(value)
        elif key == "view.offset":
            value = (float(value[0]), float(value[1]))

        return replace(self, **{section_name: replace(section, **{field_name: value})})


def parse_speed(text) -> Optional[float]:
    """속도 입력 파싱. 숫자가 아니거나 음수/무한대이면 None"""
    try:
        value = float(text)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    return value
