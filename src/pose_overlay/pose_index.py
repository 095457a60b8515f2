"""
PoseFrameIndex - frame number -> persons lookup built from pose records.

Record schema::

    {"frame_id": 12, "keypoints": [[x, y], null, [x, y, conf], ...]}

The source may be a list of records or a dict whose values are records.
"""

import json
import logging
import math
from numbers import Real
from typing import Dict, Iterable, List, Optional, Union

from .models import Keypoint, PersonFrame

logger = logging.getLogger(__name__)


class PoseDataError(Exception):
    """포즈 파일을 읽거나 해석할 수 없을 때"""


class InvalidRecord(ValueError):
    """스키마에 맞지 않는 레코드 (로드 시 제외됨)"""


def _parse_frame_id(raw) -> int:
    if isinstance(raw, bool) or raw is None:
        raise InvalidRecord(f"invalid frame_id: {raw!r}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise InvalidRecord(f"invalid frame_id: {raw!r}") from None
    if math.isnan(value) or math.isinf(value) or value < 0 or not value.is_integer():
        raise InvalidRecord(f"invalid frame_id: {raw!r}")
    return int(value)


def _parse_keypoint(raw) -> Optional[Keypoint]:
    if raw is None:
        return None
    if not isinstance(raw, (list, tuple)) or len(raw) < 2:
        raise InvalidRecord(f"invalid keypoint: {raw!r}")
    x, y = raw[0], raw[1]
    for v in (x, y):
        if isinstance(v, bool) or not isinstance(v, Real):
            raise InvalidRecord(f"non-numeric coordinate: {raw!r}")
    x, y = float(x), float(y)
    # NaN / inf 좌표는 미검출로 취급
    if math.isnan(x) or math.isinf(x) or math.isnan(y) or math.isinf(y):
        return None
    return Keypoint(x, y)


class PoseFrameIndex:
    """프레임 번호 -> PersonFrame 리스트 (로드 후 변경 없음)"""

    def __init__(self, frames: Optional[Dict[int, List[PersonFrame]]] = None, rejected: int = 0):
        self._frames: Dict[int, List[PersonFrame]] = frames or {}
        self.rejected = rejected
        self._max_frame = max(self._frames) if self._frames else None

    @classmethod
    def build(cls, records: Union[Iterable[dict], Dict[object, dict]]) -> "PoseFrameIndex":
        if isinstance(records, dict):
            records = records.values()

        frames: Dict[int, List[PersonFrame]] = {}
        rejected = 0
        for record in records:
            try:
                if not isinstance(record, dict):
                    raise InvalidRecord(f"record is not an object: {type(record).__name__}")
                frame_id = _parse_frame_id(record.get("frame_id"))
                raw_kpts = record.get("keypoints")
                if not isinstance(raw_kpts, list):
                    raise InvalidRecord("keypoints must be a list")
                keypoints = tuple(_parse_keypoint(p) for p in raw_kpts)
            except InvalidRecord as e:
                rejected += 1
                logger.warning("Skipping pose record: %s", e)
                continue

            persons = frames.setdefault(frame_id, [])
            persons.append(PersonFrame(slot=len(persons), keypoints=keypoints))

        if rejected:
            logger.warning("%d pose record(s) rejected", rejected)
        return cls(frames, rejected)

    def lookup(self, frame: int) -> List[PersonFrame]:
        """없는 프레임은 빈 리스트 (에러 아님)"""
        return list(self._frames.get(frame, ()))

    @property
    def max_frame(self) -> Optional[int]:
        return self._max_frame

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __contains__(self, frame) -> bool:
        return frame in self._frames


def load_pose_json(path: str) -> PoseFrameIndex:
    """JSON 파일에서 인덱스 생성"""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise PoseDataError(f"Failed to load pose JSON {path}: {e}") from e

    if not isinstance(data, (list, dict)):
        raise PoseDataError(f"Pose JSON must be a list or object: {path}")

    index = PoseFrameIndex.build(data)
    logger.info("Loaded %d pose frames from %s (max frame %s)",
                index.frame_count, path, index.max_frame)
    return index
