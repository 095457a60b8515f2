import math

import pytest

from pose_overlay.models import Keypoint, PersonFrame


class FakeVideo:
    """테스트용 VideoSurface (스스로 시간이 흐르지 않음)"""

    def __init__(self, duration=math.inf, ready=True):
        self._duration = duration
        self.ready = ready
        self.position = 0.0
        self.speed = 1.0
        self.playing = False
        self.seeks = []

    def play(self):
        self.playing = True

    def pause(self):
        self.playing = False

    def seek(self, seconds):
        self.position = seconds
        self.seeks.append(seconds)

    def set_speed(self, rate):
        self.speed = rate

    def current_time(self):
        return self.position

    def duration(self):
        return self._duration

    def is_ready(self):
        return self.ready


def person(slot=0, n_joints=17, **joints):
    """person(j15=(100, 400)) 형태로 일부 관절만 채운 PersonFrame"""
    kpts = [None] * n_joints
    for name, (x, y) in joints.items():
        kpts[int(name[1:])] = Keypoint(float(x), float(y))
    return PersonFrame(slot=slot, keypoints=tuple(kpts))


def record(frame_id, n_joints=17, **joints):
    kpts = [None] * n_joints
    for name, (x, y) in joints.items():
        kpts[int(name[1:])] = [x, y]
    return {"frame_id": frame_id, "keypoints": kpts}


@pytest.fixture
def make_person():
    return person


@pytest.fixture
def make_record():
    return record


@pytest.fixture
def make_video():
    return FakeVideo
