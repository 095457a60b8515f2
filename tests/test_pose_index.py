import json

import pytest

from pose_overlay.models import Keypoint
from pose_overlay.pose_index import PoseDataError, PoseFrameIndex, load_pose_json


def test_groups_records_by_frame_in_arrival_order(make_record):
    records = [
        make_record(3, j0=(1, 1)),
        make_record(0, j0=(2, 2)),
        make_record(3, j0=(3, 3)),
    ]
    index = PoseFrameIndex.build(records)

    persons = index.lookup(3)
    assert [p.slot for p in persons] == [0, 1]
    assert persons[0].get(0) == Keypoint(1.0, 1.0)
    assert persons[1].get(0) == Keypoint(3.0, 3.0)
    assert index.max_frame == 3
    assert len(index) == 2


@pytest.mark.parametrize("frame", [1, 2, 4, 1000, -1])
def test_unknown_frame_is_empty(make_record, frame):
    index = PoseFrameIndex.build([make_record(0, j0=(1, 1)), make_record(3, j0=(1, 1))])
    assert index.lookup(frame) == []


def test_empty_index():
    index = PoseFrameIndex.build([])
    assert index.lookup(0) == []
    assert index.max_frame is None
    assert len(index) == 0


def test_dict_source_and_numeric_like_frame_ids():
    data = {
        "a": {"frame_id": "7", "keypoints": [[10, 20]]},
        "b": {"frame_id": 8.0, "keypoints": [None, [1, 2, 0.9]]},
    }
    index = PoseFrameIndex.build(data)

    assert 7 in index and 8 in index
    assert index.lookup(7)[0].get(0) == Keypoint(10.0, 20.0)
    # confidence 값은 무시
    assert index.lookup(8)[0].get(1) == Keypoint(1.0, 2.0)
    assert index.lookup(8)[0].get(0) is None


@pytest.mark.parametrize("bad", [
    {"frame_id": None, "keypoints": []},
    {"frame_id": -2, "keypoints": []},
    {"frame_id": 1.5, "keypoints": []},
    {"frame_id": True, "keypoints": []},
    {"frame_id": "abc", "keypoints": []},
    {"frame_id": 1, "keypoints": "nope"},
    {"frame_id": 1, "keypoints": [["x", 2]]},
    {"frame_id": 1, "keypoints": [[1]]},
    "not a record",
])
def test_malformed_records_are_rejected(bad):
    index = PoseFrameIndex.build([bad, {"frame_id": 0, "keypoints": [[1, 1]]}])
    assert index.rejected == 1
    assert index.frame_count == 1
    assert index.lookup(0)[0].get(0) == Keypoint(1.0, 1.0)


def test_non_finite_coordinates_are_absent():
    index = PoseFrameIndex.build([{"frame_id": 0, "keypoints": [[float("nan"), 1], [2, 3]]}])
    person = index.lookup(0)[0]
    assert person.get(0) is None
    assert person.get(1) == Keypoint(2.0, 3.0)


def test_out_of_range_joint_is_absent(make_record):
    index = PoseFrameIndex.build([make_record(0, n_joints=3, j1=(5, 5))])
    assert index.lookup(0)[0].get(16) is None


def test_lookup_returns_a_copy(make_record):
    index = PoseFrameIndex.build([make_record(0, j0=(1, 1))])
    index.lookup(0).clear()
    assert len(index.lookup(0)) == 1


def test_load_pose_json(tmp_path, make_record):
    path = tmp_path / "pose.json"
    path.write_text(json.dumps([make_record(0, j15=(100, 400)), make_record(1, j15=(100, 401))]))

    index = load_pose_json(str(path))
    assert index.max_frame == 1
    assert index.lookup(1)[0].get(15) == Keypoint(100.0, 401.0)


def test_load_pose_json_errors(tmp_path):
    with pytest.raises(PoseDataError):
        load_pose_json(str(tmp_path / "missing.json"))

    broken = tmp_path / "broken.json"
    broken.write_text("{not json")
    with pytest.raises(PoseDataError):
        load_pose_json(str(broken))

    scalar = tmp_path / "scalar.json"
    scalar.write_text("42")
    with pytest.raises(PoseDataError):
        load_pose_json(str(scalar))
