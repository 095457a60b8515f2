import pytest

from pose_overlay.clock import StopReason
from pose_overlay.engine import OverlayEngine
from pose_overlay.pose_index import PoseFrameIndex


@pytest.fixture
def walking_index(make_record):
    """프레임 0..10, 발목 15번이 프레임마다 1px씩 내려옴"""
    return PoseFrameIndex.build([
        make_record(f, j0=(320, 100), j15=(300, 390 + f)) for f in range(11)
    ])


def test_not_ready_without_pose_data(make_video):
    engine = OverlayEngine(video=make_video())
    result = engine.step(0.1)

    assert result.ready is False
    assert engine.check_ready() is False
    assert engine.clock.time == 0.0


def test_not_ready_until_video_is_ready(walking_index, make_video):
    video = make_video(ready=False)
    engine = OverlayEngine(walking_index, video)
    assert engine.step(0.1).ready is False

    video.ready = True
    assert engine.check_ready() is True
    assert engine.clock.playing
    assert engine.check_ready() is False


def test_step_reports_frame_persons_and_contacts(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()

    first = engine.step(0.0)
    assert first.ready and first.frame == 0
    assert len(first.persons) == 1
    assert first.contacts[0].velocity == 0.0

    second = engine.step(0.04)
    assert second.frame == 1
    assert second.contacts[0].velocity == pytest.approx(1.0)


def test_contact_reads_previous_frame_before_cache_update(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()
    engine.step(0.0)
    result = engine.step(0.1)  # frame 3

    assert result.frame == 3
    assert result.contacts[0].velocity == pytest.approx(3.0)
    assert engine.prev_cache.get(0, 15).y == 393


def test_paused_display_has_zero_velocity(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()
    engine.step(0.1)
    engine.pause()

    result = engine.step(0.1)
    assert result.frame == 3
    assert result.contacts[0].velocity == 0.0


def test_trails_grow_only_while_playing(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()
    engine.step(0.0)
    engine.step(0.04)
    assert len(engine.trails.history(0, 15)) == 2

    engine.pause()
    engine.step(0.04)
    assert len(engine.trails.history(0, 15)) == 2


def test_stop_keeps_trails_and_cache(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()
    engine.step(0.1)
    engine.stop()

    assert engine.clock.time == 0.0
    assert not engine.clock.playing
    assert engine.trails.history(0, 15)
    assert engine.prev_cache.get(0, 15) is not None


def test_unknown_frames_draw_nothing(make_record):
    index = PoseFrameIndex.build([make_record(0, j15=(1, 1)), make_record(90, j15=(1, 1))])
    engine = OverlayEngine(index)
    engine.check_ready()
    result = engine.step(1.0)  # frame 30

    assert result.frame == 30
    assert result.persons == []
    assert result.contacts == []


def test_video_duration_stops_before_pose_end(make_record, make_video):
    # 포즈 10초(0..299 @30Hz), 비디오 8초
    index = PoseFrameIndex.build([make_record(f, j15=(300, 440)) for f in range(300)])
    video = make_video(duration=8.0)
    engine = OverlayEngine(index, video)
    engine.check_ready()

    ticks = 0
    while engine.clock.playing and ticks < 1000:
        engine.step(1 / 30)
        ticks += 1

    assert engine.clock.last_stop_reason is StopReason.VIDEO_END
    assert engine.clock.time == 0.0
    assert 235 <= ticks <= 245
    assert video.position == 0.0


def test_trail_length_change_reaches_store(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()
    for _ in range(8):
        engine.step(0.04)

    engine.apply_change("trails.max_len", 5)
    assert engine.trails.max_len == 10  # 최소값으로 고정
    assert len(engine.trails.history(0, 15)) == 8

    engine.apply_change("trails.max_len", 1200)
    engine.clear_trails()
    assert engine.trails.history(0, 15) == []


def test_keys_and_scale_cycle(walking_index):
    engine = OverlayEngine(walking_index)
    engine.check_ready()

    assert engine.handle_key("t")
    assert engine.config.view.show_pose is False
    assert engine.handle_key("P")
    assert engine.clock.playing is False
    assert engine.handle_key("x") is False

    for expected in (0.75, 0.5, 0.25, 1.0):
        engine.cycle_scale()
        assert engine.config.view.scale_factor == expected
    assert engine.config.view.point_size == 6


def test_invalid_speed_keeps_previous(walking_index):
    engine = OverlayEngine(walking_index)
    assert engine.set_speed("2")
    assert engine.set_speed("fast") is False
    assert engine.clock.rate == 2.0


def test_new_index_resets_session(walking_index, make_record):
    engine = OverlayEngine(walking_index)
    engine.check_ready()
    engine.step(0.1)

    engine.set_index(PoseFrameIndex.build([make_record(0, j0=(1, 1))]))
    assert engine.trails.history(0, 15) == []
    assert len(engine.prev_cache) == 0
    assert engine.clock.last_frame == 0
    assert engine.check_ready() is True
