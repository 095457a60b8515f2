import pytest

from pose_overlay.config import OverlayConfig, parse_speed
from pose_overlay.constants import POSE_HEIGHT


def test_defaults():
    cfg = OverlayConfig()
    assert cfg.ground.y == pytest.approx(POSE_HEIGHT * 0.92)
    assert cfg.ground.contact_tol == 8
    assert cfg.trails.max_len == 240
    assert cfg.view.alpha == 120
    assert cfg.view.scale_factor == 1.0
    assert cfg.view.point_size == 12


def test_with_change_returns_new_config():
    cfg = OverlayConfig()
    changed = cfg.with_change("ground.y", 300)

    assert changed.ground.y == 300
    assert cfg.ground.y == pytest.approx(POSE_HEIGHT * 0.92)
    assert changed.trails is cfg.trails


@pytest.mark.parametrize("key, value, expected", [
    ("ground.y", 9999, POSE_HEIGHT),
    ("ground.y", -5, 0),
    ("view.alpha", 300, 255),
    ("trails.max_len", 3, 10),
    ("trails.max_len", 55.6, 56),
    ("ground.vel_thresh", 7.5, 5),
    ("ground.react_scale", 1, 10),
])
def test_numeric_changes_are_clamped(key, value, expected):
    section, _, name = key.partition(".")
    cfg = OverlayConfig().with_change(key, value)
    assert getattr(getattr(cfg, section), name) == expected


def test_int_fields_stay_int():
    cfg = OverlayConfig().with_change("view.alpha", 99.6)
    assert cfg.view.alpha == 100
    assert isinstance(cfg.view.alpha, int)


def test_flags_and_offset():
    cfg = OverlayConfig().with_change("trails.visible", 0)
    cfg = cfg.with_change("view.offset", [12, -4])
    assert cfg.trails.visible is False
    assert cfg.view.offset == (12.0, -4.0)


@pytest.mark.parametrize("key", ["nope", "ground", "ground.nope", "speed.rate"])
def test_unknown_key_raises(key):
    with pytest.raises(KeyError):
        OverlayConfig().with_change(key, 1)


@pytest.mark.parametrize("text, expected", [
    ("1.0", 1.0), ("2", 2.0), (0.5, 0.5), ("0", 0.0),
    ("abc", None), ("", None), (None, None), ("-1", None), ("nan", None), ("inf", None),
])
def test_parse_speed(text, expected):
    assert parse_speed(text) == expected
