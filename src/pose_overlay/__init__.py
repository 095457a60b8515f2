"""
pose_overlay - 2D pose overlay player
A PySide6-based tool for overlaying multi-person 2D pose data on a video,
with motion trails and ground contact annotations.
"""

__version__ = "0.1.0"

# Lazy imports: core modules stay importable without a Qt display
_EXPORTS = {
    "Keypoint": ".models",
    "PersonFrame": ".models",
    "OverlayConfig": ".config",
    "GroundConfig": ".config",
    "PoseFrameIndex": ".pose_index",
    "PoseDataError": ".pose_index",
    "load_pose_json": ".pose_index",
    "PlaybackClock": ".clock",
    "StopReason": ".clock",
    "TrailStore": ".trails",
    "ContactDetector": ".contact",
    "PrevFrameCache": ".contact",
    "compute_annotations": ".contact",
    "OverlayEngine": ".engine",
    "FrameAnnotations": ".engine",
    "OverlayWindow": ".app",
}


def __getattr__(name):
    if name in _EXPORTS:
        from importlib import import_module
        return getattr(import_module(_EXPORTS[name], __name__), name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS) + ["__version__"]


def main():
    """Entry point for the application."""
    from .app import run_app
    run_app()
