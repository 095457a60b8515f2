"""
Pose Overlay Player - Main Application Window
"""

import argparse
import logging
import sys
import time
from typing import Optional

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QFileDialog, QStatusBar, QSplitter
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QImage, QKeyEvent

from .canvas import OverlayCanvas
from .clock import StopReason
from .constants import SAMPLING_RATE
from .controls import PlaybackBar, ControlPanel
from .engine import OverlayEngine
from .pose_index import PoseDataError, load_pose_json
from .video import QtVideoSurface

logger = logging.getLogger(__name__)


class OverlayWindow(QMainWindow):
    """메인 윈도우"""

    def __init__(self):
        super().__init__()
        self.engine = OverlayEngine()
        self.video: Optional[QtVideoSurface] = None
        self._last_tick = time.perf_counter()
        self._was_playing = False

        self.tick_timer = QTimer(self)
        self.tick_timer.timeout.connect(self._on_timer_tick)

        self._setup_ui()
        self._connect_signals()
        self.tick_timer.start(int(1000 / SAMPLING_RATE))

    def _setup_ui(self):
        self.setWindowTitle("Pose Overlay Player")
        self.setMinimumSize(1280, 800)
        self.setStyleSheet("""
            QMainWindow {
                background-color: #1a1a2e;
            }
            QStatusBar {
                background-color: #16213e;
                color: #e0e0e0;
            }
        """)

        central = QWidget()
        self.setCentralWidget(central)

        outer_layout = QVBoxLayout(central)
        outer_layout.setContentsMargins(0, 0, 0, 0)
        outer_layout.setSpacing(0)

        content_widget = QWidget()
        content_layout = QHBoxLayout(content_widget)
        content_layout.setContentsMargins(10, 10, 10, 10)
        content_layout.setSpacing(10)

        self.canvas = OverlayCanvas()

        self.control_panel = ControlPanel(self.engine.config)
        self.control_panel.setFixedWidth(300)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.control_panel)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)

        content_layout.addWidget(splitter)
        outer_layout.addWidget(content_widget, 1)

        self.playback_bar = PlaybackBar(self.engine.config)
        outer_layout.addWidget(self.playback_bar)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("비디오와 포즈 JSON을 불러오세요 (Ctrl+O / Ctrl+J)")

        self._setup_menubar()

    def _setup_menubar(self):
        menubar = self.menuBar()
        menubar.setStyleSheet("""
            QMenuBar {
                background-color: #16213e;
                color: #e0e0e0;
            }
            QMenuBar::item:selected {
                background-color: #4ECDC4;
                color: #1a1a2e;
            }
            QMenu {
                background-color: #2d2d44;
                color: #e0e0e0;
                border: 1px solid #3d3d5c;
            }
            QMenu::item:selected {
                background-color: #4ECDC4;
                color: #1a1a2e;
            }
        """)

        file_menu = menubar.addMenu("파일")

        video_action = file_menu.addAction("비디오 열기")
        video_action.setShortcut("Ctrl+O")
        video_action.triggered.connect(self._open_video)

        pose_action = file_menu.addAction("포즈 JSON 열기")
        pose_action.setShortcut("Ctrl+J")
        pose_action.triggered.connect(self._open_pose)

        head_action = file_menu.addAction("머리 이미지 열기")
        head_action.triggered.connect(self._open_head_image)

        file_menu.addSeparator()

        exit_action = file_menu.addAction("종료")
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)

    def _connect_signals(self):
        # 재생 바
        self.playback_bar.play_requested.connect(self.engine.play)
        self.playback_bar.pause_requested.connect(self.engine.pause)
        self.playback_bar.stop_requested.connect(self.engine.stop)
        self.playback_bar.scale_requested.connect(self.engine.cycle_scale)
        self.playback_bar.speed_entered.connect(self._on_speed_entered)
        self.playback_bar.config_changed.connect(self._on_config_changed)

        # 컨트롤 패널
        self.control_panel.config_changed.connect(self._on_config_changed)
        self.control_panel.clear_trails_requested.connect(self._on_clear_trails)

        # 캔버스 드래그
        self.canvas.config_changed.connect(self._on_config_changed)

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == Qt.Key.Key_Space:
            self.engine.toggle_playback()
        elif not self.engine.handle_key(event.text()):
            super().keyPressEvent(event)

    # ----- 파일 로드 -----
    def _open_video(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "비디오 선택", "", "Video (*.mp4 *.mov *.avi *.mkv *.webm);;All (*)")
        if path:
            self.load_video(path)

    def _open_pose(self):
        path, _ = QFileDialog.getOpenFileName(self, "포즈 JSON 선택", "", "JSON (*.json)")
        if path:
            self.load_pose(path)

    def _open_head_image(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "머리 이미지 선택", "", "Image (*.png *.jpg *.jpeg)")
        if path:
            self.load_head_image(path)

    def load_video(self, path: str):
        if self.video is not None:
            self.video.release()
            self.video.deleteLater()

        self.video = QtVideoSurface(self)
        self.video.frame_ready.connect(self.canvas.set_video_image)
        self.video.error_occurred.connect(
            lambda msg: self.status_bar.showMessage(f"⚠ 비디오 오류: {msg}"))
        self.video.load(path)
        self.video.set_speed(self.engine.clock.rate)
        self.canvas.set_video_image(None)
        self.engine.set_video(self.video)
        self.status_bar.showMessage(f"비디오 로드 중: {path}")

    def load_pose(self, path: str):
        try:
            index = load_pose_json(path)
        except PoseDataError as e:
            logger.error("%s", e)
            self.status_bar.showMessage(f"⚠ 포즈 데이터를 불러올 수 없습니다: {path}")
            return

        self.engine.set_index(index)
        message = f"✓ {index.frame_count}개 프레임 로드됨: {path}"
        if index.rejected:
            message += f" (잘못된 레코드 {index.rejected}개 제외)"
        self.status_bar.showMessage(message)

    def load_head_image(self, path: str):
        image = QImage(path)
        if image.isNull():
            logger.warning("Failed to load head image %s", path)
            self.status_bar.showMessage(f"⚠ 이미지를 불러올 수 없습니다: {path}")
            return
        self.canvas.set_head_image(image)

    # ----- 컨트롤 -----
    def _on_config_changed(self, key: str, value):
        self.engine.apply_change(key, value)

    def _on_clear_trails(self):
        self.engine.clear_trails()
        self.status_bar.showMessage("✓ 궤적 초기화됨")

    def _on_speed_entered(self, text: str):
        if self.engine.set_speed(text):
            self.status_bar.showMessage(f"✓ 재생 속도 {self.engine.clock.rate:g}x")
        else:
            self.playback_bar.set_speed_text(self.engine.clock.rate)
            self.status_bar.showMessage(f"⚠ 잘못된 속도 입력: {text!r}")

    # ----- 프레임 루프 -----
    def _on_timer_tick(self):
        now = time.perf_counter()
        delta = now - self._last_tick
        self._last_tick = now

        if self.engine.check_ready():
            self.status_bar.showMessage("✓ 재생 시작")

        annotations = self.engine.step(delta)
        self.canvas.set_state(annotations, self.engine.config, self.engine.trails)
        if annotations.ready:
            self.playback_bar.set_position(annotations.frame, annotations.time)

        clock = self.engine.clock
        if self._was_playing and not clock.playing and \
                clock.last_stop_reason in (StopReason.VIDEO_END, StopReason.POSE_END):
            self.status_bar.showMessage("■ 재생 종료")
        self._was_playing = clock.playing


def main(argv=None):
    parser = argparse.ArgumentParser(description="Overlay 2D pose data on a video")
    parser.add_argument("--video", help="video file")
    parser.add_argument("--pose", help="pose JSON file")
    parser.add_argument("--head", help="image drawn over the head joint")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args, qt_args = parser.parse_known_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication([sys.argv[0]] + qt_args)
    app.setStyle("Fusion")

    window = OverlayWindow()
    if args.pose:
        window.load_pose(args.pose)
    if args.video:
        window.load_video(args.video)
    if args.head:
        window.load_head_image(args.head)
    window.show()
    sys.exit(app.exec())


def run_app():
    """Entry point for the application."""
    main()


if __name__ == "__main__":
    main()
