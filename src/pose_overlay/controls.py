"""
Control widgets for pose overlay - PlaybackBar and ControlPanel.

Widgets never touch the engine; they emit config changes and actions
that the main window forwards.
"""

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout,
    QSlider, QLabel, QPushButton, QLineEdit,
    QGroupBox, QCheckBox, QScrollArea
)
from PySide6.QtCore import Qt, Signal

from .config import OverlayConfig
from .constants import CONTROL_RANGES


def _slider_factor(key: str) -> int:
    """소수 step 슬라이더용 정수 배율 (0.5 -> 2, 0.1 -> 10)"""
    step = CONTROL_RANGES[key][2]
    return int(round(1 / step)) if step < 1 else 1


class PlaybackBar(QWidget):
    """하단 재생 컨트롤 바"""

    play_requested = Signal()
    pause_requested = Signal()
    stop_requested = Signal()
    scale_requested = Signal()
    speed_entered = Signal(str)
    config_changed = Signal(str, object)

    def __init__(self, config: OverlayConfig = None, parent=None):
        super().__init__(parent)
        self._config = config or OverlayConfig()
        self._setup_ui()

    def _setup_ui(self):
        self.setFixedHeight(60)
        self.setObjectName("playbackBar")
        self.setStyleSheet("""
            #playbackBar {
                background-color: #16213e;
                border-top: 1px solid #3d3d5c;
            }
            QLabel {
                color: #a0a0a0;
                background-color: transparent;
                border: none;
            }
        """)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(15, 8, 15, 8)
        layout.setSpacing(10)

        buttons = [
            ("Play", self.play_requested),
            ("Pause", self.pause_requested),
            ("Stop", self.stop_requested),
            ("Scale", self.scale_requested),
        ]
        for text, signal in buttons:
            btn = QPushButton(text)
            btn.setStyleSheet(_button_style())
            btn.clicked.connect(signal.emit)
            layout.addWidget(btn)

        layout.addWidget(QLabel("Speed:"))
        self.speed_edit = QLineEdit("1.0")
        self.speed_edit.setFixedWidth(60)
        self.speed_edit.setStyleSheet("""
            QLineEdit {
                background-color: #2d2d44;
                color: #e0e0e0;
                border: 1px solid #3d3d5c;
                border-radius: 4px;
                padding: 4px 8px;
            }
        """)
        self.speed_edit.editingFinished.connect(
            lambda: self.speed_entered.emit(self.speed_edit.text()))
        layout.addWidget(self.speed_edit)

        layout.addWidget(QLabel("Alpha:"))
        low, high, _ = CONTROL_RANGES["view.alpha"]
        self.alpha_slider = QSlider(Qt.Orientation.Horizontal)
        self.alpha_slider.setRange(int(low), int(high))
        self.alpha_slider.setValue(self._config.view.alpha)
        self.alpha_slider.setFixedWidth(120)
        self.alpha_slider.setStyleSheet(_slider_style())
        self.alpha_slider.valueChanged.connect(lambda v: self.config_changed.emit("view.alpha", v))
        layout.addWidget(self.alpha_slider)

        layout.addStretch()

        self.position_label = QLabel("frame 0 | 0.00s")
        self.position_label.setStyleSheet("color: #e0e0e0; font-size: 13px; min-width: 140px;")
        layout.addWidget(self.position_label)

    def set_speed_text(self, rate: float):
        self.speed_edit.setText(f"{rate:g}")

    def set_position(self, frame: int, seconds: float):
        self.position_label.setText(f"frame {frame} | {seconds:.2f}s")


class ControlPanel(QWidget):
    """궤적 / 지면 / 접촉 컨트롤 패널"""

    config_changed = Signal(str, object)
    clear_trails_requested = Signal()

    def __init__(self, config: OverlayConfig = None, parent=None):
        super().__init__(parent)
        self._config = config or OverlayConfig()
        self.value_labels = {}
        self._setup_ui()

    def _setup_ui(self):
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)

        scroll_area = QScrollArea()
        scroll_area.setWidgetResizable(True)
        scroll_area.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        scroll_area.setStyleSheet("""
            QScrollArea {
                border: none;
                background-color: transparent;
            }
        """)

        scroll_content = QWidget()
        layout = QVBoxLayout(scroll_content)
        layout.setSpacing(12)
        layout.setContentsMargins(5, 5, 5, 5)

        cfg = self._config

        # === 궤적 ===
        trail_group = QGroupBox("궤적")
        trail_group.setStyleSheet(_group_style())
        trail_layout = QVBoxLayout(trail_group)

        trail_layout.addWidget(self._make_checkbox("궤적 표시", "trails.visible", cfg.trails.visible))

        clear_btn = QPushButton("Clear Trails")
        clear_btn.setStyleSheet(_button_style())
        clear_btn.clicked.connect(self.clear_trails_requested.emit)
        trail_layout.addWidget(clear_btn)

        trail_layout.addLayout(self._make_slider("Len:", "trails.max_len", cfg.trails.max_len))
        trail_layout.addLayout(self._make_slider("Thick:", "trails.weight", cfg.trails.weight))
        layout.addWidget(trail_group)

        # === 지면 ===
        ground_group = QGroupBox("지면")
        ground_group.setStyleSheet(_group_style())
        ground_layout = QVBoxLayout(ground_group)

        ground_layout.addWidget(self._make_checkbox("지면 표시", "view.show_ground", cfg.view.show_ground))
        ground_layout.addLayout(self._make_slider("Ground Y:", "ground.y", cfg.ground.y))
        layout.addWidget(ground_group)

        # === 접촉 / 반력 ===
        contact_group = QGroupBox("접촉 / 반력")
        contact_group.setStyleSheet(_group_style())
        contact_layout = QVBoxLayout(contact_group)

        contact_layout.addWidget(self._make_checkbox("반력 표시", "view.show_normals", cfg.view.show_normals))
        contact_layout.addLayout(self._make_slider("TolY:", "ground.contact_tol", cfg.ground.contact_tol))
        contact_layout.addLayout(self._make_slider("|Vy| ≤", "ground.vel_thresh", cfg.ground.vel_thresh))
        contact_layout.addLayout(self._make_slider("N scale:", "ground.react_scale", cfg.ground.react_scale))
        layout.addWidget(contact_group)

        # === 단축키 안내 ===
        help_group = QGroupBox("단축키")
        help_group.setStyleSheet(_group_style())
        help_layout = QVBoxLayout(help_group)

        shortcuts = [
            ("P / Space", "재생/일시정지"),
            ("T", "포즈 오버레이 표시"),
            ("Drag", "오버레이 이동"),
        ]
        for key, desc in shortcuts:
            row = QHBoxLayout()
            key_label = QLabel(key)
            key_label.setStyleSheet("""
                color: #4ECDC4;
                background-color: #2d2d44;
                padding: 3px 8px;
                border-radius: 4px;
                font-family: 'Consolas', monospace;
            """)
            desc_label = QLabel(desc)
            desc_label.setStyleSheet("color: #a0a0a0;")
            row.addWidget(key_label)
            row.addWidget(desc_label)
            row.addStretch()
            help_layout.addLayout(row)

        layout.addWidget(help_group)
        layout.addStretch()

        scroll_area.setWidget(scroll_content)
        main_layout.addWidget(scroll_area)

    def _make_checkbox(self, text: str, key: str, checked: bool) -> QCheckBox:
        cb = QCheckBox(text)
        cb.setChecked(checked)
        cb.setStyleSheet(_checkbox_style())
        cb.stateChanged.connect(
            lambda s: self.config_changed.emit(key, s == Qt.CheckState.Checked.value))
        return cb

    def _make_slider(self, text: str, key: str, value: float) -> QHBoxLayout:
        low, high, step = CONTROL_RANGES[key]
        factor = _slider_factor(key)

        row = QHBoxLayout()
        label = QLabel(text)
        label.setStyleSheet("color: #e0e0e0;")

        slider = QSlider(Qt.Orientation.Horizontal)
        slider.setRange(int(round(low * factor)), int(round(high * factor)))
        slider.setValue(int(round(value * factor)))
        slider.setStyleSheet(_slider_style())

        value_label = QLabel(_format_value(value, step))
        value_label.setStyleSheet("color: #4ECDC4; font-weight: bold; min-width: 40px;")
        self.value_labels[key] = value_label

        def on_changed(raw: int):
            real = raw / factor
            value_label.setText(_format_value(real, step))
            self.config_changed.emit(key, real)

        slider.valueChanged.connect(on_changed)

        row.addWidget(label)
        row.addWidget(slider)
        row.addWidget(value_label)
        return row


def _format_value(value: float, step: float) -> str:
    return f"{value:.1f}" if step < 1 else f"{int(round(value))}"


def _group_style():
    return """
        QGroupBox {
            color: #e0e0e0;
            font-size: 13px;
            font-weight: bold;
            border: 1px solid #3d3d5c;
            border-radius: 8px;
            margin-top: 10px;
            padding-top: 10px;
        }
        QGroupBox::title {
            subcontrol-origin: margin;
            left: 10px;
            padding: 0 5px;
        }
    """


def _slider_style():
    return """
        QSlider::groove:horizontal {
            border: 1px solid #3d3d5c;
            height: 6px;
            background: #2d2d44;
            border-radius: 3px;
        }
        QSlider::handle:horizontal {
            background: #4ECDC4;
            border: none;
            width: 16px;
            height: 16px;
            margin: -5px 0;
            border-radius: 8px;
        }
        QSlider::sub-page:horizontal {
            background: #4ECDC4;
            border-radius: 3px;
        }
    """


def _button_style():
    return """
        QPushButton {
            background-color: #4ECDC4;
            color: #1a1a2e;
            border: none;
            padding: 8px 16px;
            font-size: 12px;
            font-weight: bold;
            border-radius: 6px;
        }
        QPushButton:hover {
            background-color: #5FE6DD;
        }
        QPushButton:pressed {
            background-color: #3DBDB5;
        }
    """


def _checkbox_style():
    return """
        QCheckBox {
            color: #e0e0e0;
            spacing: 8px;
        }
        QCheckBox::indicator {
            width: 18px;
            height: 18px;
            border-radius: 4px;
            border: 2px solid #3d3d5c;
            background-color: #2d2d44;
        }
        QCheckBox::indicator:checked {
            background-color: #4ECDC4;
            border-color: #4ECDC4;
        }
    """
