"""
OverlayCanvas - draws the video frame and everything the engine computes.
"""

import math
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, Signal, QPointF, QRectF
from PySide6.QtGui import QPainter, QColor, QPen, QBrush, QFont, QFontMetricsF, QImage, QPolygonF

from .config import OverlayConfig
from .constants import HEAD_JOINT, HEAD_SIZE, POSE_HEIGHT, POSE_WIDTH, SKELETON_EDGES
from .engine import FrameAnnotations
from .trails import TrailStore, trail_color, trail_segments


class OverlayCanvas(QWidget):
    """비디오 위에 포즈/궤적/지면/접촉을 그리는 캔버스 위젯"""

    # 드래그로 오버레이 이동: ("view.offset", (x, y))
    config_changed = Signal(str, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.annotations: Optional[FrameAnnotations] = None
        self.config = OverlayConfig()
        self.trails: Optional[TrailStore] = None
        self.video_image: Optional[QImage] = None
        self.head_image: Optional[QImage] = None

        self.is_dragging = False
        self.drag_start = QPointF(0, 0)

        self.setMinimumSize(960, 720)
        self.setStyleSheet("background-color: #000000;")

    def set_state(self, annotations: FrameAnnotations, config: OverlayConfig, trails: TrailStore):
        self.annotations = annotations
        self.config = config
        self.trails = trails
        self.update()

    def set_video_image(self, image: Optional[QImage]):
        self.video_image = image
        self.update()

    def set_head_image(self, image: Optional[QImage]):
        self.head_image = image if image is not None and not image.isNull() else None
        self.update()

    def _video_size(self):
        target_h = float(self.height())
        return target_h * POSE_WIDTH / POSE_HEIGHT, target_h

    # ----- 마우스 (오버레이 이동) -----
    def mousePressEvent(self, event):
        view = self.config.view
        if event.button() == Qt.MouseButton.LeftButton and \
                (view.show_pose or self.config.trails.visible or view.show_ground):
            self.is_dragging = True
            ox, oy = view.offset
            pos = event.position()
            self.drag_start = QPointF(pos.x() - ox, pos.y() - oy)

    def mouseMoveEvent(self, event):
        if self.is_dragging:
            pos = event.position()
            self.config_changed.emit("view.offset",
                                     (pos.x() - self.drag_start.x(), pos.y() - self.drag_start.y()))

    def mouseReleaseEvent(self, event):
        self.is_dragging = False

    # ----- 렌더링 -----
    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.fillRect(self.rect(), QColor("#000000"))

            if self.annotations is None or not self.annotations.ready:
                self._draw_loading(painter)
                return

            video_w, video_h = self._video_size()
            if self.video_image is not None:
                painter.drawImage(QRectF(0, 0, video_w, video_h), self.video_image)

            view = self.config.view
            painter.save()
            painter.translate(*view.offset)
            painter.scale(view.scale_factor, view.scale_factor)
            if view.show_ground:
                self._draw_ground(painter, video_w, video_h)
            if self.config.trails.visible and self.trails is not None:
                self._draw_trails(painter, video_w, video_h)
            if view.show_pose:
                self._draw_pose(painter, video_w, video_h)
            painter.restore()

            if view.show_normals:
                self._draw_contacts(painter, video_w, video_h)
        finally:
            painter.end()

    def _draw_loading(self, painter: QPainter):
        painter.setPen(QColor("#ffffff"))
        painter.setFont(QFont("Segoe UI", 36))
        painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, "Loading...")

    def _draw_ground(self, painter: QPainter, video_w: float, video_h: float):
        sf = self.config.view.scale_factor
        gy = self.config.ground.y * video_h / POSE_HEIGHT

        painter.setPen(QPen(QColor(0, 255, 255, 140), max(2.0, 2.5 / sf)))
        painter.drawLine(QPointF(0, gy), QPointF(video_w, gy))

        font = QFont("Segoe UI")
        font.setPointSizeF(max(10.0, 14.0 / sf))
        painter.setFont(font)
        painter.setPen(QColor(200, 255, 255, 140))
        painter.drawText(QPointF(10, gy - 6), "Ground")

    def _draw_trails(self, painter: QPainter, video_w: float, video_h: float):
        trail_cfg = self.config.trails
        scale_x = video_w / POSE_WIDTH
        scale_y = video_h / POSE_HEIGHT
        width = max(1.5, trail_cfg.weight / self.config.view.scale_factor)

        painter.setBrush(Qt.BrushStyle.NoBrush)
        for (slot, _joint), points in self.trails.items():
            r, g, b = trail_color(slot)
            for segment in trail_segments(points, trail_cfg.alpha):
                pen = QPen(QColor(r, g, b, int(segment.alpha)), width)
                pen.setCapStyle(Qt.PenCapStyle.RoundCap)
                painter.setPen(pen)
                painter.drawPolyline(QPolygonF(
                    [QPointF(x * scale_x, y * scale_y) for x, y in segment.points]))

    def _draw_pose(self, painter: QPainter, video_w: float, video_h: float):
        view = self.config.view
        sf = view.scale_factor
        scale_x = video_w / POSE_WIDTH
        scale_y = video_h / POSE_HEIGHT
        point_size = view.point_size
        label_alpha = max(90, view.alpha - 30)

        font = QFont("Segoe UI")
        font.setPointSizeF(max(10.0, 14.0 / sf))
        fm = QFontMetricsF(font)

        for person in self.annotations.persons:
            # 스켈레톤
            painter.setPen(QPen(QColor(255, 255, 0, view.alpha), max(3.0, 4.0 / sf)))
            for i, j in SKELETON_EDGES:
                a, b = person.get(i), person.get(j)
                if a is None or b is None:
                    continue
                painter.drawLine(QPointF(a.x * scale_x, a.y * scale_y),
                                 QPointF(b.x * scale_x, b.y * scale_y))

            # 키포인트 + 인덱스 라벨
            for idx, kp in person.present():
                x, y = kp.x * scale_x, kp.y * scale_y
                painter.setPen(Qt.PenStyle.NoPen)
                painter.setBrush(QBrush(QColor(255, 0, 0, view.alpha)))
                painter.drawEllipse(QPointF(x, y), point_size / 2, point_size / 2)

                label = str(idx)
                painter.setFont(font)
                painter.setPen(QColor(255, 255, 255, label_alpha))
                painter.drawText(QPointF(x - fm.horizontalAdvance(label) / 2,
                                         y - point_size + fm.ascent() / 2), label)

                if idx == HEAD_JOINT and self.head_image is not None:
                    size = HEAD_SIZE * sf
                    painter.save()
                    painter.setOpacity(view.alpha / 255.0)
                    painter.drawImage(QRectF(x - size / 2, y - size, size, size), self.head_image)
                    painter.restore()

    def _draw_contacts(self, painter: QPainter, video_w: float, video_h: float):
        view = self.config.view
        sf = view.scale_factor
        ox, oy = view.offset
        scale_x = video_w / POSE_WIDTH
        scale_y = video_h / POSE_HEIGHT

        def to_screen(vx: float, vy: float) -> QPointF:
            return QPointF(vx * scale_x * sf + ox, vy * scale_y * sf + oy)

        radius = max(10.0, view.point_size * 1.2) / 2
        for contact in self.annotations.contacts:
            p = contact.point
            scr = to_screen(p.x, p.y)
            color = QColor(0, 255, 0, 220) if contact.in_contact else QColor(255, 120, 0, 200)
            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(QBrush(color))
            painter.drawEllipse(scr, radius, radius)

            if contact.in_contact:
                # 화면 기준 reaction_length 픽셀 위쪽
                tip = to_screen(p.x, p.y - (contact.reaction_length / scale_y) / sf)
                self._draw_arrow(painter, scr, tip, "N")

    def _draw_arrow(self, painter: QPainter, start: QPointF, end: QPointF, label: str = ""):
        painter.setPen(QPen(QColor(80, 255, 80, 230), 3))
        painter.drawLine(start, end)

        ang = math.atan2(end.y() - start.y(), end.x() - start.x())
        head = 12.0
        for side in (-0.6, 0.6):
            # 화살촉 (-head, ±0.6*head)을 ang만큼 회전
            dx, dy = -head, side * head
            painter.drawLine(end, QPointF(end.x() + dx * math.cos(ang) - dy * math.sin(ang),
                                          end.y() + dx * math.sin(ang) + dy * math.cos(ang)))

        if label:
            font = QFont("Segoe UI")
            font.setPixelSize(16)
            painter.setFont(font)
            painter.setPen(QColor(220, 220, 220))
            painter.drawText(QPointF(end.x() + 6, end.y() - 6), label)
