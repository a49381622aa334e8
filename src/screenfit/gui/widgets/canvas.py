"""
Screenshot canvas with point and line overlay.
"""

from __future__ import annotations

from collections.abc import Iterable

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QPixmap

from ...regression import LineSegment
from ...types import Point, color_to_qcolor

POINT_COLOR = QColor(255, 0, 0)


class ScreenCanvas(QWidget):
    """
    Shows the captured image 1:1 and draws buffered points and fitted lines.

    A secondary-button click emits the clicked image coordinate.
    """

    point_clicked = Signal(object)  # Point

    def __init__(
        self,
        pixmap: QPixmap,
        point_radius: float = 2.5,
        line_thickness: float = 3.0,
        parent: QWidget | None = None,
    ):
        super().__init__(parent)
        self.pixmap = pixmap
        self.point_radius = point_radius
        self.line_thickness = line_thickness

        self._points: list[Point] = []
        self._lines: list[LineSegment] = []

        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        if not pixmap.isNull():
            self.setMinimumSize(pixmap.deviceIndependentSize().toSize())

    def set_overlay(self, points: Iterable[Point], lines: Iterable[LineSegment]) -> None:
        """Replace what is drawn on top of the image."""
        self._points = list(points)
        self._lines = list(lines)
        self.update()

    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.RightButton:
            pos = event.position()
            self.point_clicked.emit(Point(pos.x(), pos.y()))
            event.accept()
            return
        super().mousePressEvent(event)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        if not self.pixmap.isNull():
            painter.drawPixmap(0, 0, self.pixmap)

        # Lines, in raw screen space
        for line in self._lines:
            start, end = line.screen_endpoints()
            pen = QPen(color_to_qcolor(line.color), self.line_thickness)
            painter.setPen(pen)
            painter.drawLine(QPointF(start.x, start.y), QPointF(end.x, end.y))

        # Buffered points
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(POINT_COLOR))
        for point in self._points:
            painter.drawEllipse(
                QPointF(point.x, point.y), self.point_radius, self.point_radius
            )

        painter.end()
