"""
Side panels: buffered points, line equations, transform calibration.
"""

from __future__ import annotations

from collections.abc import Sequence

from PySide6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QHBoxLayout,
    QGridLayout,
    QPushButton,
    QLabel,
    QLineEdit,
    QListWidget,
    QTableWidget,
    QTableWidgetItem,
    QHeaderView,
)
from PySide6.QtCore import Signal
from PySide6.QtGui import QBrush

from ..errors import DegenerateFitError
from ..regression import LineSegment
from ..session import NUM_CALIBRATION_POINTS
from ..types import Point, color_to_qcolor

DEGENERATE_LABEL = "vertical line (slope undefined)"


def line_label(line: LineSegment) -> str:
    """Equation text for a line, in calibrated coordinates."""
    try:
        return line.equation
    except DegenerateFitError:
        return DEGENERATE_LABEL


class PointsPanel(QWidget):
    """Buffered points, shown in real-world coordinates."""

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Buffered points:"))
        self.list_widget = QListWidget()
        layout.addWidget(self.list_widget)

    def set_points(self, points: Sequence[Point]) -> None:
        self.list_widget.clear()
        for p in points:
            self.list_widget.addItem(f"({p.x:g}, {p.y:g})")


class LinesPanel(QWidget):
    """Committed lines with color swatch, equation and remove button."""

    remove_requested = Signal(int)  # line index

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Line equations:"))

        self.table = QTableWidget(0, 3)
        self.table.setHorizontalHeaderLabels(["", "Color", "Equation"])
        self.table.horizontalHeader().setSectionResizeMode(
            2, QHeaderView.ResizeMode.Stretch
        )
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        layout.addWidget(self.table)

    def set_lines(self, lines: Sequence[LineSegment]) -> None:
        """Rebuild the table after lines were added or removed."""
        self.table.setRowCount(len(lines))
        for row, line in enumerate(lines):
            button = QPushButton("❌")
            button.clicked.connect(lambda _=False, r=row: self.remove_requested.emit(r))
            self.table.setCellWidget(row, 0, button)

            swatch = QTableWidgetItem()
            swatch.setBackground(QBrush(color_to_qcolor(line.color)))
            self.table.setItem(row, 1, swatch)

            self.table.setItem(row, 2, QTableWidgetItem(line_label(line)))

    def refresh_equations(self, lines: Sequence[LineSegment]) -> None:
        """Update equation text in place (called every frame)."""
        if self.table.rowCount() != len(lines):
            self.set_lines(lines)
            return
        for row, line in enumerate(lines):
            item = self.table.item(row, 2)
            text = line_label(line)
            if item is not None and item.text() != text:
                item.setText(text)


class CalibrationPanel(QWidget):
    """
    Two-point calibration: measured screen points and typed world coordinates.
    """

    enter_calibration_requested = Signal()
    calibrate_requested = Signal(list)  # list[tuple[str, str]]
    reset_requested = Signal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        layout.addWidget(
            QLabel("Measure two points on the screen to calibrate the transform")
        )

        buttons = QHBoxLayout()
        self.mode_button = QPushButton("Go to calibration mode")
        self.mode_button.clicked.connect(self.enter_calibration_requested.emit)
        buttons.addWidget(self.mode_button)

        self.calibrate_button = QPushButton("Calibrate")
        self.calibrate_button.clicked.connect(self._on_calibrate)
        buttons.addWidget(self.calibrate_button)

        self.reset_button = QPushButton("Reset")
        self.reset_button.clicked.connect(self.reset_requested.emit)
        buttons.addWidget(self.reset_button)
        layout.addLayout(buttons)

        grid = QGridLayout()
        self.screen_labels: list[tuple[QLabel, QLabel]] = []
        self.world_edits: list[tuple[QLineEdit, QLineEdit]] = []
        for i in range(NUM_CALIBRATION_POINTS):
            x_label, y_label = QLabel("x: -"), QLabel("y: -")
            x_edit, y_edit = QLineEdit("0"), QLineEdit("0")
            x_edit.setPlaceholderText("world x")
            y_edit.setPlaceholderText("world y")
            grid.addWidget(x_label, i, 0)
            grid.addWidget(y_label, i, 1)
            grid.addWidget(x_edit, i, 2)
            grid.addWidget(y_edit, i, 3)
            self.screen_labels.append((x_label, y_label))
            self.world_edits.append((x_edit, y_edit))
        layout.addLayout(grid)
        layout.addStretch()

    def set_screen_points(self, points: Sequence[Point]) -> None:
        for i, (x_label, y_label) in enumerate(self.screen_labels):
            if i < len(points):
                x_label.setText(f"x: {points[i].x:g}")
                y_label.setText(f"y: {points[i].y:g}")
            else:
                x_label.setText("x: -")
                y_label.setText("y: -")

    def world_texts(self) -> list[tuple[str, str]]:
        return [(x.text(), y.text()) for x, y in self.world_edits]

    def _on_calibrate(self):
        self.calibrate_requested.emit(self.world_texts())
