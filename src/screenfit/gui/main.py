"""
Main window for the screenfit GUI.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QDockWidget,
    QStatusBar,
    QMessageBox,
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QPixmap

from ..config import load_app_config_or_default
from ..errors import CalibrationInputError
from ..logging_config import init_logging
from ..types import AppConfig
from .capture import capture_primary_screen, load_image
from .panels import CalibrationPanel, LinesPanel, PointsPanel
from .state import StateManager
from .widgets import ScreenCanvas

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Screenshot with measurement overlay and three dockable panels.

    Keys:
        L       fit a line through the buffered points
        S       export all lines
        Escape  quit
    Right-click adds a point.
    """

    def __init__(self, pixmap: QPixmap, config: AppConfig | None = None):
        super().__init__()
        self.config = config or AppConfig()

        self.setWindowTitle("screenfit")

        # State manager (thin coordinator over the engine)
        self.state_manager = StateManager(export_dir=self.config.export_dir, parent=self)

        self._init_ui(pixmap)
        self._connect_signals()

        # Frame tick: re-fit lines against the current transform
        self.frame_timer = QTimer(self)
        self.frame_timer.timeout.connect(self._on_frame)
        self.frame_timer.start(self.config.frame_interval_ms)

    def _init_ui(self, pixmap: QPixmap):
        self.canvas = ScreenCanvas(
            pixmap,
            point_radius=self.config.point_radius,
            line_thickness=self.config.line_thickness,
        )
        self.setCentralWidget(self.canvas)

        self.points_panel = PointsPanel()
        self.lines_panel = LinesPanel()
        self.calibration_panel = CalibrationPanel()

        self._add_dock("Buffered points", self.points_panel, Qt.DockWidgetArea.LeftDockWidgetArea)
        self._add_dock("Line equations", self.lines_panel, Qt.DockWidgetArea.RightDockWidgetArea)
        self._add_dock(
            "Transform calibration",
            self.calibration_panel,
            Qt.DockWidgetArea.BottomDockWidgetArea,
        )

        # Status bar
        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Right-click to add points, L to fit a line")

    def _add_dock(self, title: str, widget, area) -> QDockWidget:
        dock = QDockWidget(title, self)
        dock.setWidget(widget)
        dock.setFeatures(
            QDockWidget.DockWidgetFeature.DockWidgetMovable
            | QDockWidget.DockWidgetFeature.DockWidgetFloatable
        )
        self.addDockWidget(area, dock)
        return dock

    def _connect_signals(self):
        self.canvas.point_clicked.connect(self.state_manager.add_point)
        self.lines_panel.remove_requested.connect(self.state_manager.remove_line)
        self.calibration_panel.enter_calibration_requested.connect(
            self.state_manager.enter_calibration
        )
        self.calibration_panel.calibrate_requested.connect(self._on_calibrate)
        self.calibration_panel.reset_requested.connect(self.state_manager.reset_transform)

        self.state_manager.points_changed.connect(self._refresh_points)
        self.state_manager.transform_changed.connect(self._refresh_points)
        self.state_manager.lines_changed.connect(self._refresh_lines)
        self.state_manager.status_message.connect(self._show_status)
        self.state_manager.error_occurred.connect(self._show_error)

    def _on_frame(self):
        self.state_manager.tick()
        self.lines_panel.refresh_equations(self.state_manager.session.lines)

    def _on_calibrate(self, world_texts: list):
        try:
            self.state_manager.calibrate(world_texts)
        except CalibrationInputError as e:
            # Bad calibration input is fatal by design
            logger.critical("Aborting on invalid calibration input: %s", e)
            self.frame_timer.stop()
            self.state_manager.shutdown()
            QApplication.exit(1)

    def _refresh_points(self, *_):
        session = self.state_manager.session
        self.canvas.set_overlay(session.visible_points(), session.lines)
        self.points_panel.set_points(session.visible_world_points())
        self.calibration_panel.set_screen_points(list(session.calibration_points))

    def _refresh_lines(self):
        session = self.state_manager.session
        self.canvas.set_overlay(session.visible_points(), session.lines)
        self.lines_panel.set_lines(session.lines)

    def keyPressEvent(self, event):
        key = event.key()
        if key == Qt.Key.Key_L:
            self.state_manager.commit_line()
        elif key == Qt.Key.Key_S:
            self.state_manager.export_all()
        elif key == Qt.Key.Key_Escape:
            self.close()
        else:
            super().keyPressEvent(event)

    def _show_status(self, message: str):
        """Show message in status bar."""
        self.status_bar.showMessage(message, 5000)

    def _show_error(self, message: str):
        """Show error dialog."""
        QMessageBox.warning(self, "Error", message)

    def closeEvent(self, event):
        """Handle window close."""
        self.frame_timer.stop()
        # Let queued exports finish
        self.state_manager.shutdown()
        event.accept()


def main(config_path: Path | None = None, image_path: Path | None = None) -> int:
    """Entry point for the GUI application."""
    config = load_app_config_or_default(config_path)
    init_logging(config.log_level)

    app = QApplication(sys.argv)

    # Set application metadata
    app.setApplicationName("screenfit")
    app.setOrganizationName("screenfit")

    # Capture before our own window covers the screen
    pixmap = load_image(image_path) if image_path else capture_primary_screen()
    logger.info("Image size: %dx%d", pixmap.width(), pixmap.height())

    window = MainWindow(pixmap, config)
    if config.fullscreen:
        window.showFullScreen()
    else:
        window.show()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
