"""
Application state management.

StateManager is a thin QObject that:
- Owns the MeasurementSession (the engine)
- Spawns the export worker and polls its replies
- Emits signals on state changes
- Does NOT contain geometry - that lives in the engine modules
"""

from __future__ import annotations

import logging
import queue
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from ..errors import DegenerateCalibrationError, InsufficientPointsError
from ..export import ExportReply, drain_replies
from ..points import parse_world_point
from ..session import GatheringMode, MeasurementSession
from ..types import Point, Transform
from .workers import ExportWorker

logger = logging.getLogger(__name__)


class StateManager(QObject):
    """
    Thin coordinator between UI and the measurement session.
    """

    # State change signals
    points_changed = Signal()
    lines_changed = Signal()
    transform_changed = Signal(object)  # Transform
    mode_changed = Signal(object)  # GatheringMode

    # Status signals
    status_message = Signal(str)
    error_occurred = Signal(str)
    export_reply = Signal(object)  # ExportReply

    def __init__(
        self,
        export_dir: Path | str = "lines",
        start_export_worker: bool = True,
        parent: QObject | None = None,
    ):
        super().__init__(parent)
        self._session = MeasurementSession()
        self.export_dir = Path(export_dir)

        self.export_requests: queue.Queue = queue.Queue()
        self.export_replies: queue.Queue = queue.Queue()
        self.export_worker: ExportWorker | None = None
        self._start_export_worker = start_export_worker

    @property
    def session(self) -> MeasurementSession:
        return self._session

    @property
    def mode(self) -> GatheringMode:
        return self._session.mode

    @property
    def transform(self) -> Transform:
        return self._session.transform

    # ------------------------------------------------------------------
    # Points and lines
    # ------------------------------------------------------------------

    def add_point(self, point: Point) -> None:
        """Add a clicked point to the current buffer."""
        if self._session.add_point(point):
            self.points_changed.emit()
        elif self._session.mode is GatheringMode.MEASUREMENT:
            self.set_status("Calibration already has two points")

    def commit_line(self) -> None:
        """Turn the buffered points into a line."""
        line = self._session.commit_line()
        if line is None:
            self.set_status("Need at least two points for a line")
            return
        self.points_changed.emit()
        self.lines_changed.emit()

    def remove_line(self, index: int) -> None:
        self._session.remove_line(index)
        self.lines_changed.emit()

    def tick(self) -> None:
        """
        Per-frame update: re-fit lines and pick up finished exports.
        """
        self._session.refit_lines()
        self.poll_exports()

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------

    def enter_calibration(self) -> None:
        self._session.enter_calibration()
        self.mode_changed.emit(self._session.mode)
        self.points_changed.emit()
        self.set_status("Calibration mode: right-click two reference points")

    def calibrate(self, world_texts: list[tuple[str, str]]) -> bool:
        """
        Calibrate from the typed real-world coordinates.

        Non-numeric text raises CalibrationInputError, which is not handled
        here. Geometric failures are reported and leave the transform as is.

        Returns:
            True if a new transform was installed
        """
        world = [parse_world_point(x_text, y_text) for x_text, y_text in world_texts]
        if len(world) < 2:
            self.report_error("Enter real-world coordinates for both points")
            return False

        try:
            transform = self._session.calibrate(world[0], world[1])
        except (InsufficientPointsError, DegenerateCalibrationError) as e:
            logger.warning("Calibration failed: %s", e)
            self.report_error(str(e))
            return False

        self.transform_changed.emit(transform)
        self.mode_changed.emit(self._session.mode)
        self.points_changed.emit()
        self.set_status(
            f"Calibrated: scale {transform.scale:.4g}, rotation {transform.rotation:.4f} rad"
        )
        return True

    def reset_transform(self) -> None:
        self._session.reset_transform()
        self.transform_changed.emit(self._session.transform)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_all(self) -> int:
        """
        Queue every line for export.

        Returns:
            Number of requests submitted
        """
        requests = self._session.export_requests(self.export_dir)
        if not requests:
            self.set_status("No lines to export")
            return 0

        if self._start_export_worker:
            self._ensure_export_worker()
        for request in requests:
            self.export_requests.put(request)
        logger.info("Submitted %d export requests to %s", len(requests), self.export_dir)
        self.set_status(f"Exporting {len(requests)} lines to {self.export_dir}")
        return len(requests)

    def poll_exports(self) -> list[ExportReply]:
        """Handle any export replies that have arrived."""
        replies = drain_replies(self.export_replies)
        for reply in replies:
            self.export_reply.emit(reply)
            if reply.ok:
                self.set_status(f"Saved {reply.path}")
            else:
                self.report_error(f"Could not save {reply.path}: {reply.error}")
        return replies

    def _ensure_export_worker(self) -> None:
        if self.export_worker is not None:
            return
        self.export_worker = ExportWorker(self.export_requests, self.export_replies)
        self.export_worker.start()

    def shutdown(self) -> None:
        """Stop the export worker after it drains pending requests."""
        if self.export_worker is None:
            return
        self.export_worker.stop()
        self.export_worker.wait()
        self.export_worker = None

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def set_status(self, message: str) -> None:
        """Set status bar message."""
        self.status_message.emit(message)

    def report_error(self, message: str) -> None:
        """Report an error."""
        self.error_occurred.emit(message)
        self.set_status(f"Error: {message}")
