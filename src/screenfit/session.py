"""
Measurement session: the point-gathering engine.

Single-threaded and synchronous. The UI drives it once per frame:
clicks go to add_point(), 'L' to commit_line(), and every frame calls
refit_lines() so each line's equation follows the current transform.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterator
from pathlib import Path

from .calibration import calibration_residuals, estimate_transform
from .errors import InsufficientPointsError
from .export import ExportRequest, line_export_path
from .points import BoundedBuffer, UniquePointSet
from .regression import MIN_FIT_POINTS, LineSegment
from .types import Point, Transform, transform_point

logger = logging.getLogger(__name__)

NUM_CALIBRATION_POINTS = 2


class GatheringMode(enum.Enum):
    """Which buffer receives newly clicked points."""

    NORMAL = "normal"  # regression points
    MEASUREMENT = "measurement"  # calibration points


class MeasurementSession:
    """
    Holds the point buffers, committed lines and the current transform.
    """

    def __init__(self):
        self.mode = GatheringMode.NORMAL
        self.points = UniquePointSet()
        self.calibration_points = BoundedBuffer(NUM_CALIBRATION_POINTS)
        self.lines: list[LineSegment] = []
        self.transform = Transform.identity()
        self._next_request_id = 0

    # ------------------------------------------------------------------
    # Point gathering
    # ------------------------------------------------------------------

    def add_point(self, point: Point) -> bool:
        """
        Route a clicked point to the buffer of the current mode.

        Returns:
            False if the point was a duplicate or the calibration buffer is full
        """
        if self.mode is GatheringMode.MEASUREMENT:
            return self.calibration_points.push_back(point)
        return self.points.insert(point)

    def visible_points(self) -> Iterator[Point]:
        """Points of the buffer that belongs to the current mode."""
        if self.mode is GatheringMode.MEASUREMENT:
            return iter(self.calibration_points)
        return iter(self.points)

    def visible_world_points(self) -> list[Point]:
        return [transform_point(p, self.transform) for p in self.visible_points()]

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    def commit_line(self) -> LineSegment | None:
        """
        Fit a line through the buffered points and clear the buffer.

        Does nothing (returns None) with fewer than two buffered points.
        """
        if len(self.points) < MIN_FIT_POINTS:
            return None

        line = LineSegment(self.points.frozen())
        line.refit(self.transform)
        self.lines.append(line)
        self.points.clear()
        logger.info("Committed line %d from %d points", len(self.lines) - 1, len(line))
        return line

    def remove_line(self, index: int) -> LineSegment:
        """Dismiss the line at `index`."""
        line = self.lines.pop(index)
        logger.info("Removed line %d", index)
        return line

    def refit_lines(self) -> None:
        """Re-fit every line against the current transform."""
        for line in self.lines:
            line.refit(self.transform)

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------

    def enter_calibration(self) -> None:
        """Switch to measurement mode with an empty calibration buffer."""
        self.calibration_points.clear()
        self.mode = GatheringMode.MEASUREMENT

    def calibrate(self, world1: Point, world2: Point) -> Transform:
        """
        Estimate a new transform from the two measured screen points.

        The new transform replaces the current one and the session returns
        to normal mode. On failure the transform and mode are unchanged.

        Raises:
            InsufficientPointsError: fewer than two calibration points measured
            DegenerateCalibrationError: the two screen points coincide
        """
        if len(self.calibration_points) < NUM_CALIBRATION_POINTS:
            raise InsufficientPointsError(
                NUM_CALIBRATION_POINTS, len(self.calibration_points)
            )

        pairs = [
            (self.calibration_points[0], world1),
            (self.calibration_points[1], world2),
        ]
        transform = estimate_transform(pairs[0], pairs[1])

        self.transform = transform
        self.mode = GatheringMode.NORMAL
        residuals = calibration_residuals(pairs, transform)
        logger.info(
            "Calibrated: scale=%.6g rotation=%.4f rad offset=(%.6g, %.6g), max residual %.3g",
            transform.scale,
            transform.rotation,
            transform.dx,
            transform.dy,
            max(residuals),
        )
        return transform

    def reset_transform(self) -> None:
        self.transform = Transform.identity()
        logger.info("Transform reset to identity")

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export_requests(self, output_dir: Path) -> list[ExportRequest]:
        """
        Snapshot every line as an export request.

        The snapshot carries the raw screen points and the line's transform.
        """
        requests = []
        for index, line in enumerate(self.lines):
            requests.append(
                ExportRequest(
                    request_id=self._next_request_id,
                    path=line_export_path(output_dir, index),
                    points=tuple(line.screen_points),
                    transform=line.transform,
                )
            )
            self._next_request_id += 1
        return requests
