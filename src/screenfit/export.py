"""
Line export.

The engine builds immutable ExportRequest snapshots; a worker thread turns
each one into a CSV file and answers with an ExportReply. Only these frozen
payloads cross the thread boundary.
"""

from __future__ import annotations

import csv
import logging
import queue
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from .types import Point, Transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExportRequest:
    """
    One line's raw points, to be written to `path`.
    The transform is carried along for the record.
    """

    request_id: int
    path: Path
    points: tuple[Point, ...]
    transform: Transform


@dataclass(frozen=True, slots=True)
class ExportReply:
    """Outcome of an ExportRequest. error is None on success."""

    request_id: int
    path: Path
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def line_export_path(output_dir: Path, index: int) -> Path:
    """File name for the line at `index`."""
    return Path(output_dir) / f"line_{index}.csv"


def write_line_points(path: Path, points: Iterable[Point]) -> int:
    """
    Write one "x,y" row per point.

    Returns:
        Number of rows written
    """
    count = 0
    with open(path, "w", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        for point in points:
            writer.writerow([point.x, point.y])
            count += 1
    return count


def process_export_request(
    request: ExportRequest,
    created_dirs: set[Path] | None = None,
) -> ExportReply:
    """
    Write a single export request to disk.

    The parent directory is created on demand, once per directory when
    `created_dirs` is supplied. I/O failures become error replies.

    Args:
        request: The request to fulfil
        created_dirs: Directories already created by this worker

    Returns:
        ExportReply for the request
    """
    parent = request.path.parent
    try:
        if created_dirs is None or parent not in created_dirs:
            parent.mkdir(parents=True, exist_ok=True)
            if created_dirs is not None:
                created_dirs.add(parent)
        rows = write_line_points(request.path, request.points)
    except OSError as e:
        logger.error("Export %d to %s failed: %s", request.request_id, request.path, e)
        return ExportReply(request.request_id, request.path, str(e))

    logger.info("Exported %d points to %s", rows, request.path)
    return ExportReply(request.request_id, request.path)


def drain_replies(replies: queue.Queue) -> list[ExportReply]:
    """
    Collect every reply currently waiting, without blocking.
    """
    drained = []
    while True:
        try:
            drained.append(replies.get_nowait())
        except queue.Empty:
            return drained
