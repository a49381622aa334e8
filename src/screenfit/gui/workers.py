"""
QThread workers for async operations.

Workers call pure functions and report results via queues and signals.
Workers do NOT touch the session - only frozen request/reply snapshots
cross the thread boundary.
"""

from __future__ import annotations

import queue
from pathlib import Path

from PySide6.QtCore import QThread, Signal

from ..export import ExportReply, ExportRequest, process_export_request


class ExportWorker(QThread):
    """
    Write line exports to disk, in submission order.

    Requests arrive on `requests`; each one is attempted exactly once and its
    ExportReply is put on `replies` and emitted. A None request stops the worker.
    """

    log_message = Signal(str)
    export_finished = Signal(object)  # ExportReply

    def __init__(
        self,
        requests: queue.Queue | None = None,
        replies: queue.Queue | None = None,
    ):
        super().__init__()
        self.requests: queue.Queue = requests if requests is not None else queue.Queue()
        self.replies: queue.Queue = replies if replies is not None else queue.Queue()
        self._created_dirs: set[Path] = set()

    def submit(self, request: ExportRequest) -> None:
        self.requests.put(request)

    def run(self):
        while True:
            request = self.requests.get()
            if request is None:
                break

            reply: ExportReply = process_export_request(request, self._created_dirs)
            self.replies.put(reply)
            if reply.ok:
                self.log_message.emit(f"Saved {reply.path}")
            else:
                self.log_message.emit(f"Failed to save {reply.path}: {reply.error}")
            self.export_finished.emit(reply)

    def stop(self):
        self.requests.put(None)
