"""
Image source: screen capture and image files as QPixmap.
"""

from __future__ import annotations

from pathlib import Path

from PySide6.QtGui import QGuiApplication, QPixmap


def capture_primary_screen() -> QPixmap:
    """
    Grab the whole primary screen.

    Requires a running QGuiApplication.

    Returns:
        QPixmap of the screen, in screen pixel coordinates
    """
    screen = QGuiApplication.primaryScreen()
    if screen is None:
        raise RuntimeError("No primary screen available")
    return screen.grabWindow(0)


def load_image(path: Path) -> QPixmap:
    """
    Load an image file to measure on instead of a screen capture.
    """
    pixmap = QPixmap(str(path))
    if pixmap.isNull():
        raise FileNotFoundError(f"Cannot load image: {path}")
    return pixmap
