"""
screenfit GUI.

Full-screen screenshot with measurement overlay:
- Canvas: right-click points, fitted lines
- Panels: buffered points, line equations, transform calibration
"""

from .main import MainWindow

__all__ = ["MainWindow"]
