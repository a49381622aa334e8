from .canvas import ScreenCanvas

__all__ = ["ScreenCanvas"]
