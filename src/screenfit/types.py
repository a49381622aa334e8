"""
Value types shared by the engine and the GUI.

Points, colors, the screen-to-world similarity transform, and the
application settings. Screen coordinates grow downwards; world coordinates
grow upwards, so a point's y is mirrored before the transform is applied.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from PySide6.QtGui import QColor


# ============================================================================
# Total-order float keys
# ============================================================================


def ordered_key(value: float) -> tuple[int, float]:
    """
    Total-order key for a coordinate.

    All NaNs collapse to one key that sorts above every number.
    -0.0 and 0.0 compare equal (and hash equal).
    """
    if math.isnan(value):
        return (1, 0.0)
    return (0, value)


# ============================================================================
# Geometry
# ============================================================================


@dataclass(frozen=True, slots=True)
class Transform:
    """
    Similarity transform (uniform scale + rotation + translation).

        x' = alpha*x - beta*y + dx
        y' = beta*x  + alpha*y + dy

    (x, y) here is y-up: a screen point (sx, sy) enters as (sx, -sy).
    """

    alpha: float = 1.0  # scale * cos(theta)
    beta: float = 0.0  # scale * sin(theta)
    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def identity(cls) -> Transform:
        return cls(1.0, 0.0, 0.0, 0.0)

    @property
    def scale(self) -> float:
        """Uniform scale factor."""
        return math.hypot(self.alpha, self.beta)

    @property
    def rotation(self) -> float:
        """Rotation angle in radians."""
        return math.atan2(self.beta, self.alpha)

    @property
    def is_identity(self) -> bool:
        return self == Transform.identity()


@dataclass(frozen=True, slots=True, eq=False)
class Point:
    """
    Exact 2D coordinate, usable as a set key.

    Two clicks at literally the same pixel coalesce; near-but-not-exact
    duplicates stay distinct.
    """

    x: float
    y: float

    def _key(self) -> tuple[tuple[int, float], tuple[int, float]]:
        return (ordered_key(self.x), ordered_key(self.y))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def apply(self, transform: Transform) -> Point:
        """Map this point through a transform."""
        return transform_point(self, transform)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


def transform_point(point: Point, transform: Transform) -> Point:
    """
    Map a screen point to world coordinates.

    The screen y axis points down, so y is negated first. Even the identity
    transform flips y.
    """
    t = transform
    x = point.x
    y = -point.y
    return Point(
        t.alpha * x - t.beta * y + t.dx,
        t.beta * x + t.alpha * y + t.dy,
    )


# ============================================================================
# Color
# ============================================================================


@dataclass(frozen=True, slots=True)
class Color:
    """8-bit RGB color."""

    r: int
    g: int
    b: int

    def __post_init__(self):
        for channel in (self.r, self.g, self.b):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    @property
    def hex(self) -> str:
        """Color as '#rrggbb' (for Qt style sheets)."""
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"


def random_color(rng: random.Random | None = None) -> Color:
    """
    Draw a random color.

    Args:
        rng: Optional random source, for reproducible colors

    Returns:
        Color with three independent random channels
    """
    rng = rng or random
    return Color(rng.randrange(256), rng.randrange(256), rng.randrange(256))


def color_to_qcolor(color: Color) -> "QColor":
    """
    Convert to the Qt color type.
    """
    from PySide6.QtGui import QColor

    return QColor(color.r, color.g, color.b)


def color_from_qcolor(qcolor: "QColor") -> Color:
    """
    Convert from the Qt color type (alpha is dropped).
    """
    return Color(qcolor.red(), qcolor.green(), qcolor.blue())


# ============================================================================
# Application Configuration
# ============================================================================


@dataclass(frozen=True, slots=True)
class AppConfig:
    """
    Application settings.
    Loaded from a TOML file, see config.py.
    """

    line_thickness: float = 3.0  # pixels
    point_radius: float = 2.5  # pixels
    export_dir: str = "lines"  # relative to the working directory
    frame_interval_ms: int = 33  # re-fit / repaint tick
    fullscreen: bool = True
    log_level: str = "INFO"
