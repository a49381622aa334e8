"""
Least-squares line fitting and fitted line segments.

Fits are computed in single precision. A point set whose members all share
one x yields a non-finite slope; it is flagged, never clamped.
"""

from __future__ import annotations

import math
from collections.abc import Collection, Iterable
from dataclasses import dataclass

import numpy as np

from .errors import DegenerateFitError, InsufficientPointsError
from .points import transform_points
from .types import Color, Point, Transform, ordered_key, random_color

MIN_FIT_POINTS = 2


# ============================================================================
# Fitting
# ============================================================================


@dataclass(frozen=True, slots=True)
class LineFit:
    """
    Result of a least-squares fit: y = slope * x + intercept.
    """

    slope: float
    intercept: float

    @property
    def is_degenerate(self) -> bool:
        """True when the predictor had zero variance (vertical line)."""
        return not (math.isfinite(self.slope) and math.isfinite(self.intercept))

    def require_finite(self) -> LineFit:
        """Return self, or raise DegenerateFitError for a non-finite fit."""
        if self.is_degenerate:
            raise DegenerateFitError(
                f"Non-finite fit (slope={self.slope}, intercept={self.intercept})"
            )
        return self

    def y_at(self, x: float) -> float:
        return self.slope * x + self.intercept

    @property
    def equation(self) -> str:
        return format_line_equation(self.slope, self.intercept)


def fit_line(points: Collection[Point]) -> LineFit:
    """
    Ordinary least squares fit of y on x.

        slope     = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2)
        intercept = (Sy - slope*Sx) / n

    Args:
        points: At least two points

    Returns:
        LineFit, possibly with a non-finite slope (check is_degenerate)

    Raises:
        InsufficientPointsError: if fewer than two points are given
    """
    n_points = len(points)
    if n_points < MIN_FIT_POINTS:
        raise InsufficientPointsError(MIN_FIT_POINTS, n_points)

    coords = np.array([(p.x, p.y) for p in points], dtype=np.float32)
    x = coords[:, 0]
    y = coords[:, 1]

    # float32 rounding can leave a small nonzero denominator when every x
    # is equal, so zero spread is checked directly
    if np.all(x == x[0]):
        return LineFit(slope=math.nan, intercept=math.nan)

    n = np.float32(n_points)
    sum_x = x.sum(dtype=np.float32)
    sum_y = y.sum(dtype=np.float32)
    sum_xx = (x * x).sum(dtype=np.float32)
    sum_xy = (x * y).sum(dtype=np.float32)

    with np.errstate(divide="ignore", invalid="ignore"):
        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
        intercept = (sum_y - slope * sum_x) / n

    return LineFit(slope=float(slope), intercept=float(intercept))


def format_line_equation(slope: float, intercept: float) -> str:
    """
    Human-readable equation with three decimals.

    >>> format_line_equation(2.0, -1.5)
    'y = 2.000x - 1.500'

    Raises:
        DegenerateFitError: for a non-finite slope or intercept
    """
    if not (math.isfinite(slope) and math.isfinite(intercept)):
        raise DegenerateFitError("Cannot format a line with a non-finite slope")
    if intercept < 0:
        return f"y = {slope:.3f}x - {-intercept:.3f}"
    return f"y = {slope:.3f}x + {abs(intercept):.3f}"  # abs: no "+ -0.000"


# ============================================================================
# Line segments
# ============================================================================


class LineSegment:
    """
    A committed regression line.

    Holds the raw (screen-space) points it was fitted from, the extreme raw
    points that bound its on-screen drawing, its color, and the fit against
    the last transform applied. The raw points are never mutated.
    """

    def __init__(self, points: Iterable[Point], color: Color | None = None):
        raw = frozenset(points)
        if len(raw) < MIN_FIT_POINTS:
            raise InsufficientPointsError(MIN_FIT_POINTS, len(raw))

        self._screen_points = raw
        self.screen_fit = fit_line(raw)
        self.leftmost_pt = min(raw, key=lambda p: ordered_key(p.x))
        self.rightmost_pt = max(raw, key=lambda p: ordered_key(p.x))
        self.color = color if color is not None else random_color()

        # transform, transformed_points, transformed_fit
        self.refit(Transform.identity())

    @property
    def screen_points(self) -> frozenset[Point]:
        return self._screen_points

    def refit(self, transform: Transform) -> LineFit:
        """
        Re-project the raw points through `transform` and fit them again.

        The transformed fit is always recomputed from the mapped points, since
        fitting does not commute with rotation.

        Raises:
            InsufficientPointsError: if the mapped set collapses below two points
        """
        mapped = transform_points(self._screen_points, transform)
        fit = fit_line(mapped)
        self.transform = transform
        self.transformed_points = mapped
        self.transformed_fit = fit
        return fit

    @property
    def equation(self) -> str:
        """Transformed-space equation (raises DegenerateFitError if vertical)."""
        return self.transformed_fit.equation

    def screen_endpoints(self) -> tuple[Point, Point]:
        """Endpoints of the drawn segment, on the raw fit at the extreme x."""
        if self.screen_fit.is_degenerate:
            # vertical: span the extreme y instead
            return (
                min(self._screen_points, key=lambda p: ordered_key(p.y)),
                max(self._screen_points, key=lambda p: ordered_key(p.y)),
            )
        x0 = self.leftmost_pt.x
        x1 = self.rightmost_pt.x
        return (
            Point(x0, self.screen_fit.y_at(x0)),
            Point(x1, self.screen_fit.y_at(x1)),
        )

    def screen_space_slope(self) -> float:
        """Slope of the chord through the extreme raw points."""
        delta = self.leftmost_pt - self.rightmost_pt
        if delta.x == 0:
            return math.nan
        return delta.y / delta.x

    def screen_space_intercept(self) -> float:
        return self.leftmost_pt.y - self.screen_space_slope() * self.leftmost_pt.x

    def __len__(self) -> int:
        return len(self._screen_points)

    def __repr__(self) -> str:
        return (
            f"LineSegment(n={len(self)}, slope={self.transformed_fit.slope:.3f}, "
            f"intercept={self.transformed_fit.intercept:.3f})"
        )
