"""
Point collections.

- UniquePointSet: deduplicating set of points for line regression
- BoundedBuffer: fixed-capacity ordered buffer for calibration points
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .errors import CalibrationInputError
from .types import Point, Transform, transform_point


# ============================================================================
# Unique point set
# ============================================================================


class UniquePointSet:
    """
    Unordered set of points. Inserting a point twice is a no-op.
    """

    __slots__ = ("_points",)

    def __init__(self, points: Iterable[Point] = ()):
        self._points: set[Point] = set(points)

    def insert(self, point: Point) -> bool:
        """Add a point. Returns True if it was not already present."""
        if point in self._points:
            return False
        self._points.add(point)
        return True

    def contains(self, point: Point) -> bool:
        return point in self._points

    def clear(self) -> None:
        self._points.clear()

    def copy(self) -> UniquePointSet:
        return UniquePointSet(self._points)

    def frozen(self) -> frozenset[Point]:
        """Immutable snapshot of the current members."""
        return frozenset(self._points)

    def __contains__(self, point: object) -> bool:
        return point in self._points

    def __iter__(self) -> Iterator[Point]:
        return iter(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UniquePointSet):
            return NotImplemented
        return self._points == other._points

    def __repr__(self) -> str:
        return f"UniquePointSet({sorted(p.as_tuple() for p in self._points)!r})"


def transform_points(points: Iterable[Point], transform: Transform) -> UniquePointSet:
    """
    Map every point through a transform into a fresh set.

    Points that land on the same coordinates collapse into one.
    """
    return UniquePointSet(transform_point(p, transform) for p in points)


# ============================================================================
# Bounded buffer
# ============================================================================


class BoundedBuffer:
    """
    Ordered buffer holding at most `capacity` points.

    Pushing onto a full buffer is rejected; the buffer is left unchanged.
    """

    __slots__ = ("_capacity", "_items")

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._items: list[Point] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return len(self._items) >= self._capacity

    def push_back(self, point: Point) -> bool:
        """Append a point. Returns False (and drops the point) when full."""
        if self.is_full:
            return False
        self._items.append(point)
        return True

    def clear(self) -> None:
        self._items.clear()

    def __getitem__(self, index: int) -> Point:
        if not 0 <= index < len(self._items):
            raise IndexError(f"index {index} out of range for {len(self._items)} points")
        return self._items[index]

    def __iter__(self) -> Iterator[Point]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"BoundedBuffer(capacity={self._capacity}, items={self._items!r})"


# ============================================================================
# Calibration text input
# ============================================================================


def parse_world_point(x_text: str, y_text: str) -> Point:
    """
    Parse the two text fields of a real-world calibration coordinate.

    Args:
        x_text: Text typed for the x coordinate
        y_text: Text typed for the y coordinate

    Returns:
        Point with the parsed coordinates

    Raises:
        CalibrationInputError: if either field is not a number
    """
    try:
        return Point(float(x_text.strip()), float(y_text.strip()))
    except ValueError as e:
        raise CalibrationInputError(
            f"Invalid calibration coordinate ({x_text!r}, {y_text!r})"
        ) from e
