"""
Similarity transform estimation from two point correspondences.

Pure functions - no classes, no state.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import numpy as np
from scipy.linalg import lu_factor, lu_solve

from ..errors import DegenerateCalibrationError
from ..types import Point, Transform, transform_point

# (screen point, real-world point)
PointPair = tuple[Point, Point]


# ============================================================================
# Linear System
# ============================================================================


def build_calibration_system(
    pair1: PointPair,
    pair2: PointPair,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Build the 4x4 system A @ (alpha, beta, dx, dy) = b.

    Each correspondence contributes its x and y equations, with the
    screen y mirrored as in transform_point:
        [ sx, sy, 1, 0] . p = wx
        [-sy, sx, 0, 1] . p = wy

    Args:
        pair1: First (screen, world) correspondence
        pair2: Second (screen, world) correspondence

    Returns:
        (A, b) with A of shape (4, 4) and b of shape (4,)
    """
    rows = []
    rhs = []
    for screen, world in (pair1, pair2):
        rows.append([screen.x, screen.y, 1.0, 0.0])
        rows.append([-screen.y, screen.x, 0.0, 1.0])
        rhs.extend([world.x, world.y])

    return np.array(rows, dtype=np.float64), np.array(rhs, dtype=np.float64)


# ============================================================================
# Estimation
# ============================================================================


def estimate_transform(pair1: PointPair, pair2: PointPair) -> Transform:
    """
    Estimate the similarity transform mapping screen points to world points.

    Solved with an LU factorisation of the 4x4 system. The matrix is
    singular exactly when the two screen points coincide.

    Args:
        pair1: First (screen, world) correspondence
        pair2: Second (screen, world) correspondence

    Returns:
        New Transform

    Raises:
        DegenerateCalibrationError: if the system is singular, or the
            two world points coincide
    """
    a, b = build_calibration_system(pair1, pair2)

    if not np.all(np.isfinite(a)) or np.linalg.matrix_rank(a) < 4:
        raise DegenerateCalibrationError(
            f"Calibration points {pair1[0]} and {pair2[0]} do not define a transform"
        )

    # coincident world points give a zero-scale map that collapses every line
    if pair1[1] == pair2[1]:
        raise DegenerateCalibrationError(
            f"World points {pair1[1]} and {pair2[1]} coincide"
        )

    lu, piv = lu_factor(a)
    alpha, beta, dx, dy = lu_solve((lu, piv), b)

    return Transform(float(alpha), float(beta), float(dx), float(dy))


def calibration_residuals(
    pairs: Iterable[PointPair],
    transform: Transform,
) -> list[float]:
    """
    World-space distance between each mapped screen point and its target.
    """
    residuals = []
    for screen, world in pairs:
        mapped = transform_point(screen, transform)
        residuals.append(math.hypot(mapped.x - world.x, mapped.y - world.y))
    return residuals
