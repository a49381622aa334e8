"""
Calibration module for screenfit.

All functions are pure - they take dataclasses and return dataclasses.
No threading, no state management. Caller owns the current transform.
"""

from .similarity import (
    PointPair,
    build_calibration_system,
    estimate_transform,
    calibration_residuals,
)

__all__ = [
    "PointPair",
    "build_calibration_system",
    "estimate_transform",
    "calibration_residuals",
]
