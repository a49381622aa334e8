"""
Exceptions raised by the screenfit engine.
"""


class ScreenfitError(Exception):
    """Base class for screenfit errors."""


class InsufficientPointsError(ScreenfitError):
    """A fit or calibration was requested with too few points."""

    def __init__(self, required: int, actual: int):
        super().__init__(f"Need at least {required} points, got {actual}")
        self.required = required
        self.actual = actual


class DegenerateFitError(ScreenfitError):
    """The fitted line has a non-finite slope (all points share one x)."""


class DegenerateCalibrationError(ScreenfitError):
    """The calibration system is singular (coincident screen points)."""


class CalibrationInputError(ScreenfitError, ValueError):
    """Calibration text could not be parsed as a number."""
