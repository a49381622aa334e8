# screenfit - Fit lines to points picked on a screenshot, in calibrated units

__version__ = "0.1.0"

# Core types
from screenfit.types import (
    Point,
    Color,
    Transform,
    AppConfig,
    transform_point,
    random_color,
)

# Errors
from screenfit.errors import (
    ScreenfitError,
    InsufficientPointsError,
    DegenerateFitError,
    DegenerateCalibrationError,
    CalibrationInputError,
)

# Point collections
from screenfit.points import (
    UniquePointSet,
    BoundedBuffer,
    transform_points,
    parse_world_point,
)

# Regression
from screenfit.regression import (
    LineFit,
    LineSegment,
    fit_line,
    format_line_equation,
)

# Calibration
from screenfit.calibration import estimate_transform

# Engine
from screenfit.session import (
    GatheringMode,
    MeasurementSession,
)

# Configuration
from screenfit.config import (
    load_app_config,
    save_app_config,
)

__all__ = [
    # Core types
    "Point",
    "Color",
    "Transform",
    "AppConfig",
    "transform_point",
    "random_color",
    # Errors
    "ScreenfitError",
    "InsufficientPointsError",
    "DegenerateFitError",
    "DegenerateCalibrationError",
    "CalibrationInputError",
    # Point collections
    "UniquePointSet",
    "BoundedBuffer",
    "transform_points",
    "parse_world_point",
    # Regression
    "LineFit",
    "LineSegment",
    "fit_line",
    "format_line_equation",
    # Calibration
    "estimate_transform",
    # Engine
    "GatheringMode",
    "MeasurementSession",
    # Configuration
    "load_app_config",
    "save_app_config",
]
