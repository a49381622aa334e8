"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Provide a temporary directory that's cleaned up after test."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def collinear_points():
    """Three points on y = 2x."""
    from screenfit.types import Point
    return [Point(0.0, 0.0), Point(1.0, 2.0), Point(2.0, 4.0)]


@pytest.fixture
def noisy_points():
    """Four points that are not collinear (OLS slope 1.1, intercept 0.1)."""
    from screenfit.types import Point
    return [Point(0.0, 0.0), Point(1.0, 2.0), Point(2.0, 1.0), Point(3.0, 4.0)]


@pytest.fixture
def sample_transform():
    """Scale ~1, rotation ~60 degrees, with translation."""
    from screenfit.types import Transform
    return Transform(alpha=0.5, beta=0.866, dx=10.0, dy=-5.0)


@pytest.fixture
def rotate_90():
    """Pure 90 degree rotation: screen (x, y) -> world (y, x)."""
    from screenfit.types import Transform
    return Transform(alpha=0.0, beta=1.0, dx=0.0, dy=0.0)
