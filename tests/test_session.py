"""
Tests for screenfit.session (gathering modes, lines, calibration, export).
"""

from pathlib import Path

import pytest

from screenfit.errors import DegenerateCalibrationError, InsufficientPointsError
from screenfit.session import GatheringMode, MeasurementSession
from screenfit.types import Point, Transform, transform_point


@pytest.fixture
def session():
    return MeasurementSession()


def calibrated_session(transform: Transform) -> MeasurementSession:
    session = MeasurementSession()
    session.enter_calibration()
    s1, s2 = Point(0.0, 0.0), Point(100.0, 50.0)
    session.add_point(s1)
    session.add_point(s2)
    session.calibrate(transform_point(s1, transform), transform_point(s2, transform))
    return session


class TestInitialState:
    def test_defaults(self, session):
        assert session.mode is GatheringMode.NORMAL
        assert len(session.points) == 0
        assert len(session.calibration_points) == 0
        assert session.calibration_points.capacity == 2
        assert session.lines == []
        assert session.transform == Transform.identity()


class TestGathering:
    def test_normal_mode_uses_point_set(self, session):
        assert session.add_point(Point(1.0, 1.0)) is True
        assert session.add_point(Point(1.0, 1.0)) is False
        assert len(session.points) == 1
        assert len(session.calibration_points) == 0

    def test_measurement_mode_uses_calibration_buffer(self, session):
        session.enter_calibration()
        assert session.mode is GatheringMode.MEASUREMENT
        assert session.add_point(Point(1.0, 1.0)) is True
        assert session.add_point(Point(2.0, 2.0)) is True
        assert session.add_point(Point(3.0, 3.0)) is False
        assert len(session.calibration_points) == 2
        assert len(session.points) == 0

    def test_visible_points_follow_mode(self, session):
        session.add_point(Point(1.0, 1.0))
        assert list(session.visible_points()) == [Point(1.0, 1.0)]
        session.enter_calibration()
        assert list(session.visible_points()) == []
        session.add_point(Point(5.0, 5.0))
        assert list(session.visible_points()) == [Point(5.0, 5.0)]

    def test_enter_calibration_clears_previous_pair(self, session):
        session.enter_calibration()
        session.add_point(Point(1.0, 1.0))
        session.add_point(Point(2.0, 2.0))
        session.enter_calibration()
        assert len(session.calibration_points) == 0

    def test_visible_world_points(self):
        t = Transform(alpha=2.0, beta=0.0, dx=1.0, dy=0.0)
        session = calibrated_session(t)
        session.add_point(Point(3.0, 4.0))
        assert session.visible_world_points() == [transform_point(Point(3.0, 4.0), session.transform)]


class TestLines:
    def test_commit_requires_two_points(self, session):
        assert session.commit_line() is None
        session.add_point(Point(0.0, 0.0))
        assert session.commit_line() is None
        assert session.lines == []
        # Buffer untouched
        assert len(session.points) == 1

    def test_commit_creates_line_and_clears_buffer(self, session, collinear_points):
        for p in collinear_points:
            session.add_point(p)
        line = session.commit_line()
        assert line is not None
        assert session.lines == [line]
        assert len(session.points) == 0
        # screen y is mirrored, so a line rising on screen falls in the world
        assert line.equation == "y = -2.000x + 0.000"

    def test_committed_points_survive_new_gathering(self, session, collinear_points):
        for p in collinear_points:
            session.add_point(p)
        line = session.commit_line()
        session.add_point(Point(50.0, 50.0))
        assert len(line) == 3

    def test_remove_line(self, session, collinear_points, noisy_points):
        for p in collinear_points:
            session.add_point(p)
        first = session.commit_line()
        for p in noisy_points:
            session.add_point(p)
        second = session.commit_line()

        removed = session.remove_line(0)
        assert removed is first
        assert session.lines == [second]
        with pytest.raises(IndexError):
            session.remove_line(5)

    def test_refit_follows_transform(self, session, collinear_points):
        for p in collinear_points:
            session.add_point(p)
        line = session.commit_line()

        session.transform = Transform(alpha=1.0, beta=0.0, dx=0.0, dy=10.0)
        session.refit_lines()
        assert line.transform == session.transform
        assert line.equation == "y = -2.000x + 10.000"

    def test_commit_after_calibration_uses_transform(self, collinear_points):
        t = Transform(alpha=1.0, beta=0.0, dx=0.0, dy=-1.0)
        session = calibrated_session(t)
        for p in collinear_points:
            session.add_point(p)
        line = session.commit_line()
        assert line.equation == "y = -2.000x - 1.000"


class TestCalibrate:
    def test_calibration_installs_transform(self, sample_transform):
        session = calibrated_session(sample_transform)
        assert session.mode is GatheringMode.NORMAL
        assert session.transform.alpha == pytest.approx(sample_transform.alpha)
        assert session.transform.beta == pytest.approx(sample_transform.beta)
        assert session.transform.dx == pytest.approx(sample_transform.dx)
        assert session.transform.dy == pytest.approx(sample_transform.dy)

    def test_needs_two_points(self, session):
        session.enter_calibration()
        session.add_point(Point(1.0, 1.0))
        with pytest.raises(InsufficientPointsError):
            session.calibrate(Point(0.0, 0.0), Point(1.0, 1.0))
        assert session.mode is GatheringMode.MEASUREMENT

    def test_degenerate_leaves_state_unchanged(self, session):
        previous = Transform(alpha=2.0, beta=0.0, dx=0.0, dy=0.0)
        session.transform = previous
        session.enter_calibration()
        session.add_point(Point(7.0, 7.0))
        session.add_point(Point(7.0, 7.0))

        with pytest.raises(DegenerateCalibrationError):
            session.calibrate(Point(0.0, 0.0), Point(1.0, 1.0))
        assert session.transform == previous
        assert session.mode is GatheringMode.MEASUREMENT

    def test_replaces_previous_transform_wholesale(self):
        first = Transform(alpha=3.0, beta=1.0, dx=5.0, dy=5.0)
        session = calibrated_session(first)

        session.enter_calibration()
        s1, s2 = Point(1.0, 1.0), Point(2.0, 2.0)
        session.add_point(s1)
        session.add_point(s2)
        session.calibrate(Point(1.0, -1.0), Point(2.0, -2.0))
        assert session.transform.alpha == pytest.approx(1.0)
        assert session.transform.beta == pytest.approx(0.0, abs=1e-12)
        assert session.transform.dx == pytest.approx(0.0, abs=1e-12)

    def test_reset_transform(self, sample_transform):
        session = calibrated_session(sample_transform)
        session.reset_transform()
        assert session.transform == Transform.identity()


class TestExportRequests:
    def test_one_request_per_line(self, session, collinear_points, noisy_points):
        for p in collinear_points:
            session.add_point(p)
        session.commit_line()
        for p in noisy_points:
            session.add_point(p)
        session.commit_line()

        requests = session.export_requests(Path("out"))
        assert [r.path for r in requests] == [Path("out/line_0.csv"), Path("out/line_1.csv")]
        assert set(requests[0].points) == set(collinear_points)
        assert set(requests[1].points) == set(noisy_points)

    def test_request_ids_increase(self, session, collinear_points):
        for p in collinear_points:
            session.add_point(p)
        session.commit_line()
        first = session.export_requests(Path("out"))
        second = session.export_requests(Path("out"))
        assert second[0].request_id > first[0].request_id

    def test_requests_carry_raw_points_and_transform(self, collinear_points):
        t = Transform(alpha=0.5, beta=0.0, dx=0.0, dy=0.0)
        session = calibrated_session(t)
        for p in collinear_points:
            session.add_point(p)
        session.commit_line()
        request = session.export_requests(Path("out"))[0]
        assert set(request.points) == set(collinear_points)
        assert request.transform == session.transform

    def test_no_lines_no_requests(self, session):
        assert session.export_requests(Path("out")) == []
