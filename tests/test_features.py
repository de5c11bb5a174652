"""Tests for geometric feature analysis."""

import pytest

from pygravdam.errors import GeometryExtractionError
from pygravdam.geometry.primitives import CurveLoop
from pygravdam.section.features import analyze_features, profile_area, profile_centroid
from pygravdam.section.profile import Profile2D


def _rectangle():
    return Profile2D.from_points([(0, 0), (10, 0), (10, 10), (0, 10)])


def _trapezoid():
    """Base 40, crest 8, height 50, vertical upstream face."""
    return Profile2D.from_points([(0, 0), (40, 0), (8, 50), (0, 50)])


class TestRectangle:
    def test_area_and_centroid(self):
        f = analyze_features(_rectangle())
        assert f.area == pytest.approx(100.0)
        assert f.centroid.x == pytest.approx(5.0)
        assert f.centroid.y == pytest.approx(5.0)

    def test_dimensions(self):
        f = analyze_features(_rectangle())
        assert f.width == pytest.approx(10.0)
        assert f.height == pytest.approx(10.0)
        assert f.base_width == pytest.approx(10.0)
        assert f.crest_width == pytest.approx(10.0)
        assert f.perimeter == pytest.approx(40.0)

    def test_toes(self):
        f = analyze_features(_rectangle())
        assert tuple(f.upstream_toe) == (0.0, 0.0)
        assert tuple(f.downstream_toe) == (10.0, 0.0)

    def test_second_moments(self):
        f = analyze_features(_rectangle())
        assert f.ixx == pytest.approx(10 * 10**3 / 12)
        assert f.iyy == pytest.approx(10 * 10**3 / 12)
        assert f.ixy == pytest.approx(0.0, abs=1e-9)


class TestTrapezoid:
    def test_area(self):
        assert analyze_features(_trapezoid()).area == pytest.approx(1200.0)

    def test_centroid(self):
        # Rectangle 8 x 50 plus triangle (8,0)-(40,0)-(8,50)
        cx = (400 * 4.0 + 800 * (8 + 40 + 8) / 3) / 1200
        cy = (400 * 25.0 + 800 * 50 / 3) / 1200
        f = analyze_features(_trapezoid())
        assert f.centroid.x == pytest.approx(cx)
        assert f.centroid.y == pytest.approx(cy)

    def test_widths_and_slopes(self):
        f = analyze_features(_trapezoid())
        assert f.base_width == pytest.approx(40.0)
        assert f.crest_width == pytest.approx(8.0)
        assert f.height == pytest.approx(50.0)
        assert f.upstream_slope == pytest.approx(0.0)
        assert f.downstream_slope == pytest.approx(32.0 / 50.0)
        assert tuple(f.downstream_crest) == (8.0, 50.0)

    def test_inclined_upstream_face(self):
        profile = Profile2D.from_points([(0, 0), (50, 0), (15, 50), (5, 50)])
        f = analyze_features(profile)
        assert f.upstream_slope == pytest.approx(0.1)
        assert f.downstream_slope == pytest.approx(0.7)

    def test_area_positive_regardless_of_orientation(self):
        pts = [(0, 0), (40, 0), (8, 50), (0, 50)]
        profile = Profile2D(main_contour=CurveLoop(pts[::-1]))
        assert analyze_features(profile).area == pytest.approx(1200.0)


class TestHoles:
    def test_hole_subtracted(self):
        profile = Profile2D.from_points(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            holes=[[(2, 2), (4, 2), (4, 4), (2, 4)]],
        )
        assert profile_area(profile) == pytest.approx(96.0)
        c = profile_centroid(profile)
        assert c.x == pytest.approx((100 * 5 - 4 * 3) / 96)
        assert c.y == pytest.approx((100 * 5 - 4 * 3) / 96)

    def test_hole_second_moment(self):
        profile = Profile2D.from_points(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            holes=[[(4, 4), (6, 4), (6, 6), (4, 6)]],
        )
        f = analyze_features(profile)
        assert f.ixx == pytest.approx(10**4 / 12 - 2**4 / 12)
        assert f.n_inner == 1

    def test_hole_given_counter_clockwise(self):
        profile = Profile2D(
            main_contour=CurveLoop([(0, 0), (10, 0), (10, 10), (0, 10)]),
            inner_contours=(CurveLoop([(2, 2), (4, 2), (4, 4), (2, 4)]),),
        )
        assert profile_area(profile) == pytest.approx(96.0)


class TestDegenerate:
    def test_empty_profile_raises(self):
        with pytest.raises(GeometryExtractionError):
            analyze_features(Profile2D())

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            profile_area(Profile2D())

    def test_to_dict(self):
        data = analyze_features(_rectangle()).to_dict()
        assert data["area"] == pytest.approx(100.0)
        assert data["centroid"] == [5.0, 5.0]
