"""Tests for the plane / solid intersector."""

import numpy as np
import pytest

from pygravdam.config import ExtractionConfig
from pygravdam.geometry.brep import CurveSegment, Solid
from pygravdam.geometry.intersect import (
    NoIntersection,
    deduplicate_segments,
    intersect_solid,
)
from pygravdam.geometry.primitives import Plane, Point3D


def _block():
    """10 m x 10 m square block, 5 m long along the dam axis (+y)."""
    return Solid.extrude([(0, 0), (10, 0), (10, 10), (0, 10)], length=5.0, name="block")


def _section_plane(y):
    return Plane.from_normal((0, y, 0), (0, 1, 0))


class TestIntersectSolid:
    def test_transverse_cut(self):
        segments = intersect_solid(_block(), _section_plane(2.5))
        assert len(segments) == 4
        for seg in segments:
            assert seg.start.y == pytest.approx(2.5)
            assert seg.end.y == pytest.approx(2.5)

    def test_segment_lengths(self):
        segments = intersect_solid(_block(), _section_plane(2.5))
        lengths = sorted(seg.length() for seg in segments)
        np.testing.assert_allclose(lengths, [10.0, 10.0, 10.0, 10.0])

    def test_plane_outside_extent(self):
        result = intersect_solid(_block(), _section_plane(20.0))
        assert isinstance(result, NoIntersection)
        assert not result

    def test_touching_vertex_only(self):
        normal = np.array([1.0, 1.0, 1.0]) / np.sqrt(3.0)
        plane = Plane.from_normal((0, 0, 0), normal)
        assert isinstance(intersect_solid(_block(), plane), NoIntersection)

    def test_coplanar_cap_returns_outline(self):
        segments = intersect_solid(_block(), _section_plane(0.0))
        assert len(segments) == 4
        total = sum(seg.length() for seg in segments)
        assert total == pytest.approx(40.0)

    def test_oblique_cut(self):
        normal = np.array([0.0, 1.0, 0.2])
        plane = Plane.from_normal((0, 2.5, 5.0), normal)
        segments = intersect_solid(_block(), plane)
        for seg in segments:
            assert plane.signed_distance(seg.start) == pytest.approx(0.0, abs=1e-9)
            assert plane.signed_distance(seg.end) == pytest.approx(0.0, abs=1e-9)

    def test_curved_face_uses_tessellation(self):
        solid = Solid.extrude([(0, 0), (20, 0), (0, 20)], length=4.0, arcs={1: (0, 0)})
        segments = intersect_solid(solid, _section_plane(2.0))
        # Two planar sides plus two segments per tessellation strip
        assert len(segments) == 2 + 2 * 16
        for seg in segments:
            assert seg.start.y == pytest.approx(2.0)

    def test_deterministic(self):
        a = intersect_solid(_block(), _section_plane(1.3))
        b = intersect_solid(_block(), _section_plane(1.3))
        assert a == b

    def test_custom_tolerance(self):
        config = ExtractionConfig(plane_tolerance=1e-3)
        segments = intersect_solid(_block(), _section_plane(5.0 - 1e-4), config)
        # Within tolerance of the far cap: the cap outline is returned
        assert sum(seg.length() for seg in segments) == pytest.approx(40.0, rel=1e-3)


class TestDeduplicate:
    def test_reversed_duplicate_removed(self):
        a = CurveSegment(Point3D(0, 0, 0), Point3D(1, 0, 0))
        b = CurveSegment(Point3D(1, 0, 0), Point3D(0, 0, 0))
        assert deduplicate_segments([a, b], 1e-6) == [a]

    def test_zero_length_dropped(self):
        a = CurveSegment(Point3D(0, 0, 0), Point3D(0, 0, 0))
        assert deduplicate_segments([a], 1e-6) == []
