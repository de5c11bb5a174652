"""Tests for curve loop assembly."""

import random

import numpy as np
import pytest

from pygravdam.config import ExtractionConfig
from pygravdam.errors import WarningCode
from pygravdam.geometry.brep import ArcDescriptor, CurveSegment
from pygravdam.geometry.loops import LoopKind, assemble_loops, stitch_segments
from pygravdam.geometry.primitives import Plane, Point3D
from pygravdam.section.extraction import build_profile
from pygravdam.section.profile import ProfileStatus


# ======================================================================
# Fixtures
# ======================================================================


def _plane():
    """Section plane y = 0; local (x, y) = world (x, z)."""
    return Plane.from_normal((0, 0, 0), (0, 1, 0))


def _seg(a, b):
    return CurveSegment(Point3D(a[0], 0.0, a[1]), Point3D(b[0], 0.0, b[1]))


def _polygon_segments(pts):
    n = len(pts)
    return [_seg(pts[i], pts[(i + 1) % n]) for i in range(n)]


def _square(x0=0.0, y0=0.0, size=10.0):
    return [(x0, y0), (x0 + size, y0), (x0 + size, y0 + size), (x0, y0 + size)]


# ======================================================================
# Stitching
# ======================================================================


class TestStitching:
    def test_square_closes(self):
        assembly = assemble_loops(_polygon_segments(_square()), _plane())
        assert len(assembly.closed) == 1
        assert assembly.main.area == pytest.approx(100.0)
        np.testing.assert_array_equal(assembly.main.points[0], assembly.main.points[-1])

    def test_shuffled_and_reversed_segments(self):
        segments = _polygon_segments(_square())
        rng = random.Random(3)
        rng.shuffle(segments)
        segments = [s.reversed() if i % 2 else s for i, s in enumerate(segments)]
        assembly = assemble_loops(segments, _plane())
        assert assembly.main.area == pytest.approx(100.0)
        assert not assembly.open_chains

    def test_main_is_counter_clockwise(self):
        clockwise = _square()[::-1]
        assembly = assemble_loops(_polygon_segments(clockwise), _plane())
        assert assembly.main.signed_area > 0

    def test_small_gaps_within_connection_tolerance(self):
        pts = _square()
        segments = [
            _seg(pts[0], pts[1]),
            _seg((10.0, 5e-4), pts[2]),
            _seg(pts[2], pts[3]),
            _seg(pts[3], (0.0, 2e-4)),
        ]
        assembly = assemble_loops(segments, _plane())
        assert len(assembly.closed) == 1
        assert not assembly.warnings

    def test_arc_segment_is_discretised(self):
        arc = ArcDescriptor(center=Point3D(0, 0, 0), radius=10.0)
        segments = [
            _seg((0, 0), (10, 0)),
            CurveSegment(Point3D(10, 0, 0), Point3D(0, 0, 10), arc),
            _seg((0, 10), (0, 0)),
        ]
        assembly = assemble_loops(segments, _plane(), ExtractionConfig(arc_samples=32))
        assert assembly.main.area == pytest.approx(np.pi * 100 / 4, rel=1e-2)
        assert len(assembly.main.vertices) == 2 + 32

    def test_deterministic(self):
        segments = _polygon_segments(_square()) + _polygon_segments(_square(2, 2, 2))
        a = assemble_loops(segments, _plane())
        b = assemble_loops(segments, _plane())
        assert a.main == b.main
        assert a.inner == b.inner


class TestClassification:
    def test_outer_and_inner(self):
        segments = _polygon_segments(_square()) + _polygon_segments(_square(2, 2, 2))
        assembly = assemble_loops(segments, _plane())
        assert assembly.main.area == pytest.approx(100.0)
        assert len(assembly.inner) == 1
        assert assembly.inner[0].area == pytest.approx(4.0)
        assert assembly.inner[0].signed_area < 0

    def test_inner_listed_first_still_classified(self):
        segments = _polygon_segments(_square(2, 2, 2)) + _polygon_segments(_square())
        assembly = assemble_loops(segments, _plane())
        assert assembly.main.area == pytest.approx(100.0)

    def test_equal_areas_tie_break(self):
        segments = _polygon_segments(_square(5, 0, 1)) + _polygon_segments(_square(0, 0, 1))
        assembly = assemble_loops(segments, _plane())
        lo, _ = assembly.main.bounding_box()
        np.testing.assert_allclose(lo, [0.0, 0.0])
        codes = [w.code for w in assembly.warnings]
        assert WarningCode.AMBIGUOUS_MAIN_CONTOUR in codes


class TestOpenAndDegenerate:
    def test_gap_closed_with_warning(self):
        segments = [
            _seg((0, 0), (10, 0)),
            _seg((10, 0), (0, 10)),
            _seg((0, 10), (0, 0.005)),
        ]
        assembly = assemble_loops(segments, _plane())
        assert assembly.main is not None
        assert assembly.main.area == pytest.approx(50.0, rel=1e-2)
        assert [w.code for w in assembly.warnings] == [WarningCode.OPEN_CONTOUR]

    def test_open_chain_fails_profile(self):
        segments = [
            _seg((0, 0), (10, 0)),
            _seg((10, 0), (10, 10)),
            _seg((10, 10), (0, 10)),
        ]
        assembly = assemble_loops(segments, _plane())
        assert assembly.main is None
        assert len(assembly.open_chains) == 1
        profile = build_profile(assembly, _plane(), "S1")
        assert profile.status is ProfileStatus.FAILED
        assert profile.reason.value == "OpenContour"
        assert profile.main_contour.is_empty
        assert len(profile.open_chains) == 1

    def test_open_chain_grows_from_both_ends(self):
        # The first segment sits in the middle of the chain
        segments = [
            _seg((10, 0), (10, 10)),
            _seg((0, 0), (10, 0)),
            _seg((10, 10), (0, 10)),
        ]
        assembly = assemble_loops(segments, _plane())
        assert len(assembly.loops) == 1
        assert assembly.loops[0].kind is LoopKind.OPEN
        assert len(assembly.loops[0].points) == 4

    def test_zero_area_loop_is_degenerate(self):
        segments = [_seg((0, 0), (1, 0)), _seg((1, 0), (0, 0))]
        assembly = assemble_loops(segments, _plane())
        assert assembly.loops[0].kind is LoopKind.DEGENERATE
        assert assembly.main is None

    def test_stitch_segments_direct(self):
        pieces = [np.array([[0.0, 0.0], [1.0, 0.0]]), np.array([[1.0, 0.0], [0.0, 1.0]]),
                  np.array([[0.0, 1.0], [0.0, 0.0]])]
        loops = stitch_segments(pieces, ExtractionConfig())
        assert [lp.kind for lp in loops] == [LoopKind.CLOSED]
