"""Tests for the profile validation engine."""

import pytest

from pygravdam.config import ValidationConfig
from pygravdam.errors import ErrorCode, Severity
from pygravdam.geometry.primitives import CurveLoop
from pygravdam.materials import MaterialProperties, concrete_c30
from pygravdam.section.profile import Profile2D, ProfileStatus
from pygravdam.section.validation import Issue, ValidationReport, validate_profile


def _good_dam():
    """Base 30, crest 6, height 40; every edge shorter than 50 m."""
    return Profile2D.from_points([(0, 0), (30, 0), (6, 40), (0, 40)], name="S1")


def _checks(report):
    return [i.check for i in report.issues]


class TestValidProfile:
    def test_no_issues(self):
        report = validate_profile(_good_dam(), concrete_c30)
        assert report.issues == []
        assert report.score == pytest.approx(1.0)
        assert not report.requires_review
        assert report.features is not None

    def test_apply_sets_validated(self):
        report = validate_profile(_good_dam(), concrete_c30)
        profile = report.apply(_good_dam())
        assert profile.status is ProfileStatus.VALIDATED
        assert profile.transition(ProfileStatus.ACCEPTED).status is ProfileStatus.ACCEPTED


class TestCriticalIssues:
    def test_missing_material(self):
        report = validate_profile(_good_dam(), None)
        assert "material" in _checks(report)
        assert report.requires_review
        assert report.apply(_good_dam()).status is ProfileStatus.REQUIRES_REVIEW

    def test_invalid_material(self):
        bad = MaterialProperties(unit_weight=-1.0)
        report = validate_profile(_good_dam(), bad)
        assert report.issues[-1].code is ErrorCode.INVALID_PARAMETERS

    def test_self_intersection(self):
        bow_tie = Profile2D(main_contour=CurveLoop([(0, 0), (10, 10), (10, 0), (0, 10)]))
        report = validate_profile(bow_tie, concrete_c30)
        codes = [i.code for i in report.issues]
        assert ErrorCode.SELF_INTERSECTING in codes
        assert report.requires_review

    def test_clockwise_main(self):
        cw = Profile2D(main_contour=CurveLoop([(0, 0), (0, 40), (6, 40), (30, 0)]))
        report = validate_profile(cw, concrete_c30)
        assert "orientation" in _checks(report)

    def test_counter_clockwise_inner(self):
        profile = Profile2D(
            main_contour=CurveLoop([(0, 0), (30, 0), (6, 40), (0, 40)]),
            inner_contours=(CurveLoop([(2, 2), (4, 2), (4, 4), (2, 4)]),),
        )
        report = validate_profile(profile, concrete_c30)
        assert "orientation" in _checks(report)

    def test_inner_outside_main(self):
        profile = Profile2D.from_points(
            [(0, 0), (30, 0), (6, 40), (0, 40)],
            holes=[[(50, 5), (52, 5), (52, 7), (50, 7)]],
        )
        report = validate_profile(profile, concrete_c30)
        assert "containment" in _checks(report)

    def test_inner_bridging_notch(self):
        # Every hole vertex lies inside the U-shaped outline but the hole
        # spans the notch between its arms.
        profile = Profile2D.from_points(
            [(0, 0), (30, 0), (30, 20), (20, 20), (20, 5), (10, 5), (10, 20), (0, 20)],
            holes=[[(5, 10), (5, 15), (25, 15), (25, 10)]],
        )
        report = validate_profile(profile, concrete_c30)
        assert "containment" in _checks(report)
        assert report.requires_review

    def test_overlapping_inner_contours(self):
        profile = Profile2D.from_points(
            [(0, 0), (30, 0), (6, 40), (0, 40)],
            holes=[
                [(2, 2), (6, 2), (6, 6), (2, 6)],
                [(4, 4), (8, 4), (8, 8), (4, 8)],
            ],
        )
        report = validate_profile(profile, concrete_c30)
        messages = [i.message for i in report.issues if i.check == "containment"]
        assert any("overlap" in m for m in messages)
        assert report.requires_review

    def test_disjoint_inner_contours_accepted(self):
        profile = Profile2D.from_points(
            [(0, 0), (30, 0), (6, 40), (0, 40)],
            holes=[
                [(2, 2), (4, 2), (4, 4), (2, 4)],
                [(2, 10), (4, 10), (4, 12), (2, 12)],
            ],
        )
        report = validate_profile(profile, concrete_c30)
        assert "containment" not in _checks(report)
        assert not report.requires_review

    def test_degenerate_dimensions(self):
        tiny = Profile2D.from_points([(0, 0), (0.05, 0), (0.05, 0.05), (0, 0.05)])
        report = validate_profile(tiny, concrete_c30)
        codes = [i.code for i in report.issues if i.severity is Severity.CRITICAL]
        assert ErrorCode.DEGENERATE_DIMENSIONS in codes

    def test_empty_main_contour(self):
        report = validate_profile(Profile2D(), concrete_c30)
        assert _checks(report) == ["main_contour"]

    def test_failed_profile_stays_failed(self):
        failed = Profile2D.failed(ErrorCode.NO_INTERSECTION, name="far")
        report = validate_profile(failed, concrete_c30)
        assert report.requires_review
        assert report.issues[0].code is ErrorCode.NO_INTERSECTION
        assert report.apply(failed).status is ProfileStatus.FAILED


class TestWarnings:
    def test_long_edges(self):
        big = Profile2D.from_points([(0, 0), (40, 0), (8, 50), (0, 50)])
        report = validate_profile(big, concrete_c30)
        assert [(i.check, i.severity) for i in report.issues] == [
            ("edge_length", Severity.WARNING)
        ]
        assert report.score == pytest.approx(0.9)
        assert not report.requires_review

    def test_low_dam_height_and_aspect(self):
        low = Profile2D.from_points([(0, 0), (40, 0), (40, 2), (0, 2)])
        report = validate_profile(low, concrete_c30)
        checks = _checks(report)
        assert "height_range" in checks
        assert "aspect_ratio" in checks

    def test_zero_height_with_permissive_limits(self):
        flat = Profile2D.from_points([(0, 0), (10, 0), (20, 0)])
        config = ValidationConfig(min_height=0.0, min_base_width=0.0)
        report = validate_profile(flat, concrete_c30, config)
        assert report.features.height == 0.0
        aspect = [i for i in report.issues if i.check == "aspect_ratio"]
        assert aspect and "inf" in aspect[0].message

    def test_open_chains_warned(self):
        profile = Profile2D(
            main_contour=CurveLoop([(0, 0), (30, 0), (6, 40), (0, 40)]),
            open_chains=(((50.0, 0.0), (60.0, 0.0)),),
        )
        report = validate_profile(profile, concrete_c30)
        assert "open_chains" in _checks(report)

    def test_slope_out_of_range_is_info(self):
        steep = Profile2D.from_points([(0, 0), (12, 0), (6, 40), (0, 40)])
        report = validate_profile(steep, concrete_c30)
        slope = [i for i in report.issues if i.check == "downstream_slope"]
        assert slope and slope[0].severity is Severity.INFO

    def test_custom_thresholds(self):
        config = ValidationConfig(max_edge_length=100.0)
        big = Profile2D.from_points([(0, 0), (40, 0), (8, 50), (0, 50)])
        assert validate_profile(big, concrete_c30, config).issues == []


class TestScore:
    def test_score_floored_at_zero(self):
        report = ValidationReport(
            issues=[Issue("x", Severity.CRITICAL, "") for _ in range(3)]
        )
        assert report.score == 0.0

    def test_penalties(self):
        report = ValidationReport(issues=[
            Issue("a", Severity.WARNING, ""),
            Issue("b", Severity.INFO, ""),
        ])
        assert report.score == pytest.approx(1.0 - 0.1 - 0.02)
        assert report.status is ProfileStatus.VALIDATED

    def test_to_dict(self):
        data = validate_profile(_good_dam(), None).to_dict()
        assert data["requires_review"] is True
        assert data["issues"][0]["severity"] == "Critical"
