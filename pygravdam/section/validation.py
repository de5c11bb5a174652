"""Profile validation engine.

:func:`validate_profile` runs geometric-consistency and engineering
plausibility checks on an extracted profile and grades each finding as
``CRITICAL``, ``WARNING`` or ``INFO``.  Any critical finding flags the
profile for review.

Score
-----
``score = max(0, 1 − Σ penalty)`` with penalties of 0.5 per critical,
0.1 per warning and 0.02 per informational finding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from pygravdam.config import ValidationConfig
from pygravdam.errors import ErrorCode, GeometryExtractionError, Severity
from pygravdam.geometry.polygon import loops_cross, self_intersections
from pygravdam.materials.base import MaterialProperties
from pygravdam.section.features import ProfileFeatures, analyze_features
from pygravdam.section.profile import Profile2D, ProfileStatus

_logger = logging.getLogger(__name__)

PENALTIES: dict[Severity, float] = {
    Severity.CRITICAL: 0.5,
    Severity.WARNING: 0.1,
    Severity.INFO: 0.02,
}


@dataclass(frozen=True)
class Issue:
    """One validation finding.

    Attributes:
        check: Short identifier of the check that raised it.
        severity: Severity level.
        message: Human-readable description.
        code: Related error code, if any.
    """

    check: str
    severity: Severity
    message: str
    code: ErrorCode | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "check": self.check,
            "severity": self.severity.value,
            "message": self.message,
            "code": self.code.value if self.code is not None else None,
        }


@dataclass
class ValidationReport:
    """Outcome of :func:`validate_profile`.

    Attributes:
        issues: Findings in check order.
        features: Geometric features, when they could be computed.
    """

    issues: list[Issue] = field(default_factory=list)
    features: ProfileFeatures | None = None

    @property
    def score(self) -> float:
        penalty = sum(PENALTIES[i.severity] for i in self.issues)
        return max(0.0, 1.0 - penalty)

    @property
    def requires_review(self) -> bool:
        return any(i.severity is Severity.CRITICAL for i in self.issues)

    @property
    def status(self) -> ProfileStatus:
        return ProfileStatus.REQUIRES_REVIEW if self.requires_review else ProfileStatus.VALIDATED

    def by_severity(self, severity: Severity) -> list[Issue]:
        return [i for i in self.issues if i.severity is severity]

    def apply(self, profile: Profile2D) -> Profile2D:
        """Profile with its status set from this report.

        Failed profiles are returned unchanged.
        """
        if profile.is_failed:
            return profile
        return profile.with_status(self.status)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "requires_review": self.requires_review,
            "status": self.status.value,
            "issues": [i.to_dict() for i in self.issues],
        }


# ======================================================================
# Individual checks
# ======================================================================


def _check_contours(profile: Profile2D, config: ValidationConfig) -> list[Issue]:
    issues: list[Issue] = []
    main = profile.main_contour

    if main.closure_gap() > config.closure_tolerance:
        issues.append(Issue(
            "closure", Severity.CRITICAL,
            f"Main contour is not closed (gap {main.closure_gap():.4g}).",
            ErrorCode.OPEN_CONTOUR,
        ))
    if profile.open_chains:
        issues.append(Issue(
            "open_chains", Severity.WARNING,
            f"{len(profile.open_chains)} open chain(s) left over from extraction.",
            ErrorCode.OPEN_CONTOUR,
        ))

    if not main.is_ccw:
        issues.append(Issue(
            "orientation", Severity.CRITICAL, "Main contour is not counter-clockwise."
        ))
    for k, inner in enumerate(profile.inner_contours):
        if inner.is_ccw:
            issues.append(Issue(
                "orientation", Severity.CRITICAL, f"Inner contour {k} is not clockwise."
            ))

    if self_intersections(main.points):
        issues.append(Issue(
            "self_intersection", Severity.CRITICAL,
            "Main contour intersects itself.", ErrorCode.SELF_INTERSECTING,
        ))
    for k, inner in enumerate(profile.inner_contours):
        if self_intersections(inner.points):
            issues.append(Issue(
                "self_intersection", Severity.CRITICAL,
                f"Inner contour {k} intersects itself.", ErrorCode.SELF_INTERSECTING,
            ))

    inners = profile.inner_contours
    for k, inner in enumerate(inners):
        if not len(inner.vertices):
            continue
        if not np.all(main.contains(inner.vertices)) or loops_cross(inner.points, main.points):
            issues.append(Issue(
                "containment", Severity.CRITICAL,
                f"Inner contour {k} is not inside the main contour.",
            ))
        for j in range(k + 1, len(inners)):
            other = inners[j]
            if not len(other.vertices):
                continue
            if (
                loops_cross(inner.points, other.points)
                or np.any(inner.contains(other.vertices))
                or np.any(other.contains(inner.vertices))
            ):
                issues.append(Issue(
                    "containment", Severity.CRITICAL,
                    f"Inner contours {k} and {j} overlap.",
                ))
    return issues


def _check_dimensions(features: ProfileFeatures, config: ValidationConfig) -> list[Issue]:
    issues: list[Issue] = []
    if features.base_width < config.min_base_width:
        issues.append(Issue(
            "base_width", Severity.CRITICAL,
            f"Base width {features.base_width:.4g} is below {config.min_base_width}.",
            ErrorCode.DEGENERATE_DIMENSIONS,
        ))
    if features.height < config.min_height:
        issues.append(Issue(
            "height", Severity.CRITICAL,
            f"Height {features.height:.4g} is below {config.min_height}.",
            ErrorCode.DEGENERATE_DIMENSIONS,
        ))
        return issues

    if not config.typical_min_height <= features.height <= config.typical_max_height:
        issues.append(Issue(
            "height_range", Severity.WARNING,
            f"Height {features.height:.4g} is outside the typical range "
            f"{config.typical_min_height}-{config.typical_max_height}.",
        ))
    aspect = features.width / features.height if features.height > 0 else float("inf")
    if not config.min_aspect_ratio <= aspect <= config.max_aspect_ratio:
        issues.append(Issue(
            "aspect_ratio", Severity.WARNING,
            f"Width/height ratio {aspect:.3g} is outside "
            f"{config.min_aspect_ratio}-{config.max_aspect_ratio}.",
        ))

    lo, hi = config.upstream_slope_range
    if not lo <= features.upstream_slope <= hi:
        issues.append(Issue(
            "upstream_slope", Severity.INFO,
            f"Upstream slope {features.upstream_slope:.3g} is outside {lo}-{hi}.",
        ))
    lo, hi = config.downstream_slope_range
    if not lo <= features.downstream_slope <= hi:
        issues.append(Issue(
            "downstream_slope", Severity.INFO,
            f"Downstream slope {features.downstream_slope:.3g} is outside {lo}-{hi}.",
        ))
    return issues


def _check_edges(profile: Profile2D, config: ValidationConfig) -> list[Issue]:
    lengths = np.concatenate([
        np.linalg.norm(np.diff(loop.points, axis=0), axis=1)
        for loop in (profile.main_contour, *profile.inner_contours)
        if len(loop) > 1
    ])
    issues: list[Issue] = []
    n_long = int(np.sum(lengths > config.max_edge_length))
    if n_long:
        issues.append(Issue(
            "edge_length", Severity.WARNING,
            f"{n_long} edge(s) longer than {config.max_edge_length}.",
        ))
    n_short = int(np.sum(lengths < config.min_edge_length))
    if n_short:
        issues.append(Issue(
            "edge_length", Severity.INFO,
            f"{n_short} edge(s) shorter than {config.min_edge_length}.",
        ))
    return issues


def _check_material(material: MaterialProperties | None) -> list[Issue]:
    if material is None:
        return [Issue("material", Severity.CRITICAL, "No material assigned.")]
    if not material.is_valid():
        return [Issue(
            "material", Severity.CRITICAL,
            f"Material {material.name!r} has out-of-range properties.",
            ErrorCode.INVALID_PARAMETERS,
        )]
    return []


# ======================================================================
# Public entry point
# ======================================================================


def validate_profile(
    profile: Profile2D,
    material: MaterialProperties | None = None,
    config: ValidationConfig | None = None,
    logger: logging.Logger | None = None,
) -> ValidationReport:
    """Validate an extracted profile.

    Args:
        profile: Profile to check.
        material: Material assigned to the section; a missing or invalid
            material is a critical finding.
        config: Thresholds.
        logger: Optional log sink.

    Returns:
        :class:`ValidationReport`.  Use :meth:`ValidationReport.apply` to
        obtain the profile with its new status.
    """
    config = config or ValidationConfig()
    log = logger or _logger
    report = ValidationReport()

    if profile.is_failed:
        reason = profile.reason.value if profile.reason is not None else "unknown"
        report.issues.append(Issue(
            "extraction", Severity.CRITICAL,
            f"Extraction failed: {reason}.", profile.reason,
        ))
        return report

    if profile.main_contour.is_empty or len(profile.main_contour.vertices) < 3:
        report.issues.append(Issue(
            "main_contour", Severity.CRITICAL,
            "Main contour is missing or has fewer than 3 points.",
            ErrorCode.DEGENERATE_DIMENSIONS,
        ))
        report.issues.extend(_check_material(material))
        return report

    report.issues.extend(_check_contours(profile, config))
    try:
        report.features = analyze_features(profile, config.closure_tolerance)
    except GeometryExtractionError as exc:
        report.issues.append(Issue("features", Severity.CRITICAL, str(exc), exc.code))
    else:
        report.issues.extend(_check_dimensions(report.features, config))
    report.issues.extend(_check_edges(profile, config))
    report.issues.extend(_check_material(material))

    log.info(
        "Validated section %r: score %.2f, %d issue(s)%s",
        profile.name, report.score, len(report.issues),
        ", review required" if report.requires_review else "",
    )
    return report
