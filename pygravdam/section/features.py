"""Geometric features of a dam profile.

:func:`analyze_features` derives the quantities the load assembler and
the validation engine need: area and centroid (holes subtracted), overall
dimensions, base and crest widths, toe and crest-corner positions, face
slopes and centroidal second moments of area.

Conventions
-----------
Local x is the stream direction with the upstream face on the left, local
y points up and the dam base is the lowest elevation of the main contour.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from pygravdam.errors import ErrorCode, GeometryExtractionError
from pygravdam.geometry.polygon import polygon_centroid, second_moments, signed_area
from pygravdam.geometry.primitives import CurveLoop, Point2D
from pygravdam.section.profile import Profile2D


@dataclass(frozen=True)
class ProfileFeatures:
    """Derived geometry of a profile.

    Attributes:
        area: Net cross-section area (main minus inner contours).
        centroid: Area-weighted centroid with holes subtracted.
        width: Horizontal extent of the main contour.
        height: Vertical extent of the main contour.
        base_elevation: Lowest y of the main contour.
        crest_elevation: Highest y of the main contour.
        base_width: Horizontal extent of the vertices at the base.
        crest_width: Horizontal extent of the vertices at the crest.
        upstream_toe: Leftmost base vertex (heel).
        downstream_toe: Rightmost base vertex (toe).
        upstream_crest: Leftmost crest vertex.
        downstream_crest: Rightmost crest vertex.
        upstream_slope: Horizontal run per unit height of the upstream
            face (positive when the face leans upstream at the base).
        downstream_slope: Horizontal run per unit height of the
            downstream face.
        ixx, iyy, ixy: Centroidal second moments of area.
        perimeter: Length of the main contour plus inner contours.
    """

    area: float
    centroid: Point2D
    width: float
    height: float
    base_elevation: float
    crest_elevation: float
    base_width: float
    crest_width: float
    upstream_toe: Point2D
    downstream_toe: Point2D
    upstream_crest: Point2D
    downstream_crest: Point2D
    upstream_slope: float
    downstream_slope: float
    ixx: float = 0.0
    iyy: float = 0.0
    ixy: float = 0.0
    perimeter: float = 0.0
    n_inner: int = 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in self.__dict__.items():
            out[key] = list(value) if isinstance(value, Point2D) else value
        return out


def _loops(profile: Profile2D) -> tuple[CurveLoop, list[CurveLoop]]:
    """Orientation-normalised main and inner contours."""
    main = profile.main_contour
    if main.is_empty or len(main.vertices) < 3:
        raise GeometryExtractionError(
            ErrorCode.DEGENERATE_DIMENSIONS, "Profile has no usable main contour."
        )
    return main.oriented(ccw=True), [c.oriented(ccw=False) for c in profile.inner_contours]


def profile_area(profile: Profile2D) -> float:
    """Net area: main contour minus inner contours."""
    main, inner = _loops(profile)
    return signed_area(main.vertices) + sum(signed_area(c.vertices) for c in inner)


def profile_centroid(profile: Profile2D) -> Point2D:
    """Area-weighted centroid with inner contours subtracted."""
    main, inner = _loops(profile)
    total = 0.0
    moment = np.zeros(2)
    for loop in [main] + inner:
        a = signed_area(loop.vertices)
        total += a
        moment += a * polygon_centroid(loop.vertices)
    if abs(total) < 1e-15:
        return main.centroid
    return Point2D(*(moment / total))


def _extreme_points(pts: np.ndarray, level: float, tol: float) -> tuple[np.ndarray, np.ndarray]:
    """Leftmost and rightmost vertices within *tol* of elevation *level*."""
    band = pts[np.abs(pts[:, 1] - level) <= tol]
    return band[np.argmin(band[:, 0])], band[np.argmax(band[:, 0])]


def analyze_features(profile: Profile2D, tolerance: float = 1e-3) -> ProfileFeatures:
    """Compute the geometric features of *profile*.

    Args:
        profile: Extracted profile.
        tolerance: Elevation tolerance used to collect base and crest
            vertices.

    Returns:
        :class:`ProfileFeatures`.

    Raises:
        GeometryExtractionError: If the profile has no main contour with
            at least three vertices.
    """
    main, inner = _loops(profile)
    pts = main.vertices
    x_min, y_min = pts.min(axis=0)
    x_max, y_max = pts.max(axis=0)
    height = float(y_max - y_min)

    heel, toe = _extreme_points(pts, y_min, tolerance)
    crest_up, crest_dn = _extreme_points(pts, y_max, tolerance)

    area = profile_area(profile)
    centroid = profile_centroid(profile)

    ixx = iyy = ixy = 0.0
    for loop in [main] + inner:
        a, b, c = second_moments(loop.vertices)
        ixx += a
        iyy += b
        ixy += c
    cx, cy = centroid.x, centroid.y
    ixx -= area * cy * cy
    iyy -= area * cx * cx
    ixy -= area * cx * cy

    if height > 0:
        upstream_slope = float(crest_up[0] - heel[0]) / height
        downstream_slope = float(toe[0] - crest_dn[0]) / height
    else:
        upstream_slope = downstream_slope = 0.0

    return ProfileFeatures(
        area=float(area),
        centroid=centroid,
        width=float(x_max - x_min),
        height=height,
        base_elevation=float(y_min),
        crest_elevation=float(y_max),
        base_width=float(toe[0] - heel[0]),
        crest_width=float(crest_dn[0] - crest_up[0]),
        upstream_toe=Point2D(*heel),
        downstream_toe=Point2D(*toe),
        upstream_crest=Point2D(*crest_up),
        downstream_crest=Point2D(*crest_dn),
        upstream_slope=upstream_slope,
        downstream_slope=downstream_slope,
        ixx=float(ixx),
        iyy=float(iyy),
        ixy=float(ixy),
        perimeter=main.perimeter + sum(c.perimeter for c in inner),
        n_inner=len(inner),
    )
