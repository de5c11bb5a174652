"""Plane / solid intersection.

:func:`intersect_solid` cuts every face of a :class:`~pygravdam.geometry.brep.Solid`
with a cutting :class:`~pygravdam.geometry.primitives.Plane` and returns the
raw, unordered 3-D intersection segments.

Classification uses the signed distance of each vertex to the plane with
tolerance ε1.  A vertex lying on the plane is treated as being on the
positive side, so a crossing through a vertex is counted exactly once and
a vertex that merely touches the plane yields a zero-length pair that is
discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from pygravdam.config import ExtractionConfig
from pygravdam.geometry.brep import CurveSegment, Face, Solid
from pygravdam.geometry.primitives import Plane, Point3D

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoIntersection:
    """Explicit "nothing there" signal.

    Distinguishes a plane that misses the solid from a successful
    intersection.  Falsy, so ``if not result`` reads naturally.
    """

    reason: str = "Cutting plane does not intersect the solid."

    def __bool__(self) -> bool:
        return False


def intersect_solid(
    solid: Solid,
    plane: Plane,
    config: ExtractionConfig | None = None,
    logger: logging.Logger | None = None,
) -> list[CurveSegment] | NoIntersection:
    """Intersect all faces of *solid* with *plane*.

    Args:
        solid: Boundary-representation snapshot.
        plane: Cutting plane.
        config: Extraction tolerances.
        logger: Optional log sink; defaults to the module logger.

    Returns:
        Unordered list of 3-D segments in deterministic face order, or
        :class:`NoIntersection` if the plane misses the solid.
    """
    config = config or ExtractionConfig()
    log = logger or _logger
    eps = config.plane_tolerance

    bbox = solid.bounding_box(config.arc_samples)
    if not bbox.intersects_plane(plane, eps):
        log.debug("Plane misses bounding box of solid %r", solid.name)
        return NoIntersection("Cutting plane lies outside the solid's extent.")

    segments: list[CurveSegment] = []
    for face in solid.faces:
        segments.extend(intersect_face(face, plane, config))

    segments = deduplicate_segments(segments, eps)
    if not segments:
        return NoIntersection("Cutting plane only touches the solid.")

    log.debug("Plane cut %d faces into %d segments", len(solid.faces), len(segments))
    return segments


def intersect_face(
    face: Face,
    plane: Plane,
    config: ExtractionConfig,
) -> list[CurveSegment]:
    """Intersection segments of a single face with *plane*."""
    eps = config.plane_tolerance
    samples = config.arc_samples
    n_plane = plane.normal.as_array()

    if face.is_planar:
        n_face = face.normal.as_array()
        if np.linalg.norm(np.cross(n_face, n_plane)) < eps:
            # Parallel face: either it lies on the plane or it is missed
            d = plane.signed_distances(face.boundary_points(samples))
            if np.all(np.abs(d) < eps):
                return list(face.edges)
            return []

    out: list[CurveSegment] = []

    # Edges lying entirely on the plane are emitted whole
    for edge in face.edges:
        d = plane.signed_distances(edge.discretize(samples))
        if np.all(np.abs(d) < eps):
            out.append(edge)

    if not face.is_planar and face.triangles:
        for tri in face.triangles:
            pts = np.array([p.as_array() for p in tri])
            crossings = _crossing_points(
                [(pts[i], pts[(i + 1) % 3]) for i in range(3)], plane, eps
            )
            out.extend(_pair_points(crossings, None, eps))
        return out

    polylines = [edge.discretize(samples) for edge in face.edges]
    sub_edges = [
        (poly[k], poly[k + 1]) for poly in polylines for k in range(len(poly) - 1)
    ]
    crossings = _crossing_points(sub_edges, plane, eps)

    if face.is_planar:
        n_face = face.normal.as_array()
    else:
        n_face = _newell_normal(np.vstack(polylines)) if polylines else None

    direction = None
    if n_face is not None:
        line = np.cross(n_face, n_plane)
        if np.linalg.norm(line) > eps:
            direction = line / np.linalg.norm(line)

    out.extend(_pair_points(crossings, direction, eps))
    return out


def _crossing_points(
    edges: list[tuple[np.ndarray, np.ndarray]],
    plane: Plane,
    eps: float,
) -> list[np.ndarray]:
    """Linear-interpolation crossing points, in traversal order."""
    points: list[np.ndarray] = []
    for p, q in edges:
        dp, dq = plane.signed_distances(np.array([p, q]))
        side_p = dp >= -eps
        side_q = dq >= -eps
        if side_p == side_q:
            continue
        if abs(dp) < eps:
            points.append(np.array(p, dtype=float))
        elif abs(dq) < eps:
            points.append(np.array(q, dtype=float))
        else:
            t = dp / (dp - dq)
            points.append(p + t * (q - p))
    return points


def _pair_points(
    points: list[np.ndarray],
    direction: np.ndarray | None,
    eps: float,
) -> list[CurveSegment]:
    """Connect crossing points pairwise.

    Points are ordered along *direction* (the face / plane intersection
    line) when it is known, otherwise kept in traversal order.
    """
    if len(points) < 2:
        return []
    pts = np.array(points)
    if direction is not None:
        order = np.argsort(pts @ direction, kind="stable")
        pts = pts[order]

    segments = []
    for k in range(0, len(pts) - 1, 2):
        a, b = pts[k], pts[k + 1]
        if np.linalg.norm(b - a) < eps:
            continue
        segments.append(CurveSegment(Point3D.of(a), Point3D.of(b)))
    return segments


def _newell_normal(points: np.ndarray) -> np.ndarray | None:
    """Best-fit normal of a (possibly non-planar) closed polygon."""
    if len(points) < 3:
        return None
    nxt = np.roll(points, -1, axis=0)
    n = np.array([
        np.sum((points[:, 1] - nxt[:, 1]) * (points[:, 2] + nxt[:, 2])),
        np.sum((points[:, 2] - nxt[:, 2]) * (points[:, 0] + nxt[:, 0])),
        np.sum((points[:, 0] - nxt[:, 0]) * (points[:, 1] + nxt[:, 1])),
    ])
    norm = np.linalg.norm(n)
    if norm < 1e-12:
        return None
    return n / norm


def _same_segment(a: CurveSegment, b: CurveSegment, tol: float) -> bool:
    if (a.arc is None) != (b.arc is None):
        return False
    if a.arc is not None and b.arc is not None:
        if a.arc.center.distance_to(b.arc.center) > tol:
            return False
    same = a.start.distance_to(b.start) <= tol and a.end.distance_to(b.end) <= tol
    flipped = a.start.distance_to(b.end) <= tol and a.end.distance_to(b.start) <= tol
    return same or flipped


def deduplicate_segments(
    segments: list[CurveSegment],
    tol: float,
) -> list[CurveSegment]:
    """Drop zero-length segments and duplicates (either direction).

    The first occurrence wins, so the output order is deterministic.
    """
    unique: list[CurveSegment] = []
    for seg in segments:
        if seg.arc is None and seg.start.distance_to(seg.end) < tol:
            continue
        if any(_same_segment(seg, u, tol) for u in unique):
            continue
        unique.append(seg)
    return unique
