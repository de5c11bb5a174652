"""Planar polygon routines on ``(N, 2)`` vertex arrays.

All functions accept either an open vertex list or a closed one (first
vertex repeated at the end); the repeated vertex contributes nothing to
areas or moments.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike


def _as_vertices(points: ArrayLike) -> np.ndarray:
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        return np.zeros((0, 2))
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("points must have shape (N, 2).")
    return pts


def signed_area(points: ArrayLike) -> float:
    """Shoelace formula.  Positive for counter-clockwise vertex order."""
    pts = _as_vertices(points)
    if len(pts) < 3:
        return 0.0
    x = pts[:, 0]
    y = pts[:, 1]
    return float(0.5 * (np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


def polygon_centroid(points: ArrayLike) -> np.ndarray:
    """Area-weighted centroid of a simple polygon.

    Falls back to the vertex mean for polygons of (near) zero area.
    """
    pts = _as_vertices(points)
    if len(pts) == 0:
        return np.array([np.nan, np.nan])
    A = signed_area(pts)
    if abs(A) < 1e-15:
        return pts.mean(axis=0)
    x, y = pts[:, 0], pts[:, 1]
    x1, y1 = np.roll(x, -1), np.roll(y, -1)
    cross = x * y1 - x1 * y
    cx = np.sum((x + x1) * cross) / (6.0 * A)
    cy = np.sum((y + y1) * cross) / (6.0 * A)
    return np.array([cx, cy])


def second_moments(points: ArrayLike) -> tuple[float, float, float]:
    """Second moments of area about the coordinate axes.

    Returns:
        ``(Ixx, Iyy, Ixy)`` with the sign of the signed area, so that
        clockwise holes subtract naturally when summed with a
        counter-clockwise outer boundary.
    """
    pts = _as_vertices(points)
    if len(pts) < 3:
        return 0.0, 0.0, 0.0
    x, y = pts[:, 0], pts[:, 1]
    x1, y1 = np.roll(x, -1), np.roll(y, -1)
    cross = x * y1 - x1 * y
    Ixx = np.sum((y * y + y * y1 + y1 * y1) * cross) / 12.0
    Iyy = np.sum((x * x + x * x1 + x1 * x1) * cross) / 12.0
    Ixy = np.sum((x * y1 + 2 * x * y + 2 * x1 * y1 + x1 * y) * cross) / 24.0
    return float(Ixx), float(Iyy), float(Ixy)


def points_in_polygon(points: ArrayLike, vertices: ArrayLike) -> np.ndarray:
    """Ray-casting point-in-polygon test.

    Args:
        points: Query points, shape ``(M, 2)``.
        vertices: Polygon vertices, shape ``(N, 2)``.

    Returns:
        Boolean array of shape ``(M,)``.
    """
    pts = np.atleast_2d(np.asarray(points, dtype=float))
    poly = _as_vertices(vertices)
    n = len(poly)
    inside = np.zeros(len(pts), dtype=bool)
    if n < 3:
        return inside
    vx = poly[:, 0]
    vy = poly[:, 1]
    for i in range(n):
        j = (i + 1) % n
        yi, yj = vy[i], vy[j]
        xi, xj = vx[i], vx[j]
        cond = ((yi > pts[:, 1]) != (yj > pts[:, 1])) & (
            pts[:, 0] < (xj - xi) * (pts[:, 1] - yi) / (yj - yi + 1e-300) + xi
        )
        inside ^= cond
    return inside


def _orient(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> float:
    return float((b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0]))


def _on_segment(a: np.ndarray, b: np.ndarray, p: np.ndarray, tol: float) -> bool:
    return (
        min(a[0], b[0]) - tol <= p[0] <= max(a[0], b[0]) + tol
        and min(a[1], b[1]) - tol <= p[1] <= max(a[1], b[1]) + tol
    )


def segments_intersect(
    p1: ArrayLike,
    p2: ArrayLike,
    p3: ArrayLike,
    p4: ArrayLike,
    tol: float = 1e-12,
) -> np.ndarray | None:
    """Intersection of segments ``p1-p2`` and ``p3-p4``.

    Returns:
        An intersection point (the midpoint of the overlap for collinear
        overlapping segments) or ``None`` if the segments do not meet.
    """
    a, b = np.asarray(p1, dtype=float), np.asarray(p2, dtype=float)
    c, d = np.asarray(p3, dtype=float), np.asarray(p4, dtype=float)
    d1 = _orient(c, d, a)
    d2 = _orient(c, d, b)
    d3 = _orient(a, b, c)
    d4 = _orient(a, b, d)

    if ((d1 > tol and d2 < -tol) or (d1 < -tol and d2 > tol)) and (
        (d3 > tol and d4 < -tol) or (d3 < -tol and d4 > tol)
    ):
        t = d1 / (d1 - d2)
        return a + t * (b - a)

    # Touching and collinear cases
    touching = []
    if abs(d1) <= tol and _on_segment(c, d, a, tol):
        touching.append(a)
    if abs(d2) <= tol and _on_segment(c, d, b, tol):
        touching.append(b)
    if abs(d3) <= tol and _on_segment(a, b, c, tol):
        touching.append(c)
    if abs(d4) <= tol and _on_segment(a, b, d, tol):
        touching.append(d)
    if touching:
        return np.mean(touching, axis=0)
    return None


def self_intersections(points: ArrayLike, tol: float = 1e-9) -> list[np.ndarray]:
    """Pairwise test of the edges of a closed polygon.

    Adjacent edges (sharing a vertex) are skipped, including the pair
    formed by the last and first edge.  O(n²) in the vertex count.

    Args:
        points: Closed or open vertex array.
        tol: Orientation tolerance.

    Returns:
        List of intersection points (empty for a simple polygon).
    """
    pts = _as_vertices(points)
    if len(pts) > 1 and np.allclose(pts[0], pts[-1]):
        pts = pts[:-1]
    n = len(pts)
    if n < 4:
        return []

    hits: list[np.ndarray] = []
    for i in range(n):
        a, b = pts[i], pts[(i + 1) % n]
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue
            c, d = pts[j], pts[(j + 1) % n]
            hit = segments_intersect(a, b, c, d, tol)
            if hit is not None:
                hits.append(hit)
    return hits


def remove_duplicate_vertices(points: ArrayLike, tol: float) -> np.ndarray:
    """Drop consecutive vertices closer than *tol*."""
    pts = _as_vertices(points)
    if len(pts) == 0:
        return pts
    keep = [pts[0]]
    for p in pts[1:]:
        if np.linalg.norm(p - keep[-1]) >= tol:
            keep.append(p)
    return np.array(keep)


def loops_cross(points_a: ArrayLike, points_b: ArrayLike, tol: float = 1e-9) -> bool:
    """True if any edge of polygon *a* meets any edge of polygon *b*.

    Touching counts as meeting.  O(n·m) in the vertex counts.
    """
    a = _as_vertices(points_a)
    b = _as_vertices(points_b)
    if len(a) < 2 or len(b) < 2:
        return False
    if not np.allclose(a[0], a[-1]):
        a = np.vstack([a, a[:1]])
    if not np.allclose(b[0], b[-1]):
        b = np.vstack([b, b[:1]])
    for p, q in zip(a[:-1], a[1:]):
        for r, s in zip(b[:-1], b[1:]):
            if segments_intersect(p, q, r, s, tol) is not None:
                return True
    return False
