"""Geometric value types for section extraction.

Classes
-------
Point2D, Point3D, Vector3D
    Immutable coordinate primitives.
Plane
    Cutting plane with an orthonormal in-plane frame.
BoundingBox3D
    Axis-aligned box used for quick plane rejection.
CurveLoop
    Closed, read-only 2-D vertex loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
from numpy.typing import ArrayLike

from pygravdam.geometry.polygon import (
    points_in_polygon,
    polygon_centroid,
    signed_area,
)


# ======================================================================
# Points and vectors
# ======================================================================


@dataclass(frozen=True)
class Point2D:
    x: float
    y: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def distance_to(self, other: "Point2D") -> float:
        return float(np.hypot(self.x - other.x, self.y - other.y))

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))


@dataclass(frozen=True)
class Vector3D:
    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    @classmethod
    def of(cls, values: ArrayLike) -> "Vector3D":
        v = np.asarray(values, dtype=float)
        return cls(v[0], v[1], v[2])

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def dot(self, other: "Vector3D") -> float:
        return float(np.dot(self.as_array(), other.as_array()))

    def cross(self, other: "Vector3D") -> "Vector3D":
        return Vector3D.of(np.cross(self.as_array(), other.as_array()))

    def norm(self) -> float:
        return float(np.linalg.norm(self.as_array()))

    def normalized(self) -> "Vector3D":
        n = self.norm()
        if n < 1e-15:
            raise ValueError("Cannot normalise a zero-length vector.")
        return Vector3D.of(self.as_array() / n)

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


@dataclass(frozen=True)
class Point3D:
    x: float
    y: float
    z: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))
        object.__setattr__(self, "z", float(self.z))

    @classmethod
    def of(cls, values: ArrayLike) -> "Point3D":
        v = np.asarray(values, dtype=float)
        return cls(v[0], v[1], v[2])

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def distance_to(self, other: "Point3D") -> float:
        return float(np.linalg.norm(self.as_array() - other.as_array()))

    def __sub__(self, other: "Point3D") -> Vector3D:
        return Vector3D.of(self.as_array() - other.as_array())

    def __add__(self, vec: Vector3D) -> "Point3D":
        return Point3D.of(self.as_array() + vec.as_array())

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y, self.z))


# ======================================================================
# Plane
# ======================================================================


@dataclass(frozen=True)
class Plane:
    """Cutting plane with a local 2-D frame.

    Local 2-D coordinates of a point *p* are
    ``((p - origin) · x_axis, (p - origin) · y_axis)``.

    Args:
        origin: A point on the plane; origin of the local frame.
        normal: Unit normal.
        x_axis: Unit in-plane axis (local x, stream direction).
        y_axis: Unit in-plane axis orthogonal to *x_axis* (local y, up).

    Raises:
        ValueError: If the vectors are not unit length or not mutually
            orthogonal.
    """

    origin: Point3D
    normal: Vector3D
    x_axis: Vector3D
    y_axis: Vector3D

    def __post_init__(self) -> None:
        tol = 1e-6
        for name in ("normal", "x_axis", "y_axis"):
            v = getattr(self, name)
            if abs(v.norm() - 1.0) > tol:
                raise ValueError(f"Plane {name} must be a unit vector, got |v|={v.norm():.6g}.")
        if (
            abs(self.normal.dot(self.x_axis)) > tol
            or abs(self.normal.dot(self.y_axis)) > tol
            or abs(self.x_axis.dot(self.y_axis)) > tol
        ):
            raise ValueError("Plane normal and in-plane axes must be mutually orthogonal.")

    @classmethod
    def from_normal(
        cls,
        origin: Sequence[float] | Point3D,
        normal: Sequence[float] | Vector3D,
        up: Sequence[float] = (0.0, 0.0, 1.0),
    ) -> "Plane":
        """Build a section plane whose local y axis points "up".

        The local y axis is *up* projected onto the plane; the local x
        axis is ``normal × y``.  For a dam whose axis runs along world
        y, ``Plane.from_normal(o, (0, 1, 0))`` gives local x = world x
        (stream direction) and local y = world z.

        Raises:
            ValueError: If *up* is parallel to *normal*.
        """
        o = origin if isinstance(origin, Point3D) else Point3D.of(origin)
        n = np.asarray(tuple(normal), dtype=float)
        n = n / np.linalg.norm(n)
        u = np.asarray(up, dtype=float)
        y = u - np.dot(u, n) * n
        if np.linalg.norm(y) < 1e-9:
            raise ValueError("'up' must not be parallel to the plane normal.")
        y = y / np.linalg.norm(y)
        x = np.cross(n, y)
        return cls(o, Vector3D.of(n), Vector3D.of(x), Vector3D.of(y))

    def signed_distance(self, point: Point3D | ArrayLike) -> float:
        p = point.as_array() if isinstance(point, Point3D) else np.asarray(point, dtype=float)
        return float(np.dot(p - self.origin.as_array(), self.normal.as_array()))

    def signed_distances(self, points: ArrayLike) -> np.ndarray:
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        return (pts - self.origin.as_array()) @ self.normal.as_array()

    def project(self, point: Point3D | ArrayLike) -> Point2D:
        """Local 2-D coordinates of a 3-D point."""
        p = point.as_array() if isinstance(point, Point3D) else np.asarray(point, dtype=float)
        return Point2D(*self.project_many(p)[0])

    def project_many(self, points: ArrayLike) -> np.ndarray:
        """Project an ``(N, 3)`` array into the local frame, ``(N, 2)``."""
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        rel = pts - self.origin.as_array()
        basis = np.column_stack([self.x_axis.as_array(), self.y_axis.as_array()])
        return rel @ basis

    def lift(self, x: float, y: float) -> Point3D:
        """World coordinates of local point ``(x, y)``."""
        return Point3D.of(
            self.origin.as_array()
            + x * self.x_axis.as_array()
            + y * self.y_axis.as_array()
        )

    def to_dict(self) -> dict[str, list[float]]:
        return {
            "origin": list(self.origin),
            "normal": list(self.normal),
            "x_axis": list(self.x_axis),
            "y_axis": list(self.y_axis),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Sequence[float]]) -> "Plane":
        return cls(
            Point3D.of(data["origin"]),
            Vector3D.of(data["normal"]),
            Vector3D.of(data["x_axis"]),
            Vector3D.of(data["y_axis"]),
        )


# ======================================================================
# Bounding box
# ======================================================================


@dataclass(frozen=True)
class BoundingBox3D:
    minimum: Point3D
    maximum: Point3D

    @classmethod
    def of_points(cls, points: ArrayLike) -> "BoundingBox3D":
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        return cls(Point3D.of(pts.min(axis=0)), Point3D.of(pts.max(axis=0)))

    def corners(self) -> np.ndarray:
        """The eight corners, shape ``(8, 3)``."""
        lo = self.minimum.as_array()
        hi = self.maximum.as_array()
        return np.array([
            [x, y, z]
            for x in (lo[0], hi[0])
            for y in (lo[1], hi[1])
            for z in (lo[2], hi[2])
        ])

    @property
    def size(self) -> np.ndarray:
        return self.maximum.as_array() - self.minimum.as_array()

    @property
    def center(self) -> Point3D:
        return Point3D.of(0.5 * (self.minimum.as_array() + self.maximum.as_array()))

    def intersects_plane(self, plane: Plane, tolerance: float = 0.0) -> bool:
        """False if every corner lies strictly on one side of *plane*."""
        d = plane.signed_distances(self.corners())
        return not (np.all(d > tolerance) or np.all(d < -tolerance))


# ======================================================================
# Curve loop
# ======================================================================


class CurveLoop:
    """Closed sequence of 2-D points.

    The vertex array is stored closed (``points[-1] == points[0]``) and
    read-only.  An empty loop is allowed and stands for "no contour".

    Args:
        points: Vertex sequence ``[(x, y), ...]``.  The loop is closed
            automatically if the last vertex differs from the first.
    """

    def __init__(self, points: ArrayLike = ()) -> None:
        pts = np.asarray(points, dtype=float)
        if pts.size == 0:
            pts = np.zeros((0, 2))
        elif pts.ndim != 2 or pts.shape[1] != 2:
            raise ValueError("points must have shape (N, 2).")
        elif not np.array_equal(pts[0], pts[-1]):
            pts = np.vstack([pts, pts[:1]])
        pts = pts.copy()
        pts.flags.writeable = False
        self._points = pts

    @property
    def points(self) -> np.ndarray:
        return self._points

    @property
    def vertices(self) -> np.ndarray:
        """Distinct vertices (closing vertex dropped)."""
        return self._points[:-1]

    @property
    def is_empty(self) -> bool:
        return len(self._points) == 0

    def __len__(self) -> int:
        return len(self._points)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CurveLoop):
            return NotImplemented
        return np.array_equal(self._points, other._points)

    def __hash__(self) -> int:
        return hash(self._points.tobytes())

    @property
    def signed_area(self) -> float:
        return signed_area(self.vertices)

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def is_ccw(self) -> bool:
        return self.signed_area > 0

    @property
    def centroid(self) -> Point2D:
        return Point2D(*polygon_centroid(self.vertices))

    @property
    def perimeter(self) -> float:
        if len(self._points) < 2:
            return 0.0
        return float(np.sum(np.linalg.norm(np.diff(self._points, axis=0), axis=1)))

    def closure_gap(self) -> float:
        """Distance between the first and the last stored point."""
        if self.is_empty:
            return float("inf")
        return float(np.linalg.norm(self._points[0] - self._points[-1]))

    def edges(self) -> list[tuple[np.ndarray, np.ndarray]]:
        """``(start, end)`` vertex pairs, closing edge included."""
        return [(self._points[i], self._points[i + 1]) for i in range(len(self._points) - 1)]

    def reversed(self) -> "CurveLoop":
        return CurveLoop(self._points[::-1])

    def oriented(self, ccw: bool = True) -> "CurveLoop":
        """Return this loop with counter-clockwise (or clockwise) order."""
        if self.is_empty or self.is_ccw == ccw:
            return self
        return self.reversed()

    def contains(self, points: ArrayLike) -> np.ndarray:
        return points_in_polygon(points, self.vertices)

    def bounding_box(self) -> tuple[np.ndarray, np.ndarray]:
        if self.is_empty:
            return np.full(2, np.nan), np.full(2, np.nan)
        return self._points.min(axis=0), self._points.max(axis=0)

    def to_list(self) -> list[list[float]]:
        return [[float(x), float(y)] for x, y in self._points]

    def __repr__(self) -> str:
        return f"CurveLoop(n_points={len(self._points)}, area={self.area:.6g})"
