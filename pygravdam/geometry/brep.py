"""Immutable boundary-representation snapshot of a solid.

The snapshot is the only geometry the core ever sees: a CAD host adapter
copies faces, edges and curve descriptors into these value types and no
host object crosses that line.

Classes
-------
ArcDescriptor
    Circular-arc metadata attached to an edge.
CurveSegment
    Straight or circular edge between two points (alias ``Edge``).
Face
    Bounded surface patch with ordered boundary edges.
Solid
    Collection of faces; serialisable to plain dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np
from numpy.typing import ArrayLike

from pygravdam.errors import ErrorCode, GeometryExtractionError
from pygravdam.geometry.polygon import signed_area
from pygravdam.geometry.primitives import BoundingBox3D, Point3D, Vector3D


@dataclass(frozen=True)
class ArcDescriptor:
    """Circular arc running from an edge's start point to its end point.

    Args:
        center: Arc centre.
        radius: Arc radius.
        axis: Optional unit axis.  The arc runs counter-clockwise about
            it (right-hand rule).  Without an axis the minor arc is used.
    """

    center: Point3D
    radius: float
    axis: Vector3D | None = None


def discretize_arc(
    start: ArrayLike,
    end: ArrayLike,
    arc: ArcDescriptor,
    samples: int = 10,
) -> np.ndarray:
    """Sample a circular arc into ``samples + 1`` points.

    The first and last samples are exactly *start* and *end*.  This is an
    explicit polyline approximation of the arc.

    Raises:
        GeometryExtractionError: If the arc plane is undefined (start,
            centre and end collinear and no axis given) or the radius is
            zero.
    """
    s = np.asarray(start, dtype=float)
    e = np.asarray(end, dtype=float)
    c = arc.center.as_array()
    u0 = s - c
    if np.linalg.norm(u0) < 1e-12 or arc.radius <= 0:
        raise GeometryExtractionError(
            ErrorCode.DEGENERATE_DIMENSIONS, "Arc has zero radius."
        )
    v = e - c
    if arc.axis is not None:
        n = arc.axis.as_array()
        n = n / np.linalg.norm(n)
    else:
        n = np.cross(u0, v)
        if np.linalg.norm(n) < 1e-12:
            raise GeometryExtractionError(
                ErrorCode.DEGENERATE_DIMENSIONS,
                "Arc plane is undefined: give an axis for half or full circles.",
            )
        n = n / np.linalg.norm(n)

    e1 = u0 / np.linalg.norm(u0)
    e2 = np.cross(n, e1)
    theta = float(np.arctan2(np.dot(v, e2), np.dot(v, e1)))
    if theta <= 1e-12:
        theta += 2.0 * np.pi

    t = np.linspace(0.0, theta, samples + 1)
    pts = c + arc.radius * (np.outer(np.cos(t), e1) + np.outer(np.sin(t), e2))
    pts[0] = s
    pts[-1] = e
    return pts


@dataclass(frozen=True)
class CurveSegment:
    """A boundary edge or an intersection segment.

    Args:
        start: Start point.
        end: End point.
        arc: Optional arc metadata; ``None`` for a straight segment.
    """

    start: Point3D
    end: Point3D
    arc: ArcDescriptor | None = None

    @property
    def is_arc(self) -> bool:
        return self.arc is not None

    def discretize(self, samples: int = 10) -> np.ndarray:
        """Polyline approximation, shape ``(k, 3)``."""
        if self.arc is None:
            return np.array([self.start.as_array(), self.end.as_array()])
        return discretize_arc(self.start.as_array(), self.end.as_array(), self.arc, samples)

    def length(self, samples: int = 10) -> float:
        pts = self.discretize(samples)
        return float(np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1)))

    def reversed(self) -> "CurveSegment":
        arc = self.arc
        if arc is not None and arc.axis is not None:
            arc = ArcDescriptor(arc.center, arc.radius, Vector3D.of(-arc.axis.as_array()))
        return CurveSegment(self.end, self.start, arc)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"start": list(self.start), "end": list(self.end)}
        if self.arc is not None:
            data["arc"] = {
                "center": list(self.arc.center),
                "radius": self.arc.radius,
                "axis": list(self.arc.axis) if self.arc.axis is not None else None,
            }
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CurveSegment":
        arc = None
        if data.get("arc"):
            a = data["arc"]
            arc = ArcDescriptor(
                center=Point3D.of(a["center"]),
                radius=float(a["radius"]),
                axis=Vector3D.of(a["axis"]) if a.get("axis") is not None else None,
            )
        return cls(Point3D.of(data["start"]), Point3D.of(data["end"]), arc)


Edge = CurveSegment


@dataclass(frozen=True)
class Face:
    """A face of the solid.

    Args:
        edges: Ordered boundary edges (one or more loops, in sequence).
        is_planar: Planarity flag.
        normal: Unit normal; required for planar faces.
        triangles: Optional tessellation of a curved face as a sequence
            of vertex triples.
    """

    edges: tuple[CurveSegment, ...]
    is_planar: bool = True
    normal: Vector3D | None = None
    triangles: tuple[tuple[Point3D, Point3D, Point3D], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "edges", tuple(self.edges))
        object.__setattr__(self, "triangles", tuple(tuple(t) for t in self.triangles))
        if self.is_planar and self.normal is None:
            raise ValueError("A planar face requires a unit normal.")

    def boundary_points(self, samples: int = 10) -> np.ndarray:
        """All discretised boundary points, shape ``(k, 3)``."""
        chunks = [e.discretize(samples) for e in self.edges]
        if self.triangles:
            chunks.append(np.array([[p.as_array() for p in t] for t in self.triangles]).reshape(-1, 3))
        if not chunks:
            return np.zeros((0, 3))
        return np.vstack(chunks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_planar": self.is_planar,
            "normal": list(self.normal) if self.normal is not None else None,
            "edges": [e.to_dict() for e in self.edges],
            "triangles": [[list(p) for p in t] for t in self.triangles],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Face":
        return cls(
            edges=tuple(CurveSegment.from_dict(e) for e in data["edges"]),
            is_planar=bool(data.get("is_planar", True)),
            normal=Vector3D.of(data["normal"]) if data.get("normal") is not None else None,
            triangles=tuple(
                tuple(Point3D.of(p) for p in t) for t in data.get("triangles", ())
            ),
        )


@dataclass(frozen=True)
class Solid:
    """Boundary-representation snapshot of a solid.

    Args:
        faces: The bounding faces.
        name: Optional identifier (e.g. the host element id).
    """

    faces: tuple[Face, ...]
    name: str = ""
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "faces", tuple(self.faces))

    def bounding_box(self, samples: int = 10) -> BoundingBox3D:
        pts = [f.boundary_points(samples) for f in self.faces]
        pts = [p for p in pts if len(p)]
        if not pts:
            raise GeometryExtractionError(
                ErrorCode.DEGENERATE_DIMENSIONS, "Solid has no boundary points."
            )
        return BoundingBox3D.of_points(np.vstack(pts))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "faces": [f.to_dict() for f in self.faces]}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Solid":
        return cls(
            faces=tuple(Face.from_dict(f) for f in data["faces"]),
            name=str(data.get("name", "")),
        )

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def extrude(
        cls,
        outline: Sequence[tuple[float, float]],
        length: float,
        holes: Sequence[Sequence[tuple[float, float]]] = (),
        arcs: Mapping[int, tuple[float, float]] | None = None,
        arc_samples: int = 16,
        name: str = "",
    ) -> "Solid":
        """Prism from a 2-D dam outline.

        The outline lives in the world (x, z) plane (x = stream
        direction, z = elevation) and is extruded along +y from
        ``y = 0`` to ``y = length``.

        Args:
            outline: Outer boundary vertices ``[(x, z), ...]``.
            length: Extrusion length along the dam axis.
            holes: Inner boundaries (galleries), each ``[(x, z), ...]``.
            arcs: Maps an outline edge index *i* (edge from vertex *i* to
                *i + 1*) to an arc centre ``(x, z)``; the edge becomes the
                minor arc about that centre and its side face is curved.
            arc_samples: Tessellation density of curved side faces.
            name: Solid name.
        """
        arcs = dict(arcs or {})
        outer = np.asarray(outline, dtype=float)
        outer_arcs = arcs
        if signed_area(outer) < 0:
            # Reverse to counter-clockwise and remap arc edge indices
            n = len(outer)
            outer = outer[::-1]
            outer_arcs = {n - 2 - i if i < n - 1 else n - 1: c for i, c in arcs.items()}

        loops: list[tuple[np.ndarray, dict[int, tuple[float, float]]]] = [(outer, outer_arcs)]
        for h in holes:
            hole = np.asarray(h, dtype=float)
            if signed_area(hole) > 0:
                hole = hole[::-1]
            loops.append((hole, {}))

        def P(x: float, z: float, y: float) -> Point3D:
            return Point3D(x, y, z)

        faces: list[Face] = []
        cap_edges: dict[float, list[CurveSegment]] = {0.0: [], float(length): []}

        for loop, loop_arcs in loops:
            n = len(loop)
            for i in range(n):
                a = loop[i]
                b = loop[(i + 1) % n]
                center = loop_arcs.get(i)
                for y in cap_edges:
                    arc = None
                    if center is not None:
                        c3 = P(center[0], center[1], y)
                        arc = ArcDescriptor(c3, float(np.hypot(a[0] - center[0], a[1] - center[1])))
                    cap_edges[y].append(CurveSegment(P(*a, y), P(*b, y), arc))

                a0, b0 = P(*a, 0.0), P(*b, 0.0)
                a1, b1 = P(*a, length), P(*b, length)
                if center is None:
                    d = b - a
                    normal = Vector3D(d[1], 0.0, -d[0]).normalized()
                    faces.append(Face(
                        edges=(
                            CurveSegment(a0, b0),
                            CurveSegment(b0, b1),
                            CurveSegment(b1, a1),
                            CurveSegment(a1, a0),
                        ),
                        is_planar=True,
                        normal=normal,
                    ))
                else:
                    bottom = cap_edges[0.0][-1]
                    top = cap_edges[float(length)][-1]
                    ring0 = bottom.discretize(arc_samples)
                    ring1 = top.discretize(arc_samples)
                    triangles = []
                    for k in range(len(ring0) - 1):
                        p00, p01 = Point3D.of(ring0[k]), Point3D.of(ring0[k + 1])
                        p10, p11 = Point3D.of(ring1[k]), Point3D.of(ring1[k + 1])
                        triangles.append((p00, p01, p11))
                        triangles.append((p00, p11, p10))
                    faces.append(Face(
                        edges=(bottom, CurveSegment(b0, b1), top.reversed(), CurveSegment(a1, a0)),
                        is_planar=False,
                        triangles=tuple(triangles),
                    ))

        faces.insert(0, Face(edges=tuple(cap_edges[0.0]), normal=Vector3D(0.0, -1.0, 0.0)))
        faces.insert(1, Face(edges=tuple(cap_edges[float(length)]), normal=Vector3D(0.0, 1.0, 0.0)))
        return cls(faces=tuple(faces), name=name)
