"""Geometry: B-Rep snapshot, cutting planes, plane/solid intersection, loops."""

from pygravdam.geometry.primitives import (
    Point2D,
    Point3D,
    Vector3D,
    Plane,
    BoundingBox3D,
    CurveLoop,
)
from pygravdam.geometry.brep import ArcDescriptor, CurveSegment, Edge, Face, Solid
from pygravdam.geometry.intersect import NoIntersection, intersect_solid
from pygravdam.geometry.loops import (
    LoopAssembly,
    LoopKind,
    StitchedLoop,
    assemble_loops,
)

__all__ = [
    "Point2D",
    "Point3D",
    "Vector3D",
    "Plane",
    "BoundingBox3D",
    "CurveLoop",
    "ArcDescriptor",
    "CurveSegment",
    "Edge",
    "Face",
    "Solid",
    "NoIntersection",
    "intersect_solid",
    "LoopAssembly",
    "LoopKind",
    "StitchedLoop",
    "assemble_loops",
]
