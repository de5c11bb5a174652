"""Section extraction pipeline.

Glue between the plane / solid intersector and the loop assembler.  The
pipeline never raises for geometric reasons: every failure becomes a
``FAILED`` :class:`~pygravdam.section.profile.Profile2D` carrying its
reason code, so batch runs over many sections keep going.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from pygravdam.config import ExtractionConfig
from pygravdam.errors import ErrorCode, GeometryExtractionError
from pygravdam.geometry.brep import Solid
from pygravdam.geometry.intersect import NoIntersection, intersect_solid
from pygravdam.geometry.loops import LoopAssembly, assemble_loops
from pygravdam.geometry.primitives import Plane
from pygravdam.section.profile import Profile2D, ProfileStatus

_logger = logging.getLogger(__name__)


def build_profile(
    assembly: LoopAssembly,
    plane: Plane | None = None,
    name: str = "",
) -> Profile2D:
    """Turn a loop assembly into a profile.

    An assembly with no closed loop gives an empty ``FAILED`` profile
    with reason ``OPEN_CONTOUR``.
    """
    open_chains = tuple(
        tuple((float(x), float(y)) for x, y in chain.points)
        for chain in assembly.open_chains
    )
    if assembly.main is None:
        return Profile2D(
            plane=plane,
            status=ProfileStatus.FAILED,
            reason=ErrorCode.OPEN_CONTOUR,
            open_chains=open_chains,
            warnings=tuple(assembly.warnings),
            name=name,
        )
    return Profile2D(
        main_contour=assembly.main,
        inner_contours=tuple(assembly.inner),
        plane=plane,
        status=ProfileStatus.EXTRACTED,
        open_chains=open_chains,
        warnings=tuple(assembly.warnings),
        name=name,
    )


def extract_profile(
    solid: Solid,
    plane: Plane,
    config: ExtractionConfig | None = None,
    name: str = "",
    logger: logging.Logger | None = None,
) -> Profile2D:
    """Cut *solid* with *plane* and return the 2-D profile.

    Args:
        solid: B-Rep snapshot of the dam.
        plane: Cutting plane; its local frame becomes the profile frame.
        config: Extraction tolerances.
        name: Section name stored on the profile.
        logger: Optional log sink.

    Returns:
        :class:`Profile2D` with status ``EXTRACTED``, or ``FAILED`` with
        reason ``NO_INTERSECTION``, ``OPEN_CONTOUR`` or the code of the
        geometry error met.
    """
    config = config or ExtractionConfig()
    log = logger or _logger

    try:
        segments = intersect_solid(solid, plane, config, logger=log)
        if isinstance(segments, NoIntersection):
            log.info("Section %r: %s", name, segments.reason)
            return Profile2D.failed(ErrorCode.NO_INTERSECTION, plane, name)
        assembly = assemble_loops(segments, plane, config, logger=log)
    except GeometryExtractionError as exc:
        log.warning("Section %r: extraction failed (%s)", name, exc)
        return Profile2D.failed(exc.code, plane, name)

    profile = build_profile(assembly, plane, name)
    if profile.is_failed:
        log.warning("Section %r: no closed contour", name)
    else:
        log.info(
            "Section %r: area %.6g with %d inner contour(s)",
            name, profile.main_contour.area, len(profile.inner_contours),
        )
    return profile


def section_planes(
    solid: Solid,
    axis: Sequence[float] = (0.0, 1.0, 0.0),
    count: int = 5,
    up: Sequence[float] = (0.0, 0.0, 1.0),
    margin: float = 0.0,
) -> list[Plane]:
    """Evenly spaced cutting planes along the dam axis.

    Planes sit at the mid-points of *count* equal intervals of the
    solid's extent along *axis*, after trimming *margin* from both ends.

    Args:
        solid: Dam solid.
        axis: Dam axis direction; becomes the plane normal.
        count: Number of planes.
        up: Vertical direction used for the local y axis.
        margin: Distance excluded at each end of the extent.

    Returns:
        List of :class:`Plane`, ordered along *axis*.

    Raises:
        ValueError: If *count* is below 1 or the margins leave no extent.
    """
    if count < 1:
        raise ValueError("count must be at least 1.")
    n = np.asarray(axis, dtype=float)
    n = n / np.linalg.norm(n)

    bbox = solid.bounding_box()
    along = bbox.corners() @ n
    lo, hi = float(along.min()) + margin, float(along.max()) - margin
    if hi <= lo:
        raise ValueError("margin leaves no extent to cut.")

    center = bbox.center.as_array()
    base = center - np.dot(center, n) * n
    step = (hi - lo) / count
    return [
        Plane.from_normal(base + (lo + (i + 0.5) * step) * n, n, up)
        for i in range(count)
    ]
