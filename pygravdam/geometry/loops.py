"""Curve loop assembly.

Stitches the unordered segments of a plane / solid intersection into
closed 2-D loops in the plane's local frame, classifies them into a main
contour and inner contours, and normalises their orientation.

Algorithm
---------
1. Discretise arcs into ``arc_samples`` straight pieces (an explicit
   polyline approximation) and project every piece into the plane frame.
2. Greedy endpoint stitching: start a chain with the first unused piece;
   repeatedly append the unused piece whose start or end is nearest to
   the chain's open end (within ε2, reversing it if needed); the chain
   closes when its open end returns within ε2 of its start.  A chain that
   cannot grow at its end is grown from its other end before it is
   declared open.  Worst case O(n²) in the number of pieces.
3. Classify closed loops by |signed area|: the largest becomes the main
   contour, all others inner contours.  The main contour is made
   counter-clockwise and every inner contour clockwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

import numpy as np

from pygravdam.config import ExtractionConfig
from pygravdam.errors import AnalysisWarning, WarningCode
from pygravdam.geometry.brep import CurveSegment
from pygravdam.geometry.polygon import remove_duplicate_vertices, signed_area
from pygravdam.geometry.primitives import CurveLoop, Plane

_logger = logging.getLogger(__name__)


class LoopKind(str, Enum):
    CLOSED = "Closed"
    OPEN = "Open"
    DEGENERATE = "Degenerate"


@dataclass(frozen=True)
class StitchedLoop:
    """Outcome of stitching one chain of segments.

    Attributes:
        kind: ``CLOSED``, ``OPEN`` or ``DEGENERATE``.
        points: Chain vertices, shape ``(N, 2)``.  Closed loops repeat
            their first vertex at the end.
        gap: Distance between the chain's last and first vertex before
            closing.
        recovered: True if an open chain was closed by gap closure.
    """

    kind: LoopKind
    points: np.ndarray
    gap: float = 0.0
    recovered: bool = False

    def to_loop(self) -> CurveLoop:
        return CurveLoop(self.points)


@dataclass
class LoopAssembly:
    """Result of :func:`assemble_loops`.

    Attributes:
        loops: Every stitched chain, in stitching order.
        main: Main contour (CCW) or ``None`` if no loop closed.
        inner: Inner contours (CW), in decreasing area order.
        warnings: Recoverable conditions met while assembling.
    """

    loops: list[StitchedLoop] = field(default_factory=list)
    main: CurveLoop | None = None
    inner: list[CurveLoop] = field(default_factory=list)
    warnings: list[AnalysisWarning] = field(default_factory=list)

    @property
    def closed(self) -> list[StitchedLoop]:
        return [lp for lp in self.loops if lp.kind is LoopKind.CLOSED]

    @property
    def open_chains(self) -> list[StitchedLoop]:
        return [lp for lp in self.loops if lp.kind is LoopKind.OPEN]

    @property
    def degenerate(self) -> list[StitchedLoop]:
        return [lp for lp in self.loops if lp.kind is LoopKind.DEGENERATE]


# ----------------------------------------------------------------------
# Projection
# ----------------------------------------------------------------------


def project_segments(
    segments: Sequence[CurveSegment],
    plane: Plane,
    config: ExtractionConfig,
) -> list[np.ndarray]:
    """Discretise and project segments into 2-D polylines.

    Pieces shorter than ε1 after projection are dropped.
    """
    pieces = []
    for seg in segments:
        pts2d = plane.project_many(seg.discretize(config.arc_samples))
        pts2d = remove_duplicate_vertices(pts2d, config.plane_tolerance)
        if len(pts2d) >= 2:
            pieces.append(pts2d)
    return pieces


# ----------------------------------------------------------------------
# Stitching
# ----------------------------------------------------------------------


def _nearest_piece(
    point: np.ndarray,
    pieces: list[np.ndarray],
    tol: float,
) -> tuple[int, bool] | None:
    """Index of the nearest unused piece and whether it must be reversed."""
    best: tuple[int, bool] | None = None
    best_d = tol
    for i, piece in enumerate(pieces):
        d_start = float(np.linalg.norm(piece[0] - point))
        d_end = float(np.linalg.norm(piece[-1] - point))
        if d_start < best_d:
            best, best_d = (i, False), d_start
        if d_end < best_d:
            best, best_d = (i, True), d_end
    return best


def _grow(chain: list[np.ndarray], pieces: list[np.ndarray], tol: float) -> bool:
    """Extend *chain* at its end until it closes or no piece connects.

    Returns:
        True if the chain closed.
    """
    while True:
        if len(chain) > 2 and np.linalg.norm(chain[-1] - chain[0]) < tol:
            return True
        found = _nearest_piece(chain[-1], pieces, tol)
        if found is None:
            return False
        idx, flip = found
        piece = pieces.pop(idx)
        if flip:
            piece = piece[::-1]
        # Drop the joint vertex so the chain stays gap-free
        chain.extend(piece[1:])


def stitch_segments(
    pieces: Sequence[np.ndarray],
    config: ExtractionConfig,
) -> list[StitchedLoop]:
    """Greedy endpoint stitching of 2-D polylines into loops.

    Args:
        pieces: Projected polylines, each of shape ``(k, 2)``.
        config: Tolerances.

    Returns:
        One :class:`StitchedLoop` per chain, in deterministic order.
    """
    tol = config.connection_tolerance
    unused = [np.asarray(p, dtype=float) for p in pieces]
    results: list[StitchedLoop] = []

    while unused:
        first = unused.pop(0)
        chain = [pt for pt in first]

        closed = _grow(chain, unused, tol)
        if not closed:
            # Try growing from the other end before giving up
            chain.reverse()
            closed = _grow(chain, unused, tol)

        gap = float(np.linalg.norm(chain[-1] - chain[0]))
        pts = np.array(chain)
        if closed:
            pts[-1] = pts[0]
            results.append(_classify_closed(pts, gap, tol))
            continue

        if len(pts) >= 3 and gap < config.gap_closure_tolerance:
            pts = np.vstack([pts, pts[:1]])
            loop = _classify_closed(pts, gap, tol)
            results.append(StitchedLoop(loop.kind, loop.points, gap, recovered=True))
            continue

        results.append(StitchedLoop(LoopKind.OPEN, pts, gap))

    return results


def _classify_closed(pts: np.ndarray, gap: float, tol: float) -> StitchedLoop:
    distinct = remove_duplicate_vertices(pts[:-1], tol)
    if len(distinct) < 3 or abs(signed_area(distinct)) < tol * tol:
        return StitchedLoop(LoopKind.DEGENERATE, pts, gap)
    return StitchedLoop(LoopKind.CLOSED, pts, gap)


# ----------------------------------------------------------------------
# Classification
# ----------------------------------------------------------------------


def _select_main(loops: list[CurveLoop], tie_tol: float) -> tuple[int, bool]:
    """Index of the main contour and whether the choice was a tie-break.

    Ties (areas equal within the relative *tie_tol*) go to the loop with
    the larger bounding-box diagonal, then to the lower-left bounding box
    corner.
    """
    areas = np.array([lp.area for lp in loops])
    best = float(areas.max())
    candidates = [i for i, a in enumerate(areas) if best - a <= tie_tol * best]
    if len(candidates) == 1:
        return candidates[0], False

    def key(i: int) -> tuple[float, float, float]:
        lo, hi = loops[i].bounding_box()
        return (-float(np.linalg.norm(hi - lo)), float(lo[1]), float(lo[0]))

    return min(candidates, key=key), True


def assemble_loops(
    segments: Sequence[CurveSegment],
    plane: Plane,
    config: ExtractionConfig | None = None,
    logger: logging.Logger | None = None,
) -> LoopAssembly:
    """Build closed 2-D contours from unordered intersection segments.

    Never raises for geometric reasons: an assembly without any closed
    loop simply has ``main=None``.

    Args:
        segments: Coplanar 3-D segments (from
            :func:`~pygravdam.geometry.intersect.intersect_solid`).
        plane: The cutting plane defining the local frame.
        config: Extraction tolerances.
        logger: Optional log sink.

    Returns:
        :class:`LoopAssembly`.
    """
    config = config or ExtractionConfig()
    log = logger or _logger

    pieces = project_segments(segments, plane, config)
    stitched = stitch_segments(pieces, config)
    assembly = LoopAssembly(loops=stitched)

    for lp in stitched:
        if lp.recovered:
            assembly.warnings.append(AnalysisWarning(
                WarningCode.OPEN_CONTOUR,
                f"Closed a contour gap of {lp.gap:.4g}.",
            ))
    n_open = len(assembly.open_chains)
    if n_open:
        assembly.warnings.append(AnalysisWarning(
            WarningCode.OPEN_CONTOUR,
            f"{n_open} open chain(s) could not be closed.",
        ))
        log.warning("%d open chain(s) left after stitching", n_open)

    closed = [lp.to_loop() for lp in assembly.closed]
    if not closed:
        log.info("No closed loop assembled from %d segments", len(segments))
        return assembly

    main_idx, tie = _select_main(closed, config.main_tie_tolerance)
    if tie:
        assembly.warnings.append(AnalysisWarning(
            WarningCode.AMBIGUOUS_MAIN_CONTOUR,
            "Several loops have the same area; main contour chosen by extent.",
        ))

    assembly.main = closed[main_idx].oriented(ccw=True)
    others = [lp for i, lp in enumerate(closed) if i != main_idx]
    others.sort(key=lambda lp: -lp.area)
    assembly.inner = [lp.oriented(ccw=False) for lp in others]

    log.debug(
        "Assembled main contour (area %.6g) and %d inner contour(s)",
        assembly.main.area, len(assembly.inner),
    )
    return assembly
