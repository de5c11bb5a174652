"""Per-invocation configuration values.

Tolerances and thresholds are immutable and passed explicitly to every
kernel call; there is no module-level mutable state, so identical inputs
always produce identical outputs.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExtractionConfig:
    """Section extraction tolerances.

    Args:
        plane_tolerance: ε1, signed-distance tolerance for classifying
            points against the cutting plane (length units).
        connection_tolerance: ε2, endpoint distance below which two
            segments are stitched together and a loop is closed.
        arc_samples: Number of straight sub-segments used to approximate
            each circular arc.
        gap_closure_tolerance: Open chains whose end-to-start gap is
            smaller than this are closed with a warning.
        main_tie_tolerance: Relative area difference below which two
            loops compete for the main contour.
    """

    plane_tolerance: float = 1e-6
    connection_tolerance: float = 1e-3
    arc_samples: int = 10
    gap_closure_tolerance: float = 1e-2
    main_tie_tolerance: float = 1e-6

    def __post_init__(self) -> None:
        if self.plane_tolerance <= 0 or self.connection_tolerance <= 0:
            raise ValueError("Tolerances must be positive.")
        if self.arc_samples < 1:
            raise ValueError("arc_samples must be at least 1.")


@dataclass(frozen=True)
class ValidationConfig:
    """Thresholds used by :func:`~pygravdam.section.validation.validate_profile`.

    Dimensions below ``min_base_width`` / ``min_height`` are critical;
    the ``typical_*`` ranges only raise warnings.
    """

    closure_tolerance: float = 1e-3
    min_base_width: float = 0.1
    min_height: float = 0.1
    typical_min_height: float = 5.0
    typical_max_height: float = 300.0
    min_aspect_ratio: float = 0.5
    max_aspect_ratio: float = 15.0
    max_edge_length: float = 50.0
    min_edge_length: float = 0.01
    upstream_slope_range: tuple[float, float] = (0.0, 1.0)
    downstream_slope_range: tuple[float, float] = (0.5, 1.5)
