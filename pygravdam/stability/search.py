"""Sensitivity searches over the load case.

Provides a root search for the critical headwater depth and a grid sweep
over any single load-case parameter.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Sequence

import numpy as np

from pygravdam.materials.base import MaterialProperties
from pygravdam.section.features import ProfileFeatures, analyze_features
from pygravdam.section.profile import Profile2D
from pygravdam.stability.calculator import StabilityResult, analyze_stability
from pygravdam.stability.parameters import AnalysisParameters


@dataclass
class SweepResult:
    """Result of a parameter sweep.

    Attributes:
        name: Swept parameter.
        values: Tested values.
        sliding_sf: Sliding safety factor per value.
        overturning_sf: Overturning safety factor per value.
        results: Full result per value.
    """

    name: str
    values: np.ndarray
    sliding_sf: np.ndarray
    overturning_sf: np.ndarray
    results: list[StabilityResult]

    @property
    def stable(self) -> np.ndarray:
        return np.array([r.is_stable for r in self.results])


def _features(section: Profile2D | ProfileFeatures) -> ProfileFeatures:
    if isinstance(section, ProfileFeatures):
        return section
    return analyze_features(section)


def critical_water_level(
    section: Profile2D | ProfileFeatures,
    material: MaterialProperties,
    parameters: AnalysisParameters | None = None,
    criterion: str = "sliding",
    xtol: float = 1e-6,
) -> float | None:
    """Headwater depth at which a safety factor drops to its required value.

    Uses ``scipy.optimize.brentq`` on ``SF(H1) − SF_required`` over
    ``[0, height]``.  All other load-case values are taken from
    *parameters*.

    Args:
        section: Profile or precomputed features.
        material: Dam body material.
        parameters: Base load case.
        criterion: ``"sliding"`` or ``"overturning"``.
        xtol: Absolute tolerance on the depth.

    Returns:
        The critical depth, or ``None`` if the section already fails at
        an empty reservoir or still passes with water at the crest.

    Raises:
        ValueError: If *criterion* is unknown.
    """
    from scipy.optimize import brentq

    criteria = {
        "sliding": ("sliding_sf", "required_sliding_sf"),
        "overturning": ("overturning_sf", "required_overturning_sf"),
    }
    if criterion not in criteria:
        raise ValueError(f"Unknown criterion {criterion!r}. Choose from {list(criteria)}")
    sf_attr, req_attr = criteria[criterion]

    parameters = parameters or AnalysisParameters()
    features = _features(section)
    required = getattr(parameters, req_attr)

    def objective(h: float) -> float:
        result = analyze_stability(
            features, material, parameters.with_values(upstream_water_level=h)
        )
        sf = getattr(result, sf_attr)
        if not np.isfinite(sf):
            return abs(required) + 1.0
        return sf - required

    lo, hi = 0.0, features.height
    f_lo, f_hi = objective(lo), objective(hi)
    if f_lo < 0 or f_hi >= 0:
        return None
    return float(brentq(objective, lo, hi, xtol=xtol))


def parameter_sweep(
    section: Profile2D | ProfileFeatures,
    material: MaterialProperties,
    parameters: AnalysisParameters | None,
    name: str,
    values: Sequence[Any],
) -> SweepResult:
    """Evaluate the stability over a grid of one load-case parameter.

    Args:
        section: Profile or precomputed features.
        material: Dam body material.
        parameters: Base load case.
        name: Field of :class:`AnalysisParameters` to vary, e.g.
            ``"upstream_water_level"`` or ``"seismic_coefficient"``.
        values: Values to test.

    Returns:
        :class:`SweepResult`.

    Raises:
        ValueError: If *name* is not a load-case parameter.
    """
    known = [f.name for f in fields(AnalysisParameters)]
    if name not in known:
        raise ValueError(f"Unknown parameter {name!r}. Choose from {known}")

    parameters = parameters or AnalysisParameters()
    features = _features(section)

    results = [
        analyze_stability(features, material, parameters.with_values(**{name: v}))
        for v in values
    ]
    return SweepResult(
        name=name,
        values=np.asarray(values, dtype=float),
        sliding_sf=np.array([r.sliding_sf for r in results]),
        overturning_sf=np.array([r.overturning_sf for r in results]),
        results=results,
    )
