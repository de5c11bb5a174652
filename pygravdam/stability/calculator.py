"""Gravity-dam stability calculator.

Computes, for one section and one load case:

Sliding
    SF_s = [max(W − U, 0) f + c B] / |H + S|

Overturning (about the downstream toe)
    SF_o = ΣM_r / ΣM_o, each force's moment classified by its sign.

Base stresses (rigid base, linear pressure)
    e = ΣM_toe / ΣV − B/2, positive when the resultant lies upstream of
    the base centre.  For |e| ≤ B/6, σ = ΣV/B (1 ± 6e/B).  Beyond the
    middle third the base is partly uncompressed: b' = 3 (B/2 − |e|),
    σ_max = 2ΣV/b', σ_min = 0.

A vanishing denominator gives a safety factor of ``inf``.  The public
entry point never raises: degenerate geometry, failed profiles and
invalid parameters produce a ``FAILED`` result carrying a reason code.

References
----------
- USACE EM 1110-2-2200, *Gravity Dam Design* (1995).
- Novak, Moffat, Nalluri & Narayanan (2007), *Hydraulic Structures*,
  4th ed., Taylor & Francis.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pygravdam.errors import (
    AnalysisWarning,
    CalculationError,
    DamAnalysisError,
    ErrorCode,
    WarningCode,
)
from pygravdam.materials.base import MaterialProperties
from pygravdam.section.features import ProfileFeatures, analyze_features
from pygravdam.section.profile import Profile2D
from pygravdam.stability.loads import ForceSystem, assemble_loads
from pygravdam.stability.parameters import AnalysisParameters

_logger = logging.getLogger(__name__)

_EPS = 1e-12


class ResultStatus(str, Enum):
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass
class StabilityResult:
    """Outcome of :func:`analyze_stability`.

    Attributes:
        status: ``COMPLETED`` or ``FAILED``.
        reason: Failure reason for ``FAILED`` results.
        message: Failure description.
        sliding_sf: Sliding safety factor (``inf`` if nothing drives).
        overturning_sf: Overturning safety factor (``inf`` if nothing
            overturns).
        resisting_moment: ΣM_r about the toe (≥ 0).
        overturning_moment: ΣM_o about the toe (≥ 0).
        eccentricity: e, positive upstream of the base centre.
        sigma_heel, sigma_toe: Linear base pressures at heel and toe
            (before the partial-contact correction).
        sigma_max, sigma_min: Governing base pressures.
        effective_width: Compressed base width b'.
        base_uplift_zone: Resultant outside the middle third.
        resultant_outside_base: Resultant outside the base.
        sliding_ok, overturning_ok, stress_ok: Individual checks.
        is_stable: Overall verdict.
        warnings: Recoverable conditions.
        forces: Assembled force system.
        features: Section geometry used.
    """

    status: ResultStatus = ResultStatus.COMPLETED
    reason: ErrorCode | None = None
    message: str = ""
    sliding_sf: float = float("nan")
    overturning_sf: float = float("nan")
    resisting_moment: float = 0.0
    overturning_moment: float = 0.0
    eccentricity: float = 0.0
    sigma_heel: float = 0.0
    sigma_toe: float = 0.0
    sigma_max: float = 0.0
    sigma_min: float = 0.0
    effective_width: float = 0.0
    base_uplift_zone: bool = False
    resultant_outside_base: bool = False
    sliding_ok: bool = False
    overturning_ok: bool = False
    stress_ok: bool = False
    is_stable: bool = False
    warnings: list[AnalysisWarning] = field(default_factory=list)
    forces: ForceSystem | None = None
    features: ProfileFeatures | None = None

    @property
    def failed(self) -> bool:
        return self.status is ResultStatus.FAILED

    @property
    def warning_codes(self) -> set[WarningCode]:
        return {w.code for w in self.warnings}

    @classmethod
    def failure(cls, reason: ErrorCode, message: str = "") -> "StabilityResult":
        return cls(status=ResultStatus.FAILED, reason=reason, message=message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "reason": self.reason.value if self.reason is not None else None,
            "message": self.message,
            "sliding_sf": self.sliding_sf,
            "overturning_sf": self.overturning_sf,
            "resisting_moment": self.resisting_moment,
            "overturning_moment": self.overturning_moment,
            "eccentricity": self.eccentricity,
            "sigma_heel": self.sigma_heel,
            "sigma_toe": self.sigma_toe,
            "sigma_max": self.sigma_max,
            "sigma_min": self.sigma_min,
            "effective_width": self.effective_width,
            "base_uplift_zone": self.base_uplift_zone,
            "resultant_outside_base": self.resultant_outside_base,
            "sliding_ok": self.sliding_ok,
            "overturning_ok": self.overturning_ok,
            "stress_ok": self.stress_ok,
            "is_stable": self.is_stable,
            "warnings": [w.to_dict() for w in self.warnings],
            "forces": self.forces.to_dict() if self.forces is not None else None,
            "features": self.features.to_dict() if self.features is not None else None,
        }


# ======================================================================
# Individual checks
# ======================================================================


def sliding_safety_factor(
    forces: ForceSystem,
    material: MaterialProperties,
) -> float:
    """Shear-friction sliding safety factor along the base.

    Returns ``inf`` if the net horizontal force vanishes.
    """
    normal = max(forces.self_weight - forces.uplift, 0.0)
    resisting = normal * material.friction_coefficient + material.cohesion * forces.base_width
    driving = abs(forces.horizontal_water_force + forces.seismic)
    if driving < _EPS:
        return float("inf")
    return resisting / driving


def overturning_moments(forces: ForceSystem) -> tuple[float, float]:
    """``(ΣM_r, ΣM_o)`` about the downstream toe, both non-negative."""
    resisting = 0.0
    overturning = 0.0
    for m in forces.toe_moments().values():
        if m > 0:
            resisting += m
        else:
            overturning -= m
    return resisting, overturning


def base_stresses(
    vertical: float,
    moment_toe: float,
    base_width: float,
) -> dict[str, float | bool]:
    """Base pressure distribution for a rigid base.

    Args:
        vertical: ΣV, positive downward.
        moment_toe: ΣM about the toe, counter-clockwise positive.
        base_width: B.

    Raises:
        CalculationError: If the base width is zero.
    """
    B = base_width
    if B <= _EPS:
        raise CalculationError(ErrorCode.ZERO_BASE_AREA, "Base width is zero.")
    if vertical <= _EPS:
        return {
            "eccentricity": float("inf"),
            "sigma_heel": 0.0,
            "sigma_toe": 0.0,
            "sigma_max": float("inf"),
            "sigma_min": 0.0,
            "effective_width": 0.0,
            "base_uplift_zone": True,
            "resultant_outside_base": True,
        }

    e = moment_toe / vertical - 0.5 * B
    sigma_heel = vertical / B * (1.0 + 6.0 * e / B)
    sigma_toe = vertical / B * (1.0 - 6.0 * e / B)

    out: dict[str, float | bool] = {
        "eccentricity": e,
        "sigma_heel": sigma_heel,
        "sigma_toe": sigma_toe,
        "sigma_max": max(sigma_heel, sigma_toe),
        "sigma_min": min(sigma_heel, sigma_toe),
        "effective_width": B,
        "base_uplift_zone": False,
        "resultant_outside_base": False,
    }
    if abs(e) >= 0.5 * B:
        out.update(
            sigma_max=float("inf"),
            sigma_min=0.0,
            effective_width=0.0,
            base_uplift_zone=True,
            resultant_outside_base=True,
        )
    elif abs(e) > B / 6.0:
        b_eff = 3.0 * (0.5 * B - abs(e))
        out.update(
            sigma_max=2.0 * vertical / b_eff,
            sigma_min=0.0,
            effective_width=b_eff,
            base_uplift_zone=True,
        )
    return out


# ======================================================================
# Public entry point
# ======================================================================


def _resolve_features(
    profile_or_features: Profile2D | ProfileFeatures,
) -> ProfileFeatures:
    if isinstance(profile_or_features, ProfileFeatures):
        return profile_or_features
    profile = profile_or_features
    if profile.is_failed:
        raise CalculationError(
            profile.reason or ErrorCode.DEGENERATE_DIMENSIONS,
            "Profile extraction failed.",
        )
    return analyze_features(profile)


def _check_inputs(
    features: ProfileFeatures,
    material: MaterialProperties | None,
    parameters: AnalysisParameters,
) -> None:
    if material is None or not material.is_valid():
        raise CalculationError(ErrorCode.INVALID_PARAMETERS, "Material is missing or invalid.")
    problems = parameters.problems()
    if problems:
        raise CalculationError(ErrorCode.INVALID_PARAMETERS, "; ".join(problems))
    if not math.isfinite(features.area) or features.area <= _EPS:
        raise CalculationError(ErrorCode.ZERO_BASE_AREA, "Section area is zero.")
    if features.base_width <= _EPS:
        raise CalculationError(ErrorCode.ZERO_BASE_AREA, "Base width is zero.")


def _compute(
    features: ProfileFeatures,
    material: MaterialProperties,
    parameters: AnalysisParameters,
) -> StabilityResult:
    forces = assemble_loads(features, material, parameters)
    result = StabilityResult(forces=forces, features=features)
    result.warnings.extend(forces.warnings)

    if forces.self_weight <= forces.uplift:
        result.warnings.append(AnalysisWarning(
            WarningCode.NEGATIVE_NORMAL_FORCE,
            "Uplift equals or exceeds self weight; no friction on the base.",
        ))

    result.sliding_sf = sliding_safety_factor(forces, material)
    mr, mo = overturning_moments(forces)
    result.resisting_moment = mr
    result.overturning_moment = mo
    result.overturning_sf = float("inf") if mo < _EPS else mr / mo

    stresses = base_stresses(
        forces.vertical_sum,
        forces.moment_about(forces.toe.x, forces.toe.y),
        forces.base_width,
    )
    result.eccentricity = float(stresses["eccentricity"])
    result.sigma_heel = float(stresses["sigma_heel"])
    result.sigma_toe = float(stresses["sigma_toe"])
    result.sigma_max = float(stresses["sigma_max"])
    result.sigma_min = float(stresses["sigma_min"])
    result.effective_width = float(stresses["effective_width"])
    result.base_uplift_zone = bool(stresses["base_uplift_zone"])
    result.resultant_outside_base = bool(stresses["resultant_outside_base"])

    if result.base_uplift_zone:
        result.warnings.append(AnalysisWarning(
            WarningCode.ECCENTRICITY_EXCEEDED,
            f"Eccentricity {result.eccentricity:.4g} exceeds B/6 = {forces.base_width / 6:.4g}.",
        ))
    if result.resultant_outside_base:
        result.warnings.append(AnalysisWarning(
            WarningCode.RESULTANT_OUTSIDE_BASE, "Resultant lies outside the base."
        ))

    result.sliding_ok = result.sliding_sf >= parameters.required_sliding_sf
    result.overturning_ok = result.overturning_sf >= parameters.required_overturning_sf
    result.stress_ok = (
        result.sigma_max <= material.design_compressive_strength()
        and result.sigma_min >= -material.tensile_strength
    )
    result.is_stable = result.sliding_ok and result.overturning_ok and (
        result.stress_ok or not parameters.check_base_stress
    )

    ratio = parameters.low_margin_ratio
    for ok, sf, required, label in (
        (result.sliding_ok, result.sliding_sf, parameters.required_sliding_sf, "Sliding"),
        (result.overturning_ok, result.overturning_sf, parameters.required_overturning_sf, "Overturning"),
    ):
        if ok and sf < required * ratio:
            result.warnings.append(AnalysisWarning(
                WarningCode.LOW_SAFETY_MARGIN,
                f"{label} safety factor {sf:.3f} is within {ratio:g}x of the required {required:g}.",
            ))
    return result


def analyze_stability(
    profile_or_features: Profile2D | ProfileFeatures,
    material: MaterialProperties | None,
    parameters: AnalysisParameters | None = None,
    logger: logging.Logger | None = None,
) -> StabilityResult:
    """Sliding, overturning and base-stress analysis of one section.

    Args:
        profile_or_features: Extracted profile, or precomputed features.
        material: Dam body material.
        parameters: Load case; defaults to an empty reservoir.
        logger: Optional log sink.

    Returns:
        :class:`StabilityResult`.  Never raises for degenerate geometry
        or invalid input; those give a ``FAILED`` result instead.
    """
    parameters = parameters or AnalysisParameters()
    log = logger or _logger
    name = getattr(profile_or_features, "name", "")

    try:
        features = _resolve_features(profile_or_features)
        _check_inputs(features, material, parameters)
        result = _compute(features, material, parameters)
    except DamAnalysisError as exc:
        log.warning("Stability analysis of %r failed: %s", name, exc)
        return StabilityResult.failure(exc.code, str(exc))

    log.info(
        "Section %r: SF sliding %.3f, SF overturning %.3f, e = %.3f%s",
        name, result.sliding_sf, result.overturning_sf, result.eccentricity,
        "" if result.is_stable else " (NOT STABLE)",
    )
    return result
