"""Load-case parameters for the stability analysis."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Mapping

from pygravdam.materials.base import MaterialProperties

# camelCase record key -> field name
_RECORD_KEYS: dict[str, str] = {
    "upstreamWaterLevel": "upstream_water_level",
    "downstreamWaterLevel": "downstream_water_level",
    "waterUnitWeight": "water_unit_weight",
    "seismicCoefficient": "seismic_coefficient",
    "considerUplift": "consider_uplift",
    "upliftReductionFactor": "uplift_reduction_factor",
    "requiredSlidingSF": "required_sliding_sf",
    "requiredOverturningSF": "required_overturning_sf",
    "checkBaseStress": "check_base_stress",
    "lowMarginRatio": "low_margin_ratio",
}


@dataclass(frozen=True)
class AnalysisParameters:
    """Load case and acceptance criteria.

    Water levels are depths above the dam base (the lowest point of the
    section), not absolute elevations.

    Args:
        upstream_water_level: Headwater depth H1 (m).
        downstream_water_level: Tailwater depth H2 (m).
        water_unit_weight: γw (kN/m³).
        seismic_coefficient: Horizontal seismic coefficient k (–).
        consider_uplift: Include base uplift pressure.
        uplift_reduction_factor: Multiplier on the uplift diagram, e.g.
            to account for drainage (0–1).
        required_sliding_sf: Minimum acceptable sliding safety factor.
        required_overturning_sf: Minimum acceptable overturning safety
            factor.
        check_base_stress: Include the base stress check in the overall
            verdict.
        low_margin_ratio: A passing safety factor below
            ``required × low_margin_ratio`` raises a low-margin warning.
    """

    upstream_water_level: float = 0.0
    downstream_water_level: float = 0.0
    water_unit_weight: float = 9.81
    seismic_coefficient: float = 0.0
    consider_uplift: bool = True
    uplift_reduction_factor: float = 1.0
    required_sliding_sf: float = 3.0
    required_overturning_sf: float = 1.5
    check_base_stress: bool = True
    low_margin_ratio: float = 1.1

    def problems(self) -> list[str]:
        """Descriptions of out-of-range values; empty when valid."""
        out = []
        numbers = {k: v for k, v in asdict(self).items() if not isinstance(v, bool)}
        for key, value in numbers.items():
            if not math.isfinite(value):
                out.append(f"{key} must be finite")
        if self.water_unit_weight <= 0:
            out.append("water_unit_weight must be positive")
        if self.seismic_coefficient < 0:
            out.append("seismic_coefficient must be non-negative")
        if not 0 <= self.uplift_reduction_factor <= 1:
            out.append("uplift_reduction_factor must lie in [0, 1]")
        if self.required_sliding_sf <= 0 or self.required_overturning_sf <= 0:
            out.append("required safety factors must be positive")
        if self.low_margin_ratio < 1:
            out.append("low_margin_ratio must be at least 1")
        return out

    def is_valid(self) -> bool:
        return not self.problems()

    def with_values(self, **changes: Any) -> "AnalysisParameters":
        """Copy with some fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AnalysisParameters":
        """Build from a flat parameter record (camelCase or snake_case keys).

        Keys that do not name a load-case parameter (material keys such
        as ``density``) are ignored.
        """
        d = asdict(cls())
        values: dict[str, Any] = {}
        for camel, name in _RECORD_KEYS.items():
            raw = record.get(camel, record.get(name, d[name]))
            values[name] = _as_bool(raw) if isinstance(d[name], bool) else float(raw)
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def parse_parameter_record(
    record: Mapping[str, Any],
) -> tuple[MaterialProperties, AnalysisParameters]:
    """Split a flat parameter record into material and load case.

    Example::

        material, params = parse_parameter_record({
            "density": 24.0, "frictionCoefficient": 0.75,
            "upstreamWaterLevel": 45.0, "considerUplift": True,
        })
    """
    return MaterialProperties.from_record(record), AnalysisParameters.from_record(record)
