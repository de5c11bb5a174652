"""Load assembly for a gravity-dam section.

Forces are per unit length of dam axis and live in the profile frame:
x points downstream, y points up, the base lies at the lowest elevation
and the downstream toe is the rightmost base vertex.

Load cases
----------
self_weight
    W = A γc, downward, at the section centroid.
upstream_water / downstream_water
    Hydrostatic thrusts ½ γw H², triangular, acting at H/3 above the
    base.  Depths are clipped to [0, height].
uplift
    Trapezoidal base pressure from γw H1 at the heel to γw H2 at the toe,
    scaled by the uplift reduction factor, acting at the trapezoid
    centroid.
seismic
    S = k W, horizontal, downstream, at the centroid height.

Moments about a point (px, py) are ``(x − px) Fy − (y − py) Fx``:
counter-clockwise positive.  About the downstream toe a negative moment
tends to overturn the dam.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from pygravdam.errors import AnalysisWarning, WarningCode
from pygravdam.geometry.primitives import Point2D
from pygravdam.materials.base import MaterialProperties
from pygravdam.section.features import ProfileFeatures
from pygravdam.stability.parameters import AnalysisParameters


@dataclass(frozen=True)
class Force:
    """A point force in the profile plane.

    Args:
        name: Load case name.
        magnitude: Non-negative magnitude (kN per m run).
        direction: Unit direction ``(dx, dy)``.
        point: Application point.
    """

    name: str
    magnitude: float
    direction: tuple[float, float]
    point: Point2D

    @property
    def fx(self) -> float:
        return self.magnitude * self.direction[0]

    @property
    def fy(self) -> float:
        return self.magnitude * self.direction[1]

    def moment_about(self, x: float, y: float) -> float:
        """Counter-clockwise moment about ``(x, y)``."""
        return (self.point.x - x) * self.fy - (self.point.y - y) * self.fx

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "magnitude": self.magnitude,
            "direction": list(self.direction),
            "point": list(self.point),
        }


@dataclass
class ForceSystem:
    """Forces acting on a section together with its base geometry.

    Attributes:
        forces: Forces keyed by load case name, in assembly order.
        heel: Upstream end of the base.
        toe: Downstream end of the base (moment reference point).
        warnings: Conditions met while assembling the loads.
    """

    forces: dict[str, Force] = field(default_factory=dict)
    heel: Point2D = Point2D(0.0, 0.0)
    toe: Point2D = Point2D(0.0, 0.0)
    warnings: list[AnalysisWarning] = field(default_factory=list)

    def __iter__(self) -> Iterator[Force]:
        return iter(self.forces.values())

    def __getitem__(self, name: str) -> Force:
        return self.forces[name]

    def _magnitude(self, name: str) -> float:
        f = self.forces.get(name)
        return f.magnitude if f is not None else 0.0

    @property
    def self_weight(self) -> float:
        return self._magnitude("self_weight")

    @property
    def uplift(self) -> float:
        return self._magnitude("uplift")

    @property
    def seismic(self) -> float:
        return self._magnitude("seismic")

    @property
    def base_width(self) -> float:
        return self.toe.x - self.heel.x

    @property
    def horizontal_water_force(self) -> float:
        """Net hydrostatic thrust, positive downstream."""
        return self._magnitude("upstream_water") - self._magnitude("downstream_water")

    @property
    def vertical_sum(self) -> float:
        """Net vertical force, positive downward (ΣV = W − U)."""
        return -sum(f.fy for f in self)

    @property
    def horizontal_sum(self) -> float:
        """Net horizontal force, positive downstream."""
        return sum(f.fx for f in self)

    def moment_about(self, x: float, y: float) -> float:
        return sum(f.moment_about(x, y) for f in self)

    def toe_moments(self) -> dict[str, float]:
        """Moment of every force about the downstream toe."""
        return {f.name: f.moment_about(self.toe.x, self.toe.y) for f in self}

    def to_dict(self) -> dict[str, Any]:
        return {
            "forces": [f.to_dict() for f in self],
            "heel": list(self.heel),
            "toe": list(self.toe),
            "vertical_sum": self.vertical_sum,
            "horizontal_sum": self.horizontal_sum,
            "warnings": [w.to_dict() for w in self.warnings],
        }


def uplift_resultant(
    base_width: float,
    heel_pressure: float,
    toe_pressure: float,
) -> tuple[float, float]:
    """Resultant and its distance from the heel for a trapezoidal diagram.

    Returns:
        ``(U, x̄)``; ``(0, 0)`` when both pressures vanish.
    """
    total = heel_pressure + toe_pressure
    if total <= 0 or base_width <= 0:
        return 0.0, 0.0
    resultant = 0.5 * total * base_width
    x_bar = base_width * (heel_pressure + 2.0 * toe_pressure) / (3.0 * total)
    return resultant, x_bar


def assemble_loads(
    features: ProfileFeatures,
    material: MaterialProperties,
    parameters: AnalysisParameters,
) -> ForceSystem:
    """Build the force system of a section.

    Args:
        features: Section geometry.
        material: Dam body material (unit weight).
        parameters: Load case.

    Returns:
        :class:`ForceSystem` with ``self_weight``, ``upstream_water``,
        ``downstream_water``, ``uplift`` and ``seismic`` forces (zero
        loads are kept so every case is always present).
    """
    gw = parameters.water_unit_weight
    height = features.height
    base_y = features.base_elevation
    heel = Point2D(features.upstream_toe.x, base_y)
    toe = Point2D(features.downstream_toe.x, base_y)
    centroid = features.centroid

    system = ForceSystem(heel=heel, toe=toe)
    h_up_raw = parameters.upstream_water_level
    h_dn_raw = parameters.downstream_water_level

    if h_up_raw > height or h_dn_raw > height:
        system.warnings.append(AnalysisWarning(
            WarningCode.OVERTOPPING,
            f"Water level exceeds the section height {height:.4g}.",
        ))
    if h_dn_raw > h_up_raw:
        system.warnings.append(AnalysisWarning(
            WarningCode.REVERSE_HEAD,
            "Tailwater is higher than headwater; net thrust acts upstream.",
        ))

    weight = features.area * material.unit_weight
    system.forces["self_weight"] = Force("self_weight", weight, (0.0, -1.0), centroid)

    h1 = min(max(h_up_raw, 0.0), height)
    h2 = min(max(h_dn_raw, 0.0), height)
    system.forces["upstream_water"] = Force(
        "upstream_water", 0.5 * gw * h1 * h1, (1.0, 0.0), Point2D(heel.x, base_y + h1 / 3.0)
    )
    system.forces["downstream_water"] = Force(
        "downstream_water", 0.5 * gw * h2 * h2, (-1.0, 0.0), Point2D(toe.x, base_y + h2 / 3.0)
    )

    uplift, x_bar = 0.0, 0.5 * features.base_width
    if parameters.consider_uplift:
        r = parameters.uplift_reduction_factor
        uplift, x_bar = uplift_resultant(
            features.base_width,
            gw * max(h_up_raw, 0.0) * r,
            gw * max(h_dn_raw, 0.0) * r,
        )
    system.forces["uplift"] = Force("uplift", uplift, (0.0, 1.0), Point2D(heel.x + x_bar, base_y))

    system.forces["seismic"] = Force(
        "seismic", parameters.seismic_coefficient * weight, (1.0, 0.0), centroid
    )
    return system
