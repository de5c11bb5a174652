"""Dam body material.

Classes
-------
MaterialProperties
    Unit weight, base friction, strengths and elastic constants of the
    dam body material.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class MaterialProperties:
    """Material properties used by the stability analysis.

    All values use one consistent unit system; the defaults are kN, m
    and kPa (C30 concrete).

    Args:
        name: Human-readable material name.
        unit_weight: Unit weight γ (kN/m³), called "density" in parameter
            records.
        friction_coefficient: Base friction coefficient f (–).
        cohesion: Base cohesion c (kPa).
        compressive_strength: Characteristic compressive strength (kPa).
        tensile_strength: Tensile strength (kPa).
        elastic_modulus: Young's modulus E (kPa).
        poisson_ratio: Poisson's ratio ν (–).
        grade: Grade label, e.g. ``"C30"``.

    Example::

        mat = MaterialProperties(name="RCC", unit_weight=23.5, friction_coefficient=0.7)
        mat.design_compressive_strength()  # compressive_strength / 1.4
    """

    name: str = "concrete"
    unit_weight: float = 24.0
    friction_coefficient: float = 0.75
    cohesion: float = 0.0
    compressive_strength: float = 30e3
    tensile_strength: float = 3e3
    elastic_modulus: float = 30e6
    poisson_ratio: float = 0.18
    grade: str = "C30"

    @property
    def density(self) -> float:
        """Alias of :attr:`unit_weight`."""
        return self.unit_weight

    def is_valid(self) -> bool:
        """True if every property lies in its physical range."""
        return (
            self.unit_weight > 0
            and self.friction_coefficient > 0
            and self.cohesion >= 0
            and self.compressive_strength > 0
            and self.tensile_strength >= 0
            and self.elastic_modulus > 0
            and 0 <= self.poisson_ratio < 0.5
        )

    def design_compressive_strength(self, safety_factor: float = 1.4) -> float:
        """Allowable compressive stress, ``compressive_strength / safety_factor``."""
        if safety_factor <= 0:
            raise ValueError("safety_factor must be positive.")
        return self.compressive_strength / safety_factor

    @classmethod
    def from_record(cls, record: Mapping[str, Any], name: str = "concrete") -> "MaterialProperties":
        """Build from a flat parameter record.

        Accepts camelCase or snake_case keys; missing keys take the
        defaults.  Recognised keys: ``density`` / ``unit_weight``,
        ``frictionCoefficient`` / ``friction_coefficient``, ``cohesion``,
        ``compressiveStrength`` / ``compressive_strength``,
        ``tensileStrength`` / ``tensile_strength``, ``elasticModulus`` /
        ``elastic_modulus``, ``poissonRatio`` / ``poisson_ratio`` and
        ``grade``.
        """
        d = cls()
        return cls(
            name=str(record.get("name", name)),
            unit_weight=float(record.get("density", record.get("unit_weight", d.unit_weight))),
            friction_coefficient=float(record.get(
                "frictionCoefficient", record.get("friction_coefficient", d.friction_coefficient)
            )),
            cohesion=float(record.get("cohesion", d.cohesion)),
            compressive_strength=float(record.get(
                "compressiveStrength", record.get("compressive_strength", d.compressive_strength)
            )),
            tensile_strength=float(record.get(
                "tensileStrength", record.get("tensile_strength", d.tensile_strength)
            )),
            elastic_modulus=float(record.get(
                "elasticModulus", record.get("elastic_modulus", d.elastic_modulus)
            )),
            poisson_ratio=float(record.get(
                "poissonRatio", record.get("poisson_ratio", d.poisson_ratio)
            )),
            grade=str(record.get("grade", d.grade)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
