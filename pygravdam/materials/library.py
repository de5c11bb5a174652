"""Standard materials library.

Pre-configured :class:`~pygravdam.materials.base.MaterialProperties` for
common dam concretes and masonry.  Values are in kN, m and kPa.

Usage::

    from pygravdam.materials import concrete_c30, concrete_grade
    print(concrete_c30.compressive_strength)  # 30000 kPa
    mat = concrete_grade("C35")
"""

from pygravdam.materials.base import MaterialProperties

# ------------------------------------------------------------------
# Concrete
# ------------------------------------------------------------------

concrete_c20 = MaterialProperties(
    name="concrete C20",
    unit_weight=24.0,              # kN/m³
    friction_coefficient=0.75,
    compressive_strength=20e3,     # kPa
    tensile_strength=2.0e3,        # kPa
    elastic_modulus=25.5e6,        # kPa
    poisson_ratio=0.18,
    grade="C20",
)

concrete_c25 = MaterialProperties(
    name="concrete C25",
    unit_weight=24.0,
    friction_coefficient=0.75,
    compressive_strength=25e3,
    tensile_strength=2.5e3,
    elastic_modulus=28.0e6,
    poisson_ratio=0.18,
    grade="C25",
)

concrete_c30 = MaterialProperties(
    name="concrete C30",
    unit_weight=24.0,
    friction_coefficient=0.75,
    compressive_strength=30e3,
    tensile_strength=3.0e3,
    elastic_modulus=30.0e6,
    poisson_ratio=0.18,
    grade="C30",
)

concrete_c35 = MaterialProperties(
    name="concrete C35",
    unit_weight=24.0,
    friction_coefficient=0.75,
    compressive_strength=35e3,
    tensile_strength=3.5e3,
    elastic_modulus=31.5e6,
    poisson_ratio=0.18,
    grade="C35",
)

concrete_c40 = MaterialProperties(
    name="concrete C40",
    unit_weight=24.0,
    friction_coefficient=0.75,
    compressive_strength=40e3,
    tensile_strength=4.0e3,
    elastic_modulus=32.5e6,
    poisson_ratio=0.18,
    grade="C40",
)

# ------------------------------------------------------------------
# Masonry
# ------------------------------------------------------------------

masonry = MaterialProperties(
    name="masonry",
    unit_weight=23.0,
    friction_coefficient=0.65,
    compressive_strength=10e3,
    tensile_strength=0.5e3,
    elastic_modulus=10e6,
    poisson_ratio=0.20,
    grade="M10",
)

_CONCRETE_GRADES = {
    m.grade: m
    for m in (concrete_c20, concrete_c25, concrete_c30, concrete_c35, concrete_c40)
}


def concrete_grade(grade: str) -> MaterialProperties:
    """Library concrete for *grade* (``"C20"`` to ``"C40"``).

    Raises:
        ValueError: If the grade is not in the library.
    """
    key = grade.strip().upper()
    if key not in _CONCRETE_GRADES:
        raise ValueError(
            f"Unknown concrete grade {grade!r}. Choose from {sorted(_CONCRETE_GRADES)}"
        )
    return _CONCRETE_GRADES[key]
