"""Materials: dam body properties and a standard library."""

from pygravdam.materials.base import MaterialProperties
from pygravdam.materials.library import (
    concrete_c20,
    concrete_c25,
    concrete_c30,
    concrete_c35,
    concrete_c40,
    masonry,
    concrete_grade,
)

__all__ = [
    "MaterialProperties",
    "concrete_c20",
    "concrete_c25",
    "concrete_c30",
    "concrete_c35",
    "concrete_c40",
    "masonry",
    "concrete_grade",
]
