"""
pygravdam: Gravity-dam section extraction and stability analysis.

Subpackages
-----------
geometry
    B-Rep snapshot, cutting planes, plane/solid intersection, loop
    assembly.
section
    2-D profiles: extraction pipeline, geometric features, validation.
materials
    Dam body material properties and a standard library.
stability
    Load assembly, sliding / overturning / base-stress analysis,
    sensitivity searches and batch processing.
visualization
    2-D plotting utilities.
"""

from pygravdam import (
    geometry,
    section,
    materials,
    stability,
    visualization,
)
from pygravdam.config import ExtractionConfig, ValidationConfig
from pygravdam.errors import (
    AnalysisWarning,
    CalculationError,
    DamAnalysisError,
    ErrorCode,
    GeometryExtractionError,
    Severity,
    WarningCode,
)

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "section",
    "materials",
    "stability",
    "visualization",
    "ExtractionConfig",
    "ValidationConfig",
    "AnalysisWarning",
    "CalculationError",
    "DamAnalysisError",
    "ErrorCode",
    "GeometryExtractionError",
    "Severity",
    "WarningCode",
]
