"""Error and warning taxonomy.

Exceptions are raised inside the extraction and calculation kernels and
converted into explicit ``FAILED`` results at the pipeline boundary, so
that batch processing of many sections never aborts on a single bad one.

Enums
-----
ErrorCode
    Reason codes attached to failed profiles and results.
WarningCode
    Recoverable conditions attached to otherwise usable results.
Severity
    Severity levels used by the validation engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(str, Enum):
    """Unrecoverable failure reasons."""

    # geometry extraction
    NO_INTERSECTION = "NoIntersection"
    OPEN_CONTOUR = "OpenContour"
    SELF_INTERSECTING = "SelfIntersecting"
    DEGENERATE_DIMENSIONS = "DegenerateDimensions"
    # calculation
    ZERO_BASE_AREA = "ZeroBaseArea"
    INVALID_PARAMETERS = "InvalidParameters"


class WarningCode(str, Enum):
    """Recoverable conditions; the pipeline still returns a result."""

    ECCENTRICITY_EXCEEDED = "EccentricityExceeded"
    OVERTOPPING = "Overtopping"
    LOW_SAFETY_MARGIN = "LowSafetyMargin"
    OPEN_CONTOUR = "OpenContour"
    AMBIGUOUS_MAIN_CONTOUR = "AmbiguousMainContour"
    REVERSE_HEAD = "ReverseHead"
    NEGATIVE_NORMAL_FORCE = "NegativeNormalForce"
    RESULTANT_OUTSIDE_BASE = "ResultantOutsideBase"


class Severity(str, Enum):
    CRITICAL = "Critical"
    WARNING = "Warning"
    INFO = "Info"


@dataclass(frozen=True)
class AnalysisWarning:
    """A warning attached to a profile or a stability result.

    Attributes:
        code: Machine-readable warning code.
        message: Human-readable description.
    """

    code: WarningCode
    message: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code.value, "message": self.message}


class DamAnalysisError(Exception):
    """Base class for errors raised inside the analysis kernels.

    Args:
        code: Reason code carried into the ``FAILED`` result.
        message: Description of the failure.
    """

    def __init__(self, code: ErrorCode, message: str = "") -> None:
        super().__init__(message or code.value)
        self.code = code


class GeometryExtractionError(DamAnalysisError, ValueError):
    """Section geometry could not be extracted or is unusable."""


class CalculationError(DamAnalysisError, ValueError):
    """Stability calculation cannot proceed (degenerate input)."""
