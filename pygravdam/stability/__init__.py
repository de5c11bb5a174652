"""Gravity-dam stability analysis.

Assembles the loads on a section and checks it against sliding,
overturning and base-stress criteria.

Example::

    from pygravdam.materials import concrete_c30
    from pygravdam.section import Profile2D
    from pygravdam.stability import AnalysisParameters, analyze_stability

    profile = Profile2D.from_points([(0, 0), (40, 0), (8, 50), (0, 50)])
    params = AnalysisParameters(upstream_water_level=45.0, downstream_water_level=5.0)
    result = analyze_stability(profile, concrete_c30, params)
    print(result.sliding_sf, result.overturning_sf, result.is_stable)
"""

from pygravdam.stability.parameters import AnalysisParameters, parse_parameter_record
from pygravdam.stability.loads import Force, ForceSystem, assemble_loads
from pygravdam.stability.calculator import (
    ResultStatus,
    StabilityResult,
    analyze_stability,
    base_stresses,
    overturning_moments,
    sliding_safety_factor,
)
from pygravdam.stability.search import SweepResult, critical_water_level, parameter_sweep
from pygravdam.stability.batch import (
    BatchResult,
    SectionAnalysis,
    analyze_section,
    analyze_sections,
)

__all__ = [
    "AnalysisParameters",
    "parse_parameter_record",
    "Force",
    "ForceSystem",
    "assemble_loads",
    "ResultStatus",
    "StabilityResult",
    "analyze_stability",
    "base_stresses",
    "overturning_moments",
    "sliding_safety_factor",
    "SweepResult",
    "critical_water_level",
    "parameter_sweep",
    "BatchResult",
    "SectionAnalysis",
    "analyze_section",
    "analyze_sections",
]
