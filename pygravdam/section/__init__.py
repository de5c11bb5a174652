"""Section profiles: extraction, geometric features and validation.

Example::

    from pygravdam.geometry import Plane, Solid
    from pygravdam.section import extract_profile, analyze_features

    solid = Solid.extrude([(0, 0), (40, 0), (8, 50), (0, 50)], length=20)
    plane = Plane.from_normal((0, 10, 0), (0, 1, 0))
    profile = extract_profile(solid, plane, name="S1")
    features = analyze_features(profile)
    print(features.area, features.base_width)
"""

from pygravdam.section.profile import Profile2D, ProfileStatus, can_transition
from pygravdam.section.extraction import build_profile, extract_profile, section_planes
from pygravdam.section.features import (
    ProfileFeatures,
    analyze_features,
    profile_area,
    profile_centroid,
)
from pygravdam.section.validation import Issue, ValidationReport, validate_profile

__all__ = [
    "Profile2D",
    "ProfileStatus",
    "can_transition",
    "build_profile",
    "extract_profile",
    "section_planes",
    "ProfileFeatures",
    "analyze_features",
    "profile_area",
    "profile_centroid",
    "Issue",
    "ValidationReport",
    "validate_profile",
]
