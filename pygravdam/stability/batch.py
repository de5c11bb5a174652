"""Batch analysis of many sections of one dam.

Each section runs the full pipeline (extract, validate, analyse) and is
independent of the others, so sections fan out over a thread pool.  A
failing section never aborts the batch: it simply carries a ``FAILED``
profile or result.
"""

from __future__ import annotations

import concurrent.futures
import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any, Sequence

from pygravdam.config import ExtractionConfig, ValidationConfig
from pygravdam.geometry.brep import Solid
from pygravdam.geometry.primitives import Plane
from pygravdam.materials.base import MaterialProperties
from pygravdam.section.extraction import extract_profile
from pygravdam.section.profile import Profile2D, ProfileStatus
from pygravdam.section.validation import ValidationReport, validate_profile
from pygravdam.stability.calculator import StabilityResult, analyze_stability
from pygravdam.stability.parameters import AnalysisParameters

_logger = logging.getLogger(__name__)


@dataclass
class SectionAnalysis:
    """Pipeline output for one section."""

    profile: Profile2D
    validation: ValidationReport
    result: StabilityResult

    @property
    def name(self) -> str:
        return self.profile.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "validation": self.validation.to_dict(),
            "result": self.result.to_dict(),
        }


@dataclass
class BatchResult:
    """Outcome of :func:`analyze_sections`.

    Attributes:
        sections: One entry per input plane, in input order; ``None``
            for sections skipped after cancellation.
        cancelled: True if the run was cancelled before every section
            was processed.
    """

    sections: list[SectionAnalysis | None] = field(default_factory=list)
    cancelled: bool = False

    @property
    def completed(self) -> list[SectionAnalysis]:
        return [s for s in self.sections if s is not None]

    def summary(self) -> dict[str, Any]:
        """Aggregate counts and the governing safety factors."""
        done = self.completed
        analysed = [s for s in done if not s.result.failed]
        min_sliding = min((s.result.sliding_sf for s in analysed), default=math.nan)
        min_overturning = min((s.result.overturning_sf for s in analysed), default=math.nan)
        critical = min(analysed, key=lambda s: s.result.sliding_sf, default=None)
        return {
            "n_sections": len(self.sections),
            "n_processed": len(done),
            "n_skipped": len(self.sections) - len(done),
            "n_failed": len(done) - len(analysed),
            "n_stable": sum(s.result.is_stable for s in analysed),
            "n_requires_review": sum(
                s.profile.status is ProfileStatus.REQUIRES_REVIEW for s in done
            ),
            "min_sliding_sf": min_sliding,
            "min_overturning_sf": min_overturning,
            "critical_section": critical.name if critical is not None else None,
            "cancelled": self.cancelled,
        }


def analyze_section(
    solid: Solid,
    plane: Plane,
    material: MaterialProperties | None,
    parameters: AnalysisParameters | None = None,
    config: ExtractionConfig | None = None,
    validation_config: ValidationConfig | None = None,
    name: str = "",
    logger: logging.Logger | None = None,
) -> SectionAnalysis:
    """Extract, validate and analyse one section.

    Returns:
        :class:`SectionAnalysis`.  Failures are reported through the
        profile status and the result status, never raised.
    """
    log = logger or _logger
    profile = extract_profile(solid, plane, config, name=name, logger=log)
    report = validate_profile(profile, material, validation_config, logger=log)
    profile = report.apply(profile)
    result = analyze_stability(profile, material, parameters, logger=log)
    return SectionAnalysis(profile=profile, validation=report, result=result)


def analyze_sections(
    solid: Solid,
    planes: Sequence[Plane],
    material: MaterialProperties | None,
    parameters: AnalysisParameters | None = None,
    config: ExtractionConfig | None = None,
    max_workers: int | None = None,
    cancel_event: threading.Event | None = None,
    logger: logging.Logger | None = None,
    names: Sequence[str] | None = None,
) -> BatchResult:
    """Analyse many sections of *solid* concurrently.

    Args:
        solid: Dam solid.
        planes: Cutting planes, e.g. from
            :func:`~pygravdam.section.extraction.section_planes`.
        material: Dam body material.
        parameters: Load case shared by all sections.
        config: Extraction tolerances.
        max_workers: Thread pool size (``None`` for the executor
            default).
        cancel_event: Checked before each section starts; once set, the
            remaining sections are skipped.
        logger: Optional log sink.
        names: Section names; defaults to ``"S1"``, ``"S2"``, ...

    Returns:
        :class:`BatchResult` in input order.

    Raises:
        ValueError: If *names* does not match *planes* in length.
    """
    log = logger or _logger
    if names is None:
        names = [f"S{i + 1}" for i in range(len(planes))]
    if len(names) != len(planes):
        raise ValueError("names must match planes in length.")

    def run(plane: Plane, name: str) -> SectionAnalysis | None:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return analyze_section(
            solid, plane, material, parameters, config, name=name, logger=log
        )

    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(run, plane, name) for plane, name in zip(planes, names)]
        sections = [future.result() for future in futures]

    batch = BatchResult(sections=sections, cancelled=any(s is None for s in sections))
    if batch.cancelled:
        log.info("Batch cancelled: %d of %d sections processed",
                 len(batch.completed), len(sections))
    else:
        log.info("Batch finished: %d sections", len(sections))
    return batch
