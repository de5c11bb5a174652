"""2-D dam profile definition.

A :class:`Profile2D` is the cross-section extracted from a solid: one
main contour (counter-clockwise), optional inner contours such as
galleries (clockwise), the cutting plane that defines its local frame,
and a lifecycle status.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Sequence

from pygravdam.errors import AnalysisWarning, ErrorCode
from pygravdam.geometry.primitives import CurveLoop, Plane


class ProfileStatus(str, Enum):
    """Profile lifecycle.

    ``EXTRACTED → VALIDATED | REQUIRES_REVIEW → ACCEPTED | REJECTED``;
    ``FAILED`` is terminal.
    """

    EXTRACTED = "Extracted"
    VALIDATED = "Validated"
    REQUIRES_REVIEW = "RequiresReview"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"
    FAILED = "Failed"


_TRANSITIONS: dict[ProfileStatus, frozenset[ProfileStatus]] = {
    ProfileStatus.EXTRACTED: frozenset({
        ProfileStatus.VALIDATED,
        ProfileStatus.REQUIRES_REVIEW,
        ProfileStatus.FAILED,
    }),
    ProfileStatus.VALIDATED: frozenset({
        ProfileStatus.ACCEPTED,
        ProfileStatus.REJECTED,
    }),
    ProfileStatus.REQUIRES_REVIEW: frozenset({
        ProfileStatus.ACCEPTED,
        ProfileStatus.REJECTED,
    }),
    ProfileStatus.ACCEPTED: frozenset(),
    ProfileStatus.REJECTED: frozenset(),
    ProfileStatus.FAILED: frozenset(),
}


def can_transition(current: ProfileStatus, target: ProfileStatus) -> bool:
    """True if a profile may move from *current* to *target*."""
    return target in _TRANSITIONS[current]


@dataclass(frozen=True)
class Profile2D:
    """Extracted 2-D cross-section.

    Coordinates are in the cutting plane's local frame: x is the stream
    direction (upstream on the left), y points up.

    Args:
        main_contour: Outer boundary, counter-clockwise.  Empty for a
            failed extraction.
        inner_contours: Holes (galleries), clockwise.
        plane: Cutting plane; ``None`` for profiles built directly in 2-D.
        status: Lifecycle status.
        reason: Failure reason when ``status`` is ``FAILED``.
        open_chains: Chains that could not be closed, as 2-D point lists.
        warnings: Recoverable extraction conditions.
        name: Section name.
    """

    main_contour: CurveLoop = field(default_factory=CurveLoop)
    inner_contours: tuple[CurveLoop, ...] = ()
    plane: Plane | None = None
    status: ProfileStatus = ProfileStatus.EXTRACTED
    reason: ErrorCode | None = None
    open_chains: tuple[tuple[tuple[float, float], ...], ...] = ()
    warnings: tuple[AnalysisWarning, ...] = ()
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.main_contour, CurveLoop):
            object.__setattr__(self, "main_contour", CurveLoop(self.main_contour))
        object.__setattr__(
            self,
            "inner_contours",
            tuple(c if isinstance(c, CurveLoop) else CurveLoop(c) for c in self.inner_contours),
        )
        object.__setattr__(self, "warnings", tuple(self.warnings))

    @classmethod
    def from_points(
        cls,
        outline: Sequence[tuple[float, float]],
        holes: Sequence[Sequence[tuple[float, float]]] = (),
        name: str = "",
    ) -> "Profile2D":
        """Profile straight from 2-D coordinates, orientation normalised.

        Example::

            profile = Profile2D.from_points([(0, 0), (10, 0), (10, 10), (0, 10)])
        """
        return cls(
            main_contour=CurveLoop(outline).oriented(ccw=True),
            inner_contours=tuple(CurveLoop(h).oriented(ccw=False) for h in holes),
            name=name,
        )

    @classmethod
    def failed(
        cls,
        reason: ErrorCode,
        plane: Plane | None = None,
        name: str = "",
        warnings: Sequence[AnalysisWarning] = (),
    ) -> "Profile2D":
        return cls(
            plane=plane,
            status=ProfileStatus.FAILED,
            reason=reason,
            warnings=tuple(warnings),
            name=name,
        )

    @property
    def is_failed(self) -> bool:
        return self.status is ProfileStatus.FAILED

    def with_status(
        self,
        status: ProfileStatus,
        reason: ErrorCode | None = None,
    ) -> "Profile2D":
        """Copy with a new status; no transition check."""
        return replace(self, status=status, reason=reason if reason is not None else self.reason)

    def transition(self, status: ProfileStatus) -> "Profile2D":
        """Copy moved to *status*.

        Raises:
            ValueError: If the lifecycle does not allow the transition.
        """
        if not can_transition(self.status, status):
            raise ValueError(
                f"Cannot move profile from {self.status.value} to {status.value}."
            )
        return self.with_status(status)

    def with_warnings(self, warnings: Sequence[AnalysisWarning]) -> "Profile2D":
        return replace(self, warnings=self.warnings + tuple(warnings))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "reason": self.reason.value if self.reason is not None else None,
            "main_contour": self.main_contour.to_list(),
            "inner_contours": [c.to_list() for c in self.inner_contours],
            "open_chains": [[list(p) for p in chain] for chain in self.open_chains],
            "plane": self.plane.to_dict() if self.plane is not None else None,
            "warnings": [w.to_dict() for w in self.warnings],
        }
