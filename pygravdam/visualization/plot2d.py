"""2-D plotting utilities.

Functions
---------
plot_profile
    Draw a section profile, optionally with its force system.
plot_base_stress
    Draw the base pressure diagram of a stability result.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from pygravdam.section.profile import Profile2D
from pygravdam.stability.calculator import StabilityResult
from pygravdam.stability.loads import ForceSystem


def plot_profile(
    profile: Profile2D,
    forces: ForceSystem | None = None,
    title: str = "",
    ax: Any = None,
    arrow_scale: float | None = None,
) -> Any:
    """Plot the contours of a profile.

    Args:
        profile: Section profile.
        forces: If given, draw each non-zero force as an arrow at its
            application point.
        title: Plot title (defaults to the profile name).
        ax: Matplotlib axes (creates new figure if None).
        arrow_scale: Length units per unit force; chosen so that the
            largest force spans a quarter of the section height if None.

    Returns:
        Matplotlib axes.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 6))

    main = profile.main_contour
    if not main.is_empty:
        pts = main.points
        ax.fill(pts[:, 0], pts[:, 1], color="0.85", zorder=1)
        ax.plot(pts[:, 0], pts[:, 1], "k-", linewidth=1.2, zorder=2)
    for inner in profile.inner_contours:
        pts = inner.points
        ax.fill(pts[:, 0], pts[:, 1], color="white", zorder=1)
        ax.plot(pts[:, 0], pts[:, 1], "k-", linewidth=0.8, zorder=2)
    for chain in profile.open_chains:
        pts = np.asarray(chain)
        ax.plot(pts[:, 0], pts[:, 1], "r--", linewidth=1.0, zorder=2)

    if forces is not None:
        _add_forces(forces, ax, profile, arrow_scale)

    ax.set_aspect("equal")
    ax.set_title(title or profile.name)
    ax.set_xlabel("x (m)")
    ax.set_ylabel("y (m)")
    return ax


def _add_forces(
    forces: ForceSystem,
    ax: Any,
    profile: Profile2D,
    arrow_scale: float | None,
) -> None:
    """Overlay force arrows, tail at the application point."""
    active = [f for f in forces if f.magnitude > 0]
    if not active:
        return
    if arrow_scale is None:
        lo, hi = profile.main_contour.bounding_box()
        extent = float(hi[1] - lo[1]) if not profile.main_contour.is_empty else 1.0
        arrow_scale = 0.25 * extent / max(f.magnitude for f in active)

    colors = {
        "self_weight": "tab:brown",
        "upstream_water": "tab:blue",
        "downstream_water": "tab:cyan",
        "uplift": "tab:purple",
        "seismic": "tab:red",
    }
    for f in active:
        ax.annotate(
            "",
            xy=(f.point.x + f.fx * arrow_scale, f.point.y + f.fy * arrow_scale),
            xytext=(f.point.x, f.point.y),
            arrowprops={"arrowstyle": "->", "color": colors.get(f.name, "k")},
            zorder=3,
        )
        ax.plot([], [], color=colors.get(f.name, "k"), label=f"{f.name} ({f.magnitude:.0f})")
    ax.legend(loc="best", fontsize="small")


def plot_base_stress(
    result: StabilityResult,
    title: str = "Base pressure",
    ax: Any = None,
) -> Any:
    """Plot the base pressure distribution from heel to toe.

    Inside the middle third the diagram is the linear heel-to-toe
    trapezoid; beyond it, a triangle over the compressed width ending at
    the more heavily loaded edge.

    Args:
        result: Completed stability result.
        title: Plot title.
        ax: Matplotlib axes (creates new figure if None).

    Returns:
        Matplotlib axes.

    Raises:
        ValueError: If the result has no force system (failed analysis).
    """
    import matplotlib.pyplot as plt

    if result.forces is None:
        raise ValueError("Cannot plot the base pressure of a failed analysis.")

    if ax is None:
        fig, ax = plt.subplots(1, 1, figsize=(8, 3))

    B = result.forces.base_width
    if not result.base_uplift_zone:
        x = np.array([0.0, B])
        sigma = np.array([result.sigma_heel, result.sigma_toe])
    elif result.resultant_outside_base:
        x = np.array([0.0, B])
        sigma = np.zeros(2)
    elif result.eccentricity < 0:
        # Resultant downstream of centre: compressed zone ends at the toe
        x = np.array([0.0, B - result.effective_width, B])
        sigma = np.array([0.0, 0.0, result.sigma_max])
    else:
        x = np.array([0.0, result.effective_width, B])
        sigma = np.array([result.sigma_max, 0.0, 0.0])

    ax.fill_between(x, 0.0, sigma, color="tab:orange", alpha=0.5)
    ax.plot(x, sigma, "k-", linewidth=1.0)
    ax.axhline(0.0, color="k", linewidth=0.5)
    ax.invert_yaxis()
    ax.set_title(title)
    ax.set_xlabel("distance from heel (m)")
    ax.set_ylabel("σ (kPa)")
    return ax
