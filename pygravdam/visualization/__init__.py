"""Visualisation utilities for section profiles and base pressures."""

from pygravdam.visualization.plot2d import plot_base_stress, plot_profile

__all__ = ["plot_profile", "plot_base_stress"]
