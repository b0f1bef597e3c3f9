"""
Visualization module for the L-system generator.

Provides plots of generation growth:
- Length per generation
- Symbol counts per generation
"""

from .timeseries_viz import (
    plot_lengths,
    plot_symbol_counts,
    save_figure,
)

__all__ = [
    "plot_lengths",
    "plot_symbol_counts",
    "save_figure",
]
