"""
Analysis module for L-systems.

Provides:
- Parikh vectors (symbol counts) of generations
- Growth matrices and length prediction without rewriting
- Asymptotic growth rate (spectral radius)
"""

from .growth import (
    alphabet_of,
    symbol_counts,
    growth_matrix,
    predicted_counts,
    predicted_lengths,
    growth_rate,
    summarize,
)

__all__ = [
    "alphabet_of",
    "symbol_counts",
    "growth_matrix",
    "predicted_counts",
    "predicted_lengths",
    "growth_rate",
    "summarize",
]
