"""
Generation series visualization functions.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Sequence
import numpy as np

_plt = None
def _get_plt():
    global _plt
    if _plt is None:
        import matplotlib.pyplot as plt
        _plt = plt
    return _plt


def plot_lengths(
    generations: np.ndarray,
    lengths: np.ndarray,
    ax: Optional[Any] = None,
    title: str = "",
    log_scale: bool = True,
    color: str = "blue",
    **kwargs,
) -> Any:
    """
    Plot generation length against generation number.

    Args:
        generations: Generation numbers
        lengths: Length of each generation
        ax: Matplotlib axis
        title: Plot title
        log_scale: Logarithmic y-axis (exponential growth becomes a line)
        color: Line color

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    ax.plot(generations, lengths, color=color, marker='o', **kwargs)
    ax.set_xlabel('Generation')
    ax.set_ylabel('Length')
    if log_scale and np.all(np.asarray(lengths) > 0):
        ax.set_yscale('log')

    if title:
        ax.set_title(title)

    return ax


def plot_symbol_counts(
    generations: np.ndarray,
    counts: np.ndarray,
    alphabet: Sequence[Any],
    ax: Optional[Any] = None,
    title: str = "",
    **kwargs,
) -> Any:
    """
    Plot per-symbol counts (one line per alphabet symbol).

    Args:
        generations: Generation numbers
        counts: Array of shape (len(generations), len(alphabet))
        alphabet: Symbols labelling the columns of `counts`
        ax: Matplotlib axis
        title: Plot title

    Returns:
        Matplotlib axis
    """
    plt = _get_plt()

    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 4))

    series: Dict[str, np.ndarray] = {
        str(symbol): counts[:, i] for i, symbol in enumerate(alphabet)
    }
    for name, values in series.items():
        ax.plot(generations, values, label=name, **kwargs)

    ax.set_xlabel('Generation')
    ax.set_ylabel('Count')
    ax.legend()

    if title:
        ax.set_title(title)

    return ax


def save_figure(ax: Any, path: str, dpi: int = 150) -> None:
    """Save the figure owning `ax` and close it."""
    plt = _get_plt()
    fig = ax.figure
    try:
        fig.savefig(path, dpi=dpi)
    finally:
        plt.close(fig)
