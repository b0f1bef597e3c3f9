"""
L-system generator

A parametrizable string-rewriting engine (generalized Lindenmayer system).
Every symbol of a generation is replaced at once by its production, and the
engine yields successive generations forever.

Main components:
- core: Rules, Axiom, LSystem engine, bounded evolution runner
- analysis: Parikh vectors, growth matrices, growth rate
- storage: JSON persistence of generation histories
- visualization: Generation length plots
"""

__version__ = "0.1.0"

from .core import Axiom, EmptyAxiomError, Rules, LSystem, EvolutionRunner
from .config import LSystemConfig

__all__ = [
    "Axiom",
    "EmptyAxiomError",
    "Rules",
    "LSystem",
    "EvolutionRunner",
    "LSystemConfig",
]
