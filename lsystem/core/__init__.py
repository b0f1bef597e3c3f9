"""
Core module for the L-system generator.

Contains:
- Rules: Single-symbol production table (first registration wins)
- Axiom: Non-empty generation-0 word
- LSystem: Parallel rewriting engine, an infinite iterator of generations
- EvolutionRunner: Bounded runs with history and cycle detection
"""

from .axiom import Axiom, EmptyAxiomError
from .rules import Rules
from .engine import LSystem, EXECUTOR_KINDS, rewrite, partition
from .evolution import (
    Generation, EvolutionStats, EvolutionResult,
    CycleDetector, EvolutionRunner,
    generations, nth_generation,
)

__all__ = [
    "Axiom",
    "EmptyAxiomError",
    "Rules",
    "LSystem",
    "EXECUTOR_KINDS",
    "rewrite",
    "partition",
    # Bounded evolution
    "Generation",
    "EvolutionStats",
    "EvolutionResult",
    "CycleDetector",
    "EvolutionRunner",
    "generations",
    "nth_generation",
]
