"""
Evolution runner for L-system generators.

The engine itself never terminates and never inspects its generations.
This module layers bounded runs on top of it:
    S(0) → S(1) → ... → S(n),  stop at n = max_generations or on a cycle

Key features:
- History tracking with configurable stride
- Cycle detection (a fixed point is a cycle of length 1)
- Skip/take helpers over the infinite generation sequence
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple
from collections import deque
import itertools
import logging
import time

import numpy as np

from .engine import LSystem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Generation:
    """
    Immutable snapshot of one generation.

    Attributes:
        index: Generation number (0 = axiom)
        symbols: Symbols of the generation
    """
    index: int
    symbols: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.symbols)

    def render(self, sep: str = "") -> str:
        return sep.join(str(s) for s in self.symbols)

    def to_dict(self) -> Dict[str, Any]:
        return {'index': self.index, 'symbols': list(self.symbols)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Generation":
        return cls(index=int(data['index']), symbols=tuple(data['symbols']))


@dataclass
class EvolutionStats:
    """Statistics from evolution run."""
    total_generations: int = 0
    final_length: int = 0
    peak_length: int = 0

    # Timing
    start_time: float = 0.0
    end_time: float = 0.0

    # Cycle analysis
    cycle_length: Optional[int] = None
    cycle_start: Optional[int] = None

    @property
    def elapsed_time(self) -> float:
        return self.end_time - self.start_time

    @property
    def generations_per_second(self) -> float:
        if self.elapsed_time > 0:
            return self.total_generations / self.elapsed_time
        return 0.0

    @property
    def is_fixed_point(self) -> bool:
        """True if the run stopped on a generation equal to its predecessor."""
        return self.cycle_length == 1


@dataclass
class EvolutionResult:
    """
    Complete result of an evolution run.

    Contains:
    - Final generation
    - History (if enabled)
    - Statistics
    - Stop reason
    """
    final: Generation
    history: List[Generation] = field(default_factory=list)
    stats: EvolutionStats = field(default_factory=EvolutionStats)
    stop_reason: str = "max_generations"

    def get_generation(self, index: int) -> Optional[Generation]:
        """Get generation by number (if in history)."""
        for generation in self.history:
            if generation.index == index:
                return generation
        return None

    def length_series(self) -> np.ndarray:
        """Generation lengths from history."""
        return np.array([len(g) for g in self.history], dtype=np.int64)

    def index_series(self) -> np.ndarray:
        return np.array([g.index for g in self.history], dtype=np.int64)


class CycleDetector:
    """
    Detect repeated generations using hashing.

    Hash collisions are verified against the stored generations within
    the window before a cycle is reported.
    """

    def __init__(self, window_size: int = 10000):
        self.window_size = window_size
        self._hashes: Dict[int, int] = {}  # hash -> first occurrence
        self._recent: deque = deque(maxlen=window_size)

    def check(self, generation: Generation) -> Optional[Tuple[int, int]]:
        """
        Check if generation was seen before.

        Returns:
            (cycle_start, cycle_length) if cycle detected, else None
        """
        key = hash(generation.symbols)

        if key in self._hashes:
            first = self._hashes[key]
            for old in self._recent:
                if old.index == first and old.symbols == generation.symbols:
                    return (first, generation.index - first)

        self._hashes[key] = generation.index
        self._recent.append(generation)

        if len(self._hashes) > self.window_size * 2:
            oldest = generation.index - self.window_size
            self._hashes = {h: i for h, i in self._hashes.items() if i >= oldest}

        return None

    def reset(self) -> None:
        self._hashes.clear()
        self._recent.clear()


class EvolutionRunner:
    """
    Bounded driver over an LSystem.

    Example:
        runner = EvolutionRunner(system)
        result = runner.run(max_generations=10, detect_cycles=True)

        for generation in result.history:
            print(f"n={generation.index}: {generation.render()}")
    """

    def __init__(self, system: LSystem):
        self.system = system
        self.cycle_detector = CycleDetector()
        self._callbacks: List[Callable[[LSystem, int], Optional[bool]]] = []

    def add_callback(self, callback: Callable[[LSystem, int], Optional[bool]]) -> None:
        """Add callback called after each generation; a truthy return stops the run."""
        self._callbacks.append(callback)

    def snapshot(self) -> Generation:
        return Generation(index=self.system.generation, symbols=tuple(self.system.state))

    def run(
        self,
        max_generations: int,
        store_history: bool = True,
        history_stride: int = 1,
        detect_cycles: bool = False,
    ) -> EvolutionResult:
        """
        Advance the system up to `max_generations` times.

        Args:
            max_generations: Maximum number of generations to produce
            store_history: Whether to keep generation snapshots
            history_stride: Keep every N-th generation
            detect_cycles: Stop when a generation repeats an earlier one

        Returns:
            EvolutionResult with final generation, history and statistics
        """
        if max_generations < 0:
            raise ValueError("max_generations must be non-negative")
        if history_stride < 1:
            raise ValueError("history_stride must be at least 1")

        stats = EvolutionStats(start_time=time.time())
        history: List[Generation] = []
        stop_reason = "max_generations"

        current = self.snapshot()
        stats.peak_length = len(current)
        if store_history:
            history.append(current)
        if detect_cycles:
            self.cycle_detector.reset()
            self.cycle_detector.check(current)

        for step in range(max_generations):
            self.system.advance()
            current = self.snapshot()

            stats.total_generations += 1
            stats.peak_length = max(stats.peak_length, len(current))

            if store_history and (step + 1) % history_stride == 0:
                history.append(current)

            if detect_cycles:
                cycle = self.cycle_detector.check(current)
                if cycle is not None:
                    stats.cycle_start, stats.cycle_length = cycle
                    stop_reason = f"cycle_detected (start={cycle[0]}, length={cycle[1]})"
                    logger.info(f"Generation {current.index}: {stop_reason}")
                    break

            stop = False
            for callback in self._callbacks:
                if callback(self.system, step):
                    stop = True
            if stop:
                stop_reason = "condition_met"
                break

        stats.end_time = time.time()
        stats.final_length = len(current)

        return EvolutionResult(
            final=current,
            history=history,
            stats=stats,
            stop_reason=stop_reason,
        )

    def run_until(
        self,
        condition: Callable[[LSystem, int], bool],
        max_generations: int = 1000,
        **kwargs,
    ) -> EvolutionResult:
        """
        Run until condition(system, step) returns True.

        Args:
            condition: Checked after each generation
            max_generations: Maximum generations before giving up
            **kwargs: Additional arguments for run()
        """
        self.add_callback(condition)
        try:
            return self.run(max_generations=max_generations, **kwargs)
        finally:
            self._callbacks.remove(condition)


# ===== Sequence helpers =====

def generations(
    system: LSystem,
    skip: int = 0,
    take: Optional[int] = None,
) -> Iterator[Tuple[int, List[Any]]]:
    """
    Yield (n, generation) pairs, numbered from the system's next generation.

    Args:
        system: Engine to advance
        skip: Number of generations to produce and discard first
        take: Number of pairs to yield (None = forever)
    """
    start = system.generation + 1
    numbered = zip(itertools.count(start), system)
    stop = None if take is None else skip + take
    return itertools.islice(numbered, skip, stop)


def nth_generation(system: LSystem, n: int) -> List[Any]:
    """
    Advance the system n generations and return the last one.

    For a fresh system this is generation n; n = 0 returns the current
    state without advancing.
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    if n == 0:
        return list(system.state)
    _, state = next(generations(system, skip=n - 1, take=1))
    return state
