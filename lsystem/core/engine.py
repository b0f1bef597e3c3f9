"""
Rewriting engine for L-system generations.

Implements the parallel substitution step:
    S(n) → S(n+1) = h(s0) h(s1) ... h(s_{N-1})

where h maps each symbol to its production (or to itself when unmapped).
Every symbol is rewritten independently of its neighbours, so the step is
computed as an order-preserving parallel map over disjoint slices of the
current generation followed by concatenation in slice order.

Key features:
- Generic over any hashable symbol alphabet
- Serial, thread-pool or process-pool evaluation of large generations
- Iterator protocol: the generation sequence never ends
"""

from __future__ import annotations
import itertools
import logging
import os
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Dict, Generic, Hashable, List, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from .axiom import Axiom
from .rules import Rules

logger = logging.getLogger(__name__)

A = TypeVar("A", bound=Hashable)

EXECUTOR_KINDS = ("serial", "thread", "process")


def rewrite(symbols: Sequence[A], productions: Dict[A, Tuple[A, ...]]) -> List[A]:
    """
    Rewrite a slice of symbols with the given productions.

    Module-level so that process pools can pickle it.

    Args:
        symbols: Symbols to rewrite, in order
        productions: Predecessor -> productions mapping (read-only)

    Returns:
        Concatenated productions, in the order of `symbols`
    """
    out: List[A] = []
    for symbol in symbols:
        successor = productions.get(symbol)
        if successor is None:
            out.append(symbol)
        else:
            out.extend(successor)
    return out


def partition(length: int, parts: int) -> List[Tuple[int, int]]:
    """
    Split [0, length) into at most `parts` contiguous, disjoint slices.

    Empty slices are dropped; the union of the slices is always [0, length).
    """
    parts = max(1, min(parts, length))
    bounds = np.linspace(0, length, parts + 1, dtype=np.int64)
    return [
        (int(start), int(stop))
        for start, stop in zip(bounds[:-1], bounds[1:])
        if stop > start
    ]


class LSystem(Generic[A]):
    """
    Parametrizable L-system generator.

    Holds the axiom, the rule table and the current generation. Each call
    to `advance()` replaces every symbol of the current generation at once
    and returns a copy of the new generation. The engine is also an
    infinite iterator: `next(system)` is `advance()` and iteration never
    stops, even when the generation becomes empty or stops changing.

    Example:
        rules = Rules()
        rules.introduce("a", "b")
        rules.introduce("b", "ab")
        system = LSystem(Axiom.from_symbols("a"), rules)

        for n, word in itertools.islice(enumerate(system, 1), 5):
            print(n, "".join(word))
        # 1 b
        # 2 ab
        # 3 bab
        # ...

    Generations longer than `parallel_threshold` are split into one slice
    per worker and rewritten on a pool. A caller-owned `Executor` may be
    passed instead of an executor kind; it is used but never shut down.

    `rewrite` is pure Python, so a thread pool holds the GIL while it
    rewrites and gives no speed-up over "serial" on CPython. Use "process"
    for CPU-bound runs over large generations (symbols must be picklable).
    "thread" only scales on a free-threaded interpreter.
    """

    def __init__(
        self,
        axiom: Axiom[A],
        rules: Rules[A],
        executor: Union[str, Executor] = "thread",
        max_workers: Optional[int] = None,
        parallel_threshold: int = 4096,
    ):
        """
        Initialize engine.

        Args:
            axiom: Generation-0 symbols (copied into the state)
            rules: Rule table
            executor: "serial", "thread", "process" or an Executor instance
            max_workers: Number of slices/workers (default: CPU count)
            parallel_threshold: Minimum generation length dispatched to a pool
        """
        if not isinstance(executor, Executor) and executor not in EXECUTOR_KINDS:
            raise ValueError(
                f"Unknown executor: {executor!r} (expected one of {EXECUTOR_KINDS})"
            )
        if max_workers is not None and max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if parallel_threshold < 1:
            raise ValueError("parallel_threshold must be at least 1")

        self.axiom = axiom
        self.rules = rules
        self.state: List[A] = list(axiom.symbols)
        self.generation = 0

        self.executor = executor
        self.max_workers = max_workers
        self.parallel_threshold = parallel_threshold

    @property
    def workers(self) -> int:
        """Number of slices a parallel step is split into."""
        return self.max_workers or os.cpu_count() or 1

    def advance(self) -> List[A]:
        """
        Produce the next generation.

        Returns:
            Copy of the new generation (also stored as the engine state)
        """
        productions = self.rules.productions
        if self._is_parallel(len(self.state)):
            state = self._advance_parallel(productions)
        else:
            state = rewrite(self.state, productions)

        self.state = state
        self.generation += 1
        return list(state)

    def _is_parallel(self, length: int) -> bool:
        if self.executor == "serial":
            return False
        return length >= self.parallel_threshold and self.workers > 1

    def _advance_parallel(self, productions: Dict[A, Tuple[A, ...]]) -> List[A]:
        slices = partition(len(self.state), self.workers)
        chunks = [self.state[start:stop] for start, stop in slices]

        logger.debug(
            f"Generation {self.generation + 1}: rewriting {len(self.state)} symbols "
            f"in {len(chunks)} slices"
        )

        # Executor.map yields in submission order, so slices are merged by position
        if isinstance(self.executor, Executor):
            results = list(self.executor.map(rewrite, chunks, itertools.repeat(productions)))
        else:
            pool_cls = ThreadPoolExecutor if self.executor == "thread" else ProcessPoolExecutor
            with pool_cls(max_workers=len(chunks)) as pool:
                results = list(pool.map(rewrite, chunks, itertools.repeat(productions)))

        return list(itertools.chain.from_iterable(results))

    def reset(self) -> "LSystem[A]":
        """Return to generation 0 (state becomes a copy of the axiom)."""
        self.state = list(self.axiom.symbols)
        self.generation = 0
        return self

    def copy(self) -> "LSystem[A]":
        """Create an independent engine at the same generation."""
        new = type(self)(
            Axiom(list(self.axiom.symbols)),
            self.rules.copy(),
            executor=self.executor,
            max_workers=self.max_workers,
            parallel_threshold=self.parallel_threshold,
        )
        new.state = list(self.state)
        new.generation = self.generation
        return new

    def render(self, sep: str = "") -> str:
        """Current generation as text."""
        return sep.join(str(s) for s in self.state)

    def __iter__(self) -> "LSystem[A]":
        return self

    def __next__(self) -> List[A]:
        return self.advance()

    def __len__(self) -> int:
        return len(self.state)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LSystem):
            return False
        return (self.state == other.state and
                self.axiom == other.axiom and
                self.rules == other.rules)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return (f"LSystem(generation={self.generation}, length={len(self.state)}, "
                f"rules={len(self.rules)})")
