"""
Axiom representation for L-system rewriting.

The axiom is the generation-0 word of an L-system:
    ω = s0 s1 ... s_{N-1},  N ≥ 1

A zero-length axiom has no meaningful generation sequence, so the public
constructor rejects it immediately. An empty axiom can still be built
through the low-level escape hatch (`Axiom()` / `Axiom.new()`) when an
engine is composed by hand, e.g. for test fixtures.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Generic, Hashable, Iterable, Iterator, List, TypeVar

A = TypeVar("A", bound=Hashable)


class EmptyAxiomError(ValueError):
    """Raised when an axiom is built from an empty symbol sequence."""

    def __init__(self, message: str = ""):
        super().__init__(message or "Axiom must contain at least one symbol")


@dataclass
class Axiom(Generic[A]):
    """
    Initial ordered sequence of symbols.

    Attributes:
        symbols: Generation-0 symbols, in order

    Example:
        axiom = Axiom.from_symbols("A-B-B")
        print(len(axiom))  # 5

        # Escape hatch: empty axiom filled in manually
        axiom = Axiom.new()
        axiom.symbols.extend("a")
    """
    symbols: List[A] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.symbols, list):
            self.symbols = list(self.symbols)

    @classmethod
    def new(cls) -> "Axiom[A]":
        """Create an empty axiom (low-level escape hatch)."""
        return cls()

    @classmethod
    def from_symbols(cls, symbols: Iterable[A]) -> "Axiom[A]":
        """
        Create axiom from a non-empty sequence of symbols.

        A `str` is taken as a sequence of single characters.

        Raises:
            EmptyAxiomError: If `symbols` is empty
        """
        symbols = list(symbols)
        if not symbols:
            raise EmptyAxiomError()
        return cls(symbols=symbols)

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[A]:
        return iter(self.symbols)

    def __str__(self) -> str:
        return "".join(str(s) for s in self.symbols)
