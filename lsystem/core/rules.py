"""
Rule table for context-free L-system rewriting.

Rules are single-symbol productions:
    p → w,  p ∈ Σ,  w ∈ Σ*

Key properties:
- At most one production per predecessor (first registration wins)
- Productions may be empty (symbol vanishes), a substitution or an expansion
- Symbols without a production rewrite to themselves (identity rule);
  identity rules are implicit and never stored in the table
"""

from __future__ import annotations
from typing import (
    Dict, Generic, Hashable, ItemsView, Iterable, Iterator, Mapping,
    Optional, Tuple, TypeVar,
)

A = TypeVar("A", bound=Hashable)


class Rules(Generic[A]):
    """
    Mapping from a predecessor symbol to its production.

    Introducing a second production for a predecessor that already has one
    is a silent no-op, so registering rules is idempotent and never fails.

    Example:
        rules = Rules()
        rules.introduce("A", "A-B+A+B-A")
        rules.introduce("B", ["B", "B"])
        rules.introduce("B", "B")  # ignored, B -> BB is kept

        rules.lookup("B")  # ('B', 'B')
        rules.lookup("-")  # None (identity)
    """

    def __init__(self, productions: Optional[Mapping[A, Iterable[A]]] = None):
        self.productions: Dict[A, Tuple[A, ...]] = {}
        if productions:
            for predecessor, successor in productions.items():
                self.introduce(predecessor, successor)

    @classmethod
    def from_dict(cls, mapping: Mapping[A, Iterable[A]]) -> "Rules[A]":
        """Create rule table from a mapping, introducing entries in order."""
        return cls(mapping)

    def introduce(self, predecessor: A, productions: Iterable[A]) -> "Rules[A]":
        """
        Register productions for a predecessor.

        Existing rules are never overwritten.

        Args:
            predecessor: Symbol to be replaced
            productions: Replacement symbols, in order (a `str` is split
                into characters)

        Returns:
            The rule table, for chaining
        """
        if predecessor not in self.productions:
            self.productions[predecessor] = tuple(productions)
        return self

    def lookup(self, symbol: A) -> Optional[Tuple[A, ...]]:
        """Return the registered productions for symbol, or None if unmapped."""
        return self.productions.get(symbol)

    def items(self) -> ItemsView[A, Tuple[A, ...]]:
        return self.productions.items()

    def to_dict(self) -> Dict[A, list]:
        """Convert to plain dictionary (predecessor -> list of symbols)."""
        return {k: list(v) for k, v in self.productions.items()}

    def copy(self) -> "Rules[A]":
        new = type(self)()
        new.productions = dict(self.productions)
        return new

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.productions

    def __len__(self) -> int:
        return len(self.productions)

    def __iter__(self) -> Iterator[A]:
        return iter(self.productions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rules):
            return False
        return self.productions == other.productions

    __hash__ = None  # mutable

    def __str__(self) -> str:
        return "".join(
            f"{k} -> {''.join(str(s) for s in v)}\n"
            for k, v in self.productions.items()
        )

    def __repr__(self) -> str:
        return f"Rules({len(self.productions)} rules)"
