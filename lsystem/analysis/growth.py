"""
Growth analysis for D0L-systems.

For a context-free deterministic L-system the symbol counts of each
generation (its Parikh vector) evolve linearly:
    c(n+1) = c(n) · M,   M[i, j] = #occurrences of σ_j in h(σ_i)

so generation lengths can be predicted without materializing the words,
and the asymptotic growth factor is the spectral radius ρ(M).
"""

from __future__ import annotations
from typing import Any, Dict, Hashable, Iterable, List, Sequence

import numpy as np
from scipy import linalg

from ..core.axiom import Axiom
from ..core.rules import Rules


def alphabet_of(axiom: Axiom, rules: Rules) -> List[Hashable]:
    """
    Ordered alphabet of a system.

    Symbols are listed in first-seen order: axiom symbols, then
    predecessors and production symbols of the rule table.
    """
    seen: Dict[Hashable, None] = {}
    for symbol in axiom.symbols:
        seen.setdefault(symbol, None)
    for predecessor, successor in rules.items():
        seen.setdefault(predecessor, None)
        for symbol in successor:
            seen.setdefault(symbol, None)
    return list(seen)


def symbol_counts(symbols: Iterable[Hashable], alphabet: Sequence[Hashable]) -> np.ndarray:
    """
    Parikh vector of a word over the given alphabet.

    Raises:
        KeyError: If a symbol is not in the alphabet
    """
    index = {s: i for i, s in enumerate(alphabet)}
    counts = np.zeros(len(alphabet), dtype=np.int64)
    for symbol in symbols:
        counts[index[symbol]] += 1
    return counts


def growth_matrix(rules: Rules, alphabet: Sequence[Hashable]) -> np.ndarray:
    """
    Growth matrix M of the rule table over the alphabet.

    Row i holds the Parikh vector of the production of alphabet[i];
    unmapped symbols contribute an identity row.
    """
    n = len(alphabet)
    matrix = np.zeros((n, n), dtype=np.int64)
    for i, symbol in enumerate(alphabet):
        successor = rules.lookup(symbol)
        if successor is None:
            matrix[i, i] = 1
        else:
            matrix[i] = symbol_counts(successor, alphabet)
    return matrix


def predicted_counts(axiom: Axiom, rules: Rules, generations: int) -> np.ndarray:
    """
    Parikh vectors of generations 0..generations.

    Counts are Python integers (object dtype), so exponential growth never
    wraps around.

    Returns:
        Array of shape (generations + 1, len(alphabet)), columns ordered
        as `alphabet_of(axiom, rules)`
    """
    if generations < 0:
        raise ValueError("generations must be non-negative")

    alphabet = alphabet_of(axiom, rules)
    matrix = growth_matrix(rules, alphabet).astype(object)

    counts = np.zeros((generations + 1, len(alphabet)), dtype=object)
    counts[0] = symbol_counts(axiom.symbols, alphabet).astype(object)
    for n in range(1, generations + 1):
        counts[n] = counts[n - 1] @ matrix
    return counts


def predicted_lengths(axiom: Axiom, rules: Rules, generations: int) -> np.ndarray:
    """Lengths of generations 0..generations, without rewriting."""
    return predicted_counts(axiom, rules, generations).sum(axis=1)


def growth_rate(rules: Rules, alphabet: Sequence[Hashable]) -> float:
    """
    Asymptotic growth factor ρ(M) of the system.

    1.0 means at most polynomial growth; the Fibonacci word grows by the
    golden ratio.
    """
    if len(alphabet) == 0:
        return 0.0
    eigenvalues = linalg.eigvals(growth_matrix(rules, alphabet).astype(np.float64))
    return float(np.max(np.abs(eigenvalues)))


def summarize(axiom: Axiom, rules: Rules, generations: int = 10) -> Dict[str, Any]:
    """Summary dictionary for logging and storage."""
    alphabet = alphabet_of(axiom, rules)
    lengths = predicted_lengths(axiom, rules, generations)
    return {
        'alphabet': [str(s) for s in alphabet],
        'rules': len(rules),
        'growth_rate': growth_rate(rules, alphabet),
        'lengths': lengths,
    }
