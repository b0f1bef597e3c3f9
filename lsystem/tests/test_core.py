"""
Tests for core module.
"""

import itertools
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from functools import lru_cache

import pytest
from lsystem.core import Axiom, EmptyAxiomError, Rules, LSystem, partition, rewrite


def fibonacci_system(**kwargs) -> LSystem:
    rules = Rules()
    rules.introduce("a", ["b"])
    rules.introduce("b", ["a", "b"])
    return LSystem(Axiom.from_symbols(["a"]), rules, **kwargs)


def sierpinski_system(**kwargs) -> LSystem:
    rules = Rules()
    rules.introduce("A", ["A", "-", "B", "+", "A", "+", "B", "-", "A"])
    rules.introduce("B", ["B", "B"])
    return LSystem(Axiom.from_symbols(["A", "-", "B", "-", "B"]), rules, **kwargs)


class Tile(Enum):
    STEM = "S"
    LEAF = "L"


class TestAxiom:
    """Tests for Axiom class."""

    def test_from_symbols(self):
        """Symbols are kept in order."""
        axiom = Axiom.from_symbols(["A", "-", "B"])
        assert axiom.symbols == ["A", "-", "B"]
        assert len(axiom) == 3

    def test_from_string(self):
        """A string is a sequence of characters."""
        axiom = Axiom.from_symbols("ab")
        assert axiom.symbols == ["a", "b"]
        assert str(axiom) == "ab"

    def test_empty_fails(self):
        """Empty axiom is rejected at construction."""
        with pytest.raises(EmptyAxiomError):
            Axiom.from_symbols([])
        with pytest.raises(ValueError):
            Axiom.from_symbols("")

    def test_empty_escape_hatch(self):
        """Low-level constructor allows an empty axiom filled in later."""
        axiom = Axiom.new()
        assert len(axiom) == 0
        axiom.symbols.extend("a")
        assert axiom == Axiom.from_symbols("a")

    def test_equality(self):
        assert Axiom.from_symbols([1, 2]) == Axiom.from_symbols((1, 2))
        assert Axiom.from_symbols([1, 2]) != Axiom.from_symbols([2, 1])

    def test_tuple_coerced_to_list(self):
        """Direct construction from a tuple stores a mutable list."""
        axiom = Axiom(("a", "b"))
        assert axiom.symbols == ["a", "b"]
        assert isinstance(axiom.symbols, list)
        axiom.symbols.append("c")
        assert len(axiom) == 3


class TestRules:
    """Tests for Rules class."""

    def test_empty_rules(self):
        rules = Rules()
        assert len(rules) == 0
        assert rules.lookup("a") is None

    def test_introduce_and_lookup(self):
        rules = Rules()
        rules.introduce("B", ["B", "B"])
        assert rules.lookup("B") == ("B", "B")
        assert "B" in rules
        assert "A" not in rules

    def test_first_registration_wins(self):
        """Second introduce for the same predecessor is a no-op."""
        rules = Rules()
        rules.introduce("a", ["b"])
        rules.introduce("a", ["c", "c"])
        assert rules.lookup("a") == ("b",)
        assert len(rules) == 1

    def test_empty_production(self):
        rules = Rules().introduce("x", [])
        assert rules.lookup("x") == ()

    def test_from_dict(self):
        rules = Rules.from_dict({"a": "ab", "b": ["a"]})
        assert rules.lookup("a") == ("a", "b")
        assert rules.to_dict() == {"a": ["a", "b"], "b": ["a"]}

    def test_display(self):
        """One line per rule: predecessor -> productions."""
        rules = Rules()
        rules.introduce("A", "A-B")
        rules.introduce("B", "BB")
        lines = str(rules).splitlines()
        assert sorted(lines) == ["A -> A-B", "B -> BB"]

    def test_display_empty_production(self):
        """A vanishing symbol shows an empty right-hand side."""
        rules = Rules().introduce("x", []).introduce("y", "yx")
        assert str(rules) == "x -> \ny -> yx\n"

    def test_equality(self):
        r1 = Rules.from_dict({"a": "b", "b": "ab"})
        r2 = Rules.from_dict({"b": "ab", "a": "b"})
        assert r1 == r2
        r2.productions["c"] = ()
        assert r1 != r2

    def test_copy_is_independent(self):
        rules = Rules.from_dict({"a": "b"})
        copy = rules.copy()
        copy.introduce("b", "a")
        assert "b" not in rules

    def test_copy_keeps_subclass(self):
        class NamedRules(Rules):
            pass

        copy = NamedRules.from_dict({"a": "b"}).copy()
        assert type(copy) is NamedRules
        assert copy.lookup("a") == ("b",)


class TestLSystem:
    """Tests for LSystem engine."""

    def test_initial_state(self):
        """State starts as a copy of the axiom."""
        system = fibonacci_system()
        assert system.state == ["a"]
        assert system.generation == 0
        system.state.append("x")
        assert system.axiom.symbols == ["a"]

    def test_order_preservation(self):
        """Productions are concatenated in positional order."""
        rules = Rules()
        rules.introduce("A", ["X", "Y"])
        rules.introduce("B", ["Z"])
        system = LSystem(Axiom.from_symbols(["A", "B", "A"]), rules)

        assert system.advance() == ["X", "Y", "Z", "X", "Y"]

    def test_identity_for_unmapped(self):
        """Unmapped symbols keep value and position."""
        rules = Rules().introduce("a", ["b", "b"])
        system = LSystem(Axiom.from_symbols("+a-"), rules)

        assert system.advance() == ["+", "b", "b", "-"]
        assert system.advance() == ["+", "b", "b", "-"]

    def test_advance_returns_copy(self):
        system = fibonacci_system()
        word = system.advance()
        word.append("x")
        assert system.state == ["b"]

    def test_fibonacci_word(self):
        """Lengths follow the Fibonacci sequence."""
        system = fibonacci_system()
        expected = [
            ["b"],
            ["a", "b"],
            ["b", "a", "b"],
            ["a", "b", "b", "a", "b"],
            ["b", "a", "b", "a", "b", "b", "a", "b"],
        ]
        for word in expected:
            assert system.advance() == word
        assert system.generation == 5

    def test_never_terminates(self):
        """Vanishing rules give [] forever, never StopIteration."""
        rules = Rules()
        rules.introduce("a", [])
        rules.introduce("b", [])
        system = LSystem(Axiom.from_symbols("ab"), rules)

        words = list(itertools.islice(system, 10))
        assert words == [[]] * 10
        assert next(system) == []
        assert system.generation == 11

    def test_iterator_protocol(self):
        """Skip 6, take 1 over the infinite sequence."""
        system = fibonacci_system()
        assert iter(system) is system
        ((n, word),) = itertools.islice(enumerate(system, 1), 6, 7)
        assert n == 7
        assert len(word) == 21

    def test_enum_symbols(self):
        """Engine is generic over hashable symbols."""
        rules = Rules()
        rules.introduce(Tile.STEM, [Tile.STEM, Tile.LEAF])
        system = LSystem(Axiom.from_symbols([Tile.STEM]), rules)

        system.advance()
        assert system.advance() == [Tile.STEM, Tile.LEAF, Tile.LEAF]
        assert system.render() == "Tile.STEMTile.LEAFTile.LEAF"

    def test_equality(self):
        s1 = fibonacci_system()
        s2 = fibonacci_system()
        assert s1 == s2
        s1.advance()
        assert s1 != s2
        s2.advance()
        assert s1 == s2

    def test_copy_is_independent(self):
        system = sierpinski_system()
        system.advance()
        copy = system.copy()
        assert copy == system
        assert copy.generation == 1

        copy.advance()
        assert copy != system
        assert system.generation == 1

    def test_copy_keeps_subclass(self):
        class TracedRules(Rules):
            pass

        class TracedSystem(LSystem):
            pass

        system = TracedSystem(Axiom.from_symbols("a"), TracedRules.from_dict({"a": "ab"}))
        copy = system.copy()
        assert type(copy) is TracedSystem
        assert type(copy.rules) is TracedRules
        assert copy.advance() == ["a", "b"]

    def test_reset(self):
        system = sierpinski_system()
        for _ in range(3):
            system.advance()
        system.reset()
        assert system.state == ["A", "-", "B", "-", "B"]
        assert system.generation == 0
        assert system == sierpinski_system()

    def test_render(self):
        system = sierpinski_system()
        system.advance()
        assert system.render() == "A-B+A+B-A-BB-BB"
        assert len(system) == 15

    def test_invalid_executor(self):
        with pytest.raises(ValueError):
            fibonacci_system(executor="gpu")
        with pytest.raises(ValueError):
            fibonacci_system(max_workers=0)


class TestParallel:
    """Tests for the parallel rewriting step."""

    def test_partition_covers_range(self):
        slices = partition(10, 3)
        assert slices == [(0, 3), (3, 6), (6, 10)]

    def test_partition_more_parts_than_items(self):
        slices = partition(2, 8)
        assert slices == [(0, 1), (1, 2)]
        assert partition(0, 4) == []

    def test_rewrite_chunk(self):
        productions = {"a": ("b", "c"), "x": ()}
        assert rewrite(["a", "x", "z", "a"], productions) == ["b", "c", "z", "b", "c"]

    @pytest.mark.parametrize("workers", [2, 3, 7])
    def test_thread_pool_matches_serial(self, workers):
        """Result is independent of worker count."""
        serial = sierpinski_system(executor="serial")
        threaded = sierpinski_system(executor="thread", max_workers=workers,
                                     parallel_threshold=1)
        for _ in range(6):
            assert threaded.advance() == serial.advance()

    def test_process_pool_matches_serial(self):
        serial = fibonacci_system(executor="serial")
        pooled = fibonacci_system(executor="process", max_workers=2,
                                  parallel_threshold=4)
        for _ in range(8):
            assert pooled.advance() == serial.advance()

    def test_caller_owned_executor(self):
        """Engine uses a supplied executor and leaves it running."""
        with ThreadPoolExecutor(max_workers=4) as pool:
            system = sierpinski_system(executor=pool, max_workers=4,
                                       parallel_threshold=1)
            reference = sierpinski_system(executor="serial")
            for _ in range(4):
                assert system.advance() == reference.advance()
            assert pool.submit(len, "abc").result() == 3

    def test_below_threshold_stays_serial(self):
        system = sierpinski_system(executor="thread", max_workers=4,
                                   parallel_threshold=10**6)
        assert not system._is_parallel(len(system))


class TestIntegration:
    """Integration tests."""

    def test_sierpinski_matches_recursive_expansion(self):
        """Length after 9 generations equals direct recursive expansion."""
        productions = {
            "A": ["A", "-", "B", "+", "A", "+", "B", "-", "A"],
            "B": ["B", "B"],
        }

        @lru_cache(maxsize=None)
        def expanded_length(symbol, depth):
            if depth == 0 or symbol not in productions:
                return 1
            return sum(expanded_length(s, depth - 1) for s in productions[symbol])

        system = sierpinski_system(max_workers=4, parallel_threshold=1024)
        for _ in range(9):
            word = system.advance()

        expected = sum(expanded_length(s, 9) for s in ["A", "-", "B", "-", "B"])
        assert len(word) == expected

    def test_sierpinski_matches_recursive_words(self):
        """Generation 4 equals the recursively expanded word."""
        productions = {
            "A": ["A", "-", "B", "+", "A", "+", "B", "-", "A"],
            "B": ["B", "B"],
        }

        def expand(symbol, depth):
            if depth == 0 or symbol not in productions:
                return [symbol]
            return [x for s in productions[symbol] for x in expand(s, depth - 1)]

        system = sierpinski_system()
        for _ in range(4):
            word = system.advance()
        assert word == [x for s in "A-B-B" for x in expand(s, 4)]
