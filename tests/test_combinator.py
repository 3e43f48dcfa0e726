"""Tests for alternation, sequencing and core combinators."""

from __future__ import annotations

import pytest

from incrparse.combinator import (
    alt,
    cut_err,
    delimited,
    empty,
    eof,
    fail,
    lazy,
    not_,
    opt,
    peek_,
    preceded,
    repeat,
    separated,
    separated_pair,
    seq,
    terminated,
)
from incrparse.control import Backtrack, Cut, ErrorKind, Incomplete, Needed, Success
from incrparse.diagnostics import DepthLimitExceededError, GrammarError
from incrparse.parser import Parser, peek
from incrparse.stream.cursor import Partial
from incrparse.token import take, take_till, take_while

# ============================================================================
# ALT
# ============================================================================


class TestAlt:
    """Test alternation."""

    def test_first_match_wins(self) -> None:
        """Alternatives are tried in order."""
        result = peek(alt("dog", "do"), "dogma")

        assert result.outcome == Success("dog")
        assert result.remaining == "ma"

    def test_later_alternative(self) -> None:
        """A Backtrack moves on to the next alternative."""
        assert peek(alt("cat", "dog"), "dog").outcome == Success("dog")

    def test_all_fail(self) -> None:
        """All alternatives backtracking is Backtrack (ALT) with merged expectations."""
        result = peek(alt("cat", "dog", "cat"), "cow")

        assert isinstance(result.outcome, Backtrack)
        assert result.outcome.error.kind == ErrorKind.ALT
        assert result.outcome.error.expected == ("cat", "dog")
        assert result.remaining == "cow"

    def test_cut_stops_search(self) -> None:
        """A Cut is not recovered by later alternatives."""
        parser = alt(preceded("#", cut_err("1")), "#2")

        assert isinstance(peek(parser, "#2").outcome, Cut)

    def test_incomplete_stops_search(self) -> None:
        """An undecided alternative cannot be skipped."""
        parser = alt("abc", "x")

        assert peek(parser, Partial("ab")).outcome == Incomplete(Needed(1))

    def test_alternative_restores_between_attempts(self) -> None:
        """Each alternative starts at the same position."""
        parser = alt(seq("a", "b"), seq("a", "c"))

        assert peek(parser, "ac").outcome == Success(("a", "c"))

    def test_requires_alternatives(self) -> None:
        """alt() with nothing to try is a grammar error."""
        with pytest.raises(GrammarError):
            alt()


# ============================================================================
# SEQUENCING
# ============================================================================


class TestSequence:
    """Test seq and its projections."""

    def test_seq_tuple(self) -> None:
        """seq outputs a tuple of outputs."""
        assert peek(seq("key", "=", take(2)), "key=42").outcome == Success(("key", "=", "42"))

    def test_seq_backtrack_restores(self) -> None:
        """A failing element restores the whole sequence."""
        result = peek(seq("a", "b"), "ac")

        assert isinstance(result.outcome, Backtrack)
        assert result.outcome.error.position == 1
        assert result.remaining == "ac"

    def test_seq_incomplete_saturates(self) -> None:
        """A huge deficit after a consumed prefix stays at USIZE_MAX."""
        outcome = peek(seq(take(1), take(2**64 - 1)), Partial(b"3")).outcome

        assert outcome == Incomplete(Needed(2**64 - 1))

    def test_preceded(self) -> None:
        """preceded keeps the second output."""
        assert peek(preceded("-", take(1)), "-x").outcome == Success("x")

    def test_terminated(self) -> None:
        """terminated keeps the first output."""
        assert peek(terminated(take(1), ";"), "x;").outcome == Success("x")

    def test_delimited(self) -> None:
        """delimited keeps the middle output."""
        parser = delimited("(", take_till((0, None), ")"), ")")

        assert peek(parser, "(abc)").outcome == Success("abc")

    def test_separated_pair(self) -> None:
        """separated_pair keeps both ends."""
        parser = separated_pair(take_while((1, None), str.isalpha), "=", take(1))

        assert peek(parser, "k=v").outcome == Success(("k", "v"))


# ============================================================================
# CORE
# ============================================================================


class TestCore:
    """Test opt, not_, peek_, eof, fail, empty."""

    def test_opt(self) -> None:
        """opt turns Backtrack into Success(None)."""
        assert peek(opt("-"), "-1").outcome == Success("-")
        assert peek(opt("-"), "1").outcome == Success(None)

    def test_opt_keeps_cut(self) -> None:
        """opt does not recover committed failures."""
        assert isinstance(peek(opt(cut_err("a")), "b").outcome, Cut)

    def test_opt_keeps_incomplete(self) -> None:
        """opt does not guess in partial mode."""
        assert peek(opt("ab"), Partial("a")).outcome == Incomplete(Needed(1))

    def test_not(self) -> None:
        """not_ succeeds only when the parser fails, consuming nothing."""
        result = peek(not_("x"), "abc")

        assert result.outcome == Success(None)
        assert result.remaining == "abc"

        outcome = peek(not_("a"), "abc").outcome
        assert isinstance(outcome, Backtrack)
        assert outcome.error.kind == ErrorKind.NOT

    def test_peek_does_not_consume(self) -> None:
        """peek_ outputs the value but leaves the input."""
        result = peek(peek_(take(2)), "abc")

        assert result.outcome == Success("ab")
        assert result.remaining == "abc"

    def test_eof(self) -> None:
        """eof matches only at the end."""
        assert peek(eof(), "").outcome == Success("")
        outcome = peek(eof(), "a").outcome
        assert isinstance(outcome, Backtrack)
        assert outcome.error.kind == ErrorKind.EOF

    def test_fail(self) -> None:
        """fail always backtracks."""
        outcome = peek(fail(), "abc").outcome

        assert isinstance(outcome, Backtrack)
        assert outcome.error.kind == ErrorKind.FAIL

    def test_empty(self) -> None:
        """empty always succeeds without consuming."""
        result = peek(empty(), "abc")

        assert result.outcome == Success(None)
        assert result.remaining == "abc"


# ============================================================================
# LAZY / RECURSION
# ============================================================================


def nested_lists(max_depth: int) -> Parser[object]:
    """Grammar for nested lists such as [a,[b,c]] built with lazy()."""
    item: Parser[object]
    value = lazy(lambda: item, max_depth=max_depth)
    item = alt(
        delimited("[", separated((0, None), value, ","), "]"),
        take_while((1, None), str.isalpha),
    )
    return item


class TestLazy:
    """Test recursive grammars."""

    def test_recursive_grammar(self) -> None:
        """lazy() allows self-referencing grammars."""
        outcome = peek(nested_lists(50), "[a,[b,c],[]]").outcome

        assert outcome == Success(["a", ["b", "c"], []])

    def test_factory_called_once(self) -> None:
        """The factory runs on first use only."""
        calls: list[int] = []

        def factory() -> Parser[object]:
            calls.append(1)
            return take(1)

        parser = repeat(3, lazy(factory))
        peek(parser, "abc")
        peek(parser, "abc")

        assert len(calls) == 1

    def test_depth_limit(self) -> None:
        """Nesting beyond max_depth raises DepthLimitExceededError."""
        grammar = nested_lists(10)

        with pytest.raises(DepthLimitExceededError):
            peek(grammar, "[" * 20 + "]" * 20)

    def test_depth_recovers_after_limit(self) -> None:
        """The guard unwinds after an exceeded limit."""
        grammar = nested_lists(10)
        with pytest.raises(DepthLimitExceededError):
            peek(grammar, "[" * 20 + "]" * 20)

        assert peek(grammar, "[[a]]").outcome == Success([["a"]])

    def test_within_limit(self) -> None:
        """Nesting up to the limit parses."""
        grammar = nested_lists(10)

        assert isinstance(peek(grammar, "[" * 5 + "]" * 5).outcome, Success)
