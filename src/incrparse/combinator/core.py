"""Core combinators: optional, lookahead, commitment and recursion.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from incrparse.constants import MAX_DEPTH
from incrparse.control import Backtrack, ErrorKind, Outcome, ParseError, Success
from incrparse.core.depth_guard import DepthGuard
from incrparse.parser import Parser, ParserLike, as_parser
from incrparse.stream.cursor import Cursor, Slice

__all__ = [
    "cut_err",
    "empty",
    "eof",
    "fail",
    "lazy",
    "not_",
    "opt",
    "peek_",
]


@dataclass(frozen=True, slots=True)
class Opt[T](Parser[T | None]):
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[T | None]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Backtrack():
                cursor.restore(start)
                return Success(None)
            case _:
                return outcome


def opt[T](parser: ParserLike[T]) -> Parser[T | None]:
    """Apply parser; a Backtrack becomes Success(None).

    Example:
        >>> opt("-").peek("42").outcome
        Success(value=None)
    """
    return Opt(as_parser(parser))


@dataclass(frozen=True, slots=True)
class Not(Parser[None]):
    parser: Parser[Any]

    def parse_next(self, cursor: Cursor) -> Outcome[None]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Success():
                cursor.restore(start)
                return Backtrack(ParseError.at(cursor, ErrorKind.NOT))
            case Backtrack():
                cursor.restore(start)
                return Success(None)
            case _:
                return outcome


def not_(parser: ParserLike[Any]) -> Parser[None]:
    """Succeed, consuming nothing, only if parser does not match."""
    return Not(as_parser(parser))


@dataclass(frozen=True, slots=True)
class Peek[T](Parser[T]):
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        start = cursor.checkpoint()
        outcome = self.parser.parse_next(cursor)
        if isinstance(outcome, Success):
            cursor.restore(start)
        return outcome


def peek_[T](parser: ParserLike[T]) -> Parser[T]:
    """Run parser without consuming input on success."""
    return Peek(as_parser(parser))


def cut_err[T](parser: ParserLike[T]) -> Parser[T]:
    """Commit: a Backtrack from parser becomes Cut.

    Example:
        >>> from incrparse.combinator.branch import alt
        >>> from incrparse.combinator.sequence import preceded
        >>> grammar = alt(preceded("#", cut_err("1")), "#2")
        >>> type(grammar.parse("#2")).__name__
        'Cut'
    """
    return as_parser(parser).cut_err()


@dataclass(frozen=True, slots=True)
class Eof(Parser[Slice]):
    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        if cursor.is_eof:
            return Success(cursor.next_slice(0))
        return Backtrack(ParseError.at(cursor, ErrorKind.EOF))


@dataclass(frozen=True, slots=True)
class Fail(Parser[Any]):
    def parse_next(self, cursor: Cursor) -> Outcome[Any]:
        return Backtrack(ParseError.at(cursor, ErrorKind.FAIL))


@dataclass(frozen=True, slots=True)
class Empty(Parser[None]):
    def parse_next(self, cursor: Cursor) -> Outcome[None]:
        return Success(None)


def eof() -> Parser[Slice]:
    """Match the end of the available input; output an empty slice."""
    return Eof()


def fail() -> Parser[Any]:
    """Always Backtrack (kind FAIL)."""
    return Fail()


def empty() -> Parser[None]:
    """Always succeed without consuming."""
    return Empty()


@dataclass(frozen=True, slots=True)
class Lazy[T](Parser[T]):
    """Parser built on first use, for self-referencing grammars.

    Each Lazy owns a DepthGuard: nested activations of the same Lazy on
    one call stack count as one nesting level each.
    """

    factory: Callable[[], ParserLike[T]] = field(repr=False)
    guard: DepthGuard = field(default_factory=DepthGuard, repr=False, compare=False)
    _resolved: list[Parser[T]] = field(default_factory=list, init=False, repr=False, compare=False)

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        if not self._resolved:
            self._resolved.append(as_parser(self.factory()))
        with self.guard:
            return self._resolved[0].parse_next(cursor)


def lazy[T](factory: Callable[[], ParserLike[T]], *, max_depth: int = MAX_DEPTH) -> Parser[T]:
    """Defer construction of a parser until it first runs.

    Allows recursive grammars: the factory may refer to a name that is
    bound after lazy() is called.

    Args:
        factory: Zero-argument callable returning the parser
        max_depth: Maximum nesting of this parser on one call stack
            (clamped against the interpreter recursion limit)

    Raises:
        DepthLimitExceededError: At parse time, if nesting exceeds max_depth

    Example:
        >>> from incrparse.combinator.branch import alt
        >>> from incrparse.combinator.sequence import delimited
        >>> nested = alt(delimited("(", lazy(lambda: nested), ")"), "x")
        >>> nested.parse("((x))")
        Success(value='x')
    """
    return Lazy(factory, DepthGuard(max_depth=max_depth))
