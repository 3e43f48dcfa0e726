"""Sequencing.

seq() runs parsers one after another and collects their outputs; the
helpers below keep only the interesting parts. A Backtrack anywhere in the
sequence restores the cursor to where the sequence started.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from operator import itemgetter
from typing import Any

from incrparse.control import Backtrack, Outcome, Success
from incrparse.parser import Parser, ParserLike, as_parser
from incrparse.stream.cursor import Cursor

__all__ = [
    "delimited",
    "preceded",
    "separated_pair",
    "seq",
    "terminated",
]


@dataclass(frozen=True, slots=True)
class Seq(Parser[tuple[Any, ...]]):
    parsers: tuple[Parser[Any], ...]

    def parse_next(self, cursor: Cursor) -> Outcome[tuple[Any, ...]]:
        start = cursor.checkpoint()
        values: list[Any] = []
        for parser in self.parsers:
            match outcome := parser.parse_next(cursor):
                case Success(value):
                    values.append(value)
                case Backtrack():
                    cursor.restore(start)
                    return outcome
                case _:
                    return outcome
        return Success(tuple(values))


def seq(*parsers: ParserLike[Any]) -> Parser[tuple[Any, ...]]:
    """Run parsers in order; output the tuple of their outputs.

    Example:
        >>> from incrparse.token import take
        >>> seq("key", "=", take(2)).parse("key=42")
        Success(value=('key', '=', '42'))
    """
    return Seq(tuple(as_parser(p) for p in parsers))


def preceded[T](prefix: ParserLike[Any], parser: ParserLike[T]) -> Parser[T]:
    """Match prefix then parser; output parser's value."""
    return seq(prefix, parser).map(itemgetter(1))


def terminated[T](parser: ParserLike[T], suffix: ParserLike[Any]) -> Parser[T]:
    """Match parser then suffix; output parser's value."""
    return seq(parser, suffix).map(itemgetter(0))


def delimited[T](
    opening: ParserLike[Any],
    parser: ParserLike[T],
    closing: ParserLike[Any],
) -> Parser[T]:
    """Match opening, parser, closing; output parser's value.

    Example:
        >>> from incrparse.token import take_till
        >>> delimited("(", take_till((0, None), ")"), ")").parse("(abc)")
        Success(value='abc')
    """
    return seq(opening, parser, closing).map(itemgetter(1))


def separated_pair[T, U](
    first: ParserLike[T],
    separator: ParserLike[Any],
    second: ParserLike[U],
) -> Parser[tuple[T, U]]:
    """Match first, separator, second; output (first, second)."""
    return seq(first, separator, second).map(itemgetter(0, 2))
