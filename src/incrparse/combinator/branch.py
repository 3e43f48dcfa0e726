"""Alternation.

alt() is the only combinator that recovers from Backtrack by trying a
different parser at the same position. Cut and Incomplete end the search.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from incrparse.control import Backtrack, ErrorKind, Outcome, ParseError
from incrparse.diagnostics import ErrorTemplate, GrammarError
from incrparse.parser import Parser, ParserLike, as_parser
from incrparse.stream.cursor import Cursor

__all__ = ["alt"]


@dataclass(frozen=True, slots=True)
class Alt(Parser[Any]):
    """First alternative that does not Backtrack."""

    parsers: tuple[Parser[Any], ...]

    def parse_next(self, cursor: Cursor) -> Outcome[Any]:
        start = cursor.checkpoint()
        expected: list[str] = []
        for parser in self.parsers:
            match outcome := parser.parse_next(cursor):
                case Backtrack(error):
                    cursor.restore(start)
                    expected.extend(e for e in error.expected if e not in expected)
                case _:
                    return outcome
        return Backtrack(ParseError.at(cursor, ErrorKind.ALT, expected=tuple(expected)))


def alt(*parsers: ParserLike[Any]) -> Parser[Any]:
    """Try each parser in order at the same position.

    The outcome of the first parser that does not Backtrack is returned
    as-is, so a Cut in any branch aborts the whole alternation. When every
    branch backtracks, the result is Backtrack of kind ALT listing the
    expectations of all branches.

    Example:
        >>> alt("cat", "dog").peek("dogma").remaining
        'ma'
        >>> str(alt("cat", "dog").parse("cow").error)
        "alt error at position 0 near 'cow' (expected: 'cat', 'dog')"

    Raises:
        GrammarError: If no alternatives are given
    """
    if not parsers:
        raise GrammarError(ErrorTemplate.invalid_parser(parsers))
    return Alt(tuple(as_parser(p) for p in parsers))
