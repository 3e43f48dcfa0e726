"""Repetition engine.

Combinators:
- repeat(range, parser): exact, at-least, at-most and bounded repetition
- fold_repeat(range, parser, init, fold): same, folding instead of collecting
- repeat_till(range, parser, terminator): repeat until terminator matches
- separated(range, item, separator): items with separators between them

Iteration rules (all combinators):
- Success: accumulate and continue, up to the upper bound
- Backtrack: restore the iteration checkpoint and stop; Success if the
  minimum is met, otherwise Backtrack (kind REPEAT) with the cursor
  restored to where the repetition started
- Cut: propagate immediately, no restore
- Incomplete: propagate immediately, no restore; the deficit is the inner
  parser's (already saturated) Needed

Loops are iterative: stack depth does not grow with the occurrence count.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from incrparse.control import (
    Backtrack,
    Cut,
    ErrorKind,
    Outcome,
    ParseError,
    Success,
)
from incrparse.parser import Parser, ParserLike, as_parser
from incrparse.range import Range, RangeSpec
from incrparse.stream.cursor import Cursor

__all__ = [
    "fold_repeat",
    "repeat",
    "repeat_till",
    "separated",
]


def _append[T](items: list[T], item: T) -> list[T]:
    items.append(item)
    return items


def _too_few(cursor: Cursor, error: ParseError) -> Backtrack:
    """Minimum not met; report at the restored start, keeping inner expectations."""
    return Backtrack(ParseError.at(cursor, ErrorKind.REPEAT, expected=error.expected))


def _no_progress(cursor: Cursor, combinator: str) -> Cut:
    """Inner parser succeeded without consuming inside an unbounded loop."""
    return Cut(ParseError.at(cursor, ErrorKind.ASSERT, expected=(f"{combinator} to consume input",)))


@dataclass(frozen=True, slots=True)
class FoldRepeat[T, A](Parser[A]):
    """Repetition engine shared by repeat() and fold_repeat()."""

    occurrences: Range
    parser: Parser[T]
    init: Callable[[], A] = field(repr=False)
    fold: Callable[[A, T], A] = field(repr=False)

    def parse_next(self, cursor: Cursor) -> Outcome[A]:
        low, high = self.occurrences.start, self.occurrences.end
        start = cursor.checkpoint()
        acc = self.init()
        count = 0
        while high is None or count < high:
            before = cursor.checkpoint()
            match outcome := self.parser.parse_next(cursor):
                case Success(value):
                    if high is None and cursor.offset_from(before) == 0:
                        return _no_progress(cursor, "repeat")
                    acc = self.fold(acc, value)
                    count += 1
                case Backtrack(error):
                    cursor.restore(before)
                    if count >= low:
                        return Success(acc)
                    cursor.restore(start)
                    return _too_few(cursor, error)
                case _:
                    return outcome
        return Success(acc)


def repeat[T](occurrences: RangeSpec, parser: ParserLike[T]) -> Parser[list[T]]:
    """Apply parser repeatedly, collecting outputs into a list.

    Args:
        occurrences: (0, None) for zero-or-more, (1, None) for
            one-or-more, n for exactly n, (m, n) for m..=n
        parser: Element parser

    Example:
        >>> from incrparse.token import literal
        >>> repeat((1, None), "ab").peek("ababc").remaining
        'c'
        >>> repeat(3, "ab").parse("abab")
        Backtrack(error=ParseError(kind=<ErrorKind.REPEAT: 'repeat'>, position=0, expected=('ab',), context=(), cause=None))
    """
    return FoldRepeat(Range.of(occurrences), as_parser(parser), list, _append)


def fold_repeat[T, A](
    occurrences: RangeSpec,
    parser: ParserLike[T],
    init: Callable[[], A],
    fold: Callable[[A, T], A],
) -> Parser[A]:
    """Apply parser repeatedly, folding outputs into an accumulator.

    Example:
        >>> from incrparse.token import take
        >>> fold_repeat((0, None), take(1), int, lambda n, _: n + 1).parse("abc")
        Success(value=3)
    """
    return FoldRepeat(Range.of(occurrences), as_parser(parser), init, fold)


@dataclass(frozen=True, slots=True)
class RepeatTill[T, U](Parser[tuple[list[T], U]]):
    occurrences: Range
    parser: Parser[T]
    terminator: Parser[U]

    def parse_next(self, cursor: Cursor) -> Outcome[tuple[list[T], U]]:
        low, high = self.occurrences.start, self.occurrences.end
        start = cursor.checkpoint()
        items: list[T] = []
        while True:
            before = cursor.checkpoint()
            if len(items) >= low:
                match outcome := self.terminator.parse_next(cursor):
                    case Success(end):
                        return Success((items, end))
                    case Backtrack(error):
                        cursor.restore(before)
                        if high is not None and len(items) >= high:
                            cursor.restore(start)
                            return _too_few(cursor, error)
                    case _:
                        return outcome
            match outcome := self.parser.parse_next(cursor):
                case Success(value):
                    if cursor.offset_from(before) == 0:
                        return _no_progress(cursor, "repeat_till")
                    items.append(value)
                case Backtrack(error):
                    cursor.restore(start)
                    return _too_few(cursor, error)
                case _:
                    return outcome


def repeat_till[T, U](
    occurrences: RangeSpec,
    parser: ParserLike[T],
    terminator: ParserLike[U],
) -> Parser[tuple[list[T], U]]:
    """Apply parser until terminator matches; output (items, terminator value).

    Once the minimum count is reached, the terminator is tried before each
    further element. Reaching the maximum count without a terminator is a
    Backtrack.

    Example:
        >>> from incrparse.token import take
        >>> repeat_till((0, None), take(1), ";").peek("ab;c").outcome
        Success(value=(['a', 'b'], ';'))
    """
    return RepeatTill(Range.of(occurrences), as_parser(parser), as_parser(terminator))


@dataclass(frozen=True, slots=True)
class Separated[T](Parser[list[T]]):
    occurrences: Range
    item: Parser[T]
    separator: Parser[Any]

    def parse_next(self, cursor: Cursor) -> Outcome[list[T]]:
        low, high = self.occurrences.start, self.occurrences.end
        start = cursor.checkpoint()
        items: list[T] = []
        if high == 0:
            return Success(items)

        match outcome := self.item.parse_next(cursor):
            case Success(value):
                items.append(value)
            case Backtrack(error):
                cursor.restore(start)
                return Success(items) if low == 0 else _too_few(cursor, error)
            case _:
                return outcome

        while high is None or len(items) < high:
            before = cursor.checkpoint()
            match outcome := self.separator.parse_next(cursor):
                case Success():
                    pass
                case Backtrack():
                    cursor.restore(before)
                    break
                case _:
                    return outcome
            match outcome := self.item.parse_next(cursor):
                case Success(value):
                    if cursor.offset_from(before) == 0:
                        return _no_progress(cursor, "separated")
                    items.append(value)
                case Backtrack():
                    cursor.restore(before)
                    break
                case _:
                    return outcome

        if len(items) < low:
            cursor.restore(start)
            return Backtrack(ParseError.at(cursor, ErrorKind.REPEAT))
        return Success(items)


def separated[T](
    occurrences: RangeSpec,
    item: ParserLike[T],
    separator: ParserLike[Any],
) -> Parser[list[T]]:
    """Items separated by separator; a trailing separator is not consumed.

    Example:
        >>> from incrparse.token import take_while
        >>> separated((1, None), take_while((1, None), str.isdigit), ",").parse("1,22,333")
        Success(value=['1', '22', '333'])
    """
    return Separated(Range.of(occurrences), as_parser(item), as_parser(separator))
