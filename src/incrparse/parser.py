"""Parser contract and top-level entry points.

Every parser implements one method:

    parse_next(cursor) -> Outcome[T]

Contract:
    - Success: cursor points exactly past the consumed units
    - Backtrack: cursor is back at the position it had on entry
    - Cut: cursor position is unspecified; the failure is committed
    - Incomplete: only while cursor.is_partial; cursor position unspecified

Plain functions taking a Cursor and returning an Outcome satisfy the same
contract; as_parser() wraps them (and literals) into Parser objects so the
adapter methods (map, verify, context, ...) are available on everything.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from incrparse.control import (
    Backtrack,
    Cut,
    ErrorKind,
    Incomplete,
    Outcome,
    ParseError,
    Success,
)
from incrparse.diagnostics import (
    ErrorTemplate,
    GrammarError,
    IncompleteInCompleteModeError,
    ParseFailedError,
)
from incrparse.stream.cursor import Cursor, InputData, Partial, Slice

if TYPE_CHECKING:
    from incrparse.token import Caseless

__all__ = [
    "FnParser",
    "ParseResult",
    "Parser",
    "ParserLike",
    "as_parser",
    "parse",
    "peek",
]

logger = logging.getLogger(__name__)


class Parser[T](ABC):
    """Base class for all combinators.

    Subclasses implement parse_next(); everything else is derived.

    Example:
        >>> from incrparse.token import take
        >>> take(3).map(str.upper).parse("abc")
        Success(value='ABC')
    """

    __slots__ = ()

    @abstractmethod
    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        """Run the parser at the cursor's position."""

    def __call__(self, cursor: Cursor) -> Outcome[T]:
        """Parsers are interchangeable with plain parser functions."""
        return self.parse_next(cursor)

    def parse(self, data: InputData | Partial[InputData]) -> Outcome[T]:
        """Parse all of data; see incrparse.parser.parse."""
        return parse(self, data)

    def peek(self, data: InputData | Partial[InputData] | Cursor) -> ParseResult[T]:
        """Parse a prefix of data; see incrparse.parser.peek."""
        return peek(self, data)

    # ------------------------------------------------------------------
    # Adapters
    # ------------------------------------------------------------------

    def map[U](self, fn: Callable[[T], U]) -> Parser[U]:
        """Transform the output on success."""
        return Map(self, fn)

    def try_map[U](
        self,
        fn: Callable[[T], U],
        *exceptions: type[Exception],
    ) -> Parser[U]:
        """Transform the output; listed exceptions become Backtrack.

        Args:
            fn: Conversion applied to the output
            *exceptions: Exception types treated as a mismatch
                (default: ValueError)
        """
        return TryMap(self, fn, exceptions or (ValueError,))

    def verify(self, predicate: Callable[[T], bool]) -> Parser[T]:
        """Backtrack unless predicate accepts the output."""
        return Verify(self, predicate)

    def value[U](self, value: U) -> Parser[U]:
        """Replace the output with a constant."""
        return Map(self, lambda _: value)

    def void(self) -> Parser[None]:
        """Discard the output."""
        return Map(self, lambda _: None)

    def context(self, label: str) -> Parser[T]:
        """Attach label to Backtrack and Cut errors."""
        return Context(self, label)

    def recognize(self) -> Parser[Slice]:
        """Output the consumed input instead of the parsed value."""
        return Recognize(self)

    def with_recognized(self) -> Parser[tuple[T, Slice]]:
        """Output (value, consumed input)."""
        return WithRecognized(self)

    def complete_err(self) -> Parser[T]:
        """Convert Incomplete into Backtrack (kind COMPLETE)."""
        return CompleteErr(self)

    def cut_err(self) -> Parser[T]:
        """Convert Backtrack into Cut."""
        return CutErr(self)


type ParserLike[T] = Parser[T] | Callable[[Cursor], Outcome[T]] | bytes | str | Caseless


@dataclass(frozen=True, slots=True)
class FnParser[T](Parser[T]):
    """Adapts a plain parser function to the Parser interface."""

    fn: Callable[[Cursor], Outcome[T]]

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        return self.fn(cursor)

    def __repr__(self) -> str:
        return f"FnParser({getattr(self.fn, '__qualname__', self.fn)!r})"


def as_parser(obj: ParserLike[Any]) -> Parser[Any]:
    """Normalize a parser-like value into a Parser.

    Accepts a Parser (returned unchanged), bytes/str literals and Caseless
    patterns (wrapped in literal()), or a callable taking a Cursor.

    Raises:
        GrammarError: If obj cannot act as a parser
    """
    from incrparse.token import Caseless, literal  # noqa: PLC0415 - circular

    match obj:
        case Parser():
            return obj
        case bytes() | str() | Caseless():
            return literal(obj)
        case _ if callable(obj):
            return FnParser(obj)
        case _:
            raise GrammarError(ErrorTemplate.invalid_parser(obj))


# ============================================================================
# ADAPTERS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Map[T, U](Parser[U]):
    parser: Parser[T]
    fn: Callable[[T], U]

    def parse_next(self, cursor: Cursor) -> Outcome[U]:
        match outcome := self.parser.parse_next(cursor):
            case Success(value):
                return Success(self.fn(value))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class TryMap[T, U](Parser[U]):
    parser: Parser[T]
    fn: Callable[[T], U]
    exceptions: tuple[type[Exception], ...]

    def parse_next(self, cursor: Cursor) -> Outcome[U]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Success(value):
                try:
                    return Success(self.fn(value))
                except self.exceptions as exc:
                    cursor.restore(start)
                    return Backtrack(ParseError.at(cursor, ErrorKind.VERIFY, cause=exc))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class Verify[T](Parser[T]):
    parser: Parser[T]
    predicate: Callable[[T], bool]

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Success(value) if not self.predicate(value):
                cursor.restore(start)
                return Backtrack(ParseError.at(cursor, ErrorKind.VERIFY))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class Context[T](Parser[T]):
    parser: Parser[T]
    label: str

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        match outcome := self.parser.parse_next(cursor):
            case Backtrack(error):
                return Backtrack(error.add_context(self.label))
            case Cut(error):
                return Cut(error.add_context(self.label))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class Recognize(Parser[Slice]):
    parser: Parser[Any]

    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Success():
                return Success(cursor.slice_since(start))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class WithRecognized[T](Parser[tuple[T, Slice]]):
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[tuple[T, Slice]]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Success(value):
                return Success((value, cursor.slice_since(start)))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class CompleteErr[T](Parser[T]):
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        start = cursor.checkpoint()
        match outcome := self.parser.parse_next(cursor):
            case Incomplete():
                cursor.restore(start)
                return Backtrack(ParseError.at(cursor, ErrorKind.COMPLETE))
            case _:
                return outcome


@dataclass(frozen=True, slots=True)
class CutErr[T](Parser[T]):
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        match outcome := self.parser.parse_next(cursor):
            case Backtrack():
                return outcome.cut()
            case _:
                return outcome


# ============================================================================
# ENTRY POINTS
# ============================================================================


@dataclass(frozen=True, slots=True)
class ParseResult[T]:
    """Outcome of a top-level peek plus the input it left unconsumed.

    Attributes:
        outcome: Success, Backtrack, Cut or Incomplete
        remaining: Unconsumed input (the whole input after Backtrack)

    Example:
        >>> from incrparse.token import literal
        >>> result = peek(literal("Hello"), "Hello World!")
        >>> result.remaining
        ' World!'
        >>> result.unwrap()
        'Hello'
    """

    outcome: Outcome[T]
    remaining: Slice

    @property
    def ok(self) -> bool:
        """True if the outcome is Success."""
        return isinstance(self.outcome, Success)

    def unwrap(self) -> T:
        """Return the output, raising if the parse did not succeed.

        Raises:
            ParseFailedError: On Backtrack, Cut, or Incomplete (reported
                as a COMPLETE failure at the end of the available input)
        """
        match self.outcome:
            case Success(value):
                return value
            case Backtrack(error):
                raise ParseFailedError(ErrorTemplate.parse_failed(error), error=error)
            case Cut(error):
                raise ParseFailedError(
                    ErrorTemplate.parse_failed(error), error=error, committed=True
                )
            case Incomplete():
                cursor = Cursor(self.remaining, position=len(self.remaining))
                error = ParseError.at(cursor, ErrorKind.COMPLETE)
                raise ParseFailedError(ErrorTemplate.parse_failed(error), error=error)


def _run[T](parser: Parser[T], cursor: Cursor) -> Outcome[T]:
    outcome = parser.parse_next(cursor)
    if isinstance(outcome, Incomplete) and not cursor.is_partial:
        raise IncompleteInCompleteModeError(ErrorTemplate.incomplete_in_complete_mode(parser))
    return outcome


def peek[T](
    parser: ParserLike[T],
    data: InputData | Partial[InputData] | Cursor,
) -> ParseResult[T]:
    """Run parser against a prefix of data.

    The input's mode is respected: Partial(...) input may yield Incomplete.
    Trailing input is allowed and returned as ParseResult.remaining.

    Raises:
        IncompleteInCompleteModeError: If parser reports Incomplete on
            complete input
    """
    cursor = Cursor.from_input(data)
    outcome = _run(as_parser(parser), cursor)
    return ParseResult(outcome, cursor.remaining)


def parse[T](parser: ParserLike[T], data: InputData | Partial[InputData]) -> Outcome[T]:
    """Run parser against all of data in complete mode.

    A Partial wrapper is ignored: parse() is the "no more data will arrive"
    entry point. Trailing input after a successful parse is a Backtrack of
    kind EOF at the first unconsumed unit.

    Raises:
        IncompleteInCompleteModeError: If parser reports Incomplete
    """
    cursor = Cursor.from_input(data).complete()
    outcome = _run(as_parser(parser), cursor)
    if isinstance(outcome, Success) and not cursor.is_eof:
        logger.debug("Parse left %d trailing units at %d", cursor.remaining_len, cursor.position)
        return Backtrack(ParseError.at(cursor, ErrorKind.EOF))
    return outcome
