"""Length-prefixed framing and fixed-width integer sub-parsers.

Framing combinators read a count with one parser and use it to drive a
second one:

    length_take(length)            -> the next `count` units
    length_repeat(length, item)    -> item exactly `count` times
    length_and_then(length, item)  -> item over exactly the next `count` units

Counts come from the input and are therefore untrusted. A 64-bit prefix can
claim up to 2**64 - 1 units; the resulting Incomplete deficit saturates at
USIZE_MAX rather than growing past a machine word.

The integer parsers work on byte input only and exist to feed the framing
combinators (be_u8 ... le_u64).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Literal

from incrparse.combinator.repeat import repeat
from incrparse.control import Backtrack, Outcome, Success
from incrparse.parser import Parser, ParserLike, as_parser, parse
from incrparse.stream.cursor import Cursor, Slice
from incrparse.token import take

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Framing
    "length_and_then",
    "length_repeat",
    "length_take",
    # Integers
    "be_u8",
    "be_u16",
    "be_u32",
    "be_u64",
    "le_u8",
    "le_u16",
    "le_u32",
    "le_u64",
    "u8",
]


# ============================================================================
# INTEGERS
# ============================================================================


def _uint(width: int, byteorder: Literal["big", "little"]) -> Parser[int]:
    # take() reports the missing byte count in partial mode
    return take(width).map(partial(int.from_bytes, byteorder=byteorder))


be_u8: Parser[int] = _uint(1, "big")
be_u16: Parser[int] = _uint(2, "big")
be_u32: Parser[int] = _uint(4, "big")
be_u64: Parser[int] = _uint(8, "big")
le_u8: Parser[int] = _uint(1, "little")
le_u16: Parser[int] = _uint(2, "little")
le_u32: Parser[int] = _uint(4, "little")
le_u64: Parser[int] = _uint(8, "little")
u8: Parser[int] = be_u8


# ============================================================================
# FRAMING
# ============================================================================


@dataclass(frozen=True, slots=True)
class LengthTake(Parser[Slice]):
    length: Parser[int]

    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        start = cursor.checkpoint()
        match outcome := self.length.parse_next(cursor):
            case Success(count):
                pass
            case _:
                return outcome
        outcome = take(count).parse_next(cursor)
        if isinstance(outcome, Backtrack):
            cursor.restore(start)
        return outcome


def length_take(length: ParserLike[int]) -> Parser[Slice]:
    """Read a count with length, then take that many units.

    If the frame body is short in partial mode, the deficit is the body
    length minus the units available after the prefix, clamped to
    USIZE_MAX.

    Example:
        >>> from incrparse.stream.cursor import Partial
        >>> bytes(length_take(be_u16).parse(b"\\x00\\x03abc").value)
        b'abc'
        >>> length_take(be_u16).peek(Partial(b"\\x00\\x05ab")).outcome
        Incomplete(needed=Needed(size=3))
    """
    return LengthTake(as_parser(length))


@dataclass(frozen=True, slots=True)
class LengthRepeat[T](Parser[list[T]]):
    length: Parser[int]
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[list[T]]:
        start = cursor.checkpoint()
        match outcome := self.length.parse_next(cursor):
            case Success(count):
                pass
            case _:
                return outcome
        outcome = repeat(count, self.parser).parse_next(cursor)
        if isinstance(outcome, Backtrack):
            cursor.restore(start)
        return outcome


def length_repeat[T](length: ParserLike[int], parser: ParserLike[T]) -> Parser[list[T]]:
    """Read a count with length, then apply parser exactly that many times.

    Example:
        >>> length_repeat(u8, be_u16).parse(b"\\x02\\x00\\x01\\x00\\x02")
        Success(value=[1, 2])
    """
    return LengthRepeat(as_parser(length), as_parser(parser))


@dataclass(frozen=True, slots=True)
class LengthAndThen[T](Parser[T]):
    length: Parser[int]
    parser: Parser[T]

    def parse_next(self, cursor: Cursor) -> Outcome[T]:
        start = cursor.checkpoint()
        match outcome := LengthTake(self.length).parse_next(cursor):
            case Success(frame):
                pass
            case _:
                return outcome
        # The frame is complete by construction; parse() also requires it
        # to be consumed entirely
        outcome = parse(self.parser, frame)
        if isinstance(outcome, Backtrack):
            cursor.restore(start)
        return outcome


def length_and_then[T](length: ParserLike[int], parser: ParserLike[T]) -> Parser[T]:
    """Read a count with length, then run parser over exactly that many units.

    The frame body is parsed in complete mode and must be consumed
    entirely. Error positions inside the body are relative to the frame.

    Example:
        >>> from incrparse.token import rest
        >>> length_and_then(u8, rest().map(bytes)).peek(b"\\x02abc").outcome
        Success(value=b'ab')
    """
    return LengthAndThen(as_parser(length), as_parser(parser))