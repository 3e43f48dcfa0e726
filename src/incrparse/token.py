"""Token primitives operating directly on the cursor.

Bounded and unbounded consumers:
- take(n): exactly n units
- take_while(range, set) / take_till(range, set): predicate-driven runs
- take_until(range, needle): everything before a literal needle
- literal(pattern) / literal(Caseless(pattern)): exact or caseless match
- one_of / none_of / any_unit: single units
- rest / rest_len: the remaining input

Partial-mode rule shared by every primitive: when the decision depends on
units that have not arrived yet, report Incomplete with the exact deficit
when it is computable. In complete mode the same situation is Backtrack.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Container
from dataclasses import dataclass, field

from incrparse.control import (
    Backtrack,
    ErrorKind,
    Incomplete,
    Needed,
    Outcome,
    ParseError,
    Success,
)
from incrparse.diagnostics import ErrorTemplate, GrammarError
from incrparse.parser import Parser
from incrparse.range import Range, RangeSpec
from incrparse.stream.cursor import Cursor, Slice, Unit

__all__ = [
    "Caseless",
    "UnitSet",
    "any_unit",
    "literal",
    "none_of",
    "one_of",
    "rest",
    "rest_len",
    "take",
    "take_till",
    "take_until",
    "take_while",
    "unit_predicate",
]

type UnitSet = Callable[[Unit], bool] | Unit | Container[Unit]


@dataclass(frozen=True, slots=True)
class Caseless[T: (bytes, str)]:
    """Marks a literal pattern for case-insensitive comparison.

    Bytes patterns compare ASCII letters caselessly; text patterns compare
    each scalar value after str.lower().

    Example:
        >>> literal(Caseless("ABcd")).parse("aBCd")
        Success(value='aBCd')
    """

    pattern: T


def unit_predicate(spec: UnitSet) -> Callable[[Unit], bool]:
    """Convert a predicate argument into a single-unit test.

    Accepted forms:
        - callable: used as-is
        - int: equality with one byte
        - str: membership of one scalar value (a 1-character str is a set
          of one)
        - bytes: membership of one byte
        - container (set, frozenset, range, tuple): membership

    str and bytes sets work on either kind of input. A byte unit matches a
    character of a str set when that character encodes to that single byte
    in UTF-8, so only ASCII members can match bytes; bytes sets match text
    units the same way.

    Example:
        >>> unit_predicate("ab")(ord("a"))
        True
        >>> unit_predicate(b"ab")("b")
        True

    Raises:
        GrammarError: If spec cannot test a unit
    """
    match spec:
        case bool():
            raise GrammarError(ErrorTemplate.invalid_unit_set(spec))
        case int():
            return lambda unit: unit == spec
        case str():
            return _text_set(spec)
        case bytes() | bytearray():
            return _byte_set(bytes(spec))
        case _ if callable(spec):
            return spec
        case Container():
            return spec.__contains__
        case _:
            raise GrammarError(ErrorTemplate.invalid_unit_set(spec))


def _text_set(chars: str) -> Callable[[Unit], bool]:
    ascii_bytes = frozenset(ord(char) for char in chars if char.isascii())

    def contains(unit: Unit) -> bool:
        if isinstance(unit, int):
            return unit in ascii_bytes
        return unit in chars

    return contains


def _byte_set(units: bytes) -> Callable[[Unit], bool]:
    def contains(unit: Unit) -> bool:
        if isinstance(unit, str):
            return unit.isascii() and ord(unit) in units
        return unit in units

    return contains


def _not(predicate: Callable[[Unit], bool]) -> Callable[[Unit], bool]:
    return lambda unit: not predicate(unit)


# ============================================================================
# FIXED LENGTH
# ============================================================================


@dataclass(frozen=True, slots=True)
class Take(Parser[Slice]):
    """Exactly count units."""

    count: int

    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        if cursor.next_unit_boundary(self.count) is None:
            if cursor.is_partial:
                return Incomplete(Needed.new(self.count - cursor.remaining_len))
            return Backtrack(ParseError.at(cursor, ErrorKind.SLICE))
        return Success(cursor.next_slice(self.count))


def take(count: int) -> Parser[Slice]:
    """Consume exactly count units.

    Counts are units: bytes for byte input, scalar values for text, so
    text is never split inside a character.

    Example:
        >>> take(9).peek("βèƒôřèÂßÇáƒƭèř").remaining
        'áƒƭèř'

    Raises:
        GrammarError: If count is negative
    """
    if count < 0:
        raise GrammarError(ErrorTemplate.range_negative(count))
    return Take(count)


# ============================================================================
# PREDICATE RUNS
# ============================================================================


@dataclass(frozen=True, slots=True)
class TakeRun(Parser[Slice]):
    """Longest run of units before stop() holds, within occurrence bounds."""

    occurrences: Range
    stop: Callable[[Unit], bool] = field(repr=False)

    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        low, high = self.occurrences.start, self.occurrences.end
        offset = cursor.offset_for(self.stop, limit=high)
        if offset is not None:
            if offset < low:
                return Backtrack(ParseError.at(cursor, ErrorKind.SLICE))
            return Success(cursor.next_slice(offset))

        # Every examined unit belongs to the run
        examined = cursor.remaining_len if high is None else min(cursor.remaining_len, high)
        if examined == high:
            return Success(cursor.next_slice(examined))
        if cursor.is_partial:
            return Incomplete(Needed.new(low - examined if low > examined else 1))
        if examined < low:
            return Backtrack(ParseError.at(cursor, ErrorKind.SLICE))
        return Success(cursor.next_slice(examined))


def take_while(occurrences: RangeSpec, accept: UnitSet) -> Parser[Slice]:
    """Consume the longest run of units accepted by accept.

    Args:
        occurrences: Bounds on the run length
        accept: Predicate, single unit or container of units

    Partial mode:
        A run reaching the end of available data below the upper bound is
        Incomplete(1), or Incomplete(min - available) while still short
        of the minimum.

    Example:
        >>> from incrparse.stream.cursor import Partial
        >>> take_while((0, None), str.isalpha).peek(Partial("abcd")).outcome
        Incomplete(needed=Needed(size=1))
        >>> take_while((0, None), str.isalpha).peek(Partial("abcd123")).outcome
        Success(value='abcd')
    """
    return TakeRun(Range.of(occurrences), _not(unit_predicate(accept)))


def take_till(occurrences: RangeSpec, stop: UnitSet) -> Parser[Slice]:
    """Consume the longest run of units before one matching stop.

    Same bounds and partial-mode rules as take_while.
    """
    return TakeRun(Range.of(occurrences), unit_predicate(stop))


# ============================================================================
# LITERALS
# ============================================================================


def _pattern_forms(pattern: bytes | str) -> tuple[bytes, str]:
    if isinstance(pattern, str):
        return pattern.encode("utf-8"), pattern
    return bytes(pattern), bytes(pattern).decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class TakeUntil(Parser[Slice]):
    """Units before the first occurrence of needle."""

    occurrences: Range
    needle: bytes | str
    _forms: tuple[bytes, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_forms", _pattern_forms(self.needle))

    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        needle = self._forms[1] if cursor.is_text else self._forms[0]
        low, high = self.occurrences.start, self.occurrences.end
        offset = cursor.find_slice(needle)
        if offset is None:
            # An occurrence past the upper bound can never satisfy it
            reachable = high is None or cursor.remaining_len < high + len(needle)
            if cursor.is_partial and reachable:
                return Incomplete()
            return Backtrack(ParseError.at(cursor, ErrorKind.SLICE, expected=(self._forms[1],)))
        if offset < low or (high is not None and offset > high):
            return Backtrack(ParseError.at(cursor, ErrorKind.SLICE, expected=(self._forms[1],)))
        return Success(cursor.next_slice(offset))


def take_until(occurrences: RangeSpec, needle: bytes | str) -> Parser[Slice]:
    """Consume everything before the first occurrence of needle.

    The needle itself is not consumed. In partial mode a needle that has
    not been seen yet is Incomplete (amount unknown) as long as a future
    occurrence could still satisfy the bounds.

    Raises:
        GrammarError: If needle is empty
    """
    if not needle:
        raise GrammarError(ErrorTemplate.empty_pattern("take_until"))
    return TakeUntil(Range.of(occurrences), needle)


@dataclass(frozen=True, slots=True)
class Literal(Parser[Slice]):
    """Exact (or caseless) match of a fixed pattern."""

    pattern: bytes | str
    caseless: bool = False
    _raw: bytes = field(init=False, repr=False, compare=False)
    _text: str = field(init=False, repr=False, compare=False)
    _folded: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        raw, text = _pattern_forms(self.pattern)
        object.__setattr__(self, "_raw", raw.lower() if self.caseless else raw)
        object.__setattr__(self, "_text", text)
        # str.lower() may change length; fold scalar by scalar
        object.__setattr__(self, "_folded", tuple(ch.lower() for ch in text))

    def _matches(self, available: Slice) -> bool:
        size = len(available)
        if isinstance(available, memoryview):
            if self.caseless:
                return bytes(available).lower() == self._raw[:size]
            return available == self._raw[:size]
        if self.caseless:
            return all(a.lower() == f for a, f in zip(available, self._folded))
        return available == self._text[:size]

    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        size = len(self._text) if cursor.is_text else len(self._raw)
        available = cursor.peek_slice(size)
        if not self._matches(available):
            return Backtrack(ParseError.at(cursor, ErrorKind.TAG, expected=(self._text,)))
        if len(available) < size:
            if cursor.is_partial:
                return Incomplete(Needed.new(size - len(available)))
            return Backtrack(ParseError.at(cursor, ErrorKind.TAG, expected=(self._text,)))
        return Success(cursor.next_slice(size))


def literal(pattern: bytes | str | Caseless[bytes] | Caseless[str]) -> Parser[Slice]:
    """Match pattern exactly, or caselessly when wrapped in Caseless.

    The output is the matched input slice, in the input's own casing.
    A str pattern on byte input is matched as its UTF-8 encoding.

    Example:
        >>> literal("Hello").peek("Hello World!").remaining
        ' World!'
        >>> literal(Caseless("ABcd")).parse("ABCD")
        Success(value='ABCD')
    """
    if isinstance(pattern, Caseless):
        return Literal(pattern.pattern, caseless=True)
    return Literal(pattern)


# ============================================================================
# SINGLE UNITS
# ============================================================================


@dataclass(frozen=True, slots=True)
class OneUnit(Parser[Unit]):
    """Next unit if accept() holds for it."""

    accept: Callable[[Unit], bool] = field(repr=False)

    def parse_next(self, cursor: Cursor) -> Outcome[Unit]:
        unit = cursor.peek_unit()
        if unit is None:
            if cursor.is_partial:
                return Incomplete.of(1)
            return Backtrack(ParseError.at(cursor, ErrorKind.TOKEN))
        if not self.accept(unit):
            return Backtrack(ParseError.at(cursor, ErrorKind.TOKEN))
        cursor.next_unit()
        return Success(unit)


def one_of(accept: UnitSet) -> Parser[Unit]:
    """Consume one unit accepted by accept."""
    return OneUnit(unit_predicate(accept))


def none_of(reject: UnitSet) -> Parser[Unit]:
    """Consume one unit not matching reject."""
    return OneUnit(_not(unit_predicate(reject)))


def any_unit() -> Parser[Unit]:
    """Consume any one unit."""
    return OneUnit(lambda _: True)


@dataclass(frozen=True, slots=True)
class Rest(Parser[Slice]):
    def parse_next(self, cursor: Cursor) -> Outcome[Slice]:
        return Success(cursor.next_slice(cursor.remaining_len))


@dataclass(frozen=True, slots=True)
class RestLen(Parser[int]):
    def parse_next(self, cursor: Cursor) -> Outcome[int]:
        return Success(cursor.remaining_len)


def rest() -> Parser[Slice]:
    """Consume all currently available units; never Incomplete."""
    return Rest()


def rest_len() -> Parser[int]:
    """Number of available units, without consuming them."""
    return RestLen()
