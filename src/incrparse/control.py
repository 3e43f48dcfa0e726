"""Parse outcomes, failure causes and streaming deficits.

Every parser returns exactly one of four outcome values:

    Success(value)      input matched; cursor advanced past the match
    Backtrack(error)    recoverable mismatch; cursor unchanged
    Cut(error)          committed mismatch; alternation must not recover
    Incomplete(needed)  partial mode only; more data required to decide

Outcomes are returned, never raised. Callers dispatch with ``match``:

    match parser.parse_next(cursor):
        case Success(value):
            ...
        case Backtrack():
            cursor.restore(checkpoint)
        case other:
            return other

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

from incrparse.constants import ERROR_FRAGMENT_LEN, USIZE_MAX

if TYPE_CHECKING:
    from incrparse.stream.cursor import Cursor, Slice

__all__ = [
    "Backtrack",
    "Cut",
    "ErrorKind",
    "Failure",
    "Incomplete",
    "Needed",
    "Outcome",
    "ParseError",
    "Success",
    "saturating_add",
    "saturating_sub",
]


def saturating_add(a: int, b: int) -> int:
    """Add two unit counts, saturating at USIZE_MAX.

    Example:
        >>> saturating_add(USIZE_MAX - 1, 5) == USIZE_MAX
        True
    """
    return min(a + b, USIZE_MAX)


def saturating_sub(a: int, b: int) -> int:
    """Subtract unit counts, saturating at zero and USIZE_MAX."""
    return min(max(a - b, 0), USIZE_MAX)


class ErrorKind(StrEnum):
    """What kind of match failed.

    Inherits from ``StrEnum`` so that ``str(kind)`` yields the plain tag
    (``"slice"``, ``"tag"``) in logs and error text.

    Kinds:
        ASSERT: Combinator invariant violated (e.g. repeat made no progress)
        TOKEN: Single unit did not match
        TAG: Literal did not match
        ALT: No alternative matched
        REPEAT: Too few (or, for repeat_till, too many) repetitions
        EOF: Expected end of input, found more
        SLICE: Run of units had the wrong length
        COMPLETE: Incomplete converted to failure by complete_err
        NOT: Negative lookahead matched
        VERIFY: Output rejected by a predicate or conversion
        FAIL: Unconditional failure
    """

    ASSERT = "assert"
    TOKEN = "token"
    TAG = "tag"
    ALT = "alt"
    REPEAT = "repeat"
    EOF = "eof"
    SLICE = "slice"
    COMPLETE = "complete"
    NOT = "not"
    VERIFY = "verify"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class ParseError:
    """Failure cause carried by Backtrack and Cut.

    Design:
        - Stores the absolute failure position plus a reference to the
          buffer (for the fragment), never a copy of the input
        - Expected tokens tuple (immutable) for alternation reports
        - Context labels appended as the error propagates outwards

    Example:
        >>> from incrparse.stream.cursor import Cursor
        >>> error = ParseError.at(Cursor("hello"), ErrorKind.TAG, expected=("world",))
        >>> str(error)
        "tag error at position 0 near 'hello' (expected: 'world')"
    """

    kind: ErrorKind
    position: int
    source: Slice = field(repr=False, compare=False)
    expected: tuple[str, ...] = ()
    context: tuple[str, ...] = ()
    cause: Exception | None = field(default=None, compare=False)

    @classmethod
    def at(
        cls,
        cursor: Cursor,
        kind: ErrorKind,
        *,
        expected: tuple[str, ...] = (),
        cause: Exception | None = None,
    ) -> ParseError:
        """Build an error at the cursor's current position."""
        return cls(kind, cursor.position, cursor.buffer, expected, (), cause)

    @property
    def fragment(self) -> Slice:
        """Input units at the failure position (zero-copy for bytes)."""
        return self.source[self.position : self.position + ERROR_FRAGMENT_LEN]

    def add_context(self, label: str) -> ParseError:
        """Return a copy with label appended (innermost label first)."""
        return replace(self, context=(*self.context, label))

    def __str__(self) -> str:
        """Single-line description: kind, position, fragment, expectations."""
        fragment = self.fragment
        if isinstance(fragment, memoryview):
            fragment = bytes(fragment)
        text = f"{self.kind} error at position {self.position} near {fragment!r}"
        if self.expected:
            expected_str = ", ".join(f"'{e}'" for e in self.expected)
            text += f" (expected: {expected_str})"
        if self.context:
            text += f" in {' > '.join(reversed(self.context))}"
        return text


@dataclass(frozen=True, slots=True)
class Needed:
    """Additional units required before a streaming parse can progress.

    Either unknown-but-positive (size is None) or an exact count in
    1..USIZE_MAX. Build with Needed.new(), which clamps oversize requests
    and maps 0 to UNKNOWN. Addition saturates at USIZE_MAX.

    Example:
        >>> Needed.new(3) + Needed.new(4)
        Needed(size=7)
        >>> Needed.new(USIZE_MAX) + 1 == Needed.new(USIZE_MAX)
        True
        >>> Needed.new(0) is Needed.UNKNOWN
        True
    """

    UNKNOWN: ClassVar[Needed]

    size: int | None = None

    def __post_init__(self) -> None:
        """Validate that an exact size is a positive machine-word count.

        Raises:
            ValueError: If size is outside 1..USIZE_MAX
        """
        if self.size is not None and not 1 <= self.size <= USIZE_MAX:
            msg = f"Needed.size must be in 1..{USIZE_MAX} or None, got {self.size}"
            raise ValueError(msg)

    @classmethod
    def new(cls, size: int) -> Needed:
        """Exact deficit, clamped to USIZE_MAX; zero or less means UNKNOWN."""
        if size <= 0:
            return cls.UNKNOWN
        return cls(min(size, USIZE_MAX))

    @property
    def is_known(self) -> bool:
        """True if the exact deficit is known."""
        return self.size is not None

    def __add__(self, other: Needed | int) -> Needed:
        """Saturating sum; UNKNOWN absorbs."""
        other_size = other.size if isinstance(other, Needed) else other
        if self.size is None or other_size is None:
            return Needed.UNKNOWN
        return Needed.new(saturating_add(self.size, other_size))

    __radd__ = __add__


Needed.UNKNOWN = Needed()


@dataclass(frozen=True, slots=True)
class Success[T]:
    """Input matched; value is the parser's output."""

    value: T


@dataclass(frozen=True, slots=True)
class Backtrack:
    """Recoverable mismatch; enclosing alternation may try another branch."""

    error: ParseError

    def cut(self) -> Cut:
        """Commit this failure."""
        return Cut(self.error)


@dataclass(frozen=True, slots=True)
class Cut:
    """Committed mismatch; propagates past alternation to the top level."""

    error: ParseError

    def backtrack(self) -> Backtrack:
        """Make this failure recoverable again."""
        return Backtrack(self.error)


@dataclass(frozen=True, slots=True)
class Incomplete:
    """Streaming only: the parse cannot be decided with the available data."""

    needed: Needed = Needed.UNKNOWN

    @classmethod
    def of(cls, size: int) -> Incomplete:
        """Incomplete with an exact (clamped) deficit."""
        return cls(Needed.new(size))


type Failure = Backtrack | Cut
type Outcome[T] = Success[T] | Backtrack | Cut | Incomplete
