"""incrparse exception hierarchy with structured diagnostics.

Exceptions signal misuse of the library (invalid grammar construction,
contract violations) or a terminal failure reported by an outer driver.
Ordinary parse failures are never raised: they are Backtrack, Cut and
Incomplete outcome values.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from collections.abc import Sequence

    from incrparse.control import ParseError


class IncrParseError(Exception):
    """Base exception for all incrparse errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize IncrParseError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class GrammarError(IncrParseError, ValueError):
    """Combinator constructed with invalid arguments.

    Examples:
    - Range with minimum above maximum
    - Empty literal or needle
    - Predicate argument that cannot test a unit
    """


class CursorError(IncrParseError):
    """Invalid cursor operation.

    Raised when restoring a checkpoint taken from another cursor or when
    splitting beyond the available units. Both indicate a bug in a
    combinator, never a property of the input.
    """


class IncompleteInCompleteModeError(IncrParseError):
    """A parser reported Incomplete against complete input.

    Incomplete is only legal while the cursor is in partial mode.
    """


class DepthLimitExceededError(IncrParseError):
    """Recursive grammar nested beyond the configured depth.

    This error indicates either:
    - Adversarial input designed to cause stack overflow
    - A left-recursive grammar re-entering itself without consuming
    """


class ParseFailedError(IncrParseError):
    """A parse that was required to produce a value failed.

    Raised by ParseResult.unwrap() and by IncrementalParser when a frame
    ends in Backtrack or Cut.

    Attributes:
        error: The ParseError describing where and what failed
        committed: True if the failure was a Cut
        items: Items completed before the failure in the same call
            (IncrementalParser only; empty otherwise)
        stream_position: Failure position counted from the start of the
            whole input. Equals error.position unless the input was fed
            in chunks.
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        error: ParseError,
        committed: bool = False,
        items: Sequence[object] = (),
        stream_position: int | None = None,
    ) -> None:
        """Initialize ParseFailedError.

        Args:
            message: Error message string OR Diagnostic object
            error: Failure cause from the parse
            committed: Whether the failure was a Cut
            items: Items completed before the failure
            stream_position: Absolute failure position (default: error.position)
        """
        super().__init__(message)
        self.error = error
        self.committed = committed
        self.items = list(items)
        self.stream_position = error.position if stream_position is None else stream_position


class BufferOverflowError(IncrParseError):
    """Incremental driver buffer grew beyond its configured bound."""


class StreamClosedError(IncrParseError):
    """Incremental driver fed or finished after it was closed.

    A driver closes after finish() and after any frame fails.
    """
