"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages for misuse of the combinator
library (invalid grammars, invalid cursor operations). Parse failures are
not diagnostics: they are ordinary outcome values, see incrparse.control.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Grammar construction errors (invalid ranges, patterns)
        2000-2999: Cursor errors (foreign checkpoints, out-of-range offsets)
        3000-3999: Execution errors (contract violations, depth limits)
        4000-4999: Incremental driver errors (buffer limits, failed frames)
    """

    # Grammar construction errors (1000-1999)
    RANGE_NEGATIVE = 1001
    RANGE_INVERTED = 1002
    RANGE_INVALID_SPEC = 1003
    EMPTY_PATTERN = 1004
    INVALID_UNIT_SET = 1005
    INVALID_PARSER = 1006

    # Cursor errors (2000-2999)
    CHECKPOINT_FOREIGN = 2001
    OFFSET_OUT_OF_RANGE = 2002
    UNSUPPORTED_INPUT = 2003

    # Execution errors (3000-3999)
    INCOMPLETE_IN_COMPLETE_MODE = 3001
    MAX_DEPTH_EXCEEDED = 3002
    PARSE_FAILED = 3003

    # Incremental driver errors (4000-4999)
    BUFFER_OVERFLOW = 4001
    STREAM_CLOSED = 4002


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic as a single line plus optional hint.

        Example output:
            error[RANGE_INVERTED]: Range minimum 5 exceeds maximum 2
              = help: Swap the bounds or widen the maximum

        Returns:
            Formatted error message
        """
        text = f"error[{self.code.name}]: {self.message}"
        if self.hint:
            text += f"\n  = help: {self.hint}"
        return text
