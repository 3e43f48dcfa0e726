"""Diagnostic system for incrparse errors.

Provides structured error diagnostics with codes and hints for misuse of
the library. Parse outcomes live in incrparse.control.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode
from .errors import (
    BufferOverflowError,
    CursorError,
    DepthLimitExceededError,
    GrammarError,
    IncompleteInCompleteModeError,
    IncrParseError,
    ParseFailedError,
    StreamClosedError,
)
from .templates import ErrorTemplate

__all__ = [
    "BufferOverflowError",
    "CursorError",
    "DepthLimitExceededError",
    "Diagnostic",
    "DiagnosticCode",
    "ErrorTemplate",
    "GrammarError",
    "IncompleteInCompleteModeError",
    "IncrParseError",
    "ParseFailedError",
    "StreamClosedError",
]
