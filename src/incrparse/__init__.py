"""incrparse - incremental, zero-copy parser combinators.

Composable primitives for recursive-descent parsers over byte or text
input, usable against fully-buffered input (complete mode) and input that
arrives in pieces (partial mode, select with Partial(...)).

Every parser returns one of four outcomes instead of raising:
    Success(value) - matched; the cursor advanced past the match
    Backtrack(error) - recoverable mismatch; alternation may try another branch
    Cut(error) - committed mismatch; propagates to the top level
    Incomplete(needed) - partial mode only; feed more data and retry

Public API:
    parse, peek - Top-level entry points
    Partial, Cursor, Checkpoint - Input model
    take, take_while, take_till, take_until, literal, Caseless - Token primitives
    repeat, repeat_till, separated, fold_repeat - Repetition
    alt, seq, preceded, terminated, delimited, separated_pair - Composition
    opt, not_, peek_, cut_err, eof, fail, empty, lazy - Core combinators
    length_take, length_repeat, length_and_then - Length-prefixed framing
    IncrementalParser, BufferConfig - Push-style chunk driver
    Range, Needed, ParseError, ErrorKind - Values

Exceptions (misuse only; parse failures are outcomes):
    IncrParseError - Base exception class
    GrammarError - Invalid combinator arguments
    CursorError - Invalid cursor operation
    IncompleteInCompleteModeError - Incomplete reported on complete input
    DepthLimitExceededError - Recursive grammar nested too deeply
    ParseFailedError - Required parse failed (unwrap(), incremental driver)
    BufferOverflowError - Incremental buffer limit exceeded
    StreamClosedError - Incremental driver used after closing

Submodules:
    incrparse.binary - Fixed-width integers (be_u16, le_u32, ...)
    incrparse.token - one_of, none_of, any_unit, rest, rest_len
"""

# Import order matters: the input model is loaded before the parser
# contract, which the incremental driver builds on.
from .control import Backtrack, Cut, ErrorKind, Incomplete, Needed, Outcome, ParseError, Success
from .diagnostics import (
    BufferOverflowError,
    CursorError,
    DepthLimitExceededError,
    GrammarError,
    IncompleteInCompleteModeError,
    IncrParseError,
    ParseFailedError,
    StreamClosedError,
)
from .stream import Checkpoint, Cursor, Partial
from .parser import Parser, ParseResult, as_parser, parse, peek
from .range import Range
from .token import Caseless, literal, take, take_till, take_until, take_while
from .combinator import (
    alt,
    cut_err,
    delimited,
    empty,
    eof,
    fail,
    fold_repeat,
    lazy,
    not_,
    opt,
    peek_,
    preceded,
    repeat,
    repeat_till,
    separated,
    separated_pair,
    seq,
    terminated,
)
from .binary import length_and_then, length_repeat, length_take
from .stream.incremental import BufferConfig, IncrementalParser

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("incrparse")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "Backtrack",
    "BufferConfig",
    "BufferOverflowError",
    "Caseless",
    "Checkpoint",
    "Cursor",
    "CursorError",
    "Cut",
    "DepthLimitExceededError",
    "ErrorKind",
    "GrammarError",
    "Incomplete",
    "IncompleteInCompleteModeError",
    "IncrParseError",
    "IncrementalParser",
    "Needed",
    "Outcome",
    "ParseError",
    "ParseFailedError",
    "ParseResult",
    "Parser",
    "Partial",
    "Range",
    "StreamClosedError",
    "Success",
    "__version__",
    "alt",
    "as_parser",
    "cut_err",
    "delimited",
    "empty",
    "eof",
    "fail",
    "fold_repeat",
    "lazy",
    "length_and_then",
    "length_repeat",
    "length_take",
    "literal",
    "not_",
    "opt",
    "parse",
    "peek",
    "peek_",
    "preceded",
    "repeat",
    "repeat_till",
    "separated",
    "separated_pair",
    "seq",
    "take",
    "take_till",
    "take_until",
    "take_while",
    "terminated",
]
