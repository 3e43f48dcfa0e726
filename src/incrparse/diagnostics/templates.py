"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All misuse diagnostics are created here. NO f-strings in exception
    constructors! Every raise site calls one of these and passes the
    resulting Diagnostic to the exception class.
    """

    @staticmethod
    def range_negative(bound: int) -> Diagnostic:
        """Range bound below zero.

        Args:
            bound: The offending bound

        Returns:
            Diagnostic for RANGE_NEGATIVE
        """
        return Diagnostic(
            code=DiagnosticCode.RANGE_NEGATIVE,
            message=f"Range bound must be >= 0, got {bound}",
            hint="Occurrence counts are unsigned",
        )

    @staticmethod
    def range_inverted(start: int, end: int) -> Diagnostic:
        """Range minimum exceeds maximum.

        Args:
            start: Minimum occurrence count
            end: Maximum occurrence count

        Returns:
            Diagnostic for RANGE_INVERTED
        """
        return Diagnostic(
            code=DiagnosticCode.RANGE_INVERTED,
            message=f"Range minimum {start} exceeds maximum {end}",
            hint="Swap the bounds or widen the maximum",
        )

    @staticmethod
    def range_invalid_spec(spec: object) -> Diagnostic:
        """Value cannot be converted to a Range.

        Args:
            spec: The value passed as range specification

        Returns:
            Diagnostic for RANGE_INVALID_SPEC
        """
        return Diagnostic(
            code=DiagnosticCode.RANGE_INVALID_SPEC,
            message=f"Cannot build a range from {type(spec).__name__}: {spec!r}",
            hint="Use an int, a (min, max) tuple, a range() with step 1, or Range",
        )

    @staticmethod
    def empty_pattern(combinator: str) -> Diagnostic:
        """Literal or needle is empty.

        Args:
            combinator: Name of the combinator being constructed

        Returns:
            Diagnostic for EMPTY_PATTERN
        """
        return Diagnostic(
            code=DiagnosticCode.EMPTY_PATTERN,
            message=f"{combinator}() requires a non-empty pattern",
        )

    @staticmethod
    def invalid_unit_set(spec: object) -> Diagnostic:
        """Value cannot be used to test one unit.

        Args:
            spec: The value passed as predicate or set

        Returns:
            Diagnostic for INVALID_UNIT_SET
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_UNIT_SET,
            message=f"Cannot test input units against {type(spec).__name__}: {spec!r}",
            hint="Pass a callable, a single unit, or a container supporting 'in'",
        )

    @staticmethod
    def invalid_parser(obj: object) -> Diagnostic:
        """Value cannot be used as a parser.

        Args:
            obj: The value passed where a parser was expected

        Returns:
            Diagnostic for INVALID_PARSER
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_PARSER,
            message=f"{type(obj).__name__} is not a parser: {obj!r}",
            hint="Pass a Parser, a function taking a Cursor, a literal, or Caseless",
        )

    @staticmethod
    def checkpoint_foreign(position: int) -> Diagnostic:
        """Checkpoint restored onto a cursor over different data.

        Args:
            position: Position recorded in the checkpoint

        Returns:
            Diagnostic for CHECKPOINT_FOREIGN
        """
        return Diagnostic(
            code=DiagnosticCode.CHECKPOINT_FOREIGN,
            message=f"Checkpoint at position {position} belongs to another cursor",
            hint="Checkpoints must not outlive the call that produced them",
        )

    @staticmethod
    def offset_out_of_range(offset: int, available: int) -> Diagnostic:
        """Split or advance beyond the available units.

        Args:
            offset: Requested offset
            available: Units remaining in the cursor

        Returns:
            Diagnostic for OFFSET_OUT_OF_RANGE
        """
        return Diagnostic(
            code=DiagnosticCode.OFFSET_OUT_OF_RANGE,
            message=f"Offset {offset} outside available input (0..{available})",
        )

    @staticmethod
    def unsupported_input(data: object) -> Diagnostic:
        """Input type cannot back a cursor.

        Args:
            data: The value passed as parser input

        Returns:
            Diagnostic for UNSUPPORTED_INPUT
        """
        return Diagnostic(
            code=DiagnosticCode.UNSUPPORTED_INPUT,
            message=f"Unsupported input type: {type(data).__name__}",
            hint="Pass bytes, bytearray, memoryview, str, or Partial(...) of those",
        )

    @staticmethod
    def incomplete_in_complete_mode(parser: object) -> Diagnostic:
        """Parser reported Incomplete on complete input.

        Args:
            parser: The offending parser

        Returns:
            Diagnostic for INCOMPLETE_IN_COMPLETE_MODE
        """
        return Diagnostic(
            code=DiagnosticCode.INCOMPLETE_IN_COMPLETE_MODE,
            message=f"{parser!r} reported Incomplete on complete input",
            hint="Only report Incomplete when cursor.is_partial is True",
        )

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Recursive grammar nested beyond the depth limit.

        Args:
            max_depth: Configured maximum depth

        Returns:
            Diagnostic for MAX_DEPTH_EXCEEDED
        """
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum grammar nesting depth ({max_depth}) exceeded",
            hint="Input is nested too deeply or the grammar recurses without consuming",
        )

    @staticmethod
    def parse_failed(error: object) -> Diagnostic:
        """Parse ended in Backtrack or Cut where a value was required.

        Args:
            error: The ParseError describing the failure

        Returns:
            Diagnostic for PARSE_FAILED
        """
        return Diagnostic(
            code=DiagnosticCode.PARSE_FAILED,
            message=f"Parse failed: {error}",
        )

    @staticmethod
    def buffer_overflow(size: int, limit: int) -> Diagnostic:
        """Incremental buffer exceeded its configured bound.

        Args:
            size: Buffered byte count after the offending feed
            limit: Configured maximum

        Returns:
            Diagnostic for BUFFER_OVERFLOW
        """
        return Diagnostic(
            code=DiagnosticCode.BUFFER_OVERFLOW,
            message=f"Buffered input ({size} bytes) exceeds limit of {limit} bytes",
            hint="Raise BufferConfig.max_buffer_size or check the frame grammar",
        )

    @staticmethod
    def stream_closed() -> Diagnostic:
        """Incremental driver used after finish() or a failed frame.

        Returns:
            Diagnostic for STREAM_CLOSED
        """
        return Diagnostic(
            code=DiagnosticCode.STREAM_CLOSED,
            message="Incremental parser is closed",
            hint="Create a new IncrementalParser for the next stream",
        )
