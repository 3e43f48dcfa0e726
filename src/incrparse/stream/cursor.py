"""Mutable cursor infrastructure for incremental parsing.

Implements the "advance in place, restore via checkpoint" cursor pattern.
A single Cursor is created per top-level parse and threaded through the
whole combinator call tree; combinators backtrack by restoring a
Checkpoint, which is a copy of position metadata only.

Python 3.13+. Zero external dependencies.

Units:
    - Byte input (bytes, bytearray, memoryview): a unit is one byte and is
      exposed as an int (0-255). Slices are memoryview objects into the
      caller's buffer, so consumed fragments are never copied.
    - Text input (str): a unit is one Unicode scalar value and is exposed
      as a 1-character str. Offsets count scalar values, so every offset
      is a scalar boundary and no split can fall inside a multi-byte UTF-8
      sequence.

Modes:
    - Complete: all data is present; running out of data is a mismatch.
    - Partial: more data may arrive; running out of data is reported as
      Incomplete by the primitives. Wrap input in Partial(...) to select it.

Pattern Reference:
    - Rust nom / winnow Stream + Partial
    - Haskell attoparsec
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from incrparse.constants import ERROR_FRAGMENT_LEN
from incrparse.diagnostics import CursorError, ErrorTemplate

__all__ = [
    "Checkpoint",
    "Cursor",
    "InputData",
    "Partial",
    "Slice",
    "Unit",
]

type InputData = bytes | bytearray | memoryview | str
type Slice = memoryview | str
type Unit = int | str


@dataclass(frozen=True, slots=True)
class Partial[I: InputData]:
    """Marks input as streaming: more data may arrive after it.

    The wrapped data is used as-is; only the cursor mode changes.

    Example:
        >>> cursor = Cursor.from_input(Partial(b"abc"))
        >>> cursor.is_partial
        True
    """

    data: I


@dataclass(frozen=True, slots=True)
class Checkpoint:
    """Snapshot of a cursor position.

    Cheap to create and compare: holds the identity of the underlying
    buffer and an integer offset, never the data itself. Two checkpoints
    taken from the same cursor compare equal iff the positions are equal.

    Attributes:
        source_id: Identity of the buffer the checkpoint belongs to
        position: Absolute offset into that buffer
    """

    source_id: int
    position: int


class Cursor:
    """Mutable position over an immutable byte or text buffer.

    Key Design Decisions:
        1. Mutable position - combinators advance in place
        2. Checkpoint/restore - the only undo mechanism
        3. Slots - one instance per parse, but touched on every unit
        4. Zero-copy byte slices - memoryview over the caller's buffer

    Example:
        >>> cursor = Cursor(b"hello world")
        >>> bytes(cursor.next_slice(5))
        b'hello'
        >>> cursor.remaining_len
        6
        >>> cp = cursor.checkpoint()
        >>> _ = cursor.next_slice(6)
        >>> cursor.is_eof
        True
        >>> cursor.restore(cp)
        >>> bytes(cursor.remaining)
        b' world'
    """

    __slots__ = ("_haystack", "_partial", "_pos", "_text", "_view")

    def __init__(self, data: InputData, *, partial: bool = False, position: int = 0) -> None:
        """Create a cursor over data.

        Args:
            data: Byte or text buffer to parse
            partial: True if more data may arrive after this buffer
            position: Initial offset (default: start of buffer)

        Raises:
            CursorError: If data is not a supported buffer type or position
                lies outside it
        """
        if isinstance(data, str):
            self._view: memoryview | str = data
            self._haystack: bytes | bytearray | str | None = data
            self._text = True
        elif isinstance(data, bytes | bytearray):
            self._view = memoryview(data).toreadonly()
            self._haystack = data
            self._text = False
        elif isinstance(data, memoryview):
            self._view = data.cast("B") if data.format != "B" or data.ndim != 1 else data
            # Resolved lazily; only take_until needs substring search
            self._haystack = None
            self._text = False
        else:
            raise CursorError(ErrorTemplate.unsupported_input(data))
        if not 0 <= position <= len(self._view):
            raise CursorError(ErrorTemplate.offset_out_of_range(position, len(self._view)))
        self._pos = position
        self._partial = partial

    @classmethod
    def from_input(cls, data: InputData | Partial[InputData] | Cursor) -> Cursor:
        """Build a cursor from plain (complete) or Partial (streaming) input.

        Args:
            data: Buffer, Partial-wrapped buffer, or an existing cursor
                (returned unchanged)

        Returns:
            Cursor positioned at the start of the data
        """
        if isinstance(data, Cursor):
            return data
        if isinstance(data, Partial):
            return cls(data.data, partial=True)
        return cls(data)

    # ------------------------------------------------------------------
    # Mode and size
    # ------------------------------------------------------------------

    @property
    def is_partial(self) -> bool:
        """True if more data may arrive (streaming mode)."""
        return self._partial

    @property
    def is_text(self) -> bool:
        """True if units are Unicode scalar values rather than bytes."""
        return self._text

    @property
    def position(self) -> int:
        """Absolute offset of the cursor in its buffer."""
        return self._pos

    @property
    def remaining_len(self) -> int:
        """Number of units not yet consumed."""
        return len(self._view) - self._pos

    @property
    def is_eof(self) -> bool:
        """True if no units remain in the currently available data."""
        return self._pos >= len(self._view)

    @property
    def remaining(self) -> Slice:
        """Unconsumed units (zero-copy for byte input)."""
        return self._view[self._pos :]

    @property
    def buffer(self) -> Slice:
        """Whole underlying buffer, independent of position."""
        return self._view

    def complete(self) -> Cursor:
        """Return a cursor over the same data and position in complete mode.

        Checkpoints remain interchangeable between the two cursors.
        """
        other = Cursor.__new__(Cursor)
        other._view = self._view
        other._haystack = self._haystack
        other._text = self._text
        other._pos = self._pos
        other._partial = False
        return other

    # ------------------------------------------------------------------
    # Checkpoints
    # ------------------------------------------------------------------

    def checkpoint(self) -> Checkpoint:
        """Snapshot the current position. O(1), no data copied."""
        return Checkpoint(id(self._view), self._pos)

    def restore(self, checkpoint: Checkpoint) -> None:
        """Reset the cursor exactly to a previously taken checkpoint.

        Raises:
            CursorError: If the checkpoint was taken from another buffer
        """
        if checkpoint.source_id != id(self._view):
            raise CursorError(ErrorTemplate.checkpoint_foreign(checkpoint.position))
        self._pos = checkpoint.position

    def offset_from(self, checkpoint: Checkpoint) -> int:
        """Units consumed since checkpoint was taken."""
        return self._pos - checkpoint.position

    def slice_since(self, checkpoint: Checkpoint) -> Slice:
        """Units consumed since checkpoint was taken, as a slice."""
        return self._view[checkpoint.position : self._pos]

    # ------------------------------------------------------------------
    # Lookahead
    # ------------------------------------------------------------------

    def peek_unit(self) -> Unit | None:
        """Return the next unit without consuming it, or None at end of data."""
        if self._pos >= len(self._view):
            return None
        return self._view[self._pos]

    def peek_slice(self, n: int) -> Slice:
        """Return up to n next units without consuming them.

        May return fewer than n units near the end of available data.
        """
        return self._view[self._pos : self._pos + n]

    def next_unit_boundary(self, n: int) -> int | None:
        """Offset of the n-th following unit boundary.

        For both byte and text input the offset is counted in units, so the
        returned offset always lands on a boundary.

        Returns:
            n if at least n units remain, otherwise None
        """
        if n <= self.remaining_len:
            return n
        return None

    def find_slice(self, needle: bytes | str) -> int | None:
        """Offset of the first occurrence of needle in the remaining units.

        Returns:
            Offset relative to the current position, or None if not found
        """
        haystack = self._haystack
        if haystack is None:
            haystack = self._haystack = self._view.tobytes()  # type: ignore[union-attr]
        index = haystack.find(needle, self._pos)  # type: ignore[arg-type]
        if index < 0:
            return None
        return index - self._pos

    def offset_for(self, predicate: Callable[[Unit], bool], limit: int | None = None) -> int | None:
        """Offset of the first remaining unit satisfying predicate.

        Args:
            predicate: Unit test
            limit: Examine at most this many units (default: all remaining)

        Returns:
            Offset relative to the current position, or None if no unit
            within the examined range satisfies predicate
        """
        view = self._view
        end = len(view) if limit is None else min(len(view), self._pos + limit)
        for index in range(self._pos, end):
            if predicate(view[index]):
                return index - self._pos
        return None

    # ------------------------------------------------------------------
    # Consumption
    # ------------------------------------------------------------------

    def split_at(self, offset: int) -> tuple[Slice, Slice]:
        """Split remaining units into (consumed, rest) without advancing.

        Raises:
            CursorError: If offset exceeds the remaining units
        """
        self._check_offset(offset)
        split = self._pos + offset
        return self._view[self._pos : split], self._view[split:]

    def next_slice(self, offset: int) -> Slice:
        """Consume offset units and return them.

        Raises:
            CursorError: If offset exceeds the remaining units
        """
        self._check_offset(offset)
        start = self._pos
        self._pos += offset
        return self._view[start : self._pos]

    def next_unit(self) -> Unit | None:
        """Consume and return the next unit, or None at end of data."""
        if self._pos >= len(self._view):
            return None
        unit = self._view[self._pos]
        self._pos += 1
        return unit

    def fragment(self, position: int, length: int = ERROR_FRAGMENT_LEN) -> Slice:
        """Return up to length units starting at an absolute position."""
        return self._view[position : position + length]

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset <= self.remaining_len:
            raise CursorError(ErrorTemplate.offset_out_of_range(offset, self.remaining_len))

    def __repr__(self) -> str:
        """Show mode, position and a short preview of the remaining units."""
        preview = self.peek_slice(ERROR_FRAGMENT_LEN)
        if not self._text:
            preview = bytes(preview)
        mode = "partial" if self._partial else "complete"
        return f"Cursor({mode}, pos={self._pos}, remaining={preview!r})"
