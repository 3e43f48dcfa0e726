"""Push-style driver for parsing a stream chunk by chunk.

IncrementalParser owns the pending input. Each feed() appends a chunk and
runs the item parser in partial mode as many times as the buffered data
allows, returning the items completed by that chunk:

    driver = IncrementalParser(length_take(be_u16))
    for chunk in socket_chunks:
        for frame in driver.feed(chunk):
            handle(frame)
    driver.finish()

An Incomplete outcome leaves the unconsumed tail buffered until more data
arrives. finish() declares end of stream and parses what remains in
complete mode.

Text streams (BufferConfig(text=True)) are decoded with an incremental
UTF-8 decoder, so a scalar value split across two chunks is held back in
the decoder until its last byte arrives. Item parsers therefore only ever
see whole scalar values.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import codecs
import logging
from dataclasses import dataclass

from incrparse.constants import DEFAULT_MAX_BUFFER_SIZE
from incrparse.control import (
    Backtrack,
    Cut,
    ErrorKind,
    Incomplete,
    Needed,
    ParseError,
    Success,
)
from incrparse.diagnostics import (
    BufferOverflowError,
    ErrorTemplate,
    IncompleteInCompleteModeError,
    ParseFailedError,
    StreamClosedError,
)
from incrparse.parser import Parser, ParserLike, as_parser
from incrparse.stream.cursor import Cursor

__all__ = ["BufferConfig", "IncrementalParser"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BufferConfig:
    """Immutable configuration for IncrementalParser.

    Attributes:
        max_buffer_size: Maximum pending units (bytes, or scalar values in
            text mode) held between feeds (default: 16 MB)
        text: Decode the byte stream as UTF-8 and parse text (default: False)
        errors: Codec error handler for text mode (default: "strict")

    Example:
        >>> config = BufferConfig(max_buffer_size=4096, text=True)
        >>> config.text
        True
    """

    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE
    text: bool = False
    errors: str = "strict"

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If max_buffer_size is not positive or errors names
                an unknown codec error handler
        """
        if self.max_buffer_size <= 0:
            msg = "max_buffer_size must be positive"
            raise ValueError(msg)
        try:
            codecs.lookup_error(self.errors)
        except LookupError:
            msg = f"Unknown codec error handler: {self.errors!r}"
            raise ValueError(msg) from None


class IncrementalParser[T]:
    """Feed chunks in, get completed items out.

    Not thread-safe: one driver per stream, fed from one thread.

    Lifecycle:
        - feed() any number of times
        - finish() once; the driver is then closed
        - a Backtrack or Cut from the item parser raises ParseFailedError
          and closes the driver. Items completed earlier in the same call
          travel on the exception (items), and stream_position locates the
          failure from the start of the stream

    Example:
        >>> from incrparse.binary import be_u16, length_take
        >>> driver = IncrementalParser(length_take(be_u16).map(bytes))
        >>> driver.feed(b"\\x00\\x03ab")
        []
        >>> driver.needed
        Needed(size=1)
        >>> driver.feed(b"c\\x00\\x01z")
        [b'abc', b'z']
        >>> driver.finish()
        []
    """

    __slots__ = (
        "_buffer",
        "_closed",
        "_config",
        "_consumed",
        "_decoder",
        "_needed",
        "_parser",
        "_text",
    )

    def __init__(self, parser: ParserLike[T], config: BufferConfig | None = None) -> None:
        """Create a driver for one stream.

        Args:
            parser: Parser for one item; applied repeatedly
            config: Buffer configuration (default: BufferConfig())
        """
        self._parser: Parser[T] = as_parser(parser)
        self._config = config or BufferConfig()
        self._buffer = bytearray()
        self._text = ""
        self._decoder = (
            codecs.getincrementaldecoder("utf-8")(self._config.errors)
            if self._config.text
            else None
        )
        self._needed: Needed | None = None
        self._closed = False
        self._consumed = 0

    @property
    def config(self) -> BufferConfig:
        """Buffer configuration in use."""
        return self._config

    @property
    def buffered(self) -> int:
        """Pending units not yet consumed by a completed item."""
        return len(self._text) if self._decoder is not None else len(self._buffer)

    @property
    def consumed(self) -> int:
        """Units consumed by completed items since the start of the stream."""
        return self._consumed

    @property
    def needed(self) -> Needed | None:
        """Deficit reported by the last Incomplete, or None if nothing is pending."""
        return self._needed

    @property
    def closed(self) -> bool:
        """True after finish() or a failed item."""
        return self._closed

    def feed(self, data: bytes | bytearray | memoryview) -> list[T]:
        """Append a chunk and return every item it completes.

        Returns:
            Items parsed from the buffered data, in stream order

        Raises:
            BufferOverflowError: If pending data would exceed
                max_buffer_size; the chunk is rejected and the driver
                state is unchanged
            ParseFailedError: If the item parser fails (Backtrack or Cut)
            StreamClosedError: If the driver is closed
            UnicodeDecodeError: In text mode with errors="strict" and
                invalid UTF-8
        """
        self._ensure_open()
        limit = self._config.max_buffer_size
        if self._decoder is not None:
            state = self._decoder.getstate()
            decoded = self._decoder.decode(data)
            size = len(self._text) + len(decoded)
            if size > limit:
                self._decoder.setstate(state)
                raise BufferOverflowError(ErrorTemplate.buffer_overflow(size, limit))
            self._text += decoded
        else:
            size = len(self._buffer) + len(data)
            if size > limit:
                raise BufferOverflowError(ErrorTemplate.buffer_overflow(size, limit))
            self._buffer += data
        logger.debug("Fed %d bytes, %d units buffered", len(data), self.buffered)
        return self._drain(final=False)

    def finish(self) -> list[T]:
        """Declare end of stream and parse the remaining data in complete mode.

        Returns:
            Items parsed from the remaining data

        Raises:
            ParseFailedError: If the remaining data does not form whole items
            StreamClosedError: If the driver is already closed
            UnicodeDecodeError: In text mode with errors="strict" and a
                truncated UTF-8 sequence at end of stream
        """
        self._ensure_open()
        if self._decoder is not None:
            self._text += self._decoder.decode(b"", final=True)
        try:
            return self._drain(final=True)
        finally:
            self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise StreamClosedError(ErrorTemplate.stream_closed())

    def _drain(self, *, final: bool) -> list[T]:
        # One snapshot per drain; byte items are memoryviews into it, so the
        # bytearray stays resizable
        data: bytes | str = self._text if self._decoder is not None else bytes(self._buffer)
        cursor = Cursor(data, partial=not final)
        items: list[T] = []
        self._needed = None
        try:
            while not cursor.is_eof:
                start = cursor.checkpoint()
                match self._parser.parse_next(cursor):
                    case Success(value):
                        if cursor.offset_from(start) == 0:
                            error = ParseError.at(
                                cursor, ErrorKind.ASSERT, expected=("item to consume input",)
                            )
                            cursor.restore(start)
                            self._fail(error, items, committed=True)
                        items.append(value)
                    case Incomplete(needed):
                        if final:
                            raise IncompleteInCompleteModeError(
                                ErrorTemplate.incomplete_in_complete_mode(self._parser)
                            )
                        cursor.restore(start)
                        self._needed = needed
                        logger.debug(
                            "Waiting at stream unit %d for %s more units",
                            self._consumed + cursor.position,
                            needed.size if needed.is_known else "an unknown number of",
                        )
                        break
                    case Backtrack(error):
                        cursor.restore(start)
                        self._fail(error, items, committed=False)
                    case Cut(error):
                        cursor.restore(start)
                        self._fail(error, items, committed=True)
        finally:
            self._discard(cursor.position)
        if items:
            logger.debug("Decoded %d items, %d units pending", len(items), self.buffered)
        return items

    def _discard(self, consumed: int) -> None:
        self._consumed += consumed
        if self._decoder is not None:
            self._text = self._text[consumed:]
        else:
            del self._buffer[:consumed]

    def _fail(self, error: ParseError, items: list[T], *, committed: bool) -> None:
        self._closed = True
        position = self._consumed + error.position
        logger.debug(
            "Item failed at stream unit %d after %d items: %s", position, len(items), error
        )
        raise ParseFailedError(
            ErrorTemplate.parse_failed(error),
            error=error,
            committed=committed,
            items=items,
            stream_position=position,
        )
