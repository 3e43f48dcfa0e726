"""Tests for length-prefixed framing and integer sub-parsers.

Includes the adversarial length-prefix cases: a 64-bit prefix claiming
close to 2**64 units must report a saturated deficit, never a wrapped one.
"""

from __future__ import annotations

import pytest
from hypothesis import event, given, settings
from hypothesis import strategies as st

from incrparse.binary import (
    be_u8,
    be_u16,
    be_u32,
    be_u64,
    le_u16,
    le_u32,
    le_u64,
    length_and_then,
    length_repeat,
    length_take,
    u8,
)
from incrparse.combinator import repeat, repeat_till, seq
from incrparse.constants import USIZE_MAX
from incrparse.control import Backtrack, Incomplete, Needed, Success
from incrparse.parser import Parser, peek
from incrparse.stream.cursor import Partial
from incrparse.token import rest, take

# ============================================================================
# INTEGERS
# ============================================================================


class TestIntegers:
    """Test fixed-width integer parsers."""

    @pytest.mark.parametrize(
        ("parser", "data", "value"),
        [
            (be_u8, b"\x80", 0x80),
            (u8, b"\x07", 7),
            (be_u16, b"\x01\x02", 0x0102),
            (le_u16, b"\x01\x02", 0x0201),
            (be_u32, b"\x00\x00\x01\x00", 256),
            (le_u32, b"\x00\x01\x00\x00", 256),
            (be_u64, b"\xff" * 8, USIZE_MAX),
            (le_u64, b"\x01" + b"\x00" * 7, 1),
        ],
    )
    def test_decode(self, parser: Parser[int], data: bytes, value: int) -> None:
        """Integers decode with the declared width and byte order."""
        assert peek(parser, data).outcome == Success(value)

    def test_partial_missing_bytes(self) -> None:
        """Partial mode reports the missing byte count."""
        assert peek(be_u32, Partial(b"\x00")).outcome == Incomplete(Needed(3))

    def test_complete_short_backtracks(self) -> None:
        """Complete mode: short input is Backtrack."""
        assert isinstance(peek(be_u16, b"\x00").outcome, Backtrack)


# ============================================================================
# LENGTH_TAKE
# ============================================================================


class TestLengthTake:
    """Test length_take."""

    def test_frame(self) -> None:
        """Reads the prefix then exactly that many bytes."""
        result = peek(length_take(be_u16), b"\x00\x03abcde")

        assert isinstance(result.outcome, Success)
        assert bytes(result.outcome.value) == b"abc"
        assert bytes(result.remaining) == b"de"

    def test_partial_body_deficit(self) -> None:
        """Missing body bytes are reported after the prefix."""
        assert peek(length_take(be_u16), Partial(b"\x00\x05ab")).outcome == Incomplete(
            Needed(3)
        )

    def test_partial_prefix_deficit(self) -> None:
        """A truncated prefix reports the missing prefix bytes."""
        assert peek(length_take(be_u16), Partial(b"\x00")).outcome == Incomplete(Needed(1))

    def test_complete_short_body_restores(self) -> None:
        """Short body in complete mode backtracks to before the prefix."""
        result = peek(length_take(u8), b"\x05ab")

        assert isinstance(result.outcome, Backtrack)
        assert bytes(result.remaining) == b"\x05ab"

    def test_zero_length(self) -> None:
        """A zero prefix yields an empty frame."""
        outcome = peek(length_take(u8), b"\x00rest").outcome

        assert isinstance(outcome, Success)
        assert bytes(outcome.value) == b""

    def test_max_claim_saturates(self) -> None:
        """A prefix of 2**64 - 1 with nothing after it needs USIZE_MAX."""
        outcome = peek(length_take(be_u64), Partial(b"\xff" * 8)).outcome

        assert outcome == Incomplete(Needed(USIZE_MAX))

    def test_max_claim_with_bytes_available(self) -> None:
        """Available body bytes are subtracted from the claim."""
        outcome = peek(length_take(be_u64), Partial(b"\xff" * 8 + b"ab")).outcome

        assert outcome == Incomplete(Needed(USIZE_MAX - 2))


# ============================================================================
# OVERFLOW IN REPETITION
# ============================================================================


ELEMENT = length_take(be_u64)
FIRST_ELEMENT = b"\x00" * 7 + b"\x01" + b"\xaa"


class TestRepetitionOverflow:
    """Adversarial length prefixes inside repetition."""

    def test_zero_or_more_max_claim(self) -> None:
        """Second element claims 2**64 - 1 bytes: deficit saturates."""
        data = Partial(FIRST_ELEMENT + b"\xff" * 8)

        assert peek(repeat((0, None), ELEMENT), data).outcome == Incomplete(Needed(USIZE_MAX))

    @pytest.mark.parametrize(
        "parser",
        [
            repeat((0, None), ELEMENT),
            repeat((1, None), ELEMENT),
            repeat((2, 4), ELEMENT),
            repeat(2, ELEMENT),
            repeat_till((0, None), ELEMENT, "abc"),
        ],
        ids=["zero_or_more", "one_or_more", "bounded", "exact", "repeat_till"],
    )
    def test_large_claim_reported_exactly(self, parser: Parser[object]) -> None:
        """Second element claims 0xFFFFFFFFFFFFFFEF bytes with none available."""
        data = Partial(FIRST_ELEMENT + b"\xff" * 7 + b"\xef")

        assert peek(parser, data).outcome == Incomplete(Needed(0xFFFFFFFFFFFFFFEF))

    def test_length_repeat_large_claim(self) -> None:
        """Count 4, second element claims 0xFFFFFFFFFFFFFFEE bytes."""
        data = Partial(b"\x04" + FIRST_ELEMENT + b"\xff" * 7 + b"\xee")

        outcome = peek(length_repeat(be_u8, ELEMENT), data).outcome

        assert outcome == Incomplete(Needed(0xFFFFFFFFFFFFFFEE))

    def test_seq_after_consumed_prefix(self) -> None:
        """take(USIZE_MAX) after a consumed unit still reports USIZE_MAX."""
        outcome = peek(seq(take(1), take(USIZE_MAX)), Partial(b"3")).outcome

        assert outcome == Incomplete(Needed(USIZE_MAX))


# ============================================================================
# LENGTH_REPEAT / LENGTH_AND_THEN
# ============================================================================


class TestLengthRepeat:
    """Test length_repeat."""

    def test_count(self) -> None:
        """Applies the item parser exactly count times."""
        result = peek(length_repeat(u8, be_u16), b"\x02\x00\x01\x00\x02\xff")

        assert result.outcome == Success([1, 2])
        assert bytes(result.remaining) == b"\xff"

    def test_zero_count(self) -> None:
        """A zero count yields no items."""
        assert peek(length_repeat(u8, be_u16), b"\x00").outcome == Success([])

    def test_too_few_items_restores(self) -> None:
        """Fewer items than the count backtracks to before the prefix."""
        result = peek(length_repeat(u8, be_u16), b"\x03\x00\x01")

        assert isinstance(result.outcome, Backtrack)
        assert bytes(result.remaining) == b"\x03\x00\x01"

    def test_partial_items(self) -> None:
        """Partial mode waits for the remaining items."""
        assert peek(length_repeat(u8, be_u16), Partial(b"\x02\x00\x01\x00")).outcome == (
            Incomplete(Needed(1))
        )


class TestLengthAndThen:
    """Test length_and_then."""

    def test_inner_sees_only_frame(self) -> None:
        """The inner parser runs over exactly the framed bytes."""
        result = peek(length_and_then(u8, rest().map(bytes)), b"\x02abc")

        assert result.outcome == Success(b"ab")
        assert bytes(result.remaining) == b"c"

    def test_inner_must_consume_frame(self) -> None:
        """Unconsumed frame bytes are a Backtrack at the outer start."""
        result = peek(length_and_then(u8, take(1)), b"\x02abc")

        assert isinstance(result.outcome, Backtrack)
        assert bytes(result.remaining) == b"\x02abc"

    def test_inner_runs_in_complete_mode(self) -> None:
        """A whole frame is complete even if the stream is partial."""
        parser = length_and_then(u8, repeat((0, None), be_u16))

        assert peek(parser, Partial(b"\x04\x00\x01\x00\x02")).outcome == Success([1, 2])

    def test_partial_frame(self) -> None:
        """A truncated frame is Incomplete."""
        parser = length_and_then(u8, rest())

        assert peek(parser, Partial(b"\x04ab")).outcome == Incomplete(Needed(2))


@pytest.mark.fuzz
class TestLengthPrefixFuzz:
    """Arbitrary bytes as 64-bit length-prefixed elements."""

    @given(st.binary(max_size=64))
    @settings(max_examples=2000)
    def test_deficit_stays_in_word_range(self, data: bytes) -> None:
        """Whatever the prefixes claim, the deficit fits in USIZE_MAX."""
        outcome = peek(repeat((0, None), ELEMENT), Partial(data)).outcome

        assert isinstance(outcome, Incomplete)
        event(f"saturated={outcome.needed.size == USIZE_MAX}")
        assert 0 < outcome.needed.size <= USIZE_MAX
