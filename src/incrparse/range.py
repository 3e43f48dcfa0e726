"""Occurrence-count ranges for bounded consumers and repetition.

A Range is an inclusive {start..=end} pair with an optional upper bound,
shared by take_while, take_till, take_until, repeat, repeat_till and
separated.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from incrparse.diagnostics import ErrorTemplate, GrammarError

__all__ = ["Range", "RangeSpec"]

type RangeSpec = Range | int | range | tuple[int, int | None]


@dataclass(frozen=True, slots=True)
class Range:
    """Inclusive occurrence bounds; end=None means unbounded.

    Accepted specifications (see Range.of):
        - int n: exactly n
        - (min, max): inclusive, max may be None for unbounded
        - range(a, b): half-open like Python, i.e. a..=b-1

    Example:
        >>> Range.of(3)
        Range(start=3, end=3)
        >>> Range.of((1, None))
        Range(start=1, end=None)
        >>> Range.of(range(2, 5))
        Range(start=2, end=4)
        >>> Range.of((0, None)).contains(10**30)
        True
    """

    start: int = 0
    end: int | None = None

    def __post_init__(self) -> None:
        """Validate bounds.

        Raises:
            GrammarError: If a bound is negative or start exceeds end
        """
        if self.start < 0:
            raise GrammarError(ErrorTemplate.range_negative(self.start))
        if self.end is not None:
            if self.end < 0:
                raise GrammarError(ErrorTemplate.range_negative(self.end))
            if self.start > self.end:
                raise GrammarError(ErrorTemplate.range_inverted(self.start, self.end))

    @classmethod
    def of(cls, spec: RangeSpec) -> Range:
        """Normalize a range specification.

        Raises:
            GrammarError: If spec is not a supported specification
        """
        match spec:
            case Range():
                return spec
            case bool():
                raise GrammarError(ErrorTemplate.range_invalid_spec(spec))
            case int():
                return cls(spec, spec)
            case range(step=1):
                if spec.stop <= spec.start:
                    raise GrammarError(ErrorTemplate.range_inverted(spec.start, spec.stop - 1))
                return cls(spec.start, spec.stop - 1)
            case range():
                raise GrammarError(ErrorTemplate.range_invalid_spec(spec))
            case (int() as start, int() | None as end):
                return cls(start, end)
            case _:
                raise GrammarError(ErrorTemplate.range_invalid_spec(spec))

    @classmethod
    def exactly(cls, n: int) -> Range:
        """n occurrences."""
        return cls(n, n)

    @classmethod
    def at_least(cls, n: int) -> Range:
        """n or more occurrences."""
        return cls(n, None)

    @classmethod
    def at_most(cls, n: int) -> Range:
        """Zero to n occurrences."""
        return cls(0, n)

    @property
    def is_bounded(self) -> bool:
        """True if there is an upper bound."""
        return self.end is not None

    def contains(self, count: int) -> bool:
        """True if count lies within the bounds."""
        return count >= self.start and (self.end is None or count <= self.end)

    def __str__(self) -> str:
        """Render like a Rust range pattern: ``1..``, ``2..=4``."""
        if self.end is None:
            return f"{self.start}.."
        return f"{self.start}..={self.end}"
