"""Tests for core/depth_guard.py.

Tests DepthGuard context manager, explicit check(), and depth_clamp()
with Hypothesis for property-based testing.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from incrparse.constants import MAX_DEPTH
from incrparse.core.depth_guard import DepthGuard, depth_clamp
from incrparse.diagnostics import DepthLimitExceededError, DiagnosticCode

# ============================================================================
# Construction
# ============================================================================


class TestDepthGuardConstruction:
    """Test DepthGuard construction and defaults."""

    def test_default_construction(self) -> None:
        """DepthGuard uses MAX_DEPTH by default."""
        guard = DepthGuard()

        assert guard.max_depth == MAX_DEPTH
        assert guard.current_depth == 0

    def test_custom_max_depth(self) -> None:
        """DepthGuard accepts custom max_depth."""
        guard = DepthGuard(max_depth=50)

        assert guard.max_depth == 50

    def test_post_init_clamps_max_depth(self) -> None:
        """__post_init__ clamps max_depth against recursion limit."""
        limit = sys.getrecursionlimit()
        guard = DepthGuard(max_depth=limit + 1000)

        assert guard.max_depth == (limit - 50) // 4


# ============================================================================
# Context Manager
# ============================================================================


class TestDepthGuardContextManager:
    """Test DepthGuard as context manager."""

    def test_context_manager_nested(self) -> None:
        """Nested context managers increment depth correctly."""
        guard = DepthGuard(max_depth=10)

        with guard:
            assert guard.current_depth == 1
            with guard:
                assert guard.current_depth == 2

        assert guard.current_depth == 0

    def test_context_manager_raises_on_exceeded(self) -> None:
        """Entering beyond max_depth raises DepthLimitExceededError."""
        guard = DepthGuard(max_depth=3)

        with guard, guard, guard:  # noqa: SIM117
            with pytest.raises(DepthLimitExceededError) as exc_info:
                with guard:
                    pass

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.MAX_DEPTH_EXCEEDED
        assert "3" in str(exc_info.value)

    def test_failed_enter_does_not_leak_depth(self) -> None:
        """A refused __enter__ leaves current_depth unchanged."""
        guard = DepthGuard(max_depth=1)

        with guard:
            with pytest.raises(DepthLimitExceededError):
                guard.__enter__()
            assert guard.current_depth == 1

        assert guard.current_depth == 0

    def test_depth_restored_on_error(self) -> None:
        """Depth is restored when the guarded block raises."""
        guard = DepthGuard(max_depth=10)
        message = "boom"

        with pytest.raises(ValueError, match=message), guard:
            raise ValueError(message)

        assert guard.current_depth == 0


# ============================================================================
# Explicit checks
# ============================================================================


class TestDepthGuardCheck:
    """Test check(), remaining, peak_depth and reset()."""

    def test_remaining(self) -> None:
        """remaining counts activations still allowed."""
        guard = DepthGuard(max_depth=2)

        assert guard.remaining == 2
        with guard:
            assert guard.remaining == 1
            with guard:
                assert guard.remaining == 0

    def test_peak_depth(self) -> None:
        """peak_depth records the deepest nesting reached."""
        guard = DepthGuard(max_depth=5)

        with guard, guard, guard:
            pass
        with guard:
            pass

        assert guard.peak_depth == 3
        assert guard.current_depth == 0

    def test_check_raises_at_limit(self) -> None:
        """check() raises once max_depth is reached."""
        guard = DepthGuard(max_depth=1)

        guard.check()
        with guard, pytest.raises(DepthLimitExceededError):
            guard.check()

    def test_reset(self) -> None:
        """reset() forgets current and peak depth."""
        guard = DepthGuard(max_depth=5)
        guard.__enter__()
        guard.__enter__()

        guard.reset()

        assert guard.current_depth == 0
        assert guard.peak_depth == 0


# ============================================================================
# depth_clamp
# ============================================================================


class TestDepthClamp:
    """Test depth_clamp()."""

    def test_small_depth_unchanged(self) -> None:
        """Depths well within the recursion budget pass through."""
        assert depth_clamp(10) == 10

    def test_large_depth_clamped_with_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """Depths beyond the budget are clamped and logged."""
        limit = sys.getrecursionlimit()

        with caplog.at_level(logging.WARNING, logger="incrparse.core.depth_guard"):
            result = depth_clamp(limit * 10)

        assert result == (limit - 50) // 4
        assert "clamped to" in caplog.text

    @given(st.integers(min_value=0, max_value=100_000))
    def test_clamp_never_exceeds_budget(self, requested: int) -> None:
        """Property: the clamped depth never exceeds the frame budget."""
        budget = (sys.getrecursionlimit() - 50) // 4
        result = depth_clamp(requested)
        event(f"outcome={'clamped' if result < requested else 'unchanged'}")

        assert result == min(requested, budget)
