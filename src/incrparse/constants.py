"""Shared constants for incrparse.

This module provides centralized configuration constants used across
the stream, control and combinator packages. Placing constants here avoids
circular imports and provides a single source of truth.

Constants are grouped by domain:
- Arithmetic limits: Saturation bound for streaming deficits
- Depth limits: Recursion protection for lazily-built recursive grammars
- Buffer limits: DoS prevention for the incremental driver
- Diagnostics: Size of input fragments attached to parse errors

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Arithmetic limits
    "USIZE_MAX",
    # Depth limits
    "MAX_DEPTH",
    # Buffer limits
    "DEFAULT_MAX_BUFFER_SIZE",
    # Diagnostics
    "ERROR_FRAGMENT_LEN",
]

# ============================================================================
# ARITHMETIC LIMITS
# ============================================================================
#
# Python integers never overflow, but the "amount needed" reported to callers
# of a streaming parse is a contract with code that sizes buffers and reads
# sockets. Length prefixes are attacker-controlled (a 64-bit big-endian field
# can claim 2**64 - 1 bytes), so every Needed value is clamped to the width of
# a native unsigned machine word. Sums of deficits saturate at this bound
# instead of growing past it.
#
# ============================================================================

# Largest representable unit count (unsigned 64-bit word).
USIZE_MAX: int = 2**64 - 1

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Maximum nesting of lazy() parsers on one call stack.
# Recursive grammars (nested brackets, nested lists) re-enter lazy() once per
# nesting level; 100 levels of nesting is almost certainly adversarial input.
# The guard clamps this against sys.getrecursionlimit() at construction.
MAX_DEPTH: int = 100

# ============================================================================
# BUFFER LIMITS
# ============================================================================

# Default maximum buffered bytes held by IncrementalParser (16 MB).
# Prevents unbounded memory growth when a peer keeps sending data that never
# completes a frame.
DEFAULT_MAX_BUFFER_SIZE: int = 16 * 1024 * 1024

# ============================================================================
# DIAGNOSTICS
# ============================================================================

# Number of units shown from the failure position in ParseError.__str__.
ERROR_FRAGMENT_LEN: int = 16
