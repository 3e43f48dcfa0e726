"""Input model.

Exports:
    Cursor: Mutable position over a byte or text buffer
    Checkpoint: Restorable cursor snapshot
    Partial: Marks input as streaming

The incremental feeding driver lives in incrparse.stream.incremental; it
depends on the parser contract, which itself depends on this package.

Python 3.13+. Zero external dependencies.
"""

from .cursor import Checkpoint, Cursor, InputData, Partial, Slice, Unit

__all__ = [
    "Checkpoint",
    "Cursor",
    "InputData",
    "Partial",
    "Slice",
    "Unit",
]
