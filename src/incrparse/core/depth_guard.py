"""Nesting limits for recursive grammars.

A grammar refers to itself through lazy(). Every activation of a lazy
parser nests the inner parser one level deeper on the Python call stack,
so deeply nested input (for example ten thousand opening brackets) would
otherwise end in RecursionError halfway through a parse. Each Lazy carries
a DepthGuard that counts its own activations and turns excessive nesting
into DepthLimitExceededError while the stack is still healthy.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field

from incrparse.constants import MAX_DEPTH
from incrparse.diagnostics import DepthLimitExceededError
from incrparse.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "depth_clamp"]

logger = logging.getLogger(__name__)

# Lazy.parse_next -> combinator -> combinator -> Lazy.parse_next is the
# shortest cycle a useful recursive grammar produces.
_FRAMES_PER_LEVEL: int = 4


@dataclass(slots=True)
class DepthGuard:
    """Activation counter for one lazy() parser.

    lazy() wraps each call of its inner parser in ``with guard:``. Entering
    refuses once max_depth activations are already on the stack; leaving
    always pops one level, also when the inner parser raised.

    Attributes:
        max_depth: Activations allowed at once, clamped by depth_clamp()
        current_depth: Activations currently on the stack
        peak_depth: Deepest nesting reached since creation or reset()
    """

    max_depth: int = MAX_DEPTH
    current_depth: int = field(default=0, init=False)
    peak_depth: int = field(default=0, init=False)

    def __post_init__(self) -> None:
        self.max_depth = depth_clamp(self.max_depth)

    def __enter__(self) -> DepthGuard:
        # Refuse before counting: __exit__ does not run for a failed __enter__
        self.check()
        self.current_depth += 1
        self.peak_depth = max(self.peak_depth, self.current_depth)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.current_depth -= 1

    @property
    def remaining(self) -> int:
        """Activations still allowed on top of the current ones."""
        return self.max_depth - self.current_depth

    def check(self) -> None:
        """Raise if one more activation would exceed max_depth.

        Raises:
            DepthLimitExceededError: If max_depth activations are active
        """
        if self.current_depth >= self.max_depth:
            logger.debug("Grammar nesting refused at depth %d", self.current_depth)
            raise DepthLimitExceededError(ErrorTemplate.depth_exceeded(self.max_depth))

    def reset(self) -> None:
        """Forget all activations, e.g. after a parse aborted by KeyboardInterrupt."""
        self.current_depth = 0
        self.peak_depth = 0


def depth_clamp(requested_depth: int, reserve_frames: int = 50) -> int:
    """Largest nesting depth the interpreter stack can serve, up to requested_depth.

    The stack budget is sys.getrecursionlimit() minus reserve_frames for
    the caller and the top-level parse() machinery, divided by the frames
    one nesting level of a lazy() grammar costs.

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(1000)
        >>> depth_clamp(100)
        100
        >>> depth_clamp(10_000)
        237
    """
    budget = (sys.getrecursionlimit() - reserve_frames) // _FRAMES_PER_LEVEL
    if requested_depth <= budget:
        return requested_depth
    logger.warning(
        "lazy() depth %d needs more stack than the recursion limit %d allows; "
        "clamped to %d. Raise sys.setrecursionlimit() for deeper grammars.",
        requested_depth,
        sys.getrecursionlimit(),
        budget,
    )
    return budget
