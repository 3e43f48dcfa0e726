"""Combinators built on the parser contract.

Modules:
    repeat: Ranged repetition, repetition with terminator, separated lists
    branch: Alternation
    sequence: Sequencing and the tuple-projection helpers
    core: Optional, lookahead, commitment and recursive grammars

Python 3.13+. Zero external dependencies.
"""

from .branch import alt
from .core import cut_err, empty, eof, fail, lazy, not_, opt, peek_
from .repeat import fold_repeat, repeat, repeat_till, separated
from .sequence import delimited, preceded, separated_pair, seq, terminated

__all__ = [
    "alt",
    "cut_err",
    "delimited",
    "empty",
    "eof",
    "fail",
    "fold_repeat",
    "lazy",
    "not_",
    "opt",
    "peek_",
    "preceded",
    "repeat",
    "repeat_till",
    "separated",
    "separated_pair",
    "seq",
    "terminated",
]
