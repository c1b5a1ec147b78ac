"""
Translation between logical sequence coordinates and file bytes.

A record wrapped at ``line_blen`` bases per line stores base ``i`` at
byte ``offset + i + i // line_blen``. These helpers compute the byte
span that covers a run of bases without scanning the file.
"""

import numpy as np
from typing import Tuple

from genoidx.index.entry import IndexEntry

TERMINATOR_BYTE = ord("\n")


def embedded_terminators(start: int, length: int, line_blen: int) -> Tuple[int, int]:
    """
    Count line terminators before and inside a run of bases.

    Args:
        start: 0-based logical start of the run
        length: Number of bases in the run
        line_blen: Bases per full line

    Returns:
        Tuple of (terminators before the read position,
        terminators inside the bytes to read)

    Example:
        >>> embedded_terminators(10, 6, 10)
        (0, 1)
    """
    before = (start - 1) // line_blen if start > 0 else 0
    through_end = (start + length - 1) // line_blen
    return before, through_end - before


def byte_span(entry: IndexEntry, start: int, length: int) -> Tuple[int, int]:
    """
    Byte range holding ``length`` bases of a record from ``start``.

    The range may begin on the terminator preceding the first base;
    callers strip terminators from whatever they read.

    Args:
        entry: Layout of the record
        start: 0-based logical start
        length: Number of bases (at least 1)

    Returns:
        Tuple of (absolute byte offset, number of bytes to read)
    """
    before, inside = embedded_terminators(start, length, entry.line_blen)
    return entry.offset + start + before, length + inside


def strip_terminators(buffer: bytes) -> bytes:
    """Remove every line terminator byte from a raw buffer."""
    data = np.frombuffer(buffer, dtype=np.uint8)
    return data[data != TERMINATOR_BYTE].tobytes()
