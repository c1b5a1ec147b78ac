"""
Coordinate utilities for wrapped sequence files.

This module converts logical (base) coordinates into byte ranges:
- Terminator counting for a run of bases
- Byte span computation for an index entry
- Terminator stripping of raw reads
"""

from genoidx.utils.coordinates import (
    embedded_terminators,
    byte_span,
    strip_terminators,
)

__all__ = [
    "embedded_terminators",
    "byte_span",
    "strip_terminators",
]
