"""
Exception types raised by genoidx.

Every error derives from GenoidxError and from the builtin exception
it most closely resembles, so callers may catch either.
"""

from typing import List, Optional


class GenoidxError(Exception):
    """Base class for all genoidx errors."""


class IndexFormatError(GenoidxError, ValueError):
    """
    A persisted index file is malformed.

    Attributes:
        path: Index file that failed to parse
        line_number: 1-based line number of the offending line
        line: The offending line, without its terminator
    """

    def __init__(self, message: str, path: Optional[str] = None,
                 line_number: Optional[int] = None, line: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.line_number = line_number
        self.line = line


class SequenceIOError(GenoidxError, OSError):
    """A sequence or index file could not be opened, read or written."""


class InvalidRangeError(GenoidxError, ValueError):
    """A requested sub-sequence range is invalid for its record."""


class SequenceNotFoundError(GenoidxError, KeyError):
    """No record with the requested name exists in the index."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"sequence {self.name!r} not found in index"


class AmbiguousNameError(GenoidxError, LookupError):
    """A name prefix matches the leading token of more than one record."""

    def __init__(self, prefix: str, matches: List[str]):
        super().__init__(f"{prefix!r} is not unique in fasta index ({len(matches)} matches)")
        self.prefix = prefix
        self.matches = matches
