"""
genoidx: Indexed random access to FASTA/FASTQ files

This package provides tools for:
- Building and persisting byte-offset (.fai) indexes in one pass
- Loading persisted indexes
- Retrieving whole records or sub-ranges by logical coordinate
- Resolving records by the leading token of their header

Retrieval seeks directly to the bytes it needs, so files never
have to fit in memory.
"""

import logging

__version__ = "0.1.0"
__author__ = "genoidx Contributors"

from genoidx.errors import (
    GenoidxError,
    IndexFormatError,
    SequenceIOError,
    InvalidRangeError,
    SequenceNotFoundError,
    AmbiguousNameError,
)

from genoidx.index import (
    IndexEntry,
    FastaIndex,
    INDEX_EXTENSION,
    index_path_for,
)

from genoidx.io import (
    FastaReference,
    FastaRecord,
    write_fasta,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Errors
    "GenoidxError",
    "IndexFormatError",
    "SequenceIOError",
    "InvalidRangeError",
    "SequenceNotFoundError",
    "AmbiguousNameError",
    # Index
    "IndexEntry",
    "FastaIndex",
    "INDEX_EXTENSION",
    "index_path_for",
    # Access
    "FastaReference",
    "FastaRecord",
    "write_fasta",
]
