"""
Sequence index (.fai) support.

- IndexEntry: byte layout of one record
- FastaIndex: name-keyed table of entries, built by scanning a
  FASTA/FASTQ file or parsed from a persisted .fai file
"""

from genoidx.index.entry import IndexEntry, EntryBuilder

from genoidx.index.fai import (
    FastaIndex,
    INDEX_EXTENSION,
    index_path_for,
)

__all__ = [
    "IndexEntry",
    "EntryBuilder",
    "FastaIndex",
    "INDEX_EXTENSION",
    "index_path_for",
]
